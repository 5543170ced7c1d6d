import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from workout_engine.models.workout_blueprint import WorkoutBlueprint

logger = logging.getLogger(__name__)

"""
Workout Blueprint CRUD
----------------------
Database access for cached blueprints, keyed by spec hash.
"""


class SqlBlueprintStore:

    def __init__(self, db: Session):
        self.db = db

    def get_by_spec_hash(self, spec_hash: str) -> Optional[WorkoutBlueprint]:
        return self.db.query(WorkoutBlueprint).filter(WorkoutBlueprint.spec_hash == spec_hash).first()

    def save(self, spec_hash: str, routine_data: Dict[str, Any], now: datetime) -> str:
        """Insert, or overwrite the row for this hash (regenerate, or a concurrent first writer won)."""
        try:
            existing = self.get_by_spec_hash(spec_hash)
            if existing:
                self._overwrite(existing, routine_data, now)
                self.db.commit()
                return existing.id

            blueprint = WorkoutBlueprint(
                spec_hash=spec_hash,
                routine_data=routine_data,
                usage_count=1,
                created_at=now,
                last_used_at=now,
            )
            self.db.add(blueprint)
            self.db.commit()
            self.db.refresh(blueprint)
            return blueprint.id
        except IntegrityError:
            # Lost the insert race on the unique spec_hash; coalesce onto the winner's row
            self.db.rollback()
            existing = self.get_by_spec_hash(spec_hash)
            if existing is None:
                raise
            logger.info(f"Blueprint for spec {spec_hash[:12]} inserted concurrently, overwriting")
            self._overwrite(existing, routine_data, now)
            self.db.commit()
            return existing.id
        except Exception:
            self.db.rollback()
            raise

    def _overwrite(self, blueprint: WorkoutBlueprint, routine_data: Dict[str, Any], now: datetime) -> None:
        blueprint.routine_data = routine_data
        blueprint.last_used_at = now
        blueprint.usage_count = (blueprint.usage_count or 0) + 1

    def touch_usage(self, blueprint_id: str, now: datetime) -> None:
        try:
            blueprint = self.db.query(WorkoutBlueprint).filter(WorkoutBlueprint.id == blueprint_id).first()
            if blueprint is None:
                return
            blueprint.usage_count = (blueprint.usage_count or 0) + 1
            blueprint.last_used_at = now
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def list_recent(self, limit: int, offset: int, spec_hash: Optional[str] = None) -> Tuple[List[WorkoutBlueprint], int]:
        query = self.db.query(WorkoutBlueprint)
        if spec_hash:
            query = query.filter(WorkoutBlueprint.spec_hash == spec_hash)
        total = query.count()
        page = query.order_by(WorkoutBlueprint.last_used_at.desc()).offset(offset).limit(limit).all()
        return page, total
