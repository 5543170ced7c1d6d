import uuid

from sqlalchemy import Column, DateTime, Integer, String
from workout_engine.database import Base
from workout_engine.utils.clock import utcnow
from workout_engine.models.types import JSONType


class WorkoutBlueprint(Base):
    __tablename__ = "workout_blueprints"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    spec_hash = Column(String(64), unique=True, index=True, nullable=False)

    # Exercise references + numeric parameters only; names are re-joined from the catalog on read
    routine_data = Column(
        JSONType,
        nullable=False,
        comment="Routine snapshot (exercise ids, order, sets, reps, rest)"
    )

    usage_count = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=utcnow)
    last_used_at = Column(DateTime, default=utcnow, index=True)
