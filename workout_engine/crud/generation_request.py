from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from workout_engine.models.generation_request import GenerationRequest

"""
Generation Request CRUD
-----------------------
Lifecycle rows for generation attempts. Lookup by id and by idempotency key.
"""


class SqlGenerationRequestStore:

    def __init__(self, db: Session):
        self.db = db

    def create(self, record: Dict[str, Any]) -> str:
        db_obj = GenerationRequest(**record)
        try:
            self.db.add(db_obj)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return db_obj.id

    def update(self, request_id: str, updates: Dict[str, Any]) -> None:
        try:
            db_obj = self.db.query(GenerationRequest).filter(GenerationRequest.id == request_id).first()
            if db_obj is None:
                raise LookupError(f"Generation request {request_id} not found")
            for field, value in updates.items():
                setattr(db_obj, field, value)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def get(self, request_id: str) -> Optional[GenerationRequest]:
        return self.db.query(GenerationRequest).filter(GenerationRequest.id == request_id).first()

    def list_by_idempotency_key(self, idempotency_key: str) -> List[GenerationRequest]:
        return (
            self.db.query(GenerationRequest)
            .filter(GenerationRequest.idempotency_key == idempotency_key)
            .order_by(GenerationRequest.created_at)
            .all()
        )
