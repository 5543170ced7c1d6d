import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from workout_engine.database import Base
from workout_engine.utils.clock import utcnow
from workout_engine.models.types import JSONType

STATUS_PENDING = "pending"
STATUS_PROCESSING = "processing"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"


class GenerationRequest(Base):
    __tablename__ = "generation_requests"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    spec_hash = Column(String(64), nullable=False)
    blueprint_id = Column(
        String(36),
        ForeignKey("workout_blueprints.id", ondelete="SET NULL"),
        nullable=True
    )

    request_data = Column(JSONType, nullable=False)     # the request as received
    idempotency_key = Column(String, nullable=True, index=True)
    result = Column(JSONType, nullable=True)            # returned workout, replayed verbatim

    status = Column(String(20), nullable=False, default=STATUS_PENDING, index=True)
    error = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    completed_at = Column(DateTime, nullable=True)
