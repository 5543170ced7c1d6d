import uuid

from sqlalchemy import Boolean, Column, DateTime, String
from workout_engine.database import Base
from workout_engine.utils.clock import utcnow


class Exercise(Base):
    __tablename__ = "exercises"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, index=True, nullable=False)
    muscle_group = Column(String, nullable=True)   # e.g., Chest, Upper Back
    equipment = Column(String, nullable=True)      # e.g., dumbbells, bodyweight
    is_public = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=utcnow)
