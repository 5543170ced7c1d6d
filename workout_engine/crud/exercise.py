from typing import List, Sequence

from sqlalchemy.orm import Session
from workout_engine.models.exercise import Exercise

"""
Exercise Catalog
----------------
Read-only access to the exercise catalog. The catalog is owned elsewhere;
this engine never writes to it.
"""


class SqlExerciseCatalog:

    def __init__(self, db: Session):
        self.db = db

    def list_exercises(self, public_only: bool = True) -> List[Exercise]:
        query = self.db.query(Exercise)
        if public_only:
            query = query.filter(Exercise.is_public == True)  # noqa: E712
        # Stable iteration order; balanced selection breaks ties on catalog position
        return query.order_by(Exercise.created_at, Exercise.id).all()

    def get_exercises_by_ids(self, exercise_ids: Sequence[str]) -> List[Exercise]:
        if not exercise_ids:
            return []
        return self.db.query(Exercise).filter(Exercise.id.in_(list(exercise_ids))).all()
