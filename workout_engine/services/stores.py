"""
Store interfaces the generation engine depends on.

SQL implementations live in ``workout_engine.crud``; tests substitute in-memory fakes.
Records are returned as objects exposing the model attributes
(``Exercise``, ``WorkoutBlueprint``, ``GenerationRequest``).
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple


class CatalogReader(Protocol):
    def list_exercises(self, public_only: bool = True) -> List[Any]:
        ...

    def get_exercises_by_ids(self, exercise_ids: Sequence[str]) -> List[Any]:
        ...


class BlueprintStore(Protocol):
    def get_by_spec_hash(self, spec_hash: str) -> Optional[Any]:
        ...

    def save(self, spec_hash: str, routine_data: Dict[str, Any], now: datetime) -> str:
        """Insert a blueprint for the hash, or overwrite the existing one. Returns the blueprint id."""
        ...

    def touch_usage(self, blueprint_id: str, now: datetime) -> None:
        ...

    def list_recent(self, limit: int, offset: int, spec_hash: Optional[str] = None) -> Tuple[List[Any], int]:
        """Page of blueprints ordered by last use (newest first) plus the total match count."""
        ...


class TrackerStore(Protocol):
    def create(self, record: Dict[str, Any]) -> str:
        ...

    def update(self, request_id: str, updates: Dict[str, Any]) -> None:
        ...

    def get(self, request_id: str) -> Optional[Any]:
        ...

    def list_by_idempotency_key(self, idempotency_key: str) -> List[Any]:
        """All records carrying the key, oldest first."""
        ...
