import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from workout_engine.models.generation_request import (
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_PROCESSING,
)
from workout_engine.schemas.workout_generation import GeneratedWorkout
from workout_engine.services.stores import TrackerStore
from workout_engine.utils.clock import utcnow
from workout_engine.utils.retry import RetryPolicy

logger = logging.getLogger(__name__)


class GenerationRequestTracker:
    """
    Lifecycle record for each generation attempt: processing -> completed | failed.

    Both terminal writes are retried. If they still fail the record stays in
    ``processing``; readers must treat that as stale/unknown.
    """

    def __init__(
        self,
        store: TrackerStore,
        retry: Optional[RetryPolicy] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.retry = retry or RetryPolicy()
        self.clock = clock

    def create(
        self,
        user_id: str,
        spec_hash: str,
        request_data: Dict[str, Any],
        idempotency_key: Optional[str] = None,
    ) -> str:
        request_id = str(uuid.uuid4())
        self.store.create({
            "id": request_id,
            "user_id": user_id,
            "spec_hash": spec_hash,
            "request_data": request_data,
            "idempotency_key": idempotency_key,
            "status": STATUS_PROCESSING,
            "created_at": self.clock(),
        })
        return request_id

    def complete(self, request_id: str, blueprint_id: Optional[str], result: GeneratedWorkout) -> None:
        updates = {
            "status": STATUS_COMPLETED,
            "blueprint_id": blueprint_id,
            "result": result.model_dump(mode="json", by_alias=True),
            "completed_at": self.clock(),
        }
        self.retry.run(lambda: self.store.update(request_id, updates))

    def fail(self, request_id: str, error_message: str) -> None:
        updates = {
            "status": STATUS_FAILED,
            "error": error_message,
            "completed_at": self.clock(),
        }
        self.retry.run(lambda: self.store.update(request_id, updates))
        logger.info(f"Generation request {request_id} marked failed")

    def get(self, request_id: str):
        return self.store.get(request_id)
