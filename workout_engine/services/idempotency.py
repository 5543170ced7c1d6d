import logging
from typing import Optional

from workout_engine.exceptions import IdempotencyConflictError
from workout_engine.models.generation_request import STATUS_COMPLETED
from workout_engine.schemas.workout_generation import GeneratedWorkout
from workout_engine.services.stores import TrackerStore

logger = logging.getLogger(__name__)


class IdempotencyStore:
    """
    Idempotency view over the generation request records.

    A key belongs to the user of the first record that carries it. The owner
    replaying the key gets the last completed result back verbatim; anyone else
    gets IdempotencyConflictError. Check-then-write is not atomic: two
    concurrent first uses may both generate, and either result may be replayed
    afterwards.
    """

    def __init__(self, store: TrackerStore):
        self.store = store

    def lookup(self, idempotency_key: str, user_id: str) -> Optional[GeneratedWorkout]:
        records = self.store.list_by_idempotency_key(idempotency_key)
        if not records:
            return None

        if any(r.user_id != user_id for r in records):
            logger.warning(f"Idempotency key conflict for user {user_id}")
            raise IdempotencyConflictError("Idempotency key conflict")

        completed = [r for r in records if r.status == STATUS_COMPLETED and r.result]
        if not completed:
            # Failed or still processing (possibly stale): a new attempt runs under the same key
            return None

        latest = max(completed, key=lambda r: r.completed_at or r.created_at)
        logger.info(f"Replaying generation request {latest.id} for idempotency key")
        return GeneratedWorkout.model_validate(latest.result)
