import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union

from pydantic import ValidationError
from sqlalchemy.orm import Session

from workout_engine.crud.exercise import SqlExerciseCatalog
from workout_engine.crud.generation_request import SqlGenerationRequestStore
from workout_engine.crud.workout_blueprint import SqlBlueprintStore
from workout_engine.exceptions import (
    GenerationFailedError,
    InvalidRequestError,
    NoSuitableExercisesError,
)
from workout_engine.schemas.workout_generation import (
    BlueprintListResponse,
    GenerateWorkoutRequest,
    GeneratedWorkout,
    GenerationRequestResponse,
)
from workout_engine.services import exercise_selection
from workout_engine.services.blueprint_cache import BlueprintCache
from workout_engine.services.idempotency import IdempotencyStore
from workout_engine.services.request_tracker import GenerationRequestTracker
from workout_engine.services.spec_hash import compute_spec_hash, normalize_request
from workout_engine.services.stores import BlueprintStore, CatalogReader, TrackerStore
from workout_engine.utils.clock import utcnow
from workout_engine.utils.retry import RetryPolicy

logger = logging.getLogger(__name__)

"""
Workout Generation Service
--------------------------
Public entry point: GenerateWorkout(user_id, request, idempotency_key?).
1. Idempotent replay (or conflict) when a key is given.
2. Normalize + hash the request.
3. Blueprint cache hit -> touch usage, re-join catalog, from_cache=True.
4. Miss -> track attempt, run the selection pipeline, cache, complete.
5. Any miss-path failure -> tracker marked failed, generic error to the caller.
"""


def validate_request(request: Union[GenerateWorkoutRequest, Dict[str, Any]]) -> GenerateWorkoutRequest:
    """Coerce a raw payload, and re-check constraints on already-built requests."""
    if not isinstance(request, GenerateWorkoutRequest):
        try:
            return GenerateWorkoutRequest.model_validate(request)
        except ValidationError as e:
            raise InvalidRequestError(f"Invalid request data: {e.error_count()} validation error(s)") from e

    # model_construct() skips validation
    if not request.available_equipment:
        raise InvalidRequestError("At least one equipment type required")
    if request.target_duration is None or not 10 <= request.target_duration <= 180:
        raise InvalidRequestError("Target duration must be between 10 and 180 minutes")
    return request


class WorkoutGenerationService:

    def __init__(
        self,
        catalog: CatalogReader,
        blueprints: BlueprintStore,
        requests: TrackerStore,
        retry: Optional[RetryPolicy] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        retry = retry or RetryPolicy()
        self.catalog = catalog
        self.cache = BlueprintCache(blueprints, catalog, retry=retry, clock=clock)
        self.tracker = GenerationRequestTracker(requests, retry=retry, clock=clock)
        self.idempotency = IdempotencyStore(requests)
        self.clock = clock

    def generate_workout(
        self,
        user_id: str,
        request: Union[GenerateWorkoutRequest, Dict[str, Any]],
        idempotency_key: Optional[str] = None,
    ) -> GeneratedWorkout:
        if not user_id:
            raise InvalidRequestError("user_id is required")
        request = validate_request(request)

        # 1. Idempotent replay
        if idempotency_key:
            replay = self.idempotency.lookup(idempotency_key, user_id)
            if replay is not None:
                return replay

        # 2. Spec hash
        spec_hash = compute_spec_hash(normalize_request(request))

        # 3. Cache
        if request.allow_cached_results and not request.regenerate:
            blueprint = self.cache.get(spec_hash)
            if blueprint is not None:
                logger.info(f"Blueprint cache hit for spec {spec_hash[:12]} (user {user_id})")
                return self._serve_cached(user_id, request, spec_hash, blueprint, idempotency_key)
            logger.info(f"Blueprint cache miss for spec {spec_hash[:12]}")
        elif request.regenerate:
            logger.info(f"Regenerate requested for spec {spec_hash[:12]}, bypassing cache")

        # 4. Generate
        return self._generate_new(user_id, request, spec_hash, idempotency_key)

    def _serve_cached(self, user_id, request, spec_hash, blueprint, idempotency_key) -> GeneratedWorkout:
        try:
            self.cache.touch_usage(blueprint.id)
            workout = self.cache.to_workout(blueprint, request)
        except Exception as e:
            logger.error(f"Serving cached blueprint {blueprint.id} failed: {e}")
            raise GenerationFailedError() from e

        # Record keyed hits so a replay returns this exact payload
        if idempotency_key:
            request_id = None
            try:
                request_id = self.tracker.create(user_id, spec_hash, _request_payload(request), idempotency_key)
                self.tracker.complete(request_id, blueprint.id, workout)
            except Exception as e:
                logger.error(f"Tracking cached generation for spec {spec_hash[:12]} failed: {e}")
                if request_id:
                    self._mark_failed(request_id, f"{type(e).__name__}: {e}")
                raise GenerationFailedError() from e

        return workout

    def _generate_new(self, user_id, request, spec_hash, idempotency_key) -> GeneratedWorkout:
        try:
            request_id = self.tracker.create(user_id, spec_hash, _request_payload(request), idempotency_key)
        except Exception as e:
            logger.error(f"Could not create generation request for spec {spec_hash[:12]}: {e}")
            raise GenerationFailedError() from e

        try:
            workout = self._assemble(request, spec_hash)
            blueprint_id = self.cache.put(spec_hash, workout, user_id)
            self.tracker.complete(request_id, blueprint_id, workout)
        except NoSuitableExercisesError as e:
            logger.warning(f"Generation request {request_id}: {e}")
            self._mark_failed(request_id, str(e))
            raise
        except Exception as e:
            logger.error(f"Generation request {request_id} failed: {type(e).__name__}: {e}")
            self._mark_failed(request_id, f"{type(e).__name__}: {e}")
            raise GenerationFailedError() from e

        logger.info(f"Generated workout {workout.id} with {len(workout.exercises)} exercises (request {request_id})")
        return workout

    def _assemble(self, request: GenerateWorkoutRequest, spec_hash: str) -> GeneratedWorkout:
        catalog = self.catalog.list_exercises(public_only=True)
        exercises = exercise_selection.build_exercise_list(request, catalog)

        return GeneratedWorkout(
            id=str(uuid.uuid4()),
            name=exercise_selection.workout_name(request),
            description=exercise_selection.workout_description(request),
            estimated_duration=exercise_selection.estimate_duration(exercises),
            exercises=exercises,
            difficulty=request.fitness_level,
            tags=exercise_selection.workout_tags(request),
            created_at=self.clock().isoformat(),
            spec_hash=spec_hash,
            from_cache=False,
        )

    def _mark_failed(self, request_id: str, message: str) -> None:
        try:
            self.tracker.fail(request_id, message)
        except Exception as e:
            # The original failure is still raised; this record stays "processing" (stale)
            logger.error(f"Could not mark generation request {request_id} failed: {e}")

    def list_blueprints(self, limit: int = 20, offset: int = 0, spec_hash: Optional[str] = None) -> BlueprintListResponse:
        return self.cache.list_blueprints(limit=limit, offset=offset, spec_hash=spec_hash)

    def get_generation_request(self, request_id: str) -> Optional[GenerationRequestResponse]:
        record = self.tracker.get(request_id)
        if record is None:
            return None
        return GenerationRequestResponse.model_validate(record)


def _request_payload(request: GenerateWorkoutRequest) -> Dict[str, Any]:
    return request.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- Session-bound helpers ---

def build_service(db: Session, retry: Optional[RetryPolicy] = None) -> WorkoutGenerationService:
    return WorkoutGenerationService(
        catalog=SqlExerciseCatalog(db),
        blueprints=SqlBlueprintStore(db),
        requests=SqlGenerationRequestStore(db),
        retry=retry,
    )


def generate_workout(
    db: Session,
    user_id: str,
    request: Union[GenerateWorkoutRequest, Dict[str, Any]],
    idempotency_key: Optional[str] = None,
) -> GeneratedWorkout:
    """Main orchestrator for workout generation against the SQL stores."""
    return build_service(db).generate_workout(user_id, request, idempotency_key)


def list_blueprints(db: Session, limit: int = 20, offset: int = 0, spec_hash: Optional[str] = None) -> BlueprintListResponse:
    return build_service(db).list_blueprints(limit=limit, offset=offset, spec_hash=spec_hash)


def get_generation_request(db: Session, request_id: str) -> Optional[GenerationRequestResponse]:
    return build_service(db).get_generation_request(request_id)
