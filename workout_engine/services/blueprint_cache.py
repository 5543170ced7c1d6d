import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from workout_engine.schemas.workout_generation import (
    BlueprintListResponse,
    GenerateWorkoutRequest,
    GeneratedExercise,
    GeneratedWorkout,
    Pagination,
    WorkoutBlueprintResponse,
)
from workout_engine.services.exercise_selection import BODYWEIGHT, UNKNOWN_MUSCLE_GROUP, workout_tags
from workout_engine.services.stores import BlueprintStore, CatalogReader
from workout_engine.utils.clock import utcnow
from workout_engine.utils.retry import RetryPolicy

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
DEFAULT_REST_SECONDS = 60


def routine_data_from_workout(workout: GeneratedWorkout, user_id: str) -> Dict[str, Any]:
    """
    Storage form of a workout: exercise references and numeric parameters only.
    Names, muscle groups and equipment are re-joined from the catalog on read.
    """
    return {
        "id": workout.id,
        "userId": user_id,
        "name": workout.name,
        "description": workout.description,
        "estimatedDuration": workout.estimated_duration,
        "isActive": True,
        "exercises": [
            {
                "id": str(uuid.uuid4()),
                "routineId": workout.id,
                "exerciseId": ex.id,
                "orderIndex": ex.order_index,
                "sets": ex.sets,
                "minReps": ex.min_reps,
                "maxReps": ex.max_reps,
                "targetWeight": str(ex.target_weight) if ex.target_weight is not None else None,
                "restTime": ex.rest_time,
                "notes": ex.notes,
            }
            for ex in workout.exercises
        ],
    }


class BlueprintCache:
    """
    Spec-hash keyed cache of assembled workouts.

    Writes (save, usage touch) go through the retry policy. Usage counting is
    read-then-write; concurrent touches are last-write-wins.
    """

    def __init__(
        self,
        store: BlueprintStore,
        catalog: CatalogReader,
        retry: Optional[RetryPolicy] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.catalog = catalog
        self.retry = retry or RetryPolicy()
        self.clock = clock

    def get(self, spec_hash: str):
        return self.store.get_by_spec_hash(spec_hash)

    def put(self, spec_hash: str, workout: GeneratedWorkout, user_id: str) -> str:
        routine_data = routine_data_from_workout(workout, user_id)
        blueprint_id = self.retry.run(lambda: self.store.save(spec_hash, routine_data, self.clock()))
        logger.info(f"Stored blueprint {blueprint_id} for spec {spec_hash[:12]}")
        return blueprint_id

    def touch_usage(self, blueprint_id: str) -> None:
        self.retry.run(lambda: self.store.touch_usage(blueprint_id, self.clock()))

    def to_workout(self, blueprint: Any, request: GenerateWorkoutRequest) -> GeneratedWorkout:
        """Rebuild the public workout from a blueprint, joining against the live catalog."""
        routine = blueprint.routine_data
        routine_exercises = sorted(routine.get("exercises", []), key=lambda e: e["orderIndex"])

        exercise_ids = [e["exerciseId"] for e in routine_exercises]
        catalog_map = {ex.id: ex for ex in self.catalog.get_exercises_by_ids(exercise_ids)}

        exercises = []
        for item in routine_exercises:
            detail = catalog_map.get(item["exerciseId"])
            target_weight = item.get("targetWeight")
            exercises.append(GeneratedExercise(
                id=item["exerciseId"],
                name=detail.name if detail else "Unknown Exercise",
                muscle_group=(detail.muscle_group if detail else None) or UNKNOWN_MUSCLE_GROUP,
                equipment=(detail.equipment if detail else None) or BODYWEIGHT,
                sets=item["sets"],
                min_reps=item.get("minReps"),
                max_reps=item.get("maxReps"),
                target_weight=float(target_weight) if target_weight is not None else None,
                rest_time=item.get("restTime") if item.get("restTime") is not None else DEFAULT_REST_SECONDS,
                notes=item.get("notes"),
                order_index=item["orderIndex"],
            ))

        return GeneratedWorkout(
            id=routine["id"],
            name=routine["name"],
            description=routine.get("description"),
            estimated_duration=routine.get("estimatedDuration") or 0,
            exercises=exercises,
            difficulty=request.fitness_level,
            tags=workout_tags(request),
            created_at=self.clock().isoformat(),
            spec_hash=blueprint.spec_hash,
            from_cache=True,
        )

    def list_blueprints(self, limit: int = 20, offset: int = 0, spec_hash: Optional[str] = None) -> BlueprintListResponse:
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        offset = max(0, offset)
        blueprints, total = self.store.list_recent(limit, offset, spec_hash)
        return BlueprintListResponse(
            blueprints=[WorkoutBlueprintResponse.model_validate(b) for b in blueprints],
            pagination=Pagination(
                limit=limit,
                offset=offset,
                total=total,
                has_more=len(blueprints) == limit,
            ),
        )
