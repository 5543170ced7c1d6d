import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from workout_engine.exceptions import NoSuitableExercisesError
from workout_engine.schemas.workout_generation import GenerateWorkoutRequest, GeneratedExercise

logger = logging.getLogger(__name__)

"""
Exercise Selection
------------------
Rule-based pipeline that turns a request and the exercise catalog into an
ordered, parameterized exercise list.
1. Time budget -> target exercise count.
2. Catalog filter (visibility, equipment, muscle groups, exclusions).
3. Balanced selection (includes first, then least-used muscle group).
4. Per-exercise parameters by fitness level.
5. Estimated duration.
"""

BODYWEIGHT = "bodyweight"
UNKNOWN_MUSCLE_GROUP = "unknown"

WORK_SECONDS_PER_SET = 45
WARMUP_COOLDOWN_MINUTES = 10

# level -> (sets, (min reps, max reps), rest seconds)
LEVEL_PARAMETERS = {
    "beginner": (2, (8, 12), 90),
    "intermediate": (3, (10, 15), 60),
    "advanced": (4, (12, 20), 45),
}
DEFAULT_LEVEL = "intermediate"

WORKOUT_TYPE_NAMES = {
    "strength": "Strength Training",
    "cardio": "Cardio Blast",
    "hiit": "HIIT Circuit",
    "flexibility": "Flexibility Flow",
    "mixed": "Full Body Workout",
}


@dataclass(frozen=True)
class TimeBudget:
    warmup: float
    main_work: float
    cooldown: float
    exercise_count: int


@dataclass(frozen=True)
class ExerciseParameters:
    sets: int
    min_reps: int
    max_reps: int
    rest_time: int


# --- Time budget ---

def plan_time_budget(workout_type: str, target_duration: int) -> TimeBudget:
    """Split the session into warm-up / main / cool-down and estimate how many exercises fit."""
    total = target_duration

    if workout_type == "cardio":
        warmup, main_work, cooldown = max(3, total * 0.05), total * 0.9, max(2, total * 0.05)
        minutes_per_exercise = 12
    elif workout_type == "strength":
        warmup, main_work, cooldown = max(5, total * 0.1), total * 0.8, max(5, total * 0.1)
        minutes_per_exercise = 8
    elif workout_type == "hiit":
        warmup, main_work, cooldown = max(5, total * 0.1), total * 0.8, max(5, total * 0.1)
        minutes_per_exercise = 6
    else:
        warmup, main_work, cooldown = max(5, total * 0.1), total * 0.8, max(5, total * 0.1)
        minutes_per_exercise = 10

    # May be 0 for very short sessions; selection also clamps to the filtered catalog
    exercise_count = total // minutes_per_exercise
    return TimeBudget(warmup=warmup, main_work=main_work, cooldown=cooldown, exercise_count=exercise_count)


# --- Catalog filter ---

def _matches_any_target(muscle_group: Optional[str], targets: Sequence[str]) -> bool:
    if not muscle_group:
        return False
    group = muscle_group.lower()
    return any(t.lower() in group for t in targets)


def filter_catalog(request: GenerateWorkoutRequest, catalog: Sequence[Any]) -> List[Any]:
    """Narrow the catalog to exercises the request can use. Raises NoSuitableExercisesError when nothing is left."""
    equipment = set(request.available_equipment)
    excluded = {name.lower() for name in (request.exclude_exercises or [])}
    targets = request.target_muscle_groups or []

    filtered = []
    for exercise in catalog:
        if not exercise.is_public:
            continue
        # No equipment tag means bodyweight
        if exercise.equipment and exercise.equipment != BODYWEIGHT and exercise.equipment not in equipment:
            continue
        if targets and not _matches_any_target(exercise.muscle_group, targets):
            continue
        if exercise.name.lower() in excluded:
            continue
        filtered.append(exercise)

    if not filtered:
        raise NoSuitableExercisesError()
    return filtered


# --- Balanced selection ---

def _muscle_group_key(exercise: Any) -> str:
    return exercise.muscle_group or UNKNOWN_MUSCLE_GROUP


def select_exercises(
    catalog: Sequence[Any],
    target_count: int,
    include_exercises: Optional[Sequence[str]] = None,
    target_muscle_groups: Optional[Sequence[str]] = None,
) -> List[Any]:
    """
    Pick up to ``target_count`` exercises from the filtered catalog.

    Included exercises come first, in include-list order. Remaining slots go to
    the exercise whose muscle group has been picked the fewest times so far,
    ties broken by catalog position. With target muscle groups, exercises
    matching a target are preferred over the rest of the pool.
    """
    count = min(target_count, len(catalog))
    selected: List[Any] = []
    used_ids = set()

    for included in include_exercises or []:
        needle = included.lower()
        for exercise in catalog:
            if len(selected) >= count:
                break
            if exercise.id in used_ids:
                continue
            if needle in exercise.name.lower():
                selected.append(exercise)
                used_ids.add(exercise.id)

    # Counts track balanced picks only
    muscle_counts: Dict[str, int] = {}

    while len(selected) < count:
        remaining = [(i, e) for i, e in enumerate(catalog) if e.id not in used_ids]
        if not remaining:
            break

        pool = remaining
        if target_muscle_groups:
            targeted = [(i, e) for i, e in remaining if _matches_any_target(_muscle_group_key(e), target_muscle_groups)]
            if targeted:
                pool = targeted

        _, exercise = min(pool, key=lambda item: (muscle_counts.get(_muscle_group_key(item[1]), 0), item[0]))

        selected.append(exercise)
        used_ids.add(exercise.id)
        group = _muscle_group_key(exercise)
        muscle_counts[group] = muscle_counts.get(group, 0) + 1

    return selected


# --- Parameters ---

def parameters_for_level(fitness_level: str) -> ExerciseParameters:
    sets, (min_reps, max_reps), rest = LEVEL_PARAMETERS.get(fitness_level, LEVEL_PARAMETERS[DEFAULT_LEVEL])
    return ExerciseParameters(sets=sets, min_reps=min_reps, max_reps=max_reps, rest_time=rest)


def exercise_notes(request: GenerateWorkoutRequest) -> str:
    notes = [f"Designed for {request.fitness_level} level"]
    if request.intensity:
        notes.append(f"{request.intensity} intensity")
    if request.limitations:
        notes.append("Consider any physical limitations")
    return ". ".join(notes) + "."


def build_generated_exercise(exercise: Any, request: GenerateWorkoutRequest, order_index: int) -> GeneratedExercise:
    params = parameters_for_level(request.fitness_level)
    return GeneratedExercise(
        id=exercise.id,
        name=exercise.name,
        muscle_group=_muscle_group_key(exercise),
        equipment=exercise.equipment or BODYWEIGHT,
        sets=params.sets,
        min_reps=params.min_reps,
        max_reps=params.max_reps,
        rest_time=params.rest_time,
        order_index=order_index,
        notes=exercise_notes(request),
    )


def parameterize(selected: Sequence[Any], request: GenerateWorkoutRequest) -> List[GeneratedExercise]:
    """Attach sets/reps/rest to the selection; order indices are dense from 0."""
    return [build_generated_exercise(exercise, request, i) for i, exercise in enumerate(selected)]


# --- Duration ---

def estimate_duration(exercises: Sequence[Any]) -> int:
    """
    Minutes: per exercise ``sets * 45s`` work plus ``(sets - 1) * rest`` seconds,
    summed, plus a flat 10 minutes of warm-up/cool-down, rounded half up.
    """
    total_minutes = 0.0
    for exercise in exercises:
        work = exercise.sets * WORK_SECONDS_PER_SET
        rest = (exercise.sets - 1) * exercise.rest_time
        total_minutes += (work + rest) / 60
    total_minutes += WARMUP_COOLDOWN_MINUTES
    return int(math.floor(total_minutes + 0.5))


# --- Presentation ---

def workout_name(request: GenerateWorkoutRequest) -> str:
    base = WORKOUT_TYPE_NAMES.get(request.workout_type, "Custom Workout")
    return f"{request.fitness_level.capitalize()} {base} ({request.target_duration}min)"


def workout_description(request: GenerateWorkoutRequest) -> str:
    muscle_groups = ", ".join(request.target_muscle_groups) if request.target_muscle_groups else "full body"
    equipment = ", ".join(request.available_equipment)
    return (
        f"A {request.fitness_level} level {request.workout_type} workout targeting {muscle_groups}. "
        f"Uses {equipment} equipment and takes approximately {request.target_duration} minutes to complete."
    )


def workout_tags(request: GenerateWorkoutRequest) -> List[str]:
    tags = [request.workout_type, request.fitness_level, *request.available_equipment]
    tags.extend(request.target_muscle_groups or [])
    if request.intensity:
        tags.append(request.intensity)
    # De-duplicate, first occurrence wins
    return list(dict.fromkeys(tags))


def build_exercise_list(request: GenerateWorkoutRequest, catalog: Sequence[Any]) -> List[GeneratedExercise]:
    """Run budget -> filter -> select -> parameterize for one request."""
    budget = plan_time_budget(request.workout_type, request.target_duration)
    available = filter_catalog(request, catalog)
    selected = select_exercises(
        available,
        budget.exercise_count,
        include_exercises=request.include_exercises,
        target_muscle_groups=request.target_muscle_groups,
    )
    logger.info(
        f"Selected {len(selected)}/{budget.exercise_count} exercises from {len(available)} candidates "
        f"({request.workout_type}, {request.target_duration}min)"
    )
    return parameterize(selected, request)
