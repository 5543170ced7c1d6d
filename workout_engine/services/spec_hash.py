import hashlib
import json
from typing import Any, Dict

from workout_engine.schemas.workout_generation import GenerateWorkoutRequest

"""
Spec Hash
---------
Canonical form of a generation request and its content hash.
Two requests that differ only in list ordering hash identically; absent optionals
are omitted, so "not given" and "given but empty" stay distinct.
"""

# Fields that define the generated workout. Caching hints, focus areas and
# limitations never influence the cache key.
_LIST_FIELDS = (
    ("availableEquipment", "available_equipment"),
    ("targetMuscleGroups", "target_muscle_groups"),
    ("excludeExercises", "exclude_exercises"),
    ("includeExercises", "include_exercises"),
)
_SCALAR_FIELDS = (
    ("fitnessLevel", "fitness_level"),
    ("workoutType", "workout_type"),
    ("targetDuration", "target_duration"),
    ("intensity", "intensity"),
)


def normalize_request(request: GenerateWorkoutRequest) -> Dict[str, Any]:
    """Return the NormalizedSpec: sorted list fields, absent optionals dropped."""
    normalized: Dict[str, Any] = {}

    for key, attr in _SCALAR_FIELDS:
        value = getattr(request, attr)
        if value is not None:
            normalized[key] = value

    for key, attr in _LIST_FIELDS:
        values = getattr(request, attr)
        if values is not None:
            # Plain code-point ordering, independent of locale
            normalized[key] = sorted(str(v) for v in values)

    return normalized


def canonical_serialization(normalized: Dict[str, Any]) -> bytes:
    return json.dumps(normalized, sort_keys=True, separators=(",", ":"), ensure_ascii=True).encode("utf-8")


def compute_spec_hash(normalized: Dict[str, Any]) -> str:
    """SHA-256 hex digest (64 chars) of the canonical serialization."""
    return hashlib.sha256(canonical_serialization(normalized)).hexdigest()


def spec_hash_for(request: GenerateWorkoutRequest) -> str:
    return compute_spec_hash(normalize_request(request))
