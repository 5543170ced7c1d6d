from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional, Literal
from datetime import datetime

# Wire format is camelCase (fitnessLevel, availableEquipment, ...); Python side stays snake_case.

Equipment = Literal[
    "bodyweight",
    "dumbbells",
    "barbell",
    "resistance_bands",
    "kettlebells",
    "cable_machine",
    "pull_up_bar",
    "bench",
    "squat_rack",
    "cardio_machine",
]

FitnessLevel = Literal["beginner", "intermediate", "advanced"]

WorkoutType = Literal["strength", "cardio", "hiit", "flexibility", "mixed"]

MuscleGroup = Literal[
    "chest",
    "back",
    "shoulders",
    "arms",
    "legs",
    "glutes",
    "core",
    "full_body",
]

Intensity = Literal["low", "moderate", "high"]

GenerationStatus = Literal["pending", "processing", "completed", "failed"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerateWorkoutRequest(CamelModel):
    # User preferences
    fitness_level: FitnessLevel
    available_equipment: List[Equipment] = Field(..., min_length=1, description="At least one equipment type required")
    target_muscle_groups: Optional[List[MuscleGroup]] = None
    workout_type: WorkoutType

    # Time and intensity constraints
    target_duration: int = Field(..., ge=10, le=180, description="Minutes, 10 to 180")
    intensity: Optional[Intensity] = None

    # Specific requirements
    exclude_exercises: Optional[List[str]] = None
    include_exercises: Optional[List[str]] = None

    # Not part of the spec hash
    focus_areas: Optional[List[str]] = None
    limitations: Optional[List[str]] = None

    # Caching hints
    allow_cached_results: bool = True
    regenerate: bool = False


class GeneratedExercise(CamelModel):
    id: str
    name: str
    muscle_group: str
    equipment: str
    sets: int = Field(..., ge=1)
    min_reps: Optional[int] = Field(None, ge=1)
    max_reps: Optional[int] = Field(None, ge=1)
    target_weight: Optional[float] = None
    rest_time: int = Field(..., ge=0, description="Seconds")
    notes: Optional[str] = None
    order_index: int = Field(..., ge=0)
    duration: Optional[int] = None  # time-based exercises
    distance: Optional[float] = None  # cardio exercises


class GeneratedWorkout(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    estimated_duration: int
    exercises: List[GeneratedExercise]
    total_volume: Optional[float] = None
    difficulty: FitnessLevel
    tags: List[str] = []
    created_at: str
    spec_hash: str
    from_cache: bool = False


class WorkoutFeedback(CamelModel):
    workout_id: str
    rating: int = Field(..., ge=1, le=5)
    feedback: Literal["too_easy", "too_hard", "just_right", "too_long", "too_short"]
    comments: Optional[str] = None
    completed_exercises: Optional[List[str]] = None
    skipped_exercises: Optional[List[str]] = None


class WorkoutBlueprintResponse(CamelModel):
    id: str
    spec_hash: str
    routine_data: dict
    created_at: datetime
    last_used_at: datetime
    usage_count: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Pagination(CamelModel):
    limit: int
    offset: int
    total: int
    has_more: bool


class BlueprintListResponse(CamelModel):
    blueprints: List[WorkoutBlueprintResponse]
    pagination: Pagination


class GenerationRequestResponse(CamelModel):
    id: str
    user_id: str
    spec_hash: str
    blueprint_id: Optional[str] = None
    request_data: dict
    idempotency_key: Optional[str] = None
    status: GenerationStatus
    error: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
