"""
Error kinds surfaced by the workout generation engine.

The HTTP layer maps ``kind`` to a status code; the engine never does.
"""


class WorkoutGenerationError(Exception):
    kind = "WorkoutGenerationError"


class InvalidRequestError(WorkoutGenerationError, ValueError):
    """Request failed shape or range validation."""
    kind = "InvalidRequest"


class IdempotencyConflictError(WorkoutGenerationError):
    """Idempotency key already owned by a different user."""
    kind = "IdempotencyConflict"


class GenerationFailedError(WorkoutGenerationError):
    """Catch-all for miss-path failures. Message stays generic; detail lives on the tracker record."""
    kind = "GenerationFailed"

    def __init__(self, message: str = "Workout generation failed"):
        super().__init__(message)


class NoSuitableExercisesError(GenerationFailedError):
    kind = "NoSuitableExercises"

    def __init__(self, message: str = "No suitable exercises found for the given criteria"):
        super().__init__(message)
