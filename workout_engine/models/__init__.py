# Import all models here
from workout_engine.models.exercise import Exercise
from workout_engine.models.workout_blueprint import WorkoutBlueprint
from workout_engine.models.generation_request import GenerationRequest
