import logging
import uuid
from typing import Any, Dict, Union

from pydantic import ValidationError

from workout_engine.exceptions import InvalidRequestError
from workout_engine.schemas.workout_generation import WorkoutFeedback
from workout_engine.utils.clock import utcnow

logger = logging.getLogger(__name__)


def submit_feedback(user_id: str, feedback: Union[WorkoutFeedback, Dict[str, Any]]) -> Dict[str, str]:
    """
    Accept a rating for a generated workout.
    Feedback is logged only; it is not stored and does not influence generation.
    """
    if not isinstance(feedback, WorkoutFeedback):
        try:
            feedback = WorkoutFeedback.model_validate(feedback)
        except ValidationError as e:
            raise InvalidRequestError(f"Invalid feedback data: {e.error_count()} validation error(s)") from e

    feedback_id = str(uuid.uuid4())
    logger.info(
        f"Workout feedback received: user={user_id} workout={feedback.workout_id} "
        f"rating={feedback.rating} feedback={feedback.feedback} at={utcnow().isoformat()}"
    )
    if feedback.comments:
        logger.info(f"Feedback {feedback_id} comments: {feedback.comments}")

    return {"message": "Feedback received successfully", "feedbackId": feedback_id}
