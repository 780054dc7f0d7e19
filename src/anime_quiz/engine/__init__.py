"""Quiz generation engine."""

from .allocation import (
    Allocation,
    Availability,
    count_availability,
    plan_allocation,
)
from .assembler import (
    DEFAULT_QUESTION_COUNT,
    MAX_QUESTIONS,
    MIN_QUESTIONS,
    GenerationState,
    QuizGenerator,
    generate_quiz,
    seeded_rng_factory,
)
from .builders import available_shapes, build_question
from .errors import DataConsistencyError, QuizError
from .models import (
    CHOICE_COUNT,
    Question,
    QuestionShape,
    Quiz,
    QuizOutcome,
    QuizStatus,
)
from .sampling import sample_category

__all__ = [
    "Allocation",
    "Availability",
    "CHOICE_COUNT",
    "DEFAULT_QUESTION_COUNT",
    "DataConsistencyError",
    "GenerationState",
    "MAX_QUESTIONS",
    "MIN_QUESTIONS",
    "Question",
    "QuestionShape",
    "Quiz",
    "QuizError",
    "QuizGenerator",
    "QuizOutcome",
    "QuizStatus",
    "available_shapes",
    "build_question",
    "count_availability",
    "generate_quiz",
    "plan_allocation",
    "sample_category",
    "seeded_rng_factory",
]
