"""Quiz assembly: validate, count, plan, sample, build, and shuffle.

``QuizGenerator.generate`` walks a fixed sequence of states and always
returns a :class:`QuizOutcome`; faults never escape to the caller.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from enum import Enum
from typing import Callable, List, Optional

from ..catalog.store import CATEGORY_ORDER, CatalogStore
from .allocation import count_availability, plan_allocation
from .builders import build_question
from .models import Question, Quiz, QuizOutcome, QuizStatus
from .sampling import sample_category

MIN_QUESTIONS = 2
MAX_QUESTIONS = 512
DEFAULT_QUESTION_COUNT = 8

RANGE_MESSAGE = (
    f"Number of questions should be within {MIN_QUESTIONS} to "
    f"{MAX_QUESTIONS}."
)
UNKNOWN_ERROR_MESSAGE = "Unknown error when generating anime quiz."

RngFactory = Callable[[], random.Random]


class GenerationState(Enum):
    VALIDATING = "validating"
    COUNTING = "counting"
    PLANNING = "planning"
    SAMPLING = "sampling_and_building"
    FINALIZING = "finalizing"


def seeded_rng_factory(seed: Optional[int] = None) -> RngFactory:
    """Return a factory producing a fresh generator per request.

    With a ``seed`` every request replays the same sequence; otherwise each
    generator is seeded from OS entropy.
    """

    def factory() -> random.Random:
        return random.Random(seed)

    return factory


class QuizGenerator:
    """Generate quizzes from a :class:`CatalogStore`.

    The generator keeps no per-request state. Each call to :meth:`generate`
    gets its own random generator from ``rng_factory``, so one instance can
    serve concurrent callers.
    """

    def __init__(
        self,
        store: CatalogStore,
        *,
        rng_factory: Optional[RngFactory] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._rng_factory = rng_factory or seeded_rng_factory()
        self._logger = logger or logging.getLogger("anime_quiz.engine")

    def generate(self, question_count: int) -> QuizOutcome:
        self._enter(GenerationState.VALIDATING, question_count=question_count)
        if not _valid_count(question_count):
            return self._finish(QuizOutcome.rejected(RANGE_MESSAGE))

        state = GenerationState.COUNTING
        try:
            self._enter(state)
            availability = count_availability(self._store)
            if question_count > availability.total:
                return self._finish(
                    QuizOutcome.rejected(
                        "Number of questions requested exceeds the available "
                        f"number {availability.total}."
                    ),
                    availability=availability.as_dict(),
                )

            state = GenerationState.PLANNING
            self._enter(state, availability=availability.as_dict())
            allocation = plan_allocation(question_count, availability)

            state = GenerationState.SAMPLING
            self._enter(state, allocation=dict(allocation))
            rng = self._rng_factory()
            questions: List[Question] = []
            for category in CATEGORY_ORDER:
                entities = sample_category(
                    self._store, category, allocation[category], rng
                )
                questions.extend(
                    build_question(self._store, category, entity, rng)
                    for entity in entities
                )

            state = GenerationState.FINALIZING
            self._enter(state, question_count=len(questions))
            quiz = _finalize(questions, rng)
        except Exception as exc:
            self._logger.exception(
                "Quiz generation failed",
                extra={"state": state, "question_count": question_count},
            )
            detail = str(exc) or type(exc).__name__
            return self._finish(
                QuizOutcome.error(UNKNOWN_ERROR_MESSAGE, detail)
            )
        return self._finish(QuizOutcome.success(quiz))

    def _enter(self, state: GenerationState, **extra: object) -> None:
        self._logger.debug(
            "Quiz generation state", extra={"state": state, **extra}
        )

    def _finish(self, outcome: QuizOutcome, **extra: object) -> QuizOutcome:
        level = (
            logging.ERROR
            if outcome.status is QuizStatus.ERROR
            else logging.INFO
        )
        self._logger.log(
            level,
            "Quiz generation finished",
            extra={
                "status": outcome.status,
                "questions": len(outcome.quiz) if outcome.quiz else 0,
                "messages": list(outcome.messages),
                **extra,
            },
        )
        return outcome


def generate_quiz(
    store: CatalogStore,
    question_count: int = DEFAULT_QUESTION_COUNT,
    *,
    seed: Optional[int] = None,
    logger: Optional[logging.Logger] = None,
) -> QuizOutcome:
    """Generate a single quiz; see :class:`QuizGenerator`."""

    generator = QuizGenerator(
        store, rng_factory=seeded_rng_factory(seed), logger=logger
    )
    return generator.generate(question_count)


def _valid_count(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_QUESTIONS <= value <= MAX_QUESTIONS


def _finalize(questions: List[Question], rng: random.Random) -> Quiz:
    shuffled: List[Question] = []
    for question in questions:
        choices = list(question.choices)
        rng.shuffle(choices)
        shuffled.append(replace(question, choices=tuple(choices)))
    rng.shuffle(shuffled)
    return Quiz(questions=tuple(shuffled))
