"""Exceptions raised inside the quiz engine."""

from __future__ import annotations


class QuizError(RuntimeError):
    """Base class for quiz generation faults."""


class DataConsistencyError(QuizError):
    """The catalog contradicted an invariant the engine relies on.

    Raised for sampler shortfalls, duplicate samples, required relations that
    are missing, and distractor pools too small to fill a question.
    """
