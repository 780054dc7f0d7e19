"""Generate multiple-choice anime quizzes from a media catalog.

The engine lives in :mod:`anime_quiz.engine`; catalog data access in
:mod:`anime_quiz.catalog`. Command-line entry points are dispatched from
:mod:`anime_quiz.cli`.
"""

from .engine import QuizGenerator, QuizOutcome, QuizStatus, generate_quiz

__all__ = ["QuizGenerator", "QuizOutcome", "QuizStatus", "generate_quiz"]
