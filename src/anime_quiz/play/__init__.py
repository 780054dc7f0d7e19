"""Interactive Rich session for answering generated quizzes."""

from .session import (
    CategorySummary,
    Choice,
    QuestionRecord,
    QuestionResponse,
    QuizScore,
    QuizSessionResult,
    QuizSessionState,
    QuizSummary,
    SessionCommand,
    parse_session_command,
    run_quiz_session,
    summarize,
)

__all__ = [
    "CategorySummary",
    "Choice",
    "QuestionRecord",
    "QuestionResponse",
    "QuizScore",
    "QuizSessionResult",
    "QuizSessionState",
    "QuizSummary",
    "SessionCommand",
    "parse_session_command",
    "run_quiz_session",
    "summarize",
]
