"""Quiz value types produced by the generation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..catalog.store import Category

CHOICE_COUNT = 4


class QuestionShape(Enum):
    """A question template, tagged with the category it belongs to."""

    ANIME_NAME = ("anime_name", Category.ANIME_IMAGE)
    CHARACTER_NAME = ("character_name", Category.CHARACTER_IMAGE)
    VOICE_ACTOR_NAME = ("voice_actor_name", Category.CHARACTER_IMAGE)
    MUSIC_NAME = ("music_name", Category.ANIME_MUSIC)
    SINGER_NAME = ("singer_name", Category.ANIME_MUSIC)

    def __init__(self, key: str, category: Category) -> None:
        self.key = key
        self.category = category


@dataclass(frozen=True)
class Question:
    """A multiple-choice question about one image or music file."""

    title: str
    answer: str
    choices: tuple[str, ...]
    category: Category
    shape: QuestionShape
    image_path: Optional[str] = None
    music_path: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "image_path": self.image_path,
            "music_path": self.music_path,
            "answer": self.answer,
            "choices": list(self.choices),
            "category": self.category.value,
            "shape": self.shape.key,
        }


@dataclass(frozen=True)
class Quiz:
    questions: tuple[Question, ...] = ()

    def __len__(self) -> int:
        return len(self.questions)

    def to_dict(self) -> dict[str, Any]:
        return {"questions": [q.to_dict() for q in self.questions]}


class QuizStatus(Enum):
    """Terminal states of a generation request."""

    OK = "ok"
    REJECTED = "rejected"
    ERROR = "error"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    QuizStatus.OK: 200,
    QuizStatus.REJECTED: 400,
    QuizStatus.ERROR: 500,
}


@dataclass(frozen=True)
class QuizOutcome:
    """Result of one generation request.

    ``quiz`` is set only when ``status`` is :attr:`QuizStatus.OK`;
    ``messages`` explains rejections and errors.
    """

    status: QuizStatus
    quiz: Optional[Quiz] = None
    messages: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.status is QuizStatus.OK

    @property
    def http_status(self) -> int:
        return self.status.http_status

    @classmethod
    def success(cls, quiz: Quiz) -> "QuizOutcome":
        return cls(QuizStatus.OK, quiz=quiz)

    @classmethod
    def rejected(cls, *messages: str) -> "QuizOutcome":
        return cls(QuizStatus.REJECTED, messages=tuple(messages))

    @classmethod
    def error(cls, *messages: str) -> "QuizOutcome":
        return cls(QuizStatus.ERROR, messages=tuple(messages))
