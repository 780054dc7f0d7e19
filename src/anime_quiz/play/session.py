"""Rich-powered quiz session for playing generated anime quizzes.

The session loop renders one question at a time with its media path,
collects commands from an injectable input provider, and returns a
`QuizSessionResult` once the player submits or quits. Keeping input and
output behind `Console` and a callable makes the loop easy to drive from
tests.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Callable, Literal

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from anime_quiz.catalog.store import Category
from anime_quiz.engine.models import Question

InputProvider = Callable[[], str]
ExitAction = Literal["submitted", "quit", "empty"]

CHOICE_KEYS = "ABCDEFGH"


@dataclass(frozen=True)
class Choice:
    """Lettered multiple-choice option."""

    key: str
    text: str


@dataclass(frozen=True)
class QuestionRecord:
    """A generated question with lettered choices."""

    id: str
    title: str
    choices: list[Choice]
    answer: str
    category: Category
    media: str | None = None

    def choice_for(self, key: str | None) -> Choice | None:
        if not key:
            return None
        normalized = str(key).strip().upper()[:1]
        for choice in self.choices:
            if choice.key == normalized:
                return choice
        return None

    @classmethod
    def from_question(cls, question: Question, index: int) -> "QuestionRecord":
        if len(question.choices) > len(CHOICE_KEYS):
            raise ValueError(
                f"Question {index + 1} has more choices than keys available."
            )
        choices = [
            Choice(CHOICE_KEYS[pos], text)
            for pos, text in enumerate(question.choices)
        ]
        answer = next(
            (c.key for c in choices if c.text == question.answer), ""
        )
        if not answer:
            raise ValueError(
                f"Question {index + 1} does not list its answer as a choice."
            )
        return cls(
            id=str(index + 1),
            title=question.title,
            choices=choices,
            answer=answer,
            category=question.category,
            media=question.image_path or question.music_path,
        )


@dataclass(frozen=True)
class QuestionResponse:
    """A player's response to one question."""

    question_id: str
    title: str
    category: Category
    selected: str | None
    selected_text: str | None
    answer: str
    answer_text: str | None
    is_correct: bool


@dataclass(frozen=True)
class QuizScore:
    """Final score; mirrors the result page of a finished quiz."""

    score: int
    total: int

    def __post_init__(self) -> None:
        if self.total < 0 or not 0 <= self.score <= self.total:
            raise ValueError(
                f"Score {self.score} must be within 0 to {self.total}."
            )


@dataclass(frozen=True)
class CategorySummary:
    """Aggregate performance for one question category."""

    category: Category
    asked: int
    correct: int

    @property
    def accuracy(self) -> float:
        if self.asked == 0:
            return 0.0
        return self.correct / self.asked


@dataclass(frozen=True)
class QuizSummary:
    total_questions: int
    correct_answers: int
    answered_questions: int
    per_category: dict[Category, CategorySummary] = field(default_factory=dict)

    @property
    def accuracy(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return self.correct_answers / self.total_questions

    @property
    def score(self) -> QuizScore:
        return QuizScore(self.correct_answers, self.total_questions)


@dataclass(frozen=True)
class QuizSessionResult:
    """Return value from ``run_quiz_session``."""

    responses: list[QuestionResponse]
    summary: QuizSummary
    exit_action: ExitAction


@dataclass(frozen=True)
class SessionCommand:
    type: Literal["next", "prev", "submit", "quit", "select"]
    choice: str | None = None


@dataclass
class QuizSessionState:
    """Mutable session state shared by the Rich UI loop."""

    questions: list[QuestionRecord]
    index: int = 0
    selections: dict[str, str] = field(default_factory=dict)

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def current(self) -> QuestionRecord:
        return self.questions[self.index]

    def answered_count(self) -> int:
        return len(self.selections)

    def select(self, choice_key: str) -> bool:
        choice_key = choice_key.strip().upper()[:1]
        question = self.current
        if not question.choice_for(choice_key):
            return False
        self.selections[question.id] = choice_key
        return True

    def next(self) -> None:
        if self.index + 1 < self.total_questions:
            self.index += 1

    def previous(self) -> None:
        if self.index > 0:
            self.index -= 1

    def selected_for(
        self, question: QuestionRecord | None = None
    ) -> str | None:
        target = question or self.current
        return self.selections.get(target.id)

    def available_choice_keys(self) -> list[str]:
        return [choice.key for choice in self.current.choices]


def parse_session_command(raw: str | None) -> SessionCommand | None:
    """Parse raw user input into a structured command."""

    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    lowered = text.lower()
    if lowered in {"n", "next"}:
        return SessionCommand("next")
    if lowered in {"p", "prev", "previous"}:
        return SessionCommand("prev")
    if lowered in {"submit", "s"}:
        return SessionCommand("submit")
    if lowered in {"quit", "q", "exit"}:
        return SessionCommand("quit")
    key = text[0].upper()
    if key.isalpha():
        return SessionCommand("select", key)
    return None


def run_quiz_session(
    questions: Sequence[Question],
    console: Console,
    input_provider: InputProvider,
) -> QuizSessionResult:
    """Run an interactive quiz session using Rich-rendered prompts."""

    records = [
        QuestionRecord.from_question(question, idx)
        for idx, question in enumerate(questions)
    ]
    state = QuizSessionState(records)

    if not state.questions:
        console.print(
            Panel(
                "The quiz has no questions.",
                title="Anime Quiz",
                border_style="yellow",
            )
        )
        return QuizSessionResult([], summarize(state)[1], "empty")

    exit_action: ExitAction = "quit"
    while True:
        _render_question(console, state)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            exit_action = "quit"
            break
        command = parse_session_command(raw)
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        exit_candidate = _apply_command(command, state, console)
        if exit_candidate:
            exit_action = exit_candidate
            break

    responses, summary = summarize(state)
    result = QuizSessionResult(responses, summary, exit_action)

    if exit_action == "submitted":
        _render_summary(console, result)

    return result


def summarize(
    state: QuizSessionState,
) -> tuple[list[QuestionResponse], QuizSummary]:
    """Score the current selections of ``state``."""

    responses: list[QuestionResponse] = []
    asked: dict[Category, int] = {}
    correct: dict[Category, int] = {}
    for record in state.questions:
        selected = state.selected_for(record)
        chosen = record.choice_for(selected)
        expected = record.choice_for(record.answer)
        is_correct = selected is not None and selected == record.answer
        responses.append(
            QuestionResponse(
                question_id=record.id,
                title=record.title,
                category=record.category,
                selected=selected,
                selected_text=chosen.text if chosen else None,
                answer=record.answer,
                answer_text=expected.text if expected else None,
                is_correct=is_correct,
            )
        )
        asked[record.category] = asked.get(record.category, 0) + 1
        correct[record.category] = correct.get(record.category, 0) + int(
            is_correct
        )

    summary = QuizSummary(
        total_questions=len(responses),
        correct_answers=sum(1 for r in responses if r.is_correct),
        answered_questions=sum(1 for r in responses if r.selected),
        per_category={
            category: CategorySummary(
                category=category,
                asked=count,
                correct=correct[category],
            )
            for category, count in asked.items()
        },
    )
    return responses, summary


def _apply_command(
    command: SessionCommand,
    state: QuizSessionState,
    console: Console,
) -> ExitAction | None:
    if command.type == "select" and command.choice:
        if state.select(command.choice):
            console.print(f"Selected [bold]{command.choice}[/].")
        else:
            console.print(
                "[red]'%s' is not a valid choice for this question.[/red]"
                % command.choice,
            )
        return None
    if command.type == "next":
        state.next()
        return None
    if command.type == "prev":
        state.previous()
        return None
    if command.type == "quit":
        console.print("\n[bold yellow]Ending quiz without submission.[/]")
        return "quit"
    if command.type == "submit":
        return "submitted"
    return None


def _render_question(console: Console, state: QuizSessionState) -> None:
    question = state.current
    header = Text.assemble(
        (f"Question {state.index + 1}", "bold cyan"),
        (f" / {state.total_questions}", "dim"),
        (f"  {question.category.label}", "magenta"),
    )
    console.print()
    console.rule(header)
    console.print(Text(question.title, style="bold"))
    if question.media:
        console.print(Text(f"Media: {question.media}", style="dim"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Choice")

    selected = state.selected_for(question)
    for choice in question.choices:
        indicator = "*" if choice.key == selected else " "
        choice_text = Text(choice.text)
        if choice.key == selected:
            choice_text.stylize("bold green")
        row_text = Text(indicator + " ")
        row_text += choice_text
        table.add_row(choice.key, row_text)

    console.print(table)
    choice_hint = ", ".join(state.available_choice_keys())
    console.print(
        Text(
            f"Answered {state.answered_count()}/{state.total_questions} | "
            f"Commands: choices [{choice_hint}], n (next), p (prev), "
            "submit, quit",
            style="dim",
        )
    )


def _render_summary(console: Console, result: QuizSessionResult) -> None:
    console.print()
    console.rule(Text("Quiz Summary", style="bold magenta"))

    summary = result.summary
    score = summary.score
    overview = Table(
        show_header=False,
        box=box.MINIMAL_DOUBLE_HEAD,
        expand=False,
    )
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    overview.add_row("Score", f"{score.score}/{score.total}")
    overview.add_row("Answered", str(summary.answered_questions))
    overview.add_row("Accuracy", f"{summary.accuracy * 100:.1f}%")
    console.print(overview)

    if summary.per_category:
        per_category = Table(
            title="Per category", box=box.SIMPLE, expand=False
        )
        per_category.add_column("Category")
        per_category.add_column("Asked", justify="right")
        per_category.add_column("Correct", justify="right")
        per_category.add_column("Accuracy", justify="right")
        for category, metrics in summary.per_category.items():
            per_category.add_row(
                category.label,
                str(metrics.asked),
                str(metrics.correct),
                f"{metrics.accuracy * 100:.1f}%",
            )
        console.print(per_category)

    response_table = Table(title="Responses", box=box.SIMPLE, expand=True)
    response_table.add_column("#", justify="right")
    response_table.add_column("Question", overflow="fold")
    response_table.add_column("Your answer", overflow="fold")
    response_table.add_column("Correct answer", overflow="fold")
    response_table.add_column("Result", justify="center")

    for response in result.responses:
        your = (
            f"{response.selected}. {response.selected_text}"
            if response.selected
            else "-"
        )
        correct = f"{response.answer}. {response.answer_text}"
        outcome = "correct" if response.is_correct else "wrong"
        response_table.add_row(
            response.question_id,
            response.title,
            your,
            correct,
            outcome,
        )
    console.print(response_table)
