"""CLI entry point for playing a freshly generated quiz in the terminal."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from rich.console import Console

from anime_quiz.catalog import CatalogError
from anime_quiz.config import ConfigOverrides, QuizConfigError, load_config
from anime_quiz.core.logging import configure_logger
from anime_quiz.generate.runner import exit_code_for, run_generation

from .session import InputProvider, run_quiz_session


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anime-quiz play",
        description="Generate a quiz and answer it in an interactive session.",
    )
    parser.add_argument(
        "-n",
        "--count",
        type=int,
        help="Number of questions (2-512; defaults to the configured value).",
    )
    parser.add_argument("--seed", type=int, help="Seed for a repeatable quiz.")
    parser.add_argument(
        "--catalog",
        type=Path,
        help="Catalog directory (defaults to the workspace catalog folder).",
    )
    parser.add_argument("--config", type=Path, help="Path to a TOML config.")
    parser.add_argument(
        "--workspace", type=Path, help="Override the workspace root."
    )
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    console: Console | None = None,
    input_provider: InputProvider | None = None,
) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        load_result = load_config(
            config_path=args.config,
            overrides=ConfigOverrides(
                catalog_path=args.catalog, seed=args.seed
            ),
            workspace_path=args.workspace,
        )
    except QuizConfigError as exc:
        parser.error(str(exc))

    config = load_result.config
    logger, _ = configure_logger(
        "anime_quiz.play",
        log_dir=load_result.layout.path_for("logs"),
        level=config.log_level,
    )

    try:
        outcome = run_generation(
            config, question_count=args.count, logger=logger
        )
    except CatalogError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1
    if not outcome.ok or outcome.quiz is None:
        for message in outcome.messages:
            sys.stderr.write(message + "\n")
        return exit_code_for(outcome)

    console = console or Console()
    provider = input_provider or (lambda: console.input("[bold]> [/]"))
    result = run_quiz_session(outcome.quiz.questions, console, provider)
    logger.info(
        "Quiz session finished",
        extra={
            "exit_action": result.exit_action,
            "score": result.summary.correct_answers,
            "total": result.summary.total_questions,
        },
    )
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
