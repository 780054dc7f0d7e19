"""CLI entry point for generating anime quizzes."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

from anime_quiz.catalog import CatalogError
from anime_quiz.config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    QuizConfigError,
    load_config,
)
from anime_quiz.core import config_templates
from anime_quiz.core import workspace as workspace_mod
from anime_quiz.core.config_templates import ConfigTemplateError
from anime_quiz.core.logging import configure_logger
from anime_quiz.core.workspace import WorkspaceError
from anime_quiz.engine import QuizOutcome

from .runner import exit_code_for, open_store, run_generation, write_quiz


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anime-quiz generate",
        description=(
            "Generate a multiple-choice quiz from the anime catalog, split "
            "across anime images, character images, and anime music."
        ),
        epilog=(
            "Run `anime-quiz generate config init` to scaffold the default "
            "anime_quiz.toml template."
        ),
    )
    parser.add_argument(
        "-n",
        "--count",
        type=int,
        help="Number of questions (2-512; defaults to the configured value).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed the random generator for a reproducible quiz.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write one question per JSON line to this file.",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        help="Catalog directory (defaults to the workspace catalog folder).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=(
            "Path to a TOML config file (defaults to the workspace config "
            "directory)."
        ),
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root.",
    )
    parser.add_argument(
        "--log-level",
        help="Set the logging level for the run (defaults to INFO).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args_list = list(argv) if argv is not None else list(sys.argv[1:])

    if args_list[:1] == ["config"]:
        return _handle_config(args_list[1:])

    parser = build_arg_parser()
    args = parser.parse_args(args_list)

    overrides = ConfigOverrides(
        catalog_path=args.catalog,
        seed=args.seed,
        log_level=args.log_level,
    )
    try:
        load_result = load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except QuizConfigError as exc:
        parser.error(str(exc))

    config = load_result.config
    logger, log_path = configure_logger(
        "anime_quiz.generate",
        log_dir=load_result.layout.path_for("logs"),
        level=config.log_level,
        verbose=args.verbose,
    )
    logger.debug("generate CLI invoked")

    try:
        store = open_store(config)
    except CatalogError as exc:
        logger.error("Catalog unavailable", extra={"error": str(exc)})
        sys.stderr.write(str(exc) + "\n")
        return 1

    outcome = run_generation(
        config, question_count=args.count, logger=logger, store=store
    )
    if not outcome.ok:
        _print_messages(outcome)
        return exit_code_for(outcome)

    if args.output is not None:
        written = write_quiz(outcome, args.output)
        sys.stdout.write(
            f"Wrote {written} question(s) to {args.output}\n"
            f"Log file: {log_path}\n"
        )
    else:
        quiz = outcome.quiz
        payload = quiz.to_dict() if quiz is not None else {"questions": []}
        sys.stdout.write(
            json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
        )
    return exit_code_for(outcome)


def _print_messages(outcome: QuizOutcome) -> None:
    for message in outcome.messages:
        sys.stderr.write(message + "\n")


def _handle_config(argv: Sequence[str]) -> int:
    parser = _build_config_parser()
    args = parser.parse_args(argv)

    return _handle_config_init(args)


def _build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anime-quiz generate config",
        description="Manage configuration files for quiz generation.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help="Write the default anime_quiz.toml template.",
    )
    init_parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Destination for the config TOML (defaults to the workspace "
            "config directory)."
        ),
    )
    init_parser.add_argument(
        "--workspace",
        type=Path,
        help=(
            "Workspace root override used when resolving the default config "
            "path."
        ),
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the destination if a config already exists.",
    )
    return parser


def _handle_config_init(args: argparse.Namespace) -> int:
    try:
        target = _resolve_config_target(args)
    except WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    template = config_templates.get_template("anime_quiz")
    try:
        written = template.write(target, overwrite=args.force)
    except ConfigTemplateError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    sys.stdout.write(f"Wrote anime_quiz config to {written}\n")
    return 0


def _resolve_config_target(args: argparse.Namespace) -> Path:
    if args.path is not None:
        candidate = args.path.expanduser()
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate

    layout = workspace_mod.ensure_workspace(path=args.workspace)
    return layout.path_for("config") / CONFIG_FILENAME


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
