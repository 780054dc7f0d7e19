"""CLI entry point for bootstrapping the anime-quiz workspace."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Mapping, Sequence

from anime_quiz.config import CONFIG_FILENAME
from anime_quiz.core import config_templates
from anime_quiz.core import workspace as workspace_mod
from anime_quiz.core.config_templates import ConfigTemplateError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anime-quiz init",
        description=(
            "Create the anime-quiz workspace with its config, logs, catalog, "
            "and quizzes folders."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Override the workspace root (defaults to ANIME_QUIZ_DATA_HOME "
            "or ~/.anime-quiz-data)."
        ),
    )
    parser.add_argument(
        "--with-config",
        action="store_true",
        help="Also write the default anime_quiz.toml if none exists yet.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output on success.",
    )
    return parser


def _status(created: Mapping[str, bool], key: str) -> str:
    return "created" if created.get(key, False) else "exists"


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
    except workspace_mod.WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    config_line = None
    if args.with_config:
        target = layout.path_for("config") / CONFIG_FILENAME
        if target.exists():
            config_line = f"Config: {target} (exists)"
        else:
            try:
                written = config_templates.get_template("anime_quiz").write(
                    target
                )
            except ConfigTemplateError as exc:
                sys.stderr.write(str(exc) + "\n")
                return 1
            config_line = f"Config: {written} (created)"

    if args.quiet:
        return 0

    created = layout.created
    lines = [f"Workspace ready at {layout.home} ({_status(created, 'home')})"]
    if layout.directories:
        lines.append("Subdirectories:")
        width = max(len(name) for name in layout.directories)
        for name, directory in layout.items():
            status = _status(created, name)
            lines.append(f"  {name.ljust(width)}  {directory} ({status})")
    if config_line:
        lines.append(config_line)
    lines.append(
        "Place the catalog *.jsonl tables in "
        f"{layout.path_for('catalog')} before generating quizzes."
    )

    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
