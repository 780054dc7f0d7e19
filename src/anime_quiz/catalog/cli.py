"""CLI entry point for inspecting the quiz catalog."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

from anime_quiz.config import ConfigOverrides, QuizConfigError, load_config
from anime_quiz.engine import count_availability

from .memory import Catalog, InMemoryCatalogStore, TABLES
from .store import CATEGORY_ORDER, CatalogError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anime-quiz catalog",
        description="Inspect the JSON-lines catalog used to build quizzes.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    stats = subparsers.add_parser(
        "stats",
        help="Show table sizes and questions available per category.",
    )
    stats.add_argument(
        "--catalog",
        type=Path,
        help="Catalog directory (defaults to the workspace catalog folder).",
    )
    stats.add_argument(
        "--config",
        type=Path,
        help="Path to a TOML config file.",
    )
    stats.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root.",
    )
    stats.add_argument(
        "--json",
        action="store_true",
        help="Emit the statistics as a JSON object.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        load_result = load_config(
            config_path=args.config,
            overrides=ConfigOverrides(catalog_path=args.catalog),
            workspace_path=args.workspace,
        )
    except QuizConfigError as exc:
        parser.error(str(exc))

    config = load_result.config
    try:
        store = InMemoryCatalogStore.from_directory(
            config.catalog_path,
            image_prefix=config.image_prefix,
            music_prefix=config.music_prefix,
        )
    except CatalogError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    stats = collect_stats(store)
    if args.json:
        sys.stdout.write(json.dumps(stats, indent=2) + "\n")
        return 0

    _print_stats(stats, config.catalog_path)
    return 0


def collect_stats(store: InMemoryCatalogStore) -> dict:
    """Return table row counts and per-category availability."""

    catalog: Catalog = store.catalog
    return {
        "tables": {name: len(getattr(catalog, name)) for name in TABLES},
        "available": count_availability(store).as_dict(),
    }


def _print_stats(stats: dict, catalog_path: Path) -> None:
    tables = stats["tables"]
    available = stats["available"]
    width = max(len(name) for name in tables)
    lines = [f"Catalog at {catalog_path}", "Tables:"]
    for name in TABLES:
        lines.append(f"  {name.ljust(width)}  {tables[name]}")
    lines.append("Available questions:")
    label_width = max(len(category.label) for category in CATEGORY_ORDER)
    for category in CATEGORY_ORDER:
        count = available[category.value]
        lines.append(f"  {category.label.ljust(label_width)}  {count}")
    lines.append(f"  {'Total'.ljust(label_width)}  {available['total']}")
    sys.stdout.write("\n".join(lines) + "\n")


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
