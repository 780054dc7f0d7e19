"""Quiz generation orchestration shared by the generate and play commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from anime_quiz.catalog import InMemoryCatalogStore
from anime_quiz.config import AnimeQuizConfig
from anime_quiz.core.jsonl import write_jsonl
from anime_quiz.engine import (
    QuizGenerator,
    QuizOutcome,
    QuizStatus,
    seeded_rng_factory,
)

EXIT_CODES = {
    QuizStatus.OK: 0,
    QuizStatus.ERROR: 1,
    QuizStatus.REJECTED: 2,
}


def open_store(config: AnimeQuizConfig) -> InMemoryCatalogStore:
    """Load the configured catalog directory into a store.

    Raises :class:`~anime_quiz.catalog.CatalogError` when the catalog is
    missing or invalid.
    """
    return InMemoryCatalogStore.from_directory(
        config.catalog_path,
        image_prefix=config.image_prefix,
        music_prefix=config.music_prefix,
    )


def run_generation(
    config: AnimeQuizConfig,
    *,
    question_count: Optional[int] = None,
    logger: Optional[logging.Logger] = None,
    store: Optional[InMemoryCatalogStore] = None,
) -> QuizOutcome:
    """Generate one quiz using ``config`` for defaults and the seed."""
    count = (
        config.default_question_count
        if question_count is None
        else question_count
    )
    generator = QuizGenerator(
        store if store is not None else open_store(config),
        rng_factory=seeded_rng_factory(config.seed),
        logger=logger,
    )
    return generator.generate(count)


def write_quiz(outcome: QuizOutcome, path: Path) -> int:
    """Write one JSON line per question; returns the number written."""
    if outcome.quiz is None:
        raise ValueError("Only successful outcomes carry a quiz to write.")
    return write_jsonl(path, (q.to_dict() for q in outcome.quiz.questions))


def exit_code_for(outcome: QuizOutcome) -> int:
    return EXIT_CODES[outcome.status]
