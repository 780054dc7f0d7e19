"""Catalog builders shared by tests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

from anime_quiz.catalog import (
    Catalog,
    InMemoryCatalogStore,
    build_catalog,
)

Record = dict[str, Any]


@dataclass
class CatalogBuilder:
    """Accumulate raw table records with auto-assigned ids."""

    tables: dict[str, list[Record]] = field(
        default_factory=lambda: {
            "animes": [],
            "characters": [],
            "staff": [],
            "character_versions": [],
            "images": [],
            "musics": [],
        }
    )

    def _add(self, table: str, **fields: Any) -> int:
        rows = self.tables[table]
        record_id = len(rows) + 1
        rows.append({"id": record_id, **fields})
        return record_id

    def anime(self, name: str) -> int:
        return self._add("animes", name=name)

    def character(self, name: str) -> int:
        return self._add("characters", name=name)

    def staff(self, name: str) -> int:
        return self._add("staff", name=name)

    def version(
        self,
        character_id: int,
        *,
        version_name: Optional[str] = None,
        anime_ids: Iterable[int] = (),
        voice_actor_ids: Iterable[int] = (),
    ) -> int:
        return self._add(
            "character_versions",
            character_id=character_id,
            version_name=version_name,
            anime_ids=list(anime_ids),
            voice_actor_ids=list(voice_actor_ids),
        )

    def anime_image(self, anime_id: int, filename: str | None = None) -> int:
        index = len(self.tables["images"]) + 1
        return self._add(
            "images",
            filename=filename or f"anime-{index}.png",
            anime_id=anime_id,
        )

    def character_image(
        self, version_id: int, filename: str | None = None
    ) -> int:
        index = len(self.tables["images"]) + 1
        return self._add(
            "images",
            filename=filename or f"character-{index}.png",
            character_version_id=version_id,
        )

    def music(
        self,
        name: str,
        anime_id: Optional[int],
        *,
        singer_ids: Iterable[int] = (),
        filename: str | None = None,
    ) -> int:
        index = len(self.tables["musics"]) + 1
        return self._add(
            "musics",
            name=name,
            filename=filename or f"music-{index}.mp3",
            anime_id=anime_id,
            singer_ids=list(singer_ids),
        )

    def build(self) -> Catalog:
        return build_catalog(self.tables)

    def store(self) -> InMemoryCatalogStore:
        return InMemoryCatalogStore(self.build())

    def write(self, directory: Path) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        for name, rows in self.tables.items():
            path = directory / f"{name}.jsonl"
            path.write_text(
                "".join(json.dumps(row) + "\n" for row in rows),
                encoding="utf-8",
            )
        return directory


def populated_catalog(
    *,
    anime_images: int = 10,
    character_images: int = 10,
    musics: int = 10,
    pool_size: int = 6,
) -> CatalogBuilder:
    """Return a builder with the requested eligible counts per category.

    Every distractor pool holds ``pool_size`` distinct entries so each
    question shape can always find three distractors.
    """

    builder = CatalogBuilder()
    animes = [builder.anime(f"Anime {i}") for i in range(1, pool_size + 1)]
    actors = [
        builder.staff(f"Voice Actor {i}") for i in range(1, pool_size + 1)
    ]
    singers = [builder.staff(f"Singer {i}") for i in range(1, pool_size + 1)]
    versions = []
    for i in range(pool_size):
        character_id = builder.character(f"Character {i + 1}")
        versions.append(
            builder.version(
                character_id,
                version_name="Child" if i % 2 else None,
                anime_ids=[animes[i]],
                voice_actor_ids=[actors[i]],
            )
        )
    for i in range(anime_images):
        builder.anime_image(animes[i % pool_size])
    for i in range(character_images):
        builder.character_image(versions[i % pool_size])
    for i in range(musics):
        builder.music(
            f"Song {i + 1}",
            animes[i % pool_size],
            singer_ids=[singers[i % pool_size]],
        )
    return builder
