"""Catalog store contract consumed by the quiz engine."""

from __future__ import annotations

import random
from enum import Enum
from typing import AbstractSet, Protocol, Sequence, Union

from .models import Anime, CharacterVersion, Image, Music, Staff


class CatalogError(RuntimeError):
    """Raised when catalog data is unreadable, invalid, or unavailable."""


class Category(Enum):
    """Question categories, in the order remainders are handed out."""

    ANIME_IMAGE = "anime_image"
    CHARACTER_IMAGE = "character_image"
    ANIME_MUSIC = "anime_music"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


CATEGORY_ORDER: tuple[Category, ...] = (
    Category.ANIME_IMAGE,
    Category.CHARACTER_IMAGE,
    Category.ANIME_MUSIC,
)


class Pool(Enum):
    """Distractor pools, each identified by its entities' primary key."""

    ANIME = "anime"
    CHARACTER_VERSION = "character_version"
    MUSIC = "music"
    VOICE_ACTOR = "voice_actor"
    SINGER = "singer"


SampledEntity = Union[Image, Music]
PoolEntity = Union[Anime, CharacterVersion, Music, Staff]


class CatalogStore(Protocol):
    """Read-only source of quiz material.

    Implementations must never mutate what they hand out, and must draw
    uniformly without replacement using the ``rng`` supplied by the caller.
    """

    def count_eligible(self, category: Category) -> int:
        ...

    def sample_distinct(
        self, category: Category, n: int, rng: random.Random
    ) -> Sequence[SampledEntity]:
        ...

    def sample_other_distinct(
        self,
        pool: Pool,
        exclude_ids: AbstractSet[int],
        n: int,
        rng: random.Random,
    ) -> Sequence[PoolEntity]:
        ...


def entity_id(entity: object) -> int:
    """Return the primary key of any catalog entity."""

    for attr in (
        "image_id",
        "music_id",
        "anime_id",
        "character_version_id",
        "staff_id",
        "character_id",
    ):
        value = getattr(entity, attr, None)
        if value is not None:
            return int(value)
    raise TypeError(f"Not a catalog entity: {entity!r}")
