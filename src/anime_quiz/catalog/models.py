"""Read-only catalog entities consumed by the quiz engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

IMAGE_PREFIX = "/assets/images"
MUSIC_PREFIX = "/assets/musics"


def media_path(prefix: str, filename: str) -> str:
    return f"{prefix.rstrip('/')}/{filename}"


@dataclass(frozen=True)
class Anime:
    anime_id: int
    name: str


@dataclass(frozen=True)
class Character:
    character_id: int
    name: str


@dataclass(frozen=True)
class Staff:
    """A person credited as voice actor and/or singer."""

    staff_id: int
    name: str


@dataclass(frozen=True)
class CharacterVersion:
    """A specific incarnation of a character (e.g. a season or a form).

    ``version_name`` is ``None`` for the undistinguished default version.
    """

    character_version_id: int
    character: Optional[Character]
    version_name: Optional[str] = None
    animes: tuple[Anime, ...] = ()
    voice_actors: tuple[Staff, ...] = ()


@dataclass(frozen=True)
class Image:
    """An uploaded picture linked to exactly one anime or character-version."""

    image_id: int
    filename: str
    anime: Optional[Anime] = None
    character_version: Optional[CharacterVersion] = None
    prefix: str = IMAGE_PREFIX

    @property
    def path(self) -> str:
        return media_path(self.prefix, self.filename)


@dataclass(frozen=True)
class Music:
    music_id: int
    name: str
    filename: str
    anime: Optional[Anime] = None
    singers: tuple[Staff, ...] = ()
    prefix: str = MUSIC_PREFIX

    @property
    def path(self) -> str:
        return media_path(self.prefix, self.filename)
