"""In-memory catalog store backed by a directory of JSON-lines tables.

A catalog directory holds one ``.jsonl`` file per table. Every record carries
an integer ``id``; relations are expressed with ``*_id`` / ``*_ids`` fields::

    animes.jsonl              {"id": 1, "name": "Frieren"}
    characters.jsonl          {"id": 1, "name": "Fern"}
    staff.jsonl               {"id": 1, "name": "Kana Ichinose"}
    character_versions.jsonl  {"id": 1, "character_id": 1,
                               "version_name": null, "anime_ids": [1],
                               "voice_actor_ids": [1]}
    images.jsonl              {"id": 1, "filename": "fern.png",
                               "character_version_id": 1}
    musics.jsonl              {"id": 1, "name": "Yuusha", "filename": "op.mp3",
                               "anime_id": 1, "singer_ids": [2]}

Missing tables are treated as empty.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import (
    AbstractSet,
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    TypeVar,
)

from ..core.jsonl import read_jsonl
from .models import (
    IMAGE_PREFIX,
    MUSIC_PREFIX,
    Anime,
    Character,
    CharacterVersion,
    Image,
    Music,
    Staff,
)
from .store import (
    CatalogError,
    Category,
    Pool,
    PoolEntity,
    SampledEntity,
    entity_id,
)

TABLES: tuple[str, ...] = (
    "animes",
    "characters",
    "staff",
    "character_versions",
    "images",
    "musics",
)

T = TypeVar("T")


@dataclass(frozen=True)
class Catalog:
    """Fully resolved, immutable catalog snapshot."""

    animes: tuple[Anime, ...] = ()
    characters: tuple[Character, ...] = ()
    staff: tuple[Staff, ...] = ()
    character_versions: tuple[CharacterVersion, ...] = ()
    images: tuple[Image, ...] = ()
    musics: tuple[Music, ...] = ()


def load_catalog(
    directory: Path,
    *,
    image_prefix: str = IMAGE_PREFIX,
    music_prefix: str = MUSIC_PREFIX,
) -> Catalog:
    """Read the JSON-lines tables under ``directory`` into a :class:`Catalog`."""

    root = Path(directory)
    if not root.is_dir():
        raise CatalogError(f"Catalog directory not found: {root}")
    tables: Dict[str, List[dict]] = {}
    for name in TABLES:
        path = root / f"{name}.jsonl"
        if not path.exists():
            tables[name] = []
            continue
        try:
            tables[name] = read_jsonl(path)
        except (OSError, ValueError) as exc:
            raise CatalogError(f"Failed to read {path}: {exc}") from exc
    return build_catalog(
        tables, image_prefix=image_prefix, music_prefix=music_prefix
    )


def build_catalog(
    tables: Mapping[str, Sequence[Mapping[str, Any]]],
    *,
    image_prefix: str = IMAGE_PREFIX,
    music_prefix: str = MUSIC_PREFIX,
) -> Catalog:
    """Resolve raw table records into linked entities.

    Raises :class:`CatalogError` for duplicate ids or names, dangling
    references, and images linked to both an anime and a character-version.
    """

    unknown = set(tables) - set(TABLES)
    if unknown:
        raise CatalogError(
            "Unknown catalog table(s): {0}".format(", ".join(sorted(unknown)))
        )

    animes = _index(
        "animes",
        (
            Anime(anime_id=_id(r, "animes"), name=_name(r, "animes"))
            for r in tables.get("animes", ())
        ),
    )
    _require_unique_names("animes", animes.values())
    characters = _index(
        "characters",
        (
            Character(
                character_id=_id(r, "characters"),
                name=_name(r, "characters"),
            )
            for r in tables.get("characters", ())
        ),
    )
    staff = _index(
        "staff",
        (
            Staff(staff_id=_id(r, "staff"), name=_name(r, "staff"))
            for r in tables.get("staff", ())
        ),
    )
    _require_unique_names("staff", staff.values())

    versions = _index(
        "character_versions",
        (
            CharacterVersion(
                character_version_id=_id(r, "character_versions"),
                character=_lookup(
                    characters, r.get("character_id"), "character_versions",
                    "character_id",
                ),
                version_name=_optional_text(r.get("version_name")),
                animes=_lookup_many(
                    animes, r.get("anime_ids"), "character_versions",
                    "anime_ids",
                ),
                voice_actors=_lookup_many(
                    staff, r.get("voice_actor_ids"), "character_versions",
                    "voice_actor_ids",
                ),
            )
            for r in tables.get("character_versions", ())
        ),
    )

    images = _index(
        "images",
        (
            _build_image(r, animes, versions, image_prefix)
            for r in tables.get("images", ())
        ),
    )
    musics = _index(
        "musics",
        (
            Music(
                music_id=_id(r, "musics"),
                name=_name(r, "musics"),
                filename=_filename(r, "musics"),
                anime=_lookup(animes, r.get("anime_id"), "musics", "anime_id"),
                singers=_lookup_many(
                    staff, r.get("singer_ids"), "musics", "singer_ids"
                ),
                prefix=music_prefix,
            )
            for r in tables.get("musics", ())
        ),
    )

    return Catalog(
        animes=_sorted_values(animes),
        characters=_sorted_values(characters),
        staff=_sorted_values(staff),
        character_versions=_sorted_values(versions),
        images=_sorted_values(images),
        musics=_sorted_values(musics),
    )


class InMemoryCatalogStore:
    """:class:`~anime_quiz.catalog.store.CatalogStore` over a :class:`Catalog`."""

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog
        self._eligible: Dict[Category, tuple[SampledEntity, ...]] = {
            Category.ANIME_IMAGE: tuple(
                image for image in catalog.images if image.anime is not None
            ),
            Category.CHARACTER_IMAGE: tuple(
                image
                for image in catalog.images
                if image.character_version is not None
            ),
            Category.ANIME_MUSIC: catalog.musics,
        }
        voiced = {
            actor.staff_id
            for version in catalog.character_versions
            for actor in version.voice_actors
        }
        sung = {
            singer.staff_id
            for music in catalog.musics
            for singer in music.singers
        }
        self._pools: Dict[Pool, tuple[PoolEntity, ...]] = {
            Pool.ANIME: catalog.animes,
            Pool.CHARACTER_VERSION: catalog.character_versions,
            Pool.MUSIC: catalog.musics,
            Pool.VOICE_ACTOR: tuple(
                s for s in catalog.staff if s.staff_id in voiced
            ),
            Pool.SINGER: tuple(s for s in catalog.staff if s.staff_id in sung),
        }

    @classmethod
    def from_directory(cls, directory: Path, **kwargs: str):
        return cls(load_catalog(directory, **kwargs))

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def count_eligible(self, category: Category) -> int:
        return len(self._eligible[category])

    def sample_distinct(
        self, category: Category, n: int, rng: random.Random
    ) -> Sequence[SampledEntity]:
        return _sample(self._eligible[category], n, rng)

    def sample_other_distinct(
        self,
        pool: Pool,
        exclude_ids: AbstractSet[int],
        n: int,
        rng: random.Random,
    ) -> Sequence[PoolEntity]:
        candidates = [
            entity
            for entity in self._pools[pool]
            if entity_id(entity) not in exclude_ids
        ]
        return _sample(candidates, n, rng)


def _sample(items: Sequence[T], n: int, rng: random.Random) -> List[T]:
    if n < 0:
        raise ValueError("sample size must be >= 0")
    return rng.sample(list(items), min(n, len(items)))


def _build_image(
    record: Mapping[str, Any],
    animes: Mapping[int, Anime],
    versions: Mapping[int, CharacterVersion],
    prefix: str,
) -> Image:
    anime = _lookup(animes, record.get("anime_id"), "images", "anime_id")
    version = _lookup(
        versions,
        record.get("character_version_id"),
        "images",
        "character_version_id",
    )
    image_id = _id(record, "images")
    if anime is not None and version is not None:
        raise CatalogError(
            f"images[{image_id}] links both an anime and a character version."
        )
    return Image(
        image_id=image_id,
        filename=_filename(record, "images"),
        anime=anime,
        character_version=version,
        prefix=prefix,
    )


def _index(table: str, entities: Iterable[T]) -> Dict[int, T]:
    indexed: Dict[int, T] = {}
    for entity in entities:
        key = entity_id(entity)
        if key in indexed:
            raise CatalogError(f"Duplicate id {key} in table '{table}'.")
        indexed[key] = entity
    return indexed


def _sorted_values(indexed: Mapping[int, T]) -> tuple[T, ...]:
    return tuple(indexed[key] for key in sorted(indexed))


def _require_unique_names(table: str, entities: Iterable[Any]) -> None:
    seen: set[str] = set()
    for entity in entities:
        if entity.name in seen:
            raise CatalogError(
                f"Duplicate name '{entity.name}' in table '{table}'."
            )
        seen.add(entity.name)


def _id(record: Mapping[str, Any], table: str) -> int:
    value = record.get("id")
    if isinstance(value, bool) or not isinstance(value, int):
        raise CatalogError(f"{table}: every record needs an integer 'id'.")
    return value


def _name(record: Mapping[str, Any], table: str) -> str:
    value = _optional_text(record.get("name"))
    if value is None:
        raise CatalogError(
            f"{table}[{record.get('id')}]: 'name' must be a non-empty string."
        )
    return value


def _filename(record: Mapping[str, Any], table: str) -> str:
    value = _optional_text(record.get("filename"))
    if value is None:
        raise CatalogError(
            f"{table}[{record.get('id')}]: 'filename' must be a non-empty "
            "string."
        )
    return value


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise CatalogError(f"Expected a string, found {type(value).__name__}.")
    value = value.strip()
    return value or None


def _lookup(
    indexed: Mapping[int, T], key: Any, table: str, field: str
) -> Optional[T]:
    if key is None:
        return None
    try:
        return indexed[key]
    except (KeyError, TypeError) as exc:
        raise CatalogError(
            f"{table}.{field} references unknown id {key!r}."
        ) from exc


def _lookup_many(
    indexed: Mapping[int, T], keys: Any, table: str, field: str
) -> tuple[T, ...]:
    if keys is None:
        return ()
    if not isinstance(keys, list):
        raise CatalogError(f"{table}.{field} must be a list of ids.")
    resolved: List[T] = []
    for key in keys:
        entity = _lookup(indexed, key, table, field)
        if entity is not None and entity not in resolved:
            resolved.append(entity)
    return tuple(resolved)
