"""Turn sampled catalog entities into multiple-choice questions.

Every :class:`QuestionShape` has one builder registered in ``_BUILDERS``.
A builder extracts the correct answer from the sampled entity and draws
three distractors from the matching pool of the catalog store, always
excluding the source entity itself by identity.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from ..catalog.models import Anime, CharacterVersion, Image, Music, Staff
from ..catalog.store import (
    CatalogStore,
    Category,
    Pool,
    PoolEntity,
    SampledEntity,
    entity_id,
)
from .errors import DataConsistencyError
from .models import CHOICE_COUNT, Question, QuestionShape

T = TypeVar("T")

ANIME_NAME_TITLE = "Which anime this image comes from?"
CHARACTER_NAME_TITLE = "What is the name of this character?"
VOICE_ACTOR_NAME_TITLE = "Who is the voice actor/actress of this character?"
MUSIC_NAME_TITLE = "What is the name of this music?"
SINGER_NAME_TITLE = "Who is the singer of this music?"


@dataclass(frozen=True)
class BuildContext:
    """Per-request collaborators shared by every builder call."""

    store: CatalogStore
    rng: random.Random


Builder = Callable[[BuildContext, SampledEntity], Question]


def available_shapes(
    category: Category, entity: SampledEntity
) -> tuple[QuestionShape, ...]:
    """Return the shapes ``entity`` can be asked as.

    The name shapes are always available; the voice actor and singer shapes
    need at least one linked staff member.
    """

    if category is Category.ANIME_IMAGE:
        return (QuestionShape.ANIME_NAME,)
    if category is Category.CHARACTER_IMAGE:
        version = _character_version_of(entity)
        if version.voice_actors:
            return (
                QuestionShape.CHARACTER_NAME,
                QuestionShape.VOICE_ACTOR_NAME,
            )
        return (QuestionShape.CHARACTER_NAME,)
    if category is Category.ANIME_MUSIC:
        music = _music_of(entity)
        if music.singers:
            return (QuestionShape.MUSIC_NAME, QuestionShape.SINGER_NAME)
        return (QuestionShape.MUSIC_NAME,)
    raise ValueError(f"Unsupported category: {category!r}")


def build_question(
    store: CatalogStore,
    category: Category,
    entity: SampledEntity,
    rng: random.Random,
    *,
    shape: Optional[QuestionShape] = None,
) -> Question:
    """Build one question for ``entity``, picking a shape at random.

    ``shape`` forces a specific template; it must be one of
    :func:`available_shapes` for the entity.
    """

    shapes = available_shapes(category, entity)
    if shape is None:
        shape = rng.choice(shapes)
    elif shape not in shapes:
        raise ValueError(
            f"Shape {shape.key} is not available for this {category.label}."
        )
    return _BUILDERS[shape](BuildContext(store=store, rng=rng), entity)


def format_character_version(
    version: CharacterVersion, rng: random.Random
) -> str:
    """Render ``Name[: Version][, Anime]`` with a randomly chosen anime."""

    character = version.character
    if character is None:
        raise DataConsistencyError(
            f"Character version {version.character_version_id} has no "
            "character."
        )
    text = character.name
    if version.version_name:
        text += f": {version.version_name}"
    if version.animes:
        text += f", {rng.choice(version.animes).name}"
    return text


def format_music(music: Music) -> str:
    return f"{music.name}, {_anime_of_music(music).name}"


def _build_anime_name(ctx: BuildContext, entity: SampledEntity) -> Question:
    image = _image_of(entity)
    anime = image.anime
    if anime is None:
        raise DataConsistencyError(
            f"Anime image {image.image_id} is not linked to an anime."
        )
    distractors = _draw_distractors(
        ctx,
        Pool.ANIME,
        answer=anime.name,
        exclude_id=anime.anime_id,
        render=lambda other: _as(other, Anime).name,
    )
    return _question(
        QuestionShape.ANIME_NAME,
        ANIME_NAME_TITLE,
        anime.name,
        distractors,
        image_path=image.path,
    )


def _build_character_name(
    ctx: BuildContext, entity: SampledEntity
) -> Question:
    image = _image_of(entity)
    version = _character_version_of(image)
    answer = format_character_version(version, ctx.rng)
    distractors = _draw_distractors(
        ctx,
        Pool.CHARACTER_VERSION,
        answer=answer,
        exclude_id=version.character_version_id,
        render=lambda other: format_character_version(
            _as(other, CharacterVersion), ctx.rng
        ),
    )
    return _question(
        QuestionShape.CHARACTER_NAME,
        CHARACTER_NAME_TITLE,
        answer,
        distractors,
        image_path=image.path,
    )


def _build_voice_actor_name(
    ctx: BuildContext, entity: SampledEntity
) -> Question:
    image = _image_of(entity)
    version = _character_version_of(image)
    if not version.voice_actors:
        raise DataConsistencyError(
            f"Character version {version.character_version_id} has no "
            "voice actors."
        )
    actor = ctx.rng.choice(version.voice_actors)
    distractors = _draw_distractors(
        ctx,
        Pool.VOICE_ACTOR,
        answer=actor.name,
        exclude_id=actor.staff_id,
        render=lambda other: _as(other, Staff).name,
    )
    return _question(
        QuestionShape.VOICE_ACTOR_NAME,
        VOICE_ACTOR_NAME_TITLE,
        actor.name,
        distractors,
        image_path=image.path,
    )


def _build_music_name(ctx: BuildContext, entity: SampledEntity) -> Question:
    music = _music_of(entity)
    answer = format_music(music)
    distractors = _draw_distractors(
        ctx,
        Pool.MUSIC,
        answer=answer,
        exclude_id=music.music_id,
        render=lambda other: format_music(_as(other, Music)),
    )
    return _question(
        QuestionShape.MUSIC_NAME,
        MUSIC_NAME_TITLE,
        answer,
        distractors,
        music_path=music.path,
    )


def _build_singer_name(ctx: BuildContext, entity: SampledEntity) -> Question:
    music = _music_of(entity)
    if not music.singers:
        raise DataConsistencyError(f"Music {music.music_id} has no singers.")
    singer = ctx.rng.choice(music.singers)
    distractors = _draw_distractors(
        ctx,
        Pool.SINGER,
        answer=singer.name,
        exclude_id=singer.staff_id,
        render=lambda other: _as(other, Staff).name,
    )
    return _question(
        QuestionShape.SINGER_NAME,
        SINGER_NAME_TITLE,
        singer.name,
        distractors,
        music_path=music.path,
    )


_BUILDERS: Dict[QuestionShape, Builder] = {
    QuestionShape.ANIME_NAME: _build_anime_name,
    QuestionShape.CHARACTER_NAME: _build_character_name,
    QuestionShape.VOICE_ACTOR_NAME: _build_voice_actor_name,
    QuestionShape.MUSIC_NAME: _build_music_name,
    QuestionShape.SINGER_NAME: _build_singer_name,
}


def _draw_distractors(
    ctx: BuildContext,
    pool: Pool,
    *,
    answer: str,
    exclude_id: int,
    render: Callable[[PoolEntity], str],
) -> List[str]:
    """Collect ``CHOICE_COUNT - 1`` texts distinct from ``answer`` and each other.

    Drawn entities are excluded from later draws whether or not their text
    was usable, so the loop ends once the pool is exhausted.
    """

    needed = CHOICE_COUNT - 1
    excluded = {exclude_id}
    seen = {answer}
    picked: List[str] = []
    while len(picked) < needed:
        batch: Sequence[PoolEntity] = ctx.store.sample_other_distinct(
            pool, frozenset(excluded), needed - len(picked), ctx.rng
        )
        if not batch:
            raise DataConsistencyError(
                f"Not enough distinct {pool.value} entries to build "
                f"{needed} distractors for '{answer}'."
            )
        for other in batch:
            excluded.add(entity_id(other))
            text = render(other)
            if text in seen:
                continue
            seen.add(text)
            picked.append(text)
    return picked


def _question(
    shape: QuestionShape,
    title: str,
    answer: str,
    distractors: Sequence[str],
    *,
    image_path: Optional[str] = None,
    music_path: Optional[str] = None,
) -> Question:
    return Question(
        title=title,
        answer=answer,
        choices=(answer, *distractors),
        category=shape.category,
        shape=shape,
        image_path=image_path,
        music_path=music_path,
    )


def _image_of(entity: SampledEntity) -> Image:
    return _as(entity, Image)


def _music_of(entity: SampledEntity) -> Music:
    return _as(entity, Music)


def _character_version_of(entity: SampledEntity) -> CharacterVersion:
    image = _image_of(entity)
    if image.character_version is None:
        raise DataConsistencyError(
            f"Character image {image.image_id} is not linked to a character "
            "version."
        )
    return image.character_version


def _anime_of_music(music: Music) -> Anime:
    if music.anime is None:
        raise DataConsistencyError(
            f"Music {music.music_id} is not linked to an anime."
        )
    return music.anime


def _as(entity: object, kind: type[T]) -> T:
    if not isinstance(entity, kind):
        raise DataConsistencyError(
            f"Expected {kind.__name__}, received {type(entity).__name__}."
        )
    return entity
