from __future__ import annotations

import random

import pytest

from anime_quiz.catalog import Category
from anime_quiz.engine import (
    CHOICE_COUNT,
    DataConsistencyError,
    QuestionShape,
    available_shapes,
    build_question,
)
from anime_quiz.engine.builders import (
    ANIME_NAME_TITLE,
    CHARACTER_NAME_TITLE,
    MUSIC_NAME_TITLE,
    SINGER_NAME_TITLE,
    VOICE_ACTOR_NAME_TITLE,
    format_character_version,
)

from fixtures import CatalogBuilder, populated_catalog


def _assert_well_formed(question):
    assert len(question.choices) == CHOICE_COUNT
    assert len(set(question.choices)) == CHOICE_COUNT
    assert question.choices.count(question.answer) == 1


def _character_images(store):
    return [i for i in store.catalog.images if i.character_version is not None]


def test_anime_name_question():
    store = populated_catalog().store()
    image = store.catalog.images[0]

    question = build_question(
        store, Category.ANIME_IMAGE, image, random.Random(1)
    )

    assert question.shape is QuestionShape.ANIME_NAME
    assert question.category is Category.ANIME_IMAGE
    assert question.title == ANIME_NAME_TITLE
    assert question.answer == "Anime 1"
    assert question.image_path == "/assets/images/anime-1.png"
    assert question.music_path is None
    assert all(choice.startswith("Anime ") for choice in question.choices)
    _assert_well_formed(question)


def test_character_name_question_formats_version_and_anime():
    store = populated_catalog(anime_images=0).store()
    first, second = _character_images(store)[:2]

    plain = build_question(
        store,
        Category.CHARACTER_IMAGE,
        first,
        random.Random(2),
        shape=QuestionShape.CHARACTER_NAME,
    )
    versioned = build_question(
        store,
        Category.CHARACTER_IMAGE,
        second,
        random.Random(2),
        shape=QuestionShape.CHARACTER_NAME,
    )

    assert plain.title == CHARACTER_NAME_TITLE
    assert plain.answer == "Character 1, Anime 1"
    assert versioned.answer == "Character 2: Child, Anime 2"
    assert plain.image_path == "/assets/images/character-1.png"
    _assert_well_formed(plain)
    _assert_well_formed(versioned)


def test_voice_actor_question_draws_from_voice_actors_only():
    store = populated_catalog().store()
    image = _character_images(store)[0]

    question = build_question(
        store,
        Category.CHARACTER_IMAGE,
        image,
        random.Random(5),
        shape=QuestionShape.VOICE_ACTOR_NAME,
    )

    assert question.title == VOICE_ACTOR_NAME_TITLE
    assert question.answer == "Voice Actor 1"
    assert all(c.startswith("Voice Actor ") for c in question.choices)
    _assert_well_formed(question)


def test_music_name_question():
    store = populated_catalog().store()
    music = store.catalog.musics[0]

    question = build_question(
        store,
        Category.ANIME_MUSIC,
        music,
        random.Random(8),
        shape=QuestionShape.MUSIC_NAME,
    )

    assert question.title == MUSIC_NAME_TITLE
    assert question.answer == "Song 1, Anime 1"
    assert question.music_path == "/assets/musics/music-1.mp3"
    assert question.image_path is None
    _assert_well_formed(question)


def test_singer_question_draws_from_singers_only():
    store = populated_catalog().store()
    music = store.catalog.musics[0]

    question = build_question(
        store,
        Category.ANIME_MUSIC,
        music,
        random.Random(13),
        shape=QuestionShape.SINGER_NAME,
    )

    assert question.title == SINGER_NAME_TITLE
    assert question.answer == "Singer 1"
    assert all(c.startswith("Singer ") for c in question.choices)
    _assert_well_formed(question)


def test_shapes_without_staff_exclude_staff_questions():
    builder = populated_catalog(anime_images=0, character_images=0, musics=4)
    character = builder.character("Silent")
    version = builder.version(character, anime_ids=[1])
    builder.character_image(version)
    builder.music("Instrumental", 1)
    store = builder.store()
    silent_image = _character_images(store)[-1]
    instrumental = store.catalog.musics[-1]

    assert available_shapes(Category.CHARACTER_IMAGE, silent_image) == (
        QuestionShape.CHARACTER_NAME,
    )
    assert available_shapes(Category.ANIME_MUSIC, instrumental) == (
        QuestionShape.MUSIC_NAME,
    )
    for seed in range(25):
        rng = random.Random(seed)
        assert (
            build_question(
                store, Category.CHARACTER_IMAGE, silent_image, rng
            ).shape
            is QuestionShape.CHARACTER_NAME
        )
        assert (
            build_question(store, Category.ANIME_MUSIC, instrumental, rng).shape
            is QuestionShape.MUSIC_NAME
        )


def test_forcing_unavailable_shape_raises():
    builder = populated_catalog(anime_images=0, character_images=0, musics=4)
    builder.music("Instrumental", 1)
    store = builder.store()

    with pytest.raises(ValueError):
        build_question(
            store,
            Category.ANIME_MUSIC,
            store.catalog.musics[-1],
            random.Random(),
            shape=QuestionShape.SINGER_NAME,
        )


def test_too_few_distractors_is_a_consistency_error():
    store = populated_catalog(
        anime_images=3, character_images=0, musics=0, pool_size=3
    ).store()

    with pytest.raises(DataConsistencyError):
        build_question(
            store, Category.ANIME_IMAGE, store.catalog.images[0], random.Random()
        )


def test_distractors_skip_duplicate_texts():
    builder = CatalogBuilder()
    anime = builder.anime("Shared")
    hero = builder.version(builder.character("Hero"), anime_ids=[anime])
    for _ in range(2):
        builder.version(builder.character("Twin"), anime_ids=[anime])
    for name in ("Other 1", "Other 2"):
        builder.version(builder.character(name), anime_ids=[anime])
    builder.character_image(hero)
    store = builder.store()
    image = store.catalog.images[0]

    for seed in range(20):
        question = build_question(
            store,
            Category.CHARACTER_IMAGE,
            image,
            random.Random(seed),
            shape=QuestionShape.CHARACTER_NAME,
        )
        assert question.answer == "Hero, Shared"
        _assert_well_formed(question)
        assert set(question.choices) == {
            "Hero, Shared",
            "Twin, Shared",
            "Other 1, Shared",
            "Other 2, Shared",
        }


def test_music_without_anime_is_a_consistency_error():
    builder = populated_catalog(anime_images=0, character_images=0, musics=4)
    builder.music("Orphan", None)
    store = builder.store()

    with pytest.raises(DataConsistencyError):
        build_question(
            store,
            Category.ANIME_MUSIC,
            store.catalog.musics[-1],
            random.Random(),
            shape=QuestionShape.MUSIC_NAME,
        )


def test_format_character_version_without_animes():
    builder = CatalogBuilder()
    builder.version(builder.character("Loner"), version_name="Adult")
    version = builder.build().character_versions[0]

    assert format_character_version(version, random.Random()) == "Loner: Adult"
