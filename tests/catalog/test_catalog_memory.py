from __future__ import annotations

import random

import pytest

from anime_quiz.catalog import (
    CatalogError,
    Category,
    InMemoryCatalogStore,
    Pool,
    build_catalog,
    load_catalog,
)
from anime_quiz.catalog.models import Image, media_path

from fixtures import CatalogBuilder, populated_catalog


def test_load_catalog_reads_jsonl_tables(tmp_path):
    directory = populated_catalog(
        anime_images=2, character_images=3, musics=4
    ).write(tmp_path / "catalog")

    catalog = load_catalog(directory)

    assert len(catalog.animes) == 6
    assert len(catalog.images) == 5
    assert len(catalog.musics) == 4
    version = catalog.images[2].character_version
    assert version.character.name == "Character 1"
    assert [a.name for a in version.animes] == ["Anime 1"]
    assert [s.name for s in version.voice_actors] == ["Voice Actor 1"]
    assert catalog.musics[0].singers[0].name == "Singer 1"


def test_load_catalog_missing_directory(tmp_path):
    with pytest.raises(CatalogError):
        load_catalog(tmp_path / "absent")


def test_load_catalog_missing_tables_are_empty(tmp_path):
    directory = tmp_path / "catalog"
    directory.mkdir()
    (directory / "animes.jsonl").write_text(
        '{"id": 1, "name": "Mushishi"}\n\n', encoding="utf-8"
    )

    catalog = load_catalog(directory)

    assert [a.name for a in catalog.animes] == ["Mushishi"]
    assert catalog.images == ()
    assert catalog.musics == ()


def test_load_catalog_reports_bad_json(tmp_path):
    directory = tmp_path / "catalog"
    directory.mkdir()
    (directory / "staff.jsonl").write_text(
        '{"id": 1, "name": "A"}\n{"id": 2,\n', encoding="utf-8"
    )

    with pytest.raises(CatalogError) as excinfo:
        load_catalog(directory)

    assert "staff.jsonl:2" in str(excinfo.value)


def test_load_catalog_applies_media_prefixes(tmp_path):
    directory = populated_catalog(
        anime_images=1, character_images=0, musics=1
    ).write(tmp_path / "catalog")

    catalog = load_catalog(
        directory, image_prefix="https://cdn/img/", music_prefix="/m"
    )

    assert catalog.images[0].path == "https://cdn/img/anime-1.png"
    assert catalog.musics[0].path == "/m/music-1.mp3"


def test_media_path_defaults():
    assert Image(image_id=1, filename="a.png").path == "/assets/images/a.png"
    assert media_path("/assets/musics/", "b.mp3") == "/assets/musics/b.mp3"


@pytest.mark.parametrize(
    "tables",
    [
        {"animes": [{"id": 1, "name": "A"}, {"id": 1, "name": "B"}]},
        {"animes": [{"id": 1, "name": "A"}, {"id": 2, "name": "A"}]},
        {"staff": [{"id": 1, "name": "S"}, {"id": 2, "name": "S"}]},
        {"images": [{"id": 1, "filename": "x.png", "anime_id": 9}]},
        {"musics": [{"id": 1, "name": "M", "filename": "m.mp3",
                     "singer_ids": [4]}]},
        {"character_versions": [{"id": 1, "character_id": 3}]},
        {"animes": [{"id": "1", "name": "A"}]},
        {"animes": [{"id": 1, "name": "  "}]},
        {"images": [{"id": 1, "anime_id": None}]},
        {"unknown": []},
    ],
)
def test_build_catalog_rejects_invalid_tables(tables):
    with pytest.raises(CatalogError):
        build_catalog(tables)


def test_build_catalog_rejects_image_with_two_owners():
    builder = CatalogBuilder()
    anime = builder.anime("A")
    version = builder.version(builder.character("C"), anime_ids=[anime])
    builder.tables["images"].append(
        {
            "id": 1,
            "filename": "both.png",
            "anime_id": anime,
            "character_version_id": version,
        }
    )

    with pytest.raises(CatalogError):
        builder.build()


def test_store_counts_eligible_per_category():
    builder = populated_catalog(anime_images=2, character_images=3, musics=4)
    builder.tables["images"].append({"id": 99, "filename": "loose.png"})
    store = builder.store()

    assert store.count_eligible(Category.ANIME_IMAGE) == 2
    assert store.count_eligible(Category.CHARACTER_IMAGE) == 3
    assert store.count_eligible(Category.ANIME_MUSIC) == 4


def test_staff_pools_are_split_by_role():
    store = populated_catalog().store()
    rng = random.Random(0)

    actors = store.sample_other_distinct(Pool.VOICE_ACTOR, set(), 50, rng)
    singers = store.sample_other_distinct(Pool.SINGER, set(), 50, rng)

    assert sorted(s.name for s in actors) == [
        f"Voice Actor {i}" for i in range(1, 7)
    ]
    assert sorted(s.name for s in singers) == [
        f"Singer {i}" for i in range(1, 7)
    ]


def test_sample_other_distinct_honours_exclusions():
    store = populated_catalog().store()

    for seed in range(10):
        others = store.sample_other_distinct(
            Pool.ANIME, {1, 2}, 3, random.Random(seed)
        )
        ids = [a.anime_id for a in others]
        assert len(ids) == 3
        assert len(set(ids)) == 3
        assert not {1, 2} & set(ids)


def test_sample_distinct_caps_at_pool_size():
    store = populated_catalog(anime_images=2).store()

    sampled = store.sample_distinct(Category.ANIME_IMAGE, 5, random.Random())

    assert len(sampled) == 2


def test_sample_rejects_negative_size():
    store = populated_catalog().store()

    with pytest.raises(ValueError):
        store.sample_distinct(Category.ANIME_IMAGE, -1, random.Random())


def test_store_from_directory(tmp_path):
    directory = populated_catalog(musics=0).write(tmp_path / "catalog")

    store = InMemoryCatalogStore.from_directory(directory)

    assert store.count_eligible(Category.ANIME_MUSIC) == 0
    assert len(store.catalog.images) == 20
