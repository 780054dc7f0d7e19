"""Catalog entities, the store contract, and the in-memory store."""

from .memory import (
    TABLES,
    Catalog,
    InMemoryCatalogStore,
    build_catalog,
    load_catalog,
)
from .models import Anime, Character, CharacterVersion, Image, Music, Staff
from .store import (
    CATEGORY_ORDER,
    CatalogError,
    CatalogStore,
    Category,
    Pool,
    entity_id,
)

__all__ = [
    "Anime",
    "CATEGORY_ORDER",
    "Catalog",
    "CatalogError",
    "CatalogStore",
    "Category",
    "Character",
    "CharacterVersion",
    "Image",
    "InMemoryCatalogStore",
    "Music",
    "Pool",
    "Staff",
    "TABLES",
    "build_catalog",
    "entity_id",
    "load_catalog",
]
