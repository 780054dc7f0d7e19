"""Shared testing fixtures for the anime_quiz test suite."""

from .catalog import CatalogBuilder, populated_catalog  # noqa: F401

__all__ = ["CatalogBuilder", "populated_catalog"]
