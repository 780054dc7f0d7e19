"""Proportional split of a question count across categories."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from ..catalog.store import CATEGORY_ORDER, CatalogStore, Category

Allocation = Mapping[Category, int]


@dataclass(frozen=True)
class Availability:
    """Number of eligible entities per category at request time."""

    anime_image: int = 0
    character_image: int = 0
    anime_music: int = 0

    def __post_init__(self) -> None:
        for category in CATEGORY_ORDER:
            if self[category] < 0:
                raise ValueError(
                    f"Availability for {category.value} must be >= 0."
                )

    def __getitem__(self, category: Category) -> int:
        return getattr(self, category.value)

    @property
    def total(self) -> int:
        return sum(self[category] for category in CATEGORY_ORDER)

    def as_dict(self) -> dict[str, int]:
        data = {category.value: self[category] for category in CATEGORY_ORDER}
        data["total"] = self.total
        return data


def count_availability(store: CatalogStore) -> Availability:
    """Query ``store`` for the eligible count of every category."""

    return Availability(
        **{
            category.value: store.count_eligible(category)
            for category in CATEGORY_ORDER
        }
    )


def plan_allocation(
    question_count: int, availability: Availability
) -> Allocation:
    """Split ``question_count`` across categories in proportion to supply.

    Each category first receives ``floor(question_count * share)`` where
    ``share`` is its fraction of the total. The remainder is then handed out
    one question at a time, cycling through the categories in their fixed
    order and skipping any category already at its availability ceiling.

    Raises :class:`ValueError` when the request cannot be satisfied, which
    callers are expected to have ruled out beforehand.
    """

    total = availability.total
    if total <= 0:
        raise ValueError("Cannot allocate questions from an empty catalog.")
    if question_count < 0 or question_count > total:
        raise ValueError(
            f"Cannot allocate {question_count} question(s) from {total} "
            "available."
        )

    # floor(count * avail / total), kept in integers to avoid float drift.
    counts = {
        category: question_count * availability[category] // total
        for category in CATEGORY_ORDER
    }
    remainder = question_count - sum(counts.values())
    while remainder > 0:
        for category in CATEGORY_ORDER:
            if remainder == 0:
                break
            if counts[category] < availability[category]:
                counts[category] += 1
                remainder -= 1
    return MappingProxyType(counts)
