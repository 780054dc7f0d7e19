"""Draw duplicate-free samples of quiz material from the catalog."""

from __future__ import annotations

import random
from typing import List

from ..catalog.store import CatalogStore, Category, SampledEntity, entity_id
from .errors import DataConsistencyError


def sample_category(
    store: CatalogStore,
    category: Category,
    n: int,
    rng: random.Random,
) -> List[SampledEntity]:
    """Return exactly ``n`` distinct entities of ``category``.

    The store is trusted for uniformity but not for completeness: a short or
    duplicated sample (e.g. rows deleted after counting) is reported as a
    :class:`DataConsistencyError` rather than silently shrinking the quiz.
    """

    if n <= 0:
        return []
    sampled = list(store.sample_distinct(category, n, rng))
    if len(sampled) != n:
        raise DataConsistencyError(
            f"Expected {n} {category.label} item(s) from the catalog but "
            f"received {len(sampled)}."
        )
    ids = {entity_id(entity) for entity in sampled}
    if len(ids) != n:
        raise DataConsistencyError(
            f"Catalog returned duplicate {category.label} items."
        )
    return sampled
