"""Allergen-safe, de-duplicated product shortlist for menu prompting."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .allergens import is_forbidden
from .models import FlyerResult, Preferences

logger = logging.getLogger(__name__)

DEFAULT_MAX_CANDIDATES = 50


def select_candidates(
    flyers: Iterable[FlyerResult],
    preferences: Preferences,
    max_candidates: int = DEFAULT_MAX_CANDIDATES,
    keyword_table: dict[str, list[str]] | None = None,
) -> list[dict]:
    """Shortlist flyer products for the menu prompt.

    Products matching an allergy are dropped first, then duplicates by
    case-insensitive name (first wins), then the list is capped at
    ``max_candidates``. Each entry keeps only name, price and category.
    """
    seen: set[str] = set()
    result: list[dict] = []
    excluded = 0

    for flyer in flyers:
        for product in flyer.products:
            if is_forbidden(product.name, preferences.allergies, keyword_table):
                excluded += 1
                continue
            key = product.name.strip().lower()
            if key in seen:
                continue
            seen.add(key)
            result.append(
                {
                    "name": product.name,
                    "price": product.price,
                    "category": product.category,
                }
            )

    if excluded:
        logger.info("Excluded %d products matching allergies", excluded)
    if len(result) > max_candidates:
        logger.info(
            "Capping %d candidate products at %d", len(result), max_candidates
        )
    return result[:max_candidates]
