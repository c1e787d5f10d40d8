"""Structured product extraction from grocery flyer photos."""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Sequence

from .errors import ParseFailure, SchemaViolation, TransportError
from .llm import CompletionBackend
from .models import PRODUCT_CATEGORIES, UNKNOWN_STORE, FlyerResult, Product
from .repair import repair_json

logger = logging.getLogger(__name__)

_CATEGORY_LIST = ", ".join(PRODUCT_CATEGORIES)

FLYER_PROMPT = f"""\
Analyze this grocery flyer and extract ALL food and beverage product information.
Return ONLY a valid JSON object with this exact structure:
{{
  "storeName": "store name if visible or {UNKNOWN_STORE}",
  "products": [
    {{
      "name": "product name",
      "price": 1.99,
      "category": "produce",
      "unit": "lb",
      "onSale": true,
      "originalPrice": 2.49
    }}
  ]
}}

Important rules:
- Return ONLY valid JSON, no extra text
- Include ALL food items, beverages, snacks, and cooking ingredients with clear prices
- Price must be a number, not a string
- "unit", "onSale" and "originalPrice" are optional; omit them when not printed
- If no products found, return an empty products array
- Categories: {_CATEGORY_LIST}
"""


def _is_number(value: object) -> bool:
    # json.loads accepts NaN and Infinity literals
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _parse_product(item: object) -> Product | None:
    """Build a Product from one parsed entry, or None if it is unusable."""
    if not isinstance(item, dict):
        return None

    name = item.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    price = item.get("price")
    if not _is_number(price) or price <= 0:
        return None

    category = item.get("category")
    if not isinstance(category, str) or category.lower() not in PRODUCT_CATEGORIES:
        category = "other"

    unit = item.get("unit")
    on_sale = item.get("onSale")
    original_price = item.get("originalPrice")
    return Product(
        name=name.strip(),
        price=float(price),
        category=category.lower(),
        unit=unit if isinstance(unit, str) and unit.strip() else None,
        on_sale=on_sale if isinstance(on_sale, bool) else None,
        original_price=(
            float(original_price)
            if _is_number(original_price) and original_price > 0
            else None
        ),
    )


def parse_flyer(text: str) -> FlyerResult:
    """Repair and validate a flyer completion.

    Raises:
        ParseFailure: No JSON object could be recovered.
        SchemaViolation: ``products`` is missing or not a list.
    """
    data = repair_json(text)

    products = data.get("products")
    if not isinstance(products, list):
        raise SchemaViolation("flyer response has no 'products' list")

    store_name = data.get("storeName")
    if not isinstance(store_name, str) or not store_name.strip():
        store_name = UNKNOWN_STORE

    parsed = [p for p in (_parse_product(item) for item in products) if p is not None]
    dropped = len(products) - len(parsed)
    if dropped:
        logger.info("Dropped %d unusable products from %s", dropped, store_name)

    return FlyerResult(store_name=store_name.strip(), products=parsed)


class FlyerExtractor:
    """Extract products from flyer images with a vision-capable backend."""

    def __init__(
        self,
        backend: CompletionBackend,
        max_tokens: int = 1500,
        temperature: float = 0.1,
    ) -> None:
        self._backend = backend
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def extract(self, image_path: str) -> FlyerResult:
        """Extract one flyer. Failures degrade to an empty result."""
        try:
            text = await self._backend.complete(
                FLYER_PROMPT,
                image_paths=[image_path],
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
            result = parse_flyer(text)
        except (TransportError, ParseFailure, SchemaViolation, OSError) as exc:
            logger.warning("Flyer extraction failed for %s: %s", image_path, exc)
            return FlyerResult(store_name=UNKNOWN_STORE, products=[])

        logger.info(
            "Extracted %d products from %s (%s)",
            len(result.products),
            image_path,
            result.store_name,
        )
        return result

    async def extract_all(self, image_paths: Sequence[str]) -> list[FlyerResult]:
        """Extract every image concurrently; results follow input order."""
        return list(await asyncio.gather(*(self.extract(p) for p in image_paths)))
