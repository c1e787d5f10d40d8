"""Tests for flyer extraction (mocked completion backend)."""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from savyr.errors import BackendNotConfigured, ParseFailure, SchemaViolation, TransportError
from savyr.extractor import FLYER_PROMPT, FlyerExtractor, parse_flyer
from savyr.llm import CompletionBackend
from savyr.models import PRODUCT_CATEGORIES, UNKNOWN_STORE


def _flyer_json(store="FreshMart", products=None):
    if products is None:
        products = [
            {"name": "Bananas", "price": 0.59, "category": "produce", "unit": "lb"},
            {"name": "Chicken Breast", "price": 4.99, "category": "meat",
             "onSale": True, "originalPrice": 6.49},
            {"name": "Whole Milk", "price": 3.29, "category": "dairy"},
        ]
    return json.dumps({"storeName": store, "products": products})


class TestParseFlyer:
    def test_valid(self):
        flyer = parse_flyer(_flyer_json())
        assert flyer.store_name == "FreshMart"
        assert [p.name for p in flyer.products] == [
            "Bananas", "Chicken Breast", "Whole Milk",
        ]
        assert flyer.products[0].unit == "lb"
        assert flyer.products[1].on_sale is True
        assert flyer.products[1].original_price == 6.49
        assert flyer.products[2].unit is None

    def test_missing_store_name(self):
        flyer = parse_flyer('{"products": [{"name": "Rice", "price": 1.5}]}')
        assert flyer.store_name == UNKNOWN_STORE

    def test_post_filter(self):
        text = _flyer_json(products=[
            {"name": "", "price": 1.0},
            {"name": "Free Sample", "price": 0},
            {"name": "Negative", "price": -2},
            {"name": "String Price", "price": "2.99"},
            {"name": "Bool Price", "price": True},
            {"name": "No Price"},
            "not an object",
            {"name": "Apples", "price": 2},
        ])
        flyer = parse_flyer(text)
        assert [p.name for p in flyer.products] == ["Apples"]
        assert flyer.products[0].price == 2.0

    def test_non_finite_prices_dropped(self):
        text = (
            '{"storeName": "X", "products": ['
            '{"name": "Milk", "price": NaN, "category": "dairy"},'
            '{"name": "Eggs", "price": Infinity, "category": "dairy"},'
            '{"name": "Bread", "price": 2.5, "category": "bakery",'
            ' "onSale": true, "originalPrice": Infinity}'
            "]}"
        )
        flyer = parse_flyer(text)
        assert [p.name for p in flyer.products] == ["Bread"]
        assert flyer.products[0].original_price is None

    def test_unknown_category_maps_to_other(self):
        text = _flyer_json(products=[
            {"name": "Dish Soap", "price": 2.0, "category": "household"},
            {"name": "Yogurt", "price": 1.0, "category": "Dairy"},
        ])
        flyer = parse_flyer(text)
        assert flyer.products[0].category == "other"
        assert flyer.products[1].category == "dairy"

    def test_products_not_a_list(self):
        with pytest.raises(SchemaViolation):
            parse_flyer('{"storeName": "X", "products": "none"}')

    def test_products_missing(self):
        with pytest.raises(SchemaViolation):
            parse_flyer('{"storeName": "X", "items": []}')

    def test_unparseable(self):
        with pytest.raises(ParseFailure):
            parse_flyer("no flyer here")

    def test_prompt_lists_categories(self):
        for category in PRODUCT_CATEGORIES:
            assert category in FLYER_PROMPT


class TestFlyerExtractor:
    @pytest.mark.asyncio
    async def test_extract(self):
        backend = AsyncMock(spec=CompletionBackend)
        backend.complete.return_value = "```json\n" + _flyer_json() + "\n```"

        extractor = FlyerExtractor(backend, max_tokens=1500, temperature=0.1)
        flyer = await extractor.extract("flyer.jpg")

        assert flyer.store_name == "FreshMart"
        assert len(flyer.products) == 3
        backend.complete.assert_awaited_once_with(
            FLYER_PROMPT,
            image_paths=["flyer.jpg"],
            max_tokens=1500,
            temperature=0.1,
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            TransportError("503"),
            BackendNotConfigured("no key"),
            FileNotFoundError("missing.jpg"),
        ],
    )
    async def test_errors_degrade_to_empty(self, error):
        backend = AsyncMock(spec=CompletionBackend)
        backend.complete.side_effect = error

        flyer = await FlyerExtractor(backend).extract("flyer.jpg")

        assert flyer.store_name == UNKNOWN_STORE
        assert flyer.products == []

    @pytest.mark.asyncio
    async def test_bad_json_degrades_to_empty(self):
        backend = AsyncMock(spec=CompletionBackend)
        backend.complete.return_value = "I can't read this image."

        flyer = await FlyerExtractor(backend).extract("flyer.jpg")

        assert flyer.store_name == UNKNOWN_STORE
        assert flyer.products == []

    @pytest.mark.asyncio
    async def test_extract_all_keeps_input_order(self):
        async def complete(prompt, *, image_paths, max_tokens, temperature):
            path = image_paths[0]
            # The first image finishes last
            await asyncio.sleep(0.02 if path == "a.jpg" else 0)
            if path == "b.jpg":
                raise TransportError("timeout")
            return _flyer_json(store=path.upper())

        backend = AsyncMock(spec=CompletionBackend)
        backend.complete.side_effect = complete

        flyers = await FlyerExtractor(backend).extract_all(["a.jpg", "b.jpg", "c.jpg"])

        assert [f.store_name for f in flyers] == ["A.JPG", UNKNOWN_STORE, "C.JPG"]
        assert flyers[1].products == []
        assert len(flyers[2].products) == 3

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self):
        backend = AsyncMock(spec=CompletionBackend)
        backend.complete.side_effect = asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await FlyerExtractor(backend).extract("flyer.jpg")
