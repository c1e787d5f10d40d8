"""Tests for candidate product selection."""

from savyr.candidates import select_candidates
from savyr.models import FlyerResult, Preferences, Product


def _flyer(store, *products):
    return FlyerResult(
        store_name=store,
        products=[Product(name=n, price=p, category=c) for n, p, c in products],
    )


class TestSelectCandidates:
    def test_projects_minimal_fields(self):
        flyer = FlyerResult(
            store_name="A",
            products=[Product("Rice", 1.99, "pantry", unit="bag", on_sale=True)],
        )
        assert select_candidates([flyer], Preferences()) == [
            {"name": "Rice", "price": 1.99, "category": "pantry"}
        ]

    def test_drops_allergens(self):
        flyer = _flyer(
            "A",
            ("Peanut Butter", 3.49, "pantry"),
            ("Almond Milk", 2.99, "dairy"),
            ("Apples", 1.29, "produce"),
        )
        result = select_candidates([flyer], Preferences(allergies=["nuts"]))
        assert [c["name"] for c in result] == ["Apples"]

    def test_dedupes_across_flyers_keeping_first(self):
        a = _flyer("A", ("Bananas", 0.59, "produce"), ("Eggs", 2.99, "dairy"))
        b = _flyer("B", ("  bananas ", 0.49, "produce"), ("Bread", 2.50, "bakery"))
        result = select_candidates([a, b], Preferences())
        assert [c["name"] for c in result] == ["Bananas", "Eggs", "Bread"]
        assert result[0]["price"] == 0.59

    def test_allergen_filter_runs_before_dedupe(self):
        a = _flyer("A", ("Walnut Bread", 3.0, "bakery"))
        b = _flyer("B", ("Bread", 2.0, "bakery"))
        result = select_candidates([a, b], Preferences(allergies=["nuts"]))
        assert result == [{"name": "Bread", "price": 2.0, "category": "bakery"}]

    def test_caps_candidate_count(self):
        flyer = _flyer("A", *[(f"Item {i}", 1.0, "other") for i in range(80)])
        result = select_candidates([flyer], Preferences(), max_candidates=50)
        assert len(result) == 50
        assert result[-1]["name"] == "Item 49"

    def test_empty(self):
        assert select_candidates([FlyerResult(), FlyerResult()], Preferences()) == []
