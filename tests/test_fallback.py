"""Tests for the deterministic fallback menu."""

from collections import Counter

import pytest

from savyr.allergens import ALLERGEN_KEYWORDS, DIETARY_KEYWORDS, is_forbidden, violates_diet
from savyr.fallback import (
    NEUTRAL_INGREDIENTS,
    RESERVE_INGREDIENTS,
    TEMPLATE_BANKS,
    fallback_menu,
)
from savyr.models import MEAL_TYPES, WEEKDAYS, Preferences
from savyr.validator import dietary_violations, validate_menu

ALL_ALLERGIES = list(ALLERGEN_KEYWORDS)


class TestTemplateBanks:
    def test_seven_per_bank(self):
        for meal_type in MEAL_TYPES:
            assert len(TEMPLATE_BANKS[meal_type]) == 7

    def test_names_unique_per_bank(self):
        for bank in TEMPLATE_BANKS.values():
            assert len({t.name.lower() for t in bank}) == len(bank)

    def test_neutral_pool_is_safe_for_everything(self):
        for ingredient in NEUTRAL_INGREDIENTS:
            assert not is_forbidden(ingredient, ALL_ALLERGIES)
            assert not violates_diet(ingredient, list(DIETARY_KEYWORDS))


class TestFallbackMenu:
    def test_no_preferences_uses_templates(self):
        meals = fallback_menu(Preferences())
        assert len(meals) == 21
        assert validate_menu(meals, []) == []
        assert meals[0].name == "Avocado Toast with Eggs"
        assert all("Garden" not in m.name for m in meals)

    def test_fixed_order(self):
        meals = fallback_menu(Preferences())
        assert [(m.day, m.type) for m in meals[:4]] == [
            ("Monday", "breakfast"),
            ("Monday", "lunch"),
            ("Monday", "dinner"),
            ("Tuesday", "breakfast"),
        ]

    def test_deterministic(self):
        prefs = Preferences(allergies=["nuts", "dairy"])
        assert fallback_menu(prefs) == fallback_menu(prefs)

    @pytest.mark.parametrize(
        "allergies,restrictions",
        [
            (["nuts"], []),
            (["dairy", "gluten"], []),
            (ALL_ALLERGIES, []),
            (ALL_ALLERGIES, ["vegan"]),
            ([], ["vegetarian"]),
            (["kiwi", "banana"], ["vegan", "keto"]),
        ],
    )
    def test_always_valid(self, allergies, restrictions):
        prefs = Preferences(allergies=allergies, dietary_restrictions=restrictions)
        meals = fallback_menu(prefs)

        assert len(meals) == 21
        assert Counter(m.type for m in meals) == {"breakfast": 7, "lunch": 7, "dinner": 7}
        assert validate_menu(meals, allergies) == []
        assert dietary_violations(meals, restrictions) == []
        for meal in meals:
            assert meal.instructions
            assert meal.cost_for_one_person > 0

    def test_nut_allergy_drops_nut_templates(self):
        names = {m.name for m in fallback_menu(Preferences(allergies=["nuts"]))}
        assert "Peanut Butter Banana Toast" not in names
        assert "Fruit Smoothie Bowl" not in names
        assert "Vegetable Curry" not in names
        assert "Garden Breakfast Plate 1" in names

    def test_fillers_have_unique_names(self):
        prefs = Preferences(allergies=ALL_ALLERGIES, dietary_restrictions=["vegan"])
        meals = fallback_menu(prefs)
        lunches = [m.name for m in meals if m.type == "lunch"]
        assert len(set(lunches)) == 7
        assert "Lentil Soup" in lunches
        assert "Garden Lunch Plate 1" in lunches

    def test_custom_arity(self):
        meals = fallback_menu(
            Preferences(),
            days=["Saturday", "Sunday"],
            meal_types=["breakfast", "snack"],
        )
        assert len(meals) == 4
        assert [m.type for m in meals] == ["breakfast", "snack", "breakfast", "snack"]
        assert meals[1].name == "Garden Snack Plate 1"
        assert validate_menu(
            meals, [], days=["Saturday", "Sunday"], meal_types=["breakfast", "snack"]
        ) == []

    def test_more_days_than_templates(self):
        days = [f"Day {i}" for i in range(1, 11)]
        meals = fallback_menu(Preferences(), days=days)
        assert len(meals) == 30
        assert validate_menu(meals, [], days=days) == []
        assert len(WEEKDAYS) == 7


class TestReserveIngredients:
    def test_reserve_names_share_no_letters(self):
        letters = [set(name.lower()) for name in RESERVE_INGREDIENTS]
        for i, a in enumerate(letters):
            for b in letters[i + 1:]:
                assert not a & b

    def test_reserve_is_safe_for_everything(self):
        for ingredient in RESERVE_INGREDIENTS:
            assert not is_forbidden(ingredient, ALL_ALLERGIES)
            assert not violates_diet(ingredient, list(DIETARY_KEYWORDS))

    def test_custom_allergies_excluding_every_staple(self):
        allergies = ["a", "o", "e"]
        assert all(is_forbidden(i, allergies) for i in NEUTRAL_INGREDIENTS)

        meals = fallback_menu(Preferences(allergies=allergies))

        assert len(meals) == 21
        assert all(m.ingredients for m in meals)
        assert validate_menu(meals, allergies) == []
        fillers = [m for m in meals if m.name.startswith("Garden")]
        assert fillers
        for meal in fillers:
            assert set(meal.ingredients) <= {"Yuzu", "Figs"}
