"""Tests for allergen and dietary keyword matching."""

from savyr.allergens import (
    ALLERGEN_KEYWORDS,
    diet_keywords,
    forbidden_keywords,
    is_forbidden,
    keywords_for,
    violates_diet,
)


class TestKeywordsFor:
    def test_known_label(self):
        assert keywords_for("dairy") == [
            "milk", "cheese", "butter", "yogurt", "cream", "dairy",
        ]

    def test_label_is_case_insensitive(self):
        assert keywords_for("  Nuts ") == ALLERGEN_KEYWORDS["nuts"]

    def test_unknown_label_falls_back_to_itself(self):
        assert keywords_for("Kiwi") == ["kiwi"]

    def test_blank_label(self):
        assert keywords_for("  ") == []


class TestIsForbidden:
    def test_substring_match(self):
        assert is_forbidden("Creamy Peanut Butter", ["nuts"])

    def test_case_insensitive(self):
        assert is_forbidden("WHOLE MILK", ["dairy"])

    def test_no_allergies(self):
        assert not is_forbidden("Peanut butter", [])

    def test_safe_ingredient(self):
        assert not is_forbidden("Rice", ["nuts", "dairy", "gluten", "eggs"])

    def test_unknown_allergy(self):
        assert is_forbidden("Kiwi fruit", ["kiwi"])
        assert not is_forbidden("Apple", ["kiwi"])

    def test_custom_table(self):
        table = {"nightshade": ["tomato", "potato", "pepper"]}
        assert is_forbidden("Sweet potatoes", ["nightshade"], table)
        assert not is_forbidden("Peanuts", ["nightshade"], table)


class TestForbiddenKeywords:
    def test_union_without_duplicates(self):
        keywords = forbidden_keywords(["seafood", "shellfish"])
        assert keywords.count("shrimp") == 1
        assert "fish" in keywords
        assert "oyster" in keywords

    def test_empty(self):
        assert forbidden_keywords([]) == []


class TestDiet:
    def test_vegetarian_excludes_meat(self):
        assert violates_diet("Chicken breast", ["vegetarian"])
        assert not violates_diet("Cheddar cheese", ["vegetarian"])

    def test_vegan_excludes_animal_products(self):
        assert violates_diet("Cheddar cheese", ["vegan"])
        assert violates_diet("Honey", ["Vegan"])
        assert not violates_diet("Lentils", ["vegan"])

    def test_unknown_restriction_imposes_nothing(self):
        assert diet_keywords(["keto", "halal"]) == []
        assert not violates_diet("Bacon", ["keto"])

    def test_vegan_is_superset_of_vegetarian(self):
        assert set(diet_keywords(["vegetarian"])) < set(diet_keywords(["vegan"]))
