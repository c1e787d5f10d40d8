"""Rule checks for a proposed weekly menu."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence

from .allergens import is_forbidden, violates_diet
from .models import MEAL_TYPES, WEEKDAYS, CandidateMeal


def validate_menu(
    meals: Sequence[CandidateMeal],
    allergies: Iterable[str],
    *,
    days: Sequence[str] = WEEKDAYS,
    meal_types: Sequence[str] = MEAL_TYPES,
    keyword_table: dict[str, list[str]] | None = None,
) -> list[str]:
    """Return every rule the menu breaks; an empty list means valid.

    Checks the total count, the per-type count, required fields, allergen
    keywords in ingredients, name uniqueness per type and that no weekday
    carries two meals of the same type.
    """
    allergies = list(allergies)
    violations: list[str] = []

    expected = len(days) * len(meal_types)
    if len(meals) != expected:
        violations.append(f"expected {expected} meals, got {len(meals)}")

    counts = Counter(m.type for m in meals)
    for meal_type in meal_types:
        if counts[meal_type] != len(days):
            violations.append(
                f"expected {len(days)} {meal_type} meals, got {counts[meal_type]}"
            )
    for meal_type in sorted(set(counts) - set(meal_types) - {""}):
        violations.append(f"unexpected meal type {meal_type!r}")

    for i, meal in enumerate(meals, 1):
        label = meal.name or f"meal #{i}"
        missing = [
            field
            for field, value in (
                ("day", meal.day),
                ("type", meal.type),
                ("name", meal.name),
                ("ingredients", meal.ingredients),
            )
            if not value
        ]
        if missing:
            violations.append(f"{label} is missing {', '.join(missing)}")
        elif meal.day not in days:
            violations.append(f"{label} has unknown day {meal.day!r}")

        for ingredient in meal.ingredients:
            if is_forbidden(ingredient, allergies, keyword_table):
                violations.append(
                    f"{label} contains allergen ingredient {ingredient!r}"
                )

    names: dict[tuple[str, str], int] = Counter(
        (m.type, m.name.strip().lower()) for m in meals if m.name
    )
    for (meal_type, name), n in names.items():
        if n > 1:
            violations.append(f"{meal_type} name {name!r} used {n} times")

    slots = Counter((m.type, m.day) for m in meals if m.type and m.day)
    for (meal_type, day), n in slots.items():
        if n > 1:
            violations.append(f"{day} has {n} {meal_type} meals")

    return violations


def dietary_violations(
    meals: Sequence[CandidateMeal],
    restrictions: Iterable[str],
    diet_table: dict[str, list[str]] | None = None,
) -> list[str]:
    """Ingredients that break vegetarian/vegan style restrictions."""
    restrictions = list(restrictions)
    violations: list[str] = []
    if not restrictions:
        return violations
    for i, meal in enumerate(meals, 1):
        for ingredient in meal.ingredients:
            if violates_diet(ingredient, restrictions, diet_table):
                violations.append(
                    f"{meal.name or f'meal #{i}'} breaks "
                    f"{', '.join(restrictions)} with {ingredient!r}"
                )
    return violations
