"""Deterministic weekly menu used whenever the model path is unusable.

Three fixed banks of meal templates are filtered through the household's
allergy and dietary rules. Banks that run short are topped up with plain
filler plates built from a pool of staple ingredients that carry none of
the known allergen or animal-product keywords, so the result always passes
``validate_menu``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from .allergens import is_forbidden, violates_diet
from .models import MEAL_TYPES, WEEKDAYS, CandidateMeal, Preferences

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MealTemplate:
    name: str
    ingredients: tuple[str, ...]
    cost_for_one_person: float
    instructions: tuple[str, ...] = field(default_factory=tuple)


BREAKFAST_BANK: tuple[MealTemplate, ...] = (
    MealTemplate(
        "Avocado Toast with Eggs",
        ("Avocado", "Sourdough bread", "Eggs"),
        3.50,
        (
            "Toast the sourdough bread slices",
            "Mash avocado with salt and pepper",
            "Fry the eggs to your preference",
            "Spread avocado on toast and top with eggs",
        ),
    ),
    MealTemplate(
        "Greek Yogurt Parfait",
        ("Greek yogurt", "Granola", "Mixed berries", "Honey"),
        3.00,
        (
            "Spoon yogurt into a glass or bowl",
            "Layer granola and berries on top",
            "Drizzle with honey",
        ),
    ),
    MealTemplate(
        "Oatmeal with Banana",
        ("Rolled oats", "Bananas", "Milk", "Cinnamon"),
        1.75,
        (
            "Simmer oats in milk for 5 minutes",
            "Slice the banana over the oatmeal",
            "Dust with cinnamon",
        ),
    ),
    MealTemplate(
        "Veggie Scrambled Eggs",
        ("Eggs", "Spinach", "Tomatoes", "Cheddar cheese"),
        2.75,
        (
            "Saute spinach and diced tomatoes",
            "Pour in beaten eggs and stir gently",
            "Fold in grated cheese before serving",
        ),
    ),
    MealTemplate(
        "Peanut Butter Banana Toast",
        ("Whole wheat bread", "Peanut butter", "Bananas"),
        2.00,
        (
            "Toast the bread",
            "Spread with peanut butter",
            "Top with banana slices",
        ),
    ),
    MealTemplate(
        "Fruit Smoothie Bowl",
        ("Frozen berries", "Bananas", "Almond milk", "Chia seeds"),
        3.25,
        (
            "Blend berries, banana and almond milk until thick",
            "Pour into a bowl",
            "Sprinkle with chia seeds",
        ),
    ),
    MealTemplate(
        "Breakfast Potato Hash",
        ("Potatoes", "Bell peppers", "Onions", "Olive oil"),
        2.25,
        (
            "Dice potatoes, peppers and onions",
            "Fry potatoes in olive oil until golden",
            "Add peppers and onions and cook until soft",
        ),
    ),
)

LUNCH_BANK: tuple[MealTemplate, ...] = (
    MealTemplate(
        "Turkey Sandwich",
        ("Sliced turkey", "Whole wheat bread", "Lettuce", "Tomatoes", "Mayonnaise"),
        4.50,
        (
            "Spread mayonnaise on the bread",
            "Layer turkey, lettuce and tomato",
            "Close the sandwich and cut in half",
        ),
    ),
    MealTemplate(
        "Chicken Caesar Salad",
        ("Chicken breast", "Romaine lettuce", "Parmesan cheese", "Croutons", "Caesar dressing"),
        5.50,
        (
            "Grill and slice the chicken",
            "Toss lettuce with dressing",
            "Top with chicken, parmesan and croutons",
        ),
    ),
    MealTemplate(
        "Black Bean Quesadilla",
        ("Flour tortillas", "Black beans", "Cheddar cheese", "Salsa"),
        3.75,
        (
            "Fill tortillas with beans and cheese",
            "Cook in a dry pan until crisp on both sides",
            "Serve with salsa",
        ),
    ),
    MealTemplate(
        "Tuna Salad Wrap",
        ("Canned tuna", "Flour tortillas", "Celery", "Mayonnaise"),
        4.00,
        (
            "Mix tuna with mayonnaise and chopped celery",
            "Spread over a tortilla",
            "Roll up tightly and slice",
        ),
    ),
    MealTemplate(
        "Lentil Soup",
        ("Lentils", "Carrots", "Celery", "Onions", "Vegetable broth"),
        2.75,
        (
            "Saute chopped carrots, celery and onions",
            "Add lentils and broth",
            "Simmer for 25 minutes until the lentils are tender",
        ),
    ),
    MealTemplate(
        "Quinoa Veggie Bowl",
        ("Quinoa", "Chickpeas", "Cucumber", "Tomatoes", "Olive oil"),
        4.25,
        (
            "Cook the quinoa and let it cool slightly",
            "Chop cucumber and tomatoes",
            "Combine with chickpeas and dress with olive oil",
        ),
    ),
    MealTemplate(
        "Tofu Stir-Fry",
        ("Tofu", "Broccoli", "Soy sauce", "Rice"),
        3.75,
        (
            "Cook the rice",
            "Brown cubed tofu in a hot pan",
            "Add broccoli and soy sauce and stir-fry for 4 minutes",
        ),
    ),
)

DINNER_BANK: tuple[MealTemplate, ...] = (
    MealTemplate(
        "Spaghetti with Marinara",
        ("Spaghetti", "Marinara sauce", "Parmesan cheese", "Garlic"),
        3.75,
        (
            "Boil the spaghetti until al dente",
            "Warm marinara with minced garlic",
            "Toss pasta with sauce and top with parmesan",
        ),
    ),
    MealTemplate(
        "Baked Salmon with Rice",
        ("Salmon fillet", "Rice", "Broccoli", "Lemon"),
        7.50,
        (
            "Bake salmon at 200C for 12 to 15 minutes",
            "Cook the rice and steam the broccoli",
            "Serve with lemon wedges",
        ),
    ),
    MealTemplate(
        "Chicken Stir-Fry",
        ("Chicken breast", "Bell peppers", "Soy sauce", "Rice"),
        5.25,
        (
            "Cook the rice",
            "Stir-fry sliced chicken until cooked through",
            "Add peppers and soy sauce and cook 3 more minutes",
        ),
    ),
    MealTemplate(
        "Beef Tacos",
        ("Ground beef", "Corn tortillas", "Lettuce", "Cheddar cheese", "Salsa"),
        5.00,
        (
            "Brown the beef with taco seasoning",
            "Warm the tortillas",
            "Fill with beef, lettuce, cheese and salsa",
        ),
    ),
    MealTemplate(
        "Shrimp Fried Rice",
        ("Shrimp", "Rice", "Eggs", "Peas", "Soy sauce"),
        6.25,
        (
            "Cook shrimp and set aside",
            "Scramble eggs in the same pan",
            "Add rice, peas, shrimp and soy sauce and fry until hot",
        ),
    ),
    MealTemplate(
        "Vegetable Curry",
        ("Chickpeas", "Coconut milk", "Potatoes", "Spinach", "Rice"),
        4.50,
        (
            "Simmer diced potatoes in coconut milk with curry spices",
            "Add chickpeas and spinach for the last 5 minutes",
            "Serve over rice",
        ),
    ),
    MealTemplate(
        "Stuffed Bell Peppers",
        ("Bell peppers", "Rice", "Black beans", "Tomatoes", "Onions"),
        4.25,
        (
            "Mix cooked rice with beans, tomatoes and onions",
            "Fill halved peppers with the mixture",
            "Bake at 190C for 30 minutes",
        ),
    ),
)

TEMPLATE_BANKS: dict[str, tuple[MealTemplate, ...]] = {
    "breakfast": BREAKFAST_BANK,
    "lunch": LUNCH_BANK,
    "dinner": DINNER_BANK,
}

# Staples free of every built-in allergen and animal-product keyword
NEUTRAL_INGREDIENTS: tuple[str, ...] = (
    "Rice",
    "Potatoes",
    "Carrots",
    "Spinach",
    "Black beans",
    "Sweet potatoes",
    "Lentils",
    "Tomatoes",
    "Cucumber",
    "Broccoli",
    "Apples",
    "Bananas",
    "Olive oil",
)

# Used only when a custom allergy excludes every staple above. No two names
# share a letter, so one single-letter label rules out at most one of them.
RESERVE_INGREDIENTS: tuple[str, ...] = ("Okra", "Yuzu", "Figs", "Beet")

_FILLER_COST: dict[str, float] = {"breakfast": 2.00, "lunch": 3.00, "dinner": 3.50}
_FILLER_INGREDIENT_COUNT = 3


def _allowed(
    texts: Sequence[str],
    preferences: Preferences,
    keyword_table: dict[str, list[str]] | None,
    diet_table: dict[str, list[str]] | None,
) -> bool:
    return not any(
        is_forbidden(t, preferences.allergies, keyword_table)
        or violates_diet(t, preferences.dietary_restrictions, diet_table)
        for t in texts
    )


def _filler_templates(
    meal_type: str,
    count: int,
    pool: Sequence[str],
) -> list[MealTemplate]:
    fillers: list[MealTemplate] = []
    for k in range(count):
        ingredients: tuple[str, ...] = ()
        if pool:
            picked = [
                pool[(k * _FILLER_INGREDIENT_COUNT + j) % len(pool)]
                for j in range(_FILLER_INGREDIENT_COUNT)
            ]
            ingredients = tuple(dict.fromkeys(picked))
        fillers.append(
            MealTemplate(
                name=f"Garden {meal_type.capitalize()} Plate {k + 1}",
                ingredients=ingredients,
                cost_for_one_person=_FILLER_COST.get(meal_type, 2.50),
                instructions=(
                    f"Prepare {', '.join(i.lower() for i in ingredients)}",
                    "Season to taste and serve",
                ),
            )
        )
    return fillers


def fallback_menu(
    preferences: Preferences,
    *,
    days: Sequence[str] = WEEKDAYS,
    meal_types: Sequence[str] = MEAL_TYPES,
    keyword_table: dict[str, list[str]] | None = None,
    diet_table: dict[str, list[str]] | None = None,
) -> list[CandidateMeal]:
    """Build one meal of every type for every day without any network call.

    Banks short of ``len(days)`` safe templates are topped up with filler
    meals drawn from ``NEUTRAL_INGREDIENTS``, or ``RESERVE_INGREDIENTS``
    when custom allergies exclude every staple. Allergies that exclude the
    reserve too leave fillers without ingredients, which the validator
    reports as missing.
    """
    pool = [
        i
        for i in NEUTRAL_INGREDIENTS
        if _allowed([i], preferences, keyword_table, diet_table)
    ]
    if not pool:
        pool = [
            i
            for i in RESERVE_INGREDIENTS
            if _allowed([i], preferences, keyword_table, diet_table)
        ]
        logger.warning(
            "Every staple ingredient is excluded by %s, filling with %s",
            preferences.allergies,
            pool,
        )
    if not pool:
        logger.warning("No filler ingredient is allowed by %s", preferences.allergies)

    chosen: dict[str, list[MealTemplate]] = {}
    for meal_type in meal_types:
        safe = [
            t
            for t in TEMPLATE_BANKS.get(meal_type, ())
            if _allowed(t.ingredients, preferences, keyword_table, diet_table)
        ]
        if len(safe) < len(days):
            safe += _filler_templates(meal_type, len(days) - len(safe), pool)
        chosen[meal_type] = safe[: len(days)]

    meals: list[CandidateMeal] = []
    for i, day in enumerate(days):
        for meal_type in meal_types:
            template = chosen[meal_type][i]
            meals.append(
                CandidateMeal(
                    name=template.name,
                    type=meal_type,
                    day=day,
                    ingredients=list(template.ingredients),
                    cost_for_one_person=template.cost_for_one_person,
                    instructions=list(template.instructions),
                )
            )
    return meals
