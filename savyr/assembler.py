"""Turn per-person candidate meals into a household-scaled MealPlan."""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence

from .models import (
    CandidateMeal,
    FlyerResult,
    Ingredient,
    Meal,
    MealPlan,
    Preferences,
    Product,
)


def serving_label(family_size: int) -> str:
    return f"{family_size} serving" if family_size == 1 else f"{family_size} servings"


def match_product(
    name: str, flyers: Sequence[FlyerResult]
) -> tuple[FlyerResult, Product] | None:
    """Find the first flyer product whose name contains, or is contained in, ``name``."""
    needle = name.strip().lower()
    if not needle:
        return None
    for flyer in flyers:
        for product in flyer.products:
            hay = product.name.strip().lower()
            if hay and (needle in hay or hay in needle):
                return flyer, product
    return None


def assemble_plan(
    meals: Iterable[CandidateMeal],
    preferences: Preferences,
    flyers: Sequence[FlyerResult] = (),
    source: str = "model",
) -> MealPlan:
    """Scale costs to the household and build the plan record.

    Each meal costs ``cost_for_one_person * family_size``; that amount is
    split evenly across its ingredients. Ingredients that match a flyer
    product remember the store and product category.
    """
    family_size = preferences.family_size
    quantity = serving_label(family_size)

    assembled: list[Meal] = []
    for i, candidate in enumerate(meals, 1):
        cost = round(candidate.cost_for_one_person * family_size, 2)
        per_ingredient = cost / len(candidate.ingredients) if candidate.ingredients else 0.0

        ingredients: list[Ingredient] = []
        for name in candidate.ingredients:
            store = category = None
            match = match_product(name, flyers)
            if match is not None:
                flyer, product = match
                store, category = flyer.store_name, product.category
            ingredients.append(
                Ingredient(
                    name=name,
                    quantity=quantity,
                    price=per_ingredient,
                    store=store,
                    category=category,
                )
            )

        assembled.append(
            Meal(
                id=f"meal_{i}",
                name=candidate.name,
                category=candidate.type,
                ingredients=ingredients,
                instructions=list(candidate.instructions),
                cost=cost,
                day=candidate.day or None,
            )
        )

    return MealPlan(
        id=uuid.uuid4().hex,
        meals=assembled,
        family_size=family_size,
        preferences=preferences,
        source=source,
    )
