"""Consolidate meal-plan ingredients into a shopping list."""

from __future__ import annotations

import hashlib

from .models import GENERAL_STORE, GroceryItem, GroceryList, MealPlan
from .units import combine_quantities

# Keyword → grocery category, checked in order
CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "dairy": ["egg", "milk", "cheese", "yogurt", "butter", "cream"],
    "meat": [
        "chicken", "beef", "turkey", "pork", "bacon", "sausage", "ham", "meat",
        "salmon", "tuna", "shrimp", "fish",
    ],
    "produce": [
        "apple", "banana", "lettuce", "tomato", "spinach", "carrot", "potato",
        "onion", "pepper", "broccoli", "avocado", "cucumber", "celery",
        "lemon", "berries", "garlic",
    ],
    "bakery": ["bread", "tortilla", "bagel", "bun"],
    "pantry": [
        "pasta", "spaghetti", "rice", "quinoa", "oats", "lentil", "beans",
        "chickpea", "flour", "oil", "sauce", "broth", "salsa", "honey",
    ],
    "beverages": ["soda", "juice", "water", "coffee", "tea"],
}


def grocery_item_id(key: str) -> str:
    """Deterministic id for a normalized ingredient name."""
    return "item_" + hashlib.sha1(key.encode("utf-8")).hexdigest()[:12]


def guess_category(
    name: str, category_keywords: dict[str, list[str]] | None = None
) -> str:
    """Guess a grocery category from an ingredient name using keyword matching."""
    table = CATEGORY_KEYWORDS if category_keywords is None else category_keywords
    lowered = name.lower()
    for category, keywords in table.items():
        for keyword in keywords:
            if keyword in lowered:
                return category
    return "other"


def consolidate(plan: MealPlan) -> GroceryList:
    """Merge same-named ingredients across all meals into one list."""
    items: dict[str, GroceryItem] = {}
    for meal in plan.meals:
        for ingredient in meal.ingredients:
            key = ingredient.name.strip().lower()
            if not key:
                continue
            existing = items.get(key)
            if existing is None:
                items[key] = GroceryItem(
                    id=grocery_item_id(key),
                    name=ingredient.name.strip(),
                    quantity=ingredient.quantity,
                    price=ingredient.price,
                    category=ingredient.category or guess_category(ingredient.name),
                    is_checked=False,
                    store=ingredient.store or GENERAL_STORE,
                )
            else:
                existing.price += ingredient.price
                existing.quantity = combine_quantities(
                    existing.quantity, ingredient.quantity
                )
    return GroceryList(items=list(items.values()))


def attach_grocery_list(plan: MealPlan) -> GroceryList:
    """Consolidate the plan and store the list on it."""
    plan.grocery_list = consolidate(plan)
    return plan.grocery_list
