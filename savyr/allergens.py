"""Allergy and dietary-restriction keyword matching."""

from __future__ import annotations

from collections.abc import Iterable

# Allergy label → disqualifying ingredient keywords
ALLERGEN_KEYWORDS: dict[str, list[str]] = {
    "nuts": [
        "peanut", "almond", "walnut", "cashew", "pecan", "pistachio",
        "hazelnut", "macadamia", "nut",
    ],
    "dairy": ["milk", "cheese", "butter", "yogurt", "cream", "dairy"],
    "gluten": [
        "wheat", "flour", "bread", "pasta", "spaghetti", "noodle", "barley",
        "rye", "couscous", "crouton", "cracker", "bagel", "seitan", "gluten",
    ],
    "eggs": ["egg", "mayonnaise", "mayo"],
    "seafood": [
        "fish", "salmon", "tuna", "cod", "tilapia", "halibut", "trout",
        "sardine", "anchovy", "shrimp", "crab", "lobster", "seafood",
    ],
    "soy": ["soy", "tofu", "edamame", "tempeh", "miso"],
    "shellfish": [
        "shrimp", "prawn", "crab", "lobster", "clam", "mussel", "oyster",
        "scallop", "shellfish",
    ],
}

_MEAT_KEYWORDS: list[str] = [
    "chicken", "beef", "pork", "turkey", "bacon", "ham", "sausage", "lamb",
    "meat", "steak", "pepperoni", "salami", "fish", "salmon", "tuna",
    "shrimp", "crab", "lobster", "anchovy",
]

_ANIMAL_PRODUCT_KEYWORDS: list[str] = [
    "egg", "milk", "cheese", "butter", "yogurt", "cream", "honey",
    "mayonnaise", "gelatin", "whey",
]

# Dietary restriction → disqualifying keywords
DIETARY_KEYWORDS: dict[str, list[str]] = {
    "vegetarian": _MEAT_KEYWORDS,
    "vegan": _MEAT_KEYWORDS + _ANIMAL_PRODUCT_KEYWORDS,
}


def keywords_for(
    allergy: str,
    keyword_table: dict[str, list[str]] | None = None,
) -> list[str]:
    """Return the keywords for one allergy label.

    Unknown labels use the lower-cased label itself as the only keyword.
    """
    table = ALLERGEN_KEYWORDS if keyword_table is None else keyword_table
    label = allergy.strip().lower()
    if not label:
        return []
    return table.get(label, [label])


def forbidden_keywords(
    allergies: Iterable[str],
    keyword_table: dict[str, list[str]] | None = None,
) -> list[str]:
    """Union of keywords for all allergies, in first-seen order."""
    seen: dict[str, None] = {}
    for allergy in allergies:
        for keyword in keywords_for(allergy, keyword_table):
            seen.setdefault(keyword, None)
    return list(seen)


def is_forbidden(
    text: str,
    allergies: Iterable[str],
    keyword_table: dict[str, list[str]] | None = None,
) -> bool:
    """True if text contains any keyword of any allergy (case-insensitive)."""
    lowered = text.lower()
    return any(
        keyword in lowered for keyword in forbidden_keywords(allergies, keyword_table)
    )


def diet_keywords(
    restrictions: Iterable[str],
    diet_table: dict[str, list[str]] | None = None,
) -> list[str]:
    """Keywords excluded by the given restrictions.

    Restrictions without a table entry (keto, halal, ...) add nothing.
    """
    table = DIETARY_KEYWORDS if diet_table is None else diet_table
    seen: dict[str, None] = {}
    for restriction in restrictions:
        for keyword in table.get(restriction.strip().lower(), []):
            seen.setdefault(keyword, None)
    return list(seen)


def violates_diet(
    text: str,
    restrictions: Iterable[str],
    diet_table: dict[str, list[str]] | None = None,
) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in diet_keywords(restrictions, diet_table))
