"""Cooking quantity parsing and unit-aware combination."""

from __future__ import annotations

import re

# Alias → (canonical unit, multiplier into the canonical unit)
UNIT_ALIASES: dict[str, tuple[str, float]] = {
    "g": ("g", 1.0),
    "gr": ("g", 1.0),
    "gram": ("g", 1.0),
    "grams": ("g", 1.0),
    "kg": ("g", 1000.0),
    "kgs": ("g", 1000.0),
    "kilogram": ("g", 1000.0),
    "kilograms": ("g", 1000.0),
    "mg": ("g", 0.001),
    "milligram": ("g", 0.001),
    "milligrams": ("g", 0.001),
    "ml": ("ml", 1.0),
    "milliliter": ("ml", 1.0),
    "milliliters": ("ml", 1.0),
    "millilitre": ("ml", 1.0),
    "millilitres": ("ml", 1.0),
    "l": ("ml", 1000.0),
    "liter": ("ml", 1000.0),
    "liters": ("ml", 1000.0),
    "litre": ("ml", 1000.0),
    "litres": ("ml", 1000.0),
    "tbsp": ("tbsp", 1.0),
    "tbs": ("tbsp", 1.0),
    "tablespoon": ("tbsp", 1.0),
    "tablespoons": ("tbsp", 1.0),
    "tsp": ("tsp", 1.0),
    "teaspoon": ("tsp", 1.0),
    "teaspoons": ("tsp", 1.0),
    "cup": ("cup", 1.0),
    "cups": ("cup", 1.0),
    "oz": ("oz", 1.0),
    "ounce": ("oz", 1.0),
    "ounces": ("oz", 1.0),
    "lb": ("lb", 1.0),
    "lbs": ("lb", 1.0),
    "pound": ("lb", 1.0),
    "pounds": ("lb", 1.0),
    "serving": ("serving", 1.0),
    "servings": ("serving", 1.0),
    "slice": ("slice", 1.0),
    "slices": ("slice", 1.0),
    "clove": ("clove", 1.0),
    "cloves": ("clove", 1.0),
    "piece": ("piece", 1.0),
    "pieces": ("piece", 1.0),
    "can": ("can", 1.0),
    "cans": ("can", 1.0),
}

# Count units printed in plural when the amount is not exactly 1
COUNT_UNIT_PLURALS: dict[str, str] = {
    "serving": "servings",
    "slice": "slices",
    "clove": "cloves",
    "piece": "pieces",
    "can": "cans",
}

_UNICODE_FRACTIONS: dict[str, float] = {
    "½": 0.5,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "¼": 0.25,
    "¾": 0.75,
    "⅛": 0.125,
}

# "1 1/2 cup", "3/4 cup", "2.5 kg", "500g", "2"
_QTY_PATTERN = re.compile(
    r"^\s*(\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?)\s*(.*?)\s*$"
)


def parse_quantity(text: str) -> tuple[float | None, str]:
    """Split a free-text quantity into a leading number and a unit.

    Args:
        text: e.g. "1 cup", "1 1/2 tbsp", "500g", "½ lb", "bunch"

    Returns:
        (value, unit) tuple. value is None when no leading number exists;
        the unit is lower-cased and may be empty.
    """
    text = text.strip()
    if not text:
        return (None, "")

    if text[0] in _UNICODE_FRACTIONS:
        return (_UNICODE_FRACTIONS[text[0]], text[1:].strip().lower())

    m = _QTY_PATTERN.match(text)
    if not m:
        return (None, text.lower())
    return (_parse_number(m.group(1)), m.group(2).lower())


def _parse_number(s: str) -> float:
    """Parse an integer, decimal, simple fraction or mixed number."""
    s = s.strip()
    if " " in s:
        whole, frac = s.split(None, 1)
        return float(whole) + _parse_number(frac)
    if "/" in s:
        num, den = s.split("/")
        if float(den) == 0:
            return float(num)
        return float(num) / float(den)
    return float(s)


def normalize(
    value: float,
    unit: str,
    aliases: dict[str, tuple[str, float]] | None = None,
) -> tuple[float, str]:
    """Convert a value into its canonical unit.

    Units missing from the alias table are their own canonical unit.
    """
    table = UNIT_ALIASES if aliases is None else aliases
    canonical, factor = table.get(unit, (unit, 1.0))
    return (value * factor, canonical)


def format_amount(value: float) -> str:
    """Integral values print bare; others keep at most 2 decimals."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def combine_quantities(
    qty1: str,
    qty2: str,
    aliases: dict[str, tuple[str, float]] | None = None,
) -> str:
    """Add two quantities when their units agree after normalization.

    Returns "{sum} {unit}" for matching or convertible units, otherwise
    the literal "{qty1}, {qty2}". Never raises.
    """
    value1, unit1 = parse_quantity(qty1)
    value2, unit2 = parse_quantity(qty2)
    if value1 is None or value2 is None:
        return f"{qty1}, {qty2}"

    total1, canonical1 = normalize(value1, unit1, aliases)
    total2, canonical2 = normalize(value2, unit2, aliases)
    if canonical1 != canonical2:
        return f"{qty1}, {qty2}"

    total = total1 + total2
    unit = canonical1 if total == 1 else COUNT_UNIT_PLURALS.get(canonical1, canonical1)
    amount = format_amount(total)
    return f"{amount} {unit}" if unit else amount
