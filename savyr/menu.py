"""Weekly menu generation with a text completion backend."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Sequence

from .allergens import diet_keywords, forbidden_keywords
from .errors import SchemaViolation
from .llm import CompletionBackend
from .models import MEAL_TYPES, WEEKDAYS, CandidateMeal, Preferences
from .repair import repair_json

logger = logging.getLogger(__name__)


def build_menu_prompt(
    candidates: list[dict],
    preferences: Preferences,
    days: Sequence[str] = WEEKDAYS,
    meal_types: Sequence[str] = MEAL_TYPES,
) -> str:
    """Build the single menu request for the given products and household."""
    people = "person" if preferences.family_size == 1 else "people"
    total = len(days) * len(meal_types)

    requirements: list[str] = []
    forbidden = forbidden_keywords(preferences.allergies)
    if forbidden:
        requirements.append(
            f"ALLERGIES: {', '.join(preferences.allergies)}. "
            f"NEVER use an ingredient whose name contains any of: {', '.join(forbidden)}"
        )
    if preferences.dietary_restrictions:
        line = f"DIETARY REQUIREMENTS: {', '.join(preferences.dietary_restrictions)}"
        excluded = diet_keywords(preferences.dietary_restrictions)
        if excluded:
            line += f" (so no {', '.join(excluded)})"
        requirements.append(line)
    if preferences.budget is not None:
        requirements.append(
            f"TARGET BUDGET: ${preferences.budget:.2f} per week for the household"
        )
    if not requirements:
        requirements.append("No allergies or dietary restrictions.")

    per_type = ", ".join(f"{len(days)} {t}" for t in meal_types)
    requirement_lines = "\n".join(f"- {r}" for r in requirements)
    type_list = ", ".join(meal_types)
    day_list = ", ".join(days)
    return f"""\
Create a weekly meal plan for {preferences.family_size} {people} using these grocery products:

{json.dumps(candidates, indent=2)}

Requirements:
{requirement_lines}

Return ONLY a valid JSON object with this exact structure:
{{
  "meals": [
    {{
      "name": "Scrambled Eggs on Toast",
      "type": "{meal_types[0]}",
      "day": "{days[0]}",
      "ingredients": ["Eggs", "Bread"],
      "instructions": ["Beat the eggs", "Cook in a pan", "Serve on toast"],
      "costForOnePerson": 1.50
    }}
  ]
}}

Rules:
- Return ONLY valid JSON, no extra text
- Create exactly {total} meals: {per_type}
- "type" must be one of: {type_list}
- "day" must be one of: {day_list}
- Every day gets exactly one meal of each type
- Meal names must be unique within each type
- "ingredients" is a non-empty list of plain ingredient names
- "costForOnePerson" is a number: the realistic cost of one serving in dollars
- Use products from the provided list whenever possible
"""


def _ingredient_names(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    names: list[str] = []
    for item in value:
        # Models sometimes return {"name": ..., "quantity": ...} objects
        if isinstance(item, dict):
            item = item.get("name")
        if isinstance(item, str) and item.strip():
            names.append(item.strip())
    return names


def _text(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


def parse_menu(text: str) -> list[CandidateMeal]:
    """Repair and validate a menu completion.

    Raises:
        ParseFailure: No JSON object could be recovered.
        SchemaViolation: ``meals`` is missing or empty, an entry is not an
            object, or a cost is not a finite non-negative number.
    """
    data = repair_json(text)

    meals = data.get("meals")
    if not isinstance(meals, list) or not meals:
        raise SchemaViolation("menu response has no 'meals' list")

    result: list[CandidateMeal] = []
    for i, entry in enumerate(meals):
        if not isinstance(entry, dict):
            raise SchemaViolation(f"meal #{i + 1} is not an object")

        cost = entry.get("costForOnePerson", entry.get("cost"))
        if (
            isinstance(cost, bool)
            or not isinstance(cost, (int, float))
            or not math.isfinite(cost)
            or cost < 0
        ):
            raise SchemaViolation(f"meal #{i + 1} has invalid cost {cost!r}")

        steps = entry.get("instructions")
        if not isinstance(steps, list):
            steps = []
        result.append(
            CandidateMeal(
                name=_text(entry.get("name")),
                type=_text(entry.get("type", entry.get("category"))).lower(),
                day=_text(entry.get("day")).capitalize(),
                ingredients=_ingredient_names(entry.get("ingredients")),
                cost_for_one_person=float(cost),
                instructions=[_text(s) for s in steps if _text(s)],
            )
        )
    return result


class MenuGenerator:
    """Ask a text backend for a week of meals built from flyer products."""

    def __init__(
        self,
        backend: CompletionBackend,
        days: Sequence[str] = WEEKDAYS,
        meal_types: Sequence[str] = MEAL_TYPES,
        max_tokens: int = 4000,
        temperature: float = 0.3,
    ) -> None:
        self._backend = backend
        self._days = tuple(days)
        self._meal_types = tuple(meal_types)
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def generate(
        self, candidates: list[dict], preferences: Preferences
    ) -> list[CandidateMeal]:
        """One completion call, no retry. Errors propagate to the caller."""
        prompt = build_menu_prompt(
            candidates, preferences, self._days, self._meal_types
        )
        text = await self._backend.complete(
            prompt, max_tokens=self._max_tokens, temperature=self._temperature
        )
        meals = parse_menu(text)
        logger.info("Model proposed %d meals", len(meals))
        return meals
