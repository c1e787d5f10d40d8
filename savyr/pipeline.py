"""Flyer photos → weekly meal plan → grocery list."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .assembler import assemble_plan
from .candidates import select_candidates
from .config import ExtractionConfig, PlannerConfig, SavyrConfig
from .errors import ParseFailure, SchemaViolation, TransportError, ValidationFailure
from .extractor import FlyerExtractor
from .fallback import fallback_menu
from .grocery import attach_grocery_list
from .llm import CompletionBackend, create_backend
from .menu import MenuGenerator
from .models import CandidateMeal, FlyerResult, MealPlan, Preferences
from .validator import dietary_violations, validate_menu

logger = logging.getLogger(__name__)


def fallback_plan(
    preferences: Preferences,
    *,
    days: Sequence[str] | None = None,
    meal_types: Sequence[str] | None = None,
) -> MealPlan:
    """Offline plan from the deterministic menu, no backend needed."""
    preferences.validate()
    planner = PlannerConfig()
    meals = fallback_menu(
        preferences,
        days=days or planner.days,
        meal_types=meal_types or planner.meal_types,
    )
    plan = assemble_plan(meals, preferences, source="fallback")
    attach_grocery_list(plan)
    return plan


class MealPlanPipeline:
    """Run the full flyer-to-plan pipeline with injected completion backends.

    The same backend serves both the vision and the text call unless a
    separate ``vision_backend`` is given. Once preferences are valid a plan
    is always produced; model failures of any kind degrade to the
    deterministic fallback menu.
    """

    def __init__(
        self,
        backend: CompletionBackend,
        vision_backend: CompletionBackend | None = None,
        extraction: ExtractionConfig | None = None,
        planner: PlannerConfig | None = None,
    ) -> None:
        extraction = extraction or ExtractionConfig()
        planner = planner or PlannerConfig()

        self._backend = backend
        self._vision_backend = vision_backend
        self._days = tuple(planner.days)
        self._meal_types = tuple(planner.meal_types)
        self._max_candidates = planner.max_candidates
        self._extractor = FlyerExtractor(
            vision_backend or backend,
            max_tokens=extraction.max_tokens,
            temperature=extraction.temperature,
        )
        self._menu = MenuGenerator(
            backend,
            days=self._days,
            meal_types=self._meal_types,
            max_tokens=planner.max_tokens,
            temperature=planner.temperature,
        )

    @classmethod
    def from_config(cls, config: SavyrConfig) -> MealPlanPipeline:
        return cls(
            create_backend(config),
            extraction=config.extraction,
            planner=config.planner,
        )

    async def __aenter__(self) -> MealPlanPipeline:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._backend.aclose()
        if self._vision_backend is not None:
            await self._vision_backend.aclose()

    async def extract(self, image_paths: Sequence[str]) -> list[FlyerResult]:
        """Extract every flyer concurrently; failed images come back empty."""
        return await self._extractor.extract_all(image_paths)

    async def run(
        self, image_paths: Sequence[str], preferences: Preferences
    ) -> MealPlan:
        """Build a plan from flyer photos.

        Raises:
            InvalidPreferences: The household settings are unusable.
        """
        preferences.validate()
        logger.info("Extracting %d flyer image(s)", len(image_paths))
        flyers = await self.extract(image_paths)
        return await self.plan_from_flyers(flyers, preferences)

    async def plan_from_flyers(
        self, flyers: Sequence[FlyerResult], preferences: Preferences
    ) -> MealPlan:
        """Build a plan from already extracted (possibly edited) flyers."""
        preferences.validate()

        candidates = select_candidates(flyers, preferences, self._max_candidates)
        logger.info("%d candidate products after filtering", len(candidates))

        meals: list[CandidateMeal] | None = None
        if candidates:
            meals = await self._model_menu(candidates, preferences)
        else:
            logger.warning("No usable flyer products, skipping the model menu")

        source = "model"
        if meals is None:
            meals = fallback_menu(
                preferences, days=self._days, meal_types=self._meal_types
            )
            source = "fallback"

        plan = assemble_plan(meals, preferences, flyers, source=source)
        attach_grocery_list(plan)
        logger.info(
            "Plan %s: %d meals, total %.2f (%s)",
            plan.id,
            len(plan.meals),
            plan.total_cost,
            source,
        )
        return plan

    async def _model_menu(
        self, candidates: list[dict], preferences: Preferences
    ) -> list[CandidateMeal] | None:
        """Return a validated model menu, or None if it is unusable."""
        try:
            meals = await self._menu.generate(candidates, preferences)
            violations = validate_menu(
                meals,
                preferences.allergies,
                days=self._days,
                meal_types=self._meal_types,
            )
            violations += dietary_violations(meals, preferences.dietary_restrictions)
            if violations:
                raise ValidationFailure(violations)
        except (TransportError, ParseFailure, SchemaViolation, ValidationFailure) as exc:
            logger.warning("Model menu unusable, using fallback: %s", exc)
            return None
        return meals
