"""Grocery flyer photos to a weekly meal plan and shopping list."""

from .config import (
    ExtractionConfig,
    LLMConfig,
    PlannerConfig,
    SavyrConfig,
    load_config,
)
from .errors import (
    BackendNotConfigured,
    InvalidPreferences,
    ParseFailure,
    SavyrError,
    SchemaViolation,
    TransportError,
    ValidationFailure,
)
from .extractor import FlyerExtractor, parse_flyer
from .grocery import consolidate
from .llm import CompletionBackend, create_backend
from .menu import MenuGenerator
from .models import (
    CandidateMeal,
    FlyerResult,
    GroceryItem,
    GroceryList,
    Ingredient,
    Meal,
    MealPlan,
    Preferences,
    Product,
    StoreSection,
)
from .pipeline import MealPlanPipeline, fallback_plan

__all__ = [
    "MealPlanPipeline",
    "fallback_plan",
    "FlyerExtractor",
    "parse_flyer",
    "MenuGenerator",
    "consolidate",
    "CompletionBackend",
    "create_backend",
    "Product",
    "FlyerResult",
    "Preferences",
    "CandidateMeal",
    "Ingredient",
    "Meal",
    "MealPlan",
    "GroceryItem",
    "GroceryList",
    "StoreSection",
    "SavyrError",
    "TransportError",
    "BackendNotConfigured",
    "ParseFailure",
    "SchemaViolation",
    "ValidationFailure",
    "InvalidPreferences",
    "SavyrConfig",
    "LLMConfig",
    "ExtractionConfig",
    "PlannerConfig",
    "load_config",
]
