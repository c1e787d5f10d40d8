"""CLI entry point for savyr."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from .config import load_config
from .errors import InvalidPreferences
from .models import FlyerResult, MealPlan, Preferences, format_price
from .pipeline import MealPlanPipeline, fallback_plan


def _add_preference_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--family-size", "-n", type=int, default=1, help="Number of people to feed"
    )
    parser.add_argument(
        "--allergy",
        action="append",
        default=[],
        metavar="LABEL",
        help="Allergy to avoid (nuts, dairy, gluten, eggs, seafood, soy, shellfish "
        "or any ingredient name); repeatable",
    )
    parser.add_argument(
        "--diet",
        action="append",
        default=[],
        metavar="LABEL",
        help="Dietary restriction (vegetarian, vegan, ...); repeatable",
    )
    parser.add_argument(
        "--budget", type=float, default=None, help="Target weekly budget in dollars"
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument(
        "--grocery-view",
        choices=("category", "store"),
        default="category",
        help="Group the grocery list by category or by store",
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="savyr",
        description="Turn grocery flyer photos into a weekly meal plan and shopping list",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to the configuration file (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log pipeline progress"
    )

    sub = parser.add_subparsers(dest="command")

    # scan
    scan_parser = sub.add_parser("scan", help="Extract products from flyer photos")
    scan_parser.add_argument(
        "--image", type=str, nargs="+", required=True, help="Flyer image files"
    )
    scan_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # plan
    plan_parser = sub.add_parser("plan", help="Flyer photos → meal plan + grocery list")
    plan_parser.add_argument(
        "--image", type=str, nargs="+", required=True, help="Flyer image files"
    )
    _add_preference_args(plan_parser)

    # fallback
    fallback_parser = sub.add_parser(
        "fallback", help="Offline meal plan without any flyer or API call"
    )
    _add_preference_args(fallback_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    load_dotenv()
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args.config)

    try:
        match args.command:
            case "scan":
                asyncio.run(_cmd_scan(config, args))
            case "plan":
                asyncio.run(_cmd_plan(config, args))
            case "fallback":
                _cmd_fallback(config, args)
    except InvalidPreferences as e:
        print(f"Invalid preferences: {e}", file=sys.stderr)
        sys.exit(2)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)


def _preferences(args) -> Preferences:
    prefs = Preferences(
        family_size=args.family_size,
        allergies=list(args.allergy),
        dietary_restrictions=list(args.diet),
        budget=args.budget,
    )
    prefs.validate()
    return prefs


async def _cmd_scan(config, args) -> None:
    async with MealPlanPipeline.from_config(config) as pipeline:
        print("🔍 Reading flyers...", file=sys.stderr)
        flyers = await pipeline.extract(args.image)

    if args.json:
        print(json.dumps([f.to_dict() for f in flyers], ensure_ascii=False, indent=2))
        return

    for path, flyer in zip(args.image, flyers):
        _print_flyer(path, flyer)


def _print_flyer(path: str, flyer: FlyerResult) -> None:
    print(f"\n🏪 {flyer.store_name}  ({path})")
    if not flyer.products:
        print("   No products found.")
        return
    for p in flyer.products:
        sale = ""
        if p.on_sale and p.original_price:
            sale = f"  (was {format_price(p.original_price)})"
        unit = f"/{p.unit}" if p.unit else ""
        print(f"  {p.name:<30} {format_price(p.price)}{unit:<6} [{p.category}]{sale}")


async def _cmd_plan(config, args) -> None:
    prefs = _preferences(args)
    async with MealPlanPipeline.from_config(config) as pipeline:
        print("🍳 Building meal plan...", file=sys.stderr)
        plan = await pipeline.run(args.image, prefs)
    _print_plan(plan, args)


def _cmd_fallback(config, args) -> None:
    prefs = _preferences(args)
    plan = fallback_plan(
        prefs, days=config.planner.days, meal_types=config.planner.meal_types
    )
    _print_plan(plan, args)


def _print_plan(plan: MealPlan, args) -> None:
    if args.json:
        print(json.dumps(plan.to_dict(), ensure_ascii=False, indent=2))
        return

    print()
    print(plan.display())
    if plan.grocery_list is not None:
        print(plan.grocery_list.display(view=args.grocery_view))
