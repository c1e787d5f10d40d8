"""Record types shared by every pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import InvalidPreferences

UNKNOWN_STORE = "Unknown Store"
GENERAL_STORE = "General Store"

PRODUCT_CATEGORIES: tuple[str, ...] = (
    "produce",
    "meat",
    "dairy",
    "pantry",
    "snacks",
    "beverages",
    "frozen",
    "bakery",
    "deli",
    "other",
)

MEAL_TYPES: tuple[str, ...] = ("breakfast", "lunch", "dinner")
MEAL_CATEGORIES: tuple[str, ...] = MEAL_TYPES + ("snack",)

WEEKDAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# Display order for grocery categories
GROCERY_CATEGORY_ORDER: tuple[str, ...] = (
    "dairy",
    "meat",
    "produce",
    "bakery",
    "deli",
    "pantry",
    "frozen",
    "snacks",
    "beverages",
    "other",
)


def format_price(price: float) -> str:
    return f"${price:.2f}"


@dataclass(frozen=True)
class Product:
    """A priced item read off a flyer."""

    name: str
    price: float
    category: str = "other"
    unit: str | None = None
    on_sale: bool | None = None
    original_price: float | None = None

    def to_dict(self) -> dict:
        data: dict = {"name": self.name, "price": self.price, "category": self.category}
        if self.unit is not None:
            data["unit"] = self.unit
        if self.on_sale is not None:
            data["onSale"] = self.on_sale
        if self.original_price is not None:
            data["originalPrice"] = self.original_price
        return data


@dataclass
class FlyerResult:
    store_name: str = UNKNOWN_STORE
    products: list[Product] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "storeName": self.store_name,
            "products": [p.to_dict() for p in self.products],
        }


@dataclass
class Preferences:
    family_size: int = 1
    allergies: list[str] = field(default_factory=list)
    dietary_restrictions: list[str] = field(default_factory=list)
    budget: float | None = None

    def validate(self) -> None:
        """Raise InvalidPreferences unless the household settings are usable."""
        if (
            isinstance(self.family_size, bool)
            or not isinstance(self.family_size, int)
            or self.family_size < 1
        ):
            raise InvalidPreferences(
                f"family_size must be a positive integer, got {self.family_size!r}"
            )
        if self.budget is not None and self.budget < 0:
            raise InvalidPreferences(f"budget must not be negative, got {self.budget!r}")

    def to_dict(self) -> dict:
        data: dict = {
            "familySize": self.family_size,
            "allergies": list(self.allergies),
            "dietaryRestrictions": list(self.dietary_restrictions),
        }
        if self.budget is not None:
            data["budget"] = self.budget
        return data


@dataclass
class CandidateMeal:
    """An unvalidated, per-person meal proposal."""

    name: str
    type: str  # "breakfast" | "lunch" | "dinner"
    day: str  # "Monday" .. "Sunday"
    ingredients: list[str] = field(default_factory=list)
    cost_for_one_person: float = 0.0
    instructions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Ingredient:
    name: str
    quantity: str
    price: float
    store: str | None = None
    category: str | None = None

    def to_dict(self) -> dict:
        data: dict = {"name": self.name, "quantity": self.quantity, "price": self.price}
        if self.store is not None:
            data["store"] = self.store
        return data


@dataclass(frozen=True)
class Meal:
    id: str
    name: str
    category: str  # "breakfast" | "lunch" | "dinner" | "snack"
    ingredients: list[Ingredient] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    cost: float = 0.0
    day: str | None = None

    def to_dict(self) -> dict:
        data: dict = {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "ingredients": [i.to_dict() for i in self.ingredients],
            "instructions": list(self.instructions),
            "cost": self.cost,
        }
        if self.day is not None:
            data["day"] = self.day
        return data


@dataclass
class GroceryItem:
    id: str
    name: str
    quantity: str
    price: float
    category: str = "other"
    is_checked: bool = False
    store: str = GENERAL_STORE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "price": self.price,
            "category": self.category,
            "isChecked": self.is_checked,
            "store": self.store,
        }


@dataclass
class StoreSection:
    store_name: str
    items: list[GroceryItem] = field(default_factory=list)

    @property
    def total_cost(self) -> float:
        return sum(item.price for item in self.items)

    def to_dict(self) -> dict:
        return {
            "storeName": self.store_name,
            "items": [i.to_dict() for i in self.items],
            "totalCost": self.total_cost,
        }


@dataclass
class GroceryList:
    """Consolidated shopping list.

    Totals, store sections and the checked-id list are all derived from
    ``items`` on access, so toggling an item can never leave them stale.
    """

    items: list[GroceryItem] = field(default_factory=list)

    @property
    def total_cost(self) -> float:
        return sum(item.price for item in self.items)

    @property
    def checked_items(self) -> list[str]:
        return [item.id for item in self.items if item.is_checked]

    @property
    def stores(self) -> list[StoreSection]:
        sections: dict[str, StoreSection] = {}
        for item in self.items:
            if item.store not in sections:
                sections[item.store] = StoreSection(store_name=item.store)
            sections[item.store].items.append(item)
        return list(sections.values())

    def get(self, item_id: str) -> GroceryItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise KeyError(item_id)

    def toggle(self, item_id: str) -> GroceryItem:
        """Flip the checked state of one item and return it."""
        item = self.get(item_id)
        item.is_checked = not item.is_checked
        return item

    def by_category(self) -> dict[str, list[GroceryItem]]:
        """Group items by category in shopping order, skipping empty groups."""
        groups: dict[str, list[GroceryItem]] = {}
        extra = sorted(
            {i.category for i in self.items} - set(GROCERY_CATEGORY_ORDER)
        )
        for category in list(GROCERY_CATEGORY_ORDER) + extra:
            matched = [i for i in self.items if i.category == category]
            if matched:
                groups[category] = matched
        return groups

    def display(self, view: str = "category") -> str:
        """Format the list as shareable text, grouped by category or store."""
        lines: list[str] = []
        lines.append("🛒 Grocery Shopping List")
        lines.append(f"Total Cost: {format_price(self.total_cost)}")
        lines.append(
            f"{len(self.checked_items)}/{len(self.items)} items checked"
        )
        lines.append("")

        if view == "store":
            for section in self.stores:
                lines.append(
                    f"{section.store_name.upper()} - {format_price(section.total_cost)}:"
                )
                lines.extend(_item_line(item) for item in section.items)
                lines.append("")
        else:
            for category, items in self.by_category().items():
                lines.append(f"{category.upper()}:")
                lines.extend(_item_line(item) for item in items)
                lines.append("")

        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "items": [i.to_dict() for i in self.items],
            "totalCost": self.total_cost,
            "stores": [s.to_dict() for s in self.stores],
            "checkedItems": self.checked_items,
        }


def _item_line(item: GroceryItem) -> str:
    mark = "✓" if item.is_checked else "○"
    return f"{mark} {item.quantity} {item.name} - {format_price(item.price)}"


@dataclass
class MealPlan:
    id: str
    meals: list[Meal]
    family_size: int
    preferences: Preferences
    grocery_list: GroceryList | None = None
    source: str = "model"  # "model" | "fallback"

    @property
    def total_cost(self) -> float:
        return sum(meal.cost for meal in self.meals)

    def meals_for_day(self, day: str) -> list[Meal]:
        return [m for m in self.meals if m.day == day]

    def meals_by_category(self, category: str) -> list[Meal]:
        return [m for m in self.meals if m.category == category]

    def display(self) -> str:
        """Format the plan for terminal display, one block per day."""
        people = "person" if self.family_size == 1 else "people"
        lines: list[str] = []
        lines.append(f"📅 Weekly Meal Plan for {self.family_size} {people}")
        lines.append(f"💰 Total Cost: {format_price(self.total_cost)}")
        if self.source == "fallback":
            lines.append("   (generic plan: store products were not usable)")
        lines.append("")

        days = [d for d in WEEKDAYS if self.meals_for_day(d)]
        days += sorted(
            {m.day for m in self.meals if m.day and m.day not in WEEKDAYS}
        )
        undated = [m for m in self.meals if not m.day]

        for day in days:
            day_meals = self.meals_for_day(day)
            day_cost = sum(m.cost for m in day_meals)
            lines.append(f"{'─' * 50}")
            lines.append(f"{day} ({format_price(day_cost)})")
            for meal in _in_category_order(day_meals):
                lines.append(_meal_line(meal))
            lines.append("")

        if undated:
            lines.append(f"{'─' * 50}")
            for meal in _in_category_order(undated):
                lines.append(_meal_line(meal))
            lines.append("")

        return "\n".join(lines)

    def to_dict(self) -> dict:
        data: dict = {
            "id": self.id,
            "meals": [m.to_dict() for m in self.meals],
            "totalCost": self.total_cost,
            "familySize": self.family_size,
            "preferences": self.preferences.to_dict(),
            "source": self.source,
        }
        if self.grocery_list is not None:
            data["groceryList"] = self.grocery_list.to_dict()
        return data


def _in_category_order(meals: list[Meal]) -> list[Meal]:
    rank = {c: i for i, c in enumerate(MEAL_CATEGORIES)}
    return sorted(meals, key=lambda m: rank.get(m.category, len(rank)))


def _meal_line(meal: Meal) -> str:
    names = ", ".join(i.name for i in meal.ingredients)
    return (
        f"  {meal.category.capitalize():<10} {meal.name} "
        f"- {format_price(meal.cost)}\n             {names}"
    )
