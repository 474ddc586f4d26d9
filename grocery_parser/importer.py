"""Structured (JSON) meal plan import and shopping list consolidation."""

import logging
import math
import re
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .categories import Category, category_counts, classify
from .config import DEFAULT_SERVINGS, DEFAULT_UNIT
from .units import format_quantity, parse_quantity

logger = logging.getLogger(__name__)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

DEFAULT_PLAN_NAME = "Imported Meal Plan"
DEFAULT_DIFFICULTY = "medium"

# "25 minutes", "4 people"
_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)")


class MealPlanValidationError(Exception):
    """Exception raised when importing a meal plan that does not validate."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Invalid meal plan: " + "; ".join(self.errors))


@dataclass
class ValidationResult:
    """Outcome of validating a meal plan document."""

    success: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "errors": self.errors, "warnings": self.warnings}


@dataclass
class MealItem:
    """One ingredient of an imported meal."""

    name: str
    amount: float
    unit: str
    prep: str | None = None
    note: str | None = None
    size: str | None = None

    @property
    def category(self) -> Category:
        return classify(self.name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "amount": self.amount,
            "unit": self.unit,
            "category": self.category,
            "prep": self.prep,
            "note": self.note,
            "size": self.size,
        }


@dataclass
class NormalizedMeal:
    """A meal of an imported plan with its ingredients normalized."""

    name: str
    items: list[MealItem] = field(default_factory=list)
    prep_time: int | float = 0
    cook_time: int | float = 0
    servings: int = DEFAULT_SERVINGS
    instructions: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    description: str = ""
    difficulty: str = DEFAULT_DIFFICULTY
    notes: str = ""

    @property
    def total_time(self) -> int | float:
        return self.prep_time + self.cook_time

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "items": [item.to_dict() for item in self.items],
            "prepTime": self.prep_time,
            "cookTime": self.cook_time,
            "totalTime": self.total_time,
            "servings": self.servings,
            "difficulty": self.difficulty,
            "instructions": list(self.instructions),
            "tags": list(self.tags),
            "notes": self.notes,
        }


@dataclass
class ShoppingItem:
    """A shopping list line summed over every meal that uses it."""

    name: str
    quantity: float
    unit: str
    category: Category
    sources: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{format_quantity(self.quantity)} {self.unit} {self.name}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "category": self.category,
            "sources": list(self.sources),
        }


@dataclass
class ShoppingList:
    """Shopping list derived from a meal plan."""

    name: str
    items: list[ShoppingItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "items": [item.to_dict() for item in self.items]}


@dataclass
class ImportedMealPlan:
    """
    A meal plan in canonical form: day name -> meal type -> meal.

    Totals and the shopping list are computed from ``days`` and cannot be
    set independently.
    """

    id: str
    name: str
    user_id: str
    days: dict[str, dict[str, NormalizedMeal]]
    servings: int = DEFAULT_SERVINGS
    week_of: str | None = None
    end_date: str | None = None

    def meals(self) -> Iterable[NormalizedMeal]:
        for meals in self.days.values():
            yield from meals.values()

    @property
    def recipes(self) -> list[dict[str, Any]]:
        """Every meal as a flat recipe record tagged with its day and meal type."""
        return [
            {**meal.to_dict(), "day": day_name, "mealType": meal_type}
            for day_name, meals in self.days.items()
            for meal_type, meal in meals.items()
        ]

    @property
    def total_meals(self) -> int:
        return sum(1 for meal in self.meals() if meal.items)

    @property
    def total_items(self) -> int:
        return sum(len(meal.items) for meal in self.meals())

    @property
    def shopping_list(self) -> ShoppingList:
        entries = [(item, meal.name) for meal in self.meals() for item in meal.items]
        return ShoppingList(
            name=f"{self.name} - Shopping List",
            items=consolidate_items(entries),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert meal plan to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "userId": self.user_id,
            "servings": self.servings,
            "weekOf": self.week_of,
            "endDate": self.end_date,
            "days": {
                day_name: {meal_type: meal.to_dict() for meal_type, meal in meals.items()}
                for day_name, meals in self.days.items()
            },
            "recipes": self.recipes,
            "totalMeals": self.total_meals,
            "totalItems": self.total_items,
            "shoppingList": self.shopping_list.to_dict(),
        }


@dataclass
class ImportSummary:
    """Summary statistics for an imported meal plan."""

    days_planned: int
    total_meals: int
    unique_meals: int
    shopping_items: int
    servings_planned: int
    categories: dict[str, int] = field(default_factory=dict)

    @property
    def plan_duration(self) -> str:
        return f"{self.days_planned} days"

    def to_dict(self) -> dict[str, Any]:
        return {
            "daysPlanned": self.days_planned,
            "totalMeals": self.total_meals,
            "uniqueMeals": self.unique_meals,
            "shoppingItems": self.shopping_items,
            "servingsPlanned": self.servings_planned,
            "planDuration": self.plan_duration,
            "categories": dict(self.categories),
        }


def _unwrap(document: Any) -> Mapping[str, Any] | None:
    """Get the plan body from ``{"mealPlan": {...}}`` or a bare plan with ``days``."""
    if not isinstance(document, Mapping):
        return None
    plan = document.get("mealPlan")
    if isinstance(plan, Mapping):
        return plan
    if "days" in document:
        return document
    return None


def _coerce_amount(amount: Any) -> float | None:
    value = parse_quantity(amount)
    if value is None or value < 0 or math.isnan(value) or math.isinf(value):
        return None
    return value


def _coerce_count(value: Any, default: int) -> int | float:
    """
    Read a minutes or servings field.

    Accepts numbers, numeric strings and strings that start with a number
    ("25 minutes"). Anything else, including zero, gives ``default``.
    """
    number = _coerce_amount(value)
    if number is None and isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if match:
            number = float(match.group(1))
    if not number:
        return default
    return int(number) if number.is_integer() else number


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _text_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(entry) for entry in value if entry is not None]
    return []


def validate_meal_plan(document: Any) -> ValidationResult:
    """
    Validate a structured meal plan document.

    Every day needs a non-empty ``meals`` object and every meal a non-empty
    ``ingredients`` list of ``{"item": ..., "amount": ..., "unit": ...}``.

    Args:
        document: Parsed JSON, ``{"mealPlan": {"days": [...]}}``

    Returns:
        ValidationResult; ``success`` is False when any error was found
    """
    errors: list[str] = []
    warnings: list[str] = []

    if document is None:
        return ValidationResult(success=False, errors=["Meal plan object is required"])

    plan = _unwrap(document)
    if plan is None:
        return ValidationResult(success=False, errors=["mealPlan property is required"])

    days = plan.get("days")
    if not isinstance(days, list) or not days:
        errors.append("mealPlan.days must be a non-empty list")
        days = []

    for day_number, day in enumerate(days, 1):
        if not isinstance(day, Mapping):
            errors.append(f"Day {day_number}: must be an object")
            continue

        meals = day.get("meals")
        if not isinstance(meals, Mapping) or not meals:
            errors.append(f"Day {day_number}: meals object is required")
            continue

        for meal_type, meal in meals.items():
            label = f"Day {day_number} {meal_type}"
            if not isinstance(meal, Mapping):
                errors.append(f"{label}: meal must be an object")
                continue
            if not meal.get("name"):
                warnings.append(f"{label}: meal name is recommended")

            ingredients = meal.get("ingredients")
            if not isinstance(ingredients, list) or not ingredients:
                errors.append(f"{label}: ingredients list is required")
                continue

            for position, ingredient in enumerate(ingredients, 1):
                where = f"{label} ingredient {position}"
                if not isinstance(ingredient, Mapping):
                    errors.append(f"{where}: must be an object")
                    continue
                item = ingredient.get("item")
                if not isinstance(item, str) or not item.strip():
                    errors.append(f"{where}: item name is required")
                amount = ingredient.get("amount")
                if amount is not None and _coerce_amount(amount) is None:
                    errors.append(f"{where}: invalid amount {amount!r}")

    if not plan.get("title") and not plan.get("name"):
        warnings.append("Meal plan title is recommended")

    if errors:
        logger.warning("Meal plan validation failed with %d error(s)", len(errors))

    return ValidationResult(success=not errors, errors=errors, warnings=warnings)


def resolve_day_name(day: Mapping[str, Any], position: int) -> str:
    """
    Name a day of the plan.

    Uses ``dayName`` when given, else the weekday of ``date``, else the
    weekday of the 1-based ``day`` index (or list position) in a week
    starting on Monday. Past the first week the name is "Day N".
    """
    day_name = day.get("dayName")
    if isinstance(day_name, str) and day_name.strip():
        return day_name.strip()

    date_str = day.get("date")
    if isinstance(date_str, str):
        try:
            return WEEKDAYS[date.fromisoformat(date_str.strip()).weekday()]
        except ValueError:
            pass

    index = day.get("day")
    if not isinstance(index, int) or isinstance(index, bool) or index < 1:
        index = position

    if index <= len(WEEKDAYS):
        return WEEKDAYS[index - 1]
    return f"Day {index}"


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_meal(meal: Mapping[str, Any]) -> NormalizedMeal:
    """Convert a validated meal object to a NormalizedMeal."""
    items = []
    for ingredient in meal.get("ingredients") or []:
        amount = _coerce_amount(ingredient.get("amount"))
        items.append(
            MealItem(
                name=ingredient["item"].strip(),
                amount=1.0 if amount is None else amount,
                unit=_optional_text(ingredient.get("unit")) or DEFAULT_UNIT,
                prep=_optional_text(ingredient.get("prep")),
                note=_optional_text(ingredient.get("note")),
                size=_optional_text(ingredient.get("size")),
            )
        )

    return NormalizedMeal(
        name=_text(meal.get("name")),
        items=items,
        prep_time=_coerce_count(meal.get("prepTime"), 0),
        cook_time=_coerce_count(meal.get("cookTime"), 0),
        servings=int(_coerce_count(meal.get("servings"), DEFAULT_SERVINGS)),
        instructions=_text_list(meal.get("instructions")),
        tags=_text_list(meal.get("tags")),
        description=_text(meal.get("description")),
        difficulty=_text(meal.get("difficulty")) or DEFAULT_DIFFICULTY,
        notes=_text(meal.get("notes")),
    )


def normalize_item_name(name: str) -> str:
    """Normalize an item name for grouping: trimmed, lower-case, single spaces."""
    return " ".join(name.lower().split())


def consolidate_items(entries: Iterable[tuple[MealItem, str]]) -> list[ShoppingItem]:
    """
    Consolidate meal ingredients into a shopping list.

    Groups by normalized name and exact unit, so "2 cups" and "1 cup" of the
    same item stay separate lines. Sums are exact-rounded (``math.fsum``) so
    the result does not depend on traversal order.

    Args:
        entries: (MealItem, meal_name) pairs

    Returns:
        Shopping items sorted by category, then name
    """
    groups: dict[tuple[str, str], list[tuple[MealItem, str]]] = {}

    for item, source in entries:
        key = (normalize_item_name(item.name), item.unit)
        groups.setdefault(key, []).append((item, source))

    shopping: list[ShoppingItem] = []
    for (normalized_name, unit), members in groups.items():
        shopping.append(
            ShoppingItem(
                # Keep the original casing; min() makes the pick order independent
                name=min(item.name for item, _ in members),
                quantity=math.fsum(item.amount for item, _ in members),
                unit=unit,
                category=classify(normalized_name),
                sources=sorted({source for _, source in members if source}),
            )
        )

    shopping.sort(key=lambda s: (s.category, s.name.lower(), s.unit))
    return shopping


def import_meal_plan(
    document: Any,
    user_id: str,
    *,
    plan_id: str | None = None,
) -> ImportedMealPlan:
    """
    Import a structured meal plan.

    The document must pass ``validate_meal_plan``; nothing here repairs an
    invalid one.

    Args:
        document: Parsed JSON meal plan
        user_id: Owner of the imported plan
        plan_id: Optional id (defaults to a random one)

    Returns:
        ImportedMealPlan

    Raises:
        MealPlanValidationError: If the document does not validate
    """
    validation = validate_meal_plan(document)
    if not validation.success:
        raise MealPlanValidationError(validation.errors)

    plan = _unwrap(document)
    if plan is None:
        raise MealPlanValidationError(["mealPlan property is required"])

    days: dict[str, dict[str, NormalizedMeal]] = {}
    for position, day in enumerate(plan["days"], 1):
        day_name = resolve_day_name(day, position)
        if day_name in days:
            day_name = f"{day_name} (Day {position})"

        days[day_name] = {
            str(meal_type): normalize_meal(meal) for meal_type, meal in day["meals"].items()
        }

    imported = ImportedMealPlan(
        id=plan_id or f"mealplan_{uuid.uuid4().hex}",
        name=str(plan.get("title") or plan.get("name") or DEFAULT_PLAN_NAME),
        user_id=user_id,
        days=days,
        servings=int(_coerce_count(plan.get("servings"), DEFAULT_SERVINGS)),
        week_of=plan.get("startDate"),
        end_date=plan.get("endDate"),
    )
    logger.debug(
        "Imported meal plan %r: %d days, %d meals, %d items",
        imported.name,
        len(days),
        imported.total_meals,
        imported.total_items,
    )
    return imported


def summarize_import(plan: ImportedMealPlan) -> ImportSummary:
    """Generate summary statistics for an imported meal plan."""
    shopping_items = plan.shopping_list.items
    return ImportSummary(
        days_planned=len(plan.days),
        total_meals=plan.total_meals,
        unique_meals=len({meal.name.lower() for meal in plan.meals() if meal.name}),
        shopping_items=len(shopping_items),
        servings_planned=plan.servings,
        categories=category_counts(item.category for item in shopping_items),
    )
