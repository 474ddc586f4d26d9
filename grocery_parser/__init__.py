"""Grocery Parser - grocery list and meal plan parsing."""

__version__ = "1.0.0"

from .categories import CATEGORIES, Category, classify
from .grocery_list import group_by_category, parse_grocery_list, parse_grocery_list_grouped
from .importer import (
    ImportedMealPlan,
    MealPlanValidationError,
    ShoppingItem,
    ValidationResult,
    import_meal_plan,
    validate_meal_plan,
)
from .item_parser import ParsedItem, parse_line
from .narrative import NarrativeMealPlan, Recipe, extract_meal_plan

__all__ = [
    "CATEGORIES",
    "Category",
    "classify",
    "ParsedItem",
    "parse_line",
    "parse_grocery_list",
    "parse_grocery_list_grouped",
    "group_by_category",
    "Recipe",
    "NarrativeMealPlan",
    "extract_meal_plan",
    "ImportedMealPlan",
    "ShoppingItem",
    "ValidationResult",
    "MealPlanValidationError",
    "validate_meal_plan",
    "import_meal_plan",
]
