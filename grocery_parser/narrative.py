"""Recipe extraction from narrative meal-plan text.

Meal plans written as prose (typically chat-assistant output) are scanned
line by line. Day headers set the current day, meal headers open a recipe,
and ``Ingredients:`` / ``Instructions:`` markers route the bullet and
numbered lines that follow into the open recipe. The scan is a pure
reducer: ``step(state, line)`` returns a new ``ScanState`` and never
mutates the one it was given.

When the headers yield fewer than three recipes, a looser pass picks up
food-sounding lines as suggested meals.
"""

import logging
import re
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

MAX_RECIPES = 7
MAX_FALLBACK_RECIPES = 5
FALLBACK_THRESHOLD = 3

FALLBACK_MIN_LENGTH = 15
FALLBACK_MAX_LENGTH = 80

DEFAULT_SERVINGS = "4 people"
DEFAULT_PREP_TIME = "15-30 minutes"
DEFAULT_COOK_TIME = "Varies"

SUGGESTED_MEAL = "suggested meal"

_WEEKDAYS = "Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday"

_DAY_HEADER = re.compile(r"^Day\s+\d+(?:\s*\([^)]+\))?:?", re.IGNORECASE)
_WEEKDAY_HEADER = re.compile(rf"^(?:{_WEEKDAYS})\s*:?$", re.IGNORECASE)
_MEAL_HEADER = re.compile(r"^[-*•]?\s*(Breakfast|Lunch|Dinner|Snacks?):\s*(.+)$", re.IGNORECASE)
_INSTRUCTIONS_MARKER = re.compile(r"instructions?:|directions?:|method:|steps:", re.IGNORECASE)
_INGREDIENT_LINE = re.compile(r"^[-•*]\s*(.+)$")
_STEP_LINE = re.compile(r"^\d+\.\s*(.+)$")
_MARKDOWN_EMPHASIS = re.compile(r"\*\*|__")
_MARKDOWN_HEADING = re.compile(r"^#+\s*")

_FALLBACK_QUANTITY_LINE = re.compile(
    r"^\d+\s*(oz|lb|cups?|tbsp|tsp|bunch|bag|jar|can|container|loaf)", re.IGNORECASE
)
_FALLBACK_TITLE_NOISE = re.compile(r"[*#-]+")
FOOD_KEYWORDS = (
    "chicken",
    "salmon",
    "pasta",
    "salad",
    "soup",
    "stir",
    "grilled",
    "baked",
    "with",
    "recipe",
)


def default_recipe_id() -> str:
    return f"recipe_{uuid.uuid4().hex}"


@dataclass
class Recipe:
    """A meal extracted from narrative text."""

    id: str
    title: str
    meal_type: str
    day: str = ""
    ingredients: list[str] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    servings: str | None = None
    prep_time: str = ""
    cook_time: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert recipe to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "mealType": self.meal_type,
            "day": self.day,
            "ingredients": list(self.ingredients),
            "instructions": list(self.instructions),
            "tags": list(self.tags),
            "servings": self.servings,
            "prepTime": self.prep_time,
            "cookTime": self.cook_time,
        }


@dataclass
class NarrativeMealPlan:
    """Result of narrative extraction: at most MAX_RECIPES recipes plus the true total."""

    recipes: list[Recipe]
    total_recipes: int
    is_meal_plan: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "isMealPlan": self.is_meal_plan,
            "recipes": [recipe.to_dict() for recipe in self.recipes],
            "totalRecipes": self.total_recipes,
        }


class ScanMode(Enum):
    NONE = "none"
    INGREDIENTS = "ingredients"
    INSTRUCTIONS = "instructions"


@dataclass(frozen=True)
class ScanState:
    """Scanner state between two lines."""

    mode: ScanMode = ScanMode.NONE
    current_day: str = ""
    current: Recipe | None = None
    recipes: tuple[Recipe, ...] = ()


def _header_text(line: str) -> str:
    """Drop markdown emphasis and heading marks so headers match either way."""
    return _MARKDOWN_HEADING.sub("", _MARKDOWN_EMPHASIS.sub("", line)).strip()


def _day_tag(day: str) -> str:
    return day if "day" in day.lower() else "meal plan"


def _normalize_meal_type(meal_type: str) -> str:
    meal_type = meal_type.lower()
    return "snack" if meal_type == "snacks" else meal_type


def _sealed(state: ScanState) -> tuple[Recipe, ...]:
    """Recipes with the open one appended, if it has a title."""
    if state.current is not None and state.current.title:
        return (*state.recipes, state.current)
    return state.recipes


def step(
    state: ScanState,
    line: str,
    id_factory: Callable[[], str] = default_recipe_id,
) -> ScanState:
    """
    Advance the scanner by one line.

    Args:
        state: State after the previous line
        line: Next raw line
        id_factory: Produces ids for newly opened recipes

    Returns:
        The state after this line
    """
    line = line.strip()
    if not line:
        return state

    header = _header_text(line)

    day_match = _DAY_HEADER.match(header) or _WEEKDAY_HEADER.match(header)
    if day_match:
        day = day_match.group(0).replace(":", "").strip()
        logger.debug("Day header: %s", day)
        return replace(state, current_day=day)

    meal_match = _MEAL_HEADER.match(header)
    if meal_match:
        recipe = Recipe(
            id=id_factory(),
            title=meal_match.group(2).strip(),
            meal_type=_normalize_meal_type(meal_match.group(1)),
            day=state.current_day,
            tags=[_day_tag(state.current_day)],
            servings=DEFAULT_SERVINGS,
            prep_time=DEFAULT_PREP_TIME,
            cook_time=DEFAULT_COOK_TIME,
        )
        logger.debug("Meal header: %s %s: %s", recipe.day, recipe.meal_type, recipe.title)
        return replace(state, mode=ScanMode.NONE, current=recipe, recipes=_sealed(state))

    if "ingredients:" in line.lower():
        return replace(state, mode=ScanMode.INGREDIENTS)

    if _INSTRUCTIONS_MARKER.search(line):
        return replace(state, mode=ScanMode.INSTRUCTIONS)

    current = state.current
    if current is None:
        return state

    if state.mode is ScanMode.INGREDIENTS:
        match = _INGREDIENT_LINE.match(line)
        if match and match.group(1).strip():
            updated = replace(current, ingredients=[*current.ingredients, match.group(1).strip()])
            return replace(state, current=updated)
    elif state.mode is ScanMode.INSTRUCTIONS:
        match = _STEP_LINE.match(line)
        if match and match.group(1).strip():
            updated = replace(
                current, instructions=[*current.instructions, match.group(1).strip()]
            )
            return replace(state, current=updated)

    return state


def finish(state: ScanState) -> list[Recipe]:
    """Seal the open recipe at end of input and return every recipe found."""
    return list(_sealed(state))


def is_fallback_candidate(line: str) -> bool:
    """Check whether a line looks like a meal description on its own."""
    line = line.strip()
    if not line:
        return False

    lower = line.lower()
    if "grocery" in lower or "shopping" in lower:
        return False
    if line.startswith(("-", "•")):
        return False
    if _FALLBACK_QUANTITY_LINE.match(line):
        return False

    if not FALLBACK_MIN_LENGTH <= len(line) <= FALLBACK_MAX_LENGTH:
        return False
    if _STEP_LINE.match(line):
        return False

    return any(keyword in lower for keyword in FOOD_KEYWORDS)


def fallback_recipes(
    lines: list[str],
    id_factory: Callable[[], str] = default_recipe_id,
) -> list[Recipe]:
    """
    Collect suggested meals from loosely formatted text.

    Returns:
        Up to MAX_FALLBACK_RECIPES minimal recipes
    """
    recipes: list[Recipe] = []

    for line in lines:
        if not is_fallback_candidate(line):
            continue

        recipes.append(
            Recipe(
                id=id_factory(),
                title=_FALLBACK_TITLE_NOISE.sub("", line).strip(),
                meal_type=SUGGESTED_MEAL,
                tags=["meal idea"],
            )
        )
        if len(recipes) >= MAX_FALLBACK_RECIPES:
            break

    return recipes


def extract_meal_plan(
    text: str,
    id_factory: Callable[[], str] | None = None,
) -> NarrativeMealPlan:
    """
    Extract recipes from narrative meal-plan text.

    Args:
        text: Free-form meal plan
        id_factory: Optional id generator (defaults to random recipe ids)

    Returns:
        NarrativeMealPlan with at most MAX_RECIPES recipes and the total found
    """
    if not isinstance(text, str) or not text.strip():
        return NarrativeMealPlan(recipes=[], total_recipes=0)

    make_id = id_factory or default_recipe_id
    lines = text.splitlines()

    state = ScanState()
    for line in lines:
        state = step(state, line, make_id)
    recipes = finish(state)

    if len(recipes) < FALLBACK_THRESHOLD:
        logger.debug("Found %d structured recipes, trying fallback scan", len(recipes))
        recipes.extend(fallback_recipes(lines, make_id))

    logger.debug("Meal plan extraction found %d recipes", len(recipes))
    return NarrativeMealPlan(recipes=recipes[:MAX_RECIPES], total_recipes=len(recipes))
