"""Grocery department classification by keyword rules."""

import re
from collections.abc import Iterable
from typing import Literal

Category = Literal["dairy", "bakery", "produce", "meat", "pantry", "frozen", "other"]

CATEGORIES: tuple[Category, ...] = (
    "dairy",
    "bakery",
    "produce",
    "meat",
    "pantry",
    "frozen",
    "other",
)

# Rules overlap ("ice cream" is also "cream"), so order matters: first match wins
CATEGORY_RULES: tuple[tuple[Category, re.Pattern[str]], ...] = (
    ("dairy", re.compile(r"milk|cheese|yogurt|butter|cream|eggs", re.IGNORECASE)),
    ("bakery", re.compile(r"bread|bagel|muffin|cake|cookie", re.IGNORECASE)),
    ("produce", re.compile(r"apple|banana|orange|strawberry|grape|fruit", re.IGNORECASE)),
    (
        "produce",
        re.compile(r"carrot|lettuce|tomato|potato|onion|vegetable|salad", re.IGNORECASE),
    ),
    ("meat", re.compile(r"chicken|beef|pork|turkey|fish|salmon|meat", re.IGNORECASE)),
    ("pantry", re.compile(r"cereal|pasta|rice|beans|soup|sauce|quinoa", re.IGNORECASE)),
    ("frozen", re.compile(r"frozen|ice cream", re.IGNORECASE)),
)


def classify(item_name: str | None) -> Category:
    """
    Classify an item name into a grocery category.

    Args:
        item_name: Item name, any casing

    Returns:
        The first matching category, or "other"
    """
    if not item_name or not isinstance(item_name, str):
        return "other"

    name = item_name.lower()
    for category, pattern in CATEGORY_RULES:
        if pattern.search(name):
            return category

    return "other"


def category_counts(categories: Iterable[str]) -> dict[str, int]:
    """Count occurrences of each category, in first-seen order."""
    counts: dict[str, int] = {}
    for category in categories:
        key = category or "other"
        counts[key] = counts.get(key, 0) + 1
    return counts
