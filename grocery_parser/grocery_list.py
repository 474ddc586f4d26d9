"""Multi-line grocery list parsing."""

import logging
import re

from .categories import Category
from .item_parser import ParsedItem, parse_line

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\n;,]")
_NOISE_HEADER = re.compile(r"^(grocery list|shopping list|to buy|items needed):?$", re.IGNORECASE)


def split_lines(text: str) -> list[str]:
    """
    Split grocery text into candidate item lines.

    Splits on newlines, semicolons and commas, trims each fragment and
    drops empty fragments and list headers like "Grocery List:".
    """
    if not isinstance(text, str):
        return []

    lines = []
    for fragment in _SEPARATORS.split(text):
        fragment = fragment.strip()
        if not fragment or _NOISE_HEADER.match(fragment):
            continue
        lines.append(fragment)
    return lines


def parse_grocery_list(text: str) -> list[ParsedItem]:
    """
    Parse a grocery list into items, preserving input order.

    Args:
        text: Newline, semicolon or comma separated list

    Returns:
        List of ParsedItem (empty for empty or non-string input)
    """
    items = [parse_line(line) for line in split_lines(text)]
    logger.debug("Parsed %d grocery items", len(items))
    return items


def group_by_category(items: list[ParsedItem]) -> dict[Category, list[ParsedItem]]:
    """Group already-parsed items by category, in first-seen category order."""
    grouped: dict[Category, list[ParsedItem]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return grouped


def parse_grocery_list_grouped(text: str) -> dict[Category, list[ParsedItem]]:
    """Parse a grocery list and group the items by category."""
    return group_by_category(parse_grocery_list(text))
