"""Unit vocabularies and quantity-token parsing for grocery lines."""

import re
from typing import Literal

UnitFamily = Literal["weight", "volume", "cooking", "packaging", "dozen"]

# Unit words by family, in the priority order the line parser tries them
UNIT_FAMILIES: dict[UnitFamily, tuple[str, ...]] = {
    "weight": (
        "lb",
        "lbs",
        "pound",
        "pounds",
        "oz",
        "ounce",
        "ounces",
        "kg",
        "kilogram",
        "kilograms",
        "g",
        "gram",
        "grams",
    ),
    "volume": (
        "l",
        "liter",
        "liters",
        "ml",
        "milliliter",
        "milliliters",
        "gal",
        "gallon",
        "gallons",
    ),
    "cooking": (
        "cup",
        "cups",
        "tbsp",
        "tablespoon",
        "tablespoons",
        "tsp",
        "teaspoon",
        "teaspoons",
    ),
    "packaging": (
        "pack",
        "packs",
        "package",
        "packages",
        "bag",
        "bags",
        "box",
        "boxes",
        "can",
        "cans",
        "jar",
        "jars",
        "bottle",
        "bottles",
    ),
    "dozen": ("dozen", "doz"),
}

ALL_UNITS: tuple[str, ...] = tuple(unit for units in UNIT_FAMILIES.values() for unit in units)

NUMBER_WORDS: dict[str, int] = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
}

# Unicode vulgar fractions
FRACTIONS: dict[str, float] = {
    "½": 0.5,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "¼": 0.25,
    "¾": 0.75,
    "⅕": 0.2,
    "⅖": 0.4,
    "⅗": 0.6,
    "⅘": 0.8,
    "⅙": 1 / 6,
    "⅚": 5 / 6,
    "⅛": 0.125,
    "⅜": 0.375,
    "⅝": 0.625,
    "⅞": 0.875,
}

FRACTION_CHARS = "".join(FRACTIONS)


def unit_alternation(units: tuple[str, ...]) -> str:
    """
    Build a regex alternation for unit words.

    Longer words come first so "lbs" wins over "lb" and "grams" over "g".
    """
    return "|".join(re.escape(u) for u in sorted(units, key=len, reverse=True))


def unit_family(unit: str | None) -> UnitFamily | None:
    """Get the family a unit word belongs to, ignoring case and a plural "s"."""
    if not unit:
        return None

    unit_lower = unit.lower().strip().rstrip(".")
    for family, units in UNIT_FAMILIES.items():
        if unit_lower in units:
            return family
        if unit_lower.endswith("s") and unit_lower[:-1] in units:
            return family

    return None


def is_unit(word: str | None) -> bool:
    """Check if a word is a known unit."""
    return unit_family(word) is not None


_SIMPLE_NUMBER = re.compile(r"^\d+(?:\.\d+)?$")
_SIMPLE_FRACTION = re.compile(r"^(\d+)/(\d+)$")
_MIXED_NUMBER = re.compile(r"^(\d+)\s+(\d+)/(\d+)$")
_UNICODE_FRACTION = re.compile(rf"^(\d+)?\s*([{FRACTION_CHARS}])$")


def parse_quantity(token: str | int | float | None) -> float | None:
    """
    Parse a quantity token into a number.

    Examples:
        "2" -> 2.0
        "1.5" -> 1.5
        "1/2" -> 0.5
        "1 1/2" -> 1.5
        "1½" -> 1.5
        "twelve" -> 12.0

    Returns:
        The value, or None if the token is not a quantity
    """
    if token is None or isinstance(token, bool):
        return None
    if isinstance(token, int | float):
        return float(token)
    if not isinstance(token, str):
        return None

    text = token.strip().lower()
    if not text:
        return None

    if _SIMPLE_NUMBER.match(text):
        return float(text)

    if text in NUMBER_WORDS:
        return float(NUMBER_WORDS[text])

    match = _SIMPLE_FRACTION.match(text)
    if match:
        numerator, denominator = int(match.group(1)), int(match.group(2))
        if denominator == 0:
            return None
        return numerator / denominator

    match = _MIXED_NUMBER.match(text)
    if match:
        whole, numerator, denominator = (int(g) for g in match.groups())
        if denominator == 0:
            return None
        return whole + numerator / denominator

    match = _UNICODE_FRACTION.match(text)
    if match:
        whole = int(match.group(1)) if match.group(1) else 0
        return whole + FRACTIONS[match.group(2)]

    return None


def format_quantity(quantity: float | None) -> str:
    """Format a quantity for display, dropping a trailing ".0"."""
    if quantity is None:
        return ""
    if quantity == int(quantity):
        return str(int(quantity))
    return f"{quantity:.2f}".rstrip("0").rstrip(".")
