"""Single-line grocery item parsing.

A line such as ``"- 2 lbs chicken breast"`` is cleaned of list decoration,
then run through an ordered table of quantity matchers. The first matcher
that accepts the line decides the quantity, unit and item name.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Protocol

from .categories import Category, classify
from .units import (
    ALL_UNITS,
    FRACTION_CHARS,
    NUMBER_WORDS,
    UNIT_FAMILIES,
    format_quantity,
    parse_quantity,
    unit_alternation,
)

logger = logging.getLogger(__name__)

BULLET_GLYPHS = "-*•·◦▪▫◆◇→➤➢>"

_BULLET = re.compile(rf"^[{re.escape(BULLET_GLYPHS)}]\s*")
# "1. milk" is an ordinal, "1.5 lbs" is not
_NUMERIC_ORDINAL = re.compile(r"^\d+\.(?!\d)\s*")
_LETTER_ORDINAL = re.compile(r"^[a-z]\)\s*", re.IGNORECASE)

_UNIT_SPLIT = re.compile(
    rf"^(?P<unit>(?:{unit_alternation(ALL_UNITS)})s?)\b\.?\s*(?P<name>.*)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ParsedItem:
    """A normalized grocery list entry."""

    original: str
    item_name: str
    quantity: float | None = None
    unit: str | None = None
    category: Category = "other"

    def __str__(self) -> str:
        parts = []
        if self.quantity is not None:
            parts.append(format_quantity(self.quantity))
        if self.unit:
            parts.append(self.unit)
        parts.append(self.item_name)
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert item to a JSON-ready dictionary."""
        return {
            "original": self.original,
            "itemName": self.item_name,
            "quantity": self.quantity,
            "unit": self.unit,
            "category": self.category,
        }


@dataclass(frozen=True)
class Extraction:
    """Quantity, unit and name taken from a cleaned line."""

    quantity: float
    unit: str | None
    item_name: str


class Matcher(Protocol):
    """One entry of the quantity matcher table."""

    name: str

    def try_match(self, text: str) -> Extraction | None: ...


@dataclass(frozen=True)
class PatternMatcher:
    """
    Matcher driven by a regex with ``qty`` and ``rest`` groups.

    The rest of the line is split into a unit and an item name against the
    full unit vocabulary, whichever matcher captured it.
    """

    name: str
    pattern: re.Pattern[str]

    def try_match(self, text: str) -> Extraction | None:
        match = self.pattern.match(text)
        if not match:
            return None

        quantity = parse_quantity(match.group("qty"))
        if quantity is None:
            return None

        unit, item_name = split_unit(match.group("rest"))
        if not item_name:
            return None

        return Extraction(quantity=quantity, unit=unit, item_name=item_name)


def _unit_matcher(name: str, units: tuple[str, ...], quantity: str) -> PatternMatcher:
    pattern = re.compile(
        rf"^(?P<qty>{quantity})\s*(?P<rest>(?:{unit_alternation(units)})s?\b.*)$",
        re.IGNORECASE,
    )
    return PatternMatcher(name, pattern)


_DECIMAL = r"\d+(?:\.\d+)?"
_INTEGER = r"\d+"

MATCHERS: tuple[Matcher, ...] = (
    _unit_matcher("weight", UNIT_FAMILIES["weight"], _DECIMAL),
    _unit_matcher("volume", UNIT_FAMILIES["volume"], _DECIMAL),
    _unit_matcher("cooking", UNIT_FAMILIES["cooking"], _DECIMAL),
    _unit_matcher("packaging", UNIT_FAMILIES["packaging"], _DECIMAL),
    _unit_matcher("dozen", UNIT_FAMILIES["dozen"], _INTEGER),
    PatternMatcher(
        "number",
        re.compile(rf"^(?P<qty>{_DECIMAL})\s+(?![\s\d{FRACTION_CHARS}])(?P<rest>.+)$"),
    ),
    PatternMatcher(
        "number_word",
        re.compile(rf"^(?P<qty>{'|'.join(NUMBER_WORDS)})\s+(?P<rest>\S.*)$", re.IGNORECASE),
    ),
    PatternMatcher("fraction", re.compile(r"^(?P<qty>\d+/\d+)\s+(?P<rest>\S.*)$")),
    PatternMatcher("mixed_number", re.compile(r"^(?P<qty>\d+\s+\d+/\d+)\s+(?P<rest>\S.*)$")),
    PatternMatcher(
        "unicode_fraction",
        re.compile(rf"^(?P<qty>(?:\d+\s*)?[{FRACTION_CHARS}])\s*(?P<rest>\S.*)$"),
    ),
)


def strip_prefixes(text: str) -> str:
    """
    Remove list decoration from the start of a line.

    Strips a bullet glyph, then a numeric ordinal, then a lettered ordinal,
    and repeats until nothing more comes off (``"- 1. milk"`` -> ``"milk"``).
    """
    cleaned = text.strip()
    while True:
        stripped = _BULLET.sub("", cleaned, count=1).strip()
        stripped = _NUMERIC_ORDINAL.sub("", stripped, count=1).strip()
        stripped = _LETTER_ORDINAL.sub("", stripped, count=1).strip()
        if stripped == cleaned:
            return cleaned
        cleaned = stripped


def split_unit(rest: str) -> tuple[str | None, str]:
    """
    Split a leading unit word off the text after a quantity.

    Returns:
        Tuple of (unit, item_name). Unit is None when the text does not
        start with a known unit, or when the unit is all there is.
    """
    rest = rest.strip()
    match = _UNIT_SPLIT.match(rest)
    if match:
        name = strip_prefixes(match.group("name"))
        if name:
            return match.group("unit"), name
        return None, ""
    return None, strip_prefixes(rest)


def extract_quantity(text: str) -> Extraction | None:
    """
    Run the matcher table over a cleaned line.

    A candidate is only accepted when its item name holds no further
    quantity, so parsing an item name again never extracts anything.
    """
    candidates: dict[str, list[Extraction]] = {}
    pending = [text]
    while pending:
        current = pending.pop()
        if current in candidates:
            continue
        found = []
        for matcher in MATCHERS:
            candidate = matcher.try_match(current)
            if candidate is not None:
                found.append(candidate)
                pending.append(candidate.item_name)
        candidates[current] = found

    # An item name is always shorter than the text it came from, so
    # resolving shortest first settles every name before it is needed
    results: dict[str, Extraction | None] = {}
    for current in sorted(candidates, key=len):
        results[current] = next(
            (c for c in candidates[current] if results[c.item_name] is None),
            None,
        )
    return results[text]


def parse_line(line: str) -> ParsedItem:
    """
    Parse one line of grocery-list text.

    Args:
        line: Raw line (e.g., "- 2 lbs chicken breast")

    Returns:
        ParsedItem; lines without a recognizable quantity keep the cleaned
        line as the item name with quantity and unit set to None
    """
    if not isinstance(line, str):
        line = ""

    original = line.strip()
    cleaned = strip_prefixes(original)

    extraction = extract_quantity(cleaned)
    if extraction is None:
        quantity, unit, item_name = None, None, cleaned
    else:
        quantity, unit, item_name = extraction.quantity, extraction.unit, extraction.item_name

    item_name = item_name.strip()
    category = classify(item_name)
    logger.debug("Parsed %r -> %s %s %r (%s)", original, quantity, unit, item_name, category)

    return ParsedItem(
        original=original,
        item_name=item_name,
        quantity=quantity,
        unit=unit,
        category=category,
    )
