"""Shopping list export in various formats."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from .importer import ShoppingItem, ShoppingList
from .units import format_quantity


def export_to_json(
    shopping_list: ShoppingList,
    filepath: str | Path,
    *,
    title: str | None = None,
) -> None:
    """
    Export shopping list to JSON format.

    Args:
        shopping_list: Consolidated shopping list
        filepath: Output file path
        title: Optional title (defaults to the list name)
    """
    data: dict[str, Any] = {
        "exported_at": datetime.now().isoformat(),
        "title": title or shopping_list.name,
        "items": [item.to_dict() for item in shopping_list.items],
        "summary": {
            "total_items": len(shopping_list.items),
            "categories": sorted({item.category for item in shopping_list.items}),
        },
    }

    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def _group(items: list[ShoppingItem]) -> dict[str, list[ShoppingItem]]:
    grouped: dict[str, list[ShoppingItem]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return grouped


def export_to_markdown(
    shopping_list: ShoppingList,
    filepath: str | Path,
    *,
    title: str | None = None,
) -> None:
    """
    Export shopping list to Markdown format, one checkbox section per category.

    Args:
        shopping_list: Consolidated shopping list
        filepath: Output file path
        title: Optional title (defaults to the list name)
    """
    lines: list[str] = []

    lines.append(f"# {title or shopping_list.name}")
    lines.append("")
    lines.append(f"*Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}*")
    lines.append("")
    lines.append(f"- **Items:** {len(shopping_list.items)}")
    lines.append("")

    for category, items in _group(shopping_list.items).items():
        lines.append(f"## {category.capitalize()}")
        lines.append("")
        for item in items:
            line = f"- [ ] **{item.name}** ({format_quantity(item.quantity)} {item.unit})"
            if item.sources:
                line += f" - {', '.join(item.sources)}"
            lines.append(line)
        lines.append("")

    with open(filepath, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))


def export_shopping_list(
    shopping_list: ShoppingList,
    filepath: str | Path,
    *,
    title: str | None = None,
    format: str | None = None,
) -> str:
    """
    Export shopping list to file.

    Format is auto-detected from file extension if not specified.

    Args:
        shopping_list: Consolidated shopping list
        filepath: Output file path
        title: Optional title
        format: Output format (json, md) - auto-detected if None

    Returns:
        The format used for export
    """
    path = Path(filepath)

    if format is None:
        format_map = {
            ".json": "json",
            ".md": "md",
            ".markdown": "md",
        }
        format = format_map.get(path.suffix.lower(), "md")

    if format == "json":
        export_to_json(shopping_list, filepath, title=title)
    elif format in ("md", "markdown"):
        export_to_markdown(shopping_list, filepath, title=title)
    else:
        raise ValueError(f"Unsupported format: {format}")

    return format
