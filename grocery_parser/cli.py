"""CLI entry point for grocery-parser."""

import json
from typing import Any, TextIO

import click

from . import __version__
from .categories import category_counts
from .config import APP_NAME, get_default_user_id
from .export import export_shopping_list
from .grocery_list import group_by_category, parse_grocery_list
from .importer import (
    ImportedMealPlan,
    MealPlanValidationError,
    import_meal_plan,
    summarize_import,
    validate_meal_plan,
)
from .item_parser import ParsedItem
from .logging_config import configure_logging
from .narrative import NarrativeMealPlan, extract_meal_plan
from .units import format_quantity


def read_input(source: TextIO | None, text: str | None) -> str:
    """Get input from --text or a file/stdin argument."""
    if text is not None and source is not None:
        click.echo("✗ Provide either a file or --text, not both.", err=True)
        raise SystemExit(1)
    if text is not None:
        return text
    if source is None:
        click.echo("✗ Provide a file (or - for stdin) or use --text.", err=True)
        raise SystemExit(1)
    return source.read()


def load_json(source: TextIO) -> Any:
    try:
        return json.load(source)
    except json.JSONDecodeError as e:
        click.echo(f"✗ Invalid JSON: {e}", err=True)
        raise SystemExit(1) from None


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def display_items(items: list[ParsedItem], grouped: bool = False) -> None:
    """Display parsed grocery items."""
    if not items:
        click.echo("No items found.")
        return

    if grouped:
        for category, members in group_by_category(items).items():
            click.echo(f"\n{category.upper()} ({len(members)})")
            for item in members:
                click.echo(f"  • {item}")
    else:
        for i, item in enumerate(items, 1):
            click.echo(f"{i:3}. {item}  [{item.category}]")

    click.echo()
    counts = category_counts(item.category for item in items)
    summary = ", ".join(f"{category}: {count}" for category, count in counts.items())
    click.echo(f"Items: {len(items)} ({summary})")


def display_recipes(result: NarrativeMealPlan) -> None:
    """Display recipes extracted from narrative text."""
    if not result.recipes:
        click.echo("No recipes found.")
        return

    for recipe in result.recipes:
        day = f"{recipe.day} " if recipe.day else ""
        click.echo(f"\n{day}{recipe.meal_type.title()}: {recipe.title}")
        for ingredient in recipe.ingredients:
            click.echo(f"  • {ingredient}")
        for i, instruction in enumerate(recipe.instructions, 1):
            click.echo(f"  {i}. {instruction}")

    click.echo()
    shown = len(result.recipes)
    if result.total_recipes > shown:
        click.echo(f"Showing {shown} of {result.total_recipes} recipes")
    else:
        click.echo(f"Recipes: {shown}")


def display_plan(plan: ImportedMealPlan) -> None:
    """Display an imported meal plan and its shopping list."""
    click.echo()
    click.echo("=" * 60)
    click.echo(plan.name.upper())
    click.echo("=" * 60)

    for day_name, meals in plan.days.items():
        click.echo(f"\n{day_name}")
        for meal_type, meal in meals.items():
            click.echo(f"  {meal_type.title()}: {meal.name} ({len(meal.items)} items)")

    shopping_list = plan.shopping_list
    click.echo()
    click.echo("-" * 60)
    click.echo(shopping_list.name)
    click.echo("-" * 60)
    current_category = None
    for item in shopping_list.items:
        if item.category != current_category:
            current_category = item.category
            click.echo(f"\n{current_category.upper()}")
        click.echo(f"  • {format_quantity(item.quantity)} {item.unit} {item.name}")

    summary = summarize_import(plan)
    click.echo()
    click.echo(
        f"Days: {summary.days_planned} | Meals: {summary.total_meals} | "
        f"Shopping items: {summary.shopping_items}"
    )


def _import_or_exit(document: Any, user_id: str) -> ImportedMealPlan:
    validation = validate_meal_plan(document)
    for warning in validation.warnings:
        click.echo(f"⚠️  {warning}", err=True)
    if not validation.success:
        click.echo("✗ Invalid meal plan:", err=True)
        for error in validation.errors:
            click.echo(f"  - {error}", err=True)
        raise SystemExit(1)

    try:
        return import_meal_plan(document, user_id)
    except MealPlanValidationError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None


# ============================================================================
# Main CLI Group
# ============================================================================


@click.group()
@click.version_option(version=__version__, prog_name=APP_NAME)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Grocery list and meal plan parser.

    Turn grocery lists, meal plan text and JSON meal plans into structured
    items and shopping lists.
    """
    configure_logging("DEBUG" if verbose else None)


# ============================================================================
# Parsing Commands
# ============================================================================


@cli.command("parse-list")
@click.argument("source", type=click.File("r", encoding="utf-8"), required=False)
@click.option("--text", "-t", "input_text", help="Grocery list as inline text")
@click.option("--group", "-g", is_flag=True, help="Group items by category")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def parse_list_cmd(source: TextIO | None, input_text: str | None, group: bool, as_json: bool):
    """Parse a grocery list into items.

    Examples:

    \b
        grocery-parser parse-list list.txt
        grocery-parser parse-list --text "2 lbs chicken, 1 gallon milk, bread"
        cat list.txt | grocery-parser parse-list - --group
    """
    items = parse_grocery_list(read_input(source, input_text))

    if as_json:
        if group:
            echo_json(
                {
                    category: [item.to_dict() for item in members]
                    for category, members in group_by_category(items).items()
                }
            )
        else:
            echo_json([item.to_dict() for item in items])
        return

    display_items(items, grouped=group)


@cli.command("extract-plan")
@click.argument("source", type=click.File("r", encoding="utf-8"), required=False)
@click.option("--text", "-t", "input_text", help="Meal plan as inline text")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def extract_plan_cmd(source: TextIO | None, input_text: str | None, as_json: bool):
    """Extract recipes from a narrative meal plan."""
    result = extract_meal_plan(read_input(source, input_text))

    if as_json:
        echo_json(result.to_dict())
        return

    display_recipes(result)


@cli.command("import-plan")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--user-id", "-u", help="Owner of the imported plan")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def import_plan_cmd(source: TextIO, user_id: str | None, as_json: bool):
    """Import a structured JSON meal plan and build its shopping list."""
    plan = _import_or_exit(load_json(source), user_id or get_default_user_id())

    if as_json:
        echo_json(plan.to_dict())
        return

    display_plan(plan)


@cli.command("export-list")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.argument("output", type=click.Path(dir_okay=False))
@click.option("--format", "-f", "fmt", type=click.Choice(["json", "md"]), help="Output format")
@click.option("--title", help="Title for the exported list")
def export_list_cmd(source: TextIO, output: str, fmt: str | None, title: str | None):
    """Export the shopping list of a JSON meal plan to a file."""
    plan = _import_or_exit(load_json(source), get_default_user_id())

    used_format = export_shopping_list(plan.shopping_list, output, title=title, format=fmt)
    click.echo(f"✓ Exported {len(plan.shopping_list.items)} items to {output} ({used_format})")


if __name__ == "__main__":
    cli()
