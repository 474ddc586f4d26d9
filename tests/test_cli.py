"""Tests for the CLI module."""

import json
import logging

import pytest
from click.testing import CliRunner

from grocery_parser import __version__
from grocery_parser.cli import cli


@pytest.fixture
def runner():
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI reconfigures the root logger; put it back after each test."""
    root_logger = logging.getLogger()
    package_logger = logging.getLogger("grocery_parser")
    handlers = root_logger.handlers[:]
    levels = root_logger.level, package_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(levels[0])
    package_logger.setLevel(levels[1])


@pytest.fixture
def clear_env_user(monkeypatch):
    monkeypatch.delenv("GROCERY_PARSER_USER_ID", raising=False)


# ============================================================================
# Main CLI Tests
# ============================================================================


class TestMainCli:
    """Tests for the main CLI group."""

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "parse-list" in result.output
        assert "import-plan" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


# ============================================================================
# parse-list Tests
# ============================================================================


class TestParseListCommand:
    """Tests for the parse-list command."""

    def test_inline_text(self, runner):
        result = runner.invoke(cli, ["parse-list", "--text", "2 lbs chicken, milk, paper towels"])

        assert result.exit_code == 0
        assert "2 lbs chicken  [meat]" in result.output
        assert "milk  [dairy]" in result.output
        assert "Items: 3 (meat: 1, dairy: 1, other: 1)" in result.output

    def test_json(self, runner):
        result = runner.invoke(cli, ["parse-list", "--json", "-t", "1/2 cup flour"])

        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {
                "original": "1/2 cup flour",
                "itemName": "flour",
                "quantity": 0.5,
                "unit": "cup",
                "category": "other",
            }
        ]

    def test_grouped_json(self, runner):
        result = runner.invoke(cli, ["parse-list", "-g", "--json", "-t", "milk; apples; cheese"])

        data = json.loads(result.output)
        assert list(data) == ["dairy", "produce"]
        assert [item["itemName"] for item in data["dairy"]] == ["milk", "cheese"]

    def test_grouped_text(self, runner):
        result = runner.invoke(cli, ["parse-list", "--group", "-t", "milk; apples; cheese"])

        assert result.exit_code == 0
        assert "DAIRY (2)" in result.output
        assert "PRODUCE (1)" in result.output

    def test_stdin(self, runner):
        result = runner.invoke(cli, ["parse-list", "-"], input="Grocery List:\n- Milk\n- Bread\n")

        assert result.exit_code == 0
        assert "Items: 2" in result.output

    def test_file(self, runner, tmp_path):
        path = tmp_path / "list.txt"
        path.write_text("1 dozen eggs\n3 cans soup\n", encoding="utf-8")

        result = runner.invoke(cli, ["parse-list", str(path)])

        assert result.exit_code == 0
        assert "1 dozen eggs" in result.output

    def test_empty_list(self, runner):
        result = runner.invoke(cli, ["parse-list", "-t", ""])
        assert result.exit_code == 0
        assert "No items found." in result.output

    def test_no_input(self, runner):
        result = runner.invoke(cli, ["parse-list"])
        assert result.exit_code == 1

    def test_file_and_text(self, runner, tmp_path):
        path = tmp_path / "list.txt"
        path.write_text("milk", encoding="utf-8")

        result = runner.invoke(cli, ["parse-list", str(path), "-t", "eggs"])
        assert result.exit_code == 1


# ============================================================================
# extract-plan Tests
# ============================================================================


class TestExtractPlanCommand:
    """Tests for the extract-plan command."""

    def test_json(self, runner, narrative_text):
        result = runner.invoke(cli, ["extract-plan", "--json", "-"], input=narrative_text)

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["isMealPlan"] is True
        assert data["totalRecipes"] == 7
        assert data["recipes"][0]["title"] == "Oatmeal with berries and honey"

    def test_text(self, runner):
        text = "Day 1:\nBreakfast: Toast\nLunch: Soup\nDinner: Stew"
        result = runner.invoke(cli, ["extract-plan", "--text", text])

        assert result.exit_code == 0
        assert "Day 1 Breakfast: Toast" in result.output
        assert "Recipes: 3" in result.output

    def test_truncated_count(self, runner):
        text = "\n".join(f"Dinner: Meal {i}" for i in range(9))
        result = runner.invoke(cli, ["extract-plan", "--text", text])

        assert "Showing 7 of 9 recipes" in result.output

    def test_nothing_found(self, runner):
        result = runner.invoke(cli, ["extract-plan", "--text", "hello"])

        assert result.exit_code == 0
        assert "No recipes found." in result.output


# ============================================================================
# import-plan Tests
# ============================================================================


class TestImportPlanCommand:
    """Tests for the import-plan command."""

    def test_display(self, runner, meal_plan_file):
        result = runner.invoke(cli, ["import-plan", str(meal_plan_file)])

        assert result.exit_code == 0
        assert "TEST FAMILY PLAN" in result.output
        assert "Breakfast: Overnight Oats (3 items)" in result.output
        assert "3 tbsp Honey" in result.output
        assert "Days: 2 | Meals: 3 | Shopping items: 8" in result.output

    def test_json_with_user_id(self, runner, meal_plan_file):
        result = runner.invoke(cli, ["import-plan", str(meal_plan_file), "--json", "-u", "anna"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["userId"] == "anna"
        assert data["totalMeals"] == 3
        assert list(data["days"]) == ["Monday", "Tuesday"]

    def test_default_user_id(self, runner, meal_plan_file, clear_env_user):
        result = runner.invoke(cli, ["import-plan", str(meal_plan_file), "--json"])
        assert json.loads(result.output)["userId"] == "local"

    def test_user_id_from_env(self, runner, meal_plan_file, monkeypatch):
        monkeypatch.setenv("GROCERY_PARSER_USER_ID", "household-7")

        result = runner.invoke(cli, ["import-plan", str(meal_plan_file), "--json"])
        assert json.loads(result.output)["userId"] == "household-7"

    def test_json_with_text_times(self, runner, tmp_path, sample_meal_plan):
        dinner = sample_meal_plan["mealPlan"]["days"][0]["meals"]["dinner"]
        dinner.update(prepTime="10 min", cookTime="20 min", servings="4 people")
        del sample_meal_plan["mealPlan"]["days"][1]["meals"]["breakfast"]["cookTime"]
        sample_meal_plan["mealPlan"]["days"][1]["meals"]["breakfast"]["prepTime"] = "5 minutes"
        path = tmp_path / "plan.json"
        path.write_text(json.dumps(sample_meal_plan), encoding="utf-8")

        result = runner.invoke(cli, ["import-plan", str(path), "--json"])

        assert result.exit_code == 0
        days = json.loads(result.output)["days"]
        assert days["Monday"]["dinner"]["totalTime"] == 30
        assert days["Monday"]["dinner"]["servings"] == 4
        assert days["Tuesday"]["breakfast"]["totalTime"] == 5

    def test_invalid_plan(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"mealPlan": {"days": []}}), encoding="utf-8")

        result = runner.invoke(cli, ["import-plan", str(path)])

        assert result.exit_code == 1
        assert "mealPlan.days must be a non-empty list" in result.output

    def test_invalid_json(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        result = runner.invoke(cli, ["import-plan", str(path)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["import-plan", str(tmp_path / "missing.json")])
        assert result.exit_code != 0


# ============================================================================
# export-list Tests
# ============================================================================


class TestExportListCommand:
    """Tests for the export-list command."""

    def test_export_markdown(self, runner, meal_plan_file, tmp_path):
        output = tmp_path / "list.md"
        result = runner.invoke(cli, ["export-list", str(meal_plan_file), str(output)])

        assert result.exit_code == 0
        assert "Exported 8 items" in result.output
        assert "(md)" in result.output
        assert output.read_text(encoding="utf-8").startswith("# Test Family Plan")

    def test_export_json_with_title(self, runner, meal_plan_file, tmp_path):
        output = tmp_path / "list.out"
        result = runner.invoke(
            cli,
            ["export-list", str(meal_plan_file), str(output), "-f", "json", "--title", "Week 2"],
        )

        assert result.exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["title"] == "Week 2"
        assert data["summary"]["total_items"] == 8

    def test_invalid_format(self, runner, meal_plan_file, tmp_path):
        result = runner.invoke(
            cli, ["export-list", str(meal_plan_file), str(tmp_path / "x.pdf"), "-f", "pdf"]
        )
        assert result.exit_code == 2


class TestVerbose:
    """Tests for the --verbose flag."""

    def test_verbose_sets_debug(self, runner):
        result = runner.invoke(cli, ["-v", "parse-list", "-t", "milk"])

        assert result.exit_code == 0
        assert logging.getLogger("grocery_parser").level == logging.DEBUG
