"""Shared fixtures for grocery-parser tests."""

import itertools
import json

import pytest


@pytest.fixture
def sequential_ids():
    """Deterministic recipe id factory."""
    counter = itertools.count(1)
    return lambda: f"recipe_{next(counter)}"


@pytest.fixture
def narrative_text():
    """Meal plan text as a chat assistant would write it."""
    return """Here's a 2-day healthy meal plan for a family of 4:

MEAL PLAN

Day 1 (Monday):
- Breakfast: Oatmeal with berries and honey
- Lunch: Turkey and avocado sandwiches
- Dinner: Baked chicken with roasted vegetables
- Snacks: Apple slices with peanut butter, carrot sticks

Day 2 (Tuesday):
- Breakfast: Greek yogurt parfaits with granola
- Lunch: Quinoa bowls with chickpeas
- Dinner: Salmon with brown rice and broccoli

GROCERY LIST

Produce:
- Bananas (2 bunches)
- Apples (8)
- Chicken breasts (4 lbs)"""


@pytest.fixture
def sample_meal_plan():
    """Structured meal plan with the same item in two units across two days."""
    return {
        "mealPlan": {
            "title": "Test Family Plan",
            "servings": 4,
            "startDate": "2025-01-06",
            "endDate": "2025-01-07",
            "days": [
                {
                    "day": 1,
                    "date": "2025-01-06",
                    "dayName": "Monday",
                    "meals": {
                        "breakfast": {
                            "name": "Overnight Oats",
                            "prepTime": 10,
                            "cookTime": 0,
                            "servings": 4,
                            "ingredients": [
                                {"item": "rolled oats", "amount": 2, "unit": "cups"},
                                {"item": "milk", "amount": 2, "unit": "cups"},
                                {"item": "honey", "amount": 2, "unit": "tbsp"},
                            ],
                            "instructions": ["Mix everything", "Refrigerate overnight"],
                            "tags": ["make-ahead", "vegetarian"],
                        },
                        "dinner": {
                            "name": "Baked Salmon",
                            "prepTime": 10,
                            "cookTime": 25,
                            "servings": 4,
                            "ingredients": [
                                {
                                    "item": "salmon fillets",
                                    "amount": 4,
                                    "unit": "pieces",
                                    "size": "6 oz each",
                                },
                                {"item": "olive oil", "amount": 3, "unit": "tbsp"},
                                {"item": "lemon", "amount": 1, "unit": "whole", "prep": "sliced"},
                            ],
                            "instructions": ["Preheat oven", "Bake salmon"],
                            "tags": ["high-protein"],
                        },
                    },
                },
                {
                    "day": 2,
                    "date": "2025-01-07",
                    "dayName": "Tuesday",
                    "meals": {
                        "breakfast": {
                            "name": "Oat Porridge",
                            "prepTime": 5,
                            "cookTime": 10,
                            "ingredients": [
                                {"item": "rolled oats", "amount": 1, "unit": "cup"},
                                {"item": "Honey", "amount": 1, "unit": "tbsp"},
                                {"item": "large eggs", "amount": 8, "unit": "whole"},
                            ],
                        },
                    },
                },
            ],
        }
    }


@pytest.fixture
def meal_plan_file(tmp_path, sample_meal_plan):
    """Sample meal plan written to a JSON file."""
    path = tmp_path / "plan.json"
    path.write_text(json.dumps(sample_meal_plan), encoding="utf-8")
    return path
