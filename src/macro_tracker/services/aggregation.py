"""Nutrient aggregation over meal entries."""

import math
from collections.abc import Iterable, Mapping

from macro_tracker.domain.foods import Food
from macro_tracker.domain.meals import DayMeals, MealEntry, all_entries
from macro_tracker.domain.nutrition import ZERO, Nutrients

FoodTable = Mapping[str, Food]


def food_table(foods: Iterable[Food]) -> dict[str, Food]:
    """Index foods by id."""
    return {food.id: food for food in foods}


def resolve_food(foods: FoodTable, food_id: str) -> Food | None:
    """Return the food for an id, or None when it no longer exists."""
    return foods.get(food_id)


def entry_nutrients(entry: MealEntry, foods: FoodTable) -> Nutrients:
    """Return the nutrients of one entry, zero when its food is missing."""
    food = resolve_food(foods, entry.food_id)
    if food is None:
        return ZERO
    return food.per_100g.scaled(to_grams(entry.weight_grams) / 100.0)


def aggregate_entries(entries: Iterable[MealEntry], foods: FoodTable) -> Nutrients:
    """Sum the nutrients of entries against a food table."""
    total = ZERO
    for entry in entries:
        total = total + entry_nutrients(entry, foods)
    return total


def aggregate_day(day_meals: DayMeals, foods: FoodTable) -> Nutrients:
    """Sum the nutrients of every slot in a day log."""
    return aggregate_entries(all_entries(day_meals), foods)


def to_grams(value: object) -> float:
    """Coerce user input to a non-negative weight."""
    number = to_float(value)
    return number if number > 0 else 0.0


def to_float(value: object) -> float:
    """Coerce user input to a finite float, falling back to 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", "."))
        except ValueError:
            return 0.0
    else:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number
