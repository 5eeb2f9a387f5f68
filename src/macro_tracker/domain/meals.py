"""Domain models for the daily meal log."""

from dataclasses import dataclass
from enum import StrEnum


class MealType(StrEnum):
    """Fixed meal slots of a day, in display order."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    SNACK = "snack"
    DINNER = "dinner"


@dataclass(frozen=True)
class MealEntry:
    """A portion of a food logged in a meal slot."""

    id: str
    food_id: str
    weight_grams: float


DayMeals = dict[MealType, tuple[MealEntry, ...]]


def empty_day() -> DayMeals:
    """Return a log with every meal slot empty."""
    return {meal_type: () for meal_type in MealType}


def all_entries(day_meals: DayMeals) -> list[MealEntry]:
    """Flatten a day log into a single list in slot order."""
    return [entry for meal_type in MealType for entry in day_meals.get(meal_type, ())]
