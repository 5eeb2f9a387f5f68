"""Tests for nutrient aggregation."""

import pytest

from macro_tracker.domain.meals import MealType, empty_day
from macro_tracker.domain.nutrition import ZERO
from macro_tracker.services.aggregation import (
    aggregate_day,
    aggregate_entries,
    food_table,
    resolve_food,
    to_grams,
)
from tests.conftest import CHICKEN, RICE, make_entry, make_food


def test_aggregate_entries_scales_per_100g() -> None:
    food_a = make_food("a", kcal=200, protein=10, carbs=30, fat=5)
    food_b = make_food("b", kcal=150, protein=20, carbs=5, fat=10)
    foods = food_table([food_a, food_b])

    totals = aggregate_entries(
        [make_entry("1", "a", 100), make_entry("2", "b", 50)], foods
    )

    assert totals.kcal == pytest.approx(275)
    assert totals.protein == pytest.approx(20)
    assert totals.carbs == pytest.approx(32.5)
    assert totals.fat == pytest.approx(10)


def test_unresolved_entry_contributes_nothing() -> None:
    foods = food_table([CHICKEN])

    assert aggregate_entries([make_entry("1", "missing", 250)], foods) == ZERO
    assert resolve_food(foods, "missing") is None


def test_aggregate_is_order_independent() -> None:
    foods = food_table([CHICKEN, RICE])
    entries = [make_entry("1", "chicken", 120), make_entry("2", "rice", 80)]

    forward = aggregate_entries(entries, foods)
    backward = aggregate_entries(list(reversed(entries)), foods)

    assert forward.kcal == pytest.approx(backward.kcal)
    assert forward.fiber == pytest.approx(backward.fiber)


def test_aggregate_day_sums_every_slot() -> None:
    foods = food_table([CHICKEN, RICE])
    day = empty_day()
    day[MealType.LUNCH] = (make_entry("1", "chicken", 100),)
    day[MealType.DINNER] = (make_entry("2", "rice", 100),)

    totals = aggregate_day(day, foods)

    assert totals.kcal == pytest.approx(295)
    assert totals.fiber == pytest.approx(0.4)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (150, 150.0),
        ("80", 80.0),
        ("12,5", 12.5),
        ("", 0.0),
        ("abc", 0.0),
        (None, 0.0),
        (float("nan"), 0.0),
        (-20, 0.0),
    ],
)
def test_to_grams_coerces_invalid_input(raw: object, expected: float) -> None:
    assert to_grams(raw) == expected
