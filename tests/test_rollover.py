"""Tests for the daily rollover."""

from datetime import UTC, datetime

import pytest

from macro_tracker.domain.meals import MealType, empty_day
from macro_tracker.domain.state import TrackerState
from macro_tracker.services.rollover import (
    archive_active_day,
    check_rollover,
    today_key,
)
from tests.conftest import CHICKEN, make_entry


def _state_for(day: str) -> TrackerState:
    log = empty_day()
    log[MealType.LUNCH] = (make_entry("l1", "chicken", 200),)
    state = TrackerState(
        foods=(CHICKEN,),
        is_training_day=False,
        active_day=day,
        day_meals={day: log},
        last_reset=day,
    )
    return archive_active_day(state)


def test_rollover_starts_an_empty_day() -> None:
    state = _state_for("2024-01-01")

    rolled = check_rollover(state, "2024-01-02")

    assert rolled.active_day == "2024-01-02"
    assert rolled.last_reset == "2024-01-02"
    assert rolled.is_training_day is True
    assert all(rolled.active_log[meal] == () for meal in MealType)
    previous = next(h for h in rolled.history if h.date == "2024-01-01")
    assert previous.totals.kcal == pytest.approx(330)
    assert previous.is_training_day is False
    assert rolled.day_meals["2024-01-01"][MealType.LUNCH][0].weight_grams == 200


def test_rollover_is_noop_on_same_day() -> None:
    state = _state_for("2024-01-01")

    assert check_rollover(state, "2024-01-01") is state


def test_rollover_without_previous_reset() -> None:
    rolled = check_rollover(TrackerState(), "2024-03-10")

    assert rolled.active_day == "2024-03-10"
    assert rolled.last_reset == "2024-03-10"
    assert [h.date for h in rolled.history] == ["2024-03-10"]
    assert rolled.history[0].totals.kcal == 0


def test_archive_replaces_existing_record() -> None:
    state = _state_for("2024-01-01")

    archived = archive_active_day(archive_active_day(state))

    assert [h.date for h in archived.history] == ["2024-01-01"]


def test_today_key_uses_local_timezone() -> None:
    late_utc = datetime(2024, 1, 1, 23, 30, tzinfo=UTC)

    assert today_key("UTC", late_utc) == "2024-01-01"
    assert today_key("Europe/Rome", late_utc) == "2024-01-02"
