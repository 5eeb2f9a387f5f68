"""Daily rollover of the active meal log."""

import logging
from dataclasses import replace
from datetime import datetime
from zoneinfo import ZoneInfo

from macro_tracker.domain.history import HistoryEntry
from macro_tracker.domain.meals import empty_day
from macro_tracker.domain.state import TrackerState
from macro_tracker.services.aggregation import aggregate_day, food_table

_logger = logging.getLogger(__name__)


def today_key(timezone_name: str, now: datetime | None = None) -> str:
    """Return the local calendar date as ``YYYY-MM-DD``."""
    tz = ZoneInfo(timezone_name)
    current = now.astimezone(tz) if now else datetime.now(tz=tz)
    return current.date().isoformat()


def check_rollover(state: TrackerState, today: str) -> TrackerState:
    """Start a fresh day when the date changed since the last reset."""
    if state.last_reset == today and state.active_day == today:
        return state
    archived = archive_active_day(state) if state.active_day else state
    _logger.info(
        "Daily reset: previous_day=%s new_day=%s",
        state.active_day or None,
        today,
    )
    day_meals = dict(archived.day_meals)
    day_meals[today] = empty_day()
    reset = replace(
        archived,
        active_day=today,
        day_meals=day_meals,
        last_reset=today,
        is_training_day=True,
    )
    return archive_active_day(reset)


def archive_active_day(state: TrackerState) -> TrackerState:
    """Replace the history record for the active day with fresh totals."""
    totals = aggregate_day(state.active_log, food_table(state.foods))
    record = HistoryEntry(
        date=state.active_day,
        is_training_day=state.is_training_day,
        totals=totals,
    )
    history = tuple(entry for entry in state.history if entry.date != state.active_day)
    return replace(state, history=(*history, record))
