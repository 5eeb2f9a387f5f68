"""Domain models for historical adherence."""

from dataclasses import dataclass

from macro_tracker.domain.nutrition import Nutrients


@dataclass(frozen=True)
class HistoryEntry:
    """Aggregated totals archived for a calendar day."""

    date: str
    is_training_day: bool
    totals: Nutrients


@dataclass(frozen=True)
class DayPoint:
    """A single day of a weekly history view."""

    date: str
    weekday: str
    totals: Nutrients
    has_data: bool
    is_training_day: bool | None = None
