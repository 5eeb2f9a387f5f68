"""History statistics for the weekly adherence view."""

from dataclasses import dataclass
from datetime import date, timedelta

from macro_tracker.domain.history import DayPoint
from macro_tracker.domain.meals import DayMeals, MealType
from macro_tracker.domain.nutrition import ZERO, Nutrients
from macro_tracker.domain.state import TrackerState
from macro_tracker.services.aggregation import aggregate_day, food_table

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass
class WeekSummary:
    """History for one Monday-to-Sunday week."""

    start: str
    end: str
    week_offset: int
    is_current_week: bool
    daily: list[DayPoint]
    average: Nutrients
    days_with_data: int


@dataclass
class DayDetail:
    """Retained entries of a past day with recomputed totals."""

    date: str
    meals: DayMeals | None
    totals: Nutrients


@dataclass
class StatsService:
    """Service computing history views from a state snapshot."""

    def get_week(
        self, state: TrackerState, today: str, week_offset: int = 0
    ) -> WeekSummary:
        """Return the week containing ``today`` shifted by ``week_offset`` weeks.

        Future weeks are not browsable, so positive offsets are clamped to 0.
        """
        offset = min(week_offset, 0)
        anchor = date.fromisoformat(today) + timedelta(weeks=offset)
        monday = anchor - timedelta(days=anchor.weekday())
        records = {entry.date: entry for entry in state.history}

        daily: list[DayPoint] = []
        for index in range(7):
            day = (monday + timedelta(days=index)).isoformat()
            record = records.get(day)
            daily.append(
                DayPoint(
                    date=day,
                    weekday=_WEEKDAYS[index],
                    totals=record.totals if record else ZERO,
                    has_data=record is not None,
                    is_training_day=record.is_training_day if record else None,
                )
            )

        with_data = [point for point in daily if point.has_data]
        total = ZERO
        for point in with_data:
            total = total + point.totals
        average = total.scaled(1 / len(with_data)) if with_data else ZERO

        return WeekSummary(
            start=daily[0].date,
            end=daily[-1].date,
            week_offset=offset,
            is_current_week=offset == 0,
            daily=daily,
            average=average,
            days_with_data=len(with_data),
        )

    def get_day_detail(self, state: TrackerState, day: str) -> DayDetail:
        """Return the stored entries of a day, totals use the current foods."""
        meals = state.day_meals.get(day)
        if meals is None:
            return DayDetail(date=day, meals=None, totals=ZERO)
        return DayDetail(
            date=day,
            meals={m: meals.get(m, ()) for m in MealType},
            totals=aggregate_day(meals, food_table(state.foods)),
        )
