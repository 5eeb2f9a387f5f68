"""Explicit application state container."""

from dataclasses import dataclass, field

from macro_tracker.domain.foods import Food, Recipe
from macro_tracker.domain.history import HistoryEntry
from macro_tracker.domain.meals import DayMeals, empty_day
from macro_tracker.domain.nutrition import DEFAULT_TARGETS, TargetProfiles


@dataclass(frozen=True)
class TrackerState:
    """Snapshot of everything the tracker persists.

    ``day_meals`` keeps one full log per calendar day so past days can be
    drilled into; the active log is the one keyed by ``active_day``.
    """

    foods: tuple[Food, ...] = ()
    recipes: tuple[Recipe, ...] = ()
    target_profiles: TargetProfiles = DEFAULT_TARGETS
    is_training_day: bool = True
    active_day: str = ""
    day_meals: dict[str, DayMeals] = field(default_factory=dict)
    history: tuple[HistoryEntry, ...] = ()
    last_reset: str | None = None

    @property
    def active_log(self) -> DayMeals:
        """Return the meal log for the active day."""
        return self.day_meals.get(self.active_day) or empty_day()

    def with_active_log(self, log: DayMeals) -> dict[str, DayMeals]:
        """Return a copy of ``day_meals`` with the active log replaced."""
        updated = dict(self.day_meals)
        updated[self.active_day] = log
        return updated
