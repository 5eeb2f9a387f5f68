"""Commands over the tracker state.

Every command is a pure function ``(state, ...) -> state``. Commands that
touch the active log or the training flag re-archive the active day so the
history always matches the live log. ``TrackerService`` wraps them with a
repository: it loads a snapshot, runs the daily rollover check, applies one
command and saves the result.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Protocol
from uuid import uuid4

from macro_tracker.domain.foods import Food, Recipe, RecipeIngredient
from macro_tracker.domain.meals import MealEntry, MealType
from macro_tracker.domain.nutrition import (
    MacroTargets,
    Nutrients,
    TargetProfiles,
)
from macro_tracker.domain.optimizer import OptimizationReport, OptimizationResult
from macro_tracker.domain.state import TrackerState
from macro_tracker.services.aggregation import (
    aggregate_day,
    aggregate_entries,
    food_table,
    to_float,
    to_grams,
)
from macro_tracker.services.optimizer import optimize_meal_for_day
from macro_tracker.services.report import build_report
from macro_tracker.services.residuals import compute_residuals
from macro_tracker.services.rollover import (
    archive_active_day,
    check_rollover,
    today_key,
)

_logger = logging.getLogger(__name__)


class TrackerRepository(Protocol):
    """Persistence interface for tracker snapshots."""

    def load(self) -> TrackerState:
        """Return the last saved state, or a default state."""

    def save(self, state: TrackerState) -> None:
        """Persist a state snapshot."""


def _new_id() -> str:
    return str(uuid4())


def nutrients_from_payload(payload: Mapping[str, object]) -> Nutrients:
    """Build non-negative nutrients from loosely typed input."""
    return Nutrients(
        kcal=max(to_float(payload.get("kcal")), 0.0),
        carbs=max(to_float(payload.get("carbs")), 0.0),
        protein=max(to_float(payload.get("protein")), 0.0),
        fat=max(to_float(payload.get("fat")), 0.0),
        fiber=max(to_float(payload.get("fiber")), 0.0),
    )


def targets_from_payload(payload: Mapping[str, object]) -> MacroTargets:
    """Build a target profile, treating invalid numbers as 0."""
    return MacroTargets(
        kcal=to_float(payload.get("kcal")),
        carbs=to_float(payload.get("carbs")),
        protein=to_float(payload.get("protein")),
        fat=to_float(payload.get("fat")),
        fiber=to_float(payload.get("fiber")),
    )


# Foods


def add_food(state: TrackerState, food: Food) -> TrackerState:
    return replace(state, foods=(*state.foods, food))


def delete_food(state: TrackerState, food_id: str) -> TrackerState:
    """Remove a food and every entry of the active log that uses it."""
    log = state.active_log
    cleaned = {
        meal_type: tuple(entry for entry in entries if entry.food_id != food_id)
        for meal_type, entries in log.items()
    }
    removed = sum(len(log[m]) - len(cleaned[m]) for m in log)
    if removed:
        _logger.info("Food deleted: food_id=%s removed_entries=%s", food_id, removed)
    updated = replace(
        state,
        foods=tuple(food for food in state.foods if food.id != food_id),
        day_meals=state.with_active_log(cleaned),
    )
    return archive_active_day(updated)


# Recipes


def add_recipe(state: TrackerState, recipe: Recipe) -> TrackerState:
    return replace(state, recipes=(*state.recipes, recipe))


def update_recipe(state: TrackerState, recipe: Recipe) -> TrackerState:
    return replace(
        state,
        recipes=tuple(recipe if r.id == recipe.id else r for r in state.recipes),
    )


def delete_recipe(state: TrackerState, recipe_id: str) -> TrackerState:
    return replace(
        state, recipes=tuple(r for r in state.recipes if r.id != recipe_id)
    )


def add_recipe_to_meal(
    state: TrackerState, meal_type: MealType, recipe_id: str
) -> TrackerState:
    """Append one entry per recipe ingredient; unknown recipes are ignored."""
    recipe = next((r for r in state.recipes if r.id == recipe_id), None)
    if recipe is None:
        return state
    entries = tuple(
        MealEntry(id=_new_id(), food_id=ing.food_id, weight_grams=ing.weight_grams)
        for ing in recipe.ingredients
    )
    return _replace_slot(
        state, meal_type, (*state.active_log.get(meal_type, ()), *entries)
    )


def save_meal_as_recipe(
    state: TrackerState, meal_type: MealType, name: str
) -> TrackerState:
    """Store the current entries of a slot as a new recipe."""
    entries = state.active_log.get(meal_type, ())
    if not entries or not name.strip():
        return state
    recipe = Recipe(
        id=_new_id(),
        name=name.strip(),
        ingredients=tuple(
            RecipeIngredient(food_id=e.food_id, weight_grams=e.weight_grams)
            for e in entries
        ),
    )
    return add_recipe(state, recipe)


# Meal entries


def add_entry(
    state: TrackerState, meal_type: MealType, food_id: str, grams: object
) -> TrackerState:
    entry = MealEntry(id=_new_id(), food_id=food_id, weight_grams=to_grams(grams))
    return _replace_slot(
        state, meal_type, (*state.active_log.get(meal_type, ()), entry)
    )


def update_entry(
    state: TrackerState, meal_type: MealType, entry_id: str, grams: object
) -> TrackerState:
    weight = to_grams(grams)
    entries = tuple(
        replace(e, weight_grams=weight) if e.id == entry_id else e
        for e in state.active_log.get(meal_type, ())
    )
    return _replace_slot(state, meal_type, entries)


def delete_entry(
    state: TrackerState, meal_type: MealType, entry_id: str
) -> TrackerState:
    entries = tuple(e for e in state.active_log.get(meal_type, ()) if e.id != entry_id)
    return _replace_slot(state, meal_type, entries)


def apply_optimization(
    state: TrackerState, meal_type: MealType, result: OptimizationResult
) -> TrackerState:
    """Write the simulated weights of an optimizer run back into a slot."""
    final = {item.entry_id: item.final_grams for item in result.items}
    entries = tuple(
        replace(e, weight_grams=final[e.id]) if e.id in final else e
        for e in state.active_log.get(meal_type, ())
    )
    return _replace_slot(state, meal_type, entries)


# Targets


def set_target_profiles(state: TrackerState, profiles: TargetProfiles) -> TrackerState:
    return replace(state, target_profiles=profiles)


def set_training_day(state: TrackerState, is_training_day: bool) -> TrackerState:
    return archive_active_day(replace(state, is_training_day=is_training_day))


def _replace_slot(
    state: TrackerState, meal_type: MealType, entries: tuple[MealEntry, ...]
) -> TrackerState:
    log = dict(state.active_log)
    log[meal_type] = entries
    return archive_active_day(replace(state, day_meals=state.with_active_log(log)))


@dataclass(frozen=True)
class DaySummary:
    """Dashboard view of the active day."""

    date: str
    is_training_day: bool
    targets: MacroTargets
    consumed: Nutrients
    residuals: Nutrients
    meals: dict[MealType, tuple[MealEntry, ...]]
    meal_totals: dict[MealType, Nutrients]


@dataclass
class TrackerService:
    """Application service for the tracker."""

    repository: TrackerRepository
    timezone_name: str = "UTC"
    clock: Callable[[], datetime] | None = None

    def current_state(self) -> TrackerState:
        """Load the state and apply the daily rollover if the date changed."""
        state = self.repository.load()
        checked = check_rollover(state, self._today())
        if checked is not state:
            self.repository.save(checked)
        return checked

    def execute(
        self, command: Callable[..., TrackerState], *args: object
    ) -> TrackerState:
        """Apply a state command and save the result."""
        state = command(self.current_state(), *args)
        self.repository.save(state)
        return state

    def get_day_summary(self) -> DaySummary:
        """Return totals, residuals and per-slot data for the active day."""
        state = self.current_state()
        foods = food_table(state.foods)
        log = state.active_log
        targets = state.target_profiles.for_day(state.is_training_day)
        consumed = aggregate_day(log, foods)
        return DaySummary(
            date=state.active_day,
            is_training_day=state.is_training_day,
            targets=targets,
            consumed=consumed,
            residuals=compute_residuals(targets, consumed),
            meals={m: log.get(m, ()) for m in MealType},
            meal_totals={
                m: aggregate_entries(log.get(m, ()), foods) for m in MealType
            },
        )

    def preview_optimization(
        self, meal_type: MealType
    ) -> tuple[OptimizationResult, OptimizationReport]:
        """Simulate the optimizer on a slot without changing anything."""
        result = optimize_meal_for_day(self.current_state(), meal_type)
        return result, build_report(result)

    def apply_optimization(
        self, meal_type: MealType
    ) -> tuple[OptimizationResult, OptimizationReport]:
        """Run the optimizer on a slot and commit its weights."""
        state = self.current_state()
        result = optimize_meal_for_day(state, meal_type)
        self.repository.save(apply_optimization(state, meal_type, result))
        return result, build_report(result)

    def _today(self) -> str:
        now = self.clock() if self.clock else None
        return today_key(self.timezone_name, now)
