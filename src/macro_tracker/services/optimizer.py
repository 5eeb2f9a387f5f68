"""Greedy gram optimizer for a single meal.

The optimizer never adds or removes entries and never lowers a weight. Each
step picks one item and adds a small fixed amount of grams to it, working on
protein first, then fat, then carbs, then plain calories. The loop is bounded,
so it always terminates even when the targets cannot be reached.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace

from macro_tracker.domain.meals import MealEntry, MealType
from macro_tracker.domain.nutrition import Nutrients
from macro_tracker.domain.optimizer import (
    Halt,
    HaltReason,
    Increment,
    ItemDiff,
    Macro,
    Macros,
    OptimizationResult,
    WorkingItem,
)
from macro_tracker.domain.state import TrackerState
from macro_tracker.services.aggregation import (
    FoodTable,
    aggregate_day,
    aggregate_entries,
    food_table,
    resolve_food,
    to_grams,
)
from macro_tracker.services.residuals import compute_residuals, meal_targets

WEIGHT_CEILING_G = 400.0
MACRO_TOLERANCE_G = 5.0
KCAL_TOLERANCE = 50.0
MAX_ITERATIONS = 200
PROTEIN_STEP_G = 5.0
CARBS_STEP_G = 5.0
FAT_STEP_G = 2.0
KCAL_STEP_G = 5.0

_logger = logging.getLogger(__name__)


def build_working_set(
    entries: Iterable[MealEntry], foods: FoodTable
) -> list[WorkingItem]:
    """Pair entries with their foods, skipping entries whose food is gone."""
    items: list[WorkingItem] = []
    for entry in entries:
        food = resolve_food(foods, entry.food_id)
        if food is None:
            continue
        grams = to_grams(entry.weight_grams)
        items.append(
            WorkingItem(
                entry_id=entry.id, food=food, original_grams=grams, grams=grams
            )
        )
    return items


def simulate_totals(items: Iterable[WorkingItem]) -> Macros:
    """Return the macros of the working set at its simulated weights."""
    kcal = protein = carbs = fat = 0.0
    for item in items:
        factor = item.grams / 100.0
        kcal += item.food.per_100g.kcal * factor
        protein += item.food.per_100g.protein * factor
        carbs += item.food.per_100g.carbs * factor
        fat += item.food.per_100g.fat * factor
    return Macros(kcal=kcal, protein=protein, carbs=carbs, fat=fat)


def compute_gaps(targets: Macros, totals: Macros) -> Macros:
    """Return target minus simulated total for each macro."""
    return Macros(
        kcal=targets.kcal - totals.kcal,
        protein=targets.protein - totals.protein,
        carbs=targets.carbs - totals.carbs,
        fat=targets.fat - totals.fat,
    )


def step(items: list[WorkingItem], targets: Macros) -> Increment | Halt:
    """Decide the next single adjustment for the working set."""
    gaps = compute_gaps(targets, simulate_totals(items))
    # Over the calorie budget always aborts, even with macros already met.
    if gaps.kcal < -KCAL_TOLERANCE:
        return Halt(HaltReason.CALORIE_OVERSHOOT)
    if (
        gaps.protein <= MACRO_TOLERANCE_G
        and gaps.carbs <= MACRO_TOLERANCE_G
        and gaps.fat <= MACRO_TOLERANCE_G
        and gaps.kcal <= KCAL_TOLERANCE
    ):
        return Halt(HaltReason.CONVERGED)

    if not items:
        return Halt(HaltReason.NO_ITEMS)

    candidates = [
        (index, item)
        for index, item in enumerate(items)
        if item.grams < WEIGHT_CEILING_G
    ]
    if not candidates:
        return Halt(HaltReason.CEILING_REACHED)

    if gaps.protein > MACRO_TOLERANCE_G:
        index, item = max(candidates, key=lambda pair: _protein_density(pair[1]))
        return _increment(index, item, PROTEIN_STEP_G, Macro.PROTEIN)
    if gaps.fat > MACRO_TOLERANCE_G:
        index, item = max(candidates, key=lambda pair: pair[1].food.per_100g.fat)
        return _increment(index, item, FAT_STEP_G, Macro.FAT)
    if gaps.carbs > MACRO_TOLERANCE_G:
        index, item = max(candidates, key=lambda pair: pair[1].food.per_100g.carbs)
        return _increment(index, item, CARBS_STEP_G, Macro.CARBS)
    # Only calories are short here. The least dense food gets the weight.
    index, item = min(candidates, key=lambda pair: pair[1].food.per_100g.kcal)
    return _increment(index, item, KCAL_STEP_G, Macro.KCAL)


def apply_increment(items: list[WorkingItem], action: Increment) -> list[WorkingItem]:
    """Return a new working set with the increment applied."""
    updated = list(items)
    item = updated[action.index]
    updated[action.index] = replace(item, grams=item.grams + action.grams)
    return updated


def optimize_meal(
    entries: Iterable[MealEntry], foods: FoodTable, targets: Nutrients | Macros
) -> OptimizationResult:
    """Simulate weight increases for a meal until the targets are met.

    ``targets`` is what this meal alone should contribute. The entries are not
    modified; the caller decides whether to apply the returned weights.
    """
    meal_goal = Macros(
        kcal=targets.kcal, protein=targets.protein, carbs=targets.carbs, fat=targets.fat
    )
    items = build_working_set(entries, foods)
    iterations = 0
    reason = HaltReason.ITERATION_LIMIT
    while iterations < MAX_ITERATIONS:
        action = step(items, meal_goal)
        if isinstance(action, Halt):
            reason = action.reason
            break
        items = apply_increment(items, action)
        iterations += 1
    else:
        final = step(items, meal_goal)
        if isinstance(final, Halt):
            reason = final.reason

    totals = simulate_totals(items)
    _logger.debug(
        "Optimizer stopped: reason=%s iterations=%s kcal=%.1f target=%.1f",
        reason,
        iterations,
        totals.kcal,
        meal_goal.kcal,
    )
    return OptimizationResult(
        targets=meal_goal,
        final_totals=totals,
        items=[
            ItemDiff(
                entry_id=item.entry_id,
                food_id=item.food.id,
                food_name=item.food.name,
                original_grams=item.original_grams,
                final_grams=item.grams,
            )
            for item in items
        ],
        reason=reason,
        iterations=iterations,
    )


def optimize_meal_for_day(
    state: TrackerState, meal_type: MealType
) -> OptimizationResult:
    """Run the optimizer on one slot of the active log.

    The meal target is the day's residual for the active profile plus what
    the meal already contributes.
    """
    foods = food_table(state.foods)
    log = state.active_log
    entries = log.get(meal_type, ())
    consumed = aggregate_day(log, foods)
    residuals = compute_residuals(
        state.target_profiles.for_day(state.is_training_day), consumed
    )
    goal = meal_targets(residuals, aggregate_entries(entries, foods))
    return optimize_meal(entries, foods, goal)


def _protein_density(item: WorkingItem) -> float:
    kcal = item.food.per_100g.kcal
    if kcal <= 0:
        return 0.0
    return item.food.per_100g.protein / kcal


def _increment(index: int, item: WorkingItem, grams: float, macro: Macro) -> Increment:
    room = WEIGHT_CEILING_G - item.grams
    return Increment(index=index, grams=min(grams, room), macro=macro)
