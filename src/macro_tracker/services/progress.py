"""Progress status of consumed nutrients against targets."""

from dataclasses import dataclass

from macro_tracker.domain.nutrition import NUTRIENT_FIELDS, MacroTargets, Nutrients

# Allowed deviation from target, in percent, as (below, above).
_TRAINING_BANDS = {
    "kcal": (-2.5, 2.5),
    "fat": (-10.0, 10.0),
    "carbs": (-7.0, 7.0),
    "protein": (-5.0, 8.0),
    "fiber": (-10.0, 10.0),
}
_REST_BANDS = {
    "kcal": (-3.0, 3.0),
    "fat": (-10.0, 10.0),
    "carbs": (-5.0, 8.0),
    "protein": (-5.0, 8.0),
    "fiber": (-10.0, 10.0),
}


@dataclass(frozen=True)
class NutrientProgress:
    """Progress of one nutrient for the dashboard."""

    nutrient: str
    current: float
    target: float
    percentage: float
    state: str
    delta: float


def nutrient_progress(
    nutrient: str, current: float, target: float, is_training_day: bool
) -> NutrientProgress:
    """Classify a nutrient as ``low``, ``ok`` or ``over``.

    ``delta`` is the missing amount when low and the excess when over.
    """
    bands = _TRAINING_BANDS if is_training_day else _REST_BANDS
    low, high = bands[nutrient]
    if target <= 0:
        state = "over" if current > 0 else "ok"
        return NutrientProgress(nutrient, current, target, 0.0, state, current)
    deviation = (current - target) / target * 100
    percentage = min(current / target * 100, 110.0)
    if deviation < low:
        return NutrientProgress(
            nutrient, current, target, percentage, "low", target - current
        )
    if deviation <= high:
        return NutrientProgress(nutrient, current, target, percentage, "ok", 0.0)
    return NutrientProgress(
        nutrient, current, target, percentage, "over", current - target
    )


def day_progress(
    consumed: Nutrients, targets: MacroTargets, is_training_day: bool
) -> list[NutrientProgress]:
    """Return progress for every nutrient in display order."""
    return [
        nutrient_progress(
            name, getattr(consumed, name), getattr(targets, name), is_training_day
        )
        for name in NUTRIENT_FIELDS
    ]
