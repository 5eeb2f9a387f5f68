"""Target minus consumed calculations."""

from macro_tracker.domain.nutrition import MacroTargets, Nutrients


def compute_residuals(targets: MacroTargets, consumed: Nutrients) -> Nutrients:
    """Return target minus consumed per nutrient.

    Negative values mean the target was exceeded and are kept as is.
    """
    return targets - consumed


def meal_targets(residuals: Nutrients, meal_totals: Nutrients) -> Nutrients:
    """Return what a single meal should contribute in total.

    This is the day's leftover plus whatever the meal already provides.
    """
    return residuals + meal_totals
