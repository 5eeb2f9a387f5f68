"""Verdicts for optimizer results."""

from macro_tracker.domain.optimizer import OptimizationReport, OptimizationResult

PROTEIN_SHORTFALL_G = 10.0
CARBS_SHORTFALL_G = 20.0
FAT_SHORTFALL_G = 15.0
KCAL_OVERSHOOT = 100.0

MSG_PROTEIN = "Cannot balance protein: add a protein source to this meal."
MSG_CARBS = "Add more carbohydrates to this meal."
MSG_FAT = "Fat is too low: add oil or nuts."
MSG_OVERSHOOT = "Reaching the macro targets will overshoot calories."
MSG_OK = "Portions balanced: apply the new weights to hit your targets."


def build_report(result: OptimizationResult) -> OptimizationReport:
    """Classify the final simulated state of an optimizer run."""
    targets = result.targets
    totals = result.final_totals
    if targets.protein - totals.protein > PROTEIN_SHORTFALL_G:
        message, is_error = MSG_PROTEIN, True
    elif targets.carbs - totals.carbs > CARBS_SHORTFALL_G:
        message, is_error = MSG_CARBS, True
    elif targets.fat - totals.fat > FAT_SHORTFALL_G:
        message, is_error = MSG_FAT, True
    elif totals.kcal - targets.kcal > KCAL_OVERSHOOT:
        message, is_error = MSG_OVERSHOOT, True
    else:
        message, is_error = MSG_OK, False
    return OptimizationReport(
        message=message,
        is_error=is_error,
        coverage_pct=coverage_pct(totals.kcal, targets.kcal),
        items=result.items,
    )


def coverage_pct(current_kcal: float, target_kcal: float) -> float:
    """Return the share of the calorie target covered, capped at 100."""
    if target_kcal <= 0:
        return 0.0
    return min(100.0, current_kcal / target_kcal * 100.0)
