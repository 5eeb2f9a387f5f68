"""Models for the gram optimizer simulation."""

from dataclasses import dataclass
from enum import StrEnum

from macro_tracker.domain.foods import Food


@dataclass(frozen=True)
class WorkingItem:
    """A meal entry paired with its food and simulated weight."""

    entry_id: str
    food: Food
    original_grams: float
    grams: float


@dataclass(frozen=True)
class Macros:
    """Calories and the three macros the optimizer balances."""

    kcal: float
    protein: float
    carbs: float
    fat: float


class Macro(StrEnum):
    """Which gap an increment is closing."""

    PROTEIN = "protein"
    FAT = "fat"
    CARBS = "carbs"
    KCAL = "kcal"


@dataclass(frozen=True)
class Increment:
    """Add ``grams`` to the working item at ``index``."""

    index: int
    grams: float
    macro: Macro


class HaltReason(StrEnum):
    """Why the optimizer stopped."""

    CONVERGED = "converged"
    CALORIE_OVERSHOOT = "calorie_overshoot"
    CEILING_REACHED = "ceiling_reached"
    ITERATION_LIMIT = "iteration_limit"
    NO_ITEMS = "no_items"


@dataclass(frozen=True)
class Halt:
    """Terminal decision of a single optimizer step."""

    reason: HaltReason


@dataclass(frozen=True)
class ItemDiff:
    """Original and simulated weight of one entry."""

    entry_id: str
    food_id: str
    food_name: str
    original_grams: float
    final_grams: float

    @property
    def diff_grams(self) -> float:
        return self.final_grams - self.original_grams


@dataclass(frozen=True)
class OptimizationResult:
    """Outcome of a full optimizer run."""

    targets: Macros
    final_totals: Macros
    items: list[ItemDiff]
    reason: HaltReason
    iterations: int


@dataclass(frozen=True)
class OptimizationReport:
    """User-facing verdict for an optimizer run."""

    message: str
    is_error: bool
    coverage_pct: float
    items: list[ItemDiff]
