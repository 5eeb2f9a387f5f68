"""Nutrition domain models."""

from dataclasses import dataclass

NUTRIENT_FIELDS = ("kcal", "carbs", "protein", "fat", "fiber")


@dataclass(frozen=True)
class Nutrients:
    """Nutrient amounts, either per 100 g or as absolute totals."""

    kcal: float = 0.0
    carbs: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0

    def scaled(self, factor: float) -> "Nutrients":
        """Return the nutrients multiplied by a factor."""
        return Nutrients(
            kcal=self.kcal * factor,
            carbs=self.carbs * factor,
            protein=self.protein * factor,
            fat=self.fat * factor,
            fiber=self.fiber * factor,
        )

    def __add__(self, other: "Nutrients") -> "Nutrients":
        return Nutrients(
            kcal=self.kcal + other.kcal,
            carbs=self.carbs + other.carbs,
            protein=self.protein + other.protein,
            fat=self.fat + other.fat,
            fiber=self.fiber + other.fiber,
        )

    def __sub__(self, other: "Nutrients") -> "Nutrients":
        return Nutrients(
            kcal=self.kcal - other.kcal,
            carbs=self.carbs - other.carbs,
            protein=self.protein - other.protein,
            fat=self.fat - other.fat,
            fiber=self.fiber - other.fiber,
        )

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in NUTRIENT_FIELDS}


ZERO = Nutrients()


@dataclass(frozen=True)
class MacroTargets(Nutrients):
    """Daily nutrient targets for one kind of day."""


@dataclass(frozen=True)
class TargetProfiles:
    """Target profiles for training and rest days."""

    training: MacroTargets
    rest: MacroTargets

    def for_day(self, is_training_day: bool) -> MacroTargets:
        """Return the profile selected by the training-day flag."""
        return self.training if is_training_day else self.rest


DEFAULT_TARGETS = TargetProfiles(
    training=MacroTargets(kcal=2500, carbs=300, protein=180, fat=60, fiber=30),
    rest=MacroTargets(kcal=2000, carbs=150, protein=180, fat=80, fiber=35),
)
