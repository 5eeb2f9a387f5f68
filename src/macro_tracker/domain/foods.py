"""Domain models for foods and recipes."""

from dataclasses import dataclass, field

from macro_tracker.domain.nutrition import Nutrients


@dataclass(frozen=True)
class Food:
    """A food with nutrients expressed per 100 g."""

    id: str
    name: str
    per_100g: Nutrients
    tags: str | None = None


@dataclass(frozen=True)
class RecipeIngredient:
    """A food reference with a default portion."""

    food_id: str
    weight_grams: float


@dataclass(frozen=True)
class Recipe:
    """A named list of ingredients that can be added to a meal at once."""

    id: str
    name: str
    ingredients: tuple[RecipeIngredient, ...] = field(default_factory=tuple)
