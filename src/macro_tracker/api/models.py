"""Request models for the tracker API.

Numeric fields accept strings and nulls; they are coerced to numbers (invalid
input becomes 0) by the service layer rather than rejected.
"""

from pydantic import BaseModel, Field

Number = float | str | None


class NutrientsPayload(BaseModel):
    """Five nutrient fields, per 100 g for foods."""

    kcal: Number = None
    carbs: Number = None
    protein: Number = None
    fat: Number = None
    fiber: Number = None


class FoodCreate(NutrientsPayload):
    """Payload for creating a food."""

    name: str = Field(min_length=1)
    tags: str | None = None


class IngredientPayload(BaseModel):
    """Recipe ingredient payload."""

    food_id: str
    weight_grams: Number = None


class RecipePayload(BaseModel):
    """Payload for creating or replacing a recipe."""

    name: str = Field(min_length=1)
    ingredients: list[IngredientPayload] = Field(min_length=1)


class EntryCreate(BaseModel):
    """Payload for logging a food in a meal slot."""

    food_id: str
    weight_grams: Number = None


class EntryUpdate(BaseModel):
    """Payload for changing an entry's weight."""

    weight_grams: Number = None


class SaveRecipeRequest(BaseModel):
    """Payload for saving a meal slot as a recipe."""

    name: str = Field(min_length=1)


class TargetProfilesPayload(BaseModel):
    """Training and rest day targets."""

    training: NutrientsPayload
    rest: NutrientsPayload


class TrainingDayRequest(BaseModel):
    """Payload for switching between training and rest targets."""

    is_training_day: bool
