"""Supabase repository storing tracker snapshots as JSON documents."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from macro_tracker.domain.foods import Food, Recipe, RecipeIngredient
from macro_tracker.domain.history import HistoryEntry
from macro_tracker.domain.meals import DayMeals, MealEntry, MealType
from macro_tracker.domain.nutrition import (
    DEFAULT_TARGETS,
    MacroTargets,
    Nutrients,
    TargetProfiles,
)
from macro_tracker.domain.state import TrackerState
from macro_tracker.services.aggregation import to_float, to_grams
from macro_tracker.services.tracker import TrackerRepository, nutrients_from_payload

TABLE = "tracker_state"


@dataclass
class SupabaseStateRepository(TrackerRepository):
    """Supabase implementation keeping one row per persisted shape."""

    client: Client

    def load(self) -> TrackerState:
        """Return the stored state, filling gaps with defaults."""
        response = self.client.table(TABLE).select("key, value").execute()
        documents = {
            str(row.get("key")): row.get("value") for row in response.data or []
        }
        return state_from_documents(documents)

    def save(self, state: TrackerState) -> None:
        """Upsert every document of the state."""
        updated_at = datetime.now(tz=UTC).isoformat()
        rows = [
            {"key": key, "value": value, "updated_at": updated_at}
            for key, value in state_to_documents(state).items()
        ]
        response = self.client.table(TABLE).upsert(rows, on_conflict="key").execute()
        if not response.data:
            raise RuntimeError("Failed to save tracker state")


def state_to_documents(state: TrackerState) -> dict[str, object]:
    """Serialize a state into JSON-compatible documents."""
    return {
        "foods": [_dump_food(food) for food in state.foods],
        "recipes": [_dump_recipe(recipe) for recipe in state.recipes],
        "target_profiles": {
            "training": state.target_profiles.training.as_dict(),
            "rest": state.target_profiles.rest.as_dict(),
        },
        "active_day": {
            "date": state.active_day,
            "is_training_day": state.is_training_day,
        },
        "day_meals": {
            day: _dump_day(meals) for day, meals in state.day_meals.items()
        },
        "history": [
            {
                "date": entry.date,
                "is_training_day": entry.is_training_day,
                **entry.totals.as_dict(),
            }
            for entry in state.history
        ],
        "last_reset": state.last_reset,
    }


def state_from_documents(documents: dict[str, object]) -> TrackerState:
    """Parse stored documents, tolerating missing or malformed fields."""
    active = _as_dict(documents.get("active_day"))
    day_meals_raw = _as_dict(documents.get("day_meals"))
    last_reset = documents.get("last_reset")
    return TrackerState(
        foods=tuple(_parse_food(row) for row in _as_rows(documents.get("foods"))),
        recipes=tuple(
            _parse_recipe(row) for row in _as_rows(documents.get("recipes"))
        ),
        target_profiles=_parse_profiles(documents.get("target_profiles")),
        is_training_day=bool(active.get("is_training_day", True)),
        active_day=str(active.get("date") or ""),
        day_meals={
            str(day): _parse_day(meals) for day, meals in day_meals_raw.items()
        },
        history=tuple(
            _parse_history(row) for row in _as_rows(documents.get("history"))
        ),
        last_reset=str(last_reset) if last_reset else None,
    )


def _dump_food(food: Food) -> dict[str, object]:
    return {
        "id": food.id,
        "name": food.name,
        "tags": food.tags,
        **food.per_100g.as_dict(),
    }


def _dump_recipe(recipe: Recipe) -> dict[str, object]:
    return {
        "id": recipe.id,
        "name": recipe.name,
        "ingredients": [
            {"food_id": ing.food_id, "weight_grams": ing.weight_grams}
            for ing in recipe.ingredients
        ],
    }


def _dump_day(meals: DayMeals) -> dict[str, object]:
    return {
        meal_type.value: [
            {"id": e.id, "food_id": e.food_id, "weight_grams": e.weight_grams}
            for e in meals.get(meal_type, ())
        ]
        for meal_type in MealType
    }


def _parse_nutrients(row: dict[str, object]) -> Nutrients:
    return Nutrients(
        kcal=to_float(row.get("kcal")),
        carbs=to_float(row.get("carbs")),
        protein=to_float(row.get("protein")),
        fat=to_float(row.get("fat")),
        fiber=to_float(row.get("fiber")),
    )


def _parse_food(row: dict[str, object]) -> Food:
    tags = row.get("tags")
    return Food(
        id=str(row.get("id", "")),
        name=str(row.get("name", "")),
        per_100g=nutrients_from_payload(row),
        tags=str(tags) if tags else None,
    )


def _parse_recipe(row: dict[str, object]) -> Recipe:
    return Recipe(
        id=str(row.get("id", "")),
        name=str(row.get("name", "")),
        ingredients=tuple(
            RecipeIngredient(
                food_id=str(ing.get("food_id", "")),
                weight_grams=to_grams(ing.get("weight_grams")),
            )
            for ing in _as_rows(row.get("ingredients"))
        ),
    )


def _parse_day(raw: object) -> DayMeals:
    data = _as_dict(raw)
    return {
        meal_type: tuple(
            MealEntry(
                id=str(row.get("id", "")),
                food_id=str(row.get("food_id", "")),
                weight_grams=to_grams(row.get("weight_grams")),
            )
            for row in _as_rows(data.get(meal_type.value))
        )
        for meal_type in MealType
    }


def _parse_profiles(raw: object) -> TargetProfiles:
    data = _as_dict(raw)
    if "training" not in data or "rest" not in data:
        return DEFAULT_TARGETS
    training = _parse_nutrients(_as_dict(data["training"]))
    rest = _parse_nutrients(_as_dict(data["rest"]))
    return TargetProfiles(
        training=MacroTargets(**training.as_dict()),
        rest=MacroTargets(**rest.as_dict()),
    )


def _parse_history(row: dict[str, object]) -> HistoryEntry:
    return HistoryEntry(
        date=str(row.get("date", "")),
        is_training_day=bool(row.get("is_training_day", True)),
        totals=_parse_nutrients(row),
    )


def _as_dict(value: object) -> dict[str, object]:
    return value if isinstance(value, dict) else {}


def _as_rows(value: object) -> list[dict[str, object]]:
    if not isinstance(value, list):
        return []
    return [row for row in value if isinstance(row, dict)]
