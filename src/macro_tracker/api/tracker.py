"""Tracker API endpoints with simple token auth."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING
from uuid import uuid4

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from macro_tracker.api.models import (
    EntryCreate,
    EntryUpdate,
    FoodCreate,
    RecipePayload,
    SaveRecipeRequest,
    TargetProfilesPayload,
    TrainingDayRequest,
)
from macro_tracker.domain.foods import Food, Recipe, RecipeIngredient
from macro_tracker.domain.meals import MealEntry, MealType
from macro_tracker.domain.nutrition import TargetProfiles
from macro_tracker.services import tracker
from macro_tracker.services.aggregation import to_grams
from macro_tracker.services.progress import day_progress

if TYPE_CHECKING:
    from macro_tracker.containers import AppContainer
    from macro_tracker.domain.optimizer import OptimizationReport, OptimizationResult
    from macro_tracker.domain.state import TrackerState


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


router = APIRouter(dependencies=[Depends(require_token)])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/day")
async def get_day(request: Request) -> dict[str, object]:
    """Return the active day with totals, residuals and progress."""
    summary = _container(request).tracker_service.get_day_summary()
    return {
        "date": summary.date,
        "is_training_day": summary.is_training_day,
        "targets": summary.targets.as_dict(),
        "consumed": summary.consumed.as_dict(),
        "residuals": summary.residuals.as_dict(),
        "progress": [
            asdict(p)
            for p in day_progress(
                summary.consumed, summary.targets, summary.is_training_day
            )
        ],
        "meals": {
            meal_type.value: {
                "entries": [_entry_payload(e) for e in entries],
                "totals": summary.meal_totals[meal_type].as_dict(),
            }
            for meal_type, entries in summary.meals.items()
        },
    }


@router.get("/foods")
async def list_foods(request: Request) -> dict[str, object]:
    """Return the food table."""
    state = _container(request).tracker_service.current_state()
    return {"foods": [_food_payload(food) for food in state.foods]}


@router.post("/foods", status_code=status.HTTP_201_CREATED)
async def create_food(payload: FoodCreate, request: Request) -> dict[str, object]:
    """Create a food from per-100 g nutrients."""
    food = Food(
        id=str(uuid4()),
        name=payload.name,
        per_100g=tracker.nutrients_from_payload(payload.model_dump()),
        tags=payload.tags or None,
    )
    _container(request).tracker_service.execute(tracker.add_food, food)
    return _food_payload(food)


@router.post("/foods/barcode/{barcode}", status_code=status.HTTP_201_CREATED)
async def create_food_from_barcode(barcode: str, request: Request) -> dict[str, object]:
    """Look up a barcode and add the product to the food table."""
    container = _container(request)
    food = await container.food_lookup_service.lookup_barcode(barcode)
    if food is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    container.tracker_service.execute(tracker.add_food, food)
    return _food_payload(food)


@router.delete("/foods/{food_id}")
async def delete_food(food_id: str, request: Request) -> dict[str, str]:
    """Delete a food and its entries in today's log."""
    service = _container(request).tracker_service
    if not any(food.id == food_id for food in service.current_state().foods):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    service.execute(tracker.delete_food, food_id)
    return {"status": "ok"}


@router.get("/recipes")
async def list_recipes(request: Request) -> dict[str, object]:
    """Return saved recipes."""
    state = _container(request).tracker_service.current_state()
    return {"recipes": [asdict(recipe) for recipe in state.recipes]}


@router.post("/recipes", status_code=status.HTTP_201_CREATED)
async def create_recipe(payload: RecipePayload, request: Request) -> dict[str, object]:
    """Create a recipe."""
    recipe = _recipe_from_payload(str(uuid4()), payload)
    _container(request).tracker_service.execute(tracker.add_recipe, recipe)
    return asdict(recipe)


@router.put("/recipes/{recipe_id}")
async def replace_recipe(
    recipe_id: str, payload: RecipePayload, request: Request
) -> dict[str, object]:
    """Replace the name and ingredients of a recipe."""
    service = _container(request).tracker_service
    _require_recipe(service.current_state(), recipe_id)
    recipe = _recipe_from_payload(recipe_id, payload)
    service.execute(tracker.update_recipe, recipe)
    return asdict(recipe)


@router.delete("/recipes/{recipe_id}")
async def delete_recipe(recipe_id: str, request: Request) -> dict[str, str]:
    """Delete a recipe."""
    service = _container(request).tracker_service
    _require_recipe(service.current_state(), recipe_id)
    service.execute(tracker.delete_recipe, recipe_id)
    return {"status": "ok"}


@router.post("/meals/{meal_type}/entries", status_code=status.HTTP_201_CREATED)
async def create_entry(
    meal_type: MealType, payload: EntryCreate, request: Request
) -> dict[str, object]:
    """Log a food in a meal slot."""
    state = _container(request).tracker_service.execute(
        tracker.add_entry, meal_type, payload.food_id, payload.weight_grams
    )
    return _entry_payload(state.active_log[meal_type][-1])


@router.patch("/meals/{meal_type}/entries/{entry_id}")
async def update_entry(
    meal_type: MealType, entry_id: str, payload: EntryUpdate, request: Request
) -> dict[str, object]:
    """Change the weight of a logged entry."""
    service = _container(request).tracker_service
    _require_entry(service.current_state(), meal_type, entry_id)
    state = service.execute(
        tracker.update_entry, meal_type, entry_id, payload.weight_grams
    )
    entry = _require_entry(state, meal_type, entry_id)
    return _entry_payload(entry)


@router.delete("/meals/{meal_type}/entries/{entry_id}")
async def delete_entry(
    meal_type: MealType, entry_id: str, request: Request
) -> dict[str, str]:
    """Remove an entry from a meal slot."""
    service = _container(request).tracker_service
    _require_entry(service.current_state(), meal_type, entry_id)
    service.execute(tracker.delete_entry, meal_type, entry_id)
    return {"status": "ok"}


@router.post("/meals/{meal_type}/recipes/{recipe_id}")
async def add_recipe_to_meal(
    meal_type: MealType, recipe_id: str, request: Request
) -> dict[str, object]:
    """Add every ingredient of a recipe to a meal slot."""
    service = _container(request).tracker_service
    _require_recipe(service.current_state(), recipe_id)
    state = service.execute(tracker.add_recipe_to_meal, meal_type, recipe_id)
    return {"entries": [_entry_payload(e) for e in state.active_log[meal_type]]}


@router.post("/meals/{meal_type}/save-recipe", status_code=status.HTTP_201_CREATED)
async def save_meal_as_recipe(
    meal_type: MealType, payload: SaveRecipeRequest, request: Request
) -> dict[str, object]:
    """Save the entries of a meal slot as a recipe."""
    service = _container(request).tracker_service
    if not payload.name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST)
    before = service.current_state()
    if not before.active_log.get(meal_type):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Meal is empty"
        )
    state = service.execute(tracker.save_meal_as_recipe, meal_type, payload.name)
    return asdict(state.recipes[-1])


@router.post("/meals/{meal_type}/optimize")
async def preview_optimization(
    meal_type: MealType, request: Request
) -> dict[str, object]:
    """Simulate portion changes for a meal slot without saving them."""
    result, report = _container(request).tracker_service.preview_optimization(
        meal_type
    )
    return _optimization_payload(result, report, applied=False)


@router.post("/meals/{meal_type}/optimize/apply")
async def apply_optimization(
    meal_type: MealType, request: Request
) -> dict[str, object]:
    """Run the optimizer on a meal slot and save the new weights."""
    result, report = _container(request).tracker_service.apply_optimization(
        meal_type
    )
    return _optimization_payload(result, report, applied=True)


@router.put("/targets")
async def update_targets(
    payload: TargetProfilesPayload, request: Request
) -> dict[str, object]:
    """Replace the training and rest day targets."""
    profiles = TargetProfiles(
        training=tracker.targets_from_payload(payload.training.model_dump()),
        rest=tracker.targets_from_payload(payload.rest.model_dump()),
    )
    _container(request).tracker_service.execute(
        tracker.set_target_profiles, profiles
    )
    return {"training": profiles.training.as_dict(), "rest": profiles.rest.as_dict()}


@router.put("/day/training")
async def set_training_day(
    payload: TrainingDayRequest, request: Request
) -> dict[str, object]:
    """Switch today between training and rest targets."""
    state = _container(request).tracker_service.execute(
        tracker.set_training_day, payload.is_training_day
    )
    return {"date": state.active_day, "is_training_day": state.is_training_day}


@router.get("/history/week")
async def history_week(request: Request, offset: int = 0) -> dict[str, object]:
    """Return one week of archived daily totals."""
    container = _container(request)
    state = container.tracker_service.current_state()
    week = container.stats_service.get_week(state, state.active_day, offset)
    return {
        "start": week.start,
        "end": week.end,
        "week_offset": week.week_offset,
        "is_current_week": week.is_current_week,
        "days_with_data": week.days_with_data,
        "average": week.average.as_dict(),
        "daily": [
            {
                "date": point.date,
                "weekday": point.weekday,
                "has_data": point.has_data,
                "is_training_day": point.is_training_day,
                **point.totals.as_dict(),
            }
            for point in week.daily
        ],
    }


@router.get("/history/{day}")
async def history_day(day: str, request: Request) -> dict[str, object]:
    """Return the retained entries and totals of a past day."""
    container = _container(request)
    detail = container.stats_service.get_day_detail(
        container.tracker_service.current_state(), day
    )
    if detail.meals is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {
        "date": detail.date,
        "totals": detail.totals.as_dict(),
        "meals": {
            meal_type.value: [_entry_payload(e) for e in entries]
            for meal_type, entries in detail.meals.items()
        },
    }


def _food_payload(food: Food) -> dict[str, object]:
    return {
        "id": food.id,
        "name": food.name,
        "tags": food.tags,
        **food.per_100g.as_dict(),
    }


def _entry_payload(entry: MealEntry) -> dict[str, object]:
    return asdict(entry)


def _recipe_from_payload(recipe_id: str, payload: RecipePayload) -> Recipe:
    return Recipe(
        id=recipe_id,
        name=payload.name,
        ingredients=tuple(
            RecipeIngredient(
                food_id=ing.food_id, weight_grams=to_grams(ing.weight_grams)
            )
            for ing in payload.ingredients
        ),
    )


def _require_recipe(state: TrackerState, recipe_id: str) -> Recipe:
    recipe = next((r for r in state.recipes if r.id == recipe_id), None)
    if recipe is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return recipe


def _require_entry(
    state: TrackerState, meal_type: MealType, entry_id: str
) -> MealEntry:
    entry = next(
        (e for e in state.active_log.get(meal_type, ()) if e.id == entry_id), None
    )
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return entry


def _optimization_payload(
    result: OptimizationResult, report: OptimizationReport, *, applied: bool
) -> dict[str, object]:
    return {
        "applied": applied,
        "message": report.message,
        "is_error": report.is_error,
        "coverage_pct": report.coverage_pct,
        "reason": result.reason.value,
        "iterations": result.iterations,
        "targets": asdict(result.targets),
        "final_totals": asdict(result.final_totals),
        "items": [
            {**asdict(item), "diff_grams": item.diff_grams} for item in report.items
        ],
    }
