"""Tests for the Supabase state repository."""

from dataclasses import dataclass, field

import pytest

from macro_tracker.adapters.supabase_state_repository import (
    SupabaseStateRepository,
    state_from_documents,
    state_to_documents,
)
from macro_tracker.domain.foods import Recipe, RecipeIngredient
from macro_tracker.domain.meals import MealType
from macro_tracker.domain.nutrition import DEFAULT_TARGETS
from macro_tracker.domain.state import TrackerState
from macro_tracker.services import tracker
from tests.conftest import CHICKEN, RICE


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    rows: dict[str, dict[str, object]] = field(default_factory=dict)
    fail_writes: bool = False
    last_on_conflict: str | None = None

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def upsert(self, payload, on_conflict: str = "") -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self._payload = payload
        self.last_on_conflict = on_conflict
        return self

    def execute(self) -> FakeResponse:
        if getattr(self, "_action", "select") == "upsert":
            if self.fail_writes:
                return FakeResponse(data=[])
            for row in self._payload:
                self.rows[str(row["key"])] = row
            return FakeResponse(data=list(self._payload))
        return FakeResponse(data=list(self.rows.values()))


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _populated_state() -> TrackerState:
    state = TrackerState(
        foods=(CHICKEN, RICE),
        active_day="2024-01-02",
        last_reset="2024-01-02",
        is_training_day=False,
    )
    state = tracker.add_entry(state, MealType.LUNCH, "chicken", 180)
    return tracker.add_recipe(
        state,
        Recipe(
            id="r1",
            name="Rice bowl",
            ingredients=(RecipeIngredient(food_id="rice", weight_grams=90),),
        ),
    )


def test_state_repository_save_and_load() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseStateRepository(client)
    state = _populated_state()

    repository.save(state)
    loaded = repository.load()

    assert client.tables["tracker_state"].last_on_conflict == "key"
    assert loaded == state


def test_state_repository_raises_when_save_fails() -> None:
    client = FakeSupabaseClient()
    client.table("tracker_state").fail_writes = True
    repository = SupabaseStateRepository(client)

    with pytest.raises(RuntimeError):
        repository.save(TrackerState())


def test_load_empty_table_gives_defaults() -> None:
    state = SupabaseStateRepository(FakeSupabaseClient()).load()

    assert state.foods == ()
    assert state.target_profiles == DEFAULT_TARGETS
    assert state.last_reset is None
    assert state.is_training_day is True


def test_documents_tolerate_missing_fields() -> None:
    state = state_from_documents(
        {
            "foods": [{"id": "f1", "name": "Bread", "kcal": "265"}, "bad-row"],
            "day_meals": {
                "2024-01-02": {"lunch": [{"id": "e1", "food_id": "f1"}]},
            },
            "history": [{"date": "2024-01-01"}],
        }
    )

    assert state.foods[0].per_100g.kcal == 265
    assert state.foods[0].per_100g.protein == 0
    assert state.day_meals["2024-01-02"][MealType.LUNCH][0].weight_grams == 0
    assert state.day_meals["2024-01-02"][MealType.DINNER] == ()
    assert state.history[0].totals.kcal == 0


def test_documents_clamp_negative_food_nutrients() -> None:
    state = state_from_documents(
        {
            "foods": [
                {"id": "f1", "name": "Broken", "kcal": -50, "protein": "-3,5"},
            ],
        }
    )

    assert state.foods[0].per_100g.kcal == 0
    assert state.foods[0].per_100g.protein == 0


def test_documents_use_slot_names() -> None:
    documents = state_to_documents(_populated_state())

    day = documents["day_meals"]["2024-01-02"]  # type: ignore[index]
    assert set(day) == {"breakfast", "lunch", "snack", "dinner"}
    assert day["lunch"][0]["weight_grams"] == 180
