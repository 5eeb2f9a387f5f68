"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from macro_tracker.adapters.open_food_facts_client import FoodLookupClient
from macro_tracker.config import Settings
from macro_tracker.containers import AppContainer
from macro_tracker.domain.foods import Food
from macro_tracker.domain.meals import MealEntry
from macro_tracker.domain.nutrition import Nutrients
from macro_tracker.domain.state import TrackerState
from macro_tracker.services.cache import InMemoryCache
from macro_tracker.services.food_lookup import FoodLookupService
from macro_tracker.services.stats import StatsService
from macro_tracker.services.tracker import TrackerRepository, TrackerService

TEST_NOW = datetime(2024, 1, 2, 12, 0, tzinfo=UTC)


def make_food(  # noqa: PLR0913
    food_id: str,
    kcal: float,
    protein: float,
    carbs: float,
    fat: float,
    fiber: float = 0.0,
    name: str | None = None,
) -> Food:
    return Food(
        id=food_id,
        name=name or food_id,
        per_100g=Nutrients(
            kcal=kcal, carbs=carbs, protein=protein, fat=fat, fiber=fiber
        ),
    )


def make_entry(entry_id: str, food_id: str, grams: float) -> MealEntry:
    return MealEntry(id=entry_id, food_id=food_id, weight_grams=grams)


CHICKEN = make_food("chicken", kcal=165, protein=31, carbs=0, fat=3.6)
RICE = make_food("rice", kcal=130, protein=2.5, carbs=28, fat=0.3, fiber=0.4)
OLIVE_OIL = make_food("oil", kcal=884, protein=0, carbs=0, fat=100)
LETTUCE = make_food("lettuce", kcal=15, protein=1.4, carbs=2.9, fat=0.2, fiber=1.3)


@dataclass
class InMemoryTrackerRepository(TrackerRepository):
    """In-memory tracker repository for tests."""

    state: TrackerState = field(default_factory=TrackerState)
    saves: int = 0

    def load(self) -> TrackerState:
        return self.state

    def save(self, state: TrackerState) -> None:
        self.state = state
        self.saves += 1


@dataclass
class FakeFoodLookupClient(FoodLookupClient):
    """Fake barcode client returning canned products."""

    products: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "8001234567890": {
                "status": 1,
                "product": {
                    "product_name": "Greek Yogurt",
                    "nutriments": {
                        "energy-kcal_100g": 59,
                        "carbohydrates_100g": 3.6,
                        "proteins_100g": 10,
                        "fat_100g": 0.4,
                        "fiber_100g": 0,
                    },
                },
            }
        }
    )
    calls: list[str] = field(default_factory=list)

    async def get_product(self, barcode: str) -> dict[str, object]:
        self.calls.append(barcode)
        return self.products.get(barcode, {"status": 0})


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="eyJhbGciOiJIUzI1NiJ9.eyJyb2xlIjoic2VydmljZSJ9.c2ln",
        api_token="api-token",
    )


@pytest.fixture
def repository() -> InMemoryTrackerRepository:
    return InMemoryTrackerRepository()


@pytest.fixture
def tracker_service(repository: InMemoryTrackerRepository) -> TrackerService:
    return TrackerService(repository=repository, clock=lambda: TEST_NOW)


@pytest.fixture
def lookup_client() -> FakeFoodLookupClient:
    return FakeFoodLookupClient()


@pytest.fixture
def container(
    settings: Settings,
    tracker_service: TrackerService,
    lookup_client: FakeFoodLookupClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        tracker_service=tracker_service,
        stats_service=StatsService(),
        food_lookup_service=FoodLookupService(
            client=lookup_client, cache=InMemoryCache()
        ),
        close_resources=close_resources,
    )
