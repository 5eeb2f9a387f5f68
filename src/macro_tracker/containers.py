"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from macro_tracker.adapters.open_food_facts_client import HttpxOpenFoodFactsClient
from macro_tracker.adapters.supabase_state_repository import SupabaseStateRepository
from macro_tracker.config import Settings
from macro_tracker.services.cache import InMemoryCache
from macro_tracker.services.food_lookup import FoodLookupService
from macro_tracker.services.stats import StatsService
from macro_tracker.services.tracker import TrackerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    tracker_service: TrackerService
    stats_service: StatsService
    food_lookup_service: FoodLookupService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    tracker_service = TrackerService(
        repository=SupabaseStateRepository(supabase_client),
        timezone_name=resolved_settings.timezone,
    )
    lookup_client = HttpxOpenFoodFactsClient.create(
        resolved_settings.food_lookup_base_url
    )
    food_lookup_service = FoodLookupService(
        client=lookup_client,
        cache=InMemoryCache(),
    )

    async def close_resources() -> None:
        await lookup_client.close()

    return AppContainer(
        settings=resolved_settings,
        tracker_service=tracker_service,
        stats_service=StatsService(),
        food_lookup_service=food_lookup_service,
        close_resources=close_resources,
    )
