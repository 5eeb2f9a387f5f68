"""Barcode lookup producing Food records."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from uuid import uuid4

from macro_tracker.adapters.open_food_facts_client import FoodLookupClient
from macro_tracker.domain.foods import Food
from macro_tracker.domain.nutrition import Nutrients
from macro_tracker.services.aggregation import to_float
from macro_tracker.services.cache import Cache

_logger = logging.getLogger(__name__)


@dataclass
class FoodLookupService:
    """Looks up products by barcode and maps them to foods."""

    client: FoodLookupClient
    cache: Cache
    ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def lookup_barcode(self, barcode: str) -> Food | None:
        """Return a new unsaved Food for a barcode, or None if unknown."""
        cache_key = f"off:product:{barcode}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, dict):
            payload = cached
        else:
            payload = await self._call_with_retry(
                lambda: self.client.get_product(barcode), action=f"product:{barcode}"
            )
            self.cache.set(cache_key, payload, ttl_seconds=self.ttl_seconds)
        if payload.get("status") != 1:
            _logger.info("Barcode not found: %s", barcode)
            return None
        return food_from_product(barcode, payload.get("product") or {})

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[dict[str, object]]], *, action: str
    ) -> dict[str, object]:
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Food lookup %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def food_from_product(barcode: str, product: dict[str, object]) -> Food:
    """Map an Open Food Facts product to a Food with per-100 g nutrients."""
    nutriments = product.get("nutriments") or {}
    if not isinstance(nutriments, dict):
        nutriments = {}
    name = str(product.get("product_name") or f"Product {barcode}")
    return Food(
        id=str(uuid4()),
        name=name,
        per_100g=Nutrients(
            kcal=max(to_float(nutriments.get("energy-kcal_100g")), 0.0),
            carbs=max(to_float(nutriments.get("carbohydrates_100g")), 0.0),
            protein=max(to_float(nutriments.get("proteins_100g")), 0.0),
            fat=max(to_float(nutriments.get("fat_100g")), 0.0),
            fiber=max(to_float(nutriments.get("fiber_100g")), 0.0),
        ),
    )
