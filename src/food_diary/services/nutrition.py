"""Nutrition lookups against USDA FoodData Central."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError as PayloadValidationError

from food_diary.adapters.fdc_client import FdcClient
from food_diary.adapters.fdc_models import FdcFood, FdcFoodNutrient, FdcSearchResponse
from food_diary.domain.errors import ProviderError
from food_diary.domain.nutrition import FoodSummary, NutrientAmount, NutrientProfile

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class NutritionService:
    """Provider contract for food search and detail lookups."""

    fdc_client: FdcClient
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, page_size: int = 20) -> list[FoodSummary]:
        """Search foods, keeping the provider's ranking."""
        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(query, page_size=page_size),
            action="search",
        )
        try:
            response = FdcSearchResponse.model_validate(payload)
        except PayloadValidationError as exc:
            raise ProviderError(f"Malformed search payload for {query!r}") from exc
        foods = [
            FoodSummary(
                food_id=food.fdc_id,
                description=food.description,
                brand_owner=food.brand_owner,
            )
            for food in response.foods
        ]
        _logger.debug("Nutrition search: query=%s results=%s", query, len(foods))
        return foods

    async def get_detail(self, food_id: int) -> NutrientProfile:
        """Fetch a food's per-100g nutrient profile."""
        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(food_id),
            action=f"get_food:{food_id}",
        )
        try:
            food = FdcFood.model_validate(payload)
        except PayloadValidationError as exc:
            raise ProviderError(f"Malformed food payload for {food_id}") from exc
        return NutrientProfile(
            food_id=food.fdc_id,
            description=food.description,
            brand_owner=food.brand_owner,
            nutrients=_extract_nutrients(food.food_nutrients),
        )

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[object]]", *, action: str
    ) -> object:
        """Call the provider, retrying transport errors only."""
        attempt = 0
        while True:
            try:
                return await func()
            except httpx.HTTPStatusError as exc:
                _logger.warning(
                    "Nutrition %s failed (status=%s)",
                    action,
                    exc.response.status_code,
                )
                raise ProviderError(
                    f"Nutrition {action} returned {exc.response.status_code}"
                ) from exc
            except ValueError as exc:
                raise ProviderError(f"Nutrition {action} returned bad JSON") from exc
            except httpx.HTTPError as exc:
                attempt += 1
                _logger.warning(
                    "Nutrition %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise ProviderError(f"Nutrition {action} failed: {exc}") from exc
                await asyncio.sleep(self.retry_delay_seconds)


def _extract_nutrients(
    food_nutrients: list[FdcFoodNutrient],
) -> tuple[NutrientAmount, ...]:
    """Keep the first usable row per nutrient id, in provider order."""
    nutrients: dict[int, NutrientAmount] = {}
    for row in food_nutrients:
        if row.nutrient_id in nutrients:
            continue
        if row.amount is None or row.amount < 0:
            _logger.debug("Skipping nutrient %s without amount", row.nutrient_id)
            continue
        nutrients[row.nutrient_id] = NutrientAmount(
            nutrient_id=row.nutrient_id,
            name=row.name,
            unit_name=row.unit_name,
            amount_per_100g=row.amount,
        )
    return tuple(nutrients.values())
