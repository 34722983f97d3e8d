"""Nutrition enrichment using USDA FoodData Central."""

import asyncio
import logging
from dataclasses import dataclass

from nutrisnap.adapters.fdc_client import FdcClient
from nutrisnap.domain.analysis import EnrichmentMatch, FoodItem

# Aliases are tried in order; the first alias with a matching nutrient wins.
_NUTRIENT_ALIASES: dict[str, tuple[str, ...]] = {
    "calories": ("energy",),
    "protein": ("protein",),
    "carbs": ("carbohydrate, by difference", "carbohydrate"),
    "fats": ("total lipid (fat)", "fat"),
}

SEARCH_DATA_TYPES = ("Survey (FNDDS)", "SR Legacy")

_logger = logging.getLogger(__name__)


@dataclass
class NutritionService:
    """Overrides AI macro estimates with FDC values when a match exists."""

    fdc_client: FdcClient | None
    data_types: tuple[str, ...] = SEARCH_DATA_TYPES

    async def enrich(self, foods: list[FoodItem]) -> list[FoodItem]:
        """Enrich every food concurrently, preserving input order."""
        if self.fdc_client is None or not foods:
            return list(foods)
        return list(await asyncio.gather(*(self._enrich_item(food) for food in foods)))

    async def lookup(self, food_name: str) -> EnrichmentMatch | None:
        """Return FDC macros for the best match of a food name, if any."""
        if self.fdc_client is None:
            return None
        query = food_name.strip()
        if not query:
            return None

        payload = await self.fdc_client.search_foods(
            query, page_size=1, data_types=list(self.data_types)
        )
        hits = payload.get("foods") or []
        if not hits:
            return None
        first = hits[0]
        details = await self.fdc_client.get_food(int(first["fdcId"]))

        nutrients = details.get("foodNutrients") or []
        values = {
            field: _find_nutrient(nutrients, aliases)
            for field, aliases in _NUTRIENT_ALIASES.items()
        }
        match = EnrichmentMatch(name=first.get("description"), **values)
        if match.is_empty():
            return None
        return match

    async def _enrich_item(self, food: FoodItem) -> FoodItem:
        try:
            match = await self.lookup(food.name)
        except Exception as exc:
            _logger.warning(
                "Nutrition enrichment failed for %s (status=%s): %s",
                food.name,
                _status_code_from_exception(exc),
                exc,
            )
            return food
        if match is None:
            return food
        return match.apply(food)


def _find_nutrient(
    nutrients: list[dict[str, object]], aliases: tuple[str, ...]
) -> float | None:
    """Return the first nutrient value whose name contains an alias."""
    for alias in aliases:
        for nutrient in nutrients:
            name, value = _nutrient_name_and_value(nutrient)
            if name and alias in name.lower() and value is not None:
                return value
    return None


def _nutrient_name_and_value(
    nutrient: dict[str, object],
) -> tuple[str | None, float | None]:
    """Read a nutrient from either FDC search or detail payload shapes."""
    nutrient_info = nutrient.get("nutrient") or {}
    name = nutrient.get("nutrientName") or nutrient_info.get("name")
    value = nutrient.get("value")
    if value is None:
        value = nutrient.get("amount")
    if isinstance(value, bool) or not isinstance(value, int | float):
        return (name if isinstance(name, str) else None), None
    return (name if isinstance(name, str) else None), float(value)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
