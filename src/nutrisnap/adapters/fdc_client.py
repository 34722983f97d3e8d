"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

FDC_TIMEOUT_SECONDS = 15


class FdcClient(Protocol):
    """Food composition lookups against FoodData Central."""

    async def search_foods(
        self,
        query: str,
        page_size: int = 10,
        data_types: list[str] | None = None,
    ) -> dict[str, object]:
        """Return the raw search payload; matches are under ``foods``."""

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Return the raw detail payload with ``foodNutrients``."""


@dataclass
class HttpxFdcClient(FdcClient):
    """FoodData Central client over a shared ``httpx.AsyncClient``.

    Non-2xx answers raise ``httpx.HTTPStatusError``.
    """

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxFdcClient":
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def search_foods(
        self,
        query: str,
        page_size: int = 10,
        data_types: list[str] | None = None,
    ) -> dict[str, object]:
        body: dict[str, object] = {"query": query, "pageSize": page_size}
        if data_types:
            body["dataType"] = data_types
        return await self._request("POST", "/foods/search", json=body)

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        return await self._request("GET", f"/food/{fdc_id}")

    async def close(self) -> None:
        await self.http_client.aclose()

    async def _request(
        self, method: str, path: str, json: dict[str, object] | None = None
    ) -> dict[str, object]:
        response = await self.http_client.request(
            method,
            f"{self.base_url.rstrip('/')}{path}",
            params={"api_key": self.api_key},
            json=json,
            timeout=FDC_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()
