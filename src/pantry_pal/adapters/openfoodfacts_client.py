"""Open Food Facts product API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

_PRODUCT_FIELDS = "product_name,image_url,nutriments,nutrition_grades,categories"


class OpenFoodFactsClient(Protocol):
    """Interface for barcode product lookups."""

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, user_agent: str) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url, user_agent=user_agent, http_client=httpx.AsyncClient()
        )

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode.

        An unknown barcode answers 404 with a ``status: 0`` body, which is
        returned as-is rather than raised.
        """
        url = f"{self.base_url}/api/v2/product/{barcode}"
        response = await self.http_client.get(
            url,
            params={"fields": _PRODUCT_FIELDS},
            headers={"User-Agent": self.user_agent},
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return {"status": 0}
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
