"""Spoonacular recipe API client."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

_logger = logging.getLogger(__name__)


class SpoonacularClient(Protocol):
    """Interface for recipe API interactions."""

    async def find_by_ingredients(
        self, ingredients: list[str], number: int = 100
    ) -> list[dict[str, object]]:
        """Return recipes that use the given ingredients."""

    async def get_recipe_information(self, recipe_id: int) -> dict[str, object]:
        """Return full details for one recipe."""

    async def download_image(self, url: str) -> bytes | None:
        """Return image bytes, or None if the download failed."""


@dataclass
class HttpxSpoonacularClient(SpoonacularClient):
    """HTTPX-backed Spoonacular client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxSpoonacularClient":
        """Create a Spoonacular client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def find_by_ingredients(
        self, ingredients: list[str], number: int = 100
    ) -> list[dict[str, object]]:
        """Search recipes ranked to minimise missing ingredients."""
        url = f"{self.base_url}/recipes/findByIngredients"
        response = await self.http_client.get(
            url,
            params={
                "ingredients": ",".join(ingredients),
                "number": number,
                "ranking": 2,
                "ignorePantry": "false",
                "apiKey": self.api_key,
            },
        )
        response.raise_for_status()
        return response.json()

    async def get_recipe_information(self, recipe_id: int) -> dict[str, object]:
        """Fetch recipe details by id."""
        url = f"{self.base_url}/recipes/{recipe_id}/information"
        response = await self.http_client.get(url, params={"apiKey": self.api_key})
        response.raise_for_status()
        return response.json()

    async def download_image(self, url: str) -> bytes | None:
        try:
            response = await self.http_client.get(url)
            response.raise_for_status()
        except httpx.HTTPError:
            _logger.warning("Failed to download recipe image", extra={"url": url})
            return None
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
