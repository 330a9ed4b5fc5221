"""Recipe suggestions from pantry contents."""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass

import httpx
import pydantic

from pantry_pal.adapters.spoonacular_client import SpoonacularClient
from pantry_pal.domain.errors import DecodeError, NetworkError, RecipeNotFoundError
from pantry_pal.domain.models import PantryItem, ShoppingItem
from pantry_pal.domain.recipes import Recipe
from pantry_pal.services.hub import DataHub

_logger = logging.getLogger(__name__)

_RECIPE_LIST = pydantic.TypeAdapter(list[Recipe])


def search_recipes(recipes: Iterable[Recipe], text: str | None) -> list[Recipe]:
    """Filter recipes by a case-insensitive title substring."""
    needle = (text or "").strip().lower()
    if not needle:
        return list(recipes)
    return [recipe for recipe in recipes if needle in (recipe.title or "").lower()]


@dataclass
class RecipeService:
    """Suggests recipes and turns missing ingredients into shopping items."""

    client: SpoonacularClient
    hub: DataHub

    async def suggest(self, pantry_items: Iterable[PantryItem]) -> list[Recipe]:
        """Return recipes that use what is in the pantry."""
        ingredients = [item.name for item in pantry_items if item.name]
        if not ingredients:
            return []
        try:
            payload = await self.client.find_by_ingredients(ingredients)
        except httpx.HTTPError as exc:
            _logger.warning("Recipe search failed: %s", exc)
            raise NetworkError() from exc
        except json.JSONDecodeError as exc:
            raise DecodeError() from exc
        try:
            recipes = _RECIPE_LIST.validate_python(payload)
        except pydantic.ValidationError as exc:
            raise DecodeError() from exc
        _logger.info(
            "Recipe suggestions: ingredients=%s results=%s",
            len(ingredients),
            len(recipes),
        )
        return recipes

    async def get_details(self, recipe_id: int) -> Recipe:
        """Fetch the full recipe, including summary and instructions."""
        try:
            payload = await self.client.get_recipe_information(recipe_id)
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == httpx.codes.NOT_FOUND:
                raise RecipeNotFoundError() from exc
            raise NetworkError() from exc
        except httpx.HTTPError as exc:
            raise NetworkError() from exc
        except json.JSONDecodeError as exc:
            raise DecodeError() from exc
        try:
            return Recipe.model_validate(payload)
        except pydantic.ValidationError as exc:
            raise DecodeError() from exc

    async def download_image(self, url: str | None) -> bytes | None:
        if not url:
            return None
        return await self.client.download_image(url)

    async def add_missing_to_shopping(self, recipe: Recipe) -> int:
        """Put every missed ingredient on the shopping list.

        Returns the number of items created.
        """
        added = 0
        for ingredient in recipe.missed_ingredients or []:
            amount = ingredient.amount if ingredient.amount is not None else 1
            created = await self.hub.add_shopping_item(
                ShoppingItem(name=ingredient.name, quantity=int(amount))
            )
            if created.id is not None:
                added += 1
        _logger.info(
            "Missing ingredients added: recipe_id=%s count=%s", recipe.id, added
        )
        return added
