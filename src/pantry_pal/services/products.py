"""Barcode product lookup and pantry capture."""

import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import httpx

from pantry_pal.adapters.openfoodfacts_client import OpenFoodFactsClient
from pantry_pal.domain.errors import (
    DecodeError,
    NetworkError,
    ProductNotFoundError,
    ValidationError,
)
from pantry_pal.domain.models import FoodCategory, NutritionFacts, PantryItem
from pantry_pal.domain.products import ProductInfo
from pantry_pal.services.hub import DataHub

_logger = logging.getLogger(__name__)

_UNKNOWN_NAME = "Unknown Product"
_NOT_AVAILABLE = "N/A"
_DEFAULT_SHELF_LIFE = timedelta(days=7)

# First matching rule wins.
_CATEGORY_KEYWORDS: tuple[tuple[FoodCategory, tuple[str, ...]], ...] = (
    (FoodCategory.BEVERAGES, ("beverage", "drink", "coffee", "tea", "juice")),
    (FoodCategory.DAIRY, ("dairy", "milk", "cheese", "yogurt")),
    (FoodCategory.FRUITS, ("fruit", "apple", "banana", "orange")),
    (FoodCategory.VEGETABLES, ("vegetable", "carrot", "broccoli", "spinach")),
    (FoodCategory.GRAINS, ("grain", "bread", "cereal", "rice", "pasta")),
    (FoodCategory.PROTEINS, ("protein", "meat", "chicken", "fish", "egg")),
    (FoodCategory.SNACKS, ("snack", "chips", "cookie", "candy")),
    (FoodCategory.CONDIMENTS, ("condiment", "sauce", "salt", "spice")),
)


def map_category(categories: str | None) -> FoodCategory:
    """Pick a pantry category from the API's free-text category list."""
    text = (categories or "").lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return FoodCategory.BEVERAGES


def parse_product(barcode: str, payload: dict[str, object]) -> ProductInfo:
    """Build product info from a product API response."""
    if payload.get("status") != 1:
        raise ProductNotFoundError()
    product = payload.get("product")
    if not isinstance(product, dict):
        raise DecodeError("Product data missing from response.")
    nutriments = product.get("nutriments")
    if not isinstance(nutriments, dict):
        nutriments = {}
    return ProductInfo(
        barcode=barcode,
        name=product.get("product_name") or _UNKNOWN_NAME,
        image_url=product.get("image_url") or "",
        categories=product.get("categories") or _NOT_AVAILABLE,
        nutrition_grade=product.get("nutrition_grades") or _NOT_AVAILABLE,
        calories=int(_number(nutriments.get("energy-kcal_100g"))),
        fat_g=_number(nutriments.get("fat_100g")),
        carbs_g=_number(nutriments.get("carbohydrates_100g")),
        protein_g=_number(nutriments.get("proteins_100g")),
    )


def _number(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


@dataclass
class ProductService:
    """Looks up scanned barcodes and stores products in the pantry."""

    client: OpenFoodFactsClient
    hub: DataHub

    async def lookup(self, barcode: str) -> ProductInfo:
        """Resolve a barcode into product details."""
        barcode = barcode.strip()
        if not barcode or not barcode.isalnum():
            raise ValidationError("Please enter a valid barcode.")
        try:
            payload = await self.client.get_product(barcode)
        except httpx.HTTPError as exc:
            _logger.warning("Product lookup failed: barcode=%s error=%s", barcode, exc)
            raise NetworkError() from exc
        except json.JSONDecodeError as exc:
            raise DecodeError() from exc
        product = parse_product(barcode, payload)
        _logger.info("Product lookup: barcode=%s name=%s", barcode, product.name)
        return product

    async def add_to_pantry(self, product: ProductInfo) -> PantryItem:
        """Add one unit of a product, merging with an existing barcode entry."""
        return await self.hub.add_pantry_item(
            name=product.name,
            quantity=1,
            calories=product.calories,
            expiry=datetime.now(tz=UTC) + _DEFAULT_SHELF_LIFE,
            category=map_category(product.categories),
            barcode=product.barcode,
            nutrition=NutritionFacts(
                fat_g=product.fat_g,
                carbs_g=product.carbs_g,
                protein_g=product.protein_g,
                nutrition_grade=product.nutrition_grade,
            ),
        )
