"""Pantry and shopping list workflows."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from pantry_pal.domain.errors import ValidationError
from pantry_pal.domain.models import FoodCategory, PantryItem, ShoppingItem
from pantry_pal.services.hub import DataHub

_logger = logging.getLogger(__name__)


def filter_items(
    items: Iterable[PantryItem],
    query: str | None = None,
    category: FoodCategory | None = None,
) -> list[PantryItem]:
    """Filter pantry items by name substring and category."""
    needle = (query or "").strip().lower()
    results = []
    for item in items:
        if needle and needle not in (item.name or "").lower():
            continue
        if category is not None and item.category is not category:
            continue
        results.append(item)
    return results


@dataclass
class PantryService:
    """Moves items between the pantry and the shopping list."""

    hub: DataHub

    async def move_to_shopping(self, item: PantryItem) -> ShoppingItem:
        """Put a pantry item on the shopping list; the pantry entry stays."""
        return await self.hub.add_shopping_item(ShoppingItem.from_pantry(item))

    async def purchase(
        self, item: ShoppingItem, quantity: int, category: FoodCategory
    ) -> PantryItem:
        """Record a bought shopping item in the pantry and drop it from the list."""
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1.")
        added = await self.hub.add_pantry_item(
            name=item.name or "Unknown",
            quantity=quantity,
            calories=item.calories or 0,
            expiry=datetime.now(tz=UTC),
            category=category,
            barcode=None,
        )
        await self.hub.delete_shopping_item(item)
        _logger.info(
            "Purchased shopping item: name=%s quantity=%s", item.name, quantity
        )
        return added
