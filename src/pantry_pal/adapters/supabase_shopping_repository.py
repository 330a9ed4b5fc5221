"""Supabase-backed shopping list repository."""

from dataclasses import dataclass

from supabase import AsyncClient

from pantry_pal.domain.models import ShoppingItem
from pantry_pal.domain.records import (
    SHOPPING_TABLE,
    USER_ID_COLUMN,
    shopping_item_from_row,
    shopping_item_to_row,
)
from pantry_pal.services.hub import ShoppingRepository


@dataclass
class SupabaseShoppingRepository(ShoppingRepository):
    """Supabase implementation for shopping list items."""

    client: AsyncClient

    async def create(self, item: ShoppingItem) -> str:
        response = (
            await self.client.table(SHOPPING_TABLE)
            .insert(shopping_item_to_row(item))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create shopping item")
        return str(response.data[0]["id"])

    async def delete(self, item_id: str) -> None:
        await self.client.table(SHOPPING_TABLE).delete().eq("id", item_id).execute()

    async def list_for_user(self, user_id: str) -> list[ShoppingItem]:
        """Return every shopping item owned by a user."""
        response = (
            await self.client.table(SHOPPING_TABLE)
            .select("*")
            .eq(USER_ID_COLUMN, user_id)
            .execute()
        )
        return [
            shopping_item_from_row(str(row["id"]), row)
            for row in response.data or []
            if row.get("id") is not None
        ]
