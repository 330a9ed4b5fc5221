"""Supabase-backed pantry item repository."""

from dataclasses import dataclass

from supabase import AsyncClient

from pantry_pal.domain.models import PantryItem
from pantry_pal.domain.records import (
    PANTRY_TABLE,
    USER_ID_COLUMN,
    pantry_item_from_row,
    pantry_item_to_row,
)
from pantry_pal.services.hub import PantryRepository


@dataclass
class SupabasePantryRepository(PantryRepository):
    """Supabase implementation for pantry items."""

    client: AsyncClient

    async def create(self, item: PantryItem) -> str:
        """Insert a pantry row and return its id."""
        response = (
            await self.client.table(PANTRY_TABLE)
            .insert(pantry_item_to_row(item))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create pantry item")
        return str(response.data[0]["id"])

    async def update_quantity(self, item_id: str, quantity: int) -> None:
        """Overwrite the quantity column of a pantry row."""
        await (
            self.client.table(PANTRY_TABLE)
            .update({"quantity": quantity})
            .eq("id", item_id)
            .execute()
        )

    async def delete(self, item_id: str) -> None:
        """Delete a pantry row."""
        await self.client.table(PANTRY_TABLE).delete().eq("id", item_id).execute()

    async def list_for_user(self, user_id: str) -> list[PantryItem]:
        """Return every pantry item owned by a user."""
        response = (
            await self.client.table(PANTRY_TABLE)
            .select("*")
            .eq(USER_ID_COLUMN, user_id)
            .execute()
        )
        return [
            pantry_item_from_row(str(row["id"]), row)
            for row in response.data or []
            if row.get("id") is not None
        ]
