"""Row codecs for the remote pantryItems and shoppingItems collections.

Decoding is best-effort: a missing or mistyped field becomes None (or False
for flags) so one bad column never aborts a whole change batch.
"""

from datetime import datetime

from pantry_pal.domain.models import (
    FoodCategory,
    NutritionFacts,
    PantryItem,
    ShoppingItem,
)

PANTRY_TABLE = "pantryItems"
SHOPPING_TABLE = "shoppingItems"
USER_ID_COLUMN = "userId"


def pantry_item_to_row(item: PantryItem) -> dict[str, object]:
    """Encode a pantry item into a row payload (without id)."""
    row: dict[str, object] = {
        "name": item.name or "",
        "quantity": item.quantity if item.quantity is not None else 0,
        "calories": item.calories if item.calories is not None else 0,
        "date": item.date.isoformat() if item.date else None,
        "category": int(item.category) if item.category is not None else None,
        USER_ID_COLUMN: item.user_id or "",
        "barcode": item.barcode or "",
    }
    if item.nutrition is not None:
        row["fat"] = item.nutrition.fat_g
        row["carbs"] = item.nutrition.carbs_g
        row["protein"] = item.nutrition.protein_g
        row["nutritionGrade"] = item.nutrition.nutrition_grade
    return row


def shopping_item_to_row(item: ShoppingItem) -> dict[str, object]:
    """Encode a shopping item into a row payload (without id)."""
    return {
        "name": item.name or "",
        "quantity": item.quantity if item.quantity is not None else 1,
        "isPurchased": item.is_purchased,
        "category": int(item.category) if item.category is not None else 0,
        "calories": item.calories if item.calories is not None else 0,
        USER_ID_COLUMN: item.user_id or "",
    }


def pantry_item_from_row(document_id: str, row: dict[str, object]) -> PantryItem:
    """Decode a pantry row, defaulting fields that are missing or malformed."""
    fat = _as_float(row.get("fat"))
    carbs = _as_float(row.get("carbs"))
    protein = _as_float(row.get("protein"))
    grade = _as_str(row.get("nutritionGrade"))
    nutrition = None
    if any(value is not None for value in (fat, carbs, protein, grade)):
        nutrition = NutritionFacts(
            fat_g=fat, carbs_g=carbs, protein_g=protein, nutrition_grade=grade
        )
    return PantryItem(
        id=document_id,
        name=_as_str(row.get("name")),
        quantity=_as_int(row.get("quantity")),
        calories=_as_int(row.get("calories")),
        date=_as_datetime(row.get("date")),
        category=FoodCategory.from_ordinal(_as_int(row.get("category"))),
        user_id=_as_str(row.get(USER_ID_COLUMN)),
        barcode=_as_str(row.get("barcode")),
        nutrition=nutrition,
    )


def shopping_item_from_row(document_id: str, row: dict[str, object]) -> ShoppingItem:
    """Decode a shopping row, defaulting fields that are missing or malformed."""
    purchased = row.get("isPurchased")
    return ShoppingItem(
        id=document_id,
        name=_as_str(row.get("name")),
        quantity=_as_int(row.get("quantity")),
        is_purchased=purchased if isinstance(purchased, bool) else False,
        category=FoodCategory.from_ordinal(_as_int(row.get("category"))),
        calories=_as_int(row.get("calories")),
        user_id=_as_str(row.get(USER_ID_COLUMN)),
    )


def _as_str(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _as_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    return None


def _as_datetime(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None
