"""Domain models for pantry and shopping data."""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum


class FoodCategory(IntEnum):
    """Food categories with fixed storage ordinals.

    The remote store persists the raw integer, so members must never be
    reordered or renumbered.
    """

    BEVERAGES = 0
    DAIRY = 1
    FRUITS = 2
    VEGETABLES = 3
    GRAINS = 4
    PROTEINS = 5
    SNACKS = 6
    CONDIMENTS = 7

    @property
    def display_name(self) -> str:
        """Human-readable category label."""
        return self.name.title()

    @classmethod
    def from_ordinal(cls, value: object) -> "FoodCategory | None":
        """Decode a stored ordinal, returning None for unknown values."""
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class NutritionFacts:
    """Per-100g nutrition details captured from a barcode lookup."""

    fat_g: float | None = None
    carbs_g: float | None = None
    protein_g: float | None = None
    nutrition_grade: str | None = None


@dataclass(frozen=True)
class PantryItem:
    """A food product the user currently has."""

    id: str | None = None
    name: str | None = None
    quantity: int | None = None
    calories: int | None = None
    date: datetime | None = None
    category: FoodCategory | None = None
    user_id: str | None = None
    barcode: str | None = None
    nutrition: NutritionFacts | None = None


@dataclass(frozen=True)
class ShoppingItem:
    """A food product the user intends to buy."""

    id: str | None = None
    name: str | None = None
    quantity: int | None = None
    is_purchased: bool = False
    category: FoodCategory | None = None
    calories: int | None = None
    user_id: str | None = None

    @classmethod
    def from_pantry(cls, item: PantryItem) -> "ShoppingItem":
        """Build a shopping entry that restocks a pantry item."""
        return cls(
            name=item.name,
            quantity=item.quantity,
            category=item.category,
            calories=item.calories,
        )


@dataclass(frozen=True)
class LikedRecipe:
    """A recipe saved on this device."""

    id: int
    recipe_id: int
    title: str | None
    image: str | None
    date_added: datetime


@dataclass(frozen=True)
class User:
    """The authenticated user for the current session."""

    id: str
    email: str | None
