"""Pydantic models for API request bodies."""

from datetime import datetime

from pydantic import BaseModel, Field

from pantry_pal.domain.models import FoodCategory


class SignInRequest(BaseModel):
    """Email and password sign-in form."""

    email: str = ""
    password: str = ""


class SignUpRequest(BaseModel):
    """Account creation form."""

    email: str = ""
    password: str = ""
    confirm_password: str = ""


class PantryItemCreate(BaseModel):
    """Manually entered pantry item."""

    name: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    calories: int = 0
    expiry: datetime | None = None
    category: FoodCategory | None = None
    barcode: str | None = None


class ShoppingItemCreate(BaseModel):
    """Manually entered shopping list item."""

    name: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    category: FoodCategory | None = None
    calories: int = 0


class PurchaseRequest(BaseModel):
    """Quantity bought and the pantry category to file it under."""

    quantity: int
    category: FoodCategory


class LikedRecipeCreate(BaseModel):
    recipe_id: int
    title: str | None = None
    image: str | None = None
