"""Models for recipes returned by the recipe suggestion API."""

from pydantic import BaseModel, ConfigDict, Field


class Ingredient(BaseModel):
    """Single ingredient line of a recipe."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    name: str | None = None
    original: str | None = None
    amount: float | None = None
    unit: str | None = None
    image: str | None = None

    @property
    def display_text(self) -> str:
        text = self.name or "Unknown ingredient"
        if self.amount is not None and self.unit:
            text = f"{self.amount:g} {self.unit} {text}"
        return text


class Recipe(BaseModel):
    """Recipe summary or detail."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    title: str | None = None
    image: str | None = None
    image_type: str | None = Field(default=None, alias="imageType")
    used_ingredient_count: int | None = Field(
        default=None, alias="usedIngredientCount"
    )
    missed_ingredient_count: int | None = Field(
        default=None, alias="missedIngredientCount"
    )
    missed_ingredients: list[Ingredient] | None = Field(
        default=None, alias="missedIngredients"
    )
    used_ingredients: list[Ingredient] | None = Field(
        default=None, alias="usedIngredients"
    )
    unused_ingredients: list[Ingredient] | None = Field(
        default=None, alias="unusedIngredients"
    )
    likes: int | None = None
    ready_in_minutes: int | None = Field(default=None, alias="readyInMinutes")
    servings: int | None = None
    summary: str | None = None
    instructions: str | None = None

    @property
    def has_missing_ingredients(self) -> bool:
        return (self.missed_ingredient_count or 0) > 0

    @property
    def missing_ingredients_text(self) -> str:
        count = self.missed_ingredient_count or 0
        if count <= 0:
            return "All ingredients available"
        suffix = "" if count == 1 else "s"
        return f"{count} ingredient{suffix} missing"
