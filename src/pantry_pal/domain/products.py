"""Product information resolved from a barcode."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProductInfo:
    """Product details and per-100g nutrition from the barcode API."""

    barcode: str
    name: str
    image_url: str
    categories: str
    nutrition_grade: str
    calories: int
    fat_g: float
    carbs_g: float
    protein_g: float
