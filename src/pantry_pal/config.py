"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_key: str
    spoonacular_api_key: str
    spoonacular_base_url: str = "https://api.spoonacular.com"
    openfoodfacts_base_url: str = "https://world.openfoodfacts.net"
    user_agent: str = "PantryPal/1.0 (Python)"
    liked_recipes_db_path: str = "~/.config/pantry_pal/liked_recipes.db"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
