"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import acreate_client

from pantry_pal.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from pantry_pal.adapters.spoonacular_client import HttpxSpoonacularClient
from pantry_pal.adapters.sqlite_liked_recipe_repository import (
    SqliteLikedRecipeRepository,
)
from pantry_pal.adapters.supabase_auth_gateway import SupabaseAuthGateway
from pantry_pal.adapters.supabase_change_stream import SupabaseChangeStream
from pantry_pal.adapters.supabase_pantry_repository import SupabasePantryRepository
from pantry_pal.adapters.supabase_shopping_repository import (
    SupabaseShoppingRepository,
)
from pantry_pal.config import Settings
from pantry_pal.domain.sync import ListenerKind
from pantry_pal.services.accounts import AccountService
from pantry_pal.services.events import SnapshotFeed
from pantry_pal.services.hub import DataHub
from pantry_pal.services.pantry import PantryService
from pantry_pal.services.products import ProductService
from pantry_pal.services.recipes import RecipeService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    hub: DataHub
    account_service: AccountService
    pantry_service: PantryService
    product_service: ProductService
    recipe_service: RecipeService
    snapshot_feed: SnapshotFeed
    close_resources: Callable[[], Awaitable[None]]


async def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = await acreate_client(
        resolved_settings.supabase_url, resolved_settings.supabase_key
    )
    liked_recipe_repository = SqliteLikedRecipeRepository(
        resolved_settings.liked_recipes_db_path
    )
    hub = DataHub(
        auth_gateway=SupabaseAuthGateway(supabase_client),
        pantry_repository=SupabasePantryRepository(supabase_client),
        shopping_repository=SupabaseShoppingRepository(supabase_client),
        change_stream=SupabaseChangeStream(supabase_client),
        liked_recipe_repository=liked_recipe_repository,
    )
    snapshot_feed = SnapshotFeed()
    hub.add_observer(snapshot_feed, ListenerKind.ALL)

    openfoodfacts_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.openfoodfacts_base_url,
        user_agent=resolved_settings.user_agent,
    )
    spoonacular_client = HttpxSpoonacularClient.create(
        api_key=resolved_settings.spoonacular_api_key,
        base_url=resolved_settings.spoonacular_base_url,
    )

    async def close_resources() -> None:
        await hub.close()
        await openfoodfacts_client.close()
        await spoonacular_client.close()
        liked_recipe_repository.close()

    return AppContainer(
        settings=resolved_settings,
        hub=hub,
        account_service=AccountService(hub),
        pantry_service=PantryService(hub),
        product_service=ProductService(client=openfoodfacts_client, hub=hub),
        recipe_service=RecipeService(client=spoonacular_client, hub=hub),
        snapshot_feed=snapshot_feed,
        close_resources=close_resources,
    )
