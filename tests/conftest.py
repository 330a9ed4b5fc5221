"""Shared test fixtures."""

from collections.abc import Iterator
from dataclasses import dataclass, field

import pytest

from pantry_pal.adapters.openfoodfacts_client import OpenFoodFactsClient
from pantry_pal.adapters.spoonacular_client import SpoonacularClient
from pantry_pal.adapters.sqlite_liked_recipe_repository import (
    SqliteLikedRecipeRepository,
)
from pantry_pal.config import Settings
from pantry_pal.containers import AppContainer
from pantry_pal.domain.auth import AuthErrorCode
from pantry_pal.domain.errors import AuthenticationError
from pantry_pal.domain.models import PantryItem, ShoppingItem, User
from pantry_pal.domain.sync import ChangeType, DocumentChange, ListenerKind
from pantry_pal.services.accounts import AccountService
from pantry_pal.services.events import SnapshotFeed
from pantry_pal.services.hub import (
    AuthGateway,
    ChangeCallback,
    ChangeStream,
    DataHub,
    PantryRepository,
    ShoppingRepository,
    Subscription,
)
from pantry_pal.services.pantry import PantryService
from pantry_pal.services.products import ProductService
from pantry_pal.services.recipes import RecipeService


@dataclass
class FakeAuthGateway(AuthGateway):
    """Auth backend with a fixed set of accounts."""

    accounts: dict[str, tuple[str, User]] = field(default_factory=dict)
    error: AuthenticationError | None = None
    session_user: User | None = None
    sign_out_calls: int = 0

    async def sign_in(self, email: str, password: str) -> User:
        if self.error is not None:
            raise self.error
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise AuthenticationError(
                AuthErrorCode.WRONG_PASSWORD, "Invalid login credentials", 17009
            )
        return account[1]

    async def sign_up(self, email: str, password: str) -> User:
        if self.error is not None:
            raise self.error
        if email in self.accounts:
            raise AuthenticationError(
                AuthErrorCode.EMAIL_IN_USE, "User already registered", "email_exists"
            )
        user = User(id=f"user-{len(self.accounts) + 1}", email=email)
        self.accounts[email] = (password, user)
        return user

    async def sign_out(self) -> None:
        self.sign_out_calls += 1

    async def current_user(self) -> User | None:
        return self.session_user


@dataclass
class InMemoryPantryRepository(PantryRepository):
    """Pantry repository recording every remote write."""

    created: list[PantryItem] = field(default_factory=list)
    quantity_updates: list[tuple[str, int]] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    fail: bool = False

    async def create(self, item: PantryItem) -> str:
        if self.fail:
            raise RuntimeError("remote unavailable")
        self.created.append(item)
        return f"pantry-{len(self.created)}"

    async def update_quantity(self, item_id: str, quantity: int) -> None:
        if self.fail:
            raise RuntimeError("remote unavailable")
        self.quantity_updates.append((item_id, quantity))

    async def delete(self, item_id: str) -> None:
        if self.fail:
            raise RuntimeError("remote unavailable")
        self.deleted.append(item_id)


@dataclass
class InMemoryShoppingRepository(ShoppingRepository):
    """Shopping repository recording every remote write."""

    created: list[ShoppingItem] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    fail: bool = False

    async def create(self, item: ShoppingItem) -> str:
        if self.fail:
            raise RuntimeError("remote unavailable")
        self.created.append(item)
        return f"shopping-{len(self.created)}"

    async def delete(self, item_id: str) -> None:
        if self.fail:
            raise RuntimeError("remote unavailable")
        self.deleted.append(item_id)


@dataclass
class FakeSubscription(Subscription):
    table: str
    user_id: str
    closed: bool = False

    async def close(self) -> None:
        self.closed = True


@dataclass
class FakeChangeStream(ChangeStream):
    """Change stream that replays seeded rows and lets tests push batches."""

    initial_rows: dict[str, list[dict[str, object]]] = field(default_factory=dict)
    callbacks: dict[str, ChangeCallback] = field(default_factory=dict)
    subscriptions: list[FakeSubscription] = field(default_factory=list)

    async def subscribe(
        self, table: str, user_id: str, on_changes: ChangeCallback
    ) -> Subscription:
        self.callbacks[table] = on_changes
        subscription = FakeSubscription(table=table, user_id=user_id)
        self.subscriptions.append(subscription)
        on_changes(
            [
                DocumentChange(ChangeType.ADDED, str(row["id"]), row)
                for row in self.initial_rows.get(table, [])
            ]
        )
        return subscription

    def emit(self, table: str, changes: list[DocumentChange]) -> None:
        self.callbacks[table](changes)

    @property
    def active(self) -> list[FakeSubscription]:
        return [s for s in self.subscriptions if not s.closed]


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Product client returning canned payloads by barcode."""

    products: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "5000112637922": {
                "status": 1,
                "product": {
                    "product_name": "Coca-Cola",
                    "image_url": "https://images.test/coke.jpg",
                    "categories": "Beverages, Carbonated drinks, Sodas",
                    "nutrition_grades": "e",
                    "nutriments": {
                        "energy-kcal_100g": 42,
                        "fat_100g": 0,
                        "carbohydrates_100g": 10.6,
                        "proteins_100g": 0,
                    },
                },
            }
        }
    )
    error: Exception | None = None

    async def get_product(self, barcode: str) -> dict[str, object]:
        if self.error is not None:
            raise self.error
        return self.products.get(barcode, {"status": 0})


@dataclass
class FakeSpoonacularClient(SpoonacularClient):
    """Recipe client returning canned payloads."""

    recipes: list[dict[str, object]] = field(
        default_factory=lambda: [
            {
                "id": 715538,
                "title": "Bruschetta with Tomato",
                "image": "https://img.test/715538.jpg",
                "usedIngredientCount": 2,
                "missedIngredientCount": 2,
                "missedIngredients": [
                    {"id": 1, "name": "basil", "amount": 2.0, "unit": "leaves"},
                    {"id": 2, "name": "olive oil", "amount": None, "unit": "tbsp"},
                ],
                "usedIngredients": [{"id": 3, "name": "tomato", "amount": 2.0}],
                "likes": 12,
            },
            {
                "id": 716429,
                "title": "Pasta with Garlic",
                "usedIngredientCount": 1,
                "missedIngredientCount": 0,
                "missedIngredients": [],
            },
        ]
    )
    details: dict[int, dict[str, object]] = field(default_factory=dict)
    searched: list[list[str]] = field(default_factory=list)
    images: dict[str, bytes] = field(
        default_factory=lambda: {"https://img.test/715538.jpg": b"image-bytes"}
    )
    downloaded: list[str] = field(default_factory=list)
    error: Exception | None = None

    async def find_by_ingredients(
        self, ingredients: list[str], number: int = 100
    ) -> list[dict[str, object]]:
        if self.error is not None:
            raise self.error
        self.searched.append(ingredients)
        return self.recipes

    async def get_recipe_information(self, recipe_id: int) -> dict[str, object]:
        if self.error is not None:
            raise self.error
        return self.details.get(recipe_id, {"id": recipe_id, "title": "Recipe"})

    async def download_image(self, url: str) -> bytes | None:
        self.downloaded.append(url)
        return self.images.get(url)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_key="header.payload.signature",
        spoonacular_api_key="spoonacular-key",
        liked_recipes_db_path=":memory:",
    )


@pytest.fixture
def auth_gateway() -> FakeAuthGateway:
    user = User(id="user-1", email="cook@example.com")
    return FakeAuthGateway(accounts={"cook@example.com": ("secret1", user)})


@pytest.fixture
def pantry_repository() -> InMemoryPantryRepository:
    return InMemoryPantryRepository()


@pytest.fixture
def shopping_repository() -> InMemoryShoppingRepository:
    return InMemoryShoppingRepository()


@pytest.fixture
def change_stream() -> FakeChangeStream:
    return FakeChangeStream()


@pytest.fixture
def liked_recipe_repository() -> Iterator[SqliteLikedRecipeRepository]:
    repository = SqliteLikedRecipeRepository(":memory:")
    yield repository
    repository.close()


@pytest.fixture
def hub(
    auth_gateway: FakeAuthGateway,
    pantry_repository: InMemoryPantryRepository,
    shopping_repository: InMemoryShoppingRepository,
    change_stream: FakeChangeStream,
    liked_recipe_repository: SqliteLikedRecipeRepository,
) -> DataHub:
    return DataHub(
        auth_gateway=auth_gateway,
        pantry_repository=pantry_repository,
        shopping_repository=shopping_repository,
        change_stream=change_stream,
        liked_recipe_repository=liked_recipe_repository,
    )


@pytest.fixture
def openfoodfacts_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient()


@pytest.fixture
def spoonacular_client() -> FakeSpoonacularClient:
    return FakeSpoonacularClient()


@pytest.fixture
def container(
    settings: Settings,
    hub: DataHub,
    openfoodfacts_client: FakeOpenFoodFactsClient,
    spoonacular_client: FakeSpoonacularClient,
) -> AppContainer:
    snapshot_feed = SnapshotFeed()
    hub.add_observer(snapshot_feed, ListenerKind.ALL)

    async def close_resources() -> None:
        await hub.close()

    return AppContainer(
        settings=settings,
        hub=hub,
        account_service=AccountService(hub),
        pantry_service=PantryService(hub),
        product_service=ProductService(client=openfoodfacts_client, hub=hub),
        recipe_service=RecipeService(client=spoonacular_client, hub=hub),
        snapshot_feed=snapshot_feed,
        close_resources=close_resources,
    )
