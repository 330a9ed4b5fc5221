"""In-memory cache of pantry and shopping data with observer fanout.

The hub owns the cached collections for the signed-in user, keeps them in
step with the remote change stream and pushes immutable snapshots to
registered observers. All mutation happens on the owner event loop; change
batches arriving from other threads are marshalled there by the dispatcher.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from functools import partial
from typing import Protocol, TypeVar

from pantry_pal.domain.auth import AuthResult
from pantry_pal.domain.errors import AuthenticationError
from pantry_pal.domain.models import (
    FoodCategory,
    LikedRecipe,
    NutritionFacts,
    PantryItem,
    ShoppingItem,
    User,
)
from pantry_pal.domain.records import (
    PANTRY_TABLE,
    SHOPPING_TABLE,
    pantry_item_from_row,
    shopping_item_from_row,
)
from pantry_pal.domain.sync import (
    AuthSnapshot,
    ChangeType,
    DocumentChange,
    LikedRecipesSnapshot,
    ListenerKind,
    Observer,
    PantrySnapshot,
    ShoppingSnapshot,
    Snapshot,
)
from pantry_pal.services.dispatch import LoopDispatcher

_logger = logging.getLogger(__name__)

_T = TypeVar("_T")

ChangeCallback = Callable[[list[DocumentChange]], None]


class PantryRepository(Protocol):
    """Remote persistence for pantry items."""

    async def create(self, item: PantryItem) -> str:
        """Persist a new item and return its document id."""

    async def update_quantity(self, item_id: str, quantity: int) -> None:
        """Overwrite the stored quantity of an item."""

    async def delete(self, item_id: str) -> None:
        """Delete an item by id."""


class ShoppingRepository(Protocol):
    """Remote persistence for shopping list items."""

    async def create(self, item: ShoppingItem) -> str:
        """Persist a new item and return its document id."""

    async def delete(self, item_id: str) -> None:
        """Delete an item by id."""


class LikedRecipeRepository(Protocol):
    """On-device storage for liked recipes."""

    def add(
        self,
        recipe_id: int,
        title: str | None,
        image: str | None,
        date_added: datetime,
    ) -> LikedRecipe:
        """Store a liked recipe and return it."""

    def remove(self, liked_id: int) -> None:
        """Delete a liked recipe by its local id."""

    def list_all(self) -> list[LikedRecipe]:
        """Return liked recipes, newest first."""


class AuthGateway(Protocol):
    """Authentication backend."""

    async def sign_in(self, email: str, password: str) -> User:
        """Sign in, raising AuthenticationError on failure."""

    async def sign_up(self, email: str, password: str) -> User:
        """Create an account, raising AuthenticationError on failure."""

    async def sign_out(self) -> None:
        """End the backend session."""

    async def current_user(self) -> User | None:
        """Return the user of a persisted session, if any."""


class Subscription(Protocol):
    """Handle for an attached change stream."""

    async def close(self) -> None:
        """Detach the stream."""


class ChangeStream(Protocol):
    """Live change feed for a remote collection filtered by owner."""

    async def subscribe(
        self, table: str, user_id: str, on_changes: ChangeCallback
    ) -> Subscription:
        """Deliver the current rows as one added batch, then live changes."""


@dataclass
class DataHub:
    """Cache and listener hub for pantry, shopping, auth and liked recipes."""

    auth_gateway: AuthGateway
    pantry_repository: PantryRepository
    shopping_repository: ShoppingRepository
    change_stream: ChangeStream
    liked_recipe_repository: LikedRecipeRepository
    dispatcher: LoopDispatcher = field(default_factory=LoopDispatcher)
    _observers: dict[Observer, ListenerKind] = field(default_factory=dict, init=False)
    _pantry: dict[str, PantryItem] = field(default_factory=dict, init=False)
    _shopping: dict[str, ShoppingItem] = field(default_factory=dict, init=False)
    _current_user: User | None = field(default=None, init=False)
    _subscriptions: list[Subscription] = field(default_factory=list, init=False)
    _barcode_locks: dict[str, tuple[asyncio.Lock, int]] = field(
        default_factory=dict, init=False
    )

    @property
    def current_user(self) -> User | None:
        return self._current_user

    @property
    def pantry_items(self) -> tuple[PantryItem, ...]:
        return tuple(self._pantry.values())

    @property
    def shopping_items(self) -> tuple[ShoppingItem, ...]:
        return tuple(self._shopping.values())

    def get_current_user_id(self) -> str | None:
        """Return the signed-in user's id, or None when signed out."""
        return self._current_user.id if self._current_user else None

    def get_pantry_item(self, item_id: str) -> PantryItem | None:
        return self._pantry.get(item_id)

    def get_shopping_item(self, item_id: str) -> ShoppingItem | None:
        return self._shopping.get(item_id)

    def find_pantry_item_by_barcode(self, barcode: str) -> PantryItem | None:
        """Return the cached pantry item carrying ``barcode``, if any."""
        if not barcode:
            return None
        user_id = self.get_current_user_id()
        for item in self._pantry.values():
            if item.barcode == barcode and item.user_id == user_id:
                return item
        return None

    # Observers

    def add_observer(self, observer: Observer, kind: ListenerKind) -> None:
        """Register an observer and send it the current state it asked for."""
        if observer in self._observers:
            return
        self._observers[observer] = kind
        for snapshot in self._snapshots_for(kind):
            _notify(observer, snapshot)

    def remove_observer(self, observer: Observer) -> None:
        self._observers.pop(observer, None)

    def _snapshots_for(self, kind: ListenerKind) -> list[Snapshot]:
        snapshots: list[Snapshot] = []
        if kind.wants(ListenerKind.PANTRY):
            snapshots.append(PantrySnapshot(self.pantry_items))
        if kind.wants(ListenerKind.SHOPPING):
            snapshots.append(ShoppingSnapshot(self.shopping_items))
        if kind.wants(ListenerKind.AUTH):
            snapshots.append(AuthSnapshot(self._current_user))
        if kind.wants(ListenerKind.LIKED_RECIPES):
            snapshots.append(LikedRecipesSnapshot(tuple(self.liked_recipes())))
        return snapshots

    def _broadcast(self, snapshot: Snapshot) -> None:
        for observer, kind in list(self._observers.items()):
            if kind.wants(snapshot.kind):
                _notify(observer, snapshot)

    # Change stream reconciliation

    def apply_pantry_changes(self, changes: Sequence[DocumentChange]) -> None:
        """Apply one pantry change batch and broadcast the result."""
        _reconcile(self._pantry, changes, pantry_item_from_row)
        self._broadcast(PantrySnapshot(self.pantry_items))

    def apply_shopping_changes(self, changes: Sequence[DocumentChange]) -> None:
        """Apply one shopping change batch and broadcast the result."""
        _reconcile(self._shopping, changes, shopping_item_from_row)
        self._broadcast(ShoppingSnapshot(self.shopping_items))

    def _deliver(
        self,
        user_id: str,
        apply: Callable[[Sequence[DocumentChange]], None],
        changes: Sequence[DocumentChange],
    ) -> None:
        # Batches queued before sign-out or a user switch are stale.
        if self.get_current_user_id() != user_id:
            _logger.debug("Dropping change batch for inactive user %s", user_id)
            return
        apply(changes)

    def _on_changes(
        self,
        user_id: str,
        apply: Callable[[Sequence[DocumentChange]], None],
        changes: list[DocumentChange],
    ) -> None:
        self.dispatcher.dispatch(self._deliver, user_id, apply, changes)

    async def _attach_listeners(self, user_id: str) -> None:
        await self._detach_listeners()
        self.dispatcher.bind(asyncio.get_running_loop())
        streams = (
            (PANTRY_TABLE, self.apply_pantry_changes),
            (SHOPPING_TABLE, self.apply_shopping_changes),
        )
        for table, apply in streams:
            try:
                subscription = await self.change_stream.subscribe(
                    table, user_id, partial(self._on_changes, user_id, apply)
                )
            except Exception:
                _logger.exception(
                    "Failed to attach change stream", extra={"table": table}
                )
                continue
            self._subscriptions.append(subscription)

    async def _detach_listeners(self) -> None:
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            try:
                await subscription.close()
            except Exception:
                _logger.exception("Failed to detach change stream")

    # Authentication

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Sign in and start streaming the user's collections."""
        try:
            user = await self.auth_gateway.sign_in(email, password)
        except AuthenticationError as exc:
            _logger.warning(
                "Sign in failed: code=%s backend_code=%s", exc.code, exc.backend_code
            )
            return AuthResult.failure(exc.code, exc.user_message, exc.backend_code)
        await self._adopt_user(user)
        return AuthResult.success(user)

    async def sign_up(self, email: str, password: str) -> AuthResult:
        """Create an account, sign it in and start streaming."""
        try:
            user = await self.auth_gateway.sign_up(email, password)
        except AuthenticationError as exc:
            _logger.warning(
                "Sign up failed: code=%s backend_code=%s", exc.code, exc.backend_code
            )
            return AuthResult.failure(exc.code, exc.user_message, exc.backend_code)
        await self._adopt_user(user)
        return AuthResult.success(user)

    async def sign_out(self) -> None:
        """Sign out, drop cached data and tell every observer."""
        await self.auth_gateway.sign_out()
        await self._detach_listeners()
        self._current_user = None
        self._pantry.clear()
        self._shopping.clear()
        self._barcode_locks.clear()
        self._broadcast(AuthSnapshot(None))
        self._broadcast(PantrySnapshot(()))
        self._broadcast(ShoppingSnapshot(()))

    async def restore_session(self) -> User | None:
        """Adopt a session the auth backend already holds, if any."""
        try:
            user = await self.auth_gateway.current_user()
        except Exception:
            _logger.exception("Failed to restore auth session")
            return None
        if user is None:
            _logger.info("No user signed in")
            return None
        await self._adopt_user(user)
        return user

    async def _adopt_user(self, user: User) -> None:
        if self._current_user is not None and self._current_user.id != user.id:
            self._pantry.clear()
            self._shopping.clear()
            self._barcode_locks.clear()
            self._broadcast(PantrySnapshot(()))
            self._broadcast(ShoppingSnapshot(()))
        self._current_user = user
        _logger.info("Signed in", extra={"user_id": user.id})
        await self._attach_listeners(user.id)
        self._broadcast(AuthSnapshot(user))

    # Pantry

    async def add_pantry_item(  # noqa: PLR0913
        self,
        name: str,
        quantity: int,
        calories: int,
        expiry: datetime | None,
        category: FoodCategory | None,
        barcode: str | None = None,
        nutrition: NutritionFacts | None = None,
    ) -> PantryItem:
        """Add an item, merging into an existing one with the same barcode."""
        item = PantryItem(
            name=name,
            quantity=quantity,
            calories=calories,
            date=expiry,
            category=category,
            user_id=self.get_current_user_id(),
            barcode=barcode,
            nutrition=nutrition,
        )
        if not barcode:
            return await self._create_pantry_item(item)
        lock = self._barcode_lock(barcode)
        try:
            async with lock:
                existing = self.find_pantry_item_by_barcode(barcode)
                if existing is not None:
                    return await self._increment_quantity(existing, quantity)
                return await self._create_pantry_item(item)
        finally:
            self._release_barcode_lock(barcode, lock)

    def _barcode_lock(self, barcode: str) -> asyncio.Lock:
        lock, users = self._barcode_locks.get(barcode, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._barcode_locks[barcode] = (lock, users + 1)
        return lock

    def _release_barcode_lock(self, barcode: str, lock: asyncio.Lock) -> None:
        # Released locks report unlocked before a woken waiter resumes, so
        # count holders and waiters instead of asking the lock.
        current, users = self._barcode_locks.get(barcode, (None, 0))
        if current is not lock:
            return
        if users <= 1:
            del self._barcode_locks[barcode]
        else:
            self._barcode_locks[barcode] = (lock, users - 1)

    async def _increment_quantity(
        self, existing: PantryItem, quantity: int
    ) -> PantryItem:
        # Optimistic: the cache keeps the bump even if the remote write fails;
        # the next change-stream event for this document reconciles it.
        new_quantity = (existing.quantity or 0) + quantity
        updated = replace(existing, quantity=new_quantity)
        self._pantry[existing.id] = updated
        _logger.info(
            "Merged pantry item by barcode",
            extra={"item_id": existing.id, "quantity": new_quantity},
        )
        self._broadcast(PantrySnapshot(self.pantry_items))
        try:
            await self.pantry_repository.update_quantity(existing.id, new_quantity)
        except Exception:
            _logger.exception(
                "Failed to update pantry quantity", extra={"item_id": existing.id}
            )
        return updated

    async def _create_pantry_item(self, item: PantryItem) -> PantryItem:
        try:
            item_id = await self.pantry_repository.create(item)
        except Exception:
            _logger.exception(
                "Failed to add pantry item", extra={"item_name": item.name}
            )
            return item
        created = replace(item, id=item_id)
        if self.get_current_user_id() != item.user_id:
            _logger.info(
                "Pantry item created after user changed", extra={"item_id": item_id}
            )
            return created
        # The change stream may have delivered this document already.
        self._pantry.setdefault(item_id, created)
        self._broadcast(PantrySnapshot(self.pantry_items))
        return self._pantry[item_id]

    async def delete_pantry_item(self, item: PantryItem) -> None:
        """Delete remotely; the cache follows the stream's removed event."""
        if item.id is None:
            return
        try:
            await self.pantry_repository.delete(item.id)
        except Exception:
            _logger.exception(
                "Failed to delete pantry item", extra={"item_id": item.id}
            )

    # Shopping

    async def add_shopping_item(self, item: ShoppingItem) -> ShoppingItem:
        """Persist a shopping item for the current user."""
        owned = replace(item, id=None, user_id=self.get_current_user_id())
        try:
            item_id = await self.shopping_repository.create(owned)
        except Exception:
            _logger.exception(
                "Failed to add shopping item", extra={"item_name": item.name}
            )
            return owned
        if self.get_current_user_id() != owned.user_id:
            _logger.info(
                "Shopping item created after user changed", extra={"item_id": item_id}
            )
            return replace(owned, id=item_id)
        self._shopping.setdefault(item_id, replace(owned, id=item_id))
        self._broadcast(ShoppingSnapshot(self.shopping_items))
        return self._shopping[item_id]

    async def delete_shopping_item(self, item: ShoppingItem) -> None:
        """Delete remotely; the cache follows the stream's removed event."""
        if item.id is None:
            return
        try:
            await self.shopping_repository.delete(item.id)
        except Exception:
            _logger.exception(
                "Failed to delete shopping item", extra={"item_id": item.id}
            )

    # Liked recipes

    def liked_recipes(self) -> list[LikedRecipe]:
        return self.liked_recipe_repository.list_all()

    def add_liked_recipe(
        self, recipe_id: int, title: str | None, image: str | None
    ) -> LikedRecipe:
        """Save a recipe locally and notify liked-recipe observers."""
        recipe = self.liked_recipe_repository.add(
            recipe_id, title, image, datetime.now(tz=UTC)
        )
        self._broadcast(LikedRecipesSnapshot(tuple(self.liked_recipes())))
        return recipe

    def remove_liked_recipe(self, recipe: LikedRecipe) -> None:
        self.liked_recipe_repository.remove(recipe.id)
        self._broadcast(LikedRecipesSnapshot(tuple(self.liked_recipes())))

    async def close(self) -> None:
        """Detach remote listeners."""
        await self._detach_listeners()


def _reconcile(
    cache: dict[str, _T],
    changes: Sequence[DocumentChange],
    decode: Callable[[str, dict[str, object]], _T],
) -> None:
    """Apply change records by document id, in delivery order.

    Added and modified records upsert (an existing key keeps its position,
    a new key is appended); removed records drop the key if present.
    """
    for change in changes:
        if change.type is ChangeType.REMOVED:
            cache.pop(change.document_id, None)
            continue
        cache[change.document_id] = decode(change.document_id, change.data)


def _notify(observer: Observer, snapshot: Snapshot) -> None:
    try:
        observer(snapshot)
    except Exception:
        _logger.exception(
            "Observer failed handling snapshot", extra={"kind": str(snapshot.kind)}
        )
