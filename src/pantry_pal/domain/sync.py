"""Change records and observer snapshots exchanged by the data hub."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar

from pantry_pal.domain.models import LikedRecipe, PantryItem, ShoppingItem, User


class ListenerKind(StrEnum):
    """Which slice of hub state an observer is interested in."""

    PANTRY = "pantry"
    SHOPPING = "shopping"
    AUTH = "auth"
    LIKED_RECIPES = "liked_recipes"
    ALL = "all"

    def wants(self, kind: "ListenerKind") -> bool:
        """Return true when snapshots of ``kind`` should reach this observer."""
        return self is ListenerKind.ALL or self is kind


class ChangeType(StrEnum):
    """Type of an incremental change to a remote document."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"


@dataclass(frozen=True)
class DocumentChange:
    """One change record from a remote collection's change stream."""

    type: ChangeType
    document_id: str
    data: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class PantrySnapshot:
    items: tuple[PantryItem, ...]
    kind: ClassVar[ListenerKind] = ListenerKind.PANTRY


@dataclass(frozen=True)
class ShoppingSnapshot:
    items: tuple[ShoppingItem, ...]
    kind: ClassVar[ListenerKind] = ListenerKind.SHOPPING


@dataclass(frozen=True)
class AuthSnapshot:
    user: User | None
    kind: ClassVar[ListenerKind] = ListenerKind.AUTH


@dataclass(frozen=True)
class LikedRecipesSnapshot:
    recipes: tuple[LikedRecipe, ...]
    kind: ClassVar[ListenerKind] = ListenerKind.LIKED_RECIPES


Snapshot = PantrySnapshot | ShoppingSnapshot | AuthSnapshot | LikedRecipesSnapshot

Observer = Callable[[Snapshot], None]
