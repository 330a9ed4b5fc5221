"""Tests for pantry workflows and account validation."""

import asyncio

import pytest

from pantry_pal.domain.auth import AuthErrorCode
from pantry_pal.domain.errors import ValidationError
from pantry_pal.domain.models import FoodCategory, PantryItem, ShoppingItem
from pantry_pal.services.accounts import AccountService, validate_sign_up
from pantry_pal.services.pantry import PantryService, filter_items
from tests.conftest import (
    FakeChangeStream,
    InMemoryPantryRepository,
    InMemoryShoppingRepository,
)


def test_filter_items_by_name_and_category() -> None:
    items = [
        PantryItem(id="1", name="Whole Milk", category=FoodCategory.DAIRY),
        PantryItem(id="2", name="Oat milk", category=FoodCategory.BEVERAGES),
        PantryItem(id="3", name="Apples", category=FoodCategory.FRUITS),
    ]

    assert [i.id for i in filter_items(items, "MILK")] == ["1", "2"]
    assert [i.id for i in filter_items(items, "milk", FoodCategory.DAIRY)] == ["1"]
    assert [i.id for i in filter_items(items, category=FoodCategory.FRUITS)] == ["3"]
    assert len(filter_items(items)) == 3


def test_move_to_shopping_keeps_pantry_item(
    hub, shopping_repository: InMemoryShoppingRepository
) -> None:
    asyncio.run(hub.sign_in("cook@example.com", "secret1"))
    service = PantryService(hub)
    pantry_item = PantryItem(
        id="p1", name="Butter", quantity=2, calories=717, category=FoodCategory.DAIRY
    )

    item = asyncio.run(service.move_to_shopping(pantry_item))

    assert item.name == "Butter"
    assert item.quantity == 2
    assert shopping_repository.created[0].category is FoodCategory.DAIRY


def test_purchase_moves_item_into_pantry(
    hub,
    change_stream: FakeChangeStream,
    pantry_repository: InMemoryPantryRepository,
    shopping_repository: InMemoryShoppingRepository,
) -> None:
    change_stream.initial_rows["shoppingItems"] = [
        {"id": "s1", "name": "Bread", "quantity": 1, "calories": 265}
    ]
    asyncio.run(hub.sign_in("cook@example.com", "secret1"))
    service = PantryService(hub)
    shopping_item = hub.get_shopping_item("s1")

    added = asyncio.run(service.purchase(shopping_item, 2, FoodCategory.GRAINS))

    assert added.quantity == 2
    assert added.category is FoodCategory.GRAINS
    assert added.barcode is None
    assert pantry_repository.created[0].calories == 265
    assert shopping_repository.deleted == ["s1"]


def test_purchase_rejects_zero_quantity(hub) -> None:
    service = PantryService(hub)

    with pytest.raises(ValidationError):
        asyncio.run(service.purchase(ShoppingItem(id="s1"), 0, FoodCategory.SNACKS))


@pytest.mark.parametrize(
    ("email", "password", "confirm", "message"),
    [
        ("", "secret1", "secret1", "Please enter your email"),
        ("a@b.com", "", "", "Please enter a password"),
        ("a@b.com", "secret1", "", "Please confirm your password"),
        ("a@b.com", "secret1", "secret2", "Passwords do not match"),
        ("a@b.com", "abc", "abc", "Password must be at least 6 characters"),
        ("a@b.com", "secret1", "secret1", None),
    ],
)
def test_validate_sign_up(
    email: str, password: str, confirm: str, message: str | None
) -> None:
    assert validate_sign_up(email, password, confirm) == message


def test_sign_in_validation_skips_backend(hub, change_stream: FakeChangeStream) -> None:
    service = AccountService(hub)

    result = asyncio.run(service.sign_in("cook@example.com", ""))

    assert result.error_code is AuthErrorCode.VALIDATION
    assert result.user_message() == "Please enter your password"
    assert change_stream.subscriptions == []


def test_sign_up_with_existing_email(hub) -> None:
    service = AccountService(hub)

    result = asyncio.run(
        service.sign_up("cook@example.com", "secret1", "secret1")
    )

    assert result.error_code is AuthErrorCode.EMAIL_IN_USE
    assert result.user_message() == (
        "This email is already registered. Please log in instead."
    )


def test_sign_in_wrong_password(hub) -> None:
    service = AccountService(hub)

    result = asyncio.run(service.sign_in("cook@example.com", "nope"))

    assert result.error_code is AuthErrorCode.WRONG_PASSWORD
    assert result.backend_code == 17009
    assert hub.current_user is None
