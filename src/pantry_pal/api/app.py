"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from pantry_pal.api.models import (
    PantryItemCreate,
    PurchaseRequest,
    ShoppingItemCreate,
    SignInRequest,
    SignUpRequest,
)
from pantry_pal.api.recipes import router as recipes_router
from pantry_pal.app_logging import configure_logging
from pantry_pal.config import Settings
from pantry_pal.containers import AppContainer, build_container
from pantry_pal.domain.auth import AuthErrorCode, AuthResult
from pantry_pal.domain.errors import (
    AuthenticationError,
    DecodeError,
    NetworkError,
    NotFoundError,
    PantryPalError,
    ValidationError,
)
from pantry_pal.domain.health import body_mass_index, bmi_band, calorie_goals
from pantry_pal.domain.models import FoodCategory, ShoppingItem
from pantry_pal.services.pantry import filter_items

_ERROR_STATUS: tuple[tuple[type[PantryPalError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (NetworkError, status.HTTP_502_BAD_GATEWAY),
    (DecodeError, status.HTTP_502_BAD_GATEWAY),
)


def create_app(  # noqa: PLR0915
    container: AppContainer | None = None, settings: Settings | None = None
) -> FastAPI:
    """Create a FastAPI app configured with dependencies.

    Without a container, one is built from settings when the app starts.
    """
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.container is None:
            app.state.container = await build_container(settings)
        await app.state.container.hub.restore_session()
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(recipes_router)

    @app.exception_handler(PantryPalError)
    async def handle_pantry_pal_error(
        request: Request, exc: PantryPalError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning("Request failed: path=%s error=%r", request.url.path, exc)
        return JSONResponse(
            status_code=status_code, content={"detail": exc.user_message}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/auth/sign-up")
    async def sign_up(payload: SignUpRequest, request: Request) -> JSONResponse:
        """Create an account and sign it in."""
        container: AppContainer = request.app.state.container
        result = await container.account_service.sign_up(
            payload.email, payload.password, payload.confirm_password
        )
        return _auth_response(result)

    @app.post("/auth/sign-in")
    async def sign_in(payload: SignInRequest, request: Request) -> JSONResponse:
        container: AppContainer = request.app.state.container
        result = await container.account_service.sign_in(
            payload.email, payload.password
        )
        return _auth_response(result)

    @app.post("/auth/sign-out")
    async def sign_out(request: Request) -> dict[str, str]:
        container: AppContainer = request.app.state.container
        await container.account_service.sign_out()
        return {"status": "ok"}

    @app.get("/auth/me")
    async def me(request: Request) -> dict[str, object]:
        """Return the signed-in user, or null."""
        container: AppContainer = request.app.state.container
        return {"user": container.hub.current_user}

    @app.get("/pantry")
    async def list_pantry(
        request: Request,
        query: str | None = None,
        category: FoodCategory | None = None,
    ) -> dict[str, object]:
        """List pantry items, optionally filtered by name and category."""
        container: AppContainer = request.app.state.container
        _require_user(container)
        items = filter_items(container.hub.pantry_items, query, category)
        return {"items": items}

    @app.post("/pantry")
    async def add_pantry_item(
        payload: PantryItemCreate, request: Request
    ) -> dict[str, object]:
        """Add a pantry item; a known barcode increases its quantity instead."""
        container: AppContainer = request.app.state.container
        _require_user(container)
        item = await container.hub.add_pantry_item(
            name=payload.name,
            quantity=payload.quantity,
            calories=payload.calories,
            expiry=payload.expiry,
            category=payload.category,
            barcode=payload.barcode,
        )
        return {"item": item}

    @app.delete("/pantry/{item_id}")
    async def delete_pantry_item(item_id: str, request: Request) -> dict[str, str]:
        container: AppContainer = request.app.state.container
        _require_user(container)
        item = container.hub.get_pantry_item(item_id)
        if item is None:
            raise NotFoundError("Pantry item not found.")
        await container.hub.delete_pantry_item(item)
        return {"status": "ok"}

    @app.post("/pantry/{item_id}/to-shopping")
    async def move_to_shopping(item_id: str, request: Request) -> dict[str, object]:
        """Put a pantry item on the shopping list."""
        container: AppContainer = request.app.state.container
        _require_user(container)
        item = container.hub.get_pantry_item(item_id)
        if item is None:
            raise NotFoundError("Pantry item not found.")
        shopping_item = await container.pantry_service.move_to_shopping(item)
        return {"item": shopping_item}

    @app.get("/shopping")
    async def list_shopping(request: Request) -> dict[str, object]:
        container: AppContainer = request.app.state.container
        _require_user(container)
        return {"items": container.hub.shopping_items}

    @app.post("/shopping")
    async def add_shopping_item(
        payload: ShoppingItemCreate, request: Request
    ) -> dict[str, object]:
        container: AppContainer = request.app.state.container
        _require_user(container)
        item = await container.hub.add_shopping_item(
            ShoppingItem(
                name=payload.name,
                quantity=payload.quantity,
                category=payload.category,
                calories=payload.calories,
            )
        )
        return {"item": item}

    @app.delete("/shopping/{item_id}")
    async def delete_shopping_item(item_id: str, request: Request) -> dict[str, str]:
        container: AppContainer = request.app.state.container
        _require_user(container)
        item = container.hub.get_shopping_item(item_id)
        if item is None:
            raise NotFoundError("Shopping item not found.")
        await container.hub.delete_shopping_item(item)
        return {"status": "ok"}

    @app.post("/shopping/{item_id}/purchase")
    async def purchase_shopping_item(
        item_id: str, payload: PurchaseRequest, request: Request
    ) -> dict[str, object]:
        """Move a bought item into the pantry."""
        container: AppContainer = request.app.state.container
        _require_user(container)
        item = container.hub.get_shopping_item(item_id)
        if item is None:
            raise NotFoundError("Shopping item not found.")
        pantry_item = await container.pantry_service.purchase(
            item, payload.quantity, payload.category
        )
        return {"item": pantry_item}

    @app.get("/products/{barcode}")
    async def lookup_product(barcode: str, request: Request) -> dict[str, object]:
        """Look up a scanned barcode."""
        container: AppContainer = request.app.state.container
        product = await container.product_service.lookup(barcode)
        return {"product": product}

    @app.post("/products/{barcode}/pantry")
    async def add_product_to_pantry(
        barcode: str, request: Request
    ) -> dict[str, object]:
        """Look up a barcode and add one unit of the product to the pantry."""
        container: AppContainer = request.app.state.container
        _require_user(container)
        product = await container.product_service.lookup(barcode)
        item = await container.product_service.add_to_pantry(product)
        return {"product": product, "item": item}

    @app.get("/dashboard/health")
    async def dashboard_health(
        request: Request,
        weight_kg: float = Query(gt=0),
        height_cm: float = Query(gt=0),
    ) -> dict[str, object]:
        """Return BMI, calorie goals and pantry counts for the dashboard."""
        container: AppContainer = request.app.state.container
        bmi = body_mass_index(weight_kg, height_cm)
        return {
            "bmi": round(bmi, 1),
            "bmi_band": bmi_band(bmi),
            "calorie_goals": calorie_goals(weight_kg, height_cm),
            "pantry_count": len(container.hub.pantry_items),
            "shopping_count": len(container.hub.shopping_items),
        }

    @app.get("/events")
    async def events(request: Request, since: int | None = None) -> dict[str, object]:
        """Return hub snapshots recorded after the ``since`` cursor."""
        container: AppContainer = request.app.state.container
        return container.snapshot_feed.get_events(since)

    return app


def _status_for(exc: PantryPalError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _require_user(container: AppContainer) -> str:
    user_id = container.hub.get_current_user_id()
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Please sign in first."
        )
    return user_id


def _auth_response(result: AuthResult) -> JSONResponse:
    if result.ok:
        return JSONResponse(
            content={"user": {"id": result.user.id, "email": result.user.email}}
        )
    status_code = (
        status.HTTP_400_BAD_REQUEST
        if result.error_code is AuthErrorCode.VALIDATION
        else status.HTTP_401_UNAUTHORIZED
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": result.user_message(), "code": str(result.error_code)},
    )
