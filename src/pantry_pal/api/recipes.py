"""Recipe suggestion and liked recipe endpoints."""

from __future__ import annotations

import mimetypes
from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import Response

from pantry_pal.api.models import LikedRecipeCreate
from pantry_pal.domain.errors import NotFoundError
from pantry_pal.domain.recipes import Recipe  # noqa: TC001
from pantry_pal.services.recipes import search_recipes

if TYPE_CHECKING:
    from pantry_pal.containers import AppContainer

router = APIRouter(tags=["recipes"])


@router.get("/recipes/suggestions")
async def recipe_suggestions(
    request: Request, query: str | None = None
) -> dict[str, object]:
    """Suggest recipes from the pantry, optionally filtered by title."""
    container: AppContainer = request.app.state.container
    recipes = await container.recipe_service.suggest(container.hub.pantry_items)
    return {"recipes": search_recipes(recipes, query)}


@router.get("/recipes/image", response_class=Response)
async def recipe_image(url: str, request: Request) -> Response:
    """Proxy a recipe image so clients can render it."""
    container: AppContainer = request.app.state.container
    content = await container.recipe_service.download_image(url)
    if content is None:
        raise NotFoundError("Recipe image not available.")
    media_type = mimetypes.guess_type(url)[0] or "application/octet-stream"
    return Response(content=content, media_type=media_type)


@router.get("/recipes/{recipe_id}")
async def recipe_detail(recipe_id: int, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    recipe = await container.recipe_service.get_details(recipe_id)
    return {"recipe": recipe}


@router.post("/recipes/missing-to-shopping")
async def missing_to_shopping(recipe: Recipe, request: Request) -> dict[str, int]:
    """Add a recipe's missing ingredients to the shopping list."""
    container: AppContainer = request.app.state.container
    if container.hub.get_current_user_id() is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Please sign in first."
        )
    added = await container.recipe_service.add_missing_to_shopping(recipe)
    return {"added": added}


@router.get("/liked-recipes")
async def list_liked_recipes(
    request: Request, query: str | None = None
) -> dict[str, object]:
    """Return liked recipes, newest first."""
    container: AppContainer = request.app.state.container
    recipes = container.hub.liked_recipes()
    needle = (query or "").strip().lower()
    if needle:
        recipes = [r for r in recipes if needle in (r.title or "").lower()]
    return {"recipes": recipes}


@router.post("/liked-recipes")
async def like_recipe(
    payload: LikedRecipeCreate, request: Request
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    liked = container.hub.add_liked_recipe(
        payload.recipe_id, payload.title, payload.image
    )
    return {"recipe": liked}


@router.delete("/liked-recipes/{liked_id}")
async def unlike_recipe(liked_id: int, request: Request) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    for liked in container.hub.liked_recipes():
        if liked.id == liked_id:
            container.hub.remove_liked_recipe(liked)
            return {"status": "ok"}
    raise NotFoundError("Liked recipe not found.")
