# recipe_genie/app/routers/recipes.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from recipe_genie.app.deps import (
    get_current_user,
    get_optional_user,
    get_recipe_repository,
    get_text_model,
)
from recipe_genie.app.domain.errors import NotFoundError
from recipe_genie.app.domain.models import GenerationOptions, Rating, User
from recipe_genie.app.infra.db.base import RecipeRepository
from recipe_genie.app.schemas.recipes import (
    GenerateRecipesRequest,
    RateRecipeRequest,
    RecipeListResponse,
    RecipeResponse,
)
from recipe_genie.app.services.generation import RecipeGenerator, validate_options

log = logging.getLogger("recipes")
router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.post("/generate", response_model=RecipeListResponse)
async def generate_recipes(
    body: GenerateRecipesRequest,
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
    recipes: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeListResponse:
    options = GenerationOptions(
        ingredients=body.ingredients or [],
        servings=body.servings,
        cuisine=body.cuisine,
        dietary_preferences=body.dietaryPreferences,
        creator_id=user.id if user else None,
    )
    # before the model client is touched
    validate_options(options)

    generator = RecipeGenerator(
        model=get_text_model(request),
        recipes=recipes,
        images=request.app.state.images,
    )
    stored = await generator.generate(options)
    return RecipeListResponse(recipes=stored)


@router.get("", response_model=RecipeListResponse)
async def list_recipes(
    recipes: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeListResponse:
    items = await run_in_threadpool(recipes.list_recent)
    return RecipeListResponse(recipes=items)


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(
    recipe_id: str,
    recipes: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeResponse:
    record = await run_in_threadpool(recipes.get_by_id, recipe_id)
    if record is None:
        raise NotFoundError("Recipe", recipe_id)
    return RecipeResponse(recipe=record)


@router.post("/{recipe_id}/ratings", response_model=RecipeResponse)
async def rate_recipe(
    recipe_id: str,
    body: RateRecipeRequest,
    user: User = Depends(get_current_user),
    recipes: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeResponse:
    rating = Rating(user=user.id, value=body.value, comment=body.comment)
    record = await run_in_threadpool(recipes.add_rating, recipe_id, rating)
    if record is None:
        raise NotFoundError("Recipe", recipe_id)
    log.info("recipes.rated recipe=%s user=%s value=%d", recipe_id, user.id, body.value)
    return RecipeResponse(recipe=record)
