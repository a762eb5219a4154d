from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from recipe_genie.app.domain.models import DEFAULT_IMAGE_URL


class GenerateRecipesRequest(BaseModel):
    # emptiness is checked by the generator so the 400 carries its message
    ingredients: Optional[list[str]] = None
    servings: Optional[int] = Field(default=None, gt=0)
    cuisine: Optional[str] = None
    dietaryPreferences: Optional[str] = None


class RecipeOut(BaseModel):
    """
    Read shape of a stored recipe. Every field is optional so one old or
    partial document does not fail a whole listing; writes go through
    RecipeDocument instead.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    ingredients: list[Any] = Field(default_factory=list)
    instructions: list[Any] = Field(default_factory=list)
    imageUrl: Optional[str] = DEFAULT_IMAGE_URL
    servings: Optional[Any] = None
    prepTime: Optional[Any] = None
    cookTime: Optional[Any] = None
    totalTime: Optional[Any] = None
    cuisine: Optional[str] = None
    difficulty: Optional[str] = None
    nutritionalInfo: Optional[dict[str, Any]] = None
    dietaryInfo: Optional[dict[str, Any]] = None
    ratings: list[dict[str, Any]] = Field(default_factory=list)
    averageRating: float = 0
    creator: Optional[str] = None
    createdAt: Optional[datetime] = None


class RecipeListResponse(BaseModel):
    success: bool = True
    recipes: list[RecipeOut]


class RecipeResponse(BaseModel):
    success: bool = True
    recipe: RecipeOut


class RateRecipeRequest(BaseModel):
    value: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
