# recipe_genie/app/domain/models.py
"""
Domain models for generated recipes and users.
Persistence validation lives here so the repositories and the tests share one
definition of a valid recipe document.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from recipe_genie.app.domain.errors import StorageValidationError

DEFAULT_IMAGE_URL = "https://picsum.photos/600/400"

NUTRIENT_FIELDS = ("calories", "protein", "carbs", "fats", "fiber")
DIETARY_FLAGS = ("vegetarian", "vegan", "glutenFree", "dairyFree")

# Same wording the web client already shows
REQUIRED_FIELD_MESSAGES = {
    "title": "Please add a title",
    "description": "Please add a description",
    "ingredients": "Please add ingredients",
    "instructions": "Please add instructions",
    "servings": "Please add number of servings",
    "prepTime": "Please add preparation time",
    "cookTime": "Please add cooking time",
    "totalTime": "Please add total time",
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def values(cls) -> set[str]:
        return {member.value for member in cls}


class NutritionalInfo(BaseModel):
    calories: float = Field(default=0, ge=0)
    protein: float = Field(default=0, ge=0)
    carbs: float = Field(default=0, ge=0)
    fats: float = Field(default=0, ge=0)
    fiber: float = Field(default=0, ge=0)


class DietaryInfo(BaseModel):
    vegetarian: bool = False
    vegan: bool = False
    glutenFree: bool = False
    dairyFree: bool = False


class Rating(BaseModel):
    user: Optional[str] = None
    value: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    date: datetime = Field(default_factory=utcnow)


class RecipeDocument(BaseModel):
    """Shape of a document in the ``recipes`` collection (without ``_id``)."""

    title: str = Field(..., min_length=1)
    description: str
    ingredients: list[str] = Field(..., min_length=1)
    instructions: list[str]
    imageUrl: str = DEFAULT_IMAGE_URL
    servings: int = Field(..., gt=0)
    prepTime: int = Field(..., ge=0)
    cookTime: int = Field(..., ge=0)
    totalTime: int = Field(..., ge=0)
    cuisine: str = "Mixed"
    difficulty: Difficulty = Difficulty.MEDIUM
    nutritionalInfo: NutritionalInfo = Field(default_factory=NutritionalInfo)
    dietaryInfo: DietaryInfo = Field(default_factory=DietaryInfo)
    ratings: list[Rating] = Field(default_factory=list)
    averageRating: float = 0
    creator: Optional[str] = None
    createdAt: datetime = Field(default_factory=utcnow)

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    def to_mongo(self) -> dict[str, Any]:
        doc = self.model_dump(mode="python")
        doc["difficulty"] = self.difficulty.value
        doc["averageRating"] = average_rating(self.ratings)
        return doc


def average_rating(ratings: list[Rating]) -> float:
    if not ratings:
        return 0
    return sum(r.value for r in ratings) / len(ratings)


def _format_error(error: dict[str, Any]) -> str:
    loc = [str(part) for part in error.get("loc", ())]
    top = loc[0] if loc else ""
    # empty strings and empty lists count as missing, like None
    empty = error.get("input") is None or error.get("type") in ("string_too_short", "too_short")
    if top in REQUIRED_FIELD_MESSAGES and len(loc) == 1 and (error.get("type") == "missing" or empty):
        return REQUIRED_FIELD_MESSAGES[top]
    path = ".".join(loc)
    return f"{path}: {error.get('msg')}"


def validate_recipe_document(data: dict[str, Any]) -> RecipeDocument:
    """
    Validate a normalized recipe before it is written.

    Raises:
        StorageValidationError: with one message per offending field
    """
    payload = {k: v for k, v in data.items() if k not in ("_id", "id")}
    try:
        return RecipeDocument.model_validate(payload)
    except ValidationError as exc:
        raise StorageValidationError([_format_error(e) for e in exc.errors()]) from exc


@dataclass
class GenerationOptions:
    """What the client asked for when requesting a batch of recipes."""
    ingredients: list[str]
    servings: Optional[int] = None
    cuisine: Optional[str] = None
    dietary_preferences: Optional[str] = None
    creator_id: Optional[str] = None


@dataclass
class User:
    id: str
    name: str
    email: str
    password_hash: str = field(repr=False, default="")
    created_at: Optional[datetime] = None
