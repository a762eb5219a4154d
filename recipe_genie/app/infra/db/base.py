# recipe_genie/app/infra/db/base.py
"""
Abstract repositories for recipes and users.
Route handlers and services depend on these, never on the driver.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from recipe_genie.app.domain.models import Rating, User


class RecipeRepository(ABC):
    """
    Storage for recipe documents.

    Implementations:
    - MongoRecipeRepository: pymongo collection ``recipes``
    """

    @abstractmethod
    def insert_many(self, recipes: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Validate and bulk-insert normalized recipes.

        Any ``_id``/``id`` already present is discarded; storage assigns ids.

        Returns:
            The stored documents, in input order, each with its new ``id``

        Raises:
            StorageValidationError: a document failed schema validation
                (nothing is written in that case)
            StorageError: the driver reported a failure
        """

    @abstractmethod
    def list_recent(self) -> list[dict[str, Any]]:
        """All recipes, ``createdAt`` descending."""

    @abstractmethod
    def get_by_id(self, recipe_id: str) -> Optional[dict[str, Any]]:
        """One recipe, or None when the id is unknown or malformed."""

    @abstractmethod
    def add_rating(self, recipe_id: str, rating: Rating) -> Optional[dict[str, Any]]:
        """
        Append a rating and recompute ``averageRating`` before saving.

        Returns:
            The updated recipe, or None when the id is unknown
        """


class UserRepository(ABC):
    @abstractmethod
    def create(self, name: str, email: str, password_hash: str) -> User:
        """
        Raises:
            InputValidationError: email already registered
        """

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]:
        pass
