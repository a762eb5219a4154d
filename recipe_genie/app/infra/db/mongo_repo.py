# recipe_genie/app/infra/db/mongo_repo.py
"""
MongoDB implementation of the repositories, using pymongo.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConfigurationError, DuplicateKeyError, PyMongoError

from recipe_genie.app.domain.errors import InputValidationError, StorageError
from recipe_genie.app.domain.models import (
    Rating,
    User,
    average_rating,
    utcnow,
    validate_recipe_document,
)
from recipe_genie.app.infra.db.base import RecipeRepository, UserRepository

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "recipe-genie"


def create_mongo_client(uri: str) -> MongoClient:
    # tz_aware so createdAt comes back comparable with utcnow()
    return MongoClient(uri, tz_aware=True)


def get_database(client: MongoClient, db_name: Optional[str] = None) -> Database:
    if db_name:
        return client[db_name]
    try:
        return client.get_default_database()
    except ConfigurationError:
        # URI carries no database name
        return client[DEFAULT_DB_NAME]


def _to_object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def serialize_recipe(doc: dict[str, Any]) -> dict[str, Any]:
    """Mongo document -> JSON-ready dict with ``id`` instead of ``_id``."""
    out = {k: v for k, v in doc.items() if k != "_id"}
    out["id"] = str(doc["_id"])
    if isinstance(out.get("creator"), ObjectId):
        out["creator"] = str(out["creator"])
    return out


class MongoRecipeRepository(RecipeRepository):
    def __init__(self, db: Database, collection_name: str = "recipes"):
        self._col: Collection = db[collection_name]

    def ensure_indexes(self) -> None:
        try:
            self._col.create_index([("createdAt", DESCENDING)])
        except PyMongoError as exc:
            logger.warning("recipes.index_fail error=%s", exc)

    def insert_many(self, recipes: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if not recipes:
            return []
        # validate everything first so a bad record writes nothing
        documents = [validate_recipe_document(r).to_mongo() for r in recipes]
        try:
            result = self._col.insert_many(documents, ordered=True)
        except PyMongoError as exc:
            logger.error("recipes.insert_fail count=%d error=%s", len(documents), exc)
            raise StorageError("insert_many", str(exc)) from exc

        stored = []
        for doc, new_id in zip(documents, result.inserted_ids):
            doc["_id"] = new_id
            stored.append(serialize_recipe(doc))
        return stored

    def list_recent(self) -> list[dict[str, Any]]:
        try:
            cursor = self._col.find().sort("createdAt", DESCENDING)
            return [serialize_recipe(doc) for doc in cursor]
        except PyMongoError as exc:
            raise StorageError("list_recent", str(exc)) from exc

    def get_by_id(self, recipe_id: str) -> Optional[dict[str, Any]]:
        oid = _to_object_id(recipe_id)
        if oid is None:
            return None
        try:
            doc = self._col.find_one({"_id": oid})
        except PyMongoError as exc:
            raise StorageError("get_by_id", str(exc)) from exc
        return serialize_recipe(doc) if doc else None

    def add_rating(self, recipe_id: str, rating: Rating) -> Optional[dict[str, Any]]:
        oid = _to_object_id(recipe_id)
        if oid is None:
            return None
        try:
            # $push is atomic, concurrent raters never overwrite each other
            doc = self._col.find_one_and_update(
                {"_id": oid},
                {"$push": {"ratings": rating.model_dump()}},
                return_document=ReturnDocument.AFTER,
            )
            if doc is None:
                return None
            ratings = [Rating.model_validate(r) for r in doc.get("ratings") or []]
            average = average_rating(ratings)
            # only applies while no newer rating has landed; that writer sets its own average
            self._col.update_one(
                {"_id": oid, "ratings": {"$size": len(ratings)}},
                {"$set": {"averageRating": average}},
            )
        except PyMongoError as exc:
            raise StorageError("add_rating", str(exc)) from exc
        doc["averageRating"] = average
        return serialize_recipe(doc)


def _user_from_doc(doc: dict[str, Any]) -> User:
    return User(
        id=str(doc["_id"]),
        name=doc.get("name", ""),
        email=doc["email"],
        password_hash=doc.get("password", ""),
        created_at=doc.get("createdAt"),
    )


class MongoUserRepository(UserRepository):
    def __init__(self, db: Database, collection_name: str = "users"):
        self._col: Collection = db[collection_name]

    def ensure_indexes(self) -> None:
        try:
            self._col.create_index([("email", ASCENDING)], unique=True)
        except PyMongoError as exc:
            logger.warning("users.index_fail error=%s", exc)

    def create(self, name: str, email: str, password_hash: str) -> User:
        email = email.strip().lower()
        doc = {"name": name, "email": email, "password": password_hash, "createdAt": utcnow()}
        try:
            if self._col.find_one({"email": email}) is not None:
                raise InputValidationError("User already exists")
            result = self._col.insert_one(doc)
        except DuplicateKeyError as exc:
            raise InputValidationError("User already exists") from exc
        except PyMongoError as exc:
            raise StorageError("create_user", str(exc)) from exc
        doc["_id"] = result.inserted_id
        return _user_from_doc(doc)

    def get_by_email(self, email: str) -> Optional[User]:
        try:
            doc = self._col.find_one({"email": email.strip().lower()})
        except PyMongoError as exc:
            raise StorageError("get_user_by_email", str(exc)) from exc
        return _user_from_doc(doc) if doc else None

    def get_by_id(self, user_id: str) -> Optional[User]:
        oid = _to_object_id(user_id)
        if oid is None:
            return None
        try:
            doc = self._col.find_one({"_id": oid})
        except PyMongoError as exc:
            raise StorageError("get_user_by_id", str(exc)) from exc
        return _user_from_doc(doc) if doc else None
