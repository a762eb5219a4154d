from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import AutoReconnect

from recipe_genie.app.domain.errors import InputValidationError, StorageError, StorageValidationError
from recipe_genie.app.domain.models import Rating
from recipe_genie.app.infra.db.mongo_repo import MongoRecipeRepository


class SlowCollection:
    """Delays every round trip so two callers overlap."""

    def __init__(self, collection, delay: float) -> None:
        self._collection = collection
        self._delay = delay

    def __getattr__(self, name):
        attr = getattr(self._collection, name)
        if not callable(attr):
            return attr

        def slow(*args, **kwargs):
            time.sleep(self._delay)
            result = attr(*args, **kwargs)
            time.sleep(self._delay)
            return result

        return slow


class TestMongoRecipeRepository:
    def test_insert_many_assigns_store_ids(self, recipe_repo, recipe_factory) -> None:
        stored = recipe_repo.insert_many(
            [recipe_factory(title="A", _id="generated-1"), recipe_factory(title="B")]
        )

        assert [r["title"] for r in stored] == ["A", "B"]
        for record in stored:
            assert ObjectId.is_valid(record["id"])
            assert "_id" not in record
        assert recipe_repo.get_by_id(stored[0]["id"])["title"] == "A"

    def test_insert_many_is_all_or_nothing_on_validation(self, recipe_repo, recipe_factory) -> None:
        with pytest.raises(StorageValidationError):
            recipe_repo.insert_many([recipe_factory(), recipe_factory(description=None)])
        assert recipe_repo.list_recent() == []

    def test_insert_many_empty(self, recipe_repo) -> None:
        assert recipe_repo.insert_many([]) == []

    def test_list_recent_newest_first(self, recipe_repo, recipe_factory) -> None:
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        recipe_repo.insert_many(
            [
                recipe_factory(title="old", createdAt=base),
                recipe_factory(title="new", createdAt=base + timedelta(days=2)),
                recipe_factory(title="mid", createdAt=base + timedelta(days=1)),
            ]
        )

        items = recipe_repo.list_recent()

        assert [r["title"] for r in items] == ["new", "mid", "old"]
        created = [r["createdAt"] for r in items]
        assert all(a >= b for a, b in zip(created, created[1:]))

    def test_get_by_id_unknown_or_malformed(self, recipe_repo) -> None:
        assert recipe_repo.get_by_id(str(ObjectId())) is None
        assert recipe_repo.get_by_id("not-an-object-id") is None

    def test_add_rating_recomputes_average(self, recipe_repo, recipe_factory) -> None:
        recipe_id = recipe_repo.insert_many([recipe_factory()])[0]["id"]

        recipe_repo.add_rating(recipe_id, Rating(user="u1", value=5))
        updated = recipe_repo.add_rating(recipe_id, Rating(user="u2", value=2, comment="meh"))

        assert updated["averageRating"] == 3.5
        assert [r["value"] for r in updated["ratings"]] == [5, 2]
        assert recipe_repo.get_by_id(recipe_id)["averageRating"] == 3.5

    def test_concurrent_ratings_are_all_kept(self, recipe_repo, recipe_factory) -> None:
        recipe_id = recipe_repo.insert_many([recipe_factory()])[0]["id"]
        recipe_repo._col = SlowCollection(recipe_repo._col, delay=0.1)

        with ThreadPoolExecutor(max_workers=2) as pool:
            list(pool.map(lambda v: recipe_repo.add_rating(recipe_id, Rating(value=v)), [5, 2]))

        stored = recipe_repo.get_by_id(recipe_id)
        assert sorted(r["value"] for r in stored["ratings"]) == [2, 5]
        assert stored["averageRating"] == 3.5

    def test_add_rating_unknown_recipe(self, recipe_repo) -> None:
        assert recipe_repo.add_rating(str(ObjectId()), Rating(value=4)) is None

    def test_driver_failure_becomes_storage_error(self, recipe_factory) -> None:
        db = MagicMock()
        db.__getitem__.return_value.insert_many.side_effect = AutoReconnect("down")
        db.__getitem__.return_value.find.side_effect = AutoReconnect("down")
        repo = MongoRecipeRepository(db)

        with pytest.raises(StorageError):
            repo.insert_many([recipe_factory()])
        with pytest.raises(StorageError):
            repo.list_recent()


class TestMongoUserRepository:
    def test_create_and_lookup(self, user_repo) -> None:
        user = user_repo.create("Ana", "Ana@Example.com ", "hash")

        assert user.email == "ana@example.com"
        assert user_repo.get_by_email("ANA@example.com").id == user.id
        assert user_repo.get_by_id(user.id).name == "Ana"

    def test_duplicate_email(self, user_repo) -> None:
        user_repo.create("Ana", "ana@example.com", "hash")
        with pytest.raises(InputValidationError):
            user_repo.create("Other", "ana@example.com", "hash")

    def test_unknown_user(self, user_repo) -> None:
        assert user_repo.get_by_email("nobody@example.com") is None
        assert user_repo.get_by_id("bogus") is None
