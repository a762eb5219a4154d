from __future__ import annotations

import json

import mongomock
import pytest
from fastapi.testclient import TestClient

from recipe_genie.app.config import Settings
from recipe_genie.app.infra.db.mongo_repo import MongoRecipeRepository, MongoUserRepository
from recipe_genie.app.main import create_app

TEST_SECRET = "test-secret"


def sample_recipe(**overrides) -> dict:
    recipe = {
        "title": "Basil Tomato Pasta",
        "description": "Quick weeknight pasta",
        "ingredients": ["200g spaghetti", "2 Roma Tomatoes", "Fresh Basil Leaves"],
        "instructions": ["Boil pasta", "Make sauce", "Combine"],
        "prepTime": 10,
        "cookTime": 15,
        "totalTime": 25,
        "servings": 2,
        "cuisine": "Italian",
        "difficulty": "Easy",
        "nutritionalInfo": {"calories": 450, "protein": 14, "carbs": 70, "fats": 12, "fiber": 5},
        "dietaryInfo": {"vegetarian": True, "vegan": False, "glutenFree": False, "dairyFree": True},
    }
    recipe.update(overrides)
    return recipe


class TextModelStub:
    def __init__(self, text: str = "") -> None:
        self.text = text
        self.error: Exception | None = None
        self.prompts: list[str] = []

    def generate_content(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def recipe_factory():
    return sample_recipe


@pytest.fixture
def text_model() -> TextModelStub:
    return TextModelStub(json.dumps([sample_recipe(title=f"Recipe {i}") for i in range(5)]))


@pytest.fixture
def mongo_db():
    return mongomock.MongoClient(tz_aware=True)["recipe-genie-test"]


@pytest.fixture
def recipe_repo(mongo_db) -> MongoRecipeRepository:
    return MongoRecipeRepository(mongo_db)


@pytest.fixture
def user_repo(mongo_db) -> MongoUserRepository:
    repo = MongoUserRepository(mongo_db)
    repo.ensure_indexes()
    return repo


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, JWT_SECRET=TEST_SECRET, GEMINI_API_KEY="")


@pytest.fixture
def client(settings, recipe_repo, user_repo, text_model) -> TestClient:
    app = create_app(settings, recipes=recipe_repo, users=user_repo, text_model=text_model)
    return TestClient(app, raise_server_exceptions=False)
