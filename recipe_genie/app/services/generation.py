# recipe_genie/app/services/generation.py
"""
Recipe generation pipeline.

prompt -> model call -> JSON extraction -> normalization -> image URLs ->
bulk insert. Any failure aborts the whole batch.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Protocol

from starlette.concurrency import run_in_threadpool

from recipe_genie.app.domain.errors import InputValidationError
from recipe_genie.app.domain.models import GenerationOptions
from recipe_genie.app.infra.db.base import RecipeRepository
from recipe_genie.services.images import ImageResolver
from recipe_genie.services.normalize import extract_recipes_json, normalize_recipes
from recipe_genie.services.prompt import build_recipe_prompt

logger = logging.getLogger(__name__)


class TextModel(Protocol):
    def generate_content(self, prompt: str) -> str: ...


def validate_options(options: GenerationOptions) -> None:
    ingredients = options.ingredients
    if not isinstance(ingredients, list) or not ingredients:
        raise InputValidationError("Please provide at least one ingredient")
    if not all(isinstance(item, str) and item.strip() for item in ingredients):
        raise InputValidationError("Ingredients must be non-empty strings")


class RecipeGenerator:
    def __init__(
        self,
        model: TextModel,
        recipes: RecipeRepository,
        images: ImageResolver | None = None,
    ):
        self._model = model
        self._recipes = recipes
        self._images = images or ImageResolver()

    async def _attach_images(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        # gather keeps input order regardless of completion order
        urls = await asyncio.gather(
            *(self._images.resolve(r.get("title"), r.get("ingredients")) for r in records)
        )
        for record, url in zip(records, urls):
            record["imageUrl"] = url
        return records

    async def generate(self, options: GenerationOptions) -> list[dict[str, Any]]:
        """
        Run the full pipeline and return the persisted recipes.

        Raises:
            InputValidationError: empty ingredient list (nothing is called)
            UpstreamError: model call failed
            ResponseParseError: model output is not a JSON array
            StorageValidationError / StorageError: bulk insert failed
        """
        validate_options(options)
        t0 = time.time()
        logger.info("generate.start ingredients=%d", len(options.ingredients))

        prompt = build_recipe_prompt(
            options.ingredients,
            servings=options.servings,
            cuisine=options.cuisine,
            dietary_preferences=options.dietary_preferences,
        )
        text = await run_in_threadpool(self._model.generate_content, prompt)

        records = normalize_recipes(extract_recipes_json(text), options)
        records = await self._attach_images(records)

        stored = await run_in_threadpool(self._recipes.insert_many, records)
        logger.info("generate.ok count=%d dt=%.2fs", len(stored), time.time() - t0)
        return stored
