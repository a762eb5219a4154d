# recipe_genie/app/main.py
from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from recipe_genie import __version__
from recipe_genie.app.config import Settings, get_settings
from recipe_genie.app.handlers import register_exception_handlers
from recipe_genie.app.infra.db.base import RecipeRepository, UserRepository
from recipe_genie.app.infra.db.mongo_repo import (
    MongoRecipeRepository,
    MongoUserRepository,
    create_mongo_client,
    get_database,
)
from recipe_genie.app.routers.auth import router as auth_router
from recipe_genie.app.routers.recipes import router as recipes_router
from recipe_genie.services.images import ImageResolver

log = logging.getLogger("app")


def configure_logging(level: str = "INFO") -> None:
    # plain stdout logging, fine for dev and containers
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def create_app(
    settings: Optional[Settings] = None,
    recipes: Optional[RecipeRepository] = None,
    users: Optional[UserRepository] = None,
    text_model=None,
    images: Optional[ImageResolver] = None,
) -> FastAPI:
    """
    Build the API. Anything not passed in is built from settings: the Mongo
    repositories now, the Gemini client on the first generate request.
    """
    settings = settings or get_settings()
    mongo_client = None
    if recipes is None or users is None:
        mongo_client = create_mongo_client(settings.MONGODB_URI)
        db = get_database(mongo_client, settings.MONGODB_DB)
        recipes = recipes or MongoRecipeRepository(db)
        users = users or MongoUserRepository(db)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        for repo in (app.state.recipes, app.state.users):
            ensure = getattr(repo, "ensure_indexes", None)
            if ensure is not None:
                ensure()
        log.info("app.startup db=%s", "mongo" if mongo_client is not None else "injected")
        yield
        if mongo_client is not None:
            mongo_client.close()

    app = FastAPI(title="Recipe Genie API", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.recipes = recipes
    app.state.users = users
    app.state.text_model = text_model
    app.state.images = images or ImageResolver()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.FRONTEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(recipes_router)

    @app.get("/", response_class=PlainTextResponse)
    def health() -> str:
        return "Recipe Genie API is running"

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
