from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from .config import Settings
from .db import init_db
from .store import RecipeStore


def create_lifespan(settings: Optional[Settings] = None, create_tables: bool = False):
    """Lifespan that opens the store at startup and disposes it at shutdown.

    Startup fails with StoreUnavailable when the store cannot be reached.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = RecipeStore.from_settings(settings)
        if create_tables:
            init_db(store.engine)
        app.state.recipe_store = store
        try:
            yield
        finally:
            store.close()

    return lifespan


def get_store(request: Request) -> RecipeStore:
    return request.app.state.recipe_store
