# flake8: noqa
import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from recipe_store.config import Settings
from recipe_store.errors import StoreUnavailable
from recipe_store.forms import parse_new_recipe_form
from recipe_store.lifespan import create_lifespan, get_store
from recipe_store.store import RecipeStore


def _app(settings):
    app = FastAPI(lifespan=create_lifespan(settings, create_tables=True))

    @app.post("/recipes")
    async def create(request: Request, store: RecipeStore = Depends(get_store)):
        form = await request.form()
        rid = store.insert_recipe(parse_new_recipe_form(form))
        return {"id": rid}

    @app.get("/recipes/{recipe_id}")
    def show(recipe_id: int, store: RecipeStore = Depends(get_store)):
        recipe = store.fetch_recipe(recipe_id)
        return recipe.model_dump() if recipe else {"missing": True}

    return app


def test_store_is_shared_for_app_lifetime(tmp_path):
    app = _app(Settings(database_url=f"sqlite:///{tmp_path / 'recipes.db'}"))
    with TestClient(app) as client:
        res = client.post("/recipes", data={
            "title": "FormRecipe",
            "category": "1",
            "difficulty": "1",
            "preparation-time": "10",
            "ingredients": "a|b",
            "steps": "1|2",
        })
        assert res.status_code == 200
        rid = res.json()["id"]

        data = client.get(f"/recipes/{rid}").json()
        assert data["title"] == "FormRecipe"
        assert data["ingredients"] == ["a", "b"]
        assert data["author"]["id"] == 2

        assert client.get("/recipes/999").json() == {"missing": True}


def test_startup_aborts_without_store(tmp_path):
    url = f"sqlite:///{tmp_path / 'missing' / 'recipes.db'}"
    app = _app(Settings(database_url=url))
    with pytest.raises(StoreUnavailable):
        with TestClient(app):
            pass
