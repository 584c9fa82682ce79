# flake8: noqa
from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from recipe_store import models
from recipe_store.db import init_db
from recipe_store.store import RecipeStore


@pytest.fixture
def engine():
    # StaticPool keeps one in-memory database for the whole test
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    store = RecipeStore(engine, timeout=5.0)
    with store.session() as s:
        s.add_all([
            models.Author(id=1, name="Ana"),
            models.Author(id=2, name="Edu"),
            models.Category(id=1, name="Dessert"),
            models.Category(id=2, name="Soup"),
            models.Category(id=3, name="Bread"),
            models.Difficulty(id=1, name="Easy"),
            models.Difficulty(id=2, name="Hard"),
        ])
        s.commit()
    return store


@pytest.fixture
def pancakes(store):
    """A stored recipe with every column set explicitly."""
    with store.session() as s:
        s.add(models.Recipe(
            id=7,
            title="Pancakes",
            description="Fluffy",
            author_id=1,
            category_id=1,
            dificulty_id=2,
            rating=4.5,
            preparation_time=20,
            serving="4 people",
            ingredients="eggs|flour|milk",
            steps="mix|fry",
            access_count=3,
            image="http://img/pancakes.png",
            published_date=datetime(2021, 1, 2, tzinfo=timezone.utc),
        ))
        s.commit()
    return 7
