"""SQL access to the recipe catalog.

``RecipeStore`` owns one SQLAlchemy engine and maps the ``recipe``,
``author``, ``category`` and ``dificulty`` tables to pydantic values.

Every call runs inside :meth:`RecipeStore.session`, which arms a deadline
on the connection and turns driver exceptions into ``StoreFailure`` (or
``StoreTimeout`` once the deadline has passed). A row that cannot be
turned into a value, such as a legacy row with a NULL title, is a
``StoreFailure`` too. Single-row fetches return None when no row matches.
Listings read every row before building values, so a failure part-way
through raises and returns nothing.
"""
import logging
import time
from contextlib import contextmanager
from typing import Iterator, List, Optional

from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import db, models, schemas
from .config import Settings, get_settings
from .errors import StoreFailure, StoreTimeout
from .formatting import format_published_date, join_list, split_list
from .logger import configure_logging

logger = logging.getLogger(__name__)

# SQLite VM instructions between deadline checks
_SQLITE_PROGRESS_STEPS = 1000


class RecipeStore:
    def __init__(self, engine: Engine, timeout: float = 5.0,
                 default_author_id: int = 2, preview_limit: int = 10):
        self.engine = engine
        self.timeout = timeout
        self.default_author_id = default_author_id
        self.preview_limit = preview_limit
        self._session_factory = db.make_session_factory(engine)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RecipeStore":
        """Build a store from configuration and check that it is reachable.

        Raises StoreUnavailable when the first connection fails.
        """
        settings = settings or get_settings()
        configure_logging(settings.log_level, settings.log_json)
        engine = db.make_engine(
            settings.database_url,
            connect_timeout=settings.connect_timeout,
            echo=settings.echo_sql,
        )
        store = cls(
            engine,
            timeout=settings.statement_timeout,
            default_author_id=settings.default_author_id,
            preview_limit=settings.preview_limit,
        )
        try:
            store.ping()
        except StoreFailure:
            engine.dispose()
            raise
        logger.info(
            "Recipe store opened at %s",
            engine.url.render_as_string(hide_password=True),
        )
        return store

    def ping(self) -> None:
        db.ping(self.engine)

    def close(self) -> None:
        self.engine.dispose()
        logger.info("Recipe store closed")

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # -- sessions and deadlines -------------------------------------------

    @contextmanager
    def session(self, timeout: Optional[float] = None) -> Iterator[Session]:
        """Yield a session whose statements must finish within ``timeout``.

        The session is rolled back on any error and always closed.
        """
        timeout = self.timeout if timeout is None else timeout
        deadline = time.monotonic() + timeout
        session = self._session_factory()
        disarm = None
        try:
            disarm = self._arm_deadline(session, timeout, deadline)
            yield session
        except SQLAlchemyError as exc:
            self._rollback(session)
            if time.monotonic() >= deadline:
                logger.error("Store call timed out after %gs: %s", timeout, exc)
                raise StoreTimeout(timeout) from exc
            logger.error("Store call failed: %s", exc)
            raise StoreFailure(str(exc)) from exc
        except ValidationError as exc:
            self._rollback(session)
            logger.error("Stored row does not map to a value: %s", exc)
            raise StoreFailure(f"malformed row: {exc}") from exc
        finally:
            if disarm is not None:
                disarm()
            session.close()

    @staticmethod
    def _rollback(session: Session) -> None:
        # a dead connection must not hide the error being reported
        try:
            session.rollback()
        except SQLAlchemyError as exc:
            logger.warning("Rollback failed: %s", exc)

    def _arm_deadline(self, session: Session, timeout: float, deadline: float):
        dialect = self.engine.dialect.name
        if dialect == "postgresql":
            # transaction-local, reset by the server on commit or rollback
            session.execute(
                text("SELECT set_config('statement_timeout', :ms, true)"),
                {"ms": str(max(1, int(timeout * 1000)))},
            )
            return None
        if dialect == "sqlite":
            raw = session.connection().connection.driver_connection

            def expired():
                return time.monotonic() >= deadline

            raw.set_progress_handler(expired, _SQLITE_PROGRESS_STEPS)
            return lambda: raw.set_progress_handler(None, 0)
        logger.debug("No statement deadline support for dialect %s", dialect)
        return None

    # -- reads ------------------------------------------------------------

    def fetch_recipe(self, recipe_id: int,
                     timeout: Optional[float] = None) -> Optional[schemas.Recipe]:
        logger.debug("Fetching recipe %s", recipe_id)
        with self.session(timeout) as s:
            row = s.query(models.Recipe).filter(models.Recipe.id == recipe_id).first()
            if row is None:
                return None
            return schemas.Recipe(
                id=row.id,
                title=row.title,
                description=row.description,
                author=schemas.RecipeAuthor(id=row.author_id),
                category=schemas.RecipeCategory(id=row.category_id),
                difficulty=schemas.RecipeDifficulty(id=row.dificulty_id),
                rating=row.rating,
                preparation_time=row.preparation_time,
                serving=row.serving,
                ingredients=split_list(row.ingredients),
                steps=split_list(row.steps),
                access_count=row.access_count,
                image_url=row.image,
                published_date=format_published_date(row.published_date),
            )

    def _fetch_lookup(self, model, value_type, ident: int, timeout):
        logger.debug("Fetching %s %s", model.__tablename__, ident)
        with self.session(timeout) as s:
            row = s.query(model).filter(model.id == ident).first()
            if row is None:
                return None
            return value_type.model_validate(row)

    def fetch_author(self, author_id: int, timeout: Optional[float] = None
                     ) -> Optional[schemas.RecipeAuthor]:
        return self._fetch_lookup(models.Author, schemas.RecipeAuthor, author_id, timeout)

    def fetch_category(self, category_id: int, timeout: Optional[float] = None
                       ) -> Optional[schemas.RecipeCategory]:
        return self._fetch_lookup(
            models.Category, schemas.RecipeCategory, category_id, timeout
        )

    def fetch_difficulty(self, difficulty_id: int, timeout: Optional[float] = None
                         ) -> Optional[schemas.RecipeDifficulty]:
        return self._fetch_lookup(
            models.Difficulty, schemas.RecipeDifficulty, difficulty_id, timeout
        )

    def fetch_recipe_previews(self, timeout: Optional[float] = None
                              ) -> List[schemas.RecipePreview]:
        with self.session(timeout) as s:
            rows = (
                s.query(models.Recipe.id, models.Recipe.title, models.Recipe.description)
                .limit(self.preview_limit)
                .all()
            )
            return [
                schemas.RecipePreview(id=r.id, title=r.title, description=r.description)
                for r in rows
            ]

    def _fetch_all(self, model, value_type, timeout) -> list:
        with self.session(timeout) as s:
            rows = s.query(model).all()
            return [value_type.model_validate(r) for r in rows]

    def fetch_categories(self, timeout: Optional[float] = None
                         ) -> List[schemas.RecipeCategory]:
        return self._fetch_all(models.Category, schemas.RecipeCategory, timeout)

    def fetch_difficulties(self, timeout: Optional[float] = None
                           ) -> List[schemas.RecipeDifficulty]:
        return self._fetch_all(models.Difficulty, schemas.RecipeDifficulty, timeout)

    # -- writes -----------------------------------------------------------

    def insert_recipe(self, recipe: schemas.RecipeCreate,
                      timeout: Optional[float] = None) -> int:
        ingredients = join_list("ingredients", recipe.ingredients)
        steps = join_list("steps", recipe.steps)
        author_id = recipe.author_id
        if author_id is None:
            author_id = self.default_author_id
        db_recipe = models.Recipe(
            title=recipe.title,
            description=recipe.description,
            author_id=author_id,
            category_id=recipe.category_id,
            dificulty_id=recipe.difficulty_id,
            preparation_time=recipe.preparation_time,
            serving=recipe.serving,
            ingredients=ingredients,
            steps=steps,
            image=recipe.image_url,
        )
        with self.session(timeout) as s:
            s.add(db_recipe)
            s.flush()
            recipe_id = db_recipe.id
            s.commit()
        logger.info(
            "Inserted recipe %s", recipe_id,
            extra={"extra_fields": {"recipe_id": recipe_id, "author_id": author_id}},
        )
        return recipe_id

    def update_recipe(self, recipe_id: int, recipe: schemas.RecipeUpdate,
                      timeout: Optional[float] = None) -> None:
        with self.session(timeout) as s:
            count = (
                s.query(models.Recipe)
                .filter(models.Recipe.id == recipe_id)
                .update(
                    {
                        models.Recipe.title: recipe.title,
                        models.Recipe.description: recipe.description,
                        models.Recipe.preparation_time: recipe.preparation_time,
                        models.Recipe.serving: recipe.serving,
                        models.Recipe.image: recipe.image_url,
                    },
                    synchronize_session=False,
                )
            )
            s.commit()
        logger.info(
            "Updated recipe %s (%d row(s))", recipe_id, count,
            extra={"extra_fields": {"recipe_id": recipe_id, "rows": count}},
        )

    def remove_recipe(self, recipe_id: int, timeout: Optional[float] = None) -> None:
        with self.session(timeout) as s:
            count = (
                s.query(models.Recipe)
                .filter(models.Recipe.id == recipe_id)
                .delete(synchronize_session=False)
            )
            s.commit()
        logger.info(
            "Removed recipe %s (%d row(s))", recipe_id, count,
            extra={"extra_fields": {"recipe_id": recipe_id, "rows": count}},
        )
