import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from .errors import StoreUnavailable

logger = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(database_url: str, connect_timeout: int = 10,
                echo: bool = False) -> Engine:
    url = make_url(database_url)
    connect_args = {}
    if url.get_backend_name() == "postgresql":
        connect_args["connect_timeout"] = connect_timeout
    elif url.get_backend_name() == "sqlite":
        # pysqlite's busy timeout
        connect_args["timeout"] = connect_timeout
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args, echo=echo)


def make_session_factory(engine: Engine):
    return sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )


def ping(engine: Engine) -> None:
    """Open a connection and run a trivial query, or raise StoreUnavailable."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.critical(
            "Backing store unreachable at %s: %s",
            engine.url.render_as_string(hide_password=True), exc,
        )
        raise StoreUnavailable(str(exc)) from exc


def init_db(engine: Engine) -> None:
    # Register the tables on Base before creating them
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
