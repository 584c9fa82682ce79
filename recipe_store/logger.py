"""Console logging for the recipe store.

Records from every ``recipe_store.*`` module go to stderr, either
coloured by level or as one JSON object per line. SQLAlchemy's own
loggers are capped at WARNING so query echo is controlled only by
``Settings.echo_sql``.

Modules log through plain ``logging.getLogger(__name__)``. Nothing is
configured until ``configure_logging`` runs, so importing the package
never reads settings.
"""
import json
import logging
from datetime import datetime

from .config import get_settings

PACKAGE_LOGGER = "recipe_store"


class ColoredFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
        "RESET": "\033[0m",
    }

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = (
                f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
            )
        return super().format(record)


class JSONFormatter(logging.Formatter):
    def format(self, record):
        entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        # structured fields passed as extra={"extra_fields": {...}}
        entry.update(getattr(record, "extra_fields", {}))
        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(level: str | None = None,
                      json_format: bool | None = None) -> logging.Logger:
    """Attach one console handler to the ``recipe_store`` logger.

    Unset arguments come from ``get_settings()``. Calling again replaces the
    level and formatter instead of stacking handlers.
    """
    for noisy in ("sqlalchemy.engine", "sqlalchemy.pool", "sqlalchemy.orm"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    if level is None or json_format is None:
        settings = get_settings()
        level = level or settings.log_level
        if json_format is None:
            json_format = settings.log_json

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = ColoredFormatter(
            "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"
        )
    handler = next(
        (h for h in logger.handlers if getattr(h, "_recipe_store", False)), None
    )
    if handler is None:
        handler = logging.StreamHandler()
        handler._recipe_store = True
        logger.addHandler(handler)
    handler.setFormatter(formatter)
    return logger
