"""Logging configuration and Logfire instrumentation."""

import logging
from logging.config import dictConfig

import logfire

from wagerboard import __version__
from wagerboard.config import Settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure stdlib logging for the process."""
    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": LOG_FORMAT,
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "root": {
            "level": level.upper(),
            "handlers": ["console"],
        },
        "loggers": {
            # SQL echo is controlled by the engine, not the root level
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    })


def initialize_logfire(settings: Settings, app=None) -> bool:
    """
    Initialize Logfire cloud tracking.

    Must be called once, before the app starts serving. Instruments:
    - FastAPI request handling (when an app is given)
    - Python logging (bridged to Logfire)

    Without a token, observability stays disabled and the process continues.
    Returns whether Logfire is active.
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="wagerboard",
            service_version=__version__,
            environment=settings.environment,
        )

        if app is not None:
            logfire.instrument_fastapi(app)

        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("Logfire cloud tracking initialized")
        return True

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
        return False


def instrument_database(engine) -> None:
    """Trace SQLAlchemy statements once the engine exists."""
    try:
        logfire.instrument_sqlalchemy(engine=engine)
    except Exception as e:
        logger.warning(f"Failed to instrument SQLAlchemy: {e}")
