"""Logging setup for the projector process."""

from __future__ import annotations

import logging.config

from chainview.core.settings import settings


def configure_logging(level: str | None = None) -> None:
    """Install the process-wide logging configuration.

    Modules log through ``logging.getLogger(__name__)``; this only wires the
    ``chainview`` logger tree to a console handler at the configured level.
    """
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "chainview": {"level": (level or settings.log_level).upper()},
                "sqlalchemy.engine": {"level": "INFO" if settings.sql_debug else "WARNING"},
            },
            "root": {"handlers": ["console"], "level": "WARNING"},
        }
    )
