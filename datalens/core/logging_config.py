"""
Logging for the DataLens API and console.

Log lines go to stderr so ``datalens --json`` keeps stdout to the result
document. Pipeline modules log under the ``datalens`` namespace; urllib3 is
held at WARNING because at DEBUG it echoes every Gemini request line.
"""
from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Optional


_is_configured = False

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Route ``datalens`` and root logging to stderr, once per process.

    Args:
        level: ``LOG_LEVEL`` value, case-insensitive; defaults to INFO.
    """
    global _is_configured

    if _is_configured:
        return

    log_level = (level or "INFO").upper()

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "datalens": {"format": LOG_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "datalens",
                    "level": log_level,
                }
            },
            "root": {"handlers": ["stderr"], "level": "WARNING"},
            "loggers": {
                # Propagates to the root handler; only the threshold differs
                "datalens": {"level": log_level},
                "urllib3": {"level": "WARNING"},
            },
        }
    )

    _is_configured = True
