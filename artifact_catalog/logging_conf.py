# artifact_catalog/logging_conf.py
from __future__ import annotations
import logging
import logging.config
from typing import Any, Dict, Optional

from .config import settings

FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def build_logging_config(level: str) -> Dict[str, Any]:
    """
    Console logging for the service. Catalog loggers (`artifact_catalog.*`)
    follow `level`; uvicorn keeps its own handler at INFO.
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"basic": {"format": FORMAT}},
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "basic"},
            "uvicorn": {"class": "logging.StreamHandler", "formatter": "basic", "level": "INFO"},
        },
        "loggers": {
            "": {"handlers": ["console"], "level": "WARNING"},
            "uvicorn": {"handlers": ["uvicorn"], "level": "INFO", "propagate": False},
            "uvicorn.error": {"handlers": ["uvicorn"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["uvicorn"], "level": "INFO", "propagate": False},
            "artifact_catalog": {"handlers": ["console"], "level": level, "propagate": False},
            # third-party clients
            "pymongo": {"level": "WARNING"},
            "aio_pika": {"level": "WARNING"},
            "aiormq": {"level": "WARNING"},
        },
    }


def setup_logging(level: Optional[str] = None) -> None:
    logging.config.dictConfig(build_logging_config(level or settings.log_level))
