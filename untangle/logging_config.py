from __future__ import annotations

import logging.config
import os
import sys
from typing import Optional


def configure_logging(level: Optional[str] = None) -> None:
    level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": sys.stderr,
                },
            },
            "loggers": {
                "": {"handlers": ["console"], "level": "WARNING"},
                "untangle": {"level": level},
                "backend": {"level": level},
            },
        }
    )
