from __future__ import annotations

import logging
import sys
from typing import Literal

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Chatty third-party loggers that drown out indexing progress at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "chromadb", "trafilatura")


def setup_logging(level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO") -> None:
    """
    Configure a simple, consistent console logger for the project.
    """
    logging.basicConfig(
        level=getattr(logging, level),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,  # overwrite any prior logging config (useful in notebooks/IDE runs)
    )

    if level != "DEBUG":
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
