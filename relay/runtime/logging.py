"""Logging initialization."""

from __future__ import annotations

import os
import logging

from relay.config.logging import LOG_LEVEL, LOG_FORMAT
from relay.config.upstream import ENV_UPSTREAM_DEBUG


def configure_logging() -> None:
    # The websockets client logs every frame at DEBUG. Keep it tame unless explicitly enabled.
    if (os.getenv(ENV_UPSTREAM_DEBUG) or "").strip().lower() not in {"1", "true", "yes"}:
        logging.getLogger("websockets").setLevel(logging.WARNING)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


__all__ = ["configure_logging"]
