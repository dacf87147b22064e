"""Root logger setup for the CLI and embedding applications.

``PRELOVED_LOG_LEVEL`` (name or number) wins over the caller's default; a
truthy ``PRELOVED_DEBUG`` / ``PRELOVED_DEBUG_LOGGING`` forces DEBUG.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"

_TRUTHY = {"1", "true", "yes", "on"}


def parse_level(value: Union[int, str, None], fallback: int = logging.INFO) -> int:
    """``"debug"``, ``"10"`` or ``10`` -> ``10``; unknown names give ``fallback``."""
    if isinstance(value, int):
        return value
    text = (value or "").strip()
    if not text:
        return fallback
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else fallback


def env_level(environ: Optional[Mapping[str, str]] = None) -> Optional[int]:
    """Level requested through the environment, ``None`` when unset."""
    env = os.environ if environ is None else environ
    explicit = env.get("PRELOVED_LOG_LEVEL")
    if explicit and explicit.strip():
        return parse_level(explicit)
    for flag in ("PRELOVED_DEBUG", "PRELOVED_DEBUG_LOGGING"):
        if (env.get(flag) or "").strip().lower() in _TRUTHY:
            return logging.DEBUG
    return None


def configure_root(default_level: Union[int, str] = logging.INFO) -> int:
    """Install a stream handler once and set the effective root level."""
    level = env_level()
    if level is None:
        level = parse_level(default_level)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT)
    root.setLevel(level)
    # requests' connection pool logs every request at DEBUG.
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
    return level


__all__ = ["configure_root", "env_level", "parse_level"]
