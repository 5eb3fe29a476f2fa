"""Process-wide logging setup for the command-line front end."""

from __future__ import annotations

import logging


def configure_logging(level: str | int = "WARNING", fmt: str | None = None) -> None:
    """Configure the root logger; later calls replace earlier handlers."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(
        level=level,
        format=fmt or "%(asctime)s - %(levelname)s - %(message)s",
        force=True,
    )
