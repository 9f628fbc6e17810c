"""Lightweight logging helpers shared by the service and its entry points."""

from __future__ import annotations

import logging
from typing import Any

_LOGGER = logging.getLogger("agentdeck")
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _coerce(parts: tuple[object, ...]) -> str:
    rendered = " ".join(str(part) for part in parts if part is not None)
    return rendered.strip()


def configure_logging(level: str | int = "INFO") -> None:
    """Install a root stream handler once; later calls only adjust the level."""

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=_FORMAT)
    root.setLevel(level)


def log(*parts: object, **metadata: Any) -> None:
    """
    Emit an info-level log message on the ``agentdeck`` logger.

    Keyword arguments are appended to the message as a metadata dict so
    lifecycle messages can carry a few structured details without a
    dedicated formatter.
    """

    message = _coerce(parts)
    if metadata:
        message = f"{message} | {metadata}"

    if not _LOGGER.handlers and not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format=_FORMAT)

    _LOGGER.info(message)


__all__ = ["configure_logging", "log"]
