"""Deprecation notices for legacy settings accessors."""

from __future__ import annotations

import logging
import warnings

logger = logging.getLogger(__name__)


def deprecate(message: str) -> None:
    """Emit one deprecation notice through ``warnings`` and the module logger."""

    logger.warning("Deprecation warning: %s", message)
    warnings.warn(message, DeprecationWarning, stacklevel=4)


__all__ = ["deprecate"]
