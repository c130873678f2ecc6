"""Composition of transport options from global defaults and per-call overrides."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from .config import LEGACY_PASSTHROUGH_KEY, LEGACY_SSL_KEYS, TRANSPORT_OPTION_KEYS

logger = logging.getLogger(__name__)


def merge_ssl(
    defaults: Mapping[str, Any] | None, overrides: Mapping[str, Any] | None
) -> dict[str, Any]:
    """Merge two ``ssl`` mappings, keys from ``overrides`` winning."""

    merged: dict[str, Any] = dict(defaults or {})
    merged.update(overrides or {})
    return merged


def rewrite_legacy_options(call_options: Mapping[str, Any] | None) -> dict[str, Any]:
    """Fold deprecated per-call keys into their current locations.

    ``typhoeus_options`` entries are spliced into the top level (explicit call
    keys win) and flat ``ca_path``/``ca_file``/``verify_mode`` move under
    ``ssl``. The legacy keys themselves are removed.
    """

    options = copy.deepcopy(dict(call_options or {}))

    passthrough = options.pop(LEGACY_PASSTHROUGH_KEY, None)
    if passthrough:
        for key, value in passthrough.items():
            options.setdefault(key, copy.deepcopy(value))

    legacy_ssl = {key: options.pop(key) for key in LEGACY_SSL_KEYS if key in options}
    if legacy_ssl:
        options["ssl"] = merge_ssl(legacy_ssl, options.get("ssl"))
    return options


def compose_options(
    http_options: Mapping[str, Any] | None,
    call_options: Mapping[str, Any] | None = None,
    token: str | None = None,
) -> dict[str, Any]:
    """Build the composite options record for one request.

    The result still carries routing flags (``rest_api``, ``beta``, ``video``)
    and any other caller keys; use `transport_options` to reduce it to what the
    connection understands. Neither input mapping is mutated.
    """

    defaults = copy.deepcopy(dict(http_options or {}))
    overrides = rewrite_legacy_options(call_options)

    options: dict[str, Any] = {**defaults, **overrides}
    if "ssl" in defaults or "ssl" in overrides:
        options["ssl"] = merge_ssl(defaults.get("ssl"), overrides.get("ssl"))

    if token:
        options["use_ssl"] = True
        ssl_options = options.get("ssl") or {}
        # a caller-supplied verifier (CA bundle path, custom callable) survives
        verify = ssl_options.get("verify")
        if verify is None or isinstance(verify, bool):
            ssl_options["verify"] = True
        options["ssl"] = ssl_options
    elif options.get("use_ssl"):
        ssl_options = options.get("ssl") or {}
        if ssl_options.get("verify") is None:
            ssl_options["verify"] = True
        options["ssl"] = ssl_options

    return options


def transport_options(options: Mapping[str, Any]) -> dict[str, Any]:
    """Drop top-level keys the transport connection does not recognize."""

    dropped = sorted(str(key) for key in options if key not in TRANSPORT_OPTION_KEYS)
    if dropped:
        logger.debug("Ignoring non-transport options: %s", ", ".join(dropped))
    return {key: value for key, value in options.items() if key in TRANSPORT_OPTION_KEYS}


__all__ = ["compose_options", "merge_ssl", "rewrite_legacy_options", "transport_options"]
