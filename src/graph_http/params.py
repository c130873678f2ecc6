"""Parameter normalization and form encoding."""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any
from urllib.parse import quote_plus

from .exceptions import EncodingError
from .uploads import UploadableSource


def normalize_value(key: str, value: Any) -> str:
    """Return strings verbatim and everything else as compact JSON."""

    # enum atoms go through JSON even when they subclass str
    if isinstance(value, str) and not isinstance(value, Enum):
        return value
    try:
        return json.dumps(
            value, separators=(",", ":"), allow_nan=False, default=_json_default
        )
    except (TypeError, ValueError) as exc:
        raise EncodingError(
            f"Parameter {key!r} cannot be JSON-encoded: {exc}", key=key, details=repr(value)
        ) from exc


def encode_params(params: Mapping[Any, Any] | None) -> str:
    """Form-encode ``params`` with keys in lexicographic order.

    Keys are stringified, non-string values are JSON-encoded before
    percent-encoding. Returns an empty string for ``None`` or an empty mapping.
    """

    if not params:
        return ""
    pairs: list[str] = []
    for key, value in _sorted_items(params):
        if isinstance(value, UploadableSource):
            raise EncodingError(
                f"Parameter {key!r} is an upload and cannot be url-encoded", key=key
            )
        pairs.append(f"{quote_plus(key)}={quote_plus(normalize_value(key, value))}")
    return "&".join(pairs)


def prepare_body(params: Mapping[Any, Any] | None) -> dict[str, Any]:
    """Normalize ``params`` into a body mapping, materializing uploads in place."""

    body: dict[str, Any] = {}
    if not params:
        return body
    for key, value in _sorted_items(params):
        if isinstance(value, UploadableSource):
            body[key] = value.materialize()
        else:
            body[key] = normalize_value(key, value)
    return body


def _sorted_items(params: Mapping[Any, Any]) -> list[tuple[str, Any]]:
    # keys that stringify alike collapse to one entry, last one wins
    stringified = {str(key): value for key, value in params.items()}
    return sorted(stringified.items(), key=lambda item: item[0])


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


__all__ = ["encode_params", "normalize_value", "prepare_body"]
