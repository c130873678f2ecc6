"""HTTP response envelope and verb dispatch."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from requests import Response

from .connection import Connection


@dataclass(slots=True)
class HttpResponse:
    """Normalized transport response; the status is reported, never interpreted."""

    status: int
    headers: Mapping[str, str]
    body: bytes | str

    @classmethod
    def from_transport(cls, response: Response) -> HttpResponse:
        return cls(status=int(response.status_code), headers=response.headers, body=response.text)


def dispatch(
    connection: Connection,
    verb: str,
    path: str,
    body: Mapping[str, Any],
) -> HttpResponse:
    """Issue ``verb`` against ``path`` and wrap the result.

    ``get`` sends an empty body (query arguments travel in the connection's
    ``params`` option). Every other verb is tunnelled through POST with the
    verb carried in the body as ``method``.
    """

    if verb == "get":
        response = connection.get(path, {})
    else:
        response = connection.post(path, {**body, "method": verb})
    return HttpResponse.from_transport(response)
