"""Host selection for graph, REST, beta and video endpoints."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config import DEFAULT_SERVERS, ServerTable


def server(options: Mapping[str, Any] | None = None, servers: ServerTable = DEFAULT_SERVERS) -> str:
    """Return the host (without scheme) a request with ``options`` should target.

    ``rest_api`` picks the REST host over the graph host. ``video`` and
    ``beta`` rewrite the host through ``host_path_matcher``, video first, and
    may be combined.
    """

    options = options or {}
    host = servers.rest_server if options.get("rest_api") else servers.graph_server
    if options.get("video"):
        host = servers.host_path_matcher.sub(servers.video_replace, host)
    if options.get("beta"):
        host = servers.host_path_matcher.sub(servers.beta_replace, host)
    return host


__all__ = ["server"]
