"""Configuration helpers for the graph HTTP service."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field

# Top-level option keys understood by the transport connection. ``timeout`` is
# the legacy flat timeout, honored when ``request.timeout`` is absent.
TRANSPORT_OPTION_KEYS = frozenset(
    {"proxy", "request", "ssl", "params", "use_ssl", "headers", "timeout"}
)

# Flat per-call keys that belong under ``ssl``.
LEGACY_SSL_KEYS = ("ca_path", "ca_file", "verify_mode")

# Per-call key whose mapping is spliced into the top-level options.
LEGACY_PASSTHROUGH_KEY = "typhoeus_options"


@dataclass(frozen=True, slots=True)
class ServerTable:
    """Hosts used to reach the graph and REST APIs."""

    graph_server: str = "graph.facebook.com"
    rest_server: str = "api.facebook.com"
    dialog_host: str = "www.facebook.com"
    host_path_matcher: re.Pattern[str] = field(default=re.compile(r"\.facebook"))
    video_replace: str = "-video.facebook"
    beta_replace: str = ".beta.facebook"

    @classmethod
    def from_env(cls) -> ServerTable:
        """Create a table honoring ``GRAPH_HTTP_*`` host overrides."""
        defaults = cls()
        return cls(
            graph_server=os.getenv("GRAPH_HTTP_GRAPH_SERVER", defaults.graph_server),
            rest_server=os.getenv("GRAPH_HTTP_REST_SERVER", defaults.rest_server),
            dialog_host=os.getenv("GRAPH_HTTP_DIALOG_HOST", defaults.dialog_host),
        )


DEFAULT_SERVERS = ServerTable()


__all__ = [
    "DEFAULT_SERVERS",
    "LEGACY_PASSTHROUGH_KEY",
    "LEGACY_SSL_KEYS",
    "ServerTable",
    "TRANSPORT_OPTION_KEYS",
]
