"""Process-wide HTTP service: settings store, dispatcher and legacy accessors."""

from __future__ import annotations

import copy
import dataclasses
import logging
import threading
from collections.abc import Callable, Iterator, Mapping, MutableMapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from . import middleware
from .config import DEFAULT_SERVERS, ServerTable
from .connection import Connection
from .deprecation import deprecate
from .http import HttpResponse, dispatch
from .middleware import MiddlewareBuilder
from .options import compose_options, transport_options
from .params import encode_params as _encode_params
from .params import prepare_body
from .servers import server as resolve_server
from .uploads import UploadableIO

# Deprecated flat accessor -> location inside ``http_options``.
LEGACY_ACCESSORS: dict[str, tuple[str, ...]] = {
    "timeout": ("timeout",),
    "always_use_ssl": ("use_ssl",),
    "proxy": ("proxy",),
    "ca_path": ("ssl", "ca_path"),
    "ca_file": ("ssl", "ca_file"),
    "verify_mode": ("ssl", "verify_mode"),
}

ConnectionFactory = Callable[[str, Mapping[str, Any], MiddlewareBuilder], Connection]


@dataclass(frozen=True, slots=True)
class SettingsSnapshot:
    """Point-in-time copy of an `HTTPService` configuration."""

    http_options: dict[str, Any]
    middleware_builder: MiddlewareBuilder | None
    servers: ServerTable


class HTTPService:
    """Dispatch graph and REST API requests with shared transport settings."""

    def __init__(
        self,
        *,
        http_options: Mapping[str, Any] | None = None,
        middleware_builder: MiddlewareBuilder | None = None,
        servers: ServerTable = DEFAULT_SERVERS,
        logger: logging.Logger | None = None,
        deprecation_sink: Callable[[str], None] = deprecate,
        connection_factory: ConnectionFactory = Connection,
    ) -> None:
        self._lock = threading.RLock()
        self._http_options: dict[str, Any] = dict(http_options or {})
        self._middleware_builder = middleware_builder
        self._servers = servers
        self.logger = logger or logging.getLogger(__name__)
        self.deprecation_sink = deprecation_sink
        self.connection_factory = connection_factory

    # Settings ----------------------------------------------------------------
    @property
    def http_options(self) -> dict[str, Any]:
        return self._http_options

    @http_options.setter
    def http_options(self, value: Mapping[str, Any] | None) -> None:
        with self._lock:
            self._http_options = dict(value or {})

    @property
    def middleware_builder(self) -> MiddlewareBuilder | None:
        return self._middleware_builder

    @middleware_builder.setter
    def middleware_builder(self, value: MiddlewareBuilder | None) -> None:
        with self._lock:
            self._middleware_builder = value

    @property
    def servers(self) -> ServerTable:
        return self._servers

    def configure(self, **fields: Any) -> ServerTable:
        """Replace individual `ServerTable` fields (``graph_server``, ``beta_replace``...)."""
        with self._lock:
            self._servers = dataclasses.replace(self._servers, **fields)
            return self._servers

    def snapshot(self) -> SettingsSnapshot:
        with self._lock:
            return SettingsSnapshot(
                http_options=copy.deepcopy(self._http_options),
                middleware_builder=self._middleware_builder,
                servers=self._servers,
            )

    def restore(self, snapshot: SettingsSnapshot) -> None:
        with self._lock:
            self._http_options = copy.deepcopy(snapshot.http_options)
            self._middleware_builder = snapshot.middleware_builder
            self._servers = snapshot.servers

    @contextmanager
    def settings_override(self, **settings: Any) -> Iterator[HTTPService]:
        """Temporarily set ``http_options``, ``middleware_builder`` or ``servers``."""
        saved = self.snapshot()
        try:
            for name, value in settings.items():
                if name not in {"http_options", "middleware_builder", "servers"}:
                    raise TypeError(f"Unknown setting {name!r}")
                if name == "servers":
                    with self._lock:
                        self._servers = value
                else:
                    setattr(self, name, value)
            yield self
        finally:
            self.restore(saved)

    # Public API --------------------------------------------------------------
    def server(self, options: Mapping[str, Any] | None = None) -> str:
        return resolve_server(options, self._servers)

    @staticmethod
    def encode_params(params: Mapping[Any, Any] | None) -> str:
        return _encode_params(params)

    def make_request(
        self,
        path: str,
        args: Mapping[Any, Any] | None,
        verb: str,
        options: Mapping[str, Any] | None = None,
    ) -> HttpResponse:
        """Send ``args`` to ``path`` using ``verb`` and return the raw response.

        ``get`` places the arguments in the query string; any other verb is
        sent as a POST whose body also carries ``method=<verb>``.
        """

        args = args or {}
        with self._lock:
            http_options = copy.deepcopy(self._http_options)
            builder = self._middleware_builder

        composite = compose_options(http_options, options, args.get("access_token"))
        host = self.server(composite)
        try:
            body = prepare_body(args)

            if verb == "get":
                composite["params"] = body
            else:
                composite.pop("params", None)

            connection = self.connection_factory(
                host,
                transport_options(composite),
                builder or middleware.DEFAULT_MIDDLEWARE,
            )
            self.logger.debug("%s: %s params: %r", verb.upper(), path, dict(args))
            try:
                return dispatch(connection, verb, path, body)
            finally:
                connection.close()
        finally:
            for value in args.values():
                if isinstance(value, UploadableIO):
                    value.close()

    # Legacy support ----------------------------------------------------------
    def _read_legacy(self, name: str) -> Any:
        self.deprecation_sink(_deprecation_message(name))
        with self._lock:
            node: Any = self._http_options
            for key in LEGACY_ACCESSORS[name]:
                if not isinstance(node, Mapping):
                    return None
                node = node.get(key)
            return node

    def _write_legacy(self, name: str, value: Any) -> None:
        self.deprecation_sink(_deprecation_message(name))
        *parents, leaf = LEGACY_ACCESSORS[name]
        with self._lock:
            node: MutableMapping[str, Any] = self._http_options
            for key in parents:
                child = node.get(key)
                if not isinstance(child, MutableMapping):
                    child = node[key] = {}
                node = child
            node[leaf] = value


def _deprecation_message(name: str) -> str:
    target = "".join(f"[{key!r}]" for key in LEGACY_ACCESSORS[name])
    return f"HTTPService.{name} is deprecated; use HTTPService.http_options{target} instead."


def _legacy_property(name: str) -> property:
    def fget(self: HTTPService) -> Any:
        return self._read_legacy(name)

    def fset(self: HTTPService, value: Any) -> None:
        self._write_legacy(name, value)

    return property(fget, fset, doc=f"Deprecated alias for {_deprecation_message(name)}")


for _name in LEGACY_ACCESSORS:
    setattr(HTTPService, _name, _legacy_property(_name))
del _name


http_service = HTTPService()


def make_request(
    path: str,
    args: Mapping[Any, Any] | None,
    verb: str,
    options: Mapping[str, Any] | None = None,
) -> HttpResponse:
    return http_service.make_request(path, args, verb, options)


def server(options: Mapping[str, Any] | None = None) -> str:
    return http_service.server(options)


def encode_params(params: Mapping[Any, Any] | None) -> str:
    return _encode_params(params)


def get_http_options() -> dict[str, Any]:
    return http_service.http_options


def set_http_options(value: Mapping[str, Any] | None) -> None:
    http_service.http_options = value


def get_middleware_builder() -> MiddlewareBuilder | None:
    return http_service.middleware_builder


def set_middleware_builder(value: MiddlewareBuilder | None) -> None:
    http_service.middleware_builder = value


__all__ = [
    "HTTPService",
    "LEGACY_ACCESSORS",
    "SettingsSnapshot",
    "encode_params",
    "get_http_options",
    "get_middleware_builder",
    "http_service",
    "make_request",
    "server",
    "set_http_options",
    "set_middleware_builder",
]
