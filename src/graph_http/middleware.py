"""Request pipeline assembled by middleware builders."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from requests.adapters import BaseAdapter, HTTPAdapter

from .exceptions import GraphHTTPError
from .params import encode_params
from .uploads import UploadIO


@dataclass(slots=True)
class RequestEnv:
    """Mutable description of an outgoing request as handlers see it."""

    method: str
    url: str
    params: list[tuple[str, Any]] = field(default_factory=list)
    body: Mapping[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)
    data: Any | None = None
    files: dict[str, UploadIO] | None = None


class RequestHandler(ABC):
    """Interface each request middleware must implement."""

    @abstractmethod
    def call(self, env: RequestEnv) -> None:
        """Rewrite ``env`` in place before it reaches the adapter."""


class MultipartRequest(RequestHandler):
    """Split uploads out of the body so the transport sends multipart/form-data."""

    def call(self, env: RequestEnv) -> None:
        if not isinstance(env.body, Mapping):
            return
        files = {key: value for key, value in env.body.items() if isinstance(value, UploadIO)}
        if not files:
            return
        env.files = files
        env.data = {key: value for key, value in env.body.items() if key not in files}
        env.body = None


class UrlEncodedRequest(RequestHandler):
    """Form-encode a mapping body with sorted keys."""

    mime_type = "application/x-www-form-urlencoded"

    def call(self, env: RequestEnv) -> None:
        if not isinstance(env.body, Mapping):
            return
        if env.body:
            env.data = encode_params(env.body)
            env.headers.setdefault("Content-Type", self.mime_type)
        env.body = None


REQUEST_HANDLERS: dict[str, type[RequestHandler]] = {
    "multipart": MultipartRequest,
    "url_encoded": UrlEncodedRequest,
}

_default_adapter: type[BaseAdapter] = HTTPAdapter


def default_adapter() -> type[BaseAdapter]:
    """Return the adapter class installed when a builder names none."""
    return _default_adapter


def set_default_adapter(adapter: type[BaseAdapter]) -> None:
    global _default_adapter
    _default_adapter = adapter


class PipelineBuilder:
    """Collect handlers and an adapter, in installation order."""

    def __init__(self) -> None:
        self.handlers: list[tuple[type[RequestHandler], dict[str, Any]]] = []
        self.adapter_entry: tuple[Any, dict[str, Any]] | None = None

    def use(self, handler: type[RequestHandler], **kwargs: Any) -> None:
        self.handlers.append((handler, kwargs))

    def request(self, name: str, **kwargs: Any) -> None:
        try:
            handler = REQUEST_HANDLERS[name]
        except KeyError as exc:
            known = ", ".join(sorted(REQUEST_HANDLERS))
            raise GraphHTTPError(f"Unknown request middleware {name!r} (known: {known})") from exc
        self.use(handler, **kwargs)

    def adapter(self, adapter: type[BaseAdapter] | BaseAdapter, **kwargs: Any) -> None:
        self.adapter_entry = (adapter, kwargs)

    def build_handlers(self) -> list[RequestHandler]:
        return [handler(**kwargs) for handler, kwargs in self.handlers]

    def build_adapter(self) -> BaseAdapter:
        if self.adapter_entry is None:
            return default_adapter()()
        adapter, kwargs = self.adapter_entry
        if isinstance(adapter, BaseAdapter):
            return adapter
        return adapter(**kwargs)


MiddlewareBuilder = Callable[[PipelineBuilder], None]


def default_middleware(builder: PipelineBuilder) -> None:
    """Install multipart uploads, url-encoded bodies and the default adapter."""

    builder.use(MultipartRequest)
    builder.request("url_encoded")
    builder.adapter(default_adapter())


DEFAULT_MIDDLEWARE: MiddlewareBuilder = default_middleware


__all__ = [
    "DEFAULT_MIDDLEWARE",
    "MiddlewareBuilder",
    "MultipartRequest",
    "PipelineBuilder",
    "REQUEST_HANDLERS",
    "RequestEnv",
    "RequestHandler",
    "UrlEncodedRequest",
    "default_adapter",
    "default_middleware",
    "set_default_adapter",
]
