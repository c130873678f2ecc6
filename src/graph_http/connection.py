"""Transport connection bound to a single API host."""

from __future__ import annotations

import logging
import ssl as ssl_module
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlparse

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from .middleware import DEFAULT_MIDDLEWARE, MiddlewareBuilder, PipelineBuilder, RequestEnv

logger = logging.getLogger(__name__)


class Connection:
    """Send requests to one host through a middleware pipeline.

    ``options`` is a transport options record (``proxy``, ``request``,
    ``ssl``, ``params``, ``use_ssl``, ``headers``, ``timeout``).
    """

    def __init__(
        self,
        host: str,
        options: Mapping[str, Any] | None = None,
        builder: MiddlewareBuilder | None = None,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self.host = host
        self.options: dict[str, Any] = dict(options or {})
        self.scheme = "https" if self.options.get("use_ssl") else "http"

        pipeline = PipelineBuilder()
        (builder or DEFAULT_MIDDLEWARE)(pipeline)
        self.handlers = pipeline.build_handlers()

        self._session = session or requests.Session()
        adapter = pipeline.build_adapter()
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)
        proxies = self._proxies()
        if proxies:
            self._session.proxies.update(proxies)
        if self.options.get("headers"):
            self._session.headers.update(self.options["headers"])
        self._suppress_insecure_warning_if_needed()

    # Context manager helpers -------------------------------------------------
    def __enter__(self) -> Connection:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Public API --------------------------------------------------------------
    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}"

    def get(self, path: str, body: Mapping[str, Any] | None = None) -> requests.Response:
        return self.run_request("GET", path, body)

    def post(self, path: str, body: Mapping[str, Any] | None = None) -> requests.Response:
        return self.run_request("POST", path, body)

    def run_request(
        self, method: str, path: str, body: Mapping[str, Any] | None = None
    ) -> requests.Response:
        env = RequestEnv(
            method=method.upper(),
            url=self.build_url(path),
            params=sorted((self.options.get("params") or {}).items()),
            body=dict(body) if body is not None else None,
        )
        for handler in self.handlers:
            handler.call(env)
        logger.debug("Sending %s %s", env.method, env.url)
        return self._session.request(
            env.method,
            env.url,
            params=env.params or None,
            data=env.data,
            files=env.files,
            headers=env.headers or None,
            timeout=self._timeout(),
            verify=self._verify(),
            cert=self._cert(),
        )

    def build_url(self, path: str) -> str:
        parsed = urlparse(path)
        if parsed.scheme and parsed.netloc:
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def close(self) -> None:
        self._session.close()

    # Internal helpers -------------------------------------------------------
    def _proxies(self) -> dict[str, str]:
        proxy = self.options.get("proxy")
        if not proxy:
            return {}
        if isinstance(proxy, Mapping):
            if "uri" in proxy:
                return {"http": proxy["uri"], "https": proxy["uri"]}
            return dict(proxy)
        return {"http": str(proxy), "https": str(proxy)}

    def _timeout(self) -> float | tuple[float | None, float | None] | None:
        request_options = self.options.get("request") or {}
        timeout = request_options.get("timeout", self.options.get("timeout"))
        open_timeout = request_options.get("open_timeout")
        if open_timeout is not None:
            return (open_timeout, timeout)
        return timeout

    def _verify(self) -> bool | str:
        ssl_options = self.options.get("ssl") or {}
        verify = ssl_options.get("verify")
        if verify is False:
            return False
        verify_mode = ssl_options.get("verify_mode")
        if verify_mode == ssl_module.CERT_NONE or verify_mode == "none":
            return False
        bundle = ssl_options.get("ca_file") or ssl_options.get("ca_path")
        if bundle:
            return str(bundle)
        if isinstance(verify, str):
            return verify
        return True

    def _suppress_insecure_warning_if_needed(self) -> None:
        if self._verify() is False:
            urllib3.disable_warnings(InsecureRequestWarning)

    def _cert(self) -> str | tuple[str, str] | None:
        ssl_options = self.options.get("ssl") or {}
        client_cert = ssl_options.get("client_cert")
        client_key = ssl_options.get("client_key")
        if client_cert and client_key:
            return (client_cert, client_key)
        return client_cert


__all__ = ["Connection"]
