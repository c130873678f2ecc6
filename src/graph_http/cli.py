"""Command-line interface for issuing graph API requests."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import requests
import typer

try:  # pragma: no cover - exercised in runtime environments
    from rich import box
    from rich.console import Console
    from rich.table import Table
except ImportError as exc:  # pragma: no cover - optional dependency guard
    raise RuntimeError(
        "The CLI requires Rich for table rendering. Install the CLI extras via "
        "'pip install graph-http[cli]' to enable this command."
    ) from exc

from .exceptions import GraphHTTPError
from .http import HttpResponse
from .service import http_service, make_request
from .uploads import UploadableIO

app = typer.Typer(help="Graph API HTTP dispatcher CLI.", no_args_is_help=True)

console = Console(force_terminal=False, color_system=None)


def _coerce_simple(value: str) -> Any:
    v = value.strip()
    if not v:
        return ""
    low = v.lower()
    if low in {"true", "yes", "on"}:
        return True
    if low in {"false", "no", "off"}:
        return False
    if low in {"null", "none"}:
        return None
    try:
        if "." in v:
            return float(v)
        return int(v)
    except ValueError:
        return v


def parse_pairs(pairs: list[str], *, option: str) -> dict[str, str]:
    """Split repeated ``key=value`` option values into a dict."""
    out: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise typer.BadParameter(f"{option} expects key=value, got {pair!r}.")
        key, val = pair.split("=", 1)
        out[key.strip()] = val
    return out


def _build_args(params: list[str], files: list[str], token: str | None) -> dict[str, Any]:
    args: dict[str, Any] = {
        key: _coerce_simple(value) for key, value in parse_pairs(params, option="--param").items()
    }
    for field, raw_path in parse_pairs(files, option="--file").items():
        upload_path = Path(raw_path).expanduser()
        if not upload_path.exists():
            raise typer.BadParameter(f"Upload file not found for --file {field}.")
        args[field] = UploadableIO(str(upload_path))
    if token:
        args["access_token"] = token
    return args


def _build_options(
    *,
    rest_api: bool,
    beta: bool,
    video: bool,
    proxy: str | None,
    timeout: float | None,
    ca_file: Path | None,
) -> dict[str, Any]:
    options: dict[str, Any] = {"rest_api": rest_api, "beta": beta, "video": video}
    if proxy:
        options["proxy"] = proxy
    if timeout is not None:
        options["request"] = {"timeout": timeout}
    if ca_file:
        expanded = ca_file.expanduser()
        if not expanded.exists():
            raise typer.BadParameter("CA bundle not found for --ca-file option.")
        options["ssl"] = {"ca_file": str(expanded)}
    return options


def _render_response(response: HttpResponse) -> None:
    table = Table(
        title=f"HTTP {response.status}",
        box=box.SIMPLE,
        show_lines=False,
        header_style="bold cyan",
    )
    table.add_column("Header")
    table.add_column("Value")
    for name in sorted(response.headers):
        table.add_row(name, str(response.headers[name]))
    console.print(table)
    body = response.body.decode(errors="replace") if isinstance(response.body, bytes) else response.body
    console.print(body, markup=False, highlight=False)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("request")
def request_command(
    path: str = typer.Argument(..., help="Endpoint path, for example /me."),
    verb: str = typer.Option("get", "--verb", "-X", help="HTTP verb; non-get verbs are sent as POST."),
    params: list[str] = typer.Option([], "--param", "-p", help="Request parameter as key=value."),
    files: list[str] = typer.Option([], "--file", "-f", help="Upload as field=path."),
    token: str | None = typer.Option(
        None, "--token", envvar="GRAPH_HTTP_ACCESS_TOKEN", help="Access token to send."
    ),
    rest_api: bool = typer.Option(False, "--rest", help="Target the REST API host."),
    beta: bool = typer.Option(False, "--beta", help="Target the beta tier."),
    video: bool = typer.Option(False, "--video", help="Target the video upload host."),
    proxy: str | None = typer.Option(None, "--proxy", envvar="GRAPH_HTTP_PROXY", help="Proxy URL."),
    timeout: float | None = typer.Option(None, "--timeout", help="Request timeout (seconds)."),
    ca_file: Path | None = typer.Option(
        None, "--ca-file", envvar="GRAPH_HTTP_CA_FILE", help="CA bundle for TLS verification."
    ),
    output_json: bool = typer.Option(False, "--json", help="Print only the raw response body."),
    log_level: str = typer.Option("WARNING", "--log-level", envvar="GRAPH_HTTP_LOG_LEVEL"),
) -> None:
    """Send a single request and print the response."""

    _setup_logging(log_level)
    options = _build_options(
        rest_api=rest_api,
        beta=beta,
        video=video,
        proxy=proxy,
        timeout=timeout,
        ca_file=ca_file,
    )
    try:
        args = _build_args(params, files, token)
        response = make_request(path, args, verb, options)
    except (GraphHTTPError, requests.RequestException) as exc:
        reason = str(exc).strip() or exc.__class__.__name__
        typer.secho(f"Request failed: {reason}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc

    if output_json:
        body = response.body
        typer.echo(body.decode(errors="replace") if isinstance(body, bytes) else body)
        return
    _render_response(response)


@app.command("servers")
def servers_command(
    rest_api: bool = typer.Option(False, "--rest", help="Resolve the REST API host."),
    beta: bool = typer.Option(False, "--beta", help="Resolve the beta tier."),
    video: bool = typer.Option(False, "--video", help="Resolve the video upload host."),
) -> None:
    """Show the configured hosts and the one selected by the given flags."""

    servers = http_service.servers
    table = Table(title="Servers", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("Name")
    table.add_column("Host")
    table.add_row("graph_server", servers.graph_server)
    table.add_row("rest_server", servers.rest_server)
    table.add_row("dialog_host", servers.dialog_host)
    table.add_row(
        "selected",
        http_service.server({"rest_api": rest_api, "beta": beta, "video": video}),
    )
    console.print(table)


__all__ = ["app", "parse_pairs"]
