"""Graph API HTTP dispatcher entrypoints."""
from .config import DEFAULT_SERVERS, ServerTable
from .exceptions import EncodingError, GraphHTTPError, UploadError
from .http import HttpResponse
from .middleware import DEFAULT_MIDDLEWARE, MultipartRequest, PipelineBuilder, UrlEncodedRequest
from .service import (
    HTTPService,
    encode_params,
    get_http_options,
    get_middleware_builder,
    http_service,
    make_request,
    server,
    set_http_options,
    set_middleware_builder,
)
from .uploads import UploadableIO, UploadableSource, UploadIO

__all__ = [
    "DEFAULT_MIDDLEWARE",
    "DEFAULT_SERVERS",
    "EncodingError",
    "GraphHTTPError",
    "HTTPService",
    "HttpResponse",
    "MultipartRequest",
    "PipelineBuilder",
    "ServerTable",
    "UploadError",
    "UploadIO",
    "UploadableIO",
    "UploadableSource",
    "UrlEncodedRequest",
    "encode_params",
    "get_http_options",
    "get_middleware_builder",
    "http_service",
    "make_request",
    "server",
    "set_http_options",
    "set_middleware_builder",
]
