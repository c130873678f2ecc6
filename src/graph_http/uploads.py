"""Upload handles for multipart parameters."""

from __future__ import annotations

import mimetypes
import os
from typing import IO, Any, NamedTuple, Protocol, runtime_checkable

from .exceptions import UploadError


class UploadIO(NamedTuple):
    """Transport-level upload value, in the shape ``requests`` takes for ``files=``."""

    filename: str
    fileobj: IO[bytes]
    content_type: str


@runtime_checkable
class UploadableSource(Protocol):
    """Anything that can be turned into an `UploadIO` right before dispatch."""

    def materialize(self) -> UploadIO: ...


class UploadableIO:
    """Wrap a path, a binary file object or an uploaded-file-like object.

    Content type resolution order:
    - the explicit ``content_type`` argument
    - a ``content_type`` attribute on the source (web framework uploads)
    - a guess from the filename extension

    If none of these yields a type, `UploadError` is raised at construction.
    """

    def __init__(
        self,
        source: Any,
        content_type: str | None = None,
        filename: str | None = None,
    ) -> None:
        self._path: str | None = None
        self._fileobj: IO[bytes] | None = None
        self._opened: list[IO[bytes]] = []

        if isinstance(source, (str, os.PathLike)):
            self._path = os.fspath(source)
            default_name = os.path.basename(self._path)
        elif hasattr(source, "file") and hasattr(source, "content_type"):
            # starlette/werkzeug style upload wrappers
            self._fileobj = source.file
            default_name = _source_filename(source)
        elif self.is_binary_source(source):
            self._fileobj = source
            default_name = _source_filename(source)
        else:
            raise UploadError(
                f"Cannot build an upload from {type(source).__name__}; "
                "provide a path or a binary file object."
            )

        self.filename = filename or default_name or "upload"
        self.content_type = (
            content_type
            or getattr(source, "content_type", None)
            or mimetypes.guess_type(self.filename)[0]
        )
        if not self.content_type:
            raise UploadError(
                f"Unable to determine a content type for {self.filename!r}; "
                "pass content_type explicitly."
            )

    def __repr__(self) -> str:
        return f"UploadableIO(filename={self.filename!r}, content_type={self.content_type!r})"

    @staticmethod
    def is_binary_source(obj: Any) -> bool:
        return callable(getattr(obj, "read", None)) and not isinstance(obj, (str, bytes))

    def materialize(self) -> UploadIO:
        fileobj = self._fileobj
        if fileobj is None:
            try:
                fileobj = open(self._path, "rb")  # noqa: SIM115 - released by close()
            except OSError as exc:
                raise UploadError(f"Unable to open upload {self._path!r}: {exc}") from exc
            self._opened.append(fileobj)
        return UploadIO(self.filename, fileobj, self.content_type)

    def close(self) -> None:
        """Close file handles opened by `materialize`; caller-owned objects stay open."""
        while self._opened:
            self._opened.pop().close()


def _source_filename(source: Any) -> str | None:
    for attr in ("original_filename", "filename", "name"):
        value = getattr(source, attr, None)
        if isinstance(value, str) and value:
            return os.path.basename(value)
    return None


__all__ = ["UploadIO", "UploadableIO", "UploadableSource"]
