from __future__ import annotations

from enum import Enum
from pathlib import Path


class ErrorKind(Enum):
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    IO_ERROR = "io_error"
    RENDER_ERROR = "render_error"


class MarkdownWorkbenchError(Exception):
    """Base for failures that are reported to the user as a status message."""

    kind: ErrorKind = ErrorKind.IO_ERROR

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class NotFoundError(MarkdownWorkbenchError):
    kind = ErrorKind.NOT_FOUND


class PermissionDeniedError(MarkdownWorkbenchError):
    kind = ErrorKind.PERMISSION_DENIED


class FileIOError(MarkdownWorkbenchError):
    kind = ErrorKind.IO_ERROR


class RenderError(MarkdownWorkbenchError):
    kind = ErrorKind.RENDER_ERROR


class WatchUnavailableError(Exception):
    """The OS refused to watch a path (missing file, permissions, platform limits)."""


def from_os_error(exc: OSError, path: Path) -> MarkdownWorkbenchError:
    """Translate an OSError raised for `path` into the matching domain error."""
    if isinstance(exc, FileNotFoundError):
        return NotFoundError(str(exc), path=path)
    if isinstance(exc, PermissionError):
        return PermissionDeniedError(str(exc), path=path)
    return FileIOError(str(exc), path=path)
