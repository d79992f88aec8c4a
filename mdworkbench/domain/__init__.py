"""Domain layer: interfaces, errors and simple models (dataclasses)."""

from .errors import (
    ErrorKind,
    FileIOError,
    MarkdownWorkbenchError,
    NotFoundError,
    PermissionDeniedError,
    RenderError,
    WatchUnavailableError,
)
from .interfaces import (
    IConfigService,
    IFileService,
    IMarkdownRenderer,
    ISettingsService,
    IWatchBackend,
)
from .models import DocumentSession, FileChangeEvent, ViewMode, WatchEventKind

__all__ = [
    "IMarkdownRenderer",
    "IFileService",
    "ISettingsService",
    "IConfigService",
    "IWatchBackend",
    "DocumentSession",
    "FileChangeEvent",
    "ViewMode",
    "WatchEventKind",
    "ErrorKind",
    "MarkdownWorkbenchError",
    "NotFoundError",
    "PermissionDeniedError",
    "FileIOError",
    "RenderError",
    "WatchUnavailableError",
]
