from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Protocol

from mdworkbench.domain.models import ViewMode, WatchEventKind


class IMarkdownRenderer(Protocol):
    """Convert Markdown text to sanitized HTML."""

    def render(self, markdown_text: str) -> str:
        """Sanitized body HTML. Raises RenderError on failure."""
        ...

    def to_html(self, markdown_text: str) -> str:
        """Full HTML page (template + CSS) around the sanitized body."""
        ...


class IFileService(Protocol):
    """Read/write UTF-8 text files. Writes should be atomic when possible."""

    def read_text(self, path: Path) -> str: ...
    def write_text(self, path: Path, text: str) -> None: ...


class ISettingsService(Protocol):
    """Persist and retrieve lightweight UI state."""

    def get_geometry(self) -> bytes | None: ...
    def set_geometry(self, blob: bytes) -> None: ...
    def get_view_mode(self) -> ViewMode: ...
    def set_view_mode(self, mode: ViewMode) -> None: ...


class IConfigService(Protocol):
    def get(self, section: str, key: str, default: str | None = None) -> str | None: ...
    def get_int(self, section: str, key: str, default: int | None = None) -> int | None: ...
    def get_bool(self, section: str, key: str, default: bool | None = None) -> bool | None: ...
    def as_dict(self) -> Mapping[str, Mapping[str, str]]: ...


WatchCallback = Callable[[WatchEventKind], None]


class IWatchBackend(Protocol):
    """OS-level file watch. One handle per subscribed path."""

    def subscribe(self, path: Path, on_event: WatchCallback) -> object:
        """Return an opaque handle. Raises WatchUnavailableError if the path can't be watched."""
        ...

    def unsubscribe(self, handle: object) -> None: ...
