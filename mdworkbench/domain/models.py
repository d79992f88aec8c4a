from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path


class ViewMode(Enum):
    EDIT = "edit"
    RENDER = "render"

    @classmethod
    def parse(cls, value: object) -> ViewMode:
        """Unknown or missing values fall back to RENDER."""
        if isinstance(value, ViewMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.RENDER


@dataclass
class DocumentSession:
    """
    The open document: in-memory buffer plus the last-saved snapshot.

    `dirty` is always derived from the two texts; it is never stored.
    """

    path: Path | None
    buffer: str
    last_saved: str

    @property
    def dirty(self) -> bool:
        return self.buffer != self.last_saved

    @classmethod
    def empty(cls) -> DocumentSession:
        return cls(path=None, buffer="", last_saved="")

    @classmethod
    def loaded(cls, path: Path, content: str) -> DocumentSession:
        return cls(path=path, buffer=content, last_saved=content)

    def mark_saved(self, content: str) -> None:
        self.last_saved = content


class WatchEventKind(Enum):
    CHANGED = auto()
    RENAMED = auto()  # renamed, removed or replaced


@dataclass(frozen=True)
class FileChangeEvent:
    path: Path
    kind: WatchEventKind
    observed_at: float
