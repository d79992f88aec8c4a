from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import QFileSystemWatcher, QObject

from mdworkbench.domain.errors import WatchUnavailableError
from mdworkbench.domain.interfaces import IWatchBackend, WatchCallback
from mdworkbench.domain.models import WatchEventKind

logger = logging.getLogger(__name__)


class QtWatchBackend(IWatchBackend):
    """
    QFileSystemWatcher-backed watch, one watcher per handle.

    Qt has no event-kind tag: when a file is removed or replaced (atomic
    save via rename) the watcher silently drops the path, so a notification
    for a path that is gone or no longer watched is reported as RENAMED.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def subscribe(self, path: Path, on_event: WatchCallback) -> object:
        target = str(path)
        watcher = QFileSystemWatcher(self._parent)
        if not watcher.addPath(target):
            watcher.deleteLater()
            raise WatchUnavailableError(f"Cannot watch: {path}")

        def _on_file_changed(changed: str) -> None:
            gone = not Path(changed).exists() or changed not in watcher.files()
            on_event(WatchEventKind.RENAMED if gone else WatchEventKind.CHANGED)

        watcher.fileChanged.connect(_on_file_changed)
        return watcher

    def unsubscribe(self, handle: object) -> None:
        if not isinstance(handle, QFileSystemWatcher):
            return
        handle.blockSignals(True)
        files = handle.files()
        if files:
            handle.removePaths(files)
        handle.deleteLater()
