from __future__ import annotations

import logging
import time
from pathlib import Path

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from mdworkbench.domain.errors import WatchUnavailableError
from mdworkbench.domain.interfaces import IWatchBackend
from mdworkbench.domain.models import FileChangeEvent, WatchEventKind
from mdworkbench.utils.constants import WATCH_DEBOUNCE_MS, WATCH_RESUBSCRIBE_MS

logger = logging.getLogger(__name__)


class WatchController(QObject):
    """
    Owns at most one file watch and turns noisy OS notifications into
    one `changed` signal per quiet period.

    States: idle (no path) or watching(path). A path whose subscription was
    refused still counts as the target, so a pending re-subscription can
    retry it, but `is_watching` is False.
    """

    changed = pyqtSignal(object)  # FileChangeEvent

    def __init__(
        self,
        backend: IWatchBackend,
        *,
        debounce_ms: int = WATCH_DEBOUNCE_MS,
        resubscribe_ms: int = WATCH_RESUBSCRIBE_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._backend = backend
        self._path: Path | None = None
        self._handle: object | None = None
        self._generation = 0
        self._pending_kind: WatchEventKind | None = None

        self._debounce = QTimer(self)
        self._debounce.setSingleShot(True)
        self._debounce.setInterval(debounce_ms)
        self._debounce.timeout.connect(self._flush)

        self._resubscribe = QTimer(self)
        self._resubscribe.setSingleShot(True)
        self._resubscribe.setInterval(resubscribe_ms)
        self._resubscribe.timeout.connect(self._retry_watch)
        self._resubscribe_path: Path | None = None

    @property
    def watched_path(self) -> Path | None:
        return self._path

    @property
    def is_watching(self) -> bool:
        return self._handle is not None

    # ----------------------------- public API -----------------------------

    def watch(self, path: Path | None) -> None:
        """Retarget to `path`; None behaves like stop()."""
        self.stop()
        if path is None:
            return

        self._path = path
        generation = self._generation
        try:
            self._handle = self._backend.subscribe(
                path, lambda kind: self._on_raw_event(generation, kind)
            )
        except WatchUnavailableError as e:
            # Not fatal: the document stays usable, just without auto-reload.
            logger.debug("watch unavailable for %s: %s", path, e)
            self._handle = None
            return
        logger.debug("watching %s", path)

    def stop(self) -> None:
        self._debounce.stop()
        self._resubscribe.stop()
        self._resubscribe_path = None
        self._pending_kind = None
        # Callbacks carrying an older generation are dropped.
        self._generation += 1
        if self._handle is not None:
            handle, self._handle = self._handle, None
            self._backend.unsubscribe(handle)
        self._path = None

    # ----------------------------- internals -----------------------------

    def _on_raw_event(self, generation: int, kind: WatchEventKind) -> None:
        if generation != self._generation or self._path is None:
            return
        if self._pending_kind is not WatchEventKind.RENAMED:
            self._pending_kind = kind
        # start() on a running timer restarts it: the quiet period counts from the last event.
        self._debounce.start()

    def _flush(self) -> None:
        path, kind = self._path, self._pending_kind
        self._pending_kind = None
        if path is None or kind is None:
            return

        event = FileChangeEvent(path=path, kind=kind, observed_at=time.time())
        logger.debug("file changed: %s (%s)", path, kind.name)

        if kind is WatchEventKind.RENAMED:
            # The OS watch is probably stale now that the file was swapped out.
            self._resubscribe_path = path
            self._resubscribe.start()

        self.changed.emit(event)

    def _retry_watch(self) -> None:
        target, self._resubscribe_path = self._resubscribe_path, None
        if target is None or target != self._path:
            return
        logger.debug("re-subscribing %s after rename", target)
        self.watch(target)
