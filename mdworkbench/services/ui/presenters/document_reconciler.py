from __future__ import annotations

import functools
import html
import logging
from collections import deque
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from mdworkbench.domain.errors import ErrorKind, MarkdownWorkbenchError
from mdworkbench.domain.interfaces import IFileService, IMarkdownRenderer, ISettingsService
from mdworkbench.domain.models import DocumentSession, FileChangeEvent, ViewMode
from mdworkbench.services.ui.ports.dialogs import IFileDialogService
from mdworkbench.services.ui.ports.messages import IMessageService
from mdworkbench.services.watch.controller import WatchController
from mdworkbench.utils.constants import (
    CSS_PREVIEW,
    DEFAULT_SAVE_NAME,
    HTML_TEMPLATE,
    OPEN_FILTER,
    SAVE_FILTER,
    STATUS_TIMEOUT_MS,
)
from mdworkbench.utils.paths import ensure_markdown_suffix

logger = logging.getLogger(__name__)

NO_FILE_LABEL = "No file loaded"
DISCARD_TITLE = "Discard changes?"
DISCARD_ON_OPEN = "You have unsaved edits.\n\nOpen another file and discard them?"
DISCARD_ON_NEW = "You have unsaved edits.\n\nStart a new note and discard them?"
DISCARD_ON_CLOSE = "You have unsaved edits.\n\nClose and discard them?"
RELOAD_TITLE = "File changed on disk"
RELOAD_PROMPT = "This file changed on disk.\n\nReload and discard your unsaved edits?"


@runtime_checkable
class IDocumentView(Protocol):
    """Passive view surface (implemented by the Qt MainWindow)."""

    # editor/preview
    def set_editor_text(self, text: str) -> None:
        """Replace the editor content without echoing it back as an edit."""
        ...

    def set_preview_html(self, html: str) -> None: ...
    def show_view_mode(self, mode: ViewMode) -> None: ...

    # window chrome
    def set_path_label(self, text: str) -> None: ...
    def set_modified(self, modified: bool) -> None: ...

    # status
    def show_status(self, text: str, msec: int = 3000) -> None: ...


def render_error_html(exc: BaseException) -> str:
    msg = str(exc) or type(exc).__name__
    body = f"<pre><code>Markdown render error:\n{html.escape(msg)}</code></pre>"
    return HTML_TEMPLATE.format(css=CSS_PREVIEW, body=body)


def _serialized(fn: Callable[..., Any]) -> Callable[..., Any]:
    """
    Run at most one trigger at a time.

    Modal dialogs spin nested event loops, so a watch event (or a queued UI
    action) can arrive while a trigger is suspended on a prompt. Such calls are
    queued and run, in order, once the in-flight trigger returns. A queued call
    returns None to its caller.
    """

    @functools.wraps(fn)
    def wrapper(self: DocumentReconciler, *args: Any, **kwargs: Any) -> Any:
        if self._busy:
            logger.debug("queueing %s while another trigger is in flight", fn.__name__)
            self._pending.append(functools.partial(wrapper, self, *args, **kwargs))
            return None
        self._busy = True
        try:
            return fn(self, *args, **kwargs)
        finally:
            self._busy = False
            self._drain()

    return wrapper


class DocumentReconciler:
    """
    Keeps the editor buffer, the last-saved snapshot and the file on disk
    consistent.

    Owns the single DocumentSession. User actions (open/edit/save) and watch
    notifications all come through here; every decision to discard text is
    confirmed with the user first.
    """

    def __init__(
        self,
        view: IDocumentView,
        renderer: IMarkdownRenderer,
        files: IFileService,
        settings: ISettingsService,
        messages: IMessageService,
        dialogs: IFileDialogService,
        watcher: WatchController,
        *,
        status_timeout_ms: int = STATUS_TIMEOUT_MS,
    ) -> None:
        self.view = view
        self.renderer = renderer
        self.files = files
        self.settings = settings
        self.messages = messages
        self.dialogs = dialogs
        self.watcher = watcher
        self._status_ms = status_timeout_ms

        self.session = DocumentSession.empty()
        self.view_mode = settings.get_view_mode()
        self._busy = False
        self._pending: deque[Callable[[], Any]] = deque()

        watcher.changed.connect(self._on_file_changed)

        self.view.set_path_label(NO_FILE_LABEL)
        self.view.set_modified(False)
        self.view.show_view_mode(self.view_mode)
        self.render_preview()

    # ----------------------------- triggers -----------------------------

    @_serialized
    def open_requested(self, new_path: Path, content: str) -> bool:
        """Replace the session with `content` loaded from `new_path`."""
        return self._open(new_path, content)

    @_serialized
    def edited(self, text: str) -> None:
        self.session.buffer = text
        self.view.set_modified(self.session.dirty)
        if self.view_mode is ViewMode.RENDER:
            self.render_preview()

    @_serialized
    def save_requested(self) -> bool:
        path = self.session.path
        if path is None:
            path = self._choose_save_path(DEFAULT_SAVE_NAME)
            if path is None:
                return False
        return self._write(path)

    @_serialized
    def external_change_detected(self, changed_path: Path) -> None:
        path = self.session.path
        if path is None or changed_path != path:
            logger.debug("ignoring stale change event for %s", changed_path)
            return

        try:
            fresh = self.files.read_text(path)
        except MarkdownWorkbenchError as e:
            # The watch stays up; the next event is processed normally.
            logger.warning("reload of %s failed: %s", path, e)
            if e.kind is ErrorKind.NOT_FOUND:
                self._status("File missing on disk")
            else:
                self._status(f"Reload failed: {e.kind.value}")
            return

        session = self.session
        if not session.dirty:
            if fresh == session.buffer:
                # Usually the echo of our own save.
                session.mark_saved(fresh)
                return
        elif not self._confirm(RELOAD_TITLE, RELOAD_PROMPT):
            logger.info("kept local edits for %s", path)
            return

        self._replace_text(fresh)
        self._status("Reloaded from disk")
        logger.info("reloaded %s from disk", path)

    # ----------------------------- other actions -----------------------------

    @_serialized
    def open_path(self, path: Path) -> bool:
        """Read `path` and open it (launch argument, drag & drop, Finder "Open With")."""
        try:
            content = self.files.read_text(path)
        except MarkdownWorkbenchError as e:
            self._report_open_failure(path, e)
            return False
        return self._open(path, content)

    @_serialized
    def open_via_dialog(self) -> bool:
        if not self._confirm_discard(DISCARD_ON_OPEN):
            return False
        start_dir = str(self.session.path.parent) if self.session.path else None
        path = self.dialogs.get_open_file(self.view, "Open Markdown File", start_dir, OPEN_FILTER)
        if path is None:
            return False
        try:
            content = self.files.read_text(path)
        except MarkdownWorkbenchError as e:
            self._report_open_failure(path, e)
            return False
        self._load(path, content)
        self._status("Opened")
        return True

    @_serialized
    def save_as_requested(self) -> bool:
        suggested = str(self.session.path) if self.session.path else DEFAULT_SAVE_NAME
        path = self._choose_save_path(suggested)
        if path is None:
            return False
        return self._write(path)

    @_serialized
    def new_requested(self) -> bool:
        if not self._confirm_discard(DISCARD_ON_NEW):
            return False
        self.watcher.stop()
        self.session = DocumentSession.empty()
        self.view.set_editor_text("")
        self.view.set_path_label(NO_FILE_LABEL)
        self.view.set_modified(False)
        if self.view_mode is ViewMode.RENDER:
            self.render_preview()
        return True

    @_serialized
    def close_requested(self) -> bool:
        """True if the window may close; releases the watch when it may."""
        if not self._confirm_discard(DISCARD_ON_CLOSE):
            return False
        self.watcher.stop()
        return True

    def toggle_view_mode(self) -> ViewMode:
        nxt = ViewMode.EDIT if self.view_mode is ViewMode.RENDER else ViewMode.RENDER
        self.set_view_mode(nxt)
        return nxt

    def set_view_mode(self, mode: ViewMode) -> None:
        self.view_mode = ViewMode.parse(mode)
        self.settings.set_view_mode(self.view_mode)
        if self.view_mode is ViewMode.RENDER:
            self.render_preview()
        self.view.show_view_mode(self.view_mode)

    def render_preview(self) -> None:
        try:
            page = self.renderer.to_html(self.session.buffer)
        except Exception as e:  # a broken renderer must not take the session down
            logger.warning("markdown render failed: %s", e)
            page = render_error_html(e)
        self.view.set_preview_html(page)

    # ----------------------------- helpers -----------------------------

    @property
    def busy(self) -> bool:
        """True while a trigger is in flight (e.g. suspended on a prompt)."""
        return self._busy

    def _on_file_changed(self, event: FileChangeEvent) -> None:
        self.external_change_detected(event.path)

    def _drain(self) -> None:
        while self._pending and not self._busy:
            task = self._pending.popleft()
            task()

    def _open(self, new_path: Path, content: str) -> bool:
        if not self._confirm_discard(DISCARD_ON_OPEN):
            return False
        self._load(new_path, content)
        self._status("Opened")
        return True

    def _load(self, path: Path, content: str) -> None:
        self.session = DocumentSession.loaded(path, content)
        self.watcher.watch(path)
        self.view.set_path_label(str(path))
        self._show_buffer()
        logger.info("opened %s", path)

    def _replace_text(self, content: str) -> None:
        self.session.buffer = content
        self.session.mark_saved(content)
        self._show_buffer()

    def _show_buffer(self) -> None:
        self.view.set_editor_text(self.session.buffer)
        self.view.set_modified(self.session.dirty)
        if self.view_mode is ViewMode.RENDER:
            self.render_preview()

    def _choose_save_path(self, suggested: str) -> Path | None:
        path = self.dialogs.get_save_file(self.view, "Save Markdown File", suggested, SAVE_FILTER)
        return ensure_markdown_suffix(path) if path is not None else None

    def _write(self, path: Path) -> bool:
        content = self.session.buffer
        try:
            self.files.write_text(path, content)
        except MarkdownWorkbenchError as e:
            logger.warning("save to %s failed: %s", path, e)
            self._status(f"Save failed: {e.kind.value}")
            return False
        self.session.path = path
        self.session.mark_saved(content)
        self.watcher.watch(path)
        self.view.set_path_label(str(path))
        self.view.set_modified(self.session.dirty)
        self._status("Saved")
        return True

    def _report_open_failure(self, path: Path, e: MarkdownWorkbenchError) -> None:
        logger.warning("open of %s failed: %s", path, e)
        self._status(f"Open failed: {e.kind.value}")
        self.view.set_path_label(str(path))

    def _confirm_discard(self, text: str) -> bool:
        if not self.session.dirty:
            return True
        return self._confirm(DISCARD_TITLE, text)

    def _confirm(self, title: str, text: str) -> bool:
        return self.messages.ask(self.view, title, text)

    def _status(self, text: str) -> None:
        self.view.show_status(text, self._status_ms)
