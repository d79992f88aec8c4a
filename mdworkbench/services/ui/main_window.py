from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import QByteArray, QSignalBlocker
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QLabel,
    QMainWindow,
    QStackedWidget,
    QStatusBar,
    QTextBrowser,
    QTextEdit,
    QToolBar,
)

from mdworkbench.domain.interfaces import ISettingsService
from mdworkbench.domain.models import ViewMode

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Thin PyQt window: shows what the reconciler tells it and forwards user actions."""

    def __init__(
        self,
        settings: ISettingsService,
        *,
        app_title: str = "md-workbench",
        prefer_web_engine: bool = True,
    ) -> None:
        super().__init__()
        self._app_title = app_title
        self.setWindowTitle(app_title)
        self.resize(1100, 760)

        self.settings = settings
        self.presenter = None
        self._modified = False

        # Widgets
        self.editor = QTextEdit(self)
        self.editor.setAcceptRichText(False)
        self.editor.setTabStopDistance(4 * self.editor.fontMetrics().horizontalAdvance(" "))

        # --- Preview: prefer QWebEngineView, fallback to QTextBrowser ---
        self.preview = self._create_preview_widget(prefer_web_engine)

        # Edit and Render are exclusive: one page at a time.
        self.stack = QStackedWidget(self)
        self.stack.addWidget(self.editor)
        self.stack.addWidget(self.preview)
        self.setCentralWidget(self.stack)

        self.path_label = QLabel(self)
        self.setStatusBar(QStatusBar(self))
        self.statusBar().addPermanentWidget(self.path_label)

        # Signals
        self.editor.textChanged.connect(self._on_text_changed)

        # UI
        self._build_actions()
        self._build_toolbar()
        self._build_menu()

        geo = self.settings.get_geometry()
        if isinstance(geo, (bytes, bytearray)):
            self.restoreGeometry(QByteArray(geo))

        # DnD
        self.setAcceptDrops(True)

    def attach_presenter(self, presenter) -> None:
        self.presenter = presenter

    # ---------- UI creation ----------
    def _build_actions(self):
        self.exit_action = QAction("&Exit", self)
        self.exit_action.setShortcut("Ctrl+Q")
        self.exit_action.setStatusTip("Exit application")
        self.exit_action.triggered.connect(self.close)

        self.act_new = QAction(
            "New", self, shortcut=QKeySequence.StandardKey.New, triggered=self._new_file
        )
        self.act_open = QAction(
            "Open…",
            self,
            shortcut=QKeySequence.StandardKey.Open,
            triggered=self._open_dialog,
        )
        self.act_save = QAction(
            "Save", self, shortcut=QKeySequence.StandardKey.Save, triggered=self._save
        )
        self.act_save_as = QAction(
            "Save As…",
            self,
            shortcut=QKeySequence.StandardKey.SaveAs,
            triggered=self._save_as,
        )
        self.act_toggle_mode = QAction(
            "Edit", self, shortcut="Ctrl+E", triggered=self._toggle_mode
        )

    def _build_toolbar(self):
        tb = QToolBar("Main", self)
        tb.setMovable(False)
        for a in (self.act_new, self.act_open, self.act_save, self.act_save_as):
            tb.addAction(a)
        tb.addSeparator()
        tb.addAction(self.act_toggle_mode)
        self.addToolBar(tb)

    def _build_menu(self):
        m = self.menuBar()
        filem = m.addMenu("&File")
        filem.addAction(self.act_new)
        filem.addAction(self.act_open)
        filem.addSeparator()
        filem.addAction(self.act_save)
        filem.addAction(self.act_save_as)
        filem.addSeparator()
        filem.addAction(self.exit_action)

        viewm = m.addMenu("&View")
        viewm.addAction(self.act_toggle_mode)

    # ---------- Actions ----------
    def _new_file(self):
        if self.presenter:
            self.presenter.new_requested()

    def _open_dialog(self):
        if self.presenter:
            self.presenter.open_via_dialog()

    def _save(self):
        if self.presenter:
            self.presenter.save_requested()

    def _save_as(self):
        if self.presenter:
            self.presenter.save_as_requested()

    def _toggle_mode(self):
        if self.presenter:
            self.presenter.toggle_view_mode()

    def _on_text_changed(self):
        if self.presenter:
            self.presenter.edited(self.editor.toPlainText())

    # ---------- IDocumentView ----------
    def get_editor_text(self) -> str:
        return self.editor.toPlainText()

    def set_editor_text(self, text: str) -> None:
        # Programmatic loads are not user edits.
        with QSignalBlocker(self.editor):
            self.editor.setPlainText(text)

    def set_preview_html(self, html: str) -> None:
        # Both QWebEngineView and QTextBrowser implement setHtml(html).
        self.preview.setHtml(html)

    def show_view_mode(self, mode: ViewMode) -> None:
        if mode is ViewMode.EDIT:
            self.stack.setCurrentWidget(self.editor)
            self.act_toggle_mode.setText("Preview")
            self.editor.setFocus()
        else:
            self.stack.setCurrentWidget(self.preview)
            self.act_toggle_mode.setText("Edit")

    def set_path_label(self, text: str) -> None:
        self.path_label.setText(text)
        self._update_title()

    def set_modified(self, modified: bool) -> None:
        self._modified = modified
        self._update_title()

    def is_modified(self) -> bool:
        return self._modified

    def show_status(self, text: str, msec: int = 3000) -> None:
        self.statusBar().showMessage(text, msec)

    # ---------- Helpers ----------
    def _update_title(self):
        doc = self.presenter.session.path if self.presenter else None
        name = doc.name if doc else "Untitled"
        star = " •" if self._modified else ""
        self.setWindowTitle(f"{name}{star} — {self._app_title}")

    # ---------- DnD ----------
    def dragEnterEvent(self, e):
        if e.mimeData().hasUrls():
            e.acceptProposedAction()

    def dropEvent(self, e):
        urls = e.mimeData().urls()
        if not urls:
            return
        local = urls[0].toLocalFile()
        if local and self.presenter:
            self.presenter.open_path(Path(local))

    # ---------- Close ----------
    def closeEvent(self, event):
        if self.presenter:
            # A close arriving while another trigger is in flight is refused, not queued.
            if self.presenter.busy or not self.presenter.close_requested():
                event.ignore()
                return
        self.settings.set_geometry(bytes(self.saveGeometry()))
        super().closeEvent(event)

    # ---------- Internal: preview creation ----------
    def _create_preview_widget(self, prefer_web_engine: bool):
        """
        Prefer QWebEngineView (full CSS support), fall back to QTextBrowser.
        The import is guarded so the app runs without Qt WebEngine installed.
        """
        if prefer_web_engine:
            try:
                from PyQt6.QtWebEngineWidgets import QWebEngineView  # type: ignore

                return QWebEngineView(self)
            except Exception as e:
                logger.info("QWebEngineView unavailable (%s); using QTextBrowser", e)
        w = QTextBrowser(self)
        w.setOpenExternalLinks(True)
        return w


def bring_to_front(window: MainWindow) -> None:
    if window.isMinimized():
        window.showNormal()
    window.raise_()
    window.activateWindow()