from __future__ import annotations

from pathlib import Path

from PyQt6.QtCore import QSettings

from mdworkbench.domain.interfaces import (
    IFileService,
    IMarkdownRenderer,
    ISettingsService,
    IWatchBackend,
)
from mdworkbench.services.config.ini_config_service import IniConfigService
from mdworkbench.services.file_service import FileService
from mdworkbench.services.markdown_renderer import MarkdownRenderer
from mdworkbench.services.settings_service import SettingsService
from mdworkbench.services.ui.adapters import QtFileDialogService, QtMessageService
from mdworkbench.services.ui.main_window import MainWindow
from mdworkbench.services.ui.ports.dialogs import IFileDialogService
from mdworkbench.services.ui.ports.messages import IMessageService
from mdworkbench.services.ui.presenters.document_reconciler import DocumentReconciler
from mdworkbench.services.watch import QtWatchBackend, WatchController
from mdworkbench.utils.constants import APP_NAME, APP_ORG


class Container:
    """
    Lightweight DI container:
      - Wires default services if not provided
      - Builds the window, its watch controller and the reconciler that drives it
    """

    def __init__(
        self,
        renderer: IMarkdownRenderer | None = None,
        files: IFileService | None = None,
        settings: ISettingsService | None = None,
        qsettings: QSettings | None = None,
        config: IniConfigService | None = None,
        dialogs: IFileDialogService | None = None,
        messages: IMessageService | None = None,
        watch_backend: IWatchBackend | None = None,
    ) -> None:
        self.renderer: IMarkdownRenderer = renderer or MarkdownRenderer()
        self.file_service: IFileService = files or FileService()
        self.settings_service: ISettingsService = settings or SettingsService(
            qsettings or QSettings()
        )
        self.config = config or IniConfigService()

        # UI ports (Qt-backed adapters by default)
        self.dialogs: IFileDialogService = dialogs or QtFileDialogService()
        self.messages: IMessageService = messages or QtMessageService()
        self.watch_backend: IWatchBackend = watch_backend or QtWatchBackend()

    @staticmethod
    def default(
        qsettings: QSettings | None = None,
        *,
        config: IniConfigService | None = None,
        organization: str = APP_ORG,
        application: str = APP_NAME,
    ) -> Container:
        if qsettings is None:
            qsettings = QSettings(organization, application)
        return Container(qsettings=qsettings, config=config)

    # ---------- UI factories ----------

    def build_reconciler(self, window: MainWindow) -> DocumentReconciler:
        watcher = WatchController(
            self.watch_backend,
            debounce_ms=self.config.watch_debounce_ms(),
            resubscribe_ms=self.config.watch_resubscribe_ms(),
            parent=window,
        )
        return DocumentReconciler(
            view=window,
            renderer=self.renderer,
            files=self.file_service,
            settings=self.settings_service,
            messages=self.messages,
            dialogs=self.dialogs,
            watcher=watcher,
            status_timeout_ms=self.config.status_timeout_ms(),
        )

    def build_main_window(
        self,
        *,
        start_path: Path | None = None,
        app_title: str = APP_NAME,
        prefer_web_engine: bool = True,
    ) -> MainWindow:
        """Create the window, attach its reconciler, and open `start_path` if given."""
        window = MainWindow(
            settings=self.settings_service,
            app_title=app_title,
            prefer_web_engine=prefer_web_engine,
        )
        presenter = self.build_reconciler(window)
        window.attach_presenter(presenter)
        if start_path is not None:
            presenter.open_path(start_path)
        return window
