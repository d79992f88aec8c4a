from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from PyQt6.QtCore import QEvent, QObject
from PyQt6.QtWidgets import QApplication

from mdworkbench.di.container import Container
from mdworkbench.services.config.ini_config_service import IniConfigService
from mdworkbench.services.ui.main_window import MainWindow, bring_to_front
from mdworkbench.utils.constants import APP_NAME, APP_ORG
from mdworkbench.utils.paths import extract_markdown_path, is_markdown_file

logger = logging.getLogger(__name__)


class FileOpenFilter(QObject):
    """Routes macOS "Open With" (QFileOpenEvent) requests to the window."""

    def __init__(self, window: MainWindow) -> None:
        super().__init__(window)
        self._window = window

    def eventFilter(self, obj, event) -> bool:
        if event.type() != QEvent.Type.FileOpen:
            return False
        local = event.file()
        if local and is_markdown_file(local) and self._window.presenter:
            bring_to_front(self._window)
            self._window.presenter.open_path(Path(local))
        return True


def project_root() -> Path:
    """Directory holding the `mdworkbench` package; a source checkout keeps `config/` there."""
    return Path(__file__).resolve().parents[1]


def configure_logging(config: IniConfigService) -> None:
    logging.basicConfig(
        level=config.log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_app(argv: Sequence[str]) -> int:
    """
    Bootstraps Qt, composes the application via the DI container,
    and launches the main window.
    """
    config = IniConfigService(project_root=project_root())
    configure_logging(config)
    logger.debug("config loaded from %s", config.loaded_from)

    QApplication.setOrganizationName(APP_ORG)
    QApplication.setApplicationName(APP_NAME)
    app = QApplication(list(argv))

    container = Container.default(config=config)

    # Optional markdown file (path or file:// URL) among the CLI arguments
    start_path = extract_markdown_path(argv[1:])
    if start_path is not None:
        start_path = start_path.resolve()

    win = container.build_main_window(start_path=start_path, app_title=APP_NAME)
    app.installEventFilter(FileOpenFilter(win))
    win.show()

    return app.exec()
