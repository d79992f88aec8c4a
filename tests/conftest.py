from __future__ import annotations

import os
from pathlib import Path

import pytest

# Headless CI: must be set before the first QApplication is created.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtCore import QSettings  # noqa: E402
from PyQt6.QtWidgets import QApplication  # noqa: E402

from mdworkbench.domain.errors import WatchUnavailableError  # noqa: E402
from mdworkbench.services.file_service import FileService  # noqa: E402
from mdworkbench.services.markdown_renderer import MarkdownRenderer  # noqa: E402
from mdworkbench.services.settings_service import SettingsService  # noqa: E402


# --- QApplication fixture (no pytest-qt needed) ---
@pytest.fixture(scope="session")
def qapp():
    """Provide a QApplication for tests that need Qt.
    Creates one if not present; reuses existing otherwise.
    """
    app = QApplication.instance()
    created = False
    if app is None:
        app = QApplication([])
        created = True
    try:
        yield app
    finally:
        # Don't forcibly quit a shared app; only close if we created it here.
        if created:
            app.quit()


# --- Fake OS watch ---


class FakeWatchBackend:
    """In-memory watch backend; tests fire raw notifications with `fire()`."""

    def __init__(self) -> None:
        self.active: dict[int, tuple[Path, object]] = {}
        self.subscribed: list[Path] = []
        self.unsubscribed: list[Path] = []
        self.refuse: set[Path] = set()
        self._next = 0

    def subscribe(self, path: Path, on_event) -> object:
        if path in self.refuse:
            raise WatchUnavailableError(f"refused: {path}")
        self._next += 1
        self.active[self._next] = (path, on_event)
        self.subscribed.append(path)
        return self._next

    def unsubscribe(self, handle: object) -> None:
        path, _ = self.active.pop(handle)
        self.unsubscribed.append(path)

    def fire(self, path: Path, kind) -> int:
        """Deliver a raw event to every live subscription on `path`."""
        hits = [cb for p, cb in list(self.active.values()) if p == path]
        for cb in hits:
            cb(kind)
        return len(hits)

    @property
    def watched(self) -> list[Path]:
        return [p for p, _ in self.active.values()]


@pytest.fixture()
def watch_backend() -> FakeWatchBackend:
    return FakeWatchBackend()


# --- Other common fixtures ---


@pytest.fixture()
def tmp_settings_path(tmp_path: Path) -> Path:
    return tmp_path / "settings.ini"


@pytest.fixture()
def qsettings(tmp_settings_path: Path) -> QSettings:
    # Use an INI file so we don't touch system registry / platform stores
    s = QSettings(str(tmp_settings_path), QSettings.Format.IniFormat)
    s.clear()
    return s


@pytest.fixture()
def settings_service(qsettings: QSettings) -> SettingsService:
    return SettingsService(qsettings)


@pytest.fixture()
def file_service() -> FileService:
    return FileService()


@pytest.fixture()
def renderer() -> MarkdownRenderer:
    return MarkdownRenderer()
