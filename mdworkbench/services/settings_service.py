from __future__ import annotations

from PyQt6.QtCore import QByteArray, QSettings

from mdworkbench.domain.interfaces import ISettingsService
from mdworkbench.domain.models import ViewMode
from mdworkbench.utils.constants import SETTINGS_GEOMETRY, SETTINGS_VIEW_MODE


class SettingsService(ISettingsService):
    """Persist small UI bits: window geometry and the edit/render preference."""

    def __init__(self, qsettings: QSettings) -> None:
        self._s = qsettings

    def get_geometry(self) -> bytes | None:
        v = self._s.value(SETTINGS_GEOMETRY)
        return bytes(v) if isinstance(v, QByteArray) else None

    def set_geometry(self, blob: bytes) -> None:
        self._s.setValue(SETTINGS_GEOMETRY, QByteArray(blob))

    def get_view_mode(self) -> ViewMode:
        return ViewMode.parse(self._s.value(SETTINGS_VIEW_MODE))

    def set_view_mode(self, mode: ViewMode) -> None:
        self._s.setValue(SETTINGS_VIEW_MODE, mode.value)
