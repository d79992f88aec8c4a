from __future__ import annotations

from typing import Any

from PyQt6.QtWidgets import QMessageBox

from mdworkbench.services.ui.ports.messages import IMessageService


class QtMessageService(IMessageService):
    """Qt-backed confirmation dialogs."""

    def ask(self, parent: Any | None, title: str, text: str) -> bool:
        # QMessageBox.question spins a nested event loop until answered.
        resp = QMessageBox.question(
            parent,
            title,
            text,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        return resp == QMessageBox.StandardButton.Yes
