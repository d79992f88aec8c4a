from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import QFileDevice, QIODevice, QSaveFile

from mdworkbench.domain.errors import (
    FileIOError,
    MarkdownWorkbenchError,
    NotFoundError,
    PermissionDeniedError,
    from_os_error,
)
from mdworkbench.domain.interfaces import IFileService

logger = logging.getLogger(__name__)


class FileService(IFileService):
    """UTF-8 reads and atomic writes for text files."""

    def read_text(self, path: Path) -> str:
        try:
            # Bytes, so CRLF line endings survive a round trip.
            return path.read_bytes().decode("utf-8")
        except OSError as e:
            raise from_os_error(e, path) from e
        except UnicodeDecodeError as e:
            raise FileIOError(f"Not valid UTF-8: {path}", path=path) from e

    def write_text(self, path: Path, text: str) -> None:
        # QSaveFile writes a temp file and renames it over the target on commit.
        sf = QSaveFile(str(path))
        if not sf.open(QIODevice.OpenModeFlag.WriteOnly):
            raise self._save_error(sf, path, "Cannot open for write")
        sf.write(text.encode("utf-8"))
        if not sf.commit():
            raise self._save_error(sf, path, "Commit failed")
        logger.debug("wrote %d chars to %s", len(text), path)

    @staticmethod
    def _save_error(sf, path: Path, what: str) -> MarkdownWorkbenchError:
        msg = f"{what}: {path}"
        if not path.parent.exists():
            return NotFoundError(msg, path=path)
        if sf.error() == QFileDevice.FileError.PermissionsError:
            return PermissionDeniedError(msg, path=path)
        return FileIOError(msg, path=path)
