from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from PyQt6.QtCore import QUrl

from mdworkbench.utils.constants import MARKDOWN_EXTENSIONS


def is_markdown_file(p: str | Path) -> bool:
    return str(p).lower().endswith(MARKDOWN_EXTENSIONS)


def ensure_markdown_suffix(path: Path) -> Path:
    """Append `.md` unless the name already carries a markdown extension."""
    if is_markdown_file(path):
        return path
    return path.with_name(path.name + ".md")


def normalize_arg_to_path(arg: str) -> Path | None:
    """Plain paths pass through; file:// URLs become local paths; anything else is None."""
    if not isinstance(arg, str) or not arg:
        return None
    if arg.startswith("file://"):
        url = QUrl(arg)
        if not url.isValid() or url.host() not in ("", "localhost"):
            return None
        url.setHost("")
        local = url.toLocalFile()
        return Path(local) if local else None
    return Path(arg)


def extract_markdown_path(argv: Iterable[str]) -> Path | None:
    """First argument naming a markdown file, or None."""
    for raw in argv:
        p = normalize_arg_to_path(raw)
        if p is not None and is_markdown_file(p):
            return p
    return None
