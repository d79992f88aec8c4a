# mdworkbench/services/config/ini_config_service.py
from __future__ import annotations

import configparser
import logging
from collections.abc import Mapping
from pathlib import Path

from platformdirs import user_config_dir

from mdworkbench.domain.interfaces import IConfigService
from mdworkbench.utils.constants import (
    STATUS_TIMEOUT_MS,
    WATCH_DEBOUNCE_MS,
    WATCH_RESUBSCRIBE_MS,
)

logger = logging.getLogger(__name__)


class IniConfigService(IConfigService):
    r"""
    INI-backed configuration reader.

    Load order (first hit wins):
      1. Explicit path provided at construction
      2. User config dir (e.g., ~/.config/md-workbench/config.ini or %APPDATA%\md-workbench\config.ini)
      3. Project default at <repo>/config/config.ini  (optional)

    Recognised keys:
      [watch]   debounce_ms, resubscribe_ms
      [ui]      status_timeout_ms
      [logging] level
    """

    DEFAULT_APP_DIR = "md-workbench"
    DEFAULT_FILE = "config.ini"

    def __init__(self, explicit_path: Path | None = None, project_root: Path | None = None):
        self._parser = configparser.ConfigParser()
        self._loaded_from: Path | None = None

        candidates: list[Path] = []
        if explicit_path:
            candidates.append(explicit_path)
        candidates.append(Path(user_config_dir(self.DEFAULT_APP_DIR)) / self.DEFAULT_FILE)
        if project_root:
            candidates.append(project_root / "config" / self.DEFAULT_FILE)

        for path in candidates:
            if not path.is_file():
                continue
            try:
                with path.open("r", encoding="utf-8") as fh:
                    self._parser.read_file(fh)
            except (OSError, configparser.Error) as e:
                # A broken config file must not keep the editor from starting.
                logger.warning("ignoring unreadable config %s: %s", path, e)
                self._parser = configparser.ConfigParser()
                continue
            self._loaded_from = path
            break

    # ----- IConfigService -----

    def get(self, section: str, key: str, default: str | None = None) -> str | None:
        if section not in self._parser:
            return default
        return self._parser[section].get(key, default)

    def get_int(self, section: str, key: str, default: int | None = None) -> int | None:
        val = self.get(section, key, None)
        if val is None:
            return default
        try:
            return int(val.strip())
        except ValueError:
            return default

    def get_bool(self, section: str, key: str, default: bool | None = None) -> bool | None:
        val = self.get(section, key, None)
        if val is None:
            return default
        truth = {"1", "true", "yes", "y", "on"}
        falsy = {"0", "false", "no", "n", "off"}
        s = val.strip().lower()
        if s in truth:
            return True
        if s in falsy:
            return False
        return default

    def as_dict(self) -> Mapping[str, Mapping[str, str]]:
        return {sect: dict(self._parser[sect]) for sect in self._parser.sections()}

    # ----- Typed settings -----

    def watch_debounce_ms(self) -> int:
        return self._positive("watch", "debounce_ms", WATCH_DEBOUNCE_MS)

    def watch_resubscribe_ms(self) -> int:
        return self._positive("watch", "resubscribe_ms", WATCH_RESUBSCRIBE_MS)

    def status_timeout_ms(self) -> int:
        return self._positive("ui", "status_timeout_ms", STATUS_TIMEOUT_MS)

    def log_level(self) -> int:
        name = (self.get("logging", "level", "WARNING") or "WARNING").strip().upper()
        level = logging.getLevelName(name)
        return level if isinstance(level, int) else logging.WARNING

    @property
    def loaded_from(self) -> Path | None:
        """For diagnostics."""
        return self._loaded_from

    def _positive(self, section: str, key: str, default: int) -> int:
        v = self.get_int(section, key, default)
        return v if v is not None and v > 0 else default
