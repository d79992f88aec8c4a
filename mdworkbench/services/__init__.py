"""Concrete service implementations."""

from .file_service import FileService
from .markdown_renderer import MarkdownRenderer
from .settings_service import SettingsService

__all__ = ["FileService", "MarkdownRenderer", "SettingsService"]
