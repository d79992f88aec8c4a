"""App constants and utilities."""

from .constants import (
    APP_NAME,
    APP_ORG,
    CSS_PREVIEW,
    HTML_TEMPLATE,
    SETTINGS_GEOMETRY,
    SETTINGS_VIEW_MODE,
)
from .paths import ensure_markdown_suffix, extract_markdown_path, is_markdown_file

__all__ = [
    "APP_ORG",
    "APP_NAME",
    "CSS_PREVIEW",
    "HTML_TEMPLATE",
    "SETTINGS_GEOMETRY",
    "SETTINGS_VIEW_MODE",
    "ensure_markdown_suffix",
    "extract_markdown_path",
    "is_markdown_file",
]
