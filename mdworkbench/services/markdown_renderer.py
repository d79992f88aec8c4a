# mdworkbench/services/markdown_renderer.py
from __future__ import annotations

import markdown
import nh3

from mdworkbench.domain.errors import RenderError
from mdworkbench.domain.interfaces import IMarkdownRenderer
from mdworkbench.utils.constants import CSS_PREVIEW, HTML_TEMPLATE

# Task-list checkboxes are the only non-default element we let through.
_ALLOWED_TAGS = set(nh3.ALLOWED_TAGS) | {"input"}
_ALLOWED_ATTRIBUTES = {
    **{tag: set(attrs) for tag, attrs in nh3.ALLOWED_ATTRIBUTES.items()},
    "input": {"type", "checked", "disabled"},
}


class MarkdownRenderer(IMarkdownRenderer):
    """
    Converts Markdown to sanitized HTML.

    Python-Markdown does the conversion (GitHub-ish flavour via pymdownx:
    ~~strike~~, task lists, bare-URL autolinks); nh3 then strips anything
    script-capable. Raw HTML in the source is allowed through the parser and
    left to the sanitizer.
    """

    def __init__(self) -> None:
        self._exts = [
            "extra",
            "sane_lists",
            "smarty",
            "pymdownx.tilde",
            "pymdownx.tasklist",
            "pymdownx.magiclink",
        ]
        self._ext_cfg = {
            "pymdownx.tasklist": {"custom_checkbox": False},
        }

    def render(self, markdown_text: str) -> str:
        try:
            raw = markdown.markdown(
                markdown_text or "",
                extensions=self._exts,
                extension_configs=self._ext_cfg,
                output_format="html",
            )
            return nh3.clean(raw, tags=_ALLOWED_TAGS, attributes=_ALLOWED_ATTRIBUTES)
        except Exception as e:
            raise RenderError(str(e) or type(e).__name__) from e

    def to_html(self, markdown_text: str) -> str:
        return HTML_TEMPLATE.format(css=CSS_PREVIEW, body=self.render(markdown_text))
