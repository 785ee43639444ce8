# mirrormd/services/markdown_renderer.py
from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, replace
from typing import Any

import markdown
from markdown.extensions import Extension
from markdown.postprocessors import Postprocessor
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from mirrormd.domain.interfaces import IMarkdownRenderer
from mirrormd.utils.constants import CSS_PREVIEW, HTML_TEMPLATE

log = logging.getLogger(__name__)

# UI theme -> (body class, Pygments palette)
UI_THEME_STYLES: dict[str, tuple[str, str]] = {
    "light": ("solarized-light", "solarized-light"),
    "dark": ("solarized-dark", "solarized-dark"),
}


_TAG_RE = re.compile(r"(<[^>]*>)")


class QuoteEscapePostprocessor(Postprocessor):
    """Escape quote characters in text between tags (attribute values are already escaped)."""

    def run(self, text: str) -> str:
        parts = _TAG_RE.split(text)
        # odd indexes are tags
        for i in range(0, len(parts), 2):
            parts[i] = parts[i].replace('"', "&quot;").replace("'", "&#x27;")
        return "".join(parts)


class QuoteEscapeExtension(Extension):
    def extendMarkdown(self, md: markdown.Markdown) -> None:  # noqa: N802
        # before raw_html (30) so stashed passthrough HTML and highlighted code stay untouched
        md.postprocessors.register(QuoteEscapePostprocessor(md), "quote_escape", 35)


class EscapeHtmlExtension(Extension):
    """Drop Python-Markdown's raw HTML handling so embedded tags are escaped."""

    def extendMarkdown(self, md: markdown.Markdown) -> None:  # noqa: N802
        md.preprocessors.deregister("html_block", strict=False)
        md.inlinePatterns.deregister("html", strict=False)


@dataclass(frozen=True)
class RendererConfig:
    """
    Options handed to Python-Markdown.

      line_breaks     -> soft line breaks become <br> (nl2br)
      gfm             -> tables, ~~strike~~, autolinks, task lists
      highlight_style -> Pygments style for fenced code (None = no highlighting)
      raw_html        -> pass raw inline/block HTML through untouched
    """

    line_breaks: bool = True
    gfm: bool = True
    highlight_style: str | None = "solarized-dark"
    raw_html: bool = True

    def __post_init__(self) -> None:
        if self.highlight_style is not None:
            try:
                get_style_by_name(self.highlight_style)
            except ClassNotFound as e:
                raise ValueError(f"Unknown highlight style: {self.highlight_style!r}") from e

    def extensions(self) -> list[Any]:
        exts: list[Any] = ["extra", "sane_lists"]
        exts.append(QuoteEscapeExtension())
        if self.line_breaks:
            exts.append("nl2br")
        if self.gfm:
            exts += ["pymdownx.tilde", "pymdownx.magiclink", "pymdownx.tasklist"]
        if self.highlight_style is not None:
            exts.append("codehilite")
        if not self.raw_html:
            # must run after "extra" so md_in_html's block handler is removed too
            exts.append(EscapeHtmlExtension())
        return exts

    def extension_configs(self) -> dict[str, dict[str, Any]]:
        cfg: dict[str, dict[str, Any]] = {}
        if self.gfm:
            # GitHub only knows ~~strike~~, not ~subscript~
            cfg["pymdownx.tilde"] = {"subscript": False}
            cfg["pymdownx.tasklist"] = {"custom_checkbox": False}
        if self.highlight_style is not None:
            cfg["codehilite"] = {
                "guess_lang": False,
                "noclasses": True,
                "pygments_style": self.highlight_style,
            }
        return cfg


class MarkdownRenderer(IMarkdownRenderer):
    """
    Converts Markdown to HTML.

    render()  -> bare HTML fragment (used by the HTTP API and PDF export)
    to_html() -> full preview document with the light/dark preview stylesheet
    """

    def __init__(self, config: RendererConfig | None = None) -> None:
        self.config: RendererConfig = config or RendererConfig()

    def with_style(self, highlight_style: str | None) -> MarkdownRenderer:
        if highlight_style == self.config.highlight_style:
            return self
        return MarkdownRenderer(replace(self.config, highlight_style=highlight_style))

    def render(self, markdown_text: str) -> str:
        try:
            body = markdown.markdown(
                markdown_text,
                extensions=self.config.extensions(),
                extension_configs=self.config.extension_configs(),
                output_format="html5",
            )
        except Exception:
            log.exception("Markdown conversion failed; falling back to escaped text")
            body = f"<p>{html.escape(markdown_text)}</p>"

        if body and not body.endswith("\n"):
            body += "\n"
        return body

    def to_html(self, markdown_text: str, *, theme: str = "dark") -> str:
        body_class, style = UI_THEME_STYLES.get(theme, UI_THEME_STYLES["dark"])
        renderer = self if self.config.highlight_style is None else self.with_style(style)
        return HTML_TEMPLATE.format(
            css=CSS_PREVIEW, body_class=body_class, body=renderer.render(markdown_text)
        )
