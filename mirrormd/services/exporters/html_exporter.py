from __future__ import annotations

from pathlib import Path

from mirrormd.domain.interfaces import IExporter, IMarkdownRenderer


class HtmlExporter(IExporter):
    """Write the preview document (same CSS and palette as on screen) to disk."""

    name = "html"
    label = "Export HTML…"
    file_ext = "html"

    def __init__(self, renderer: IMarkdownRenderer) -> None:
        self._renderer = renderer

    def export(
        self,
        markdown_text: str,
        out_path: Path,
        *,
        title: str | None = None,
        theme: str | None = None,
    ) -> None:
        html = self._renderer.to_html(markdown_text, theme=theme or "dark")
        out_path.write_text(html, encoding="utf-8")
