from __future__ import annotations

import asyncio
import logging
import re
import time
from pathlib import PurePosixPath, PureWindowsPath

from mirrormd.domain.errors import RenderError, ValidationError
from mirrormd.domain.interfaces import IRenderEngine
from mirrormd.domain.models import ExportRequest, PdfArtifact
from mirrormd.services.markdown_renderer import MarkdownRenderer
from mirrormd.services.pdf.document import build_document
from mirrormd.services.pdf.engine import PageOptions
from mirrormd.services.pdf.themes import PdfThemeCatalog
from mirrormd.utils.constants import MAX_EXPORT_SIZE

log = logging.getLogger(__name__)

DEFAULT_PDF_NAME = "document.pdf"

_SOURCE_EXT_RE = re.compile(r"\.(md|markdown|mdown|txt|pdf)$", re.IGNORECASE)
_UNSAFE_CHARS_RE = re.compile(r'[\x00-\x1f\x7f"\\/:*?<>|;]+')


def derive_pdf_filename(filename: str | None) -> str:
    """
    Suggested download name for an export.

    "notes.md" -> "notes.pdf", "Report.MARKDOWN" -> "Report.pdf", None/"" -> "document.pdf".
    Directory parts and header-unsafe characters are dropped.
    """
    if not filename or not filename.strip():
        return DEFAULT_PDF_NAME

    name = PureWindowsPath(PurePosixPath(filename.strip()).name).name
    name = _SOURCE_EXT_RE.sub("", name)
    name = _UNSAFE_CHARS_RE.sub("", name).strip(" .")
    return f"{name}.pdf" if name else DEFAULT_PDF_NAME


class PdfExportPipeline:
    """
    Markdown -> HTML fragment -> themed document -> PDF bytes.

    Validation failures raise ValidationError before anything is rendered;
    engine failures are logged here and surface as RenderError.
    """

    def __init__(
        self,
        renderer: MarkdownRenderer,
        catalog: PdfThemeCatalog,
        engine: IRenderEngine,
        *,
        page_options: PageOptions | None = None,
        max_markdown_bytes: int = MAX_EXPORT_SIZE,
    ) -> None:
        self.renderer = renderer
        self.catalog = catalog
        self.engine = engine
        self.page_options = page_options or PageOptions()
        self.max_markdown_bytes = max_markdown_bytes

    def validate(self, request: ExportRequest) -> None:
        request.validate()
        size = len(request.markdown.encode("utf-8"))
        if size > self.max_markdown_bytes:
            raise ValidationError(
                f"Content too large ({size} bytes). Maximum size is {self.max_markdown_bytes} bytes."
            )

    def build_html(self, request: ExportRequest) -> str:
        theme = self.catalog.resolve(request.theme)
        fragment = self.renderer.with_style(theme.code_style).render(request.markdown)
        return build_document(fragment, theme, title=request.title)

    async def export(self, request: ExportRequest) -> PdfArtifact:
        self.validate(request)
        # conversion is CPU-bound and runs off the event loop
        document = await asyncio.to_thread(self.build_html, request)
        filename = derive_pdf_filename(request.filename)

        started = time.perf_counter()
        try:
            pdf = await self.engine.render_to_pdf(document, self.page_options)
        except RenderError:
            log.exception(
                "PDF generation failed (file=%s, theme=%s, markdown=%d chars)",
                filename,
                request.theme,
                len(request.markdown),
            )
            raise

        elapsed = time.perf_counter() - started
        log.info("Generated %s (%d bytes) in %.2fs", filename, len(pdf), elapsed)
        return PdfArtifact(content=pdf, filename=filename)
