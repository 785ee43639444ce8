from __future__ import annotations

import logging
from pathlib import Path

from mirrormd.domain.interfaces import IExporter
from mirrormd.domain.models import ExportRequest
from mirrormd.services.api_client import PdfApiClient
from mirrormd.utils.constants import DEFAULT_PDF_THEME

log = logging.getLogger(__name__)


class PdfExporter(IExporter):
    """
    Ask the MirrorMD server for a themed PDF and write the bytes to out_path.

    Errors from the client (ValidationError, RenderError, ServerUnreachableError)
    propagate to the window, which reports them.
    """

    name = "pdf"
    label = "Export PDF…"
    file_ext = "pdf"
    needs_options = True

    def __init__(self, client: PdfApiClient) -> None:
        self.client = client

    def export(
        self,
        markdown_text: str,
        out_path: Path,
        *,
        title: str | None = None,
        theme: str | None = None,
    ) -> None:
        request = ExportRequest(
            markdown=markdown_text,
            filename=out_path.name,
            theme=theme or DEFAULT_PDF_THEME,
            title=title,
        )
        request.validate()
        artifact = self.client.generate_pdf(request)
        out_path.write_bytes(artifact.content)
        log.info("Wrote %s (%d bytes)", out_path, artifact.size)
