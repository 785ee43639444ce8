from __future__ import annotations

import logging
from pathlib import Path

from mirrormd.domain.interfaces import IFileService, IRenderEngine
from mirrormd.services.config.app_config import AppConfig, ServerSettings, build_app_config
from mirrormd.services.file_service import FileService
from mirrormd.services.file_store import FileStore
from mirrormd.services.markdown_renderer import MarkdownRenderer, RendererConfig
from mirrormd.services.pdf.engine import HeadlessRenderEngine
from mirrormd.services.pdf.pipeline import PdfExportPipeline
from mirrormd.services.pdf.themes import SOLARIZED_LIGHT, PdfThemeCatalog

log = logging.getLogger(__name__)


class ServerContainer:
    """
    Wires the server-side services:
      - renderer (Python-Markdown, GFM-ish, Pygments highlighting)
      - PDF theme catalog + headless render engine + export pipeline
      - saved-file store

    Anything passed in wins over the default built from ServerSettings.
    """

    def __init__(
        self,
        settings: ServerSettings | None = None,
        *,
        config: AppConfig | None = None,
        renderer: MarkdownRenderer | None = None,
        catalog: PdfThemeCatalog | None = None,
        engine: IRenderEngine | None = None,
        files: IFileService | None = None,
        store_root: Path | None = None,
    ) -> None:
        self.config = config
        self.settings: ServerSettings = settings or (
            ServerSettings.from_config(config) if config is not None else ServerSettings()
        )
        s = self.settings

        self.renderer = renderer or MarkdownRenderer(RendererConfig())
        self.catalog = catalog or self._build_catalog(s.default_pdf_theme)
        self.engine: IRenderEngine = engine or HeadlessRenderEngine(
            executable_path=s.chromium_path,
            timeout_ms=s.render_timeout_ms,
        )
        self.pipeline = PdfExportPipeline(
            self.renderer,
            self.catalog,
            self.engine,
            max_markdown_bytes=s.max_markdown_bytes,
        )
        self.file_service: IFileService = files or FileService()
        root = store_root or s.storage_dir or Path.cwd() / "saved"
        self.file_store = FileStore(root, self.file_service)

    @staticmethod
    def _build_catalog(default_id: str) -> PdfThemeCatalog:
        probe = PdfThemeCatalog()
        if default_id not in probe:
            log.warning(
                "Unknown default PDF theme %r in config; using %s", default_id, SOLARIZED_LIGHT.id
            )
            return probe
        return PdfThemeCatalog(default_id=default_id)

    @staticmethod
    def from_config(explicit_ini: Path | None = None) -> ServerContainer:
        cfg = build_app_config(explicit_ini=explicit_ini)
        return ServerContainer(config=cfg)
