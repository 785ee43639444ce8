from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import QSettings

from mirrormd.domain.interfaces import IFileService, IMarkdownRenderer, ISettingsService
from mirrormd.services.api_client import PdfApiClient
from mirrormd.services.config.app_config import AppConfig, EditorSettings
from mirrormd.services.exporters.base import ExporterRegistryInst
from mirrormd.services.exporters.html_exporter import HtmlExporter
from mirrormd.services.exporters.pdf_exporter import PdfExporter
from mirrormd.services.file_service import FileService
from mirrormd.services.markdown_renderer import MarkdownRenderer
from mirrormd.services.settings_service import SettingsService
from mirrormd.services.ui.adapters import QtMessageService
from mirrormd.services.ui.main_window import MainWindow
from mirrormd.services.ui.ports.messages import IMessageService
from mirrormd.utils.constants import APP_NAME, APP_ORG

log = logging.getLogger(__name__)


class Container:
    """
    Lightweight DI container for the editor:
      - wires default services if not provided
      - owns the exporter registry (html + server-backed pdf)
      - builds the main window with theme manager, scheduler settings and messages
    """

    def __init__(
        self,
        renderer: IMarkdownRenderer | None = None,
        files: IFileService | None = None,
        settings: ISettingsService | None = None,
        qsettings: QSettings | None = None,
        messages: IMessageService | None = None,
        client: PdfApiClient | None = None,
        editor_settings: EditorSettings | None = None,
        config: AppConfig | None = None,
    ) -> None:
        self.config = config
        self.editor_settings: EditorSettings = editor_settings or (
            EditorSettings.from_config(config) if config is not None else EditorSettings()
        )
        es = self.editor_settings

        # Core services (defaults if not supplied)
        self.renderer: IMarkdownRenderer = renderer or MarkdownRenderer()
        self.file_service: IFileService = files or FileService()
        self.settings_service: ISettingsService = settings or SettingsService(
            qsettings or QSettings()
        )
        self.messages: IMessageService = messages or QtMessageService()
        self.client = client or PdfApiClient(es.server_url, timeout_s=es.request_timeout_s)

        self.exporters = ExporterRegistryInst()
        self._register_builtin_exporters()

    # ---------- Class helpers ----------

    @staticmethod
    def default(
        qsettings: QSettings | None = None,
        *,
        config: AppConfig | None = None,
        organization: str = APP_ORG,
        application: str = APP_NAME,
    ) -> Container:
        if qsettings is None:
            qsettings = QSettings(organization, application)
        return Container(qsettings=qsettings, config=config)

    # ---------- Internals ----------

    def _register_builtin_exporters(self) -> None:
        self.exporters.register(HtmlExporter(self.renderer))
        self.exporters.register(PdfExporter(self.client))

    # ---------- UI factories ----------

    def build_main_window(
        self,
        *,
        start_path: Path | None = None,
        app_title: str = APP_NAME,
    ) -> MainWindow:
        es = self.editor_settings
        window = MainWindow(
            renderer=self.renderer,
            file_service=self.file_service,
            settings=self.settings_service,
            messages=self.messages,
            exporter_registry=self.exporters,
            pdf_theme_source=self.client.list_themes,
            debounce_ms=es.debounce_ms,
            theme_render_delay_ms=es.theme_render_delay_ms,
            start_path=start_path,
            app_title=app_title,
        )
        log.info("Editor ready (PDF server: %s)", self.client.base_url)
        return window

    def close(self) -> None:
        self.client.close()


# --- Convenience top-level function -----------------------------------------


def build_main_window(
    qsettings: QSettings | None = None,
    *,
    start_path: Path | None = None,
    app_title: str = APP_NAME,
) -> MainWindow:
    """One-call convenience for a ready-to-use window."""
    container = Container.default(qsettings=qsettings)
    return container.build_main_window(start_path=start_path, app_title=app_title)
