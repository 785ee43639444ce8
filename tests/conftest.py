from __future__ import annotations

import os
from pathlib import Path

import pytest

# headless CI has no display server
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from fastapi.testclient import TestClient  # noqa: E402
from PyQt6.QtCore import QSettings  # noqa: E402
from PyQt6.QtWidgets import QApplication  # noqa: E402

from mirrormd.di.server_container import ServerContainer  # noqa: E402
from mirrormd.domain.errors import RenderError  # noqa: E402
from mirrormd.services.config.app_config import ServerSettings  # noqa: E402
from mirrormd.services.file_service import FileService  # noqa: E402
from mirrormd.services.markdown_renderer import MarkdownRenderer  # noqa: E402
from mirrormd.services.settings_service import SettingsService  # noqa: E402
from mirrormd.web.app import create_app  # noqa: E402

FAKE_PDF = b"%PDF-1.7\n% fake document\n%%EOF\n"


# --- Fallback QApplication fixture (works with or without pytest-qt) ---
@pytest.fixture(scope="session")
def qapp():
    """Provide a QApplication for tests that need Qt.
    Creates one if not present; reuses existing otherwise.
    """
    app = QApplication.instance()
    created = False
    if app is None:
        app = QApplication([])
        created = True
    try:
        yield app
    finally:
        # Don't forcibly quit a shared app; only close if we created it here.
        if created:
            app.quit()


# --- Other common fixtures ---


@pytest.fixture()
def tmp_settings_path(tmp_path: Path) -> Path:
    return tmp_path / "settings.ini"


@pytest.fixture()
def qsettings(tmp_settings_path: Path) -> QSettings:
    # Use an INI file so we don't touch system registry / platform stores
    s = QSettings(str(tmp_settings_path), QSettings.Format.IniFormat)
    s.clear()
    return s


@pytest.fixture()
def settings_service(qsettings: QSettings) -> SettingsService:
    return SettingsService(qsettings)


@pytest.fixture()
def file_service() -> FileService:
    return FileService()


@pytest.fixture()
def renderer() -> MarkdownRenderer:
    return MarkdownRenderer()


# --- Server-side fixtures ---


class FakeEngine:
    """Stands in for HeadlessRenderEngine; records every document it is asked to print."""

    def __init__(self, *, fail: bool = False, pdf: bytes = FAKE_PDF) -> None:
        self.fail = fail
        self.pdf = pdf
        self.documents: list[str] = []
        self.options: list[object] = []
        self.shutdown_calls = 0

    async def acquire(self):
        return self

    async def render_to_pdf(self, html: str, options=None) -> bytes:
        self.documents.append(html)
        self.options.append(options)
        if self.fail:
            raise RenderError("browser crashed")
        return self.pdf

    async def shutdown(self) -> None:
        self.shutdown_calls += 1


@pytest.fixture()
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture()
def server_container(tmp_path: Path, fake_engine: FakeEngine) -> ServerContainer:
    return ServerContainer(
        ServerSettings(storage_dir=tmp_path / "store"),
        engine=fake_engine,
    )


@pytest.fixture()
def api(server_container: ServerContainer):
    with TestClient(create_app(server_container)) as client:
        yield client


@pytest.fixture()
def engine_factory():
    """The FakeEngine class, for tests that need more than one or a failing one."""
    return FakeEngine
