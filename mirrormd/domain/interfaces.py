from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Protocol


class IMarkdownRenderer(Protocol):
    """Convert Markdown text to HTML (a fragment, or a full preview document)."""

    def render(self, markdown_text: str) -> str: ...
    def to_html(self, markdown_text: str, *, theme: str = "dark") -> str: ...


class IFileService(Protocol):
    """Read/write text files. Writes should be atomic when possible."""

    def read_text(self, path: Path) -> str: ...
    def write_text_atomic(self, path: Path, text: str) -> None: ...


class ISettingsService(Protocol):
    """Persist and retrieve lightweight UI state."""

    def get_geometry(self) -> bytes | None: ...
    def set_geometry(self, blob: bytes) -> None: ...
    def get_splitter(self) -> bytes | None: ...
    def set_splitter(self, blob: bytes) -> None: ...
    def get_recent(self) -> list[str]: ...
    def set_recent(self, recent: Iterable[str]) -> None: ...
    def get_theme(self) -> str | None: ...
    def set_theme(self, theme: str) -> None: ...


class IConfigService(Protocol):
    """Read-only access to INI-style configuration."""

    def get(self, section: str, key: str, default: str | None = None) -> str | None: ...
    def get_int(self, section: str, key: str, default: int | None = None) -> int | None: ...
    def get_bool(self, section: str, key: str, default: bool | None = None) -> bool | None: ...
    def as_dict(self) -> Mapping[str, Mapping[str, str]]: ...
    def app_version(self) -> str: ...


class IAppConfig(IConfigService, Protocol):
    """Configuration plus the resolved application version."""

    def get_version(self) -> str: ...


class IRenderEngine(Protocol):
    """Shared headless browser that turns full HTML documents into PDF bytes."""

    async def acquire(self) -> Any: ...
    async def render_to_pdf(self, html: str, options: Any = None) -> bytes: ...
    async def shutdown(self) -> None: ...


class IExporter(ABC):
    """Export strategy interface. Implementations export Markdown to a given format/path."""

    name: str  # e.g. "html", "pdf"
    label: str  # e.g. "Export HTML…"
    file_ext: str = ""
    needs_options: bool = False  # True when the UI should ask for title/theme first

    @abstractmethod
    def export(
        self,
        markdown_text: str,
        out_path: Path,
        *,
        title: str | None = None,
        theme: str | None = None,
    ) -> None:
        """Perform export of 'markdown_text' into 'out_path'."""
        raise NotImplementedError


class IExporterRegistry(Protocol):
    def register(self, e: IExporter) -> None: ...
    def get(self, name: str) -> IExporter: ...
    def all(self) -> list[IExporter]: ...
