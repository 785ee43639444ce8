from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir

from mirrormd.domain.interfaces import IAppConfig, IConfigService
from mirrormd.services.config.ini_config_service import IniConfigService
from mirrormd.utils.constants import DEFAULT_PDF_THEME, DEFAULT_SERVER_URL, MAX_EXPORT_SIZE

_VERSION_RE = re.compile(r"^v?(\d+\.\d+\.\d+)(?:[-+].*)?$", re.IGNORECASE)

DEFAULT_PORT = 3000
DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024


def _project_root_fallback() -> Path:
    # app_config.py -> mirrormd/services/config/app_config.py
    return Path(__file__).resolve().parents[3]


def _read_version_file(version_path: Path) -> str | None:
    try:
        raw = version_path.read_text(encoding="utf-8").strip()
    except OSError:
        return None

    m = _VERSION_RE.match(raw)
    if not m:
        return None

    # return normalized X.Y.Z (no leading v)
    return m.group(1)


@dataclass(frozen=True)
class AppConfig(IAppConfig):
    """
    Adapter that wraps IniConfigService and adds get_version() from <root>/version file.

    Precedence for version:
      1) <project_root>/version file (semantic e.g. v1.0.5)
      2) ini_config_service.app_version() (fallback)
      3) "0.0.0"
    """

    ini: IniConfigService
    project_root: Path

    def get_version(self) -> str:
        v = _read_version_file(self.project_root / "version")
        if v:
            return v

        v2 = (self.ini.app_version() or "").strip()
        if v2:
            m = _VERSION_RE.match(v2)
            return m.group(1) if m else v2

        return "0.0.0"

    # ---- delegate IniConfigService methods ----

    def get(self, section: str, key: str, default: str | None = None) -> str | None:
        return self.ini.get(section, key, default)

    def get_int(self, section: str, key: str, default: int | None = None) -> int | None:
        return self.ini.get_int(section, key, default)

    def get_bool(self, section: str, key: str, default: bool | None = None) -> bool | None:
        return self.ini.get_bool(section, key, default)

    def as_dict(self) -> Mapping[str, Mapping[str, str]]:
        return self.ini.as_dict()

    def app_version(self) -> str:
        return self.ini.app_version()

    @property
    def loaded_from(self) -> Path | None:
        return self.ini.loaded_from


def build_app_config(
    *, explicit_ini: Path | None = None, project_root: Path | None = None
) -> AppConfig:
    root = project_root or _project_root_fallback()
    ini = IniConfigService(explicit_path=explicit_ini, project_root=root)
    return AppConfig(ini=ini, project_root=root)


# ---------------------------------------------------------------------------
# Typed views over the INI sections (environment variables win over the file)
# ---------------------------------------------------------------------------


def _env_int(name: str, fallback: int) -> int:
    raw = os.environ.get(name, "").strip()
    try:
        return int(raw) if raw else fallback
    except ValueError:
        return fallback


@dataclass(frozen=True)
class ServerSettings:
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    default_pdf_theme: str = DEFAULT_PDF_THEME
    render_timeout_ms: int = 30000
    max_markdown_bytes: int = MAX_EXPORT_SIZE
    chromium_path: str | None = None
    storage_dir: Path | None = None
    log_level: str = "INFO"

    @classmethod
    def from_config(cls, cfg: IConfigService) -> ServerSettings:
        d = cls()
        storage = cfg.get("storage", "directory", None)
        chromium = os.environ.get("MIRRORMD_CHROMIUM_PATH") or cfg.get(
            "engine", "executable_path", None
        )
        return cls(
            host=os.environ.get("MIRRORMD_HOST") or cfg.get("server", "host", d.host) or d.host,
            port=_env_int("PORT", cfg.get_int("server", "port", d.port) or d.port),
            max_body_bytes=cfg.get_int("server", "max_body_bytes", d.max_body_bytes)
            or d.max_body_bytes,
            default_pdf_theme=cfg.get("pdf", "default_theme", d.default_pdf_theme)
            or d.default_pdf_theme,
            render_timeout_ms=cfg.get_int("pdf", "render_timeout_ms", d.render_timeout_ms)
            or d.render_timeout_ms,
            max_markdown_bytes=cfg.get_int("pdf", "max_markdown_bytes", d.max_markdown_bytes)
            or d.max_markdown_bytes,
            chromium_path=chromium or None,
            storage_dir=Path(storage).expanduser()
            if storage
            else Path(user_data_dir(IniConfigService.DEFAULT_APP_DIR)) / "files",
            log_level=cfg.get("logging", "level", d.log_level) or d.log_level,
        )


@dataclass(frozen=True)
class EditorSettings:
    server_url: str = DEFAULT_SERVER_URL
    request_timeout_s: int = 60
    debounce_ms: int = 150
    theme_render_delay_ms: int = 100

    @classmethod
    def from_config(cls, cfg: IConfigService) -> EditorSettings:
        d = cls()
        return cls(
            server_url=os.environ.get("MIRRORMD_SERVER_URL")
            or cfg.get("editor", "server_url", d.server_url)
            or d.server_url,
            request_timeout_s=cfg.get_int("editor", "request_timeout_s", d.request_timeout_s)
            or d.request_timeout_s,
            debounce_ms=cfg.get_int("preview", "debounce_ms", d.debounce_ms) or d.debounce_ms,
            theme_render_delay_ms=cfg.get_int(
                "preview", "theme_render_delay_ms", d.theme_render_delay_ms
            )
            or d.theme_render_delay_ms,
        )
