from __future__ import annotations

import configparser
import logging
from collections.abc import Mapping
from pathlib import Path

from platformdirs import user_config_dir

from mirrormd.domain.interfaces import IConfigService

log = logging.getLogger(__name__)

_TRUE = frozenset({"1", "true", "yes", "y", "on"})
_FALSE = frozenset({"0", "false", "no", "n", "off"})


class IniConfigService(IConfigService):
    r"""
    Layered INI configuration.

    Files are merged key by key, later layers winning:
      1. Shipped defaults at <project_root>/config/config.ini
      2. User config dir (~/.config/MirrorMD/config.ini, %APPDATA%\MirrorMD\config.ini, ...)
      3. Explicit path given at construction (mirrormd-server --config)

    So a user file that only sets [editor] server_url keeps every other shipped
    default. Unreadable or malformed layers are logged and skipped.
    """

    DEFAULT_APP_DIR = "MirrorMD"
    DEFAULT_FILE = "config.ini"

    def __init__(self, explicit_path: Path | None = None, project_root: Path | None = None):
        self._parser = configparser.ConfigParser()
        self.sources: list[Path] = []

        for path in self._layers(explicit_path, project_root):
            layer = self._read_layer(path)
            if layer is not None:
                self._parser.read_dict(layer)
                self.sources.append(path)

        if not self._parser.has_section("app"):
            self._parser.add_section("app")
        self._parser["app"].setdefault("version", "0.0.0")

    def _layers(self, explicit_path: Path | None, project_root: Path | None) -> list[Path]:
        layers: list[Path] = []
        if project_root:
            layers.append(project_root / "config" / self.DEFAULT_FILE)
        layers.append(Path(user_config_dir(self.DEFAULT_APP_DIR)) / self.DEFAULT_FILE)
        if explicit_path:
            layers.append(explicit_path)
        return layers

    @staticmethod
    def _read_layer(path: Path) -> configparser.ConfigParser | None:
        if not path.is_file():
            return None
        parser = configparser.ConfigParser()
        try:
            with path.open("r", encoding="utf-8") as fh:
                parser.read_file(fh)
        except (OSError, configparser.Error) as e:
            log.warning("Ignoring unreadable config %s: %s", path, e)
            return None
        return parser

    # ----- IConfigService -----

    def get(self, section: str, key: str, default: str | None = None) -> str | None:
        if not self._parser.has_section(section):
            return default
        return self._parser[section].get(key, default)

    def get_int(self, section: str, key: str, default: int | None = None) -> int | None:
        val = self.get(section, key)
        if val is None:
            return default
        try:
            return int(val.strip())
        except ValueError:
            log.warning("[%s] %s = %r is not an integer", section, key, val)
            return default

    def get_bool(self, section: str, key: str, default: bool | None = None) -> bool | None:
        val = self.get(section, key)
        if val is None:
            return default
        s = val.strip().lower()
        if s in _TRUE:
            return True
        if s in _FALSE:
            return False
        return default

    def as_dict(self) -> Mapping[str, Mapping[str, str]]:
        return {sect: dict(self._parser[sect]) for sect in self._parser.sections()}

    def app_version(self) -> str:
        return self.get("app", "version", "0.0.0") or "0.0.0"

    @property
    def loaded_from(self) -> Path | None:
        """Highest-precedence file that contributed settings (logged at server start)."""
        return self.sources[-1] if self.sources else None
