from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class PdfTheme:
    id: str
    name: str
    description: str
    variables: Mapping[str, str] = field(default_factory=dict)
    code_style: str = "solarized-light"

    def summary(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "description": self.description}


_SOLARIZED = {
    "base03": "#002b36",
    "base02": "#073642",
    "base01": "#586e75",
    "base00": "#657b83",
    "base0": "#839496",
    "base1": "#93a1a1",
    "base2": "#eee8d5",
    "base3": "#fdf6e3",
    "orange": "#cb4b16",
    "blue": "#268bd2",
    "cyan": "#2aa198",
}

SOLARIZED_LIGHT = PdfTheme(
    id="solarized-light",
    name="Solarized Light",
    description="Warm cream background, easy on the eyes",
    variables=MappingProxyType(
        {
            "bg": _SOLARIZED["base3"],
            "text": _SOLARIZED["base00"],
            "heading": _SOLARIZED["base01"],
            "accent": _SOLARIZED["cyan"],
            "link": _SOLARIZED["blue"],
            "code-bg": _SOLARIZED["base2"],
            "code-text": _SOLARIZED["orange"],
            "border": _SOLARIZED["base1"],
            "quote-bg": _SOLARIZED["base2"],
        }
    ),
    code_style="solarized-light",
)

SOLARIZED_DARK = PdfTheme(
    id="solarized-dark",
    name="Solarized Dark",
    description="Dark background with Solarized accents",
    variables=MappingProxyType(
        {
            "bg": _SOLARIZED["base03"],
            "text": _SOLARIZED["base0"],
            "heading": _SOLARIZED["base1"],
            "accent": _SOLARIZED["cyan"],
            "link": _SOLARIZED["blue"],
            "code-bg": _SOLARIZED["base02"],
            "code-text": _SOLARIZED["orange"],
            "border": _SOLARIZED["base01"],
            "quote-bg": _SOLARIZED["base02"],
        }
    ),
    code_style="solarized-dark",
)

PRINTER = PdfTheme(
    id="printer",
    name="Printer Friendly",
    description="Black and white, optimized for printing",
    variables=MappingProxyType(
        {
            "bg": "#ffffff",
            "text": "#000000",
            "heading": "#000000",
            "accent": "#000000",
            "link": "#000000",
            "code-bg": "#f2f2f2",
            "code-text": "#000000",
            "border": "#666666",
            "quote-bg": "#ffffff",
        }
    ),
    code_style="bw",
)


class PdfThemeCatalog:
    """
    Fixed, read-only set of PDF themes keyed by id.

    resolve() never fails: unknown (or missing) ids fall back to the default entry.
    """

    def __init__(
        self,
        themes: Iterable[PdfTheme] = (SOLARIZED_LIGHT, SOLARIZED_DARK, PRINTER),
        default_id: str = SOLARIZED_LIGHT.id,
    ) -> None:
        self._themes: Mapping[str, PdfTheme] = MappingProxyType({t.id: t for t in themes})
        if default_id not in self._themes:
            raise ValueError(f"Default theme {default_id!r} is not in the catalog")
        self._default_id = default_id

    @property
    def default_id(self) -> str:
        return self._default_id

    @property
    def default(self) -> PdfTheme:
        return self._themes[self._default_id]

    def all(self) -> list[PdfTheme]:
        return list(self._themes.values())

    def ids(self) -> list[str]:
        return list(self._themes)

    def __contains__(self, theme_id: object) -> bool:
        return theme_id in self._themes

    def resolve(self, theme_id: str | None) -> PdfTheme:
        if isinstance(theme_id, str):
            theme = self._themes.get(theme_id.strip())
            if theme is not None:
                return theme
        return self.default

    @staticmethod
    def css_for(theme: PdfTheme) -> str:
        lines = [f"  --{name}: {value};" for name, value in theme.variables.items()]
        return ":root {\n" + "\n".join(lines) + "\n}\n"
