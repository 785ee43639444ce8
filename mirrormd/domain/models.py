from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from mirrormd.domain.errors import ValidationError
from mirrormd.utils.constants import DEFAULT_PDF_THEME

_WORD_RE = re.compile(r"\S+")

INVALID_MARKDOWN = "Invalid markdown content"


@dataclass
class Document:
    path: Path | None
    text: str
    modified: bool = False

    @property
    def display_name(self) -> str:
        return self.path.name if self.path else ""

    @property
    def char_count(self) -> int:
        return len(self.text)

    @property
    def word_count(self) -> int:
        return len(_WORD_RE.findall(self.text))


@dataclass(frozen=True)
class ExportRequest:
    markdown: str
    filename: str | None = None
    theme: str = DEFAULT_PDF_THEME
    title: str | None = None

    def validate(self) -> None:
        if not isinstance(self.markdown, str) or not self.markdown.strip():
            raise ValidationError(INVALID_MARKDOWN)


@dataclass(frozen=True)
class PdfArtifact:
    content: bytes
    filename: str
    media_type: str = "application/pdf"

    @property
    def size(self) -> int:
        return len(self.content)
