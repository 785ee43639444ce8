from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath, PureWindowsPath

from mirrormd.domain.errors import ResourceNotFound, ValidationError
from mirrormd.domain.interfaces import IFileService
from mirrormd.utils.constants import MAX_FILE_SIZE

_ALLOWED_RE = re.compile(r"[^A-Za-z0-9._ -]+")
_MD_EXT_RE = re.compile(r"\.(md|markdown|mdown|txt)$", re.IGNORECASE)


def sanitize_filename(name: str) -> str:
    """Reduce an arbitrary client name to a safe '<stem>.md' inside the store."""
    if not isinstance(name, str):
        raise ValidationError("Filename must be text")
    base = PureWindowsPath(PurePosixPath(name.strip()).name).name
    stem = _MD_EXT_RE.sub("", base)
    stem = _ALLOWED_RE.sub("", stem).strip(" .")
    if not stem:
        raise ValidationError("Invalid filename")
    return f"{stem[:120]}.md"


@dataclass(frozen=True)
class StoredFile:
    name: str
    size: int
    modified: datetime

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "size": self.size, "modified": self.modified.isoformat()}


class FileStore:
    """Saved markdown files in one flat directory, keyed by sanitized filename."""

    def __init__(self, root: Path, files: IFileService, *, max_size: int = MAX_FILE_SIZE) -> None:
        self.root = root
        self._files = files
        self._max_size = max_size

    def _path_for(self, name: str) -> Path:
        return self.root / sanitize_filename(name)

    def save(self, name: str, content: str) -> str:
        if not isinstance(content, str):
            raise ValidationError("Content must be text")
        if len(content.encode("utf-8")) > self._max_size:
            raise ValidationError("File too large")
        path = self._path_for(name)
        self._files.write_text_atomic(path, content)
        return path.name

    def list_files(self) -> list[StoredFile]:
        if not self.root.is_dir():
            return []
        out: list[StoredFile] = []
        for p in sorted(self.root.glob("*.md")):
            st = p.stat()
            out.append(
                StoredFile(
                    name=p.name,
                    size=st.st_size,
                    modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
                )
            )
        out.sort(key=lambda f: f.modified, reverse=True)
        return out

    def load(self, name: str) -> tuple[str, str]:
        path = self._path_for(name)
        if not path.is_file():
            raise ResourceNotFound(f"File not found: {path.name}")
        return path.name, self._files.read_text(path)

    def delete(self, name: str) -> str:
        path = self._path_for(name)
        if not path.is_file():
            raise ResourceNotFound(f"File not found: {path.name}")
        path.unlink()
        return path.name
