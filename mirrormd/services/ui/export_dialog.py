from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QComboBox,
    QDialog,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)

DEFAULT_TITLE = "Document"


def default_title(path: Path | None) -> str:
    """File name without extension, or "Document" for an unsaved buffer."""
    if path is None or not path.stem.strip():
        return DEFAULT_TITLE
    return path.stem


class ExportDialog(QDialog):
    """
    Ask for the PDF title and theme before an export.

    `themes` are the summaries served by /api/pdf-themes: dicts with id, name
    and description.
    """

    def __init__(
        self,
        themes: Iterable[Mapping[str, str]],
        *,
        title: str = DEFAULT_TITLE,
        default_theme: str | None = None,
        parent=None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Export PDF")
        self.setModal(True)

        # Widgets
        self.title_edit = QLineEdit(title)
        self.title_edit.selectAll()

        self.theme_combo = QComboBox()
        for t in themes:
            self.theme_combo.addItem(t.get("name") or t["id"], t["id"])
            self.theme_combo.setItemData(
                self.theme_combo.count() - 1,
                t.get("description", ""),
                Qt.ItemDataRole.ToolTipRole,
            )
        if default_theme is not None:
            idx = self.theme_combo.findData(default_theme)
            if idx >= 0:
                self.theme_combo.setCurrentIndex(idx)

        self.description = QLabel(self._current_description())
        self.description.setWordWrap(True)

        self.export_btn = QPushButton("Export")
        self.export_btn.setDefault(True)
        self.cancel_btn = QPushButton("Cancel")

        # Layout
        form = QGridLayout()
        form.addWidget(QLabel("Title:"), 0, 0)
        form.addWidget(self.title_edit, 0, 1)
        form.addWidget(QLabel("Theme:"), 1, 0)
        form.addWidget(self.theme_combo, 1, 1)
        form.addWidget(self.description, 2, 1)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        buttons.addWidget(self.cancel_btn)
        buttons.addWidget(self.export_btn)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addLayout(buttons)

        # Signals
        self.theme_combo.currentIndexChanged.connect(
            lambda _i: self.description.setText(self._current_description())
        )
        self.export_btn.clicked.connect(self.accept)
        self.cancel_btn.clicked.connect(self.reject)

    def _current_description(self) -> str:
        tip = self.theme_combo.currentData(Qt.ItemDataRole.ToolTipRole)
        return str(tip) if tip else ""

    # ---------- Results ----------

    def title(self) -> str:
        return self.title_edit.text().strip() or DEFAULT_TITLE

    def theme_id(self) -> str | None:
        data = self.theme_combo.currentData()
        return str(data) if data else None
