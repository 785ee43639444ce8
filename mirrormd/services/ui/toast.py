from __future__ import annotations

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import QFrame, QHBoxLayout, QLabel, QToolButton, QWidget

_LEVEL_COLORS = {
    "info": "#268bd2",
    "warning": "#b58900",
    "error": "#dc322f",
}


class Toast(QFrame):
    """
    Non-blocking notification pinned to the bottom-right of its parent.
    Dismissed by its close button or automatically after timeout_ms (0 keeps it open).
    """

    MARGIN = 16

    def __init__(
        self,
        parent: QWidget,
        text: str,
        *,
        level: str = "info",
        timeout_ms: int = 6000,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("mirrormdToast")
        self.level = level if level in _LEVEL_COLORS else "info"
        self.setStyleSheet(
            f"#mirrormdToast {{ background:{_LEVEL_COLORS[self.level]}; border-radius:6px; }}"
            "#mirrormdToast QLabel, #mirrormdToast QToolButton { color:white; border:none; }"
        )

        self.label = QLabel(text, self)
        self.label.setWordWrap(True)
        self.label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)

        self.close_button = QToolButton(self)
        self.close_button.setText("✕")
        self.close_button.setToolTip("Dismiss")
        self.close_button.clicked.connect(self.dismiss)

        row = QHBoxLayout(self)
        row.setContentsMargins(12, 8, 8, 8)
        row.addWidget(self.label, 1)
        row.addWidget(self.close_button, 0, Qt.AlignmentFlag.AlignTop)

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self.dismiss)
        if timeout_ms > 0:
            self._timer.start(timeout_ms)

    def text(self) -> str:
        return self.label.text()

    def show_toast(self) -> None:
        parent = self.parentWidget()
        self.setFixedWidth(min(420, max(200, parent.width() - 2 * self.MARGIN)))
        self.adjustSize()
        self.move(
            parent.width() - self.width() - self.MARGIN,
            parent.height() - self.height() - self.MARGIN,
        )
        self.show()
        self.raise_()

    def dismiss(self) -> None:
        self._timer.stop()
        self.hide()
        self.deleteLater()
