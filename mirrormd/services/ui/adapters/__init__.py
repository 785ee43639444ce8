from __future__ import annotations

from .qt_messages import QtMessageService

__all__ = [
    "QtMessageService",
]
