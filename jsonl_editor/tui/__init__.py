"""Terminal UI for JSONL Editor."""

from .styles import APP_CSS
from .widgets import EditScreen, RecordDetailPanel, RecordItem

__all__ = [
    "EditScreen",
    "RecordDetailPanel",
    "RecordItem",
    "APP_CSS",
]
