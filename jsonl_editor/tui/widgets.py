"""UI widgets for the JSONL Editor TUI."""

from datetime import datetime
from typing import Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import ScrollableContainer, Vertical
from textual.screen import ModalScreen
from textual.widgets import ListItem, Static, TextArea

from ..editing import record_text
from ..models import Record

ROLE_STYLES = {
    "user": ("User", "bold green", "green"),
    "assistant": ("Assistant", "bold magenta", "magenta"),
    "summary": ("Summary", "bold yellow", "yellow"),
}


def truncate(text: str, max_len: int = 100) -> str:
    """Truncate text with ellipsis."""
    if len(text) <= max_len:
        return text
    return text[:max_len - 3] + "..."


def format_timestamp(timestamp: Optional[str], fmt: str = "%m-%d %H:%M") -> str:
    """Format an ISO-8601 timestamp, falling back to the raw string."""
    if not timestamp:
        return "??-?? ??:??"
    try:
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00")).strftime(fmt)
    except ValueError:
        return timestamp[:11]


class RecordItem(ListItem):
    """List item for one conversation message."""

    def __init__(self, record: Record, position: int):
        super().__init__()
        self.record = record
        self.position = position
        self._static: Optional[Static] = None

    def compose(self) -> ComposeResult:
        self._static = Static(self._build_text(100))
        yield self._static

    def on_resize(self, event) -> None:
        """Update text when resized."""
        if self._static:
            self._static.update(self._build_text(self.size.width))

    def _build_text(self, width: int) -> Text:
        """Build the display text based on available width."""
        label, _, color = ROLE_STYLES.get(self.record.kind, ("?", "bold", "white"))

        text = Text()
        text.append(f"{self.position:>3}", style="dim")
        text.append(" │ ", style="dim")
        text.append(format_timestamp(self.record.timestamp), style="cyan")
        text.append(" │ ", style="dim")
        text.append(f"{label[:9]:<9}", style=color)
        text.append(" │ ", style="dim")

        prefix_width = 35  # index(3) + seps(9) + date(11) + role(9) + padding(3)
        desc_width = max(20, width - prefix_width)
        preview = record_text(self.record).replace("\n", " ").strip()
        if preview:
            text.append(truncate(preview, desc_width), style="white")
        else:
            text.append("(no text content)", style="dim")
        return text


class RecordDetailPanel(ScrollableContainer, can_focus=True):
    """Scrollable panel showing the full text of the selected record."""

    def __init__(self, id: str = None):
        super().__init__(id=id)
        self.record: Optional[Record] = None

    def update(self, text: Text) -> None:
        """Replace all content."""
        for child in list(self.children):
            child.remove()
        self.mount(Static(text, markup=False))

    def show_record(self, record: Record, index: int, total: int):
        """Update display with the record's metadata and content."""
        self.record = record
        self.update(self.build_record_text(record, index, total))
        self.scroll_home(animate=False)

    @staticmethod
    def build_record_text(record: Record, index: int, total: int) -> Text:
        """Build a Rich Text block for a single record."""
        label, style, border_style = ROLE_STYLES.get(record.kind, ("Record", "bold", "white"))

        text = Text()
        text.append(f"━━━ {label} {index}/{total} ━━━\n", style="bold cyan")
        text.append("\n")
        text.append("Time: ", style="bold")
        text.append(f"{format_timestamp(record.timestamp, '%Y-%m-%d %H:%M:%S')}\n")
        text.append("ID: ", style="bold")
        text.append(f"{record.id or '(none)'}\n", style="dim")
        if record.parent_id:
            text.append("Parent: ", style="bold")
            text.append(f"{record.parent_id}\n", style="dim")
        extra = record.extra
        if extra.get("gitBranch"):
            text.append("Branch: ", style="bold")
            text.append(f"{extra['gitBranch']}\n", style="yellow")
        if extra.get("cwd"):
            text.append("Cwd: ", style="bold")
            text.append(f"{extra['cwd']}\n", style="dim")
        text.append("\n")

        content = record_text(record)
        header = f"┌─ {label} "
        text.append(header, style=style)
        text.append("─" * max(1, 40 - len(header)), style=border_style)
        text.append("\n")
        if content:
            for line in content.split("\n"):
                text.append("│ ", style=border_style)
                text.append(f"{line}\n")
        else:
            text.append("│ ", style=border_style)
            text.append("(no text content)\n", style="dim")
        text.append("└", style=border_style)
        text.append("─" * 40, style=border_style)
        text.append("\n\n")

        if record.message and not isinstance(record.message.get("content"), str):
            text.append("Editing replaces all content blocks with plain text.\n", style="yellow")
        text.append("Press ", style="dim")
        text.append("e", style="bold")
        text.append(" edit | ", style="dim")
        text.append("c", style="bold")
        text.append(" copy | ", style="dim")
        text.append("d", style="bold")
        text.append(" delete | ", style="dim")
        text.append("s", style="bold")
        text.append(" save", style="dim")
        return text

    def clear_display(self, message: str = "Select a message to view details"):
        self.record = None
        self.update(Text(message, style="dim"))


class EditScreen(ModalScreen[Optional[str]]):
    """Modal text editor. Dismisses with the new text, or None on cancel."""

    BINDINGS = [
        Binding("ctrl+s", "submit", "Apply"),
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, title: str, content: str):
        super().__init__()
        self.edit_title = title
        self.initial_text = content

    def compose(self) -> ComposeResult:
        with Vertical(id="edit-dialog"):
            yield Static(self.edit_title, id="edit-title")
            yield TextArea(self.initial_text, id="edit-area")
            yield Static("ctrl+s apply | escape cancel", id="edit-help")

    def on_mount(self) -> None:
        self.query_one("#edit-area", TextArea).focus()

    def action_submit(self) -> None:
        self.dismiss(self.query_one("#edit-area", TextArea).text)

    def action_cancel(self) -> None:
        self.dismiss(None)
