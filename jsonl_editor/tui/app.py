"""JSONL Editor TUI Application."""

import logging
from typing import Optional

from rich.text import Text
from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Footer, Header, ListView, Static

from ..config import EditorConfig
from ..editing import delete_record, edit_record, record_text
from ..errors import EditorError
from ..files import FileAccess, JsonlFile
from ..jsonl import parse_jsonl, serialize_jsonl
from ..models import ParsedConversation, Record
from .styles import APP_CSS
from .widgets import EditScreen, RecordDetailPanel, RecordItem

logger = logging.getLogger(__name__)


class JSONLEditorApp(App):
    """Terminal editor for one JSONL file or a directory of them."""

    CSS = APP_CSS

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("e", "edit_record", "Edit"),
        Binding("d", "delete_record", "Delete"),
        Binding("c", "copy_record", "Copy"),
        Binding("s", "save", "Save"),
        Binding("r", "reload", "Reload"),
        Binding("n", "next_file", "Next file"),
        Binding("p", "prev_file", "Prev file"),
        Binding("tab", "switch_pane", "Tab: Detail", priority=True),
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
    ]

    def __init__(self, config: EditorConfig, filename: Optional[str] = None):
        super().__init__()
        self.config = config
        self.files = FileAccess(config)
        self.initial_filename = filename

        self.available_files: list[JsonlFile] = []
        self.current_file: Optional[str] = None
        self.conversation: Optional[ParsedConversation] = None
        self.dirty = False
        self._quit_armed = False

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal():
            with Vertical(id="left-container"):
                yield Static("", id="file-bar")
                with Vertical(id="record-container"):
                    yield Static("[bold]Messages[/]", id="record-header", classes="list-header")
                    yield ListView(id="record-list")
            with Vertical(id="detail-container"):
                yield RecordDetailPanel(id="detail-panel")
        yield Footer()

    def on_mount(self):
        self.title = "JSONL Editor"
        self.query_one("#detail-panel", RecordDetailPanel).clear_display("Loading...")
        self._load_file_list()

    # -- loading --

    @work(thread=True, exclusive=True, group="load")
    def _load_file_list(self):
        try:
            files = self.files.list_files()
        except EditorError as e:
            self.call_from_thread(self.notify, e.message, severity="error")
            return
        self.call_from_thread(self._on_file_list_loaded, files)

    def _on_file_list_loaded(self, files: list[JsonlFile]):
        self.available_files = files
        if not files:
            self.query_one("#detail-panel", RecordDetailPanel).clear_display("No JSONL files found")
            self._update_file_bar()
            return
        names = [f.name for f in files]
        name = self.initial_filename if self.initial_filename in names else names[0]
        self._load_file(name)

    @work(thread=True, exclusive=True, group="load")
    def _load_file(self, filename: str):
        """Read and parse a file; on failure the current conversation stays."""
        try:
            content, _ = self.files.read_file(filename)
        except EditorError as e:
            logger.error(f"Failed to load {filename}: {e.message}")
            self.call_from_thread(self.notify, f"Load failed: {e.message}", severity="error")
            return
        conversation = parse_jsonl(content)
        self.call_from_thread(self._on_file_loaded, filename, conversation)

    def _on_file_loaded(self, filename: str, conversation: ParsedConversation):
        self.current_file = filename
        self.conversation = conversation
        self.dirty = False
        self._populate_record_list()
        if conversation.errors:
            lines = ", ".join(str(issue.line_num) for issue in conversation.errors[:5])
            self.notify(
                f"Skipped {len(conversation.errors)} malformed line(s): {lines}",
                severity="warning",
            )

    def _populate_record_list(self, keep_index: int = 0):
        record_list = self.query_one("#record-list", ListView)
        record_list.clear()
        messages = self.conversation.messages if self.conversation else []
        for i, record in enumerate(messages, 1):
            record_list.append(RecordItem(record, i))

        self.query_one("#record-header", Static).update(
            f"[bold]Messages[/] [dim]({len(messages)})[/]"
        )
        self._update_file_bar()

        detail = self.query_one("#detail-panel", RecordDetailPanel)
        if messages:
            record_list.index = min(keep_index, len(messages) - 1)
            record_list.focus()
        else:
            detail.clear_display("(no messages in this file)")

    def _update_file_bar(self):
        text = Text()
        text.append("File: ", style="dim")
        text.append(self.current_file or "-", style="bold cyan")
        if len(self.available_files) > 1:
            names = [f.name for f in self.available_files]
            if self.current_file in names:
                pos = names.index(self.current_file) + 1
                text.append(f" ({pos}/{len(names)})", style="dim")
        if self.conversation:
            summaries = len(self.conversation.summaries)
            if summaries:
                text.append(f" | {summaries} summaries", style="dim")
        if self.dirty:
            text.append(" | modified", style="bold yellow")
        if not self.config.backup:
            text.append(" | no backup", style="dim red")
        self.query_one("#file-bar", Static).update(text)
        self.sub_title = f"{self.current_file or ''}{' *' if self.dirty else ''}"

    # -- selection --

    @on(ListView.Highlighted, "#record-list")
    def on_record_highlighted(self, event: ListView.Highlighted):
        if event.item and isinstance(event.item, RecordItem):
            total = len(self.conversation.messages) if self.conversation else 0
            self.query_one("#detail-panel", RecordDetailPanel).show_record(
                event.item.record, event.item.position, total
            )

    def _selected(self) -> Optional[tuple[Record, int]]:
        record_list = self.query_one("#record-list", ListView)
        item = record_list.highlighted_child
        if isinstance(item, RecordItem):
            return item.record, record_list.index or 0
        return None

    # -- editing --

    def _apply(self, entries: list[Record], keep_index: int):
        self.conversation = self.conversation.with_entries(entries)
        self.dirty = True
        self._quit_armed = False
        self._populate_record_list(keep_index)

    def action_edit_record(self):
        selected = self._selected()
        if not selected:
            return
        record, index = selected
        if record.id is None:
            self.notify("Record has no uuid; cannot edit", severity="warning")
            return

        def apply_edit(new_text: Optional[str]):
            if new_text is None:
                return
            self._apply(edit_record(self.conversation.entries, record.id, new_text), index)
            self.notify("Message updated (not saved yet)")

        title = f"Edit {record.kind} message {record.id}"
        self.push_screen(EditScreen(title, record_text(record)), apply_edit)

    def action_delete_record(self):
        selected = self._selected()
        if not selected:
            return
        record, index = selected
        if record.id is None:
            self.notify("Record has no uuid; cannot delete", severity="warning")
            return
        removed = len(self.conversation.find(record.id))
        self._apply(delete_record(self.conversation.entries, record.id), index)
        self.notify(f"Deleted {removed} record(s) with id {record.id} (not saved yet)")

    def action_copy_record(self):
        selected = self._selected()
        if not selected:
            self.notify("Nothing to copy", severity="warning")
            return
        self.copy_to_clipboard(record_text(selected[0]))
        self.notify("Message copied to clipboard")

    # -- persistence --

    def action_save(self):
        if self.conversation is None or self.current_file is None:
            self.notify("Nothing to save", severity="warning")
            return
        self._save_file(self.current_file, serialize_jsonl(self.conversation.entries))

    @work(thread=True, exclusive=True, group="save")
    def _save_file(self, filename: str, content: str):
        try:
            result = self.files.write_file(filename, content)
        except EditorError as e:
            self.call_from_thread(self.notify, f"Save failed: {e.message}", severity="error")
            return
        self.call_from_thread(self._on_saved, result.file_path, result.backup_path)

    def _on_saved(self, path, backup_path):
        self.dirty = False
        self._update_file_bar()
        message = f"Saved {path}"
        if backup_path:
            message += f"\nBackup: {backup_path.name}"
        self.notify(message, title="Saved")

    def action_reload(self):
        if self.current_file:
            self._load_file(self.current_file)

    def _switch_file(self, step: int):
        if len(self.available_files) < 2:
            return
        if self.dirty:
            self.notify("Unsaved changes: save (s) or reload (r) first", severity="warning")
            return
        names = [f.name for f in self.available_files]
        pos = names.index(self.current_file) if self.current_file in names else 0
        self._load_file(names[(pos + step) % len(names)])

    def action_next_file(self):
        self._switch_file(1)

    def action_prev_file(self):
        self._switch_file(-1)

    async def action_quit(self):
        if self.dirty and not self._quit_armed:
            self._quit_armed = True
            self.notify("Unsaved changes. Press q again to quit without saving.", severity="warning")
            return
        self.exit()

    # -- navigation --

    def action_switch_pane(self):
        detail = self.query_one("#detail-panel", RecordDetailPanel)
        if detail.has_focus:
            self.query_one("#record-list", ListView).focus()
        else:
            detail.focus()

    def action_cursor_down(self):
        detail = self.query_one("#detail-panel", RecordDetailPanel)
        if detail.has_focus:
            detail.scroll_down()
        else:
            self.query_one("#record-list", ListView).action_cursor_down()

    def action_cursor_up(self):
        detail = self.query_one("#detail-panel", RecordDetailPanel)
        if detail.has_focus:
            detail.scroll_up()
        else:
            self.query_one("#record-list", ListView).action_cursor_up()
