"""CSS styles for the JSONL Editor TUI."""

APP_CSS = """
Screen {
    layout: horizontal;
}

#left-container {
    width: 50%;
    height: 100%;
}

#record-container {
    height: 1fr;
    border: solid $primary;
}

#detail-container {
    width: 50%;
    height: 100%;
    border: solid $secondary;
    padding: 1;
}

#record-list {
    height: 1fr;
}

.list-header {
    height: auto;
    background: $surface;
    padding: 0 1;
    text-style: bold;
}

#record-header {
    color: $primary;
}

#file-bar {
    height: 1;
    padding: 0 1;
    background: $surface;
}

#detail-panel {
    height: 100%;
    overflow-y: auto;
    scrollbar-gutter: stable;
}

#detail-panel:focus {
    border: solid $success;
}

RecordItem {
    height: 1;
    padding: 0 1;
}

RecordItem:hover {
    background: $surface-lighten-1;
}

ListView:focus > ListItem.-active {
    background: $primary-darken-1;
}

Footer {
    background: $surface;
}

EditScreen {
    align: center middle;
}

#edit-dialog {
    width: 90%;
    height: 80%;
    border: thick $warning;
    background: $surface;
    padding: 0 1;
}

#edit-title {
    height: 1;
    text-style: bold;
    color: $warning;
}

#edit-area {
    height: 1fr;
}

#edit-help {
    height: 1;
    color: $text-muted;
}
"""
