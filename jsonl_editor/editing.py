"""In-memory edit operations over a record sequence.

Both editors apply these to their transient state before saving. Ids are
not guaranteed unique, so every operation acts on all records sharing the
given id. Records without an id cannot be addressed: a ``None`` id matches
nothing.
"""

from typing import Optional

from .jsonl import extract_message_content
from .models import Record


def edit_record(entries: list[Record], record_id: Optional[str], new_content: str) -> list[Record]:
    """Replace the message content of every record with ``record_id``.

    Returns a new list; the input records are left untouched. Records
    without a message are kept as they are.
    """
    if record_id is None:
        return list(entries)
    return [
        entry.with_content(new_content) if entry.id == record_id else entry
        for entry in entries
    ]


def delete_record(entries: list[Record], record_id: Optional[str]) -> list[Record]:
    """Remove every record with ``record_id``, keeping the others in order."""
    if record_id is None:
        return list(entries)
    return [entry for entry in entries if entry.id != record_id]


def record_text(record: Record) -> str:
    """Text a copy action puts on the clipboard."""
    if record.is_summary:
        return record.summary_text or ""
    return extract_message_content(record.message)
