"""Record model for Claude Code JSONL conversation files."""

from dataclasses import dataclass, field
from typing import Any, Optional

# Record kinds shown in the conversation view
SUMMARY = "summary"
USER = "user"
ASSISTANT = "assistant"
MESSAGE_KINDS = (USER, ASSISTANT)

# JSON keys interpreted by the editor; everything else is passthrough
CORE_KEYS = ("type", "uuid", "parentUuid", "timestamp", "message", "summary")


@dataclass
class Record:
    """One line of a JSONL file.

    Wraps the decoded JSON value as-is so that fields the editor never
    interprets (sessionId, cwd, gitBranch, ...) survive a round trip.
    """

    data: Any
    line_num: Optional[int] = None  # 1-based source line, None if built in memory

    @property
    def is_object(self) -> bool:
        return isinstance(self.data, dict)

    def _get(self, key: str, default=None):
        if self.is_object:
            return self.data.get(key, default)
        return default

    @property
    def kind(self) -> Optional[str]:
        kind = self._get("type")
        return kind if isinstance(kind, str) else None

    @property
    def id(self) -> Optional[str]:
        return self._get("uuid")

    @property
    def parent_id(self) -> Optional[str]:
        return self._get("parentUuid")

    @property
    def timestamp(self) -> Optional[str]:
        return self._get("timestamp")

    @property
    def message(self) -> Optional[dict]:
        message = self._get("message")
        return message if isinstance(message, dict) else None

    @property
    def summary_text(self) -> Optional[str]:
        return self._get("summary")

    @property
    def role(self) -> Optional[str]:
        if self.message:
            return self.message.get("role")
        return None

    @property
    def extra(self) -> dict:
        """Passthrough fields the editor does not interpret."""
        if not self.is_object:
            return {}
        return {k: v for k, v in self.data.items() if k not in CORE_KEYS}

    @property
    def is_summary(self) -> bool:
        return self.kind == SUMMARY

    @property
    def is_message(self) -> bool:
        return self.kind in MESSAGE_KINDS

    def with_content(self, content: str) -> "Record":
        """Return a copy whose message content is replaced by a plain string.

        Non-text content blocks are dropped for good. Records without a
        message are returned unchanged.
        """
        if self.message is None:
            return self
        data = dict(self.data)
        data["message"] = {**self.message, "content": content}
        return Record(data=data, line_num=self.line_num)


@dataclass
class ParseIssue:
    """A JSONL line that could not be decoded."""

    line_num: int
    line: str
    reason: str


@dataclass
class ParsedConversation:
    """All records of a file plus the summary and message views over them."""

    entries: list[Record] = field(default_factory=list)
    errors: list[ParseIssue] = field(default_factory=list)

    @property
    def summaries(self) -> list[Record]:
        return [r for r in self.entries if r.is_summary]

    @property
    def messages(self) -> list[Record]:
        return [r for r in self.entries if r.is_message]

    def find(self, record_id: Optional[str]) -> list[Record]:
        """All records carrying the given id (ids are not enforced unique).

        A ``None`` id addresses nothing, even though id-less records exist.
        """
        if record_id is None:
            return []
        return [r for r in self.entries if r.id == record_id]

    def with_entries(self, entries: list[Record]) -> "ParsedConversation":
        """New conversation over an edited sequence, keeping parse errors."""
        return ParsedConversation(entries=list(entries), errors=list(self.errors))
