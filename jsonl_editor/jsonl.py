"""JSONL parsing, serialization and message content extraction."""

import json
import logging
from typing import Iterable

from .models import ParsedConversation, ParseIssue, Record

logger = logging.getLogger(__name__)


def parse_jsonl(text: str) -> ParsedConversation:
    """Parse JSONL text into an ordered list of records.

    Blank lines are skipped. A line that is not valid JSON is dropped and
    reported in ``errors``; the remaining lines are still parsed.
    """
    conversation = ParsedConversation()
    for line_num, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning(f"Skipping malformed JSONL line {line_num}: {e.msg}")
            conversation.errors.append(ParseIssue(line_num=line_num, line=line, reason=e.msg))
            continue
        conversation.entries.append(Record(data=data, line_num=line_num))

    logger.debug(
        f"Parsed {len(conversation.entries)} records "
        f"({len(conversation.messages)} messages, {len(conversation.errors)} errors)"
    )
    return conversation


def serialize_jsonl(records: Iterable[Record]) -> str:
    """Serialize records to JSONL, one compact line each, newline-terminated."""
    lines = [
        json.dumps(record.data, ensure_ascii=False, separators=(",", ":"))
        for record in records
    ]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def extract_message_content(message) -> str:
    """Flatten a message's content into display text.

    String content is returned as-is. For a list of content blocks, the
    ``text`` of every ``type == "text"`` block is concatenated in order;
    other block types (tool_use, image, ...) are ignored.
    """
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = []
        for item in content:
            if isinstance(item, dict) and item.get("type") == "text":
                text = item.get("text")
                if isinstance(text, str):
                    texts.append(text)
        return "".join(texts)
    return ""
