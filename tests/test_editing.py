"""Tests for in-memory edit operations."""

import copy
from pathlib import Path

import pytest

from jsonl_editor.editing import delete_record, edit_record, record_text
from jsonl_editor.jsonl import extract_message_content, parse_jsonl, serialize_jsonl
from jsonl_editor.models import Record

FIXTURE_PATH = Path(__file__).parent / "fixtures" / "claude_code_session.jsonl"


@pytest.fixture
def conversation():
    return parse_jsonl(FIXTURE_PATH.read_text(encoding="utf-8"))


class TestEditRecord:
    """Tests for edit_record."""

    def test_edit_replaces_content_only(self, conversation):
        """Test only message.content changes; passthrough fields stay."""
        before = copy.deepcopy(conversation.entries[1].data)
        entries = edit_record(conversation.entries, "u1", "Help me add OAuth instead")
        after = entries[1].data

        assert after["message"]["content"] == "Help me add OAuth instead"
        assert after["message"]["role"] == "user"
        del before["message"]["content"]
        after_without_content = copy.deepcopy(after)
        del after_without_content["message"]["content"]
        assert after_without_content == before

    def test_edit_leaves_other_records_alone(self, conversation):
        """Test records with other ids are the same objects."""
        entries = edit_record(conversation.entries, "u1", "changed")

        for i, entry in enumerate(entries):
            if i != 1:
                assert entry is conversation.entries[i]

    def test_edit_does_not_mutate_input(self, conversation):
        """Test the original record keeps its content."""
        original = conversation.entries[2]
        edit_record(conversation.entries, "a1", "rewritten")

        assert extract_message_content(original.message) == "I'll add JWT auth. First, reading app.py."

    def test_edit_drops_non_text_blocks(self, conversation):
        """Test editing a multi-block message stores a plain string."""
        entries = edit_record(conversation.entries, "a1", "rewritten")
        message = entries[2].message

        assert message["content"] == "rewritten"
        assert message["model"] == "claude-sonnet-4-20250514"
        assert "tool_use" not in serialize_jsonl(entries[2:3])

    def test_edit_unknown_id_is_noop(self, conversation):
        entries = edit_record(conversation.entries, "missing", "x")
        assert [e.data for e in entries] == [e.data for e in conversation.entries]

    def test_edit_record_without_message(self):
        """Test records lacking a message are not given one."""
        entries = [Record(data={"type": "summary", "uuid": "s1", "summary": "s"})]
        result = edit_record(entries, "s1", "new")

        assert result[0].data == {"type": "summary", "uuid": "s1", "summary": "s"}

    def test_edit_duplicate_ids_edits_all(self):
        """Test every record sharing the id is edited."""
        entries = parse_jsonl(
            '{"type":"user","uuid":"dup","message":{"role":"user","content":"one"}}\n'
            '{"type":"assistant","uuid":"x","message":{"role":"assistant","content":"mid"}}\n'
            '{"type":"assistant","uuid":"dup","message":{"role":"assistant","content":"two"}}\n'
        ).entries
        result = edit_record(entries, "dup", "same")

        assert [extract_message_content(r.message) for r in result] == ["same", "mid", "same"]
        assert len(parse_jsonl(serialize_jsonl(result)).find("dup")) == 2

    def test_edit_without_id_is_noop(self):
        """Test a None id edits nothing, even id-less records."""
        entries = [
            Record(data={"type": "summary", "summary": "s"}),
            Record(data={"type": "user", "message": {"role": "user", "content": "orphan"}}),
            Record(data={"type": "user", "uuid": "u1", "message": {"role": "user", "content": "hi"}}),
        ]
        result = edit_record(entries, entries[1].id, "changed")

        assert [r.data for r in result] == [r.data for r in entries]


class TestDeleteRecord:
    """Tests for delete_record."""

    def test_delete_removes_exactly_one(self, conversation):
        """Test deleting keeps all others in original order."""
        entries = delete_record(conversation.entries, "u2")

        assert len(entries) == len(conversation.entries) - 1
        assert [e.kind for e in entries] == [
            "summary", "user", "assistant", "file-history-snapshot", "assistant",
        ]
        assert "u2" not in [e.id for e in entries]

    def test_delete_unknown_id_is_noop(self, conversation):
        entries = delete_record(conversation.entries, "missing")
        assert entries == conversation.entries

    def test_delete_duplicate_ids_deletes_all(self):
        """Test every record sharing the id is removed."""
        entries = [
            Record(data={"type": "user", "uuid": "dup"}),
            Record(data={"type": "assistant", "uuid": "keep"}),
            Record(data={"type": "assistant", "uuid": "dup"}),
        ]
        result = delete_record(entries, "dup")
        assert [r.id for r in result] == ["keep"]

    def test_delete_without_id_keeps_id_less_records(self):
        """Test a None id does not remove summaries or other id-less records."""
        entries = [
            Record(data={"type": "summary", "summary": "s"}),
            Record(data={"type": "user", "message": {"role": "user", "content": "orphan"}}),
            Record(data={"type": "user", "uuid": "u1", "message": {"role": "user", "content": "hi"}}),
        ]
        result = delete_record(entries, entries[1].id)

        assert result == entries

    def test_delete_then_serialize(self, conversation):
        """Test a deleted message does not come back on save."""
        output = serialize_jsonl(delete_record(conversation.entries, "a2"))
        reparsed = parse_jsonl(output)

        assert [r.id for r in reparsed.messages] == ["u1", "a1", "u2"]
        assert len(reparsed.entries) == 5


class TestRecordText:
    """Tests for record_text (copy action)."""

    def test_message_text(self, conversation):
        assert record_text(conversation.messages[0]) == "Help me add authentication to the API"

    def test_summary_text(self, conversation):
        assert record_text(conversation.summaries[0]) == "Add JWT authentication to the API"

    def test_passthrough_record(self, conversation):
        assert record_text(conversation.entries[3]) == ""


class TestParsedConversation:
    """Tests for conversation views after editing."""

    def test_with_entries_rebuilds_views(self, conversation):
        edited = conversation.with_entries(delete_record(conversation.entries, "u1"))

        assert [r.id for r in edited.messages] == ["a1", "u2", "a2"]
        assert len(conversation.messages) == 4

    def test_find_returns_all_matches(self, conversation):
        assert [r.kind for r in conversation.find("a1")] == ["assistant"]
        assert conversation.find("missing") == []

    def test_find_without_id_matches_nothing(self, conversation):
        """Test id-less records (the snapshot) are not found by a None id."""
        assert conversation.entries[3].id is None
        assert conversation.find(None) == []

    def test_extra_fields(self, conversation):
        """Test passthrough fields are exposed but not interpreted."""
        extra = conversation.entries[2].extra

        assert extra["requestId"] == "req_01"
        assert extra["sessionId"] == "sess-1"
        assert extra["gitBranch"] == "main"
        assert "message" not in extra
        assert "uuid" not in extra
