"""JSONL Editor - view and edit Claude Code conversation logs."""

__version__ = "0.1.0"
