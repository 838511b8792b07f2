"""Editor configuration."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3001
SAMPLES_DIR = Path("samples")


def _env_flag(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class EditorConfig:
    """Immutable settings shared by the file layer, the API and the TUI."""

    jsonl_path: Optional[Path] = None  # file or directory; None = unconfigured
    backup: bool = True
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    verbose: bool = False
    quiet: bool = False

    @property
    def is_configured(self) -> bool:
        return self.jsonl_path is not None

    @staticmethod
    def from_env() -> "EditorConfig":
        """Load settings from environment with JSONL_EDITOR_ prefix."""
        kwargs = {}
        if v := os.environ.get("JSONL_EDITOR_PATH"):
            kwargs["jsonl_path"] = Path(v).expanduser().resolve()
        if v := os.environ.get("JSONL_EDITOR_BACKUP"):
            kwargs["backup"] = _env_flag(v)
        if v := os.environ.get("JSONL_EDITOR_HOST"):
            kwargs["host"] = v
        if v := os.environ.get("JSONL_EDITOR_PORT"):
            kwargs["port"] = int(v)
        return EditorConfig(**kwargs)
