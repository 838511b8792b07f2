"""File access scoped to the configured root path."""

import logging
import os
import shutil
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import EditorConfig
from .errors import InvalidPathError, NotFoundError, ReadError, UnconfiguredError, WriteError

logger = logging.getLogger(__name__)

JSONL_SUFFIX = ".jsonl"
BACKUP_MARKER = ".backup."


@dataclass
class JsonlFile:
    """An addressable JSONL file under the root."""

    name: str
    path: Path
    is_file: bool = True

    def to_dict(self) -> dict:
        return {"name": self.name, "path": str(self.path), "isFile": self.is_file}


@dataclass
class PathInfo:
    """What the root path resolves to: one file, or a directory of files."""

    is_directory: bool
    file_path: Optional[Path] = None
    files: list[JsonlFile] = field(default_factory=list)


@dataclass
class WriteResult:
    file_path: Path
    backup_path: Optional[Path] = None


def backup_path_for(path: Path, now_ms: Optional[int] = None) -> Path:
    """Sibling path ``<name>.backup.<unix-epoch-millis>``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return path.with_name(f"{path.name}{BACKUP_MARKER}{now_ms}")


class FileAccess:
    """Reads and writes JSONL files under a single root file or directory.

    Holds no state besides the configuration; every call resolves the root
    again so changes on disk are picked up between requests.
    """

    def __init__(self, config: EditorConfig):
        self.config = config

    @property
    def root(self) -> Path:
        if self.config.jsonl_path is None:
            raise UnconfiguredError()
        return self.config.jsonl_path

    def resolve_target(self) -> PathInfo:
        """Describe the root: a single file or the JSONL files in a directory."""
        root = self.root
        logger.debug(f"Checking path: {root}")
        try:
            if root.is_dir():
                files = sorted(
                    (
                        JsonlFile(name=p.name, path=p)
                        for p in root.iterdir()
                        if p.name.endswith(JSONL_SUFFIX) and p.is_file()
                    ),
                    key=lambda f: f.name,
                )
                logger.debug(f"Found {len(files)} JSONL files in directory: {root}")
                return PathInfo(is_directory=True, files=files)
            if root.is_file():
                return PathInfo(is_directory=False, file_path=root)
        except OSError as e:
            logger.error(f"Failed to access path: {root} - {e}")
            raise NotFoundError(f"Path not found: {root}") from e
        logger.error(f"Failed to access path: {root}")
        raise NotFoundError(f"Path not found: {root}")

    def list_files(self) -> list[JsonlFile]:
        """Files available for editing; a single-file root lists itself."""
        info = self.resolve_target()
        if info.is_directory:
            return info.files
        return [JsonlFile(name=info.file_path.name, path=info.file_path)]

    def resolve_file(self, filename: str) -> Path:
        """Map a filename from a request onto a path inside the root.

        With a single-file root the filename is informational and the root
        file is always used.
        """
        root = self.root
        if not root.is_dir():
            return root
        if not filename:
            raise InvalidPathError("Filename is required")
        base = root.resolve()
        candidate = (base / filename).resolve()
        if candidate == base or not candidate.is_relative_to(base):
            logger.warning(f"Rejected path outside root: {filename}")
            raise InvalidPathError(f"Invalid filename: {filename}")
        if not candidate.name.endswith(JSONL_SUFFIX):
            logger.warning(f"Rejected non-JSONL filename: {filename}")
            raise InvalidPathError(f"Only {JSONL_SUFFIX} files can be edited: {filename}")
        return candidate

    def read_file(self, filename: str) -> tuple[str, Path]:
        """Return (content, path) of a file under the root."""
        path = self.resolve_file(filename)
        try:
            with open(path, encoding="utf-8") as f:
                content = f.read()
        except FileNotFoundError as e:
            raise NotFoundError(f"File not found: {path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(f"Could not read {path}: {e}") from e
        logger.debug(f"Read {path} ({len(content)} characters)")
        return content, path

    def write_file(self, filename: str, content: str, backup: Optional[bool] = None) -> WriteResult:
        """Overwrite a file, optionally backing up the previous version first.

        A failed backup is only logged. The new content is written to a
        temporary sibling and renamed over the target, so a failure before
        the rename leaves the original untouched.
        """
        path = self.resolve_file(filename)
        if backup is None:
            backup = self.config.backup

        result = WriteResult(file_path=path)
        if backup:
            result.backup_path = self._backup(path)

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            if path.exists():
                shutil.copymode(path, tmp_name)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error(f"Failed to save file {path}: {e}")
            raise WriteError(f"Could not write {path}: {e}") from e

        logger.debug(f"Wrote {path} ({len(content)} characters)")
        return result

    def _backup(self, path: Path) -> Optional[Path]:
        target = backup_path_for(path)
        try:
            shutil.copyfile(path, target)
        except OSError as e:
            logger.warning(f"Could not create backup (file may be new): {e}")
            return None
        logger.debug(f"Backup created: {target}")
        return target

    def list_backups(self, filename: str) -> list[Path]:
        """Backups of a file, newest first."""
        path = self.resolve_file(filename)
        prefix = f"{path.name}{BACKUP_MARKER}"
        backups = []
        try:
            for p in path.parent.iterdir():
                stamp = p.name[len(prefix):]
                if p.name.startswith(prefix) and stamp.isdigit():
                    backups.append((int(stamp), p))
        except OSError as e:
            raise NotFoundError(f"Path not found: {path.parent}") from e
        return [p for _, p in sorted(backups, reverse=True)]
