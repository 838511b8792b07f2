"""Error types raised by the file access layer and reported by the API."""


class EditorError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnconfiguredError(EditorError):
    """No root path was configured."""

    status_code = 400

    def __init__(self, message: str = "No --jsonl-path specified"):
        super().__init__(message)


class InvalidPathError(EditorError):
    """A requested filename resolves outside the configured root."""

    status_code = 400


class NotFoundError(EditorError):
    status_code = 404


class ReadError(EditorError):
    status_code = 404


class WriteError(EditorError):
    status_code = 500

