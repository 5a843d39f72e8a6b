"""Base error definitions for crcsfv."""

from typing import Any, Dict


class CrcsfvError(Exception):
    """Base exception for all crcsfv errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class FileProcessingError(CrcsfvError):
    """Base exception for per-file errors."""

    @property
    def file_path(self) -> Any:
        return self.context.get("file_path")


class PathNotFoundError(FileProcessingError):
    """Path does not exist."""
    pass


class PathUnreadableError(FileProcessingError):
    """Path exists but its content cannot be read."""
    pass


class PermissionDeniedError(PathUnreadableError):
    """File access denied due to permissions."""
    pass


class ReadError(PathUnreadableError):
    """I/O failure while streaming file content."""
    pass


class DirectoryExpansionError(FileProcessingError):
    """Directory contents could not be listed."""
    pass


class ParseError(CrcsfvError):
    """Error parsing input text."""
    pass
