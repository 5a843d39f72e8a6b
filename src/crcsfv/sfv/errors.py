"""Manifest-specific errors."""

from crcsfv.common import CrcsfvError, ParseError, format_crc32


class ManifestError(CrcsfvError):
    """SFV manifest processing failed."""
    pass


class ManifestParseError(ManifestError, ParseError):
    """Manifest contains a malformed checksum line."""

    def __init__(self, message: str, line_number: int, line: str, **context) -> None:
        super().__init__(
            f"Line {line_number}: {message}",
            line_number=line_number,
            line=line,
            **context,
        )
        self.line_number = line_number
        self.line = line


class ChecksumMismatchError(ManifestError):
    """Recomputed checksum differs from the recorded one."""

    def __init__(self, path: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Checksum mismatch for {path}: expected {format_crc32(expected)}, "
            f"got {format_crc32(actual)}",
            file_path=path,
            expected=expected,
            actual=actual,
        )
        self.path = path
        self.expected = expected
        self.actual = actual


class FileMissingError(ManifestError):
    """File referenced by a manifest could not be read during verification."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Missing {path}: {reason}", file_path=path, reason=reason)
        self.path = path
        self.reason = reason
