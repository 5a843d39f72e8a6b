"""SFV manifest model: parse, serialize, generate and write.

An SFV file is line oriented::

    ; comment lines start with a semicolon
    some/file.bin 1A2B3C4D
    a path with spaces.txt DEADBEEF

Blank lines and comments carry no checksum but are kept in place so a parsed
manifest serializes back to the same lines.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from crcsfv.common import PathNotFoundError, PathUnreadableError, format_crc32, parse_crc32
from .errors import ManifestParseError

logger = logging.getLogger(__name__)

COMMENT_MARKER = ";"

# Path is everything before the last run of whitespace
_ENTRY_RE = re.compile(r"^(?P<path>.*?)\s+(?P<checksum>\S+)$")


@dataclass(frozen=True)
class FileEntry:
    """One checksum line of a manifest."""
    path: str
    checksum: int

    def to_line(self) -> str:
        return f"{self.path} {format_crc32(self.checksum)}"


@dataclass(frozen=True)
class CommentLine:
    """A comment or blank line, kept verbatim."""
    text: str

    def to_line(self) -> str:
        return self.text


ManifestLine = Union[FileEntry, CommentLine]


@dataclass
class Manifest:
    """Ordered manifest lines plus the file they were read from, if any."""
    lines: List[ManifestLine] = field(default_factory=list)
    source_path: Optional[Path] = None

    @property
    def entries(self) -> List[FileEntry]:
        return [line for line in self.lines if isinstance(line, FileEntry)]

    @property
    def comments(self) -> List[CommentLine]:
        return [line for line in self.lines if isinstance(line, CommentLine)]

    def append(self, entry: ManifestLine) -> None:
        self.lines.append(entry)

    def __len__(self) -> int:
        return len(self.entries)

    def to_text(self) -> str:
        return serialize_manifest(self)


def generate_manifest(pairs: Iterable[Tuple[str, int]]) -> Manifest:
    """Build a manifest whose entries mirror ``(path, checksum)`` pairs in order."""
    manifest = Manifest()
    for path, checksum in pairs:
        manifest.append(FileEntry(path=str(path), checksum=checksum))
    return manifest


def serialize_manifest(manifest: Manifest) -> str:
    """Render manifest text, one newline-terminated line per item."""
    return "".join(f"{line.to_line()}\n" for line in manifest.lines)


def parse_line(line: str, line_number: int) -> ManifestLine:
    """Parse a single manifest line.

    Raises:
        ManifestParseError: If a non-comment line lacks a valid checksum
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(COMMENT_MARKER):
        return CommentLine(text=line)

    match = _ENTRY_RE.match(stripped)
    if match is None:
        raise ManifestParseError("missing checksum", line_number=line_number, line=line)

    try:
        checksum = parse_crc32(match.group("checksum"))
    except ValueError:
        raise ManifestParseError(
            f"invalid checksum {match.group('checksum')!r}",
            line_number=line_number,
            line=line,
        ) from None

    return FileEntry(path=match.group("path"), checksum=checksum)


def parse_manifest(text: str, source_path: Optional[Path] = None) -> Manifest:
    """Parse SFV text into a manifest.

    Parsing stops at the first malformed line: a manifest that is partly
    corrupt is not trusted for verification.

    Args:
        text: Manifest content
        source_path: File the text was read from

    Returns:
        Parsed Manifest

    Raises:
        ManifestParseError: On the first malformed checksum line
    """
    manifest = Manifest(source_path=source_path)
    for line_number, line in enumerate(text.splitlines(), start=1):
        manifest.append(parse_line(line, line_number))
    logger.debug(f"Parsed manifest: {{'entries': {len(manifest)}, 'lines': {len(manifest.lines)}}}")
    return manifest


def read_manifest(path: Path | str, encoding: str = "utf-8") -> Manifest:
    """Read and parse a manifest file.

    Raises:
        PathNotFoundError: Manifest file does not exist
        PathUnreadableError: Manifest file cannot be read or decoded
        ManifestParseError: Manifest contains a malformed line
    """
    path = Path(path)
    if encoding.lower().replace("_", "-") in ("utf-8", "utf8"):
        encoding = "utf-8-sig"
    try:
        text = path.read_text(encoding=encoding, errors="surrogateescape")
    except FileNotFoundError as e:
        raise PathNotFoundError(f"Failed to read file {path}: {e.strerror}", file_path=path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise PathUnreadableError(f"Failed to read file {path}: {e}", file_path=path) from e

    try:
        return parse_manifest(text, source_path=path)
    except ManifestParseError as e:
        e.context["file_path"] = path
        raise


def write_manifest(manifest: Manifest, path: Path | str, encoding: str = "utf-8") -> None:
    """Write a manifest atomically.

    The text is written to a temporary file next to ``path``, flushed to
    disk and renamed over the destination. On failure the temporary file is
    removed and the destination is left untouched.

    Paths holding bytes that are not valid in ``encoding`` (surrogate-escaped
    file names) are written back as the original bytes.
    """
    path = Path(path)
    tmp = path.with_name(f".{path.name}.{os.getpid()}.tmp")
    try:
        with tmp.open("w", encoding=encoding, errors="surrogateescape", newline="\n") as f:
            f.write(serialize_manifest(manifest))
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise

    logger.info(f"Manifest written: {{'path': {str(path)!r}, 'entries': {len(manifest)}}}")
