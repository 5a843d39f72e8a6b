"""Per-file and batch CRC32 computation."""

import errno
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from crcsfv.common import (
    FileProcessingError, PathNotFoundError, PathUnreadableError, PermissionDeniedError,
    ReadError, crc32_of_stream
)
from crcsfv.common.checksums import CRC32_CHUNK_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HashResult:
    """Outcome of hashing one file: a checksum or the error that prevented it."""
    path: Path
    checksum: Optional[int] = None
    error: Optional[FileProcessingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _open_error(path: Path, e: OSError) -> FileProcessingError:
    reason = e.strerror or str(e)
    if isinstance(e, FileNotFoundError) or e.errno == errno.ENOENT:
        return PathNotFoundError(f"Failed to open file {path}: {reason}", file_path=path)
    if isinstance(e, PermissionError):
        return PermissionDeniedError(f"Failed to open file {path}: {reason}", file_path=path)
    return PathUnreadableError(f"Failed to open file {path}: {reason}", file_path=path)


def compute_for(path: Path | str, chunk_size: int = CRC32_CHUNK_SIZE) -> int:
    """Compute the CRC32 of a file, streaming it in chunks.

    Args:
        path: File to hash
        chunk_size: Number of bytes to read at once

    Returns:
        CRC32 checksum as unsigned 32-bit integer

    Raises:
        PathNotFoundError: File does not exist
        PermissionDeniedError: File cannot be opened due to permissions
        PathUnreadableError: File cannot be opened (e.g. it is a directory)
        ReadError: I/O failure while reading
    """
    path = Path(path)
    try:
        fh = open(path, 'rb')
    except OSError as e:
        raise _open_error(path, e) from e

    with fh:
        try:
            return crc32_of_stream(fh, chunk_size)
        except OSError as e:
            raise ReadError(
                f"Error while reading file {path}: {e.strerror or e}", file_path=path
            ) from e


def hash_file(path: Path | str, chunk_size: int = CRC32_CHUNK_SIZE) -> HashResult:
    """Hash one file, capturing per-file errors instead of raising."""
    path = Path(path)
    try:
        return HashResult(path=path, checksum=compute_for(path, chunk_size))
    except FileProcessingError as e:
        logger.debug(f"Hash failed: {{'path': {str(path)!r}, 'error': {e.message!r}}}")
        return HashResult(path=path, error=e)


def hash_files(
    paths: Iterable[Path | str],
    chunk_size: int = CRC32_CHUNK_SIZE,
    workers: int = 1,
) -> Iterator[HashResult]:
    """Hash a batch of files, yielding one result per path in input order.

    A failing file yields an error result and the batch continues. With
    ``workers > 1`` files are hashed on a bounded thread pool; results are
    still yielded in the order of ``paths``.

    Args:
        paths: Files to hash
        chunk_size: Number of bytes to read at once
        workers: Number of hashing threads

    Yields:
        HashResult for each path
    """
    if workers <= 1:
        for path in paths:
            yield hash_file(path, chunk_size)
        return

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="crcsfv-hash") as executor:
        # Executor.map returns results in submission order
        yield from executor.map(lambda p: hash_file(p, chunk_size), paths)
