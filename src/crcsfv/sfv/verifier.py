"""Manifest verification against files on disk."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from crcsfv.common import LogContext, resolve_entry_path
from crcsfv.common.checksums import CRC32_CHUNK_SIZE
from .errors import ChecksumMismatchError, FileMissingError, ManifestError
from .hasher import hash_files
from .manifest import FileEntry, Manifest, read_manifest

logger = logging.getLogger(__name__)


class VerificationStatus(str, Enum):
    """Outcome of checking one manifest entry."""
    MATCHED = "matched"
    MISMATCHED = "mismatched"
    MISSING = "missing"


@dataclass(frozen=True)
class VerificationResult:
    """Verification outcome for one manifest entry.

    Attributes:
        entry: The manifest entry checked
        status: Matched, mismatched or missing
        resolved_path: Path the entry was resolved to on disk
        actual: Recomputed checksum (None when the file could not be read)
        reason: Why the file could not be read (MISSING only)
    """
    entry: FileEntry
    status: VerificationStatus
    resolved_path: Path
    actual: Optional[int] = None
    reason: Optional[str] = None

    @property
    def expected(self) -> int:
        return self.entry.checksum

    @property
    def ok(self) -> bool:
        return self.status is VerificationStatus.MATCHED

    def to_error(self) -> Optional[ManifestError]:
        """Describe a failing result as an error, or None for a match."""
        if self.status is VerificationStatus.MISMATCHED:
            return ChecksumMismatchError(self.entry.path, self.expected, self.actual)
        if self.status is VerificationStatus.MISSING:
            return FileMissingError(self.entry.path, self.reason or "unknown error")
        return None


@dataclass
class VerificationReport:
    """All results of one verification run, in manifest order."""
    results: List[VerificationResult] = field(default_factory=list)
    manifest_path: Optional[Path] = None

    @property
    def failures(self) -> List[VerificationResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results)

    def _count(self, status: VerificationStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    @property
    def matched_count(self) -> int:
        return self._count(VerificationStatus.MATCHED)

    @property
    def mismatched_count(self) -> int:
        return self._count(VerificationStatus.MISMATCHED)

    @property
    def missing_count(self) -> int:
        return self._count(VerificationStatus.MISSING)


def verify_manifest(
    manifest: Manifest,
    base_dir: Optional[Path] = None,
    chunk_size: int = CRC32_CHUNK_SIZE,
    workers: int = 1,
    on_result: Optional[Callable[[VerificationResult], None]] = None,
) -> VerificationReport:
    """Re-hash every manifest entry and compare with the recorded checksum.

    Relative entry paths are resolved against ``base_dir``, falling back to
    the directory of the manifest file and then the current directory.
    Neither the manifest nor any file is modified.

    Args:
        manifest: Parsed manifest
        base_dir: Directory relative entry paths are resolved against
        chunk_size: Number of bytes read at once
        workers: Number of hashing threads
        on_result: Called with each result in manifest order

    Returns:
        VerificationReport with one result per entry
    """
    if base_dir is None:
        if manifest.source_path is not None:
            base_dir = Path(manifest.source_path).absolute().parent
        else:
            base_dir = Path.cwd()

    entries = manifest.entries
    resolved = [resolve_entry_path(entry.path, base_dir) for entry in entries]
    report = VerificationReport(manifest_path=manifest.source_path)

    with LogContext(logger, manifest=str(manifest.source_path), base_dir=str(base_dir)):
        logger.info(f"Verifying manifest: {{'entries': {len(entries)}, 'base_dir': {str(base_dir)!r}}}")

        hashed = hash_files(resolved, chunk_size=chunk_size, workers=workers)
        for entry, path, hashed_file in zip(entries, resolved, hashed):
            if not hashed_file.ok:
                result = VerificationResult(
                    entry=entry,
                    status=VerificationStatus.MISSING,
                    resolved_path=path,
                    reason=hashed_file.error.message,
                )
            elif hashed_file.checksum == entry.checksum:
                result = VerificationResult(
                    entry=entry,
                    status=VerificationStatus.MATCHED,
                    resolved_path=path,
                    actual=hashed_file.checksum,
                )
            else:
                result = VerificationResult(
                    entry=entry,
                    status=VerificationStatus.MISMATCHED,
                    resolved_path=path,
                    actual=hashed_file.checksum,
                )

            if not result.ok:
                logger.info(result.to_error().message)
            report.results.append(result)
            if on_result is not None:
                on_result(result)

        logger.info(
            f"Verification complete: {{'matched': {report.matched_count}, "
            f"'mismatched': {report.mismatched_count}, 'missing': {report.missing_count}}}"
        )

    return report


def verify_sfv_file(
    sfv_path: Path | str,
    base_dir: Optional[Path] = None,
    chunk_size: int = CRC32_CHUNK_SIZE,
    workers: int = 1,
    encoding: str = "utf-8",
    on_result: Optional[Callable[[VerificationResult], None]] = None,
) -> VerificationReport:
    """Read an SFV file and verify it.

    Raises:
        ManifestParseError: The manifest is malformed; nothing is verified
        PathNotFoundError: The manifest file does not exist
        PathUnreadableError: The manifest file cannot be read
    """
    manifest = read_manifest(sfv_path, encoding=encoding)
    return verify_manifest(
        manifest, base_dir=base_dir, chunk_size=chunk_size, workers=workers, on_result=on_result
    )
