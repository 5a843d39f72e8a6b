"""Manifest generation: enumerate, hash, build."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from crcsfv import __version__
from crcsfv.common import FileProcessingError, manifest_path
from crcsfv.common.checksums import CRC32_CHUNK_SIZE
from .discovery import FileEnumerator
from .hasher import HashResult, hash_files
from .manifest import COMMENT_MARKER, CommentLine, FileEntry, Manifest

logger = logging.getLogger(__name__)


@dataclass
class GenerationReport:
    """Result of a generation run.

    Attributes:
        manifest: Entries for every file hashed successfully
        failures: Files that were enumerated but could not be hashed
        enumeration_errors: Input paths or directories that could not be expanded
    """
    manifest: Manifest
    failures: List[HashResult] = field(default_factory=list)
    enumeration_errors: List[FileProcessingError] = field(default_factory=list)

    @property
    def hashed_count(self) -> int:
        return len(self.manifest)

    @property
    def failed_count(self) -> int:
        return len(self.failures) + len(self.enumeration_errors)

    @property
    def ok(self) -> bool:
        return self.failed_count == 0


def _entry_path(path: Path, base_dir: Optional[Path]) -> str:
    """Manifest path for a file, guarded so it cannot be read back as a comment."""
    text = manifest_path(path, base_dir)
    if text.startswith(COMMENT_MARKER) or text[:1].isspace():
        return os.path.join(os.curdir, text)
    return text

def create_manifest(
    paths: Iterable[Path | str],
    recursive: bool = False,
    base_dir: Optional[Path] = None,
    chunk_size: int = CRC32_CHUNK_SIZE,
    workers: int = 1,
    follow_symlinks: bool = False,
    dedupe: bool = True,
    header: bool = False,
    exclude: Iterable[Path | str] = (),
    on_entry: Optional[Callable[[FileEntry], None]] = None,
) -> GenerationReport:
    """Hash every file named by ``paths`` and collect the results in a manifest.

    Files that fail to hash are left out of the manifest and listed in the
    report instead. Manifest paths are relative to ``base_dir`` (default:
    current directory) when the file lives beneath it.

    Args:
        paths: Files and directories to checksum
        recursive: Walk directories recursively
        base_dir: Directory manifest paths are relative to
        chunk_size: Number of bytes read at once
        workers: Number of hashing threads
        follow_symlinks: Descend into symlinked directories when recursive
        dedupe: Skip files reached twice through overlapping inputs
        header: Start the manifest with a "Generated by" comment
        exclude: Files to leave out, such as the manifest being written
        on_entry: Called with each entry as soon as it is added

    Returns:
        GenerationReport with the manifest and all failures
    """
    enumerator = FileEnumerator(
        paths,
        recursive=recursive,
        follow_symlinks=follow_symlinks,
        dedupe=dedupe,
        exclude=exclude,
    )
    manifest = Manifest()
    if header:
        manifest.append(CommentLine(f"{COMMENT_MARKER} Generated by crcsfv {__version__}"))

    report = GenerationReport(manifest=manifest)
    for result in hash_files(enumerator, chunk_size=chunk_size, workers=workers):
        if not result.ok:
            logger.error(result.error.message)
            report.failures.append(result)
            continue

        entry = FileEntry(path=_entry_path(result.path, base_dir), checksum=result.checksum)
        manifest.append(entry)
        if on_entry is not None:
            on_entry(entry)

    report.enumeration_errors.extend(enumerator.errors)
    logger.info(
        f"Generation complete: {{'hashed': {report.hashed_count}, 'failed': {report.failed_count}}}"
    )
    return report
