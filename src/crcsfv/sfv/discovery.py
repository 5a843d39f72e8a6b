"""File discovery for checksum generation.

Expands the paths given on the command line into the regular files to hash.
Directories are listed in sorted order so the generated manifest is
reproducible, and failures on one path never stop the others.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set

from crcsfv.common import (
    FileProcessingError, PathNotFoundError, PathUnreadableError, DirectoryExpansionError
)

logger = logging.getLogger(__name__)


class FileEnumerator:
    """Lazy, restartable enumeration of regular files.

    Every call to ``iter()`` starts over and clears ``errors``. Errors found
    while iterating (missing inputs, unlistable directories) are appended to
    ``errors`` and logged; iteration carries on with the next path.

    Symlink policy:
        - Symlinks to regular files are yielded like regular files.
        - Symlinked directories found while walking recursively are skipped
          unless ``follow_symlinks`` is set. When followed, every resolved
          directory is walked at most once so link cycles terminate.
        - A directory given explicitly in ``paths`` is always expanded.

    Attributes:
        paths: Input paths in the order given
        recursive: Walk subdirectories
        follow_symlinks: Descend into symlinked directories when recursive
        dedupe: Skip a file whose resolved path was already yielded
        exclude: Files never yielded, matched by resolved path
        errors: Per-path errors collected during the last iteration
    """

    def __init__(
        self,
        paths: Iterable[Path | str],
        recursive: bool = False,
        follow_symlinks: bool = False,
        dedupe: bool = True,
        exclude: Iterable[Path | str] = (),
    ) -> None:
        self.paths = [Path(p) for p in paths]
        self.recursive = recursive
        self.follow_symlinks = follow_symlinks
        self.dedupe = dedupe
        self.exclude = [Path(p) for p in exclude]
        self.errors: List[FileProcessingError] = []

    def __iter__(self) -> Iterator[Path]:
        self.errors = []
        seen: Set[Path] = set()
        excluded = {p.resolve() for p in self.exclude}

        for path in self.paths:
            for file_path in self._expand(path):
                if excluded or self.dedupe:
                    key = file_path.resolve()
                    if key in excluded:
                        logger.debug(f"Skipping excluded file: {{'path': {str(file_path)!r}}}")
                        continue
                    if self.dedupe and key in seen:
                        logger.debug(f"Skipping duplicate: {{'path': {str(file_path)!r}}}")
                        continue
                    seen.add(key)
                yield file_path

    def _expand(self, path: Path) -> Iterator[Path]:
        try:
            is_file = path.is_file()
            is_dir = not is_file and path.is_dir()
        except OSError as e:
            self._report(PathUnreadableError(
                f"Failed to inspect {path}: {e.strerror or e}", file_path=path
            ))
            return

        if is_file:
            yield path
        elif is_dir:
            yield from self._walk(path)
        elif path.exists():
            self._report(PathUnreadableError(
                f"Not a regular file or directory: {path}", file_path=path
            ))
        else:
            self._report(PathNotFoundError(
                f"No such file or directory: {path}", file_path=path
            ))

    def _walk(self, root: Path) -> Iterator[Path]:
        """Depth-first, pre-order walk driven by an explicit stack of listings."""
        visited: Set[Path] = {root.resolve()}
        stack: List[Iterator[os.DirEntry]] = [self._list_dir(root)]

        while stack:
            entry: Optional[os.DirEntry] = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            child = Path(entry.path)
            try:
                if entry.is_dir():
                    if not self.recursive:
                        continue
                    if entry.is_symlink():
                        if not self.follow_symlinks:
                            logger.debug(f"Skipping symlinked directory: {{'path': {str(child)!r}}}")
                            continue
                    if self.follow_symlinks:
                        real = child.resolve()
                        if real in visited:
                            logger.debug(f"Skipping already visited directory: {{'path': {str(child)!r}}}")
                            continue
                        visited.add(real)
                    stack.append(self._list_dir(child))
                elif entry.is_file():
                    yield child
                else:
                    logger.debug(f"Skipping special file: {{'path': {str(child)!r}}}")
            except OSError as e:
                self._report(PathUnreadableError(
                    f"Failed to inspect {child}: {e.strerror or e}", file_path=child
                ))

    def _list_dir(self, directory: Path) -> Iterator[os.DirEntry]:
        """Return the sorted entries of a directory, or nothing if it cannot be read."""
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            self._report(DirectoryExpansionError(
                f"Failed to read directory {directory}: {e.strerror or e}",
                file_path=directory,
            ))
            return iter(())
        return iter(entries)

    def _report(self, error: FileProcessingError) -> None:
        logger.error(error.message)
        self.errors.append(error)


def enumerate_files(
    paths: Iterable[Path | str],
    recursive: bool = False,
    follow_symlinks: bool = False,
    dedupe: bool = True,
) -> Iterator[Path]:
    """Iterate over the regular files named by ``paths``.

    Errors are logged and skipped. Use ``FileEnumerator`` directly to
    inspect them afterwards.
    """
    return iter(FileEnumerator(paths, recursive, follow_symlinks, dedupe))
