"""Path utilities for manifest paths."""

import os
import sys
from pathlib import Path
from typing import Optional


def absolute_path(path: Path | str) -> Path:
    """Make a path absolute and collapse ``.``/``..`` without resolving symlinks."""
    return Path(os.path.abspath(path))


def manifest_path(path: Path | str, base_dir: Optional[Path] = None) -> str:
    """
    Convert a file path to the form it is written in a manifest.

    The path is made absolute and, when it lives beneath ``base_dir``
    (default: current directory), written relative to it. Otherwise the
    absolute path is kept. Separators are left as the platform produces
    them.

    Args:
        path: File path as discovered
        base_dir: Directory the manifest paths are relative to

    Returns:
        Path string for the manifest line

    Examples:
        >>> manifest_path("/data/a/b.bin", Path("/data"))
        'a/b.bin'
        >>> manifest_path("/other/c.bin", Path("/data"))
        '/other/c.bin'
    """
    full = absolute_path(path)
    base = absolute_path(base_dir if base_dir is not None else Path.cwd())
    try:
        return str(full.relative_to(base))
    except ValueError:
        # Not under base, keep absolute
        return str(full)


def resolve_entry_path(entry_path: str, base_dir: Path) -> Path:
    """Resolve a manifest entry path against the manifest's base directory."""
    path = Path(entry_path)
    if path.is_absolute():
        return path
    return base_dir / path


def display_path(text: str) -> str:
    """Replace undecodable file name bytes so the text can be printed.

    File names that are not valid in the filesystem encoding arrive as
    surrogate-escaped strings; those code points cannot be written to a
    strict text stream.
    """
    encoding = sys.getfilesystemencoding()
    try:
        raw = text.encode(encoding, "surrogateescape")
    except UnicodeEncodeError:
        raw = text.encode(encoding, "replace")
    return raw.decode(encoding, "replace")
