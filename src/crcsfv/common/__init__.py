"""Common utilities for crcsfv."""

from .config import ConfigLoader
from .logging import setup_logging, LogContext
from .logging_config import LoggingConfig
from .errors import (
    CrcsfvError, FileProcessingError, PathNotFoundError, PathUnreadableError,
    PermissionDeniedError, ReadError, DirectoryExpansionError, ParseError
)
from .path_utils import display_path, manifest_path, resolve_entry_path
from .checksums import (
    CRC32Hasher, crc32_of_bytes, crc32_of_stream,
    format_crc32, parse_crc32
)

__all__ = [
    'ConfigLoader',
    'LoggingConfig',
    'setup_logging',
    'LogContext',
    'CrcsfvError',
    'FileProcessingError',
    'PathNotFoundError',
    'PathUnreadableError',
    'PermissionDeniedError',
    'ReadError',
    'DirectoryExpansionError',
    'ParseError',
    'display_path',
    'manifest_path',
    'resolve_entry_path',
    'CRC32Hasher',
    'crc32_of_bytes',
    'crc32_of_stream',
    'format_crc32',
    'parse_crc32',
]
