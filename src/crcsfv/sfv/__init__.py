"""SFV manifest generation and verification."""

from .config import SfvConfig
from .discovery import FileEnumerator, enumerate_files
from .errors import ManifestError, ManifestParseError, ChecksumMismatchError, FileMissingError
from .generator import GenerationReport, create_manifest
from .hasher import HashResult, compute_for, hash_file, hash_files
from .manifest import (
    CommentLine, FileEntry, Manifest, generate_manifest, parse_manifest,
    read_manifest, serialize_manifest, write_manifest
)
from .verifier import (
    VerificationReport, VerificationResult, VerificationStatus, verify_manifest, verify_sfv_file
)

__all__ = [
    'SfvConfig',
    'FileEnumerator',
    'enumerate_files',
    'ManifestError',
    'ManifestParseError',
    'ChecksumMismatchError',
    'FileMissingError',
    'GenerationReport',
    'create_manifest',
    'HashResult',
    'compute_for',
    'hash_file',
    'hash_files',
    'CommentLine',
    'FileEntry',
    'Manifest',
    'generate_manifest',
    'parse_manifest',
    'read_manifest',
    'serialize_manifest',
    'write_manifest',
    'VerificationReport',
    'VerificationResult',
    'VerificationStatus',
    'verify_manifest',
    'verify_sfv_file',
]
