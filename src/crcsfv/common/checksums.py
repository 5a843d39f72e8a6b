"""CRC32 checksum engine."""

import zlib
from typing import BinaryIO

# Constants for checksum calculation
CRC32_CHUNK_SIZE = 1024 * 1024  # 1 MB chunks
CRC32_MASK = 0xFFFFFFFF
CRC32_HEX_DIGITS = 8


class CRC32Hasher:
    """Incremental CRC32 accumulator with a hashlib-like interface.

    Feeding data in any number of chunks produces the same value as a single
    call with the concatenated bytes.

    Example:
        >>> hasher = CRC32Hasher()
        >>> hasher.update(b"12345").update(b"6789").hexdigest()
        'CBF43926'
    """

    name = "crc32"
    digest_size = 4

    def __init__(self, data: bytes = b"") -> None:
        self._crc = 0
        if data:
            self.update(data)

    def update(self, data: bytes) -> "CRC32Hasher":
        """Feed another chunk of bytes into the checksum."""
        self._crc = zlib.crc32(data, self._crc)
        return self

    @property
    def value(self) -> int:
        """Current checksum as unsigned 32-bit integer."""
        return self._crc & CRC32_MASK

    def digest(self) -> bytes:
        return self.value.to_bytes(self.digest_size, "big")

    def hexdigest(self) -> str:
        return format_crc32(self.value)

    def copy(self) -> "CRC32Hasher":
        clone = CRC32Hasher()
        clone._crc = self._crc
        return clone


def crc32_of_bytes(data: bytes) -> int:
    """Compute CRC32 of an in-memory byte sequence."""
    return CRC32Hasher(data).value


def crc32_of_stream(stream: BinaryIO, chunk_size: int = CRC32_CHUNK_SIZE) -> int:
    """
    Compute CRC32 of a binary stream, reading it to the end in chunks.

    Memory use is bounded by ``chunk_size`` regardless of stream length.

    Args:
        stream: Readable binary file object
        chunk_size: Number of bytes to read at once

    Returns:
        CRC32 checksum as unsigned 32-bit integer

    Raises:
        OSError: If reading fails
    """
    hasher = CRC32Hasher()
    while chunk := stream.read(chunk_size):
        hasher.update(chunk)
    return hasher.value


def format_crc32(value: int) -> str:
    """Format a checksum the way SFV files store it."""
    return f"{value & CRC32_MASK:08X}"


def parse_crc32(token: str) -> int:
    """Parse an 8-digit hexadecimal checksum token.

    Raises:
        ValueError: If the token is not exactly 8 hex digits
    """
    if len(token) != CRC32_HEX_DIGITS or any(c not in "0123456789abcdefABCDEF" for c in token):
        raise ValueError(f"Invalid CRC32 value: {token!r}")
    return int(token, 16)
