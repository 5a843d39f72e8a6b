"""CRC32 checksums and SFV manifest creation and verification."""

__version__ = "0.1.0"
