"""Configuration models for SFV generation and verification."""

from pydantic import BaseModel, Field, ConfigDict
from crcsfv.common import LoggingConfig
from crcsfv.common.checksums import CRC32_CHUNK_SIZE
from crcsfv.common.config_utils import auto_detect_io_workers


class HashingConfig(BaseModel):
    """Checksum computation settings."""

    model_config = ConfigDict(extra='forbid')

    chunk_size: int = Field(
        default=CRC32_CHUNK_SIZE,
        ge=1,
        description="Number of bytes read from a file at once"
    )
    workers: int = Field(
        default=1,
        ge=0,
        description="Number of hashing threads (1: sequential, 0: auto-detect)"
    )

    def effective_workers(self) -> int:
        """Resolve the auto-detect setting to a thread count."""
        return self.workers or auto_detect_io_workers()


class DiscoveryConfig(BaseModel):
    """File enumeration settings."""

    model_config = ConfigDict(extra='forbid')

    recursive: bool = Field(
        default=False,
        description="Walk directories recursively"
    )
    follow_symlinks: bool = Field(
        default=False,
        description="Descend into symlinked directories during recursive walks"
    )
    dedupe: bool = Field(
        default=True,
        description="Skip files already yielded through another input path"
    )


class ManifestConfig(BaseModel):
    """Manifest file settings."""

    model_config = ConfigDict(extra='forbid')

    encoding: str = Field(
        default="utf-8",
        description="Text encoding of manifest files"
    )
    header: bool = Field(
        default=False,
        description="Write a '; Generated by crcsfv' comment at the top of new manifests"
    )


class SfvConfig(BaseModel):
    """Root configuration for crcsfv."""

    model_config = ConfigDict(extra='forbid')

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    hashing: HashingConfig = Field(default_factory=HashingConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    manifest: ManifestConfig = Field(default_factory=ManifestConfig)
