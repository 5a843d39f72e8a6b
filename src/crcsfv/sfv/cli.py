"""Command line interface: create or verify SFV files."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import toml
from pydantic import ValidationError

from crcsfv import __version__
from crcsfv.common import ConfigLoader, CrcsfvError, display_path, setup_logging
from crcsfv.common.config_utils import expand_path_variables
from .config import SfvConfig
from .errors import ManifestParseError
from .generator import create_manifest
from .manifest import write_manifest
from .summary import format_generation_summary, format_verification_line, format_verification_summary
from .verifier import verify_sfv_file

# Application name derived from package name
APP_NAME = "crcsfv"

# Use the package logger so records are not attributed to __main__
logger = logging.getLogger(__package__ or __name__)


def create_command(
    config: SfvConfig,
    paths: Sequence[Path],
    out_file: Optional[Path] = None,
    recursive_override: Optional[bool] = None,
    workers_override: Optional[int] = None,
) -> int:
    """Compute checksums for paths, print them and optionally write an SFV file.

    Args:
        config: Configuration object
        paths: Files and directories to checksum
        out_file: Optional manifest file to write
        recursive_override: Optional override for recursive directory walks
        workers_override: Optional override for the number of hashing threads

    Returns:
        Exit code (0 when every file was hashed)
    """
    recursive = recursive_override if recursive_override is not None else config.discovery.recursive
    workers = workers_override if workers_override is not None else config.hashing.effective_workers()
    base_dir = out_file.absolute().parent if out_file else Path.cwd()

    logger.debug(f"Configuration: {{'paths': {[str(p) for p in paths]!r}, 'recursive': {recursive}, 'workers': {workers}, 'out_file': {str(out_file) if out_file else None!r}}}")

    report = create_manifest(
        paths,
        recursive=recursive,
        base_dir=base_dir,
        chunk_size=config.hashing.chunk_size,
        workers=workers,
        follow_symlinks=config.discovery.follow_symlinks,
        dedupe=config.discovery.dedupe,
        header=config.manifest.header,
        exclude=[out_file] if out_file is not None else (),
        on_entry=lambda entry: print(display_path(entry.to_line()), flush=True),
    )

    if out_file is not None:
        try:
            write_manifest(report.manifest, out_file, encoding=config.manifest.encoding)
        except (OSError, UnicodeEncodeError) as e:
            reason = e.strerror if isinstance(e, OSError) and e.strerror else e
            logger.error(f"Failed to write to {out_file}: {reason}")
            return 1

    print(format_generation_summary(report), file=sys.stderr)
    return 0 if report.ok else 1


def verify_command(config: SfvConfig, sfv_file: Path, workers_override: Optional[int] = None) -> int:
    """Verify an SFV file, printing one line per entry and a summary.

    Args:
        config: Configuration object
        sfv_file: Manifest to verify
        workers_override: Optional override for the number of hashing threads

    Returns:
        Exit code (0 when every entry matched)
    """
    workers = workers_override if workers_override is not None else config.hashing.effective_workers()

    try:
        report = verify_sfv_file(
            sfv_file,
            chunk_size=config.hashing.chunk_size,
            workers=workers,
            encoding=config.manifest.encoding,
            on_result=lambda result: print(format_verification_line(result), flush=True),
        )
    except CrcsfvError as e:
        if isinstance(e, ManifestParseError):
            logger.error(f"Malformed manifest {sfv_file}: {e.message}")
        else:
            logger.error(e.message)
        return 1

    print(format_verification_summary(report))
    return 0 if report.ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Compute CRC32 checksums of files, create and verify SFV files"
    )
    parser.add_argument(
        "paths",
        type=Path,
        nargs="+",
        help="File and directory paths"
    )
    parser.add_argument(
        "-r", "--recursive",
        action="store_true",
        help="Parse directories recursively"
    )
    parser.add_argument(
        "-o", "--out-file",
        type=Path,
        help="Output file name"
    )
    parser.add_argument(
        "-v", "--verify",
        action="store_true",
        help="Verify a checksum file"
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="Number of hashing threads (overrides config, 0: auto-detect)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (defaults.toml)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Log level (overrides config)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_intermixed_args(argv)

    if args.workers is not None and args.workers < 0:
        parser.error("--workers must be >= 0")

    # Load config
    loader = ConfigLoader(app_name=APP_NAME, config_class=SfvConfig)
    try:
        config = loader.load(defaults_path=args.config)
    except (ValidationError, toml.TomlDecodeError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    # Setup logging with config values
    log_file = Path(expand_path_variables(config.logging.file)) if config.logging.file else None
    setup_logging(
        level=args.log_level or config.logging.level,
        format=config.logging.format,
        log_file=log_file,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count,
    )

    workers = None
    if args.workers is not None:
        workers = config.hashing.model_copy(update={"workers": args.workers}).effective_workers()

    try:
        if args.verify:
            if len(args.paths) > 1:
                logger.warning(f"Only the first path is verified, ignoring {len(args.paths) - 1} more")
            return verify_command(config, args.paths[0], workers_override=workers)

        return create_command(
            config,
            args.paths,
            out_file=args.out_file,
            recursive_override=True if args.recursive else None,
            workers_override=workers,
        )
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
