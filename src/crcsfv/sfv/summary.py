"""End-of-run summary reports."""

from typing import List

from crcsfv.common import display_path, format_crc32
from .generator import GenerationReport
from .verifier import VerificationReport, VerificationResult, VerificationStatus


def format_verification_line(result: VerificationResult) -> str:
    """Format one verification result the way it is printed while verifying."""
    path = display_path(result.entry.path)
    if result.status is VerificationStatus.MATCHED:
        return f"{path} OK"
    if result.status is VerificationStatus.MISMATCHED:
        return f"{path} FAILED {format_crc32(result.actual)} != {format_crc32(result.expected)}"
    return f"{path} ERROR {display_path(result.reason or '')}"


def format_generation_summary(report: GenerationReport) -> str:
    """
    Format a generation report as human-readable text.

    Lists the number of files hashed and every file or input path that
    failed, with its reason.

    Args:
        report: Report from create_manifest()

    Returns:
        Formatted text report
    """
    lines: List[str] = []
    lines.append(f"Files hashed:  {report.hashed_count:>8,}")
    lines.append(f"Files failed:  {report.failed_count:>8,}")

    if not report.ok:
        lines.append("")
        lines.append("FAILURES")
        lines.append("-" * 70)
        for error in report.enumeration_errors:
            lines.append(f"  {display_path(error.message)}")
        for failure in report.failures:
            lines.append(f"  {display_path(failure.error.message)}")

    return "\n".join(lines)


def format_verification_summary(report: VerificationReport) -> str:
    """
    Format a verification report as human-readable text.

    Every mismatched or missing entry is listed, with expected and actual
    checksums for mismatches.

    Args:
        report: Report from verify_manifest()

    Returns:
        Formatted text report
    """
    lines: List[str] = []
    total = len(report.results)

    lines.append("=" * 70)
    status = "PASSED" if report.ok else "FAILED"
    if report.manifest_path is not None:
        lines.append(f"Verification {status}: {display_path(str(report.manifest_path))}")
    else:
        lines.append(f"Verification {status}")
    lines.append("=" * 70)
    lines.append(f"Entries:     {total:>8,}")
    lines.append(f"Matched:     {report.matched_count:>8,}")
    lines.append(f"Mismatched:  {report.mismatched_count:>8,}")
    lines.append(f"Missing:     {report.missing_count:>8,}")

    failures = report.failures
    if failures:
        lines.append("")
        lines.append("FAILED ENTRIES")
        lines.append("-" * 70)
        for result in failures:
            if result.status is VerificationStatus.MISMATCHED:
                lines.append(
                    f"  {display_path(result.entry.path)}: expected {format_crc32(result.expected)}, "
                    f"actual {format_crc32(result.actual)}"
                )
            else:
                lines.append(f"  {display_path(result.entry.path)}: missing ({display_path(result.reason or '')})")

    return "\n".join(lines)
