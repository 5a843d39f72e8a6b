"""Tests for manifest verification."""

import os

import pytest

from crcsfv.common import PathNotFoundError, crc32_of_bytes
from crcsfv.sfv.errors import ChecksumMismatchError, FileMissingError, ManifestParseError
from crcsfv.sfv.generator import create_manifest
from crcsfv.sfv.manifest import FileEntry, Manifest, parse_manifest, write_manifest
from crcsfv.sfv.verifier import (
    VerificationStatus, verify_manifest, verify_sfv_file,
)


@pytest.fixture
def dataset(tmp_path):
    """A directory with a few files and an SFV written next to them."""
    data = tmp_path / "data"
    (data / "nested").mkdir(parents=True)
    (data / "one.txt").write_bytes(b"one")
    (data / "two.bin").write_bytes(os.urandom(5000))
    (data / "nested" / "three.txt").write_bytes(b"")
    sfv = data / "data.sfv"

    report = create_manifest(
        [data / "one.txt", data / "two.bin", data / "nested"], recursive=True, base_dir=data
    )
    write_manifest(report.manifest, sfv)
    return data, sfv


class TestVerifyRoundTrip:
    """Generate-then-verify properties."""

    def test_unchanged_files_all_match(self, dataset):
        """Test that a fresh manifest verifies cleanly."""
        data, sfv = dataset

        report = verify_sfv_file(sfv)

        assert report.ok
        assert len(report.results) == 3
        assert all(r.status is VerificationStatus.MATCHED for r in report.results)
        assert report.matched_count == 3
        assert report.failures == []

    def test_mutated_file_mismatched(self, dataset):
        """Test that changed content reports expected vs actual."""
        data, sfv = dataset
        original = crc32_of_bytes(b"one")
        (data / "one.txt").write_bytes(b"ONE")

        report = verify_sfv_file(sfv)

        assert not report.ok
        [failure] = report.failures
        assert failure.entry.path == "one.txt"
        assert failure.status is VerificationStatus.MISMATCHED
        assert failure.expected == original
        assert failure.actual == crc32_of_bytes(b"ONE")
        assert isinstance(failure.to_error(), ChecksumMismatchError)

    def test_deleted_file_missing_others_still_checked(self, dataset):
        """Test that a deleted file is MISSING and the rest still verify."""
        data, sfv = dataset
        (data / "two.bin").unlink()

        report = verify_sfv_file(sfv)

        statuses = {r.entry.path: r.status for r in report.results}
        assert statuses["two.bin"] is VerificationStatus.MISSING
        assert statuses["one.txt"] is VerificationStatus.MATCHED
        assert report.missing_count == 1
        missing = report.failures[0]
        assert missing.actual is None
        assert "two.bin" in missing.reason
        assert isinstance(missing.to_error(), FileMissingError)

    def test_all_failures_reported(self, dataset):
        """Test that every failing entry is listed, not just the first."""
        data, sfv = dataset
        (data / "one.txt").write_bytes(b"changed")
        (data / "two.bin").unlink()

        report = verify_sfv_file(sfv, workers=2)

        assert [r.entry.path for r in report.failures] == ["one.txt", "two.bin"]
        assert report.mismatched_count == 1
        assert report.missing_count == 1

    def test_verification_does_not_modify(self, dataset):
        """Test that manifest and files are untouched."""
        data, sfv = dataset
        before = sfv.read_bytes()
        mtime = (data / "one.txt").stat().st_mtime_ns

        verify_sfv_file(sfv)

        assert sfv.read_bytes() == before
        assert (data / "one.txt").stat().st_mtime_ns == mtime

    def test_independent_of_cwd(self, dataset, tmp_path, monkeypatch):
        """Test that entries resolve against the manifest directory."""
        data, sfv = dataset
        monkeypatch.chdir(tmp_path)
        cwd = os.getcwd()

        assert verify_sfv_file(os.path.relpath(sfv)).ok
        assert os.getcwd() == cwd


class TestVerifyManifest:
    """Tests for verify_manifest with in-memory manifests."""

    def test_explicit_base_dir(self, tmp_path):
        """Test resolving relative paths against base_dir."""
        (tmp_path / "f.txt").write_bytes(b"123456789")
        manifest = parse_manifest("f.txt CBF43926\n")

        report = verify_manifest(manifest, base_dir=tmp_path)

        assert report.ok
        assert report.results[0].resolved_path == tmp_path / "f.txt"

    def test_defaults_to_cwd_without_source(self, tmp_path, monkeypatch):
        """Test that an unsourced manifest resolves against the cwd."""
        (tmp_path / "f.txt").write_bytes(b"123456789")
        monkeypatch.chdir(tmp_path)

        assert verify_manifest(parse_manifest("f.txt CBF43926\n")).ok

    def test_absolute_paths(self, tmp_path):
        """Test that absolute entries ignore the base directory."""
        target = tmp_path / "abs.txt"
        target.write_bytes(b"123456789")
        manifest = Manifest([FileEntry(str(target), 0xCBF43926)])

        assert verify_manifest(manifest, base_dir=tmp_path / "elsewhere").ok

    def test_duplicates_checked_independently(self, tmp_path):
        """Test that repeated paths each produce a result."""
        (tmp_path / "f.txt").write_bytes(b"123456789")
        manifest = parse_manifest("f.txt CBF43926\nf.txt 00000000\n")

        report = verify_manifest(manifest, base_dir=tmp_path)

        assert [r.status for r in report.results] == [
            VerificationStatus.MATCHED, VerificationStatus.MISMATCHED
        ]

    def test_comments_ignored(self, tmp_path):
        """Test that comments produce no results."""
        manifest = parse_manifest("; only a comment\n\n")

        report = verify_manifest(manifest, base_dir=tmp_path)

        assert report.results == []
        assert report.ok

    def test_on_result_called_in_order(self, tmp_path):
        """Test the per-result callback."""
        for name in ("a", "b", "c"):
            (tmp_path / name).write_bytes(name.encode())
        manifest = parse_manifest("c 00000000\na 00000000\nb 00000000\n")
        seen = []

        verify_manifest(manifest, base_dir=tmp_path, workers=3, on_result=lambda r: seen.append(r.entry.path))

        assert seen == ["c", "a", "b"]

    def test_matched_result_has_no_error(self, tmp_path):
        """Test to_error for a match."""
        (tmp_path / "f.txt").write_bytes(b"")
        report = verify_manifest(parse_manifest("f.txt 00000000"), base_dir=tmp_path)

        assert report.results[0].to_error() is None


class TestVerifySfvFileErrors:
    """Tests for fatal manifest problems."""

    def test_malformed_manifest_is_fatal(self, tmp_path):
        """Test that nothing is verified when the manifest is corrupt."""
        (tmp_path / "f.txt").write_bytes(b"123456789")
        sfv = tmp_path / "bad.sfv"
        sfv.write_text("; comment\nf.txt CBF43926\nf.txt NOTHEX!!\n", encoding="utf-8")

        with pytest.raises(ManifestParseError) as exc_info:
            verify_sfv_file(sfv)

        assert exc_info.value.line_number == 3

    def test_missing_manifest(self, tmp_path):
        """Test a manifest path that does not exist."""
        with pytest.raises(PathNotFoundError):
            verify_sfv_file(tmp_path / "nope.sfv")
