"""Tests for the command line interface."""

import logging
import os
import sys

import pytest

from crcsfv import __version__
from crcsfv.common import crc32_of_bytes, format_crc32
from crcsfv.sfv.cli import main


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch, tmp_path):
    """Keep user config, env overrides and root logger changes out of the tests."""
    monkeypatch.setattr(
        "crcsfv.common.config.platformdirs.user_config_dir",
        lambda *args, **kwargs: str(tmp_path / "user-config"),
    )
    for key in list(os.environ):
        if key.startswith("CRCSFV_"):
            monkeypatch.delenv(key)

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    work = tmp_path / "work"
    (work / "dir" / "sub").mkdir(parents=True)
    (work / "check.txt").write_bytes(b"123456789")
    (work / "dir" / "x.bin").write_bytes(b"x")
    (work / "dir" / "sub" / "y.bin").write_bytes(b"y")
    monkeypatch.chdir(work)
    return work


class TestCreate:
    """Tests for checksum creation mode."""

    def test_prints_manifest_lines(self, workdir, capsys):
        """Test that each file is printed as an SFV line."""
        assert main(["check.txt"]) == 0
        assert capsys.readouterr().out == "check.txt CBF43926\n"

    def test_directory_non_recursive(self, workdir, capsys):
        """Test that only direct children of a directory are hashed."""
        assert main(["dir"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert [line.split()[0] for line in out] == [os.path.join("dir", "x.bin")]

    def test_directory_recursive(self, workdir, capsys):
        """Test -r."""
        assert main(["-r", "dir"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert [line.split()[0] for line in out] == [
            os.path.join("dir", "sub", "y.bin"),
            os.path.join("dir", "x.bin"),
        ]

    def test_out_file_written(self, workdir, capsys):
        """Test -o writes the manifest."""
        assert main(["check.txt", "-r", "dir", "-o", "all.sfv"]) == 0

        text = (workdir / "all.sfv").read_text(encoding="utf-8")
        assert text.splitlines()[0] == "check.txt CBF43926"
        assert len(text.splitlines()) == 3

    def test_out_file_in_other_directory_verifies(self, workdir, capsys):
        """Test that paths are relative to the output file location."""
        (workdir / "sums").mkdir()
        assert main(["check.txt", "-o", os.path.join("sums", "out.sfv")]) == 0

        text = (workdir / "sums" / "out.sfv").read_text(encoding="utf-8")
        assert text == f"{os.path.join(os.getcwd(), 'check.txt')} CBF43926\n"
        assert main(["-v", os.path.join("sums", "out.sfv")]) == 0

    def test_missing_input_fails_but_hashes_others(self, workdir, capsys):
        """Test partial failure exit code and output."""
        assert main(["missing.txt", "check.txt", "-o", "out.sfv"]) == 1

        captured = capsys.readouterr()
        assert "check.txt CBF43926" in captured.out
        assert "missing.txt" in captured.err
        assert (workdir / "out.sfv").read_text(encoding="utf-8") == "check.txt CBF43926\n"

    def test_summary_printed_on_success(self, workdir, capsys):
        """Test that the hashed and failed counts are reported on every run."""
        assert main(["check.txt"]) == 0

        err = capsys.readouterr().err
        assert "Files hashed:         1" in err
        assert "Files failed:         0" in err

    def test_stale_out_file_not_hashed(self, workdir, capsys):
        """Test that regenerating over an existing manifest leaves it out."""
        assert main(["-r", ".", "-o", "all.sfv"]) == 0
        assert main(["-r", ".", "-o", "all.sfv"]) == 0

        text = (workdir / "all.sfv").read_text(encoding="utf-8")
        assert "all.sfv" not in text
        assert main(["-v", "all.sfv"]) == 0

    def test_workers_option(self, workdir, capsys):
        """Test that threaded hashing gives the same output."""
        assert main(["-r", "dir"]) == 0
        sequential = capsys.readouterr().out
        assert main(["-r", "--workers", "4", "dir"]) == 0
        assert capsys.readouterr().out == sequential


class TestVerify:
    """Tests for verification mode."""

    def test_verify_ok(self, workdir, capsys):
        """Test a passing verification."""
        (workdir / "good.sfv").write_text("; comment\ncheck.txt CBF43926\n", encoding="utf-8")

        assert main(["-v", "good.sfv"]) == 0

        out = capsys.readouterr().out
        assert "check.txt OK" in out
        assert "Verification PASSED" in out

    def test_verify_failures(self, workdir, capsys):
        """Test mismatched and missing entries are all reported."""
        x_crc = format_crc32(crc32_of_bytes(b"x"))
        (workdir / "bad.sfv").write_text(
            f"check.txt 00000000\ngone.txt 12345678\ndir/x.bin {x_crc}\n", encoding="utf-8"
        )

        assert main(["--verify", "bad.sfv"]) == 1

        out = capsys.readouterr().out
        assert "check.txt FAILED CBF43926 != 00000000" in out
        assert "gone.txt ERROR" in out
        assert "dir/x.bin OK" in out
        assert "Verification FAILED" in out

    def test_verify_malformed_manifest(self, workdir, capsys):
        """Test that a corrupt manifest aborts before hashing."""
        (workdir / "corrupt.sfv").write_text("; ok\ncheck.txt CBF43926\nnot a checksum line!\n", encoding="utf-8")

        assert main(["-v", "corrupt.sfv"]) == 1

        captured = capsys.readouterr()
        assert "check.txt OK" not in captured.out
        assert "Line 3" in captured.err

    def test_verify_missing_manifest(self, workdir, capsys):
        """Test a manifest that does not exist."""
        assert main(["-v", "nope.sfv"]) == 1
        assert "nope.sfv" in capsys.readouterr().err

    def test_generate_then_verify(self, workdir, capsys):
        """Test the full round trip through the CLI."""
        assert main(["-r", ".", "-o", "all.sfv"]) == 0
        assert main(["-v", "all.sfv"]) == 0

        (workdir / "dir" / "x.bin").write_bytes(b"changed")
        assert main(["-v", "all.sfv"]) == 1


class TestOptions:
    """Tests for general options."""

    def test_version(self, capsys):
        """Test --version."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_paths_required(self, capsys):
        """Test that at least one path is needed."""
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

    def test_negative_workers_rejected(self, workdir):
        """Test --workers validation."""
        with pytest.raises(SystemExit):
            main(["--workers", "-1", "check.txt"])

    def test_config_file(self, workdir, tmp_path, capsys):
        """Test that --config settings apply."""
        config = tmp_path / "defaults.toml"
        config.write_text("[discovery]\nrecursive = true\n\n[manifest]\nheader = true\n", encoding="utf-8")

        assert main(["--config", str(config), "dir", "-o", "out.sfv"]) == 0

        lines = (workdir / "out.sfv").read_text(encoding="utf-8").splitlines()
        assert lines[0].startswith("; Generated by crcsfv")
        assert len(lines) == 3

    def test_invalid_config(self, workdir, tmp_path, capsys):
        """Test that an invalid config file is reported."""
        config = tmp_path / "defaults.toml"
        config.write_text("[hashing]\nchunk_size = -5\n", encoding="utf-8")

        assert main(["--config", str(config), "check.txt"]) == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_interrupt_exit_code(self, workdir, monkeypatch):
        """Test that a keyboard interrupt exits with 130."""
        def interrupted(*args, **kwargs):
            raise KeyboardInterrupt

        monkeypatch.setattr("crcsfv.sfv.cli.create_manifest", interrupted)

        assert main(["check.txt", "-o", "out.sfv"]) == 130
        assert not (workdir / "out.sfv").exists()


class TestUnusualNames:
    """Tests for file names that are awkward in a text manifest."""

    def test_undecodable_file_name(self, workdir, capsys):
        """Test that a name that is not valid UTF-8 is hashed, written and verified."""
        if sys.getfilesystemencoding().lower() not in ("utf-8", "utf8"):
            pytest.skip("needs a UTF-8 filesystem encoding")
        try:
            (workdir / "dir" / os.fsdecode(b"\xff.bin")).write_bytes(b"odd")
        except (OSError, UnicodeError):
            pytest.skip("filesystem rejects undecodable names")

        assert main(["dir", "-o", "out.sfv"]) == 0

        manifest = (workdir / "out.sfv").read_bytes()
        assert os.fsencode(os.path.join("dir", os.fsdecode(b"\xff.bin"))) in manifest
        assert b"x.bin" in manifest
        assert "�.bin" in capsys.readouterr().out

        assert main(["-v", "out.sfv"]) == 0
        assert "Verification PASSED" in capsys.readouterr().out

    def test_comment_like_file_name(self, workdir, capsys):
        """Test that a file starting with ';' is not lost on verification."""
        (workdir / ";notes.txt").write_bytes(b"notes")

        assert main([";notes.txt", "check.txt", "-o", "out.sfv"]) == 0
        assert main(["-v", "out.sfv"]) == 0

        out = capsys.readouterr().out
        assert f"{os.path.join(os.curdir, ';notes.txt')} OK" in out
        assert "Entries:            2" in out
