"""Tests for log archive rotation, compression and decompression."""

import base64
import gzip

import pytest
from maintenance.log_rotation import LogArchive, rotate_logs
from shared.errors import NotFound


@pytest.fixture()
def log_dir(tmp_path):
    path = tmp_path / "logs"
    path.mkdir()
    return path


@pytest.fixture()
def archive(log_dir, clock):
    return LogArchive(log_dir, clock=clock)


class TestListing:
    def test_lists_live_files_only_by_default(self, archive, log_dir):
        (log_dir / "messages.log").write_text("a\n")
        (log_dir / "errors.log").write_text("")
        (log_dir / "messages-1.gz.b64").write_text("x")
        (log_dir / "notes.txt").write_text("x")

        assert archive.list() == ["errors.log", "messages.log"]
        assert archive.list(include_compressed=True) == ["errors.log", "messages-1.gz.b64", "messages.log"]

    def test_missing_directory(self, tmp_path):
        assert LogArchive(tmp_path / "nowhere").list() == []


class TestRotate:
    def test_rotate_compresses_then_truncates(self, archive, log_dir, clock):
        content = '{"event": "An order has been placed"}\n{"event": "User registered"}\n'
        (log_dir / "messages.log").write_text(content)

        name = archive.rotate("messages.log")

        assert name == f"messages-{clock.now}.gz.b64"
        assert (log_dir / "messages.log").read_text() == ""
        encoded = (log_dir / name).read_bytes()
        assert gzip.decompress(base64.b64decode(encoded)).decode() == content
        assert archive.decompress(name) == content

    def test_empty_file_is_skipped(self, archive, log_dir):
        (log_dir / "errors.log").write_text("")
        assert archive.rotate("errors.log") is None
        assert archive.list(include_compressed=True) == ["errors.log"]

    def test_existing_archive_is_never_overwritten(self, archive, log_dir, clock):
        (log_dir / "messages.log").write_text("new\n")
        (log_dir / f"messages-{clock.now}.gz.b64").write_text("old")

        with pytest.raises(FileExistsError):
            archive.rotate("messages.log")
        assert (log_dir / "messages.log").read_text() == "new\n"

    def test_missing_file(self, archive):
        with pytest.raises(NotFound):
            archive.rotate("nothing.log")

    def test_decompress_missing_archive(self, archive):
        with pytest.raises(NotFound):
            archive.decompress("nothing-1.gz.b64")

    def test_names_outside_the_directory_are_rejected(self, archive):
        with pytest.raises(ValueError):
            archive.rotate("../etc.log")


class TestRotateLogs:
    async def test_rotates_every_live_file(self, archive, log_dir, clock):
        (log_dir / "messages.log").write_text("m\n")
        (log_dir / "errors.log").write_text("e\n")

        results = await rotate_logs(archive)

        assert results == {
            "errors.log": f"errors-{clock.now}.gz.b64",
            "messages.log": f"messages-{clock.now}.gz.b64",
        }

    async def test_one_failure_does_not_block_the_others(self, archive, log_dir, monkeypatch):
        (log_dir / "errors.log").write_text("e\n")
        (log_dir / "messages.log").write_text("m\n")
        original = archive.rotate

        def flaky(name):
            if name == "errors.log":
                raise OSError("disk full")
            return original(name)

        monkeypatch.setattr(archive, "rotate", flaky)

        results = await rotate_logs(archive)

        assert list(results) == ["messages.log"]
        assert (log_dir / "errors.log").read_text() == "e\n"
        assert (log_dir / "messages.log").read_text() == ""
