import pytest

from stackboot.errors import BootstrapError
from stackboot.services.filesystem import FileSystemService


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None


def test_ensure_directory_creates_once(tmp_path):
    service = FileSystemService(logger=DummyLogger())
    target = tmp_path / ".neon_local"

    assert service.ensure_directory(str(target)) is True
    assert service.ensure_directory(str(target)) is False
    assert target.is_dir()


def test_ensure_ignore_entry_creates_missing_file(tmp_path):
    service = FileSystemService(logger=DummyLogger())
    ignore_file = tmp_path / ".gitignore"

    assert service.ensure_ignore_entry(str(ignore_file), ".neon_local/") is True
    assert ignore_file.read_text(encoding="utf-8") == ".neon_local/\n"


def test_ensure_ignore_entry_is_idempotent(tmp_path):
    service = FileSystemService(logger=DummyLogger())
    ignore_file = tmp_path / ".gitignore"
    ignore_file.write_text("node_modules/\n.env*", encoding="utf-8")

    assert service.ensure_ignore_entry(str(ignore_file), ".neon_local/") is True
    assert service.ensure_ignore_entry(str(ignore_file), ".neon_local/") is False

    lines = ignore_file.read_text(encoding="utf-8").splitlines()
    assert lines == ["node_modules/", ".env*", ".neon_local/"]
    assert lines.count(".neon_local/") == 1


def test_ensure_ignore_entry_matches_whole_lines_only(tmp_path):
    service = FileSystemService(logger=DummyLogger())
    ignore_file = tmp_path / ".gitignore"
    ignore_file.write_text("# .neon_local/ is added by the bootstrapper\n", encoding="utf-8")

    assert service.ensure_ignore_entry(str(ignore_file), ".neon_local/") is True
    assert ignore_file.read_text(encoding="utf-8").splitlines()[-1] == ".neon_local/"


def test_ensure_ignore_entry_rejects_undecodable_file(tmp_path):
    service = FileSystemService(logger=DummyLogger())
    ignore_file = tmp_path / ".gitignore"
    ignore_file.write_bytes(b"node_modules/\n\xff\xfe\x00bad\n")

    with pytest.raises(BootstrapError, match="Could not update"):
        service.ensure_ignore_entry(str(ignore_file), ".neon_local/")

    assert ignore_file.read_bytes() == b"node_modules/\n\xff\xfe\x00bad\n"
