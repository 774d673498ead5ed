import subprocess

from quicklaunch.core.entry_types import FALLBACK_ICON, EntryKind
from quicklaunch.infra import filesystem
from quicklaunch.infra.filesystem import (
    BINARY_SCORE,
    FOLDER_BOOST,
    create_file_entry,
    file_mime_type,
    find_binary,
    icon_for_mime,
)


class _DummyCompletedProcess:
    def __init__(self, stdout: str, returncode: int) -> None:
        self.stdout = stdout
        self.stderr = ""
        self.returncode = returncode


def test_file_mime_type_runs_file_command(monkeypatch) -> None:
    def fake_run(argv: list[str], **kwargs: object) -> _DummyCompletedProcess:
        assert argv == ["file", "--mime-type", "-b", "/tmp/a.txt"]
        assert kwargs == {"capture_output": True, "text": True, "timeout": 2}
        return _DummyCompletedProcess("text/plain\n", 0)

    monkeypatch.setattr(filesystem.subprocess, "run", fake_run)

    assert file_mime_type("/tmp/a.txt") == "text/plain"


def test_file_mime_type_returns_none_on_failure(monkeypatch) -> None:
    def missing(argv: list[str], **kwargs: object) -> _DummyCompletedProcess:
        raise FileNotFoundError("file")

    def slow(argv: list[str], **kwargs: object) -> _DummyCompletedProcess:
        raise subprocess.TimeoutExpired(cmd=argv, timeout=2)

    monkeypatch.setattr(filesystem.subprocess, "run", missing)
    assert file_mime_type("/tmp/a") is None

    monkeypatch.setattr(filesystem.subprocess, "run", slow)
    assert file_mime_type("/tmp/a") is None

    monkeypatch.setattr(
        filesystem.subprocess, "run", lambda argv, **kw: _DummyCompletedProcess("", 1)
    )
    assert file_mime_type("/tmp/a") is None


def test_icon_for_mime() -> None:
    assert icon_for_mime("/a/readme.md", "text/markdown") == "text-x-generic"
    assert icon_for_mime("/a/paper.PDF", "application/pdf") == "application-pdf"
    assert icon_for_mime("/a/song.ogg", "audio/ogg") == "application-x-generic"


def test_create_file_entry_for_directory(tmp_path) -> None:
    entry = create_file_entry(str(tmp_path), mime_lookup=lambda _: None)

    assert entry is not None
    assert entry.name == tmp_path.name
    assert entry.icon == "folder"
    assert entry.kind is EntryKind.FILE
    assert entry.score_boost == FOLDER_BOOST
    assert entry.exec == ""


def test_create_file_entry_for_executable(tmp_path) -> None:
    script = tmp_path / "run.sh"
    script.write_text("#!/bin/sh\n", encoding="utf-8")
    script.chmod(0o700)

    entry = create_file_entry(str(script), mime_lookup=lambda _: None)

    assert entry is not None
    assert entry.exec == f'"{script}"'
    assert entry.icon == FALLBACK_ICON
    assert entry.score_boost == 0


def test_create_file_entry_uses_mime_lookup(tmp_path) -> None:
    doc = tmp_path / "paper.pdf"
    doc.write_bytes(b"%PDF-1.4")
    doc.chmod(0o644)

    entry = create_file_entry(str(doc), mime_lookup=lambda _: "application/pdf")

    assert entry is not None
    assert entry.icon == "application-pdf"
    assert entry.exec == f'xdg-open "{doc}"'


def test_create_file_entry_omits_unknown_or_missing(tmp_path) -> None:
    doc = tmp_path / "data.bin"
    doc.write_bytes(b"\x00")
    doc.chmod(0o644)

    assert create_file_entry(str(doc), mime_lookup=lambda _: None) is None
    assert create_file_entry(str(tmp_path / "missing"), mime_lookup=lambda _: "text/plain") is None


def test_create_file_entry_expands_home(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    (tmp_path / "docs").mkdir()

    entry = create_file_entry("~/docs", mime_lookup=lambda _: None)

    assert entry is not None
    assert entry.path == f"{tmp_path}/docs"


def test_find_binary_builds_command_with_arguments(tmp_path) -> None:
    tool = tmp_path / "mytool"
    tool.write_text("#!/bin/sh\n", encoding="utf-8")
    tool.chmod(0o755)

    entry = find_binary("mytool --verbose  now", binary_dir=str(tmp_path))

    assert entry is not None
    assert entry.name == "mytool --verbose  now"
    assert entry.exec == f"{tool} --verbose now"
    assert entry.kind is EntryKind.FILE
    assert entry.score_boost == BINARY_SCORE


def test_find_binary_ignores_missing_or_non_executable(tmp_path) -> None:
    plain = tmp_path / "plain"
    plain.write_text("x", encoding="utf-8")
    plain.chmod(0o644)
    (tmp_path / "dir").mkdir()

    assert find_binary("plain", binary_dir=str(tmp_path)) is None
    assert find_binary("dir", binary_dir=str(tmp_path)) is None
    assert find_binary("absent", binary_dir=str(tmp_path)) is None
    assert find_binary("   ", binary_dir=str(tmp_path)) is None
    assert find_binary("../plain", binary_dir=str(tmp_path)) is None
