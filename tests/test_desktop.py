"""Tests for appdatarepo.core.desktop module."""

from __future__ import annotations

from pathlib import Path

from appdatarepo.core.desktop import (
    MAX_LINE,
    DesktopEntry,
    desktop_file_path,
    read_desktop_entry,
)


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "foo.desktop"
    path.write_text(content)
    return path


class TestDesktopFilePath:
    def test_path(self) -> None:
        assert desktop_file_path("foo.desktop") == "/usr/share/applications/foo.desktop"


class TestReadDesktopEntry:
    """Tests for read_desktop_entry."""

    def test_name_and_comment(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[Desktop Entry]\nType=Application\nName=Foo\nComment = Does foo\n")
        assert read_desktop_entry(path) == DesktopEntry(name="Foo", comment="Does foo")

    def test_first_occurrence_wins(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[Desktop Entry]\nName=Foo\nName=Other\n")
        assert read_desktop_entry(path).name == "Foo"

    def test_localized_keys_ignored(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[Desktop Entry]\nName[de]=Fu\nName=Foo\n")
        assert read_desktop_entry(path).name == "Foo"

    def test_other_sections_ignored(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "[Other]\nName=Bad\n[Desktop Entry]\nComment=c\n[Desktop Action new]\nName=Action\n",
        )
        entry = read_desktop_entry(path)
        assert entry.name is None
        assert entry.comment == "c"

    def test_malformed_lines_skipped(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "[Desktop Entry]\n# Name=Commented\n\nName=\nName\n=Value\n   Name=Real\n",
        )
        assert read_desktop_entry(path).name == "Real"

    def test_overlong_line_skipped(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[Desktop Entry]\nName=" + "x" * MAX_LINE + "\nName=Short\n")
        assert read_desktop_entry(path).name == "Short"

    def test_unterminated_last_line_skipped(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[Desktop Entry]\nComment=c\nName=Foo")
        entry = read_desktop_entry(path)
        assert entry.name is None
        assert entry.comment == "c"

    def test_no_entry_section(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "Name=Foo\n")
        assert read_desktop_entry(path) == DesktopEntry()

    def test_missing_file(self, tmp_path: Path) -> None:
        assert read_desktop_entry(tmp_path / "missing.desktop") is None
