"""Read Name/Comment from a companion desktop entry file."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DESKTOP_DIR = "/usr/share/applications/"

# Lines this long (newline included) are ignored.
MAX_LINE = 1024


@dataclass
class DesktopEntry:
    """Fields of a ``[Desktop Entry]`` section we can use as fallbacks."""

    name: str | None = None
    comment: str | None = None


def desktop_file_path(desktop_file: str) -> str:
    """Return the path a desktop id is installed under."""
    return DESKTOP_DIR + desktop_file


def read_desktop_entry(path: str | Path) -> DesktopEntry | None:
    """
    Parse the ``[Desktop Entry]`` section of a .desktop file.

    Only ``Name`` and ``Comment`` are collected; the first occurrence of each
    wins and reading stops once both are known. Comment lines, lines without
    ``=``, empty keys/values and overlong lines are skipped.
    Returns None if the file cannot be opened.
    """
    entry = DesktopEntry()
    in_entry = False
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            for line in f:
                # An unterminated last line counts as overlong.
                if not line.endswith("\n") or len(line.encode("utf-8")) >= MAX_LINE:
                    continue
                line = line[:-1].strip(" \t")
                if not line or line.startswith("#"):
                    continue
                if line.startswith("["):
                    in_entry = line == "[Desktop Entry]"
                    continue
                if not in_entry:
                    continue
                key, sep, value = line.partition("=")
                key = key.rstrip(" \t")
                value = value.lstrip(" \t")
                if not sep or not key or not value:
                    continue
                if key == "Name" and entry.name is None:
                    entry.name = value
                elif key == "Comment" and entry.comment is None:
                    entry.comment = value
                if entry.name is not None and entry.comment is not None:
                    break
    except OSError as e:
        logger.debug("No desktop entry at %s: %s", path, e)
        return None
    return entry
