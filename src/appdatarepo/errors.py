"""Exceptions raised while ingesting appdata documents."""

from __future__ import annotations


class AppdataError(Exception):
    """Base class for appdatarepo errors."""


class AppdataParseError(AppdataError):
    """Malformed markup: the tokenizer rejected the document."""

    def __init__(self, message: str, line: int, column: int, filename: str | None = None):
        location = f"{filename}: " if filename else ""
        super().__init__(f"{location}{message} at line {line}:{column}")
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename

    def to_dict(self) -> dict:
        """Serialize to dict for JSON output."""
        return {
            "message": self.message,
            "line": self.line,
            "column": self.column,
        }
