"""Character data capture and description text layout."""

from __future__ import annotations

import re

# Only these three count as whitespace; expat already folds CR/LF to LF.
_WS_RUN = re.compile(r"[ \t\n]+")
_WS_CHARS = " \t\n"

# Width of the list marker column ("  - ", " 1. ", "10. ").
LIST_INDENT = 4


def wsstrip(text: str) -> str:
    """
    Collapse whitespace runs and drop leading/trailing whitespace.

    A run containing a newline becomes a single newline, any other run a
    single space.
    """
    return _WS_RUN.sub(
        lambda m: "\n" if "\n" in m.group() else " ",
        text.strip(_WS_CHARS),
    )


def indent(text: str, n: int) -> str:
    """Prefix every non-empty line of ``text`` with ``n`` spaces."""
    pad = " " * n
    return "\n".join(pad + line if line else line for line in text.split("\n"))


class ContentBuffer:
    """Growable text buffer for the character data of the open capturing element."""

    def __init__(self) -> None:
        self._chunks: list[str] = []
        self._length = 0

    def append(self, text: str) -> None:
        self._chunks.append(text)
        self._length += len(text)

    def reset(self) -> None:
        self._chunks.clear()
        self._length = 0

    def getvalue(self) -> str:
        if len(self._chunks) > 1:
            self._chunks[:] = ["".join(self._chunks)]
        return self._chunks[0] if self._chunks else ""

    def wsstrip(self) -> str:
        """Normalize the buffer in place with :func:`wsstrip` and return the result."""
        text = wsstrip(self.getvalue())
        self.reset()
        if text:
            self.append(text)
        return text

    def __len__(self) -> int:
        return self._length

    def __str__(self) -> str:
        return self.getvalue()


class DescriptionAssembler:
    """
    Joins paragraph and list fragments into one plain-text description.

    Paragraphs are followed by a blank line, list items by a newline, and a
    closed list by one more newline. Items are indented by four columns and
    the first three columns are overwritten with the marker, so bullets read
    ``"  - item"`` and numbered items ``" 1. item"`` up to ``"99. item"``.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._item_count = 0

    def reset(self) -> None:
        self._parts.clear()
        self._item_count = 0

    def start_list(self) -> None:
        self._item_count = 0

    def end_list(self) -> None:
        self._parts.append("\n")

    def add_paragraph(self, text: str) -> None:
        self._parts.append(wsstrip(text) + "\n\n")

    def add_unordered_item(self, text: str) -> None:
        self._parts.append(_with_marker(text, "  -") + "\n")

    def add_ordered_item(self, text: str) -> None:
        self._item_count += 1
        count = self._item_count
        tens = str(count // 10 % 10) if count >= 10 else " "
        self._parts.append(_with_marker(text, f"{tens}{count % 10}.") + "\n")

    @property
    def item_count(self) -> int:
        return self._item_count

    def finish(self) -> str | None:
        """Return the description without trailing newlines, or None when empty."""
        text = "".join(self._parts).rstrip("\n")
        return text or None


def _with_marker(text: str, marker: str) -> str:
    item = indent(wsstrip(text), LIST_INDENT)
    if not item:
        return item
    # Ordered markers below 10 keep the first column of the indent.
    return "".join(m if m != " " else c for m, c in zip(marker, item[:3])) + item[3:]
