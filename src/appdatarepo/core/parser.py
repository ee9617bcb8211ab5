"""Streaming parser turning AppData/AppStream XML into package store records."""

from __future__ import annotations

import logging
from typing import IO, Callable, Protocol
from xml.parsers import expat

from appdatarepo.core.deps import DependencyInputs, application_name, synthesize_dependencies
from appdatarepo.core.flags import IngestFlags
from appdatarepo.core.states import STATE_TABLE, ElementState, StateTable
from appdatarepo.core.store import (
    KEY_CATEGORY,
    KEY_DESKTOP_FILE,
    KEY_DESCRIPTION,
    KEY_EXTENDS,
    KEY_GROUP,
    KEY_KEYWORDS,
    KEY_LICENSE,
    KEY_SUMMARY,
    KEY_URL,
    PackageStore,
)
from appdatarepo.core.text import ContentBuffer, DescriptionAssembler
from appdatarepo.errors import AppdataParseError

logger = logging.getLogger(__name__)

BUFF_SIZE = 8192
LANG_ATTR = "xml:lang"
DEFAULT_CATEGORY = "desktop"

S = ElementState

# States whose captured text is appended to an array attribute on close.
_ARRAY_FIELDS = {
    S.LICENCE: KEY_LICENSE,
    S.GROUP: KEY_GROUP,
    S.EXTENDS: KEY_EXTENDS,
    S.KEYWORD: KEY_KEYWORDS,
}


class EventHandler(Protocol):
    def start_element(self, name: str, attrs: dict[str, str]) -> None: ...

    def end_element(self, name: str) -> None: ...

    def character_data(self, text: str) -> None: ...


class Tokenizer(Protocol):
    """
    Push tokenizer: feed bytes, get element/text callbacks in document order.

    ``feed`` raises AppdataParseError on malformed input.
    """

    def feed(self, data: bytes | str, final: bool = False) -> None: ...


TokenizerFactory = Callable[[EventHandler], Tokenizer]


class ExpatTokenizer:
    """Tokenizer backed by the expat bindings in the standard library."""

    def __init__(self, handler: EventHandler) -> None:
        self._parser = expat.ParserCreate()
        self._parser.StartElementHandler = handler.start_element
        self._parser.EndElementHandler = handler.end_element
        self._parser.CharacterDataHandler = handler.character_data

    def feed(self, data: bytes | str, final: bool = False) -> None:
        try:
            self._parser.Parse(data, final)
        except expat.ExpatError as e:
            raise AppdataParseError(expat.ErrorString(e.code), e.lineno, e.offset) from e


class ParseContext:
    """
    State machine fed by tokenizer events for one document.

    ``depth`` counts open elements; ``state_depth`` is the depth of the
    innermost element that matched a transition. While they differ the
    parser is inside an unknown subtree and ignores everything except depth
    changes. ``skip_depth`` marks the start of a language-tagged subtree
    whose content must not be captured.
    """

    def __init__(
        self,
        store: PackageStore,
        flags: IngestFlags = IngestFlags.NONE,
        *,
        filename: str | None = None,
        owners: list[int] | None = None,
        table: StateTable = STATE_TABLE,
    ) -> None:
        self.store = store
        self.flags = flags
        self.filename = filename
        self.owners = owners
        self.table = table

        self.depth = 0
        self.state = S.START
        self.state_depth = 0
        self.skip_depth: int | None = None
        self.capture = False
        self.content = ContentBuffer()
        self.description = DescriptionAssembler()

        self.handle: int | None = None
        self.inputs = DependencyInputs(filename=filename, owners=owners)
        self.created: list[int] = []

    # Tokenizer callbacks

    def start_element(self, name: str, attrs: dict[str, str]) -> None:
        if self.depth != self.state_depth:
            self.depth += 1
            return
        self.depth += 1
        tr = self.table.lookup(self.state, name)
        if tr is None:
            return
        self.state = tr.target
        self.capture = tr.captures_text
        self.state_depth = self.depth
        self.content.reset()

        if self.skip_depth is None and LANG_ATTR in attrs:
            self.skip_depth = self.depth
        if self.skip_depth is not None:
            self.capture = False
            return

        if self.state is S.APPLICATION:
            self._open_record(attrs.get("type") or DEFAULT_CATEGORY)
        elif self.state is S.DESCRIPTION:
            self.description.reset()
        elif self.state in (S.UL, S.OL):
            self.description.start_list()

    def end_element(self, name: str) -> None:
        if self.depth != self.state_depth:
            self.depth -= 1
            return
        self.depth -= 1
        self.state_depth -= 1

        if self.skip_depth is not None and self.depth + 1 >= self.skip_depth:
            if self.depth + 1 == self.skip_depth:
                self.skip_depth = None
            self._leave_state()
            return

        self._close_state(self.state)
        self._leave_state()

    def character_data(self, text: str) -> None:
        if self.capture:
            self.content.append(text)

    # State handling

    def _leave_state(self) -> None:
        self.state = self.table.parent(self.state)
        self.capture = False

    def _open_record(self, category: str) -> None:
        self.handle = self.store.add_record()
        self.created.append(self.handle)
        self.inputs = DependencyInputs(filename=self.filename, owners=self.owners)
        self.description.reset()
        self.store.set_str(self.handle, KEY_CATEGORY, category)

    def _close_state(self, state: ElementState) -> None:
        handle = self.handle
        if state is S.APPLICATION:
            synthesize_dependencies(self.store, handle, self.inputs, self.flags)
            logger.debug("Closed record %s (%s)", handle, self.store.record(handle).name)
            self.handle = None
            return
        if state is S.P:
            self.description.add_paragraph(self.content.getvalue())
            return
        if state is S.UL_LI:
            self.description.add_unordered_item(self.content.getvalue())
            return
        if state is S.OL_LI:
            self.description.add_ordered_item(self.content.getvalue())
            return
        if state in (S.UL, S.OL):
            self.description.end_list()
            return
        if state is S.DESCRIPTION:
            text = self.description.finish()
            if text is not None:
                self.store.set_str(handle, KEY_DESCRIPTION, text)
            return

        if handle is None:
            return
        text = self.content.wsstrip()
        if state is S.ID:
            self.inputs.desktop_file = text
            self.store.set_str(handle, KEY_DESKTOP_FILE, text)
        elif state is S.NAME:
            self.store.record(handle).name = application_name(text)
        elif state is S.SUMMARY:
            self.inputs.has_summary = True
            self.store.set_str(handle, KEY_SUMMARY, text)
        elif state is S.URL:
            self.store.set_str(handle, KEY_URL, text)
        elif state is S.PKGNAME:
            self.inputs.pkgnames.append(text)
        elif state in _ARRAY_FIELDS:
            self.store.add_str_array(handle, _ARRAY_FIELDS[state], text)

    def abort(self) -> None:
        """Discard the record of a top element that never closed."""
        if self.handle is not None:
            self.store.discard(self.handle)
            self.created.remove(self.handle)
            self.handle = None


def add_appdata(
    store: PackageStore,
    stream: IO[bytes] | IO[str],
    flags: IngestFlags = IngestFlags.NONE,
    *,
    filename: str | None = None,
    owners: list[int] | None = None,
    tokenizer_factory: TokenizerFactory = ExpatTokenizer,
) -> list[int]:
    """
    Ingest one appdata document from ``stream`` into ``store``.

    Args:
        store: Store receiving the records.
        stream: Binary (or text) file object, read in chunks until EOF.
        flags: IngestFlags for desktop fallback, rootdir and internalization.
        filename: Name of the document, used as the link filename for
            records that have no pkgname.
        owners: Handles of records shipping this document.
        tokenizer_factory: Builds the tokenizer driving the parse context.

    Returns:
        Handles of the records created, in document order.

    Raises:
        AppdataParseError: on malformed markup. The record of a top element
            still open at that point is discarded; earlier records are kept.
    """
    ctx = ParseContext(store, flags, filename=filename, owners=owners)
    tokenizer = tokenizer_factory(ctx)
    try:
        while True:
            chunk = stream.read(BUFF_SIZE)
            tokenizer.feed(chunk, final=not chunk)
            if not chunk:
                break
    except AppdataParseError as e:
        ctx.abort()
        err = AppdataParseError(e.message, e.line, e.column, filename)
        logger.warning("%s", err)
        raise err from e
    finally:
        if not flags & IngestFlags.NO_INTERNALIZE:
            store.internalize()
    return ctx.created
