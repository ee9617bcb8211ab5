"""Element states and the transition table driving the appdata parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class ElementState(Enum):
    """Which tag context the parser is currently inside."""

    START = "start"
    APPLICATION = "application"
    ID = "id"
    PKGNAME = "pkgname"
    LICENCE = "licence"
    NAME = "name"
    SUMMARY = "summary"
    DESCRIPTION = "description"
    P = "p"
    UL = "ul"
    UL_LI = "ul_li"
    OL = "ol"
    OL_LI = "ol_li"
    URL = "url"
    GROUP = "group"
    KEYWORDS = "keywords"
    KEYWORD = "keyword"
    EXTENDS = "extends"


@dataclass(frozen=True)
class Transition:
    """Entering ``tag`` while in ``source`` moves the parser to ``target``."""

    source: ElementState
    tag: str
    target: ElementState
    captures_text: bool = False


S = ElementState

# Must stay grouped by source state.
TRANSITIONS: tuple[Transition, ...] = (
    Transition(S.START, "applications", S.START),
    Transition(S.START, "components", S.START),
    Transition(S.START, "application", S.APPLICATION),
    Transition(S.START, "component", S.APPLICATION),
    Transition(S.APPLICATION, "id", S.ID, True),
    Transition(S.APPLICATION, "pkgname", S.PKGNAME, True),
    Transition(S.APPLICATION, "product_license", S.LICENCE, True),
    Transition(S.APPLICATION, "name", S.NAME, True),
    Transition(S.APPLICATION, "summary", S.SUMMARY, True),
    Transition(S.APPLICATION, "description", S.DESCRIPTION),
    Transition(S.APPLICATION, "url", S.URL, True),
    Transition(S.APPLICATION, "project_group", S.GROUP, True),
    Transition(S.APPLICATION, "keywords", S.KEYWORDS),
    Transition(S.APPLICATION, "extends", S.EXTENDS, True),
    Transition(S.DESCRIPTION, "p", S.P, True),
    Transition(S.DESCRIPTION, "ul", S.UL),
    Transition(S.DESCRIPTION, "ol", S.OL),
    Transition(S.UL, "li", S.UL_LI, True),
    Transition(S.OL, "li", S.OL_LI, True),
    Transition(S.KEYWORDS, "keyword", S.KEYWORD, True),
)


class StateTable:
    """
    Read-only lookup over a grouped transition list.

    Forward lookup maps (state, tag) to a transition; reverse lookup maps a
    state to the single state it is entered from. Each state's transitions
    form one contiguous run of the source list.
    """

    def __init__(self, transitions: tuple[Transition, ...]) -> None:
        runs: dict[ElementState, tuple[int, int]] = {}
        forward: dict[tuple[ElementState, str], Transition] = {}
        parents: dict[ElementState, ElementState] = {}
        for index, tr in enumerate(transitions):
            if tr.source in runs:
                first, last = runs[tr.source]
                if last != index - 1:
                    raise ValueError(f"transitions from {tr.source.name} are not contiguous")
                runs[tr.source] = (first, index)
            else:
                runs[tr.source] = (index, index)
            forward[(tr.source, tr.tag)] = tr
            known = parents.setdefault(tr.target, tr.source)
            if known is not tr.source:
                raise ValueError(
                    f"state {tr.target.name} has two parents: {known.name}, {tr.source.name}"
                )
        self._transitions = transitions
        self._runs = MappingProxyType(runs)
        self._forward = MappingProxyType(forward)
        self._parents = MappingProxyType(parents)

    def lookup(self, state: ElementState, tag: str) -> Transition | None:
        """Return the transition for ``tag`` in ``state``, or None if the tag is unknown there."""
        return self._forward.get((state, tag))

    def parent(self, state: ElementState) -> ElementState:
        """Return the state that ``state`` is entered from (START for the root)."""
        return self._parents.get(state, ElementState.START)

    def transitions_from(self, state: ElementState) -> tuple[Transition, ...]:
        """Return the contiguous run of transitions leaving ``state``."""
        run = self._runs.get(state)
        if run is None:
            return ()
        first, last = run
        return self._transitions[first : last + 1]

    def __len__(self) -> int:
        return len(self._transitions)


STATE_TABLE = StateTable(TRANSITIONS)
