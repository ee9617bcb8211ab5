"""Resolve a record's requires against the providers in a store, as a tree."""

from __future__ import annotations

from dataclasses import dataclass, field

from appdatarepo.core.store import KEY_SUMMARY, PackageStore

NOT_FOUND = "(not found)"
CYCLE = "(cycle)"


@dataclass
class RelationNode:
    """A node in the relation tree: one record (or unresolved requirement) and its providers."""

    name: str
    version: str
    summary: str
    requirement: str = ""
    handle: int | None = None
    children: list[RelationNode] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Serialize node to a JSON-friendly dict."""
        return {
            "name": self.name,
            "version": self.version,
            "summary": self.summary,
            "requirement": self.requirement,
            "children": [c.to_dict() for c in self.children],
        }


def build_relation_tree(
    store: PackageStore,
    handle: int,
    *,
    max_depth: int | None = None,
    _requirement: str = "",
    _depth: int = 0,
    _visited: set[int] | None = None,
) -> RelationNode | None:
    """
    Build the tree of records satisfying the requires of ``handle``.

    Every requires relation becomes one child per providing record, or a
    single ``(not found)`` leaf when nothing in the store provides it.
    Cycles are cut with a ``(cycle)`` leaf.

    Returns None when ``max_depth`` is exceeded.
    """
    if _visited is None:
        _visited = set()
    rec = store.record(handle)
    name = rec.name or f"#{handle}"
    if handle in _visited:
        return RelationNode(name=name, version="", summary=CYCLE, requirement=_requirement, handle=handle)
    if max_depth is not None and _depth > max_depth:
        return None

    _visited.add(handle)
    children: list[RelationNode] = []
    for req in rec.requires:
        providers = [p for p in store.whatprovides(req.name) if p != handle]
        if not providers:
            children.append(RelationNode(name=req.name, version="", summary=NOT_FOUND, requirement=str(req)))
            continue
        for provider in providers:
            child = build_relation_tree(
                store,
                provider,
                max_depth=max_depth,
                _requirement=str(req),
                _depth=_depth + 1,
                _visited=set(_visited),
            )
            if child is not None:
                children.append(child)
    _visited.discard(handle)

    summary = store.lookup(handle, KEY_SUMMARY)
    return RelationNode(
        name=name,
        version=rec.evr or "",
        summary=summary if isinstance(summary, str) else "",
        requirement=_requirement,
        handle=handle,
        children=children,
    )
