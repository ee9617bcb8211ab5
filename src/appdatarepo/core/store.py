"""In-memory package store: records, relations, interned strings and pending field writes."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

# Attribute keys.
KEY_CATEGORY = "category"
KEY_DESKTOP_FILE = "desktop_file"
KEY_SUMMARY = "summary"
KEY_DESCRIPTION = "description"
KEY_URL = "url"
KEY_LICENSE = "license"
KEY_GROUP = "group"
KEY_EXTENDS = "extends"
KEY_KEYWORDS = "keywords"
KEY_FILELIST = "filelist"

ARRAY_KEYS = frozenset({KEY_LICENSE, KEY_GROUP, KEY_EXTENDS, KEY_KEYWORDS, KEY_FILELIST})

ARCH_NOARCH = "noarch"
ARCH_SRC = "src"
ARCH_NOSRC = "nosrc"
SOURCE_ARCHES = frozenset({ARCH_SRC, ARCH_NOSRC})
EVR_EMPTY = ""

REL_EQ = "="


@dataclass(frozen=True)
class Relation:
    """A requires/provides edge, optionally version-qualified."""

    name: str
    op: str | None = None
    evr: str | None = None

    def __str__(self) -> str:
        if self.op is None:
            return self.name
        return f"{self.name} {self.op} {self.evr}"


@dataclass
class Record:
    """One package/application entry."""

    handle: int
    name: str | None = None
    arch: str | None = None
    evr: str | None = None
    requires: list[Relation] = field(default_factory=list)
    provides: list[Relation] = field(default_factory=list)
    # Internalized string and string-array fields
    attributes: dict[str, str | list[str]] = field(default_factory=dict)

    def get(self, key: str, default: str | list[str] | None = None) -> str | list[str] | None:
        return self.attributes.get(key, default)

    def to_dict(self) -> dict:
        """Serialize record to a JSON-friendly dict."""
        return {
            "name": self.name,
            "arch": self.arch,
            "evr": self.evr,
            "requires": [str(r) for r in self.requires],
            "provides": [str(p) for p in self.provides],
            **{key: list(v) if isinstance(v, list) else v for key, v in self.attributes.items()},
        }


class StringPool:
    """Interns strings to small integer ids."""

    def __init__(self) -> None:
        self._ids: dict[str, int] = {}
        self._strings: list[str] = [""]

    def str2id(self, s: str, create: bool = True) -> int | None:
        sid = self._ids.get(s)
        if sid is None and create:
            sid = len(self._strings)
            self._strings.append(s)
            self._ids[s] = sid
        return sid

    def id2str(self, sid: int) -> str:
        return self._strings[sid]

    def __len__(self) -> int:
        return len(self._strings) - 1


class PackageStore:
    """
    Holds records created by the parser.

    Name, arch, version and relations live directly on the record. String
    and array attributes are queued as pending writes and only become part
    of ``Record.attributes`` on :meth:`internalize`, so a batch of documents
    can be materialized in one go.
    """

    def __init__(self, rootdir: str | Path | None = None) -> None:
        self.rootdir = str(rootdir) if rootdir else None
        self.strings = StringPool()
        self._records: dict[int, Record] = {}
        self._pending: dict[int, dict[str, str | list[str]]] = {}
        self._next_handle = 1

    # Records

    def add_record(self) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._records[handle] = Record(handle=handle)
        return handle

    def record(self, handle: int) -> Record:
        try:
            return self._records[handle]
        except KeyError:
            raise KeyError(f"no record with handle {handle}") from None

    def discard(self, handle: int) -> None:
        """Drop a record and any writes still pending for it."""
        self._records.pop(handle, None)
        self._pending.pop(handle, None)

    def __contains__(self, handle: object) -> bool:
        return handle in self._records

    def __iter__(self):
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def find(self, name: str) -> Record | None:
        """Return the first record called ``name``."""
        for rec in self._records.values():
            if rec.name == name:
                return rec
        return None

    # Attributes

    def set_str(self, handle: int, key: str, value: str) -> None:
        self.record(handle)
        self._pending.setdefault(handle, {})[key] = value

    def add_str_array(self, handle: int, key: str, value: str) -> None:
        self.record(handle)
        values = self._pending.setdefault(handle, {}).setdefault(key, [])
        values.append(value)

    def add_file(self, handle: int, path: str) -> None:
        self.add_str_array(handle, KEY_FILELIST, path)

    def lookup(self, handle: int, key: str) -> str | list[str] | None:
        """Return a field value, preferring a pending write over the internalized one."""
        pending = self._pending.get(handle, {})
        if key in pending:
            value = pending[key]
            if key in ARRAY_KEYS:
                return list(self.record(handle).attributes.get(key, [])) + list(value)
            return value
        return self.record(handle).attributes.get(key)

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def pending_files(self) -> list[tuple[int, str]]:
        """Return (handle, path) for every file list entry not yet internalized."""
        return [
            (handle, path)
            for handle, fields in self._pending.items()
            for path in fields.get(KEY_FILELIST, [])
        ]

    def internalize(self) -> int:
        """Move pending writes into the records. Returns the number of records updated."""
        updated = 0
        for handle, fields in self._pending.items():
            attrs = self._records[handle].attributes
            for key, value in fields.items():
                if isinstance(value, list):
                    existing = attrs.setdefault(key, [])
                    existing.extend(value)
                else:
                    attrs[key] = value
            updated += 1
        self._pending.clear()
        return updated

    # Relations

    def add_requires(self, handle: int, name: str, op: str | None = None, evr: str | None = None) -> Relation:
        return self._add_relation(self.record(handle).requires, name, op, evr)

    def add_provides(self, handle: int, name: str, op: str | None = None, evr: str | None = None) -> Relation:
        return self._add_relation(self.record(handle).provides, name, op, evr)

    def _add_relation(self, relations: list[Relation], name: str, op: str | None, evr: str | None) -> Relation:
        self.strings.str2id(name)
        rel = Relation(name, op, evr)
        if rel not in relations:
            relations.append(rel)
        return rel

    def whatprovides(self, name: str) -> list[int]:
        """Return handles of records providing ``name`` (any version)."""
        return [
            rec.handle
            for rec in self._records.values()
            if any(p.name == name for p in rec.provides)
        ]

    # Strings and paths

    def intern(self, s: str) -> int:
        return self.strings.str2id(s)

    def str2id(self, s: str) -> int | None:
        """Return the id of ``s`` if it was interned before, else None."""
        return self.strings.str2id(s, create=False)

    def id2str(self, sid: int) -> str:
        return self.strings.id2str(sid)

    def prepend_rootdir(self, path: str | Path) -> str:
        path = str(path)
        if not self.rootdir:
            return path
        return os.path.join(self.rootdir, path.lstrip("/"))
