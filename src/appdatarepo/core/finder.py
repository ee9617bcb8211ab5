"""Discover and ingest appdata documents from a metadata directory."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from appdatarepo.core.flags import IngestFlags
from appdatarepo.core.parser import add_appdata
from appdatarepo.core.store import PackageStore
from appdatarepo.errors import AppdataParseError

logger = logging.getLogger(__name__)

APPDATA_SUFFIXES = (".appdata.xml", ".metainfo.xml")


@dataclass
class IngestError:
    """A document of a batch that could not be opened or parsed."""

    path: str
    message: str
    line: int | None = None
    column: int | None = None

    def to_dict(self) -> dict:
        """Serialize to dict for JSON output."""
        return {
            "path": self.path,
            "message": self.message,
            "line": self.line,
            "column": self.column,
        }


@dataclass
class DirectoryIngestResult:
    """Outcome of ingesting a metadata directory."""

    directory: str
    documents: list[str] = field(default_factory=list)
    handles: list[int] = field(default_factory=list)
    errors: list[IngestError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if every matching document was ingested."""
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "directory": self.directory,
            "documents": self.documents,
            "handles": self.handles,
            "errors": [e.to_dict() for e in self.errors],
        }


def is_appdata_filename(name: str) -> bool:
    """True for ``<stem>.appdata.xml`` / ``<stem>.metainfo.xml``, excluding dot-files."""
    if name.startswith("."):
        return False
    return any(len(name) > len(suffix) and name.endswith(suffix) for suffix in APPDATA_SUFFIXES)


def search_uninternalized_filelist(store: PackageStore, directory: str) -> list[tuple[int, int]]:
    """
    Find records whose pending file list ships a metadata document in ``directory``.

    Returns (owner handle, interned basename) pairs for entries directly in
    ``directory`` that end in one of the appdata suffixes.
    """
    prefix = directory.rstrip("/") + "/"
    found: list[tuple[int, int]] = []
    for handle, path in store.pending_files():
        if not path.startswith(prefix):
            continue
        base = path[len(prefix):]
        if "/" in base or not any(base.endswith(s) for s in APPDATA_SUFFIXES):
            continue
        found.append((handle, store.intern(base)))
    return found


def _owners_for(store: PackageStore, entry_name: str, file_owners: list[tuple[int, int]]) -> list[int]:
    sid = store.str2id(entry_name)
    if sid is None:
        return []
    return [handle for handle, base in file_owners if base == sid]


def add_appdata_dir(
    store: PackageStore,
    directory: str | Path,
    flags: IngestFlags = IngestFlags.NONE,
) -> DirectoryIngestResult:
    """
    Ingest every ``*.appdata.xml`` and ``*.metainfo.xml`` file in a directory.

    Each document is ingested with the desktop file fallback enabled and its
    entry name as link filename. Files that cannot be opened or parsed are
    reported in the result and skipped. The store is internalized once at
    the end unless NO_INTERNALIZE is set.
    """
    directory = str(directory)
    file_owners: list[tuple[int, int]] = []
    if flags & IngestFlags.SEARCH_UNINTERNALIZED_FILELIST:
        file_owners = search_uninternalized_filelist(store, directory)
    dirpath = store.prepend_rootdir(directory) if flags & IngestFlags.USE_ROOTDIR else directory
    result = DirectoryIngestResult(directory=dirpath)

    try:
        names = sorted(os.listdir(dirpath))
    except OSError as e:
        logger.info("Cannot list %s: %s", dirpath, e)
        names = []

    doc_flags = flags | IngestFlags.NO_INTERNALIZE | IngestFlags.CHECK_DESKTOP_FILE
    for name in names:
        if not is_appdata_filename(name):
            continue
        path = os.path.join(dirpath, name)
        owners = _owners_for(store, name, file_owners) if file_owners else []
        try:
            with open(path, "rb") as fp:
                handles = add_appdata(store, fp, doc_flags, filename=name, owners=owners or None)
        except AppdataParseError as e:
            result.errors.append(IngestError(path, e.message, e.line, e.column))
            continue
        except OSError as e:
            logger.warning("%s: %s", path, e.strerror or e)
            result.errors.append(IngestError(path, e.strerror or str(e)))
            continue
        result.documents.append(name)
        result.handles.extend(handles)

    if not flags & IngestFlags.NO_INTERNALIZE:
        store.internalize()
    return result
