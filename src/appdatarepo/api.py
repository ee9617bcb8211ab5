"""Public API: use appdatarepo from Python or from other tools."""

from __future__ import annotations

import io
import os
from pathlib import Path

from appdatarepo.core.finder import add_appdata_dir, DirectoryIngestResult
from appdatarepo.core.flags import IngestFlags
from appdatarepo.core.parser import add_appdata
from appdatarepo.core.store import PackageStore, Record
from appdatarepo.core.tree import RelationNode, build_relation_tree

ROOTDIR_ENV = "APPDATAREPO_ROOTDIR"


def default_rootdir() -> str | None:
    """Root prefix from APPDATAREPO_ROOTDIR, or None when unset."""
    return os.environ.get(ROOTDIR_ENV) or None


def parse_appdata(
    data: bytes | str,
    *,
    flags: IngestFlags = IngestFlags.NONE,
    filename: str | None = None,
    rootdir: str | Path | None = None,
) -> list[Record]:
    """
    Parse one appdata document held in memory.

    Returns the records it produced, internalized.
    Raises AppdataParseError on malformed markup.
    """
    store = PackageStore(rootdir=rootdir)
    stream = io.BytesIO(data.encode("utf-8") if isinstance(data, str) else data)
    handles = add_appdata(store, stream, flags & ~IngestFlags.NO_INTERNALIZE, filename=filename)
    return [store.record(h) for h in handles]


def ingest_file(
    path: str | Path,
    *,
    flags: IngestFlags = IngestFlags.NONE,
    store: PackageStore | None = None,
) -> list[Record]:
    """
    Ingest an appdata file; its base name is used as link filename.

    Raises OSError if the file cannot be opened and AppdataParseError on
    malformed markup.
    """
    path = Path(path)
    if store is None:
        store = PackageStore(rootdir=default_rootdir())
    with open(path, "rb") as fp:
        handles = add_appdata(store, fp, flags, filename=path.name)
    return [store.record(h) for h in handles]


def ingest_directory(
    path: str | Path,
    *,
    flags: IngestFlags = IngestFlags.NONE,
    store: PackageStore | None = None,
) -> tuple[PackageStore, DirectoryIngestResult]:
    """
    Ingest all appdata/metainfo files of a directory.

    Per-file failures are collected in the result instead of raised.
    Returns the store (created when not given) and the result.
    """
    if store is None:
        store = PackageStore(rootdir=default_rootdir())
    result = add_appdata_dir(store, path, flags)
    return store, result


def record_tree(
    store: PackageStore,
    name: str,
    *,
    max_depth: int | None = None,
) -> RelationNode | None:
    """
    Build the relation tree for the record called ``name``.

    Returns None if no record has that name.
    """
    rec = store.find(name)
    if rec is None:
        return None
    return build_relation_tree(store, rec.handle, max_depth=max_depth)
