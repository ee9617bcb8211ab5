"""Core library: appdata parsing, dependency synthesis, directory ingestion, package store."""

from appdatarepo.core.finder import (
    add_appdata_dir,
    DirectoryIngestResult,
    IngestError,
)
from appdatarepo.core.flags import IngestFlags
from appdatarepo.core.parser import add_appdata
from appdatarepo.core.store import PackageStore, Record, Relation
from appdatarepo.core.tree import RelationNode, build_relation_tree

__all__ = [
    "add_appdata",
    "add_appdata_dir",
    "DirectoryIngestResult",
    "IngestError",
    "IngestFlags",
    "PackageStore",
    "Record",
    "Relation",
    "RelationNode",
    "build_relation_tree",
]
