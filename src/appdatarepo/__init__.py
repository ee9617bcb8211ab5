"""appdatarepo: turn AppData/AppStream metadata into package records (library, CLI, TUI)."""

from importlib.metadata import version, PackageNotFoundError

from appdatarepo.api import (
    ingest_directory,
    ingest_file,
    parse_appdata,
    record_tree,
)
from appdatarepo.core import IngestFlags, PackageStore, Record, Relation
from appdatarepo.errors import AppdataError, AppdataParseError

__all__ = [
    "ingest_directory",
    "ingest_file",
    "parse_appdata",
    "record_tree",
    "IngestFlags",
    "PackageStore",
    "Record",
    "Relation",
    "AppdataError",
    "AppdataParseError",
    "__version__",
]

try:
    __version__ = version("appdatarepo")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed as package
