"""Option flags for appdata ingestion."""

from __future__ import annotations

from enum import IntFlag


class IngestFlags(IntFlag):
    """Options accepted by add_appdata and add_appdata_dir."""

    NONE = 0
    # Read the companion .desktop file when name or summary is missing
    CHECK_DESKTOP_FILE = 1 << 0
    # Look for owners of each document in file lists not yet internalized
    SEARCH_UNINTERNALIZED_FILELIST = 1 << 1
    # Resolve desktop files and directories below the store's rootdir
    USE_ROOTDIR = 1 << 2
    # Leave internalization to the caller
    NO_INTERNALIZE = 1 << 3
