"""Derive requires/provides relations for a finished appdata record."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from appdatarepo.core.desktop import desktop_file_path, read_desktop_entry
from appdatarepo.core.flags import IngestFlags
from appdatarepo.core.store import (
    ARCH_NOARCH,
    EVR_EMPTY,
    KEY_SUMMARY,
    REL_EQ,
    SOURCE_ARCHES,
    PackageStore,
)

logger = logging.getLogger(__name__)

NAME_PREFIX = "application:"
DESKTOP_SUFFIX = ".desktop"

# First matching suffix wins.
FILENAME_SUFFIXES: tuple[tuple[str, str], ...] = (
    (".desktop", ".appdata.xml"),
    (".ttf", ".metainfo.xml"),
    (".otf", ".metainfo.xml"),
    (".xml", ".metainfo.xml"),
    (".db", ".metainfo.xml"),
)


@dataclass
class DependencyInputs:
    """Per-record facts collected while parsing, consumed when the record closes."""

    filename: str | None = None
    owners: list[int] | None = None
    desktop_file: str | None = None
    pkgnames: list[str] = field(default_factory=list)
    has_summary: bool = False


def appdata_capability(name: str) -> str:
    """Name of the capability linking a metadata document to its package."""
    return f"application-appdata({name})"


def application_name(name: str) -> str:
    return NAME_PREFIX + name


def guess_filename_from_id(desktop_id: str) -> str | None:
    """
    Guess the metadata file name installed for a component id.

    ``foo.desktop`` maps to ``foo.appdata.xml``; font, xml and db ids map to
    ``<stem>.metainfo.xml``. Returns None for any other id.
    """
    for suffix, replacement in FILENAME_SUFFIXES:
        if len(desktop_id) > len(suffix) and desktop_id.endswith(suffix):
            return desktop_id[: -len(suffix)] + replacement
    return None


def fill_from_desktop_file(
    store: PackageStore, handle: int, inputs: DependencyInputs, flags: IngestFlags
) -> None:
    """Fill a missing name and/or summary from the record's .desktop file."""
    path = desktop_file_path(inputs.desktop_file)
    if flags & IngestFlags.USE_ROOTDIR:
        path = store.prepend_rootdir(path)
    entry = read_desktop_entry(path)
    if entry is None:
        return
    rec = store.record(handle)
    if rec.name is None and entry.name is not None:
        rec.name = application_name(entry.name)
    if not inputs.has_summary and entry.comment is not None:
        inputs.has_summary = True
        store.set_str(handle, KEY_SUMMARY, entry.comment)
    logger.debug("Filled %s from desktop entry %s", rec.name, path)


def synthesize_dependencies(
    store: PackageStore, handle: int, inputs: DependencyInputs, flags: IngestFlags
) -> None:
    """
    Complete a record once its application/component element has closed.

    Defaults arch and version, falls back to the desktop file for a missing
    name or summary, links the record to the package shipping its metadata
    (via pkgname elements, owners, an explicit filename or one guessed from
    the desktop id) and adds the ``name = version`` self-provide.
    """
    rec = store.record(handle)
    if rec.arch is None:
        rec.arch = ARCH_NOARCH
    if rec.evr is None:
        rec.evr = EVR_EMPTY

    if (
        (rec.name is None or not inputs.has_summary)
        and flags & IngestFlags.CHECK_DESKTOP_FILE
        and inputs.desktop_file
    ):
        fill_from_desktop_file(store, handle, inputs, flags)

    if rec.name is None and inputs.desktop_file:
        name = application_name(inputs.desktop_file)
        if name.endswith(DESKTOP_SUFFIX):
            name = name[: -len(DESKTOP_SUFFIX)]
        rec.name = name

    for pkgname in inputs.pkgnames:
        store.add_requires(handle, pkgname)
        store.add_provides(handle, appdata_capability(pkgname))

    if not rec.requires and inputs.owners:
        for owner in inputs.owners:
            owner_name = store.record(owner).name
            if owner_name is None:
                continue
            store.add_requires(handle, owner_name)
            store.add_provides(handle, appdata_capability(owner_name))

    if not rec.requires:
        filename = inputs.filename
        if not filename and inputs.desktop_file:
            filename = guess_filename_from_id(inputs.desktop_file)
        if filename:
            store.add_requires(handle, filename)
            store.add_provides(handle, appdata_capability(filename))
        elif inputs.desktop_file:
            logger.debug("No metadata file name known for id %s", inputs.desktop_file)

    if rec.name and rec.arch not in SOURCE_ARCHES:
        store.add_provides(handle, rec.name, REL_EQ, rec.evr)
