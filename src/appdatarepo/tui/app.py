"""Textual TUI for browsing the records ingested from a metadata directory."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Input, Static, Tree
from textual.widgets.tree import TreeNode
from textual.worker import Worker, WorkerState

from appdatarepo.api import ingest_directory
from appdatarepo.core.finder import DirectoryIngestResult
from appdatarepo.core.store import (
    KEY_CATEGORY,
    KEY_DESCRIPTION,
    KEY_KEYWORDS,
    KEY_LICENSE,
    KEY_SUMMARY,
    KEY_URL,
    PackageStore,
    Record,
)

DEFAULT_DIRECTORY = "/usr/share/metainfo"

# Limits to keep the tree responsive
MAX_RECORDS = 500

COLOR_HEADER = "bold magenta"
COLOR_RECORD = "white"
COLOR_REQUIRES = "bold yellow"
COLOR_PROVIDES = "bold green"
COLOR_ERROR = "bold red"
COLOR_STATS = "cyan"


def _record_label(rec: Record) -> str:
    """Tree label for a record: name plus category."""
    name = rec.name or f"#{rec.handle}"
    if name.startswith("application:"):
        name = name[len("application:"):]
    category = rec.get(KEY_CATEGORY)
    return f"[{COLOR_RECORD}]{name}[/] [dim]{category}[/]" if category else f"[{COLOR_RECORD}]{name}[/]"


def _format_record(rec: Record) -> str:
    """Details panel text for a record."""
    lines = [
        f"[{COLOR_HEADER}]Record[/]",
        f"  [{COLOR_RECORD}]{rec.name or '(unnamed)'}[/]  [dim]{rec.arch or '?'}[/]",
        "",
        f"[{COLOR_HEADER}]Summary[/]",
        f"  {rec.get(KEY_SUMMARY) or '(no summary)'}",
    ]
    description = rec.get(KEY_DESCRIPTION)
    if description:
        lines += ["", f"[{COLOR_HEADER}]Description[/]"]
        lines += [f"  {line}" for line in str(description).split("\n")]
    for label, key in (("Licence", KEY_LICENSE), ("Keywords", KEY_KEYWORDS)):
        values = rec.get(key)
        if values:
            lines += ["", f"[{COLOR_HEADER}]{label}[/]", f"  {', '.join(values)}"]
    url = rec.get(KEY_URL)
    if url:
        lines += ["", f"[{COLOR_HEADER}]URL[/]", f"  {url}"]
    lines += [
        "",
        f"[{COLOR_HEADER}]Relations[/]",
        f"  Requires: [{COLOR_STATS}]{len(rec.requires)}[/]  ·  Provides: [{COLOR_STATS}]{len(rec.provides)}[/]",
    ]
    return "\n".join(lines)


def _format_summary(result: DirectoryIngestResult, store: PackageStore) -> str:
    """Details panel text for the loaded directory."""
    lines = [
        f"[{COLOR_HEADER}]{result.directory}[/]",
        "",
        f"Documents: [{COLOR_STATS}]{len(result.documents)}[/]  ·  "
        f"Records: [{COLOR_STATS}]{len(store)}[/]  ·  "
        f"Errors: [{COLOR_STATS}]{len(result.errors)}[/]",
    ]
    for err in result.errors:
        where = f" (line {err.line}:{err.column})" if err.line is not None else ""
        lines.append(f"  [{COLOR_ERROR}]{Path(err.path).name}[/]: {err.message}{where}")
    return "\n".join(lines)


def _populate_record(tn: TreeNode, rec: Record) -> None:
    """Add requires/provides branches under a record node."""
    for label, color, relations in (
        ("requires", COLOR_REQUIRES, rec.requires),
        ("provides", COLOR_PROVIDES, rec.provides),
    ):
        if not relations:
            continue
        branch = tn.add(f"[{color}]{label} ({len(relations)})[/]", expand=False)
        for rel in relations:
            branch.add_leaf(str(rel))


class OpenDirectoryScreen(ModalScreen[Path | None]):
    """Modal to enter a metadata directory. Enter to load, Escape to cancel."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=True),
    ]

    DEFAULT_CSS = """
    OpenDirectoryScreen {
        align: center middle;
        padding: 2 4;
    }
    OpenDirectoryScreen #open_input {
        width: 60;
        margin: 1 0;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(
                "[bold cyan]Open directory[/]\n\n"
                "Directory holding *.appdata.xml / *.metainfo.xml files.",
                markup=True,
            )
            yield Input(placeholder=DEFAULT_DIRECTORY, id="open_input")

    def on_mount(self) -> None:
        self.query_one("#open_input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        value = event.value.strip()
        if not value:
            self.dismiss(None)
            return
        p = Path(value).expanduser().resolve()
        if not p.is_dir():
            self.notify(f"Not a directory: {p}", severity="warning", timeout=3)
            return
        self.dismiss(p)

    def action_cancel(self) -> None:
        self.dismiss(None)


class AppdataBrowserApp(App[None]):
    """Terminal UI to browse appdata records and their relations."""

    TITLE = "appdatarepo"
    BINDINGS = [
        Binding("o", "open_directory", "Open"),
        Binding("/", "search", "Search"),
        Binding("n", "next_match", "Next match", show=False),
        Binding("r", "refresh", "Refresh"),
        Binding("q", "quit", "Quit"),
    ]

    DEFAULT_CSS = """
    #details {
        padding: 1 2;
        border: solid $primary;
        height: auto;
        min-height: 8;
    }
    """

    def __init__(self, directory: str | Path | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._directory = Path(directory) if directory else Path(DEFAULT_DIRECTORY)
        self._store: PackageStore | None = None
        self._result: DirectoryIngestResult | None = None
        self._search_matches: list[TreeNode] = []
        self._search_index = 0

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Container(id="main_container"):
            yield Tree("Records", id="record_tree")
            yield Static("[dim]Loading…[/]", id="details", markup=True)
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = str(self._directory)
        self._start_load()

    def _start_load(self) -> None:
        self._set_details(f"[dim]Ingesting {self._directory}…[/]")
        self.run_worker(self._load_worker, thread=True)

    def _load_worker(self) -> tuple[PackageStore, DirectoryIngestResult]:
        return ingest_directory(self._directory)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.state == WorkerState.SUCCESS:
            self._store, self._result = event.worker.result
            self._show_records()
        elif event.state == WorkerState.ERROR:
            self._set_details(f"[red]Error: {event.worker.error}[/]")

    def _show_records(self) -> None:
        tree = self.query_one("#record_tree", Tree)
        tree.clear()
        store, result = self._store, self._result
        if store is None or result is None:
            return
        tree.root.label = f"[{COLOR_HEADER}]{result.directory}[/]"
        tree.root.data = result
        records = sorted(store, key=lambda r: r.name or "")
        for rec in records[:MAX_RECORDS]:
            tn = tree.root.add(_record_label(rec), expand=False)
            tn.data = rec
            _populate_record(tn, rec)
        if len(records) > MAX_RECORDS:
            tree.root.add_leaf(f"[dim]… and {len(records) - MAX_RECORDS} more[/]")
        tree.root.expand()
        self._set_details(_format_summary(result, store))
        tree.focus()

    def _set_details(self, text: str) -> None:
        self.query_one("#details", Static).update(text)

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        data = event.node.data
        if isinstance(data, Record):
            self._set_details(_format_record(data))
        elif isinstance(data, DirectoryIngestResult) and self._store is not None:
            self._set_details(_format_summary(data, self._store))

    def action_refresh(self) -> None:
        self._start_load()

    def action_open_directory(self) -> None:
        self.push_screen(OpenDirectoryScreen(), self._on_open_done)

    def _on_open_done(self, path: Path | None) -> None:
        if path is None:
            return
        self._directory = path
        self.sub_title = str(path)
        self._start_load()

    def action_search(self) -> None:
        self.push_screen(SearchScreen(), self._on_search_done)

    def _on_search_done(self, query: str | None) -> None:
        if not query:
            return
        tree = self.query_one("#record_tree", Tree)
        query = query.lower()
        self._search_matches = [
            tn for tn in tree.root.children if isinstance(tn.data, Record) and query in str(tn.label).lower()
        ]
        self._search_index = 0
        if not self._search_matches:
            self.notify(f"No matches for '{query}'", severity="warning", timeout=2)
            return
        self._goto_match(0)

    def _goto_match(self, index: int) -> None:
        self._search_index = index % len(self._search_matches)
        node = self._search_matches[self._search_index]
        tree = self.query_one("#record_tree", Tree)
        tree.select_node(node)
        tree.scroll_to_node(node)
        self.notify(
            f"Match {self._search_index + 1}/{len(self._search_matches)}",
            severity="information",
            timeout=2,
        )

    def action_next_match(self) -> None:
        if not self._search_matches:
            self.notify("No active search. Press / to search.", severity="information", timeout=2)
            return
        self._goto_match(self._search_index + 1)


class SearchScreen(ModalScreen[str | None]):
    """Modal to search record names."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=True),
    ]

    DEFAULT_CSS = """
    SearchScreen {
        align: center middle;
    }
    SearchScreen #search_input {
        width: 60;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("[bold cyan]Search[/]", markup=True)
            yield Input(placeholder="record name...", id="search_input")

    def on_mount(self) -> None:
        self.query_one("#search_input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        value = event.value.strip()
        self.dismiss(value or None)

    def action_cancel(self) -> None:
        self.dismiss(None)


def main() -> None:
    """Entry point for the appdatarepo TUI."""
    directory = sys.argv[1].strip() if len(sys.argv) > 1 else None
    app = AppdataBrowserApp(directory=directory)
    app.run()


if __name__ == "__main__":
    main()
