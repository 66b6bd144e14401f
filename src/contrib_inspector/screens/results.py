"""Results screen with a directory tree and a per-file table."""

from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import (
    DataTable,
    Footer,
    Header,
    Static,
    TabbedContent,
    TabPane,
    Tree,
)
from textual.widgets.tree import TreeNode as TreeWidgetNode

from contrib_inspector.analysis.ranking import rank_by_ratio
from contrib_inspector.analysis.tree import TreeNode, build_tree
from contrib_inspector.config import InspectConfig
from contrib_inspector.models import InspectionResult


def node_label(node: TreeNode, result: InspectionResult, config: InspectConfig) -> str:
    """Label for one tree node: the user's share, or the top authors."""
    if config.show_authors:
        return f"{node.name} - {node.contributions.authors_str(config.max_authors)}"
    ratio = node.ratio_by(result.identities)
    return f"{node.name} - {ratio * 100:.1f}%"


def header_text(result: InspectionResult) -> str:
    who = ", ".join(result.identities) if result.identities else "all authors"
    return (
        f"  📊  {result.repo_root}  ·  {result.mode.value} mode  ·  {who}  ·  "
        f"{len(result.files)} files, {result.total_lines} lines  "
    )


class ResultsScreen(Screen):
    """Attribution results as a browsable tree and a flat file table."""

    CSS = """
    ResultsScreen {
        layout: vertical;
    }
    #results-header {
        height: 3;
        background: $primary;
        color: $text;
        text-align: center;
        padding: 1 2;
        text-style: bold;
    }
    #skipped-label {
        color: $warning;
        margin: 0 2;
    }
    """

    BINDINGS = [
        ("q", "app.quit", "Quit"),
        ("e", "expand_all", "Expand all"),
    ]

    def __init__(self, result: InspectionResult, config: InspectConfig, **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(**kwargs)
        self.result = result
        self.config = config
        self.root_node = build_tree(result.files)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static(header_text(self.result), id="results-header")
        if self.result.skipped:
            yield Static(
                f"⚠  {self.result.skipped} files or commits could not be attributed",
                id="skipped-label",
            )
        with TabbedContent("🌳 Tree", "📄 Files"):
            with TabPane("🌳 Tree"):
                yield self._compose_tree()
            with TabPane("📄 Files"):
                yield self._compose_files()
        yield Footer()

    # ── Tree tab ──────────────────────────────────────────────────────────

    def _compose_tree(self) -> Tree:
        tree: Tree[str] = Tree(node_label(self.root_node, self.result, self.config), id="contrib-tree")
        tree.root.expand()
        self._add_children(tree.root, self.root_node, depth=1)
        return tree

    def _add_children(self, widget: TreeWidgetNode, node: TreeNode, depth: int) -> None:
        max_depth = self.config.max_depth
        if max_depth is not None and depth > max_depth:
            return
        if self.config.show_authors:
            children = node.child_nodes()
        else:
            identities = self.result.identities
            children = node.child_nodes(lambda n: n.ratio_by(identities), self.config.reverse)
            if not self.config.all:
                children = [c for c in children if c.contributions.lines_by(identities) > 0]
        for child in children:
            label = node_label(child, self.result, self.config)
            if child.is_leaf:
                widget.add_leaf(label)
            else:
                self._add_children(widget.add(label), child, depth + 1)

    def action_expand_all(self) -> None:
        self.query_one("#contrib-tree", Tree).root.expand_all()

    # ── Files tab ─────────────────────────────────────────────────────────

    def _compose_files(self) -> DataTable:
        table: DataTable = DataTable(id="files-table")
        if self.config.show_authors:
            table.add_columns("File", "Lines", "Top authors")
            for f in self.result.files:
                table.add_row(
                    f.path,
                    str(f.contributions.total_lines),
                    f.contributions.authors_str(self.config.max_authors),
                )
            return table

        table.add_columns("File", "Lines", "Yours", "Share")
        lines = {f.path: f.contributions for f in self.result.files}
        ranked = rank_by_ratio(
            self.result.files, self.result.identities, self.config.reverse, include_all=True
        )
        for path, ratio in ranked:
            record = lines[path]
            table.add_row(
                path,
                str(record.total_lines),
                str(record.lines_by(self.result.identities)),
                f"{ratio * 100:.1f}%",
            )
        return table
