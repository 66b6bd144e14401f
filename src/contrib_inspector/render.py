"""Plain-text reports: directory trees and flat per-file lists."""

from typing import Iterable, Optional

from contrib_inspector.analysis.ranking import rank_by_ratio
from contrib_inspector.analysis.tree import TreeNode, build_tree
from contrib_inspector.config import InspectConfig
from contrib_inspector.models import FileContribution, InspectionResult


def render_flat_percentages(
    files: Iterable[FileContribution],
    identities: Iterable[str],
    reverse: bool = False,
    include_all: bool = False,
) -> list[str]:
    return [
        f"{ratio * 100:>5.1f}% - {path}"
        for path, ratio in rank_by_ratio(files, identities, reverse, include_all)
    ]


def render_flat_authors(files: Iterable[FileContribution], max_authors: int) -> list[str]:
    return [f"{f.path} - {f.contributions.authors_str(max_authors)}" for f in files]


def render_percentage_tree(
    files: Iterable[FileContribution],
    identities: Iterable[str],
    reverse: bool = False,
    include_all: bool = False,
    max_depth: Optional[int] = None,
) -> list[str]:
    """Tree of directories and files with the share written by ``identities``.

    Siblings are ordered by share. Nodes the identities never touched are
    hidden unless ``include_all`` is set.
    """
    identities = set(identities)
    root = build_tree(files)

    def label(node: TreeNode) -> str:
        return f"{node.name} - {node.ratio_by(identities) * 100:.1f}%"

    def children(node: TreeNode) -> list[TreeNode]:
        nodes = node.child_nodes(lambda n: n.ratio_by(identities), reverse)
        if include_all:
            return nodes
        return [n for n in nodes if n.contributions.lines_by(identities) > 0]

    return _draw(root, label, children, max_depth)


def render_authors_tree(
    files: Iterable[FileContribution],
    max_authors: int,
    max_depth: Optional[int] = None,
) -> list[str]:
    """Tree of directories and files with their top authors, in name order."""
    root = build_tree(files)
    return _draw(
        root,
        lambda node: f"{node.name} - {node.contributions.authors_str(max_authors)}",
        lambda node: node.child_nodes(),
        max_depth,
    )


def _draw(root, label, children, max_depth: Optional[int]) -> list[str]:
    lines: list[str] = []

    def visit(node: TreeNode, head: str, prefix: str, depth: int) -> None:
        lines.append(f"{head}{label(node)}")
        if max_depth is not None and depth >= max_depth:
            return
        kids = children(node)
        for i, child in enumerate(kids):
            last = i == len(kids) - 1
            visit(
                child,
                prefix + ("└── " if last else "├── "),
                prefix + ("    " if last else "│   "),
                depth + 1,
            )

    visit(root, "", "", 0)
    return lines


def render_report(result: InspectionResult, config: InspectConfig) -> list[str]:
    """Render ``result`` the way ``config`` asks for."""
    if not result.files:
        return []
    if config.flat:
        if config.show_authors:
            return render_flat_authors(result.files, config.max_authors)
        return render_flat_percentages(
            result.files, result.identities, config.reverse, config.all
        )
    if config.show_authors:
        return render_authors_tree(result.files, config.max_authors, config.max_depth)
    return render_percentage_tree(
        result.files, result.identities, config.reverse, config.all, config.max_depth
    )
