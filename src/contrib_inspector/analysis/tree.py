"""Directory tree aggregation of per-file contributions."""

import math
from typing import Callable, Iterable, Iterator, Optional

from pydantic import BaseModel, Field

from contrib_inspector.models import Contributions, FileContribution


class TreeNode(BaseModel):
    """One path segment with the contributions of everything below it."""

    name: str
    contributions: Contributions = Field(default_factory=Contributions)
    children: dict[str, "TreeNode"] = Field(default_factory=dict)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def add(self, record: Contributions) -> None:
        self.contributions.merge(record.model_copy(deep=True))

    def child(self, name: str) -> "TreeNode":
        node = self.children.get(name)
        if node is None:
            node = TreeNode(name=name)
            self.children[name] = node
        return node

    def find(self, path: str) -> Optional["TreeNode"]:
        """Return the node at ``path`` (slash-separated), or None."""
        node = self
        for part in _segments(path):
            node = node.children.get(part)
            if node is None:
                return None
        return node

    def ratio_by(self, identities: Iterable[str]) -> float:
        return self.contributions.ratio_by(identities)

    def top_authors(self, n: int) -> list[tuple[str, float]]:
        return self.contributions.top_authors(n)

    def child_nodes(
        self,
        sort_key: Optional[Callable[["TreeNode"], float]] = None,
        reverse: bool = False,
    ) -> list["TreeNode"]:
        """Children by name, or by ``sort_key`` descending (ascending if ``reverse``)."""
        nodes = [self.children[k] for k in sorted(self.children)]
        if sort_key is None:
            return nodes

        def key(node: "TreeNode") -> float:
            value = sort_key(node)
            if math.isnan(value):
                return 0.0
            return value if reverse else -value

        return sorted(nodes, key=key)

    def walk(self, max_depth: Optional[int] = None, _depth: int = 0) -> Iterator[tuple[int, "TreeNode"]]:
        """Yield ``(depth, node)`` pre-order, stopping below ``max_depth``."""
        yield _depth, self
        if max_depth is not None and _depth >= max_depth:
            return
        for node in self.child_nodes():
            yield from node.walk(max_depth, _depth + 1)


TreeNode.model_rebuild()


def _segments(path: str) -> list[str]:
    return [p for p in path.split("/") if p and p != "."]


def build_tree(files: Iterable[FileContribution]) -> TreeNode:
    """Accumulate every file's record into the root and each of its ancestors."""
    root = TreeNode(name="/")
    for f in files:
        node = root
        node.add(f.contributions)
        for part in _segments(f.path):
            node = node.child(part)
            node.add(f.contributions)
    return root
