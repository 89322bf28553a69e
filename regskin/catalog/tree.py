"""Path-segmented index over repository names.

``team/app`` and ``team/tools/lint`` become::

    <root>
    └── team
        ├── app
        └── tools
            └── lint

Any node may be both a directory and a repository. The index is built once
per catalog refresh and never patched afterwards.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional


def split_path(path: str) -> List[str]:
    """Segments of a slash-delimited path, empty segments dropped."""
    return [segment for segment in path.split("/") if segment]


@dataclass
class PathNode:
    """One path segment and its children."""

    children: Dict[str, "PathNode"] = field(default_factory=dict)

    def child(self, name: str) -> Optional["PathNode"]:
        return self.children.get(name)

    def child_names(self) -> List[str]:
        """Immediate child segment names in lexicographic order."""
        return sorted(self.children)


class PathIndex:
    """Trie of repository names supporting prefix lookups."""

    def __init__(self):
        self.root = PathNode()

    @classmethod
    def from_paths(cls, paths: Iterable[str]) -> "PathIndex":
        index = cls()
        for path in paths:
            index.insert(path)
        return index

    def insert(self, path: str):
        """Add a path, creating intermediate nodes. Idempotent."""
        node = self.root
        for segment in split_path(path):
            node = node.children.setdefault(segment, PathNode())

    def lookup(self, path: str) -> Optional[PathNode]:
        """Node reached by walking the path, or None if a segment is missing.

        The empty path (or "/") resolves to the root.
        """
        node = self.root
        for segment in split_path(path):
            node = node.child(segment)
            if node is None:
                return None
        return node

    def child_names(self, node: PathNode) -> List[str]:
        return node.child_names()
