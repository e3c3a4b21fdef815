"""
NodePath: First-class type for plan tree navigation.

Locates a node inside a plan tree so that structural errors can say exactly
where the query plan and the candidate plan disagree.
"""

from __future__ import annotations

class NodePath:
    """
    Immutable path to a node in a plan tree.

    Format: ("Plan", "children[0]", "children[2]") means
    root → first child → third grandchild.

    Example:
        path = NodePath.root()           # ("Plan",)
        child = path.child(0)            # ("Plan", "children[0]")

        str(child)   # "Plan → children[0]"
    """

    __slots__ = ("_segments",)

    def __init__(self, segments: tuple[str, ...] | None = None) -> None:
        self._segments: tuple[str, ...] = segments or ("Plan",)

    @classmethod
    def root(cls) -> "NodePath":
        """Create a path pointing to the root node."""
        return cls(("Plan",))

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    def child(self, index: int) -> "NodePath":
        """Navigate to the child at ``index``."""
        return NodePath(self._segments + (f"children[{index}]",))

    def __str__(self) -> str:
        return " → ".join(self._segments)

    def __repr__(self) -> str:
        return f"NodePath({'.'.join(self._segments)})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, NodePath):
            return self._segments == other._segments
        return False

    def __hash__(self) -> int:
        return hash(self._segments)
