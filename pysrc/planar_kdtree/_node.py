# _node.py
from __future__ import annotations

import weakref
from typing import Iterator, Optional, Sequence

from ._common import Point, distance2


class KdTreeNode:
    """
    A single stored point in a KdTree.

    Attributes:
        id_: Insertion sequence number. The root is 0.
        point: Stored (x, y, z) coordinates.
        tag_a: Caller-owned integer tag, never read by the index.
        tag_b: Caller-owned integer tag, never read by the index.
        depth: Depth in the tree. Fixes the splitting axis (x even, y odd).
        left: Child holding points with coord <= this node's on the split axis.
        right: Child holding points with coord > this node's on the split axis.

    Notes:
        - Children are owned by their parent. The parent link is a weak
          reference, so the tree holds no reference cycles and is released
          as a unit once the owning KdTree goes away.
        - Nodes are created by KdTree.insert only.
    """

    __slots__ = (
        "__weakref__",
        "_parent",
        "depth",
        "id_",
        "left",
        "point",
        "right",
        "tag_a",
        "tag_b",
    )

    def __init__(
        self,
        id_: int,
        point: Point,
        tag_a: int = 0,
        tag_b: int = 0,
        parent: KdTreeNode | None = None,
    ):
        self.id_ = id_
        self.point = point
        self.tag_a = tag_a
        self.tag_b = tag_b
        self.left: Optional[KdTreeNode] = None
        self.right: Optional[KdTreeNode] = None
        if parent is None:
            self._parent = None
            self.depth = 0
        else:
            self._parent = weakref.ref(parent)
            self.depth = parent.depth + 1

    @property
    def parent(self) -> KdTreeNode | None:
        """Node this one hangs from, or None for the root."""
        if self._parent is None:
            return None
        return self._parent()

    @property
    def x(self) -> float:
        return self.point[0]

    @property
    def y(self) -> float:
        return self.point[1]

    @property
    def z(self) -> float:
        return self.point[2]

    @property
    def axis(self) -> int:
        """Splitting axis at this node: 0 for x, 1 for y."""
        return self.depth & 1

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def distance2(self, target: Sequence[float]) -> float:
        """Squared x-y distance from this node's point to target."""
        return distance2(self.point, target)

    def ancestors(self) -> Iterator[KdTreeNode]:
        """Yield parent, grandparent, ... up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def __repr__(self) -> str:
        x, y, z = self.point
        return (
            f"KdTreeNode(id_={self.id_}, point=({x}, {y}, {z}), "
            f"tag_a={self.tag_a}, tag_b={self.tag_b}, depth={self.depth})"
        )
