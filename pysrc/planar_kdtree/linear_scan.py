# linear_scan.py
"""LinearScanIndex - brute-force reference queries over a KdTree."""

from __future__ import annotations

import math
from collections import deque
from typing import Any, Iterator

from ._common import as_point, validate_radius
from ._node import KdTreeNode
from .kd_tree import KdTree


class LinearScanIndex:
    """
    Answers the KdTree queries by visiting every node, without pruning.

    Intended as a correctness oracle in tests and benchmarks. Every query is
    O(n); never put this on a latency-sensitive path.

    Args:
        tree: The tree whose nodes are scanned. Later inserts into the tree
            are seen by subsequent queries.
    """

    __slots__ = ("_tree",)

    def __init__(self, tree: KdTree):
        self._tree = tree

    def iter_bfs(self) -> Iterator[KdTreeNode]:
        """Yield every node breadth-first from the root."""
        queue = deque([self._tree.root])
        while queue:
            node = queue.popleft()
            yield node
            if node.left is not None:
                queue.append(node.left)
            if node.right is not None:
                queue.append(node.right)

    def nearest_linear(self, target: Any) -> KdTreeNode:
        """
        Return the node closest to target, scanning every node.

        Equidistant nodes resolve to the one inserted first, matching
        KdTree.nearest.
        """
        t = as_point(target)
        best = self._tree.root
        best_d2 = math.inf
        for node in self.iter_bfs():
            d2 = node.distance2(t)
            if d2 < best_d2 or (d2 == best_d2 and node.id_ < best.id_):
                best, best_d2 = node, d2
        return best

    def range_linear(self, target: Any, radius: float) -> list[KdTreeNode]:
        """Return all nodes strictly closer than radius to target, in BFS order."""
        t = as_point(target)
        r = validate_radius(radius)
        r2 = r * r
        return [node for node in self.iter_bfs() if node.distance2(t) < r2]
