# kd_tree.py
"""KdTree - incremental 2D point index for nearest and radius queries."""

from __future__ import annotations

import math
from numbers import Integral
from typing import Any, Iterator, Sequence

from ._common import ORIGIN, Point, _is_np_array, as_point, validate_radius
from ._insert_result import InsertResult
from ._logging import logger
from ._node import KdTreeNode

_Tags = tuple[int, int]


def _validate_tags(tags: Any) -> _Tags:
    """
    Validate one (tag_a, tag_b) pair.

    Raises:
        ValueError: If tags is not a pair of integers.
    """
    try:
        tag_a, tag_b = tags
    except (TypeError, ValueError):
        raise ValueError(f"tags must be a (tag_a, tag_b) pair, got {tags!r}") from None
    if not isinstance(tag_a, Integral) or not isinstance(tag_b, Integral):
        raise ValueError(f"tags must be integers, got {tags!r}")
    return (int(tag_a), int(tag_b))


class KdTree:
    """
    Incremental 2D k-d tree over (x, y, z) points.

    Points are added one at a time and never removed or rebalanced, so the
    insertion order fully determines the tree shape. The splitting axis
    alternates with depth: x at even depths, y at odd depths. Points that tie
    on the splitting coordinate go left. The z coordinate is stored but never
    compared.

    The root always exists. Constructed without a seed, the tree holds a
    placeholder root at the origin which is returned by queries like any other
    node. Seed the tree with a real starting point when that matters.

    Performance characteristics:
        Inserts: average O(log n), O(n) on sorted input
        Nearest neighbor: average O(log n)
        Radius queries: average O(log n + k) where k is matches returned

    Thread-safety:
        Instances are not thread-safe. Use external synchronization if you
        insert into the same tree from multiple threads.

    Args:
        seed: Root point as (x, y) or (x, y, z). Defaults to the origin.
        tag_a: First integer tag for the root node.
        tag_b: Second integer tag for the root node.

    Raises:
        ValueError: If the seed has a non-finite coordinate or wrong length.

    Example:
        ```python
        tree = KdTree((0.0, 0.0))
        node = tree.insert((1.0, 1.0), tag_a=3, tag_b=7)
        nearest = tree.nearest((0.9, 1.2))
        near = tree.range_query((0.0, 0.0), radius=2.0)
        ```
    """

    __slots__ = ("_nodes", "_pristine", "_root", "_warned_pristine")

    def __init__(self, seed: Any = None, tag_a: int = 0, tag_b: int = 0):
        self._pristine = seed is None
        point = ORIGIN if seed is None else as_point(seed)
        self._root = KdTreeNode(0, point, tag_a, tag_b)
        self._nodes: list[KdTreeNode] = [self._root]
        self._warned_pristine = False
        logger.debug(
            "created tree with %s root at %r",
            "placeholder" if self._pristine else "seeded",
            point,
        )

    # ---- Insertion ----

    def insert(self, point: Any, tag_a: int = 0, tag_b: int = 0) -> KdTreeNode:
        """
        Insert a single point as a new leaf.

        Duplicate coordinates are allowed and always create a new node.

        Args:
            point: Point as (x, y) or (x, y, z).
            tag_a: Optional caller-owned integer tag.
            tag_b: Optional caller-owned integer tag.

        Returns:
            The newly created node.

        Raises:
            TypeError: If a coordinate is not a real number.
            ValueError: If the point has a non-finite coordinate or wrong length.
        """
        return self._attach(as_point(point), tag_a, tag_b)

    def insert_many(
        self, points: Any, tags: Sequence[_Tags] | None = None
    ) -> InsertResult:
        """
        Bulk insert points in order with contiguous IDs.

        All points and tags are validated before the first node is attached,
        so bad input leaves the tree unchanged.

        Args:
            points: List of points, or a NumPy array of shape (N, 2) or (N, 3).
            tags: Optional list of (tag_a, tag_b) pairs aligned with points.

        Returns:
            InsertResult with count, start_id, end_id and the created nodes.

        Raises:
            ValueError: If any point is invalid, the array has the wrong shape,
                tags length doesn't match, or a tag pair is malformed.
        """
        if _is_np_array(points):
            if points.size == 0:
                points = []
            elif points.ndim != 2 or points.shape[1] not in (2, 3):
                raise ValueError(
                    f"point array must have shape (N, 2) or (N, 3), got {points.shape}"
                )
            else:
                points = points.tolist()

        start_id = len(self._nodes)
        if len(points) == 0:
            return InsertResult(count=0, start_id=start_id, end_id=start_id - 1)

        if tags is not None and len(tags) != len(points):
            raise ValueError(
                f"tags length {len(tags)} does not match points length {len(points)}"
            )

        validated = [as_point(p) for p in points]
        if tags is None:
            pairs = [(0, 0)] * len(validated)
        else:
            pairs = [_validate_tags(t) for t in tags]
        nodes = [self._attach(p, a, b) for p, (a, b) in zip(validated, pairs)]

        logger.debug("bulk inserted %d points, %d stored", len(nodes), len(self._nodes))
        return InsertResult(
            count=len(nodes), start_id=start_id, end_id=nodes[-1].id_, nodes=nodes
        )

    def _attach(self, point: Point, tag_a: int, tag_b: int) -> KdTreeNode:
        node = self._root
        while True:
            axis = node.depth & 1
            if point[axis] <= node.point[axis]:
                if node.left is None:
                    node.left = child = self._new_node(point, tag_a, tag_b, node)
                    return child
                node = node.left
            else:
                if node.right is None:
                    node.right = child = self._new_node(point, tag_a, tag_b, node)
                    return child
                node = node.right

    def _new_node(
        self, point: Point, tag_a: int, tag_b: int, parent: KdTreeNode
    ) -> KdTreeNode:
        node = KdTreeNode(len(self._nodes), point, tag_a, tag_b, parent)
        self._nodes.append(node)
        self._pristine = False
        return node

    # ---- Queries ----

    def nearest(self, target: Any) -> KdTreeNode:
        """
        Return the stored node closest to target in the x-y plane.

        Equidistant nodes resolve to the one inserted first.

        Args:
            target: Query point as (x, y) or (x, y, z).

        Returns:
            The nearest node. Never None, since the root always exists.

        Example:
            ```python
            node = tree.nearest((15.0, 15.0))
            print(f"Nearest: {node.id_} at ({node.x}, {node.y})")
            ```
        """
        return self.nearest_with_distance2(target)[0]

    def nearest_with_distance2(self, target: Any) -> tuple[KdTreeNode, float]:
        """
        Return the nearest node together with its squared distance to target.

        Args:
            target: Query point as (x, y) or (x, y, z).

        Returns:
            Tuple of (node, squared distance).
        """
        t = as_point(target)
        self._warn_if_pristine()

        # Root has the lowest id, so holding it before it is visited
        # cannot change which tied node wins.
        best = self._root
        best_d2 = math.inf
        # (node, near side already explored)
        stack: list[tuple[KdTreeNode, bool]] = [(self._root, False)]
        while stack:
            node, near_done = stack.pop()
            axis = node.depth & 1
            diff = t[axis] - node.point[axis]
            if diff <= 0:
                near, far = node.left, node.right
            else:
                near, far = node.right, node.left

            if not near_done:
                stack.append((node, True))
                if near is not None:
                    stack.append((near, False))
                continue

            d2 = node.distance2(t)
            if d2 < best_d2 or (d2 == best_d2 and node.id_ < best.id_):
                best, best_d2 = node, d2

            # Nodes across the split line are at least diff**2 away. Equality
            # still has to be explored so ties resolve to the earliest node.
            if far is not None and best_d2 >= diff * diff:
                stack.append((far, False))

        return best, best_d2

    def range_query(self, target: Any, radius: float) -> list[KdTreeNode]:
        """
        Return all nodes strictly closer than radius to target.

        A node at exactly radius is excluded.

        Args:
            target: Query point as (x, y) or (x, y, z).
            radius: Search radius. math.inf matches every node.

        Returns:
            List of nodes in traversal order.

        Raises:
            ValueError: If radius is negative or NaN, or target is invalid.

        Example:
            ```python
            for node in tree.range_query((10.0, 10.0), 2.5):
                print(f"Found node {node.id_} at ({node.x}, {node.y})")
            ```
        """
        t = as_point(target)
        r = validate_radius(radius)
        r2 = r * r
        self._warn_if_pristine()

        found: list[KdTreeNode] = []
        stack = [self._root]
        while stack:
            node = stack.pop()
            if node.distance2(t) < r2:
                found.append(node)

            axis = node.depth & 1
            diff = t[axis] - node.point[axis]
            if diff <= 0:
                near, far = node.left, node.right
            else:
                near, far = node.right, node.left

            # Pushed first so the near subtree is visited first.
            if far is not None and r2 > diff * diff:
                stack.append(far)
            if near is not None:
                stack.append(near)
        return found

    def range_query_np(self, target: Any, radius: float) -> Any:
        """
        Return the points within radius of target as a NumPy array.

        Args:
            target: Query point as (x, y) or (x, y, z).
            radius: Search radius.

        Returns:
            NDArray[np.float64] with shape (N, 3).

        Raises:
            ImportError: If NumPy is not installed.
        """
        import numpy as np

        hits = self.range_query(target, radius)
        return np.array([n.point for n in hits], dtype=np.float64).reshape(-1, 3)

    def _warn_if_pristine(self) -> None:
        if self._pristine and not self._warned_pristine:
            self._warned_pristine = True
            logger.warning(
                "querying an unseeded tree; the origin placeholder root is "
                "returned as a stored point"
            )

    # ---- Utilities ----

    @property
    def root(self) -> KdTreeNode:
        return self._root

    @property
    def is_pristine(self) -> bool:
        """True while the tree holds only the default origin placeholder."""
        return self._pristine

    def get(self, id_: int) -> KdTreeNode:
        """
        Return the node with the given insertion ID.

        Raises:
            KeyError: If no node has that ID.
        """
        if not 0 <= id_ < len(self._nodes):
            raise KeyError(id_)
        return self._nodes[id_]

    def height(self) -> int:
        """Return the depth of the deepest node (0 for a root-only tree)."""
        return max(node.depth for node in self._nodes)

    def __len__(self) -> int:
        """Return the number of nodes, root included."""
        return len(self._nodes)

    def __iter__(self) -> Iterator[KdTreeNode]:
        """Iterate over all nodes in insertion order."""
        return iter(self._nodes)

    def __contains__(self, point: Any) -> bool:
        """
        Check if any node sits exactly at the given x-y coordinates.

        Example:
            ```python
            tree.insert((10.0, 20.0))
            assert (10.0, 20.0) in tree
            assert (5.0, 5.0) not in tree
            ```
        """
        return self.nearest_with_distance2(point)[1] == 0.0
