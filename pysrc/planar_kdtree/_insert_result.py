"""InsertResult dataclass for bulk insertion."""

from __future__ import annotations

from dataclasses import dataclass, field

from ._node import KdTreeNode


@dataclass
class InsertResult:
    """
    Result from bulk insertion operations.

    Attributes:
        count: Number of points inserted.
        start_id: First node ID in the contiguous range.
        end_id: Last node ID in the contiguous range (inclusive).
        nodes: The created nodes, in insertion order.
    """

    count: int
    start_id: int
    end_id: int
    nodes: list[KdTreeNode] = field(default_factory=list, repr=False)

    @property
    def ids(self) -> range:
        """Return a range of all IDs inserted."""
        return range(self.start_id, self.end_id + 1)
