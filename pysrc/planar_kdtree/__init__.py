"""planar_kdtree - Incremental 2D k-d tree for sampling-based planners."""

from ._common import Point
from ._insert_result import InsertResult
from ._logging import set_debug
from ._node import KdTreeNode
from .kd_tree import KdTree
from .linear_scan import LinearScanIndex

__all__ = [
    "InsertResult",
    "KdTree",
    "KdTreeNode",
    "LinearScanIndex",
    "Point",
    "set_debug",
]
