# _common.py
"""Common utilities and type aliases shared across the index implementations."""

from __future__ import annotations

import math
from collections.abc import Sequence
from numbers import Real
from typing import Any

# Type aliases
Point = tuple[float, float, float]
"""Point as (x, y, z). Only x and y are compared; z is carried along."""

ORIGIN: Point = (0.0, 0.0, 0.0)
"""Default seed for a tree constructed without an explicit starting point."""


def _is_np_array(x: Any) -> bool:
    """
    Check if x is a NumPy array without importing NumPy.

    This allows array handling without forcing NumPy as a hard dependency.

    Args:
        x: Object to check.

    Returns:
        True if x is a NumPy array.
    """
    mod = getattr(x.__class__, "__module__", "")
    return mod.startswith("numpy") and hasattr(x, "ndim") and hasattr(x, "shape")


def as_point(value: Any) -> Point:
    """
    Validate and normalize a caller-supplied point to a float triple.

    Accepts any sequence of two or three real numbers, including 1-D NumPy
    arrays. A missing z coordinate becomes 0.0.

    Args:
        value: Point as (x, y) or (x, y, z).

    Returns:
        Validated point as a tuple of three floats.

    Raises:
        TypeError: If a coordinate is not a real number.
        ValueError: If the point has the wrong length or a non-finite coordinate.
    """
    if _is_np_array(value):
        value = value.tolist()
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
        raise TypeError(f"point must be a sequence of 2 or 3 numbers, got {value!r}")
    if len(value) not in (2, 3):
        raise ValueError(
            f"point must have 2 or 3 coordinates (x, y[, z]), got {len(value)}"
        )
    for c in value:
        # bool is an int subclass but never a meaningful coordinate
        if not isinstance(c, Real) or isinstance(c, bool):
            raise TypeError(f"coordinate {c!r} in {value!r} is not a real number")

    x, y = float(value[0]), float(value[1])
    z = float(value[2]) if len(value) == 3 else 0.0
    if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(z)):
        raise ValueError(f"point {value!r} has a non-finite coordinate")
    return (x, y, z)


def validate_radius(radius: Any) -> float:
    """
    Validate a search radius.

    Infinity is allowed and matches every stored point.

    Raises:
        TypeError: If radius is not a real number.
        ValueError: If radius is negative or NaN.
    """
    if not isinstance(radius, Real) or isinstance(radius, bool):
        raise TypeError(f"radius must be a real number, got {radius!r}")
    radius = float(radius)
    if math.isnan(radius) or radius < 0.0:
        raise ValueError(f"radius must be a non-negative number, got {radius!r}")
    return radius


def distance2(a: Sequence[float], b: Sequence[float]) -> float:
    """Squared Euclidean distance in the x-y plane."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return dx * dx + dy * dy
