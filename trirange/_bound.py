"""
_bound.py
=========
Axis-aligned bounding boxes for kd-tree nodes.

A bound is opaque to the node-triple state: it is only ever handed to a
metric's ``range_distance_sq``.
"""

import numpy as np


class HRectBound:
    """
    Axis-aligned hyper-rectangle ``[lo[d], hi[d]]`` for every dimension d.

    Attributes
    ----------
    lo : float64[n_dims]   Lower corner.
    hi : float64[n_dims]   Upper corner.
    """

    __slots__ = ("lo", "hi")

    def __init__(self, lo, hi) -> None:
        lo = np.ascontiguousarray(lo, dtype=np.float64)
        hi = np.ascontiguousarray(hi, dtype=np.float64)
        if lo.ndim != 1 or lo.shape != hi.shape:
            raise ValueError(
                f"lo and hi must be 1-D arrays of equal length, "
                f"got shapes {lo.shape} and {hi.shape}"
            )
        if np.any(lo > hi):
            raise ValueError("lo must not exceed hi in any dimension")
        self.lo = lo
        self.hi = hi

    @classmethod
    def from_points(cls, points) -> "HRectBound":
        """Smallest box enclosing every row of *points*."""
        points = np.asarray(points, dtype=np.float64)
        if points.ndim != 2 or points.shape[0] == 0:
            raise ValueError("points must be a non-empty 2-D array")
        return cls(points.min(axis=0), points.max(axis=0))

    @property
    def dim(self) -> int:
        return int(self.lo.shape[0])

    def width(self) -> np.ndarray:
        """Extent of the box along each dimension."""
        return self.hi - self.lo

    def contains(self, point) -> bool:
        point = np.asarray(point, dtype=np.float64)
        return bool(np.all(point >= self.lo) and np.all(point <= self.hi))

    def __eq__(self, other) -> bool:
        if not isinstance(other, HRectBound):
            return NotImplemented
        return np.array_equal(self.lo, other.lo) and np.array_equal(self.hi, other.hi)

    __hash__ = None

    def __repr__(self) -> str:
        return f"HRectBound(lo={self.lo.tolist()}, hi={self.hi.tolist()})"
