"""
_metric.py
==========
Minkowski metrics that bracket squared distances between bounding boxes.

Public API
----------
  Range(lo, hi)
      Closed interval of squared distances.

  LMetric(power=2, backend='best')
      .range_distance_sq(bound_a, bound_b) -> Range
      .distance_sq(x, y) -> float

  EuclideanMetric(backend='best')
      LMetric of order 2.

The metric is the capability that ``TripleRangeDistanceSq`` consumes: given
two node bounds it returns the tightest provable bracket on the squared
distance between any point of the first region and any point of the second.
"""

import math
from typing import NamedTuple

import numpy as np

from trirange._backend import get_available_backends, resolve_backend, select_kernel
from trirange._context import get_backend_override
from trirange._cpu_kernels import _hrect_range_distance_sq_nb, _distance_sq_nb

_BACKENDS_AVAILABLE = get_available_backends()


class Range(NamedTuple):
    """Closed interval ``[lo, hi]``."""

    lo: float
    hi: float

    @property
    def width(self) -> float:
        return self.hi - self.lo

    def __contains__(self, value) -> bool:
        return self.lo <= value <= self.hi


class LMetric:
    """
    Minkowski (L_p) metric of integer order *power*.

    Parameters
    ----------
    power : int, default 2
        Order of the metric (>= 1).
    backend : str, default 'best'
        Kernel backend: 'best', 'python' or 'numba'.  A backend set with
        ``use_backend()`` takes precedence while that context is active.

    Raises
    ------
    ValueError
        If *power* is not a positive integer or *backend* is unavailable.
    """

    def __init__(self, power: int = 2, backend: str = "best") -> None:
        if isinstance(power, bool) or not isinstance(power, (int, np.integer)):
            raise ValueError(f"power must be a positive integer, got {power!r}")
        if power < 1:
            raise ValueError(f"power must be a positive integer, got {power!r}")
        self.power = int(power)
        self.backend = resolve_backend(backend, _BACKENDS_AVAILABLE)

    def _resolved_backend(self) -> str:
        override = get_backend_override()
        if override is None:
            return self.backend
        return resolve_backend(override, _BACKENDS_AVAILABLE)

    def range_distance_sq(self, bound_a, bound_b) -> Range:
        """
        Bracket the squared distance between points of two bounds.

        Parameters
        ----------
        bound_a, bound_b : HRectBound
            Bounds of equal dimensionality.

        Returns
        -------
        Range
            ``(lo, hi)`` with ``0 <= lo <= hi``.  For a bound against itself
            ``lo`` is 0 and ``hi`` is the squared diagonal.

        Raises
        ------
        ValueError
            If the dimensions differ or a bound contains NaN.
        """
        if bound_a.dim != bound_b.dim:
            raise ValueError(
                f"bound dimensions differ: {bound_a.dim} != {bound_b.dim}"
            )
        kernel = select_kernel(_hrect_range_distance_sq_nb, self._resolved_backend())
        lo, hi = kernel(bound_a.lo, bound_a.hi, bound_b.lo, bound_b.hi, self.power)
        if math.isnan(lo) or math.isnan(hi):
            raise ValueError("bounds must not contain NaN")
        return Range(float(lo), float(hi))

    def distance_sq(self, x, y) -> float:
        """Squared distance between two points."""
        x = np.ascontiguousarray(x, dtype=np.float64)
        y = np.ascontiguousarray(y, dtype=np.float64)
        if x.shape != y.shape:
            raise ValueError(f"point shapes differ: {x.shape} != {y.shape}")
        kernel = select_kernel(_distance_sq_nb, self._resolved_backend())
        return float(kernel(x, y, self.power))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(power={self.power}, backend={self.backend!r})"


class EuclideanMetric(LMetric):
    """The L_2 metric."""

    def __init__(self, backend: str = "best") -> None:
        super().__init__(power=2, backend=backend)

    def __repr__(self) -> str:
        return f"EuclideanMetric(backend={self.backend!r})"
