"""
_cpu_kernels.py
===============
Numba-compiled geometry kernels for bounding boxes and squared distances.

This module contains ONLY numba-accelerated code and should not import other
project modules to avoid import-time complications.  Every kernel keeps its
uncompiled body reachable as ``kernel.py_func``; the 'python' backend runs
that instead of the JIT dispatcher.

Exported Functions
------------------
_hrect_range_distance_sq_nb : njit function
    Squared-distance bracket between two axis-aligned boxes.

_distance_sq_nb : njit function
    Squared Minkowski distance between two points.

_node_bounds_nb : njit function
    Parallel bounding-box computation for every node of a kd-tree.

Notes
-----
- Kernels accept only numpy arrays and plain scalars, never project objects.
- cache=True persists compiled binary to disk for faster subsequent runs.
"""

import numpy as np
from numba import njit, prange


# ======================================================================== #
# CPU Kernels                                                               #
# ======================================================================== #


@njit(cache=True)
def _hrect_range_distance_sq_nb(lo_a, hi_a, lo_b, hi_b, power):
    """
    Tightest (lo, hi) bracket on the squared L_power distance between any
    point of box A and any point of box B.

    Per dimension, the smallest gap is the separation of the two intervals
    (0 when they overlap) and the largest gap is the span from the near end
    of one interval to the far end of the other.

    Parameters
    ----------
    lo_a, hi_a : float64[:]
        Corners of box A.
    lo_b, hi_b : float64[:]
        Corners of box B.
    power : int
        Order of the Minkowski metric (>= 1).

    Returns
    -------
    (float, float)
        Squared-distance bracket (lo, hi).
    """
    sum_lo = 0.0
    sum_hi = 0.0
    for d in range(lo_a.shape[0]):
        v1 = lo_b[d] - hi_a[d]
        v2 = lo_a[d] - hi_b[d]
        if v1 >= v2:
            v_hi = -v2
            v_lo = v1 if v1 > 0.0 else 0.0
        else:
            v_hi = -v1
            v_lo = v2 if v2 > 0.0 else 0.0
        if power == 2:
            sum_lo += v_lo * v_lo
            sum_hi += v_hi * v_hi
        else:
            sum_lo += v_lo ** power
            sum_hi += v_hi ** power

    if power == 2:
        return sum_lo, sum_hi
    exponent = 2.0 / power
    return sum_lo ** exponent, sum_hi ** exponent


@njit(cache=True)
def _distance_sq_nb(x, y, power):
    """Squared L_power distance between points *x* and *y*."""
    total = 0.0
    for d in range(x.shape[0]):
        diff = abs(x[d] - y[d])
        if power == 2:
            total += diff * diff
        else:
            total += diff ** power
    if power == 2:
        return total
    return total ** (2.0 / power)


@njit(parallel=True, cache=True)
def _node_bounds_nb(points, node_begin, node_count, bound_lo, bound_hi):
    """
    Fill ``bound_lo``/``bound_hi`` with the bounding box of every node.

    Parameters
    ----------
    points     : float64[n_points, n_dims]
        Points in tree order (each node owns a contiguous slice).
    node_begin : int64[n_nodes]
        First row of each node's slice.
    node_count : int64[n_nodes]
        Length of each node's slice (>= 1).
    bound_lo, bound_hi : float64[n_nodes, n_dims]
        Output arrays, overwritten.
    """
    n_nodes = node_begin.shape[0]
    n_dims = points.shape[1]
    for node in prange(n_nodes):
        begin = node_begin[node]
        end = begin + node_count[node]
        for d in range(n_dims):
            lo = np.inf
            hi = -np.inf
            for i in range(begin, end):
                v = points[i, d]
                if v < lo:
                    lo = v
                if v > hi:
                    hi = v
            bound_lo[node, d] = lo
            bound_hi[node, d] = hi
