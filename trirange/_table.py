"""
_table.py
=========
A point set together with a kd-tree over it, stored as parallel numpy
arrays.  Node handles are plain integer IDs into those arrays.

Public API
----------
  Table(points, leaf_size=20, backend='best')
      Constructor.  Copies the points, builds the kd-tree and the bounding
      box of every node.

  .get_node_bound(node)         -> HRectBound
  .get_node_count(node)         -> int
  .get_node_children(node)      -> tuple[int, ...]   (empty for leaves)
  .node_is_leaf(node)           -> bool
  .get_node_point_indices(node) -> int64 array of original row indices
  .iter_nodes()                 -> iterator over all node IDs
  .leaves()                     -> list of leaf node IDs

These are the capabilities ``TripleRangeDistanceSq`` relies on: a bound and
a point count per node, and node identity by handle equality.

Tree layout
-----------
Nodes are numbered in pre-order, so the root is always node 0 and a left
child always has a larger ID than its parent.  Every node owns the
contiguous slice ``points[node_begin[n] : node_begin[n] + node_count[n]]``
of the permuted point array; ``old_from_new`` maps a row of ``points`` back
to its row in the input.

Logging
-------
On first import this module logs system and numba status at INFO level and
routes NumbaPerformanceWarning through the ``trirange`` loggers.  Each
construction logs the tree shape and memory footprint.
"""

import logging
from typing import Iterator, List, Tuple

import numpy as np

from trirange._bound import HRectBound
from trirange._logging import (
    log_optimization_status,
    install_numba_warning_filter,
    log_backend_availability,
    log_table_statistics,
    log_oversized_leaves,
    compute_memory_footprint,
)
from trirange._backend import (
    check_numba_available,
    get_available_backends,
    resolve_backend,
    select_kernel,
)
from trirange._context import get_backend_override
from trirange._cpu_kernels import _node_bounds_nb

logger = logging.getLogger(__name__)

_NUMBA_AVAILABLE = check_numba_available()
_BACKENDS_AVAILABLE = get_available_backends()

# Log system info and backend availability on module import
log_optimization_status(_NUMBA_AVAILABLE)
log_backend_availability(_BACKENDS_AVAILABLE)
install_numba_warning_filter(_NUMBA_AVAILABLE)


class Table:
    """
    Points plus a kd-tree over them.

    Attributes (all read-only after construction)
    ----------------------------------------------
    n_points  : int   Number of points.
    n_dims    : int   Dimensionality.
    n_nodes   : int   Number of tree nodes.
    n_leaves  : int   Number of leaf nodes.
    root      : int   Node ID of the root (always 0).
    max_depth : int   Depth of the deepest node (root has depth 0).
    leaf_size : int   Requested maximum number of points per leaf.

    Arrays
    ------
    data         : float64[n_points, n_dims]  Points in input order.
    points       : float64[n_points, n_dims]  Points in tree order.
    old_from_new : int64  [n_points]          Input row of each tree-order row.
    node_begin   : int64  [n_nodes]           First tree-order row of a node.
    node_count   : int64  [n_nodes]           Number of points in a node.
    left_child   : int64  [n_nodes]           Left child ID; -1 for leaves.
    right_child  : int64  [n_nodes]           Right child ID; -1 for leaves.
    node_depth   : int64  [n_nodes]           Edge depth from the root.
    bound_lo     : float64[n_nodes, n_dims]   Lower corner of each node box.
    bound_hi     : float64[n_nodes, n_dims]   Upper corner of each node box.
    """

    # ================================================================== #
    # Construction                                                         #
    # ================================================================== #

    def __init__(self, points, leaf_size: int = 20, backend: str = "best") -> None:
        """
        Parameters
        ----------
        points : array_like, shape (n_points, n_dims)
            Point coordinates; at least one point and one dimension.
        leaf_size : int, default 20
            A node with more than *leaf_size* points is split in two.
        backend : str, default 'best'
            Backend for the bounding-box kernel ('best', 'python', 'numba').

        Raises
        ------
        ValueError
            On an empty or non-2-D point array, non-finite coordinates, a
            leaf_size below 1, or an unavailable backend.
        """
        data = np.array(points, dtype=np.float64)
        if data.ndim != 2:
            raise ValueError(f"points must be a 2-D array, got {data.ndim}-D")
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise ValueError(f"points must be non-empty, got shape {data.shape}")
        if not np.all(np.isfinite(data)):
            raise ValueError("points must be finite")
        if leaf_size < 1:
            raise ValueError(f"leaf_size must be >= 1, got {leaf_size}")

        override = get_backend_override()
        resolved_backend = resolve_backend(
            override if override is not None else backend, _BACKENDS_AVAILABLE
        )

        self.data = data
        self.leaf_size = int(leaf_size)
        self.n_points = int(data.shape[0])
        self.n_dims = int(data.shape[1])

        logger.info(
            "Building kd-tree over %d points in %d dims (leaf_size=%d)...",
            self.n_points,
            self.n_dims,
            self.leaf_size,
        )
        self._build_tree()
        self._build_bounds(resolved_backend)

        self.root: int = 0
        self.n_nodes: int = int(self.node_begin.shape[0])
        self.n_leaves: int = int(np.count_nonzero(self.left_child < 0))
        self.max_depth: int = int(np.max(self.node_depth))

        leaf_counts = self.node_count[self.left_child < 0]
        oversized = leaf_counts[leaf_counts > self.leaf_size]
        log_oversized_leaves(
            int(oversized.shape[0]),
            int(oversized.max()) if oversized.shape[0] else 0,
            self.leaf_size,
        )
        log_table_statistics(
            self.n_points,
            self.n_dims,
            self.n_nodes,
            self.n_leaves,
            self.max_depth,
            compute_memory_footprint(self),
        )

    def _build_tree(self) -> None:
        """
        Recursive median split on the dimension of largest spread.

        Populates old_from_new, points, node_begin, node_count, left_child,
        right_child and node_depth.
        """
        data = self.data
        leaf_size = self.leaf_size
        perm = np.arange(self.n_points, dtype=np.int64)
        begin: List[int] = []
        count: List[int] = []
        left: List[int] = []
        right: List[int] = []
        depth: List[int] = []

        def split(b: int, c: int, d: int) -> int:
            node = len(begin)
            begin.append(b)
            count.append(c)
            left.append(-1)
            right.append(-1)
            depth.append(d)
            if c <= leaf_size:
                return node

            idx = perm[b : b + c]
            sub = data[idx]
            spread = sub.max(axis=0) - sub.min(axis=0)
            dim = int(np.argmax(spread))
            if spread[dim] == 0.0:
                # All points identical: cannot be separated.
                return node

            half = c // 2
            order = np.argpartition(sub[:, dim], half)
            perm[b : b + c] = idx[order]
            left[node] = split(b, half, d + 1)
            right[node] = split(b + half, c - half, d + 1)
            return node

        split(0, self.n_points, 0)

        self.old_from_new = perm
        self.points = np.ascontiguousarray(data[perm])
        self.node_begin = np.asarray(begin, dtype=np.int64)
        self.node_count = np.asarray(count, dtype=np.int64)
        self.left_child = np.asarray(left, dtype=np.int64)
        self.right_child = np.asarray(right, dtype=np.int64)
        self.node_depth = np.asarray(depth, dtype=np.int64)

    def _build_bounds(self, backend: str) -> None:
        n_nodes = self.node_begin.shape[0]
        self.bound_lo = np.empty((n_nodes, self.n_dims), dtype=np.float64)
        self.bound_hi = np.empty((n_nodes, self.n_dims), dtype=np.float64)
        kernel = select_kernel(_node_bounds_nb, backend)
        kernel(
            self.points, self.node_begin, self.node_count, self.bound_lo, self.bound_hi
        )
        self._bounds = [
            HRectBound(self.bound_lo[n], self.bound_hi[n]) for n in range(n_nodes)
        ]

    # ================================================================== #
    # Node capabilities                                                    #
    # ================================================================== #

    def get_node_bound(self, node: int) -> HRectBound:
        """Bounding box of *node*."""
        return self._bounds[self._check_node(node)]

    def get_node_count(self, node: int) -> int:
        """Number of points owned by *node*."""
        return int(self.node_count[self._check_node(node)])

    def get_node_children(self, node: int) -> Tuple[int, ...]:
        """``(left, right)`` for an internal node, ``()`` for a leaf."""
        node = self._check_node(node)
        if self.left_child[node] < 0:
            return ()
        return int(self.left_child[node]), int(self.right_child[node])

    def node_is_leaf(self, node: int) -> bool:
        return bool(self.left_child[self._check_node(node)] < 0)

    def get_node_point_indices(self, node: int) -> np.ndarray:
        """
        Input row indices of the points owned by *node*.

        Parameters
        ----------
        node : int   Node ID.

        Returns
        -------
        int64 ndarray of length ``get_node_count(node)``.
        """
        node = self._check_node(node)
        b = int(self.node_begin[node])
        return self.old_from_new[b : b + int(self.node_count[node])].copy()

    def iter_nodes(self) -> Iterator[int]:
        return iter(range(self.n_nodes))

    def leaves(self) -> List[int]:
        return [int(n) for n in np.flatnonzero(self.left_child < 0)]

    # ================================================================== #
    # Private helpers                                                      #
    # ================================================================== #

    def _check_node(self, node) -> int:
        if isinstance(node, (bool, np.bool_)) or not isinstance(
            node, (int, np.integer)
        ):
            raise TypeError(f"node must be an integer ID, got {type(node).__name__}")
        node = int(node)
        if node < 0 or node >= self.node_begin.shape[0]:
            raise IndexError(
                f"node {node} out of range for a tree with "
                f"{self.node_begin.shape[0]} nodes"
            )
        return node

    def __repr__(self) -> str:
        return (
            f"Table(n_points={self.n_points}, n_dims={self.n_dims}, "
            f"n_nodes={self.n_nodes}, leaf_size={self.leaf_size})"
        )
