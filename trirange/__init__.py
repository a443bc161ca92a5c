"""
trirange
========

Node-triple bound state for triple-tree N-body algorithms such as 3-point
correlation functions.

A triple-tree traversal descends three (possibly identical) subtrees of a
spatial tree together.  At every step it needs tight brackets on the squared
distance between each pair of the three current node regions, to decide
whether to prune, and the exact number of valid point triples the node
triple stands for, so that accumulated statistics are not mis-counted.
``TripleRangeDistanceSq`` supplies both.

Main Classes
------------
TripleRangeDistanceSq : Pairwise bounds and tuple counts for three nodes
Degeneracy : Which slots of a node triple share a node
Table : Point set with a kd-tree, node bounds and node counts
LMetric, EuclideanMetric : Minkowski metrics over bounding boxes
HRectBound : Axis-aligned bounding box
Range : Closed (lo, hi) interval

Context Managers
----------------
quiet : Suppress logging during operations
suppress_logger : Suppress specific logger
suppress_warnings : Suppress specific warnings
use_backend : Force specific computational backend
silent_benchmark : Combine quiet + backend selection + warning suppression

Utilities
---------
binomial_coefficient : C(n, k) as a float, 0 when n < k
validate_node_triple : Validate node-triple specification

Backend Information
-------------------
get_available_backends : Query available computational backends
get_backend_info : Get comprehensive backend status
check_numba_available : Check if numba is available

Examples
--------
Basic usage:

>>> import numpy as np
>>> from trirange import Table, EuclideanMetric, TripleRangeDistanceSq
>>> table = Table(np.random.default_rng(0).random((100, 3)), leaf_size=10)
>>> metric = EuclideanMetric()
>>> left, right = table.get_node_children(table.root)
>>> state = TripleRangeDistanceSq.from_nodes(metric, table, (left, left, right))
>>> state.range_distance_sq(0, 2)
Range(lo=..., hi=...)
>>> state.num_tuples(2)
1225.0

Descending one slot:

>>> child = state.copy()
>>> child.replace_one_node(metric, table, table.get_node_children(left)[0], 0)
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Main classes
from ._triple import TripleRangeDistanceSq, Degeneracy
from ._table import Table
from ._metric import LMetric, EuclideanMetric, Range
from ._bound import HRectBound

# Context managers (user-facing utilities)
from ._context import (
    suppress_logger,
    quiet,
    suppress_warnings,
    use_backend,
    silent_benchmark,
)

# Utilities
from ._utils import binomial_coefficient, validate_node_triple

# Backend information
from ._backend import (
    get_available_backends,
    get_backend_info,
    check_numba_available,
)

# Public API
__all__ = [
    # Main classes
    "TripleRangeDistanceSq",
    "Degeneracy",
    "Table",
    "LMetric",
    "EuclideanMetric",
    "Range",
    "HRectBound",
    # Context managers
    "suppress_logger",
    "quiet",
    "suppress_warnings",
    "use_backend",
    "silent_benchmark",
    # Utilities
    "binomial_coefficient",
    "validate_node_triple",
    # Backend information
    "get_available_backends",
    "get_backend_info",
    "check_numba_available",
    # Version info
    "__version__",
]
