"""
_triple.py
==========
The unit of work of a triple-tree traversal: three tree nodes, the
squared-distance bracket between every pair of them, and the number of
valid point triples the node triple stands for.

Public API
----------
  TripleRangeDistanceSq()
      Empty state (all bounds 0, no nodes).  Populate with ``init``.

  TripleRangeDistanceSq.from_nodes(metric, table, nodes)
      Construct and ``init`` in one step.

  .init(metric, table, nodes)
  .replace_one_node(metric, table, new_node, node_index)
  .set_range_distance_sq(i, j, range_in)
  .range_distance_sq(i, j)  -> Range
  .num_tuples(i)            -> float
  .node(i)                  -> node handle
  .degeneracy()             -> Degeneracy
  .copy()

Collaborators
-------------
*metric* needs ``range_distance_sq(bound_a, bound_b) -> (lo, hi)``.
*table* needs ``get_node_bound(node)`` and ``get_node_count(node)``.
Node handles are compared with ``==``; two different nodes whose bounds
happen to coincide are still different nodes.

Self bounds
-----------
When two slots hold the same node, their bracket is the node's bound
against itself, so its lower end is 0.  That bracket is still a valid
pruning bound for pairs of distinct points inside the node; it is just not
tight.  The tuple counts, on the other hand, exclude pairing a point with
itself.  The two are kept separate: nothing here tightens the bound because
self pairs are not counted.

Concurrency
-----------
Instances are plain values with no locking.  A parallel traversal gives each
branch its own ``copy()`` before calling ``replace_one_node``.
"""

import enum
from typing import Any, Sequence, Tuple

import numpy as np

from trirange._metric import Range
from trirange._utils import binomial_coefficient, validate_node_triple


class Degeneracy(enum.Enum):
    """Which slots of a node triple hold the same node."""

    ALL_EQUAL = "n0 = n1 = n2"
    FIRST_PAIR_EQUAL = "n0 = n1 != n2"
    LAST_PAIR_EQUAL = "n0 != n1 = n2"
    ALL_DISTINCT = "n0 != n1 != n2"


class TripleRangeDistanceSq:
    """
    Pairwise squared-distance brackets and tuple counts for a node triple.

    Attributes
    ----------
    nodes           : tuple   The three node handles (read-only).
    min_distance_sq : float64[3, 3]   Symmetric lower bounds (read-only view).
    max_distance_sq : float64[3, 3]   Symmetric upper bounds (read-only view).
    """

    __slots__ = ("_nodes", "_min_distance_sq", "_max_distance_sq", "_num_tuples")

    def __init__(self) -> None:
        self._nodes = [None, None, None]
        self._min_distance_sq = np.zeros((3, 3), dtype=np.float64)
        self._max_distance_sq = np.zeros((3, 3), dtype=np.float64)
        self._num_tuples = [0.0, 0.0, 0.0]

    @classmethod
    def from_nodes(
        cls, metric: Any, table: Any, nodes: Sequence[Any]
    ) -> "TripleRangeDistanceSq":
        """Build a state for *nodes* (see ``init``)."""
        state = cls()
        state.init(metric, table, nodes)
        return state

    # ================================================================== #
    # Construction                                                         #
    # ================================================================== #

    def init(self, metric: Any, table: Any, nodes: Sequence[Any]) -> None:
        """
        Take the three *nodes* and compute every pairwise bracket and all
        tuple counts from scratch.

        Parameters
        ----------
        metric : object with ``range_distance_sq(bound_a, bound_b)``
        table  : object with ``get_node_bound`` and ``get_node_count``
        nodes  : sequence of exactly three node handles; repeats allowed.

        Raises
        ------
        ValueError
            If *nodes* does not hold exactly three handles.
        """
        if not validate_node_triple(nodes):
            raise ValueError(f"expected a tuple or list of 3 nodes, got {nodes!r}")

        self._nodes = list(nodes)
        bounds = [table.get_node_bound(n) for n in self._nodes]
        for j in range(3):
            for i in range(j + 1, 3):
                self.set_range_distance_sq(
                    i, j, metric.range_distance_sq(bounds[j], bounds[i])
                )

        self._compute_num_tuples(table)

    def replace_one_node(
        self, metric: Any, table: Any, new_node: Any, node_index: int
    ) -> None:
        """
        Swap the node in slot *node_index* for *new_node*.

        Only the two brackets touching *node_index* are recomputed; the
        bracket between the other two slots is kept as is.  Tuple counts are
        recomputed for every slot, since the swap can change which slots
        share a node.  The result equals ``init`` on the updated triple.

        Raises
        ------
        IndexError
            If *node_index* is not 0, 1 or 2.
        """
        node_index = self._check_slot(node_index)
        self._nodes[node_index] = new_node
        new_bound = table.get_node_bound(new_node)

        for step in (1, 2):
            existing = (node_index + step) % 3
            self.set_range_distance_sq(
                node_index,
                existing,
                metric.range_distance_sq(
                    new_bound, table.get_node_bound(self._nodes[existing])
                ),
            )

        self._compute_num_tuples(table)

    def copy(self) -> "TripleRangeDistanceSq":
        """
        Independent copy: same node handles, own bound matrices and counts.
        """
        other = TripleRangeDistanceSq()
        other._nodes = list(self._nodes)
        other._min_distance_sq = self._min_distance_sq.copy()
        other._max_distance_sq = self._max_distance_sq.copy()
        other._num_tuples = list(self._num_tuples)
        return other

    __copy__ = copy

    # ================================================================== #
    # Bounds                                                               #
    # ================================================================== #

    def set_range_distance_sq(self, i: int, j: int, range_in) -> None:
        """
        Store the bracket *range_in* = (lo, hi) for the pair (i, j) in both
        triangles of the bound matrices.

        Raises
        ------
        IndexError  if an index is not 0, 1 or 2.
        ValueError  if ``i == j`` or ``lo > hi``.
        """
        i, j = self._check_pair(i, j)
        lo, hi = range_in
        if lo > hi:
            raise ValueError(f"invalid bracket for pair ({i}, {j}): lo={lo} > hi={hi}")
        self._min_distance_sq[i, j] = lo
        self._min_distance_sq[j, i] = lo
        self._max_distance_sq[i, j] = hi
        self._max_distance_sq[j, i] = hi

    def range_distance_sq(self, i: int, j: int) -> Range:
        """Bracket on the squared distance between points of slots i and j."""
        i, j = self._check_pair(i, j)
        return Range(
            float(self._min_distance_sq[i, j]), float(self._max_distance_sq[i, j])
        )

    @property
    def min_distance_sq(self) -> np.ndarray:
        view = self._min_distance_sq.view()
        view.flags.writeable = False
        return view

    @property
    def max_distance_sq(self) -> np.ndarray:
        view = self._max_distance_sq.view()
        view.flags.writeable = False
        return view

    # ================================================================== #
    # Nodes and tuple counts                                               #
    # ================================================================== #

    @property
    def nodes(self) -> Tuple[Any, Any, Any]:
        return tuple(self._nodes)

    def node(self, node_index: int) -> Any:
        return self._nodes[self._check_slot(node_index)]

    def num_tuples(self, node_index: int) -> float:
        """
        Number of valid point tuples attributable to one point of the node in
        slot *node_index*, paired with points of the other two slots.
        """
        return self._num_tuples[self._check_slot(node_index)]

    def degeneracy(self) -> Degeneracy:
        n0, n1, n2 = self._nodes
        if n0 == n1:
            return Degeneracy.ALL_EQUAL if n1 == n2 else Degeneracy.FIRST_PAIR_EQUAL
        if n1 == n2:
            return Degeneracy.LAST_PAIR_EQUAL
        return Degeneracy.ALL_DISTINCT

    def _compute_num_tuples(self, table: Any) -> None:
        n0, n1, n2 = self._nodes
        pattern = self.degeneracy()

        if pattern is Degeneracy.ALL_EQUAL:
            # A fixed point plus an unordered pair of two other points.
            k = table.get_node_count(n0)
            self._num_tuples = [binomial_coefficient(k - 1, 2)] * 3

        elif pattern is Degeneracy.FIRST_PAIR_EQUAL:
            k = table.get_node_count(n0)
            m = table.get_node_count(n2)
            shared = float(max(k - 1, 0) * m)
            self._num_tuples = [shared, shared, binomial_coefficient(k, 2)]

        elif pattern is Degeneracy.LAST_PAIR_EQUAL:
            k = table.get_node_count(n1)
            m = table.get_node_count(n0)
            shared = float(max(k - 1, 0) * m)
            self._num_tuples = [binomial_coefficient(k, 2), shared, shared]

        else:
            c0 = table.get_node_count(n0)
            c1 = table.get_node_count(n1)
            c2 = table.get_node_count(n2)
            self._num_tuples = [float(c1 * c2), float(c0 * c2), float(c0 * c1)]

    # ================================================================== #
    # Private helpers                                                      #
    # ================================================================== #

    @staticmethod
    def _check_slot(node_index) -> int:
        if isinstance(node_index, (bool, np.bool_)) or not isinstance(
            node_index, (int, np.integer)
        ):
            raise IndexError(f"slot index must be an integer, got {node_index!r}")
        if not 0 <= node_index < 3:
            raise IndexError(f"slot index must be 0, 1 or 2, got {node_index}")
        return int(node_index)

    @staticmethod
    def _check_pair(i, j) -> Tuple[int, int]:
        i = TripleRangeDistanceSq._check_slot(i)
        j = TripleRangeDistanceSq._check_slot(j)
        if i == j:
            raise ValueError(f"a bracket needs two different slots, got ({i}, {j})")
        return i, j

    def __repr__(self) -> str:
        return (
            f"TripleRangeDistanceSq(nodes={self.nodes}, "
            f"num_tuples={tuple(self._num_tuples)})"
        )
