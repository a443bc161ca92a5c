"""
_utils.py
=========
General-purpose utility functions for trirange.

These are standalone functions that don't depend on the main classes
and could be useful in multiple contexts.
"""

import math
from typing import Any


def binomial_coefficient(n: int, k: int) -> float:
    """
    Number of ways to choose *k* items from *n*, as a float.

    Parameters
    ----------
    n, k : int
        Integers with ``k >= 0``.

    Returns
    -------
    float
        ``C(n, k)``; 0.0 when ``n < k`` (including negative *n*).

    Raises
    ------
    ValueError
        If *k* is negative.

    Examples
    --------
    >>> binomial_coefficient(4, 2)
    6.0

    >>> binomial_coefficient(1, 2)
    0.0

    >>> binomial_coefficient(-1, 2)
    0.0
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    if n < k:
        return 0.0
    return float(math.comb(n, k))


def validate_node_triple(nodes: Any) -> bool:
    """
    Validate that a node-triple specification is well-formed.

    A valid triple must:
    1. Be a tuple or list
    2. Have exactly 3 elements

    Repeated nodes are valid: ``(a, a, b)`` and ``(a, a, a)`` are the
    degenerate triples the tuple counting accounts for.

    Examples
    --------
    >>> validate_node_triple((0, 1, 2))
    True

    >>> validate_node_triple([4, 4, 4])
    True

    >>> validate_node_triple((0, 1))
    False
    """
    if not isinstance(nodes, (tuple, list)):
        return False
    return len(nodes) == 3
