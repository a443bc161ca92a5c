"""
conftest.py
===========
Session-level pytest configuration for the test suite.

Custom marks
------------
large_scale
    Applied to exhaustive checks over every node triple of a tree large
    enough to take several seconds.  Excluded from quick runs with
    ``-m 'not large_scale'``.

Warning filters
---------------
NumbaPerformanceWarning messages are filtered out during tests.  Small test
inputs routinely trigger them and they say nothing about correctness.
"""

import pytest
import warnings


def pytest_configure(config):
    """
    Configure pytest before test collection begins.

    This runs before any test modules are imported, which matters for
    catching warnings from numba kernel compilation.
    """
    config.addinivalue_line(
        "markers",
        "large_scale: exhaustive check over every node triple of a larger tree "
        "(slow - deselect with -m 'not large_scale')",
    )

    from numba.core.errors import NumbaPerformanceWarning

    warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


def pytest_unconfigure(config):
    """Restore default warning behavior."""
    warnings.resetwarnings()
