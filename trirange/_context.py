"""
_context.py
===========
Context managers for trirange.

Provides context managers for temporarily changing state:
- Logging control (suppress/change levels)
- Warning control (suppress specific warnings)
- Backend selection (force specific backend)

All context managers restore state on exit, even if exceptions occur.
"""

import logging
import warnings
from contextlib import contextmanager
from typing import Optional, Type


# Module-level state for backend override
_backend_override = None


# ============================================================================ #
# Logging Context Managers
# ============================================================================ #


@contextmanager
def suppress_logger(logger_name: str, level: int = logging.CRITICAL):
    """
    Temporarily change a logger's level.

    Parameters
    ----------
    logger_name : str
        Name of the logger to suppress (e.g., 'trirange._table')
    level : int, default logging.CRITICAL
        Temporary logging level.

    Yields
    ------
    None
        Control is yielded back to the with-block.

    Examples
    --------
    >>> # Silence kd-tree construction messages
    >>> with suppress_logger('trirange._table'):
    ...     table = Table(points)

    >>> # Keep only warnings
    >>> with suppress_logger('trirange._table', logging.WARNING):
    ...     table = Table(points)
    """
    logger = logging.getLogger(logger_name)
    original_level = logger.level

    try:
        logger.setLevel(level)
        yield
    finally:
        logger.setLevel(original_level)


@contextmanager
def quiet(level: int = logging.CRITICAL):
    """
    Temporarily suppress all trirange logging.

    Every module logger lives under the ``trirange`` namespace and inherits
    its effective level, so raising the package logger's level is enough.

    Parameters
    ----------
    level : int, default logging.CRITICAL
        Temporary logging level.

    Examples
    --------
    >>> with quiet():
    ...     table = Table(points)

    >>> with quiet(logging.WARNING):
    ...     table = Table(points)
    """
    with suppress_logger("trirange", level):
        yield


# ============================================================================ #
# Warning Context Managers
# ============================================================================ #


@contextmanager
def suppress_warnings(category: Optional[Type[Warning]] = None):
    """
    Temporarily suppress warnings.

    Parameters
    ----------
    category : Type[Warning] or None, default None
        Warning category to suppress. If None, suppresses all warnings.

    Examples
    --------
    >>> from numba.core.errors import NumbaPerformanceWarning
    >>> with suppress_warnings(NumbaPerformanceWarning):
    ...     table = Table(points)
    """
    with warnings.catch_warnings():
        if category is None:
            warnings.simplefilter("ignore")
        else:
            warnings.filterwarnings("ignore", category=category)
        yield


# ============================================================================ #
# Backend Context Managers
# ============================================================================ #


@contextmanager
def use_backend(backend: str):
    """
    Temporarily force a specific backend for metric and table kernels.

    Parameters
    ----------
    backend : str
        Backend to use. Valid options:
        - 'python': Uncompiled kernels (slow, easy to debug)
        - 'numba': JIT-compiled kernels
        - 'best': Use best available

    Raises
    ------
    ValueError
        If requested backend is not available.

    Examples
    --------
    >>> with use_backend('python'):
    ...     state = TripleRangeDistanceSq.from_nodes(metric, table, (0, 1, 2))

    Notes
    -----
    This context manager modifies module-level state and is NOT thread-safe.
    Pass ``backend=`` to ``LMetric``/``Table`` instead when threads are
    involved.
    """
    global _backend_override

    from ._backend import get_available_backends

    available = get_available_backends()

    if backend != "best" and backend not in available:
        raise ValueError(
            f"Backend '{backend}' not available. "
            f"Available backends: {', '.join(available)}"
        )

    original_override = _backend_override

    try:
        _backend_override = backend
        yield
    finally:
        _backend_override = original_override


def get_backend_override() -> Optional[str]:
    """
    Get the current backend override, if any.

    Returns
    -------
    str or None
        Current backend override, or None if no override active.

    Examples
    --------
    >>> get_backend_override()
    None

    >>> with use_backend('python'):
    ...     print(get_backend_override())
    python
    """
    return _backend_override


# ============================================================================ #
# Combined Context Managers
# ============================================================================ #


@contextmanager
def silent_benchmark(backend: str = "best"):
    """
    Suppress logging and warnings while forcing a specific backend.

    Examples
    --------
    >>> for backend in ['python', 'numba']:
    ...     with silent_benchmark(backend):
    ...         start = time.time()
    ...         table = Table(points)
    ...         print(f"{backend}: {time.time() - start:.3f}s")
    """
    with quiet():
        with use_backend(backend):
            with suppress_warnings():
                yield
