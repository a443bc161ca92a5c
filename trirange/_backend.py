"""
_backend.py
===========
Backend detection and selection for trirange.

This module detects available execution backends (pure Python, numba JIT)
and provides functions to query and select the best backend.

Functions in this module have NO side effects - they only query system state.
Logging is done by the calling code, not here.
"""

from typing import Callable, List, Tuple, Optional


# ============================================================================ #
# Backend Detection (No Side Effects)
# ============================================================================ #


def check_numba_available() -> bool:
    """
    Check if numba is importable for JIT-compiled kernels.

    Returns
    -------
    bool
        True if numba can be imported, False otherwise.
    """
    try:
        import numba

        return True
    except ImportError:
        return False


def get_available_backends() -> List[str]:
    """
    Get list of available execution backends.

    Returns
    -------
    list[str]
        List of available backends in preference order.
        Always includes 'python'.
        Includes 'numba' if numba is available.

    Examples
    --------
    >>> get_available_backends()
    ['python', 'numba']
    """
    backends = ["python"]  # Always available

    if check_numba_available():
        backends.append("numba")

    return backends


def get_best_backend() -> str:
    """
    Get the most optimized available backend.

    Returns
    -------
    str
        'numba' if available, otherwise 'python'.
    """
    backends = get_available_backends()
    # List is in preference order, last is best
    return backends[-1]


def resolve_backend(backend: str, available: Optional[List[str]] = None) -> str:
    """
    Resolve a backend specification to an actual backend.

    Parameters
    ----------
    backend : str
        Backend specification:
        - 'best': Use the best available backend
        - 'python', 'numba': Use specific backend
    available : list[str], optional
        Precomputed result of ``get_available_backends()``.  Hot callers pass
        this to skip the import probe.

    Returns
    -------
    str
        Resolved backend name.

    Raises
    ------
    ValueError
        If requested backend is not available.

    Examples
    --------
    >>> resolve_backend('best')
    'numba'

    >>> resolve_backend('python')
    'python'

    >>> resolve_backend('cuda')
    ValueError
    """
    if available is None:
        available = get_available_backends()

    if backend == "best":
        return available[-1]

    if backend not in available:
        raise ValueError(
            f"Backend '{backend}' not available. "
            f"Available backends: {', '.join(available)}"
        )

    return backend


def select_kernel(kernel: Callable, backend: str) -> Callable:
    """
    Return the callable that runs *kernel* on the resolved *backend*.

    ``'numba'`` returns the JIT dispatcher itself; ``'python'`` returns the
    original, uncompiled function (``kernel.py_func``), which is useful for
    debugging and for cross-checking the compiled code.

    Parameters
    ----------
    kernel : numba dispatcher
        A function decorated with ``numba.njit``.
    backend : str
        A resolved backend name ('python' or 'numba').

    Returns
    -------
    callable
    """
    if backend == "python":
        return kernel.py_func
    return kernel


# ============================================================================ #
# Kernel Import Helpers
# ============================================================================ #


def import_cpu_kernels() -> Tuple[
    bool, Optional[object], Optional[object], Optional[object]
]:
    """
    Try to import CPU kernels from _cpu_kernels module.

    Returns
    -------
    tuple
        (success, range_kernel, distance_kernel, bounds_kernel)
        - success: Whether import succeeded
        - range_kernel: _hrect_range_distance_sq_nb function or None
        - distance_kernel: _distance_sq_nb function or None
        - bounds_kernel: _node_bounds_nb function or None
    """
    try:
        from trirange._cpu_kernels import (
            _hrect_range_distance_sq_nb,
            _distance_sq_nb,
            _node_bounds_nb,
        )

        return (True, _hrect_range_distance_sq_nb, _distance_sq_nb, _node_bounds_nb)
    except ImportError:
        return (False, None, None, None)


# ============================================================================ #
# Module-Level State Query (Read-Only)
# ============================================================================ #


def get_backend_info() -> dict:
    """
    Get comprehensive backend information.

    Returns
    -------
    dict
        Dictionary with keys:
        - 'numba_available': bool
        - 'numba_version': str or None
        - 'backends': list[str]
        - 'best_backend': str
        - 'cpu_kernels_available': bool

    Examples
    --------
    >>> info = get_backend_info()
    >>> info['best_backend']
    'numba'
    >>> info['backends']
    ['python', 'numba']
    """
    numba_available = check_numba_available()
    numba_version = None
    if numba_available:
        import numba

        numba_version = numba.__version__

    cpu_kernels_ok, _, _, _ = import_cpu_kernels()

    return {
        "numba_available": numba_available,
        "numba_version": numba_version,
        "backends": get_available_backends(),
        "best_backend": get_best_backend(),
        "cpu_kernels_available": cpu_kernels_ok,
    }
