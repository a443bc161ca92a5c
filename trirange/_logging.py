"""
_logging.py
===========
Logging functions for trirange.

All functions in this module have NO side effects except logging. They take
computed data as parameters and format/emit log messages.

This separation ensures:
- Logging can be easily disabled/mocked in tests
- Computation is separate from presentation
"""

import logging
from typing import List, Any


logger = logging.getLogger(__name__)


# ============================================================================ #
# System and Backend Logging (called at module import time)
# ============================================================================ #


def log_optimization_status(numba_available: bool) -> None:
    """
    Log system capabilities and numba status at INFO level.

    Called once at module import time. Reports CPU count, memory, numba version,
    LLVM info, and threading configuration.

    Parameters
    ----------
    numba_available : bool
        Whether numba was successfully imported.
    """
    import os
    import platform

    cpu_count = os.cpu_count() or 1
    logger.info(
        f"System: {platform.machine()} ({platform.system()}), "
        f"{cpu_count} CPU cores, Python {platform.python_version()}"
    )

    # Memory info (optional psutil)
    try:
        import psutil

        mem = psutil.virtual_memory()
        logger.info(
            f"Memory: {mem.total / (1024**3):.1f} GB total, "
            f"{mem.available / (1024**3):.1f} GB available"
        )
    except ImportError:
        pass  # psutil not required

    if not numba_available:
        logger.warning("Numba not importable; only the 'python' backend is usable")
        return

    import numba

    logger.info(f"Numba {numba.__version__} loaded successfully")

    try:
        import llvmlite

        logger.info(f"LLVM backend: llvmlite {llvmlite.__version__}")
    except (ImportError, AttributeError):
        pass  # LLVM version unavailable

    try:
        num_threads = numba.get_num_threads()
        logger.info(f"Numba threading: {num_threads} threads configured")
    except Exception:
        pass  # Threading info unavailable in some configs


def install_numba_warning_filter(numba_available: bool) -> None:
    """
    Capture NumbaPerformanceWarning and route it through our logger.

    numba issues performance warnings (e.g., "parallel=True but no parallel
    transformation possible") via Python's warnings module. This filter
    intercepts them and logs them at WARNING level so they appear in the same
    stream as other trirange diagnostics.

    Parameters
    ----------
    numba_available : bool
        Whether numba was successfully imported.
    """
    import warnings

    if not numba_available:
        return

    try:
        from numba.core.errors import NumbaPerformanceWarning
    except ImportError:
        return  # NumbaPerformanceWarning not available in this numba version

    original_showwarning = warnings.showwarning

    def custom_showwarning(message, category, filename, lineno, file=None, line=None):
        if issubclass(category, NumbaPerformanceWarning):
            logger.warning(f"Numba performance issue: {message}")
            logger.warning(f"  at {filename}:{lineno}")
            return
        original_showwarning(message, category, filename, lineno, file, line)

    warnings.showwarning = custom_showwarning


def log_backend_availability(backends_available: List[str]) -> None:
    """
    Log which execution backends are available for geometry kernels.

    Parameters
    ----------
    backends_available : List[str]
        List of available backends (e.g., ['python', 'numba'])
    """
    logger.info(f"Available backends: {', '.join(backends_available)}")

    if "numba" in backends_available:
        logger.info("  numba: LLVM-compiled kernels (numba.njit, prange)")
    logger.info("  python: uncompiled reference kernels")

    best = backends_available[-1]  # Last in list is most optimized
    logger.info(f"Default backend='best' will use: {best}")


# ============================================================================ #
# Table Logging (called during construction)
# ============================================================================ #


def log_table_statistics(
    n_points: int,
    n_dims: int,
    n_nodes: int,
    n_leaves: int,
    max_depth: int,
    memory_bytes: int,
) -> None:
    """
    Log kd-tree shape and memory footprint.

    Parameters
    ----------
    n_points : int
        Number of points in the table.
    n_dims : int
        Dimensionality of the points.
    n_nodes : int
        Total number of tree nodes.
    n_leaves : int
        Number of leaf nodes.
    max_depth : int
        Depth of the deepest leaf (root has depth 0).
    memory_bytes : int
        Total memory footprint of the table arrays in bytes.
    """
    logger.info(
        "kd-tree built: %d points, %d dims, %d nodes (%d leaves), depth %d",
        n_points,
        n_dims,
        n_nodes,
        n_leaves,
        max_depth,
    )

    mem_mb = memory_bytes / (1024**2)
    if mem_mb >= 1024.0:
        logger.info("Table memory footprint: %.2f GB", mem_mb / 1024.0)
    else:
        logger.info("Table memory footprint: %.1f MB", mem_mb)


def log_oversized_leaves(n_oversized: int, largest: int, leaf_size: int) -> None:
    """
    Warn about leaves that could not be split down to *leaf_size*.

    This only happens when a leaf holds identical points, so it usually
    points at duplicated rows in the input.

    Parameters
    ----------
    n_oversized : int
        Number of leaves holding more than *leaf_size* points.
    largest : int
        Point count of the largest such leaf.
    leaf_size : int
        Requested maximum leaf size.
    """
    if n_oversized == 0:
        return
    logger.warning(
        "%d leaf node(s) exceed leaf_size=%d (largest holds %d points) "
        "because their points are identical. Consider deduplicating the input.",
        n_oversized,
        leaf_size,
        largest,
    )


# ============================================================================ #
# Helper Functions for Computing Data (not logging)
# ============================================================================ #


def compute_memory_footprint(table: Any) -> int:
    """
    Compute total memory footprint of table arrays.

    Parameters
    ----------
    table : Any
        The Table object.

    Returns
    -------
    int
        Total memory in bytes.
    """
    arrays = [
        table.data,
        table.points,
        table.old_from_new,
        table.node_begin,
        table.node_count,
        table.left_child,
        table.right_child,
        table.node_depth,
        table.bound_lo,
        table.bound_hi,
    ]
    return sum(arr.nbytes for arr in arrays)
