"""
tests/test_table.py
===================
Pytest test suite for the Table class (point set + kd-tree).

Invariants checked
------------------
* the root owns every point and has node ID 0;
* the two children of an internal node partition its points;
* every point of a node lies inside the node's bounding box, and the box is
  tight (each face touches a point);
* leaves hold at most leaf_size points unless their points are identical.
"""

import logging
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from trirange import HRectBound, Table, quiet, use_backend


@pytest.fixture(scope="module")
def points():
    return np.random.default_rng(3).normal(size=(200, 3))


@pytest.fixture(scope="module")
def table(points):
    return Table(points, leaf_size=8)


# ======================================================================== #
# Construction                                                              #
# ======================================================================== #


class TestConstruction:
    def test_shape(self, table, points):
        assert table.n_points == 200
        assert table.n_dims == 3
        assert table.root == 0
        assert table.get_node_count(table.root) == 200
        assert table.n_nodes == 2 * table.n_leaves - 1

    def test_data_is_a_copy(self, points):
        source = points.copy()
        table = Table(source, leaf_size=8)
        source[0, 0] = 1e6
        assert table.data[0, 0] != 1e6

    def test_points_in_tree_order(self, table):
        np.testing.assert_array_equal(table.points, table.data[table.old_from_new])

    def test_old_from_new_is_permutation(self, table):
        np.testing.assert_array_equal(np.sort(table.old_from_new), np.arange(200))

    def test_single_point(self):
        table = Table([[1.0, 2.0]])
        assert table.n_nodes == 1
        assert table.node_is_leaf(0)
        bound = table.get_node_bound(0)
        np.testing.assert_array_equal(bound.lo, [1.0, 2.0])
        np.testing.assert_array_equal(bound.hi, [1.0, 2.0])

    @pytest.mark.parametrize(
        "bad",
        [np.empty((0, 2)), np.empty((3, 0)), np.zeros(5), [[0.0, np.inf]]],
    )
    def test_invalid_points(self, bad):
        with pytest.raises(ValueError):
            Table(bad)

    def test_invalid_leaf_size(self, points):
        with pytest.raises(ValueError):
            Table(points, leaf_size=0)

    def test_invalid_backend(self, points):
        with pytest.raises(ValueError):
            Table(points, backend="cuda")


# ======================================================================== #
# Tree invariants                                                           #
# ======================================================================== #


class TestTreeInvariants:
    def test_children_partition_parent(self, table):
        for node in table.iter_nodes():
            children = table.get_node_children(node)
            if not children:
                continue
            left, right = children
            assert left > node and right > node
            parent_idx = set(table.get_node_point_indices(node).tolist())
            left_idx = set(table.get_node_point_indices(left).tolist())
            right_idx = set(table.get_node_point_indices(right).tolist())
            assert left_idx.isdisjoint(right_idx)
            assert left_idx | right_idx == parent_idx
            assert table.get_node_count(left) + table.get_node_count(right) == (
                table.get_node_count(node)
            )

    def test_bounds_are_tight(self, table):
        for node in table.iter_nodes():
            bound = table.get_node_bound(node)
            assert isinstance(bound, HRectBound)
            pts = table.data[table.get_node_point_indices(node)]
            assert all(bound.contains(p) for p in pts)
            np.testing.assert_array_equal(bound.lo, pts.min(axis=0))
            np.testing.assert_array_equal(bound.hi, pts.max(axis=0))

    def test_leaf_sizes(self, table):
        leaves = table.leaves()
        assert len(leaves) == table.n_leaves
        assert all(table.node_is_leaf(leaf) for leaf in leaves)
        assert all(1 <= table.get_node_count(leaf) <= 8 for leaf in leaves)
        assert sum(table.get_node_count(leaf) for leaf in leaves) == 200

    def test_depth(self, table):
        assert table.node_depth[0] == 0
        for node in table.iter_nodes():
            for child in table.get_node_children(node):
                assert table.node_depth[child] == table.node_depth[node] + 1
        assert table.max_depth == int(table.node_depth.max())

    def test_duplicates_stay_in_one_leaf(self):
        points = np.vstack([np.zeros((10, 2)), np.ones((10, 2))])
        table = Table(points, leaf_size=3)
        assert table.n_leaves == 2
        assert sorted(table.get_node_count(leaf) for leaf in table.leaves()) == [10, 10]


# ======================================================================== #
# Node handle validation                                                    #
# ======================================================================== #


class TestNodeHandles:
    @pytest.mark.parametrize("node", [-1, 10_000])
    def test_out_of_range(self, table, node):
        with pytest.raises(IndexError):
            table.get_node_bound(node)
        with pytest.raises(IndexError):
            table.get_node_count(node)

    @pytest.mark.parametrize("node", [1.0, "0", None, True])
    def test_wrong_type(self, table, node):
        with pytest.raises(TypeError):
            table.get_node_count(node)

    def test_numpy_integer_accepted(self, table):
        assert table.get_node_count(np.int64(0)) == 200

    def test_point_indices_are_copies(self, table):
        idx = table.get_node_point_indices(0)
        idx[:] = -1
        assert table.old_from_new.min() >= 0


# ======================================================================== #
# Backends and logging                                                      #
# ======================================================================== #


class TestBackends:
    def test_python_matches_numba(self, points):
        python_table = Table(points, leaf_size=8, backend="python")
        numba_table = Table(points, leaf_size=8, backend="numba")
        np.testing.assert_array_equal(python_table.bound_lo, numba_table.bound_lo)
        np.testing.assert_array_equal(python_table.bound_hi, numba_table.bound_hi)

    def test_use_backend_override(self, points):
        with use_backend("python"):
            table = Table(points[:20], leaf_size=4, backend="numba")
        assert table.n_points == 20


class TestLogging:
    def test_construction_logs(self, points, caplog):
        caplog.set_level(logging.INFO, logger="trirange")
        Table(points, leaf_size=8)
        messages = [r.getMessage() for r in caplog.records]
        assert any("Building kd-tree over 200 points" in m for m in messages)
        assert any("kd-tree built" in m for m in messages)
        assert any("Table memory footprint" in m for m in messages)

    def test_oversized_leaf_warning(self, caplog):
        caplog.set_level(logging.INFO, logger="trirange")
        Table(np.zeros((12, 2)), leaf_size=4)
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert any("exceed leaf_size=4" in r.getMessage() for r in warnings)

    def test_quiet(self, points, caplog):
        caplog.set_level(logging.INFO, logger="trirange")
        with quiet():
            Table(points, leaf_size=8)
        assert not [r for r in caplog.records if r.name.startswith("trirange")]
