import numpy as np
import pytest

from planar_kdtree import InsertResult, KdTree


def points_of(nodes):
    """Return sorted list of points from a list of nodes."""
    return sorted(n.point for n in nodes)


def test_insert_many_list_and_numpy_agree():
    tree = KdTree((0.0, 0.0))
    res = tree.insert_many([(10, 10), (20, 20), (30, 30)])
    assert isinstance(res, InsertResult)
    assert (res.count, res.start_id, res.end_id) == (3, 1, 3)
    assert list(res.ids) == [1, 2, 3]
    assert [n.id_ for n in res.nodes] == [1, 2, 3]

    tree_np = KdTree((0.0, 0.0))
    res_np = tree_np.insert_many(np.array([[10, 10], [20, 20], [30, 30]]))
    assert res_np.count == 3

    hits = tree.range_query((20, 20), 15.0)
    hits_np = tree_np.range_query((20, 20), 15.0)
    assert points_of(hits) == points_of(hits_np)
    assert len(hits) == 3


def test_insert_many_three_column_array_keeps_z():
    tree = KdTree((0.0, 0.0))
    pts = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]], dtype=np.float32)
    res = tree.insert_many(pts)
    assert [n.point for n in res.nodes] == [(1.0, 2.0, 3.0), (4.0, 5.0, 6.0)]


def test_insert_many_with_tags():
    tree = KdTree((0.0, 0.0))
    res = tree.insert_many([(1, 1), (2, 2)], tags=[(4, 5), (6, 7)])
    assert [(n.tag_a, n.tag_b) for n in res.nodes] == [(4, 5), (6, 7)]

    with pytest.raises(ValueError):
        tree.insert_many([(1, 1), (2, 2)], tags=[(1, 1)])
    assert len(tree) == 3


@pytest.mark.parametrize("bad_tags", [[(1, 2), (3,)], [(1, 2), None], [(1, 2), (3, 4.5)]])
def test_insert_many_malformed_tags_leave_tree_unchanged(bad_tags):
    tree = KdTree((0.0, 0.0))
    with pytest.raises(ValueError, match="tags must be"):
        tree.insert_many([(1, 1), (2, 2)], tags=bad_tags)
    assert len(tree) == 1
    assert tree.root.is_leaf


def test_insert_many_numpy_tags():
    tree = KdTree((0.0, 0.0))
    res = tree.insert_many(np.array([[1.0, 1.0], [2.0, 2.0]]), tags=np.array([[3, 4], [5, 6]]))
    assert [(n.tag_a, n.tag_b) for n in res.nodes] == [(3, 4), (5, 6)]
    assert all(type(n.tag_a) is int for n in res.nodes)


def test_insert_empty_numpy_array():
    tree = KdTree((0.0, 0.0))
    res = tree.insert_many(np.empty((0, 2), dtype=np.float32))
    assert res.count == 0
    assert res.start_id == 1
    assert list(res.ids) == []
    assert len(tree) == 1


def test_insert_many_rejects_bad_shape():
    tree = KdTree((0.0, 0.0))
    with pytest.raises(ValueError):
        tree.insert_many(np.zeros((3, 4)))
    with pytest.raises(ValueError):
        tree.insert_many(np.zeros(6))
    assert len(tree) == 1


def test_insert_many_is_all_or_nothing():
    tree = KdTree((0.0, 0.0))
    pts = np.array([[10, 10], [np.nan, 2000], [30, 30]], dtype=np.float64)
    with pytest.raises(ValueError):
        tree.insert_many(pts)
    assert len(tree) == 1


def test_numpy_query_points_and_range_np():
    tree = KdTree(np.array([0.0, 0.0]))
    tree.insert(np.array([1.0, 1.0, 2.0]))
    tree.insert((np.float64(5.0), np.int64(5)))

    assert tree.nearest(np.array([4.0, 4.0])).point == (5.0, 5.0, 0.0)

    arr = tree.range_query_np(np.array([0.5, 0.5]), 2.0)
    assert arr.shape == (2, 3)
    assert arr.dtype == np.float64
    assert sorted(map(tuple, arr.tolist())) == [(0.0, 0.0, 0.0), (1.0, 1.0, 2.0)]

    empty = tree.range_query_np((100.0, 100.0), 1.0)
    assert empty.shape == (0, 3)
