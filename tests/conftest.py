import pytest

from planar_kdtree import KdTree


@pytest.fixture(params=["seeded", "pristine"])
def seed_mode(request):
    return request.param


@pytest.fixture
def scenario_tree():
    """Seed at the origin, then (1, 1), (2, 2) and (0, 5)."""
    tree = KdTree((0.0, 0.0, 0.0))
    for pt in [(1.0, 1.0, 0.0), (2.0, 2.0, 0.0), (0.0, 5.0, 0.0)]:
        tree.insert(pt)
    return tree


@pytest.fixture
def check_invariant():
    return assert_kd_invariant


def assert_kd_invariant(tree):
    """Every node sits on the correct side of each ancestor's split line."""
    for node in tree:
        child = node
        for anc in node.ancestors():
            axis = anc.axis
            if anc.left is child:
                assert node.point[axis] <= anc.point[axis]
            else:
                assert anc.right is child
                assert node.point[axis] > anc.point[axis]
            child = anc
