import pytest

from bst.bst_model import BSTModel

VALUES = [50, 30, 70, 20, 40, 60, 80]


@pytest.fixture
def tree():
    model = BSTModel()
    model.create_from_iterable(VALUES)
    return model


def test_inorder_is_sorted(tree):
    assert tree.inorder_values() == sorted(VALUES)
    assert tree.length == 7


def test_insert_returns_search_path(tree):
    new_id, path = tree.insert(65)
    assert [tree.value_of(n) for n in path] == [50, 70, 60]
    assert tree.value_of(new_id) == 65


def test_duplicate_insert_is_rejected(tree):
    new_id, path = tree.insert(40)
    assert new_id is None
    assert [tree.value_of(n) for n in path] == [50, 30, 40]
    assert tree.length == 7


def test_create_skips_duplicates():
    model = BSTModel()
    created = model.create_from_iterable([3, 1, 3, 2])
    assert len(created) == 3
    assert model.inorder_values() == [1, 2, 3]


def test_find(tree):
    found, path = tree.find(60)
    assert tree.value_of(found) == 60
    assert len(path) == 3
    missing, path = tree.find(65)
    assert missing is None
    assert [tree.value_of(n) for n in path] == [50, 70, 60]


@pytest.mark.parametrize("value", [20, 30, 50, 70])
def test_delete_keeps_search_order(tree, value):
    removed, _ = tree.delete(value)
    assert removed is not None
    expected = sorted(v for v in VALUES if v != value)
    assert tree.inorder_values() == expected
    assert tree.find(value)[0] is None


def test_delete_with_one_child():
    model = BSTModel()
    model.create_from_iterable([10, 5, 3])
    model.delete(5)
    assert model.inorder_values() == [3, 10]


def test_delete_root_with_two_children_walks_to_successor(tree):
    _, path = tree.delete(50)
    assert len(path) == 3
    root_value = tree.value_of(tree.root)
    assert root_value == 60


def test_delete_missing_value(tree):
    removed, path = tree.delete(65)
    assert removed is None
    assert tree.length == 7


def test_snapshot_shape(tree):
    snap = tree.snapshot()
    assert snap["root"] == tree.root
    assert {n["value"] for n in snap["nodes"]} == set(VALUES)
    assert set(snap["nodes"][0]) == {"id", "value", "left", "right"}


def test_clear(tree):
    tree.clear()
    assert tree.length == 0
    assert tree.root is None
    assert tree.inorder_values() == []
