import pytest

from btree_index.db.btree import BTree
from btree_index.analysis.walks import (
    in_order, range_query, keys_per_level, level_report,
    validate, validate_capacity, validate_ordering, validate_balance,
)

DEMO_KEYS = [10, 20, 5, 6, 12, 30, 7, 17, 25, 40, 50, 60]


def demo_tree():
    t = BTree(3)
    for k in DEMO_KEYS:
        t.insert(k)
    return t


def test_in_order_matches_traverse():
    t = demo_tree()
    assert list(in_order(t.root)) == sorted(DEMO_KEYS)
    assert list(in_order(t.root)) == t.traverse_keys()


def test_range_query_demo():
    t = demo_tree()
    assert range_query(t, 15, 35) == [17, 20, 25, 30]
    assert range_query(t, 0, 4) == []
    assert range_query(t, 60, 60) == [60]
    assert range_query(t, -100, 100) == sorted(DEMO_KEYS)


def test_range_query_invalid_bounds():
    with pytest.raises(ValueError):
        range_query(demo_tree(), 10, 5)


def test_keys_per_level():
    assert keys_per_level(demo_tree()) == [1, 1, 3]
    assert keys_per_level(BTree(3)) == [0]


def test_level_report():
    df = level_report(demo_tree())
    assert list(df["level"]) == [0, 1, 2]
    assert list(df["nodes"]) == [1, 2, 4]
    assert list(df["keys"]) == [1, 2, 9]
    last = df.iloc[-1]
    assert last["min_keys"] == 1
    assert last["max_keys"] == 3
    assert last["first_node_keys"] == 3
    assert last["fill_ratio"] == pytest.approx(0.75)


def test_validate_passes_on_demo_tree():
    assert validate(demo_tree())


def test_validate_ordering_detects_unsorted_node():
    t = demo_tree()
    t.root.children[0].children[0].keys = [7, 5, 6]
    with pytest.raises(AssertionError):
        validate_ordering(t)


def test_validate_ordering_detects_out_of_bounds_key():
    t = demo_tree()
    # 25 cannot live left of separator 20
    t.root.children[0].children[1].keys = [12, 25]
    with pytest.raises(AssertionError):
        validate_ordering(t)


def test_validate_capacity_detects_overflow():
    t = demo_tree()
    t.root.children[1].children[1].keys = [40, 50, 60, 70]
    with pytest.raises(AssertionError):
        validate_capacity(t)


def test_validate_balance_detects_uneven_leaves():
    t = demo_tree()
    # colgar una hoja directamente del nivel 1
    t.root.children[1] = t.root.children[1].children[0]
    with pytest.raises(AssertionError):
        validate_balance(t)
