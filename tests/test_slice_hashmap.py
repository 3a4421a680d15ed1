import pytest

from simuverse.slice_hashmap import SliceHashMap


def _consistent(m):
    pairs = list(m.items())
    return len(pairs) == len(m) and all(m[k] == v for k, v in pairs)


def test_sliced_hashmap_scenario():
    m = SliceHashMap((i, 100 - i) for i in range(100))
    assert len(m) == 100
    assert _consistent(m)
    for i in range(100):
        assert m.insert(i, i + 200) == 100 - i
        assert _consistent(m)
    for i in range(100):
        assert m.get(i) == i + 200
        assert _consistent(m)
    assert m.insert(100, 300) is None
    assert len(m) == 101
    for i in range(100):
        assert m.remove(i) == i + 200
        assert _consistent(m)
    assert len(m) == 1
    m.clear()
    assert len(m) == 0


def test_remove_swaps_last_into_slot():
    m = SliceHashMap([(0, "a"), (1, "b"), (2, "c")])
    assert m.remove(0) == "a"
    assert list(m.items()) == [(2, "c"), (1, "b")]
    assert m[2] == "c"


def test_remove_last_entry():
    m = SliceHashMap([(0, "a"), (1, "b")])
    assert m.remove(1) == "b"
    assert list(m) == [0]


def test_remove_missing_raises():
    m = SliceHashMap([(1, 2)])
    with pytest.raises(KeyError):
        m.remove(5)


def test_get_default_and_contains():
    m = SliceHashMap()
    m["x"] = 1
    assert m.get("y", 42) == 42
    assert m.get("y") is None
    assert "x" in m and "y" not in m
    with pytest.raises(KeyError):
        m["y"]


def test_replace_keeps_position_and_values_order():
    m = SliceHashMap([("a", 1), ("b", 2)])
    m["a"] = 10
    assert list(m.values()) == [10, 2]
    assert list(m) == ["a", "b"]