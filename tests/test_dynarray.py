import pytest

from numlabs.dynarray import GROWTH_AMOUNT, MAX_STR_LEN, DynamicArray


def test_push_returns_consecutive_indices():
    arr = DynamicArray(10)
    indices = [arr.push(word) for word in ["a", "b", "c"]]
    assert indices == [0, 1, 2]
    assert len(arr) == 3
    assert list(arr) == ["a", "b", "c"]


def test_initial_capacity_is_kept_until_full():
    arr = DynamicArray(5)
    for n in range(5):
        arr.push(n)
    assert arr.capacity == 5
    arr.push(5)
    assert arr.capacity == 5 + GROWTH_AMOUNT


def test_zero_capacity_grows_on_first_push():
    arr = DynamicArray(0)
    assert arr.capacity == 0
    arr.push((1.0, 2.0))
    assert arr.capacity == GROWTH_AMOUNT
    assert arr[0] == (1.0, 2.0)


def test_growth_is_constant_step():
    arr = DynamicArray(GROWTH_AMOUNT)
    for n in range(GROWTH_AMOUNT * 2 + 1):
        arr.push(n)
    assert arr.capacity == GROWTH_AMOUNT * 3
    assert arr[-1] == GROWTH_AMOUNT * 2


def test_clear_resets_state():
    arr = DynamicArray(3)
    arr.push("x")
    arr.clear()
    assert len(arr) == 0
    assert arr.capacity == 0
    assert list(arr) == []


def test_negative_initial_size_rejected():
    with pytest.raises(ValueError):
        DynamicArray(-1)


def test_getitem_out_of_range():
    arr = DynamicArray(2)
    index = arr.push("only")
    assert index == 0
    assert arr[0] == "only"
    assert len(arr) == 1
    with pytest.raises(IndexError):
        arr[1]


def test_search_finds_and_misses():
    arr = DynamicArray(4)
    for word in ["alpha", "beta", "gamma"]:
        arr.push(word)
    assert arr.search("beta") == "beta"
    assert arr.search("delta") is None


def test_search_compares_limited_prefix():
    arr = DynamicArray(1)
    stored = "z" * MAX_STR_LEN + "tail"
    arr.push(stored)
    assert arr.search("z" * MAX_STR_LEN + "other") == stored
    assert arr.search("z" * (MAX_STR_LEN - 1)) is None


def test_search_non_string_items():
    arr = DynamicArray(2)
    arr.push((1.5, 2.5))
    assert arr.search((1.5, 2.5)) == (1.5, 2.5)
    assert arr.search((2.5, 1.5)) is None