import random

import pytest

from bpmap import BpTreeMap, check_invariants

ORDERS = [3, 4, 5, 7, 16]


def assert_matches(tree, expected):
    check_invariants(tree)
    assert tree.size() == len(expected)
    assert list(tree.iterate()) == sorted(expected.items())


@pytest.mark.parametrize("order", ORDERS)
def test_insert_unique_keys(order):
    rng = random.Random(order)
    keys = rng.sample(range(10_000), 500)
    tree = BpTreeMap(order)

    for key in keys:
        tree.put(key, -key)
        check_invariants(tree)

    assert tree.size() == len(keys)
    for key in keys:
        assert tree.get(key) == (-key, True)
    assert [k for k, _ in tree.iterate()] == sorted(keys)


@pytest.mark.parametrize("order", ORDERS)
def test_interleaved_put_remove(order):
    rng = random.Random(1000 + order)
    tree = BpTreeMap(order)
    expected = {}

    for step in range(3000):
        key = rng.randrange(300)
        if rng.random() < 0.55:
            prev, replaced = tree.put(key, step)
            assert replaced == (key in expected)
            if replaced:
                assert prev == expected[key]
            expected[key] = step
        else:
            prev, found = tree.remove(key)
            assert found == (key in expected)
            if found:
                assert prev == expected.pop(key)
        check_invariants(tree)

        keys = [k for k, _ in tree.iterate()]
        assert all(a < b for a, b in zip(keys, keys[1:]))

    assert_matches(tree, expected)


@pytest.mark.parametrize("order", ORDERS)
def test_insert_then_remove_all(order):
    rng = random.Random(order)
    keys = list(range(400))
    rng.shuffle(keys)
    tree = BpTreeMap(order, check_invariants=True)

    for key in keys:
        tree.put(key, key)
    assert tree.height() > 0

    rng.shuffle(keys)
    for key in keys:
        assert tree.remove(key) == (key, True)

    assert tree.size() == 0
    assert tree.root.leaf
    assert tree.root is tree.first
    assert list(tree.iterate()) == []


@pytest.mark.parametrize("order", ORDERS)
def test_remove_absent_keys_never_changes_size(order):
    tree = BpTreeMap(order, check_invariants=True)
    for key in range(0, 200, 2):
        tree.put(key, key)
    before = list(tree.iterate())

    for key in range(1, 200, 2):
        assert tree.remove(key) == (None, False)

    assert tree.size() == 100
    assert list(tree.iterate()) == before


@pytest.mark.parametrize("order", ORDERS)
def test_duplicate_puts_overwrite(order):
    tree = BpTreeMap(order, check_invariants=True)

    for pass_no in range(3):
        for key in range(100):
            tree.put(key, (pass_no, key))

    assert tree.size() == 100
    assert list(tree.iterate()) == [(k, (2, k)) for k in range(100)]


def test_string_keys():
    rng = random.Random(7)
    words = {f"w{rng.randrange(100_000):05d}" for _ in range(300)}
    tree = BpTreeMap(6, check_invariants=True)

    for word in words:
        tree.put(word, len(word))
    for word in sorted(words)[::3]:
        tree.remove(word)

    remaining = sorted(words)
    del remaining[::3]
    assert list(tree) == remaining
