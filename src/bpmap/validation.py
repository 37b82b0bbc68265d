"""Structural checks for a :class:`~bpmap.tree.BpTreeMap`.

Used by the test suite, and after every mutation when the map is built with
``check_invariants=True``.
"""
import typing

from .exceptions import InvariantError
from .node import LeafNode, Node


def _check(condition: bool, message: str, *args):
    if not condition:
        raise InvariantError(message % args if args else message)


def check_invariants(tree) -> None:
    """Raise :class:`InvariantError` on the first violated invariant."""
    leaves: typing.List[LeafNode] = []
    leaf_depths = set()
    total = 0

    # (node, depth, lower bound, upper bound), bounds are None when open
    stack = [(tree.root, 0, None, None)]
    while stack:
        node, depth, low, high = stack.pop()
        keys = node.keys

        _check(
            all(a < b for a, b in zip(keys, keys[1:])),
            "keys out of order in %s",
            node,
        )
        _check(len(keys) <= tree.max_keys, "overfull node %s", node)
        if node is not tree.root:
            _check(len(keys) >= tree.min_keys, "underfull node %s", node)
        if keys:
            _check(low is None or keys[0] >= low, "key %r below bound %r", keys[0], low)
            _check(high is None or keys[-1] < high, "key %r not below bound %r", keys[-1], high)

        if node.leaf:
            _check(len(node.values) == len(keys), "values misaligned in %s", node)
            leaves.append(node)
            leaf_depths.add(depth)
            total += len(keys)
            continue

        _check(
            len(node.children) == len(keys) + 1,
            "internal node %s has %d children",
            node,
            len(node.children),
        )
        bounds = [low] + list(keys) + [high]
        # push in reverse so leaves are collected left to right
        for i in reversed(range(len(node.children))):
            stack.append((node.children[i], depth + 1, bounds[i], bounds[i + 1]))

    _check(len(leaf_depths) == 1, "leaves at different depths: %s", sorted(leaf_depths))
    _check(total == tree.size(), "size %d but %d keys stored", tree.size(), total)
    _check(leaves[0] is tree.first, "cached first leaf is not the leftmost leaf")
    _check_chain(tree.first, leaves)


def _check_chain(first: LeafNode, leaves: typing.List[Node]):
    seen = set()
    node, position = first, 0
    last_key = None
    while node is not None:
        _check(id(node) not in seen, "cycle in leaf chain at %s", node)
        seen.add(id(node))
        _check(
            position < len(leaves) and node is leaves[position],
            "leaf chain diverges from tree order at position %d",
            position,
        )
        if node.keys:
            _check(
                last_key is None or last_key < node.keys[0],
                "leaf chain not ascending at %r",
                node.keys[0],
            )
            last_key = node.keys[-1]
        node, position = node.next, position + 1
    _check(position == len(leaves), "leaf chain visits %d of %d leaves", position, len(leaves))
