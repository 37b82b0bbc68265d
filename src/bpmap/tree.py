"""Sorted map implemented as a B+Tree.

Overfull nodes split, leaving the smaller half in place and handing the
divider key and new right sibling to the parent. For an order 5 tree (at
most 4 keys per node) the first split looks like::

    [ . k4 . ]
        [ . k1 . k2 . k3 . ]  [ . k4 . k5 . ]

A leaf divider is the smallest key of the right sibling and stays there; an
internal split promotes its middle key instead. Underfull nodes borrow one
entry from their richest adjacent sibling when it can spare one, otherwise
they are merged with it.
"""
import logging
import sys
import typing

from .conf import Conf, build_conf
from .exceptions import InvalidOrderError, InvariantError
from .iterators import LeafCursor
from .node import InternalNode, LeafNode, Node, Split, K, V
from .validation import check_invariants

logger = logging.getLogger("bpmap")

__all__ = [
    "BpTreeMap",
    "order_to_min_max",
]


def order_to_min_max(order: int) -> typing.Tuple[int, int]:
    """Return the (min, max) key count of a non-root node."""
    if not isinstance(order, int) or isinstance(order, bool) or order < 3:
        raise InvalidOrderError(f"order must be an integer >= 3, got {order!r}")
    max_keys = order - 1
    min_keys = (order + 1) // 2 - 1
    return min_keys, max_keys


class BpTreeMap(typing.Generic[K, V]):
    def __init__(self, order: typing.Optional[int] = None, **conf):
        self.conf: Conf = build_conf(order=order, **conf)
        self.order = self.conf.order
        self.min_keys, self.max_keys = order_to_min_max(self.order)
        self.root: Node[K] = LeafNode()
        # leftmost leaf, used to seed iteration; splits keep it in place
        self.first: LeafNode[K, V] = self.root
        self.count = 0
        # number of nodes visited (statistics only)
        self.accessed = 0

    @classmethod
    def from_items(
        cls, items: typing.Iterable[typing.Tuple[K, V]], order=None, **conf
    ) -> "BpTreeMap[K, V]":
        tree = cls(order, **conf)
        tree.update(items)
        return tree

    def size(self) -> int:
        return self.count

    def __len__(self):
        return self.count

    def __repr__(self):
        return f"<{type(self).__name__} order={self.order} size={self.count}>"

    def height(self) -> int:
        """Return the number of edges from the root down to the leaves."""
        level, node = 0, self.root
        while not node.leaf:
            node = node.children[0]
            level += 1
        return level

    def reset_stats(self):
        self.accessed = 0

    def clear(self):
        self.root = LeafNode()
        self.first = self.root
        self.count = 0

    # lookup

    def get(self, key: K, default=None) -> typing.Tuple[typing.Optional[V], bool]:
        """Return ``(value, True)`` for a present key, else ``(default, False)``."""
        node = self.root
        while True:
            self.accessed += 1
            if node.leaf:
                i = node.find_exact(key)
                if i is None:
                    return default, False
                return node.values[i], True
            node = node.child_for(key)

    def __getitem__(self, key: K) -> V:
        value, found = self.get(key)
        if not found:
            raise KeyError(key)
        return value

    def __contains__(self, key) -> bool:
        _, found = self.get(key)
        return found

    # insertion

    def put(self, key: K, value: V) -> typing.Tuple[typing.Optional[V], bool]:
        """Insert ``key`` or overwrite its value.

        Returns the previous value and whether it was replaced.
        """
        prev, replaced, split = self._insert(self.root, key, value)
        if split is not None:
            self.root = InternalNode(
                keys=[split.divider], children=[self.root, split.right]
            )
            logger.debug("new root at divider %r", split.divider)
        if not replaced:
            self.count += 1
        self._mutated()
        return prev, replaced

    def __setitem__(self, key: K, value: V):
        self.put(key, value)

    def update(self, items: typing.Iterable[typing.Tuple[K, V]]):
        if hasattr(items, "items"):
            items = items.items()
        for key, value in items:
            self.put(key, value)

    def _insert(
        self, node: Node[K], key: K, value: V
    ) -> typing.Tuple[typing.Optional[V], bool, typing.Optional[Split]]:
        self.accessed += 1
        if node.leaf:
            prev, replaced = node.insert(key, value)
        else:
            prev, replaced, split = self._insert(node.child_for(key), key, value)
            if split is None:
                return prev, replaced, None
            node.insert(split.divider, split.right)

        if node.is_overfull(self.max_keys):
            split = node.split()
            logger.debug(
                "split %s node, divider %r, right %s",
                "leaf" if node.leaf else "internal",
                split.divider,
                split.right,
            )
            return prev, replaced, split
        return prev, replaced, None

    # removal

    def remove(self, key: K) -> typing.Tuple[typing.Optional[V], bool]:
        """Remove ``key`` if present.

        Returns the removed value and whether the key was found; removing an
        absent key leaves the tree untouched.
        """
        prev, found = self._delete(self.root, key)
        if not found:
            return None, False

        self.count -= 1
        if not self.root.leaf and len(self.root.keys) == 0:
            self.root = self.root.children[0]
            logger.debug("collapsed empty root into %s", self.root)
        self._mutated()
        return prev, True

    def __delitem__(self, key: K):
        _, found = self.remove(key)
        if not found:
            raise KeyError(key)

    def _delete(self, node: Node[K], key: K) -> typing.Tuple[typing.Optional[V], bool]:
        self.accessed += 1
        if node.leaf:
            i = node.find_exact(key)
            if i is None:
                return None, False
            return node.remove_at(i), True

        i = node.find(key)
        prev, found = self._delete(node.children[i], key)
        if found and node.children[i].is_underfull(self.min_keys):
            self._rebalance(node, i)
        return prev, found

    def _richest_sibling(
        self, parent: InternalNode[K], i: int
    ) -> typing.Tuple[Node[K], bool]:
        """Return the sibling of ``parent.children[i]`` to borrow from or merge
        with, and whether it sits on the left."""
        left = parent.children[i - 1] if i > 0 else None
        right = parent.children[i + 1] if i < len(parent.keys) else None

        if left is None and right is None:
            raise InvariantError(f"underfull node {parent.children[i]} has no sibling")
        if right is None:
            return left, True
        if left is None:
            return right, False
        if len(left.keys) >= len(right.keys):
            return left, True
        return right, False

    def _rebalance(self, parent: InternalNode[K], i: int):
        node = parent.children[i]
        sibling, on_left = self._richest_sibling(parent, i)

        if sibling.has_surplus(self.min_keys):
            self._borrow(parent, i, node, sibling, on_left)
        elif on_left:
            self._merge(parent, i - 1, sibling, node)
        else:
            self._merge(parent, i, node, sibling)

    def _borrow(
        self,
        parent: InternalNode[K],
        i: int,
        node: Node[K],
        sibling: Node[K],
        on_left: bool,
    ):
        # parent.keys[d] divides node from sibling
        d = i - 1 if on_left else i

        if node.leaf:
            # the sibling's boundary entry moves over, the parent divider
            # becomes the smallest key of the right one of the pair
            if on_left:
                key, value = sibling.pop_last()
                node.push_first(key, value)
                parent.keys[d] = key
            else:
                key, value = sibling.pop_first()
                node.push_last(key, value)
                parent.keys[d] = sibling.keys[0]
        else:
            # rotate through the parent: its divider comes down into node and
            # the sibling's boundary key goes up, along with one child
            if on_left:
                key, child = sibling.pop_last()
                node.push_first(parent.keys[d], child)
            else:
                key, child = sibling.pop_first()
                node.push_last(parent.keys[d], child)
            parent.keys[d] = key

        logger.debug(
            "borrowed %r from %s sibling into %s node %s",
            key,
            "left" if on_left else "right",
            "leaf" if node.leaf else "internal",
            node,
        )

    def _merge(self, parent: InternalNode[K], d: int, left: Node[K], right: Node[K]):
        # the left node absorbs the right one, so the leftmost leaf survives
        divider, removed = parent.remove_at(d)
        if removed is not right:
            raise InvariantError(f"divider {divider!r} does not separate {left} and {right}")

        if left.leaf:
            left.merge(right)
        else:
            left.merge(right, divider)

        logger.debug(
            "merged %s nodes at divider %r into %s",
            "leaf" if left.leaf else "internal",
            divider,
            left,
        )

    def _mutated(self):
        if self.conf.check_invariants:
            check_invariants(self)

    # iteration

    def iterate(self) -> LeafCursor[K, V]:
        """Return a fresh cursor over all entries in ascending key order."""
        return LeafCursor(self.first)

    def __iter__(self) -> typing.Iterator[K]:
        for key, _ in self.iterate():
            yield key

    def items(self) -> typing.Iterator[typing.Tuple[K, V]]:
        yield from self.iterate()

    def keys(self) -> typing.Iterator[K]:
        yield from self

    def values(self) -> typing.Iterator[V]:
        for _, value in self.iterate():
            yield value

    # diagnostics

    def format(self) -> str:
        lines = []
        self._format_node(self.root, 0, lines)
        return "\n".join(lines)

    def _format_node(self, node: Node[K], level: int, lines: typing.List[str]):
        lines.append("\t" * level + str(node))
        if not node.leaf:
            for child in node.children:
                self._format_node(child, level + 1, lines)

    def dump(self, file=None):
        """Print the nodes in pre-order, indented by level."""
        file = file or sys.stdout
        print(type(self).__name__, file=file)
        print(self.format(), file=file)
        print("-" * 60, file=file)

    # pickling walks the leaf chain recursively, store the entries instead

    def __getstate__(self):
        return {"conf": dict(self.conf), "items": list(self.iterate())}

    def __setstate__(self, state):
        self.__init__(**state["conf"])
        self.update(state["items"])
