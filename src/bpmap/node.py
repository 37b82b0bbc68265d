"""B+Tree nodes.

Node keys and refs line up like this::

    keys:      [ . k0 . k1 . k2 . ]
    internal:  c0   c1   c2   c3       c0 < k0 <= c1 < k1 <= c2 < k2 <= c3
    leaf:          v0   v1   v2        next -> following leaf

A leaf keeps its values aligned with its keys plus a link to the next leaf in
key order. An internal node keeps one more child than it has keys; the
subtree right of a divider key holds keys greater than or equal to it.

Nodes know nothing about the order of the tree, the caller hands in the key
count limits.
"""
import bisect
import typing
from dataclasses import dataclass, field

K = typing.TypeVar("K")
V = typing.TypeVar("V")


class Split(typing.NamedTuple):
    """Divider key and new right sibling produced by splitting a node."""

    divider: typing.Any
    right: "Node"


@dataclass(eq=False)
class Node(typing.Generic[K]):
    keys: typing.List[K] = field(default_factory=list)

    leaf = False

    def __len__(self):
        return len(self.keys)

    def __str__(self):
        return "[ . " + "".join(f"{k} . " for k in self.keys) + "]"

    def is_overfull(self, max_keys: int) -> bool:
        return len(self.keys) > max_keys

    def is_underfull(self, min_keys: int) -> bool:
        return len(self.keys) < min_keys

    def has_surplus(self, min_keys: int) -> bool:
        return len(self.keys) > min_keys


@dataclass(eq=False)
class LeafNode(Node[K], typing.Generic[K, V]):
    values: typing.List[V] = field(default_factory=list)
    next: typing.Optional["LeafNode[K, V]"] = None

    leaf = True

    def find_exact(self, key: K) -> typing.Optional[int]:
        i = bisect.bisect_left(self.keys, key)
        if i < len(self.keys) and self.keys[i] == key:
            return i
        return None

    def insert(self, key: K, value: V) -> typing.Tuple[typing.Optional[V], bool]:
        """Insert ``key`` in sorted position.

        An existing key gets its value overwritten; returns the previous
        value and whether a replacement happened.
        """
        i = bisect.bisect_left(self.keys, key)
        if i < len(self.keys) and self.keys[i] == key:
            prev = self.values[i]
            self.values[i] = value
            return prev, True
        self.keys.insert(i, key)
        self.values.insert(i, value)
        return None, False

    def remove_at(self, index: int) -> V:
        del self.keys[index]
        return self.values.pop(index)

    def split(self) -> Split:
        # the smaller keys stay in this node object, so a cached reference to
        # the leftmost leaf keeps pointing at the leftmost leaf
        n = len(self.keys)
        keep = n - (n - 1) // 2

        right = LeafNode(
            keys=self.keys[keep:],
            values=self.values[keep:],
            next=self.next,
        )
        del self.keys[keep:]
        del self.values[keep:]
        self.next = right

        return Split(right.keys[0], right)

    def merge(self, right: "LeafNode[K, V]"):
        """Absorb the right sibling and unlink it from the leaf chain."""
        self.keys.extend(right.keys)
        self.values.extend(right.values)
        self.next = right.next
        right.keys = []
        right.values = []
        right.next = None

    def pop_first(self) -> typing.Tuple[K, V]:
        return self.keys.pop(0), self.values.pop(0)

    def pop_last(self) -> typing.Tuple[K, V]:
        return self.keys.pop(), self.values.pop()

    def push_first(self, key: K, value: V):
        self.keys.insert(0, key)
        self.values.insert(0, value)

    def push_last(self, key: K, value: V):
        self.keys.append(key)
        self.values.append(value)


@dataclass(eq=False)
class InternalNode(Node[K]):
    children: typing.List[Node[K]] = field(default_factory=list)

    def find(self, key: K) -> int:
        """Return the index of the child whose subtree may hold ``key``."""
        return bisect.bisect_right(self.keys, key)

    def child_for(self, key: K) -> Node[K]:
        return self.children[self.find(key)]

    def insert(self, key: K, child: Node[K]):
        """Insert a divider key with ``child`` placed right of it."""
        i = bisect.bisect_right(self.keys, key)
        self.keys.insert(i, key)
        self.children.insert(i + 1, child)

    def remove_at(self, index: int) -> typing.Tuple[K, Node[K]]:
        """Remove the key at ``index`` and the child right of it."""
        return self.keys.pop(index), self.children.pop(index + 1)

    def split(self) -> Split:
        # the middle key moves up to the parent and is kept in neither half
        n = len(self.keys)
        keep = n - (n - 1) // 2 - 1
        divider = self.keys[keep]

        right = InternalNode(
            keys=self.keys[keep + 1 :],
            children=self.children[keep + 1 :],
        )
        del self.keys[keep:]
        del self.children[keep + 1 :]

        return Split(divider, right)

    def merge(self, right: "InternalNode[K]", divider: K):
        """Absorb the right sibling, pulling the parent's divider down between them."""
        self.keys.append(divider)
        self.keys.extend(right.keys)
        self.children.extend(right.children)
        right.keys = []
        right.children = []

    def pop_first(self) -> typing.Tuple[K, Node[K]]:
        return self.keys.pop(0), self.children.pop(0)

    def pop_last(self) -> typing.Tuple[K, Node[K]]:
        return self.keys.pop(), self.children.pop()

    def push_first(self, key: K, child: Node[K]):
        self.keys.insert(0, key)
        self.children.insert(0, child)

    def push_last(self, key: K, child: Node[K]):
        self.keys.append(key)
        self.children.append(child)
