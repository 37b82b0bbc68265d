import typing

from .node import LeafNode, K, V


class LeafCursor(typing.Generic[K, V]):
    """Iterate over ``(key, value)`` pairs by walking the leaf chain.

    The cursor sits on ``(leaf, index)``, ``index`` being the position of
    the entry returned last (``-1`` before the first call). The tree must
    not be modified while a cursor is in use.
    """

    def __init__(self, leaf: LeafNode[K, V], index: int = -1):
        self.leaf = leaf
        self.index = index

    def __iter__(self):
        return self

    def has_next(self) -> bool:
        if self.index < len(self.leaf.keys) - 1:
            return True
        node = self.leaf.next
        while node is not None:
            if node.keys:
                return True
            node = node.next
        return False

    def __next__(self) -> typing.Tuple[K, V]:
        while self.index >= len(self.leaf.keys) - 1:
            if self.leaf.next is None:
                raise StopIteration
            self.leaf, self.index = self.leaf.next, -1
        self.index += 1
        return self.leaf.keys[self.index], self.leaf.values[self.index]
