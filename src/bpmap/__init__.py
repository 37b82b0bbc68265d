from .tree import BpTreeMap
from .iterators import LeafCursor
from .exceptions import BpMapError, InvalidOrderError, InvariantError
from .validation import check_invariants


__all__ = [
    "BpTreeMap",
    "LeafCursor",
    "BpMapError",
    "InvalidOrderError",
    "InvariantError",
    "check_invariants",
]
