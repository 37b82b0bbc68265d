from types import TracebackType
from typing import TypeVar


BaseExceptionType = TypeVar("BaseException", bound=BaseException)


def reraise(
    tp: type[BaseExceptionType],
    value: BaseExceptionType,
    tb: TracebackType | None = None,
):
    if value.__traceback__ is not tb:
        raise value.with_traceback(tb)
    raise value


class BpMapError(Exception):
    "Base error for bpmap"


class InvalidOrderError(BpMapError, ValueError):
    """The tree order is not an integer of at least 3."""


class InvariantError(BpMapError):
    """A structural invariant of the tree has been violated.

    This is a programming error, never an outcome of ordinary use.
    """


class SerializationError(BpMapError):
    """Failed to serialize/deserialize content."""


class EncodeError(SerializationError):
    """Cannot encode object."""


class DecodeError(SerializationError):
    """Cannot decode object."""
