"""msgpack encoding of a map's entries.

Only the order and the ascending ``(key, value)`` pairs are stored; the
node layout is rebuilt on load.
"""
import decimal
import sys
import uuid
from datetime import date, datetime

import msgpack
from msgpack.exceptions import UnpackException

from .conf import build_conf
from .exceptions import DecodeError, EncodeError, reraise
from .tree import BpTreeMap, order_to_min_max


def encode_non_standard_msgpack(obj):
    """Fallback for values msgpack has no native type for; they load back as strings."""
    if isinstance(obj, (decimal.Decimal, uuid.UUID)):
        return str(obj)
    if isinstance(obj, datetime):
        text = obj.isoformat()
        return text[:-6] + "Z" if text.endswith("+00:00") else text
    if isinstance(obj, date):
        return obj.isoformat() + "T00:00:00"
    raise TypeError(f"cannot encode object of type {type(obj).__name__}")


def dumps(tree: BpTreeMap) -> bytes:
    payload = {
        "order": tree.order,
        "items": [[k, v] for k, v in tree.iterate()],
    }
    try:
        return msgpack.packb(
            payload, default=encode_non_standard_msgpack, use_bin_type=True
        )
    except (TypeError, ValueError, OverflowError) as exc:
        reraise(EncodeError, EncodeError(str(exc)), sys.exc_info()[2])


def loads(data: bytes, **conf) -> BpTreeMap:
    """Rebuild a map from :func:`dumps` output.

    Settings passed as keywords win over the stored ones, ``order`` included.
    """
    # bad settings from the caller are not decoding errors
    build_conf(**conf)
    if conf.get("order") is not None:
        order_to_min_max(conf["order"])
    try:
        payload = msgpack.unpackb(data, raw=False)
        if conf.get("order") is None:
            conf["order"] = payload["order"]
        pairs = [(k, v) for k, v in payload["items"]]
        return BpTreeMap.from_items(pairs, **conf)
    except (UnpackException, ValueError, TypeError, KeyError) as exc:
        # InvalidOrderError is a ValueError, a stored order below 3 lands here
        reraise(DecodeError, DecodeError(str(exc)), sys.exc_info()[2])
