# asbottleneck/processing/aspath.py

from __future__ import annotations
from itertools import groupby
from typing import Any, Dict, Iterable, List, Sequence

from asbottleneck.datasources.mrt import code
from asbottleneck.errors import AsPathError
from asbottleneck.models import AsPath

ATTR_TYPE_AS_PATH = 2

AS_SET = 1
AS_SEQUENCE = 2
AS_CONFED_SEQUENCE = 3
AS_CONFED_SET = 4


def _asn(value: Any) -> int:
    text = str(value)
    try:
        if "." in text:
            # asdot notation (RFC 5396)
            high, low = text.split(".")
            return int(high) << 16 | int(low)
        return int(text)
    except ValueError:
        raise AsPathError(f"Not an AS number: {value!r}") from None


def find_as_path(attributes: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Return the segment list of the AS_PATH attribute."""
    for attr in attributes:
        if code(attr.get("type")) == ATTR_TYPE_AS_PATH:
            return attr.get("value") or []
    raise AsPathError("No AS_PATH attribute")


def parse_as_path(attributes: Sequence[Dict[str, Any]]) -> AsPath:
    """
    Extract the ordered AS numbers of the AS_PATH in a peer entry's attributes.

    AS_SEQUENCE segments are taken as-is. An AS_SET holding a single AS is
    treated as that AS; a larger set has no defined position on the path and
    is rejected. Confederation segments are local to the neighbour's
    confederation and are left out.

    Raises AsPathError if there is no AS_PATH or it yields no AS numbers.
    """
    path: List[int] = []
    for segment in find_as_path(attributes):
        seg_type = code(segment.get("type"))
        asns = [_asn(v) for v in segment.get("value", [])]
        if seg_type == AS_SEQUENCE:
            path.extend(asns)
        elif seg_type == AS_SET:
            if len(asns) != 1:
                raise AsPathError(f"AS_SET with {len(asns)} members: {asns}")
            path.extend(asns)
        elif seg_type in (AS_CONFED_SEQUENCE, AS_CONFED_SET):
            continue
        else:
            raise AsPathError(f"Unknown AS_PATH segment type {seg_type}")

    if not path:
        raise AsPathError("Empty AS_PATH")
    return tuple(path)


def dedup(path: Iterable[int]) -> AsPath:
    """Collapse consecutive duplicate AS numbers (prepending)."""
    return tuple(asn for asn, _ in groupby(path))
