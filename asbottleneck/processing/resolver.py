# asbottleneck/processing/resolver.py

from __future__ import annotations
from typing import Dict, List

from asbottleneck.errors import ResolutionError
from asbottleneck.models import Address, BatchMap, BottleneckMap
from asbottleneck.utils.logging import get_logger

log = get_logger(__name__)


def find_common_suffix(batch: BatchMap) -> Dict[Address, List[int]]:
    """
    Map each address to the AS numbers shared by the tail of all its paths.

    The returned lists are origin-first: element 0 is the origin AS and the
    last element is the most distal AS that every path still goes through.
    Addresses whose paths disagree on the origin are logged and left out.
    """
    common: Dict[Address, List[int]] = {}

    for addr, as_paths in batch.items():
        if not as_paths:
            continue
        # shortest first: the suffix can only be truncated, never extended
        ordered = sorted(as_paths, key=len)

        rev_common_suffix = list(reversed(ordered[0]))
        if not rev_common_suffix:
            raise ResolutionError(f"Prefix {addr} has an empty AS path")

        anomalous = False
        for as_path in ordered[1:]:
            rev_as_path = list(reversed(as_path))

            # every prefix belongs to exactly one origin AS
            if rev_as_path[0] != rev_common_suffix[0]:
                log.warning(
                    "Every IP should belong to one AS. Prefix `%s` has anomalous AS paths: %s",
                    addr,
                    sorted(as_paths),
                )
                anomalous = True
                break

            for i in range(1, len(rev_common_suffix)):
                if rev_as_path[i] != rev_common_suffix[i]:
                    del rev_common_suffix[i:]
                    break

        if not anomalous:
            common[addr] = rev_common_suffix

    return common


def find_as_bottleneck(batch: BatchMap) -> BottleneckMap:
    """
    Resolve every address of ``batch`` to its bottleneck AS.

    The bottleneck is the last AS of the common suffix, i.e. the AS farthest
    from the origin that all observed paths still share. With a single
    distinct path that is the path's nearest hop.
    """
    result: BottleneckMap = {}
    for addr, suffix in find_common_suffix(batch).items():
        if not suffix:
            raise ResolutionError(f"No ASN left for prefix {addr}")
        result[addr] = suffix[-1]
    return result
