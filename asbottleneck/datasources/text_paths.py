# asbottleneck/datasources/text_paths.py

from __future__ import annotations
from pathlib import Path
from typing import Iterable

from asbottleneck.errors import PathIOError
from asbottleneck.models import Address, BatchMap
from asbottleneck.processing.aspath import dedup
from asbottleneck.utils.logging import get_logger

log = get_logger(__name__)


def parse_path_lines(lines: Iterable[str]) -> BatchMap:
    """
    Build a batch map from ``prefix|asn asn ...`` lines.

    One AS path per line, nearest hop first. A prefix may repeat; its paths
    accumulate. Blank lines and ``#`` comments are ignored, malformed lines
    are logged and skipped.
    """
    batch: BatchMap = {}
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        prefix, sep, path = line.partition("|")
        try:
            if not sep:
                raise ValueError("missing '|' separator")
            addr = Address.from_str(prefix)
            as_path = dedup(int(asn) for asn in path.split())
            if not as_path:
                raise ValueError("empty AS path")
        except ValueError as e:
            log.warning("Skipping line %d (%r): %s", lineno, line, e)
            continue
        batch.setdefault(addr, set()).add(as_path)
    return batch


def load_text_paths(path: Path) -> BatchMap:
    log.info("Reading AS paths from %s", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            batch = parse_path_lines(f)
    except OSError as e:
        raise PathIOError(path, e) from e
    log.info("Loaded paths for %d prefixes from %s", len(batch), path)
    return batch
