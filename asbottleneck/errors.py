# asbottleneck/errors.py

from __future__ import annotations
from pathlib import Path
from typing import Optional, Tuple


class BottleneckError(Exception):
    """Base class for every error raised by asbottleneck."""


class ConfigError(BottleneckError):
    pass


class PathIOError(BottleneckError):
    """A directory or file could not be listed, opened, read or written."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        self.path = Path(path)
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"I/O error on `{self.path}`{detail}")


class MrtFormatError(BottleneckError):
    """Undecodable MRT record or gzip stream. The offending file is skipped."""


class AsPathError(BottleneckError):
    """No usable AS path in a peer entry's attributes. Only that entry is skipped."""


class ResolutionError(BottleneckError):
    """Internal invariant violation while resolving a bottleneck."""


class UnsortedInputError(BottleneckError):
    """A sorted input file went backwards (strict mode only)."""

    def __init__(self, path: Path, previous: Tuple[int, int], current: Tuple[int, int]):
        self.path = Path(path)
        self.previous = previous
        self.current = current
        super().__init__(
            f"`{self.path}` is not sorted by prefix: IPv{current[0]} leading byte "
            f"{current[1]} follows IPv{previous[0]} leading byte {previous[1]}"
        )
