# asbottleneck/datasources/files.py

from __future__ import annotations
import gzip
from pathlib import Path
from typing import List

from asbottleneck.datasources.mrt import MrtReader
from asbottleneck.errors import PathIOError
from asbottleneck.utils.logging import get_logger

log = get_logger(__name__)


def list_dump_files(directory: Path) -> List[Path]:
    """
    Every regular file in ``directory``, ordered by name.
    """
    directory = Path(directory)
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        raise PathIOError(directory, e) from e
    return [p for p in entries if p.is_file()]


def open_dump(path: Path) -> MrtReader:
    """
    Open one gzip-compressed MRT dump.

    The gzip header is only checked on the first read, so a file that is not
    gzip at all still opens here and gets reported by the reader.
    """
    log.info("Acquiring a reader for file `%s`", path)
    try:
        stream = gzip.open(path, "rb")
    except OSError as e:
        raise PathIOError(path, e) from e
    return MrtReader(stream, name=str(path))


def open_files(directory: Path) -> List[MrtReader]:
    readers: List[MrtReader] = []
    try:
        for path in list_dump_files(directory):
            readers.append(open_dump(path))
    except PathIOError:
        for reader in readers:
            reader.close()
        raise
    return readers
