# asbottleneck/output/export.py

from __future__ import annotations
import shutil
import time
from pathlib import Path
from typing import Optional, TextIO, Union

from asbottleneck.errors import PathIOError
from asbottleneck.models import BottleneckMap
from asbottleneck.utils.logging import get_logger

log = get_logger(__name__)


PathLike = Union[str, Path]


def format_line(addr, asn: int) -> str:
    return f"{addr.ip}/{addr.mask}|{asn}"


def write_bottleneck(result: BottleneckMap, out: TextIO) -> int:
    """
    Write one ``ip/mask|asn`` line per resolved prefix and flush ``out``.

    Returns the number of lines written.
    """
    count = 0
    for addr, asn in result.items():
        out.write(format_line(addr, asn) + "\n")
        count += 1
    out.flush()
    log.debug("Wrote %d bottleneck lines", count)
    return count


def result_filename(epoch: Optional[int] = None) -> str:
    if epoch is None:
        epoch = int(time.time())
    return f"bottleneck.{epoch}.txt"


def save_result(
        temp_result: TextIO,
        out_dir: Optional[PathLike] = None,
        epoch: Optional[int] = None,
) -> Path:
    """
    Copy an accumulated result stream to ``bottleneck.<epoch>.txt``.

    Parameters
    ----------
    temp_result : text stream
        Stream the pipeline wrote into; it is rewound before copying.
    out_dir : str | Path, optional
        Destination directory. Defaults to the current working directory.
    epoch : int, optional
        Timestamp for the file name, defaults to now.
    """
    name = result_filename(epoch)
    dst = Path(out_dir) / name if out_dir is not None else Path(name)
    log.info("Saving bottleneck results to %s", dst)

    temp_result.seek(0)
    try:
        with open(dst, "w", encoding="utf-8", newline="") as f:
            shutil.copyfileobj(temp_result, f)
    except OSError as e:
        raise PathIOError(dst, e) from e

    log.debug("Results written successfully to %s", dst)
    return dst
