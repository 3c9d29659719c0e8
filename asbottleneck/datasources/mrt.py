# asbottleneck/datasources/mrt.py

from __future__ import annotations
import gzip
import ipaddress
import zlib
from typing import Any, BinaryIO, Dict, Optional, Union

from mrtparse import Reader

from asbottleneck.errors import PathIOError, MrtFormatError
from asbottleneck.models import AFI_IPV4, AFI_IPV6, OtherRecord, RibEntry, RibRecord
from asbottleneck.utils.logging import get_logger

log = get_logger(__name__)

# RFC 6396
TABLE_DUMP_V2 = 13
RIB_IPV4_UNICAST = 2
RIB_IPV6_UNICAST = 4

RIB_SUBTYPES = {
    RIB_IPV4_UNICAST: AFI_IPV4,
    RIB_IPV6_UNICAST: AFI_IPV6,
}

Record = Union[RibRecord, OtherRecord]


def code(value: Any) -> Any:
    """mrtparse labels enumerated fields as ``{code: name}``; return the code."""
    if isinstance(value, dict):
        return next(iter(value), None)
    return value


def _prefix_length(data: Dict[str, Any]) -> int:
    # mrtparse releases differ on whether the RIB mask is `prefix_length`
    # or overwrites the header's `length`
    if "prefix_length" in data:
        return data["prefix_length"]
    return data["length"]


def decode_rib(data: Dict[str, Any], afi: int) -> RibRecord:
    """
    Turn one decoded RIB_IPV4_UNICAST / RIB_IPV6_UNICAST entry into a RibRecord.

    The prefix is kept as the leading ``ceil(mask / 8)`` bytes, the way the
    record carries it, and every RIB entry keeps mrtparse's list of decoded
    path attributes.
    """
    width = 4 if afi == AFI_IPV4 else 16
    try:
        prefix_length = int(_prefix_length(data))
        if prefix_length > width * 8:
            raise MrtFormatError(
                f"Prefix length {prefix_length} too long for IPv{afi} RIB entry"
            )
        packed = ipaddress.ip_address(data["prefix"]).packed
        entries = [
            RibEntry(
                peer_index=e["peer_index"],
                originated_time=code(e.get("originated_time", 0)),
                attributes=e.get("path_attributes", []),
            )
            for e in data.get("rib_entries", [])
        ]
    except (KeyError, TypeError, ValueError) as e:
        raise MrtFormatError(f"Malformed RIB record: {e!r}") from e
    if len(packed) != width:
        raise MrtFormatError(f"IPv{afi} RIB entry carries prefix {data['prefix']}")

    return RibRecord(
        afi=afi,
        sequence=data.get("sequence_number", 0),
        prefix=packed[:(prefix_length + 7) // 8],
        prefix_length=prefix_length,
        entries=entries,
    )


class MrtReader:
    """
    Sequential reader over one decompressed MRT stream, backed by mrtparse.

    ``read()`` returns the next record, or None once the stream is exhausted.
    Errors coming from the compressed stream itself (bad gzip header,
    truncated member, corrupt deflate data) and records mrtparse could not
    decode surface as MrtFormatError so the caller can drop the file and move
    on. Only a decode failure in a record that is not a unicast RIB entry is
    passed over.
    """

    def __init__(self, stream: BinaryIO, name: str = "<stream>"):
        self.stream = stream
        self.name = name
        self.records_read = 0
        self._entries = Reader(stream)
        self._done = False

    def _next_entry(self):
        try:
            return next(self._entries, None)
        except gzip.BadGzipFile as e:
            raise MrtFormatError(f"Invalid gzip header in `{self.name}`: {e}") from e
        except (EOFError, zlib.error) as e:
            raise MrtFormatError(f"Corrupt gzip stream in `{self.name}`: {e}") from e
        except OSError as e:
            raise PathIOError(self.name, e) from e

    def read(self) -> Optional[Record]:
        if self._done:
            return None
        entry = self._next_entry()
        if entry is None:
            self._done = True
            return None
        self.records_read += 1

        data = entry.data
        mrt_type, subtype = code(data.get("type")), code(data.get("subtype"))
        is_rib = mrt_type == TABLE_DUMP_V2 and subtype in RIB_SUBTYPES

        if getattr(entry, "err", None):
            if mrt_type is None or is_rib:
                self._done = True
                raise MrtFormatError(f"Bad MRT record in `{self.name}`: {entry.err_msg}")
            log.debug(
                "Ignoring undecodable MRT record type %s/%s in `%s`: %s",
                mrt_type, subtype, self.name, entry.err_msg,
            )

        if is_rib:
            return decode_rib(data, RIB_SUBTYPES[subtype])
        return OtherRecord(type=mrt_type, subtype=subtype)

    def __iter__(self):
        while True:
            record = self.read()
            if record is None:
                return
            yield record

    def close(self) -> None:
        self.stream.close()
