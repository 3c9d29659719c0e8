# asbottleneck/processing/extract.py

from __future__ import annotations
import ipaddress
from typing import Iterable

from asbottleneck.errors import AsPathError, MrtFormatError
from asbottleneck.models import (
    AFI_IPV4,
    Address,
    BatchMap,
    IpAddress,
    RibEntry,
    RibRecord,
)
from asbottleneck.processing.aspath import dedup, parse_as_path
from asbottleneck.utils.logging import get_logger

log = get_logger(__name__)


def format_ip(prefix: bytes, is_ipv4: bool) -> IpAddress:
    """
    Build an address from a RIB prefix slice.

    RIB dumps drop the trailing zero octets of a prefix shorter than the full
    width, so the slice is right-padded with zeros to 4 (IPv4) or 16 (IPv6)
    bytes before conversion.
    """
    width = 4 if is_ipv4 else 16
    if len(prefix) > width:
        raise MrtFormatError(
            f"Prefix of {len(prefix)} bytes does not fit an IPv{4 if is_ipv4 else 6} address"
        )
    packed = bytes(prefix).ljust(width, b"\x00")
    if is_ipv4:
        return ipaddress.IPv4Address(packed)
    return ipaddress.IPv6Address(packed)


def record_address(record: RibRecord) -> Address:
    ip = format_ip(record.prefix, record.afi == AFI_IPV4)
    return Address(ip=ip, mask=record.prefix_length)


def match_rib_entry(entries: Iterable[RibEntry], addr: Address, batch: BatchMap) -> int:
    """
    Add the AS path of every per-peer entry to the path set of ``addr``.

    Entries whose attributes yield no usable AS path are logged and skipped;
    the rest of the record still counts. Returns the number of paths taken.
    """
    taken = 0
    for entry in entries:
        try:
            as_path = dedup(parse_as_path(entry.attributes))
        except AsPathError as e:
            log.debug("Skipping peer %d entry for %s: %s", entry.peer_index, addr, e)
            continue
        batch.setdefault(addr, set()).add(as_path)
        taken += 1
    return taken


def ingest_record(record: RibRecord, batch: BatchMap) -> Address:
    """Reconstruct the record's address and merge its paths into ``batch``."""
    addr = record_address(record)
    match_rib_entry(record.entries, addr, batch)
    return addr


def merge_batches(target: BatchMap, source: BatchMap) -> None:
    """Union the path sets of ``source`` into ``target``."""
    for addr, paths in source.items():
        target.setdefault(addr, set()).update(paths)
