# asbottleneck/models.py
from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import Any, Dict, List, Set, Tuple, Union

IpAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
AsPath = Tuple[int, ...]           # nearest hop first, origin last
PathSet = Set[AsPath]

AFI_IPV4 = 4
AFI_IPV6 = 6


@dataclass(frozen=True)
class Address:
    ip: IpAddress       # network address of the prefix
    mask: int           # prefix length, 0-32 (v4) or 0-128 (v6)

    @classmethod
    def from_str(cls, text: str) -> "Address":
        """Parse ``"1.0.139.0/24"`` or ``"2001:318::/32"``."""
        ip, sep, mask = text.strip().partition("/")
        if not sep:
            raise ValueError(f"Missing prefix length in {text!r}")
        addr = ipaddress.ip_address(ip)
        length = int(mask)
        if not 0 <= length <= addr.max_prefixlen:
            raise ValueError(f"Invalid prefix length {length} for {addr}")
        return cls(ip=addr, mask=length)

    @property
    def family(self) -> int:
        return self.ip.version

    @property
    def leading_octet(self) -> int:
        return self.ip.packed[0]

    @property
    def position(self) -> Tuple[int, int]:
        """Sort position in a RIB dump: every IPv4 prefix before every IPv6 one."""
        return self.family, self.leading_octet

    def __str__(self) -> str:
        return f"{self.ip}/{self.mask}"


@dataclass
class RibEntry:
    peer_index: int
    originated_time: int
    attributes: List[Dict[str, Any]]    # path attributes as decoded by mrtparse


@dataclass
class RibRecord:
    """A TABLE_DUMP_V2 RIB_IPV4_UNICAST / RIB_IPV6_UNICAST record."""
    afi: int                # AFI_IPV4 or AFI_IPV6
    sequence: int
    prefix: bytes           # leading ceil(mask / 8) bytes of the network address
    prefix_length: int
    entries: List[RibEntry] = field(default_factory=list)


@dataclass
class OtherRecord:
    """Any MRT record that is not an IPv4/IPv6 unicast RIB entry."""
    type: int
    subtype: int


BatchMap = Dict[Address, PathSet]
BottleneckMap = Dict[Address, int]
