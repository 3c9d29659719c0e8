import struct

import pytest

from asbottleneck.errors import AsPathError
from asbottleneck.processing.aspath import dedup, find_as_path, parse_as_path
from mrt_builder import ATTR_ORIGIN, as_path_attribute, decoded_attributes, raw_attribute


def as_path(*segments):
    return [
        {"flag": 0x40, "type": {1: "ORIGIN"}, "length": 1, "value": 0},
        {"flag": 0x50, "type": {2: "AS_PATH"}, "value": [
            {"type": {seg_type: ""}, "length": len(asns), "value": asns}
            for seg_type, asns in segments
        ]},
    ]


def test_parses_as_sequence():
    attrs = decoded_attributes([25152, 6939, 4766, 38040, 23969])
    assert parse_as_path(attrs) == (25152, 6939, 4766, 38040, 23969)


def test_keeps_four_byte_asns():
    assert parse_as_path(decoded_attributes([4200000000, 65536, 1])) == (4200000000, 65536, 1)


def test_extended_length_attribute():
    path = list(range(1, 100))
    attrs = decoded_attributes(ATTR_ORIGIN + as_path_attribute(path, extended=True))
    assert parse_as_path(attrs) == tuple(path)


def test_multiple_segments_are_concatenated():
    value = (
        struct.pack("!BB2I", 2, 2, 3356, 1299)
        + struct.pack("!BBI", 1, 1, 15169)
    )
    assert parse_as_path(decoded_attributes(raw_attribute(2, value))) == (3356, 1299, 15169)


def test_confederation_segments_are_left_out():
    value = (
        struct.pack("!BB2I", 3, 2, 65001, 65002)
        + struct.pack("!BB2I", 2, 2, 3356, 15169)
    )
    assert parse_as_path(decoded_attributes(raw_attribute(2, value))) == (3356, 15169)


def test_multi_member_as_set_is_rejected():
    value = struct.pack("!BBI", 2, 1, 3356) + struct.pack("!BB2I", 1, 2, 64500, 64501)
    with pytest.raises(AsPathError):
        parse_as_path(decoded_attributes(raw_attribute(2, value)))


def test_missing_as_path():
    with pytest.raises(AsPathError):
        parse_as_path(decoded_attributes(ATTR_ORIGIN))


def test_empty_as_path():
    with pytest.raises(AsPathError):
        parse_as_path(decoded_attributes(ATTR_ORIGIN + raw_attribute(2, b"")))


def test_asplain_and_asdot_numbers():
    assert parse_as_path(as_path((2, ["3356", "1.10", 15169]))) == (3356, 65546, 15169)


@pytest.mark.parametrize("attrs", [
    as_path((2, ["3356", "AS15169"])),
    as_path((9, ["3356"])),
    as_path(),
    [],
])
def test_unusable_paths(attrs):
    with pytest.raises(AsPathError):
        parse_as_path(attrs)


def test_find_as_path():
    assert find_as_path(as_path((2, ["1", "2"]))) == [
        {"type": {2: ""}, "length": 2, "value": ["1", "2"]},
    ]


def test_dedup():
    assert dedup([1, 1, 2, 2, 2, 3, 1]) == (1, 2, 3, 1)
    assert dedup([7, 7, 8]) == dedup([7, 8])
    assert dedup([]) == ()
