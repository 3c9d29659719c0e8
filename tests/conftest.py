import pytest

from asbottleneck.models import Address


@pytest.fixture
def dump_dirs(tmp_path):
    sorted_dir = tmp_path / "sorted"
    unsorted_dir = tmp_path / "unsorted"
    sorted_dir.mkdir()
    unsorted_dir.mkdir()
    return sorted_dir, unsorted_dir


@pytest.fixture
def mrt_batch():
    """Paths seen for three prefixes in a RIPE RIS bview."""
    return {
        Address.from_str("1.0.139.0/24"): {
            (2497, 38040, 23969),
            (25152, 6939, 4766, 38040, 23969),
            (4777, 6939, 4766, 38040, 23969),
        },
        Address.from_str("1.0.204.0/22"): {
            (2497, 38040, 23969),
            (4777, 6939, 4766, 38040, 23969),
            (25152, 2914, 38040, 23969),
        },
        Address.from_str("1.0.6.0/24"): {
            (2497, 4826, 38803, 56203),
            (25152, 6939, 4826, 38803, 56203),
            (4777, 6939, 4826, 38803, 56203),
        },
    }
