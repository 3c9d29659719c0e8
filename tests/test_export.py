import io

from asbottleneck.models import Address
from asbottleneck.output.export import result_filename, save_result, write_bottleneck


def test_write_bottleneck_lines():
    out = io.StringIO()
    result = {
        Address.from_str("1.0.139.0/24"): 38040,
        Address.from_str("2001:2f8:1008::/48"): 4200000000,
    }
    assert write_bottleneck(result, out) == 2
    assert out.getvalue().splitlines() == [
        "1.0.139.0/24|38040",
        "2001:2f8:1008::/48|4200000000",
    ]


def test_result_filename():
    assert result_filename(1700000000) == "bottleneck.1700000000.txt"
    assert result_filename().startswith("bottleneck.")


def test_save_result_copies_stream(tmp_path):
    tmp = io.StringIO("1.0.6.0/24|4826\n1.0.139.0/24|38040\n")
    tmp.seek(0, io.SEEK_END)

    dst = save_result(tmp, tmp_path, epoch=1234)

    assert dst == tmp_path / "bottleneck.1234.txt"
    assert dst.read_bytes() == b"1.0.6.0/24|4826\n1.0.139.0/24|38040\n"


def test_save_result_defaults_to_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    dst = save_result(io.StringIO("x|1\n"), epoch=42)
    assert dst.name == "bottleneck.42.txt"
    assert (tmp_path / "bottleneck.42.txt").read_text() == "x|1\n"
