import pytest

from conftest import LATIN1_GPX, build_trace, stop_go_stop_offsets
from pytrackseg.cli import build_parser, main
from pytrackseg.utilities.gpx_io import read_gpx, to_gpx


@pytest.fixture
def ride(tmp_path):
    path = tmp_path / "ride.gpx"
    path.write_text(to_gpx(build_trace(stop_go_stop_offsets()), title="ride"), encoding="utf-8")
    return path


def _outputs(directory):
    return sorted(p.name for p in directory.glob("ride.gpx.*.gpx"))


def test_writes_all_products(ride):
    assert main([str(ride), "-q"]) == 0
    assert _outputs(ride.parent) == sorted(
        f"ride.gpx.{name}.gpx" for name in ("avg1", "avg2", "mov1", "mov2", "mov3", "climb", "hybrid")
    )
    mov2 = read_gpx(ride.parent / "ride.gpx.mov2.gpx")
    assert 0 < len(mov2) < 100


def test_only_selected_products(ride):
    assert main([str(ride), "--only", "mov1", "hybrid", "-q"]) == 0
    assert _outputs(ride.parent) == ["ride.gpx.hybrid.gpx", "ride.gpx.mov1.gpx"]


def test_fix_only(ride):
    assert main([str(ride), "--fix-only", "-q"]) == 0
    assert _outputs(ride.parent) == ["ride.gpx.fixed.gpx"]
    assert len(read_gpx(ride.parent / "ride.gpx.fixed.gpx")) == 40


def test_burst_filter_option(ride):
    assert main([str(ride), "--filter", "burst", "--min-run", "3", "-q"]) == 0
    assert "ride.gpx.mov1.gpx" in _outputs(ride.parent)


def test_missing_file(tmp_path):
    assert main([str(tmp_path / "absent.gpx"), "-q"]) == 1
    assert list(tmp_path.iterdir()) == []


def test_non_utf8_file(tmp_path):
    path = tmp_path / "latin1.gpx"
    path.write_bytes(LATIN1_GPX.encode("latin-1"))
    assert main([str(path), "-q"]) == 1
    assert [p.name for p in tmp_path.iterdir()] == ["latin1.gpx"]


def test_empty_trace(tmp_path):
    path = tmp_path / "empty.gpx"
    path.write_text(to_gpx(build_trace([])), encoding="utf-8")
    assert main([str(path), "-q"]) == 1
    assert [p.name for p in tmp_path.iterdir()] == ["empty.gpx"]


def test_inconsistent_thresholds_exit(ride):
    with pytest.raises(SystemExit) as excinfo:
        main([str(ride), "--min-speed", "10", "--max-speed", "5"])
    assert excinfo.value.code == 2


def test_parser_defaults():
    args = build_parser().parse_args(["ride.gpx"])
    assert args.filter_method == "bounds"
    assert args.rough_window == 10
    assert args.fine_window == 60
    assert not args.fix
    assert args.only is None
