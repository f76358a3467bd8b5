import math

import pytest

from seisassoc.tables import (
    Receiver,
    TravelTimeInterpolator,
    compute_distances,
    create_grid,
    create_source_points,
    read_growclust_table,
    read_receivers_csv,
    read_receivers_nodal,
)


def _tt(offset, depth):
    return 1.0 + 0.1 * offset + 0.05 * depth


def _write_growclust(path, offsets, depths, drop_last=False, extra=False):
    lines = ["header line", f" {len(offsets)} {len(depths)}",
             " " + " ".join(str(d) for d in depths)]
    rows = offsets[:-1] if drop_last else offsets
    for offset in rows:
        values = [_tt(offset, d) for d in depths]
        if extra:
            values.append(9.9)
        lines.append(f"  {offset} " + " ".join(f"{v:.6f}" for v in values))
    path.write_text("\n".join(lines) + "\n")


def test_growclust_table_round_trip(tmp_path):
    path = tmp_path / "tt.pg"
    offsets = [0.0, 10.0, 20.0]
    depths = [0.0, 5.0]
    _write_growclust(path, offsets, depths)
    interp = read_growclust_table(path, "P")
    assert interp.phase_label == "P"
    assert interp.offsets == offsets
    assert interp.depths == depths
    for offset in offsets:
        for depth in depths:
            assert interp.time(offset, depth) == pytest.approx(_tt(offset, depth))
    got = interp.times([3.0, 17.5], [1.0, 4.5])
    assert got == pytest.approx([_tt(3.0, 1.0), _tt(17.5, 4.5)])


def test_growclust_layout_depth_major(tmp_path):
    path = tmp_path / "tt.sg"
    _write_growclust(path, [0.0, 10.0, 20.0], [0.0, 5.0])
    interp = read_growclust_table(path, "S")
    assert interp.travel_times[1] == pytest.approx(_tt(10.0, 0.0))
    assert interp.travel_times[3] == pytest.approx(_tt(0.0, 5.0))


def test_growclust_missing_row_rejected(tmp_path):
    path = tmp_path / "tt.pg"
    _write_growclust(path, [0.0, 10.0, 20.0], [0.0, 5.0], drop_last=True)
    with pytest.raises(ValueError, match="Failed to unpack"):
        read_growclust_table(path, "P")


def test_growclust_wrong_column_count(tmp_path):
    path = tmp_path / "tt.pg"
    _write_growclust(path, [0.0, 10.0], [0.0, 5.0], extra=True)
    with pytest.raises(ValueError, match="Invalid size"):
        read_growclust_table(path, "P")


def test_growclust_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_growclust_table(tmp_path / "nope", "P")


def test_interpolator_times_length_mismatch():
    interp = TravelTimeInterpolator("P", [0.0, 1.0], [0.0, 1.0],
                                    [1.0, 2.0, 3.0, 4.0])
    with pytest.raises(ValueError):
        interp.times([0.5, 0.2], [0.5])


def test_interpolator_out_of_range():
    interp = TravelTimeInterpolator("P", [0.0, 1.0], [0.0, 1.0],
                                    [1.0, 2.0, 3.0, 4.0])
    with pytest.raises(ValueError):
        interp.time(2.0, 0.5)


def test_receiver_equality_ignores_position():
    assert Receiver("UU", "ALT", 1.0, 2.0, 3.0) == Receiver("UU", "ALT")
    assert not (Receiver("UU", "ALT") == Receiver("UU", "CTU"))


def test_read_receivers_csv(tmp_path):
    path = tmp_path / "stations.csv"
    path.write_text(
        "network,station,c1,c2,c3,loc,lat,lon,elev\n"
        "UU,ALT,ENE,ENN,ENZ,01,40.59028,-111.6375,2635.0\n"
        "UU,ALT,HHE,HHN,HHZ,01,40.0,-111.0,100.0\n"
        "UU,CTU,HHE,HHN,HHZ,01,40.7,-111.9,1500.0\n"
    )
    receivers = read_receivers_csv(path, True)
    assert [r.station for r in receivers] == ["ALT", "CTU"]
    assert receivers[0].latitude == pytest.approx(40.59028)
    assert receivers[0].longitude == pytest.approx(-111.6375)
    assert receivers[0].depth == pytest.approx(2635.0)


def test_read_receivers_nodal(tmp_path):
    path = tmp_path / "nodes.txt"
    path.write_text(
        "-112.02516440 40.75396926 1272.3 001 001 5462 UU001\n"
        "-112.1 40.8 1300.6 136 136 5463 UU136\n"
        "-112.2 40.9 1400.5 002 002 5464 UU002\n"
        "-112.3 40.1 1000.0 001 001 5465 UU001\n"
    )
    receivers = read_receivers_nodal(path)
    assert [r.station for r in receivers] == ["001", "002"]
    assert all(r.network == "UU" for r in receivers)
    assert receivers[0].depth == 1272.0
    assert receivers[1].depth == 1401.0
    assert receivers[0].longitude == pytest.approx(-112.02516440)


def test_create_grid_ordering():
    grid = create_grid(40.0, 41.0, 3, -112.0, -111.0, 2, 0.0, 10.0, 4)
    assert len(grid.latitudes) == 3 * 2 * 4
    assert len(grid.longitudes) == len(grid.depths) == len(grid.latitudes)
    assert (grid.latitudes[0], grid.longitudes[0], grid.depths[0]) == \
        (40.0, -112.0, 0.0)
    assert grid.depths[:4] == pytest.approx([0.0, 10.0 / 3, 20.0 / 3, 10.0])
    assert grid.latitudes[4] == pytest.approx(40.5)
    assert grid.longitudes[12] == pytest.approx(-111.0)
    assert grid.latitudes[-1] == pytest.approx(41.0)
    assert grid.depths[-1] == pytest.approx(10.0)


def test_create_grid_too_small():
    with pytest.raises(ValueError):
        create_grid(40.0, 41.0, 1, -112.0, -111.0, 2, 0.0, 10.0, 4)


def test_create_source_points():
    points = create_source_points()
    n = len(points.latitudes)
    assert len(points.longitudes) == n and len(points.depths) == n
    triples = set(zip(points.latitudes, points.longitudes, points.depths))
    assert (40.5162, -112.1453, 0.0) in triples
    assert min(points.depths) >= 0.0
    assert max(points.depths) == pytest.approx(21.5)
    assert min(points.latitudes) == pytest.approx(40.5)
    assert max(points.longitudes) == pytest.approx(-111.76)


def test_compute_distances_zero_and_symmetric():
    d = compute_distances(40.7, -112.0, [40.7, 40.9], [-112.0, -111.8])
    assert d[0] == 0.0
    back = compute_distances(40.9, -111.8, [40.7], [-112.0])
    assert back[0] == pytest.approx(d[1], rel=1e-9)
    assert d[1] > 0


def test_compute_distances_equator_and_meridian():
    d = compute_distances(0.0, 1.0, [0.0], [0.0])
    assert d[0] == pytest.approx(6378.137 * math.radians(1.0), rel=1e-9)
    quarter = compute_distances(90.0, 0.0, [0.0], [0.0])
    assert quarter[0] == pytest.approx(10001.965729, abs=1e-3)


def test_compute_distances_length_mismatch():
    with pytest.raises(ValueError):
        compute_distances(40.0, -112.0, [40.0, 41.0], [-112.0])