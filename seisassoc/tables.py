"""Travel time tables, receiver lists and candidate source grids."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from os import PathLike
from typing import NamedTuple, Sequence

from seisassoc.bilinear import BilinearInterpolation
from seisassoc.stations import is_blacklisted

logger = logging.getLogger(__name__)

_CSV_SEPARATORS = re.compile(r"[,\n\t]+")
_NODAL_SEPARATORS = re.compile(r"[ ,\n\t]+")

_WGS84_A = 6378137.0
_WGS84_F = 1.0 / 298.257223563

_KM_PER_DEGREE = 111.195
_BINGHAM = (40.5162, -112.1453, 0.0)


def _round_half_away(value: float) -> float:
    """Round to the nearest integer with halves away from zero."""
    return math.copysign(math.floor(abs(value) + 0.5), value)


def _open(path: str | PathLike):
    try:
        return open(path, encoding="utf-8")
    except OSError as error:
        raise FileNotFoundError(f"Could not open: {path}") from error


@dataclass
class Receiver:
    """A receiver; two receivers are equal when network and station match."""

    network: str
    station: str
    latitude: float = field(default=0.0, compare=False)
    longitude: float = field(default=0.0, compare=False)
    depth: float = field(default=0.0, compare=False)


@dataclass
class TravelTimeInterpolator:
    """Travel times tabulated against offset (km) and depth (km).

    ``travel_times[i * len(offsets) + k]`` is the time at depth ``depths[i]``
    and offset ``offsets[k]``.
    """

    phase_label: str
    offsets: list[float]
    depths: list[float]
    travel_times: list[float]
    _bilinear: BilinearInterpolation = field(init=False, repr=False,
                                             compare=False)

    def __post_init__(self) -> None:
        self._bilinear = BilinearInterpolation()
        self._bilinear.initialize(self.offsets, self.depths, self.travel_times)

    def time(self, offset: float, depth: float) -> float:
        """Travel time at one offset and depth."""
        return self._bilinear.interpolate([offset], [depth])[0]

    def times(self, offsets: Sequence[float],
              depths: Sequence[float]) -> list[float]:
        """Travel times at each (offset, depth) pair."""
        if len(offsets) != len(depths):
            raise ValueError("offsets.size() != depths.size()")
        return self._bilinear.interpolate(offsets, depths)


def read_growclust_table(path: str | PathLike,
                         phase_label: str) -> TravelTimeInterpolator:
    """Read a travel time table in the format written by GrowClust.

    The first line is a header, the second holds the number of distances and
    depths, the third the depths, and each further line an offset followed by
    the travel time at every depth.
    """
    n_distances = 0
    n_depths = 0
    depths: list[float] = []
    offsets: list[float] = []
    travel_times: list[float] = []
    with _open(path) as handle:
        for line_number, line in enumerate(handle, start=1):
            if line_number == 1:
                continue
            fields = line.split()
            try:
                if line_number == 2:
                    n_distances, n_depths = int(fields[0]), int(fields[1])
                    travel_times = [-1.0] * (n_distances * n_depths)
                    continue
                if line_number == 3:
                    depths = [float(fields[i]) for i in range(n_depths)]
                    continue
                if not fields:
                    continue
                offset = float(fields[0])
                values = [float(v) for v in fields[1:]]
            except (IndexError, ValueError) as error:
                raise ValueError(
                    f"malformed table line {line_number}: {line.rstrip()}"
                ) from error
            if len(values) != n_depths:
                raise ValueError("Invalid size")
            if len(offsets) >= n_distances:
                raise ValueError("more offsets than declared distances")
            offsets.append(offset)
            column = len(offsets) - 1
            for i, value in enumerate(values):
                travel_times[i * n_distances + column] = value
    if not travel_times or min(travel_times) < 0:
        raise ValueError("Failed to unpack ttimes")
    return TravelTimeInterpolator(phase_label=phase_label, offsets=offsets,
                                  depths=depths, travel_times=travel_times)


def read_receivers_csv(path: str | PathLike,
                       have_header: bool = True) -> list[Receiver]:
    """Read unique receivers from a network,station,...,lat,lon,elev CSV."""
    receivers: list[Receiver] = []
    with _open(path) as handle:
        for line_number, line in enumerate(handle, start=1):
            if line_number == 1 and have_header:
                continue
            fields = [f for f in _CSV_SEPARATORS.split(line) if f]
            if not fields:
                continue
            try:
                receiver = Receiver(network=fields[0], station=fields[1],
                                    latitude=float(fields[6]),
                                    longitude=float(fields[7]),
                                    depth=float(fields[8]))
            except (IndexError, ValueError) as error:
                raise ValueError(
                    f"malformed receiver line {line_number}: {line.rstrip()}"
                ) from error
            if receiver not in receivers:
                receivers.append(receiver)
    logger.info("Number of receivers: %d", len(receivers))
    return receivers


def read_receivers_nodal(path: str | PathLike) -> list[Receiver]:
    """Read unique, non-blacklisted UU nodes from a lon lat elev id file."""
    receivers: list[Receiver] = []
    with _open(path) as handle:
        for line_number, line in enumerate(handle, start=1):
            fields = [f for f in _NODAL_SEPARATORS.split(line) if f]
            if not fields:
                continue
            try:
                receiver = Receiver(network="UU", station=fields[3],
                                    latitude=float(fields[1]),
                                    longitude=float(fields[0]),
                                    depth=_round_half_away(float(fields[2])))
            except (IndexError, ValueError) as error:
                raise ValueError(
                    f"malformed node line {line_number}: {line.rstrip()}"
                ) from error
            if is_blacklisted(receiver.network, receiver.station):
                continue
            if receiver not in receivers:
                receivers.append(receiver)
    logger.info("Number of nodes: %d", len(receivers))
    return receivers


class GridPoints(NamedTuple):
    """Candidate source points: latitudes, longitudes (degrees), depths (km)."""

    latitudes: list[float]
    longitudes: list[float]
    depths: list[float]


def create_grid(lat0: float, lat1: float, n_lat: int,
                lon0: float, lon1: float, n_lon: int,
                z0: float, z1: float, n_dep: int) -> GridPoints:
    """Regular grid ordered by longitude, then latitude, then depth fastest."""
    if n_dep < 2 or n_lon < 2 or n_lat < 2:
        raise ValueError("need more than 2 grid points in x, y, z")
    d_lat = (lat1 - lat0) / (n_lat - 1)
    d_lon = (lon1 - lon0) / (n_lon - 1)
    d_dep = (z1 - z0) / (n_dep - 1)
    lats: list[float] = []
    lons: list[float] = []
    depths: list[float] = []
    for i_lon in range(n_lon):
        lon = lon0 + i_lon * d_lon
        for i_lat in range(n_lat):
            lat = lat0 + i_lat * d_lat
            for i_dep in range(n_dep):
                lons.append(lon)
                lats.append(lat)
                depths.append(z0 + i_dep * d_dep)
    logger.info("Number of points in grid: %d", len(depths))
    return GridPoints(lats, lons, depths)


def _grid_size(start: float, stop: float, delta: float, scale: float) -> int:
    return int(_round_half_away((stop - start) / delta * scale))


def create_source_points() -> GridPoints:
    """Coarse regional grid, a point at Bingham, and a fine grid near Magna."""
    delta_coarse = 4.0
    lat0c, lat1c = 40.5, 41.0
    lon0c, lon1c = -112.24, -111.76
    z0c, z1c = 1.5, 21.5
    coarse = create_grid(
        lat0c, lat1c, _grid_size(lat0c, lat1c, delta_coarse, _KM_PER_DEGREE),
        lon0c, lon1c, _grid_size(lon0c, lon1c, delta_coarse, _KM_PER_DEGREE),
        z0c, z1c, _grid_size(z0c, z1c, delta_coarse, 1.0))

    delta_fine = 1.25
    lat0f, lat1f = 40.6, 40.85
    lon0f, lon1f = -112.2, -111.8
    z0f, z1f = 0.0, 18.0
    fine = create_grid(
        lat0f, lat1f, _grid_size(lat0f, lat1f, delta_fine, _KM_PER_DEGREE),
        lon0f, lon1f, _grid_size(lon0f, lon1f, delta_fine, _KM_PER_DEGREE),
        z0f, z1f, _grid_size(z0f, z1f, delta_fine, 1.0))

    lat_b, lon_b, dep_b = _BINGHAM
    return GridPoints(
        coarse.latitudes + [lat_b] + fine.latitudes,
        coarse.longitudes + [lon_b] + fine.longitudes,
        coarse.depths + [dep_b] + fine.depths,
    )


def _geodesic_distance(lat1: float, lon1: float,
                       lat2: float, lon2: float) -> float:
    """WGS84 geodesic distance in metres (Vincenty's inverse formula)."""
    a, f = _WGS84_A, _WGS84_F
    b = (1.0 - f) * a
    big_l = math.radians(lon2 - lon1)
    u1 = math.atan((1.0 - f) * math.tan(math.radians(lat1)))
    u2 = math.atan((1.0 - f) * math.tan(math.radians(lat2)))
    sin_u1, cos_u1 = math.sin(u1), math.cos(u1)
    sin_u2, cos_u2 = math.sin(u2), math.cos(u2)
    lam = big_l
    for _ in range(200):
        sin_lam, cos_lam = math.sin(lam), math.cos(lam)
        sin_sigma = math.hypot(cos_u2 * sin_lam,
                               cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam)
        if sin_sigma == 0.0:
            return 0.0
        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = math.atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos2_alpha = 1.0 - sin_alpha * sin_alpha
        if cos2_alpha != 0.0:
            cos_2sm = cos_sigma - 2.0 * sin_u1 * sin_u2 / cos2_alpha
        else:
            cos_2sm = 0.0
        c = f / 16.0 * cos2_alpha * (4.0 + f * (4.0 - 3.0 * cos2_alpha))
        previous = lam
        lam = big_l + (1.0 - c) * f * sin_alpha * (
            sigma + c * sin_sigma * (
                cos_2sm + c * cos_sigma * (-1.0 + 2.0 * cos_2sm * cos_2sm)))
        if abs(lam - previous) < 1.0e-12:
            break
    else:
        raise ValueError("geodesic did not converge; points nearly antipodal")
    u_sq = cos2_alpha * (a * a - b * b) / (b * b)
    big_a = 1.0 + u_sq / 16384.0 * (
        4096.0 + u_sq * (-768.0 + u_sq * (320.0 - 175.0 * u_sq)))
    big_b = u_sq / 1024.0 * (
        256.0 + u_sq * (-128.0 + u_sq * (74.0 - 47.0 * u_sq)))
    delta_sigma = big_b * sin_sigma * (
        cos_2sm + big_b / 4.0 * (
            cos_sigma * (-1.0 + 2.0 * cos_2sm * cos_2sm)
            - big_b / 6.0 * cos_2sm * (-3.0 + 4.0 * sin_sigma * sin_sigma)
            * (-3.0 + 4.0 * cos_2sm * cos_2sm)))
    return b * big_a * (sigma - delta_sigma)


def compute_distances(receiver_latitude: float, receiver_longitude: float,
                      source_latitudes: Sequence[float],
                      source_longitudes: Sequence[float]) -> list[float]:
    """Source-to-receiver geodesic distances in kilometres."""
    if len(source_latitudes) != len(source_longitudes):
        raise ValueError("source latitudes and longitudes differ in length")
    return [
        _geodesic_distance(lat, lon, receiver_latitude,
                           receiver_longitude) * 1.0e-3
        for lat, lon in zip(source_latitudes, source_longitudes)
    ]