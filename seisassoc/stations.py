"""Station lists with static corrections, and station screening rules."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from os import PathLike

logger = logging.getLogger(__name__)

_BLACKLISTED = {("UU", "136"), ("UU", "229")}
_COLLOCATED = {("UU", "CTU"), ("UU", "MID"), ("UU", "NOQ"), ("UU", "WTU")}


def is_blacklisted(network: str, station: str) -> bool:
    """True for nodal stations known to have timing issues."""
    return (network, station) in _BLACKLISTED


def is_collocated(network: str, station: str) -> bool:
    """True for collocated stations that may produce duplicate picks."""
    return (network, station) in _COLLOCATED


@dataclass(frozen=True)
class _StationEntry:
    latitude: float
    longitude: float
    elevation: float
    p_correction: float
    s_correction: float


class HypoStation:
    """Station file with static corrections, as used by HypoDD.

    The first correction column is the P correction and the second the S
    correction, both in seconds.  Longitudes in the file are positive west
    and are stored positive east.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], _StationEntry] = {}

    def clear(self) -> None:
        """Forget all stations."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def read(self, path: str | PathLike) -> None:
        """Read a station file, keeping the first line for each station."""
        self.clear()
        try:
            handle = open(path, encoding="utf-8")
        except FileNotFoundError as error:
            raise FileNotFoundError(f"file = {path} does not exist") from error
        with handle:
            for line_number, line in enumerate(handle, start=1):
                fields = line.split()
                if not fields:
                    continue
                try:
                    station, network = fields[0], fields[1]
                    # Lines that differ only by channel repeat a station.
                    if (network, station) in self._entries:
                        continue
                    latitude = float(fields[3]) + float(fields[4]) / 60.0
                    longitude = float(fields[5]) + float(fields[6]) / 60.0
                    entry = _StationEntry(
                        latitude=latitude,
                        longitude=-longitude,
                        elevation=float(fields[7]),
                        p_correction=float(fields[10]),
                        s_correction=float(fields[11]),
                    )
                except (IndexError, ValueError) as error:
                    raise ValueError(
                        f"malformed station line {line_number}: {line.rstrip()}"
                    ) from error
                self._entries[(network, station)] = entry

    def position(self, network: str, station: str) -> tuple[float, float, float]:
        """Latitude, longitude and elevation of a station."""
        entry = self._entries.get((network, station))
        if entry is None:
            raise KeyError(f"cant find {network}.{station}")
        return entry.latitude, entry.longitude, entry.elevation

    def correction(self, network: str, station: str, phase: str) -> float:
        """Static correction for the phase; anything but P counts as S."""
        if phase == "P":
            return self.p_correction(network, station)
        return self.s_correction(network, station)

    def _entry_or_warn(self, network: str, station: str) -> _StationEntry | None:
        entry = self._entries.get((network, station))
        if entry is None:
            logger.warning("Couldnt find: %s.%s", network, station)
        return entry

    def p_correction(self, network: str, station: str) -> float:
        """P static correction, or 0 for an unknown station."""
        entry = self._entry_or_warn(network, station)
        return entry.p_correction if entry else 0.0

    def s_correction(self, network: str, station: str) -> float:
        """S static correction, or 0 for an unknown station."""
        entry = self._entry_or_warn(network, station)
        return entry.s_correction if entry else 0.0