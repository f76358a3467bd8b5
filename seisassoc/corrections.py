"""Phase picks in NonLinLoc observation format and static corrections."""

from __future__ import annotations

import calendar
import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from os import PathLike
from typing import Iterable

from seisassoc.stations import is_blacklisted, is_collocated

logger = logging.getLogger(__name__)

_CSV_SEPARATORS = re.compile(r"[,\n\t]+")


class Polarity(Enum):
    """First-motion polarity of a pick."""

    UNKNOWN = 0
    COMPRESSIONAL = 1
    DILATATIONAL = -1


@dataclass(frozen=True)
class StaticCorrection:
    """A static time correction in seconds for one network/station/phase."""

    network: str
    station: str
    phase: str
    correction: float


class StaticCorrections:
    """Static corrections read from a network,station,phase,correction CSV."""

    def __init__(self, corrections: Iterable[StaticCorrection] = ()) -> None:
        self.corrections: list[StaticCorrection] = list(corrections)

    def __len__(self) -> int:
        return len(self.corrections)

    def read(self, path: str | PathLike, header: bool = True) -> None:
        """Replace the corrections with those in the CSV file."""
        self.corrections.clear()
        try:
            handle = open(path, encoding="utf-8")
        except OSError as error:
            raise FileNotFoundError(f"Could not open: {path}") from error
        with handle:
            for line_number, line in enumerate(handle, start=1):
                if header and line_number == 1:
                    continue
                fields = [f for f in _CSV_SEPARATORS.split(line) if f != ""]
                if not fields:
                    continue
                try:
                    correction = StaticCorrection(
                        network=fields[0],
                        station=fields[1],
                        phase=fields[2],
                        correction=float(fields[3]),
                    )
                except (IndexError, ValueError) as error:
                    raise ValueError(
                        f"malformed correction line {line_number}: "
                        f"{line.rstrip()}") from error
                self.corrections.append(correction)

    def correction(self, network: str, station: str, phase: str) -> float:
        """The first matching correction, or 0 when there is none."""
        return next(
            (c.correction for c in self.corrections
             if (c.network, c.station, c.phase) == (network, station, phase)),
            0.0,
        )


@dataclass
class PhasePick:
    """A phase pick on a channel."""

    network: str
    station: str
    channel: str
    phase: str
    time: float
    standard_deviation: float
    location_code: str = "01"
    polarity: Polarity = Polarity.UNKNOWN
    polarity_weight: float = 1.0
    identifier: int = 0
    static_correction: float = 0.0


def parse_pick_line(line: str, heuristic_weight: bool = True,
                    p_modeling_error: float = 0.1,
                    s_modeling_error: float = 0.2) -> PhasePick | None:
    """Parse one NonLinLoc observation line.

    Returns None when the station is blacklisted.  The pick's standard
    deviation is that of a uniform distribution whose width is either a
    heuristic or the line's error magnitude plus a modelling error.
    """
    tokens = line.split()
    try:
        station, network, component = tokens[0], tokens[1], tokens[2]
        phase, first_motion = tokens[4], tokens[5]
        date, hour_minute = tokens[6], tokens[7]
        year, month, day = int(date[:4]), int(date[4:6]), int(date[6:8])
        hour, minute = int(hour_minute[:2]), int(hour_minute[2:4])
        seconds = float(tokens[8])
        error_magnitude = float(tokens[10])
        coda_duration = float(tokens[11])
    except (IndexError, ValueError) as error:
        raise ValueError(f"malformed pick line: {line.rstrip()}") from error

    if is_blacklisted(network, station):
        return None

    polarity = Polarity.UNKNOWN
    if first_motion.startswith("D"):
        polarity = Polarity.DILATATIONAL
    elif first_motion.startswith("C"):
        polarity = Polarity.COMPRESSIONAL

    whole_seconds = int(seconds)
    microseconds = round((seconds - whole_seconds) * 1.0e6)
    epoch = calendar.timegm((year, month, day, hour, minute, 0, 0, 0, 0))
    time = epoch + whole_seconds + microseconds * 1.0e-6

    if heuristic_weight:
        if phase == "P" and polarity is Polarity.UNKNOWN:
            width = 0.2
        else:
            width = 0.35
    elif phase == "P":
        width = error_magnitude + p_modeling_error
    else:
        width = error_magnitude + s_modeling_error

    return PhasePick(
        network=network,
        station=station,
        channel=component,
        phase=phase,
        time=time,
        standard_deviation=width / math.sqrt(12.0),
        location_code="01",
        polarity=polarity,
        polarity_weight=coda_duration,
    )


def _band_code(channel: str) -> str:
    return channel[1] if len(channel) > 1 else ""


def remove_duplicate_picks(picks: list[PhasePick], ptol: float = 0.2,
                           stol: float = 0.4) -> list[PhasePick]:
    """Drop duplicate picks made on different channels of collocated stations.

    A pick with a known polarity beats one without; otherwise a high-gain
    channel beats a strong-motion channel; otherwise the later pick wins.
    """
    remove = [False] * len(picks)
    for i, pick in enumerate(picks):
        if remove[i]:
            continue
        if not is_collocated(pick.network, pick.station):
            continue
        tol = stol if pick.phase == "S" else ptol
        for j in range(i + 1, len(picks)):
            other = picks[j]
            if abs(pick.time - other.time) > tol:
                continue
            if (pick.network, pick.station, pick.phase) != \
                    (other.network, other.station, other.phase):
                continue
            unknown = Polarity.UNKNOWN
            if pick.polarity is unknown and other.polarity is not unknown:
                remove[i], remove[j] = True, False
                continue
            if other.polarity is unknown and pick.polarity is not unknown:
                remove[i], remove[j] = False, True
                continue
            band, other_band = _band_code(pick.channel), _band_code(other.channel)
            if band == "H" and other_band == "N":
                remove[i], remove[j] = False, True
            elif band == "N" and other_band == "H":
                remove[i], remove[j] = True, False
            else:
                remove[i], remove[j] = True, False
                logger.info("Possible duplicate? %s.%s.%s %s.%s.%s",
                            pick.network, pick.station, pick.channel,
                            other.network, other.station, other.channel)
    n_remove = sum(remove)
    if n_remove:
        logger.info("Removing %d picks", n_remove)
    return [pick for pick, dropped in zip(picks, remove) if not dropped]