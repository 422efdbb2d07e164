"""
GPS Simulation Data Point
=========================

GPS receiver fix parsed from simulator telemetry lines.

A receiver's lines share the prefix ``SC[<spacecraft>].AC.GPS[<gps>].``::

    SC[0].AC.GPS[0].Rollover = 2
    SC[0].AC.GPS[0].Week = 100
    SC[0].AC.GPS[0].Sec = 50000.25
    SC[0].AC.GPS[0].PosN = 1000.0, 2000.0, 3000.0
    SC[0].AC.GPS[0].Lat = 0.5

Units: positions in m, velocities in m/s, latitude/longitude in radians on
input and degrees once parsed, altitude in m above the WGS-84 ellipsoid.
PosN/VelN are inertial (ECI), PosW/VelW are Earth-fixed (ECEF).
"""

import logging
import re
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import numpy as np

from ..core.config import GPSParserConfig
from ..core.log import TRACE, get_logger
from ..core.time_manager import (
    J2000_EPOCH_JD,
    gps_time_to_julian_date,
    julian_date_to_abs_time,
    jd_to_datetime,
)
from .field_parsers import (
    FieldCoercionError,
    MalformedVectorError,
    INT16_RANGE,
    parse_float,
    parse_int,
    parse_vector,
    split_seconds,
    split_value,
)


_logger = get_logger(__name__)

# Field tag at the start of the text following the prefix
_TAG_PATTERN = re.compile(r'([A-Za-z_]\w*)(?=[\s=])')


class ParseErrorKind(IntEnum):
    """Kinds of problems found while parsing a data point."""
    MISSING_PREFIX_MATCH = 0
    FIELD_COERCION = 1
    MALFORMED_VECTOR = 2


@dataclass
class ParseIssue:
    """A problem recorded during parsing."""
    kind: ParseErrorKind
    message: str
    tag: Optional[str] = None
    line: Optional[str] = None


class GPSParseError(Exception):
    """Raised in strict mode when parsing recorded any issue."""

    def __init__(self, issues: Iterable[ParseIssue]):
        self.issues = list(issues)
        summary = "; ".join(issue.message for issue in self.issues)
        super().__init__(f"{len(self.issues)} GPS parse issue(s): {summary}")


def _zero_vector() -> np.ndarray:
    return np.zeros(3)


def _frozen_vector(values, name: str) -> np.ndarray:
    vector = np.array(values, dtype=np.float64)
    if vector.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {vector.shape}")
    vector.setflags(write=False)
    return vector


@dataclass(frozen=True, eq=False)
class GPSFix:
    """Parsed GPS receiver fix."""
    abs_time: float = 0.0  # s since the absolute time epoch
    gps_rollover: int = 0
    gps_week: int = 0  # Week within the current rollover
    gps_sec_week: int = 0  # Integer seconds since the start of the week
    gps_frac_sec: float = 0.0  # Fraction beyond gps_sec_week
    ecef_pos: np.ndarray = field(default_factory=_zero_vector)  # m
    ecef_vel: np.ndarray = field(default_factory=_zero_vector)  # m/s
    eci_pos: np.ndarray = field(default_factory=_zero_vector)  # m
    eci_vel: np.ndarray = field(default_factory=_zero_vector)  # m/s
    lat_deg: float = 0.0
    lng_deg: float = 0.0
    alt_m: float = 0.0  # m above WGS-84 ellipsoid

    VECTOR_FIELDS = ('ecef_pos', 'ecef_vel', 'eci_pos', 'eci_vel')

    def __post_init__(self):
        for name in self.VECTOR_FIELDS:
            object.__setattr__(self, name, _frozen_vector(getattr(self, name), name))

    @property
    def seconds_of_week(self) -> float:
        """Seconds of week, integer and fractional parts combined."""
        return self.gps_sec_week + self.gps_frac_sec

    @property
    def julian_date(self) -> float:
        """Julian Date of the GPS time fields."""
        return gps_time_to_julian_date(self.gps_rollover, self.gps_week, self.seconds_of_week)

    def __eq__(self, other) -> bool:
        if not isinstance(other, GPSFix):
            return NotImplemented
        scalars = ('abs_time', 'gps_rollover', 'gps_week', 'gps_sec_week',
                   'gps_frac_sec', 'lat_deg', 'lng_deg', 'alt_m')
        return all(getattr(self, n) == getattr(other, n) for n in scalars) and \
            all(np.array_equal(getattr(self, n), getattr(other, n)) for n in self.VECTOR_FIELDS)


@dataclass
class GPSParseResult:
    """Fix plus parse diagnostics."""
    fix: GPSFix
    issues: List[ParseIssue] = field(default_factory=list)
    matched_lines: int = 0  # Lines carrying the receiver prefix

    @property
    def any_field_matched(self) -> bool:
        return self.matched_lines > 0


def gps_prefix(spacecraft: int, gps: int) -> str:
    """
    Build the line prefix for one receiver.

    Args:
        spacecraft: Spacecraft index
        gps: GPS receiver index on that spacecraft

    Returns:
        Prefix such as 'SC[0].AC.GPS[1].'
    """
    for name, value in (('spacecraft', spacecraft), ('gps', gps)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 0:
            raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
    return f"SC[{int(spacecraft)}].AC.GPS[{int(gps)}]."


# Field handlers: value text -> GPSFix attributes
def _parse_rollover(value: str) -> Dict:
    return {'gps_rollover': parse_int(value, INT16_RANGE)}


def _parse_week(value: str) -> Dict:
    return {'gps_week': parse_int(value, INT16_RANGE)}


def _parse_sec(value: str) -> Dict:
    sec_week, frac_sec = split_seconds(parse_float(value))
    return {'gps_sec_week': sec_week, 'gps_frac_sec': frac_sec}


def _vector_handler(name: str) -> Callable[[str], Dict]:
    return lambda value: {name: parse_vector(value)}


def _angle_handler(name: str) -> Callable[[str], Dict]:
    return lambda value: {name: parse_float(value) * 180.0 / np.pi}


def _parse_alt(value: str) -> Dict:
    return {'alt_m': parse_float(value)}


FIELD_HANDLERS: Dict[str, Callable[[str], Dict]] = {
    'Rollover': _parse_rollover,
    'Week': _parse_week,
    'Sec': _parse_sec,
    'PosN': _vector_handler('eci_pos'),
    'VelN': _vector_handler('eci_vel'),
    'PosW': _vector_handler('ecef_pos'),
    'VelW': _vector_handler('ecef_vel'),
    'Lng': _angle_handler('lng_deg'),
    'Lat': _angle_handler('lat_deg'),
    'Alt': _parse_alt,
}


def scan_gps_lines(lines: Iterable[str],
                   prefix: str,
                   logger: Optional[logging.Logger] = None,
                   epoch_jd: float = J2000_EPOCH_JD,
                   strict: bool = False) -> GPSParseResult:
    """
    Parse one receiver's fields out of telemetry lines.

    Lines not starting with prefix are skipped, as are unknown field tags.
    When a tag appears more than once the last line wins. A field whose
    value cannot be parsed keeps its previous value and an issue is
    recorded. Absolute time is always computed from the GPS time fields
    held after the scan, zeros included.

    Args:
        lines: Telemetry lines
        prefix: Receiver prefix, see gps_prefix()
        logger: Diagnostics logger (default: package logger)
        epoch_jd: Julian Date of absolute time zero
        strict: Raise GPSParseError if any issue was recorded

    Returns:
        GPSParseResult
    """
    logger = logger or _logger
    values: Dict = {}
    issues: List[ParseIssue] = []
    matched = 0

    for line in lines:
        if not line.startswith(prefix):
            continue
        matched += 1
        logger.log(TRACE, "Found a line with prefix %s: %s", prefix, line)

        remainder = line[len(prefix):]
        match = _TAG_PATTERN.match(remainder)
        tag = match.group(1) if match else None
        if tag not in FIELD_HANDLERS:
            logger.log(TRACE, "Ignoring unrecognized field in line: %s", line)
            continue

        value = split_value(remainder)
        try:
            if value is None:
                raise FieldCoercionError(f"no '=' in {tag} line")
            parsed = FIELD_HANDLERS[tag](value)
        except MalformedVectorError as e:
            issues.append(ParseIssue(ParseErrorKind.MALFORMED_VECTOR, str(e), tag, line))
            logger.error("Failed to parse %s vector: %s", tag, e)
            continue
        except FieldCoercionError as e:
            issues.append(ParseIssue(ParseErrorKind.FIELD_COERCION, str(e), tag, line))
            logger.error("Failed to parse %s field: %s", tag, e)
            continue

        values.update(parsed)
        logger.log(TRACE, "Parsed %s: rhs=%s, %s", tag, value, parsed)

    if matched == 0:
        message = f"no line matched prefix {prefix}"
        issues.append(ParseIssue(ParseErrorKind.MISSING_PREFIX_MATCH, message))
        logger.warning("No GPS data found: %s", message)

    jd = gps_time_to_julian_date(
        values.get('gps_rollover', 0),
        values.get('gps_week', 0),
        values.get('gps_sec_week', 0) + values.get('gps_frac_sec', 0.0),
    )
    fix = GPSFix(abs_time=julian_date_to_abs_time(jd, epoch_jd), **values)

    logger.debug("Parsed data point:\n%s", format_fix_line(fix))

    if strict and issues:
        raise GPSParseError(issues)

    return GPSParseResult(fix=fix, issues=issues, matched_lines=matched)


def parse_gps_fix(lines: Iterable[str],
                  prefix: str,
                  logger: Optional[logging.Logger] = None,
                  epoch_jd: float = J2000_EPOCH_JD,
                  strict: bool = False) -> GPSFix:
    """Parse a receiver's fix; see scan_gps_lines() for the rules."""
    return scan_gps_lines(lines, prefix, logger=logger, epoch_jd=epoch_jd, strict=strict).fix


def format_fix_block(fix: GPSFix) -> str:
    """Block formatted, fixed-width representation of a fix."""
    def row(label: str, values) -> str:
        return f"  {label:<45}: " + ",".join(f"{v:12.2f}" for v in values) + "\n"

    return (
        "GPS Data Point: \n"
        f"  {'Absolute Time':<45}: {fix.abs_time:15.4f}\n"
        f"  {'GPS Rollover, Week, Second, Fractional Second':<45}: "
        f"{fix.gps_rollover:6d},{fix.gps_week:6d},{fix.gps_sec_week:7d},{fix.gps_frac_sec:7.4f}\n"
        + row("ECEF", fix.ecef_pos)
        + row("ECEF Velocity", fix.ecef_vel)
        + row("ECI", fix.eci_pos)
        + row("ECI Velocity", fix.eci_vel)
        + row("Geodetic Lat/Lng/Alt(m above WGS-84)", (fix.lat_deg, fix.lng_deg, fix.alt_m))
    )


def format_fix_line(fix: GPSFix) -> str:
    """Single line, full precision representation of a fix."""
    def full(values) -> str:
        return ",".join(repr(float(v)) for v in values)

    return (
        f"GPS Data Point:  AbsTime: {float(fix.abs_time)!r}"
        f" GPS Time: {fix.gps_rollover}/{fix.gps_week}/{fix.gps_sec_week}/{float(fix.gps_frac_sec)!r}"
        f" ECEF: {full(fix.ecef_pos)}"
        f" ECEF Velocity: {full(fix.ecef_vel)}"
        f" ECI: {full(fix.eci_pos)}"
        f" ECI Velocity: {full(fix.eci_vel)}"
        f" Geodetic Lat/Lng/Alt(m above WGS-84): {full((fix.lat_deg, fix.lng_deg, fix.alt_m))}"
    )


class GPSSimDataPoint:
    """
    GPS data for one receiver at one simulation time.

    Built either from explicit values (already parsed) or from a telemetry
    data point plus spacecraft/receiver ids, in which case parsing happens
    on the first accessor call and only once. The parsed/unparsed switch
    is guarded by a lock so instances can be shared between threads.
    """

    def __init__(self,
                 spacecraft: Optional[int] = None,
                 gps: Optional[int] = None,
                 data_point: Optional[Iterable[str]] = None,
                 config: Optional[GPSParserConfig] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize GPS data point.

        Without data_point the instance holds an all-zero fix.

        Args:
            spacecraft: Spacecraft index
            gps: GPS receiver index
            data_point: Telemetry lines (SimDataPoint or iterable of str)
            config: Parser options
            logger: Diagnostics logger (default: package logger)
        """
        self.config = config or GPSParserConfig()
        self._logger = logger or _logger
        self._lock = threading.Lock()
        self._spacecraft = spacecraft
        self._gps = gps
        self._issues: Tuple[ParseIssue, ...] = ()
        self._matched_lines = 0

        if data_point is None:
            self._prefix: Optional[str] = None
            self._lines: Optional[Tuple[str, ...]] = None
            self._fix: Optional[GPSFix] = GPSFix()
            self._parsed = True
            return

        self._prefix = gps_prefix(spacecraft, gps)
        self._lines = tuple(data_point)
        self._fix = None
        self._parsed = False
        self._logger.log(TRACE, "Created instance using sc=%s, gps=%s, lines=%d",
                         spacecraft, gps, len(self._lines))

        if self.config.eager_parse:
            self._parse_data_point()

    @classmethod
    def from_values(cls,
                    abs_time: float,
                    gps_week: int,
                    gps_sec_week: int,
                    gps_frac_sec: float,
                    ecef_pos,
                    ecef_vel,
                    eci_pos,
                    eci_vel,
                    gps_rollover: int = 0,
                    lat_deg: float = 0.0,
                    lng_deg: float = 0.0,
                    alt_m: float = 0.0) -> 'GPSSimDataPoint':
        """Create an already parsed data point from explicit values."""
        point = cls()
        point._fix = GPSFix(
            abs_time=abs_time,
            gps_rollover=gps_rollover,
            gps_week=gps_week,
            gps_sec_week=gps_sec_week,
            gps_frac_sec=gps_frac_sec,
            ecef_pos=ecef_pos,
            ecef_vel=ecef_vel,
            eci_pos=eci_pos,
            eci_vel=eci_vel,
            lat_deg=lat_deg,
            lng_deg=lng_deg,
            alt_m=alt_m,
        )
        return point

    def _parse_data_point(self) -> GPSFix:
        if self._parsed:
            return self._fix
        with self._lock:
            if not self._parsed:
                self._do_parsing()
        return self._fix

    def _do_parsing(self):
        result = scan_gps_lines(
            self._lines,
            self._prefix,
            logger=self._logger,
            epoch_jd=self.config.abs_time_epoch_jd,
        )
        self._fix = result.fix
        self._issues = tuple(result.issues)
        self._matched_lines = result.matched_lines
        self._lines = None
        self._parsed = True

        if self.config.strict and self._issues:
            raise GPSParseError(self._issues)

    # State and diagnostics

    @property
    def is_parsed(self) -> bool:
        return self._parsed

    @property
    def spacecraft(self) -> Optional[int]:
        return self._spacecraft

    @property
    def gps(self) -> Optional[int]:
        return self._gps

    @property
    def prefix(self) -> Optional[str]:
        return self._prefix

    @property
    def fix(self) -> GPSFix:
        return self._parse_data_point()

    @property
    def issues(self) -> Tuple[ParseIssue, ...]:
        """Problems recorded while parsing (empty for explicit values)."""
        self._parse_data_point()
        return self._issues

    @property
    def has_data(self) -> bool:
        """False when parsing found no line for this receiver."""
        self._parse_data_point()
        return self._prefix is None or self._matched_lines > 0

    # Accessors

    @property
    def abs_time(self) -> float:
        return self._parse_data_point().abs_time

    @property
    def gps_rollover(self) -> int:
        return self._parse_data_point().gps_rollover

    @property
    def gps_week(self) -> int:
        return self._parse_data_point().gps_week

    @property
    def gps_sec_week(self) -> int:
        return self._parse_data_point().gps_sec_week

    @property
    def gps_frac_sec(self) -> float:
        return self._parse_data_point().gps_frac_sec

    @property
    def seconds_of_week(self) -> float:
        return self._parse_data_point().seconds_of_week

    @property
    def gps_datetime(self) -> datetime:
        """Calendar date of the GPS time fields (GPS time scale, no leap seconds)."""
        return jd_to_datetime(self._parse_data_point().julian_date)

    @property
    def ecef_pos(self) -> np.ndarray:
        return self._parse_data_point().ecef_pos

    @property
    def ecef_vel(self) -> np.ndarray:
        return self._parse_data_point().ecef_vel

    @property
    def eci_pos(self) -> np.ndarray:
        return self._parse_data_point().eci_pos

    @property
    def eci_vel(self) -> np.ndarray:
        return self._parse_data_point().eci_vel

    @property
    def lat_deg(self) -> float:
        return self._parse_data_point().lat_deg

    @property
    def lng_deg(self) -> float:
        return self._parse_data_point().lng_deg

    @property
    def alt_m(self) -> float:
        return self._parse_data_point().alt_m

    @property
    def ecef_x(self) -> float:
        return float(self.ecef_pos[0])

    @property
    def ecef_y(self) -> float:
        return float(self.ecef_pos[1])

    @property
    def ecef_z(self) -> float:
        return float(self.ecef_pos[2])

    @property
    def ecef_vx(self) -> float:
        return float(self.ecef_vel[0])

    @property
    def ecef_vy(self) -> float:
        return float(self.ecef_vel[1])

    @property
    def ecef_vz(self) -> float:
        return float(self.ecef_vel[2])

    # Representations

    def to_formatted_string(self) -> str:
        """Block formatted string representation of the data point."""
        return format_fix_block(self._parse_data_point())

    def to_string(self) -> str:
        """Single line, full precision string representation of the data point."""
        return format_fix_line(self._parse_data_point())

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        state = "parsed" if self._parsed else "unparsed"
        return f"GPSSimDataPoint(sc={self._spacecraft}, gps={self._gps}, {state})"
