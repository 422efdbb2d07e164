"""
GPS Telemetry Processing
========================

Parsing of simulator GPS receiver telemetry into navigation fixes.
"""

from .data_point import SimDataPoint
from .gps_data_point import (
    GPSFix,
    GPSSimDataPoint,
    GPSParseError,
    GPSParseResult,
    ParseErrorKind,
    ParseIssue,
    gps_prefix,
    parse_gps_fix,
    scan_gps_lines,
)
from .telemetry_processor import TelemetryProcessor, TelemetryFrame

__all__ = [
    'SimDataPoint',
    'GPSFix',
    'GPSSimDataPoint',
    'GPSParseError',
    'GPSParseResult',
    'ParseErrorKind',
    'ParseIssue',
    'gps_prefix',
    'parse_gps_fix',
    'scan_gps_lines',
    'TelemetryProcessor',
    'TelemetryFrame',
]
