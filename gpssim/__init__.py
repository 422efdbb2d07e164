"""
GPS Simulation Telemetry
========================

Parses a spacecraft simulator's GPS receiver telemetry into time-stamped
navigation fixes.

Components:
- Simulation data points (raw telemetry lines for one time-step)
- GPS data points (lazy, memoised parsing of one receiver's fields)
- GPS time to Julian Date to absolute time conversion
- Telemetry processor (per-receiver data points, history, callbacks)
"""

__version__ = "1.0.0"

from gpssim.telemetry.data_point import SimDataPoint
from gpssim.telemetry.gps_data_point import GPSFix, GPSSimDataPoint, GPSParseError
from gpssim.telemetry.telemetry_processor import TelemetryProcessor

__all__ = [
    'SimDataPoint',
    'GPSFix',
    'GPSSimDataPoint',
    'GPSParseError',
    'TelemetryProcessor',
]
