"""
Core Module
===========

Time conversions, configuration and logging.
"""

from .config import GPSParserConfig, ProcessorConfig
from .log import get_logger, configure_logging, TRACE
from .time_manager import (
    gps_time_to_julian_date,
    julian_date_to_abs_time,
    gps_time_to_abs_time,
)

__all__ = [
    'GPSParserConfig',
    'ProcessorConfig',
    'get_logger',
    'configure_logging',
    'TRACE',
    'gps_time_to_julian_date',
    'julian_date_to_abs_time',
    'gps_time_to_abs_time',
]
