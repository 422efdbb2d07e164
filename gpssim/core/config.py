"""
Parser Configuration
====================

GPS telemetry parser and processor parameters.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from .time_manager import J2000_EPOCH_JD, GPS_EPOCH_JD


@dataclass
class GPSParserConfig:
    """GPS data point parsing options."""
    # Raise GPSParseError after the scan when any field failed
    strict: bool = False
    # Parse in the constructor instead of on first access
    eager_parse: bool = False
    # Absolute time is measured in seconds from this Julian Date
    abs_time_epoch_jd: float = J2000_EPOCH_JD

    def __post_init__(self):
        """Validate configuration."""
        assert self.abs_time_epoch_jd >= GPS_EPOCH_JD, "Epoch before GPS epoch"


@dataclass
class ProcessorConfig:
    """Telemetry processor configuration."""
    # (spacecraft, receiver) pairs to build data points for
    receivers: List[Tuple[int, int]] = field(default_factory=lambda: [(0, 0)])
    max_history: int = 10000
    parser: GPSParserConfig = field(default_factory=GPSParserConfig)

    def __post_init__(self):
        """Validate configuration."""
        assert self.max_history > 0, "History size must be positive"
        assert len(self.receivers) > 0, "At least one receiver required"
        for spacecraft, gps in self.receivers:
            assert spacecraft >= 0 and gps >= 0, "Receiver ids must be non-negative"


# Pre-defined configurations
def create_default_config() -> ProcessorConfig:
    """Create configuration for a single receiver on spacecraft 0."""
    return ProcessorConfig()


def create_strict_config() -> ProcessorConfig:
    """Create configuration that parses eagerly and rejects bad fields."""
    return ProcessorConfig(
        parser=GPSParserConfig(strict=True, eager_parse=True),
    )
