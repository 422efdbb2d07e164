#!/usr/bin/env python3
"""Print the GPS fix held in a simulator telemetry record.

Usage:
  gpssim-parse record.txt --spacecraft 0 --gps 0
  cat record.txt | gpssim-parse --full
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from gpssim.core.config import GPSParserConfig
from gpssim.core.log import configure_logging
from gpssim.telemetry.data_point import SimDataPoint
from gpssim.telemetry.gps_data_point import GPSParseError, GPSSimDataPoint


def _read_record(path: Optional[str]) -> SimDataPoint:
    if path is None or path == "-":
        return SimDataPoint.from_text(sys.stdin.read())
    return SimDataPoint.from_text(Path(path).read_text(encoding="utf-8"))


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Parse a GPS receiver fix from simulator telemetry")
    parser.add_argument("file", nargs="?", help="Telemetry record (default: stdin)")
    parser.add_argument("--spacecraft", type=int, default=0, help="Spacecraft index (default: 0)")
    parser.add_argument("--gps", type=int, default=0, help="GPS receiver index (default: 0)")
    parser.add_argument("--full", action="store_true", help="Single line, full precision output")
    parser.add_argument("--strict", action="store_true", help="Fail on any malformed or missing field")
    parser.add_argument(
        "--log-level",
        choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Diagnostics level on stderr (default: WARNING)",
    )
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    record = _read_record(args.file)

    try:
        point = GPSSimDataPoint(
            args.spacecraft,
            args.gps,
            record,
            config=GPSParserConfig(strict=args.strict, eager_parse=True),
        )
    except GPSParseError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(point.to_string() if args.full else point.to_formatted_string().rstrip("\n"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
