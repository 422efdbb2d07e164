"""
Telemetry Processor
===================

Builds GPS data points from simulator telemetry, one per receiver and
time-step.
"""

import time
from typing import Callable, Optional, List, Dict, Iterable, Union
from dataclasses import dataclass, replace
from queue import Queue, Empty
import threading

from ..core.config import ProcessorConfig
from ..core.log import get_logger
from .data_point import SimDataPoint
from .gps_data_point import GPSSimDataPoint, GPSParseError


logger = get_logger(__name__)


@dataclass
class TelemetryFrame:
    """GPS data point received for one receiver."""
    timestamp: float
    spacecraft: int
    gps: int
    data_point: GPSSimDataPoint


class TelemetryProcessor:
    """
    Main telemetry processing class.

    Turns each incoming simulation data point into lazily parsed GPS data
    points and dispatches them to callbacks.
    """

    def __init__(self, config: ProcessorConfig = None):
        """
        Initialize telemetry processor.

        Args:
            config: Processor configuration
        """
        self.config = config or ProcessorConfig()

        # Strict parse failures must surface here, not inside a callback
        self._parser_config = self.config.parser
        if self._parser_config.strict and not self._parser_config.eager_parse:
            self._parser_config = replace(self._parser_config, eager_parse=True)

        # Callbacks
        self._gps_callbacks: List[Callable[[TelemetryFrame], None]] = []

        # Processing queue
        self._queue: Queue = Queue()
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

        # Statistics
        self.stats = {
            'records_received': 0,
            'frames_processed': 0,
            'parse_errors': 0,
            'errors': 0,
        }

        # History
        self._history: List[TelemetryFrame] = []

    def register_gps_callback(self, callback: Callable[[TelemetryFrame], None]):
        """Register callback for GPS frames."""
        self._gps_callbacks.append(callback)

    def process_record(self, record: Union[SimDataPoint, Iterable[str]]) -> List[TelemetryFrame]:
        """
        Process one simulation time-step.

        Args:
            record: Telemetry lines for the time-step

        Returns:
            List of frames, one per configured receiver
        """
        if not isinstance(record, SimDataPoint):
            record = SimDataPoint(record)

        frames = []
        with self._lock:
            self.stats['records_received'] += 1

        for spacecraft, gps in self.config.receivers:
            try:
                point = GPSSimDataPoint(spacecraft, gps, record, config=self._parser_config)
            except GPSParseError as e:
                with self._lock:
                    self.stats['parse_errors'] += 1
                logger.error("Dropping GPS data for SC[%d] GPS[%d]: %s", spacecraft, gps, e)
                continue

            frame = TelemetryFrame(
                timestamp=time.time(),
                spacecraft=spacecraft,
                gps=gps,
                data_point=point,
            )
            frames.append(frame)

            with self._lock:
                self.stats['frames_processed'] += 1
                # Store in history
                self._history.append(frame)
                if len(self._history) > self.config.max_history:
                    self._history.pop(0)

            self._dispatch(frame)

        return frames

    def process_text(self, text: str) -> List[TelemetryFrame]:
        """Process one time-step given as a block of text."""
        return self.process_record(SimDataPoint.from_text(text))

    def _dispatch(self, frame: TelemetryFrame):
        """Dispatch frame to callbacks."""
        for cb in self._gps_callbacks:
            try:
                cb(frame)
            except Exception:
                with self._lock:
                    self.stats['errors'] += 1
                logger.exception("GPS callback failed for SC[%d] GPS[%d]", frame.spacecraft, frame.gps)

    def start_async_processing(self):
        """Start asynchronous processing thread."""
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(target=self._process_loop, daemon=True)
        self._thread.start()

    def stop_async_processing(self, timeout: float = 1.0):
        """Stop asynchronous processing after the queue drains."""
        if self._thread:
            self._queue.join()
        self._running = False
        if self._thread:
            self._thread.join(timeout=timeout)
            self._thread = None

    def queue_record(self, record: Union[SimDataPoint, Iterable[str]]):
        """Queue a record for async processing."""
        self._queue.put(record)

    def _process_loop(self):
        """Async processing loop."""
        while self._running:
            try:
                record = self._queue.get(timeout=0.1)
            except Empty:
                continue
            try:
                self.process_record(record)
            except Exception:
                with self._lock:
                    self.stats['errors'] += 1
                logger.exception("Failed to process telemetry record")
            finally:
                self._queue.task_done()

    def get_latest(self, count: int = 10) -> List[TelemetryFrame]:
        """Get latest telemetry frames."""
        with self._lock:
            return self._history[-count:]

    def get_statistics(self) -> Dict:
        """Get processing statistics."""
        with self._lock:
            return {
                **self.stats,
                'history_size': len(self._history),
            }

    def clear_history(self):
        """Clear history."""
        with self._lock:
            self._history.clear()
