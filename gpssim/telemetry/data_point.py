"""
Simulation Data Point
=====================

One time-step snapshot of simulator telemetry as text lines.
"""

from typing import Iterable, Iterator, Tuple


class SimDataPoint:
    """
    Ordered, read-only sequence of simulator output lines.

    Each line has the form ``<prefix>.<Field> = <value...>``, e.g.
    ``SC[0].AC.GPS[0].Week = 100``.
    """

    def __init__(self, lines: Iterable[str] = ()):
        """
        Initialize data point.

        Args:
            lines: Telemetry lines, trailing newlines are removed
        """
        self._lines: Tuple[str, ...] = tuple(line.rstrip('\r\n') for line in lines)

    @classmethod
    def from_text(cls, text: str) -> 'SimDataPoint':
        """Create from a block of text, one statement per line."""
        return cls(line for line in text.splitlines() if line.strip())

    @property
    def lines(self) -> Tuple[str, ...]:
        return self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __eq__(self, other) -> bool:
        if not isinstance(other, SimDataPoint):
            return NotImplemented
        return self._lines == other._lines

    def __hash__(self) -> int:
        return hash(self._lines)

    def to_string(self) -> str:
        """Single string representation, lines separated by newlines."""
        return "\n".join(self._lines)

    def __repr__(self) -> str:
        return f"SimDataPoint(lines={len(self._lines)})"
