"""
Field Parsers
=============

Numeric coercion of telemetry field values.
"""

import re
from typing import Optional

import numpy as np


_VECTOR_SEPARATOR = re.compile(r'[,\s]+')

# Plain decimal literals only: no digit separators, nan or infinity
_INT_PATTERN = re.compile(r'[+-]?\d+')
_FLOAT_PATTERN = re.compile(r'[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?')


class FieldCoercionError(ValueError):
    """A field value could not be converted to the expected number."""


class MalformedVectorError(FieldCoercionError):
    """A vector field did not hold exactly three numbers."""


def split_value(line: str) -> Optional[str]:
    """
    Return the text after the first '=' of a line, stripped.

    Returns:
        Value text, or None if the line has no '='
    """
    _, sep, value = line.partition('=')
    if not sep:
        return None
    return value.strip()


INT16_RANGE = (-2**15, 2**15 - 1)
INT32_RANGE = (-2**31, 2**31 - 1)


def parse_int(value: str, bounds=INT16_RANGE) -> int:
    """
    Parse an integer field.

    Args:
        value: Field text
        bounds: Inclusive (min, max) the result must fit in

    Returns:
        Parsed integer
    """
    text = value.strip()
    if not _INT_PATTERN.fullmatch(text):
        raise FieldCoercionError(f"invalid integer: {value!r}")
    result = int(text)
    if not bounds[0] <= result <= bounds[1]:
        raise FieldCoercionError(f"integer out of range {bounds}: {result}")
    return result


def parse_float(value: str) -> float:
    """Parse a floating-point field."""
    text = value.strip()
    if not _FLOAT_PATTERN.fullmatch(text):
        raise FieldCoercionError(f"invalid number: {value!r}")
    return float(text)


def parse_vector(value: str, size: int = 3) -> np.ndarray:
    """
    Parse a vector field.

    Components are separated by commas and/or whitespace.

    Args:
        value: Field text, e.g. "1000.0, 2000.0, 3000.0"
        size: Expected number of components

    Returns:
        float64 array of length size
    """
    tokens = [t for t in _VECTOR_SEPARATOR.split(value.strip()) if t]
    if len(tokens) != size:
        raise MalformedVectorError(
            f"expected {size} components, got {len(tokens)}: {value!r}")
    if not all(_FLOAT_PATTERN.fullmatch(t) for t in tokens):
        raise MalformedVectorError(f"invalid vector component: {value!r}")
    return np.array([float(t) for t in tokens], dtype=np.float64)


def split_seconds(seconds: float):
    """
    Split seconds of week into integer and fractional parts.

    The integer part is truncated toward zero and must fit in an int32.

    Returns:
        Tuple of (integer_seconds, fractional_seconds)
    """
    if not np.isfinite(seconds) or seconds < 0.0:
        raise FieldCoercionError(f"seconds of week must be finite and >= 0: {seconds}")
    whole = int(seconds)
    if whole > INT32_RANGE[1]:
        raise FieldCoercionError(f"seconds of week out of range: {seconds}")
    return whole, seconds - whole
