"""
IEEE-754 single-precision arithmetic on top of Python floats.

Python floats are doubles. Every value the machine stores or produces is
rounded to the nearest single-precision value, and the four arithmetic
operators round their double result back to single precision. For ``+ - * /``
on single-precision inputs this matches native float32 arithmetic exactly.
"""

from __future__ import annotations

import math
import struct

_PACKER = struct.Struct("<f")


def to_float32(value: float) -> float:
    """Round a Python float to the nearest single-precision value."""
    try:
        return _PACKER.unpack(_PACKER.pack(value))[0]
    except OverflowError:
        # Finite doubles beyond the single-precision range round to infinity.
        return math.copysign(math.inf, value)


def parse_float32(text: str) -> float | None:
    """
    Parse a floating-point literal and round it to single precision.

    Returns None when ``text`` is not a literal, so callers can fall back
    to treating it as an identifier. Digit-group underscores (``1_000``) are
    not literals. ``inf`` and ``nan`` spellings are.
    """
    if "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return to_float32(value)


def format_float32(value: float) -> str:
    """Shortest decimal text that reads back as the same single-precision value."""
    if math.isnan(value) or math.isinf(value):
        return repr(value)
    for digits in range(1, 10):
        shortest = float(f"{value:.{digits}g}")
        if to_float32(shortest) == value:
            return repr(shortest)
    return repr(value)


def add(left: float, right: float) -> float:
    return to_float32(left + right)


def sub(left: float, right: float) -> float:
    return to_float32(left - right)


def mul(left: float, right: float) -> float:
    return to_float32(left * right)


def div(left: float, right: float) -> float:
    """Divide with IEEE semantics: ``x/0`` is ``±inf`` and ``0/0`` is ``nan``."""
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return to_float32(left / right)
