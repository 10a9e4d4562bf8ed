"""Formatting of floating point numbers as JSON text."""

from __future__ import annotations

import math
import struct
from decimal import Decimal


def _to_float32(value: float) -> float:
    """Round ``value`` to the nearest single precision float."""
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


_F32_LOW = _to_float32(1e-6)
_F32_HIGH = _to_float32(1e21)


def _shortest_digits(value: float, bits: int) -> tuple[str, int]:
    """Shortest decimal digits that round-trip ``value`` and the decimal point position."""
    if bits == 64:
        decimal = Decimal(repr(value))
    else:
        text = f"{value:.8e}"
        for precision in range(9):
            candidate = f"{value:.{precision}e}"
            if _to_float32(float(candidate)) == value:
                text = candidate
                break
        decimal = Decimal(text)

    _, digit_tuple, exponent = decimal.as_tuple()
    digits = "".join(map(str, digit_tuple))
    stripped = digits.rstrip("0")
    exponent += len(digits) - len(stripped)
    return stripped, len(stripped) + exponent


def _fixed(digits: str, point: int) -> str:
    if point <= 0:
        return "0." + "0" * -point + digits
    if point >= len(digits):
        return digits + "0" * (point - len(digits))
    return digits[:point] + "." + digits[point:]


def _exponential(digits: str, point: int) -> str:
    mantissa = digits[0]
    if len(digits) > 1:
        mantissa += "." + digits[1:]
    text = f"{mantissa}e{point - 1:+03d}"
    # e-07 becomes e-7
    if len(text) >= 4 and text[-4] == "e" and text[-3] == "-" and text[-2] == "0":
        text = text[:-2] + text[-1]
    return text


def format_float(value: float, bits: int) -> str:
    """Format ``value`` the way ECMAScript converts numbers to strings.

    ``bits`` is 32 or 64 and selects the precision the value is taken at.
    Fixed notation is used unless the magnitude is below 1e-6 or at least
    1e21.  NaN and infinities give ``NaN``, ``+Inf`` and ``-Inf``.
    """
    if bits not in (32, 64):
        raise ValueError(f"unsupported float size {bits}")
    value = float(value)
    if bits == 32:
        value = _to_float32(value)

    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"

    sign = "-" if math.copysign(1.0, value) < 0 else ""
    magnitude = abs(value)
    if magnitude == 0:
        return sign + "0"

    if bits == 64:
        exponential = magnitude < 1e-6 or magnitude >= 1e21
    else:
        exponential = magnitude < _F32_LOW or magnitude >= _F32_HIGH

    digits, point = _shortest_digits(magnitude, bits)
    body = _exponential(digits, point) if exponential else _fixed(digits, point)
    return sign + body