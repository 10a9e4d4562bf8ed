"""Decoding of a single UTF-8 encoded code point."""

from __future__ import annotations

from typing import Union

RUNE_ERROR = 0xFFFD
"""Code point returned for empty or malformed input."""

ByteSeq = Union[bytes, bytearray, memoryview, str]


def _sequence_length(lead: int) -> int:
    """Length of the UTF-8 sequence started by ``lead``, or 0 if it cannot start one."""
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 0


def decode_rune(data: ByteSeq) -> tuple[int, int]:
    """Decode the first UTF-8 code point of ``data``.

    Returns the code point and the number of bytes it occupies.  Empty input
    gives ``(RUNE_ERROR, 0)``; malformed input gives ``(RUNE_ERROR, 1)``.
    """
    if isinstance(data, str):
        head = data[:4].encode("utf-8", "surrogatepass")[:4]
    else:
        head = bytes(data[:4])

    if not head:
        return RUNE_ERROR, 0

    lead = head[0]
    if lead < 0x80:
        return lead, 1

    size = _sequence_length(lead)
    if size == 0 or len(head) < size:
        return RUNE_ERROR, 1
    try:
        char = head[:size].decode("utf-8")
    except UnicodeDecodeError:
        return RUNE_ERROR, 1
    return ord(char), size