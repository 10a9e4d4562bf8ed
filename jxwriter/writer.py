"""Writer of JSON tokens into a buffer or, in streaming mode, to an output."""

from __future__ import annotations

import base64 as _b64
import math
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from .floats import format_float
from .num import Num
from .runes import RUNE_ERROR, decode_rune

ENCODER_BUF_SIZE = 512
MIN_ENCODER_BUF_SIZE = 32

_HEX = b"0123456789abcdef"
_UNSAFE = re.compile(rb'[\x00-\x1f"\\]')
_HTML_UNSAFE = frozenset(range(0x20)) | frozenset(b'"\\<>&')
_SHORT_ESCAPES = {
    ord("\\"): b"\\\\",
    ord('"'): b'\\"',
    ord("\n"): b"\\n",
    ord("\r"): b"\\r",
    ord("\t"): b"\\t",
}

BytesLike = Union[bytes, bytearray, memoryview]


class StreamingError(RuntimeError):
    """Raised when an operation is not allowed in streaming mode."""

    def __init__(self) -> None:
        super().__init__("unexpected call in streaming mode")


@dataclass
class _StreamState:
    out: Any
    error: Optional[BaseException] = None


def _escape_byte(b: int) -> bytes:
    short = _SHORT_ESCAPES.get(b)
    if short is not None:
        return short
    return b"\\u00" + bytes((_HEX[b >> 4], _HEX[b & 0xF]))


def _escape_plain(data: bytes) -> bytes:
    return _UNSAFE.sub(lambda m: _escape_byte(m.group()[0]), data)


def _escape_html(data: bytes) -> bytes:
    out = bytearray()
    start = i = 0
    length = len(data)
    while i < length:
        b = data[i]
        if b < 0x80:
            if b in _HTML_UNSAFE:
                out += data[start:i]
                out += _escape_byte(b)
                start = i + 1
            i += 1
            continue
        rune, size = decode_rune(data[i:i + 4])
        if rune == RUNE_ERROR and size == 1:
            out += data[start:i]
            out += b"\\ufffd"
            i += 1
            start = i
            continue
        if rune in (0x2028, 0x2029):
            # Valid JSON, but breaks JSONP; escape unconditionally.
            out += data[start:i]
            out += b"\\u202" + bytes((_HEX[rune & 0xF],))
            i += size
            start = i
            continue
        i += size
    out += data[start:]
    return bytes(out)


def _encode_text(value: str) -> bytes:
    return value.encode("utf-8", "surrogatepass")


class Writer:
    """Writes JSON tokens to ``buf``.

    Token methods return ``True`` when the writer is in a failed streaming
    state and the token could not be written; the stored error is raised by
    :meth:`close`.
    """

    def __init__(self) -> None:
        self.buf = bytearray()
        self._stream: Optional[_StreamState] = None
        self._capacity = ENCODER_BUF_SIZE

    # Buffer access.

    def _require_buffered(self) -> None:
        if self._stream is not None:
            raise StreamingError()

    def write(self, data: BytesLike) -> int:
        """Append raw bytes to the buffer and return their count."""
        self._require_buffered()
        self.buf += data
        return len(data)

    def write_to(self, out: Any) -> int:
        """Write the buffer to ``out`` and return the number of bytes written."""
        self._require_buffered()
        written = out.write(bytes(self.buf))
        return len(self.buf) if written is None else written

    def __str__(self) -> str:
        self._require_buffered()
        return self.buf.decode("utf-8", "surrogateescape")

    def __bytes__(self) -> bytes:
        self._require_buffered()
        return bytes(self.buf)

    def reset(self) -> None:
        """Clear the buffer and leave streaming mode."""
        self.buf.clear()
        self._stream = None

    def reset_writer(self, out: Any) -> None:
        """Clear the buffer and stream output to ``out``."""
        self.buf.clear()
        self._stream = _StreamState(out)

    def close(self) -> None:
        """Flush the buffer to the output in streaming mode.

        Raises the first error the output produced, if any.
        """
        stream = self._stream
        if stream is None:
            return
        if self._flush():
            assert stream.error is not None
            raise stream.error

    def __enter__(self) -> "Writer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Streaming internals.

    def _send(self, data: bytes) -> bool:
        stream = self._stream
        assert stream is not None
        if stream.error is not None:
            return True
        try:
            written = stream.out.write(data)
        except Exception as exc:  # the error is kept and raised by close()
            stream.error = exc
            return True
        if written is not None and written != len(data):
            stream.error = OSError("short write")
            return True
        return False

    def _flush(self) -> bool:
        stream = self._stream
        assert stream is not None
        if stream.error is not None:
            return True
        fail = self._send(bytes(self.buf))
        self.buf.clear()
        return fail

    def _write(self, data: BytesLike) -> bool:
        stream = self._stream
        if stream is None:
            self.buf += data
            return False
        if stream.error is not None:
            return True
        view = memoryview(data)
        while len(self.buf) + len(view) > self._capacity:
            if self._flush():
                return True
            chunk = min(self._capacity, len(view))
            self.buf += view[:chunk]
            view = view[chunk:]
        self.buf += view
        return False

    # Tokens.

    def raw_str(self, value: str) -> bool:
        """Write a string as raw JSON."""
        return self._write(_encode_text(value))

    def raw(self, value: BytesLike) -> bool:
        """Write bytes as raw JSON."""
        return self._write(value)

    def null(self) -> bool:
        """Write ``null``."""
        return self._write(b"null")

    def true(self) -> bool:
        """Write ``true``."""
        return self._write(b"true")

    def false(self) -> bool:
        """Write ``false``."""
        return self._write(b"false")

    def bool(self, value: Any) -> bool:
        """Write a boolean."""
        return self.true() if value else self.false()

    def obj_start(self) -> bool:
        """Write the start of an object."""
        return self._write(b"{")

    def field_start(self, field: str) -> bool:
        """Write a field name followed by a colon."""
        return self.str(field) or self._write(b":")

    def obj_end(self) -> bool:
        """Write the end of an object."""
        return self._write(b"}")

    def arr_start(self) -> bool:
        """Write the start of an array."""
        return self._write(b"[")

    def arr_end(self) -> bool:
        """Write the end of an array."""
        return self._write(b"]")

    def comma(self) -> bool:
        """Write a comma."""
        return self._write(b",")

    def str(self, value: str) -> bool:
        """Write a string without HTML escaping."""
        return self.byte_str(_encode_text(value))

    def byte_str(self, value: BytesLike) -> bool:
        """Write bytes as a string without HTML escaping."""
        return self._write(b'"' + _escape_plain(bytes(value)) + b'"')

    def str_escape(self, value: str) -> bool:
        """Write a string, escaping HTML special characters."""
        return self.byte_str_escape(_encode_text(value))

    def byte_str_escape(self, value: BytesLike) -> bool:
        """Write bytes as a string, escaping HTML special characters."""
        return self._write(b'"' + _escape_html(bytes(value)) + b'"')

    def base64(self, data: Optional[BytesLike]) -> bool:
        """Write data as a standard base64 string; ``None`` is written as null."""
        if data is None:
            return self.null()
        if self._write(b'"'):
            return True
        encoded = _b64.b64encode(bytes(data))
        if self._stream is None or len(self.buf) + len(encoded) <= self._capacity:
            self.buf += encoded
        elif self._flush() or self._send(encoded):
            return True
        return self._write(b'"')

    def float(self, value: float, bits: int) -> bool:
        """Write a float of the given size; NaN and infinities become null."""
        if math.isnan(value) or math.isinf(value):
            return self.null()
        if self._stream is not None and self._stream.error is not None:
            return True
        return self._write(format_float(value, bits).encode("ascii"))

    def float32(self, value: float) -> bool:
        """Write a single precision float."""
        return self.float(value, 32)

    def float64(self, value: float) -> bool:
        """Write a double precision float."""
        return self.float(value, 64)

    def uint8(self, value: int) -> bool:
        """Write an unsigned 8-bit integer."""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"value {value} out of uint8 range")
        return self._write(b"%d" % value)

    def int8(self, value: int) -> bool:
        """Write a signed 8-bit integer."""
        if not -0x80 <= value <= 0x7F:
            raise ValueError(f"value {value} out of int8 range")
        return self._write(b"%d" % value)

    def num(self, value: Union[Num, BytesLike, str]) -> bool:
        """Write a number; an empty number is written as null."""
        data = bytes(Num(value))
        if not data:
            return self.null()
        return self.raw(data)


def new_streaming_writer(out: Any, buf_size: int = -1) -> Writer:
    """Create a writer that streams to ``out`` through a buffer of ``buf_size`` bytes.

    A negative size selects the default; sizes below the minimum are raised to it.
    """
    if buf_size < 0:
        buf_size = ENCODER_BUF_SIZE
    elif buf_size < MIN_ENCODER_BUF_SIZE:
        buf_size = MIN_ENCODER_BUF_SIZE
    writer = Writer()
    writer.reset_writer(out)
    writer._capacity = buf_size
    return writer