"""JSON number value kept in its textual form."""

from __future__ import annotations

from typing import Union

_DIGITS = frozenset(b"0123456789")
_ZERO_CHARS = frozenset(b".0-")


class Num:
    """A raw JSON number or a number in a string, such as ``123.45`` or ``"12345"``.

    An empty Num is the zero value and is considered invalid.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Union[bytes, bytearray, memoryview, str, "Num"] = b"") -> None:
        if isinstance(data, Num):
            self._data = data._data
        elif isinstance(data, str):
            self._data = data.encode("utf-8")
        elif isinstance(data, (bytes, bytearray, memoryview)):
            self._data = bytes(data)
        else:
            raise TypeError(f"cannot make Num from {type(data).__name__}")

    def is_str(self) -> bool:
        """Report whether the number is written as a string."""
        return self._data[:1] == b'"'

    def is_int(self) -> bool:
        """Report whether the number is an integer."""
        body = self._data
        if not body:
            return False
        if body[0] == ord('"'):
            body = body[1:-1]
            if not body:
                return False
        if body[0] == ord("-"):
            body = body[1:]
        return all(c in _DIGITS for c in body)

    def sign(self) -> int:
        """Sign of the number: 0 for zero, 1 for positive, -1 for negative."""
        data = self._data
        if not data:
            return 0
        first = data[0]
        if first == ord('"'):
            if len(data) < 2:
                return 0
            first = data[1]
        if first == ord("-"):
            return -1
        if first == ord("0"):
            return 0
        return 1

    def positive(self) -> bool:
        """Report whether the number is positive."""
        return self.sign() > 0

    def negative(self) -> bool:
        """Report whether the number is negative."""
        return self.sign() < 0

    def zero(self) -> bool:
        """Report whether the number is zero."""
        data = self._data
        if not data:
            return False
        if len(data) == 1:
            return data == b"0"
        return all(c in _ZERO_CHARS for c in data)

    def equal(self, other: "Num") -> bool:
        """Report whether both numbers are written exactly the same way."""
        return self._data == Num(other)._data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Num):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash(self._data)

    def __str__(self) -> str:
        if not self._data:
            return "<invalid>"
        return self._data.decode("utf-8", "replace")

    def __repr__(self) -> str:
        return f"Num({self._data!r})"

    def __bytes__(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return len(self._data)