"""JSON token writer with buffered and streaming output, plus number and float helpers."""

__version__ = "0.1.0"
__all__ = ["floats", "num", "runes", "writer"]