import io
import math

import pytest

from jxwriter.num import Num
from jxwriter.writer import StreamingError, Writer, new_streaming_writer

MIN_BUF = 32


class FailingSink:
    def __init__(self, error):
        self.error = error

    def write(self, data):
        raise self.error


class ShortSink:
    def write(self, data):
        return 1


class LimitSink:
    def __init__(self, limit):
        self.limit = limit
        self.data = bytearray()

    def write(self, data):
        if self.limit - len(data) < 0:
            raise OSError("limit reached")
        self.data += data
        self.limit -= len(data)
        return len(data)


def test_reset_clears_buffer():
    w = Writer()
    w.true()
    assert bytes(w.buf) == b"true"
    w.reset()
    assert len(w.buf) == 0


def test_string():
    w = Writer()
    w.true()
    assert str(w) == "true"


def test_streaming_check():
    w = new_streaming_writer(io.BytesIO(), -1)
    with pytest.raises(StreamingError):
        w.write(b"hello")
    with pytest.raises(StreamingError):
        w.write_to(io.BytesIO())
    with pytest.raises(StreamingError, match="unexpected call in streaming mode"):
        str(w)


def test_close_flush_error():
    err = ValueError("test")
    w = new_streaming_writer(FailingSink(err), -1)
    w.null()
    with pytest.raises(ValueError) as info:
        w.close()
    assert info.value is err


def test_close_write_error():
    err = ValueError("test")
    w = new_streaming_writer(FailingSink(err), MIN_BUF)
    w.obj_start()
    assert w.field_start("a" * MIN_BUF) is True
    assert w.null() is True
    w.obj_end()
    with pytest.raises(ValueError) as info:
        w.close()
    assert info.value is err


def test_close_short_write():
    w = new_streaming_writer(ShortSink(), -1)
    w.null()
    with pytest.raises(OSError, match="short write"):
        w.close()


def test_close_ok():
    sink = io.BytesIO()
    w = new_streaming_writer(sink, -1)
    w.null()
    w.close()
    assert sink.getvalue() == b"null"


def test_close_not_streaming():
    w = Writer()
    w.null()
    assert w.close() is None
    assert str(w) == "null"


def test_context_manager_flushes():
    sink = io.BytesIO()
    with new_streaming_writer(sink) as w:
        w.arr_start()
        w.uint8(1)
        w.arr_end()
    assert sink.getvalue() == b"[1]"


def _do(w):
    w.obj_start()
    w.field_start("a" * MIN_BUF)
    w.null()
    w.obj_end()
    w.close()


def test_reset_writer():
    w = Writer()
    _do(w)
    expected = bytes(w)
    for _ in range(3):
        sink = io.BytesIO()
        w.reset_writer(sink)
        _do(w)
        assert sink.getvalue() == expected


def test_default_buffer_size():
    sink = io.BytesIO()
    w = new_streaming_writer(sink, -1)
    w.raw(b"a" * 512)
    assert sink.getvalue() == b""
    w.raw(b"b")
    assert sink.getvalue() == b"a" * 512


def test_minimum_buffer_size():
    sink = io.BytesIO()
    w = new_streaming_writer(sink, MIN_BUF - 1)
    w.raw(b"a" * MIN_BUF)
    assert sink.getvalue() == b""
    w.raw(b"b")
    assert sink.getvalue() == b"a" * MIN_BUF


def test_streaming_matches_buffered():
    text = "x" * 300 + "\n\"" + "y" * 100
    buffered = Writer()
    buffered.arr_start()
    buffered.str(text)
    buffered.base64(bytes(range(200)))
    buffered.arr_end()

    sink = io.BytesIO()
    streamed = new_streaming_writer(sink, MIN_BUF)
    streamed.arr_start()
    streamed.str(text)
    streamed.base64(bytes(range(200)))
    streamed.arr_end()
    streamed.close()
    assert sink.getvalue() == bytes(buffered)


@pytest.mark.parametrize("limit", [31, 32, 33, 73])
def test_base64_stream_errors(limit):
    field_length = MIN_BUF - len('{"":')
    w = new_streaming_writer(LimitSink(limit), MIN_BUF)
    w.obj_start()
    w.field_start("a" * field_length)
    w.base64(bytes(MIN_BUF))
    w.obj_end()
    with pytest.raises(OSError):
        w.close()


def test_base64_values():
    w = Writer()
    w.base64(b"Hello")
    assert str(w) == '"SGVsbG8="'
    w.reset()
    w.base64(None)
    assert str(w) == "null"
    w.reset()
    w.base64(b"")
    assert str(w) == '""'


def test_bool():
    w = Writer()
    w.bool(True)
    w.bool(False)
    w.bool(False)
    assert bytes(w) == b"truefalsefalse"


def test_null_modes():
    w = Writer()
    w.null()
    assert str(w) == "null"
    sink = io.BytesIO()
    s = new_streaming_writer(sink)
    s.null()
    s.close()
    assert sink.getvalue() == b"null"


@pytest.mark.parametrize("value", [0, 237, 255, 1, 2, 10, 11, 100, 101])
def test_uint8(value):
    w = Writer()
    w.uint8(value)
    assert str(w) == str(value)


@pytest.mark.parametrize("value", [0, -13, 127, -128, 1, 2, 10, 11, 100, 101])
def test_int8(value):
    w = Writer()
    w.int8(value)
    assert str(w) == str(value)


def test_int_ranges():
    w = Writer()
    with pytest.raises(ValueError):
        w.uint8(256)
    with pytest.raises(ValueError):
        w.int8(-129)


def test_float_values():
    w = Writer()
    w.float64(0.0000001)
    assert str(w) == "1e-7"
    w.reset()
    w.float32(0.0000001)
    assert str(w) == "1e-7"
    w.reset()
    w.float64(-12.5)
    assert str(w) == "-12.5"


@pytest.mark.parametrize("value", [math.nan, -math.inf, math.inf])
def test_float_nan_inf(value):
    w = Writer()
    w.arr_start()
    w.float64(value)
    w.comma()
    w.float32(value)
    w.arr_end()
    assert str(w) == "[null,null]"


def test_float_error():
    w = new_streaming_writer(FailingSink(ValueError("foo")), MIN_BUF)
    w.raw(b"1" * (MIN_BUF + 1))
    assert w.float32(10) is True
    assert w.float64(10) is True
    with pytest.raises(ValueError, match="foo"):
        w.close()


def test_str_escapes():
    w = Writer()
    w.str('a"b\\c\nd\re\tf\x01<>&')
    assert str(w) == '"a\\"b\\\\c\\nd\\re\\tf\\u0001<>&"'


def test_str_escape_html():
    w = Writer()
    w.str_escape('<a href="x">&\u2028\u2029ж')
    assert str(w) == '"\\u003ca href=\\"x\\"\\u003e\\u0026\\u2028\\u2029ж"'


def test_byte_str_invalid_utf8():
    w = Writer()
    w.byte_str(b"a\xffz")
    assert bytes(w) == b'"a\xffz"'
    w.reset()
    w.byte_str_escape(b"a\xffz")
    assert bytes(w) == b'"a\\ufffdz"'


def test_field_start_and_object():
    w = Writer()
    w.obj_start()
    w.field_start("foo")
    w.arr_start()
    w.uint8(1)
    w.comma()
    w.uint8(2)
    w.arr_end()
    w.obj_end()
    assert str(w) == '{"foo":[1,2]}'


def test_num():
    w = Writer()
    w.num(Num(b"123"))
    assert str(w) == "123"
    w.reset()
    w.num(Num())
    assert str(w) == "null"


def test_write_and_write_to():
    w = Writer()
    assert w.write(b"[1]") == 3
    out = io.BytesIO()
    assert w.write_to(out) == 3
    assert out.getvalue() == b"[1]"


def test_raw_str():
    w = Writer()
    w.raw_str('{"a":1}')
    assert bytes(w) == b'{"a":1}'