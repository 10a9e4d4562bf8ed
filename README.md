# jxwriter

A low-level JSON token writer. You emit tokens one at a time (object and
array delimiters, field names, strings, numbers, booleans, null) and the
writer produces compact JSON, either into an in-memory buffer or streamed
to a binary file-like object through a fixed-size buffer.

The package has no dependencies outside the standard library.

## Buffered writing

```python
from jxwriter.writer import Writer

w = Writer()
w.obj_start()
w.field_start("values")
w.arr_start()
w.uint8(4)
w.comma()
w.float64(1.5)
w.arr_end()
w.obj_end()

print(str(w))    # {"values":[4,1.5]}
print(bytes(w))  # b'{"values":[4,1.5]}'
```

The writer does not add commas for you; call `comma()` between elements.
The accumulated output lives in `w.buf` (a `bytearray`). `reset()` clears
it. `write(data)` appends raw bytes and `write_to(out)` writes the buffer
to a file-like object and returns the byte count.

Other token methods: `null()`, `true()`, `false()`, `bool(value)`,
`obj_start()`, `obj_end()`, `arr_start()`, `arr_end()`, `raw(data)` and
`raw_str(text)` (written as-is, no quoting or escaping).

## Strings

- `str(value)` / `byte_str(value)` escape quotes, backslashes and control
  characters (`\n`, `\r`, `\t` in short form, others as `\u00XX`).
- `str_escape(value)` / `byte_str_escape(value)` also escape `<`, `>`, `&`,
  U+2028 and U+2029, and replace invalid UTF-8 bytes with `\ufffd`. Use
  these for untrusted input that may end up inside HTML.

## Numbers

- `float64(v)` and `float32(v)` (or `float(v, bits)` with 32 or 64) format
  like ECMAScript number-to-string: fixed notation unless the magnitude is
  below 1e-6 or at least 1e21, e.g. `1e-7`. NaN and infinities are written
  as `null`.
- `uint8(v)` and `int8(v)` write small integers; values outside the range
  raise `ValueError`.
- `num(value)` writes a raw number (or number string); an empty number is
  written as `null`.

`jxwriter.num.Num` wraps raw number bytes and answers questions about them:
`is_str()`, `is_int()`, `sign()`, `positive()`, `negative()`, `zero()`,
and `equal(other)` for an exact textual comparison. An empty `Num` prints
as `<invalid>`.

The helpers behind these are usable on their own:
`jxwriter.floats.format_float(value, bits)` returns the formatted text, and
`jxwriter.runes.decode_rune(data)` decodes the first UTF-8 code point and
returns `(code_point, size)`.

## Base64

`base64(data)` writes standard base64 in quotes; `None` is written as `null`.

## Streaming

```python
import io
from jxwriter.writer import new_streaming_writer

out = io.BytesIO()
with new_streaming_writer(out, 512) as w:
    w.obj_start()
    w.field_start("ok")
    w.true()
    w.obj_end()
# leaving the block calls close(), which flushes the buffer
```

A negative buffer size selects the default (512 bytes); sizes below 32 are
raised to 32. `close()` flushes the buffer and raises the first error the
output produced; a write that reports fewer bytes than given counts as an
`OSError("short write")`. In streaming mode `write`, `write_to`, `str()`
and `bytes()` raise `StreamingError`. Token methods return `True` once a
write to the output has failed, and further output is dropped until
`reset_writer(out)` is called. `reset_writer` can also switch a buffered
writer to streaming; `reset()` switches it back.

## What it does not do

- It only writes JSON; it does not parse, decode or validate it.
- It does not track structure: commas, nesting and indentation are up to
  the caller.
- Integer writers cover only 8-bit values (`uint8`, `int8`); write larger
  integers with `raw_str` or `num`.
- `Num` does not convert numbers to Python `int` or `float`.