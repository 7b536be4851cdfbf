"""Line reading that ends lines only at CR LF pairs."""

from __future__ import annotations

from typing import BinaryIO


def _check(stream: BinaryIO | None, size: int) -> None:
    if stream is None:
        raise ValueError("no stream to read from")
    if size <= 0:
        raise ValueError("size must be positive")


def _read_units(stream: BinaryIO, size: int, width: int, newline: bytes) -> bytes:
    units: list[bytes] = []
    cr_found = False
    while len(units) < size - 1:
        unit = stream.read(width)
        if len(unit) < width:
            break
        if unit == b"\r" * 1 and width == 1 or width == 2 and unit == b"\r\x00":
            cr_found = True
            continue
        if cr_found and unit == newline:
            units.append(newline)
            break
        cr_found = False
        units.append(unit)
    return b"".join(units)


def read_line(stream: BinaryIO, size: int) -> bytes:
    """Read at most ``size - 1`` bytes of one line from a binary *stream*.

    Carriage returns are dropped; a line ends after a line feed that
    follows a carriage return, which is kept as ``b"\\n"``. A lone line
    feed is ordinary data. Returns ``b""`` when nothing could be read.
    """
    _check(stream, size)
    return _read_units(stream, size, 1, b"\n")


def read_wide_line(stream: BinaryIO, size: int) -> str:
    """Read at most ``size - 1`` UTF-16LE units of one line from *stream*.

    Follows the same line rules as :func:`read_line` and returns the
    decoded text, or ``""`` when nothing could be read.
    """
    _check(stream, size)
    raw = _read_units(stream, size, 2, b"\n\x00")
    return raw.decode("utf-16-le", errors="surrogatepass")