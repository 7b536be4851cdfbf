import io

import pytest

from modshell.lineio import read_line, read_wide_line


def test_reads_crlf_lines_in_turn():
    stream = io.BytesIO(b"hello\r\nworld")
    assert read_line(stream, 1024) == b"hello\n"
    assert read_line(stream, 1024) == b"world"
    assert read_line(stream, 1024) == b""


def test_size_limits_length():
    stream = io.BytesIO(b"abcdef")
    assert read_line(stream, 4) == b"abc"
    assert read_line(stream, 4) == b"def"


def test_lone_line_feed_is_data():
    assert read_line(io.BytesIO(b"a\nb\r\nc"), 100) == b"a\nb\n"


def test_lone_carriage_return_is_dropped():
    assert read_line(io.BytesIO(b"a\rb\r\n"), 100) == b"ab\n"


def test_empty_stream_gives_empty_line():
    assert read_line(io.BytesIO(b""), 10) == b""


@pytest.mark.parametrize("size", [0, -1])
def test_bad_size_rejected(size):
    with pytest.raises(ValueError):
        read_line(io.BytesIO(b"data"), size)


def test_missing_stream_rejected():
    with pytest.raises(ValueError):
        read_line(None, 10)


def test_result_never_exceeds_limit():
    data = b"x" * 500
    assert len(read_line(io.BytesIO(data), 64)) == 63


def test_wide_line():
    stream = io.BytesIO("hi\r\nthere".encode("utf-16-le"))
    assert read_wide_line(stream, 100) == "hi\n"
    assert read_wide_line(stream, 100) == "there"


def test_wide_line_size_limit_counts_units():
    stream = io.BytesIO("abcdef".encode("utf-16-le"))
    assert read_wide_line(stream, 3) == "ab"


def test_wide_line_bad_size_rejected():
    with pytest.raises(ValueError):
        read_wide_line(io.BytesIO(b""), 0)