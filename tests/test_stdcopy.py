import io

import pytest

from dockrunner.stdcopy import StdType, StdWriter, std_copy


class OneByteReader:
    def __init__(self, data):
        self._data = data

    def read(self, size=-1):
        chunk, self._data = self._data[:1], self._data[1:]
        return chunk


class ShortWriter:
    def write(self, data):
        return len(data) - 1


def mux(*frames):
    buf = io.BytesIO()
    for kind, data in frames:
        StdWriter(buf, kind).write(data)
    return buf.getvalue()


def test_writer_frame_layout():
    buf = io.BytesIO()
    count = StdWriter(buf, StdType.STDOUT).write(b"hi")
    assert count == 2
    assert buf.getvalue() == b"\x01\x00\x00\x00\x00\x00\x00\x02hi"


def test_writer_ignores_none():
    buf = io.BytesIO()
    assert StdWriter(buf, StdType.STDERR).write(None) == 0
    assert buf.getvalue() == b""


def test_writer_without_target():
    with pytest.raises(ValueError, match="Writer not instantiated"):
        StdWriter(None, StdType.STDOUT).write(b"x")


def test_round_trip_separates_streams():
    data = mux(
        (StdType.STDOUT, b"out one\n"),
        (StdType.STDERR, b"err one\n"),
        (StdType.STDIN, b"in\n"),
        (StdType.STDOUT, b"out two\n"),
    )
    out, err = io.BytesIO(), io.BytesIO()
    written = std_copy(out, err, io.BytesIO(data))
    assert out.getvalue() == b"out one\nin\nout two\n"
    assert err.getvalue() == b"err one\n"
    assert written == len(out.getvalue()) + len(err.getvalue())


def test_round_trip_large_frame():
    payload = bytes(range(256)) * 300
    out, err = io.BytesIO(), io.BytesIO()
    written = std_copy(out, err, io.BytesIO(mux((StdType.STDERR, payload))))
    assert err.getvalue() == payload
    assert out.getvalue() == b""
    assert written == len(payload)


def test_one_byte_reads():
    data = mux((StdType.STDOUT, b"abc"), (StdType.STDERR, b"def"))
    out, err = io.BytesIO(), io.BytesIO()
    assert std_copy(out, err, OneByteReader(data)) == 6
    assert (out.getvalue(), err.getvalue()) == (b"abc", b"def")


def test_truncated_header_stops_quietly():
    complete = mux((StdType.STDOUT, b"hello"))
    out = io.BytesIO()
    written = std_copy(out, io.BytesIO(), io.BytesIO(complete + complete[:3]))
    assert written == 5
    assert out.getvalue() == b"hello"


def test_truncated_frame_stops_quietly():
    complete = mux((StdType.STDOUT, b"hello"))
    partial = mux((StdType.STDOUT, b"world"))[:-2]
    out = io.BytesIO()
    written = std_copy(out, io.BytesIO(), io.BytesIO(complete + partial))
    assert written == 5
    assert out.getvalue() == b"hello"


def test_empty_source():
    out = io.BytesIO()
    assert std_copy(out, out, io.BytesIO(b"")) == 0
    assert out.getvalue() == b""


def test_unknown_header():
    bad = bytes([7]) + mux((StdType.STDOUT, b"x"))[1:]
    with pytest.raises(ValueError, match="Unrecognized input header"):
        std_copy(io.BytesIO(), io.BytesIO(), io.BytesIO(bad))


def test_short_write():
    with pytest.raises(OSError, match="short write"):
        std_copy(ShortWriter(), ShortWriter(), io.BytesIO(mux((StdType.STDOUT, b"data"))))