"""Multiplexing of stdout and stderr over one stream of framed records."""

import struct
from enum import IntEnum

_PREFIX_LEN = 8
_HEADER = struct.Struct(">BxxxI")
_CHUNK_SIZE = 32 * 1024


class StdType(IntEnum):
    """The standard stream a frame belongs to."""

    STDIN = 0
    STDOUT = 1
    STDERR = 2


class StdWriter:
    """Writes data to an underlying binary stream as framed records."""

    def __init__(self, writer, stream_type):
        self.writer = writer
        self.stream_type = StdType(stream_type)

    def write(self, data):
        """Write one frame and return the number of payload bytes written."""
        if self.writer is None:
            raise ValueError("Writer not instantiated")
        if data is None:
            return 0
        payload = bytes(data)
        frame = _HEADER.pack(self.stream_type, len(payload)) + payload
        count = self.writer.write(frame)
        if count is None:
            count = len(frame)
        return max(count - _PREFIX_LEN, 0)


def _fill(src, buffer, size):
    reader = getattr(src, "read1", None) or src.read
    while len(buffer) < size:
        chunk = reader(max(size - len(buffer), _CHUNK_SIZE))
        if not chunk:
            return False
        buffer += chunk
    return True


def std_copy(dstout, dsterr, src):
    """Demultiplex src into dstout and dsterr until end of stream.

    Returns the number of payload bytes written. A truncated trailing
    frame ends the copy quietly.
    """
    written = 0
    buffer = bytearray()
    while True:
        if not _fill(src, buffer, _PREFIX_LEN):
            return written
        kind = buffer[0]
        if kind in (StdType.STDIN, StdType.STDOUT):
            out = dstout
        elif kind == StdType.STDERR:
            out = dsterr
        else:
            raise ValueError(f"Unrecognized input header: {kind}")
        size = int.from_bytes(buffer[4:_PREFIX_LEN], "big")
        end = _PREFIX_LEN + size
        if not _fill(src, buffer, end):
            return written
        frame = bytes(buffer[_PREFIX_LEN:end])
        count = out.write(frame)
        if count is None:
            count = len(frame)
        if count != size:
            raise OSError("short write")
        written += count
        del buffer[:end]