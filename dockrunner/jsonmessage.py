"""Rendering of the JSON progress stream produced by an image pull."""

import codecs
import json

_CHUNK_SIZE = 32 * 1024


class PullError(Exception):
    """An error reported inside the pull progress stream."""

    def __init__(self, message, code=0):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self):
        return self.message


def _read_chunk(source):
    reader = getattr(source, "read1", None) or source.read
    return reader(_CHUNK_SIZE)


def _iter_values(source):
    decoder = json.JSONDecoder()
    text_decoder = codecs.getincrementaldecoder("utf-8")()
    buffer = ""
    eof = False
    while True:
        buffer = buffer.lstrip()
        if buffer:
            try:
                value, end = decoder.raw_decode(buffer)
            except json.JSONDecodeError:
                if eof:
                    raise
            else:
                # Bare numbers and literals may continue in the next chunk.
                if eof or end < len(buffer) or isinstance(value, (dict, list, str)):
                    buffer = buffer[end:]
                    yield value
                    continue
        elif eof:
            return
        chunk = _read_chunk(source)
        if not chunk:
            eof = True
            if isinstance(chunk, bytes):
                buffer += text_decoder.decode(b"", final=True)
        elif isinstance(chunk, str):
            buffer += chunk
        else:
            buffer += text_decoder.decode(chunk)


def _text_field(message, key):
    value = message.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"pull message field {key!r} is not a string")
    return value


def copy_messages(source, out):
    """Write each pull status message from source to the binary stream out.

    Raises PullError when the stream reports an error and ValueError when
    the stream is not a sequence of JSON objects.
    """
    for message in _iter_values(source):
        if not isinstance(message, dict):
            raise ValueError("pull message is not a JSON object")
        detail = message.get("errorDetail")
        if detail is not None:
            if not isinstance(detail, dict):
                raise ValueError("pull error detail is not a JSON object")
            code = detail.get("code") or 0
            if code == 401:
                raise PullError("authentication is required", code)
            raise PullError(_text_field(detail, "message"), code)
        if message.get("progressDetail") is not None:
            continue
        ident = _text_field(message, "id")
        status = _text_field(message, "status")
        line = f"{ident}: {status}\n" if ident else f"{status}\n"
        out.write(line.encode("utf-8"))