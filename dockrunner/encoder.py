"""Encoding of loosely typed setting values as strings."""

import base64
import dataclasses
import json
import math
from decimal import Decimal

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _digits(value):
    sign, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    text = "".join(map(str, digits))
    return ("-" if sign else ""), text, len(text) + exponent


def _format_e(value, min_exponent_digits=2):
    prefix, text, point = _digits(value)
    mantissa = text[0] + ("." + text[1:] if len(text) > 1 else "")
    exponent = point - 1
    sign = "-" if exponent < 0 else "+"
    return f"{prefix}{mantissa}e{sign}{abs(exponent):0{min_exponent_digits}d}"


def _format_f(value):
    return f"{Decimal(repr(value)).normalize():f}"


def _format_float(value):
    """Shortest text for a float in general ('g') notation."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    _, _, point = _digits(value)
    exponent = point - 1
    if exponent < -4 or exponent >= 6:
        return _format_e(value)
    return _format_f(value)


def _json_float(value):
    if not math.isfinite(value):
        raise ValueError("unsupported float value")
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    magnitude = abs(value)
    if magnitude < 1e-6 or magnitude >= 1e21:
        text = _format_e(value)
        if text[-4:-2] == "e-" and text[-2] == "0":
            text = text[:-2] + text[-1]
        return text
    return _format_f(value)


def _json_string(text):
    encoded = json.dumps(text, ensure_ascii=False)
    for char, escape in _HTML_ESCAPES.items():
        encoded = encoded.replace(char, escape)
    return encoded


def _key_text(key):
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, int):
        return str(key)
    if isinstance(key, float):
        return _format_float(key)
    if key is None:
        return "null"
    raise TypeError(f"unsupported key type: {type(key).__name__}")


def _to_json(value):
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _json_float(value)
    if isinstance(value, str):
        return _json_string(value)
    if isinstance(value, (bytes, bytearray)):
        return _to_json(list(value))
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _to_json(dataclasses.asdict(value))
    if isinstance(value, dict):
        items = sorted((_key_text(k), v) for k, v in value.items())
        return "{" + ",".join(f"{_json_string(k)}:{_to_json(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_to_json(item) for item in value) + "]"
    raise TypeError(f"unsupported value type: {type(value).__name__}")


def _scalar_text(value):
    """Text of a scalar list item, or None when the item is not a scalar."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        text = _format_float(value)
        return {"+Inf": ".inf", "-Inf": "-.inf", "NaN": ".nan"}.get(text, text)
    return None


def _encode_list(values):
    texts = [_scalar_text(item) for item in values]
    if all(text is not None for text in texts):
        return ",".join(texts)
    return _to_json(values)


def encode(value):
    """Encode a setting value as a string.

    Scalars become their plain text, bytes become base64, lists of
    scalars become comma separated text and anything else becomes JSON.
    Values that cannot be encoded give an empty string.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    try:
        if isinstance(value, list):
            return _encode_list(value)
        return _to_json(value)
    except (TypeError, ValueError):
        return ""