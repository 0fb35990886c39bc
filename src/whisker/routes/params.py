"""Query parameter parsing for the handler set.

Parsing happens before any core component is touched: the generator, the
pool, and the health state only ever see sanitized values.
"""

import json
import re

from whisker._errors import InputError

KB = 1 << 10
MB = 1 << 20
GB = 1 << 30
TB = 1 << 40

UNITS: dict[str, int] = {
    "": 1,
    "kb": KB,
    "mb": MB,
    "gb": GB,
    "tb": TB,
}

DEFAULT_SIZE = 1

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_DURATION_UNITS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,  # micro sign
    "μs": 1e-6,  # greek mu
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_INTEGER = re.compile(r"[+-]?\d+")


def parse_size(raw: str | None) -> int:
    """Parse the ``size`` parameter.

    Missing or empty means one byte.  Negative values are clamped to zero.

    Raises:
        InputError: If *raw* is not an integer.

    """
    if raw is None or raw == "":
        return DEFAULT_SIZE
    if not _INTEGER.fullmatch(raw):
        msg = f"invalid size {raw!r}: expected an integer"
        raise InputError(msg)
    return max(int(raw), 0)


def parse_count(raw: str | None, name: str, default: int) -> int:
    """Parse a non-negative integer filter such as ``limit`` or ``since_ns``.

    Raises:
        InputError: If *raw* is given but is not a non-negative integer.

    """
    if raw is None or raw == "":
        return default
    if not _INTEGER.fullmatch(raw) or int(raw) < 0:
        msg = f"invalid {name} {raw!r}: expected a non-negative integer"
        raise InputError(msg)
    return int(raw)


def parse_unit(raw: str | None) -> int:
    """Return the multiplier for the ``unit`` parameter (case-insensitive).

    Raises:
        InputError: If *raw* is not one of ``kb``, ``mb``, ``gb``, ``tb``.

    """
    key = (raw or "").lower()
    try:
        return UNITS[key]
    except KeyError:
        msg = f"invalid unit {raw!r}: expected one of kb, mb, gb, tb"
        raise InputError(msg) from None


def scale_size(size: int, multiplier: int) -> int:
    """Apply a unit multiplier to an already clamped size."""
    return size * multiplier


def parse_bool(raw: str | None, default: bool = False) -> bool:
    """Parse a boolean flag using the ``1/t/true`` ``0/f/false`` vocabulary.

    Anything unrecognised yields *default*.
    """
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    return default


def parse_duration(raw: str | None) -> float | None:
    """Parse a duration such as ``300ms``, ``1.5s`` or ``2m30s`` into seconds.

    Returns None for missing or malformed input.
    """
    if not raw:
        return None
    text = raw
    sign = 1.0
    if text[0] in "+-":
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]
    if text == "0":
        return 0.0
    if not text:
        return None

    total = 0.0
    pos = 0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if match is None:
            return None
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    return sign * total


def decode_status_code(body: bytes) -> int:
    """Decode a health code from a JSON request body.

    The body must start with a JSON integer (``503``); trailing data after
    the first value is ignored.

    Raises:
        InputError: If the body is empty, not JSON, or not an integer.

    """
    text = body.decode("utf-8", errors="replace").lstrip()
    if not text:
        msg = "empty body: expected a JSON integer status code"
        raise InputError(msg)
    try:
        value, _ = json.JSONDecoder().raw_decode(text)
    except json.JSONDecodeError as exc:
        msg = f"invalid status code body: {exc.msg}"
        raise InputError(msg) from exc
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"invalid status code body: cannot use {value!r} as an integer status code"
        raise InputError(msg)
    return value
