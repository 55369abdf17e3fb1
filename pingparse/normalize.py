# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

"""Conversion of captured text fields into typed values.

Durations follow the ``<number><unit>`` form ping prints ("0.026 ms",
"10021ms"). Several terms may follow each other ("1m30s"). Supported units:
h, m, s, ms, us (also µs / μs), ns.
"""

import re
from datetime import timedelta
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from .errors import ConversionError

UINT_MAX = 2**64 - 1

_MICROSECONDS_PER_UNIT = {
    "h": Decimal(3600_000_000),
    "m": Decimal(60_000_000),
    "s": Decimal(1_000_000),
    "ms": Decimal(1_000),
    "us": Decimal(1),
    "µs": Decimal(1),
    "μs": Decimal(1),
    "ns": Decimal("0.001"),
}

# longest units first so "ms" is not read as "m" followed by garbage
_UNIT_ALTERNATION = "|".join(
    re.escape(u) for u in sorted(_MICROSECONDS_PER_UNIT, key=len, reverse=True)
)
DURATION_TERM_RE = re.compile(
    rf"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)({_UNIT_ALTERNATION})", re.ASCII
)
PIPE_QUALIFIER_RE = re.compile(r"^(?P<unit>[^,]+), pipe (?P<pipe>[0-9]+)$")
_WHITESPACE_RE = re.compile(r"\s+")


def parse_uint(field, text):
    if not text or not text.isascii() or not text.isdigit():
        raise ConversionError(field, ValueError(f"invalid unsigned integer {text!r}"))
    value = int(text, 10)
    if value > UINT_MAX:
        raise ConversionError(field, OverflowError(f"value {text} out of range"))
    return value


def parse_percent(field, text):
    value = parse_uint(field, text)
    if value > 100:
        raise ConversionError(field, ValueError(f"percentage {value} out of range"))
    return value


def parse_duration(field, text):
    compact = _WHITESPACE_RE.sub("", text or "")
    if compact == "0":
        return timedelta(0)

    pos = 0
    total = Decimal(0)
    while pos < len(compact):
        match = DURATION_TERM_RE.match(compact, pos)
        if not match:
            raise ConversionError(field, ValueError(f"invalid duration {text!r}"))
        number, unit = match.groups()
        try:
            total += Decimal(number) * _MICROSECONDS_PER_UNIT[unit]
        except InvalidOperation as exc:
            raise ConversionError(field, exc) from exc
        pos = match.end()

    if pos == 0:
        raise ConversionError(field, ValueError(f"invalid duration {text!r}"))
    try:
        microseconds = int(total.quantize(Decimal(1), rounding=ROUND_HALF_EVEN))
        return timedelta(microseconds=microseconds)
    except (InvalidOperation, OverflowError) as exc:
        raise ConversionError(field, exc) from exc


def strip_pipe_qualifier(unit):
    """Drop a trailing ", pipe N" from a round-trip unit token."""
    match = PIPE_QUALIFIER_RE.match(unit)
    if match:
        return match.group("unit")
    return unit


def parse_duration_group(fields, values, unit):
    """Apply one shared unit to several numbers, e.g. the four round-trip values."""
    unit = strip_pipe_qualifier(unit.strip())
    return tuple(
        parse_duration(field, value + unit) for field, value in zip(fields, values)
    )
