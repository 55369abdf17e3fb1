# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

import os
import sys
from datetime import timedelta

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from pingparse import ConversionError
from pingparse.normalize import (
    parse_duration,
    parse_duration_group,
    parse_percent,
    parse_uint,
    strip_pipe_qualifier,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("0.026 ms", timedelta(microseconds=26)),
        ("0.026ms", timedelta(microseconds=26)),
        ("286 ms", timedelta(milliseconds=286)),
        ("10021ms", timedelta(milliseconds=10021)),
        ("1.5s", timedelta(milliseconds=1500)),
        ("2m", timedelta(minutes=2)),
        ("1m30s", timedelta(seconds=90)),
        ("750us", timedelta(microseconds=750)),
        ("750 µs", timedelta(microseconds=750)),
        ("1500ns", timedelta(microseconds=2)),
        ("0", timedelta(0)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration("time", text) == expected


def test_three_decimal_milliseconds_are_exact():
    for n in range(0, 1000):
        text = f"{n // 1000}.{n % 1000:03d} ms"
        assert parse_duration("time", text) == timedelta(microseconds=n)


@pytest.mark.parametrize("text", ["", "ms", "12", "1.2.3ms", "12 parsecs", "-1ms"])
def test_parse_duration_rejects(text):
    with pytest.raises(ConversionError) as excinfo:
        parse_duration("reply time", text)
    assert excinfo.value.field == "reply time"
    assert str(excinfo.value).startswith("reply time: ")


def test_parse_duration_out_of_range():
    with pytest.raises(ConversionError) as excinfo:
        parse_duration("stats time", "9" * 30 + "ms")
    assert excinfo.value.field == "stats time"


def test_parse_uint():
    assert parse_uint("ttl", "64") == 64
    assert parse_uint("ttl", str(2**64 - 1)) == 2**64 - 1
    with pytest.raises(ConversionError) as excinfo:
        parse_uint("ttl", str(2**64))
    assert isinstance(excinfo.value.cause, OverflowError)
    for bad in ("", "-1", "6x4", "٣"):
        with pytest.raises(ConversionError):
            parse_uint("ttl", bad)


def test_parse_percent():
    assert parse_percent("packet loss", "100") == 100
    with pytest.raises(ConversionError):
        parse_percent("packet loss", "101")


def test_strip_pipe_qualifier():
    assert strip_pipe_qualifier("ms, pipe 2") == "ms"
    assert strip_pipe_qualifier("ms") == "ms"


def test_shared_unit_group():
    fields = ("min", "avg", "max", "mdev")
    values = ("0.021", "0.026", "0.031", "0.004")
    expected = tuple(timedelta(microseconds=n) for n in (21, 26, 31, 4))
    assert parse_duration_group(fields, values, "ms") == expected
    assert parse_duration_group(fields, values, "ms, pipe 2") == expected


def test_shared_unit_group_names_failing_field():
    with pytest.raises(ConversionError) as excinfo:
        parse_duration_group(("min", "avg"), ("0.1", "x"), "ms")
    assert excinfo.value.field == "avg"
