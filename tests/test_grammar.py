# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from pingparse import LineKind, classify
from pingparse.grammar import REPLY_SECTION, STATS_LINE_1_KINDS


def test_linux_header_reports_actual_size():
    c = classify("PING 10.0.0.1 (10.0.0.1) 56(84) bytes of data.", (LineKind.HEADER,))
    assert c.kind == LineKind.HEADER
    assert c.fields["payload_actual_size"] == "84"


def test_bsd_header_fallback():
    c = classify(
        "PING 10.0.0.1 (10.0.0.2): 56 data bytes, id 0x0001 = 1", (LineKind.HEADER,)
    )
    assert c.kind == LineKind.HEADER
    assert c.fields == {
        "host": "10.0.0.1",
        "resolved_address": "10.0.0.2",
        "payload_size": "56",
    }


def test_hostname_header_is_unrecognized():
    c = classify("PING example.com (93.184.216.34) 56(84) bytes of data.", (LineKind.HEADER,))
    assert c.kind == LineKind.UNRECOGNIZED
    assert c.fields == {}


def test_reply_and_duplicate_reply():
    line = "64 bytes from 10.0.0.1: icmp_seq=3 ttl=61 time=71.488 ms"
    plain = classify(line, REPLY_SECTION)
    dup = classify(line + " (DUP!)", REPLY_SECTION)
    assert plain.kind == LineKind.REPLY
    assert dup.kind == LineKind.DUPLICATE_REPLY
    assert dup.fields == plain.fields
    assert plain.fields["time"] == "71.488 ms"


def test_host_error_forms():
    linux = classify(
        "From 93.184.216.34 icmp_seq=2 Destination Host Unreachable", REPLY_SECTION
    )
    assert linux.kind == LineKind.HOST_ERROR
    assert linux.fields["sequence_number"] == "2"
    assert linux.fields["error_text"] == "Destination Host Unreachable"

    bsd = classify("92 bytes from 93.184.216.34: Destination Host Unreachable", REPLY_SECTION)
    assert bsd.kind == LineKind.HOST_ERROR
    assert bsd.fields == {
        "from_address": "93.184.216.34",
        "error_text": "Destination Host Unreachable",
    }


def test_truncated_reply_is_not_a_host_error():
    c = classify("64 bytes from 10.0.0.1: icmp_seq=3 ttl=61", REPLY_SECTION)
    assert c.kind == LineKind.UNRECOGNIZED


def test_separator_in_reply_section():
    c = classify("--- 10.0.0.1 ping statistics ---", REPLY_SECTION)
    assert c.kind == LineKind.STATS_SEPARATOR
    assert c.fields["address"] == "10.0.0.1"


def test_stats_line_1_variants():
    errors = classify(
        "4 packets transmitted, 0 received, +1 errors, 100% packet loss, time 3055ms",
        STATS_LINE_1_KINDS,
    )
    assert errors.kind == LineKind.STATS_LINE_1_WITH_ERRORS
    assert errors.fields["errors"] == "1"
    assert errors.fields["time"] == "3055ms"

    plain = classify(
        "3 packets transmitted, 3 packets received, 0% packet loss", STATS_LINE_1_KINDS
    )
    assert plain.kind == LineKind.STATS_LINE_1
    assert "time" not in plain.fields
    assert "errors" not in plain.fields

    warning = classify(
        "16 packets transmitted, 24 packets received, -- somebody is printing forged packets!",
        STATS_LINE_1_KINDS,
    )
    assert warning.kind == LineKind.WARNING
    assert warning.fields["warning"] == "somebody is printing forged packets!"


def test_stats_line_2_unit_token():
    c = classify(
        "rtt min/avg/max/mdev = 111.409/198.736/286.063/87.327 ms, pipe 2",
        (LineKind.STATS_LINE_2,),
    )
    assert c.kind == LineKind.STATS_LINE_2
    assert (c.fields["min"], c.fields["mdev"]) == ("111.409", "87.327")
    assert c.fields["unit"] == "ms, pipe 2"


def test_kinds_not_asked_for_are_not_tried():
    c = classify("--- 10.0.0.1 ping statistics ---", (LineKind.REPLY,))
    assert c.kind == LineKind.UNRECOGNIZED
