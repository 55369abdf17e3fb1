# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

"""Turn a complete ping transcript into a ProbeResult.

The transcript is the captured stdout of a finished ping run. A non-zero exit
status (100% loss for instance) still produces parseable output, so callers
hand the text over regardless of how the process ended.

Example:
result = parse(captured_stdout)
result.statistics.packet_loss_percent
"""

import logging

from . import errors
from .grammar import (
    REPLY_SECTION,
    STATS_LINE_1_KINDS,
    LineKind,
    classify,
)
from .models import ProbeResult, Reply, Statistics, expects_round_trip
from .normalize import (
    parse_duration,
    parse_duration_group,
    parse_percent,
    parse_uint,
)

logger = logging.getLogger(__name__)

MIN_LINES = 5

_ROUND_TRIP_FIELDS = ("rtt min", "rtt avg", "rtt max", "rtt mdev")


def _split_lines(text):
    if isinstance(text, (bytes, bytearray)):
        text = text.decode("utf-8", errors="replace")
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def _line_at(lines, index):
    if index < len(lines):
        return lines[index]
    return ""


def _parse_header(line):
    classified = classify(line, (LineKind.HEADER,))
    if classified.kind != LineKind.HEADER:
        raise errors.HeaderMismatch(line, 1)
    fields = classified.fields
    actual_size = 0
    if "payload_actual_size" in fields:
        actual_size = parse_uint("payload_actual_size", fields["payload_actual_size"])
        logger.debug("linux style header")
    else:
        logger.debug("bsd style header")
    return {
        "host": fields["host"],
        "resolved_address": fields["resolved_address"],
        "payload_size": parse_uint("payload_size", fields["payload_size"]),
        "payload_actual_size": actual_size,
    }


def _reply(classified):
    fields = classified.fields
    if classified.kind == LineKind.HOST_ERROR:
        sequence_number = 0
        if "sequence_number" in fields:
            sequence_number = parse_uint("error reply seq", fields["sequence_number"])
        return Reply(
            from_address=fields["from_address"],
            sequence_number=sequence_number,
            error_text=fields["error_text"],
        )
    return Reply(
        size=parse_uint("reply size", fields["size"]),
        from_address=fields["from_address"],
        sequence_number=parse_uint("reply seq", fields["sequence_number"]),
        ttl=parse_uint("ttl", fields["ttl"]),
        round_trip_time=parse_duration("reply time", fields["time"]),
        duplicate=classified.kind == LineKind.DUPLICATE_REPLY,
    )


def _walk_replies(lines):
    """Collect reply lines and return them with the separator line index."""
    replies = []
    for index in range(1, len(lines)):
        line = lines[index]
        if line == "":
            return replies, index + 1
        classified = classify(line, REPLY_SECTION)
        logger.debug("line %d: %s", index + 1, classified.kind.value)
        if classified.kind == LineKind.STATS_SEPARATOR:
            return replies, index
        if classified.kind == LineKind.UNRECOGNIZED:
            raise errors.UnrecognizedLine(line, index + 1)
        replies.append(_reply(classified))
    # neither a blank line nor a separator: the trailer is missing
    return replies, len(lines)


def _parse_stats_line_1(line, line_number):
    classified = classify(line, STATS_LINE_1_KINDS)
    if classified.kind == LineKind.UNRECOGNIZED:
        raise errors.MalformedStatsLine1(line, line_number)
    fields = classified.fields
    stats = {
        "packets_transmitted": parse_uint(
            "packets transmitted", fields["packets_transmitted"]
        ),
        "packets_received": parse_uint("packets received", fields["packets_received"]),
    }
    if "duplicates" in fields:
        stats["duplicates"] = parse_uint("duplicates", fields["duplicates"])
    if "errors" in fields:
        stats["errors"] = parse_uint("errors", fields["errors"])
    if classified.kind == LineKind.WARNING:
        stats["warning"] = fields["warning"]
        return stats
    stats["packet_loss_percent"] = parse_percent("packet loss", fields["packet_loss"])
    if fields.get("time"):
        stats["elapsed"] = parse_duration("stats time", fields["time"])
    return stats


def _parse_stats_line_2(line, line_number):
    classified = classify(line, (LineKind.STATS_LINE_2,))
    if classified.kind == LineKind.UNRECOGNIZED:
        raise errors.MalformedStatsLine2(line, line_number)
    fields = classified.fields
    rtt_min, rtt_avg, rtt_max, rtt_mdev = parse_duration_group(
        _ROUND_TRIP_FIELDS,
        (fields["min"], fields["avg"], fields["max"], fields["mdev"]),
        fields["unit"],
    )
    return {
        "round_trip_min": rtt_min,
        "round_trip_average": rtt_avg,
        "round_trip_max": rtt_max,
        "round_trip_deviation": rtt_mdev,
    }


def parse(text):
    """Parse a full ping transcript (str or bytes) into a ProbeResult.

    Raises a ParseError subclass when the text does not follow one of the
    known dialects.
    """
    lines = _split_lines(text)
    if len(lines) < MIN_LINES:
        raise errors.NotEnoughLines()

    header = _parse_header(lines[0])
    replies, last = _walk_replies(lines)

    separator = _line_at(lines, last)
    classified = classify(separator, (LineKind.STATS_SEPARATOR,))
    if classified.kind != LineKind.STATS_SEPARATOR:
        raise errors.MalformedStatsHeader(separator, last + 1)
    stats = {"address": classified.fields["address"]}

    last += 1
    stats.update(_parse_stats_line_1(_line_at(lines, last), last + 1))

    # the round-trip line only follows when at least one echo came back
    if expects_round_trip(replies):
        last += 1
        stats.update(_parse_stats_line_2(_line_at(lines, last), last + 1))

    result = ProbeResult(
        replies=tuple(replies),
        statistics=Statistics(**stats),
        **header,
    )
    logger.debug(
        "parsed %d replies from %s, %d%% loss",
        len(result.replies),
        result.host,
        result.statistics.packet_loss_percent,
    )
    return result
