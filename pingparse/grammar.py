# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

"""Line grammars for ping transcripts.

Linux (iputils):
    PING 127.0.0.1 (127.0.0.1) 56(84) bytes of data.
    64 bytes from 127.0.0.1: icmp_seq=1 ttl=64 time=0.026 ms
    From 93.184.216.34 icmp_seq=2 Destination Host Unreachable

    --- 127.0.0.1 ping statistics ---
    3 packets transmitted, 3 received, 0% packet loss, time 10021ms
    rtt min/avg/max/mdev = 0.021/0.026/0.031/0.004 ms

BSD / macOS:
    PING 127.0.0.1 (127.0.0.1): 56 data bytes
    64 bytes from 127.0.0.1: icmp_seq=0 ttl=64 time=0.061 ms
    92 bytes from 93.184.216.34: Destination Host Unreachable
    --- 127.0.0.1 ping statistics ---
    3 packets transmitted, 3 packets received, 0% packet loss
    round-trip min/avg/max/stddev = 0.057/0.075/0.108/0.023 ms

Each line category has a primary grammar and at most one fallback. The
compiled patterns are module constants and are never modified.
"""

import enum
import re
from collections import namedtuple

_IPV4 = r"\d+\.\d+\.\d+\.\d+"

DUPLICATE_MARKER = " (DUP!)"

HEADER_RE = re.compile(
    rf"^PING (?P<host>{_IPV4}) \((?P<resolved_address>{_IPV4})\) "
    r"(?P<payload_size>\d+)\((?P<payload_actual_size>\d+)\) bytes of data",
    re.ASCII,
)
HEADER_ALT_RE = re.compile(
    rf"^PING (?P<host>{_IPV4}) \((?P<resolved_address>{_IPV4})\): "
    r"(?P<payload_size>\d+) data bytes",
    re.ASCII,
)
REPLY_RE = re.compile(
    rf"^(?P<size>\d+) bytes from (?P<from_address>{_IPV4}): "
    r"icmp_seq=(?P<sequence_number>\d+) ttl=(?P<ttl>\d+) time=(?P<time>.*)$",
    re.ASCII,
)
HOST_ERROR_RE = re.compile(
    rf"^From (?P<from_address>{_IPV4}) icmp_seq=(?P<sequence_number>\d+) "
    r"(?P<error_text>.*)$",
    re.ASCII,
)
HOST_ERROR_ALT_RE = re.compile(
    rf"^\d+ bytes from (?P<from_address>{_IPV4}): (?P<error_text>(?!icmp_seq=).+)$",
    re.ASCII,
)
STATS_SEPARATOR_RE = re.compile(
    rf"^--- (?P<address>{_IPV4}) ping statistics ---$",
    re.ASCII,
)

_STATS_COUNTS = (
    r"^(?P<packets_transmitted>\d+) packets transmitted, "
    r"(?P<packets_received>\d+) (?:packets )?received"
    r"(?:, \+(?P<duplicates>\d+) duplicates)?"
)
_STATS_LOSS = (
    r"(?P<packet_loss>\d+)(?:\.\d+)?% packet loss(?:, time (?P<time>.*))?$"
)
STATS_LINE_1_WITH_ERRORS_RE = re.compile(
    _STATS_COUNTS + r", \+(?P<errors>\d+) errors, " + _STATS_LOSS, re.ASCII
)
STATS_LINE_1_RE = re.compile(_STATS_COUNTS + ", " + _STATS_LOSS, re.ASCII)
WARNING_RE = re.compile(_STATS_COUNTS + r", -- (?P<warning>.*)$", re.ASCII)
STATS_LINE_2_RE = re.compile(
    r"^(?:rtt|round-trip) min/avg/max/(?:mdev|stddev) = "
    r"(?P<min>[^/]+)/(?P<avg>[^/]+)/(?P<max>[^/]+)/(?P<mdev>[^ ]+) (?P<unit>.*)$",
    re.ASCII,
)


class LineKind(enum.Enum):
    HEADER = "header"
    REPLY = "reply"
    DUPLICATE_REPLY = "duplicate reply"
    HOST_ERROR = "host error"
    STATS_SEPARATOR = "stats separator"
    STATS_LINE_1 = "stats line 1"
    STATS_LINE_1_WITH_ERRORS = "stats line 1 with errors"
    STATS_LINE_2 = "stats line 2"
    WARNING = "warning"
    UNRECOGNIZED = "unrecognized"


# primary grammar first, fallback second
GRAMMARS = {
    LineKind.HEADER: (HEADER_RE, HEADER_ALT_RE),
    LineKind.REPLY: (REPLY_RE,),
    LineKind.HOST_ERROR: (HOST_ERROR_RE, HOST_ERROR_ALT_RE),
    LineKind.STATS_SEPARATOR: (STATS_SEPARATOR_RE,),
    LineKind.STATS_LINE_1_WITH_ERRORS: (STATS_LINE_1_WITH_ERRORS_RE,),
    LineKind.STATS_LINE_1: (STATS_LINE_1_RE,),
    LineKind.WARNING: (WARNING_RE,),
    LineKind.STATS_LINE_2: (STATS_LINE_2_RE,),
}

REPLY_SECTION = (LineKind.REPLY, LineKind.HOST_ERROR, LineKind.STATS_SEPARATOR)
STATS_LINE_1_KINDS = (
    LineKind.STATS_LINE_1_WITH_ERRORS,
    LineKind.STATS_LINE_1,
    LineKind.WARNING,
)

Classified = namedtuple("Classified", ["kind", "fields"])

UNRECOGNIZED = Classified(LineKind.UNRECOGNIZED, {})


def _match(kind, line):
    for pattern in GRAMMARS[kind]:
        m = pattern.match(line)
        if m:
            return {k: v for k, v in m.groupdict().items() if v is not None}
    return None


def classify(line, kinds):
    """Return the first of ``kinds`` whose grammar matches ``line``.

    A reply line carrying the duplicate marker is reported as
    DUPLICATE_REPLY with the marker removed before matching. Nothing
    matching yields an UNRECOGNIZED result.
    """
    duplicate = line.endswith(DUPLICATE_MARKER)
    stripped = line[: -len(DUPLICATE_MARKER)] if duplicate else line

    for kind in kinds:
        if kind == LineKind.REPLY:
            fields = _match(kind, stripped)
            if fields is not None:
                if duplicate:
                    return Classified(LineKind.DUPLICATE_REPLY, fields)
                return Classified(kind, fields)
            continue
        if kind == LineKind.HOST_ERROR:
            fields = _match(kind, stripped)
        else:
            fields = _match(kind, line)
        if fields is not None:
            return Classified(kind, fields)
    return UNRECOGNIZED
