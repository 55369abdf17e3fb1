# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

"""Records produced by a parse.

Durations are ``datetime.timedelta`` values; a zero timedelta stands for a
field the transcript did not report.
"""

from dataclasses import asdict, dataclass, field
from datetime import timedelta

ZERO = timedelta(0)


def _to_ms(value):
    return value / timedelta(milliseconds=1)


def _plain(value):
    if isinstance(value, timedelta):
        return _to_ms(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def expects_round_trip(replies):
    return any(not reply.is_error for reply in replies)


@dataclass(frozen=True)
class Reply:
    size: int = 0
    from_address: str = ""
    sequence_number: int = 0
    ttl: int = 0
    round_trip_time: timedelta = ZERO
    error_text: str = ""
    duplicate: bool = False

    @property
    def is_error(self):
        return self.error_text != ""

    def as_dict(self):
        return _plain(asdict(self))


@dataclass(frozen=True)
class Statistics:
    address: str = ""
    packets_transmitted: int = 0
    packets_received: int = 0
    errors: int = 0
    duplicates: int = 0
    packet_loss_percent: int = 0
    elapsed: timedelta = ZERO
    round_trip_min: timedelta = ZERO
    round_trip_average: timedelta = ZERO
    round_trip_max: timedelta = ZERO
    round_trip_deviation: timedelta = ZERO
    warning: str = ""

    def as_dict(self):
        return _plain(asdict(self))


@dataclass(frozen=True)
class ProbeResult:
    host: str
    resolved_address: str
    payload_size: int
    payload_actual_size: int = 0
    replies: tuple = ()
    statistics: Statistics = field(default_factory=Statistics)

    @property
    def has_round_trip(self):
        """True when a round-trip summary line was part of the transcript."""
        return expects_round_trip(self.replies)

    def as_dict(self):
        return _plain(asdict(self))
