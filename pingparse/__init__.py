# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

"""Parse captured ping output (Linux and BSD/macOS dialects) into records."""

from .errors import (
    ConversionError,
    HeaderMismatch,
    MalformedStatsHeader,
    MalformedStatsLine1,
    MalformedStatsLine2,
    NotEnoughLines,
    ParseError,
    UnrecognizedLine,
)
from .grammar import Classified, LineKind, classify
from .models import ProbeResult, Reply, Statistics
from .parser import parse

__all__ = [
    "Classified",
    "ConversionError",
    "HeaderMismatch",
    "LineKind",
    "MalformedStatsHeader",
    "MalformedStatsLine1",
    "MalformedStatsLine2",
    "NotEnoughLines",
    "ParseError",
    "ProbeResult",
    "Reply",
    "Statistics",
    "UnrecognizedLine",
    "classify",
    "parse",
]
