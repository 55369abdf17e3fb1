# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

"""Parse failures.

Every failure aborts the parse. Line related errors carry the offending line
and its 1-based number when one is available.
"""


class ParseError(ValueError):
    reason = "parse error"

    def __init__(self, line=None, line_number=None):
        self.line = line
        self.line_number = line_number
        super().__init__(self._message())

    def _message(self):
        if self.line is None:
            return self.reason
        if self.line_number is None:
            return f"{self.reason}: {self.line!r}"
        return f"{self.reason} (line {self.line_number}): {self.line!r}"


class NotEnoughLines(ParseError):
    """Fewer than five lines of text.

    BSD output for a total loss without any reply line (header, separator,
    one statistics line) splits into four lines and is rejected here too.
    """

    reason = "not enough lines"


class HeaderMismatch(ParseError):
    reason = "header mismatch"


class UnrecognizedLine(ParseError):
    reason = "unrecognized ping reply line"


class MalformedStatsHeader(ParseError):
    reason = "malformed stats header"


class MalformedStatsLine1(ParseError):
    reason = "malformed stats line 1"


class MalformedStatsLine2(ParseError):
    reason = "malformed stats line 2"


class ConversionError(ParseError):
    reason = "conversion error"

    def __init__(self, field, cause):
        self.field = field
        self.cause = cause
        super().__init__()

    def _message(self):
        return f"{self.field}: {self.cause}"
