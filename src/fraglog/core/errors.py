"""
Parse errors raised by the line grammar and surfaced by the log parser.

Every error is line-local. The parser attaches the failing line and its
1-based line number before handing the error back to the caller.
"""

from __future__ import annotations


class LogParseError(ValueError):
    """Base class for every failure to recognize a log line."""

    def __init__(
        self,
        message: str,
        line: str | None = None,
        line_number: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.line = line
        self.line_number = line_number

    def with_context(self, line: str, line_number: int) -> LogParseError:
        """Attach the offending line and return self."""
        self.line = line
        self.line_number = line_number
        return self

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        text = (self.line or "").rstrip("\n")
        return f"line {self.line_number}: {self.message}: {text!r}"


class MalformedTimestamp(LogParseError):
    """The line does not start with a `MM:SS` timestamp."""


class UnrecognizedEventKind(LogParseError):
    """The text after the timestamp is not a known event keyword."""


class MalformedKillPayload(LogParseError):
    """A Kill line is missing one of its `:`, ` killed ` or ` by ` anchors."""


class UnrecognizedCause(LogParseError):
    """A Kill line ends with a cause keyword outside the registry."""

    def __init__(
        self,
        keyword: str,
        line: str | None = None,
        line_number: int | None = None,
    ):
        super().__init__(f"unrecognized cause of death {keyword!r}", line, line_number)
        self.keyword = keyword
