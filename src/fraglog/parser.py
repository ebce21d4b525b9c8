"""
Game Log Parser for Quake III Arena server logs

Drives the line grammar over a whole log and folds kill events into
per-match state, emitting one GameReport each time a match is closed by
ShutdownGame.

Parsing is all-or-nothing per line: the first line that cannot be
recognized stops the parse. Reports for matches closed before that line are
still returned, together with the error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import StrEnum
from pathlib import Path

from fraglog.core.causes import CauseTally
from fraglog.core.constants import MATCH_BOUNDARY, EventKind
from fraglog.core.errors import LogParseError
from fraglog.core.grammar import KillEvent, iter_lines, parse_line
from fraglog.core.schemas import GameReport, ParseResult
from fraglog.core.utils import timed
from fraglog.loader import iter_log_lines, read_log

logger = logging.getLogger(__name__)


class ParserState(StrEnum):
    """Lifecycle of a LogParser."""

    ACCUMULATING = "accumulating"
    FAILED = "failed"  # terminal


class LogParser:
    """
    Per-match aggregation engine.

    Holds the running state of the match being read: game number, kill
    count, net frags per player and kills per cause. Every player name kept
    in that state is an independent str, so callers may hand in lines from a
    reused buffer.

    Usage:
        parser = LogParser()
        result = parser.parse(log_text)
        for report in result.reports:
            print(report.total_kills)
    """

    def __init__(self):
        self._state = ParserState.ACCUMULATING
        self._line_number = 0
        self._game_number = 0
        self._total_kills = 0
        self._kills: dict[str, int] = {}
        self._players: dict[str, None] = {}  # ordered set
        self._means = CauseTally()

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def game_number(self) -> int:
        """Number the next closed match will get."""
        return self._game_number

    @property
    def pending_kills(self) -> int:
        """Kills read so far in the match that is still open."""
        return self._total_kills

    @property
    def lines_processed(self) -> int:
        return self._line_number

    def feed(self, line: str) -> GameReport | None:
        """
        Process one log line.

        Blank lines are skipped. Returns the report of the match this line
        closed, if any.

        Raises:
            LogParseError: If the line cannot be recognized. The parser then
                stays in the FAILED state.
            RuntimeError: If the parser already failed.
        """
        if self._state is ParserState.FAILED:
            raise RuntimeError("parser has failed, create a new LogParser")

        self._line_number += 1
        if not line.strip():
            return None

        try:
            kind, kill = parse_line(line)
        except LogParseError as e:
            self._state = ParserState.FAILED
            raise e.with_context(line, self._line_number)

        if kind is EventKind.KILL:
            self._record_kill(kill)
        elif kind is MATCH_BOUNDARY:
            return self._close_match()

        return None

    def parse(self, source: str | Iterable[str]) -> ParseResult:
        """
        Parse a whole log.

        Args:
            source: The full log text, or an iterable yielding its lines

        Returns:
            ParseResult with every closed match, plus the error that stopped
            parsing if a line failed
        """
        lines = iter_lines(source) if isinstance(source, str) else source
        result = ParseResult()

        for line in lines:
            try:
                report = self.feed(line)
            except LogParseError as e:
                logger.warning(f"Parsing stopped: {e}")
                result.error = e
                break
            if report is not None:
                result.reports.append(report)

        result.lines_processed = self._line_number
        if self._total_kills and result.ok:
            logger.info(
                f"Log ended inside game_{self._game_number} "
                f"({self._total_kills} kills), match not reported"
            )
        logger.info(
            f"Parsed {result.lines_processed} lines, {len(result.reports)} games closed"
        )
        return result

    def _record_kill(self, kill: KillEvent) -> None:
        self._total_kills += 1

        if kill.by_world:
            # Deaths to the world count against the victim
            self._kills[kill.victim] = self._kills.get(kill.victim, 0) - 1
        else:
            assassin = kill.assassin.name
            self._players.setdefault(assassin, None)
            self._kills[assassin] = self._kills.get(assassin, 0) + 1

        self._players.setdefault(kill.victim, None)
        self._means.increment(kill.cause)

    def _close_match(self) -> GameReport:
        report = GameReport.snapshot(
            game_number=self._game_number,
            total_kills=self._total_kills,
            kills=self._kills,
            players=list(self._players),
            means=self._means,
        )
        logger.debug(f"Closed {report.name}: {report.total_kills} kills")

        self._game_number += 1
        self._total_kills = 0
        self._kills = {}
        self._players = {}
        self._means.reset()

        return report


def parse_log(source: str | Iterable[str]) -> ParseResult:
    """
    Parse a log with a fresh parser.

    Args:
        source: The full log text, or an iterable yielding its lines

    Returns:
        ParseResult
    """
    return LogParser().parse(source)


@timed
def parse_log_file(
    path: str | Path,
    use_mmap: bool = False,
    streaming: bool = False,
    encoding: str = "utf-8",
    errors: str = "replace",
) -> ParseResult:
    """
    Read and parse a log file.

    Args:
        path: Path to the log file
        use_mmap: Map the file into memory before parsing
        streaming: Read the file line by line instead of all at once
        encoding: Text encoding of the log
        errors: Codec error handler for undecodable bytes

    Returns:
        ParseResult

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if streaming:
        return parse_log(iter_log_lines(path, encoding=encoding, errors=errors))
    return parse_log(read_log(path, use_mmap=use_mmap, encoding=encoding, errors=errors))
