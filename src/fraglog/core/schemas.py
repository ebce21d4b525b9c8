"""
fraglog Data Contracts

Structures handed from the log parser to its callers (renderers, CLI).

Producers: parser.py
Consumers: export.py, cli.py
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from fraglog.core.causes import CauseCounts, CauseTally
from fraglog.core.errors import LogParseError


# ============================================================
# GAME REPORT - one closed match
# ============================================================


@dataclass(frozen=True)
class GameReport:
    """Immutable summary of one match, taken when ShutdownGame was read."""

    game_number: int
    total_kills: int
    kills: Mapping[str, int]  # player name -> net frags
    players: tuple[str, ...]  # every player seen as assassin or victim, first-seen order
    means: CauseCounts  # frozen per-cause counters

    @classmethod
    def snapshot(
        cls,
        game_number: int,
        total_kills: int,
        kills: dict[str, int],
        players: list[str],
        means: CauseTally,
    ) -> GameReport:
        """Copy running match state into a report the caller may keep."""
        return cls(
            game_number=game_number,
            total_kills=total_kills,
            kills=MappingProxyType(dict(kills)),
            players=tuple(players),
            means=means.freeze(),
        )

    @property
    def name(self) -> str:
        return f"game_{self.game_number}"

    @property
    def kills_by_means(self) -> dict[str, int]:
        return self.means.as_dict()

    @property
    def top_fragger(self) -> tuple[str, int] | None:
        """Player with the highest net frag count (first seen wins ties)."""
        if not self.kills:
            return None
        return max(self.kills.items(), key=lambda item: item[1])

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_kills": self.total_kills,
            "players": list(self.players),
            "kills": dict(self.kills),
            "kills_by_means": self.kills_by_means,
        }


# ============================================================
# PARSE RESULT - reports plus the failure that stopped parsing
# ============================================================


@dataclass
class ParseResult:
    """
    Outcome of parsing a whole log.

    Parsing stops at the first line that fails; every report closed before
    that line is kept in `reports` and the failure is stored in `error`.
    """

    reports: list[GameReport] = field(default_factory=list)
    error: LogParseError | None = None
    lines_processed: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error
