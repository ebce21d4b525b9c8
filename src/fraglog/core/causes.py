"""
Cause Registry

Closed enumeration of the means of death a Quake III server reports, plus a
dense counting table indexed by each cause's ordinal.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from fraglog.core.errors import UnrecognizedCause

KEYWORD_PREFIX = "MOD_"


class DeathCause(int, Enum):
    """
    Means of death.

    The value is the ordinal used as an index into CauseTally, so values
    must stay contiguous from 0. The log keyword is MOD_<NAME>.
    """

    UNKNOWN = 0
    SHOTGUN = 1
    GAUNTLET = 2
    MACHINEGUN = 3
    GRENADE = 4
    GRENADE_SPLASH = 5
    ROCKET = 6
    ROCKET_SPLASH = 7
    PLASMA = 8
    PLASMA_SPLASH = 9
    RAILGUN = 10
    LIGHTNING = 11
    BFG = 12
    BFG_SPLASH = 13
    WATER = 14
    SLIME = 15
    LAVA = 16
    CRUSH = 17
    TELEFRAG = 18
    FALLING = 19
    SUICIDE = 20
    TARGET_LASER = 21
    TRIGGER_HURT = 22
    NAIL = 23
    CHAINGUN = 24
    PROXIMITY_MINE = 25
    KAMIKAZE = 26
    JUICED = 27
    GRAPPLE = 28

    @property
    def keyword(self) -> str:
        """Log keyword, e.g. MOD_ROCKET_SPLASH."""
        return KEYWORD_PREFIX + self.name

    @classmethod
    def from_keyword(cls, keyword: str) -> DeathCause:
        return resolve_cause(keyword)


# Reverse lookup table for parsing
_KEYWORD_TO_CAUSE = {cause.keyword: cause for cause in DeathCause}

CAUSE_COUNT = len(DeathCause)


def resolve_cause(keyword: str) -> DeathCause:
    """
    Resolve a MOD_* keyword to its DeathCause.

    Raises:
        UnrecognizedCause: If the keyword is not in the registry. There is no
            fallback to DeathCause.UNKNOWN, only the literal MOD_UNKNOWN maps there.
    """
    try:
        return _KEYWORD_TO_CAUSE[keyword]
    except KeyError:
        raise UnrecognizedCause(keyword) from None


def keyword_of(cause: DeathCause) -> str:
    """Inverse of resolve_cause."""
    return cause.keyword


def _iter_nonzero(counts) -> Iterator[tuple[DeathCause, int]]:
    for ordinal, count in enumerate(counts):
        if count:
            yield DeathCause(ordinal), count


@dataclass
class CauseTally:
    """Kill counters per cause, stored densely by ordinal."""

    counts: list[int] = field(default_factory=lambda: [0] * CAUSE_COUNT)

    def increment(self, cause: DeathCause) -> None:
        self.counts[cause] += 1

    def __getitem__(self, cause: DeathCause) -> int:
        return self.counts[cause]

    @property
    def total(self) -> int:
        return sum(self.counts)

    def iter_nonzero(self) -> Iterator[tuple[DeathCause, int]]:
        """
        Yield (cause, count) pairs in ascending ordinal order.

        Causes that were never counted are skipped. Each call starts a fresh scan.
        """
        return _iter_nonzero(self.counts)

    def as_dict(self) -> dict[str, int]:
        """Keyword -> count for every non-zero cause, in ordinal order."""
        return {cause.keyword: count for cause, count in self.iter_nonzero()}

    def freeze(self) -> CauseCounts:
        """Read-only copy of the current counters."""
        return CauseCounts(counts=tuple(self.counts))

    def reset(self) -> None:
        self.counts = [0] * CAUSE_COUNT


@dataclass(frozen=True)
class CauseCounts:
    """Frozen per-cause counters, as held by a closed match report."""

    counts: tuple[int, ...] = (0,) * CAUSE_COUNT

    def __getitem__(self, cause: DeathCause) -> int:
        return self.counts[cause]

    @property
    def total(self) -> int:
        return sum(self.counts)

    def iter_nonzero(self) -> Iterator[tuple[DeathCause, int]]:
        return _iter_nonzero(self.counts)

    def as_dict(self) -> dict[str, int]:
        return {cause.keyword: count for cause, count in self.iter_nonzero()}
