"""
fraglog Core - Foundation modules for log parsing.

This module contains the fundamental components:
- constants: Event vocabulary and grammar anchors
- causes: Means-of-death registry and dense counters
- errors: Typed parse failures
- grammar: Line recognizers (timestamp, event kind, kill payload)
- schemas: Data contracts handed to callers
- config: Application configuration management
"""

from fraglog.core.causes import (
    CAUSE_COUNT,
    CauseCounts,
    CauseTally,
    DeathCause,
    keyword_of,
    resolve_cause,
)
from fraglog.core.constants import MATCH_BOUNDARY, WORLD_ACTOR, EventKind
from fraglog.core.errors import (
    LogParseError,
    MalformedKillPayload,
    MalformedTimestamp,
    UnrecognizedCause,
    UnrecognizedEventKind,
)
from fraglog.core.grammar import (
    WORLD,
    KillEvent,
    PlayerActor,
    WorldActor,
    parse_event_kind,
    parse_kill,
    parse_line,
    parse_timestamp,
)
from fraglog.core.schemas import GameReport, ParseResult

__all__ = [
    # Enums
    "DeathCause",
    "EventKind",
    # Constants
    "CAUSE_COUNT",
    "MATCH_BOUNDARY",
    "WORLD_ACTOR",
    # Cause registry
    "CauseCounts",
    "CauseTally",
    "keyword_of",
    "resolve_cause",
    # Errors
    "LogParseError",
    "MalformedKillPayload",
    "MalformedTimestamp",
    "UnrecognizedCause",
    "UnrecognizedEventKind",
    # Grammar
    "WORLD",
    "KillEvent",
    "PlayerActor",
    "WorldActor",
    "parse_event_kind",
    "parse_kill",
    "parse_line",
    "parse_timestamp",
    # Schemas (data contracts)
    "GameReport",
    "ParseResult",
]
