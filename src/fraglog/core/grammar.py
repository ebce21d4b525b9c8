"""
Line Grammar for Quake III Arena server logs

Every log line has the shape:

     20:34 <EventKind>: <payload>

The recognizers below are pure functions over a piece of text. Each returns
the recognized value together with the unconsumed remainder of the input,
or raises a LogParseError subclass. None of them keeps state.

Kill payloads look like:

     Kill: 1022 2 22: <world> killed Isgalamido by MOD_TRIGGER_HURT
     Kill: 3 2 6: Dono da Bola killed Zeh by MOD_ROCKET

The numeric triplet (killer id, victim id, cause id) before the first `:` is
not needed to attribute the kill; player names may contain spaces.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from fraglog.core.causes import DeathCause, resolve_cause
from fraglog.core.constants import (
    BY_ANCHOR,
    DASHLINE_CHAR,
    EVENT_TAGS,
    KILL_IDS_SEPARATOR,
    KILLED_ANCHOR,
    LINE_TERMINATOR,
    WORLD_ACTOR,
    EventKind,
)
from fraglog.core.errors import (
    MalformedKillPayload,
    MalformedTimestamp,
    UnrecognizedEventKind,
)

_TIMESTAMP_RE = re.compile(r"\s*([0-9]+):([0-9]+)")
_LEADING_SPACE_RE = re.compile(r"\s*")


# ============================================================================
# Kill payload types
# ============================================================================


@dataclass(frozen=True)
class WorldActor:
    """The map itself: falls, lava, crushers, trigger_hurt..."""

    def __str__(self) -> str:
        return WORLD_ACTOR


@dataclass(frozen=True)
class PlayerActor:
    """A player, identified by the raw name found in the log."""

    name: str

    def __str__(self) -> str:
        return self.name


Actor = WorldActor | PlayerActor

WORLD = WorldActor()


@dataclass(frozen=True)
class KillEvent:
    """Payload of one Kill line."""

    assassin: Actor
    victim: str
    cause: DeathCause
    killer_id: int | None = None
    victim_id: int | None = None
    cause_id: int | None = None

    @property
    def by_world(self) -> bool:
        return isinstance(self.assassin, WorldActor)


# ============================================================================
# Recognizers
# ============================================================================


def parse_timestamp(text: str) -> tuple[tuple[str, str], str]:
    """
    Parse the `MM:SS` timestamp that opens every line.

    Leading whitespace is skipped; whatever follows the seconds is returned
    untouched.

        >>> parse_timestamp("  20:34 ClientConnect: 2")
        (('20', '34'), ' ClientConnect: 2')
    """
    match = _TIMESTAMP_RE.match(text)
    if match is None:
        raise MalformedTimestamp("expected a MM:SS timestamp")
    return (match.group(1), match.group(2)), text[match.end() :]


def parse_event_kind(text: str) -> tuple[EventKind, str]:
    """
    Parse the event keyword that follows the timestamp.

    See EventKind for the vocabulary. The remainder starts right after the
    keyword (including its trailing `:`).
    """
    start = _LEADING_SPACE_RE.match(text).end()
    body = text[start:]

    for tag, kind in EVENT_TAGS:
        if body.startswith(tag):
            return kind, body[len(tag) :]

    # "------------------------------------------------------------"
    if body.startswith(DASHLINE_CHAR):
        stripped = body.lstrip(DASHLINE_CHAR)
        return EventKind.DASHLINE, stripped

    raise UnrecognizedEventKind(f"unrecognized event kind {_first_word(body)!r}")


def parse_kill(text: str) -> tuple[KillEvent, str]:
    """
    Parse the content of a Kill line, i.e. everything after `Kill:`.

        " 3 4 6: player1 killed Player 2 by MOD_ROCKET"

    The payload ends at the end of the line; the returned remainder starts at
    the line terminator, or is empty when the text had none.
    """
    line_end = text.find(LINE_TERMINATOR)
    if line_end == -1:
        payload, rest = text, ""
    else:
        payload, rest = text[:line_end], text[line_end:]

    # "[ 3 4 6: ]player1 killed Player 2 by MOD_ROCKET"
    separator = payload.find(KILL_IDS_SEPARATOR)
    if separator == -1:
        raise MalformedKillPayload("missing ':' after the kill id triplet")
    ids = payload[:separator]
    body = payload[separator + 1 :]
    if not body[:1].isspace():
        raise MalformedKillPayload("missing space after the kill id triplet")
    body = body[1:]

    # "[player1] killed Player 2 by MOD_ROCKET"
    killed_at = body.find(KILLED_ANCHOR)
    if killed_at == -1:
        raise MalformedKillPayload(f"missing {KILLED_ANCHOR.strip()!r} anchor")
    assassin_text = body[:killed_at]
    body = body[killed_at + len(KILLED_ANCHOR) :]

    # "killed [Player 2] by MOD_ROCKET"
    by_at = body.find(BY_ANCHOR)
    if by_at == -1:
        raise MalformedKillPayload(f"missing {BY_ANCHOR.strip()!r} anchor")
    victim = body[:by_at]

    # "by [MOD_ROCKET]"
    cause = resolve_cause(body[by_at + len(BY_ANCHOR) :].rstrip())

    if assassin_text == WORLD_ACTOR:
        assassin: Actor = WORLD
    else:
        assassin = PlayerActor(assassin_text)

    killer_id, victim_id, cause_id = _parse_kill_ids(ids)
    kill = KillEvent(
        assassin=assassin,
        victim=victim,
        cause=cause,
        killer_id=killer_id,
        victim_id=victim_id,
        cause_id=cause_id,
    )
    return kill, rest


def parse_line(line: str) -> tuple[EventKind, KillEvent | None]:
    """Recognize a whole line: timestamp, event kind and, for kills, the payload."""
    _, rest = parse_timestamp(line)
    kind, rest = parse_event_kind(rest)
    if kind is EventKind.KILL:
        kill, _ = parse_kill(rest)
        return kind, kill
    return kind, None


def consume_rest_of_line(text: str) -> tuple[str, str]:
    """
    Split off everything up to the next line terminator.

    Returns (line_body, rest) where rest starts after the terminator. Text
    without a terminator is one last line.
    """
    line_end = text.find(LINE_TERMINATOR)
    if line_end == -1:
        return text, ""
    return text[:line_end], text[line_end + 1 :]


def iter_lines(buffer: str) -> Iterator[str]:
    """Yield the lines of a whole-log buffer, without their terminators."""
    start = 0
    while start < len(buffer):
        line_end = buffer.find(LINE_TERMINATOR, start)
        if line_end == -1:
            yield buffer[start:]
            return
        yield buffer[start:line_end]
        start = line_end + 1


# ============================================================================
# Helpers
# ============================================================================


def _parse_kill_ids(ids: str) -> tuple[int | None, int | None, int | None]:
    parts = ids.split()
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        return None, None, None
    killer_id, victim_id, cause_id = (int(part) for part in parts)
    return killer_id, victim_id, cause_id


def _first_word(text: str) -> str:
    words = text.split(maxsplit=1)
    return words[0] if words else ""
