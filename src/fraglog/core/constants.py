"""
fraglog - Constants

Defines the event vocabulary of a Quake III Arena server log and the literal
anchors used by the line grammar.
"""

from enum import StrEnum


class EventKind(StrEnum):
    """
    Every event kind a log line may carry.

    The full set can be listed from a real log with:
        awk '{print $2}' games.log | sort | uniq
    """

    CLIENT_BEGIN = "ClientBegin"
    CLIENT_CONNECT = "ClientConnect"
    CLIENT_DISCONNECT = "ClientDisconnect"
    CLIENT_USERINFO_CHANGED = "ClientUserinfoChanged"
    EXIT = "Exit"
    INIT_GAME = "InitGame"
    ITEM = "Item"
    KILL = "Kill"
    SAY = "Say"
    SCORE = "Score"
    SHUTDOWN_GAME = "ShutdownGame"
    DASHLINE = "Dashline"  # ------------------------------
    CTF_SCORE = "CtfScore"  # red:N  blue:M


# Literal tag that introduces each event kind, in matching order.
# Dashline has no fixed tag, it is any run of "-".
EVENT_TAGS: tuple[tuple[str, EventKind], ...] = (
    ("ClientBegin:", EventKind.CLIENT_BEGIN),
    ("ClientConnect:", EventKind.CLIENT_CONNECT),
    ("ClientDisconnect:", EventKind.CLIENT_DISCONNECT),
    ("ClientUserinfoChanged:", EventKind.CLIENT_USERINFO_CHANGED),
    ("InitGame:", EventKind.INIT_GAME),
    ("Item:", EventKind.ITEM),
    ("Kill:", EventKind.KILL),
    ("say:", EventKind.SAY),
    ("score:", EventKind.SCORE),
    ("ShutdownGame:", EventKind.SHUTDOWN_GAME),
    ("red:", EventKind.CTF_SCORE),
    ("Exit:", EventKind.EXIT),
)

DASHLINE_CHAR = "-"

# The only event kind that closes a match
MATCH_BOUNDARY = EventKind.SHUTDOWN_GAME

# Kill payload anchors: "<ids>: <assassin> killed <victim> by <MOD_*>"
KILL_IDS_SEPARATOR = ":"
KILLED_ANCHOR = " killed "
BY_ANCHOR = " by "

# Assassin text used by the server for environmental deaths
WORLD_ACTOR = "<world>"

LINE_TERMINATOR = "\n"
