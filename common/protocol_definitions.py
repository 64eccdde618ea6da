"""
Protocol definitions for the MiniChat relay.

This module defines the line formats used in communication between client and
server components. Every message on the wire is a single UTF-8 line terminated
by a newline; the roster reply is the only multi-line block.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from common.constants import (
    CLOCK_FORMAT, JOINED_AT_FORMAT, SERVER_SENDER, USERNAME_PATTERN,
    USERNAME_PREFIX, Prompts
)

_USERNAME_RE = re.compile(USERNAME_PATTERN)


@dataclass
class SessionInfo:
    """Roster entry structure."""
    username: str
    joined_at: datetime


def clock_stamp(now: Optional[datetime] = None) -> str:
    """Return the HH:MM:SS prefix carried by every relayed line."""
    return (now or datetime.now()).strftime(CLOCK_FORMAT)


def parse_username_line(line: str) -> Optional[str]:
    """
    Extract the proposed name from a ``username = <name>`` line.

    Returns the trimmed name (possibly empty) when the line matches the
    registration pattern, or None when it does not.
    """
    match = _USERNAME_RE.match(line.strip())
    if match is None:
        return None
    return match.group(1).strip()


def create_username_line(name: str) -> str:
    """Create a registration line, leaving an already-prefixed one untouched."""
    if name.startswith(USERNAME_PREFIX):
        return name
    return USERNAME_PREFIX + name


def format_chat_line(sender: str, text: str, now: Optional[datetime] = None) -> str:
    """Create a relayed chat line."""
    return f"{clock_stamp(now)} {sender}: {text}"


def format_server_line(text: str, now: Optional[datetime] = None) -> str:
    """Create a server-authored line."""
    return format_chat_line(SERVER_SENDER, text, now)


def welcome_text(username: str) -> str:
    return f"Welcome {username}"


def goodbye_text(username: str) -> str:
    return f"Goodbye {username}"


def format_joined_at(joined_at: datetime) -> str:
    """Format a join time in local time, e.g. ``Mon Oct 05 14:03:11 CEST 2026``."""
    return joined_at.astimezone().strftime(JOINED_AT_FORMAT)


def format_user_list(sessions: Iterable[SessionInfo], now: Optional[datetime] = None) -> str:
    """
    Create the roster block sent in reply to ``AllUsers``.

    Entries are sorted by name and numbered from 1. The block starts and ends
    with an empty line so it stands apart from the surrounding chat.
    """
    lines = ["", Prompts.ROSTER_HEADER.format(time=clock_stamp(now))]
    ordered = sorted(sessions, key=lambda info: info.username)
    for index, info in enumerate(ordered, start=1):
        lines.append(f"\t{index}) {info.username} since {format_joined_at(info.joined_at)}")
    lines.append("")
    return "\n".join(lines)


def is_registration_error(line: str) -> bool:
    """Check whether a server line asks the client to pick another name."""
    return line in (Prompts.USERNAME_TAKEN, Prompts.USERNAME_EMPTY)


def is_server_prompt(line: str) -> bool:
    """Check whether a server line is one of the technical registration prompts."""
    return line in Prompts.all()
