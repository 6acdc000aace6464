"""
Wire protocol for the Minesweeper server.
Requests are single lines; responses are the strings defined here or a board render.
"""

import re
from collections import namedtuple

BUFFER_SIZE = 4096

BOOM_MESSAGE = "BOOM!\n"
HELP_MESSAGE = (
    "Commands: look | dig X Y | flag X Y | deflag X Y | help | bye "
    "(X is the row, Y is the column)\n"
)
WELCOME_TEMPLATE = (
    "Welcome to Minesweeper. {players} people are playing including you. "
    "Type 'help' for help.\n"
)

# [0-9] rather than \d so non-ASCII digits are rejected
REQUEST_PATTERN = re.compile(
    r"(?P<command>look|help|bye)"
    r"|(?P<action>dig|flag|deflag) (?P<x>[0-9]+) (?P<y>[0-9]+)"
)

Request = namedtuple("Request", ["command", "x", "y"])


def parse_request(line):
    """Parse one client line. Returns a Request, or None if the line is not a valid command."""
    match = REQUEST_PATTERN.fullmatch(line)
    if match is None:
        return None
    if match.group("command"):
        return Request(match.group("command"), None, None)
    return Request(match.group("action"), int(match.group("x")), int(match.group("y")))


def welcome_message(players):
    return WELCOME_TEMPLATE.format(players=players)
