"""
Reassembles the server's line stream into whole responses.

The server sends renders as N lines with no header, so the size of a render is
taken from its first line: N glyphs joined by single spaces is 2N - 1 characters.
"""

WELCOME_PREFIX = "Welcome to Minesweeper."
BOOM_LINE = "BOOM!"
HELP_PREFIX = "Commands:"


def parse_row(line):
    """Split a render line into its glyphs."""
    return [line[i] for i in range(0, len(line), 2)]


def parse_player_count(line):
    """Pull the player count out of the welcome line, or None if it is missing."""
    words = line[len(WELCOME_PREFIX):].split()
    if words and words[0].isdigit():
        return int(words[0])
    return None


class ResponseParser:
    """Turns lines from the server into (kind, payload) events."""

    def __init__(self):
        self.pending_rows = []
        self.expected_rows = 0

    def feed(self, line):
        """
        Feed one line (without its newline). Returns an event once a response is
        complete, otherwise None.
        """
        if not self.pending_rows:
            if line.startswith(WELCOME_PREFIX):
                return ("WELCOME", parse_player_count(line))
            if line == BOOM_LINE:
                return ("BOOM", None)
            if line.startswith(HELP_PREFIX):
                return ("HELP", line)
            if not line:
                return None
            self.expected_rows = (len(line) + 1) // 2

        self.pending_rows.append(parse_row(line))
        if len(self.pending_rows) < self.expected_rows:
            return None

        rows = self.pending_rows
        self.reset()
        return ("BOARD", rows)

    def reset(self):
        self.pending_rows = []
        self.expected_rows = 0
