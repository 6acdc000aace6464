"""
Unit tests for request parsing and the fixed protocol messages
"""

import pytest

from server_modules.protocol import (
    BOOM_MESSAGE,
    HELP_MESSAGE,
    Request,
    parse_request,
    welcome_message,
)


class TestParseRequest:
    """Test cases for parse_request"""

    @pytest.mark.parametrize("line, expected", [
        ("look", Request("look", None, None)),
        ("help", Request("help", None, None)),
        ("bye", Request("bye", None, None)),
        ("dig 3 1", Request("dig", 3, 1)),
        ("flag 0 10", Request("flag", 0, 10)),
        ("deflag 12 007", Request("deflag", 12, 7)),
    ])
    def test_valid_requests(self, line, expected):
        assert parse_request(line) == expected

    @pytest.mark.parametrize("line", [
        "",
        "LOOK",
        "look ",
        " look",
        "dig",
        "dig 1",
        "dig 1 2 3",
        "dig -1 2",
        "dig +1 2",
        "dig 1  2",
        "dig a b",
        "dig 1.0 2",
        "dig ١ 2",
        "flag 1 2\t",
        "bye now",
        "help me",
    ])
    def test_malformed_requests(self, line):
        assert parse_request(line) is None


class TestMessages:
    """Test cases for fixed server messages"""

    def test_welcome_message(self):
        assert welcome_message(3) == (
            "Welcome to Minesweeper. 3 people are playing including you. "
            "Type 'help' for help.\n"
        )

    def test_boom_and_help_are_single_lines(self):
        assert BOOM_MESSAGE == "BOOM!\n"
        assert HELP_MESSAGE.endswith("\n")
        assert HELP_MESSAGE.count("\n") == 1
