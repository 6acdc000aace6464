"""
Integration tests for GameServer over real loopback connections
"""

import socket
import threading

import pytest

from server_modules.board import MinesweeperBoard
from server_modules.game_server import GameServer

BOARD_TEXT = "0 0 0 0\n0 1 0 0\n0 0 0 0\n1 1 1 1\n"


def connect(port):
    sock = socket.create_connection(("127.0.0.1", port), timeout=5)
    return sock, sock.makefile("r", encoding="utf-8", newline="\n")


def read_lines(reader, count):
    return "".join(reader.readline() for _ in range(count))


@pytest.fixture
def running_server():
    """Start a server on a free port and yield it; shut it down afterwards."""
    servers = []

    def start(debug=False, board_text=BOARD_TEXT):
        server = GameServer(MinesweeperBoard.from_text(board_text), host="127.0.0.1", port=0, debug=debug)
        server.listen()
        thread = threading.Thread(target=server.start, daemon=True)
        thread.start()
        servers.append((server, thread))
        return server

    yield start

    for server, thread in servers:
        server.shutdown()
        thread.join(timeout=5)
        assert not thread.is_alive()


class TestGameServer:
    """Test cases for the accept loop and multiplexed sessions"""

    def test_listen_assigns_port(self, running_server):
        server = running_server()
        assert server.port != 0

    def test_two_players_share_board(self, running_server):
        server = running_server()
        sock_a, reader_a = connect(server.port)
        assert "1 people are playing" in reader_a.readline()
        sock_b, reader_b = connect(server.port)
        assert "2 people are playing" in reader_b.readline()

        sock_a.sendall(b"flag 3 3\n")
        assert read_lines(reader_a, 4).endswith("- - - F\n")

        sock_b.sendall(b"look\n")
        assert read_lines(reader_b, 4) == "- - - -\n- - - -\n- - - -\n- - - F\n"

        sock_a.close()
        sock_b.close()

    def test_boom_disconnects_only_the_digger(self, running_server):
        server = running_server(debug=False)
        sock_a, reader_a = connect(server.port)
        reader_a.readline()
        sock_b, reader_b = connect(server.port)
        reader_b.readline()

        sock_a.sendall(b"dig 1 1\n")
        assert reader_a.readline() == "BOOM!\n"
        assert reader_a.readline() == ""

        # The cascade from the removed mine is visible to the other player
        sock_b.sendall(b"look\n")
        assert read_lines(reader_b, 4) == "       \n       \n2 3 3 2\n- - - -\n"
        sock_a.close()
        sock_b.close()

    def test_debug_mode_keeps_digger_connected(self, running_server):
        server = running_server(debug=True)
        sock, reader = connect(server.port)
        reader.readline()
        sock.sendall(b"dig 1 1\n")
        assert reader.readline() == "BOOM!\n"
        sock.sendall(b"look\n")
        assert read_lines(reader, 4) == "       \n       \n2 3 3 2\n- - - -\n"
        sock.close()

    def test_concurrent_clients(self, running_server):
        """Test many clients digging at once all get complete renders"""
        server = running_server(board_text="0 0 0 0\n0 0 0 0\n0 0 0 0\n0 0 0 1\n")
        renders = []
        errors = []

        def player(x, y):
            try:
                sock, reader = connect(server.port)
                reader.readline()
                sock.sendall(f"dig {x} {y}\n".encode())
                renders.append(read_lines(reader, 4))
                sock.sendall(b"bye\n")
                reader.readline()
                sock.close()
            except OSError as e:
                errors.append(e)

        threads = [threading.Thread(target=player, args=(i % 3, i // 3 % 3)) for i in range(9)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert errors == []
        assert len(renders) == 9
        for render in renders:
            assert [len(line) for line in render.splitlines()] == [7, 7, 7, 7]
        assert server.board.look() == "       \n       \n    1 1\n    1 -\n"

    def test_shutdown_closes_sessions(self, running_server):
        server = running_server()
        sock, reader = connect(server.port)
        reader.readline()
        server.shutdown()
        assert reader.readline() == ""
        sock.close()
        with pytest.raises(OSError):
            connect(server.port)

    def test_shutdown_after_failed_bind_closes_socket(self):
        taken = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        taken.bind(("127.0.0.1", 0))
        taken.listen()
        try:
            server = GameServer(MinesweeperBoard.from_text(BOARD_TEXT), host="127.0.0.1",
                                port=taken.getsockname()[1])
            with pytest.raises(OSError):
                server.start()
            server.shutdown()
            assert server.server_socket.fileno() == -1
        finally:
            taken.close()
