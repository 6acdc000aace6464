import logging
import socket
import threading

from .protocol import BOOM_MESSAGE, BUFFER_SIZE, HELP_MESSAGE, parse_request, welcome_message

logger = logging.getLogger(__name__)


class PlayerManager:
    """PlayerManager class manages the connected players.
    It runs each client's session, turning request lines into board operations,
    and keeps the count of players currently connected."""

    def __init__(self, board, debug=False):
        """Initialize the PlayerManager for the shared board.
        In debug mode a player who digs a mine stays connected."""
        self.board = board
        self.debug = debug
        self.clients = {}
        self.lock = threading.Lock()

    def handle_client(self, client_socket, addr):
        """Handle a client connection until it says bye, digs a mine, or goes away."""
        with self.lock:
            # Add the player and capture the count for the welcome line
            self.clients[client_socket] = addr
            players = len(self.clients)
        logger.info("Player connected from %s (%d playing)", addr, players)

        try:
            client_socket.sendall(welcome_message(players).encode('utf-8'))

            # Receive and process lines
            buffer = b""
            while True:
                data = client_socket.recv(BUFFER_SIZE)
                if not data:
                    break

                buffer += data
                keep_open = True
                while keep_open and b'\n' in buffer:
                    line, buffer = buffer.split(b'\n', 1)
                    keep_open = self.handle_line(client_socket, line)
                if not keep_open:
                    break

        except OSError as e:
            logger.warning("Connection error with %s: %s", addr, e)
        finally:
            self.disconnect(client_socket)

    def handle_line(self, client_socket, line):
        """Decode and process one raw line, sending any response.
        Returns False when the session should end."""
        try:
            message = line.decode('utf-8')
        except UnicodeDecodeError:
            return True
        if message.endswith('\r'):
            message = message[:-1]

        response, keep_open = self.process_message(message)
        if response is not None:
            client_socket.sendall(response.encode('utf-8'))
        return keep_open

    def process_message(self, message):
        """Process a message from a client.
        Returns the response to send (None for no response) and whether to keep the session open."""
        request = parse_request(message)
        if request is None:
            logger.debug("Ignoring malformed request %r", message)
            return None, True

        logger.debug("Request %s", request)
        if request.command == "look":
            return self.board.look(), True
        if request.command == "help":
            return HELP_MESSAGE, True
        if request.command == "bye":
            return None, False
        if request.command == "flag":
            return self.board.flag(request.x, request.y), True
        if request.command == "deflag":
            return self.board.deflag(request.x, request.y), True

        # dig
        response = self.board.dig(request.x, request.y)
        if response == BOOM_MESSAGE:
            logger.info("Mine triggered at (%d, %d)", request.x, request.y)
            return response, self.debug
        return response, True

    def disconnect(self, sock):
        """Disconnect a client. Safe to call more than once for the same socket."""
        with self.lock:
            # Only the first call for a socket removes it and closes it
            if sock not in self.clients:
                return
            addr = self.clients.pop(sock)
            remaining = len(self.clients)
        logger.info("Player %s disconnected (%d playing)", addr, remaining)
        try:
            sock.close()
        except OSError as e:
            logger.warning("Error closing connection with %s: %s", addr, e)

    def player_count(self):
        """Get the number of connected players."""
        with self.lock:
            return len(self.clients)

    def disconnect_all(self):
        """Disconnect all clients, waking any session blocked on a read."""
        with self.lock:
            sockets = list(self.clients)
        for sock in sockets:
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError as e:
                logger.debug("Shutdown of %s failed: %s", sock, e)
            self.disconnect(sock)
