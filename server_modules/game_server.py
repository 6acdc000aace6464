import logging
import socket
import threading

from .player_manager import PlayerManager

logger = logging.getLogger(__name__)

DEFAULT_PORT = 4444


class GameServer:
    """The GameServer class is responsible for
    accepting connections and starting a session thread for each one."""

    def __init__(self, board, host='0.0.0.0', port=DEFAULT_PORT, debug=False):
        """
        Initialize the GameServer for the given board.
        """
        self.host = host
        self.port = port
        self.debug = debug
        self.board = board

        # Create the server socket
        self.server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        # Make the socket reusable
        self.server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        self.player_manager = PlayerManager(board, debug=debug)
        self.listening = False
        self.running = False

    def listen(self):
        """
        Bind the socket and start listening. Port 0 picks a free port, stored in self.port.
        """
        if self.listening:
            return
        self.server_socket.bind((self.host, self.port))
        self.server_socket.listen()
        self.port = self.server_socket.getsockname()[1]
        self.listening = True
        self.running = True
        logger.info("Minesweeper server listening on %s:%d", self.host, self.port)
        logger.info("Board size: %dx%d, debug: %s", self.board.size, self.board.size, self.debug)

    def start(self):
        """
        Accept connections until shutdown() is called.
        An accept failure while running is fatal and is re-raised.
        """
        self.listen()
        while self.running:
            try:
                # Accept a connection
                client_socket, addr = self.server_socket.accept()
            except OSError as e:
                if not self.running:
                    break
                logger.error("Error accepting connection: %s", e)
                raise
            logger.debug("Accepted connection from %s", addr)

            # Start a new thread to handle the client
            client_thread = threading.Thread(
                target=self.player_manager.handle_client,
                args=(client_socket, addr),
                daemon=True,
            )
            client_thread.start()

    def shutdown(self):
        """
        Stop accepting connections and close all sessions.
        """
        was_listening = self.listening
        self.running = False
        self.listening = False
        if was_listening:
            logger.info("Shutting down server...")
            try:
                # Wake a thread blocked in accept()
                self.server_socket.shutdown(socket.SHUT_RDWR)
            except OSError as e:
                logger.debug("Listener shutdown: %s", e)
        # Also closes a socket whose bind failed
        self.server_socket.close()
        self.player_manager.disconnect_all()
        logger.info("Server shut down.")
