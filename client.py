import logging
import queue
import socket
import sys
import threading
import time

import pygame

from client_modules.constants import *
from client_modules import GridComponent, LoginComponent, ResponseParser

logger = logging.getLogger("minesweeper.client")


class GameClient:
    """Represents the game client responsible for managing the board view, UI, and network connection."""
    def __init__(self):
        """
        Initialize the GameClient instance. Set up the pygame display,
        initialize the required fonts, and set up the network and game state.
        """
        pygame.init()
        pygame.font.init()

        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("Minesweeper Client (Pygame)")
        self.clock = pygame.time.Clock()

        try:
            self.font_ui = pygame.font.SysFont("Calibri", 16)
            self.font_ui_small = pygame.font.SysFont("Calibri", 14)
            self.font_title = pygame.font.SysFont("Calibri", 24, bold=True)
            self.font_status = pygame.font.SysFont("Calibri", 18)
            self.font_cell = pygame.font.SysFont("Arial", 18, bold=True)
        except pygame.error:
            self.font_ui = pygame.font.SysFont("Arial", 16)
            self.font_ui_small = pygame.font.SysFont("Arial", 14)
            self.font_title = pygame.font.SysFont("Arial", 24, bold=True)
            self.font_status = pygame.font.SysFont("Arial", 18)
            self.font_cell = pygame.font.SysFont("Arial", 18, bold=True)

        # --- Network State ---
        self.sock = None
        self.connected = False
        self.receive_thread = None
        self.message_queue = queue.Queue()
        self.parser = ResponseParser()
        self.last_refresh = 0.0

        # --- Game State ---
        self.server_ip = "127.0.0.1"
        self.server_port = DEFAULT_PORT
        self.grid_size = 0
        self.board = []
        self.players = None
        self.status_text = "Enter server details and connect."
        self.status_color = COLOR_STATUS_INFO
        self.current_scene = "login"
        self.last_game_result = None

        # --- Components ---
        self.login = LoginComponent(self)
        self.grid = GridComponent(self)

    # === Network Methods for Connecting with Server ===
    def connect_to_game(self, host, port):
        """Connect to the game server at an address already checked by the login form."""
        self.server_ip = host
        self.server_port = str(port)
        try:
            self.set_status(f"Connecting to {host}:{port}...", COLOR_STATUS_INFO)
            self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            self.sock.connect((host, port))
            self.connected = True
            self.last_game_result = None
            self.parser.reset()

            self.receive_thread = threading.Thread(target=self.receive_messages, daemon=True)
            self.receive_thread.start()
            logger.info("Connected to %s:%d", host, port)
            self.request_board()

        except ConnectionRefusedError:
            self.set_status("Connection refused. Server offline?", COLOR_STATUS_ERROR)
            self.cleanup_connection()
        except socket.timeout:
            self.set_status("Connection timed out.", COLOR_STATUS_ERROR)
            self.cleanup_connection()
        except socket.gaierror:
            self.set_status("Could not resolve hostname.", COLOR_STATUS_ERROR)
            self.cleanup_connection()
        except OSError as e:
            self.set_status(f"Connection failed: {e}", COLOR_STATUS_ERROR)
            self.cleanup_connection()

    def receive_messages(self):
        """Receive lines from the server and queue them for the main loop."""
        buffer = b""
        while self.connected and self.sock:
            try:
                data = self.sock.recv(BUFFER_SIZE)
                if not data:
                    self.message_queue.put(("DISCONNECT", "Server closed connection."))
                    break
                buffer += data
                while b'\n' in buffer:
                    line, buffer = buffer.split(b'\n', 1)
                    # Renders can start with spaces, so only the line ending is removed
                    self.message_queue.put(("MESSAGE", line.decode('utf-8', errors='replace').rstrip('\r')))
            except ConnectionResetError:
                self.message_queue.put(("DISCONNECT", "Connection reset."))
                break
            except OSError as e:
                if self.connected:
                    self.message_queue.put(("DISCONNECT", f"Network error: {e}"))
                break
        logger.debug("Receive thread finished.")

    def process_queue(self):
        """Process messages in the queue."""
        while True:
            try:
                msg_type, data = self.message_queue.get_nowait()
            except queue.Empty:
                return
            if msg_type == "MESSAGE":
                self.handle_server_message(data)
            elif msg_type == "DISCONNECT":
                self.handle_disconnection(data)

    def handle_server_message(self, line):
        """Feed a line to the parser and act on any complete response."""
        event = self.parser.feed(line)
        if event is None:
            return

        kind, payload = event
        if kind == "WELCOME":
            self.players = payload
            self.current_scene = "game"
            self.set_status(f"Connected. {payload} people are playing.", COLOR_STATUS_INFO)

        elif kind == "BOARD":
            if len(payload) != self.grid_size:
                self.grid_size = len(payload)
                self.grid.calculate_square_size()
            self.board = payload

        elif kind == "BOOM":
            logger.info("BOOM!")
            self.set_status("BOOM! You dug a mine.", COLOR_STATUS_ERROR)
            self.last_game_result = "BOOM! You dug a mine."
            # A debug server keeps us connected, so fetch the updated board
            self.request_board()

        elif kind == "HELP":
            self.set_status(payload, COLOR_STATUS_INFO)

    def handle_disconnection(self, reason):
        """Handle disconnection from the server."""
        if self.connected:
            logger.info("Disconnected: %s", reason)
            if self.last_game_result is None:
                self.last_game_result = reason
            self.cleanup_connection()
            self.current_scene = "login"
            if self.status_color != COLOR_STATUS_ERROR:
                self.set_status(f"Disconnected: {reason}", COLOR_STATUS_ERROR)

    def cleanup_connection(self):
        """Clean up the connection."""
        self.connected = False
        if self.sock:
            try:
                self.sock.close()
            except OSError as e:
                logger.warning("Error closing socket: %s", e)
            self.sock = None
        self.parser.reset()

    def send_message(self, message):
        """Send a message to the server."""
        if not self.connected or not self.sock:
            logger.warning("Cannot send message: not connected.")
            return False
        try:
            if not message.endswith('\n'):
                message += '\n'
            self.sock.sendall(message.encode('utf-8'))
            return True
        except OSError as e:
            self.handle_disconnection(f"Send error: {e}")
            return False

    def request_board(self):
        """Ask for a fresh render so moves by other players show up."""
        self.last_refresh = time.monotonic()
        self.send_message("look")

    def set_status(self, text, color):
        """Set the status text and color."""
        self.status_text = text
        self.status_color = color

    def run(self):
        """Main game loop."""
        running = True
        while running:
            self.process_queue()

            if self.connected and time.monotonic() - self.last_refresh >= REFRESH_INTERVAL:
                self.request_board()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif self.current_scene == "login":
                    if event.type == pygame.MOUSEBUTTONDOWN:
                        self.login.handle_mouse_click(event.pos)
                    elif event.type == pygame.KEYDOWN:
                        self.login.handle_key_press(event)
                elif self.current_scene == "game":
                    if event.type == pygame.MOUSEBUTTONDOWN:
                        self.grid.handle_mouse_down(event.pos, event.button)
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_h:
                        self.send_message("help")

            if self.current_scene == "login":
                self.login.draw(self.screen)
            elif self.current_scene == "game":
                self.screen.fill(COLOR_WHITE)

                status_rect = pygame.Rect(0, 0, SCREEN_WIDTH, 50)
                pygame.draw.rect(self.screen, COLOR_LIGHT_GREY, status_rect)
                status_surf = self.font_status.render(self.status_text, True, self.status_color)
                status_pos = status_surf.get_rect(center=(SCREEN_WIDTH // 2, status_rect.height // 2))
                self.screen.blit(status_surf, status_pos)

                self.grid.draw(self.screen)

            pygame.display.flip()
            self.clock.tick(60)

        self.on_closing()

    def on_closing(self):
        """Handle window closing."""
        logger.info("Closing client...")
        if self.connected:
            self.send_message("bye")
        self.cleanup_connection()
        pygame.quit()


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    client_app = GameClient()
    client_app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
