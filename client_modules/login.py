import pygame
from .constants import *

FIELD_ORDER = ("host", "port")


def validate_address(host_text, port_text):
    """
    Check the connect form. Returns ((host, port), None) when usable,
    otherwise (None, error message). A blank port means DEFAULT_PORT.
    """
    host = host_text.strip()
    if not host:
        return None, "Server IP cannot be empty."
    port_text = port_text.strip() or DEFAULT_PORT
    if not port_text.isdigit():
        return None, f"Port must be a number, e.g. {DEFAULT_PORT}."
    port = int(port_text)
    if not 0 < port < 65536:
        return None, "Port must be between 1 and 65535."
    return (host, port), None


class LoginComponent:
    """Connect screen: a host and a port box, the connect button, and the reason
    the last game ended (disconnect or BOOM) so a player knows why they are back here."""
    def __init__(self, game_client):
        self.client = game_client
        self.values = {"host": game_client.server_ip, "port": game_client.server_port}
        self.focus = "host"

        center_x = SCREEN_WIDTH // 2
        top = SCREEN_HEIGHT // 2 - 40
        self.boxes = {
            name: pygame.Rect(center_x - 120, top + i * 40, 270, 30)
            for i, name in enumerate(FIELD_ORDER)
        }
        self.labels = {"host": "Server IP:", "port": "Port:"}
        self.button = pygame.Rect(center_x - 100, top + 100, 200, 40)

    def submit(self):
        """Validate the form and hand the address to the client."""
        address, error = validate_address(self.values["host"], self.values["port"])
        if error:
            self.client.set_status(error, COLOR_STATUS_ERROR)
            return
        host, port = address
        self.values["port"] = str(port)
        self.client.connect_to_game(host, port)

    def handle_mouse_click(self, pos):
        if self.button.collidepoint(pos):
            self.submit()
            return
        for name, box in self.boxes.items():
            if box.collidepoint(pos):
                self.focus = name
                return

    def handle_key_press(self, event):
        """Enter connects from either box, Tab cycles focus, the port box takes digits only."""
        if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self.submit()
        elif event.key == pygame.K_TAB:
            index = FIELD_ORDER.index(self.focus)
            self.focus = FIELD_ORDER[(index + 1) % len(FIELD_ORDER)]
        elif event.key == pygame.K_BACKSPACE:
            self.values[self.focus] = self.values[self.focus][:-1]
        elif self.focus == "port":
            if event.unicode.isdigit() and len(self.values["port"]) < 5:
                self.values["port"] += event.unicode
        elif event.unicode.isprintable():
            self.values["host"] += event.unicode

    def draw(self, screen):
        screen.fill(COLOR_WHITE)
        font = self.client.font_ui

        title = self.client.font_title.render("Multiplayer Minesweeper", True, COLOR_BLACK)
        screen.blit(title, title.get_rect(center=(SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2 - 110)))

        for name, box in self.boxes.items():
            label = font.render(self.labels[name], True, COLOR_BLACK)
            screen.blit(label, label.get_rect(midright=(box.left - 10, box.centery)))
            pygame.draw.rect(screen, COLOR_INPUT_BG, box)
            border = COLOR_INPUT_BORDER_ACTIVE if name == self.focus else COLOR_INPUT_BORDER
            pygame.draw.rect(screen, border, box, 1)
            text = self.values[name]
            if not text and name == "port":
                value = font.render(DEFAULT_PORT, True, COLOR_INPUT_BORDER)
            else:
                value = font.render(text, True, COLOR_BLACK)
            screen.blit(value, value.get_rect(midleft=(box.left + 5, box.centery)))

        pygame.draw.rect(screen, COLOR_BUTTON, self.button, border_radius=5)
        caption = font.render("Connect", True, COLOR_BUTTON_TEXT)
        screen.blit(caption, caption.get_rect(center=self.button.center))

        lines = [(self.client.status_text, self.client.status_color)]
        if self.client.last_game_result:
            lines.append((f"Last game: {self.client.last_game_result}", COLOR_DARK_GREY))
        y = self.button.bottom + 25
        for text, color in lines:
            surf = self.client.font_ui_small.render(text, True, color)
            screen.blit(surf, surf.get_rect(center=(SCREEN_WIDTH // 2, y)))
            y += 22
