import pygame
from .constants import *


class GridComponent:
    """ Grid class for drawing the minefield and turning clicks into requests.
        Left click digs a square, right click flags or unflags it."""
    def __init__(self, game_client):
        """Initialize grid component for drawing and interacting with the minefield"""
        self.client = game_client
        self.calculate_square_size()

    def calculate_square_size(self):
        """Calculate the size of each square based on the board size"""
        if self.client.grid_size > 0:
            self.square_pixel_size = GRID_AREA_SIZE / self.client.grid_size
        else:
            self.square_pixel_size = GRID_AREA_SIZE

    def coords_to_grid(self, screen_x, screen_y):
        """Convert screen x, y coordinates to grid row, col
        Returns: Tuple corresponding to grid square or returns None, None if outside of grid"""

        if self.client.grid_size == 0 or not (
            GRID_TOP_LEFT[0] <= screen_x < GRID_TOP_LEFT[0] + GRID_AREA_SIZE
            and GRID_TOP_LEFT[1] <= screen_y < GRID_TOP_LEFT[1] + GRID_AREA_SIZE
        ):
            # Click outside grid area
            return None, None

        local_x = screen_x - GRID_TOP_LEFT[0]
        local_y = screen_y - GRID_TOP_LEFT[1]

        col = int(local_x // self.square_pixel_size)
        row = int(local_y // self.square_pixel_size)
        # Make sure coordinates are within grid
        col = max(0, min(col, self.client.grid_size - 1))
        row = max(0, min(row, self.client.grid_size - 1))
        return row, col

    def grid_to_screen_rect(self, r, c):
        """Convert grid row, col to screen Rect. """
        x0 = GRID_TOP_LEFT[0] + c * self.square_pixel_size
        y0 = GRID_TOP_LEFT[1] + r * self.square_pixel_size
        return pygame.Rect(x0, y0, self.square_pixel_size, self.square_pixel_size)

    def draw(self, screen):
        """Draws the minefield: untouched, flagged and dug squares, then the grid lines"""

        grid_bg_rect = pygame.Rect(GRID_TOP_LEFT[0], GRID_TOP_LEFT[1], GRID_AREA_SIZE, GRID_AREA_SIZE)
        pygame.draw.rect(screen, COLOR_DARK_GREY, grid_bg_rect, 1)  # Border

        for r, row in enumerate(self.client.board):
            for c, glyph in enumerate(row):
                square_rect = self.grid_to_screen_rect(r, c)
                if glyph == "-":
                    pygame.draw.rect(screen, COLOR_UNTOUCHED, square_rect)
                elif glyph == "F":
                    pygame.draw.rect(screen, COLOR_UNTOUCHED, square_rect)
                    self.draw_glyph(screen, "F", COLOR_FLAG, square_rect)
                else:
                    pygame.draw.rect(screen, COLOR_DUG, square_rect)
                    if glyph.isdigit():
                        self.draw_glyph(screen, glyph, DIGIT_COLORS.get(glyph, COLOR_BLACK), square_rect)

        # Draw Grid Lines
        for i in range(1, self.client.grid_size):
            x = GRID_TOP_LEFT[0] + i * self.square_pixel_size
            pygame.draw.line(screen, COLOR_GRID_LINE, (x, GRID_TOP_LEFT[1]), (x, GRID_TOP_LEFT[1] + GRID_AREA_SIZE))
            y = GRID_TOP_LEFT[1] + i * self.square_pixel_size
            pygame.draw.line(screen, COLOR_GRID_LINE, (GRID_TOP_LEFT[0], y), (GRID_TOP_LEFT[0] + GRID_AREA_SIZE, y))

    def draw_glyph(self, screen, text, color, square_rect):
        glyph_surf = self.client.font_cell.render(text, True, color)
        screen.blit(glyph_surf, glyph_surf.get_rect(center=square_rect.center))

    def handle_mouse_down(self, pos, button):
        """Send a dig for a left click and a flag or deflag for a right click"""
        if not self.client.connected:
            return

        r, c = self.coords_to_grid(pos[0], pos[1])
        if r is None:
            return

        glyph = self.client.board[r][c]
        if button == MOUSE_LEFT:
            if glyph == "-":
                self.client.set_status(f"Digging ({r},{c})...", COLOR_STATUS_INFO)
                self.client.send_message(f"dig {r} {c}")
            elif glyph == "F":
                self.client.set_status(f"Square ({r},{c}) is flagged.", COLOR_STATUS_INFO)
        elif button == MOUSE_RIGHT:
            if glyph == "-":
                self.client.send_message(f"flag {r} {c}")
            elif glyph == "F":
                self.client.send_message(f"deflag {r} {c}")
