# --- Game Constants ---
BUFFER_SIZE = 4096
DEFAULT_PORT = "4444"
REFRESH_INTERVAL = 1.0  # Seconds between automatic 'look' requests

# --- Screen Constants ---
GRID_AREA_SIZE = 480
GRID_TOP_LEFT = (50, 70)  # Top-left corner of the grid on screen
SCREEN_WIDTH = GRID_TOP_LEFT[0] + GRID_AREA_SIZE + 50
SCREEN_HEIGHT = GRID_TOP_LEFT[1] + GRID_AREA_SIZE + 50

# --- Colors for the game ---
COLOR_WHITE = (255, 255, 255)
COLOR_BLACK = (0, 0, 0)
COLOR_LIGHT_GREY = (211, 211, 211)
COLOR_DARK_GREY = (100, 100, 100)
COLOR_GRID_LINE = (180, 180, 180)
COLOR_UNTOUCHED = (160, 170, 185)
COLOR_DUG = (235, 235, 235)
COLOR_FLAG = (200, 40, 40)
COLOR_INPUT_BG = (240, 240, 240)
COLOR_INPUT_BORDER = (150, 150, 150)
COLOR_INPUT_BORDER_ACTIVE = (0, 120, 215)
COLOR_BUTTON = (0, 120, 215)
COLOR_BUTTON_TEXT = COLOR_WHITE
COLOR_STATUS_INFO = (50, 50, 150)
COLOR_STATUS_ERROR = (180, 50, 50)
COLOR_STATUS_SUCCESS = (50, 150, 50)

# Classic colours for adjacent-mine digits
DIGIT_COLORS = {
    "1": (0, 0, 255),
    "2": (0, 128, 0),
    "3": (255, 0, 0),
    "4": (0, 0, 128),
    "5": (128, 0, 0),
    "6": (0, 128, 128),
    "7": COLOR_BLACK,
    "8": COLOR_DARK_GREY,
}

MOUSE_LEFT = 1
MOUSE_RIGHT = 3
