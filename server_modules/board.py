import random
import threading
from enum import Enum

from .protocol import BOOM_MESSAGE

MINE_PROBABILITY = 0.25


class BoardFormatError(ValueError):
    """Raised when a board file does not describe a square grid of 0/1 values."""


class CellState(Enum):
    UNTOUCHED = "untouched"
    DUG = "dug"
    FLAGGED = "flagged"


class Cell:
    """A single square of the board."""

    def __init__(self, has_mine=False):
        self.has_mine = has_mine
        self.state = CellState.UNTOUCHED
        self.adjacent_mines = 0

    def remove_mine(self):
        self.has_mine = False

    def glyph(self):
        """Return the character used for this cell in a board render."""
        if self.state == CellState.UNTOUCHED:
            return "-"
        if self.state == CellState.FLAGGED:
            return "F"
        if self.adjacent_mines == 0:
            return " "
        return str(self.adjacent_mines)


class MinesweeperBoard:
    """
    The MinesweeperBoard class is an N x N grid of cells shared by every connected player.
    Cell (x, y) is row x, column y. All public methods hold the board lock for their whole
    duration, so a dig and the cascade it causes are seen by other players as one step.
    """
    def __init__(self, mines):
        """
        Initialize the board from a square grid of booleans (True means the cell holds a mine).
        """
        self.size = len(mines)
        for row in mines:
            if len(row) != self.size:
                raise ValueError("Board must be square")
        self.grid = [[Cell(bool(has_mine)) for has_mine in row] for row in mines]
        self.lock = threading.Lock()

    @classmethod
    def random(cls, size, rng=None):
        """
        Create a size x size board where every cell holds a mine with 25% probability.
        """
        if size < 0:
            raise ValueError(f"Board size must be non-negative, got {size}")
        rng = rng or random.Random()
        return cls([[rng.random() < MINE_PROBABILITY for _ in range(size)] for _ in range(size)])

    @classmethod
    def from_text(cls, text):
        """
        Create a board from rows of space separated 0/1 values, one row per line.
        Raises BoardFormatError if the text is not a square grid of 0 and 1.
        """
        lines = text.replace("\r\n", "\n").split("\n")
        # A single trailing newline ends the last row
        if lines and lines[-1] == "":
            lines.pop()
        if not lines:
            raise BoardFormatError("Invalid board: no rows")

        size = len(lines[0].split(" "))
        if len(lines) != size:
            raise BoardFormatError(
                f"Invalid board: {len(lines)} lines but {size} values per line"
            )

        mines = []
        for line_number, line in enumerate(lines, start=1):
            values = line.split(" ")
            if len(values) != size:
                raise BoardFormatError(
                    f"Invalid board: line {line_number} has {len(values)} values, expected {size}"
                )
            for value in values:
                if value not in ("0", "1"):
                    raise BoardFormatError(
                        f"Invalid board: line {line_number} contains {value!r}, values must be 0 or 1"
                    )
            mines.append([value == "1" for value in values])
        return cls(mines)

    @classmethod
    def from_file(cls, path):
        """
        Load a board from a file in the 0/1 grid format.
        """
        with open(path, encoding="utf-8") as board_file:
            try:
                text = board_file.read()
            except UnicodeDecodeError:
                raise BoardFormatError(f"Invalid board: {path} is not UTF-8 text")
        return cls.from_text(text)

    def look(self):
        """
        Get the current board render
        """
        with self.lock:
            return self._render()

    def dig(self, x, y):
        """
        Dig the given square. Returns BOOM_MESSAGE if it held a mine, otherwise the board render.
        Digging outside the board or a square that is not untouched changes nothing.
        """
        with self.lock:
            if not self._in_bounds(x, y):
                return self._render()

            cell = self.grid[x][y]
            if cell.state != CellState.UNTOUCHED:
                return self._render()

            cell.state = CellState.DUG
            hit_mine = cell.has_mine
            if hit_mine:
                # The mine is gone, so every count around it is now stale
                cell.remove_mine()
                self._update_count(x, y)

            if self._count_neighbors(x, y) == 0:
                self._reveal_neighbors(x, y)

            if hit_mine:
                return BOOM_MESSAGE
            return self._render()

    def flag(self, x, y):
        """
        Flag the given square if it is untouched
        """
        with self.lock:
            if self._in_bounds(x, y) and self.grid[x][y].state == CellState.UNTOUCHED:
                self.grid[x][y].state = CellState.FLAGGED
            return self._render()

    def deflag(self, x, y):
        """
        Remove the flag from the given square if it is flagged
        """
        with self.lock:
            if self._in_bounds(x, y) and self.grid[x][y].state == CellState.FLAGGED:
                self.grid[x][y].state = CellState.UNTOUCHED
            return self._render()

    def cell_state(self, x, y):
        if not self._in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is not on the board")
        with self.lock:
            return self.grid[x][y].state

    def mine_count(self):
        """
        Count the mines still on the board
        """
        with self.lock:
            return sum(cell.has_mine for row in self.grid for cell in row)

    def _in_bounds(self, x, y):
        return 0 <= x < self.size and 0 <= y < self.size

    def _neighbors(self, x, y):
        """
        Yield the coordinates of the 3x3 block centred on (x, y), clipped to the board.
        The centre itself is included.
        """
        for i in range(max(x - 1, 0), min(x + 1, self.size - 1) + 1):
            for j in range(max(y - 1, 0), min(y + 1, self.size - 1) + 1):
                yield i, j

    def _count_neighbors(self, x, y):
        """
        Recount the mines around (x, y), store it on the cell and return it.
        """
        count = sum(
            1 for i, j in self._neighbors(x, y)
            if (i, j) != (x, y) and self.grid[i][j].has_mine
        )
        self.grid[x][y].adjacent_mines = count
        return count

    def _update_count(self, x, y):
        """
        Recount the mines around every square of the 3x3 block centred on (x, y).
        """
        for i, j in self._neighbors(x, y):
            self._count_neighbors(i, j)

    def _reveal_neighbors(self, x, y):
        """
        Dig every untouched neighbour of (x, y), continuing from each neighbour that has
        no adjacent mines. Iterative, so open areas of any size stay off the call stack.
        """
        stack = [(x, y)]
        while stack:
            cx, cy = stack.pop()
            for i, j in self._neighbors(cx, cy):
                neighbor = self.grid[i][j]
                if neighbor.state != CellState.UNTOUCHED:
                    continue
                neighbor.state = CellState.DUG
                if self._count_neighbors(i, j) == 0:
                    stack.append((i, j))

    def _render(self):
        """
        Build the board render. Caller must hold the lock.
        """
        return "".join(
            " ".join(cell.glyph() for cell in row) + "\n" for row in self.grid
        )

    def __str__(self):
        return self.look()
