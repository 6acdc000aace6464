"""
Server modules package for the Minesweeper server.
Contains the shared board and the networking components that serve it.
"""

from .board import BoardFormatError, Cell, CellState, MinesweeperBoard
from .game_server import GameServer
from .player_manager import PlayerManager

__all__ = ['BoardFormatError', 'Cell', 'CellState', 'GameServer', 'MinesweeperBoard', 'PlayerManager']
