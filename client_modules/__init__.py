"""
Client modules package for the Minesweeper client.
Contains UI components and the response parser for the game client.
"""

from .board_view import ResponseParser
from .constants import *
from .grid import GridComponent
from .login import LoginComponent

__all__ = ['GridComponent', 'LoginComponent', 'ResponseParser']
