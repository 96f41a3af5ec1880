"""Bingo domain services: grid evaluation, rooms and the room registry.

Nothing in here talks to Socket.IO; rooms return the events they produce and
the socket handlers deliver them.
"""

from .grid import completed_lines, deal_grid, max_number, new_lines
from .registry import RoomRegistry
from .room import Room

__all__ = [
    'Room',
    'RoomRegistry',
    'completed_lines',
    'deal_grid',
    'max_number',
    'new_lines',
]
