import threading
from typing import Callable, Dict, Optional

from bingo.exceptions import RoomNotFound
from .room import Room


class RoomRegistry:
    """Thread-safe in-memory mapping of room code to Room.

    One registry is built per app and handed to the socket handlers; rooms
    are created on first join and dropped as soon as they are empty.
    """

    def __init__(self, room_factory: Callable[[str], Room] = Room):
        self._room_factory = room_factory
        self._rooms: Dict[str, Room] = {}
        self._sessions: Dict[str, str] = {}  # sid -> room code
        self._lock = threading.Lock()

    def get_or_create(self, code: str) -> Room:
        with self._lock:
            room = self._rooms.get(code)
            if room is None:
                room = self._room_factory(code)
                self._rooms[code] = room
            return room

    def get(self, code: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(code)

    def require(self, code: str) -> Room:
        room = self.get(code)
        if room is None:
            raise RoomNotFound(code)
        return room

    def remove(self, code: str) -> bool:
        """Drop the room under ``code`` if it has no players left."""
        with self._lock:
            room = self._rooms.get(code)
            if room is None or not room.is_empty():
                return False
            room.closed = True
            del self._rooms[code]
            return True

    # ---- Connection routing ----
    def bind(self, sid: str, code: str) -> None:
        with self._lock:
            self._sessions[sid] = code

    def unbind(self, sid: str) -> Optional[str]:
        with self._lock:
            return self._sessions.pop(sid, None)

    def locate(self, sid: str) -> Optional[str]:
        with self._lock:
            return self._sessions.get(sid)

    def __contains__(self, code):
        with self._lock:
            return code in self._rooms

    def __len__(self):
        with self._lock:
            return len(self._rooms)
