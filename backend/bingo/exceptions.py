"""Exceptions raised at the session boundary.

Policy violations inside a room (wrong turn, repeated number) are not errors
and never raise; these only cover payloads the gateway refuses to forward.
"""


class BingoError(Exception):
    """Base class for all bingo server errors."""
    pass


class InvalidPayload(BingoError):
    """An inbound message failed validation; the message is shown to the sender."""

    def __init__(self, message):
        self.message = message
        super().__init__(message)


class RoomNotFound(BingoError):
    """No room is registered under the given code."""

    def __init__(self, room_code):
        self.room_code = room_code
        super().__init__(f"Room {room_code} not found")
