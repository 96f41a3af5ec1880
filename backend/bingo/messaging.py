from typing import Iterable

from bingo import socketio
from bingo.models import Event


def deliver(events: Iterable[Event], room_code: str, namespace: str = '/') -> None:
    """Send room events: broadcasts go to the Socket.IO room, the rest to one sid."""
    for event in events:
        target = room_code if event.is_broadcast else event.to
        args = () if event.data is None else (event.data,)
        socketio.emit(event.name, *args, to=target, namespace=namespace)
