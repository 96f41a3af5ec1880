from bingo import socketio
from bingo.messaging import deliver
from .registry import RoomRegistry


def start_draw(app, registry: RoomRegistry, room_code: str, namespace: str = '/') -> bool:
    """Start drawing numbers for a room on a timer.

    - One draw per room at a time; a second request is ignored
    - Each tick adds a number to the room's drawn numbers and broadcasts it
    - Stops once the pool is exhausted, a win is declared, the room is reset
      or the room is destroyed
    - Runs inline in TESTING mode
    """
    room = registry.get(room_code)
    if room is None:
        return False
    with room.lock:
        generation = room.begin_draw()
    if generation is None:
        app.logger.info(f"[draw-skip] room={room_code} draw already running")
        return False

    delay = float(app.config.get('BINGO_DRAW_INTERVAL_SEC', 5))
    app.logger.info(f"[draw-start] room={room_code} generation={generation} interval={delay}s")

    def _worker(code: str, gen: int, interval: float):
        drawn = 0
        while True:
            if interval > 0:
                socketio.sleep(interval)
            with room.lock:
                events = room.draw_next(gen)
                if events is None:
                    break
                deliver(events, code, namespace)
            drawn += 1
        app.logger.info(f"[draw-stop] room={code} generation={gen} drawn={drawn}")

    if app.config.get('TESTING'):
        _worker(room_code, generation, delay)
    else:
        socketio.start_background_task(_worker, room_code, generation, delay)
    return True
