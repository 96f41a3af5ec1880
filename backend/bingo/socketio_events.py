from functools import wraps

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from bingo import socketio
from bingo.exceptions import InvalidPayload, RoomNotFound
from bingo.messaging import deliver
from bingo.services.game.draw import start_draw
from bingo.services.game.grid import max_number


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _registry():
    return current_app.extensions['bingo']


def _guarded(handler):
    """Turn boundary failures into an 'error' reply and missing rooms into no-ops."""
    @wraps(handler)
    def wrapper(*args):
        try:
            return handler(*args)
        except InvalidPayload as exc:
            current_app.logger.info(f"[reject] event={handler.__name__} sid={_get_sid()} reason={exc.message}")
            emit('error', {'message': exc.message})
        except RoomNotFound as exc:
            current_app.logger.debug(f"[no-room] event={handler.__name__} room={exc.room_code}")
    return wrapper


# ---- Payload validation ----

def _room_code(data) -> str:
    code = data.get('roomCode') if isinstance(data, dict) else data
    if not isinstance(code, str) or not code.strip():
        raise InvalidPayload('roomCode is required')
    return code


def _object(data) -> dict:
    if not isinstance(data, dict):
        raise InvalidPayload('payload must be an object')
    return data


def _integer(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidPayload(f'{name} must be an integer')
    return value


def _number(value) -> int:
    number = _integer(value, 'number')
    highest = max_number(current_app.config.get('BINGO_VARIANT', 'turns'))
    if not 1 <= number <= highest:
        raise InvalidPayload(f'number must be between 1 and {highest}')
    return number


def _score(value) -> int:
    score = _integer(value, 'score')
    if score < 0:
        raise InvalidPayload('score must not be negative')
    return score


# ---- Room helpers ----

def _leave(code: str, sid: str) -> None:
    registry = _registry()
    room = registry.get(code)
    if room is None:
        return
    with room.lock:
        events = room.leave(sid)
        if room.is_empty():
            registry.remove(code)
            current_app.logger.info(f"[leave] room={code} sid={sid} room destroyed")
            return
        deliver(events, code, request.namespace)
    current_app.logger.info(f"[leave] room={code} sid={sid} remaining={len(room.players)} round reset")


# ---- Handlers ----

def handle_connect():
    current_app.logger.debug(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    code = _registry().unbind(sid)
    if code is None:
        return
    _leave(code, sid)


@_guarded
def handle_join_room(data=None):
    code = _room_code(data)
    sid = _get_sid()
    registry = _registry()

    previous = registry.locate(sid)
    if previous is not None and previous != code:
        leave_room(previous)
        _leave(previous, sid)

    while True:
        room = registry.get_or_create(code)
        with room.lock:
            # Lost a race with the last player leaving; the next lookup builds a new room
            if room.closed:
                continue
            join_room(code)
            registry.bind(sid, code)
            events = room.join(sid)
            deliver(events, code, request.namespace)
            label = room.get_player(sid).label
            break
    current_app.logger.info(f"[join] room={code} sid={sid} label={label}")


@_guarded
def handle_leave_room(data=None):
    code = _room_code(data)
    sid = _get_sid()
    registry = _registry()
    if registry.locate(sid) != code:
        return
    registry.unbind(sid)
    leave_room(code)
    _leave(code, sid)


@_guarded
def handle_number_selected(data=None):
    payload = _object(data)
    code = _room_code(payload)
    number = _number(payload.get('number'))
    room = _registry().require(code)
    with room.lock:
        events = room.select_number(_get_sid(), number)
        if not events:
            current_app.logger.debug(f"[reject] room={code} sid={_get_sid()} number={number} wrong turn or already drawn")
            return
        deliver(events, code, request.namespace)
        turn = room.turn_holder.label
    current_app.logger.info(f"[select] room={code} number={number} next_turn={turn}")


@_guarded
def handle_score_update(data=None):
    payload = _object(data)
    code = _room_code(payload)
    score = _score(payload.get('score'))
    room = _registry().require(code)
    sid = _get_sid()
    with room.lock:
        events = room.report_score(sid, score)
        deliver(events, code, request.namespace)
        player = room.get_player(sid)
        recorded = player.score if player else None
    current_app.logger.info(f"[score] room={code} sid={sid} reported={score} recorded={recorded}")
    if events:
        current_app.logger.info(f"[win] room={code} winner={events[0].data}")


@_guarded
def handle_reset_game(data=None):
    code = _room_code(data)
    room = _registry().require(code)
    with room.lock:
        deliver(room.reset(), code, request.namespace)
    current_app.logger.info(f"[reset] room={code}")


@_guarded
def handle_start_draw(data=None):
    code = _room_code(data)
    registry = _registry()
    registry.require(code)
    start_draw(current_app._get_current_object(), registry, code, request.namespace)


def handle_error(exc):
    current_app.logger.error(f"[error] sid={_get_sid()} unhandled {type(exc).__name__}: {exc}", exc_info=exc)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join-room', handle_join_room, namespace=namespace)
    socketio.on_event('leave-room', handle_leave_room, namespace=namespace)
    socketio.on_event('number-selected', handle_number_selected, namespace=namespace)
    socketio.on_event('score-update', handle_score_update, namespace=namespace)
    socketio.on_event('reset-game', handle_reset_game, namespace=namespace)
    socketio.on_event('start-draw', handle_start_draw, namespace=namespace)
    socketio.on_error_default(handle_error)
