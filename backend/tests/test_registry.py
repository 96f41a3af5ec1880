import threading
from functools import partial

import pytest

from bingo.exceptions import RoomNotFound
from bingo.services.game import Room, RoomRegistry


def test_get_or_create_is_lazy_and_stable():
    registry = RoomRegistry()
    assert 'ABC123' not in registry
    room = registry.get_or_create('ABC123')
    assert room.players == [] and room.drawn_numbers == [] and room.turn_holder is None
    assert registry.get_or_create('ABC123') is room
    assert len(registry) == 1


def test_codes_are_case_sensitive():
    registry = RoomRegistry()
    assert registry.get_or_create('abc') is not registry.get_or_create('ABC')
    assert 'ABC' in registry and 'abc' in registry
    assert len(registry) == 2


def test_remove_only_drops_empty_rooms():
    registry = RoomRegistry()
    room = registry.get_or_create('ABC123')
    room.join('a')
    assert registry.remove('ABC123') is False
    assert 'ABC123' in registry

    room.leave('a')
    assert registry.remove('ABC123') is True
    assert room.closed
    assert 'ABC123' not in registry
    assert registry.remove('ABC123') is False


def test_fresh_room_after_removal():
    registry = RoomRegistry()
    room = registry.get_or_create('ABC123')
    room.join('a')
    room.join('b')
    room.select_number('a', 7)
    room.leave('a')
    room.leave('b')
    registry.remove('ABC123')

    fresh = registry.get_or_create('ABC123')
    assert fresh is not room
    assert fresh.drawn_numbers == []
    assert fresh.join('c')[0].data == 'Player 1'


def test_require_missing_room():
    registry = RoomRegistry()
    with pytest.raises(RoomNotFound) as excinfo:
        registry.require('nope')
    assert excinfo.value.room_code == 'nope'


def test_registries_are_isolated():
    one, two = RoomRegistry(), RoomRegistry()
    one.get_or_create('ABC123')
    assert 'ABC123' not in two


def test_room_factory_settings():
    registry = RoomRegistry(partial(Room, win_threshold=3, variant='draw'))
    room = registry.get_or_create('X')
    assert room.win_threshold == 3
    assert room.variant == 'draw'


def test_session_binding():
    registry = RoomRegistry()
    registry.bind('sid-1', 'ABC123')
    assert registry.locate('sid-1') == 'ABC123'
    assert registry.unbind('sid-1') == 'ABC123'
    assert registry.locate('sid-1') is None
    assert registry.unbind('sid-1') is None


def test_concurrent_creation_yields_one_room():
    registry = RoomRegistry()
    seen = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        seen.append(registry.get_or_create('RACE'))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len({id(room) for room in seen}) == 1


def test_concurrent_selections_honour_one_turn():
    registry = RoomRegistry()
    room = registry.get_or_create('ABC123')
    room.join('a')
    room.join('b')
    accepted = []
    barrier = threading.Barrier(8)

    def worker(number):
        barrier.wait()
        with room.lock:
            if room.select_number('a', number):
                accepted.append(number)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(1, 9)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(accepted) == 1
    assert room.turn_holder.sid == 'b'


def test_destroying_room_stops_its_draw():
    registry = RoomRegistry()
    room = registry.get_or_create('R')
    room.join('a')
    gen = room.begin_draw()
    assert room.draw_next(gen)

    room.leave('a')
    assert registry.remove('R') is True
    assert room.closed
    assert room.draw_next(gen) is None
    assert not room.is_drawing
