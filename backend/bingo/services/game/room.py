import random
import threading
from typing import List, Optional

from bingo.models import (
    ACTIVE, FINISHED, WAITING,
    GAME_WON, GRID_LAYOUT, NUMBER_DRAWN, NUMBER_SELECTED, PLAYER_INFO, RESET_CLIENT, TURN,
    Event, Player,
)
from .grid import deal_grid, max_number, new_lines


class Room:
    """Turn arbitration, selection checks and win tracking for one room.

    Every operation returns the events it produced; delivering them is up to
    the caller. Callers must hold ``lock`` around an operation and the delivery
    of its events. Rejected actions (wrong turn, repeated number, unknown
    connection) return an empty list and leave the room untouched.
    """

    def __init__(self, code: str, win_threshold: int = 5, variant: str = 'turns',
                 authoritative: bool = False, rng: Optional[random.Random] = None):
        self.code = code
        self.win_threshold = win_threshold
        self.variant = variant
        self.authoritative = authoritative
        self.rng = rng or random.Random()
        self.lock = threading.RLock()
        # Set by the registry once the room is destroyed
        self.closed = False

        self.players: List[Player] = []
        self.drawn_numbers: List[int] = []
        self.turn_index: Optional[int] = None
        self.winner: Optional[str] = None

        self._labels_issued = 0
        self._draw_order: List[int] = []
        self._draw_generation = 0
        self._drawing = False

    # ---- Lookups ----
    @property
    def phase(self) -> str:
        if self.winner is not None:
            return FINISHED
        if len(self.players) < 2 or self.turn_index is None:
            return WAITING
        return ACTIVE

    @property
    def turn_holder(self) -> Optional[Player]:
        if self.turn_index is None or not self.players:
            return None
        return self.players[self.turn_index]

    @property
    def is_drawing(self) -> bool:
        return self._drawing

    def is_empty(self) -> bool:
        return not self.players

    def get_player(self, sid: str) -> Optional[Player]:
        for p in self.players:
            if p.sid == sid:
                return p
        return None

    # ---- Operations ----
    def join(self, sid: str) -> List[Event]:
        existing = self.get_player(sid)
        if existing:
            return [Event(PLAYER_INFO, existing.label, to=sid)]

        self._labels_issued += 1
        player = Player(sid=sid, label=f'Player {self._labels_issued}')
        self.players.append(player)

        events = [Event(PLAYER_INFO, player.label, to=sid)]
        if self.authoritative:
            events.append(self._deal(player))
        if self.turn_index is None:
            if len(self.players) >= 2:
                self.turn_index = 0
                events.append(Event(TURN, self.turn_holder.label))
        else:
            events.append(Event(TURN, self.turn_holder.label, to=sid))
        return events

    def select_number(self, sid: str, number: int) -> List[Event]:
        if self.phase != ACTIVE:
            return []
        holder = self.turn_holder
        if holder.sid != sid or number in self.drawn_numbers:
            return []

        self.drawn_numbers.append(number)
        # Two players: this flips to the other one
        self.turn_index = (self.turn_index + 1) % len(self.players)
        return [
            Event(NUMBER_SELECTED, {'number': number, 'player': holder.label}),
            Event(TURN, self.turn_holder.label),
        ]

    def report_score(self, sid: str, score: int) -> List[Event]:
        player = self.get_player(sid)
        if player is None:
            return []
        if self.authoritative:
            if player.grid is None:
                return []
            score = self.rescore(player)
        player.score = score
        if score < self.win_threshold:
            return []
        if self.winner is None:
            self.winner = player.label
        return [Event(GAME_WON, player.label)]

    def rescore(self, player: Player) -> int:
        """Count the lines completed on the player's own grid by the drawn numbers."""
        player.won_lines |= new_lines(player.grid, self.drawn_numbers, player.won_lines)
        return len(player.won_lines)

    def reset(self) -> List[Event]:
        self.drawn_numbers = []
        self.winner = None
        self._stop_draw()
        for p in self.players:
            p.score = 0
            p.won_lines = set()

        events = []
        if self.players:
            self.turn_index = 0
            events.append(Event(TURN, self.turn_holder.label))
        else:
            self.turn_index = None
        events.append(Event(RESET_CLIENT))
        if self.authoritative:
            events.extend(self._deal(p) for p in self.players)
        return events

    def leave(self, sid: str) -> List[Event]:
        player = self.get_player(sid)
        if player is None:
            return []
        self.players.remove(player)
        if not self.players:
            self.turn_index = None
            self._stop_draw()
            return []
        # Losing a player forces a fresh round for whoever is left
        return self.reset()

    # ---- Automatic draw ----
    def begin_draw(self) -> Optional[int]:
        """Shuffle the number pool and return a token for the draw worker.

        Returns None when a draw is already running.
        """
        if self._drawing:
            return None
        pool = range(1, max_number(self.variant) + 1)
        self._draw_order = self.rng.sample(pool, len(pool))
        self._draw_generation += 1
        self._drawing = True
        return self._draw_generation

    def draw_next(self, generation: int) -> Optional[List[Event]]:
        """Draw the next number, or return None once this draw should stop."""
        if generation != self._draw_generation or not self._drawing:
            return None
        if self.closed or self.winner is not None:
            self._drawing = False
            return None
        while self._draw_order:
            number = self._draw_order.pop(0)
            if number not in self.drawn_numbers:
                self.drawn_numbers.append(number)
                return [Event(NUMBER_DRAWN, number)]
        self._drawing = False
        return None

    def _stop_draw(self):
        # Bumping the generation makes any running worker stop at its next tick
        self._draw_generation += 1
        self._drawing = False
        self._draw_order = []

    def _deal(self, player: Player) -> Event:
        player.grid = deal_grid(self.variant, self.rng)
        player.won_lines = set()
        return Event(GRID_LAYOUT, list(player.grid), to=player.sid)

    def snapshot(self):
        holder = self.turn_holder
        return {
            'code': self.code,
            'phase': self.phase,
            'players': [p.to_dict() for p in self.players],
            'drawn_numbers': list(self.drawn_numbers),
            'turn': holder.label if holder else None,
            'winner': self.winner,
            'drawing': self.is_drawing,
        }
