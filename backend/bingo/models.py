from dataclasses import dataclass, field
from typing import Any, List, Optional, Set

# Room phases
WAITING = 'waiting'     # fewer than two players
ACTIVE = 'active'       # two or more players, turn assigned
FINISHED = 'finished'   # a win has been declared this round

# Outbound event names
PLAYER_INFO = 'player-info'
TURN = 'turn'
NUMBER_SELECTED = 'number-selected'
NUMBER_DRAWN = 'number-drawn'
GAME_WON = 'game-won'
RESET_CLIENT = 'reset-client'
GRID_LAYOUT = 'grid-layout'


@dataclass
class Player:
    sid: str
    label: str
    score: int = 0
    grid: Optional[List[int]] = None
    # Line ids already counted for this player in the current round
    won_lines: Set[str] = field(default_factory=set)

    def to_dict(self):
        return {
            'label': self.label,
            'score': self.score,
        }


@dataclass(frozen=True)
class Event:
    """An outbound message produced by a room.

    ``to`` is the target connection for point-to-point delivery; ``None``
    means broadcast to everyone in the room.
    """
    name: str
    data: Any = None
    to: Optional[str] = None

    @property
    def is_broadcast(self):
        return self.to is None
