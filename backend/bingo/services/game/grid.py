import random
from typing import Iterable, List, Optional, Sequence, Set

GRID_SIZE = 5
CELLS = GRID_SIZE * GRID_SIZE

# Number pools per variant
VARIANT_MAX_NUMBER = {
    'turns': 25,
    'draw': 100,
}

ALL_LINES = (
    [f'row-{i}' for i in range(GRID_SIZE)]
    + [f'col-{i}' for i in range(GRID_SIZE)]
    + ['diag-main', 'diag-anti']
)


def build_mask(grid: Sequence[int], marked: Iterable[int]) -> List[List[bool]]:
    """Lay the grid out row-major and flag each cell whose number is marked."""
    if len(grid) != CELLS:
        raise ValueError(f'grid must hold {CELLS} numbers, got {len(grid)}')
    marked = set(marked)
    mask = [[False] * GRID_SIZE for _ in range(GRID_SIZE)]
    for idx, num in enumerate(grid):
        if num in marked:
            mask[idx // GRID_SIZE][idx % GRID_SIZE] = True
    return mask


def completed_lines(grid: Sequence[int], marked: Iterable[int]) -> Set[str]:
    """Return the ids of every fully marked row, column and diagonal.

    Pure function of the final marked set: always evaluate against everything
    marked so far, since one number can complete several lines at once.
    """
    mask = build_mask(grid, marked)
    lines = set()
    for i in range(GRID_SIZE):
        if all(mask[i]):
            lines.add(f'row-{i}')
        if all(row[i] for row in mask):
            lines.add(f'col-{i}')
    if all(mask[i][i] for i in range(GRID_SIZE)):
        lines.add('diag-main')
    if all(mask[i][GRID_SIZE - 1 - i] for i in range(GRID_SIZE)):
        lines.add('diag-anti')
    return lines


def new_lines(grid: Sequence[int], marked: Iterable[int], already_won: Iterable[str]) -> Set[str]:
    return completed_lines(grid, marked) - set(already_won)


def max_number(variant: str) -> int:
    try:
        return VARIANT_MAX_NUMBER[variant]
    except KeyError:
        raise ValueError(f'unknown bingo variant: {variant!r}')


def deal_grid(variant: str = 'turns', rng: Optional[random.Random] = None) -> List[int]:
    """Deal a fresh layout: a shuffle of 1..25, or 25 distinct numbers from 1..100."""
    rng = rng or random
    return rng.sample(range(1, max_number(variant) + 1), CELLS)
