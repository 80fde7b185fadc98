"""
board state machine: grid, score, spawning, move resolution and loss detection
"""
import random
from collections import namedtuple
from enum import Enum

import numpy as np


GRID_SIZE = 4
CELL_COUNT = GRID_SIZE * GRID_SIZE

# 90% chance for 2 and 10% chance for 4
SPAWN_FOUR_PROBABILITY = 0.1


class Direction(Enum):
    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'


# read-only view handed to the renderer
Snapshot = namedtuple('Snapshot', ['grid', 'score'])


class BoardFullError(Exception):
    """raised when a tile is requested on a grid with no empty cell"""


def lane_index(direction, lane, position):
    """
    cell index of a position within a lane

    a lane is the 4 cells a tile slides along for the given direction,
    position 0 being the cell at the target edge
    """
    direction = Direction(direction)
    if direction is Direction.UP:
        return lane + GRID_SIZE * position
    elif direction is Direction.DOWN:
        return lane + GRID_SIZE * (GRID_SIZE - 1) - GRID_SIZE * position
    elif direction is Direction.LEFT:
        return lane * GRID_SIZE + position
    else:
        return lane * GRID_SIZE + (GRID_SIZE - 1) - position


def compact_lane(values):
    """slide all non-zero values toward the edge, keeping their order"""
    compacted = [v for v in values if v != 0]
    return compacted + [0] * (len(values) - len(compacted))


def merge_lane(values):
    """
    single non-cascading merge pass over a compacted lane

    the first matching rule wins, so some equal neighbours (e.g. a triple
    followed by a different tile) are left for a later move.

    returns:
        merged lane and the points scored
    """
    p0, p1, p2, p3 = values

    # both pairs
    if p0 == p1 and p2 == p3:
        return [p0 * 2, p2 * 2, 0, 0], p0 * 2 + p2 * 2

    # first pair only
    if p0 == p1 and p2 != p3:
        return [p0 * 2, p2, p3, 0], p0 * 2

    # middle pair
    if p0 != p1 and p1 == p2:
        return [p0, p1 * 2, p3, 0], p1 * 2

    # last pair, two empty cells are not a merge
    if p2 != p1 and p2 == p3:
        if p3 == 0:
            return [p0, p1, p2, p3], 0
        return [p0, p1, p2 * 2, 0], p2 * 2

    return [p0, p1, p2, p3], 0


def _is_tile_value(value):
    return value == 0 or (value >= 2 and value & (value - 1) == 0)


class Board:
    def __init__(self, rng=None):
        """
        initialize an empty 4x4 board with a single random tile

        args:
            rng: source of randomness with choice() and random(),
                 an unseeded random.Random() when omitted
        """
        self.rng = rng if rng is not None else random.Random()
        self.grid = [0] * CELL_COUNT
        self.score = 0
        self.game_over = False

        self.spawn_random()

    @classmethod
    def from_grid(cls, values, rng=None):
        """build a board from 16 explicit cell values, row-major"""
        values = [int(v) for v in values]
        if len(values) != CELL_COUNT:
            raise ValueError(f"expected {CELL_COUNT} cells, got {len(values)}")
        for value in values:
            if not _is_tile_value(value):
                raise ValueError(f"invalid tile value: {value}")

        board = cls.__new__(cls)
        board.rng = rng if rng is not None else random.Random()
        board.grid = values
        board.score = 0
        board.game_over = board.is_loss()
        return board

    def spawn_random(self):
        """
        put a 2 or a 4 into a uniformly chosen empty cell

        returns:
            index of the cell that received the tile
        """
        empty_cells = [i for i, value in enumerate(self.grid) if value == 0]
        if not empty_cells:
            raise BoardFullError("no empty cell to spawn a tile into")

        index = self.rng.choice(empty_cells)
        self.grid[index] = 4 if self.rng.random() < SPAWN_FOUR_PROBABILITY else 2
        return index

    def resolve_move(self, direction):
        """
        slide and merge every lane toward the given edge

        a move that leaves the grid unchanged is illegal: nothing spawns
        and the score stays the same.

        returns:
            moved: if the grid changed
            points: score gained by merges
        """
        direction = Direction(direction)
        if self.game_over:
            return False, 0

        old_grid = list(self.grid)
        points = 0

        for lane in range(GRID_SIZE):
            indices = [lane_index(direction, lane, pos) for pos in range(GRID_SIZE)]
            values = compact_lane([self.grid[i] for i in indices])
            merged, lane_points = merge_lane(values)
            points += lane_points
            for i, value in zip(indices, merged):
                self.grid[i] = value

        if self.grid == old_grid:
            return False, 0

        self.score += points
        self.spawn_random()
        if self.is_loss():
            self.game_over = True

        return True, points

    def is_loss(self):
        """check if no empty cell and no equal orthogonal neighbours remain"""
        for i, value in enumerate(self.grid):
            # another move is always possible with an empty tile
            if value == 0:
                return False

            row, col = divmod(i, GRID_SIZE)
            neighbours = []
            if col > 0:
                neighbours.append(i - 1)
            if col < GRID_SIZE - 1:
                neighbours.append(i + 1)
            if row > 0:
                neighbours.append(i - GRID_SIZE)
            if row < GRID_SIZE - 1:
                neighbours.append(i + GRID_SIZE)

            for n in neighbours:
                if self.grid[n] == value:
                    return False

        return True

    def reset(self):
        """reset the game, keeping the same source of randomness"""
        self.grid = [0] * CELL_COUNT
        self.score = 0
        self.game_over = False
        self.spawn_random()

    def snapshot(self):
        grid = np.array(self.grid, dtype=np.int64).reshape(GRID_SIZE, GRID_SIZE)
        grid.setflags(write=False)
        return Snapshot(grid=grid, score=self.score)

    def max_tile(self):
        return max(self.grid)

    def empty_count(self):
        return self.grid.count(0)

    def __str__(self):
        lines = [f"Score: {self.score}", "-" * 25]
        for row in range(GRID_SIZE):
            cells = self.grid[row * GRID_SIZE:(row + 1) * GRID_SIZE]
            lines.append("|" + "".join(f"{c:5}|" if c else "     |" for c in cells))
        lines.append("-" * 25)
        return "\n".join(lines)
