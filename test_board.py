"""
Tests for the board state machine
"""
import random

import pytest

from board import (
    Board,
    BoardFullError,
    Direction,
    compact_lane,
    lane_index,
    merge_lane,
)


CHECKERBOARD = [2, 4, 2, 4,
                4, 2, 4, 2,
                2, 4, 2, 4,
                4, 2, 4, 2]


class ScriptedRng:
    """picks a fixed position among the empty cells and rolls a fixed value"""

    def __init__(self, pick=0, roll=0.5):
        self.pick = pick
        self.roll = roll

    def choice(self, seq):
        return seq[self.pick]

    def random(self):
        return self.roll


def slide(grid, direction):
    """grid after a move, before any tile spawns"""
    grid = list(grid)
    for lane in range(4):
        indices = [lane_index(direction, lane, pos) for pos in range(4)]
        merged, _ = merge_lane(compact_lane([grid[i] for i in indices]))
        for i, value in zip(indices, merged):
            grid[i] = value
    return grid


@pytest.mark.parametrize("lane, expected, points", [
    ([2, 2, 2, 2], [4, 4, 0, 0], 8),
    ([2, 2, 4, 4], [4, 8, 0, 0], 12),
    ([2, 2, 4, 0], [4, 4, 0, 0], 4),
    ([2, 2, 2, 4], [4, 2, 4, 0], 4),
    ([4, 2, 2, 0], [4, 4, 0, 0], 4),
    ([4, 2, 2, 2], [4, 4, 2, 0], 4),
    ([2, 4, 4, 4], [2, 8, 4, 0], 8),
    ([2, 4, 8, 8], [2, 4, 16, 0], 16),
    ([2, 4, 8, 16], [2, 4, 8, 16], 0),
    ([2, 4, 0, 0], [2, 4, 0, 0], 0),
    ([2, 0, 0, 0], [2, 0, 0, 0], 0),
    ([0, 0, 0, 0], [0, 0, 0, 0], 0),
])
def test_merge_lane_rule_priority(lane, expected, points):
    assert merge_lane(lane) == (expected, points)


def test_compact_lane_keeps_order():
    assert compact_lane([0, 2, 0, 4]) == [2, 4, 0, 0]
    assert compact_lane([0, 0, 0, 8]) == [8, 0, 0, 0]
    assert compact_lane([2, 0, 0, 4]) == [2, 4, 0, 0]


def test_lane_index_table():
    def lane(direction, n):
        return [lane_index(direction, n, pos) for pos in range(4)]

    assert lane(Direction.UP, 1) == [1, 5, 9, 13]
    assert lane(Direction.DOWN, 1) == [13, 9, 5, 1]
    assert lane(Direction.LEFT, 2) == [8, 9, 10, 11]
    assert lane(Direction.RIGHT, 2) == [11, 10, 9, 8]
    # plain strings work too
    assert lane('right', 0) == [3, 2, 1, 0]


def test_new_board_has_one_tile():
    board = Board(rng=random.Random(1))

    tiles = [v for v in board.grid if v != 0]
    assert len(tiles) == 1
    assert tiles[0] in (2, 4)
    assert board.score == 0
    assert not board.game_over


def test_spawn_value_follows_roll():
    board = Board.from_grid([0] * 16, rng=ScriptedRng(roll=0.05))
    index = board.spawn_random()
    assert index == 0
    assert board.grid[0] == 4

    board.rng = ScriptedRng(pick=-1, roll=0.95)
    index = board.spawn_random()
    assert index == 15
    assert board.grid[15] == 2


def test_spawn_on_full_board_raises():
    board = Board.from_grid(CHECKERBOARD)
    with pytest.raises(BoardFullError):
        board.spawn_random()


def test_both_pairs_merge_scores_doubled_values():
    grid = [2, 2, 2, 2] + [0] * 12
    board = Board.from_grid(grid, rng=ScriptedRng())

    moved, points = board.resolve_move(Direction.LEFT)

    assert moved
    assert points == 8
    assert board.score == 8
    # first empty cell receives the new 2
    assert board.grid[:4] == [4, 4, 2, 0]


@pytest.mark.parametrize("direction, start, end", [
    ('up', 5, 1),
    ('down', 5, 13),
    ('left', 5, 4),
    ('right', 5, 7),
])
def test_single_tile_slides_to_edge(direction, start, end):
    grid = [0] * 16
    grid[start] = 8
    board = Board.from_grid(grid, rng=ScriptedRng(pick=-1))

    moved, points = board.resolve_move(direction)

    assert moved
    assert points == 0
    assert board.grid[end] == 8
    assert board.grid[start] == 0
    assert board.empty_count() == 14


def test_illegal_move_changes_nothing():
    grid = [2, 4, 8, 16] + [0] * 12
    board = Board.from_grid(grid, rng=ScriptedRng())

    for _ in range(2):
        moved, points = board.resolve_move(Direction.UP)
        assert not moved
        assert points == 0
        assert board.grid == grid
        assert board.score == 0


def test_is_loss():
    assert Board.from_grid(CHECKERBOARD).is_loss()

    for i in range(16):
        grid = list(CHECKERBOARD)
        grid[i] = 0
        assert not Board.from_grid(grid).is_loss()

    grid = list(CHECKERBOARD)
    grid[1] = 2
    assert not Board.from_grid(grid).is_loss()


def test_move_into_loss_locks_board():
    grid = [2, 4, 2, 4,
            4, 2, 4, 2,
            2, 4, 2, 4,
            0, 4, 2, 4]
    board = Board.from_grid(grid, rng=ScriptedRng())
    assert not board.game_over

    moved, _ = board.resolve_move(Direction.LEFT)

    assert moved
    assert board.grid == CHECKERBOARD
    assert board.game_over
    for direction in Direction:
        assert board.resolve_move(direction) == (False, 0)

    board.reset()
    assert not board.game_over
    assert board.score == 0
    assert board.empty_count() == 15


def test_from_grid_validation():
    with pytest.raises(ValueError):
        Board.from_grid([2] * 15)
    with pytest.raises(ValueError):
        Board.from_grid([3] + [0] * 15)
    with pytest.raises(ValueError):
        Board.from_grid([1] + [0] * 15)
    with pytest.raises(ValueError):
        Board.from_grid([-2] + [0] * 15)


def test_snapshot_is_read_only():
    board = Board.from_grid([2, 4] + [0] * 14)
    snapshot = board.snapshot()

    assert snapshot.grid.shape == (4, 4)
    assert snapshot.grid[0, 1] == 4
    assert snapshot.score == 0
    with pytest.raises(ValueError):
        snapshot.grid[0, 0] = 8
    assert board.grid[0] == 2


def test_seeded_boards_play_identically():
    a = Board(rng=random.Random(7))
    b = Board(rng=random.Random(7))

    for direction in ['left', 'up', 'right', 'down'] * 5:
        assert a.resolve_move(direction) == b.resolve_move(direction)
        assert a.grid == b.grid
        assert a.score == b.score


def test_random_play_properties():
    """sum conservation, spawn legality and score monotonicity"""
    board = Board(rng=random.Random(2048))
    chooser = random.Random(4)

    for _ in range(500):
        if board.game_over:
            break

        direction = chooser.choice(list(Direction))
        before = list(board.grid)
        score_before = board.score
        afterstate = slide(before, direction)

        moved, points = board.resolve_move(direction)

        assert board.score >= score_before
        assert sum(afterstate) == sum(before)
        if not moved:
            assert board.grid == before
            assert board.score == score_before
            continue

        assert board.score == score_before + points
        diff = [i for i in range(16) if board.grid[i] != afterstate[i]]
        assert len(diff) == 1
        assert afterstate[diff[0]] == 0
        assert board.grid[diff[0]] in (2, 4)
        for value in board.grid:
            assert value == 0 or (value >= 2 and value & (value - 1) == 0)


def test_max_tile_and_str():
    board = Board.from_grid([2048, 2] + [0] * 14)

    assert board.max_tile() == 2048
    text = str(board)
    assert "Score: 0" in text
    assert "2048" in text
