"""
keyboard input decoding and the driver state that sits between input and the board
"""
from collections import namedtuple
from enum import Enum

import pygame

from board import Direction


class Command(Enum):
    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'
    RESET = 'reset'
    QUIT = 'quit'
    SHOW_INFO = 'show_info'


MOVES = {
    Command.UP: Direction.UP,
    Command.DOWN: Direction.DOWN,
    Command.LEFT: Direction.LEFT,
    Command.RIGHT: Direction.RIGHT,
}

KEY_BINDINGS = {
    pygame.K_LEFT: Command.LEFT,
    pygame.K_a: Command.LEFT,
    pygame.K_UP: Command.UP,
    pygame.K_w: Command.UP,
    pygame.K_DOWN: Command.DOWN,
    pygame.K_s: Command.DOWN,
    pygame.K_RIGHT: Command.RIGHT,
    pygame.K_d: Command.RIGHT,
    pygame.K_q: Command.QUIT,
    pygame.K_ESCAPE: Command.QUIT,
    pygame.K_r: Command.RESET,
    pygame.K_h: Command.SHOW_INFO,
}

# everything the renderer needs for one frame
RenderState = namedtuple('RenderState', ['grid', 'score', 'lost', 'show_info'])


def decode_key(key):
    """command for a pygame key code, None for unrecognized keys"""
    return KEY_BINDINGS.get(key)


class Controller:
    """
    owns the board and the about overlay flag

    the board is only ever changed through handle()
    """

    def __init__(self, board):
        self.board = board
        self.show_info = False
        self.redraw = True

    def handle(self, command):
        """
        apply one command

        returns:
            False when the game should exit, True otherwise
        """
        # while the about overlay is up, only the quit key closes it
        if self.show_info:
            if command is Command.QUIT:
                self.show_info = False
                self.redraw = True
            return True

        if command is None:
            return True

        if command in MOVES:
            moved, _ = self.board.resolve_move(MOVES[command])
            if moved:
                self.redraw = True

        elif command is Command.QUIT:
            return False

        elif command is Command.RESET:
            self.board.reset()
            self.redraw = True
            print("Game restarted!")

        elif command is Command.SHOW_INFO:
            self.show_info = True
            self.redraw = True

        return True

    def render_state(self):
        snapshot = self.board.snapshot()
        return RenderState(
            grid=snapshot.grid,
            score=snapshot.score,
            lost=self.board.is_loss(),
            show_info=self.show_info
        )
