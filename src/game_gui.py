import argparse
import sys

import pygame

from board import Board
from controls import Controller, decode_key


pygame.init()


WINDOW_WIDTH = 430
WINDOW_HEIGHT = 600
BOARD_START_X = 10
BOARD_START_Y = 150
BOARD_SIZE = 410
CELL_SIZE = 90
CELL_STEP = 100
ROUNDNESS = 7

# tiles 2, 4, 8, ... 16384 with the last two cells empty
DEVEL_GRID = [2 ** n for n in range(1, 15)] + [0, 0]

COLORS = {
    'background': (255, 255, 255),
    'grid_background': (189, 181, 166),
    'empty_cell': (204, 191, 179),
    'overlay': (0, 0, 0, 128),
    'text_dark': (0, 0, 0),
    'text_tile_low': (128, 122, 115),
    'text_light': (255, 255, 255),
    'unknown_tile': (0, 0, 0),
    # tile colors
    2: (237, 227, 217),
    4: (237, 224, 199),
    8: (242, 176, 120),
    16: (245, 148, 99),
    32: (245, 125, 94),
    64: (245, 92, 59),
    128: (237, 204, 112),
    256: (237, 204, 94),
    512: (237, 199, 79),
    1024: (237, 204, 97),
    2048: (237, 194, 46),
}

ABOUT_LINES = [
    "r2048 - a sliding tile puzzle",
    "Slide tiles with the arrow keys or W/A/S/D.",
    "Equal tiles merge into one of double value.",
    "",
    "R starts a new game, Q or ESC quits.",
    "Press Q or ESC to close this window.",
]


class GameGUI:
    def __init__(self, controller):
        """initialize game GUI"""
        self.controller = controller

        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption("r2048")

        self.fonts = {}
        self.clock = pygame.time.Clock()

    def font(self, size):
        """default pygame font of the given size, created once"""
        if size not in self.fonts:
            self.fonts[size] = pygame.font.Font(None, size)
        return self.fonts[size]

    def get_tile_color(self, value):
        """get background color for a tile value"""
        if value == 0:
            return COLORS['empty_cell']
        return COLORS.get(value, COLORS['unknown_tile'])

    def get_text_color(self, value):
        """get text color for a tile value"""
        if value <= 4:
            return COLORS['text_tile_low']
        return COLORS['text_light']

    def get_font_size(self, value):
        # shrink the text so longer numbers fit the tile
        digits = len(str(value))
        if digits == 1:
            return 72
        elif digits == 2:
            return 64
        elif digits == 3:
            return 56
        elif digits == 4:
            return 44
        return 36

    def draw(self, state):
        """draw one frame from a render state"""
        self.screen.fill(COLORS['background'])

        self.draw_header(state.score)
        self.draw_grid(state.grid)

        if state.lost:
            self.draw_loss_screen()
        if state.show_info:
            self.draw_about()

    def draw_header(self, score):
        """draw the title tile, score and instructions"""
        title_rect = pygame.Rect(BOARD_START_X, 5, 128, 128)
        pygame.draw.rect(self.screen, COLORS[2048], title_rect, border_radius=ROUNDNESS)
        title = self.font(64).render("2048", True, COLORS['text_light'])
        self.screen.blit(title, title.get_rect(center=title_rect.center))

        x = BOARD_START_X + 250
        self.screen.blit(self.font(28).render("SCORE:", True, COLORS['text_dark']), (x, 25))
        self.screen.blit(self.font(28).render(str(score), True, COLORS['text_dark']), (x, 47))

        help_font = self.font(22)
        self.screen.blit(help_font.render("Press R to reset the game", True, COLORS['text_dark']),
                         (x - 80, 90))
        self.screen.blit(help_font.render("Press H for game info", True, COLORS['text_dark']),
                         (x - 80, 108))

    def draw_grid(self, grid):
        """draw the board background and every cell"""
        board_rect = pygame.Rect(BOARD_START_X, BOARD_START_Y, BOARD_SIZE, BOARD_SIZE)
        pygame.draw.rect(self.screen, COLORS['grid_background'], board_rect,
                         border_radius=ROUNDNESS)

        rows, cols = grid.shape
        for row in range(rows):
            for col in range(cols):
                self.draw_cell(row, col, int(grid[row, col]))

    def draw_cell(self, row, col, value):
        """draw a single cell of the grid"""
        x = col * CELL_STEP + 10 + BOARD_START_X
        y = row * CELL_STEP + 10 + BOARD_START_Y

        cell_rect = pygame.Rect(x, y, CELL_SIZE, CELL_SIZE)
        pygame.draw.rect(self.screen, self.get_tile_color(value), cell_rect,
                         border_radius=ROUNDNESS)

        if value != 0:
            font = self.font(self.get_font_size(value))
            text_surface = font.render(str(value), True, self.get_text_color(value))
            self.screen.blit(text_surface, text_surface.get_rect(center=cell_rect.center))

    def draw_overlay(self):
        """darken the whole window"""
        overlay = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT), pygame.SRCALPHA)
        overlay.fill(COLORS['overlay'])
        self.screen.blit(overlay, (0, 0))

    def draw_loss_screen(self):
        self.draw_overlay()
        font = self.font(40)
        center_y = WINDOW_HEIGHT // 2
        for offset, line in ((0, "You lost!"), (32, "Press R to start a new game.")):
            surface = font.render(line, True, COLORS['text_dark'])
            self.screen.blit(surface, surface.get_rect(center=(WINDOW_WIDTH // 2, center_y + offset)))

    def draw_about(self):
        self.draw_overlay()
        font = self.font(18)
        y = WINDOW_HEIGHT // 2
        for line in ABOUT_LINES:
            surface = font.render(line, True, COLORS['text_light'])
            self.screen.blit(surface, surface.get_rect(center=(WINDOW_WIDTH // 2, y)))
            y += 16

    def run(self):
        """main loop"""
        print("2048 Game Started!")
        print("Use arrow keys or W/A/S/D to move tiles")
        print("Press R to restart, H for info, Q or ESC to quit")
        print()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    running = self.controller.handle(decode_key(event.key))
                if not running:
                    break

            # only draw when something changed
            if running and self.controller.redraw:
                self.draw(self.controller.render_state())
                pygame.display.flip()
                self.controller.redraw = False

            self.clock.tick(60)

        pygame.quit()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="r2048 - a sliding tile puzzle")
    parser.add_argument('-d', '--devel-board', action='store_true',
                        help="Start from a fixed board holding every tile from 2 to 16384")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    if args.devel_board:
        board = Board.from_grid(DEVEL_GRID)
    else:
        board = Board()

    try:
        game = GameGUI(Controller(board))
        game.run()
    except Exception as e:
        print(f"Error running game: {e}")
        pygame.quit()
        sys.exit(1)


if __name__ == "__main__":
    main()
