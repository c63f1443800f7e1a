import math

import pygame

from .game import Direction, Game2048, Status

# --- Constants for Interface ---
TILE_SIZE = 100
MARGIN = 10
SCORE_HEIGHT = 80
BG_COLOR = (250, 248, 239)
GRID_COLOR = (187, 173, 160)
EMPTY_CELL_COLOR = (205, 193, 180)
TEXT_COLOR_LIGHT = (249, 246, 242)
TEXT_COLOR_DARK = (119, 110, 101)
TILE_COLORS = {
    0: EMPTY_CELL_COLOR, 2: (238, 228, 218), 4: (237, 224, 200),
    8: (242, 177, 121), 16: (245, 149, 99), 32: (246, 124, 95),
    64: (246, 94, 59), 128: (237, 207, 114), 256: (237, 204, 97),
    512: (237, 200, 80), 1024: (237, 197, 63), 2048: (237, 194, 46),
    4096: (60, 58, 50),
}
ANIMATION_DURATION_MS = 100  # Duration for slide animation
NEW_TILE_ANIMATION_DURATION_MS = 150  # Duration for new tile appearance
FPS = 60

KEY_DIRECTIONS = {
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
}


class PygameInterface:
    """Window renderer and arrow-key dispatcher. Reads engine state, never changes rules."""

    def __init__(self, game: Game2048):
        self.game = game
        self.board_size = game.board_size()

        self.grid_width = self.board_size * TILE_SIZE + (self.board_size + 1) * MARGIN
        self.grid_height = self.board_size * TILE_SIZE + (self.board_size + 1) * MARGIN
        self.window_width = self.grid_width
        self.window_height = self.grid_height + SCORE_HEIGHT

        pygame.init()
        self.screen = pygame.display.set_mode((self.window_width, self.window_height))
        pygame.display.set_caption("tilemerge")
        self.clock = pygame.time.Clock()

        self.font_score = pygame.font.SysFont("Arial", 40, bold=True)
        self.font_large = pygame.font.SysFont("Arial", 60, bold=True)

        self.game.add_listener(self)

        self._transitions = []
        self._slide_start_time = None
        self._spawn_start_time = None

    # --- Game Logic Listener Methods ---
    def on_reset(self, board, score):
        self._transitions = []
        self._slide_start_time = None
        self._spawn_start_time = None

    def on_move_complete(self, transitions):
        self._transitions = transitions
        self._slide_start_time = pygame.time.get_ticks()
        self._spawn_start_time = None

    # --- Pygame Drawing Helpers ---
    def _get_tile_color(self, value):
        log_value = int(math.log2(value)) if value > 0 else 0
        return TILE_COLORS.get(2 ** log_value, TILE_COLORS[4096])

    def _get_text_color(self, value):
        return TEXT_COLOR_DARK if value <= 8 else TEXT_COLOR_LIGHT

    def _get_tile_font_size(self, value):
        digits = len(str(value))
        return {1: 55, 2: 55, 3: 45, 4: 35}.get(digits, 30)

    def _get_cell_pixel_center(self, col, row):
        x = MARGIN + col * (TILE_SIZE + MARGIN) + TILE_SIZE // 2
        y = SCORE_HEIGHT + MARGIN + row * (TILE_SIZE + MARGIN) + TILE_SIZE // 2
        return x, y

    def _draw_tile_at_pos(self, value, center_pixel, alpha=255, scale=1.0):
        color = self._get_tile_color(value)
        scaled_size = max(1, int(TILE_SIZE * scale))
        scaled_rect = pygame.Rect(0, 0, scaled_size, scaled_size)
        scaled_rect.center = center_pixel

        tile_surface = pygame.Surface((scaled_size, scaled_size), pygame.SRCALPHA)
        pygame.draw.rect(tile_surface, (*color, alpha), (0, 0, scaled_size, scaled_size), border_radius=int(5 * scale))
        self.screen.blit(tile_surface, scaled_rect.topleft)

        font_size = max(10, int(self._get_tile_font_size(value) * min(1.0, scale * 1.5)))
        font = pygame.font.SysFont("Arial", font_size, bold=True)
        text_surf = font.render(str(value), True, self._get_text_color(value))
        text_surf.set_alpha(alpha)
        self.screen.blit(text_surf, text_surf.get_rect(center=scaled_rect.center))

    def _slide_progress(self, now):
        if self._slide_start_time is None:
            return None
        progress = (now - self._slide_start_time) / ANIMATION_DURATION_MS
        if progress >= 1.0:
            # Slide finished, the freshly spawned tile grows in next
            self._slide_start_time = None
            self._transitions = []
            self._spawn_start_time = now
            return None
        return progress

    def _spawn_progress(self, now):
        if self._spawn_start_time is None:
            return None
        progress = (now - self._spawn_start_time) / NEW_TILE_ANIMATION_DURATION_MS
        if progress >= 1.0:
            self._spawn_start_time = None
            return None
        return progress

    # --- Main Drawing Method ---
    def _draw_board(self):
        self.screen.fill(BG_COLOR)
        pygame.draw.rect(self.screen, GRID_COLOR, (0, SCORE_HEIGHT, self.window_width, self.grid_height))

        for row in range(self.board_size):
            for col in range(self.board_size):
                cell_rect = pygame.Rect(
                    MARGIN + col * (TILE_SIZE + MARGIN),
                    SCORE_HEIGHT + MARGIN + row * (TILE_SIZE + MARGIN),
                    TILE_SIZE, TILE_SIZE)
                pygame.draw.rect(self.screen, EMPTY_CELL_COLOR, cell_rect, border_radius=5)

        now = pygame.time.get_ticks()
        slide = self._slide_progress(now)
        grow = self._spawn_progress(now)
        spawn_pos = self.game.last_spawn_position()

        # Cells owned by the slide animation are drawn from the transition log
        animated = set()
        if slide is not None:
            animated.add(spawn_pos)
            for t in self._transitions:
                animated.add(t.start)
                animated.add(t.end)

        for row in range(self.board_size):
            for col in range(self.board_size):
                value = self.game.tile_value(col, row)
                if value == 0 or (col, row) in animated:
                    continue
                scale, alpha = 1.0, 255
                if grow is not None and (col, row) == spawn_pos:
                    scale = 0.1 + 0.9 * grow
                    alpha = int(255 * grow)
                self._draw_tile_at_pos(value, self._get_cell_pixel_center(col, row), alpha=alpha, scale=scale)

        if slide is not None:
            for t in self._transitions:
                if t.displaced_value:
                    self._draw_tile_at_pos(t.displaced_value, self._get_cell_pixel_center(*t.end))
            for t in self._transitions:
                start_x, start_y = self._get_cell_pixel_center(*t.start)
                end_x, end_y = self._get_cell_pixel_center(*t.end)
                current = (start_x + (end_x - start_x) * slide, start_y + (end_y - start_y) * slide)
                self._draw_tile_at_pos(t.value, current)

        score_text = self.font_score.render(f"Score: {self.game.score()}", True, TEXT_COLOR_DARK)
        self.screen.blit(score_text, score_text.get_rect(center=(self.window_width // 2, SCORE_HEIGHT // 2)))

    def _draw_overlay(self, fill, title, text_color, hint):
        overlay = pygame.Surface((self.window_width, self.window_height), pygame.SRCALPHA)
        overlay.fill(fill)
        self.screen.blit(overlay, (0, 0))
        msg = self.font_large.render(title, True, text_color)
        score_msg = self.font_large.render(f"Score: {self.game.score()}", True, text_color)
        self.screen.blit(msg, msg.get_rect(center=(self.window_width // 2, self.window_height // 2 - 50)))
        self.screen.blit(score_msg, score_msg.get_rect(center=(self.window_width // 2, self.window_height // 2 + 20)))
        hint_msg = pygame.font.SysFont("Arial", 30, bold=True).render(hint, True, TEXT_COLOR_DARK)
        self.screen.blit(hint_msg, hint_msg.get_rect(center=(self.window_width // 2, self.window_height - 50)))

    # --- Main Loop ---
    def run(self):
        running = True
        while running:
            self.clock.tick(FPS)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_r:
                        self.game.new_game()
                    elif (event.key in KEY_DIRECTIONS and self._slide_start_time is None
                          and self.game.status() is Status.IN_PROGRESS):
                        self.game.apply_move(KEY_DIRECTIONS[event.key])

            self._draw_board()

            if self._slide_start_time is None:
                if self.game.status() is Status.LOST:
                    self._draw_overlay((238, 228, 218, 180), "Game Over!", TEXT_COLOR_DARK, "Press R to Restart")
                elif self.game.status() is Status.WON:
                    self._draw_overlay((237, 194, 46, 180), "You Win!", TEXT_COLOR_LIGHT, "Press R to Restart")

            pygame.display.flip()

        pygame.quit()
