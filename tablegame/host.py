"""
pygame host - window, clock, input pump and game switching.

The host runs one GameEngine at a time. Loading a game shuts the previous
engine down first (cancelling its tick timer), so two games never tick
together. Input listeners are subscribed once on a shared InputBindings;
each game only swaps the handlers.

Controls:
    Tab - next bundled demo
    R   - restart the current game
    ESC - quit
"""

from typing import Any, Dict, List, Optional, Tuple

import pygame

from tablegame.config import GameConfig
from tablegame.demos import get_demo, list_demos
from tablegame.engine import GameEngine
from tablegame.input import InputBindings, PygameInputSource
from tablegame.logging import get_logger
from tablegame.render import PygameGrid, parse_color
from tablegame.timers import TimerQueue

log = get_logger('host')

DEFAULT_GRID_SIZE = (16, 10)
DEFAULT_CELL_SIZE = 40
DETAILS_HEIGHT = 36


class DetailsPanel:
    """Details sink that draws 'Name: value' pairs in a strip under the grid."""

    def __init__(self, height: int = DETAILS_HEIGHT, color: Any = '#444444',
                 background: Any = '#ffffff'):
        self.height = height
        self.color = parse_color(color)
        self.background = parse_color(background)
        self.values: Dict[str, Any] = {}
        self.visible = True
        self._font: Optional[pygame.font.Font] = None

    def update(self, name: str, value: Any) -> None:
        self.values[name] = value

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def reset(self) -> None:
        self.values.clear()
        self.visible = True

    def text(self) -> str:
        return "   ".join(f"{name}: {value}" for name, value in self.values.items())

    def draw(self, surface: pygame.Surface, top: int) -> None:
        area = pygame.Rect(0, top, surface.get_width(), self.height)
        surface.fill(self.background, area)
        if not self.visible or not self.values:
            return
        if self._font is None:
            self._font = pygame.font.Font(None, self.height - 8)
        label = self._font.render(self.text(), True, self.color)
        surface.blit(label, label.get_rect(midleft=(8, area.centery)))


class GameHost:
    """Runs grid games in a pygame window."""

    def __init__(self, grid_width: int = DEFAULT_GRID_SIZE[0],
                 grid_height: int = DEFAULT_GRID_SIZE[1],
                 cell_size: int = DEFAULT_CELL_SIZE,
                 playlist: Optional[List[str]] = None):
        """
        Args:
            grid_width: Columns in the game grid
            grid_height: Rows in the game grid
            cell_size: Pixel size of one cell
            playlist: Demo names cycled with Tab (default: every bundled demo)
        """
        self.grid = PygameGrid(grid_width, grid_height, cell_size)
        self.panel = DetailsPanel()
        self.input_source = PygameInputSource(self.grid.cell_at)
        self.bindings = InputBindings(subscribe=self.input_source.listen)
        self.playlist = playlist or list_demos()
        self.engine: Optional[GameEngine] = None
        self.config: Optional[GameConfig] = None
        self._playlist_index = -1
        self._screen: Optional[pygame.Surface] = None

    @property
    def window_size(self) -> Tuple[int, int]:
        width, height = self.grid.pixel_size
        return (width, height + self.panel.height)

    # =========================================================================
    # Game switching
    # =========================================================================

    def load(self, config: GameConfig) -> GameEngine:
        """Stop the running game (if any) and start ``config`` on a fresh engine."""
        if self.engine is not None:
            self.engine.shutdown()
        self.panel.reset()
        self.config = config
        self.engine = GameEngine(config, self.grid, timers=TimerQueue(),
                                 details_sink=self.panel, bindings=self.bindings)
        if self._screen is not None:
            pygame.display.set_caption(config.name)
        return self.engine.start()

    def load_demo(self, name: str, /, **overrides) -> GameEngine:
        if name in self.playlist:
            self._playlist_index = self.playlist.index(name)
        return self.load(get_demo(name, **overrides))

    def next_demo(self) -> GameEngine:
        self._playlist_index = (self._playlist_index + 1) % len(self.playlist)
        name = self.playlist[self._playlist_index]
        log.info("Switching to %s", name)
        return self.load(get_demo(name))

    def restart(self) -> Optional[GameEngine]:
        if self.config is None:
            return None
        return self.load(self.config)

    # =========================================================================
    # Main loop
    # =========================================================================

    def open(self) -> pygame.Surface:
        """Create the window."""
        pygame.init()
        self._screen = pygame.display.set_mode(self.window_size)
        if self.config is not None:
            pygame.display.set_caption(self.config.name)
        return self._screen

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Process one pygame event. Returns False when the host should quit."""
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            if event.key == pygame.K_TAB:
                self.next_demo()
                return True
            if event.key == pygame.K_r:
                self.restart()
                return True

        if self.engine is not None:
            for input_event in self.input_source.translate(event):
                self.engine.dispatch_input(input_event)
        return True

    def draw(self, surface: pygame.Surface) -> None:
        surface.fill(self.grid.background)
        self.grid.draw(surface)
        self.panel.draw(surface, self.grid.pixel_size[1])

    def run(self, fps: int = 60) -> int:
        """Run until the window is closed. Game callback errors propagate."""
        screen = self._screen or self.open()
        if self.engine is None:
            self.next_demo()

        clock = pygame.time.Clock()
        running = True
        try:
            while running:
                elapsed_ms = clock.tick(fps)

                for event in pygame.event.get():
                    if not self.handle_event(event):
                        running = False
                        break

                if running and self.engine is not None:
                    self.engine.advance(elapsed_ms)

                self.draw(screen)
                pygame.display.flip()
        finally:
            if self.engine is not None:
                self.engine.shutdown()
            pygame.quit()
        return 0
