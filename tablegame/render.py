"""Grid rendering: the screen-buffer interface, its implementations, and
the render pass that redraws every sprite."""

from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple, runtime_checkable

import pygame

from tablegame.sprite import DEFAULT_COLOR, PolygonCell, Sprite

Color = Tuple[int, int, int]

EDGES = ('left', 'top', 'right', 'bottom')


@runtime_checkable
class GridRenderer(Protocol):
    """A width x height grid of cells that can be coloured and bordered."""
    width: int
    height: int

    def set_cell_color(self, x: int, y: int, color: Any) -> None:
        ...

    def clear_cell(self, x: int, y: int) -> None:
        ...

    def set_cell_border(self, x: int, y: int, edge: str, color: Any) -> None:
        ...


class MemoryGrid:
    """Grid renderer that only records cell state. Used headless and in tests."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid must be at least 1x1, got {width}x{height}")
        self.width = width
        self.height = height
        self._colors: Dict[Tuple[int, int], Any] = {}
        self._borders: Dict[Tuple[int, int], Dict[str, Any]] = {}

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_cell_color(self, x: int, y: int, color: Any) -> None:
        if self._in_bounds(x, y):
            self._colors[(x, y)] = color

    def clear_cell(self, x: int, y: int) -> None:
        self._colors.pop((x, y), None)
        self._borders.pop((x, y), None)

    def set_cell_border(self, x: int, y: int, edge: str, color: Any) -> None:
        if edge not in EDGES:
            raise ValueError(f"Unknown edge {edge!r}, expected one of {EDGES}")
        if self._in_bounds(x, y):
            self._borders.setdefault((x, y), {})[edge] = color

    def cell_color(self, x: int, y: int) -> Optional[Any]:
        return self._colors.get((x, y))

    def cell_borders(self, x: int, y: int) -> Dict[str, Any]:
        return dict(self._borders.get((x, y), {}))

    def filled_cells(self) -> Dict[Tuple[int, int], Any]:
        """Snapshot of every coloured cell."""
        return dict(self._colors)

    def is_blank(self) -> bool:
        return not self._colors and not self._borders


def clear_grid(grid: GridRenderer) -> None:
    """Erase every cell of the grid."""
    for y in range(grid.height):
        for x in range(grid.width):
            grid.clear_cell(x, y)


def fill_rect(grid: GridRenderer, x: int, y: int, width: int, height: int,
              color: Any = None) -> None:
    """
    Draw a rectangle of cells, clipped to the grid.

    A zero width draws a vertical line on the left edge of ``height`` cells;
    a zero height draws a horizontal line on the top edge of ``width`` cells.
    Zero by zero draws nothing.
    """
    color = color or DEFAULT_COLOR
    x0, y0 = max(x, 0), max(y, 0)

    if width == 0:
        for row in range(y0, min(y + height, grid.height)):
            if 0 <= x < grid.width:
                grid.set_cell_border(x, row, 'left', color)
    elif height == 0:
        for col in range(x0, min(x + width, grid.width)):
            if 0 <= y < grid.height:
                grid.set_cell_border(col, y, 'top', color)
    else:
        for row in range(y0, min(y + height, grid.height)):
            for col in range(x0, min(x + width, grid.width)):
                grid.set_cell_color(col, row, color)


def fill_polygon(grid: GridRenderer, polygon: Iterable[PolygonCell], color: Any = None) -> None:
    """Draw each polygon cell; a cell's own colour wins over ``color``."""
    for cell in polygon:
        fill_rect(grid, cell.x, cell.y, cell.width, cell.height, cell.color or color)


class RenderPass:
    """Clears the grid and redraws every sprite in registry order."""

    def __init__(self, grid: GridRenderer):
        self.grid = grid

    def paint(self, sprites: Iterable[Sprite], hidden: bool = False) -> None:
        clear_grid(self.grid)
        if hidden:
            return
        for sprite in sprites:
            if sprite.polygon:
                fill_polygon(self.grid, sprite.polygon, sprite.color)
            else:
                fill_rect(self.grid, sprite.x, sprite.y, sprite.width, sprite.height, sprite.color)


# =============================================================================
# pygame grid
# =============================================================================

def parse_color(color_value: Any, fallback: Color = (255, 255, 255)) -> Color:
    """Parse a colour token to an RGB tuple.

    Accepts:
    - RGB tuple/list: [255, 215, 0] or (255, 215, 0)
    - Hex strings: '#eee' or '#f1f1f1'
    - Color names known to pygame: 'red', 'gray', ...
    """
    if isinstance(color_value, (list, tuple)):
        if len(color_value) >= 3:
            return (int(color_value[0]), int(color_value[1]), int(color_value[2]))
        return fallback

    if not isinstance(color_value, str):
        return fallback

    token = color_value.strip()
    if token.startswith('#') and len(token) == 4:
        token = '#' + ''.join(ch * 2 for ch in token[1:])
    try:
        c = pygame.Color(token)
    except ValueError:
        return fallback
    return (c.r, c.g, c.b)


class PygameGrid(MemoryGrid):
    """MemoryGrid that can draw itself onto a pygame surface."""

    def __init__(self, width: int, height: int, cell_size: int = 24,
                 origin: Tuple[int, int] = (0, 0),
                 background: Any = '#ffffff', grid_color: Any = '#d8d8d8'):
        super().__init__(width, height)
        self.cell_size = cell_size
        self.origin = origin
        self.background = parse_color(background)
        self.grid_color = parse_color(grid_color)

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return (self.width * self.cell_size, self.height * self.cell_size)

    def cell_rect(self, x: int, y: int) -> pygame.Rect:
        ox, oy = self.origin
        return pygame.Rect(ox + x * self.cell_size, oy + y * self.cell_size,
                           self.cell_size, self.cell_size)

    def cell_at(self, pos: Tuple[int, int]) -> Optional[Tuple[int, int]]:
        """Cell coordinates under a pixel position, or None outside the grid."""
        ox, oy = self.origin
        x = (pos[0] - ox) // self.cell_size
        y = (pos[1] - oy) // self.cell_size
        if self._in_bounds(x, y):
            return (int(x), int(y))
        return None

    def draw(self, surface: pygame.Surface) -> None:
        """Paint the recorded cell colours, borders and grid lines."""
        ox, oy = self.origin
        surface.fill(self.background, pygame.Rect(ox, oy, *self.pixel_size))

        for (x, y), color in self._colors.items():
            pygame.draw.rect(surface, parse_color(color), self.cell_rect(x, y))

        for y in range(self.height):
            for x in range(self.width):
                pygame.draw.rect(surface, self.grid_color, self.cell_rect(x, y), 1)

        for (x, y), edges in self._borders.items():
            rect = self.cell_rect(x, y)
            for edge, color in edges.items():
                start, end = _edge_points(rect, edge)
                pygame.draw.line(surface, parse_color(color), start, end, 2)


def _edge_points(rect: pygame.Rect, edge: str) -> List[Tuple[int, int]]:
    if edge == 'left':
        return [rect.topleft, rect.bottomleft]
    if edge == 'top':
        return [rect.topleft, rect.topright]
    if edge == 'right':
        return [rect.topright, rect.bottomright]
    return [rect.bottomleft, rect.bottomright]
