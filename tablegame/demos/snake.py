"""
Snake - Demo Game

Steer with the arrow keys or WASD, eat the blocks that appear, and don't
run into the walls or yourself. Space pauses.
"""

import random

from tablegame.config import GameConfig
from tablegame.sprite import PolygonCell, Sprite

NAME = "Snake"
DESCRIPTION = "Grow the snake by eating blocks without hitting a wall or yourself."

CRASH_COLOR = "#ffdddd"
BLOCK_COLOR = "#ddd"
SNAKE_COLOR = "#eee"
BLOCK_EVERY_TICKS = 15
MAX_PLACEMENT_TRIES = 100

HEADINGS = {
    'up': (0, -1), 'w': (0, -1),
    'down': (0, 1), 's': (0, 1),
    'left': (-1, 0), 'a': (-1, 0),
    'right': (1, 0), 'd': (1, 0),
}


def _centre(game):
    return game.screen_width // 2, game.screen_height // 2


def _snake_options(game):
    x, y = _centre(game)
    return {'x': x, 'y': y, 'width': 1, 'height': 1, 'velocity_x': 1, 'velocity_y': 0,
            'polygon': [PolygonCell(x, y)]}


def init(game):
    game.register_sprite("snake", _snake_options(game))
    game.register_global("timeCount", 0)


def _add_block(game, polygon):
    """Drop a food block on a free cell away from the centre."""
    body = Sprite("body", polygon=polygon)
    centre = _centre(game)
    x = y = 0
    for _ in range(MAX_PLACEMENT_TRIES):
        x = random.randrange(game.screen_width)
        y = random.randrange(game.screen_height)
        if not game.colliding_polygons(body, PolygonCell(x, y)) and (x, y) != centre:
            break

    name = f"block{len(game.get_sprites())}"
    game.register_sprite(name, {'x': x, 'y': y, 'width': 1, 'height': 1,
                                'color': BLOCK_COLOR})


def _reset_snake(game):
    snake = game.register_sprite("snake", {**_snake_options(game), 'color': CRASH_COLOR})

    def restore(game):
        snake.color = SNAKE_COLOR

    game.delay_for(500, restore)


def update(game):
    snake = game.get_sprite("snake")

    # Game is over
    if snake is None or game.get_details("Lives") <= 0:
        return

    tail = snake.polygon[-1]
    last_x, last_y = tail.x, tail.y

    game.set_global("timeCount", game.get_global("timeCount") + 1)
    if (game.get_global("timeCount") % BLOCK_EVERY_TICKS == BLOCK_EVERY_TICKS - 1
            and len(game.get_sprites()) < 2):
        _add_block(game, snake.polygon)

    # Body follows the head
    for idx in range(len(snake.polygon) - 1, 0, -1):
        snake.polygon[idx].x = snake.polygon[idx - 1].x
        snake.polygon[idx].y = snake.polygon[idx - 1].y

    head = snake.polygon[0]
    head.x += snake.velocity_x
    head.y += snake.velocity_y

    out_of_bounds = (head.x < 0 or head.y < 0
                     or head.x >= game.screen_width or head.y >= game.screen_height)
    bitten = any(cell.x == head.x and cell.y == head.y for cell in snake.polygon[3:])

    if out_of_bounds or bitten:
        snake.shift_polygons('color', CRASH_COLOR, replace=True)
        game.set_details("Lives", game.get_details("Lives") - 1)
        if game.get_details("Lives") > 0:
            game.delay_for(500, _reset_snake)
        else:
            game.flash_ending(None, None, lambda game: game.unregister_sprite("snake"))
        return

    # Pick up food
    for name, sprite in list(game.get_sprites().items()):
        if name != "snake" and game.colliding(snake, sprite):
            snake.polygon.append(PolygonCell(last_x, last_y))
            game.unregister_sprite(name)
            game.set_details("Score", game.get_details("Score") + 100)


def on_keydown(game, event):
    snake = game.get_sprite("snake")
    if snake is None:
        return

    if event.key in HEADINGS:
        snake.velocity_x, snake.velocity_y = HEADINGS[event.key]
    elif event.key == "space":
        if game.is_paused():
            game.resume()
        else:
            game.pause()


def get_game_config(**overrides) -> GameConfig:
    """Factory function for the Snake config."""
    config = GameConfig(
        name=NAME,
        details={'Score': 0, 'Lives': 3},
        init=init,
        update=update,
        handlers={'keydown': on_keydown},
        delay=180,
    )
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return config.with_overrides(**overrides) if overrides else config
