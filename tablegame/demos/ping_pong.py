"""
Ping Pong - Demo Game

The player moves the right paddle (up/down or W/S); the left paddle is a
deliberately sloppy computer player. Letting the ball past costs a life;
getting it past the computer scores 100. Space pauses.
"""

import math
import random

from tablegame.config import GameConfig

NAME = "Ping Pong"
DESCRIPTION = "Keep the ball in play with your paddle. First to 1000 points wins."

MISS_COLOR = "#ffdddd"
SCORE_COLOR = "#ddffdd"
BALL_COLOR = "#eee"
WINNING_SCORE = 1000


def init(game):
    game.register_sprite("leftPaddle", {'x': 0, 'y': 2, 'width': 1, 'height': 3,
                                        'color': game.default_color})
    game.register_sprite("rightPaddle", {'x': game.screen_width - 1, 'y': 2, 'width': 1,
                                         'height': 3, 'color': game.default_color})
    game.register_sprite("ball", {'x': 3, 'y': 2, 'velocity_x': 1, 'velocity_y': 1})


def _serve(game, ball, x):
    """Recentre the ball after a point, then restore its colour."""

    def recentre(game):
        ball.x = x
        game.paint()

        def restore(game):
            ball.color = BALL_COLOR

        game.delay_for(500, restore)

    game.delay_for(500, recentre)


def update(game):
    ball = game.get_sprite("ball")
    left_paddle = game.get_sprite("leftPaddle")
    right_paddle = game.get_sprite("rightPaddle")

    # Game is over
    if ball is None:
        return

    if ball.velocity_x > 0:
        if game.colliding_from_left(ball, right_paddle):
            ball.velocity_x *= -1
            ball.x += ball.velocity_x
        elif ball.x + ball.velocity_x <= game.screen_width:
            ball.x += ball.velocity_x
        else:
            # Passed the player
            ball.color = MISS_COLOR
            ball.velocity_x *= -1
            game.set_details("Lives", game.get_details("Lives") - 1)
            if game.get_details("Lives") <= 0:
                game.unregister_sprite("ball")
                game.flash_ending()
                return
            _serve(game, ball, math.ceil(game.screen_width / 2))
    elif ball.velocity_x < 0:
        if game.colliding_from_right(ball, left_paddle):
            ball.velocity_x *= -1
            ball.x += ball.velocity_x
        elif ball.x >= 0:
            ball.x += ball.velocity_x
        else:
            # Passed the computer
            ball.color = SCORE_COLOR
            ball.velocity_x *= -1
            game.set_details("Score", game.get_details("Score") + 100)
            if game.get_details("Score") >= WINNING_SCORE:
                game.unregister_sprite("ball")
                game.flash_ending(3, 300)
                return
            _serve(game, ball, game.screen_width // 2)

    if ball.velocity_y > 0:
        if ball.y + ball.velocity_y < game.screen_height:
            ball.y += ball.velocity_y
        else:
            # Bottom wall
            ball.velocity_y *= -1
            ball.y += ball.velocity_y
    elif ball.velocity_y < 0:
        if ball.y > 0:
            ball.y += ball.velocity_y
        else:
            # Top wall
            ball.velocity_y *= -1
            ball.y += ball.velocity_y

    _move_computer_paddle(game, ball, left_paddle)


def _move_computer_paddle(game, ball, paddle):
    # Misses half its moves so it can be beaten
    if random.random() < 0.5:
        return

    if paddle.y + 1 < ball.y:
        if paddle.y + paddle.height < game.screen_height:
            paddle.y += 1
    elif paddle.y > 0:
        paddle.y -= 1


def on_keydown(game, event):
    paddle = game.get_sprite("rightPaddle")

    if event.key in ("up", "w"):
        if paddle.y > 0:
            paddle.y -= 1
    elif event.key in ("down", "s"):
        if paddle.y + paddle.height < game.screen_height:
            paddle.y += 1
    elif event.key == "space":
        if game.is_paused():
            game.resume()
        else:
            game.pause()

    game.paint()


def get_game_config(**overrides) -> GameConfig:
    """
    Factory function for the Ping Pong config.

    Args:
        **overrides: GameConfig fields to replace (None values are ignored)

    Returns:
        GameConfig for a fresh game
    """
    config = GameConfig(
        name=NAME,
        details={'Score': 0, 'Lives': 3},
        init=init,
        update=update,
        handlers={'keydown': on_keydown},
        delay=100,
    )
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return config.with_overrides(**overrides) if overrides else config
