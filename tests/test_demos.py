"""
Demo Game Tests

Ping Pong and Snake driven tick by tick on a 10x6 in-memory grid.

Run with: pytest tests/test_demos.py -v
"""

import pytest

from tablegame.demos import DEMO_GAMES, get_demo, list_demos, ping_pong, snake
from tablegame.engine import GameEngine
from tablegame.flash import FlashPosition
from tablegame.input import InputEvent


def keydown(key):
    return InputEvent('keydown', key=key)


@pytest.fixture
def lazy_computer(monkeypatch):
    """Computer paddle never moves."""
    monkeypatch.setattr(ping_pong.random, 'random', lambda: 0.0)


# =============================================================================
# Registry
# =============================================================================

class TestDemoRegistry:
    """Tests for the demo lookup functions."""

    def test_list(self):
        assert list_demos() == ['ping_pong', 'snake']
        assert set(DEMO_GAMES) == {'ping_pong', 'snake'}

    @pytest.mark.parametrize("name", ["ping_pong", "Ping Pong", "ping-pong", "SNAKE"])
    def test_lookup_by_slug_or_name(self, name):
        assert get_demo(name).name in ("Ping Pong", "Snake")

    def test_overrides(self):
        config = get_demo("snake", delay=90, name=None)
        assert config.delay == 90
        assert config.name == "Snake"

    def test_name_override(self):
        """The demo is picked by its first argument; ``name`` renames the game."""
        config = get_demo("snake", name="Snake II")
        assert config.name == "Snake II"
        assert config.delay == 180

    def test_unknown(self):
        with pytest.raises(KeyError):
            get_demo("tetris")

    def test_fresh_config_each_call(self):
        assert get_demo("snake") is not get_demo("snake")


# =============================================================================
# Ping Pong
# =============================================================================

class TestPingPong:
    """Tests for the Ping Pong demo."""

    @pytest.fixture
    def game(self, grid, timers, sink, lazy_computer):
        return GameEngine(get_demo("ping_pong"), grid, timers=timers, details_sink=sink).start()

    def test_init(self, game, sink):
        assert game.get_sprite("leftPaddle").rect == (0, 2, 1, 3)
        assert game.get_sprite("rightPaddle").rect == (9, 2, 1, 3)
        assert game.get_sprite("ball").rect == (3, 2, 1, 1)
        assert sink.values == {'Score': 0, 'Lives': 3}
        assert game.get_delay() == 100

    def test_ball_moves_diagonally(self, game, timers):
        timers.advance(120)
        ball = game.get_sprite("ball")
        assert (ball.x, ball.y) == (4, 3)

    def test_bounces_off_player_paddle(self, game):
        ball = game.get_sprite("ball")
        ball.x, ball.y, ball.velocity_y = 8, 3, 0
        ping_pong.update(game)
        assert ball.velocity_x == -1
        assert ball.x == 7

    def test_bounces_off_bottom_wall(self, game):
        ball = game.get_sprite("ball")
        ball.y = 5
        ping_pong.update(game)
        assert ball.velocity_y == -1
        assert ball.y == 4

    def test_miss_costs_a_life_and_reserves(self, game, timers):
        ball = game.get_sprite("ball")
        ball.x, ball.y, ball.velocity_y = 10, 0, 0
        ping_pong.update(game)

        assert game.get_details("Lives") == 2
        assert ball.color == ping_pong.MISS_COLOR
        assert ball.velocity_x == -1
        assert game.is_delayed()

        timers.advance(500)
        assert ball.x == 5
        timers.advance(500)
        assert ball.color == ping_pong.BALL_COLOR

    def test_last_life_ends_game(self, game, timers):
        game.set_details("Lives", 1)
        ball = game.get_sprite("ball")
        ball.x, ball.y, ball.velocity_y = 10, 0, 0
        ping_pong.update(game)

        assert game.get_sprite("ball") is None
        assert game.flash_position is FlashPosition.RUNNING

        # Update is harmless once the ball is gone
        ping_pong.update(game)
        timers.advance(2000)
        assert game.flash_position is FlashPosition.FINISHED

    def test_scoring(self, game):
        ball = game.get_sprite("ball")
        ball.x, ball.y, ball.velocity_x, ball.velocity_y = -1, 0, -1, 0
        ping_pong.update(game)
        assert game.get_details("Score") == 100
        assert ball.color == ping_pong.SCORE_COLOR

    def test_winning_score(self, game):
        game.set_details("Score", 900)
        ball = game.get_sprite("ball")
        ball.x, ball.y, ball.velocity_x, ball.velocity_y = -1, 0, -1, 0
        ping_pong.update(game)
        assert game.get_sprite("ball") is None
        assert game.flash_position is FlashPosition.RUNNING

    def test_keys_move_paddle(self, game):
        paddle = game.get_sprite("rightPaddle")
        game.dispatch_input(keydown("up"))
        assert paddle.y == 1
        game.dispatch_input(keydown("s"))
        game.dispatch_input(keydown("down"))
        assert paddle.y == 3

    def test_paddle_stays_on_screen(self, game):
        paddle = game.get_sprite("rightPaddle")
        for _ in range(10):
            game.dispatch_input(keydown("w"))
        assert paddle.y == 0
        for _ in range(10):
            game.dispatch_input(keydown("down"))
        assert paddle.y == 3

    def test_space_toggles_pause(self, game):
        game.dispatch_input(keydown("space"))
        assert game.is_paused()
        game.dispatch_input(keydown("space"))
        assert not game.is_paused()

    def test_computer_paddle_follows_ball(self, game, monkeypatch):
        monkeypatch.setattr(ping_pong.random, 'random', lambda: 0.9)
        paddle = game.get_sprite("leftPaddle")
        ball = game.get_sprite("ball")
        ball.y, ball.velocity_y = 5, 0
        ping_pong.update(game)
        assert paddle.y == 3


# =============================================================================
# Snake
# =============================================================================

class TestSnake:
    """Tests for the Snake demo."""

    @pytest.fixture
    def game(self, grid, timers, sink):
        return GameEngine(get_demo("snake"), grid, timers=timers, details_sink=sink).start()

    def head(self, game):
        return game.get_sprite("snake").polygon[0]

    def test_init(self, game):
        snake_sprite = game.get_sprite("snake")
        assert (self.head(game).x, self.head(game).y) == (5, 3)
        assert (snake_sprite.velocity_x, snake_sprite.velocity_y) == (1, 0)
        assert game.get_global("timeCount") == 0
        assert game.get_delay() == 180

    def test_moves_each_tick(self, game, timers):
        timers.advance(20 + 180 * 2)
        assert (self.head(game).x, self.head(game).y) == (7, 3)
        assert game.get_global("timeCount") == 2

    def test_steering(self, game):
        game.dispatch_input(keydown("up"))
        snake.update(game)
        assert (self.head(game).x, self.head(game).y) == (5, 2)
        game.dispatch_input(keydown("a"))
        snake.update(game)
        assert (self.head(game).x, self.head(game).y) == (4, 2)

    def test_eats_block_and_grows(self, game):
        game.register_sprite("block1", {'x': 6, 'y': 3, 'color': snake.BLOCK_COLOR})
        snake.update(game)

        body = game.get_sprite("snake").polygon
        assert [(c.x, c.y) for c in body] == [(6, 3), (5, 3)]
        assert game.get_sprite("block1") is None
        assert game.get_details("Score") == 100

    def test_body_follows_head(self, game):
        body = game.get_sprite("snake").polygon
        game.register_sprite("block1", {'x': 6, 'y': 3})
        snake.update(game)
        snake.update(game)
        assert [(c.x, c.y) for c in body] == [(7, 3), (6, 3)]

    def test_wall_crash_costs_a_life(self, game, timers):
        for _ in range(5):
            snake.update(game)

        assert game.get_details("Lives") == 2
        assert game.is_delayed()
        assert all(c.color == snake.CRASH_COLOR for c in game.get_sprite("snake").polygon)

        timers.advance(500)
        reset = game.get_sprite("snake")
        assert (reset.polygon[0].x, reset.polygon[0].y) == (5, 3)
        assert reset.color == snake.CRASH_COLOR

        timers.advance(500)
        assert reset.color == snake.SNAKE_COLOR

    def test_biting_itself(self, game):
        game.get_sprite("snake").polygon[:] = [
            snake.PolygonCell(x, y) for x, y in [(5, 3), (5, 4), (6, 4), (6, 3), (6, 2)]]
        snake.update(game)
        assert game.get_details("Lives") == 2

    def test_last_life_ends_game(self, game, timers):
        game.set_details("Lives", 1)
        for _ in range(5):
            snake.update(game)

        assert game.get_details("Lives") == 0
        assert game.flash_position is FlashPosition.RUNNING

        timers.advance(1350)
        assert game.get_sprite("snake") is None
        snake.update(game)

    def test_block_appears(self, game, monkeypatch):
        monkeypatch.setattr(snake.random, 'randrange', lambda n: 1)
        game.get_sprite("snake").velocity_x = 0
        for _ in range(15):
            snake.update(game)
        assert game.get_sprite("block1").rect == (1, 1, 1, 1)
