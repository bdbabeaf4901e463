"""
GameEngine Tests

Construction order, the tick cycle, pause/hide, details, input bindings,
flash through the engine, and independence of engine instances.

Run with: pytest tests/test_engine.py -v
"""

import pytest

from tablegame.config import GameConfig, Palette
from tablegame.engine import GameEngine
from tablegame.flash import FlashPosition
from tablegame.input import InputBindings, InputEvent
from tablegame.render import MemoryGrid
from tablegame.timers import TimerQueue


class Recorder:
    """Game callbacks that record what they saw."""

    def __init__(self):
        self.events = []

    def init(self, game):
        self.events.append(("init", game.game_time))

    def update(self, game):
        self.events.append(("update", game.game_time))

    def onpaint(self, game):
        self.events.append(("paint", game.game_time))

    def onpause(self, game):
        self.events.append(("pause", game.game_time))

    def onunpause(self, game):
        self.events.append(("unpause", game.game_time))

    def names(self):
        return [name for name, _ in self.events]


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def game(make_engine, recorder):
    return make_engine(
        init=recorder.init,
        update=recorder.update,
        onpaint=recorder.onpaint,
        onpause=recorder.onpause,
        onunpause=recorder.onunpause,
        sprites={'ball': {'x': 2, 'y': 1, 'color': "#abc"}},
    )


# =============================================================================
# Construction
# =============================================================================

class TestConstruction:
    """Tests for engine construction from a config."""

    def test_registers_initial_state(self, make_engine, sink):
        game = make_engine(globals={'speed': 2}, sprites={'ball': {'x': 3}},
                           details={'Score': 0, 'Lives': 3})
        assert game.get_global('speed') == 2
        assert game.get_sprite('ball').x == 3
        assert game.get_details() == {'Score': 0, 'Lives': 3}
        assert sink.values == {'Score': 0, 'Lives': 3}

    def test_screen_size(self, make_engine):
        game = make_engine()
        assert (game.screen_width, game.screen_height) == (10, 6)

    def test_palette_attributes(self, make_engine):
        game = make_engine(palette=Palette.from_overrides({'gray': "#cccccc"}))
        assert game.red == "#fff1f1"
        assert game.blue_green == "#f1ffff"
        assert game.default_color == "#cccccc"
        assert game.register_sprite("ball").color == "#cccccc"

    def test_unknown_attribute(self, make_engine):
        with pytest.raises(AttributeError):
            make_engine().no_such_thing

    def test_timing_defaults(self, make_engine):
        game = make_engine(delay=0, initial_delay=None)
        assert game.get_delay() == 50
        assert game.config.initial_delay == 20

    def test_negative_delay_rejected(self, make_engine):
        with pytest.raises(ValueError):
            make_engine(delay=-5)

    def test_unknown_handler_kind_rejected(self, make_engine):
        with pytest.raises(ValueError):
            make_engine(handlers={'onkeydown': lambda game, event: None})


# =============================================================================
# Tick cycle
# =============================================================================

class TestTickCycle:
    """Tests for start, update and paint ordering."""

    def test_init_paints_before_first_tick(self, game, grid, recorder, timers):
        game.start()
        assert recorder.names() == ["init", "paint"]
        assert grid.cell_color(2, 1) == "#abc"

        timers.advance(69)
        assert "update" not in recorder.names()

        timers.advance(1)
        assert recorder.names() == ["init", "paint", "update", "paint"]
        assert game.game_time == 1

    def test_start_twice_is_ignored(self, game, recorder):
        game.start()
        game.start()
        assert recorder.names().count("init") == 1

    def test_update_moves_are_painted(self, make_engine, grid, timers):
        def update(game):
            game.get_sprite('ball').x += 1

        game = make_engine(update=update, sprites={'ball': {'x': 0, 'y': 0}}).start()
        timers.advance(70)
        assert set(grid.filled_cells()) == {(1, 0)}

    def test_shutdown_stops_ticks(self, game, recorder, timers):
        game.start()
        game.shutdown()
        timers.advance(1000)
        assert "update" not in recorder.names()
        assert len(timers) == 0

    def test_update_errors_propagate(self, make_engine, timers):
        def update(game):
            raise KeyError("missing sprite")

        make_engine(update=update).start()
        with pytest.raises(KeyError):
            timers.advance(70)


# =============================================================================
# Pause / resume
# =============================================================================

class TestPauseResume:
    """Tests for engine-level pause and resume."""

    def test_pause_hides_screen_and_details(self, game, grid, sink, recorder):
        game.start()
        game.pause()
        assert grid.is_blank()
        assert sink.visible is False
        assert game.is_paused()
        assert recorder.names()[-1] == "pause"

    def test_paint_while_paused_stays_blank(self, game, grid):
        game.start()
        game.pause()
        game.paint()
        assert grid.is_blank()

    def test_resume_restores(self, game, grid, sink, recorder, timers):
        game.start()
        game.pause()
        timers.advance(500)
        assert "update" not in recorder.names()

        game.resume()
        assert sink.visible is True
        assert recorder.names()[-1] == "unpause"

        timers.advance(100)
        assert recorder.names().count("update") == 2
        assert grid.cell_color(2, 1) == "#abc"

    def test_unpause_alias(self, game):
        game.start()
        game.pause()
        game.unpause()
        assert not game.is_paused()

    def test_hide_on_pause_false(self, make_engine, grid, sink):
        game = make_engine(hide_on_pause=False, sprites={'ball': {}}).start()
        game.pause()
        game.paint()
        assert grid.cell_color(0, 0) is not None
        assert sink.visible is True


# =============================================================================
# Timing
# =============================================================================

class TestTiming:
    """Tests for delay_for, set_delay and flash through the engine."""

    def test_delay_for_passes_engine(self, game, timers, recorder):
        game.start()
        timers.advance(20)
        seen = []
        game.delay_for(500, lambda g: seen.append(g))

        timers.advance(499)
        assert "update" not in recorder.names()
        assert game.is_delayed()

        timers.advance(1)
        assert seen == [game]
        assert not game.is_delayed()

    def test_set_delay(self, game, timers, recorder):
        game.start()
        timers.advance(20)
        game.set_delay(200)
        assert game.get_delay() == 200
        timers.advance(400)
        assert recorder.names().count("update") == 2

    def test_flash_ending(self, game, grid, timers):
        game.start()
        timers.advance(20)
        done = []
        game.flash_ending(3, 100, lambda g: done.append(timers.now_ms))
        assert game.flash_position is FlashPosition.RUNNING

        timers.advance(50)
        assert game.is_paused()
        assert grid.is_blank()

        timers.advance(100)
        assert not game.is_paused()
        assert grid.cell_color(2, 1) == "#abc"

        timers.advance(350)
        assert done == [520]
        assert game.flash_position is FlashPosition.FINISHED
        assert not game.is_paused()

        game.reset_flash()
        assert game.flash_position is FlashPosition.NOT_STARTED


# =============================================================================
# Sprites, collisions and drawing through the engine
# =============================================================================

class TestEngineFacade:
    """Tests for the registry/geometry/drawing methods on the engine."""

    def test_get_sprites_by_pattern(self, make_engine):
        game = make_engine(sprites={'block_0': {}, 'block_1': {}, 'ball': {}})
        assert list(game.get_sprites()) == ['block_0', 'block_1', 'ball']
        assert list(game.get_sprites('^block')) == ['block_0', 'block_1']

    def test_globals(self, make_engine):
        game = make_engine()
        game.register_global('timeCount', 0)
        game.set_global('timeCount', 5)
        assert game.get_globals() == {'timeCount': 5}
        game.unregister_global('timeCount')
        assert game.get_global('timeCount') is None

    def test_move_to_top_changes_draw_order(self, make_engine, grid):
        game = make_engine(sprites={'a': {'color': "#111"}, 'b': {'color': "#222"}})
        game.paint()
        assert grid.cell_color(0, 0) == "#222"
        game.move_to_top('a')
        game.paint()
        assert grid.cell_color(0, 0) == "#111"

    def test_collisions(self, make_engine):
        game = make_engine(sprites={
            'ball': {'x': 3, 'y': 2, 'velocity_x': 1},
            'paddle': {'x': 4, 'y': 1, 'height': 3},
        })
        ball, paddle = game.get_sprite('ball'), game.get_sprite('paddle')
        assert game.colliding_from_left(ball, paddle)
        assert not game.colliding(ball, paddle)
        assert game.touching(ball, paddle)
        assert not game.colliding(ball, None)

    def test_fill_rect_uses_default_color(self, make_engine, grid):
        game = make_engine()
        game.fill_rect(0, 0, 2, 1)
        assert grid.filled_cells() == {(0, 0): "#eee", (1, 0): "#eee"}
        game.clear()
        assert grid.is_blank()

    def test_set_details(self, make_engine, sink):
        game = make_engine(details={'Score': 0})
        game.set_details('Score', game.get_details('Score') + 100)
        game.set_details({'Lives': 2})
        assert game.get_details('Score') == 100
        assert sink.values == {'Score': 100, 'Lives': 2}
        assert game.get_details('missing') is None


# =============================================================================
# Input
# =============================================================================

class TestInput:
    """Tests for input dispatch and bindings."""

    def test_dispatch_passes_engine_and_event(self, make_engine):
        seen = []
        game = make_engine(handlers={'keydown': lambda g, e: seen.append((g, e.key))})
        assert game.dispatch_input(InputEvent('keydown', key='up'))
        assert seen == [(game, 'up')]

    def test_unbound_kind(self, make_engine):
        game = make_engine()
        assert game.dispatch_input(InputEvent('click', x=1, y=1)) is False

    def test_handler_errors_propagate(self, make_engine):
        def boom(game, event):
            raise RuntimeError("handler failed")

        game = make_engine(handlers={'click': boom})
        with pytest.raises(RuntimeError):
            game.dispatch_input(InputEvent('click'))

    def test_rebinding_subscribes_once(self, grid):
        """A second game swaps handlers without re-subscribing listeners."""
        subscribed = []
        bindings = InputBindings(subscribe=subscribed.append)
        first, second = [], []

        GameEngine(GameConfig(handlers={'keydown': lambda g, e: first.append(e.key)}),
                   grid, bindings=bindings)
        game = GameEngine(GameConfig(handlers={'keydown': lambda g, e: second.append(e.key)}),
                          grid, bindings=bindings)

        game.dispatch_input(InputEvent('keydown', key='space'))
        assert subscribed == ['keydown']
        assert first == []
        assert second == ['space']

    def test_rebinding_without_handler_is_noop(self, grid):
        bindings = InputBindings()
        calls = []
        GameEngine(GameConfig(handlers={'click': lambda g, e: calls.append(1)}),
                   grid, bindings=bindings)
        game = GameEngine(GameConfig(), grid, bindings=bindings)

        assert game.dispatch_input(InputEvent('click'))
        assert calls == []
        assert bindings.is_subscribed('click')

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            InputEvent('doubleclick')


# =============================================================================
# Independence
# =============================================================================

class TestIndependentEngines:
    """Two engines never share registries or timers."""

    def test_separate_state(self):
        a = GameEngine(GameConfig(sprites={'ball': {}}), MemoryGrid(5, 5), timers=TimerQueue())
        b = GameEngine(GameConfig(), MemoryGrid(5, 5), timers=TimerQueue())
        assert b.get_sprite('ball') is None
        a.register_global('x', 1)
        assert b.get_global('x') is None

    def test_separate_timers(self):
        ticks = {'a': 0, 'b': 0}

        def counter(name):
            def update(game):
                ticks[name] += 1
            return update

        a = GameEngine(GameConfig(update=counter('a')), MemoryGrid(5, 5)).start()
        b = GameEngine(GameConfig(update=counter('b')), MemoryGrid(5, 5)).start()
        a.pause()
        a.advance(500)
        b.advance(500)
        assert ticks == {'a': 0, 'b': 9}

    def test_shutdown_leaves_shared_queue_alone(self, make_engine, timers):
        """Shutting one engine down keeps the other ticking on the same queue."""
        a_updates, b_updates = [], []
        a = make_engine(update=lambda game: a_updates.append(game.game_time)).start()
        b = make_engine(update=lambda game: b_updates.append(game.game_time)).start()
        timers.advance(120)
        assert len(a_updates) == len(b_updates) == 2

        a.shutdown()
        timers.advance(500)
        assert len(a_updates) == 2
        assert len(b_updates) == 12
        assert b.scheduler.running

    def test_shutdown_cancels_only_own_one_shots(self, make_engine, timers):
        """Pending delay and flash timers of the other engine still fire."""
        done = []
        a = make_engine().start()
        b = make_engine().start()
        a.delay_for(100, lambda game: done.append("a delay"))
        a.flash_ending(2, 50, lambda game: done.append("a flash"))
        b.delay_for(100, lambda game: done.append("b delay"))
        b.flash_ending(2, 50, lambda game: done.append("b flash"))

        a.shutdown()
        assert len(a.own_timers) == 0
        assert len(b.own_timers) > 0

        timers.advance(1000)
        assert done == ["b delay", "b flash"]
