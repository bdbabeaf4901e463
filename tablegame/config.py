"""Construction options for a GameEngine, and YAML game file loading."""

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from tablegame.input import INPUT_KINDS
from tablegame.logging import get_logger
from tablegame.models import GameFile
from tablegame.scheduler import DEFAULT_INITIAL_DELAY_MS, DEFAULT_INTERVAL_MS
from tablegame.sprite import DEFAULT_COLOR

log = get_logger('config')

GameCallback = Callable[[Any], None]


class TableGameError(Exception):
    """Base class for tablegame errors."""
    pass


class ConfigError(TableGameError):
    """Raised when a game file cannot be read or fails validation."""
    pass


@dataclass
class Palette:
    """Named colour tokens available to game content."""
    default_color: str = DEFAULT_COLOR
    white: str = "#ffffff"
    black: str = "#d1d1d1"
    gray: str = "#f1f1f1"
    red: str = "#fff1f1"
    green: str = "#f1fff1"
    blue: str = "#f1f1ff"
    yellow: str = "#fffff1"
    purple: str = "#fff1ff"
    blue_green: str = "#f1ffff"

    @classmethod
    def from_overrides(cls, overrides: Optional[Mapping[str, Any]] = None) -> 'Palette':
        """Build a palette; empty values keep the defaults.

        Without an explicit default_color, an overridden gray becomes the
        default sprite colour.
        """
        overrides = overrides or {}
        base = cls()
        values = {f.name: overrides.get(f.name) or getattr(base, f.name)
                  for f in dataclasses.fields(cls)}
        values['default_color'] = (overrides.get('default_color')
                                   or overrides.get('gray')
                                   or base.default_color)
        return cls(**values)


@dataclass
class GameConfig:
    """Everything a GameEngine is constructed from.

    Callbacks receive the engine as their first argument; input handlers
    also receive the InputEvent. ``handlers`` is keyed by input kind
    ('keydown', 'click', ...).
    """

    name: str = "Untitled"

    # Initial state, registered before init() runs
    globals: Dict[str, Any] = field(default_factory=dict)
    sprites: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    details: Dict[str, Any] = field(default_factory=dict)

    # Game callbacks
    init: Optional[GameCallback] = None
    update: Optional[GameCallback] = None
    onpause: Optional[GameCallback] = None
    onunpause: Optional[GameCallback] = None
    onpaint: Optional[GameCallback] = None
    handlers: Dict[str, Callable[[Any, Any], None]] = field(default_factory=dict)

    # Timing (milliseconds). Zero or None means "use the default".
    delay: Optional[int] = DEFAULT_INTERVAL_MS
    initial_delay: Optional[int] = DEFAULT_INITIAL_DELAY_MS
    hide_on_pause: bool = True

    palette: Palette = field(default_factory=Palette)

    def __post_init__(self):
        self.delay = self.delay or DEFAULT_INTERVAL_MS
        self.initial_delay = self.initial_delay or DEFAULT_INITIAL_DELAY_MS
        if self.delay < 0:
            raise ValueError(f"delay must be positive, got {self.delay}")
        unknown = set(self.handlers) - set(INPUT_KINDS)
        if unknown:
            raise ValueError(f"Unknown input handler kinds: {sorted(unknown)}")

    def with_overrides(self, **overrides: Any) -> 'GameConfig':
        """Copy of this config with some fields replaced."""
        return dataclasses.replace(self, **overrides)


def load_game_file(path: Union[str, Path]) -> GameConfig:
    """
    Load a YAML game file into a GameConfig.

    Args:
        path: Path to the YAML file

    Returns:
        GameConfig built from the file (and its ``extends`` demo, if any)

    Raises:
        ConfigError: If the file cannot be read, parsed, or validated
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read game file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Game file {path} must contain a mapping, got {type(data).__name__}")

    try:
        game_file = GameFile.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid game file {path}: {e}") from e

    config = config_from_game_file(game_file)
    log.info("Loaded game file %s (%s)", path, config.name)
    return config


def config_from_game_file(game_file: GameFile) -> GameConfig:
    """Overlay a validated game file on its base demo (or a blank config).

    globals, sprites and details are merged key by key over the base;
    scalar settings replace the base values when given.
    """
    if game_file.extends:
        # Imported here: demos import this module
        from tablegame.demos import get_demo
        try:
            base = get_demo(game_file.extends)
        except KeyError as e:
            raise ConfigError(f"Unknown demo to extend: {game_file.extends!r}") from e
    else:
        base = GameConfig()

    overrides: Dict[str, Any] = {
        'globals': {**base.globals, **game_file.globals},
        'sprites': {**base.sprites,
                    **{name: spec.to_options() for name, spec in game_file.sprites.items()}},
        'details': {**base.details, **game_file.details},
    }
    if game_file.name:
        overrides['name'] = game_file.name
    if game_file.delay is not None:
        overrides['delay'] = game_file.delay
    if game_file.initial_delay is not None:
        overrides['initial_delay'] = game_file.initial_delay
    if game_file.hide_on_pause is not None:
        overrides['hide_on_pause'] = game_file.hide_on_pause

    palette_overrides = game_file.palette.model_dump(exclude_none=True)
    if palette_overrides:
        # Only the base's own customisations carry over
        stock = Palette()
        customised = {k: v for k, v in dataclasses.asdict(base.palette).items()
                      if v != getattr(stock, k)}
        overrides['palette'] = Palette.from_overrides({**customised, **palette_overrides})

    return base.with_overrides(**overrides)
