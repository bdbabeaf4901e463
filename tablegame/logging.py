"""
tablegame logging

Small per-module console logger used by every part of the engine.

Usage:
    from tablegame.logging import get_logger

    log = get_logger('scheduler')
    log.debug("Tick interval now %dms", 80)
    log.info("Game started")
    log.timer("armed", handle, 50)   # Timer tracing (off by default)

Configuration:
    Environment variables:
        TABLEGAME_LOG_LEVEL=DEBUG        # Global default level
        TABLEGAME_LOG_SCHEDULER=DEBUG    # Module-specific level
        TABLEGAME_LOG_TIMERS=1           # Enable timer tracing

    Or programmatically:
        from tablegame.logging import configure_logging
        configure_logging(level='DEBUG', modules={'engine': 'INFO'})
"""

import os
from enum import IntEnum
from functools import lru_cache
from typing import Any, Dict, Optional


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50
    OFF = 100      # Disable logging


_ENV_PREFIX = 'TABLEGAME_LOG_'

_config: Dict[str, Any] = {
    'default_level': LogLevel.INFO,
    'module_levels': {},
    'timers': False,         # Trace timer arm/fire/cancel
}


def _format_message(module: str, level: str, msg: str) -> str:
    """Format a log message."""
    return f"[{module}] {level}: {msg}"


def _level_from_string(level_str: str) -> LogLevel:
    """Convert string to LogLevel."""
    mapping = {
        'DEBUG': LogLevel.DEBUG,
        'INFO': LogLevel.INFO,
        'WARNING': LogLevel.WARNING,
        'WARN': LogLevel.WARNING,
        'ERROR': LogLevel.ERROR,
        'CRITICAL': LogLevel.CRITICAL,
        'OFF': LogLevel.OFF,
    }
    return mapping.get(level_str.upper(), LogLevel.INFO)


def configure_logging(
    level: str = 'INFO',
    modules: Optional[Dict[str, str]] = None,
    timers: bool = False,
) -> None:
    """
    Configure the logging system.

    Args:
        level: Default log level for all modules
        modules: Dict of module_name -> level for per-module configuration
        timers: Enable tracing of timer queue activity
    """
    _config['default_level'] = _level_from_string(level)

    if modules:
        for mod, mod_level in modules.items():
            _config['module_levels'][mod.lower()] = _level_from_string(mod_level)

    _config['timers'] = timers


def _load_env_config() -> None:
    """Load configuration from environment variables.

    TABLEGAME_LOG_LEVEL sets the default, TABLEGAME_LOG_<MODULE> sets a
    single module (TABLEGAME_LOG_SCHEDULER=DEBUG -> scheduler: DEBUG).
    """
    if _ENV_PREFIX + 'LEVEL' in os.environ:
        _config['default_level'] = _level_from_string(os.environ[_ENV_PREFIX + 'LEVEL'])

    reserved = (_ENV_PREFIX + 'LEVEL', _ENV_PREFIX + 'TIMERS')
    for key, value in os.environ.items():
        if key.startswith(_ENV_PREFIX) and key not in reserved:
            module_name = key[len(_ENV_PREFIX):].lower()
            _config['module_levels'][module_name] = _level_from_string(value)

    _config['timers'] = os.environ.get(_ENV_PREFIX + 'TIMERS', '').lower() in ('1', 'true', 'yes')


# Load env config on import
_load_env_config()


class TableGameLogger:
    """Logger for a specific module."""

    def __init__(self, module: str):
        self.module = module
        self._module_key = module.lower().replace('.', '_').replace('/', '_')

    @property
    def level(self) -> LogLevel:
        """Get effective log level for this module."""
        if self._module_key in _config['module_levels']:
            return _config['module_levels'][self._module_key]
        return _config['default_level']

    def _should_log(self, level: LogLevel) -> bool:
        return level >= self.level

    def _log(self, level: LogLevel, level_name: str, msg: str, *args) -> None:
        if not self._should_log(level):
            return

        if args:
            try:
                msg = msg % args
            except (TypeError, ValueError):
                msg = f"{msg} {args}"

        print(_format_message(self.module, level_name, msg))

    def debug(self, msg: str, *args) -> None:
        self._log(LogLevel.DEBUG, 'DEBUG', msg, *args)

    def info(self, msg: str, *args) -> None:
        self._log(LogLevel.INFO, 'INFO', msg, *args)

    def warning(self, msg: str, *args) -> None:
        self._log(LogLevel.WARNING, 'WARN', msg, *args)

    def timer(self, action: str, handle: int, delay_ms: float) -> None:
        """
        Log timer queue activity (arm, fire, cancel).

        Only logs if timer tracing is enabled.
        """
        if not _config['timers']:
            return

        self._log(LogLevel.DEBUG, 'TIMER', f"{action} #{handle} ({delay_ms:g}ms)")


@lru_cache(maxsize=64)
def get_logger(module: str) -> TableGameLogger:
    """
    Get a logger for the specified module.

    Loggers are cached, so calling get_logger('foo') multiple times
    returns the same logger instance.
    """
    return TableGameLogger(module)


def disable_logging() -> None:
    """Disable all logging."""
    _config['default_level'] = LogLevel.OFF
    _config['timers'] = False
