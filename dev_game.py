#!/usr/bin/env python3
"""
Development Game Launcher

Runs a bundled demo, or a YAML game file, in a pygame window.

Usage:
    # List available demos
    python dev_game.py --list

    # Play a demo
    python dev_game.py ping_pong
    python dev_game.py snake --delay 120

    # Play a game file (extends a demo with new data)
    python dev_game.py --config games/fast_pong.yaml

    # Bigger board, debug logging
    python dev_game.py snake --grid 24x16 --cell-size 30 --log-level debug
"""

import argparse
import sys

from tablegame.config import ConfigError, load_game_file
from tablegame.demos import DEMO_GAMES, get_demo, list_demos
from tablegame.host import DEFAULT_CELL_SIZE, DEFAULT_GRID_SIZE, GameHost
from tablegame.logging import configure_logging


def _parse_grid(value: str):
    try:
        width, height = value.lower().split('x')
        return int(width), int(height)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid grid size {value!r}, expected WIDTHxHEIGHT (e.g. 16x10)")


def main():
    """Main entry point for the development launcher."""
    available_games = list_demos()

    parser = argparse.ArgumentParser(
        description='Development Game Launcher - play grid games in a window',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Available demos: {', '.join(available_games)}

Controls:
  Tab   next demo
  R     restart
  ESC   quit
        """
    )

    parser.add_argument('game', nargs='?', choices=available_games, help='Demo to play')
    parser.add_argument('--list', '-l', action='store_true',
                        help='List all available demos and exit')
    parser.add_argument('--config', '-c', type=str, default=None,
                        help='YAML game file to play instead of a demo')
    parser.add_argument('--grid', '-g', type=_parse_grid,
                        default=DEFAULT_GRID_SIZE,
                        help='Grid size as WIDTHxHEIGHT (default: %dx%d)' % DEFAULT_GRID_SIZE)
    parser.add_argument('--cell-size', type=int, default=DEFAULT_CELL_SIZE,
                        help=f'Cell size in pixels (default: {DEFAULT_CELL_SIZE})')
    parser.add_argument('--delay', type=int, default=None,
                        help="Tick interval in milliseconds (default: the game's own)")
    parser.add_argument('--log-level', type=str, default=None,
                        help='Log level: trace, debug, info, warning, error')

    args = parser.parse_args()

    if args.log_level:
        configure_logging(level=args.log_level)

    if args.list:
        print("\nAvailable Demos")
        print("=" * 50)
        for slug in available_games:
            module = DEMO_GAMES[slug]
            print(f"\n  {slug}")
            print(f"    Name: {module.NAME}")
            print(f"    Description: {module.DESCRIPTION}")
        print()
        return 0

    try:
        if args.config:
            config = load_game_file(args.config)
            if args.delay:
                config = config.with_overrides(delay=args.delay)
        else:
            config = get_demo(args.game or available_games[0], delay=args.delay)
    except ConfigError as e:
        print(f"ERROR: {e}")
        return 1

    grid_width, grid_height = args.grid
    host = GameHost(grid_width, grid_height, args.cell_size)
    host.open()

    print("=" * 60)
    print(f"Development Mode: {config.name}")
    print("=" * 60)
    print(f"Grid: {grid_width}x{grid_height} ({args.cell_size}px cells)")
    print(f"Tick: {config.delay}ms")
    print()

    if args.game:
        host.load_demo(args.game, delay=args.delay)
    else:
        host.load(config)
    return host.run()


if __name__ == "__main__":
    sys.exit(main())
