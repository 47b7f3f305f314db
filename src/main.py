"""Command line entry point: level lookup and tile cache maintenance."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from domain.profiles import load_profile
from pyramid.resolution import LevelResolver
from shared.constants import (
    DEFAULT_PROFILE,
    LOG_FILE_NAME,
    LOG_FORMAT,
    ZOOM_RESOLUTION_BIAS_LABELS,
    ZoomResolutionBias,
)
from shared.errors import StorageUnavailableError
from tiles.factory import create_cache

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2
EXIT_STORAGE_ERROR = 3


def setup_logging(level: int = logging.INFO, log_file: str | Path | None = None) -> None:
    """Configure application logging to stdout and, optionally, a file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_path), encoding='utf-8'))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tile-pyramid',
        description='Pyramid level lookup and tile cache maintenance',
    )
    parser.add_argument('--profile', default=DEFAULT_PROFILE, help='Profile name or path to a TOML file')
    log_target = parser.add_mutually_exclusive_group()
    log_target.add_argument('--log-file', default=None, help='Also write the log to this file')
    log_target.add_argument('--log-dir', default=None, help=f'Also write the log to {LOG_FILE_NAME} in this directory')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    sub = parser.add_subparsers(dest='command', required=True)

    resolve = sub.add_parser('resolve', help='Print the level best matching a scale')
    resolve.add_argument('--units-per-pixel', type=float, required=True)
    resolve.add_argument(
        '--bias',
        choices=[b.value for b in ZoomResolutionBias],
        default=None,
        help='Override the profile bias: '
        + ', '.join(f'{bias.value} ({label})' for bias, label in ZOOM_RESOLUTION_BIAS_LABELS.items()),
    )

    sub.add_parser('stats', help='Print tile cache statistics')

    cleanup = sub.add_parser('cleanup', help='Remove the oldest tiles above an entry limit')
    cleanup.add_argument('--max-entries', type=int, default=None)

    sub.add_parser('clear', help='Delete every cached tile')
    return parser


def _run(args: argparse.Namespace) -> int:
    settings = load_profile(args.profile)

    if args.command == 'resolve':
        resolver = LevelResolver.from_settings(settings.pyramid)
        if args.bias is not None:
            resolver = resolver.with_bias(args.bias)
        print(resolver.nearest_level(args.units_per_pixel))
        return EXIT_OK

    with create_cache(settings.cache) as cache:
        if args.command == 'stats':
            stats = cache.get_stats()
            print(f'tiles: {stats.total_tiles}')
            print(f'bytes: {stats.total_size_bytes}')
            for level in sorted(stats.tiles_by_level):
                print(f'  level {level}: {stats.tiles_by_level[level]} tiles, {stats.size_by_level[level]} bytes')
        elif args.command == 'cleanup':
            removed = cache.cleanup_lru(args.max_entries)
            print(f'removed: {removed}')
        elif args.command == 'clear':
            removed = cache.clear()
            print(f'removed: {removed}')
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    log_file = Path(args.log_dir) / LOG_FILE_NAME if args.log_dir else args.log_file
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, log_file)

    try:
        return _run(args)
    except (ValueError, FileNotFoundError) as exc:
        # ConfigurationError is a ValueError
        logger.error('Configuration error: %s', exc)
        return EXIT_CONFIG_ERROR
    except StorageUnavailableError as exc:
        logger.error('Tile storage unavailable: %s', exc)
        return EXIT_STORAGE_ERROR


if __name__ == '__main__':
    sys.exit(main())
