#!/usr/bin/env python3
"""
Command-line entry point for the Vodarr playlist catalog
Fetches the configured playlists once and prints the result as JSON
"""

import argparse
import asyncio
import json
import sys

from __version__ import __version__
from models.playlist import NotFound, RefreshCompleted
from services.catalog_service import build_catalog_service
from services.config_service import ConfigService
from services.scheduler import RefreshScheduler
from utils.logger import LoggingConfig, setup_application_logging, get_logger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Vodarr playlist catalog")
    parser.add_argument('--version', action='version', version=f"vodarr {__version__}")
    parser.add_argument('--source', action='append', default=[],
                        help="Extra playlist URL (may be repeated)")

    subparsers = parser.add_subparsers(dest='command')
    list_parser = subparsers.add_parser('list', help="Print catalog metas")
    list_parser.add_argument('--group', help="Only entries in this group")
    subparsers.add_parser('groups', help="Print group labels")
    resolve_parser = subparsers.add_parser('resolve', help="Print the stream for one id")
    resolve_parser.add_argument('entry_id')
    subparsers.add_parser('status', help="Refresh once and print cache status")
    subparsers.add_parser('watch', help="Keep refreshing in the background until interrupted")

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = 'list'
        args.group = None
    return args


async def watch(catalog, config: ConfigService) -> None:
    """Refresh on the configured interval until cancelled"""
    scheduler = RefreshScheduler(
        catalog, interval_seconds=config.get_int('BACKGROUND_REFRESH_INTERVAL_SECONDS', 600)
    )
    await scheduler.start()
    try:
        await asyncio.Event().wait()
    except asyncio.CancelledError:
        pass
    finally:
        await scheduler.stop()


async def run(args, config: ConfigService) -> int:
    logger = get_logger('vodarr.cli')
    catalog = build_catalog_service(config)
    for url in args.source:
        catalog.add_source(url)

    try:
        if args.command == 'list':
            items = await catalog.list_all(group=args.group)
            output = {'metas': [item.to_meta() for item in items]}
        elif args.command == 'groups':
            output = {'groups': await catalog.list_groups()}
        elif args.command == 'resolve':
            result = await catalog.resolve_stream(args.entry_id)
            if isinstance(result, NotFound):
                output = {'streams': []}
            elif isinstance(result, RefreshCompleted):
                output = {'refreshed': True, 'entry_count': result.entry_count}
            else:
                output = {'streams': [result.to_stream()]}
        elif args.command == 'watch':
            await watch(catalog, config)
            output = catalog.get_status()
        else:
            await catalog.force_refresh()
            output = catalog.get_status()
    finally:
        await catalog.close()

    print(json.dumps(output, indent=2))
    logger.debug(f"Command '{args.command}' finished")
    return 0


def main(argv=None):
    """Main startup function"""
    args = parse_args(argv)
    config = ConfigService()
    setup_application_logging(LoggingConfig(config))
    logger = get_logger('vodarr.startup')

    try:
        logger.info(f"Starting Vodarr {__version__}")
        return asyncio.run(run(args, config))
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        logger.error(f"Failed to run command: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
