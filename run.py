#!/usr/bin/env python3
"""
Startup script for the Poolfinder service
"""
import argparse
import asyncio
import sys

import uvicorn

from poolfinder.config import settings
from poolfinder.services.seed import sample_facilities
from poolfinder.stores.factory import StoreFactory


def parse_args():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="Poolfinder swimming facility service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py                     # Run in production mode
  python run.py --dev               # Run in development mode
  python run.py --port 8001         # Run on different port
  python run.py --check             # Check configuration and storage
        """
    )

    parser.add_argument(
        '--dev', '--development',
        action='store_true',
        help='Run in development mode with auto-reload'
    )

    parser.add_argument(
        '--host',
        default=settings.host,
        help=f'Host to bind to (default: {settings.host})'
    )

    parser.add_argument(
        '--port', '-p',
        type=int,
        default=settings.port,
        help=f'Port to listen on (default: {settings.port})'
    )

    parser.add_argument(
        '--workers', '-w',
        type=int,
        default=1,
        help='Number of worker processes'
    )

    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warning', 'error'],
        default='debug' if settings.debug else 'info',
        help='Log level'
    )

    parser.add_argument(
        '--check', '-c',
        action='store_true',
        help='Check configuration and storage backends'
    )

    return parser.parse_args()


def check_configuration():
    """Check configuration settings"""
    print("Configuration check:")
    print(f"  App name: {settings.app_name}")
    print(f"  Version: {settings.app_version}")
    print(f"  Primary store: {'configured' if settings.primary_configured else 'not configured'}")
    print(f"  Fallback store: {settings.local_store_path if settings.fallback_enabled else 'disabled'}")
    print(f"  History limit: {settings.history_limit}")
    print(f"  Proximity radius: {settings.proximity_radius_km} km")
    print(f"  Sample facilities: {len(sample_facilities())}")

    is_valid, problems = StoreFactory.validate_environment(settings)
    for problem in problems:
        print(f"  ! {problem}")
    return is_valid


async def check_primary():
    """Try to connect to the primary store"""
    store = await StoreFactory.create_primary(settings)
    if store is None:
        print("! Primary store unavailable, the local store will serve all requests")
        return False
    await store.close()
    print("✓ Primary store reachable")
    return True


def main():
    args = parse_args()

    if args.check:
        is_valid = check_configuration()
        if settings.primary_configured:
            asyncio.run(check_primary())
        sys.exit(0 if is_valid else 1)

    uvicorn.run(
        "poolfinder.main:app",
        host=args.host,
        port=args.port,
        reload=args.dev,
        workers=1 if args.dev else args.workers,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
