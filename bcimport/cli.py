#!/usr/bin/env python3
"""Command-line interface for Bandcamp catalog imports.

Commands:
  serve   Run the web form and JSON import endpoint
  import  Import a storefront catalog and print it as JSON
  parse   Parse a saved release page and print the record as JSON
"""

import argparse
import asyncio
import getpass
import json
import logging
import os
import sys
from pathlib import Path

from bcimport import __version__
from bcimport.core import import_catalog
from bcimport.dataclasses import ImportConfig
from bcimport.exceptions import BandcampImportError
from bcimport.log_utils import setup_logging
from bcimport.parser import parse_release
from bcimport.server import run_server


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Import release metadata from a Bandcamp storefront',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s serve --port 3000
  %(prog)s import yourlabel.bandcamp.com --email me@example.com
  %(prog)s parse saved_album_page.html

Environment Variables:
  BANDCAMP_PASSWORD                  Account password for the import command
  BCIMPORT_REQUEST_TIMEOUT           Request timeout in seconds (default: none)
  BCIMPORT_ISOLATE_RELEASE_FAILURES  Keep importing when a release page fails
  BCIMPORT_HOST / BCIMPORT_PORT      Web server address
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    serve_parser = subparsers.add_parser('serve', help='Run the import web server')
    serve_parser.add_argument('--host', help='Interface to bind (default: localhost)')
    serve_parser.add_argument('--port', type=int, help='Port to listen on (default: 3000)')

    import_parser = subparsers.add_parser('import', help='Import a storefront catalog')
    import_parser.add_argument('subdomain', help='Storefront host, e.g. yourlabel.bandcamp.com')
    import_parser.add_argument('-e', '--email', required=True, help='Account email or username')
    import_parser.add_argument(
        '--isolate-failures',
        action='store_true',
        help='Record failed release pages and continue instead of aborting'
    )
    import_parser.add_argument('--timeout', type=float, help='Request timeout in seconds')

    parse_parser = subparsers.add_parser('parse', help='Parse a saved release page')
    parse_parser.add_argument('file', help='HTML file of a release page')

    return parser.parse_args(argv)


def create_config_from_args(args) -> ImportConfig:
    """Create ImportConfig from environment variables, overridden by arguments."""
    config = ImportConfig.from_env()

    if getattr(args, 'host', None):
        config.server_host = args.host
    if getattr(args, 'port', None):
        config.server_port = args.port
    if getattr(args, 'isolate_failures', False):
        config.isolate_release_failures = True
    if getattr(args, 'timeout', None):
        config.request_timeout = args.timeout

    return config


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def run_import(args, config: ImportConfig) -> int:
    password = os.environ.get('BANDCAMP_PASSWORD') or getpass.getpass('Bandcamp password: ')
    if not password:
        print("Error: a password is required", file=sys.stderr)
        return 1

    try:
        releases = asyncio.run(import_catalog(args.email, password, args.subdomain, config))
    except BandcampImportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not releases:
        print("No releases found", file=sys.stderr)
    _print_json([release.to_dict() for release in releases])
    return 0


def run_parse(args, config: ImportConfig) -> int:
    path = Path(args.file)
    if not path.is_file():
        print(f"Error: file does not exist: {args.file}", file=sys.stderr)
        return 1

    html = path.read_text(encoding='utf-8', errors='replace')
    _print_json(parse_release(html, config, url=str(path)).to_dict())
    return 0


def main(argv=None):
    """Main CLI entry point."""
    args = parse_args(argv)
    setup_logging(args.debug)
    logger = logging.getLogger(__name__)

    config = create_config_from_args(args)

    try:
        if args.command == 'serve':
            run_server(config)
            return 0
        if args.command == 'import':
            return run_import(args, config)
        return run_parse(args, config)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130

    except Exception as e:
        logger.error(f"Fatal error: {e}")
        if args.debug:
            raise
        return 1


if __name__ == '__main__':
    sys.exit(main())
