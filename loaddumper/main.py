#!/usr/bin/env python3
"""
Load Script Dumper - CLI Entry Point
====================================
Dumps tables as replayable ``load --table`` scripts with support for:
- Identity-ordered and key-ordered tables
- Explicit column selection
- Vector, reference and time columns
- Table exclusion patterns
- Compression support
"""

import argparse
import logging
import sys

import yaml

from .config import ConfigLoader
from .database_dumper import DatabaseDumper
from .errors import DumpError
from .utils import print_dry_run_info, setup_logging


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Load Script Dumper - Dump tables as replayable load scripts'
    )
    parser.add_argument(
        '-c', '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what would be dumped without actually dumping'
    )
    parser.add_argument(
        '-t', '--table',
        help='Dump only the specified table (must be defined in config)'
    )
    parser.add_argument(
        '-i', '--instance',
        help='Dump only tables from the specified instance'
    )
    parser.add_argument(
        '--columns',
        help='Comma separated columns to dump, in output order'
    )

    args = parser.parse_args()

    # Load configuration
    try:
        config = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}")
        sys.exit(1)

    # Setup logging
    log_settings = config.get_logging_settings()
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    setup_logging(log_settings)

    columns = [name.strip() for name in args.columns.split(',') if name.strip()] if args.columns else None

    # Dry run mode
    if args.dry_run:
        logging.info("DRY RUN MODE - No data will be dumped")
        dumps = config.get_dumps()

        if args.table:
            dumps = [d for d in dumps if d['table'] == args.table]
        if args.instance:
            dumps = [d for d in dumps if d.get('instance', ConfigLoader.DEFAULT_INSTANCE) == args.instance]
        if columns:
            dumps = [dict(d, columns=columns) for d in dumps]

        try:
            print_dry_run_info(dumps, config.get_schema())
        except (ValueError, DumpError) as e:
            logging.error(f"Invalid schema: {e}")
            sys.exit(1)
        sys.exit(0)

    # Run dump
    try:
        dumper = DatabaseDumper(config)
        stats = dumper.run(
            table_filter=args.table,
            instance_filter=args.instance,
            columns=columns
        )

        # Print summary
        logging.info("=" * 50)
        logging.info("DUMP COMPLETE")
        logging.info(f"Tables: {stats.total_tables}")
        logging.info(f"Total Rows: {stats.total_rows}")

        if stats.errors:
            logging.warning(f"Errors: {len(stats.errors)}")
            for err in stats.errors:
                logging.warning(f"  - {err['instance'] or '-'}/{err['table'] or '-'}: {err['error']}")
            sys.exit(1)

    except Exception as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
