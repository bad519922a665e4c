"""
Trip Zone CLI - Main entry point.

Ingests one trip-record file and prints the busiest pickup zones and the
busiest (zone, hour) slots.
"""

import argparse
import sys
from dataclasses import replace
from typing import List, Optional

from trip_zone import AnalyzerConfig, RecordLayout, SelectionStrategy, TripAnalyzer
from trip_zone.config import LAYOUT_PRESETS, LOG_LEVELS
from trip_zone.logging import LogEvent, create_logger

from .report import format_json, format_text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trip-zone",
        description="Trip Zone - busiest pickup zones and hourly slots from a trip CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Headered 6-column file (header line discarded)
  trip-zone data/trips.csv

  # Header-less file, date-time in field 2 or 3
  trip-zone data/trips_raw.csv --layout headerless

  # Settings from YAML, top 5 of each, JSON output
  trip-zone data/trips.csv --config config/analyzer.yaml --top-zones 5 --top-slots 5 --format json
"""
    )

    parser.add_argument('source', help='Path to the trip-record file')
    parser.add_argument('--config', help='Path to analyzer config YAML')
    parser.add_argument(
        '--layout',
        choices=sorted(LAYOUT_PRESETS),
        help='Record layout (default: headered, or the config file value)'
    )
    parser.add_argument(
        '--zone-index',
        type=int,
        help='Override the 0-based index of the pickup zone field'
    )
    parser.add_argument('--top-zones', type=int, help='Number of zones to report (default: 10)')
    parser.add_argument('--top-slots', type=int, help='Number of slots to report (default: 10)')
    parser.add_argument(
        '--selection',
        choices=[strategy.value for strategy in SelectionStrategy],
        help='Top-k selection strategy (default: partition)'
    )
    parser.add_argument(
        '--format',
        choices=['text', 'json'],
        default='text',
        help='Output format (default: text)'
    )
    parser.add_argument(
        '--log-level',
        type=str.upper,
        choices=sorted(LOG_LEVELS),
        help='Log level for the JSON logs on stderr (default: INFO)'
    )
    return parser


def resolve_config(args: argparse.Namespace) -> AnalyzerConfig:
    """
    Merge the optional YAML config with CLI flags (flags win).

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If YAML or resulting values are invalid
    """
    config = AnalyzerConfig.from_yaml(args.config) if args.config else AnalyzerConfig()

    layout = config.layout
    if args.layout:
        layout = RecordLayout.preset(args.layout, zone_index=args.zone_index)
    elif args.zone_index is not None:
        layout = replace(
            layout,
            zone_index=args.zone_index,
            min_fields=max(layout.min_fields, args.zone_index + 1),
        )

    overrides = {
        'top_zones': args.top_zones,
        'top_slots': args.top_slots,
        'selection': args.selection,
        'log_level': args.log_level,
    }
    return replace(
        config,
        layout=layout,
        **{key: value for key, value in overrides.items() if value is not None}
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
    except (FileNotFoundError, ValueError) as e:
        create_logger("cli").error(
            event=LogEvent.CONFIG_ERROR,
            message="Invalid configuration",
            metadata={'config': args.config},
            exc_info=e
        )
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)

    logger = create_logger("cli", level=config.logging_level)
    if args.config:
        logger.info(
            event=LogEvent.CONFIG_LOADED,
            message=f"Loaded {args.config}",
            metadata={'layout': config.layout.name, 'selection': config.selection.value}
        )

    analyzer = TripAnalyzer.from_config(
        config,
        logger=create_logger("pipeline", level=config.logging_level)
    )
    report = analyzer.ingest(args.source)
    if not report.source_available:
        print(f"❌ Error: cannot read source: {args.source}", file=sys.stderr)
        sys.exit(1)

    zones = analyzer.top_zones(config.top_zones)
    slots = analyzer.top_busy_slots(config.top_slots)

    if args.format == 'json':
        sys.stdout.write(format_json(zones, slots, report))
    else:
        sys.stdout.write(format_text(zones, slots))


if __name__ == '__main__':
    main()
