"""
Command Line Interface

Entry point for running a search from the command line.

Usage:
    python -m gmaps_finder "Plano, TX" "pizza"
    python -m gmaps_finder "London" "cafes" --country GB -r 5 --unit kilometers
    python -m gmaps_finder "75024" repair --category --no-details
"""

import argparse
import asyncio
import logging
import sys

from .config import DEFAULT_SEARCH_MAX_RESULTS
from .config_manager import FinderConfig
from .exceptions import FinderError
from .export import default_output_paths, write_csv, write_json
from .extractor import BusinessFinder
from .validation import RADIUS_UNITS, radius_in_miles, validate_max_results, validate_text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Google Maps Business Finder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m gmaps_finder "Plano, TX" "pizza"
  python -m gmaps_finder "Plano, TX" "pizza" -r 20 -n 500
  python -m gmaps_finder "London" "cafes" --country GB -r 8 --unit kilometers
  python -m gmaps_finder "75024" repair --category
  python -m gmaps_finder "Austin, TX" "coffee" -o coffee.json --no-csv
        """
    )

    # Required arguments
    parser.add_argument(
        "location",
        help="Location to search (e.g., 'Plano, TX', '75024', '10 Downing St, London')"
    )
    parser.add_argument(
        "keyword",
        help="Business keyword (e.g., 'pizza'), or business type with --category"
    )

    # Optional arguments
    parser.add_argument(
        "-r", "--radius",
        type=float,
        default=10,
        help="Search radius (default: 10)"
    )
    parser.add_argument(
        "--unit",
        choices=RADIUS_UNITS,
        default="miles",
        help="Radius unit (default: miles)"
    )
    parser.add_argument(
        "-n", "--max-results",
        type=int,
        default=DEFAULT_SEARCH_MAX_RESULTS,
        help=f"Maximum number of results (default: {DEFAULT_SEARCH_MAX_RESULTS})"
    )
    parser.add_argument(
        "--country",
        default=None,
        help="Restrict geocoding to a country code (e.g., US, GB, CA)"
    )
    parser.add_argument(
        "--category",
        action="store_true",
        help="Treat keyword as a business type (repair, collision, both)"
    )
    parser.add_argument(
        "--no-details",
        action="store_true",
        help="Skip the Place Details lookups"
    )
    parser.add_argument(
        "-o", "--output",
        help="Output JSON file path (default: output/{keyword}_near_{location}.json)"
    )
    parser.add_argument(
        "--csv",
        help="Output CSV file path (default: output/{keyword}_near_{location}.csv)"
    )
    parser.add_argument(
        "--no-csv",
        action="store_true",
        help="Disable CSV output"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress output"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def print_progress(percent: float, status: str):
    print(f"  [{percent:5.1f}%] {status}")


async def run_search(args, config: FinderConfig, radius_miles: float):
    on_progress = None if args.quiet else print_progress
    async with BusinessFinder(config) as finder:
        return await finder.find(
            args.location,
            radius_miles,
            args.keyword,
            max_results=args.max_results,
            country=args.country,
            details=not args.no_details,
            category=args.category,
            on_progress=on_progress,
        )


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = FinderConfig.from_env(verbose=not args.quiet)
        location = validate_text(args.location, "location")
        args.keyword = validate_text(args.keyword, "business keyword")
        radius_miles = radius_in_miles(args.radius, args.unit, config)
        validate_max_results(args.max_results, config)
        config.require_api_key()
    except (FinderError, ValueError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    json_path, csv_path = default_output_paths(location, args.keyword)
    output_file = args.output or json_path
    output_csv = None if args.no_csv else (args.csv or csv_path)

    if not args.quiet:
        print("=" * 70)
        print(f"SEARCHING: {args.keyword} within {args.radius:g} {args.unit} of {location}")
        print("=" * 70)

    try:
        result = asyncio.run(run_search(args, config, radius_miles))
    except (FinderError, ValueError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted by user.", file=sys.stderr)
        return 130

    write_json(result, output_file)
    if output_csv:
        write_csv(result, output_csv, location=location, country=args.country or "")

    if not args.quiet:
        print(f"\nDone! Found {len(result)} businesses.")
        print(f"  JSON output: {output_file}")
        if output_csv:
            print(f"  CSV output: {output_csv}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
