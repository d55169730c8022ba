# src/storm_impact/cli.py

"""
CLI wrapper for the storm impact report.

Sub-commands:
  report : Run the full analysis and render the HTML report
  tables : Run the analysis and write the CSV tables only
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

import pandas as pd

from storm_impact.data_io import load_storm_data
from storm_impact.loader import DEFAULT_CUTOFF, DATE_FORMAT
from storm_impact.pipeline import ReportTables, build_report_tables
from storm_impact.ranking import DEFAULT_TOP_N, ranked_pairs
from storm_impact.report import DEFAULT_OUTPUT_DIR, DEFAULT_TITLE, export_tables, render_report

# Configure logging
logging.basicConfig(level=logging.INFO,
                   format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

DEFAULT_INPUT = 'data/repdata_data_StormData.csv.bz2'


def _positive_int(value: str) -> int:
    n = int(value)
    if n <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return n


def _date(value: str) -> pd.Timestamp:
    try:
        return pd.Timestamp(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: {value}")


def run_analysis(input_path: str, cutoff, top: int, date_format: Optional[str]) -> ReportTables:
    """Load the storm table and build every report table."""
    raw = load_storm_data(input_path)
    return build_report_tables(raw, cutoff=cutoff, top=top, date_format=date_format)


def print_rankings(tables: ReportTables) -> None:
    """Print both top-N rankings to stdout."""
    print(f"Top {tables.top} event categories by fatalities + injuries:")
    for i, (category, value) in enumerate(ranked_pairs(tables.harm_top), start=1):
        print(f"  {i:>2}. {category:<30} {value:>10,.0f}")
    print(f"Top {tables.top} event categories by damage (billions USD):")
    for i, (category, value) in enumerate(ranked_pairs(tables.damage_top), start=1):
        print(f"  {i:>2}. {category:<30} {value:>10,.2f}")
    print(tables.audit.summary())


def setup_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='storm-impact',
        description='Storm impact report over the NOAA Storm Events database'
    )
    sub = parser.add_subparsers(dest='command', required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--input', default=DEFAULT_INPUT,
                        help='Path to the storm data CSV (.csv or .csv.bz2)')
    common.add_argument('--output-dir', default=DEFAULT_OUTPUT_DIR,
                        help='Directory to save the outputs')
    common.add_argument('--cutoff', type=_date, default=pd.Timestamp(DEFAULT_CUTOFF),
                        help='First day of the analysis window (inclusive)')
    common.add_argument('--top', type=_positive_int, default=DEFAULT_TOP_N,
                        help='Number of categories in each ranking')
    common.add_argument('--date-format', default=DATE_FORMAT,
                        help='strptime format of the date columns')

    p_report = sub.add_parser('report', parents=[common],
                              help='Render the HTML report with charts and maps')
    p_report.add_argument('--title', default=DEFAULT_TITLE,
                          help='Report title')

    sub.add_parser('tables', parents=[common],
                   help='Write the CSV tables and print the rankings')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = setup_parser()
    args = parser.parse_args(argv)

    try:
        tables = run_analysis(args.input, args.cutoff, args.top, args.date_format)
    except (FileNotFoundError, PermissionError, IsADirectoryError, ValueError) as e:
        logger.error(f"Cannot build report tables: {type(e).__name__}: {e}")
        return 1

    export_tables(tables, args.output_dir)

    if args.command == 'report':
        path = render_report(
            tables,
            output_dir=args.output_dir,
            title=args.title,
            source_name=os.path.basename(args.input)
        )
        print(f"Report written to {path}")

    elif args.command == 'tables':
        print_rankings(tables)

    return 0


if __name__ == '__main__':
    sys.exit(main())
