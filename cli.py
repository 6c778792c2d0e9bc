#!/usr/bin/env python3
"""
Main CLI for the Stock Ticks Research Workbench.
Usage: python cli.py metrics SYMBOL [options]
"""

import os
import sys
import json
import logging
import argparse
from datetime import date
from pathlib import Path
from typing import Dict, Any, List, Optional

import pandas as pd
from dotenv import load_dotenv

from pipeline.ticks_pipeline import run_ticks, TicksConfig
from analysis.metrics_aggregator import compose_metrics, select_window, MetricsAggregatorError
from ingestion.transforms.normalizers import to_calendar_date
from reports.formatters import (
    format_currency,
    format_percentage,
    format_percent_points,
    format_growth_rate,
    format_date_display
)

# Load environment variables
load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for all commands."""
    parser = argparse.ArgumentParser(
        description='Fetch end-of-day ticks and derive growth and leverage metrics',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py metrics 1rTCW8
  python cli.py metrics 1rTCW8 --leverage 3 --start 2024-01-01
  python cli.py metrics 1rTDCAM --format json --output ./data/1rTDCAM.json
  python cli.py ticks 1rTCW8 --tail 10
        """
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    metrics = subparsers.add_parser('metrics', help='Derive metrics for a symbol')
    _add_fetch_arguments(metrics)
    metrics.add_argument('--leverage',
                         type=float,
                         default=float(os.getenv('LEVERAGE_RATIO', '2')),
                         help='Leverage ratio for the simulation (default: 2)')
    metrics.add_argument('--start',
                         type=date.fromisoformat,
                         help='First date of the analysis window (YYYY-MM-DD)')
    metrics.add_argument('--end',
                         type=date.fromisoformat,
                         help='Last date of the analysis window (YYYY-MM-DD)')
    metrics.add_argument('--format',
                         choices=['summary', 'json'],
                         default='summary',
                         help='Output format (default: summary)')
    metrics.add_argument('--output',
                         help='Also write the metrics JSON to this path')

    ticks = subparsers.add_parser('ticks', help='Show fetched ticks for a symbol')
    _add_fetch_arguments(ticks)
    ticks.add_argument('--tail',
                       type=int,
                       default=20,
                       help='Number of most recent ticks to show (default: 20)')

    return parser


def _add_fetch_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('symbol',
                        nargs='?',
                        default=os.getenv('DEFAULT_SYMBOL', '1rTCW8'),
                        help='Boursorama symbol (e.g., 1rTCW8)')
    parser.add_argument('--length',
                        type=int,
                        default=int(os.getenv('TICKS_LENGTH', '7300')),
                        help='Days of history to request (default: 7300)')


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    try:
        config = TicksConfig(symbol=args.symbol, length=args.length)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    result = run_ticks(config)

    if result['status'] != 'completed':
        print(f"ERROR: Could not load ticks for {args.symbol}: {result['error_message']}", file=sys.stderr)
        print(f"Retry with: python cli.py {args.command} {args.symbol}", file=sys.stderr)
        return 1

    if not result['ticks']:
        print(f"No data available for symbol: {args.symbol}")
        return 1

    tick_df = pd.DataFrame(result['ticks'])

    if args.command == 'ticks':
        _show_ticks(tick_df, args.tail)
        return 0

    return _run_metrics(args, tick_df)


def _run_metrics(args: argparse.Namespace, tick_df: pd.DataFrame) -> int:
    """Compute metrics on the selected window and print/write them."""
    window = select_window(tick_df, start=args.start, end=args.end)

    if window.empty:
        print(f"No ticks for {args.symbol} between {args.start or 'earliest'} and {args.end or 'latest'}")
        return 1

    try:
        metrics = compose_metrics(
            window,
            symbol=args.symbol,
            leverage_ratio=args.leverage,
            total_data_points=len(tick_df)
        )
    except MetricsAggregatorError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(metrics, f, indent=2, default=str)

    if args.format == 'json':
        print(json.dumps(metrics, indent=2, default=str))
    else:
        _show_summary(metrics)
        if args.output:
            print(f"Metrics saved to: {args.output}")

    return 0


def _show_ticks(tick_df: pd.DataFrame, tail: int) -> None:
    """Print the most recent ticks as a table."""
    recent = tick_df.tail(tail).copy()
    recent['date'] = recent['date'].map(to_calendar_date)
    print(recent.to_string(index=False))


def _show_summary(metrics: Dict[str, Any]) -> None:
    """Print metrics the way the stat cards lay them out."""
    period = metrics['data_period']
    latest = metrics['latest']
    stats = metrics['period_stats']
    compound = metrics['compound_growth']
    leverage = metrics['leverage']
    ratio = f"{leverage['leverage_ratio']:g}x"

    print(f"Summary for {metrics['symbol']}")
    print(f"   Period: {format_date_display(period['start_date'])} to {format_date_display(period['end_date'])}")
    if period['is_filtered']:
        print(f"   Window: {period['data_points']} of {period['total_data_points']} points")
    else:
        print(f"   Data Points: {period['data_points']}")
    print()

    print(f"   Latest Close: {format_currency(latest['close'])}")
    print(f"   Latest High: {format_currency(latest['high'])}")
    print(f"   Latest Low: {format_currency(latest['low'])}")
    print()

    print(f"   Period High: {format_currency(stats['high'])}")
    print(f"   Period Low: {format_currency(stats['low'])}")
    print(f"   Price Change: {format_currency(stats['change'])}")
    print(f"   Change %: {format_percent_points(stats['change_percent'])}")
    print(f"   Avg Daily Variation: {format_currency(stats['avg_range'])}")
    print(f"   Avg Close Difference: {format_currency(stats['avg_close_delta'])}")
    print()

    print(f"   Daily Growth Rate: {format_growth_rate(compound['daily_growth_rate'])}")
    print(f"   {ratio} Leveraged Final Value: {format_currency(leverage['final_value'])}")
    print(f"   {ratio} Leveraged Total Return: {format_percentage(leverage['total_return'])}")
    print(f"   {ratio} Leveraged Daily Rate: {format_growth_rate(leverage['daily_growth_rate'])}")
    print(f"   {ratio} Leveraged Avg Variation: {format_currency(leverage['avg_range'])}")
    print(f"   {ratio} Leveraged Avg Close Difference: {format_currency(leverage['avg_close_delta'])}")
    print()

    _show_classification("Closes vs Compound Growth", compound['classification'])
    _show_classification(f"{ratio} Leveraged vs Leveraged Compound", leverage['classification'])


def _show_classification(title: str, counts: Dict[str, Any]) -> None:
    shares = counts['percentages']
    print(f"   {title}:")
    print(f"      Above: {counts['above']} days ({shares['above']:.1f}%)")
    print(f"      Below: {counts['below']} days ({shares['below']:.1f}%)")
    if counts['equal'] > 0:
        print(f"      Equal: {counts['equal']} days ({shares['equal']:.1f}%)")


if __name__ == '__main__':
    sys.exit(main())
