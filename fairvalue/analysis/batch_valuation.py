'''
Batch valuation for multiple tickers.

This module provides tools to:
1. Run consensus valuations for many tickers with one cached loader
2. Compare valuations across companies
3. Export results to CSV for further analysis

Usage (CLI):
  # From ticker file
  python -m fairvalue.analysis.batch_valuation \
    --tickers-file tickers_ibov.txt \
    --data-dir data \
    --output results/ibov_valuation.csv

  # Specific tickers
  python -m fairvalue.analysis.batch_valuation \
    --tickers VALE3 PETR4 ITUB4 \
    --data-dir data \
    --scenario bear \
    --output results/bear.csv \
    -v

Usage (Python API):
  from fairvalue.analysis.batch_valuation import batch_valuation
  from fairvalue.scenarios.config import ValuationConfig

  df = batch_valuation(
    tickers=['VALE3', 'PETR4'],
    config=ValuationConfig.default(),
    loader=RawDataLoader(LoaderConfig(data_dir=Path('data'))),
  )
  df.to_csv('results.csv', index=False)
'''

import argparse
import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd

from fairvalue.data_loader import LoaderConfig
from fairvalue.data_loader import RawDataLoader
from fairvalue.domain.errors import MissingDataError
from fairvalue.run import run_valuation
from fairvalue.scenarios.config import ValuationConfig
from fairvalue.scenarios.registry import list_presets

logger = logging.getLogger(__name__)


def batch_valuation(
    tickers: List[str],
    config: ValuationConfig,
    loader: Optional[RawDataLoader] = None,
    verbose: bool = False,
) -> pd.DataFrame:
  '''
  Run valuation for multiple tickers.

  Tickers with missing data or an unusable consensus (non-finite or not
  positive) are logged and skipped.

  Args:
    tickers: List of ticker symbols
    config: ValuationConfig shared by all tickers
    loader: Raw data loader; tables are read once and cached
    verbose: Log each ticker's result

  Returns:
    DataFrame with one row per valued ticker:
    - scenario: Configuration name
    - ticker, current_price, weighted_fair_value, total_upside
    - wacc, cost_of_equity, range_min, range_max, quality_flags
    - {method}_fair_value, {method}_weight for each method

  Raises:
    ValueError: If no ticker could be valued
  '''
  if loader is None:
    loader = RawDataLoader()

  results = []
  for i, ticker in enumerate(tickers, 1):
    if verbose:
      logger.info('[%d/%d] Processing %s...', i, len(tickers), ticker)

    try:
      valuation = run_valuation(ticker, config=config, loader=loader)
    except MissingDataError as e:
      logger.warning('Skipping %s: %s', ticker, e)
      continue

    if not valuation.is_usable:
      logger.warning('Skipping %s: unusable consensus %.4f', ticker,
                     valuation.weighted_fair_value)
      continue

    row = {'scenario': config.name}
    row.update(valuation.to_dict())
    results.append(row)

    if verbose:
      logger.info('  Fair value: %.2f, Price: %.2f, Upside: %.1f%%',
                  valuation.weighted_fair_value, valuation.current_price,
                  valuation.total_upside * 100)

  if not results:
    raise ValueError(f'No successful results for any ticker in {tickers}')

  return pd.DataFrame(results)


def _load_tickers_from_file(file_path: Path) -> List[str]:
  '''Load ticker symbols from text file (one per line, # for comments).'''
  with open(file_path, 'r', encoding='utf-8') as f:
    tickers = [
        line.strip() for line in f
        if line.strip() and not line.strip().startswith('#')
    ]
  return tickers


def _print_summary(df: pd.DataFrame) -> None:
  '''Print summary statistics for batch valuation results.'''
  logger.info('')
  logger.info('=' * 70)
  logger.info('Summary Statistics')
  logger.info('=' * 70)
  logger.info('Total companies: %d', len(df))
  logger.info('')

  logger.info('Upside:')
  logger.info('  Mean:   %.1f%%', df['total_upside'].mean() * 100)
  logger.info('  Median: %.1f%%', df['total_upside'].median() * 100)
  logger.info('')

  undervalued = df[df['total_upside'] > 0]
  logger.info('Undervalued (upside > 0): %d / %d (%.1f%%)', len(undervalued),
              len(df),
              len(undervalued) / len(df) * 100)

  if len(undervalued) > 0:
    logger.info('Top 5 undervalued:')
    top5 = undervalued.nlargest(5, 'total_upside')
    for _, row in top5.iterrows():
      logger.info('  %s: FV=%.2f, Price=%.2f, Upside=%.1f%%', row['ticker'],
                  row['weighted_fair_value'], row['current_price'],
                  row['total_upside'] * 100)

  flagged = df[df['quality_flags'] != '']
  if len(flagged) > 0:
    logger.info('With data-quality flags: %d', len(flagged))

  logger.info('=' * 70)


def main() -> None:
  '''CLI entrypoint for batch valuation.'''
  presets = list_presets()
  parser = argparse.ArgumentParser(
      description='Batch valuation for multiple tickers',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog=__doc__,
  )

  ticker_group = parser.add_mutually_exclusive_group(required=True)
  ticker_group.add_argument('--tickers',
                            nargs='+',
                            help='Space-separated ticker symbols')
  ticker_group.add_argument('--tickers-file',
                            type=Path,
                            help='File with ticker symbols (one per line)')
  ticker_group.add_argument('--all',
                            action='store_true',
                            help='Every ticker in the quotes table')

  parser.add_argument('--data-dir',
                      type=Path,
                      default=Path('data'),
                      help='Directory with the raw tables')

  parser.add_argument('--format',
                      type=str,
                      default='csv',
                      choices=['csv', 'parquet'],
                      help='Raw table file format')

  parser.add_argument('--scenario',
                      type=str,
                      default='base',
                      choices=presets['scenario'],
                      help='Scenario preset (default: base)')

  parser.add_argument('--weights',
                      type=str,
                      default='mature',
                      choices=presets['weights'],
                      help='Weighting profile (default: mature)')

  parser.add_argument('--output',
                      type=Path,
                      required=True,
                      help='Output CSV file path')

  parser.add_argument('-v',
                      '--verbose',
                      action='store_true',
                      help='Verbose output')

  args = parser.parse_args()

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(asctime)s [%(levelname)s] %(message)s',
      datefmt='%Y-%m-%d %H:%M:%S',
  )

  loader = RawDataLoader(
      LoaderConfig(data_dir=args.data_dir, file_format=args.format))

  if args.tickers:
    tickers = args.tickers
  elif args.all:
    tickers = loader.tickers()
  else:
    tickers = _load_tickers_from_file(args.tickers_file)
    logger.info('Loaded %d tickers from %s', len(tickers), args.tickers_file)
  logger.info('Processing %d tickers', len(tickers))

  config = ValuationConfig(name=args.scenario,
                           scenario=args.scenario,
                           weights=args.weights)
  logger.info('Using scenario: %s / weights: %s', config.scenario,
              config.weights)
  logger.info('')

  results = batch_valuation(
      tickers=tickers,
      config=config,
      loader=loader,
      verbose=args.verbose,
  )

  args.output.parent.mkdir(parents=True, exist_ok=True)
  results.to_csv(args.output, index=False)

  logger.info('')
  logger.info('Saved %d results to %s', len(results), args.output)

  _print_summary(results)


if __name__ == '__main__':
  main()
