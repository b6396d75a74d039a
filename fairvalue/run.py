'''
Single-company valuation entrypoint.

This module provides the main entry point for running valuations. It:
1. Loads raw rows and normalizes them into a FinancialSnapshot
2. Resolves scenario assumptions, weights and sector multiples from the
   configuration
3. Computes the cost of capital and runs the five valuation methods
4. Aggregates them into a ComprehensiveValuation with a sensitivity grid

Usage:
  from fairvalue.data_loader import LoaderConfig, RawDataLoader
  from fairvalue.run import run_valuation
  from fairvalue.scenarios.config import ValuationConfig

  result = run_valuation(
    ticker='VALE3',
    config=ValuationConfig.default(),
    loader=RawDataLoader(LoaderConfig(data_dir=Path('data'))),
  )
  print(f"Fair value: R$ {result.weighted_fair_value:.2f}")
'''

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional

from fairvalue.analysis.peers import sector_multiples_from_quotes
from fairvalue.data_loader import LoaderConfig
from fairvalue.data_loader import RawDataLoader
from fairvalue.domain.constants import FLAG_COST_OF_DEBT_FALLBACK
from fairvalue.domain.constants import FLAG_PLACEHOLDER_MULTIPLES
from fairvalue.domain.types import ComprehensiveValuation
from fairvalue.domain.types import FinancialSnapshot
from fairvalue.domain.types import MethodId
from fairvalue.domain.types import MethodOutput
from fairvalue.domain.types import PricingInputs
from fairvalue.domain.types import ScenarioAssumptions
from fairvalue.domain.types import SectorMultiples
from fairvalue.domain.types import WeightingProfile
from fairvalue.engine.consensus import aggregate
from fairvalue.engine.cost_of_capital import compute_cost_of_capital
from fairvalue.engine.sensitivity import SensitivityGridBuilder
from fairvalue.engine.sensitivity import grid_to_frame
from fairvalue.methods.dcf import DiscountedCashFlow
from fairvalue.normalize.normalizer import build_snapshot
from fairvalue.scenarios.config import ValuationConfig
from fairvalue.scenarios.registry import create_assumptions
from fairvalue.scenarios.registry import create_methods
from fairvalue.scenarios.registry import create_sector_multiples
from fairvalue.scenarios.registry import create_weights
from fairvalue.scenarios.registry import list_presets

logger = logging.getLogger(__name__)


def perform_valuation(
    snapshot: FinancialSnapshot,
    assumptions: ScenarioAssumptions,
    weights: WeightingProfile,
    sector_multiples: Optional[SectorMultiples] = None,
) -> ComprehensiveValuation:
  '''
  Value a normalized snapshot.

  Pure: the same inputs always give the same result.

  Args:
    snapshot: Normalized financial snapshot
    assumptions: Scenario assumptions
    weights: Method weighting profile
    sector_multiples: Sector P/E and EV/EBITDA (default: placeholders)

  Returns:
    ComprehensiveValuation with all five methods and the sensitivity grid
  '''
  multiples = sector_multiples or SectorMultiples()
  cost_of_capital = compute_cost_of_capital(snapshot, assumptions)
  inputs = PricingInputs.from_cost_of_capital(cost_of_capital, assumptions)

  outputs: Dict[MethodId, MethodOutput] = {}
  details: Dict[MethodId, str] = {}
  dcf: Optional[DiscountedCashFlow] = None
  for method in create_methods(multiples):
    outputs[method.method_id] = method.compute(snapshot, inputs)
    details[method.method_id] = method.details
    if isinstance(method, DiscountedCashFlow):
      dcf = method

  grid = SensitivityGridBuilder(snapshot, inputs, dcf=dcf).build()

  flags: List[str] = list(snapshot.quality_flags)
  if cost_of_capital.kd_source == 'assumption':
    flags.append(FLAG_COST_OF_DEBT_FALLBACK)
  if multiples.is_placeholder:
    flags.append(FLAG_PLACEHOLDER_MULTIPLES)

  return aggregate(
      ticker=snapshot.ticker,
      price=snapshot.price,
      outputs=outputs,
      weights=weights,
      wacc=cost_of_capital.wacc,
      cost_of_equity=cost_of_capital.cost_of_equity,
      sensitivity_matrix=grid,
      details=details,
      quality_flags=flags,
  )


def run_valuation(
    ticker: str,
    config: Optional[ValuationConfig] = None,
    loader: Optional[RawDataLoader] = None,
) -> ComprehensiveValuation:
  '''
  Run valuation for a single ticker.

  Args:
    ticker: Ticker symbol (e.g., 'VALE3', 'petr4.sa')
    config: ValuationConfig (default: ValuationConfig.default())
    loader: Raw data loader (default: CSV files under ./data)

  Returns:
    ComprehensiveValuation

  Raises:
    MissingDataError: If a required data category is absent for the ticker
    FileNotFoundError: If a required table file does not exist
    KeyError: If the configuration names an unknown preset
  '''
  if config is None:
    config = ValuationConfig.default()
  if loader is None:
    loader = RawDataLoader()

  snapshot = build_snapshot(loader.load_raw(ticker), ticker)

  peers = None
  if config.use_peer_multiples:
    peers = sector_multiples_from_quotes(loader.all_quotes(), snapshot.ticker)

  valuation = perform_valuation(
      snapshot=snapshot,
      assumptions=create_assumptions(config, snapshot),
      weights=create_weights(config),
      sector_multiples=create_sector_multiples(config, peers),
  )
  logger.debug('%s: consensus %.4f (%s)', snapshot.ticker,
               valuation.weighted_fair_value, config.name)
  return valuation


def _load_config(args: argparse.Namespace) -> ValuationConfig:
  if args.config:
    config = ValuationConfig.from_json(Path(args.config).read_text())
  else:
    config = ValuationConfig.default()
  if args.scenario:
    config.scenario = args.scenario
    config.name = args.scenario
  if args.weights:
    config.weights = args.weights
  if args.peers:
    config.use_peer_multiples = True
  if args.market_inputs:
    config.use_market_inputs = True
  return config


def _log_valuation(valuation: ComprehensiveValuation,
                   config: ValuationConfig) -> None:
  separator = '=' * 70
  logger.info('\n%s', separator)
  logger.info('Valuation - %s', valuation.ticker)
  logger.info('Scenario: %s / weights: %s', config.scenario, config.weights)
  logger.info(separator)

  logger.info('\nCost of Capital:')
  logger.info('  Cost of Equity: %.2f%%', valuation.cost_of_equity * 100)
  logger.info('  WACC: %.2f%%', valuation.calculated_wacc * 100)

  logger.info('\nMethods:')
  for result in valuation.results:
    suffix = f' ({result.trace.degenerate})' if result.trace.degenerate else ''
    logger.info('  %-22s %12.2f  weight %5.1f%%  upside %7.1f%%%s',
                result.details, result.fair_value, result.weight * 100,
                result.upside * 100, suffix)

  logger.info('\nConsensus:')
  logger.info('  Current Price: %.2f', valuation.current_price)
  logger.info('  Weighted Fair Value: %.2f', valuation.weighted_fair_value)
  logger.info('  Upside: %.2f%%', valuation.total_upside * 100)
  logger.info('  Range: %.2f - %.2f', valuation.price_range.min,
              valuation.price_range.max)
  if valuation.data_quality_flags:
    logger.info('  Data quality: %s', ', '.join(valuation.data_quality_flags))

  logger.info('\nDCF Sensitivity (WACC x Perpetual Growth):')
  logger.info('\n%s',
              grid_to_frame(valuation.sensitivity_matrix).to_string(
                  float_format=lambda v: f'{v:,.2f}'))
  logger.info('%s\n', separator)


def main() -> None:
  '''CLI entrypoint.'''
  presets = list_presets()
  parser = argparse.ArgumentParser(description='Run consensus valuation')
  parser.add_argument('--ticker',
                      type=str,
                      required=True,
                      help='Ticker symbol (e.g., VALE3)')
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
                      default=None,
                      choices=presets['scenario'],
                      help='Scenario preset (default: base)')
  parser.add_argument('--weights',
                      type=str,
                      default=None,
                      choices=presets['weights'],
                      help='Weighting profile (default: mature)')
  parser.add_argument('--config',
                      type=Path,
                      default=None,
                      help='ValuationConfig JSON file')
  parser.add_argument('--peers',
                      action='store_true',
                      help='Derive sector multiples from peer quotes')
  parser.add_argument('--market-inputs',
                      action='store_true',
                      help='Use observed beta and revenue growth')
  parser.add_argument('-v',
                      '--verbose',
                      action='store_true',
                      help='Verbose output')
  args = parser.parse_args()

  if args.verbose:
    logging.getLogger().setLevel(logging.DEBUG)

  config = _load_config(args)
  loader = RawDataLoader(
      LoaderConfig(data_dir=args.data_dir, file_format=args.format))

  valuation = run_valuation(args.ticker, config=config, loader=loader)
  _log_valuation(valuation, config)


if __name__ == '__main__':
  logging.basicConfig(
      level=logging.INFO,
      format='%(message)s',
  )
  main()
