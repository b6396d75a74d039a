"""
Registry mapping configuration names to factories.

Scenario presets, weighting profiles and valuation methods are referenced
by string name in ValuationConfig (JSON friendly) and instantiated here.

To add a new scenario preset:
1. Add a factory returning ScenarioAssumptions
2. Register it in SCENARIO_PRESETS

Example:
  SCENARIO_PRESETS['stress'] = lambda: ScenarioAssumptions(
      risk_free_rate=0.18, equity_risk_premium=0.07, beta=1.2,
      cost_of_debt=0.20, perpetual_growth=0.02,
      projected_revenue_growth=0.0)
"""

from collections.abc import Callable
from typing import Optional

from fairvalue.domain.constants import STATUTORY_TAX_RATE
from fairvalue.domain.types import FinancialSnapshot
from fairvalue.domain.types import METHOD_ORDER
from fairvalue.domain.types import MethodId
from fairvalue.domain.types import ScenarioAssumptions
from fairvalue.domain.types import SectorMultiples
from fairvalue.domain.types import WeightingProfile
from fairvalue.methods.base import ValuationMethod
from fairvalue.methods.dcf import DiscountedCashFlow
from fairvalue.methods.eva import EconomicValueAdded
from fairvalue.methods.gordon import GordonGrowth
from fairvalue.methods.graham import GrahamNumber
from fairvalue.methods.multiples import SectorMultiplesMethod
from fairvalue.scenarios.config import ValuationConfig

DEFAULT_COST_OF_DEBT = 0.16

SCENARIO_PRESETS: dict[str, Callable[[], ScenarioAssumptions]] = {
    'base':
        lambda: ScenarioAssumptions(
            risk_free_rate=0.15,
            equity_risk_premium=0.05,
            beta=1.0,
            cost_of_debt=DEFAULT_COST_OF_DEBT,
            perpetual_growth=0.05,
            projected_revenue_growth=0.05,
            tax_rate=STATUTORY_TAX_RATE),
    'bull':
        lambda: ScenarioAssumptions(
            risk_free_rate=0.12,
            equity_risk_premium=0.045,
            beta=1.1,
            cost_of_debt=DEFAULT_COST_OF_DEBT,
            perpetual_growth=0.06,
            projected_revenue_growth=0.08,
            tax_rate=STATUTORY_TAX_RATE),
    'bear':
        lambda: ScenarioAssumptions(
            risk_free_rate=0.16,
            equity_risk_premium=0.06,
            beta=0.9,
            cost_of_debt=DEFAULT_COST_OF_DEBT,
            perpetual_growth=0.03,
            projected_revenue_growth=0.02,
            tax_rate=STATUTORY_TAX_RATE),
}

WEIGHTING_PROFILES: dict[str, Callable[[], WeightingProfile]] = {
    'growth':
        lambda: WeightingProfile(
            dcf=0.5, gordon=0.0, eva=0.2, multiples=0.2, graham=0.1,
            name='growth'),
    'mature':
        lambda: WeightingProfile(
            dcf=0.4, gordon=0.1, eva=0.15, multiples=0.15, graham=0.2,
            name='mature'),
    'distress':
        lambda: WeightingProfile(
            dcf=0.4, gordon=0.0, eva=0.15, multiples=0.25, graham=0.2,
            name='distress'),
}

METHOD_FACTORIES: dict[MethodId, Callable[[SectorMultiples], ValuationMethod]]
METHOD_FACTORIES = {
    MethodId.DCF: lambda _: DiscountedCashFlow(),
    MethodId.GORDON: lambda _: GordonGrowth(),
    MethodId.EVA: lambda _: EconomicValueAdded(),
    MethodId.MULTIPLES: SectorMultiplesMethod,
    MethodId.GRAHAM: lambda _: GrahamNumber(),
}


def create_assumptions(
    config: ValuationConfig,
    snapshot: Optional[FinancialSnapshot] = None,
) -> ScenarioAssumptions:
  """
  Create scenario assumptions from configuration.

  Args:
    config: ValuationConfig with scenario name and overrides
    snapshot: Snapshot whose observed beta / revenue growth replace the
      preset values when config.use_market_inputs is set

  Returns:
    ScenarioAssumptions

  Raises:
    KeyError: If the scenario name is not found in the registry
    TypeError: If an override names an unknown field
  """
  try:
    factory = SCENARIO_PRESETS[config.scenario]
  except KeyError as e:
    raise KeyError(f"Unknown scenario: '{config.scenario}'. "
                   f'Available: {list(SCENARIO_PRESETS.keys())}') from e

  assumptions = factory()
  if config.use_market_inputs and snapshot is not None:
    assumptions = assumptions.with_market_inputs(snapshot)
  if config.assumption_overrides:
    assumptions = assumptions.with_overrides(**config.assumption_overrides)
  return assumptions


def create_weights(config: ValuationConfig) -> WeightingProfile:
  """
  Create the weighting profile from configuration.

  Raises:
    KeyError: If the profile or an overridden method is unknown
    ValueError: If the resulting weights are invalid
  """
  try:
    factory = WEIGHTING_PROFILES[config.weights]
  except KeyError as e:
    raise KeyError(f"Unknown weighting profile: '{config.weights}'. "
                   f'Available: {list(WEIGHTING_PROFILES.keys())}') from e

  profile = factory()
  if not config.weight_overrides:
    return profile

  values = {m.value.lower(): profile.weight_for(m) for m in METHOD_ORDER}
  unknown = [k for k in config.weight_overrides if k not in values]
  if unknown:
    raise KeyError(f'Unknown method in weight overrides: {unknown}. '
                   f'Available: {list(values.keys())}')
  values.update(config.weight_overrides)
  return WeightingProfile(**values, name=f'{profile.name}+overrides')


def create_sector_multiples(
    config: ValuationConfig,
    peers: Optional[SectorMultiples] = None,
) -> SectorMultiples:
  """
  Resolve sector multiples.

  Explicit values in config win, then peer-derived multiples (when enabled),
  then the placeholders. A single explicit value on top of the placeholders
  keeps the placeholder source, since the other multiple is still one.
  """
  base = peers if (config.use_peer_multiples and peers) else SectorMultiples()
  if config.sector_pe is None and config.sector_ev_ebitda is None:
    return base
  both_given = (config.sector_pe is not None and
                config.sector_ev_ebitda is not None)
  return SectorMultiples(
      pe=config.sector_pe if config.sector_pe is not None else base.pe,
      ev_ebitda=(config.sector_ev_ebitda
                 if config.sector_ev_ebitda is not None else base.ev_ebitda),
      source=('config' if both_given or not base.is_placeholder else
              base.source),
  )


def create_methods(
    multiples: Optional[SectorMultiples] = None) -> list[ValuationMethod]:
  """Instantiate the five valuation methods in report order."""
  multiples = multiples or SectorMultiples()
  return [METHOD_FACTORIES[method](multiples) for method in METHOD_ORDER]


def list_presets() -> dict[str, list[str]]:
  """
  List available presets by category.

  Returns:
    Dictionary mapping category names to list of preset names
  """
  return {
      'scenario': list(SCENARIO_PRESETS.keys()),
      'weights': list(WEIGHTING_PROFILES.keys()),
  }
