"""
Consensus aggregation of method fair values.

Combines the per-method outputs into ValuationResults and the weighted
consensus. Methods that returned 0 keep their weight in the consensus but
are left out of the price range.
"""

import logging
import math
from typing import List, Mapping, Sequence

from fairvalue.domain.types import ComprehensiveValuation
from fairvalue.domain.types import MethodId
from fairvalue.domain.types import MethodOutput
from fairvalue.domain.types import METHOD_ORDER
from fairvalue.domain.types import PriceRange
from fairvalue.domain.types import SensitivityCell
from fairvalue.domain.types import ValuationResult
from fairvalue.domain.types import WeightingProfile

logger = logging.getLogger(__name__)


def compute_upside(fair_value: float, price: float) -> float:
  """fair_value / price - 1, or 0 when price is not positive."""
  if price <= 0:
    return 0.0
  return fair_value / price - 1.0


def build_results(
    outputs: Mapping[MethodId, MethodOutput],
    weights: WeightingProfile,
    price: float,
    details: Mapping[MethodId, str],
) -> List[ValuationResult]:
  """
  Wrap method outputs into ValuationResults in METHOD_ORDER.

  Raises:
    KeyError: If an output for any of the five methods is missing
  """
  normalized = weights.normalized()
  results = []
  for method in METHOD_ORDER:
    output = outputs[method]
    results.append(
        ValuationResult(
            method=method,
            fair_value=output.value,
            weight=normalized[method.value],
            upside=compute_upside(output.value, price),
            details=details.get(method, method.value),
            trace=output.trace,
        ))
  return results


def weighted_fair_value(results: Sequence[ValuationResult]) -> float:
  """Sum of fair_value * normalized weight."""
  return sum(r.fair_value * r.weight for r in results)


def price_range(results: Sequence[ValuationResult]) -> PriceRange:
  """Min / max over strictly positive fair values; (0, 0) if none."""
  values = [
      r.fair_value
      for r in results
      if r.fair_value > 0 and math.isfinite(r.fair_value)
  ]
  if not values:
    return PriceRange(min=0.0, max=0.0)
  return PriceRange(min=min(values), max=max(values))


def aggregate(
    *,
    ticker: str,
    price: float,
    outputs: Mapping[MethodId, MethodOutput],
    weights: WeightingProfile,
    wacc: float,
    cost_of_equity: float,
    sensitivity_matrix: List[List[SensitivityCell]],
    details: Mapping[MethodId, str],
    quality_flags: Sequence[str] = (),
) -> ComprehensiveValuation:
  """
  Build the consensus valuation.

  Args:
    ticker: Canonical ticker
    price: Current price
    outputs: One MethodOutput per method
    weights: Weighting profile (normalized here)
    wacc: WACC used by the methods
    cost_of_equity: Ke used by the methods
    sensitivity_matrix: Grid from SensitivityGridBuilder
    details: Method labels
    quality_flags: Data-quality flags to report

  Returns:
    ComprehensiveValuation
  """
  results = build_results(outputs, weights, price, details)
  consensus = weighted_fair_value(results)

  degenerate = [r.method.value for r in results if r.trace.degenerate]
  if degenerate:
    logger.debug('%s: degenerate methods %s', ticker, degenerate)

  return ComprehensiveValuation(
      ticker=ticker,
      current_price=price,
      weighted_fair_value=consensus,
      total_upside=compute_upside(consensus, price),
      calculated_wacc=wacc,
      cost_of_equity=cost_of_equity,
      price_range=price_range(results),
      results=results,
      sensitivity_matrix=sensitivity_matrix,
      data_quality_flags=tuple(quality_flags),
  )
