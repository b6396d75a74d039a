"""
Pure DCF math engine.

This module contains pure functions for free-cash-flow DCF calculations. No
pandas, no I/O, just numeric computations on prepared inputs.

Key functions:
  compute_fair_value: Main entry point, computes fair value per share
  compute_pv_explicit: PV of the explicit forecast period
  compute_terminal_value: Discounted Gordon growth terminal value
"""

from math import isfinite
from typing import NamedTuple

from fairvalue.domain.constants import FORECAST_YEARS


class DCFBreakdown(NamedTuple):
  fair_value: float
  enterprise_value: float
  pv_explicit: float
  tv_component: float
  final_fcf: float


_NAN_BREAKDOWN = DCFBreakdown(float('nan'), float('nan'), float('nan'),
                              float('nan'), float('nan'))


def compute_pv_explicit(
    fcf0: float,
    growth_rate: float,
    discount_rate: float,
    n_years: int = FORECAST_YEARS,
) -> tuple[float, float]:
  """
  Compute present value of the explicit forecast period.

  The projection starts from the year-ahead flow fcf0 * (1 + growth_rate)
  and compounds once more each year, so
  FCF_t = fcf0 * (1 + growth_rate)^(t+1) for t = 1..n_years, each
  discounted by (1 + discount_rate)^t.

  Args:
    fcf0: Base-year free cash flow (absolute)
    growth_rate: Annual growth of free cash flow
    discount_rate: Discount rate (WACC)
    n_years: Number of explicit years

  Returns:
    Tuple of (pv_total, final_fcf)
  """
  pv = 0.0
  fcf = fcf0 * (1.0 + growth_rate)

  for t in range(1, n_years + 1):
    fcf *= (1.0 + growth_rate)
    pv += fcf / ((1.0 + discount_rate)**t)

  return pv, fcf


def compute_terminal_value(
    final_fcf: float,
    g_terminal: float,
    discount_rate: float,
    final_year: int,
) -> float:
  """
  Compute discounted terminal value using the Gordon Growth Model.

  Args:
    final_fcf: Free cash flow in the final explicit year
    g_terminal: Perpetual growth rate
    discount_rate: Discount rate (WACC)
    final_year: Number of years to discount back

  Returns:
    Present value of terminal value, nan if discount_rate <= g_terminal
  """
  if discount_rate <= g_terminal:
    return float('nan')

  tv = (final_fcf * (1.0 + g_terminal)) / (discount_rate - g_terminal)
  return tv / ((1.0 + discount_rate)**final_year)


def compute_fair_value(
    fcf0: float,
    shares: float,
    cash: float,
    debt: float,
    growth_rate: float,
    g_terminal: float,
    discount_rate: float,
    n_years: int = FORECAST_YEARS,
) -> DCFBreakdown:
  """
  Compute equity fair value per share with a two-stage FCF model.

  Stage 1: explicit forecast compounding at growth_rate
  Stage 2: Gordon terminal value on the final-year FCF

  Equity value = EV + cash - debt. The result is not floored; callers
  decide how to treat negative equity.

  Args:
    fcf0: Base-year free cash flow
    shares: Shares outstanding
    cash: Cash and equivalents
    debt: Gross interest-bearing debt
    growth_rate: Explicit-period growth rate
    g_terminal: Perpetual growth rate
    discount_rate: Discount rate (WACC)
    n_years: Number of explicit years

  Returns:
    DCFBreakdown; all fields nan when the model is undefined
    (non-finite inputs, shares <= 0, discount_rate <= g_terminal,
    discount_rate <= -1)
  """
  inputs = (fcf0, shares, cash, debt, growth_rate, g_terminal, discount_rate)
  if not all(isfinite(x) for x in inputs):
    return _NAN_BREAKDOWN

  if discount_rate <= g_terminal or discount_rate <= -1.0 or shares <= 0:
    return _NAN_BREAKDOWN

  if n_years < 1:
    return _NAN_BREAKDOWN

  pv_explicit, final_fcf = compute_pv_explicit(fcf0, growth_rate,
                                               discount_rate, n_years)
  tv_component = compute_terminal_value(final_fcf, g_terminal, discount_rate,
                                        n_years)
  if not isfinite(pv_explicit) or not isfinite(tv_component):
    return _NAN_BREAKDOWN

  enterprise_value = pv_explicit + tv_component
  equity_value = enterprise_value + cash - debt
  return DCFBreakdown(
      fair_value=equity_value / shares,
      enterprise_value=enterprise_value,
      pv_explicit=pv_explicit,
      tv_component=tv_component,
      final_fcf=final_fcf,
  )
