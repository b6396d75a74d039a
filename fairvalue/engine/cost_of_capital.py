"""
Cost of capital.

CAPM cost of equity, implied-or-assumed cost of debt and market-value
weighted WACC. Like the DCF engine these are plain functions of numbers;
compute_cost_of_capital() adapts them to a snapshot and a scenario.
"""

import logging
from typing import Optional

from fairvalue.domain.constants import STATUTORY_TAX_RATE
from fairvalue.domain.types import CostOfCapital
from fairvalue.domain.types import FinancialSnapshot
from fairvalue.domain.types import ScenarioAssumptions

logger = logging.getLogger(__name__)

# Implied interest / debt ratios outside this band are treated as noise.
IMPLIED_KD_MIN = 0.01
IMPLIED_KD_MAX = 0.60


def compute_cost_of_equity(risk_free_rate: float, beta: float,
                           equity_risk_premium: float) -> float:
  """CAPM: risk_free + beta * equity_risk_premium."""
  return risk_free_rate + beta * equity_risk_premium


def implied_cost_of_debt(interest_expense: float,
                         total_debt: float) -> Optional[float]:
  """
  Interest expense / total debt when it lies within the sane band.

  Returns:
    The implied rate, or None when debt or interest is not positive or the
    ratio falls outside [IMPLIED_KD_MIN, IMPLIED_KD_MAX]
  """
  if total_debt <= 0 or interest_expense <= 0:
    return None
  implied = interest_expense / total_debt
  if IMPLIED_KD_MIN <= implied <= IMPLIED_KD_MAX:
    return implied
  return None


def compute_wacc(
    cost_of_equity: float,
    cost_of_debt_net: float,
    equity_value: float,
    debt_value: float,
) -> tuple[float, float, float]:
  """
  Market-value weighted average cost of capital.

  Args:
    cost_of_equity: Ke
    cost_of_debt_net: After-tax Kd
    equity_value: E (price * shares)
    debt_value: D (gross debt)

  Returns:
    Tuple of (wacc, equity_weight, debt_weight). When E + D == 0 the WACC
    is Ke alone with weights (1, 0).
  """
  total = equity_value + debt_value
  if total == 0:
    return cost_of_equity, 1.0, 0.0

  equity_weight = equity_value / total
  debt_weight = debt_value / total
  wacc = cost_of_equity * equity_weight + cost_of_debt_net * debt_weight
  return wacc, equity_weight, debt_weight


def compute_cost_of_capital(
    snapshot: FinancialSnapshot,
    assumptions: ScenarioAssumptions,
    tax_rate: float = STATUTORY_TAX_RATE,
) -> CostOfCapital:
  """
  Cost of equity, cost of debt and WACC for a snapshot under a scenario.

  Args:
    snapshot: Normalized financial snapshot
    assumptions: Scenario assumptions (risk-free, ERP, beta, default Kd)
    tax_rate: Rate used for the debt tax shield

  Returns:
    CostOfCapital with kd_source 'implied' or 'assumption'
  """
  ke = compute_cost_of_equity(assumptions.risk_free_rate, assumptions.beta,
                              assumptions.equity_risk_premium)

  implied = implied_cost_of_debt(snapshot.interest_expense,
                                 snapshot.total_debt)
  if implied is None:
    kd, kd_source = assumptions.cost_of_debt, 'assumption'
  else:
    kd, kd_source = implied, 'implied'
  kd_net = kd * (1.0 - tax_rate)

  equity_value = snapshot.price * snapshot.shares_outstanding
  wacc, equity_weight, debt_weight = compute_wacc(ke, kd_net, equity_value,
                                                  snapshot.total_debt)

  logger.debug('%s: Ke=%.4f Kd=%.4f (%s) WACC=%.4f', snapshot.ticker, ke, kd,
               kd_source, wacc)

  return CostOfCapital(
      cost_of_equity=ke,
      cost_of_debt=kd,
      cost_of_debt_net=kd_net,
      wacc=wacc,
      equity_weight=equity_weight,
      debt_weight=debt_weight,
      kd_source=kd_source,
  )
