"""
Discounted cash flow method.

Free cash flow is projected FORECAST_YEARS forward at the revenue-growth
rate and discounted at WACC; a Gordon terminal value on the final-year flow
closes the model. The same function prices every cell of the sensitivity
grid.
"""

from fairvalue.domain.constants import FORECAST_YEARS
from fairvalue.domain.types import CalculationTrace
from fairvalue.domain.types import FinancialSnapshot
from fairvalue.domain.types import MethodId
from fairvalue.domain.types import MethodOutput
from fairvalue.domain.types import PricingInputs
from fairvalue.engine.dcf import compute_fair_value
from fairvalue.methods.base import ValuationMethod


class DiscountedCashFlow(ValuationMethod):
  """Two-stage free-cash-flow DCF on the firm, bridged to equity."""

  method_id = MethodId.DCF
  details = 'Discounted Cash Flow'

  def __init__(self, n_years: int = FORECAST_YEARS):
    """
    Initialize DCF method.

    Args:
      n_years: Explicit forecast years (default: 5)
    """
    self.n_years = n_years

  def compute(self, snapshot: FinancialSnapshot,
              inputs: PricingInputs) -> MethodOutput:
    """Price the firm's free cash flow at WACC."""
    trace = CalculationTrace(
        formula=('EV = sum(FCF_t / (1 + WACC)^t) + TV / (1 + WACC)^n; '
                 'FV = (EV + cash - debt) / shares'),
        inputs={
            'free_cash_flow': snapshot.free_cash_flow,
            'revenue_growth': inputs.revenue_growth,
            'perpetual_growth': inputs.perpetual_growth,
            'wacc': inputs.wacc,
            'cash': snapshot.cash,
            'debt': snapshot.total_debt,
            'shares': snapshot.shares_outstanding,
            'years': float(self.n_years),
        },
    )

    if inputs.wacc <= inputs.perpetual_growth:
      return self.degenerate(trace, 'wacc_not_above_growth')

    breakdown = compute_fair_value(
        fcf0=snapshot.free_cash_flow,
        shares=snapshot.shares_outstanding,
        cash=snapshot.cash,
        debt=snapshot.total_debt,
        growth_rate=inputs.revenue_growth,
        g_terminal=inputs.perpetual_growth,
        discount_rate=inputs.wacc,
        n_years=self.n_years,
    )

    trace.steps.extend([
        f'PV of explicit FCF ({self.n_years}y): {breakdown.pv_explicit:,.2f}',
        f'Final-year FCF: {breakdown.final_fcf:,.2f}',
        f'PV of terminal value: {breakdown.tv_component:,.2f}',
        f'Enterprise value: {breakdown.enterprise_value:,.2f}',
    ])
    return self.priced(trace, breakdown.fair_value)
