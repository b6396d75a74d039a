"""
Economic value added / market value added.

Residual operating profit over the capital charge is capitalized as a
perpetuity (MVA) and added to invested capital.
"""

from fairvalue.domain.constants import STATUTORY_TAX_RATE
from fairvalue.domain.types import CalculationTrace
from fairvalue.domain.types import FinancialSnapshot
from fairvalue.domain.types import MethodId
from fairvalue.domain.types import MethodOutput
from fairvalue.domain.types import PricingInputs
from fairvalue.methods.base import ValuationMethod


class EconomicValueAdded(ValuationMethod):
  """
  EVA/MVA valuation.

  EBIT is projected `projection_years` periods at the revenue-growth rate;
  NOPAT = EBIT * (1 - tax); EVA = NOPAT - IC * WACC; MVA = EVA / WACC;
  equity = IC + MVA - debt + cash.
  """

  method_id = MethodId.EVA
  details = 'EVA / MVA'

  def __init__(self,
               projection_years: int = 2,
               tax_rate: float = STATUTORY_TAX_RATE):
    """
    Initialize EVA method.

    Args:
      projection_years: Periods EBIT is grown before taxing (default: 2)
      tax_rate: Tax rate applied to EBIT (default: statutory 34%)
    """
    self.projection_years = projection_years
    self.tax_rate = tax_rate

  def compute(self, snapshot: FinancialSnapshot,
              inputs: PricingInputs) -> MethodOutput:
    wacc = inputs.wacc
    invested_capital = snapshot.invested_capital
    trace = CalculationTrace(
        formula=('FV = (IC + (NOPAT - IC * WACC) / WACC - debt + cash) '
                 '/ shares'),
        inputs={
            'ebit': snapshot.ebit,
            'revenue_growth': inputs.revenue_growth,
            'tax_rate': self.tax_rate,
            'invested_capital': invested_capital,
            'wacc': wacc,
            'debt': snapshot.total_debt,
            'cash': snapshot.cash,
            'shares': snapshot.shares_outstanding,
        },
    )

    if wacc <= 0:
      return self.degenerate(trace, 'non_positive_wacc')

    projected_ebit = snapshot.ebit * (1.0 + inputs.revenue_growth)**(
        self.projection_years)
    nopat = projected_ebit * (1.0 - self.tax_rate)
    capital_charge = invested_capital * wacc
    eva = nopat - capital_charge
    mva = eva / wacc
    equity_value = invested_capital + mva - snapshot.total_debt + snapshot.cash

    trace.steps.extend([
        f'Projected EBIT: {projected_ebit:,.2f}',
        f'NOPAT: {nopat:,.2f}',
        f'Capital charge: {capital_charge:,.2f}',
        f'EVA: {eva:,.2f}',
        f'MVA: {mva:,.2f}',
        f'Equity value: {equity_value:,.2f}',
    ])
    return self.priced(trace, equity_value / snapshot.shares_outstanding)
