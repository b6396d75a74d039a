"""
Sector multiples (relative pricing).

Blends an earnings-based and an enterprise-value-based estimate. The sector
multiples are placeholders unless peer-derived ones are supplied.
"""

from typing import Optional

from fairvalue.domain.types import CalculationTrace
from fairvalue.domain.types import FinancialSnapshot
from fairvalue.domain.types import MethodId
from fairvalue.domain.types import MethodOutput
from fairvalue.domain.types import PricingInputs
from fairvalue.domain.types import SectorMultiples
from fairvalue.methods.base import ValuationMethod


class SectorMultiplesMethod(ValuationMethod):
  """
  Mean of (a) NI * sector P/E / shares and
  (b) (EBIT * sector EV/EBITDA - debt + cash) / shares.
  """

  method_id = MethodId.MULTIPLES
  details = 'Sector Multiples'

  def __init__(self, multiples: Optional[SectorMultiples] = None):
    """
    Initialize multiples method.

    Args:
      multiples: Sector P/E and EV/EBITDA (default: placeholders 8x / 6x)
    """
    self.multiples = multiples or SectorMultiples()

  def compute(self, snapshot: FinancialSnapshot,
              inputs: PricingInputs) -> MethodOutput:
    shares = snapshot.shares_outstanding
    trace = CalculationTrace(
        formula=('FV = mean(NI * P/E / shares, '
                 '(EBIT * EV/EBITDA - debt + cash) / shares)'),
        inputs={
            'net_income': snapshot.net_income,
            'ebit': snapshot.ebit,
            'sector_pe': self.multiples.pe,
            'sector_ev_ebitda': self.multiples.ev_ebitda,
            'debt': snapshot.total_debt,
            'cash': snapshot.cash,
            'shares': shares,
        },
    )

    by_pe = snapshot.net_income * self.multiples.pe / shares
    implied_ev = snapshot.ebit * self.multiples.ev_ebitda
    by_ev = (implied_ev - snapshot.total_debt + snapshot.cash) / shares
    blended = (by_pe + by_ev) / 2

    trace.steps.extend([
        f'Multiples source: {self.multiples.source}',
        f'By P/E: {by_pe:,.4f}',
        f'Implied EV: {implied_ev:,.2f}',
        f'By EV/EBITDA: {by_ev:,.4f}',
    ])
    return self.priced(trace, blended)
