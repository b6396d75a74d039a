"""
Gordon growth (dividend discount) method.

Next-year distributable earnings grow at the perpetual rate and are
capitalized at the cost of equity.
"""

from fairvalue.domain.types import CalculationTrace
from fairvalue.domain.types import FinancialSnapshot
from fairvalue.domain.types import MethodId
from fairvalue.domain.types import MethodOutput
from fairvalue.domain.types import PricingInputs
from fairvalue.methods.base import ValuationMethod


class GordonGrowth(ValuationMethod):
  """D1 / (Ke - g) with D1 = EPS * (1 + g)."""

  method_id = MethodId.GORDON
  details = 'Gordon Growth (DDM)'

  def compute(self, snapshot: FinancialSnapshot,
              inputs: PricingInputs) -> MethodOutput:
    ke = inputs.cost_of_equity
    g = inputs.perpetual_growth
    trace = CalculationTrace(
        formula='FV = EPS * (1 + g) / (Ke - g)',
        inputs={
            'eps': snapshot.eps,
            'cost_of_equity': ke,
            'perpetual_growth': g,
        },
    )

    if ke <= g:
      return self.degenerate(trace, 'cost_of_equity_not_above_growth')

    d1 = snapshot.eps * (1.0 + g)
    trace.steps.append(f'D1: {d1:,.4f}')
    if d1 <= 0:
      return self.degenerate(trace, 'non_positive_dividend')

    return self.priced(trace, d1 / (ke - g))
