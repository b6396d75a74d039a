"""Graham number."""

import math

from fairvalue.domain.types import CalculationTrace
from fairvalue.domain.types import FinancialSnapshot
from fairvalue.domain.types import MethodId
from fairvalue.domain.types import MethodOutput
from fairvalue.domain.types import PricingInputs
from fairvalue.methods.base import ValuationMethod

# 15x earnings times 1.5x book.
GRAHAM_MULTIPLIER = 22.5


class GrahamNumber(ValuationMethod):
  """sqrt(22.5 * EPS * BVPS); undefined for losses or negative equity."""

  method_id = MethodId.GRAHAM
  details = 'Graham Number'

  def compute(self, snapshot: FinancialSnapshot,
              inputs: PricingInputs) -> MethodOutput:
    eps = snapshot.eps
    bvps = snapshot.book_value_per_share
    trace = CalculationTrace(
        formula='FV = sqrt(22.5 * EPS * BVPS)',
        inputs={'eps': eps, 'book_value_per_share': bvps},
    )

    if eps <= 0:
      return self.degenerate(trace, 'non_positive_eps')
    if bvps <= 0:
      return self.degenerate(trace, 'non_positive_book_value')

    return self.priced(trace, math.sqrt(GRAHAM_MULTIPLIER * eps * bvps))
