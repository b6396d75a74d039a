"""
Base class for valuation methods.

Each method prices one security from its snapshot and the shared discount
and growth rates, and returns both a value and a derivation trace.

To add a new method:
1. Create a class inheriting from ValuationMethod
2. Implement compute() returning MethodOutput
3. Register a factory in scenarios/registry.py

Example:
  class BookValue(ValuationMethod):
    method_id = MethodId.GRAHAM
    details = 'Book value'

    def compute(self, snapshot, inputs):
      trace = CalculationTrace(formula='BVPS')
      return self.priced(trace, snapshot.book_value_per_share)
"""

from abc import ABC
from abc import abstractmethod
import math

from fairvalue.domain.types import CalculationTrace
from fairvalue.domain.types import FinancialSnapshot
from fairvalue.domain.types import MethodId
from fairvalue.domain.types import MethodOutput
from fairvalue.domain.types import PricingInputs


class ValuationMethod(ABC):
  """
  Base class for valuation methods.

  Subclasses set method_id and details, and implement compute(). A method
  that cannot price the security returns a value of 0 with the reason in
  trace.degenerate; it never returns a negative, NaN or infinite value.
  """

  method_id: MethodId
  details: str = ''

  @abstractmethod
  def compute(self, snapshot: FinancialSnapshot,
              inputs: PricingInputs) -> MethodOutput:
    """
    Compute fair value per share.

    Args:
      snapshot: Normalized financial snapshot
      inputs: WACC, cost of equity and growth rates

    Returns:
      MethodOutput with fair value (>= 0) and trace
    """

  @staticmethod
  def degenerate(trace: CalculationTrace, reason: str) -> MethodOutput:
    """Report that the method has no meaningful value for this security."""
    trace.degenerate = reason
    trace.final_result = 0.0
    trace.steps.append(f'Degenerate ({reason}): fair value set to 0')
    return MethodOutput(value=0.0, trace=trace)

  @classmethod
  def priced(cls, trace: CalculationTrace, value: float) -> MethodOutput:
    """Finalize a computed value, mapping negative or non-finite to 0."""
    if not math.isfinite(value):
      return cls.degenerate(trace, 'undefined')
    if value < 0:
      return cls.degenerate(trace, 'negative_value')
    trace.final_result = value
    trace.steps.append(f'Fair value per share: {value:,.4f}')
    return MethodOutput(value=value, trace=trace)
