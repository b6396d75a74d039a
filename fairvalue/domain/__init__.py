"""Domain types for the fair-value engine."""

from fairvalue.domain.errors import MissingDataError
from fairvalue.domain.types import CalculationTrace
from fairvalue.domain.types import ComprehensiveValuation
from fairvalue.domain.types import CostOfCapital
from fairvalue.domain.types import FinancialSnapshot
from fairvalue.domain.types import MethodId
from fairvalue.domain.types import MethodOutput
from fairvalue.domain.types import PricingInputs
from fairvalue.domain.types import ScenarioAssumptions
from fairvalue.domain.types import SectorMultiples
from fairvalue.domain.types import ValuationResult
from fairvalue.domain.types import WeightingProfile

__all__ = [
    'CalculationTrace',
    'ComprehensiveValuation',
    'CostOfCapital',
    'FinancialSnapshot',
    'MethodId',
    'MethodOutput',
    'MissingDataError',
    'PricingInputs',
    'ScenarioAssumptions',
    'SectorMultiples',
    'ValuationResult',
    'WeightingProfile',
]
