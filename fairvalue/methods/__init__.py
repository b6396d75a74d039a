"""
Valuation methods.

Each method estimates fair value per share under one theory of value and
returns both a value and its derivation trace. Methods are independent and
pure: the consensus combines them.
"""

from fairvalue.methods.base import ValuationMethod
from fairvalue.methods.dcf import DiscountedCashFlow
from fairvalue.methods.eva import EconomicValueAdded
from fairvalue.methods.gordon import GordonGrowth
from fairvalue.methods.graham import GrahamNumber
from fairvalue.methods.multiples import SectorMultiplesMethod

__all__ = [
    'ValuationMethod',
    'DiscountedCashFlow',
    'GordonGrowth',
    'EconomicValueAdded',
    'SectorMultiplesMethod',
    'GrahamNumber',
]
