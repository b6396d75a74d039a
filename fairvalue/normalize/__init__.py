"""
Data normalization: raw source rows to FinancialSnapshot.

Column aliases live in fields.py as static tables; parsing, ticker matching
and period selection are separate steps combined by build_snapshot().
"""

from fairvalue.normalize.normalizer import RawFinancials
from fairvalue.normalize.normalizer import build_snapshot
from fairvalue.normalize.tickers import canonical_symbol

__all__ = [
    'RawFinancials',
    'build_snapshot',
    'canonical_symbol',
]
