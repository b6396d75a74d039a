"""
Ticker symbol handling.

Source tables key rows loosely: 'VALE3', 'vale3', 'VALE3.SA' and 'vale3.sa'
all denote the same security. Matching is done on a canonical form (upper
case, exchange suffix removed), with a fallback to the share-class root so
that e.g. PETR4 can be priced from rows keyed PETR3.
"""

import re

import pandas as pd

EXCHANGE_SUFFIX = '.SA'

# Trailing share-class digits and the fractional-market 'F' suffix.
_SHARE_CLASS_RE = re.compile(r'[0-9F]+$')


def canonical_symbol(symbol: str) -> str:
  """Upper-case symbol without exchange suffix."""
  text = str(symbol or '').strip().upper()
  if text.endswith(EXCHANGE_SUFFIX):
    text = text[:-len(EXCHANGE_SUFFIX)]
  return text


def ticker_root(ticker: str) -> str:
  """Symbol with the share-class suffix stripped ('PETR4' -> 'PETR')."""
  return _SHARE_CLASS_RE.sub('', canonical_symbol(ticker))


def share_class(ticker: str) -> str:
  """Share class label from the ticker suffix (UNT, PN or ON)."""
  symbol = canonical_symbol(ticker)
  if symbol.endswith('11'):
    return 'UNT'
  if symbol.endswith('4'):
    return 'PN'
  return 'ON'


def match_rows(frame: pd.DataFrame,
               ticker: str,
               column: str = 'symbol') -> pd.DataFrame:
  """
  Select the rows belonging to a ticker.

  Exact canonical match first; if none, prefix match on the share-class
  root.

  Args:
    frame: Parsed rows with a symbol column
    ticker: Ticker as requested by the caller
    column: Name of the symbol column

  Returns:
    Matching rows (possibly empty), in original order
  """
  if frame.empty:
    return frame

  target = canonical_symbol(ticker)
  symbols = frame[column].map(canonical_symbol)

  exact = frame[symbols == target]
  if not exact.empty:
    return exact

  root = ticker_root(target)
  if not root:
    return frame.iloc[0:0]
  return frame[symbols.map(lambda s: s.startswith(root))]
