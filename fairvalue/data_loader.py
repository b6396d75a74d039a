"""
Caching loader for raw source tables.

Reads the quote, statement and dividend tables from a directory of CSV or
Parquet files and hands out per-ticker RawFinancials. Tables are cached so
that batch runs read each file once.

Usage:
  # Single valuation
  result = run_valuation('VALE3', loader=RawDataLoader(LoaderConfig('data')))

  # Batch valuation (tables read once)
  loader = RawDataLoader(LoaderConfig(data_dir=Path('data')))
  for ticker in tickers:
    result = run_valuation(ticker, loader=loader)
"""

from dataclasses import dataclass
from dataclasses import field
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from fairvalue.normalize.normalizer import RawFinancials
from fairvalue.normalize.tickers import canonical_symbol
from fairvalue.normalize.tickers import ticker_root

logger = logging.getLogger(__name__)

QUOTES = 'quotes'
INCOME_STATEMENTS = 'income_statements'
BALANCE_SHEETS = 'balance_sheets'
CASH_FLOWS = 'cash_flows'
DIVIDENDS = 'dividends'

REQUIRED_TABLES = (QUOTES, INCOME_STATEMENTS, BALANCE_SHEETS, CASH_FLOWS)

SUPPORTED_FORMATS = ('csv', 'parquet')


@dataclass
class LoaderConfig:
  """
  Location and layout of the raw tables.

  Attributes:
    data_dir: Directory holding one file per table
    file_format: 'csv' or 'parquet'
    table_names: File stem per table category
  """
  data_dir: Path = Path('data')
  file_format: str = 'csv'
  table_names: dict[str, str] = field(
      default_factory=lambda: {
          QUOTES: 'quotes',
          INCOME_STATEMENTS: 'income_statements',
          BALANCE_SHEETS: 'balance_sheets',
          CASH_FLOWS: 'cash_flows',
          DIVIDENDS: 'dividends',
      })

  def path_for(self, category: str) -> Path:
    stem = self.table_names[category]
    return Path(self.data_dir) / f'{stem}.{self.file_format}'


class RawDataLoader:
  """
  Cached loader of raw source tables.

  Dividends are optional: a missing dividends file yields no rows. Every
  other table must exist.
  """

  def __init__(self, config: Optional[LoaderConfig] = None):
    """
    Initialize data loader.

    Args:
      config: Table locations (default: CSV files under ./data)

    Raises:
      ValueError: If the file format is not supported
    """
    self.config = config or LoaderConfig()
    file_format = self.config.file_format
    if file_format not in SUPPORTED_FORMATS:
      raise ValueError(f"Unsupported file format: '{file_format}'. "
                       f'Available: {list(SUPPORTED_FORMATS)}')
    self._tables: dict[str, pd.DataFrame] = {}

  def load_table(self, category: str) -> pd.DataFrame:
    """
    Load and cache one table.

    Args:
      category: Table category (e.g., 'quotes')

    Returns:
      Raw table as read from disk

    Raises:
      FileNotFoundError: If a required table does not exist
    """
    if category in self._tables:
      return self._tables[category]

    path = self.config.path_for(category)
    if not path.exists():
      if category in REQUIRED_TABLES:
        raise FileNotFoundError(f'{category} table not found: {path}')
      logger.debug('Optional table %s not found at %s', category, path)
      table = pd.DataFrame()
    else:
      reader = getattr(pd, f'read_{self.config.file_format}')
      table = reader(path)
      logger.debug('Loaded %s: %d rows from %s', category, len(table), path)

    self._tables[category] = table
    return table

  def load_raw(self, ticker: str) -> RawFinancials:
    """
    Rows relevant to a ticker from every table.

    Rows are pre-filtered on the share-class root so that the normalizer
    can still fall back from e.g. PETR4 to PETR3.
    """
    root = ticker_root(ticker)
    return RawFinancials(
        quotes=self._rows_for(QUOTES, root),
        income_statements=self._rows_for(INCOME_STATEMENTS, root),
        balance_sheets=self._rows_for(BALANCE_SHEETS, root),
        cash_flows=self._rows_for(CASH_FLOWS, root),
        dividends=self._rows_for(DIVIDENDS, root),
    )

  def all_quotes(self) -> list[dict]:
    """Every quote row, for peer comparisons."""
    return self.load_table(QUOTES).to_dict('records')

  def tickers(self) -> list[str]:
    """Distinct canonical tickers present in the quotes table."""
    symbols = _symbol_column(self.load_table(QUOTES))
    if symbols is None:
      return []
    return sorted({canonical_symbol(s) for s in symbols.dropna()} - {''})

  def clear_cache(self) -> None:
    """Clear all cached tables."""
    self._tables = {}

  def _rows_for(self, category: str, root: str) -> list[dict]:
    table = self.load_table(category)
    symbols = _symbol_column(table)
    if symbols is None or not root:
      return []
    canonical = symbols.fillna('').map(canonical_symbol)
    return table[canonical.str.startswith(root)].to_dict('records')


def _symbol_column(table: pd.DataFrame) -> Optional[pd.Series]:
  """Symbol of each row; several symbol-like columns are coalesced."""
  columns = [
      c for c in table.columns if str(c).lower() in ('symbol', 'ticker')
  ]
  if not columns:
    return None
  return table[columns].bfill(axis=1).iloc[:, 0]
