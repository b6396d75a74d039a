"""Exceptions raised by the fair-value engine."""

from typing import Sequence


class MissingDataError(ValueError):
  """
  Raised when a required statement category has no rows for a ticker.

  Attributes:
    ticker: Resolved ticker symbol
    missing: Names of the absent categories, in canonical order
  """

  def __init__(self, ticker: str, missing: Sequence[str]):
    self.ticker = ticker
    self.missing = list(missing)
    super().__init__(
        f'Incomplete data for {ticker} (missing: {", ".join(self.missing)})')
