'''
Sector multiples from peer quotes.

Replaces the placeholder P/E and EV/EBITDA with medians over the largest
same-sector peers found in the quote table.

Usage:
  multiples = sector_multiples_from_quotes(loader.all_quotes(), 'VALE3')
  if multiples is not None:
    method = SectorMultiplesMethod(multiples)
'''

import logging
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from fairvalue.domain.types import SectorMultiples
from fairvalue.normalize.fields import QUOTE_SCHEMA
from fairvalue.normalize.rows import parse_rows
from fairvalue.normalize.tickers import canonical_symbol

logger = logging.getLogger(__name__)

DEFAULT_PEER_LIMIT = 8


def _positive_median(values: pd.Series) -> Optional[float]:
  positive = values[values > 0]
  if positive.empty:
    return None
  return float(positive.median())


def sector_multiples_from_quotes(
    quote_rows: Iterable[Mapping[str, Any]],
    ticker: str,
    limit: int = DEFAULT_PEER_LIMIT,
) -> Optional[SectorMultiples]:
  '''
  Median sector multiples over the ticker's peers.

  Peers share the ticker's sector, have a positive price and exclude the
  ticker itself; the largest `limit` by market cap are used. A multiple with
  no positive peer value keeps its placeholder.

  Args:
    quote_rows: Raw quote rows (all tickers)
    ticker: Security being valued
    limit: Maximum number of peers

  Returns:
    SectorMultiples with source='peers', or None when the ticker has no
    sector or no usable peers
  '''
  quotes = parse_rows(quote_rows, QUOTE_SCHEMA)
  if quotes.empty:
    return None

  symbol = canonical_symbol(ticker)
  symbols = quotes['symbol'].map(canonical_symbol)
  own = quotes[symbols == symbol]
  sectors = [s for s in own['sector'] if s]
  if not sectors:
    logger.debug('%s: no sector, peer multiples unavailable', symbol)
    return None
  sector = sectors[0]

  peers = quotes[(symbols != symbol) & (quotes['sector'] == sector) &
                 (quotes['price'] > 0)]
  peers = peers.drop_duplicates(subset='symbol').sort_values(
      'market_cap', ascending=False, kind='mergesort').head(limit)

  pe = _positive_median(peers['price_earnings'].where(
      peers['price_earnings'] > 0, peers['pl']))
  ev_ebitda = _positive_median(peers['enterprise_to_ebitda'])
  if pe is None and ev_ebitda is None:
    logger.debug('%s: no usable peers in sector %s', symbol, sector)
    return None

  placeholder = SectorMultiples()
  multiples = SectorMultiples(
      pe=pe if pe is not None else placeholder.pe,
      ev_ebitda=ev_ebitda if ev_ebitda is not None else placeholder.ev_ebitda,
      source='peers',
  )
  logger.debug('%s: peer multiples P/E %.2f, EV/EBITDA %.2f from %d peers',
               symbol, multiples.pe, multiples.ev_ebitda, len(peers))
  return multiples
