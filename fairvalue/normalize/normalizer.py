'''
Snapshot construction from raw source rows.

build_snapshot() is the only entry point that sees loosely-typed rows. It
resolves the ticker across all categories, picks the base reporting period,
applies documented fallbacks and returns an immutable FinancialSnapshot.

Usage:
  raw = RawFinancials(quotes=[...], income_statements=[...],
                      balance_sheets=[...], cash_flows=[...])
  snapshot = build_snapshot(raw, 'VALE3')
'''

from dataclasses import dataclass, field
import logging
from typing import Any, List, Mapping, Optional, Sequence

import pandas as pd

from fairvalue.domain.constants import DEFAULT_SHARES_OUTSTANDING
from fairvalue.domain.constants import FALLBACK_PRICE
from fairvalue.domain.constants import FLAG_NO_ANNUAL_PERIOD
from fairvalue.domain.constants import FLAG_PRICE_FALLBACK
from fairvalue.domain.constants import FLAG_SHARES_FALLBACK
from fairvalue.domain.constants import STATUTORY_TAX_RATE
from fairvalue.domain.errors import MissingDataError
from fairvalue.domain.types import DividendRecord
from fairvalue.domain.types import FinancialSnapshot
from fairvalue.normalize.fields import BALANCE_SCHEMA
from fairvalue.normalize.fields import CASH_FLOW_SCHEMA
from fairvalue.normalize.fields import DIVIDEND_SCHEMA
from fairvalue.normalize.fields import INCOME_SCHEMA
from fairvalue.normalize.fields import QUOTE_SCHEMA
from fairvalue.normalize.metrics import derive_ratios
from fairvalue.normalize.metrics import normalize_percent
from fairvalue.normalize.metrics import positive_or_none
from fairvalue.normalize.metrics import ratio
from fairvalue.normalize.periods import YEARLY
from fairvalue.normalize.periods import base_row
from fairvalue.normalize.periods import parse_dates
from fairvalue.normalize.periods import with_cadence
from fairvalue.normalize.rows import parse_rows
from fairvalue.normalize.tickers import canonical_symbol
from fairvalue.normalize.tickers import match_rows
from fairvalue.normalize.tickers import share_class

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]

# Window for trailing dividends, counted back from the latest ex-date.
_TRAILING_DIVIDEND_DAYS = 365


@dataclass
class RawFinancials:
  '''
  Raw row sets for one or more securities, as fetched from the source.

  Attributes:
    quotes: Quote / indicator rows
    income_statements: Income-statement rows
    balance_sheets: Balance-sheet rows
    cash_flows: Cash-flow statement rows
    dividends: Dividend history rows (optional)
  '''
  quotes: Sequence[Row] = field(default_factory=list)
  income_statements: Sequence[Row] = field(default_factory=list)
  balance_sheets: Sequence[Row] = field(default_factory=list)
  cash_flows: Sequence[Row] = field(default_factory=list)
  dividends: Sequence[Row] = field(default_factory=list)


def build_snapshot(raw: RawFinancials, ticker: str) -> FinancialSnapshot:
  '''
  Normalize raw rows into a FinancialSnapshot.

  Args:
    raw: Raw row sets (may contain other tickers)
    ticker: Requested ticker, any case, with or without '.SA'

  Returns:
    FinancialSnapshot for the base reporting period

  Raises:
    MissingDataError: If quote, income statement, balance sheet or cash
      flow rows are absent for the ticker
  '''
  symbol = canonical_symbol(ticker)

  quotes = match_rows(parse_rows(raw.quotes, QUOTE_SCHEMA), symbol)
  income = match_rows(parse_rows(raw.income_statements, INCOME_SCHEMA), symbol)
  balance = match_rows(parse_rows(raw.balance_sheets, BALANCE_SCHEMA), symbol)
  cash_flow = match_rows(parse_rows(raw.cash_flows, CASH_FLOW_SCHEMA), symbol)

  missing = [
      schema.name for schema, frame in (
          (QUOTE_SCHEMA, quotes),
          (INCOME_SCHEMA, income),
          (BALANCE_SCHEMA, balance),
          (CASH_FLOW_SCHEMA, cash_flow),
      ) if frame.empty
  ]
  if missing:
    raise MissingDataError(symbol, missing)

  dividends = match_rows(parse_rows(raw.dividends, DIVIDEND_SCHEMA), symbol)

  quote = _latest_quote(quotes)
  base_income = base_row(with_cadence(income))
  base_date = base_income['end']
  base_balance = base_row(with_cadence(balance), align_to=base_date)
  base_cash_flow = base_row(with_cadence(cash_flow), align_to=base_date)

  flags: List[str] = []
  if base_income['cadence'] != YEARLY:
    logger.debug('%s: no annual income statement, using latest %s row',
                 symbol, base_income['cadence'])
    flags.append(FLAG_NO_ANNUAL_PERIOD)

  return _assemble(
      symbol=symbol,
      quote=quote,
      income=base_income,
      balance=base_balance,
      cash_flow=base_cash_flow,
      dividends=_dividend_records(dividends),
      flags=flags,
  )


def _latest_quote(quotes: pd.DataFrame) -> pd.Series:
  '''Most recent quote by market timestamp; input order breaks ties.'''
  timed = quotes.assign(market_ts=parse_dates(quotes['market_time']))
  return timed.sort_values('market_ts',
                           ascending=False,
                           na_position='last',
                           kind='mergesort').iloc[0]


def _dividend_records(dividends: pd.DataFrame) -> tuple[DividendRecord, ...]:
  if dividends.empty:
    return ()
  frame = dividends.assign(
      ex_ts=parse_dates(dividends['ex_date']),
      pay_ts=parse_dates(dividends['payment_date']),
  ).sort_values('ex_ts', ascending=False, na_position='last', kind='mergesort')

  return tuple(
      DividendRecord(
          amount=float(row.amount),
          ex_date=None if pd.isna(row.ex_ts) else row.ex_ts,
          payment_date=None if pd.isna(row.pay_ts) else row.pay_ts,
          dividend_type=row.dividend_type,
          currency=row.currency or 'BRL',
      ) for row in frame.itertuples(index=False))


def trailing_dividends(records: Sequence[DividendRecord]) -> float:
  '''Sum of dividends with ex-date within a year of the latest ex-date.'''
  dated = [r for r in records if r.ex_date is not None]
  if not dated:
    return 0.0
  latest = max(r.ex_date for r in dated)
  cutoff = latest - pd.Timedelta(days=_TRAILING_DIVIDEND_DAYS)
  return float(sum(r.amount for r in dated if r.ex_date > cutoff))


def _resolve_shares(quote: pd.Series, price: float,
                    net_income: float) -> Optional[float]:
  '''Shares from market cap, reported count, or earnings / EPS.'''
  market_cap = float(quote['market_cap'])
  if market_cap > 0 and price > 0:
    return market_cap / price
  if quote['shares_outstanding'] > 0:
    return float(quote['shares_outstanding'])
  eps = float(quote['earnings_per_share'])
  if net_income and eps:
    implied = net_income / eps
    if implied > 0:
      return implied
  return None


def _effective_tax_rate(income: pd.Series) -> float:
  pretax = float(income['income_before_tax'])
  tax = float(income['income_tax_expense'])
  rate = ratio(abs(tax), pretax)
  if pretax > 0 and 0 < rate <= 1:
    return rate
  return STATUTORY_TAX_RATE


def _assemble(
    *,
    symbol: str,
    quote: pd.Series,
    income: pd.Series,
    balance: pd.Series,
    cash_flow: pd.Series,
    dividends: tuple[DividendRecord, ...],
    flags: List[str],
) -> FinancialSnapshot:
  '''Combine base-period rows into the snapshot.'''
  price = float(quote['price'])
  if price <= 0:
    logger.warning('%s: quote has no price, using synthetic %.2f', symbol,
                   FALLBACK_PRICE)
    price = FALLBACK_PRICE
    flags.append(FLAG_PRICE_FALLBACK)

  net_income = float(income['net_income'])
  shares = _resolve_shares(quote, price, net_income)
  if shares is None:
    logger.warning('%s: shares outstanding undeterminable, using %.0f',
                   symbol, DEFAULT_SHARES_OUTSTANDING)
    shares = DEFAULT_SHARES_OUTSTANDING
    flags.append(FLAG_SHARES_FALLBACK)

  market_cap = float(quote['market_cap']) or price * shares
  gross_debt = float(balance['long_term_debt'] +
                     balance['short_long_term_debt'])
  cash = float(balance['cash'] + balance['short_term_investments'])
  net_debt = gross_debt - cash

  ebit = float(income['ebit'])
  depreciation = float(cash_flow['depreciation'])
  ebitda = ebit + depreciation

  equity = float(balance['total_stockholder_equity'])
  if not equity and quote['book_value']:
    equity = float(quote['book_value']) * shares
  invested_capital = equity + net_debt

  operating_cash_flow = float(cash_flow['operating_cash_flow'])
  capex = -abs(float(cash_flow['capital_expenditures']))
  revenue = float(income['total_revenue'])
  gross_profit = float(income['gross_profit'])

  eps = float(quote['lpa'] or quote['earnings_per_share'] or
              net_income / shares)

  ratios = derive_ratios(
      quote,
      price=price,
      market_cap=market_cap,
      net_income=net_income,
      equity=equity,
      ebit=ebit,
      ebitda=ebitda,
      revenue=revenue,
      gross_profit=gross_profit,
      gross_debt=gross_debt,
      net_debt=net_debt,
      current_assets=float(balance['total_current_assets']),
      current_liabilities=float(balance['total_current_liabilities']),
      trailing_dividends=trailing_dividends(dividends),
  )

  period_end = income['end']
  return FinancialSnapshot(
      ticker=symbol,
      name=quote['long_name'] or quote['short_name'] or symbol,
      sector=quote['sector'],
      share_class=share_class(symbol),
      price=price,
      shares_outstanding=shares,
      market_cap=market_cap,
      equity=equity,
      total_debt=gross_debt,
      net_debt=net_debt,
      cash=cash,
      invested_capital=invested_capital,
      operating_cash_flow=operating_cash_flow,
      capex=capex,
      free_cash_flow=operating_cash_flow + capex,
      ebit=ebit,
      depreciation=depreciation,
      ebitda=ebitda,
      revenue=revenue,
      gross_profit=gross_profit,
      net_income=net_income,
      interest_expense=abs(float(income['interest_expense'])),
      eps=eps,
      book_value_per_share=equity / shares,
      effective_tax_rate=_effective_tax_rate(income),
      beta=positive_or_none(float(quote['beta'])),
      revenue_growth=normalize_percent(float(quote['revenue_growth'])),
      period_end=None if pd.isna(period_end) else period_end,
      ratios=ratios,
      dividends=dividends,
      quality_flags=tuple(flags),
  )
