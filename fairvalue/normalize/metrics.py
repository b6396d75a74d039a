'''
Secondary metrics derived from statement data.

The quote source usually carries ready-made ratios. When a ratio is absent
(zero after coercion) it is computed from the base-period statements. Every
division is guarded: a non-positive denominator yields 0.
'''

import math
from typing import Optional

import pandas as pd

from fairvalue.domain.constants import STATUTORY_TAX_RATE
from fairvalue.domain.types import MarketRatios


def ratio(numerator: float, denominator: float) -> float:
  '''numerator / denominator, or 0 when the denominator is not positive.'''
  if denominator <= 0:
    return 0.0
  return numerator / denominator


def normalize_percent(value: float) -> Optional[float]:
  '''
  Interpret a rate that may be expressed in percent.

  Magnitudes above 2 are taken as percentages (8.5 -> 0.085). Zero and
  non-finite values mean "not supplied".
  '''
  if not math.isfinite(value) or value == 0:
    return None
  return value / 100 if abs(value) > 2 else value


def positive_or_none(value: float) -> Optional[float]:
  if math.isfinite(value) and value > 0:
    return value
  return None


def _quote_percent(quote: pd.Series, column: str) -> float:
  '''Quote-supplied percentage as a fraction (0 when absent).'''
  return float(quote[column]) / 100


def derive_ratios(
    quote: pd.Series,
    *,
    price: float,
    market_cap: float,
    net_income: float,
    equity: float,
    ebit: float,
    ebitda: float,
    revenue: float,
    gross_profit: float,
    gross_debt: float,
    net_debt: float,
    current_assets: float,
    current_liabilities: float,
    trailing_dividends: float,
) -> MarketRatios:
  '''
  Build the ratio block of a snapshot.

  Args:
    quote: Parsed quote row
    price: Resolved price
    market_cap: Resolved market capitalization
    (remaining): Base-period statement values

  Returns:
    MarketRatios with quote values preferred over derived ones
  '''
  invested_capital = equity + net_debt
  enterprise_value = market_cap + net_debt

  pe = (quote['pl'] or quote['price_earnings'] or
        (market_cap / net_income if net_income > 0 else 0.0))
  pb = quote['pvp'] or quote['price_to_book'] or ratio(market_cap, equity)

  if quote['roe']:
    roe = _quote_percent(quote, 'roe')
  else:
    roe = ratio(net_income, equity)

  if quote['roic']:
    roic = _quote_percent(quote, 'roic')
  else:
    roic = ratio(ebit * (1 - STATUTORY_TAX_RATE), invested_capital)

  if quote['net_margin']:
    net_margin = _quote_percent(quote, 'net_margin')
  else:
    net_margin = ratio(net_income, revenue)

  if quote['ebitda_margin']:
    ebitda_margin = _quote_percent(quote, 'ebitda_margin')
  else:
    ebitda_margin = ratio(ebitda, revenue)

  ev_ebitda = (quote['enterprise_to_ebitda'] or
               ratio(enterprise_value, ebitda))
  ev_ebit = quote['ev_ebit'] or ratio(enterprise_value, ebit)
  debt_ebitda = quote['debt_ebitda'] or ratio(net_debt, ebitda)

  if quote['dividend_yield']:
    dividend_yield = _quote_percent(quote, 'dividend_yield')
  else:
    dividend_yield = ratio(trailing_dividends, price)

  return MarketRatios(
      pe=float(pe),
      pb=float(pb),
      roe=roe,
      roic=roic,
      net_margin=net_margin,
      ebitda_margin=ebitda_margin,
      ev_ebitda=float(ev_ebitda),
      ev_ebit=float(ev_ebit),
      debt_ebitda=float(debt_ebitda),
      gross_margin=ratio(gross_profit, revenue),
      ebit_margin=ratio(ebit, revenue),
      price_ebit=ratio(market_cap, ebit),
      price_sales=ratio(market_cap, revenue),
      current_liquidity=ratio(current_assets, current_liabilities),
      debt_equity=ratio(gross_debt, equity),
      dividend_yield=dividend_yield,
  )
