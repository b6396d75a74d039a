"""
Field resolution tables.

Each source schema maps a canonical column to an ordered list of acceptable
source keys. Keys are matched case-insensitively and the first present,
non-null value wins. Supporting a new data-source layout is a change to
these tables only.
"""

from dataclasses import dataclass
from typing import Tuple

NUMBER = 'number'
TEXT = 'text'
SYMBOL = 'symbol'


@dataclass(frozen=True)
class FieldSpec:
  """Canonical column with its source aliases."""
  name: str
  aliases: Tuple[str, ...]
  kind: str = NUMBER


@dataclass(frozen=True)
class SourceSchema:
  """Field table for one source category."""
  name: str
  fields: Tuple[FieldSpec, ...]

  @property
  def columns(self) -> list[str]:
    return [f.name for f in self.fields]

  def columns_of_kind(self, kind: str) -> list[str]:
    return [f.name for f in self.fields if f.kind == kind]


def _field(name: str, *aliases: str, kind: str = NUMBER) -> FieldSpec:
  return FieldSpec(name=name, aliases=aliases or (name,), kind=kind)


_SYMBOL = _field('symbol', 'symbol', 'ticker', kind=SYMBOL)

QUOTE_SCHEMA = SourceSchema(
    name='quote',
    fields=(
        _SYMBOL,
        _field('short_name', 'short_name', 'shortname', 'name', kind=TEXT),
        _field('long_name', 'long_name', 'longname', 'name', kind=TEXT),
        _field('price', 'price', 'regular_market_price',
               'regularmarketprice'),
        _field('market_cap', 'market_cap', 'marketcap'),
        _field('shares_outstanding', 'shares_outstanding',
               'sharesoutstanding'),
        _field('price_earnings', 'price_earnings', 'pl', 'priceearnings'),
        _field('earnings_per_share', 'earnings_per_share', 'lpa',
               'earningspershare'),
        _field('book_value', 'book_value', 'vpa', 'bookvalue'),
        _field('dividend_yield', 'dividend_yield', 'dividendyield'),
        _field('enterprise_to_ebitda', 'enterprise_to_ebitda',
               'enterprisetoebitda'),
        _field('enterprise_value', 'enterprise_value', 'enterprisevalue'),
        _field('price_to_book', 'price_to_book', 'pvp', 'pricetobook'),
        _field('market_time', 'regular_market_time', 'regularmarkettime',
               'updated_at', kind=TEXT),
        _field('sector', 'sector', kind=TEXT),
        _field('industry', 'industry', 'sub_sector', kind=TEXT),
        _field('pl', 'pl'),
        _field('pvp', 'pvp'),
        _field('lpa', 'lpa'),
        _field('vpa', 'vpa'),
        _field('roe', 'roe'),
        _field('roic', 'roic'),
        _field('net_margin', 'net_margin', 'netmargin'),
        _field('ebitda_margin', 'ebitda_margin', 'ebitdamargin'),
        _field('debt_ebitda', 'debt_ebitda', 'debtebitda'),
        _field('ev_ebit', 'ev_ebit', 'evebit'),
        _field('beta', 'beta_5y', 'beta5y', 'beta'),
        _field('revenue_growth', 'revenue_growth', 'revenuegrowth'),
    ),
)

INCOME_SCHEMA = SourceSchema(
    name='income statement',
    fields=(
        _SYMBOL,
        _field('type', 'type', 'statement_type', 'report_type', kind=TEXT),
        _field('period', 'period', 'fiscal_period', 'fiscal_year', 'year',
               kind=TEXT),
        _field('end_date', 'end_date', 'period_end_date', 'date',
               'report_date', kind=TEXT),
        _field('total_revenue', 'total_revenue', 'revenue', 'totalrevenue'),
        _field('ebit', 'ebit', 'operating_income', 'operatingincome'),
        _field('net_income', 'net_income', 'netincome'),
        _field('interest_expense', 'interest_expense', 'interestexpense'),
        _field('income_tax_expense', 'income_tax_expense',
               'incometaxexpense'),
        _field('income_before_tax', 'income_before_tax', 'incomebeforetax'),
        _field('gross_profit', 'gross_profit', 'grossprofit'),
    ),
)

BALANCE_SCHEMA = SourceSchema(
    name='balance sheet',
    fields=(
        _SYMBOL,
        _field('type', 'type', 'statement_type', kind=TEXT),
        _field('period', 'period', 'fiscal_period', 'fiscal_year', kind=TEXT),
        _field('end_date', 'end_date', 'period_end_date', 'date', kind=TEXT),
        _field('total_assets', 'total_assets', 'totalassets'),
        _field('total_liab', 'total_liab', 'totalliab', 'total_liabilities'),
        _field('cash', 'cash', 'cash_and_cash_equivalents'),
        _field('short_term_investments', 'short_term_investments',
               'shortterminvestments'),
        _field('long_term_debt', 'long_term_debt', 'longtermdebt'),
        _field('short_long_term_debt', 'short_long_term_debt',
               'shortterm_debt', 'shortlongtermdebt'),
        _field('total_current_assets', 'total_current_assets',
               'totalcurrentassets'),
        _field('total_current_liabilities', 'total_current_liabilities',
               'totalcurrentliabilities'),
        _field('total_stockholder_equity', 'total_stockholder_equity',
               'total_stockholders_equity', 'total_equity',
               'totalstockholderequity'),
    ),
)

CASH_FLOW_SCHEMA = SourceSchema(
    name='cash flow',
    fields=(
        _SYMBOL,
        _field('type', 'type', 'statement_type', kind=TEXT),
        _field('period', 'period', 'fiscal_period', 'fiscal_year', kind=TEXT),
        _field('end_date', 'end_date', 'period_end_date', 'date', kind=TEXT),
        _field('operating_cash_flow', 'total_cash_from_operating_activities',
               'operating_cash_flow', 'operatingcashflow'),
        _field('investing_cash_flow',
               'total_cashflows_from_investing_activities',
               'investing_cash_flow'),
        _field('financing_cash_flow', 'total_cash_from_financing_activities',
               'financing_cash_flow'),
        _field('capital_expenditures', 'capital_expenditures', 'capex',
               'capitalexpenditures'),
        _field('depreciation', 'depreciation', 'depreciation_amortization'),
        _field('dividends_paid', 'dividends_paid', 'dividends'),
    ),
)

DIVIDEND_SCHEMA = SourceSchema(
    name='dividends',
    fields=(
        _field('symbol', 'ticker', 'symbol', kind=SYMBOL),
        _field('amount', 'amount', 'value', 'dividend'),
        _field('ex_date', 'ex_date', 'exdate', kind=TEXT),
        _field('payment_date', 'payment_date', 'paymentdate', kind=TEXT),
        _field('dividend_type', 'dividend_type', 'dividendtype', 'type',
               kind=TEXT),
        _field('currency', 'currency', kind=TEXT),
    ),
)

# Categories whose absence blocks snapshot construction, in report order.
REQUIRED_SCHEMAS = (QUOTE_SCHEMA, INCOME_SCHEMA, BALANCE_SCHEMA,
                    CASH_FLOW_SCHEMA)
