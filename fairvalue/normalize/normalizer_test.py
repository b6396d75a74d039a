import logging

import pandas as pd
import pytest

from fairvalue.domain.errors import MissingDataError
from fairvalue.normalize.normalizer import RawFinancials
from fairvalue.normalize.normalizer import build_snapshot
from fairvalue.normalize.normalizer import trailing_dividends


def _minimal_raw(symbol: str = 'ABCD3', quote=None, income_type='yearly'):
  """One row per category with only the essentials."""
  return RawFinancials(
      quotes=[quote or {'symbol': symbol, 'price': 20.0,
                        'market_cap': 2_000_000.0}],
      income_statements=[{
          'symbol': symbol,
          'type': income_type,
          'period': '2023' if income_type == 'yearly' else '4T2023',
          'end_date': '2023-12-31',
          'net_income': 100_000.0,
          'ebit': 150_000.0,
      }],
      balance_sheets=[{
          'symbol': symbol,
          'type': 'yearly',
          'end_date': '2023-12-31',
          'total_stockholder_equity': 1_000_000.0,
      }],
      cash_flows=[{
          'symbol': symbol,
          'type': 'yearly',
          'end_date': '2023-12-31',
          'operating_cash_flow': 120_000.0,
          'capital_expenditures': -20_000.0,
      }],
  )


class TestBuildSnapshot:
  """Tests for build_snapshot on the VALE3 fixture."""

  def test_resolves_ticker_variants(self, vale_raw):
    """Rows keyed 'vale3.sa', 'VALE3.SA' and 'vale3' all match."""
    snapshot = build_snapshot(vale_raw, 'vale3.SA')

    assert snapshot.ticker == 'VALE3'
    assert snapshot.name == 'Vale S.A.'
    assert snapshot.sector == 'Basic Materials'
    assert snapshot.share_class == 'ON'

  def test_latest_quote_used(self, vale_raw):
    """The quote with the latest market time wins."""
    snapshot = build_snapshot(vale_raw, 'VALE3')

    assert snapshot.price == 60.0
    assert snapshot.market_cap == 6_000_000_000.0
    assert snapshot.shares_outstanding == pytest.approx(100_000_000.0)

  def test_yearly_base_period(self, vale_raw):
    """Yearly 2023 statements are used, not the newer quarter."""
    snapshot = build_snapshot(vale_raw, 'VALE3')

    assert snapshot.revenue == 5_000_000_000.0
    assert snapshot.net_income == 1_000_000_000.0
    assert snapshot.period_end == pd.Timestamp('2023-12-31', tz='UTC')
    assert 'no_annual_period' not in snapshot.quality_flags

  def test_derived_amounts(self, vale_raw):
    """Debt, cash, FCF and per-share figures are derived consistently."""
    snapshot = build_snapshot(vale_raw, 'VALE3')

    assert snapshot.total_debt == 2_000_000_000.0
    assert snapshot.cash == 1_000_000_000.0
    assert snapshot.net_debt == 1_000_000_000.0
    assert snapshot.invested_capital == 6_000_000_000.0
    assert snapshot.capex == -400_000_000.0
    assert snapshot.free_cash_flow == 1_000_000_000.0
    assert snapshot.ebitda == 2_000_000_000.0
    assert snapshot.interest_expense == 200_000_000.0
    assert snapshot.eps == 10.0
    assert snapshot.book_value_per_share == pytest.approx(50.0)
    assert snapshot.effective_tax_rate == pytest.approx(0.3 / 1.3)

  def test_ratios(self, vale_raw):
    """Quote ratios are preferred; the rest are derived."""
    ratios = build_snapshot(vale_raw, 'VALE3').ratios

    assert ratios.pe == 6.0
    assert ratios.roe == pytest.approx(0.2)
    assert ratios.ev_ebitda == pytest.approx(3.5)
    assert ratios.current_liquidity == pytest.approx(1.5)
    assert ratios.debt_equity == pytest.approx(0.4)
    assert ratios.dividend_yield == pytest.approx(3.0 / 60.0)

  def test_dividends_newest_first(self, vale_raw):
    """Dividend records are ordered by ex-date, newest first."""
    snapshot = build_snapshot(vale_raw, 'VALE3')

    assert [d.amount for d in snapshot.dividends] == [2.0, 1.0, 5.0]
    assert snapshot.dividends[0].currency == 'BRL'

  def test_deterministic(self, vale_raw):
    """Same rows give identical snapshots."""
    assert build_snapshot(vale_raw, 'VALE3') == build_snapshot(
        vale_raw, 'VALE3')

  def test_share_class_root_fallback(self, vale_raw):
    """Another class of the same issuer is priced from VALE3 rows."""
    snapshot = build_snapshot(vale_raw, 'VALE5')

    assert snapshot.ticker == 'VALE5'
    assert snapshot.price == 60.0


class TestMissingData:
  """Tests for MissingDataError reporting."""

  def test_names_missing_category(self, vale_raw):
    """A single absent category is named."""
    vale_raw.balance_sheets = []

    with pytest.raises(MissingDataError) as exc_info:
      build_snapshot(vale_raw, 'VALE3')

    assert exc_info.value.missing == ['balance sheet']
    assert exc_info.value.ticker == 'VALE3'

  def test_unknown_ticker(self, vale_raw):
    """An unknown ticker lacks every category."""
    with pytest.raises(MissingDataError) as exc_info:
      build_snapshot(vale_raw, 'ITUB4')

    assert exc_info.value.missing == [
        'quote', 'income statement', 'balance sheet', 'cash flow'
    ]


class TestFallbacks:
  """Tests for documented fallbacks and their flags."""

  def test_minimal_rows(self):
    """Shares come from market cap / price."""
    snapshot = build_snapshot(_minimal_raw(), 'ABCD3')

    assert snapshot.shares_outstanding == pytest.approx(100_000.0)
    assert snapshot.capex == -20_000.0
    assert snapshot.free_cash_flow == 100_000.0
    assert snapshot.quality_flags == ()

  def test_shares_fallback(self, caplog):
    """Undeterminable shares use the synthetic count and are flagged."""
    raw = _minimal_raw(quote={'symbol': 'ABCD3', 'price': 20.0})

    with caplog.at_level(logging.WARNING):
      snapshot = build_snapshot(raw, 'ABCD3')

    assert snapshot.shares_outstanding == 1_000_000.0
    assert snapshot.has_flag('shares_fallback')
    assert 'shares outstanding undeterminable' in caplog.text

  def test_price_fallback(self):
    """Missing price uses 10.0 and is flagged."""
    raw = _minimal_raw(quote={'symbol': 'ABCD3', 'market_cap': 1_000_000.0})

    snapshot = build_snapshot(raw, 'ABCD3')

    assert snapshot.price == 10.0
    assert snapshot.has_flag('price_fallback')
    assert snapshot.shares_outstanding == pytest.approx(100_000.0)

  def test_no_annual_period(self):
    """Only quarterly statements flag the snapshot."""
    snapshot = build_snapshot(_minimal_raw(income_type='quarterly'), 'ABCD3')

    assert snapshot.has_flag('no_annual_period')
    assert snapshot.net_income == 100_000.0

  def test_equity_from_book_value(self):
    """Missing equity is rebuilt from book value per share."""
    raw = _minimal_raw(quote={
        'symbol': 'ABCD3',
        'price': 20.0,
        'market_cap': 2_000_000.0,
        'book_value': 12.0,
    })
    raw.balance_sheets = [{'symbol': 'ABCD3', 'type': 'yearly', 'cash': 1.0}]

    snapshot = build_snapshot(raw, 'ABCD3')

    assert snapshot.equity == pytest.approx(1_200_000.0)
    assert snapshot.book_value_per_share == pytest.approx(12.0)


class TestTrailingDividends:
  """Tests for trailing_dividends."""

  def test_empty(self):
    assert trailing_dividends(()) == 0.0
