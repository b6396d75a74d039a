from pathlib import Path

import pandas as pd
import pytest

from fairvalue.domain.types import FinancialSnapshot
from fairvalue.domain.types import PricingInputs
from fairvalue.domain.types import ScenarioAssumptions
from fairvalue.normalize.normalizer import RawFinancials


def _vale_quotes() -> list[dict]:
  """Two quotes for the same security; the later one is current."""
  return [
      {
          'symbol': 'vale3.sa',
          'shortName': 'VALE ON',
          'longName': 'Vale S.A.',
          'regularMarketPrice': 55.0,
          'marketCap': 5_500_000_000.0,
          'priceEarnings': 5.5,
          'earningsPerShare': 10.0,
          'sector': 'Basic Materials',
          'regularMarketTime': '2024-05-09T17:00:00Z',
      },
      {
          'Symbol': 'VALE3.SA',
          'shortName': 'VALE ON',
          'longName': 'Vale S.A.',
          'regularMarketPrice': 60.0,
          'marketCap': 6_000_000_000.0,
          'priceEarnings': 6.0,
          'earningsPerShare': 10.0,
          'sector': 'Basic Materials',
          'regularMarketTime': '2024-05-10T17:00:00Z',
      },
  ]


def _vale_income() -> list[dict]:
  return [
      {
          'symbol': 'VALE3',
          'type': 'quarterly',
          'period': '1T2024',
          'end_date': '2024-03-31',
          'totalRevenue': 1_200_000_000.0,
          'ebit': 300_000_000.0,
          'netIncome': 200_000_000.0,
          'interestExpense': -50_000_000.0,
          'incomeTaxExpense': 60_000_000.0,
          'incomeBeforeTax': 260_000_000.0,
          'grossProfit': 500_000_000.0,
      },
      {
          'symbol': 'VALE3',
          'type': 'yearly',
          'period': '2023',
          'end_date': '2023-12-31',
          'totalRevenue': 5_000_000_000.0,
          'ebit': 1_500_000_000.0,
          'netIncome': 1_000_000_000.0,
          'interestExpense': -200_000_000.0,
          'incomeTaxExpense': 300_000_000.0,
          'incomeBeforeTax': 1_300_000_000.0,
          'grossProfit': 2_000_000_000.0,
      },
  ]


def _vale_balance() -> list[dict]:
  return [
      {
          'symbol': 'vale3',
          'type': 'yearly',
          'period': '2022',
          'end_date': '2022-12-31',
          'cash': 100_000_000.0,
          'longTermDebt': 900_000_000.0,
          'totalStockholderEquity': 4_000_000_000.0,
      },
      {
          'symbol': 'vale3',
          'type': 'yearly',
          'period': '2023',
          'end_date': '2023-12-31',
          'cash': 500_000_000.0,
          'shortTermInvestments': 500_000_000.0,
          'longTermDebt': 1_500_000_000.0,
          'shortLongTermDebt': 500_000_000.0,
          'totalCurrentAssets': 3_000_000_000.0,
          'totalCurrentLiabilities': 2_000_000_000.0,
          'totalStockholderEquity': 5_000_000_000.0,
      },
  ]


def _vale_cash_flow() -> list[dict]:
  return [{
      'symbol': 'VALE3.SA',
      'type': 'yearly',
      'period': '2023',
      'end_date': '2023-12-31',
      'operatingCashFlow': 1_400_000_000.0,
      'capitalExpenditures': 400_000_000.0,
      'depreciation': 500_000_000.0,
  }]


def _vale_dividends() -> list[dict]:
  return [
      {
          'ticker': 'VALE3',
          'amount': 1.0,
          'ex_date': '2023-12-01',
          'type': 'JCP',
      },
      {
          'ticker': 'VALE3',
          'amount': 2.0,
          'ex_date': '2024-04-01',
          'type': 'DIVIDENDO',
      },
      {
          'ticker': 'VALE3',
          'amount': 5.0,
          'ex_date': '2022-12-01',
          'type': 'DIVIDENDO',
      },
  ]


@pytest.fixture
def vale_raw() -> RawFinancials:
  """Raw rows for VALE3 with mixed key casing and symbol spellings.

  Base period (yearly 2023):
    shares = 6e9 / 60 = 1e8
    FCF = 1.4e9 - 0.4e9 = 1e9
    debt = 2e9, cash = 1e9, equity = 5e9
  """
  return RawFinancials(
      quotes=_vale_quotes(),
      income_statements=_vale_income(),
      balance_sheets=_vale_balance(),
      cash_flows=_vale_cash_flow(),
      dividends=_vale_dividends(),
  )


@pytest.fixture
def raw_data_dir(tmp_path: Path, vale_raw: RawFinancials) -> Path:
  """CSV tables for VALE3 plus a quote-only PETR4 and a sector peer."""
  quotes = vale_raw.quotes + [
      {
          'symbol': 'PETR4.SA',
          'regularMarketPrice': 38.0,
          'marketCap': 500_000_000_000.0,
          'priceEarnings': 4.0,
          'sector': 'Energy',
      },
      {
          'symbol': 'CMIN3.SA',
          'regularMarketPrice': 6.0,
          'marketCap': 30_000_000_000.0,
          'priceEarnings': 7.0,
          'enterpriseToEbitda': 5.0,
          'sector': 'Basic Materials',
      },
  ]
  tables = {
      'quotes': quotes,
      'income_statements': vale_raw.income_statements,
      'balance_sheets': vale_raw.balance_sheets,
      'cash_flows': vale_raw.cash_flows,
      'dividends': vale_raw.dividends,
  }
  for name, rows in tables.items():
    pd.DataFrame(rows).to_csv(tmp_path / f'{name}.csv', index=False)
  return tmp_path


@pytest.fixture
def make_snapshot():
  """Factory for FinancialSnapshot with consistent defaults.

  Defaults mirror the VALE3 fixture: price 60, 1e8 shares, FCF 1e9,
  debt 2e9, cash 1e9, equity 5e9, EPS 10, BVPS 50.
  """

  def _make(**overrides) -> FinancialSnapshot:
    values = dict(
        ticker='TEST3',
        price=60.0,
        shares_outstanding=100_000_000.0,
        market_cap=6_000_000_000.0,
        equity=5_000_000_000.0,
        total_debt=2_000_000_000.0,
        net_debt=1_000_000_000.0,
        cash=1_000_000_000.0,
        invested_capital=6_000_000_000.0,
        operating_cash_flow=1_400_000_000.0,
        capex=-400_000_000.0,
        free_cash_flow=1_000_000_000.0,
        ebit=1_500_000_000.0,
        depreciation=500_000_000.0,
        ebitda=2_000_000_000.0,
        revenue=5_000_000_000.0,
        net_income=1_000_000_000.0,
        interest_expense=200_000_000.0,
        eps=10.0,
        book_value_per_share=50.0,
        effective_tax_rate=0.34,
    )
    values.update(overrides)
    return FinancialSnapshot(**values)

  return _make


@pytest.fixture
def sample_snapshot(make_snapshot) -> FinancialSnapshot:
  return make_snapshot()


@pytest.fixture
def base_assumptions() -> ScenarioAssumptions:
  """Base scenario: Rf 15%, ERP 5%, beta 1.0, Kd 16%, g 5%."""
  return ScenarioAssumptions(
      risk_free_rate=0.15,
      equity_risk_premium=0.05,
      beta=1.0,
      cost_of_debt=0.16,
      perpetual_growth=0.05,
      projected_revenue_growth=0.05,
  )


@pytest.fixture
def base_inputs() -> PricingInputs:
  """WACC 12%, Ke 20%, g 5% terminal, 5% near-term."""
  return PricingInputs(
      wacc=0.12,
      cost_of_equity=0.20,
      perpetual_growth=0.05,
      revenue_growth=0.05,
  )
