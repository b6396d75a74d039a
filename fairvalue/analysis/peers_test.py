import pytest

from fairvalue.analysis.peers import sector_multiples_from_quotes

QUOTES = [
    {
        'symbol': 'VALE3.SA',
        'regularMarketPrice': 60.0,
        'marketCap': 6e9,
        'priceEarnings': 6.0,
        'sector': 'Basic Materials',
    },
    {
        'symbol': 'CMIN3.SA',
        'regularMarketPrice': 6.0,
        'marketCap': 3e10,
        'priceEarnings': 7.0,
        'enterpriseToEbitda': 5.0,
        'sector': 'Basic Materials',
    },
    {
        'symbol': 'GGBR4.SA',
        'regularMarketPrice': 20.0,
        'marketCap': 4e10,
        'priceEarnings': 9.0,
        'enterpriseToEbitda': 4.0,
        'sector': 'Basic Materials',
    },
    {
        'symbol': 'USIM5.SA',
        'regularMarketPrice': 7.0,
        'marketCap': 1e10,
        'priceEarnings': -3.0,
        'sector': 'Basic Materials',
    },
    {
        'symbol': 'GOAU4.SA',
        'regularMarketPrice': 0.0,
        'marketCap': 9e10,
        'priceEarnings': 50.0,
        'sector': 'Basic Materials',
    },
    {
        'symbol': 'PETR4.SA',
        'regularMarketPrice': 38.0,
        'marketCap': 5e11,
        'priceEarnings': 4.0,
        'enterpriseToEbitda': 3.0,
        'sector': 'Energy',
    },
]


class TestSectorMultiplesFromQuotes:
  """Tests for peer-derived sector multiples."""

  def test_medians_over_sector_peers(self):
    """Median of positive peer multiples; other sectors ignored.

    Peers: CMIN3 (P/E 7, EV/EBITDA 5), GGBR4 (9, 4), USIM5 (-3, none)
    GOAU4 has no price and is excluded.
    P/E median of [7, 9] = 8, EV/EBITDA median of [5, 4] = 4.5
    """
    multiples = sector_multiples_from_quotes(QUOTES, 'VALE3')

    assert multiples.pe == pytest.approx(8.0)
    assert multiples.ev_ebitda == pytest.approx(4.5)
    assert multiples.source == 'peers'
    assert not multiples.is_placeholder

  def test_limit_keeps_largest(self):
    """Only the largest peers by market cap are used."""
    multiples = sector_multiples_from_quotes(QUOTES, 'VALE3', limit=1)

    assert multiples.pe == 9.0
    assert multiples.ev_ebitda == 4.0

  def test_missing_component_uses_placeholder(self):
    """A multiple no peer reports keeps its placeholder."""
    quotes = [QUOTES[0], QUOTES[3], {**QUOTES[1], 'enterpriseToEbitda': None}]

    multiples = sector_multiples_from_quotes(quotes, 'VALE3')

    assert multiples.pe == 7.0
    assert multiples.ev_ebitda == 6.0

  def test_no_peers(self):
    """A sector with only the ticker itself gives None."""
    assert sector_multiples_from_quotes(QUOTES, 'PETR4') is None

  def test_unknown_ticker(self):
    """No quote for the ticker gives None."""
    assert sector_multiples_from_quotes(QUOTES, 'ITUB4') is None

  def test_empty(self):
    assert sector_multiples_from_quotes([], 'VALE3') is None
