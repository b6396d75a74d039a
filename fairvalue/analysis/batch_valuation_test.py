import logging
from unittest import mock

import pytest

from fairvalue.analysis.batch_valuation import _load_tickers_from_file
from fairvalue.analysis.batch_valuation import batch_valuation
from fairvalue.data_loader import LoaderConfig
from fairvalue.data_loader import RawDataLoader
from fairvalue.scenarios.config import ValuationConfig


class TestBatchValuation:
  """Tests for batch_valuation."""

  def test_skips_missing_data(self, raw_data_dir, caplog):
    """Tickers without statements are logged and skipped."""
    loader = RawDataLoader(LoaderConfig(data_dir=raw_data_dir))

    with caplog.at_level(logging.WARNING):
      df = batch_valuation(['VALE3', 'PETR4'],
                           config=ValuationConfig.default(),
                           loader=loader)

    assert df['ticker'].tolist() == ['VALE3']
    assert df.loc[0, 'scenario'] == 'default'
    assert df.loc[0, 'weighted_fair_value'] > 0
    assert 'dcf_fair_value' in df.columns
    assert 'Skipping PETR4' in caplog.text

  def test_skips_unusable(self):
    """Non-positive consensus is skipped."""
    unusable = mock.MagicMock(is_usable=False, weighted_fair_value=0.0)

    with mock.patch('fairvalue.analysis.batch_valuation.run_valuation',
                    return_value=unusable):
      with pytest.raises(ValueError, match='No successful results'):
        batch_valuation(['VALE3'], config=ValuationConfig.default())

  def test_no_results(self, raw_data_dir):
    """No valued ticker raises ValueError."""
    loader = RawDataLoader(LoaderConfig(data_dir=raw_data_dir))

    with pytest.raises(ValueError, match='No successful results'):
      batch_valuation(['PETR4', 'ITUB4'],
                      config=ValuationConfig.default(),
                      loader=loader)

  def test_scenarios_differ(self, raw_data_dir):
    """Bull and bear runs give different consensus values."""
    loader = RawDataLoader(LoaderConfig(data_dir=raw_data_dir))

    bull = batch_valuation(['VALE3'], config=ValuationConfig.bull(),
                           loader=loader)
    bear = batch_valuation(['VALE3'], config=ValuationConfig.bear(),
                           loader=loader)

    assert (bull.loc[0, 'weighted_fair_value'] !=
            bear.loc[0, 'weighted_fair_value'])


class TestLoadTickersFromFile:

  def test_comments_and_blanks(self, tmp_path):
    """Blank lines and comments are ignored."""
    path = tmp_path / 'tickers.txt'
    path.write_text('# IBOV\nVALE3\n\nPETR4\n', encoding='utf-8')

    assert _load_tickers_from_file(path) == ['VALE3', 'PETR4']
