from dataclasses import replace

import pytest

from fairvalue.engine.dcf import compute_fair_value
from fairvalue.methods.dcf import DiscountedCashFlow


class TestDiscountedCashFlow:
  """Tests for the DCF valuation method."""

  def test_matches_engine(self, sample_snapshot, base_inputs):
    """Method value equals the engine's fair value."""
    expected = compute_fair_value(fcf0=1e9,
                                  shares=1e8,
                                  cash=1e9,
                                  debt=2e9,
                                  growth_rate=0.05,
                                  g_terminal=0.05,
                                  discount_rate=0.12)

    result = DiscountedCashFlow().compute(sample_snapshot, base_inputs)

    assert result.value == pytest.approx(expected.fair_value)
    assert result.trace.inputs['wacc'] == 0.12
    assert len(result.trace.steps) == 5

  @pytest.mark.parametrize('wacc', [0.05, 0.04])
  def test_wacc_not_above_growth(self, sample_snapshot, base_inputs, wacc):
    """WACC <= g is degenerate."""
    inputs = replace(base_inputs, wacc=wacc)

    result = DiscountedCashFlow().compute(sample_snapshot, inputs)

    assert result.value == 0.0
    assert result.trace.degenerate == 'wacc_not_above_growth'

  def test_negative_equity_floored(self, make_snapshot, base_inputs):
    """Debt above enterprise value floors at 0."""
    snapshot = make_snapshot(total_debt=1e12)

    result = DiscountedCashFlow().compute(snapshot, base_inputs)

    assert result.value == 0.0
    assert result.trace.degenerate == 'negative_value'

  def test_horizon(self, sample_snapshot, base_inputs):
    """A longer explicit horizon changes the value.

    Revenue growth differs from perpetual growth; when they are equal the
    horizon drops out of the model.
    """
    inputs = replace(base_inputs, revenue_growth=0.10)

    five = DiscountedCashFlow().compute(sample_snapshot, inputs)
    ten = DiscountedCashFlow(n_years=10).compute(sample_snapshot, inputs)

    assert ten.value > five.value
