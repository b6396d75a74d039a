import pytest

from fairvalue.domain.types import SectorMultiples
from fairvalue.methods.multiples import SectorMultiplesMethod


class TestSectorMultiplesMethod:
  """Tests for SectorMultiplesMethod."""

  def test_placeholder_multiples(self, sample_snapshot, base_inputs):
    """Placeholder 8x P/E and 6x EV/EBITDA.

    Manual calculation:
    By P/E: 1e9 * 8 / 1e8 = 80
    By EV: (1.5e9 * 6 - 2e9 + 1e9) / 1e8 = 80
    Mean: 80
    """
    result = SectorMultiplesMethod().compute(sample_snapshot, base_inputs)

    assert result.value == pytest.approx(80.0)
    assert 'Multiples source: placeholder' in result.trace.steps

  def test_custom_multiples(self, sample_snapshot, base_inputs):
    """By P/E 100, by EV (7.5e9 - 1e9) / 1e8 = 65, mean 82.5."""
    multiples = SectorMultiples(pe=10.0, ev_ebitda=5.0, source='peers')

    result = SectorMultiplesMethod(multiples).compute(sample_snapshot,
                                                      base_inputs)

    assert result.value == pytest.approx(82.5)

  def test_negative_floored(self, make_snapshot, base_inputs):
    """Losses and heavy debt floor at 0."""
    snapshot = make_snapshot(net_income=-5_000_000_000.0,
                             ebit=-1_000_000_000.0)

    result = SectorMultiplesMethod().compute(snapshot, base_inputs)

    assert result.value == 0.0
    assert result.trace.degenerate == 'negative_value'
