from dataclasses import replace

import pytest

from fairvalue.engine.sensitivity import SensitivityGridBuilder
from fairvalue.engine.sensitivity import grid_to_frame
from fairvalue.methods.dcf import DiscountedCashFlow


class TestSensitivityGridBuilder:
  """Tests for the WACC x growth grid."""

  def test_shape_and_ordering(self, sample_snapshot, base_inputs):
    """5x5 grid, WACC ascending by row, growth ascending by column."""
    grid = SensitivityGridBuilder(sample_snapshot, base_inputs).build()

    assert len(grid) == 5
    assert all(len(row) == 5 for row in grid)
    assert [row[0].wacc for row in grid] == pytest.approx(
        [0.11, 0.115, 0.12, 0.125, 0.13])
    assert [cell.growth for cell in grid[0]] == pytest.approx(
        [0.04, 0.045, 0.05, 0.055, 0.06])

  def test_centre_equals_base_dcf(self, sample_snapshot, base_inputs):
    """The centre cell reproduces the base-case DCF exactly."""
    grid = SensitivityGridBuilder(sample_snapshot, base_inputs).build()
    base = DiscountedCashFlow().compute(sample_snapshot, base_inputs)

    assert grid[2][2].fair_value == base.value

  def test_monotonic(self, sample_snapshot, base_inputs):
    """Value falls with WACC and rises with perpetual growth."""
    grid = SensitivityGridBuilder(sample_snapshot, base_inputs).build()

    assert grid[0][2].fair_value > grid[2][2].fair_value > grid[4][2].fair_value
    assert grid[2][0].fair_value < grid[2][2].fair_value < grid[2][4].fair_value

  def test_degenerate_cells_zero(self, sample_snapshot, base_inputs):
    """Cells where WACC <= growth are 0."""
    inputs = replace(base_inputs, wacc=0.06)

    grid = SensitivityGridBuilder(sample_snapshot, inputs).build()

    assert grid[0][4].fair_value == 0.0
    assert all(cell.fair_value >= 0 for row in grid for cell in row)

  def test_custom_steps(self, sample_snapshot, base_inputs):
    """Step indices and size are configurable."""
    grid = SensitivityGridBuilder(sample_snapshot,
                                  base_inputs).build(steps=(1, -1, 0),
                                                     step_size=0.01)

    assert len(grid) == 3
    assert grid[0][0].wacc == pytest.approx(0.11)
    assert grid[2][2].growth == pytest.approx(0.06)

  def test_empty_steps(self, sample_snapshot, base_inputs):
    """Empty steps raise ValueError."""
    with pytest.raises(ValueError, match='steps cannot be empty'):
      SensitivityGridBuilder(sample_snapshot, base_inputs).build(steps=())


class TestGridToFrame:
  """Tests for grid_to_frame."""

  def test_labels(self, sample_snapshot, base_inputs):
    """Rows are WACC labels and columns growth labels."""
    grid = SensitivityGridBuilder(sample_snapshot, base_inputs).build()

    frame = grid_to_frame(grid)

    assert frame.shape == (5, 5)
    assert frame.index.name == 'WACC'
    assert frame.columns.name == 'Perpetual Growth'
    assert frame.index[2] == '12.0%'
    assert frame.columns[2] == '5.0%'
    assert frame.iloc[2, 2] == grid[2][2].fair_value

  def test_empty(self):
    assert grid_to_frame([]).empty
