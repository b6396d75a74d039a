"""
Sensitivity analysis for the DCF fair value.

Builds the 2D grid that shows how the DCF fair value varies with WACC and
perpetual growth around the base case. Revenue growth stays fixed at the
base assumption. Every cell is priced by the same DCF method used in the
consensus, so the centre cell reproduces the base DCF value exactly.
"""

from dataclasses import replace
import logging
from typing import List, Optional, Sequence

import pandas as pd

from fairvalue.domain.types import FinancialSnapshot
from fairvalue.domain.types import PricingInputs
from fairvalue.domain.types import SensitivityCell
from fairvalue.methods.dcf import DiscountedCashFlow

logger = logging.getLogger(__name__)

# Half a percentage point per step, two steps either side of the base.
DEFAULT_STEP = 0.005
DEFAULT_STEPS = (-2, -1, 0, 1, 2)


class SensitivityGridBuilder:
  """
  Build WACC x perpetual-growth sensitivity grids.

  Rows ascend by WACC step, columns ascend by growth step.
  """

  def __init__(
      self,
      snapshot: FinancialSnapshot,
      base_inputs: PricingInputs,
      dcf: Optional[DiscountedCashFlow] = None,
  ):
    """
    Initialize sensitivity grid builder.

    Args:
        snapshot: Normalized financial snapshot
        base_inputs: Base-case rates
        dcf: DCF method to re-invoke (default: 5-year DiscountedCashFlow)
    """
    self.snapshot = snapshot
    self.base_inputs = base_inputs
    self.dcf = dcf or DiscountedCashFlow()

  def build(
      self,
      steps: Sequence[int] = DEFAULT_STEPS,
      step_size: float = DEFAULT_STEP,
  ) -> List[List[SensitivityCell]]:
    """
    Build the sensitivity grid.

    Args:
        steps: Step indices applied to both axes (e.g., -2..2)
        step_size: Rate change per step

    Returns:
        len(steps) x len(steps) grid of SensitivityCell
    """
    if not steps:
      raise ValueError('steps cannot be empty')

    ordered = sorted(steps)
    base = self.base_inputs
    grid: List[List[SensitivityCell]] = []

    for wacc_step in ordered:
      wacc = base.wacc + wacc_step * step_size
      row: List[SensitivityCell] = []
      for growth_step in ordered:
        growth = base.perpetual_growth + growth_step * step_size
        inputs = replace(base, wacc=wacc, perpetual_growth=growth)
        value = self.dcf.compute(self.snapshot, inputs).value
        row.append(SensitivityCell(wacc=wacc, growth=growth, fair_value=value))
      grid.append(row)

    logger.debug('%s: sensitivity grid %d x %d built', self.snapshot.ticker,
                 len(grid), len(ordered))
    return grid


def grid_to_frame(grid: List[List[SensitivityCell]]) -> pd.DataFrame:
  """
  Convert a grid to a DataFrame.

  Returns:
      DataFrame with WACC labels as index, growth labels as columns and
      fair values per share as cell values
  """
  if not grid:
    return pd.DataFrame()

  w_labels = [f'{row[0].wacc:.1%}' for row in grid]
  g_labels = [f'{cell.growth:.1%}' for cell in grid[0]]
  data_rows = [[cell.fair_value for cell in row] for row in grid]

  df = pd.DataFrame(data_rows, index=w_labels, columns=g_labels)
  df.index.name = 'WACC'
  df.columns.name = 'Perpetual Growth'
  return df
