"""Pure valuation math: DCF, cost of capital and consensus aggregation."""

from fairvalue.engine.consensus import aggregate
from fairvalue.engine.cost_of_capital import compute_cost_of_capital
from fairvalue.engine.dcf import compute_fair_value
from fairvalue.engine.dcf import compute_pv_explicit
from fairvalue.engine.dcf import compute_terminal_value

__all__ = [
    'aggregate',
    'compute_cost_of_capital',
    'compute_fair_value',
    'compute_pv_explicit',
    'compute_terminal_value',
]
