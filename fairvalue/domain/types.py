'''
Domain types for the fair-value engine.

These dataclasses provide typed interfaces between components. Raw source
rows stop at the normalizer; everything downstream works on
FinancialSnapshot and the result types defined here.
'''

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
import math
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from fairvalue.domain.constants import PLACEHOLDER_SECTOR_EV_EBITDA
from fairvalue.domain.constants import PLACEHOLDER_SECTOR_PE


class MethodId(str, Enum):
  '''Identifiers of the five valuation methods, in report order.'''
  DCF = 'DCF'
  GORDON = 'GORDON'
  EVA = 'EVA'
  MULTIPLES = 'MULTIPLES'
  GRAHAM = 'GRAHAM'


METHOD_ORDER: Tuple[MethodId, ...] = (
    MethodId.DCF,
    MethodId.GORDON,
    MethodId.EVA,
    MethodId.MULTIPLES,
    MethodId.GRAHAM,
)


@dataclass(frozen=True)
class DividendRecord:
  '''A single dividend or interest-on-equity payment.'''
  amount: float
  ex_date: Optional[pd.Timestamp] = None
  payment_date: Optional[pd.Timestamp] = None
  dividend_type: str = ''
  currency: str = 'BRL'


@dataclass(frozen=True)
class MarketRatios:
  '''
  Market and profitability ratios.

  Taken from the quote source when present, otherwise derived from the
  base-period statements. Rates are fractions (0.15 == 15%).
  '''
  pe: float = 0.0
  pb: float = 0.0
  roe: float = 0.0
  roic: float = 0.0
  net_margin: float = 0.0
  ebitda_margin: float = 0.0
  ev_ebitda: float = 0.0
  ev_ebit: float = 0.0
  debt_ebitda: float = 0.0
  gross_margin: float = 0.0
  ebit_margin: float = 0.0
  price_ebit: float = 0.0
  price_sales: float = 0.0
  current_liquidity: float = 0.0
  debt_equity: float = 0.0
  dividend_yield: float = 0.0


@dataclass(frozen=True)
class FinancialSnapshot:
  '''
  Point-in-time financial snapshot of a single security.

  Built once by the normalizer and never mutated. All monetary amounts are
  in the reporting currency; capex is a negative outflow.

  Attributes:
    ticker: Canonical ticker (upper case, no exchange suffix)
    price: Last traded price
    shares_outstanding: Shares outstanding (always > 0)
    equity: Total stockholders' equity (book value)
    total_debt: Gross interest-bearing debt
    net_debt: total_debt - cash
    cash: Cash, equivalents and short-term investments
    invested_capital: equity + net_debt
    free_cash_flow: operating_cash_flow + capex
    ebitda: ebit + depreciation
    eps: Earnings per share
    book_value_per_share: equity / shares_outstanding
    effective_tax_rate: Tax expense / pre-tax income (statutory fallback)
    beta: Observed beta, None when the source has none
    revenue_growth: Observed revenue growth, None when absent
    quality_flags: Synthetic fallbacks applied while building the snapshot
  '''
  ticker: str
  price: float
  shares_outstanding: float
  equity: float
  total_debt: float
  net_debt: float
  cash: float
  invested_capital: float
  operating_cash_flow: float
  capex: float
  free_cash_flow: float
  ebit: float
  depreciation: float
  ebitda: float
  revenue: float
  net_income: float
  interest_expense: float
  eps: float
  book_value_per_share: float
  effective_tax_rate: float
  name: str = ''
  sector: str = ''
  share_class: str = 'ON'
  market_cap: float = 0.0
  gross_profit: float = 0.0
  beta: Optional[float] = None
  revenue_growth: Optional[float] = None
  period_end: Optional[pd.Timestamp] = None
  ratios: MarketRatios = field(default_factory=MarketRatios)
  dividends: Tuple[DividendRecord, ...] = ()
  quality_flags: Tuple[str, ...] = ()

  def has_flag(self, flag: str) -> bool:
    return flag in self.quality_flags


@dataclass(frozen=True)
class ScenarioAssumptions:
  '''
  Macro and growth assumptions for one valuation run.

  Attributes:
    risk_free_rate: Risk-free rate (CAPM)
    equity_risk_premium: Market premium over the risk-free rate
    beta: Equity beta
    cost_of_debt: Pre-tax cost of debt used when no implied rate is sane
    perpetual_growth: Terminal growth rate
    projected_revenue_growth: Near-term growth rate for projections
    tax_rate: Scenario tax rate (reported; pricing uses the statutory rate)
  '''
  risk_free_rate: float
  equity_risk_premium: float
  beta: float
  cost_of_debt: float
  perpetual_growth: float
  projected_revenue_growth: float
  tax_rate: float = 0.34

  def with_overrides(self, **overrides: float) -> 'ScenarioAssumptions':
    '''Return a copy with the given fields replaced.'''
    return replace(self, **overrides)

  def with_market_inputs(
      self, snapshot: FinancialSnapshot) -> 'ScenarioAssumptions':
    '''Substitute the observed beta and revenue growth where available.'''
    overrides: Dict[str, float] = {}
    if snapshot.beta is not None:
      overrides['beta'] = snapshot.beta
    if snapshot.revenue_growth is not None:
      overrides['projected_revenue_growth'] = snapshot.revenue_growth
    return replace(self, **overrides)

  def to_dict(self) -> Dict[str, float]:
    return asdict(self)


@dataclass(frozen=True)
class WeightingProfile:
  '''
  Relative weights of the five valuation methods.

  Weights need not sum to one; the aggregator divides by their sum.

  Raises:
    ValueError: If any weight is negative or all weights are zero
  '''
  dcf: float
  gordon: float
  eva: float
  multiples: float
  graham: float
  name: str = 'custom'

  def __post_init__(self):
    values = self.as_dict()
    negative = [k for k, v in values.items() if v < 0 or not math.isfinite(v)]
    if negative:
      raise ValueError(f'Weights must be finite and non-negative: {negative}')
    if self.total <= 0:
      raise ValueError('Weights must have a positive sum')

  @property
  def total(self) -> float:
    return self.dcf + self.gordon + self.eva + self.multiples + self.graham

  def weight_for(self, method: MethodId) -> float:
    return self.as_dict()[method.value]

  def normalized(self) -> Dict[str, float]:
    '''Weights divided by their sum, keyed by method id.'''
    total = self.total
    return {k: v / total for k, v in self.as_dict().items()}

  def scaled(self, factor: float) -> 'WeightingProfile':
    return replace(self,
                   dcf=self.dcf * factor,
                   gordon=self.gordon * factor,
                   eva=self.eva * factor,
                   multiples=self.multiples * factor,
                   graham=self.graham * factor)

  def as_dict(self) -> Dict[str, float]:
    return {
        MethodId.DCF.value: self.dcf,
        MethodId.GORDON.value: self.gordon,
        MethodId.EVA.value: self.eva,
        MethodId.MULTIPLES.value: self.multiples,
        MethodId.GRAHAM.value: self.graham,
    }


@dataclass(frozen=True)
class SectorMultiples:
  '''Sector P/E and EV/EBITDA used by the relative-pricing method.'''
  pe: float = PLACEHOLDER_SECTOR_PE
  ev_ebitda: float = PLACEHOLDER_SECTOR_EV_EBITDA
  source: str = 'placeholder'

  @property
  def is_placeholder(self) -> bool:
    return self.source == 'placeholder'


@dataclass(frozen=True)
class CostOfCapital:
  '''
  Output of the cost-of-capital calculator.

  Attributes:
    cost_of_equity: CAPM cost of equity (Ke)
    cost_of_debt: Pre-tax cost of debt used
    cost_of_debt_net: After-tax cost of debt
    wacc: Weighted-average cost of capital
    equity_weight: E / (E + D), 1.0 when E + D == 0
    debt_weight: D / (E + D), 0.0 when E + D == 0
    kd_source: 'implied' (interest / debt) or 'assumption'
  '''
  cost_of_equity: float
  cost_of_debt: float
  cost_of_debt_net: float
  wacc: float
  equity_weight: float
  debt_weight: float
  kd_source: str


@dataclass(frozen=True)
class PricingInputs:
  '''
  Discount and growth rates shared by all pricing methods.

  Attributes:
    wacc: Discount rate for firm-level cash flows
    cost_of_equity: Discount rate for equity-level cash flows
    perpetual_growth: Terminal growth rate
    revenue_growth: Near-term projection growth rate
  '''
  wacc: float
  cost_of_equity: float
  perpetual_growth: float
  revenue_growth: float

  @classmethod
  def from_cost_of_capital(
      cls,
      cost_of_capital: CostOfCapital,
      assumptions: ScenarioAssumptions,
  ) -> 'PricingInputs':
    return cls(
        wacc=cost_of_capital.wacc,
        cost_of_equity=cost_of_capital.cost_of_equity,
        perpetual_growth=assumptions.perpetual_growth,
        revenue_growth=assumptions.projected_revenue_growth,
    )


@dataclass
class CalculationTrace:
  '''
  Human-readable derivation of a method's fair value.

  Attributes:
    formula: Formula name or expression
    inputs: Named numeric inputs used
    steps: Ordered intermediate results
    final_result: The fair value reported
    degenerate: Reason the method could not price the security, if any
  '''
  formula: str
  inputs: Dict[str, float] = field(default_factory=dict)
  steps: List[str] = field(default_factory=list)
  final_result: float = 0.0
  degenerate: Optional[str] = None


@dataclass
class MethodOutput:
  '''
  Standard output from any valuation method.

  Attributes:
    value: Fair value per share (>= 0, finite)
    trace: Derivation of the value
  '''
  value: float
  trace: CalculationTrace

  @property
  def is_degenerate(self) -> bool:
    return self.trace.degenerate is not None


@dataclass
class ValuationResult:
  '''
  One method's contribution to the consensus.

  Attributes:
    method: Method identifier
    fair_value: Fair value per share (>= 0)
    weight: Normalized weight in the consensus
    upside: fair_value / price - 1
    details: Short label of the method
    trace: Derivation trace
  '''
  method: MethodId
  fair_value: float
  weight: float
  upside: float
  details: str
  trace: CalculationTrace

  def to_dict(self) -> Dict[str, Any]:
    return {
        'method': self.method.value,
        'fair_value': self.fair_value,
        'weight': self.weight,
        'upside': self.upside,
        'details': self.details,
        'formula': self.trace.formula,
        'degenerate': self.trace.degenerate,
    }


@dataclass(frozen=True)
class SensitivityCell:
  wacc: float
  growth: float
  fair_value: float


@dataclass(frozen=True)
class PriceRange:
  min: float
  max: float


@dataclass
class ComprehensiveValuation:
  '''
  Consensus valuation of one security.

  Attributes:
    ticker: Canonical ticker
    current_price: Price used for upside
    weighted_fair_value: Weighted consensus fair value per share
    total_upside: weighted_fair_value / current_price - 1
    calculated_wacc: WACC used by DCF and EVA
    cost_of_equity: Ke used by Gordon
    price_range: Min / max over positive method fair values
    results: One ValuationResult per method, in METHOD_ORDER
    sensitivity_matrix: 5x5 grid, rows by WACC step, columns by growth step
    data_quality_flags: Synthetic fallbacks that influenced the result
  '''
  ticker: str
  current_price: float
  weighted_fair_value: float
  total_upside: float
  calculated_wacc: float
  cost_of_equity: float
  price_range: PriceRange
  results: List[ValuationResult]
  sensitivity_matrix: List[List[SensitivityCell]]
  data_quality_flags: Tuple[str, ...] = ()

  @property
  def is_usable(self) -> bool:
    '''True when the consensus is finite and positive.'''
    value = self.weighted_fair_value
    return math.isfinite(value) and value > 0

  def result_for(self, method: MethodId) -> ValuationResult:
    for result in self.results:
      if result.method == method:
        return result
    raise KeyError(f'No result for method {method.value}')

  def to_dict(self) -> Dict[str, Any]:
    '''Flatten to a dictionary for DataFrame creation.'''
    row: Dict[str, Any] = {
        'ticker': self.ticker,
        'current_price': self.current_price,
        'weighted_fair_value': self.weighted_fair_value,
        'total_upside': self.total_upside,
        'wacc': self.calculated_wacc,
        'cost_of_equity': self.cost_of_equity,
        'range_min': self.price_range.min,
        'range_max': self.price_range.max,
        'quality_flags': ','.join(self.data_quality_flags),
    }
    for result in self.results:
      key = result.method.value.lower()
      row[f'{key}_fair_value'] = result.fair_value
      row[f'{key}_weight'] = result.weight
    return row
