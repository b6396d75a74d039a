'''
Multi-method fair-value engine for listed equities.

Raw quote, statement and dividend rows are normalized into a
FinancialSnapshot, priced by five independent methods (DCF, Gordon growth,
EVA/MVA, sector multiples and the Graham number) and combined into a
weighted consensus with a WACC x growth sensitivity grid.

Usage:
  from fairvalue.scenarios.config import ValuationConfig
  from fairvalue.run import run_valuation

  config = ValuationConfig.bear()
  result = run_valuation(ticker='VALE3', config=config)
'''
