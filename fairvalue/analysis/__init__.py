'''
Valuation analysis utilities.

Note: To avoid RuntimeWarning when using -m flag, import directly:
  from fairvalue.analysis.batch_valuation import batch_valuation
  from fairvalue.analysis.peers import sector_multiples_from_quotes
'''
