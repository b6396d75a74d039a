"""
Engine-wide constants.

Values that more than one component depends on live here so that the
normalizer, the cost-of-capital calculator and the pricing methods agree.
"""

# Statutory corporate tax rate (IRPJ + CSLL). Applied to NOPAT, ROIC and the
# after-tax cost of debt regardless of the scenario's tax_rate.
STATUTORY_TAX_RATE = 0.34

# Synthetic share count used when no source can determine it.
DEFAULT_SHARES_OUTSTANDING = 1_000_000.0

# Synthetic price used when the quote carries none.
FALLBACK_PRICE = 10.0

# Placeholder sector multiples used when no peer data is supplied.
PLACEHOLDER_SECTOR_PE = 8.0
PLACEHOLDER_SECTOR_EV_EBITDA = 6.0

# Explicit forecast horizon (years) for DCF.
FORECAST_YEARS = 5

# Data-quality flags surfaced on snapshots and valuations.
FLAG_SHARES_FALLBACK = 'shares_fallback'
FLAG_PRICE_FALLBACK = 'price_fallback'
FLAG_NO_ANNUAL_PERIOD = 'no_annual_period'
FLAG_COST_OF_DEBT_FALLBACK = 'cost_of_debt_fallback'
FLAG_PLACEHOLDER_MULTIPLES = 'placeholder_sector_multiples'
