'''
Reporting-period classification and base-period selection.
'''

import re
from typing import Optional

import pandas as pd

YEARLY = 'yearly'
QUARTERLY = 'quarterly'

_YEARLY_TYPES = ('yearly', 'annual', 'anual', 'fy')
_QUARTERLY_TYPES = ('quarterly', 'quarter')
_YEAR_RE = re.compile(r'^\d{4}$')


def classify_period(period: str) -> str:
  '''Cadence implied by a period label ('2023', 'FY2023' -> yearly).'''
  label = (period or '').strip()
  if not label:
    return QUARTERLY
  if label.upper().startswith('FY') or _YEAR_RE.match(label):
    return YEARLY
  return QUARTERLY


def normalize_cadence(raw_type: str, period: str) -> str:
  '''
  Cadence of a statement row.

  The type field wins when it is recognizable; otherwise the period label
  decides.
  '''
  kind = (raw_type or '').strip().lower()
  if kind in _YEARLY_TYPES:
    return YEARLY
  if kind in _QUARTERLY_TYPES or kind.startswith('q'):
    return QUARTERLY
  return classify_period(period or raw_type)


def with_cadence(frame: pd.DataFrame) -> pd.DataFrame:
  '''Add 'cadence' and parsed 'end' columns to statement rows.'''
  out = frame.copy()
  out['cadence'] = [
      normalize_cadence(t, p) for t, p in zip(out['type'], out['period'])
  ]
  out['end'] = parse_dates(out['end_date'])
  return out


def parse_dates(values: pd.Series) -> pd.Series:
  '''Parse heterogeneous date strings; unparseable values become NaT.'''
  if values.empty:
    return pd.Series(pd.NaT, index=values.index, dtype='datetime64[ns, UTC]')
  cleaned = values.map(lambda v: v if v else None)
  return pd.to_datetime(cleaned,
                        errors='coerce',
                        utc=True,
                        format='mixed')


def latest_row(frame: pd.DataFrame,
               column: str = 'end') -> Optional[pd.Series]:
  '''Most recent row by date; undated rows rank last, ties keep input order.'''
  if frame.empty:
    return None
  ordered = frame.sort_values(column,
                              ascending=False,
                              na_position='last',
                              kind='mergesort')
  return ordered.iloc[0]


def base_row(frame: pd.DataFrame,
             align_to: Optional[pd.Timestamp] = None) -> Optional[pd.Series]:
  '''
  Row used as the base period of a statement.

  Preference order:
    1. the yearly row ending on align_to (when given)
    2. the most recent yearly row
    3. the most recent row of any cadence

  Args:
    frame: Statement rows processed by with_cadence()
    align_to: End date of the base income statement

  Returns:
    The selected row, or None when frame is empty
  '''
  if frame.empty:
    return None

  yearly = frame[frame['cadence'] == YEARLY]
  if align_to is not None and not pd.isna(align_to) and not yearly.empty:
    aligned = yearly[yearly['end'] == align_to]
    if not aligned.empty:
      return latest_row(aligned)

  if not yearly.empty:
    return latest_row(yearly)
  return latest_row(frame)
