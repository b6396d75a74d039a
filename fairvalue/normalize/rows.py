'''
Parsing of loosely-typed source rows.

parse_rows() is the validation boundary of the engine: it turns arbitrary
key/value rows into a DataFrame with exactly the canonical columns of a
SourceSchema. Numeric columns never contain NaN or infinities.
'''

import math
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from fairvalue.normalize.fields import NUMBER
from fairvalue.normalize.fields import SYMBOL
from fairvalue.normalize.fields import SourceSchema
from fairvalue.normalize.fields import TEXT


def _is_missing(value: Any) -> bool:
  if value is None or value is pd.NaT:
    return True
  return isinstance(value, float) and math.isnan(value)


def pick(row: Mapping[str, Any], aliases: Iterable[str]) -> Optional[Any]:
  '''
  Return the first present, non-null value among aliases.

  Keys are compared case-insensitively. When a row carries the same key in
  several casings, the first non-null one in row order wins.
  '''
  lowered: dict[str, list[Any]] = {}
  for key, value in row.items():
    lowered.setdefault(str(key).lower(), []).append(value)

  for alias in aliases:
    for value in lowered.get(alias.lower(), []):
      if not _is_missing(value):
        return value
  return None


def to_text(value: Any) -> str:
  if _is_missing(value):
    return ''
  # Integer columns with gaps arrive as float (2023 -> 2023.0).
  if isinstance(value, float) and value.is_integer():
    return str(int(value))
  return str(value)


def to_symbol(value: Any) -> str:
  return to_text(value).strip().upper()


def coerce_numeric(series: pd.Series) -> pd.Series:
  '''Coerce to float; missing, non-numeric and infinite values become 0.'''
  cleaned = series.map(lambda v: v.strip() if isinstance(v, str) else v)
  numeric = pd.to_numeric(cleaned, errors='coerce').astype(float)
  numeric = numeric.where(numeric.abs() != math.inf, 0.0)
  return numeric.fillna(0.0)


def parse_rows(rows: Iterable[Mapping[str, Any]],
               schema: SourceSchema) -> pd.DataFrame:
  '''
  Resolve raw rows against a schema.

  Args:
    rows: Raw key/value rows from the data source
    schema: Field resolution table for the category

  Returns:
    DataFrame with schema.columns, one row per input row, in input order.
    Rows without a symbol are dropped.
  '''
  records = []
  for row in rows:
    record: dict[str, Any] = {}
    for spec in schema.fields:
      value = pick(row, spec.aliases)
      if spec.kind == SYMBOL:
        record[spec.name] = to_symbol(value)
      elif spec.kind == TEXT:
        record[spec.name] = to_text(value)
      else:
        record[spec.name] = value
    records.append(record)

  frame = pd.DataFrame.from_records(records, columns=schema.columns)
  for column in schema.columns_of_kind(NUMBER):
    frame[column] = coerce_numeric(frame[column])
  for column in schema.columns_of_kind(SYMBOL) + schema.columns_of_kind(TEXT):
    frame[column] = frame[column].astype(object)

  frame = frame[frame['symbol'] != ''].reset_index(drop=True)
  return frame
