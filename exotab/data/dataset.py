"""
Immutable tabular snapshot used by every pipeline stage.

A ``Dataset`` owns a private pandas DataFrame whose columns are normalized
once at construction time:

* all non-null values int/float (not bool) -> ``int64`` or ``float64``;
  integers beyond the int64 range make the column ``float64``
* all non-null values bool -> ``bool`` (``object`` when nulls are present)
* anything else -> ``object`` holding plain Python scalars
* a column with no non-null values -> ``float64`` of NaN

Readers only ever receive copies of the frame, so a snapshot can be shared
between callers without defensive copying on their side.
"""

import math
import numbers
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd


_INT64_MIN, _INT64_MAX = np.iinfo(np.int64).min, np.iinfo(np.int64).max


def is_null(value: Any) -> bool:
    """True for ``None``, NaN and pandas missing markers."""
    if value is None or value is pd.NA or value is pd.NaT:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, np.floating) and np.isnan(value):
        return True
    return False


def to_python_scalar(value: Any) -> Any:
    """Convert numpy scalars to plain Python values and nulls to ``None``."""
    if is_null(value):
        return None
    if isinstance(value, np.generic):
        return value.item()
    return value


def _is_bool(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Number) and not _is_bool(value)


def _fits_int64(value: Any) -> bool:
    return _INT64_MIN <= value <= _INT64_MAX


def _normalize_column(name: str, values: Sequence[Any]) -> pd.Series:
    cleaned = [to_python_scalar(v) for v in values]
    present = [v for v in cleaned if v is not None]
    has_nulls = len(present) != len(cleaned)

    if not present:
        return pd.Series([np.nan] * len(cleaned), name=name, dtype="float64")

    if all(_is_bool(v) for v in present):
        if has_nulls:
            return pd.Series(cleaned, name=name, dtype=object)
        return pd.Series(cleaned, name=name, dtype=bool)

    if all(_is_number(v) for v in present):
        if (not has_nulls and all(isinstance(v, numbers.Integral) for v in present)
                and all(_fits_int64(v) for v in present)):
            return pd.Series(cleaned, name=name, dtype="int64")
        return pd.Series(
            [np.nan if v is None else float(v) for v in cleaned], name=name, dtype="float64"
        )

    return pd.Series(cleaned, name=name, dtype=object)


def _normalize_frame(df: pd.DataFrame) -> pd.DataFrame:
    if len(df.columns) == 0:
        return pd.DataFrame(index=pd.RangeIndex(len(df)))
    columns: Dict[str, pd.Series] = {}
    for col in df.columns:
        series = df[col]
        has_nulls = bool(series.isna().any())
        if pd.api.types.is_bool_dtype(series.dtype) and not has_nulls:
            columns[col] = pd.Series(series.to_numpy(dtype=bool), name=col)
        elif pd.api.types.is_integer_dtype(series.dtype) and not has_nulls:
            columns[col] = pd.Series(series.to_numpy(dtype="int64"), name=col)
        elif pd.api.types.is_numeric_dtype(series.dtype) and not pd.api.types.is_bool_dtype(series.dtype):
            columns[col] = pd.Series(series.to_numpy(dtype="float64", na_value=np.nan), name=col)
        else:
            columns[col] = _normalize_column(col, series.tolist())
    return pd.DataFrame(columns, columns=list(df.columns))


class Dataset:
    """An ordered, immutable table of rows sharing one column set."""

    def __init__(self, frame: Optional[pd.DataFrame] = None, source: Optional[str] = None):
        if frame is None:
            frame = pd.DataFrame()
        if frame.columns.duplicated().any():
            dupes = frame.columns[frame.columns.duplicated()].tolist()
            raise ValueError(f"Duplicate column names: {dupes}")
        self._frame = _normalize_frame(frame)
        self.source = source

    # --- construction ---

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]], source: Optional[str] = None) -> "Dataset":
        """
        Build a Dataset from row mappings. Column order is the order in which
        names are first seen; rows lacking a column get null.
        """
        rows = list(records)
        columns: List[str] = []
        seen = set()
        for row in rows:
            for key in row.keys():
                if key not in seen:
                    seen.add(key)
                    columns.append(key)

        data = {col: [row.get(col) for row in rows] for col in columns}
        frame = pd.DataFrame(
            {col: _normalize_column(col, values) for col, values in data.items()},
            columns=columns,
        )
        return cls(frame, source=source)

    @classmethod
    def from_frame(cls, df: pd.DataFrame, source: Optional[str] = None) -> "Dataset":
        return cls(df, source=source)

    # --- access ---

    @property
    def frame(self) -> pd.DataFrame:
        """A copy of the underlying frame; mutating it never affects the snapshot."""
        return self._frame.copy()

    @property
    def columns(self) -> List[str]:
        return list(self._frame.columns)

    @property
    def shape(self) -> Tuple[int, int]:
        return (len(self._frame), len(self._frame.columns))

    @property
    def is_empty(self) -> bool:
        return len(self._frame) == 0

    def column(self, name: str) -> pd.Series:
        return self._frame[name].copy()

    def to_records(self) -> List[Dict[str, Any]]:
        """Rows as plain dicts; nulls are ``None`` and values are Python scalars."""
        cols = self.columns
        return [
            {col: to_python_scalar(value) for col, value in zip(cols, row)}
            for row in self._frame.itertuples(index=False, name=None)
        ]

    def equals(self, other: "Dataset") -> bool:
        if not isinstance(other, Dataset):
            return False
        return self._frame.equals(other._frame) and list(self._frame.dtypes) == list(other._frame.dtypes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dataset):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self._frame)

    def __repr__(self) -> str:
        rows, cols = self.shape
        return f"Dataset(rows={rows}, columns={cols}, source={self.source!r})"
