from typing import Any, Iterable, List, Set

import numpy as np
import pandas as pd

from .data.dataset import to_python_scalar


def is_numeric_series(series: pd.Series) -> bool:
    """
    A column is numeric when every non-null value is an int or float.

    Datasets normalize columns at construction, so this reduces to a dtype
    check. Booleans are excluded explicitly.
    """
    if pd.api.types.is_bool_dtype(series.dtype):
        return False
    return pd.api.types.is_numeric_dtype(series.dtype)


def value_to_str(value: Any) -> str:
    """String form used for unique-value listings and category matching."""
    return str(to_python_scalar(value))


def membership_mask(series: pd.Series, allowed: Iterable[Any]) -> pd.Series:
    """
    Rows whose value is in ``allowed``. Values are compared both raw and in
    their string form so ``"1"`` selects integer ``1``. Nulls never match.
    """
    allowed = list(allowed)
    as_text: Set[str] = {str(v) for v in allowed}
    raw_mask = series.isin(allowed)
    text_mask = series.map(lambda v: v is not None and not pd.isna(v) and value_to_str(v) in as_text)
    return (raw_mask | text_mask.astype(bool)) & series.notna()


def sorted_unique_strings(series: pd.Series) -> List[str]:
    return sorted({value_to_str(v) for v in series.dropna().unique()})


def json_safe_float(value: Any) -> Any:
    """Float for finite numbers, ``None`` for NaN/inf."""
    if value is None:
        return None
    value = float(value)
    if not np.isfinite(value):
        return None
    return value
