"""
Correlation analysis over the numeric columns of a Dataset.

Precondition failures (fewer than two numeric columns) come back as a
``CorrelationError`` value rather than an exception, so a caller can render
the message inline.
"""

import logging
import warnings
from enum import Enum
from typing import Any, List, Optional, Union

import numpy as np
import pandas as pd
from pydantic import Field
from scipy import stats

from ..data.dataset import Dataset
from ..exceptions import ConfigurationError
from ..profiling.profiler import DataProfiler
from ..schemas import CamelModel
from ..utils import json_safe_float

logger = logging.getLogger(__name__)


class CorrelationMethod(str, Enum):
    PEARSON = "pearson"
    SPEARMAN = "spearman"
    KENDALL = "kendall"

    @classmethod
    def parse(cls, value: Union[str, "CorrelationMethod"]) -> "CorrelationMethod":
        if isinstance(value, CorrelationMethod):
            return value
        key = str(value).strip().lower()
        key = _METHOD_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ConfigurationError(
                f"Unknown correlation method '{value}'",
                {"allowed": [m.value for m in cls] + sorted(_METHOD_ALIASES)},
            ) from None


_METHOD_ALIASES = {
    "linear": "pearson",
    "rank": "spearman",
    "concordance": "kendall",
}


class CorrelationMatrix(CamelModel):
    columns: List[str] = Field(default_factory=list)
    matrix: List[List[Optional[float]]] = Field(default_factory=list)
    method: CorrelationMethod = CorrelationMethod.PEARSON

    def value(self, a: str, b: str) -> Optional[float]:
        return self.matrix[self.columns.index(a)][self.columns.index(b)]


class CorrelationError(CamelModel):
    message: str

    def to_sentinel(self) -> str:
        return f"error: {self.message}"


class TargetCorrelation(CamelModel):
    column: str
    correlation: float


def _numeric_frame(dataset: Dataset) -> pd.DataFrame:
    profile = DataProfiler.generate_profile(dataset)
    cols = profile.numeric_columns()
    if not cols:
        return pd.DataFrame()
    return dataset.frame[cols].astype(float)


def generate_correlation_matrix(
    dataset: Dataset,
    method: Union[str, CorrelationMethod] = CorrelationMethod.PEARSON,
) -> Union[CorrelationMatrix, CorrelationError]:
    """Pairwise correlation of every numeric column, NaN cells as ``None``."""
    method = CorrelationMethod.parse(method)
    numeric = _numeric_frame(dataset)
    if len(numeric.columns) < 2:
        message = f"at least 2 numeric columns are needed for a correlation matrix, found {len(numeric.columns)}"
        logger.info(message)
        return CorrelationError(message=message)

    corr = numeric.corr(method=method.value)
    matrix = [[json_safe_float(v) for v in row] for row in corr.to_numpy()]
    return CorrelationMatrix(columns=[str(c) for c in corr.columns], matrix=matrix, method=method)


_SCIPY_METHODS = {
    CorrelationMethod.PEARSON: stats.pearsonr,
    CorrelationMethod.SPEARMAN: stats.spearmanr,
    CorrelationMethod.KENDALL: stats.kendalltau,
}


def _pairwise(x: pd.Series, y: pd.Series, method: CorrelationMethod) -> float:
    both = pd.concat([x, y], axis=1).dropna()
    if len(both) < 2:
        return float("nan")
    a = both.iloc[:, 0].to_numpy()
    b = both.iloc[:, 1].to_numpy()
    if np.all(a == a[0]) or np.all(b == b[0]):
        return float("nan")
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        result: Any = _SCIPY_METHODS[method](a, b)
    return float(result[0])


def rank_target_correlations(
    dataset: Dataset,
    target_column: str,
    method: Union[str, CorrelationMethod] = CorrelationMethod.PEARSON,
) -> List[TargetCorrelation]:
    """
    Correlation of every other numeric column with ``target_column``, sorted by
    absolute value (descending). Ties keep column order; NaN results are left out.
    """
    method = CorrelationMethod.parse(method)
    numeric = _numeric_frame(dataset)
    if target_column not in numeric.columns:
        return []

    target = numeric[target_column]
    ranked = []
    for col in numeric.columns:
        if col == target_column:
            continue
        r = _pairwise(numeric[col], target, method)
        if np.isnan(r):
            continue
        ranked.append(TargetCorrelation(column=str(col), correlation=r))

    # sorted() is stable, so equal magnitudes keep their column order
    return sorted(ranked, key=lambda item: abs(item.correlation), reverse=True)
