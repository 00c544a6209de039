import logging

import pandas as pd

from ..config import get_settings
from ..data.dataset import Dataset, to_python_scalar
from ..utils import is_numeric_series, sorted_unique_strings
from .schemas import ColumnDtype, ColumnProfile, DatasetProfile

logger = logging.getLogger(__name__)


class DataProfiler:
    @staticmethod
    def generate_profile(dataset: Dataset) -> DatasetProfile:
        """
        Per-column summary of a Dataset snapshot.

        Pure: the same Dataset always yields an equal profile, so callers may
        use profiles as cache keys.
        """
        if dataset.is_empty:
            return DatasetProfile(shape=[0, 0], columns=[], total_nulls=0)

        df = dataset.frame
        max_unique = get_settings().CATEGORICAL_MAX_UNIQUE
        columns = [DataProfiler.profile_column(df[col], max_unique) for col in df.columns]

        return DatasetProfile(
            shape=[len(df), len(df.columns)],
            columns=columns,
            total_nulls=sum(c.null_count for c in columns),
        )

    @staticmethod
    def profile_column(series: pd.Series, max_unique: int = 20) -> ColumnProfile:
        is_numeric = is_numeric_series(series)
        unique_values = sorted_unique_strings(series)
        non_null = series.dropna()

        min_value = max_value = None
        if is_numeric and not non_null.empty:
            min_value = to_python_scalar(non_null.min())
            max_value = to_python_scalar(non_null.max())

        return ColumnProfile(
            name=str(series.name),
            dtype=ColumnDtype.NUMERIC if is_numeric else ColumnDtype.TEXT,
            is_numeric=is_numeric,
            is_categorical=(not is_numeric) and len(unique_values) <= max_unique,
            unique_values=unique_values,
            min=min_value,
            max=max_value,
            null_count=int(series.isna().sum()),
        )
