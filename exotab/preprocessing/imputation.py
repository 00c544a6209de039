import logging
from typing import Any, Dict

import pandas as pd

from .base import BaseCalculator, BaseApplier

logger = logging.getLogger(__name__)

# --- Simple fill (mean, median, mode) ---
class SimpleFillCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        # Config: {'column': 'edad', 'strategy': 'mean' | 'median' | 'mode'}
        column = config.get('column')
        strategy = config.get('strategy', 'mean')

        if column not in df.columns:
            return {}

        series = df[column]
        non_null = series.dropna()
        if non_null.empty:
            return {}

        if strategy == 'mean':
            fill_value = float(pd.to_numeric(non_null, errors='coerce').mean())
        elif strategy == 'median':
            fill_value = float(pd.to_numeric(non_null, errors='coerce').median())
        elif strategy == 'mode':
            # mode() is sorted, so ties resolve to the smallest value
            fill_value = non_null.mode().iloc[0]
        else:
            logger.warning(f"Unsupported fill strategy '{strategy}' for column '{column}'")
            return {}

        return {
            'type': 'simple_fill',
            'column': column,
            'strategy': strategy,
            'fill_value': fill_value,
            'missing_count': int(series.isna().sum())
        }

class SimpleFillApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        column = params.get('column')
        if not params or column not in df.columns:
            return df.copy()

        out = df.copy()
        fill_value = params['fill_value']
        series = out[column]
        if pd.api.types.is_integer_dtype(series.dtype) or pd.api.types.is_bool_dtype(series.dtype):
            # nothing to fill without nulls, and nulls never live in these dtypes
            return out
        if series.dtype == object:
            out[column] = series.where(series.notna(), fill_value)
        else:
            out[column] = series.fillna(fill_value)
        return out


# --- Propagation (forward / backward) ---
class PropagateFillCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        # Config: {'column': 'ciudad', 'direction': 'forward' | 'backward'}
        direction = config.get('direction', 'forward')
        if direction not in ('forward', 'backward'):
            logger.warning(f"Unsupported propagation direction '{direction}'")
            return {}
        return {
            'type': 'propagate_fill',
            'column': config.get('column'),
            'direction': direction
        }

class PropagateFillApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        column = params.get('column')
        if not params or column not in df.columns:
            return df.copy()

        out = df.copy()
        if params['direction'] == 'forward':
            out[column] = out[column].ffill()
        else:
            out[column] = out[column].bfill()
        return out
