import logging
from typing import Any, Dict

import pandas as pd

from ..config import get_settings
from .base import BaseCalculator, BaseApplier

logger = logging.getLogger(__name__)

# --- IQR Filter ---
class IQRCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        # Config: {'column': 'edad', 'multiplier': 1.5}
        column = config.get('column')
        multiplier = config.get('multiplier', get_settings().IQR_MULTIPLIER)

        if column not in df.columns:
            return {}

        series = pd.to_numeric(df[column], errors='coerce').dropna()
        if series.empty:
            return {}

        # pandas' default linear interpolation between order statistics
        q1 = float(series.quantile(0.25))
        q3 = float(series.quantile(0.75))
        iqr = q3 - q1

        return {
            'type': 'iqr',
            'column': column,
            'q1': q1,
            'q3': q3,
            'iqr': iqr,
            'lower': q1 - (multiplier * iqr),
            'upper': q3 + (multiplier * iqr),
            'multiplier': multiplier
        }

class IQRApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        column = params.get('column')
        if not params or column not in df.columns:
            return df.copy()

        series = pd.to_numeric(df[column], errors='coerce')
        # Rows with a null in the column fail both comparisons and are dropped.
        mask = (series >= params['lower']) & (series <= params['upper'])
        return df[mask].copy()
