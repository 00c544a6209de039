import logging
from typing import Any, Dict, List

import pandas as pd

from ..config import get_settings
from ..utils import membership_mask, value_to_str
from .base import BaseCalculator, BaseApplier

logger = logging.getLogger(__name__)

# --- Category filter ---
class CategoryFilterCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        # Config: {'column': 'ciudad', 'values': ['Lima', 'Cusco']}
        return {
            'type': 'category_filter',
            'column': config.get('column'),
            'values': list(config.get('values') or [])
        }

class CategoryFilterApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        column = params.get('column')
        values = params.get('values') or []
        if column not in df.columns or not values:
            return df.copy()
        return df[membership_mask(df[column], values)].copy()


# --- Rare category grouping ---
class RareCategoryCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Finds categories whose share of rows is below ``threshold`` percent.
        The denominator counts every row, nulls included.
        """
        column = config.get('column')
        threshold = float(config.get('threshold', get_settings().DEFAULT_RARE_THRESHOLD))
        label = config.get('label', get_settings().RARE_CATEGORY_LABEL)

        if column not in df.columns or df.empty:
            return {}

        shares = df[column].value_counts(dropna=True) / len(df)
        rare: List[Any] = [value for value, share in shares.items() if share < threshold / 100.0]
        # the bucket itself is never regrouped
        rare = [v for v in rare if value_to_str(v) != label]

        return {
            'type': 'rare_category',
            'column': column,
            'threshold': threshold,
            'label': label,
            'rare_values': rare
        }

class RareCategoryApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        column = params.get('column')
        rare = params.get('rare_values') or []
        if column not in df.columns or not rare:
            return df.copy()

        label = params.get('label', get_settings().RARE_CATEGORY_LABEL)
        out = df.copy()
        mask = out[column].isin(rare)
        out[column] = out[column].astype(object).where(~mask, label)
        logger.debug(f"Grouped {int(mask.sum())} rows of '{column}' into '{label}'")
        return out
