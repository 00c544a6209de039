import logging
from typing import Any, Dict, List

import numpy as np
import pandas as pd
from sklearn.preprocessing import OneHotEncoder, OrdinalEncoder

from ..utils import is_numeric_series
from .base import BaseCalculator, BaseApplier

logger = logging.getLogger(__name__)

MISSING_TOKEN = "__missing__"


def detect_categorical_columns(df: pd.DataFrame, exclude: List[str] = ()) -> List[str]:
    """Every non-numeric column (text, booleans, mixed) counts as categorical."""
    return [c for c in df.columns if c not in exclude and not is_numeric_series(df[c])]


def _as_text(series: pd.Series) -> pd.Series:
    """String form of each value with nulls kept as NaN."""
    return series.map(lambda v: np.nan if pd.isna(v) else str(v)).astype(object)


def _resolve_cols(df: pd.DataFrame, config: Dict[str, Any]) -> List[str]:
    target = config.get('target_column')
    cols = config.get('columns')
    if cols is None:
        cols = detect_categorical_columns(df)
    return [c for c in cols if c in df.columns and c != target]


# --- One-Hot Encoder ---
class OneHotEncoderCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        cols = _resolve_cols(df, config)
        if not cols:
            return {}

        df_fit = pd.DataFrame({c: _as_text(df[c]).fillna(MISSING_TOKEN) for c in cols})
        encoder = OneHotEncoder(
            drop='first',
            handle_unknown='ignore',
            sparse_output=False,
            dtype=np.int8
        )
        encoder.fit(df_fit)

        for i, col in enumerate(cols):
            if len(encoder.categories_[i]) == 1:
                logger.warning(
                    f"OneHotEncoder: Column '{col}' has a single category "
                    f"('{encoder.categories_[i][0]}'); dropping the first level leaves no features."
                )

        return {
            'type': 'onehot',
            'columns': cols,
            'encoder_object': encoder,
            'feature_names': encoder.get_feature_names_out(cols).tolist()
        }

class OneHotEncoderApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        if not params or not params.get('columns'):
            return df.copy()

        cols = params['columns']
        encoder = params['encoder_object']
        X_sub = pd.DataFrame({c: _as_text(df[c]).fillna(MISSING_TOKEN) for c in cols}, index=df.index)

        encoded = pd.DataFrame(
            encoder.transform(X_sub),
            columns=params['feature_names'],
            index=df.index
        )
        return pd.concat([df.drop(columns=cols), encoded], axis=1)


# --- Label (integer code) Encoder ---
class LabelEncoderCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        cols = _resolve_cols(df, config)
        if not cols:
            return {}

        # Unseen and missing values both become NaN, later replaced by the sentinel.
        encoder = OrdinalEncoder(
            handle_unknown='use_encoded_value',
            unknown_value=np.nan,
            encoded_missing_value=np.nan
        )
        encoder.fit(pd.DataFrame({c: _as_text(df[c]) for c in cols}))
        return {
            'type': 'label',
            'columns': cols,
            'encoder_object': encoder,
            'categories': {c: [str(v) for v in cats if not pd.isna(v)] for c, cats in zip(cols, encoder.categories_)}
        }

class LabelEncoderApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        if not params or not params.get('columns'):
            return df.copy()

        cols = params['columns']
        codes = params['encoder_object'].transform(
            pd.DataFrame({c: _as_text(df[c]) for c in cols}, index=df.index)
        )
        out = df.copy()
        for i, col in enumerate(cols):
            out[col] = codes[:, i].astype(float)
        return out


# --- Target (mean) Encoder ---
class TargetEncoderCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        target_col = config.get('target_column')
        if not target_col or target_col not in df.columns:
            logger.error(f"TargetEncoder requires target column '{target_col}' to be present in training data.")
            return {}

        cols = _resolve_cols(df, config)
        if not cols:
            return {}

        y = pd.to_numeric(df[target_col], errors='coerce')
        global_mean = float(y.mean())
        mappings = {}
        for col in cols:
            means = y.groupby(_as_text(df[col])).mean()
            mappings[col] = {str(k): float(v) for k, v in means.items()}

        return {
            'type': 'target',
            'columns': cols,
            'mappings': mappings,
            'global_mean': global_mean
        }

class TargetEncoderApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        if not params or not params.get('columns'):
            return df.copy()

        out = df.copy()
        global_mean = params['global_mean']
        for col in params['columns']:
            mapping = params['mappings'][col]
            text = _as_text(out[col])
            encoded = text.map(lambda v: np.nan if pd.isna(v) else mapping.get(v, global_mean))
            out[col] = encoded.astype(float)
        return out


# --- Native categorical (pandas category dtype) ---
class CategoryDtypeCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        cols = _resolve_cols(df, config)
        if not cols:
            return {}
        return {
            'type': 'category_dtype',
            'columns': cols,
            'categories': {c: sorted(_as_text(df[c]).dropna().unique().tolist()) for c in cols}
        }

class CategoryDtypeApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        if not params or not params.get('columns'):
            return df.copy()

        out = df.copy()
        for col in params['columns']:
            # values outside the training categories become NaN
            dtype = pd.CategoricalDtype(categories=params['categories'][col])
            out[col] = _as_text(out[col]).astype(dtype)
        return out
