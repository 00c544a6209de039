import logging
from typing import Any, Dict

import pandas as pd
from imblearn.over_sampling import SMOTE, SMOTEN, SMOTENC, RandomOverSampler
from imblearn.under_sampling import RandomUnderSampler

from .base import BaseCalculator, BaseApplier
from .encoding import detect_categorical_columns

logger = logging.getLogger(__name__)

BALANCING_METHODS = ('smote', 'oversampling', 'undersampling')


class BalancingCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        # Config: {'method': 'smote', 'target_column': 'y', 'random_state': 42, 'k_neighbors': 5}
        method = config.get('method', 'smote')
        if method not in BALANCING_METHODS:
            logger.warning(f"Unknown balancing method '{method}'")
            return {}

        params = {
            'type': 'balancing',
            'method': method,
            'target_column': config.get('target_column'),
            'sampling_strategy': config.get('sampling_strategy', 'auto'),
            'random_state': config.get('random_state', 42),
        }
        if method == 'smote':
            target = params['target_column']
            k_neighbors = config.get('k_neighbors', 5)
            if target in df.columns and not df.empty:
                # SMOTE needs k_neighbors < size of the smallest class
                k_neighbors = min(k_neighbors, int(df[target].value_counts().min()) - 1)
            params['k_neighbors'] = k_neighbors
        return params


def _smote_for(X: pd.DataFrame, strategy: Any, random_state: int, k_neighbors: int):
    """SMOTE for numeric features, SMOTE-NC for mixed ones, SMOTE-N when every feature is categorical."""
    categorical = detect_categorical_columns(X)
    kwargs = {'sampling_strategy': strategy, 'random_state': random_state, 'k_neighbors': k_neighbors}
    if not categorical:
        return SMOTE(**kwargs)
    if len(categorical) == len(X.columns):
        return SMOTEN(**kwargs)
    return SMOTENC(categorical_features=categorical, **kwargs)


class BalancingApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        target_col = params.get('target_column')
        if not params or not target_col or target_col not in df.columns:
            return df.copy()

        X = df.drop(columns=[target_col])
        y = df[target_col]
        if y.nunique() < 2:
            logger.warning("Balancing skipped: the training split holds a single class")
            return df.copy()

        method = params['method']
        strategy = params.get('sampling_strategy', 'auto')
        random_state = params.get('random_state', 42)

        if method == 'smote':
            k_neighbors = params.get('k_neighbors', 5)
            if k_neighbors < 1:
                logger.warning("SMOTE skipped: the minority class has fewer than two rows")
                return df.copy()
            sampler = _smote_for(X, strategy, random_state, k_neighbors)
        elif method == 'oversampling':
            sampler = RandomOverSampler(sampling_strategy=strategy, random_state=random_state)
        else:
            sampler = RandomUnderSampler(sampling_strategy=strategy, random_state=random_state)

        try:
            X_res, y_res = sampler.fit_resample(X, y)
        except Exception as e:
            logger.error(f"Balancing ({method}) failed: {e}")
            return df.copy()

        if not isinstance(X_res, pd.DataFrame):
            X_res = pd.DataFrame(X_res, columns=X.columns)
        if not isinstance(y_res, pd.Series):
            y_res = pd.Series(y_res, name=target_col)

        out = X_res.reset_index(drop=True)
        out[target_col] = y_res.reset_index(drop=True).to_numpy()
        logger.info(f"Balancing ({method}) resized training split from {len(df)} to {len(out)} rows")
        return out[list(df.columns)]
