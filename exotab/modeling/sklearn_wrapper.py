import logging
from typing import Any, Dict, Optional, Tuple, Type

import pandas as pd

from .base import BaseModelApplier, BaseModelCalculator

logger = logging.getLogger(__name__)

_RESERVED_KEYS = {'type', 'target_column'}


class SklearnCalculator(BaseModelCalculator):
    """
    Fits any estimator with the scikit-learn ``fit``/``predict`` protocol.
    Subclasses adjust ``build_params`` and ``fit_kwargs``.
    """

    def __init__(self, model_class: Type[Any], default_params: Dict[str, Any], problem_type: str):
        self.model_class = model_class
        self.default_params = default_params
        self._problem_type = problem_type

    @property
    def problem_type(self) -> str:
        return self._problem_type

    def build_params(self, config: Dict[str, Any], validation_data: Optional[Tuple[pd.DataFrame, pd.Series]]) -> Dict[str, Any]:
        """Defaults overlaid with ``config['params']``, or with the flat config when that is absent."""
        merged = dict(self.default_params)
        if not config:
            return merged
        overrides = config.get('params') or {k: v for k, v in config.items() if k not in _RESERVED_KEYS}
        merged.update(overrides)
        return merged

    def fit_kwargs(self, validation_data: Optional[Tuple[pd.DataFrame, pd.Series]]) -> Dict[str, Any]:
        return {}

    def fit(
        self,
        X: pd.DataFrame,
        y: pd.Series,
        config: Dict[str, Any],
        validation_data: Optional[Tuple[pd.DataFrame, pd.Series]] = None
    ) -> Any:
        params = self.build_params(config, validation_data)
        logger.debug(f"Fitting {self.model_class.__name__} on {X.shape[0]} rows with {params}")
        estimator = self.model_class(**params)
        estimator.fit(X, y, **self.fit_kwargs(validation_data))
        return estimator


class SklearnApplier(BaseModelApplier):
    def predict(self, df: pd.DataFrame, model_artifact: Any) -> pd.Series:
        return pd.Series(model_artifact.predict(df), index=df.index)
