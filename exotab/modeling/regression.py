from typing import Any, Dict, Optional, Tuple

import pandas as pd
from xgboost import XGBRegressor

from .sklearn_wrapper import SklearnCalculator, SklearnApplier


# --- XGBoost Regressor ---
class XGBRegressorCalculator(SklearnCalculator):
    def __init__(self):
        super().__init__(
            model_class=XGBRegressor,
            default_params={
                "n_estimators": 100,
                "max_depth": 6,
                "learning_rate": 0.1,
                "tree_method": "hist",
                "enable_categorical": True,
                "random_state": 42,
                "n_jobs": 1,
            },
            problem_type="regression"
        )

    def build_params(self, config: Dict[str, Any], validation_data: Optional[Tuple[pd.DataFrame, pd.Series]]) -> Dict[str, Any]:
        params = super().build_params(config, validation_data)
        params.pop("n_classes", None)
        params.pop("scale_pos_weight", None)
        if validation_data is None:
            params.pop("early_stopping_rounds", None)
        return params

    def fit_kwargs(self, validation_data: Optional[Tuple[pd.DataFrame, pd.Series]]) -> Dict[str, Any]:
        if validation_data is None:
            return {}
        return {"eval_set": [validation_data], "verbose": False}

class XGBRegressorApplier(SklearnApplier):
    pass
