from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import pandas as pd


class BaseModelCalculator(ABC):
    """Fits a learner on encoded features and returns the fitted object."""

    @property
    @abstractmethod
    def problem_type(self) -> str:
        """'classification' or 'regression'."""

    @abstractmethod
    def fit(
        self,
        X: pd.DataFrame,
        y: pd.Series,
        config: Dict[str, Any],
        validation_data: Optional[Tuple[pd.DataFrame, pd.Series]] = None
    ) -> Any:
        """
        ``config`` holds the hyperparameters under ``'params'``;
        ``validation_data`` enables early stopping when given.
        """


class BaseModelApplier(ABC):
    @abstractmethod
    def predict(self, df: pd.DataFrame, model_artifact: Any) -> pd.Series:
        """Predictions aligned with ``df.index``."""
