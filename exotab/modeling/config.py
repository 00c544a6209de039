from enum import Enum
from typing import List, Optional

from pydantic import Field, model_validator

from ..config import get_settings
from ..schemas import CamelModel


class BalancingMethod(str, Enum):
    SMOTE = "smote"
    UNDERSAMPLING = "undersampling"
    OVERSAMPLING = "oversampling"


class CategoricalEncoding(str, Enum):
    AUTO = "auto"
    ONEHOT = "onehot"
    LABEL = "label"
    TARGET = "target"


class TrainingConfig(CamelModel):
    """Feature/target selection, split fractions and learner hyperparameters."""

    target_column: Optional[str] = None
    feature_columns: List[str] = Field(default_factory=list)

    # split
    test_size: float = Field(default=0.2, gt=0, lt=1)
    val_size: float = Field(default=0.2, ge=0, lt=1)
    use_val_as_test: bool = False

    # preprocessing
    apply_balancing: bool = False
    balancing_method: BalancingMethod = BalancingMethod.SMOTE
    categorical_encoding: CategoricalEncoding = CategoricalEncoding.AUTO

    # learner
    max_depth: int = Field(default=6, ge=1)
    n_estimators: int = Field(default=100, ge=1)
    learning_rate: float = Field(default=0.1, gt=0)
    subsample: float = Field(default=1.0, gt=0, le=1)
    colsample_bytree: float = Field(default=1.0, gt=0, le=1)
    reg_alpha: float = Field(default=0.0, ge=0)
    reg_lambda: float = Field(default=1.0, ge=0)
    scale_positive_weight: float = Field(default=1.0, gt=0)
    early_stopping_rounds: Optional[int] = Field(default=10, ge=1)
    random_state: int = Field(default_factory=lambda: get_settings().DEFAULT_RANDOM_STATE)

    @model_validator(mode="after")
    def _check_split_sizes(self) -> "TrainingConfig":
        if not self.use_val_as_test and self.test_size + self.val_size >= 1:
            raise ValueError(
                f"testSize + valSize must be below 1 (got {self.test_size} + {self.val_size})"
            )
        return self

    @property
    def validation_fraction(self) -> float:
        return 0.0 if self.use_val_as_test else self.val_size

    def learner_params(self) -> dict:
        """Hyperparameters in the naming the xgboost estimators expect."""
        return {
            "max_depth": self.max_depth,
            "n_estimators": self.n_estimators,
            "learning_rate": self.learning_rate,
            "subsample": self.subsample,
            "colsample_bytree": self.colsample_bytree,
            "reg_alpha": self.reg_alpha,
            "reg_lambda": self.reg_lambda,
            "random_state": self.random_state,
        }
