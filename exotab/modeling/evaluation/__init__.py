from .classification import calculate_classification_metrics, split_accuracy
from .regression import calculate_regression_metrics, split_r2
from .schemas import (
    ClassificationResult,
    FeatureImportance,
    RegressionResult,
    TrainingResult,
    parse_training_result,
)

__all__ = [
    "calculate_classification_metrics",
    "calculate_regression_metrics",
    "split_accuracy",
    "split_r2",
    "ClassificationResult",
    "FeatureImportance",
    "RegressionResult",
    "TrainingResult",
    "parse_training_result",
]
