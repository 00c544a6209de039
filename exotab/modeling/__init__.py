from .config import BalancingMethod, CategoricalEncoding, TrainingConfig
from .evaluation import ClassificationResult, FeatureImportance, RegressionResult, TrainingResult
from .trainer import ModelTrainer, infer_problem_type, train_model, validate_training_columns

__all__ = [
    "BalancingMethod",
    "CategoricalEncoding",
    "TrainingConfig",
    "ClassificationResult",
    "FeatureImportance",
    "RegressionResult",
    "TrainingResult",
    "ModelTrainer",
    "infer_problem_type",
    "train_model",
    "validate_training_columns",
]
