"""Training orchestration: preconditions, flow with a stub learner, and xgboost end to end."""

from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd
import pytest
from pydantic import ValidationError
from sklearn.dummy import DummyClassifier

from exotab.data.dataset import Dataset
from exotab.exceptions import TrainingError, TrainingPreconditionError
from exotab.modeling.base import BaseModelCalculator
from exotab.modeling.config import TrainingConfig
from exotab.modeling.evaluation.classification import calculate_classification_metrics
from exotab.modeling.evaluation.regression import calculate_regression_metrics
from exotab.modeling.evaluation.schemas import ClassificationResult, RegressionResult, parse_training_result
from exotab.modeling.sklearn_wrapper import SklearnApplier
from exotab.modeling.trainer import ModelTrainer, infer_problem_type, validate_training_columns


class MajorityCalculator(BaseModelCalculator):
    """Ignores hyperparameters and predicts the most frequent class."""

    def __init__(self):
        self.seen_config: Dict[str, Any] = {}
        self.seen_validation = None

    @property
    def problem_type(self) -> str:
        return "classification"

    def fit(self, X: pd.DataFrame, y: pd.Series, config: Dict[str, Any],
            validation_data: Optional[Tuple[pd.DataFrame, pd.Series]] = None) -> Any:
        self.seen_config = config
        self.seen_validation = validation_data
        self.seen_columns = list(X.columns)
        self.seen_nulls = int(X.isna().sum().sum())
        self.seen_labels = y.value_counts().to_dict()
        return DummyClassifier(strategy="most_frequent").fit(X, y)


class ExplodingCalculator(MajorityCalculator):
    def fit(self, X, y, config, validation_data=None):
        raise RuntimeError("learner crashed")


# ---------------------------------------------------------------------------
# Config and preconditions
# ---------------------------------------------------------------------------

def test_training_config_defaults_and_aliases():
    config = TrainingConfig.model_validate({"targetColumn": "y", "featureColumns": ["a"], "nEstimators": 50})
    assert config.n_estimators == 50
    assert config.test_size == 0.2 and config.val_size == 0.2
    assert config.random_state == 42
    assert config.learner_params()["n_estimators"] == 50
    assert config.to_dict()["scalePositiveWeight"] == 1.0


def test_training_config_rejects_oversized_splits():
    with pytest.raises(ValidationError):
        TrainingConfig(test_size=0.6, val_size=0.5)
    assert TrainingConfig(test_size=0.6, val_size=0.5, use_val_as_test=True).validation_fraction == 0.0


def test_infer_problem_type():
    assert infer_problem_type(pd.Series(range(20))) == "classification"
    assert infer_problem_type(pd.Series(range(21))) == "regression"


@pytest.mark.parametrize("config, fragment", [
    ({"featureColumns": ["edad"]}, "No target"),
    ({"targetColumn": "activo"}, "No feature"),
    ({"targetColumn": "activo", "featureColumns": ["activo", "edad"]}, "cannot also be a feature"),
])
def test_validate_training_columns(sample, config, fragment):
    with pytest.raises(TrainingPreconditionError) as exc:
        validate_training_columns(sample, TrainingConfig.model_validate(config))
    assert fragment in exc.value.message


def test_missing_columns_are_reported(sample):
    config = TrainingConfig(target_column="activo", feature_columns=["edad", "ghost", "phantom"])
    with pytest.raises(TrainingPreconditionError) as exc:
        ModelTrainer().train(sample, config)
    assert exc.value.missing_columns == ["ghost", "phantom"]


def test_too_few_target_rows():
    ds = Dataset.from_records([{"x": 1, "y": 1}, {"x": 2, "y": None}, {"x": 3, "y": None}])
    with pytest.raises(TrainingPreconditionError):
        ModelTrainer().train(ds, TrainingConfig(target_column="y", feature_columns=["x"]))


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

def test_classification_metrics_cover_all_classes():
    metrics = calculate_classification_metrics([0, 1, 1], [0, 1, 0], n_classes=3)
    assert metrics["accuracy"] == pytest.approx(2 / 3)
    assert metrics["confusion_matrix"] == [[1, 0, 0], [1, 1, 0], [0, 0, 0]]


def test_regression_metrics():
    metrics = calculate_regression_metrics([1.0, 2.0, 3.0], [1.0, 2.0, 5.0])
    assert metrics["mse"] == pytest.approx(4 / 3)
    assert metrics["rmse"] == pytest.approx(np.sqrt(4 / 3))
    assert metrics["mae"] == pytest.approx(2 / 3)


# ---------------------------------------------------------------------------
# Flow with a stub learner
# ---------------------------------------------------------------------------

def test_flow_with_stub_learner(classification_dataset):
    calculator = MajorityCalculator()
    trainer = ModelTrainer(calculator=calculator, applier=SklearnApplier())
    config = TrainingConfig(
        target_column="label",
        feature_columns=["f1", "f2", "color"],
        categorical_encoding="onehot",
        scale_positive_weight=3.0,
    )
    result = trainer.train(classification_dataset, config)

    assert isinstance(result, ClassificationResult)
    assert result.class_names == ["no", "yes"]
    assert result.row_counts == {"train": 72, "validation": 24, "test": 24}
    assert sum(sum(row) for row in result.confusion_matrix) == 24
    assert result.feature_importance == []

    assert calculator.seen_columns == ["f1", "f2", "color_green", "color_red"]
    assert calculator.seen_nulls == 0
    assert calculator.seen_validation is not None
    params = calculator.seen_config["params"]
    assert params["n_classes"] == 2
    assert params["scale_pos_weight"] == 3.0
    assert params["early_stopping_rounds"] == 10


def test_use_val_as_test_skips_validation(classification_dataset):
    calculator = MajorityCalculator()
    config = TrainingConfig(
        target_column="label",
        feature_columns=["f1", "f2"],
        use_val_as_test=True,
    )
    result = ModelTrainer(calculator=calculator, applier=SklearnApplier()).train(classification_dataset, config)
    assert result.val_accuracy is None
    assert result.row_counts["validation"] == 0
    assert calculator.seen_validation is None


def test_default_smote_balances_mixed_features():
    pytest.importorskip("imblearn")
    rng = np.random.RandomState(3)
    dataset = Dataset.from_frame(pd.DataFrame({
        "f1": rng.normal(size=60),
        "color": rng.choice(["red", "green", "blue"], 60),
        "label": ["no"] * 45 + ["yes"] * 15,
    }))
    calculator = MajorityCalculator()
    config = TrainingConfig(target_column="label", feature_columns=["f1", "color"], apply_balancing=True)
    result = ModelTrainer(calculator=calculator, applier=SklearnApplier()).train(dataset, config)

    assert result.row_counts == {"train": 54, "validation": 12, "test": 12}
    assert calculator.seen_labels == {0: 27, 1: 27}


def test_unexpected_errors_are_wrapped(classification_dataset):
    trainer = ModelTrainer(calculator=ExplodingCalculator(), applier=SklearnApplier())
    config = TrainingConfig(target_column="label", feature_columns=["f1"])
    with pytest.raises(TrainingError) as exc:
        trainer.train(classification_dataset, config)
    assert exc.value.details == {"operation": "train", "rows": 120, "features": 1}
    assert "learner crashed" in exc.value.message


def test_result_round_trip():
    result = RegressionResult(mse=1.0, mae=0.5, r2_score=0.9, rmse=1.0, row_counts={"train": 3})
    payload = result.to_dict()
    assert payload["modelType"] == "regression"
    assert payload["r2Score"] == 0.9
    assert parse_training_result(payload) == result


# ---------------------------------------------------------------------------
# xgboost end to end
# ---------------------------------------------------------------------------

class TestXGBoostTraining:
    @pytest.fixture(autouse=True)
    def _xgboost(self):
        pytest.importorskip("xgboost")

    def test_classification(self, classification_dataset):
        config = TrainingConfig(target_column="label", feature_columns=["f1", "f2", "color"], n_estimators=50)
        result = ModelTrainer().train(classification_dataset, config)

        assert result.model_type == "classification"
        assert 0.0 <= result.accuracy <= 1.0
        assert result.train_accuracy is not None and result.val_accuracy is not None
        assert len(result.confusion_matrix) == 2

        importances = [fi.importance for fi in result.feature_importance]
        assert importances == sorted(importances, reverse=True)
        assert sum(importances) == pytest.approx(1.0)
        assert {fi.feature for fi in result.feature_importance} == {"f1", "f2", "color"}

    @pytest.mark.parametrize("encoding", ["onehot", "label", "target"])
    def test_encodings(self, classification_dataset, encoding):
        config = TrainingConfig(
            target_column="label",
            feature_columns=["f1", "color"],
            categorical_encoding=encoding,
            n_estimators=20,
        )
        assert ModelTrainer().train(classification_dataset, config).model_type == "classification"

    def test_balancing_grows_train_split(self, classification_dataset):
        pytest.importorskip("imblearn")
        config = TrainingConfig(
            target_column="label",
            feature_columns=["f1", "f2", "color"],
            categorical_encoding="onehot",
            apply_balancing=True,
            balancing_method="oversampling",
            n_estimators=20,
        )
        result = ModelTrainer().train(classification_dataset, config)
        assert result.row_counts["train"] >= 72

    @pytest.mark.parametrize("seed", range(10))
    def test_singleton_class_always_reaches_training(self, seed):
        rng = np.random.RandomState(seed)
        dataset = Dataset.from_frame(pd.DataFrame({
            "x": rng.normal(size=40),
            "label": ["B"] * 20 + ["C"] * 19 + ["A"],
        }))
        config = TrainingConfig(target_column="label", feature_columns=["x"], n_estimators=5, random_state=seed)
        result = ModelTrainer().train(dataset, config)
        assert result.class_names == ["A", "B", "C"]
        assert result.row_counts == {"train": 24, "validation": 8, "test": 8}

    def test_regression(self, regression_dataset):
        config = TrainingConfig(target_column="y", feature_columns=["x1", "x2", "group"])
        result = ModelTrainer().train(regression_dataset, config)

        assert isinstance(result, RegressionResult)
        assert result.r2_score > 0.5
        assert result.rmse == pytest.approx(np.sqrt(result.mse))
        assert result.feature_importance[0].feature in ("x1", "x2")
