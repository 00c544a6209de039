"""
Training orchestration: dataset in, metric bundle out.

Order of work:

1. check target and feature columns
2. build X / y (rows with a null target are dropped)
3. decide the problem type (<= 20 distinct targets means classification)
4. split train / validation / test, stratified when possible
5. encode categorical features, fitted on the train split only
6. replace remaining numeric nulls with the sentinel
7. rebalance the train split (classification only)
8. fit the xgboost learner
9. score the test split and rank feature importances
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from ..config import get_settings
from ..data.container import SplitDataset
from ..data.dataset import Dataset
from ..exceptions import ExotabError, TrainingError, TrainingPreconditionError
from ..logging_utils import log_data_action
from ..preprocessing.base import StatefulTransformer
from ..preprocessing.encoding import (
    CategoryDtypeApplier,
    CategoryDtypeCalculator,
    LabelEncoderApplier,
    LabelEncoderCalculator,
    OneHotEncoderApplier,
    OneHotEncoderCalculator,
    TargetEncoderApplier,
    TargetEncoderCalculator,
    detect_categorical_columns,
)
from ..preprocessing.split import DataSplitter, FeatureTargetSelector
from .base import BaseModelApplier, BaseModelCalculator
from .config import CategoricalEncoding, TrainingConfig
from .evaluation.classification import calculate_classification_metrics, class_names_for, split_accuracy
from .evaluation.regression import calculate_regression_metrics, split_r2
from .evaluation.schemas import ClassificationResult, FeatureImportance, RegressionResult

logger = logging.getLogger(__name__)

TrainingOutcome = Union[ClassificationResult, RegressionResult]

_ENCODERS = {
    CategoricalEncoding.AUTO: (CategoryDtypeCalculator, CategoryDtypeApplier),
    CategoricalEncoding.ONEHOT: (OneHotEncoderCalculator, OneHotEncoderApplier),
    CategoricalEncoding.LABEL: (LabelEncoderCalculator, LabelEncoderApplier),
    CategoricalEncoding.TARGET: (TargetEncoderCalculator, TargetEncoderApplier),
}

TARGET_COLUMN = "__target__"


def infer_problem_type(y: pd.Series, max_classes: Optional[int] = None) -> str:
    if max_classes is None:
        max_classes = get_settings().CLASSIFICATION_MAX_CLASSES
    return "classification" if y.nunique(dropna=True) <= max_classes else "regression"


def validate_training_columns(dataset: Dataset, config: TrainingConfig) -> None:
    """Raise TrainingPreconditionError unless target and features are usable."""
    if not config.target_column:
        raise TrainingPreconditionError("No target column selected")
    if not config.feature_columns:
        raise TrainingPreconditionError("No feature columns selected")
    if config.target_column in config.feature_columns:
        raise TrainingPreconditionError(
            f"Target column '{config.target_column}' cannot also be a feature",
            details={"target_column": config.target_column},
        )

    requested = [config.target_column] + list(config.feature_columns)
    missing = [c for c in requested if c not in dataset.columns]
    if missing:
        raise TrainingPreconditionError(f"Columns not found in dataset: {missing}", missing_columns=missing)


class ModelTrainer:
    """Runs the full training flow for one TrainingConfig."""

    def __init__(self, calculator: Optional[BaseModelCalculator] = None, applier: Optional[BaseModelApplier] = None):
        # explicit learners are mainly a testing seam
        self.calculator = calculator
        self.applier = applier

    def train(self, dataset: Dataset, config: TrainingConfig) -> TrainingOutcome:
        validate_training_columns(dataset, config)
        try:
            result = self._train(dataset, config)
        except ExotabError:
            raise
        except Exception as e:
            log_data_action("train", success=False, details=str(e))
            raise TrainingError(
                "train", str(e), {"rows": len(dataset), "features": len(config.feature_columns)}
            ) from e

        log_data_action("train", details=f"{result.model_type} on {result.row_counts}")
        return result

    # --- steps ---

    def _prepare_frame(self, dataset: Dataset, config: TrainingConfig) -> pd.DataFrame:
        X, y = FeatureTargetSelector(config.target_column, config.feature_columns).select(dataset.frame)
        frame = X.copy()
        frame[TARGET_COLUMN] = y.to_numpy()
        before = len(frame)
        frame = frame[frame[TARGET_COLUMN].notna()].reset_index(drop=True)
        if len(frame) < before:
            logger.warning(f"Dropped {before - len(frame)} rows with a null target")
        if len(frame) < 3:
            raise TrainingPreconditionError(
                f"Need at least 3 rows with a target value to train, found {len(frame)}",
                details={"rows": len(frame)},
            )
        return frame

    def _encode_target(self, frame: pd.DataFrame, problem_type: str) -> Tuple[pd.DataFrame, List[str]]:
        if problem_type != "classification":
            frame[TARGET_COLUMN] = pd.to_numeric(frame[TARGET_COLUMN], errors="raise").astype(float)
            return frame, []

        labels = sorted(frame[TARGET_COLUMN].unique().tolist(), key=lambda v: (str(type(v)), v))
        codes = {label: i for i, label in enumerate(labels)}
        frame[TARGET_COLUMN] = frame[TARGET_COLUMN].map(codes).astype(int)
        return frame, class_names_for(labels)

    def _encode_features(self, splits: SplitDataset, config: TrainingConfig) -> SplitDataset:
        categorical = detect_categorical_columns(splits.train, exclude=[TARGET_COLUMN])
        if not categorical:
            return splits

        calculator_cls, applier_cls = _ENCODERS[config.categorical_encoding]
        transformer = StatefulTransformer(calculator_cls(), applier_cls(), name=f"encode_{config.categorical_encoding.value}")
        logger.info(f"Encoding {categorical} with '{config.categorical_encoding.value}'")
        return transformer.fit_transform(
            splits, {"columns": categorical, "target_column": TARGET_COLUMN}
        )

    @staticmethod
    def _fill_sentinel(df: Optional[pd.DataFrame]) -> Optional[pd.DataFrame]:
        if df is None:
            return None
        sentinel = get_settings().MISSING_SENTINEL
        out = df.copy()
        for col in out.columns:
            if col == TARGET_COLUMN or isinstance(out[col].dtype, pd.CategoricalDtype):
                continue
            if pd.api.types.is_bool_dtype(out[col].dtype):
                out[col] = out[col].astype(int)
            elif out[col].isna().any():
                out[col] = pd.to_numeric(out[col], errors="coerce").fillna(sentinel)
        return out

    def _balance(self, train: pd.DataFrame, config: TrainingConfig) -> pd.DataFrame:
        # imported here so imbalanced-learn is only needed when balancing is requested
        from ..preprocessing.resampling import BalancingApplier, BalancingCalculator

        transformer = StatefulTransformer(BalancingCalculator(), BalancingApplier(), name="balance")
        return transformer.fit_transform(train, {
            "method": config.balancing_method.value,
            "target_column": TARGET_COLUMN,
            "random_state": config.random_state,
        })

    def _learner(self, problem_type: str) -> Tuple[BaseModelCalculator, BaseModelApplier]:
        if self.calculator is not None and self.applier is not None:
            return self.calculator, self.applier
        if problem_type == "classification":
            from .classification import XGBClassifierApplier, XGBClassifierCalculator
            return XGBClassifierCalculator(), XGBClassifierApplier()
        from .regression import XGBRegressorApplier, XGBRegressorCalculator
        return XGBRegressorCalculator(), XGBRegressorApplier()

    @staticmethod
    def _xy(df: Optional[pd.DataFrame]) -> Tuple[Optional[pd.DataFrame], Optional[pd.Series]]:
        if df is None or df.empty:
            return None, None
        return df.drop(columns=[TARGET_COLUMN]), df[TARGET_COLUMN]

    @staticmethod
    def _feature_importance(model: Any, columns: List[str]) -> List[FeatureImportance]:
        raw = getattr(model, "feature_importances_", None)
        if raw is None:
            return []
        values = np.nan_to_num(np.asarray(raw, dtype=float))
        total = values.sum()
        if total > 0:
            values = values / total
        ranked = sorted(zip(columns, values), key=lambda item: item[1], reverse=True)
        return [FeatureImportance(feature=str(f), importance=float(v)) for f, v in ranked]

    def _train(self, dataset: Dataset, config: TrainingConfig) -> TrainingOutcome:
        frame = self._prepare_frame(dataset, config)

        problem_type = infer_problem_type(frame[TARGET_COLUMN])
        frame, class_names = self._encode_target(frame, problem_type)
        n_classes = len(class_names)
        logger.info(f"Training {problem_type} model on {len(frame)} rows, {len(config.feature_columns)} features")

        splitter = DataSplitter(
            test_size=config.test_size,
            validation_size=config.validation_fraction,
            random_state=config.random_state,
            stratify_col=TARGET_COLUMN if problem_type == "classification" else None,
        )
        splits = splitter.split(frame)
        splits = self._encode_features(splits, config)
        splits = SplitDataset(
            train=self._fill_sentinel(splits.train),
            test=self._fill_sentinel(splits.test),
            validation=self._fill_sentinel(splits.validation),
        )

        if config.apply_balancing:
            if problem_type == "classification":
                splits.train = self._balance(splits.train, config)
            else:
                logger.warning("Balancing requested for a regression target; skipped")

        X_train, y_train = self._xy(splits.train)
        X_val, y_val = self._xy(splits.validation)
        X_test, y_test = self._xy(splits.test)

        learner_config = config.learner_params()
        if config.early_stopping_rounds:
            learner_config["early_stopping_rounds"] = config.early_stopping_rounds
        if problem_type == "classification":
            learner_config["n_classes"] = n_classes
            learner_config["scale_pos_weight"] = config.scale_positive_weight

        calculator, applier = self._learner(problem_type)
        validation_data = (X_val, y_val) if X_val is not None else None
        model = calculator.fit(X_train, y_train, {"params": learner_config}, validation_data=validation_data)

        test_pred = applier.predict(X_test, model)
        train_pred = applier.predict(X_train, model)
        val_pred = applier.predict(X_val, model) if X_val is not None else None

        common = {
            "feature_importance": self._feature_importance(model, list(X_train.columns)),
            "row_counts": splits.row_counts(),
        }
        if problem_type == "classification":
            metrics = calculate_classification_metrics(y_test, test_pred, n_classes)
            return ClassificationResult(
                **metrics,
                class_names=class_names,
                train_accuracy=split_accuracy(y_train, train_pred),
                val_accuracy=split_accuracy(y_val, val_pred),
                **common,
            )

        metrics = calculate_regression_metrics(y_test, test_pred)
        return RegressionResult(
            **metrics,
            train_r2=split_r2(y_train, train_pred),
            val_r2=split_r2(y_val, val_pred),
            **common,
        )


def train_model(dataset: Dataset, config: TrainingConfig) -> TrainingOutcome:
    return ModelTrainer().train(dataset, config)
