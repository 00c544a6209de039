"""Schemas for training results."""

from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import ConfigDict, Field, TypeAdapter

from ...schemas import CamelModel


class FeatureImportance(CamelModel):
    feature: str
    importance: float


class BaseTrainingResult(CamelModel):
    """Fields shared by both result variants."""

    model_config = ConfigDict(protected_namespaces=())

    feature_importance: List[FeatureImportance] = Field(default_factory=list)
    row_counts: Dict[str, int] = Field(default_factory=dict)


class ClassificationResult(BaseTrainingResult):
    model_type: Literal["classification"] = "classification"
    accuracy: float
    precision: float
    recall: float
    f1_score: float
    confusion_matrix: List[List[int]] = Field(default_factory=list)
    class_names: List[str] = Field(default_factory=list)
    train_accuracy: Optional[float] = None
    val_accuracy: Optional[float] = None


class RegressionResult(BaseTrainingResult):
    model_type: Literal["regression"] = "regression"
    mse: float
    mae: float
    r2_score: float
    rmse: float
    train_r2: Optional[float] = None
    val_r2: Optional[float] = None


TrainingResult = Annotated[
    Union[ClassificationResult, RegressionResult],
    Field(discriminator="model_type"),
]

training_result_adapter: TypeAdapter = TypeAdapter(TrainingResult)


def parse_training_result(payload: dict) -> Union[ClassificationResult, RegressionResult]:
    """Rebuild the right result variant from its serialized form."""
    return training_result_adapter.validate_python(payload)
