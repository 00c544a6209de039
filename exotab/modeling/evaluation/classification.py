"""Classification metric helpers."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    confusion_matrix,
    f1_score,
    precision_score,
    recall_score,
)

logger = logging.getLogger(__name__)


def calculate_classification_metrics(
    y_true: Sequence[Any],
    y_pred: Sequence[Any],
    n_classes: int,
) -> Dict[str, Any]:
    """
    Accuracy, weighted precision/recall/F1 and a confusion matrix whose rows
    and columns cover every class code ``0..n_classes-1``.
    """
    y_true = np.asarray(y_true)
    y_pred = np.asarray(y_pred)
    labels = list(range(n_classes))

    return {
        "accuracy": float(accuracy_score(y_true, y_pred)),
        "precision": float(precision_score(y_true, y_pred, labels=labels, average="weighted", zero_division=0)),
        "recall": float(recall_score(y_true, y_pred, labels=labels, average="weighted", zero_division=0)),
        "f1_score": float(f1_score(y_true, y_pred, labels=labels, average="weighted", zero_division=0)),
        "confusion_matrix": confusion_matrix(y_true, y_pred, labels=labels).astype(int).tolist(),
    }


def split_accuracy(y_true: Optional[Sequence[Any]], y_pred: Optional[Sequence[Any]]) -> Optional[float]:
    if y_true is None or y_pred is None or len(y_true) == 0:
        return None
    return float(accuracy_score(np.asarray(y_true), np.asarray(y_pred)))


def class_names_for(labels: List[Any]) -> List[str]:
    return [str(label) for label in labels]
