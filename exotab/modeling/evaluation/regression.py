"""Regression metric helpers."""

from __future__ import annotations

import math
from typing import Any, Dict, Optional, Sequence

import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score


def _safe_r2(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    # r2 is undefined for fewer than two samples
    if len(y_true) < 2:
        return float("nan")
    return float(r2_score(y_true, y_pred))


def calculate_regression_metrics(y_true: Sequence[Any], y_pred: Sequence[Any]) -> Dict[str, float]:
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    mse = float(mean_squared_error(y_true, y_pred))
    return {
        "mse": mse,
        "mae": float(mean_absolute_error(y_true, y_pred)),
        "r2_score": _safe_r2(y_true, y_pred),
        "rmse": math.sqrt(mse),
    }


def split_r2(y_true: Optional[Sequence[Any]], y_pred: Optional[Sequence[Any]]) -> Optional[float]:
    if y_true is None or y_pred is None or len(y_true) < 2:
        return None
    return _safe_r2(np.asarray(y_true, dtype=float), np.asarray(y_pred, dtype=float))
