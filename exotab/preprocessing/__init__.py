from .base import BaseApplier, BaseCalculator, StatefulTransformer
from .config import (
    CleaningConfig,
    CleaningStrategy,
    ColumnType,
    FillStrategy,
    initial_column_types,
    resolve_effective_type,
)
from .engine import CleaningEngine, CleaningReport, clean
from .split import DataSplitter, FeatureTargetSelector
from .strategies import CleaningStep, StepKind

__all__ = [
    "BaseApplier",
    "BaseCalculator",
    "StatefulTransformer",
    "CleaningConfig",
    "CleaningStrategy",
    "ColumnType",
    "FillStrategy",
    "initial_column_types",
    "resolve_effective_type",
    "CleaningEngine",
    "CleaningReport",
    "clean",
    "DataSplitter",
    "FeatureTargetSelector",
    "CleaningStep",
    "StepKind",
]
