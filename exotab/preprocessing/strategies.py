"""
Compiles a CleaningConfig into an ordered list of tagged steps.

Each ``StepKind`` names exactly one Calculator/Applier pair. The engine runs
the list front to back; nothing downstream branches on raw config strings.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type

from ..profiling.schemas import DatasetProfile
from .base import BaseApplier, BaseCalculator
from .config import (
    CleaningConfig,
    CleaningStrategy,
    ColumnType,
    FillStrategy,
    parse_fill_strategy,
    resolve_effective_type,
)
from .drop_and_missing import (
    DeduplicateApplier,
    DeduplicateCalculator,
    DropNullRowsApplier,
    DropNullRowsCalculator,
    ProjectColumnsApplier,
    ProjectColumnsCalculator,
)
from .filtering import (
    CategoryFilterApplier,
    CategoryFilterCalculator,
    RareCategoryApplier,
    RareCategoryCalculator,
)
from .imputation import (
    PropagateFillApplier,
    PropagateFillCalculator,
    SimpleFillApplier,
    SimpleFillCalculator,
)
from .outliers import IQRApplier, IQRCalculator

logger = logging.getLogger(__name__)


class StepKind(str, Enum):
    DEDUPLICATE = "deduplicate"
    PROJECT_COLUMNS = "project_columns"
    FILTER_VALUES = "filter_values"
    SELECT_CATEGORIES = "select_categories"
    GROUP_RARE = "group_rare"
    DROP_NULLS = "drop_nulls"
    REMOVE_OUTLIERS = "remove_outliers"
    FILL_VALUE = "fill_value"
    PROPAGATE = "propagate"


STEP_REGISTRY: Dict[StepKind, Tuple[Type[BaseCalculator], Type[BaseApplier]]] = {
    StepKind.DEDUPLICATE: (DeduplicateCalculator, DeduplicateApplier),
    StepKind.PROJECT_COLUMNS: (ProjectColumnsCalculator, ProjectColumnsApplier),
    StepKind.FILTER_VALUES: (CategoryFilterCalculator, CategoryFilterApplier),
    StepKind.SELECT_CATEGORIES: (CategoryFilterCalculator, CategoryFilterApplier),
    StepKind.GROUP_RARE: (RareCategoryCalculator, RareCategoryApplier),
    StepKind.DROP_NULLS: (DropNullRowsCalculator, DropNullRowsApplier),
    StepKind.REMOVE_OUTLIERS: (IQRCalculator, IQRApplier),
    StepKind.FILL_VALUE: (SimpleFillCalculator, SimpleFillApplier),
    StepKind.PROPAGATE: (PropagateFillCalculator, PropagateFillApplier),
}


@dataclass(frozen=True)
class CleaningStep:
    kind: StepKind
    config: Dict[str, Any] = field(default_factory=dict)
    column: Optional[str] = None

    def build(self) -> Tuple[BaseCalculator, BaseApplier]:
        calculator_cls, applier_cls = STEP_REGISTRY[self.kind]
        return calculator_cls(), applier_cls()


@dataclass(frozen=True)
class SkippedStep:
    column: Optional[str]
    reason: str
    kind: Optional[StepKind] = None


def compile_table_steps(config: CleaningConfig) -> List[CleaningStep]:
    """Whole-table steps: deduplicate, project, then the global value filters."""
    steps: List[CleaningStep] = []
    if config.remove_duplicates:
        steps.append(CleaningStep(StepKind.DEDUPLICATE, {'keep': 'first'}))

    if config.selected_columns:
        steps.append(CleaningStep(
            StepKind.PROJECT_COLUMNS,
            {'columns': list(config.selected_columns), 'target_column': config.target_column},
        ))

    for column, values in config.categorical_filters.items():
        if values:
            steps.append(CleaningStep(StepKind.FILTER_VALUES, {'column': column, 'values': list(values)}, column))
    return steps


def _parse_threshold(value: Any) -> Optional[float]:
    try:
        threshold = float(value)
    except (TypeError, ValueError):
        return None
    if threshold != threshold or threshold < 0:
        return None
    return threshold


def compile_column_steps(
    column: str,
    strategy: CleaningStrategy,
    effective_type: ColumnType,
) -> Tuple[List[CleaningStep], List[SkippedStep]]:
    steps: List[CleaningStep] = []
    skipped: List[SkippedStep] = []
    categorical = effective_type == ColumnType.CATEGORICAL

    if categorical and strategy.selected_categories:
        steps.append(CleaningStep(
            StepKind.SELECT_CATEGORIES,
            {'column': column, 'values': list(strategy.selected_categories)},
            column,
        ))

    if categorical and strategy.group_rare_categories:
        threshold = _parse_threshold(strategy.rare_threshold)
        if threshold is None:
            skipped.append(SkippedStep(column, f"invalid rare threshold {strategy.rare_threshold!r}", StepKind.GROUP_RARE))
        else:
            steps.append(CleaningStep(StepKind.GROUP_RARE, {'column': column, 'threshold': threshold}, column))

    if strategy.remove_nulls:
        steps.append(CleaningStep(StepKind.DROP_NULLS, {'column': column}, column))
        return steps, skipped

    if strategy.remove_outliers and effective_type == ColumnType.NUMERIC:
        steps.append(CleaningStep(StepKind.REMOVE_OUTLIERS, {'column': column}, column))
        return steps, skipped
    if strategy.remove_outliers:
        skipped.append(SkippedStep(column, "outlier removal needs a numeric column", StepKind.REMOVE_OUTLIERS))

    if strategy.fill_strategy is None or strategy.fill_strategy == "":
        return steps, skipped

    fill = parse_fill_strategy(strategy.fill_strategy)
    if fill is None:
        skipped.append(SkippedStep(column, f"unknown fill strategy {strategy.fill_strategy!r}", StepKind.FILL_VALUE))
    elif fill in (FillStrategy.MEAN, FillStrategy.MEDIAN) and categorical:
        skipped.append(SkippedStep(column, f"'{fill.value}' fill needs a numeric column", StepKind.FILL_VALUE))
    elif fill in (FillStrategy.MEAN, FillStrategy.MEDIAN, FillStrategy.MODE):
        steps.append(CleaningStep(StepKind.FILL_VALUE, {'column': column, 'strategy': fill.value}, column))
    elif fill in (FillStrategy.FORWARD, FillStrategy.BACKWARD):
        steps.append(CleaningStep(StepKind.PROPAGATE, {'column': column, 'direction': fill.value}, column))
    else:
        steps.append(CleaningStep(StepKind.DROP_NULLS, {'column': column}, column))

    return steps, skipped


def compile_strategy_steps(
    config: CleaningConfig,
    profile: DatasetProfile,
) -> Tuple[List[CleaningStep], List[SkippedStep]]:
    """
    Per-column steps in ``column_strategies`` order. ``profile`` describes the
    frame entering this phase and decides each column's effective type.
    """
    steps: List[CleaningStep] = []
    skipped: List[SkippedStep] = []
    for column, strategy in config.column_strategies.items():
        if profile.get(column) is None:
            skipped.append(SkippedStep(column, "column not present"))
            continue
        effective_type = resolve_effective_type(config, profile, column)
        col_steps, col_skipped = compile_column_steps(column, strategy, effective_type)
        steps.extend(col_steps)
        skipped.extend(col_skipped)
    return steps, skipped
