import logging
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from pydantic import Field

from ..data.dataset import Dataset
from ..exceptions import CleaningError
from ..logging_utils import log_data_action
from ..profiling.profiler import DataProfiler
from ..schemas import CamelModel
from .base import StatefulTransformer
from .config import CleaningConfig
from .strategies import (
    CleaningStep,
    SkippedStep,
    compile_strategy_steps,
    compile_table_steps,
)

logger = logging.getLogger(__name__)


class AppliedStepRecord(CamelModel):
    kind: str
    column: Optional[str] = None
    rows_before: int
    rows_after: int
    params: Dict[str, Any] = Field(default_factory=dict)


class SkippedStepRecord(CamelModel):
    kind: Optional[str] = None
    column: Optional[str] = None
    reason: str


class CleaningReport(CamelModel):
    """What a cleaning run did, in execution order."""

    rows_in: int = 0
    rows_out: int = 0
    applied: List[AppliedStepRecord] = Field(default_factory=list)
    skipped: List[SkippedStepRecord] = Field(default_factory=list)

    @property
    def rows_removed(self) -> int:
        return self.rows_in - self.rows_out


def _json_params(params: Dict[str, Any]) -> Dict[str, Any]:
    out = {}
    for key, value in params.items():
        if isinstance(value, (str, int, float, bool)) or value is None:
            out[key] = value
        elif isinstance(value, (list, tuple)):
            out[key] = [v if isinstance(v, (str, int, float, bool)) else str(v) for v in value]
        else:
            out[key] = str(value)
    return out


class CleaningEngine:
    """
    Runs a CleaningConfig against a Dataset:

    1. deduplicate
    2. project to the selected columns (target re-added)
    3. global categorical filters
    4. per-column strategies in configuration order

    A step that fails is logged and skipped; the remaining steps still run.
    """

    def clean(self, dataset: Dataset, config: CleaningConfig) -> Dataset:
        return self.clean_with_report(dataset, config)[0]

    def clean_with_report(self, dataset: Dataset, config: CleaningConfig) -> Tuple[Dataset, CleaningReport]:
        report = CleaningReport(rows_in=len(dataset), rows_out=len(dataset))
        if dataset.is_empty:
            return dataset, report

        try:
            df = dataset.frame
            df = self._run_steps(df, compile_table_steps(config), report)

            if df.empty:
                for column in config.column_strategies:
                    report.skipped.append(SkippedStepRecord(column=column, reason="no rows left"))
            else:
                profile = DataProfiler.generate_profile(Dataset(df))
                steps, skipped = compile_strategy_steps(config, profile)
                for item in skipped:
                    self._record_skip(report, item)
                df = self._run_steps(df, steps, report)

            result = Dataset(df, source=dataset.source)
        except Exception as e:
            log_data_action("clean", success=False, details=str(e))
            raise CleaningError(
                "clean", str(e), {"rows": len(dataset), "columns": len(dataset.columns)}
            ) from e

        report.rows_out = len(result)
        log_data_action(
            "clean",
            details=f"{report.rows_in} -> {report.rows_out} rows, "
                    f"{len(report.applied)} steps applied, {len(report.skipped)} skipped",
        )
        return result, report

    def _run_steps(self, df: pd.DataFrame, steps: List[CleaningStep], report: CleaningReport) -> pd.DataFrame:
        for step in steps:
            rows_before = len(df)
            calculator, applier = step.build()
            transformer = StatefulTransformer(calculator, applier, name=step.kind.value)
            try:
                df = transformer.fit_transform(df, step.config)
            except Exception as e:
                self._record_skip(report, SkippedStep(step.column, f"failed: {e}", step.kind))
                continue

            report.applied.append(AppliedStepRecord(
                kind=step.kind.value,
                column=step.column,
                rows_before=rows_before,
                rows_after=len(df),
                params=_json_params(transformer.params),
            ))
            logger.debug(f"{step.kind.value}({step.column}): {rows_before} -> {len(df)} rows")
        return df

    @staticmethod
    def _record_skip(report: CleaningReport, item: SkippedStep) -> None:
        logger.warning(f"Skipping {item.kind.value if item.kind else 'strategy'} for column '{item.column}': {item.reason}")
        report.skipped.append(SkippedStepRecord(
            kind=item.kind.value if item.kind else None,
            column=item.column,
            reason=item.reason,
        ))


def clean(dataset: Dataset, config: CleaningConfig) -> Dataset:
    return CleaningEngine().clean(dataset, config)
