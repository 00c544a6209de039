"""
Headless exploration session.

Holds the raw snapshot, the cleaned snapshot, their profiles and the
user's configurations, and wires loading, cleaning, correlation and
training together. Every cleaning run starts again from the raw snapshot.
"""

import logging
from typing import Any, List, Optional, Union

import httpx

from .analysis.correlations import (
    CorrelationError,
    CorrelationMatrix,
    CorrelationMethod,
    TargetCorrelation,
    generate_correlation_matrix,
    rank_target_correlations,
)
from .config import get_settings
from .data.dataset import Dataset
from .data.loader import load_csv_file, load_csv_url, parse_csv_text
from .data.sample import sample_dataset
from .exceptions import DataLoadError, ExotabError, PreconditionError
from .logging_utils import log_data_action
from .modeling.config import TrainingConfig
from .modeling.trainer import ModelTrainer, TrainingOutcome
from .preprocessing.config import CleaningConfig, ColumnType, initial_column_types, resolve_effective_type
from .preprocessing.engine import CleaningEngine, CleaningReport
from .profiling.profiler import DataProfiler
from .profiling.schemas import DatasetProfile
from .runtime import EngineGate, get_engine_gate

logger = logging.getLogger(__name__)

MISSING_TRAINING_INPUT = "missing data or configuration to train the model"


class ExplorationSession:
    def __init__(
        self,
        cleaning_config: Optional[CleaningConfig] = None,
        training_config: Optional[TrainingConfig] = None,
        gate: Optional[EngineGate] = None,
    ):
        self.raw: Optional[Dataset] = None
        self.cleaned: Optional[Dataset] = None
        self.raw_profile: Optional[DatasetProfile] = None
        self.cleaned_profile: Optional[DatasetProfile] = None
        self.cleaning_report: Optional[CleaningReport] = None
        self.cleaning_config = cleaning_config or CleaningConfig()
        self.training_config = training_config or TrainingConfig()
        self.training_result: Optional[TrainingOutcome] = None
        self.error: Optional[str] = None
        self.show_cleaned = False
        self.gate = gate or get_engine_gate()
        self._engine = CleaningEngine()

    # --- loading ---

    def set_raw(self, dataset: Dataset) -> None:
        """Install a new raw snapshot and drop everything derived from the old one."""
        self.raw = dataset
        self.raw_profile = DataProfiler.generate_profile(dataset)
        self.cleaned = None
        self.cleaned_profile = None
        self.cleaning_report = None
        self.training_result = None
        self.show_cleaned = False
        log_data_action("load", details=f"{dataset.source}: {dataset.shape[0]} rows x {dataset.shape[1]} columns")

    def _load_failed(self, exc: DataLoadError, fallback: bool) -> None:
        self.error = exc.message
        log_data_action("load", success=False, details=exc.message)
        if fallback and get_settings().FALLBACK_TO_SAMPLE:
            logger.warning(f"Load failed ({exc.message}); using the sample dataset")
            self.set_raw(sample_dataset())

    def load_csv_text(self, text: str, name: Optional[str] = None) -> bool:
        """Parse pasted text. On failure the current data is kept."""
        try:
            dataset = parse_csv_text(text, source=name or "pasted")
        except DataLoadError as e:
            self._load_failed(e, fallback=False)
            return False
        self.error = None
        self.set_raw(dataset)
        return True

    def load_csv_file(self, path: str) -> bool:
        try:
            dataset = load_csv_file(path)
        except DataLoadError as e:
            self._load_failed(e, fallback=True)
            return False
        self.error = None
        self.set_raw(dataset)
        return True

    async def load_csv_url(self, url: str, client: Optional[httpx.AsyncClient] = None) -> bool:
        await self.gate.ready()
        try:
            dataset = await load_csv_url(url, client=client)
        except DataLoadError as e:
            self._load_failed(e, fallback=True)
            return False
        self.error = None
        self.set_raw(dataset)
        return True

    def load_sample(self) -> None:
        self.set_raw(sample_dataset())

    # --- cleaning ---

    def update_cleaning_config(self, **changes: Any) -> CleaningConfig:
        """Merge changes (snake_case or camelCase keys) into the cleaning config."""
        merged = self.cleaning_config.model_dump()
        for key, value in changes.items():
            field = key if key in CleaningConfig.model_fields else _field_for_alias(key)
            merged[field] = value
        self.cleaning_config = CleaningConfig.model_validate(merged)
        return self.cleaning_config

    def initialize_column_types(self) -> None:
        """Fill in a type for every raw column, keeping the user's overrides."""
        if self.raw_profile is None:
            return
        types = initial_column_types(self.raw_profile, self.cleaning_config.column_types)
        self.cleaning_config = self.cleaning_config.model_copy(update={"column_types": types})

    def effective_column_type(self, column: str) -> ColumnType:
        profile = self.raw_profile or DatasetProfile()
        return resolve_effective_type(self.cleaning_config, profile, column)

    def apply_cleaning(self) -> Optional[Dataset]:
        if self.raw is None or not self.cleaning_config.is_enabled:
            return None
        cleaned, report = self._engine.clean_with_report(self.raw, self.cleaning_config)
        self.cleaned = cleaned
        self.cleaned_profile = DataProfiler.generate_profile(cleaned)
        self.cleaning_report = report
        return cleaned

    # --- views ---

    def set_show_cleaned(self, flag: bool) -> None:
        self.show_cleaned = flag

    @property
    def active_dataset(self) -> Optional[Dataset]:
        if self.show_cleaned and self.cleaned is not None:
            return self.cleaned
        return self.raw

    @property
    def active_profile(self) -> Optional[DatasetProfile]:
        if self.show_cleaned and self.cleaned is not None:
            return self.cleaned_profile
        return self.raw_profile

    # --- analysis ---

    def correlation_matrix(self, method: Union[str, CorrelationMethod] = "pearson") -> Union[CorrelationMatrix, CorrelationError]:
        dataset = self.active_dataset
        if dataset is None:
            return CorrelationError(message="no data loaded")
        return generate_correlation_matrix(dataset, method)

    def target_correlations(self, target: str, method: Union[str, CorrelationMethod] = "pearson") -> List[TargetCorrelation]:
        dataset = self.active_dataset
        if dataset is None:
            return []
        return rank_target_correlations(dataset, target, method)

    def update_training_config(self, **changes: Any) -> TrainingConfig:
        merged = self.training_config.model_dump()
        for key, value in changes.items():
            field = key if key in TrainingConfig.model_fields else _field_for_alias(key, TrainingConfig)
            merged[field] = value
        self.training_config = TrainingConfig.model_validate(merged)
        return self.training_config

    def train(self) -> Optional[TrainingOutcome]:
        """
        Train on the active dataset. Failures are reported through ``error``
        and return None.
        """
        dataset = self.active_dataset
        config = self.training_config
        if dataset is None or dataset.is_empty or not config.target_column or not config.feature_columns:
            self.error = MISSING_TRAINING_INPUT
            return None

        try:
            result = ModelTrainer().train(dataset, config)
        except PreconditionError as e:
            self.error = e.message
            return None
        except ExotabError as e:
            logger.error(f"Training failed: {e.message}")
            self.error = e.message
            return None

        self.error = None
        self.training_result = result
        return result


def _field_for_alias(alias: str, model=CleaningConfig) -> str:
    for name, info in model.model_fields.items():
        if info.alias == alias:
            return name
    raise KeyError(f"Unknown {model.__name__} field '{alias}'")
