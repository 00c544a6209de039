"""exotab: profiling, cleaning, correlation and model training for tabular data."""

__version__ = "0.1.0"

from .analysis import generate_correlation_matrix, rank_target_correlations
from .config import Settings, get_settings
from .data import Dataset, load_csv_file, load_csv_url, parse_csv_text, sample_dataset
from .exceptions import (
    CleaningError,
    ConfigurationError,
    DataLoadError,
    ExotabError,
    PreconditionError,
    TrainingError,
    TrainingPreconditionError,
)
from .modeling import ModelTrainer, TrainingConfig, train_model
from .preprocessing import CleaningConfig, CleaningEngine, CleaningStrategy, clean
from .profiling import DataProfiler, DatasetProfile
from .runtime import EngineGate, get_engine_gate
from .session import ExplorationSession

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "Dataset",
    "load_csv_file",
    "load_csv_url",
    "parse_csv_text",
    "sample_dataset",
    "DataProfiler",
    "DatasetProfile",
    "CleaningConfig",
    "CleaningStrategy",
    "CleaningEngine",
    "clean",
    "generate_correlation_matrix",
    "rank_target_correlations",
    "TrainingConfig",
    "ModelTrainer",
    "train_model",
    "EngineGate",
    "get_engine_gate",
    "ExplorationSession",
    "ExotabError",
    "DataLoadError",
    "ConfigurationError",
    "PreconditionError",
    "TrainingPreconditionError",
    "CleaningError",
    "TrainingError",
]
