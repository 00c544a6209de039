"""
Declarative cleaning configuration.

The models accept the camelCase objects produced by the front end
(``CleaningConfig.model_validate(payload)``) as well as snake_case keyword
arguments. Strategy values are loosely typed: an unknown fill strategy or a
non-numeric rare threshold still loads, and the engine turns it into a
logged no-op for that column only.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import Field, field_validator

from ..config import get_settings
from ..profiling.schemas import DatasetProfile
from ..schemas import CamelModel

logger = logging.getLogger(__name__)


class ColumnType(str, Enum):
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


class FillStrategy(str, Enum):
    MEAN = "mean"
    MEDIAN = "median"
    MODE = "mode"
    FORWARD = "forward"
    BACKWARD = "backward"
    DROP = "drop"


_FILL_ALIASES = {
    "ffill": FillStrategy.FORWARD,
    "pad": FillStrategy.FORWARD,
    "bfill": FillStrategy.BACKWARD,
    "backfill": FillStrategy.BACKWARD,
    "most_frequent": FillStrategy.MODE,
}


def parse_fill_strategy(value: Any) -> Optional[FillStrategy]:
    """Map a raw fill strategy to the enum; ``None`` when absent or unknown."""
    if value is None or value == "":
        return None
    if isinstance(value, FillStrategy):
        return value
    key = str(value).strip().lower()
    if key in _FILL_ALIASES:
        return _FILL_ALIASES[key]
    try:
        return FillStrategy(key)
    except ValueError:
        return None


class CleaningStrategy(CamelModel):
    remove_nulls: bool = False
    remove_outliers: bool = False
    fill_strategy: Any = None
    selected_categories: Optional[List[Any]] = None
    group_rare_categories: bool = False
    rare_threshold: Union[float, str, None] = Field(default_factory=lambda: get_settings().DEFAULT_RARE_THRESHOLD)

    @field_validator("fill_strategy", mode="before")
    @classmethod
    def _fill_to_text(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value


class CleaningConfig(CamelModel):
    remove_duplicates: bool = False
    selected_columns: List[str] = Field(default_factory=list)
    target_column: Optional[str] = None
    categorical_filters: Dict[str, List[Any]] = Field(default_factory=dict)
    column_types: Dict[str, str] = Field(default_factory=dict)
    column_strategies: Dict[str, CleaningStrategy] = Field(default_factory=dict)
    is_enabled: bool = False

    @field_validator("column_types", mode="before")
    @classmethod
    def _types_to_text(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: (v.value if isinstance(v, Enum) else v) for k, v in value.items()}
        return value


def resolve_effective_type(config: CleaningConfig, profile: DatasetProfile, column: str) -> ColumnType:
    """
    The type a column is treated as: the user override when it is a known
    type, otherwise numeric when the profile says so, else categorical.
    """
    override = config.column_types.get(column)
    if override is not None:
        try:
            return ColumnType(str(override).lower())
        except ValueError:
            logger.warning(f"Ignoring unknown column type '{override}' for column '{column}'")

    col_profile = profile.get(column)
    if col_profile is not None and col_profile.is_numeric:
        return ColumnType.NUMERIC
    return ColumnType.CATEGORICAL


def initial_column_types(profile: DatasetProfile, existing: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Column type map for every profiled column, keeping existing overrides."""
    existing = existing or {}
    types: Dict[str, str] = {}
    for col in profile.columns:
        if col.name in existing:
            types[col.name] = existing[col.name]
        else:
            types[col.name] = (ColumnType.NUMERIC if col.is_numeric else ColumnType.CATEGORICAL).value
    return types
