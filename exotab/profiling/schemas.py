from enum import Enum
from typing import List, Optional, Union

from pydantic import Field

from ..schemas import CamelModel


class ColumnDtype(str, Enum):
    NUMERIC = "numeric"
    TEXT = "text"


class ColumnGroup(str, Enum):
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    TEXT = "text"


class ColumnProfile(CamelModel):
    name: str
    dtype: ColumnDtype
    is_numeric: bool
    is_categorical: bool
    unique_values: List[str] = Field(default_factory=list)
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    null_count: int = 0

    @property
    def group(self) -> ColumnGroup:
        if self.is_numeric:
            return ColumnGroup.NUMERIC
        if self.is_categorical:
            return ColumnGroup.CATEGORICAL
        return ColumnGroup.TEXT


class DatasetProfile(CamelModel):
    shape: List[int] = Field(default_factory=lambda: [0, 0])
    columns: List[ColumnProfile] = Field(default_factory=list)
    total_nulls: int = 0

    @property
    def row_count(self) -> int:
        return self.shape[0]

    @property
    def column_count(self) -> int:
        return self.shape[1]

    @property
    def completeness(self) -> float:
        """Share of non-null cells; 1.0 for an empty table."""
        cells = self.row_count * self.column_count
        if cells == 0:
            return 1.0
        return 1.0 - self.total_nulls / cells

    def get(self, name: str) -> Optional[ColumnProfile]:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def numeric_columns(self) -> List[str]:
        return [c.name for c in self.columns if c.group == ColumnGroup.NUMERIC]

    def categorical_columns(self) -> List[str]:
        return [c.name for c in self.columns if c.group == ColumnGroup.CATEGORICAL]

    def text_columns(self) -> List[str]:
        return [c.name for c in self.columns if c.group == ColumnGroup.TEXT]
