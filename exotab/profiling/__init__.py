from .profiler import DataProfiler
from .schemas import ColumnDtype, ColumnGroup, ColumnProfile, DatasetProfile

__all__ = ["DataProfiler", "ColumnDtype", "ColumnGroup", "ColumnProfile", "DatasetProfile"]
