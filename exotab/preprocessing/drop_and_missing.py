from typing import Any, Dict, List

import pandas as pd

from .base import BaseCalculator, BaseApplier

# --- Deduplicate ---
class DeduplicateCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        # Nothing to learn; duplicates are judged across all present columns.
        return {
            'type': 'deduplicate',
            'keep': config.get('keep', 'first')
        }

class DeduplicateApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        keep = params.get('keep', 'first')
        if df.empty:
            return df.copy()
        return df.drop_duplicates(keep=keep)


# --- Column projection ---
class ProjectColumnsCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        # Config: {'columns': [...], 'target_column': 'x'}
        requested: List[str] = list(config.get('columns') or [])
        target = config.get('target_column')
        if target and target not in requested:
            requested.append(target)

        kept = [c for c in requested if c in df.columns]
        ignored = [c for c in requested if c not in df.columns]
        return {
            'type': 'project_columns',
            'columns': kept,
            'ignored': ignored
        }

class ProjectColumnsApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        cols = [c for c in params.get('columns', []) if c in df.columns]
        if not cols:
            return df.copy()
        return df[cols].copy()


# --- Drop rows with nulls in a column ---
class DropNullRowsCalculator(BaseCalculator):
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        column = config.get('column')
        missing = int(df[column].isna().sum()) if column in df.columns else 0
        return {
            'type': 'drop_null_rows',
            'column': column,
            'missing_count': missing
        }

class DropNullRowsApplier(BaseApplier):
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        column = params.get('column')
        if column not in df.columns:
            return df.copy()
        return df[df[column].notna()].copy()
