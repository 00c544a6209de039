import logging
import math
from typing import List, Optional, Tuple

import pandas as pd
from sklearn.model_selection import train_test_split

from ..data.container import SplitDataset

logger = logging.getLogger(__name__)


class DataSplitter:
    """
    Train / validation / test partitioning of a training frame.

    Both fractions are taken from the full frame: ``test_size=0.2`` and
    ``validation_size=0.2`` leave 60% of the rows for training.
    """
    def __init__(self,
                 test_size: float = 0.2,
                 validation_size: float = 0.0,
                 random_state: int = 42,
                 shuffle: bool = True,
                 stratify_col: Optional[str] = None):
        if not 0 < test_size < 1:
            raise ValueError(f"test_size must lie strictly between 0 and 1 (got {test_size})")
        if validation_size < 0 or test_size + validation_size >= 1:
            raise ValueError(
                f"test_size + validation_size must leave rows for training "
                f"(got {test_size} + {validation_size})"
            )
        self.test_size = test_size
        self.validation_size = validation_size
        self.random_state = random_state
        self.shuffle = shuffle
        self.stratify_col = stratify_col

    def _stratify_labels(self, df: pd.DataFrame, holdout: float) -> Optional[pd.Series]:
        """
        Labels to stratify on, or None when stratification is impossible:
        a single class, a class with fewer than two rows, or a holdout
        too small to hold one row per class.
        """
        if not self.stratify_col:
            return None
        if self.stratify_col not in df.columns:
            raise ValueError(f"Cannot stratify on missing column '{self.stratify_col}'")

        counts = df[self.stratify_col].value_counts(dropna=False)
        if len(counts) < 2:
            return None

        n_holdout = math.ceil(holdout * len(df))
        smallest = int(counts.min())
        if smallest < 2 or n_holdout < len(counts) or len(df) - n_holdout < len(counts):
            logger.warning(
                f"Cannot stratify on '{self.stratify_col}' ({len(counts)} classes, "
                f"smallest has {smallest} rows); splitting without stratification"
            )
            return None
        return df[self.stratify_col]

    def _cut(self, df: pd.DataFrame, holdout: float) -> Tuple[pd.DataFrame, pd.DataFrame]:
        labels = self._stratify_labels(df, holdout)
        if labels is None and self.stratify_col:
            return self._cut_keeping_classes(df, holdout)
        return train_test_split(
            df,
            test_size=holdout,
            random_state=self.random_state,
            shuffle=self.shuffle,
            stratify=labels,
        )

    def _cut_keeping_classes(self, df: pd.DataFrame, holdout: float) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Unstratified cut that still leaves one row of every class on the kept
        side, so a rare class can never be missing from the training rows.
        """
        anchors = df.groupby(self.stratify_col, dropna=False, sort=False).sample(
            n=1, random_state=self.random_state
        )
        remainder = df.drop(index=anchors.index)
        n_holdout = min(math.ceil(holdout * len(df)), len(remainder))
        if n_holdout == 0:
            return df, df.iloc[0:0]
        if n_holdout == len(remainder):
            return anchors, remainder

        kept, held = train_test_split(
            remainder,
            test_size=n_holdout,
            random_state=self.random_state,
            shuffle=self.shuffle,
        )
        return pd.concat([anchors, kept]), held

    def split(self, df: pd.DataFrame) -> SplitDataset:
        if df.empty:
            raise ValueError("Nothing to split: the frame has no rows")

        rest, test = self._cut(df, self.test_size)
        if self.validation_size <= 0:
            return SplitDataset(train=rest, test=test, validation=None)

        # the validation fraction is re-expressed relative to what the test cut left
        train, validation = self._cut(rest, self.validation_size / (1 - self.test_size))
        return SplitDataset(train=train, test=test, validation=validation)


class FeatureTargetSelector:
    """Pulls the configured feature columns and the target out of a frame."""

    def __init__(self, target_column: str, feature_columns: Optional[List[str]] = None):
        self.target_column = target_column
        self.feature_columns = feature_columns

    def select(self, df: pd.DataFrame) -> Tuple[pd.DataFrame, pd.Series]:
        if self.target_column not in df.columns:
            raise ValueError(f"Unknown target column '{self.target_column}'")

        if not self.feature_columns:
            return df.drop(columns=[self.target_column]), df[self.target_column]

        unknown = [c for c in self.feature_columns if c not in df.columns]
        if unknown:
            raise ValueError(f"Unknown feature columns: {unknown}")
        return df[list(self.feature_columns)], df[self.target_column]
