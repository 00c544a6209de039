from dataclasses import dataclass
from typing import Dict, Optional

import pandas as pd


@dataclass
class SplitDataset:
    """Train / test / optional validation frames produced by ``DataSplitter``."""

    train: pd.DataFrame
    test: pd.DataFrame
    validation: Optional[pd.DataFrame] = None

    def row_counts(self) -> Dict[str, int]:
        return {
            "train": len(self.train),
            "validation": 0 if self.validation is None else len(self.validation),
            "test": len(self.test),
        }
