from abc import ABC, abstractmethod
from typing import Any, Dict, Union

import pandas as pd

from ..data.container import SplitDataset


class BaseCalculator(ABC):
    @abstractmethod
    def fit(self, df: pd.DataFrame, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Derives parameters (bounds, fill values, category maps) from a frame.
        Returns a plain dictionary of fitted parameters.
        """
        pass


class BaseApplier(ABC):
    @abstractmethod
    def apply(self, df: pd.DataFrame, params: Dict[str, Any]) -> pd.DataFrame:
        """
        Applies the transformation using fitted parameters. Never mutates ``df``.
        """
        pass


class StatefulTransformer:
    """
    Pairs a calculator with an applier. On a SplitDataset the parameters are
    fitted on the train split only and then applied to every split.
    """
    def __init__(self, calculator: BaseCalculator, applier: BaseApplier, name: str):
        self.calculator = calculator
        self.applier = applier
        self.name = name
        self.params: Dict[str, Any] = {}

    def fit_transform(self, dataset: Union[SplitDataset, pd.DataFrame], config: Dict[str, Any]) -> Union[SplitDataset, pd.DataFrame]:
        if isinstance(dataset, pd.DataFrame):
            self.params = self.calculator.fit(dataset, config)
            return self.applier.apply(dataset, self.params)

        self.params = self.calculator.fit(dataset.train, config)
        return self.transform(dataset)

    def transform(self, dataset: Union[SplitDataset, pd.DataFrame]) -> Union[SplitDataset, pd.DataFrame]:
        if isinstance(dataset, pd.DataFrame):
            return self.applier.apply(dataset, self.params)

        new_val = dataset.validation
        if dataset.validation is not None:
            new_val = self.applier.apply(dataset.validation, self.params)

        return SplitDataset(
            train=self.applier.apply(dataset.train, self.params),
            test=self.applier.apply(dataset.test, self.params),
            validation=new_val,
        )
