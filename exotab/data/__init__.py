from .container import SplitDataset
from .dataset import Dataset
from .loader import coerce_value, load_csv_file, load_csv_url, parse_csv_text
from .sample import sample_dataset

__all__ = [
    "Dataset",
    "SplitDataset",
    "coerce_value",
    "load_csv_file",
    "load_csv_url",
    "parse_csv_text",
    "sample_dataset",
]
