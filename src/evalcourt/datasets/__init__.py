"""Datasets -- case collections and the YAML loader."""

from evalcourt.datasets.dataset import Dataset
from evalcourt.datasets.loader import discover_datasets, import_callable, load_dataset

__all__ = ["Dataset", "discover_datasets", "import_callable", "load_dataset"]
