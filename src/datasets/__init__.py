"""
Datasets layer
--------------

Loading, schema checks and row filters for the input tables:

- nations.csv      (development indicators by country and year)
- warming.csv      (global temperature anomaly by year)
- simulations.csv  (simulated anomalies by year and scenario type)
"""

from .loaders import (  # noqa: F401
    DATA_DIR,
    NATIONS_CSV_NAME,
    SIMULATIONS_CSV_NAME,
    WARMING_CSV_NAME,
    load_nations,
    load_simulations,
    load_warming,
)
from .filters import filter_between, filter_up_to, filter_year_equals  # noqa: F401
from .download import DATASET_BASE_URL_ENV, download_dataset, ensure_datasets  # noqa: F401

__all__ = [
    "DATA_DIR",
    "NATIONS_CSV_NAME",
    "WARMING_CSV_NAME",
    "SIMULATIONS_CSV_NAME",
    "DATASET_BASE_URL_ENV",
    "load_nations",
    "load_warming",
    "load_simulations",
    "filter_year_equals",
    "filter_up_to",
    "filter_between",
    "download_dataset",
    "ensure_datasets",
]
