"""
Loaders for the three input tables used by the chart gallery.

Layout (relative to the data root, default `data/`):

    data/nations.csv       country, region, year, gdp_percap, life_expect, population
    data/warming.csv       year, value
    data/simulations.csv   year, value, type

Each loader reads the CSV (from a local path or through a StorageAdapter),
checks the minimal schema and coerces types. Extra columns are kept as
they come. The returned DataFrames are treated as immutable input by the
rest of the code base: they are filtered, never modified in place.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence

import pandas as pd

from adapters import StorageAdapter


DATA_DIR = Path("data")

NATIONS_CSV_NAME = "nations.csv"
WARMING_CSV_NAME = "warming.csv"
SIMULATIONS_CSV_NAME = "simulations.csv"

NATIONS_COLUMNS = ["country", "region", "year", "gdp_percap", "life_expect", "population"]
WARMING_COLUMNS = ["year", "value"]
SIMULATIONS_COLUMNS = ["year", "value", "type"]

TABLE_SCHEMAS: Dict[str, List[str]] = {
    NATIONS_CSV_NAME: NATIONS_COLUMNS,
    WARMING_CSV_NAME: WARMING_COLUMNS,
    SIMULATIONS_CSV_NAME: SIMULATIONS_COLUMNS,
}


def _read_table(
    path: Path | str,
    *,
    storage: StorageAdapter | None,
) -> pd.DataFrame:
    if storage is None:
        return pd.read_csv(Path(path))
    return storage.read_csv(str(path).replace("\\", "/"))


def _check_columns(df: pd.DataFrame, required: Sequence[str], *, source: Path | str) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise RuntimeError(
            f"Table {source} is missing required columns {missing} "
            f"(found: {list(df.columns)})"
        )


def _coerce_year(df: pd.DataFrame) -> None:
    df["year"] = pd.to_numeric(df["year"], errors="coerce").astype("Int64")


def _coerce_numeric(df: pd.DataFrame, columns: Sequence[str]) -> None:
    for col in columns:
        df[col] = pd.to_numeric(df[col], errors="coerce")


def load_nations(
    path: Path | str = DATA_DIR / NATIONS_CSV_NAME,
    *,
    storage: StorageAdapter | None = None,
) -> pd.DataFrame:
    """
    Load the per-country, per-year development indicators.

    Types after loading:
        country, region: string
        year: Int64
        gdp_percap, life_expect, population: float
    """
    df = _read_table(path, storage=storage)
    _check_columns(df, NATIONS_COLUMNS, source=path)

    _coerce_year(df)
    _coerce_numeric(df, ["gdp_percap", "life_expect", "population"])
    for col in ["country", "region"]:
        df[col] = df[col].astype("string")

    return df


def load_warming(
    path: Path | str = DATA_DIR / WARMING_CSV_NAME,
    *,
    storage: StorageAdapter | None = None,
) -> pd.DataFrame:
    """Load global temperature anomalies (year, value), sorted by year."""
    df = _read_table(path, storage=storage)
    _check_columns(df, WARMING_COLUMNS, source=path)

    _coerce_year(df)
    _coerce_numeric(df, ["value"])
    return df.sort_values("year", kind="stable").reset_index(drop=True)


def load_simulations(
    path: Path | str = DATA_DIR / SIMULATIONS_CSV_NAME,
    *,
    storage: StorageAdapter | None = None,
) -> pd.DataFrame:
    """Load simulated temperature trajectories tagged by scenario `type`."""
    df = _read_table(path, storage=storage)
    _check_columns(df, SIMULATIONS_COLUMNS, source=path)

    _coerce_year(df)
    _coerce_numeric(df, ["value"])
    df["type"] = df["type"].astype("string")
    return df


__all__ = [
    "DATA_DIR",
    "NATIONS_CSV_NAME",
    "WARMING_CSV_NAME",
    "SIMULATIONS_CSV_NAME",
    "NATIONS_COLUMNS",
    "WARMING_COLUMNS",
    "SIMULATIONS_COLUMNS",
    "TABLE_SCHEMAS",
    "load_nations",
    "load_warming",
    "load_simulations",
]
