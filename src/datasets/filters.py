"""Row filters applied to the input tables before charting."""

from __future__ import annotations

import pandas as pd


def filter_year_equals(df: pd.DataFrame, year: int, *, column: str = "year") -> pd.DataFrame:
    """Rows whose `column` equals `year` (e.g. the nations snapshot for 2016)."""
    mask = (df[column] == year).fillna(False).astype(bool)
    return df.loc[mask].reset_index(drop=True)


def filter_up_to(df: pd.DataFrame, cutoff: int | float, *, column: str = "year") -> pd.DataFrame:
    """Rows whose `column` is <= `cutoff`; the cumulative subset of one frame."""
    mask = (df[column] <= cutoff).fillna(False).astype(bool)
    return df.loc[mask].reset_index(drop=True)


def filter_between(
    df: pd.DataFrame,
    start: int | float,
    end: int | float,
    *,
    column: str = "year",
) -> pd.DataFrame:
    """Rows with start <= `column` <= end."""
    if start > end:
        raise ValueError(f"Invalid range: start={start} > end={end}")
    mask = ((df[column] >= start) & (df[column] <= end)).fillna(False).astype(bool)
    return df.loc[mask].reset_index(drop=True)


__all__ = ["filter_year_equals", "filter_up_to", "filter_between"]
