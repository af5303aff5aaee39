"""Reduction of the prediction ensemble to one row per date."""

import pandas as pd

from .data_processing import DATE_COLUMN

TRIAL_COLUMN = "n_sample"


def aggregate_predictions(records: pd.DataFrame, aggregate: bool = True) -> pd.DataFrame:
    """Average the ensemble by date, or pass it through untouched.

    Numeric fields other than the trial id are averaged with missing values
    skipped; a date whose values are all missing stays missing. Output is
    sorted by date.
    """
    if not aggregate:
        return records

    numeric = records.drop(columns=[TRIAL_COLUMN], errors="ignore")
    numeric_columns = [
        c for c in numeric.columns
        if c != DATE_COLUMN and pd.api.types.is_numeric_dtype(numeric[c])
    ]

    aggregated = (
        numeric[[DATE_COLUMN] + numeric_columns]
        .groupby(DATE_COLUMN, sort=True)
        .mean()
        .reset_index()
    )
    return aggregated
