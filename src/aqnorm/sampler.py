"""Covariate resampling for a single normalisation trial."""

from typing import Sequence

import numpy as np
import pandas as pd

from .data_processing import TREND_COLUMN
from .errors import InvalidInput


def default_variables(feature_names: Sequence[str], trend: str = TREND_COLUMN) -> list[str]:
    """Return the model's features minus the trend term, in training order."""
    return [name for name in feature_names if name != trend]


def draw_row_index(rng: np.random.Generator, n_rows: int, replace: bool = True) -> np.ndarray:
    """Draw ``n_rows`` row positions from ``[0, n_rows)``.

    With ``replace=False`` the draw is a full permutation.
    """
    if replace:
        return rng.integers(0, n_rows, size=n_rows)
    return rng.permutation(n_rows)


def check_variables(df: pd.DataFrame, variables: Sequence[str], trend: str = TREND_COLUMN) -> list[str]:
    variables = list(variables)
    if not variables:
        raise InvalidInput("At least one variable must be resampled.")
    if trend in variables:
        raise InvalidInput(f"The trend column '{trend}' cannot be resampled.")
    missing = [v for v in variables if v not in df.columns]
    if missing:
        raise InvalidInput(f"Variables not found in dataset: {missing}")
    return variables


def resample(
    df: pd.DataFrame,
    variables: Sequence[str],
    rng: np.random.Generator,
    replace: bool = True,
    trend: str = TREND_COLUMN,
) -> tuple[pd.DataFrame, np.ndarray]:
    """Resample ``variables`` of ``df`` with one shared row index.

    The date axis and the trend column keep their original order, so the
    covariates are decoupled from time while staying jointly consistent.

    Returns:
        The resampled copy of ``df`` and the row index that was applied.
    """
    variables = check_variables(df, variables, trend=trend)
    index_rows = draw_row_index(rng, len(df), replace=replace)

    sampled = df.copy()
    for column in variables:
        sampled[column] = df[column].to_numpy()[index_rows]

    return sampled, index_rows
