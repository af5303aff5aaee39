"""Prepared-dataset validation and loading for the normalisation engine."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

from .errors import InvalidInput


TREND_COLUMN = "date_unix"
DATE_COLUMN = "date"


def check_prepared_data(df: pd.DataFrame, trend: str = TREND_COLUMN) -> pd.DataFrame:
	"""Ensure ``df`` has the prepared shape and return it unchanged.

	A prepared dataset has at least one row, a ``date`` column of datetimes with
	no missing values and a numeric trend column.
	"""

	if not isinstance(df, pd.DataFrame):
		raise InvalidInput(f"Expected a pandas DataFrame, received {type(df).__name__}.")

	if df.empty:
		raise InvalidInput("Prepared dataset has no rows.")

	missing = [c for c in (DATE_COLUMN, trend) if c not in df.columns]
	if missing:
		raise InvalidInput(f"Prepared dataset is missing required columns: {missing}")

	if not pd.api.types.is_datetime64_any_dtype(df[DATE_COLUMN]):
		raise InvalidInput(f"Column '{DATE_COLUMN}' must hold datetimes, found {df[DATE_COLUMN].dtype}.")

	if df[DATE_COLUMN].isna().any():
		raise InvalidInput(f"Column '{DATE_COLUMN}' contains missing values.")

	if not pd.api.types.is_numeric_dtype(df[trend]):
		raise InvalidInput(f"Trend column '{trend}' must be numeric, found {df[trend].dtype}.")

	return df


def add_date_unix(df: pd.DataFrame, trend: str = TREND_COLUMN) -> pd.DataFrame:
	"""Return a copy of ``df`` with the trend column as seconds since the epoch."""

	if DATE_COLUMN not in df.columns:
		raise InvalidInput(f"Column '{DATE_COLUMN}' is required to derive '{trend}'.")

	df = df.copy()
	dates = pd.to_datetime(df[DATE_COLUMN])
	df[trend] = (dates - pd.Timestamp("1970-01-01")) / pd.Timedelta(seconds=1)
	df[trend] = df[trend].astype(np.float64)
	return df


def load_prepared_data(path: Path, trend: str = TREND_COLUMN) -> pd.DataFrame:
	"""Load a prepared CSV, parse ``date`` and validate the result."""

	path = Path(path)
	if not path.exists():
		raise FileNotFoundError(
			f"Prepared data not found at {path}. Prepare the dataset before normalising."
		)

	df = pd.read_csv(path)
	if DATE_COLUMN not in df.columns:
		raise InvalidInput(f"File '{path}' must contain a '{DATE_COLUMN}' column.")
	df[DATE_COLUMN] = pd.to_datetime(df[DATE_COLUMN], errors="coerce")
	return check_prepared_data(df, trend=trend)
