"""Adapter around trained models used by the normalisation engine."""

import inspect
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd
from joblib import Parallel, delayed, parallel_config
from sklearn.ensemble import BaggingRegressor, ExtraTreesRegressor, RandomForestRegressor

from .errors import InvalidInput, InvalidModel, UnsupportedOperation


# Bagged ensembles whose members are averaged with equal weight
BAGGED_ENSEMBLES = (RandomForestRegressor, ExtraTreesRegressor, BaggingRegressor)


@dataclass
class PredictionResult:
    """Predictions for one dataset, optionally with standard errors."""

    values: np.ndarray
    standard_errors: Optional[np.ndarray] = None

    @property
    def has_se(self) -> bool:
        return self.standard_errors is not None

    @property
    def n_rows(self) -> int:
        return len(self.values)


def _discover_feature_names(model) -> Optional[list[str]]:
    # sklearn estimators fitted on a DataFrame first, then explicit attributes
    for attribute in ("feature_names_in_", "feature_names_", "feature_names"):
        names = getattr(model, attribute, None)
        if names is not None and len(names) > 0:
            return [str(name) for name in names]
    return None


class ModelAdapter:
    """Uniform prediction interface over a trained model.

    The model must expose a callable ``predict`` and the names of the features
    it was trained on. Only those columns are passed to the model, so datasets
    may carry extra columns such as ``date`` or the response.
    """

    def __init__(self, model):
        if not callable(getattr(model, "predict", None)):
            raise InvalidModel(f"{type(model).__name__} does not provide a callable 'predict' method.")

        feature_names = _discover_feature_names(model)
        if feature_names is None:
            raise InvalidModel(
                f"Could not determine the feature names of {type(model).__name__}. "
                "Fit scikit-learn models on a DataFrame or set 'feature_names_'."
            )

        self.model = model
        self.feature_names = feature_names

    @property
    def is_bagged_ensemble(self) -> bool:
        return isinstance(self.model, BAGGED_ENSEMBLES) and hasattr(self.model, "estimators_")

    @property
    def accepts_return_std(self) -> bool:
        try:
            parameters = inspect.signature(self.model.predict).parameters
        except (TypeError, ValueError):
            return False
        return "return_std" in parameters

    @property
    def supports_se(self) -> bool:
        return self.is_bagged_ensemble or self.accepts_return_std

    def select_features(self, df: pd.DataFrame) -> pd.DataFrame:
        missing = [c for c in self.feature_names if c not in df.columns]
        if missing:
            raise InvalidInput(f"Missing required feature columns: {missing}")
        return df[self.feature_names]

    def _as_vector(self, values, n_rows: int) -> np.ndarray:
        values = np.asarray(values, dtype=float).reshape(-1)
        if len(values) != n_rows:
            raise InvalidModel(
                f"{type(self.model).__name__} returned {len(values)} predictions for {n_rows} rows."
            )
        return values

    def _predict_members(self, X: pd.DataFrame, n_jobs: int) -> np.ndarray:
        # Members are fitted on arrays, so feed them the raw values
        X_arr = X.to_numpy(dtype=np.float64)
        n_members = len(self.model.estimators_)
        # Bagging members may each see only a subset of the columns
        member_features = getattr(self.model, "estimators_features_", None)
        if member_features is None:
            member_features = [slice(None)] * n_members
        member_predictions = Parallel(n_jobs=n_jobs, prefer="threads")(
            delayed(estimator.predict)(X_arr[:, features])
            for estimator, features in zip(self.model.estimators_, member_features)
        )
        return np.vstack(member_predictions)

    def predict(self, df: pd.DataFrame, se: bool = False, n_jobs: int = 1) -> PredictionResult:
        """Predict ``df``, optionally with standard errors.

        Args:
            df: Dataset holding at least the model's features
            se: Also compute the standard error of each prediction (slower)
            n_jobs: Number of workers the model may use internally

        Returns:
            PredictionResult with ``standard_errors`` set when ``se`` is True
        """
        X = self.select_features(df)
        n_rows = len(X)

        if not se:
            with parallel_config(n_jobs=n_jobs):
                values = self.model.predict(X)
            return PredictionResult(values=self._as_vector(values, n_rows))

        if self.is_bagged_ensemble:
            members = self._predict_members(X, n_jobs)
            n_members = members.shape[0]
            ddof = 1 if n_members > 1 else 0
            values = members.mean(axis=0)
            standard_errors = members.std(axis=0, ddof=ddof) / np.sqrt(n_members)
            return PredictionResult(
                values=self._as_vector(values, n_rows),
                standard_errors=self._as_vector(standard_errors, n_rows),
            )

        if self.accepts_return_std:
            with parallel_config(n_jobs=n_jobs):
                values, standard_errors = self.model.predict(X, return_std=True)
            return PredictionResult(
                values=self._as_vector(values, n_rows),
                standard_errors=self._as_vector(standard_errors, n_rows),
            )

        raise UnsupportedOperation(
            f"Standard errors are not available for {type(self.model).__name__}."
        )


def predict(model, df: pd.DataFrame, se: bool = False, n_jobs: int = 1) -> PredictionResult:
    """Shortcut for ``ModelAdapter(model).predict(df, se=se, n_jobs=n_jobs)``."""
    return ModelAdapter(model).predict(df, se=se, n_jobs=n_jobs)
