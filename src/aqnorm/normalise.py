"""Meteorological normalisation by resampling covariates and predicting.

Each trial resamples the weather covariates of the prepared dataset, keeping
``date`` and the trend term in place, and predicts with the trained model.
The trial predictions are then averaged per date.
"""

import logging
from numbers import Integral
from typing import Optional, Sequence

import joblib
import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from .aggregate import TRIAL_COLUMN, aggregate_predictions
from .data_processing import DATE_COLUMN, TREND_COLUMN, check_prepared_data
from .errors import InvalidInput, UnsupportedOperation, WorkerFailure
from .predict import ModelAdapter, PredictionResult
from .progress import NullReporter, ProgressReporter, ProgressSink
from .sampler import check_variables, default_variables, resample

logger = logging.getLogger(__name__)


def default_n_cores() -> int:
    """All available CPUs minus one, never fewer than one."""
    return max(joblib.cpu_count() - 1, 1)


def _check_positive_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral) or value < 1:
        raise InvalidInput(f"'{name}' must be a positive integer, received {value!r}.")
    return int(value)


def build_records(index: int, dates: pd.Series, result: PredictionResult) -> pd.DataFrame:
    """Tag one trial's predictions with its id and the original dates."""
    records = pd.DataFrame({
        TRIAL_COLUMN: np.full(result.n_rows, index, dtype=np.int64),
        DATE_COLUMN: dates.to_numpy(),
        "value_predict": result.values,
    })
    if result.has_se:
        records["se"] = result.standard_errors
    return records


def run_trial(
    index: int,
    adapter: ModelAdapter,
    df: pd.DataFrame,
    variables: Sequence[str],
    seed: np.random.SeedSequence,
    replace: bool = True,
    se: bool = False,
    n_jobs: int = 1,
    trend: str = TREND_COLUMN,
) -> pd.DataFrame:
    """Resample, predict and tag a single trial."""
    rng = np.random.default_rng(seed)
    sampled, _ = resample(df, variables, rng, replace=replace, trend=trend)
    result = adapter.predict(sampled, se=se, n_jobs=n_jobs)
    return build_records(index, df[DATE_COLUMN], result)


def _run_trial_or_fail(index: int, *args, **kwargs) -> tuple[int, pd.DataFrame]:
    try:
        return index, run_trial(index, *args, **kwargs)
    except Exception as exc:
        raise WorkerFailure(index, f"{type(exc).__name__}: {exc}") from exc


def normalise(
    model,
    df: pd.DataFrame,
    variables: Optional[Sequence[str]] = None,
    n_samples: int = 300,
    replace: bool = True,
    se: bool = False,
    aggregate: bool = True,
    n_cores: Optional[int] = None,
    verbose: bool = False,
    random_state: Optional[int] = None,
    progress: Optional[ProgressSink] = None,
    backend: str = "threading",
    trend: str = TREND_COLUMN,
) -> pd.DataFrame:
    """Normalise a pollutant time series for average meteorological conditions.

    Args:
        model: Trained model exposing ``predict`` and its feature names
        df: Prepared dataset with ``date``, the trend column and the covariates
        variables: Covariates to resample. Defaults to every model feature
            except the trend term
        n_samples: Number of resample-and-predict trials
        replace: Sample rows with replacement
        se: Also compute standard errors of the predictions (slower)
        aggregate: Average the trials per date. When False the raw ensemble
            is returned with an ``n_sample`` trial id column
        n_cores: Worker pool size. Defaults to :func:`default_n_cores`
        verbose: Report progress through the logger
        random_state: Seed for the per-trial random generators
        progress: Callable receiving progress messages; implies ``verbose``
        backend: joblib backend running the trials
        trend: Name of the trend column held fixed during resampling

    Returns:
        DataFrame with ``date``, ``value_predict`` and, when ``se`` is True,
        ``se``; one row per date when aggregated.

    Raises:
        InvalidInput: Dataset or arguments are malformed
        InvalidModel: ``model`` cannot be used for prediction
        UnsupportedOperation: ``se`` was requested but the model cannot do it
        WorkerFailure: A trial raised; no partial ensemble is returned
    """
    df = check_prepared_data(df, trend=trend)
    n_samples = _check_positive_int(n_samples, "n_samples")
    n_cores = default_n_cores() if n_cores is None else _check_positive_int(n_cores, "n_cores")

    adapter = ModelAdapter(model)
    adapter.select_features(df)
    if se and not adapter.supports_se:
        raise UnsupportedOperation(
            f"Standard errors were requested but {type(model).__name__} cannot estimate them."
        )

    # Resolved once so every trial resamples the same columns
    if variables is None:
        variables = default_variables(adapter.feature_names, trend=trend)
    variables = check_variables(df, variables, trend=trend)

    n_workers = min(n_cores, n_samples)
    n_jobs_predict = max(n_cores // n_workers, 1)
    logger.debug(
        "Normalising with %d workers (%d per prediction), variables: %s",
        n_workers, n_jobs_predict, variables,
    )

    if verbose or progress is not None:
        reporter = ProgressReporter(n_samples, sink=progress)
    else:
        reporter = NullReporter(n_samples)

    seeds = np.random.SeedSequence(random_state).spawn(n_samples)

    reporter.start()
    trials = Parallel(n_jobs=n_workers, backend=backend, return_as="generator_unordered")(
        delayed(_run_trial_or_fail)(
            index,
            adapter,
            df,
            variables,
            seeds[index - 1],
            replace=replace,
            se=se,
            n_jobs=n_jobs_predict,
            trend=trend,
        )
        for index in range(1, n_samples + 1)
    )

    frames = []
    for completed, (_, records) in enumerate(trials, start=1):
        frames.append(records)
        reporter.update(completed)

    ensemble = pd.concat(frames, ignore_index=True)
    ensemble = ensemble.sort_values(TRIAL_COLUMN, kind="stable", ignore_index=True)

    if aggregate:
        reporter.aggregating()
    return aggregate_predictions(ensemble, aggregate=aggregate)
