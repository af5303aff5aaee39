"""Meteorological normalisation of air-quality time series.

The package resamples the weather covariates fed to a trained model while
holding the trend term fixed, and averages the counterfactual predictions
into a normalised series.
"""

from .config import NormaliseConfig, PipelineConfig, load_config
from .data_processing import add_date_unix, check_prepared_data, load_prepared_data
from .errors import AqnormError, InvalidInput, InvalidModel, UnsupportedOperation, WorkerFailure
from .normalise import default_n_cores, normalise
from .pipeline import run_normalisation_pipeline
from .predict import ModelAdapter, PredictionResult

__all__ = [
	"NormaliseConfig",
	"PipelineConfig",
	"load_config",
	"add_date_unix",
	"check_prepared_data",
	"load_prepared_data",
	"AqnormError",
	"InvalidInput",
	"InvalidModel",
	"UnsupportedOperation",
	"WorkerFailure",
	"default_n_cores",
	"normalise",
	"run_normalisation_pipeline",
	"ModelAdapter",
	"PredictionResult",
]
