"""End-to-end normalisation run driven by the YAML configuration."""

import logging
from pathlib import Path

import joblib
import pandas as pd

from .config import load_config
from .data_processing import load_prepared_data
from .normalise import normalise

logger = logging.getLogger(__name__)


def run_normalisation_pipeline(config_path: Path | None = None) -> pd.DataFrame:
    """Run a complete normalisation.

    This function:
    1. Loads configuration
    2. Loads the trained model and the prepared dataset
    3. Normalises the series
    4. Saves the result as CSV

    Args:
        config_path: Optional path to config file

    Returns:
        The normalised (or raw ensemble) DataFrame that was saved
    """
    logging.basicConfig(level=logging.INFO, format="%(asctime)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    config = load_config(config_path)

    model_path = config.data.model_file
    if not model_path.exists():
        raise FileNotFoundError(
            f"Model file not found at {model_path}. "
            "Train a model on the prepared data first."
        )

    logger.info("Loading model from %s", model_path)
    model = joblib.load(model_path)

    logger.info("Loading prepared data from %s", config.data.prepared_file)
    df = load_prepared_data(config.data.prepared_file)

    result = normalise(model, df, **config.normalise.as_kwargs())

    output_path = config.data.output_file
    output_path.parent.mkdir(parents=True, exist_ok=True)
    result.to_csv(output_path, index=False)
    logger.info("Saved %d rows to %s", len(result), output_path)
    return result
