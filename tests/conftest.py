"""Shared test fixtures for normalisation tests."""
import numpy as np
import pandas as pd
import pytest
from sklearn.ensemble import RandomForestRegressor

from aqnorm import add_date_unix

FEATURES = ['date_unix', 'ws', 'air_temp']


class ConstantModel:
    """Predicts the same value for every row."""
    feature_names_ = FEATURES

    def __init__(self, value=5.0):
        self.value = value

    def predict(self, X):
        return np.full(len(X), self.value)


class WeatherModel:
    """Deterministic linear response to the covariates."""
    feature_names_ = FEATURES

    def __init__(self):
        self.seen_columns = None

    def predict(self, X):
        self.seen_columns = list(X.columns)
        return 2.0 * X['ws'].to_numpy() + X['air_temp'].to_numpy()


class FailingModel:
    feature_names_ = FEATURES

    def predict(self, X):
        raise ValueError("prediction exploded")


@pytest.fixture
def prepared_data():
    """Ten daily rows with distinct dates 2020-01-01..2020-01-10."""
    dates = pd.date_range('2020-01-01', '2020-01-10', freq='D')
    rng = np.random.default_rng(42)
    df = pd.DataFrame({
        'date': dates,
        'value': rng.normal(40, 5, len(dates)),
        'ws': rng.uniform(0, 10, len(dates)),
        'air_temp': rng.normal(10, 3, len(dates)),
        'site': 'london',
    })
    return add_date_unix(df)


@pytest.fixture
def repeated_dates_data(prepared_data):
    """Three rows per date, 30 rows over 10 distinct dates."""
    df = pd.concat([prepared_data] * 3, ignore_index=True)
    return df.sort_values('date', kind='stable', ignore_index=True)


@pytest.fixture
def forest(prepared_data):
    model = RandomForestRegressor(n_estimators=20, random_state=0)
    model.fit(prepared_data[FEATURES], prepared_data['value'])
    return model


@pytest.fixture
def constant_model():
    return ConstantModel(5.0)


@pytest.fixture
def weather_model():
    return WeatherModel()


@pytest.fixture
def failing_model():
    return FailingModel()
