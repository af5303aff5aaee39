"""Tests for prepared-data validation and loading."""
import numpy as np
import pandas as pd
import pytest

from aqnorm import add_date_unix, check_prepared_data, load_prepared_data
from aqnorm.errors import InvalidInput


class TestAddDateUnix:
    def test_seconds_since_epoch(self):
        df = pd.DataFrame({'date': pd.to_datetime(['1970-01-01', '1970-01-02'])})
        result = add_date_unix(df)

        assert list(result['date_unix']) == [0.0, 86400.0]
        assert 'date_unix' not in df.columns

    def test_requires_date(self):
        with pytest.raises(InvalidInput):
            add_date_unix(pd.DataFrame({'value': [1.0]}))


class TestCheckPreparedData:
    def test_valid_frame_returned(self, prepared_data):
        assert check_prepared_data(prepared_data) is prepared_data

    def test_empty_frame(self, prepared_data):
        with pytest.raises(InvalidInput, match="no rows"):
            check_prepared_data(prepared_data.iloc[0:0])

    def test_string_dates_rejected(self, prepared_data):
        df = prepared_data.assign(date=prepared_data['date'].dt.strftime('%Y-%m-%d'))
        with pytest.raises(InvalidInput, match="datetimes"):
            check_prepared_data(df)

    def test_missing_dates_rejected(self, prepared_data):
        df = prepared_data.copy()
        df.loc[2, 'date'] = pd.NaT
        with pytest.raises(InvalidInput, match="missing"):
            check_prepared_data(df)

    def test_non_numeric_trend_rejected(self, prepared_data):
        df = prepared_data.assign(date_unix='x')
        with pytest.raises(InvalidInput, match="numeric"):
            check_prepared_data(df)


class TestLoadPreparedData:
    def test_round_trip_csv(self, prepared_data, tmp_path):
        path = tmp_path / 'prepared.csv'
        prepared_data.to_csv(path, index=False)

        loaded = load_prepared_data(path)

        assert pd.api.types.is_datetime64_any_dtype(loaded['date'])
        np.testing.assert_allclose(loaded['ws'], prepared_data['ws'])

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_prepared_data(tmp_path / 'nothing.csv')
