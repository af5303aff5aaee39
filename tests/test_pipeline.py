"""Integration test for the config-driven normalisation run."""
import joblib
import pandas as pd

from aqnorm import run_normalisation_pipeline


def test_pipeline_writes_normalised_series(forest, prepared_data, tmp_path):
    (tmp_path / 'models').mkdir()
    joblib.dump(forest, tmp_path / 'models' / 'forest.joblib')
    prepared_data.to_csv(tmp_path / 'prepared.csv', index=False)

    config_dir = tmp_path / 'config'
    config_dir.mkdir()
    config_path = config_dir / 'config.yaml'
    config_path.write_text(
        "data:\n"
        "  model_file: models/forest.joblib\n"
        "  prepared_file: prepared.csv\n"
        "  output_file: out/normalised.csv\n"
        "normalise:\n"
        "  n_samples: 5\n"
        "  n_cores: 1\n"
        "  se: true\n"
        "  random_state: 1\n",
        encoding='utf-8',
    )

    result = run_normalisation_pipeline(config_path)

    output = tmp_path / 'out' / 'normalised.csv'
    assert output.exists()
    saved = pd.read_csv(output)
    assert len(saved) == len(result) == prepared_data['date'].nunique()
    assert list(saved.columns) == ['date', 'value_predict', 'se']
