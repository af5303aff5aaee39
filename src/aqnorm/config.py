"""Configuration loading utilities for the normalisation pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

import yaml


@dataclass
class DataConfig:
	"""Paths used by the normalisation pipeline."""

	model_file: Path
	prepared_file: Path
	output_file: Path


@dataclass
class NormaliseConfig:
	"""Resampling and aggregation settings passed to :func:`aqnorm.normalise`."""

	variables: Optional[tuple[str, ...]] = None
	n_samples: int = 300
	replace: bool = True
	se: bool = False
	aggregate: bool = True
	n_cores: Optional[int] = None
	verbose: bool = False
	random_state: Optional[int] = None
	backend: str = "threading"

	def as_kwargs(self) -> dict:
		"""Return the settings as keyword arguments for ``normalise``."""

		kwargs = asdict(self)
		if self.variables is not None:
			kwargs["variables"] = list(self.variables)
		return kwargs


@dataclass
class PipelineConfig:
	"""Top-level configuration for a normalisation run."""

	data: DataConfig
	normalise: NormaliseConfig


DEFAULT_CONFIG_PATH = Path("config/config.yaml")


def _resolve_path(path_value: str, base_dir: Optional[Path] = None) -> Path:
	"""Resolve a path string to an absolute :class:`Path`.

	Relative paths are anchored at the project root.
	"""

	path = Path(path_value)
	if not path.is_absolute() and base_dir is not None:
		path = base_dir / path
	return path


def _optional_int(value) -> Optional[int]:
	return None if value is None else int(value)


def parse_normalise_section(section: dict) -> NormaliseConfig:
	"""Build a :class:`NormaliseConfig` from a mapping, falling back to defaults."""

	variables = section.get("variables")
	return NormaliseConfig(
		variables=tuple(str(v) for v in variables) if variables else None,
		n_samples=int(section.get("n_samples", 300)),
		replace=bool(section.get("replace", True)),
		se=bool(section.get("se", False)),
		aggregate=bool(section.get("aggregate", True)),
		n_cores=_optional_int(section.get("n_cores")),
		verbose=bool(section.get("verbose", False)),
		random_state=_optional_int(section.get("random_state")),
		backend=str(section.get("backend", "threading")),
	)


def load_config(config_path: Optional[Path] = None) -> PipelineConfig:
	"""Load pipeline configuration from YAML."""

	config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

	# Absolute config: project root is the parent of the config directory
	if config_path.is_absolute():
		base_dir = config_path.parent.parent
	else:
		current = Path.cwd()
		if (current / config_path).exists():
			base_dir = current
		elif (current.parent / config_path).exists():
			base_dir = current.parent
		else:
			base_dir = current
		config_path = base_dir / config_path

	with open(config_path, "r", encoding="utf-8") as fp:
		payload = yaml.safe_load(fp) or {}

	data_section = payload.get("data", {})
	normalise_section = payload.get("normalise", {})

	data_cfg = DataConfig(
		model_file=_resolve_path(data_section.get("model_file", "models/randomforest_model.joblib"), base_dir),
		prepared_file=_resolve_path(data_section.get("prepared_file", "data/processed/prepared.csv"), base_dir),
		output_file=_resolve_path(data_section.get("output_file", "data/processed/normalised.csv"), base_dir),
	)

	return PipelineConfig(data=data_cfg, normalise=parse_normalise_section(normalise_section))
