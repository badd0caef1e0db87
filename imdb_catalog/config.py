"""
Runtime settings.
Defaults can be overridden from the environment (IMDB_CATALOG_*) and then from command-line flags.
"""

import os  # environment-based settings
from pathlib import Path  # filesystem-safe paths
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field, field_validator  # validated settings model

# Levels understood by loguru
LOG_LEVELS = ('TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL')

# Settings field -> environment variable
ENV_VARS = {
	'data_dir': 'IMDB_CATALOG_DATA_DIR',
	'dataset': 'IMDB_CATALOG_DATASET',
	'log_level': 'IMDB_CATALOG_LOG_LEVEL',
	'min_votes_for_top_ranked': 'IMDB_CATALOG_MIN_VOTES',
}

BASICS_FILE = 'title.basics.tsv'
RATINGS_FILE = 'title.ratings.tsv'


class Settings(BaseModel):
	data_dir: Path = Path('data')  # root holding the small/ and large/ datasets
	dataset: Literal['small', 'large'] = 'small'  # which dataset to load
	log_level: str = 'WARNING'  # loguru level for the stderr sink
	min_votes_for_top_ranked: int = Field(default=1000, ge=0)  # eligibility bound for top rated queries

	@field_validator('log_level')
	@classmethod
	def _check_log_level(cls, value: str) -> str:
		level = value.strip().upper()
		if level not in LOG_LEVELS:
			raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
		return level

	@property
	def dataset_dir(self) -> Path:
		return self.data_dir / self.dataset

	@property
	def basics_path(self) -> Path:
		return self.dataset_dir / BASICS_FILE

	@property
	def ratings_path(self) -> Path:
		return self.dataset_dir / RATINGS_FILE

	@classmethod
	def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> 'Settings':
		"""
		Build settings from ``environ`` (defaults to os.environ), then apply ``overrides``.
		Overrides set to None are ignored so unset CLI flags keep the environment value.
		"""
		environ = os.environ if environ is None else environ
		values = {name: environ[var] for name, var in ENV_VARS.items() if environ.get(var)}
		values.update({name: value for name, value in overrides.items() if value is not None})
		return cls(**values)
