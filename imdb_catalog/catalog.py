"""
Catalog module.
Holds the loaded titles in file order together with the id index used for constant-time lookups.
"""

from dataclasses import dataclass  # immutable container
from types import MappingProxyType  # read-only view over the index dict
from typing import Dict, Iterable, Iterator, Mapping, Tuple

from loguru import logger  # console logging

from .models import Movie


@dataclass(frozen=True, eq=False)
class MovieCatalog:
	"""
	The static dataset shared by every query.
	Built once after ingestion and never modified; the engine only reads from it.
	"""
	movies: Tuple[Movie, ...]  # titles in ingestion (file) order
	index: Mapping[str, Movie]  # id -> movie, one entry per title

	def __post_init__(self):
		# The index must cover exactly the titles in the sequence
		if len(self.index) != len(self.movies):
			raise ValueError(
				f"Index has {len(self.index)} entries but the catalog holds {len(self.movies)} movies"
			)
		for movie in self.movies:
			if self.index.get(movie.id) is not movie:
				raise ValueError(f"Index entry for {movie.id!r} does not match the catalog")

	@classmethod
	def from_movies(cls, movies: Iterable[Movie]) -> 'MovieCatalog':
		"""Freeze ``movies`` (keeping their order) and build the id index after the sequence."""
		ordered = tuple(movies)
		index: Dict[str, Movie] = {}
		for movie in ordered:
			if movie.id in index:
				raise ValueError(f"Duplicate movie id: {movie.id!r}")
			index[movie.id] = movie
		logger.info(f"[Catalog] Indexed {len(index)} movies")
		return cls(movies=ordered, index=MappingProxyType(index))

	def __len__(self) -> int:
		return len(self.movies)

	def __iter__(self) -> Iterator[Movie]:
		return iter(self.movies)
