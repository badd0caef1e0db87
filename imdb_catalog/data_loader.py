"""
Data loading module.
Reads titles and ratings from the IMDb TSV files (or a JSON Lines export) and builds the catalog.
"""

# Standard libs for JSON parsing, typing, and paths
import json  # read JSON lines
from pathlib import Path  # filesystem-safe paths
from typing import Dict, FrozenSet, Iterable, Iterator, List, Tuple

# Console logging
from loguru import logger  # console logger

from .catalog import MovieCatalog  # immutable dataset handed to the engine
from .config import Settings  # dataset locations
from .errors import InvalidGenreError, InvalidTypeError  # unknown tags in the files
from .models import Genre, Movie, Rating, TitleType  # structured records

# Marker for a missing value in the IMDb TSV files
NULL = '\\N'

# Number of columns in title.basics.tsv / title.ratings.tsv
BASICS_COLUMNS = 9
RATINGS_COLUMNS = 3


class DataLoader:
	"""
	Handles loading title records and turning them into a MovieCatalog.
	Rows that cannot be parsed are skipped with a warning; the rest of the file still loads.
	"""

	def load_dataset(self, settings: Settings) -> MovieCatalog:
		"""Load the small or large dataset selected by ``settings``."""
		logger.info(f"[DataLoader] Loading {settings.dataset} dataset from {settings.dataset_dir}")
		return self.load_catalog(settings.basics_path, settings.ratings_path)

	def load_catalog(self, basics_path, ratings_path) -> MovieCatalog:
		"""Load ratings first, then titles (attaching their ratings), then index the result."""
		ratings = self.load_ratings(ratings_path)  # tconst -> Rating
		movies = self.load_titles(basics_path, ratings)  # file order
		return self._build_catalog(movies)

	def load_catalog_from_jsonl(self, filepath) -> MovieCatalog:
		"""Build a catalog from a JSON Lines file (one title per line)."""
		return self._build_catalog(self.load_movies_from_jsonl(filepath))

	def load_ratings(self, filepath) -> Dict[str, Rating]:
		"""
		Read title.ratings.tsv: tconst, averageRating, numVotes.
		Returns a dict keyed by tconst.
		"""
		ratings: Dict[str, Rating] = {}  # accumulator
		for line_num, fields in self._read_tsv(filepath, RATINGS_COLUMNS):
			tconst, score, votes = fields[:RATINGS_COLUMNS]
			try:
				ratings[tconst] = Rating(id=tconst, score=float(score), votes=int(votes))
			except ValueError as e:
				logger.warning(f"[DataLoader] Skipping invalid rating at line {line_num}: {e}")  # bad number
		logger.info(f"[DataLoader] Loaded {len(ratings)} ratings.")  # summary
		return ratings

	def load_titles(self, filepath, ratings: Dict[str, Rating]) -> List[Movie]:
		"""
		Read title.basics.tsv and attach each title's rating.
		Adult titles are skipped; titles without a rating get a zero rating with no votes.
		"""
		movies: List[Movie] = []  # accumulator, keeps file order
		skipped_adult = 0  # count of intentionally excluded rows
		for line_num, fields in self._read_tsv(filepath, BASICS_COLUMNS):
			tconst, title_type, primary_title, _, is_adult, start_year, _, _, genres = fields[:BASICS_COLUMNS]
			if is_adult == '1':
				skipped_adult += 1
				continue
			try:
				movie = Movie(
					id=tconst,
					title=primary_title,
					title_type=TitleType.parse(title_type),
					year=self._parse_year(start_year),
					rating=ratings.get(tconst) or Rating(id=tconst, score=0.0, votes=0),
					genres=self._parse_genres(genres.split(',') if genres != NULL else [], tconst),
				)
			except InvalidTypeError as e:
				logger.warning(f"[DataLoader] Skipping title at line {line_num}: {e}")  # unknown title type
				continue
			except ValueError as e:
				logger.warning(f"[DataLoader] Skipping malformed title at line {line_num}: {e}")  # bad year
				continue
			movies.append(movie)
		logger.info(f"[DataLoader] Loaded {len(movies)} titles ({skipped_adult} adult titles skipped).")
		return movies

	def load_movies_from_jsonl(self, filepath) -> List[Movie]:
		"""
		Load titles from a JSON Lines file where each line is one JSON object
		with id, title, title_type, genres, year, rating and votes.
		"""
		movies: List[Movie] = []  # accumulator for parsed Movie objects
		filepath = self._require_file(filepath)  # normalize path and check presence

		logger.info(f"[DataLoader] Loading movies from {filepath}...")  # log action

		with open(filepath, 'r', encoding='utf-8') as f:
			for line_num, line in enumerate(f, 1):  # keep track of line number for diagnostics
				if not line.strip():
					continue  # tolerate blank lines
				try:
					data = json.loads(line)  # parse JSON object per line
					movies.append(self._parse_movie_data(data))  # convert dict -> Movie
				except json.JSONDecodeError as e:
					logger.warning(f"[DataLoader] Skipping invalid JSON at line {line_num}: {e}")  # malformed line
				except (KeyError, TypeError, ValueError) as e:
					logger.warning(f"[DataLoader] Error parsing movie at line {line_num}: {e}")  # missing/bad field

		logger.info(f"[DataLoader] Successfully loaded {len(movies)} movies.")  # summary
		return movies

	def _parse_movie_data(self, data: Dict) -> Movie:
		"""Convert a raw dictionary (from a JSON line) into a Movie."""
		movie_id = str(data['id'])  # id is required
		return Movie(
			id=movie_id,
			title=str(data.get('title', '')),
			title_type=TitleType.parse(data.get('title_type') or data.get('titleType', '')),
			year=int(data['year']) if data.get('year') else 0,  # int year or 0
			rating=Rating(
				id=movie_id,
				score=float(data['rating']) if data.get('rating') else 0.0,
				votes=int(data['votes']) if data.get('votes') else 0,
			),
			genres=self._parse_genres(self._parse_comma_separated(data.get('genres')), movie_id),
		)

	def _build_catalog(self, movies: Iterable[Movie]) -> MovieCatalog:
		"""Drop repeated ids (keeping the first) and index the rest."""
		seen = set()
		unique: List[Movie] = []
		for movie in movies:
			if movie.id in seen:
				logger.warning(f"[DataLoader] Duplicate id {movie.id}; keeping the first occurrence")
				continue
			seen.add(movie.id)
			unique.append(movie)
		return MovieCatalog.from_movies(unique)

	def _read_tsv(self, filepath, columns: int) -> Iterator[Tuple[int, List[str]]]:
		"""Yield (line number, fields) for each data row, skipping the header and short rows."""
		filepath = self._require_file(filepath)
		logger.info(f"[DataLoader] Reading {filepath}...")
		with open(filepath, 'r', encoding='utf-8') as f:
			next(f, None)  # header row
			for line_num, line in enumerate(f, 2):
				line = line.rstrip('\r\n')
				if not line:
					continue
				fields = line.split('\t')
				if len(fields) < columns:
					logger.warning(
						f"[DataLoader] Skipping line {line_num}: expected {columns} columns, got {len(fields)}"
					)
					continue
				yield line_num, fields

	def _require_file(self, filepath) -> Path:
		filepath = Path(filepath)
		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Movie data file not found: {filepath}")
		return filepath

	def _parse_year(self, value: str) -> int:
		if not value or value == NULL:
			return 0
		return int(value)

	def _parse_genres(self, tags: Iterable[str], movie_id: str) -> FrozenSet[Genre]:
		"""Map genre tags to Genre members, dropping (and reporting) unknown ones."""
		genres = set()
		for tag in tags:
			if not tag.strip():
				continue
			try:
				genres.add(Genre.parse(tag))
			except InvalidGenreError as e:
				logger.warning(f"[DataLoader] Dropping genre of {movie_id}: {e}")
		return frozenset(genres)

	def _parse_comma_separated(self, value) -> List[str]:
		"""
		Normalize a value that may be None, a list, or a comma-separated string
		into a list of clean strings.
		"""
		if value is None:  # missing field
			return []  # treat as empty list
		if isinstance(value, list):  # already a list
			return [str(item).strip() for item in value if item]  # clean each
		if isinstance(value, str):  # comma-separated string
			return [item.strip() for item in value.split(',') if item.strip()]  # split/trim
		return []  # any other type becomes empty
