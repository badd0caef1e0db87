"""
Search engine module.
Read-only queries over the catalog: filtering, grouping by year, and top-N rankings.
"""

import heapq  # bounded top-N selection
from collections import Counter  # per-year genre tallies
from typing import Dict, Iterator, List, Optional, Union

from loguru import logger  # console logging

from .catalog import MovieCatalog
from .models import Genre, Movie, TitleType
from .ranking import votes_sort_key

# The minimum number of votes a title needs to be considered for top ranking
MIN_NUM_VOTES_FOR_TOP_RANKED = 1000

TypeTag = Union[TitleType, str]
GenreTag = Union[Genre, str]


class QueryEngine:
	"""
	High-level query API over a static MovieCatalog.
	Every call validates its tags first, works only on call-local state, and returns a fresh container,
	so one engine can be shared between readers without locking.
	"""

	def __init__(self, catalog: MovieCatalog, min_votes_for_top_ranked: int = MIN_NUM_VOTES_FOR_TOP_RANKED):
		self.catalog = catalog  # shared, never modified
		self.min_votes_for_top_ranked = min_votes_for_top_ranked  # strict lower bound for top_rated_per_year
		logger.info(
			f"[Engine] Ready over {len(catalog)} titles | min votes for top ranked={min_votes_for_top_ranked}"
		)

	def _of_type(self, title_type: TitleType) -> Iterator[Movie]:
		return (m for m in self.catalog.movies if m.title_type is title_type)

	def find_by_type_and_substring(self, title_type: TypeTag, substring: str) -> List[Movie]:
		"""
		Titles of ``title_type`` whose title contains ``substring`` (case-sensitive).
		Results keep the order of the data file. An empty substring matches every title of the type.
		"""
		wanted = TitleType.parse(title_type)
		results = [m for m in self._of_type(wanted) if substring in m.title]
		logger.debug(f"[Engine] {len(results)} {wanted.name} titles contain '{substring}'")
		return results

	def find_by_id(self, movie_id: str) -> Optional[Movie]:
		"""Look up a title by id; None when the id is unknown."""
		return self.catalog.index.get(movie_id)

	def find_by_year_and_genre(self, title_type: TypeTag, year: int, genre: GenreTag) -> List[Movie]:
		"""Titles of a type released in ``year`` that carry ``genre``, ordered alphabetically by title."""
		wanted_type = TitleType.parse(title_type)
		wanted_genre = Genre.parse(genre)
		matches = {m for m in self._of_type(wanted_type) if m.year == year and wanted_genre in m.genres}
		logger.debug(f"[Engine] {len(matches)} {wanted_type.name} titles in {year} tagged {wanted_genre.value}")
		return sorted(matches)

	def count_by_genre_per_year(self, title_type: TypeTag, start_year: int, end_year: int) -> Dict[int, Dict[Genre, int]]:
		"""
		Count titles of a type per year and genre over an inclusive year range.
		Every year of the range is present, even with no titles; a title counts once for each of its genres.
		Years come out ascending and genres alphabetically. An inverted range gives an empty mapping.
		"""
		wanted = TitleType.parse(title_type)
		counts: Dict[int, Counter] = {year: Counter() for year in range(start_year, end_year + 1)}
		for movie in self._of_type(wanted):
			per_genre = counts.get(movie.year)
			if per_genre is not None:
				per_genre.update(movie.genres)
		return {
			year: dict(sorted(per_genre.items(), key=lambda item: item[0].value))
			for year, per_genre in counts.items()
		}

	def top_by_votes(self, count: int, title_type: TypeTag) -> List[Movie]:
		"""
		The ``count`` most voted titles of a type, ties broken alphabetically by title.
		Returns fewer when fewer titles of the type exist.
		"""
		wanted = TitleType.parse(title_type)
		if count <= 0:
			return []
		results = heapq.nsmallest(count, self._of_type(wanted), key=votes_sort_key)
		logger.debug(f"[Engine] Returning {len(results)} of {count} requested most voted {wanted.name} titles")
		return results

	def top_rated_per_year(self, count: int, title_type: TypeTag, start_year: int, end_year: int) -> Dict[int, List[Movie]]:
		"""
		Up to ``count`` best rated titles of a type for each year of an inclusive range.
		Only titles with more than ``min_votes_for_top_ranked`` votes are eligible. Each year's list follows
		the natural rating order, so equal scores fall back to more votes and then to the smaller id.
		Every year of the range is present, possibly with an empty list.
		"""
		wanted = TitleType.parse(title_type)
		eligible = [
			m.rating for m in self._of_type(wanted)
			if m.rating.votes > self.min_votes_for_top_ranked and start_year <= m.year <= end_year
		]
		eligible.sort()  # Rating natural order
		logger.debug(f"[Engine] {len(eligible)} {wanted.name} titles eligible for ranking in {start_year}-{end_year}")

		results: Dict[int, List[Movie]] = {year: [] for year in range(start_year, end_year + 1)}
		for rating in eligible:
			movie = self.catalog.index[rating.id]
			ranked = results[movie.year]
			if len(ranked) < count:
				ranked.append(movie)
		return results
