"""
Ranking module.
Orderings used to rank titles: the natural order of ratings and the "most voted" order of movies.
"""

from typing import Tuple

from .models import Movie, Rating


def _sign(a, b) -> int:
	return (a > b) - (a < b)


def compare_ratings(a: Rating, b: Rating) -> int:
	"""
	Compare two ratings in their natural order.
	Negative when ``a`` ranks first: higher score wins, then more votes, then the smaller id.
	Zero only when all three fields are equal.
	"""
	return _sign(a.sort_key(), b.sort_key())


def compare_by_votes(a: Movie, b: Movie) -> int:
	"""
	Compare two movies for "most voted" listings.
	Descending vote count, ties broken alphabetically by title. The score is ignored.
	"""
	votes = _sign(b.rating.votes, a.rating.votes)
	if votes:
		return votes
	return _sign(a.title, b.title)


def votes_sort_key(movie: Movie) -> Tuple[int, str]:
	"""Key function equivalent to compare_by_votes."""
	return (-movie.rating.votes, movie.title)
