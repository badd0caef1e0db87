"""
Data models for the title catalog.
Defines the closed tag sets and the immutable Rating/Movie records queried by the engine.
"""

import math  # finite-score check

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # frozen dataclasses give immutable values with __eq__/__hash__
from enum import Enum  # closed sets of title types and genres
from functools import total_ordering  # derive <=, >, >= from __lt__
# Import typing helpers for precise and self-documenting types
from typing import FrozenSet, List, Optional, Tuple, Union

# Fuzzy matching used to suggest a known tag when an unknown one is supplied
from rapidfuzz import fuzz, process

from .errors import InvalidGenreError, InvalidTypeError

# Minimum similarity (0..100) for a known tag to be offered as a suggestion
SUGGESTION_SCORE_CUTOFF = 80


def closest_tag(tag: str, choices: List[str]) -> Optional[str]:
	"""Return the known tag closest to ``tag``, or None if nothing is similar enough."""
	if not tag or not choices:
		return None
	lowered = [c.lower() for c in choices]
	best = process.extractOne(tag.strip().lower(), lowered, scorer=fuzz.WRatio, score_cutoff=SUGGESTION_SCORE_CUTOFF)
	if best is None:
		return None
	_, _, position = best  # (match, score, index)
	return choices[position]


def _match_member(enum_cls, tag):
	"""Find the member of ``enum_cls`` whose name or file tag equals ``tag`` (case-insensitive)."""
	if isinstance(tag, enum_cls):
		return tag
	if not isinstance(tag, str):
		return None
	key = tag.strip().lower()
	for member in enum_cls:
		if key == member.name.lower() or key == member.value.lower():
			return member
	return None


class TitleType(Enum):
	"""The kind of title. Values are the tags used in the IMDb data files."""
	AUDIO_BOOK = 'audiobook'
	EPISODE = 'episode'
	MOVIE = 'movie'
	RADIO_SERIES = 'radioSeries'
	SHORT = 'short'
	TV_EPISODE = 'tvEpisode'
	TV_MINI_SERIES = 'tvMiniSeries'
	TV_MOVIE = 'tvMovie'
	TV_SERIES = 'tvSeries'
	TV_SHORT = 'tvShort'
	TV_SPECIAL = 'tvSpecial'
	VIDEO = 'video'
	VIDEO_GAME = 'videoGame'

	@classmethod
	def parse(cls, tag: Union['TitleType', str]) -> 'TitleType':
		"""Accept a member, a member name (``"TV_SERIES"``) or a file tag (``"tvSeries"``)."""
		member = _match_member(cls, tag)
		if member is None:
			raise InvalidTypeError(tag, suggestion=closest_tag(str(tag), [m.name for m in cls]))
		return member


class Genre(Enum):
	"""Descriptive genre tags. Member names replace the '-' of the file tag with '_'."""
	Action = 'Action'
	Adult = 'Adult'
	Adventure = 'Adventure'
	Animation = 'Animation'
	Biography = 'Biography'
	Comedy = 'Comedy'
	Crime = 'Crime'
	Documentary = 'Documentary'
	Drama = 'Drama'
	Family = 'Family'
	Fantasy = 'Fantasy'
	Film_Noir = 'Film-Noir'
	Game_Show = 'Game-Show'
	History = 'History'
	Horror = 'Horror'
	Music = 'Music'
	Musical = 'Musical'
	Mystery = 'Mystery'
	News = 'News'
	Reality_TV = 'Reality-TV'
	Romance = 'Romance'
	Sci_Fi = 'Sci-Fi'
	Short = 'Short'
	Sport = 'Sport'
	Talk_Show = 'Talk-Show'
	Thriller = 'Thriller'
	War = 'War'
	Western = 'Western'

	@classmethod
	def parse(cls, tag: Union['Genre', str]) -> 'Genre':
		"""Accept a member, a member name (``"Sci_Fi"``) or a file tag (``"Sci-Fi"``)."""
		member = _match_member(cls, tag)
		if member is None:
			raise InvalidGenreError(tag, suggestion=closest_tag(str(tag), [m.value for m in cls]))
		return member


@total_ordering
@dataclass(frozen=True)
class Rating:
	"""
	Score and vote count of one title.
	Ratings order by descending score, then descending votes, then ascending id,
	so sorting a list of ratings puts the best rated first.
	"""
	id: str  # id of the owning movie (tconst)
	score: float  # average rating on a 0-10 scale
	votes: int  # number of votes the average is based on

	def __post_init__(self):
		if not math.isfinite(self.score):
			raise ValueError(f"Rating score for {self.id!r} must be a finite number, got {self.score!r}")
		if self.votes < 0:
			raise ValueError(f"Rating votes for {self.id!r} must not be negative, got {self.votes!r}")

	def sort_key(self) -> Tuple[float, int, str]:
		return (-self.score, -self.votes, self.id)

	def __lt__(self, other):
		if not isinstance(other, Rating):
			return NotImplemented
		return self.sort_key() < other.sort_key()

	def __str__(self) -> str:
		return f"Rating{{id='{self.id}', score={self.score}, votes={self.votes}}}"


@total_ordering
@dataclass(frozen=True)
class Movie:
	"""
	A single title record as loaded from the data files.
	Movies order alphabetically by title; year and then id break ties so the order is total.
	"""
	id: str  # unique identifier (tconst)
	title: str  # primary title, kept exactly as in the file
	title_type: TitleType  # kind of title
	year: int  # start year, 0 when unknown
	rating: Rating  # rating with the same id
	genres: FrozenSet[Genre] = field(default_factory=frozenset)  # empty set when the title has none

	def __post_init__(self):
		# Accept any iterable of genres but always store an immutable set
		if not isinstance(self.genres, frozenset):
			object.__setattr__(self, 'genres', frozenset(self.genres))
		if self.rating.id != self.id:
			raise ValueError(f"Rating id {self.rating.id!r} does not match movie id {self.id!r}")

	def sort_key(self) -> Tuple[str, int, str]:
		return (self.title, self.year, self.id)

	def __lt__(self, other):
		if not isinstance(other, Movie):
			return NotImplemented
		return self.sort_key() < other.sort_key()

	def __str__(self) -> str:
		genres = ', '.join(g.value for g in sorted(self.genres, key=lambda g: g.value))
		return (
			f"Movie{{id='{self.id}', titleType={self.title_type.value}, title='{self.title}', "
			f"year={self.year}, genres=[{genres}], {self.rating}}}"
		)
