"""Shared fixtures: small in-memory catalogs used across the test modules."""

from pathlib import Path

import pytest

from imdb_catalog.catalog import MovieCatalog
from imdb_catalog.models import Genre, Movie, Rating, TitleType
from imdb_catalog.search_engine import QueryEngine

ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = ROOT / 'data'


def make_movie(movie_id, title, year, genres=(), score=0.0, votes=0, title_type=TitleType.MOVIE):
    return Movie(
        id=movie_id,
        title=title,
        title_type=title_type,
        year=year,
        rating=Rating(id=movie_id, score=score, votes=votes),
        genres=frozenset(genres),
    )


@pytest.fixture
def scenario_catalog():
    """Two movies from the same year: one popular, one below the ranking threshold."""
    return MovieCatalog.from_movies([
        make_movie('t1', 'Zorro', 2000, {Genre.Drama}, 7.0, 500),
        make_movie('t2', 'Amelie', 2000, {Genre.Drama, Genre.Comedy}, 8.0, 2000),
    ])


@pytest.fixture
def movies():
    """A late-90s slice with vote ties, score ties, a same-title remake and an odd case title."""
    return [
        make_movie('t01', 'The Matrix', 1999, {Genre.Action, Genre.Sci_Fi}, 8.7, 2000000),
        make_movie('t02', 'Matrix Reloaded', 2003, {Genre.Action, Genre.Sci_Fi}, 7.2, 600000),
        make_movie('t03', 'the matrix revisited', 2001, {Genre.Documentary}, 7.0, 5000),
        make_movie('t04', 'Matrix', 1993, {Genre.Action, Genre.Drama}, 7.5, 3000, TitleType.TV_SERIES),
        make_movie('t05', 'Fight Club', 1999, {Genre.Drama}, 8.8, 2000000),
        make_movie('t06', 'Magnolia', 1999, {Genre.Drama}, 8.0, 800),
        make_movie('t07', 'Being John Malkovich', 1999, {Genre.Comedy, Genre.Drama, Genre.Fantasy}, 7.7, 350000),
        make_movie('t09', 'American Beauty', 1999, {Genre.Drama}, 7.7, 350000),
        make_movie('t10', 'Fight Club', 1999, {Genre.Drama}, 5.0, 1500),
        make_movie('t11', 'Exactly Enough', 2000, {Genre.Drama}, 9.9, 1000),
    ]


@pytest.fixture
def catalog(movies):
    return MovieCatalog.from_movies(movies)


@pytest.fixture
def engine(catalog):
    return QueryEngine(catalog)
