"""Tests for the command front end."""

import io
import sys

import pytest
from loguru import logger

from imdb_catalog.catalog import MovieCatalog
from imdb_catalog.cli import CommandRunner, main
from imdb_catalog.config import ENV_VARS
from imdb_catalog.search_engine import QueryEngine

from conftest import DATA_DIR, make_movie


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)
    yield
    # main() points loguru at the captured stderr; restore the default sink
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def runner(scenario_catalog):
    return CommandRunner(QueryEngine(scenario_catalog))


class TestCommandRunner:

    def test_lookup(self, runner):
        assert runner.execute('LOOKUP t2')[0].startswith("Movie{id='t2'")
        assert runner.execute('LOOKUP t404') == ['Movie not found!']

    def test_contains_matches_rest_of_line(self, runner):
        assert runner.execute('CONTAINS MOVIE Zor')[0].startswith("Movie{id='t1'")
        assert runner.execute('CONTAINS MOVIE Zorro Returns') == ['No match found!']

    def test_contains_without_words_lists_all(self, runner):
        assert len(runner.execute('CONTAINS MOVIE')) == 2

    def test_contains_keeps_inner_whitespace(self):
        catalog = MovieCatalog.from_movies([
            make_movie('t1', 'Two  Spaces', 2000),
            make_movie('t2', 'Two Spaces', 2000),
        ])
        runner = CommandRunner(QueryEngine(catalog))
        lines = runner.execute('CONTAINS MOVIE Two  Spaces')
        assert len(lines) == 1
        assert lines[0].startswith("Movie{id='t1'")
        assert runner.execute('CONTAINS MOVIE Two Spaces')[0].startswith("Movie{id='t2'")

    def test_run_keeps_trailing_whitespace_of_contains(self, capsys):
        catalog = MovieCatalog.from_movies([make_movie('t1', 'Who ', 2000), make_movie('t2', 'Whoa', 2000)])
        CommandRunner(QueryEngine(catalog)).run(['CONTAINS MOVIE Who \n'])
        out = capsys.readouterr().out
        assert "id='t1'" in out
        assert "id='t2'" not in out

    def test_year_and_genre(self, runner):
        lines = runner.execute('YEAR_AND_GENRE MOVIE 2000 Drama')
        assert "title='Amelie'" in lines[0]
        assert "title='Zorro'" in lines[1]

    def test_count_genres(self, runner):
        assert runner.execute('COUNT_GENRES MOVIE 1999 2000') == ['1999: (none)', '2000: Comedy=1, Drama=2']

    def test_most_votes(self, runner):
        lines = runner.execute('MOST_VOTES 1 MOVIE')
        assert len(lines) == 1
        assert "title='Amelie'" in lines[0]

    def test_top(self, runner):
        lines = runner.execute('TOP 3 MOVIE 2000 2001')
        assert lines[0] == '2000:'
        assert "title='Amelie'" in lines[1]
        assert lines[2:] == ['2001:', '\tNo match found!']

    def test_command_name_is_case_insensitive(self, runner):
        assert runner.execute('lookup t404') == ['Movie not found!']

    def test_unknown_command(self, runner):
        assert runner.execute('RUNTIME MOVIE') == ["error: unknown command 'RUNTIME'"]

    def test_wrong_arity(self, runner):
        assert runner.execute('LOOKUP') == ['error: usage: LOOKUP <id>']
        assert runner.execute('MOST_VOTES 5 MOVIE extra') == ['error: usage: MOST_VOTES <num> <type>']

    def test_bad_integer(self, runner):
        assert runner.execute('MOST_VOTES five MOVIE') == ["error: num must be an integer, got 'five'"]

    def test_invalid_tags_reported(self, runner):
        assert runner.execute('MOST_VOTES 5 MOVIES') == ["error: Unknown title type: 'MOVIES' (did you mean 'MOVIE'?)"]
        assert runner.execute('YEAR_AND_GENRE MOVIE 2000 Cooking')[0].startswith("error: Unknown genre: 'Cooking'")

    def test_run_skips_comments_and_blanks(self, runner, capsys):
        processed = runner.run(['# comment\n', '\n', 'LOOKUP t1\n'])
        out = capsys.readouterr().out
        assert processed == 1
        assert 'processing: LOOKUP t1' in out
        assert 'elapsed time (s):' in out
        assert 'comment' not in out


class TestMain:

    def test_runs_command_file(self, tmp_path, capsys):
        commands = tmp_path / 'commands.txt'
        commands.write_text(
            'LOOKUP tt0111161\n'
            'MOST_VOTES 2 MOVIE\n'
            'YEAR_AND_GENRE MOVIE 1995 Crime\n'
            'COUNT_GENRES MOVIE 1996 1996\n'
            'TOP 1 MOVIE 1996 1996\n',
            encoding='utf-8',
        )
        assert main(['--data-dir', str(DATA_DIR), str(commands)]) == 0
        out = capsys.readouterr().out.splitlines()

        assert out[out.index('processing: LOOKUP tt0111161') + 1].startswith("Movie{id='tt0111161'")

        start = out.index('processing: MOST_VOTES 2 MOVIE')
        assert "title='The Shawshank Redemption'" in out[start + 1]
        assert "title='Fight Club'" in out[start + 2]

        start = out.index('processing: YEAR_AND_GENRE MOVIE 1995 Crime')
        assert "title='Se7en'" in out[start + 1]
        assert "title='The Usual Suspects'" in out[start + 2]

        assert '1996: Crime=1, Drama=2, Thriller=1' in out

        start = out.index('processing: TOP 1 MOVIE 1996 1996')
        assert out[start + 1] == '1996:'
        assert "title='Fargo'" in out[start + 2]

    def test_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, 'stdin', io.StringIO('LOOKUP tt0000000\n'))
        assert main(['--data-dir', str(DATA_DIR)]) == 0
        assert 'Movie not found!' in capsys.readouterr().out

    def test_missing_dataset(self, tmp_path, capsys):
        assert main(['--data-dir', str(tmp_path), '--large']) == 1
        assert 'not found' in capsys.readouterr().err

    def test_missing_command_file(self, tmp_path, capsys):
        assert main(['--data-dir', str(DATA_DIR), str(tmp_path / 'missing.txt')]) == 1

    def test_invalid_log_level(self, capsys):
        assert main(['--log-level', 'LOUD']) == 2
        assert 'invalid settings' in capsys.readouterr().err
