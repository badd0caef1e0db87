"""
Command-line front end.
Loads a dataset once, then answers one query command per line from a file or stdin:

    CONTAINS <type> <text...>
    LOOKUP <id>
    YEAR_AND_GENRE <type> <year> <genre>
    COUNT_GENRES <type> <start> <end>
    MOST_VOTES <num> <type>
    TOP <num> <type> <start> <end>

Usage:
    imdb-catalog [--large] [--data-dir DIR] [--jsonl FILE] [--log-level LEVEL] [COMMAND_FILE]
"""

import argparse  # command-line flags
import sys  # stdin/stderr and exit codes
import time  # per-command timing
from pathlib import Path
from typing import Callable, Dict, Iterable, List, NamedTuple

from loguru import logger  # console logging
from pydantic import ValidationError  # invalid settings

from .config import Settings
from .data_loader import DataLoader
from .errors import CatalogError
from .models import Movie
from .search_engine import QueryEngine


class UsageError(Exception):
	"""A command line that does not fit its command's arguments."""


class Command(NamedTuple):
	handler: Callable[['CommandRunner', List[str]], List[str]]
	min_args: int
	max_args: int  # -1 for unbounded
	usage: str


def _int(value: str, name: str) -> int:
	try:
		return int(value)
	except ValueError:
		raise UsageError(f"{name} must be an integer, got {value!r}") from None


def _movie_lines(movies: List[Movie], indent: str = '') -> List[str]:
	if not movies:
		return [f"{indent}No match found!"]
	return [f"{indent}{movie}" for movie in movies]


class CommandRunner:
	"""Parses command lines and renders the engine's answers as text."""

	def __init__(self, engine: QueryEngine):
		self.engine = engine

	def contains(self, args: List[str]) -> List[str]:
		substring = args[1] if len(args) > 1 else ''
		return _movie_lines(self.engine.find_by_type_and_substring(args[0], substring))

	def lookup(self, args: List[str]) -> List[str]:
		movie = self.engine.find_by_id(args[0])
		return [str(movie)] if movie is not None else ["Movie not found!"]

	def year_and_genre(self, args: List[str]) -> List[str]:
		year = _int(args[1], 'year')
		return _movie_lines(self.engine.find_by_year_and_genre(args[0], year, args[2]))

	def count_genres(self, args: List[str]) -> List[str]:
		start, end = _int(args[1], 'start'), _int(args[2], 'end')
		lines = []
		for year, per_genre in self.engine.count_by_genre_per_year(args[0], start, end).items():
			counts = ', '.join(f"{genre.value}={count}" for genre, count in per_genre.items())
			lines.append(f"{year}: {counts or '(none)'}")
		return lines

	def most_votes(self, args: List[str]) -> List[str]:
		count = _int(args[0], 'num')
		return _movie_lines(self.engine.top_by_votes(count, args[1]))

	def top(self, args: List[str]) -> List[str]:
		count = _int(args[0], 'num')
		start, end = _int(args[2], 'start'), _int(args[3], 'end')
		lines = []
		for year, movies in self.engine.top_rated_per_year(count, args[1], start, end).items():
			lines.append(f"{year}:")
			lines.extend(_movie_lines(movies, indent='\t'))
		return lines

	COMMANDS: Dict[str, Command] = {
		'CONTAINS': Command(contains, 1, -1, 'CONTAINS <type> <text...>'),
		'LOOKUP': Command(lookup, 1, 1, 'LOOKUP <id>'),
		'YEAR_AND_GENRE': Command(year_and_genre, 3, 3, 'YEAR_AND_GENRE <type> <year> <genre>'),
		'COUNT_GENRES': Command(count_genres, 3, 3, 'COUNT_GENRES <type> <start> <end>'),
		'MOST_VOTES': Command(most_votes, 2, 2, 'MOST_VOTES <num> <type>'),
		'TOP': Command(top, 4, 4, 'TOP <num> <type> <start> <end>'),
	}

	def execute(self, line: str) -> List[str]:
		"""Run one command line and return its output lines. Errors become a single 'error:' line."""
		parts = line.split(maxsplit=1)
		if not parts:
			return []
		name = parts[0]
		rest = parts[1] if len(parts) > 1 else ''
		command = self.COMMANDS.get(name.upper())
		if command is None:
			return [f"error: unknown command {name!r}"]
		if command.max_args < 0:
			# last argument is the rest of the line, inner whitespace untouched
			args = rest.split(maxsplit=command.min_args)
		else:
			args = rest.split()
		if len(args) < command.min_args or (command.max_args >= 0 and len(args) > command.max_args):
			return [f"error: usage: {command.usage}"]
		try:
			return command.handler(self, args)
		except (UsageError, CatalogError) as e:
			logger.debug(f"[CLI] Rejected '{line}': {e}")
			return [f"error: {e}"]

	def run(self, lines: Iterable[str]) -> int:
		"""Process every non-blank, non-comment line. Returns the number of commands run."""
		processed = 0
		for raw in lines:
			line = raw.rstrip('\r\n')
			if not line.strip() or line.lstrip().startswith('#'):
				continue
			print(f"processing: {line}")
			start = time.time()
			for out in self.execute(line):
				print(out)
			print(f"elapsed time (s): {time.time() - start:.3f}")
			processed += 1
		logger.debug(f"[CLI] Processed {processed} commands")
		return processed


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog='imdb-catalog',
		description='Answer title catalog queries read from a command file or stdin.',
	)
	parser.add_argument('commands', nargs='?', type=Path, help='File with one command per line (default: stdin)')
	parser.add_argument('--large', action='store_true', help='Load the large dataset instead of the small one')
	parser.add_argument('--data-dir', type=Path, default=None, help='Directory holding small/ and large/ datasets')
	parser.add_argument('--jsonl', type=Path, default=None, help='Load titles from a JSON Lines file instead')
	parser.add_argument('--log-level', default=None, help='Log level for stderr (default: WARNING)')
	return parser


def configure_logging(level: str) -> None:
	"""Send loguru output to stderr so query results on stdout stay clean."""
	logger.remove()
	logger.add(sys.stderr, level=level)


def main(argv=None) -> int:
	args = build_parser().parse_args(argv)
	try:
		settings = Settings.from_env(
			data_dir=args.data_dir,
			dataset='large' if args.large else None,
			log_level=args.log_level,
		)
	except ValidationError as e:
		print(f"error: invalid settings: {e}", file=sys.stderr)
		return 2
	configure_logging(settings.log_level)

	loader = DataLoader()
	try:
		if args.jsonl is not None:
			catalog = loader.load_catalog_from_jsonl(args.jsonl)
		else:
			catalog = loader.load_dataset(settings)
	except FileNotFoundError as e:
		logger.error(f"[CLI] {e}")
		print(f"error: {e}", file=sys.stderr)
		return 1

	runner = CommandRunner(QueryEngine(catalog, settings.min_votes_for_top_ranked))
	if args.commands is None:
		runner.run(sys.stdin)
		return 0
	try:
		with open(args.commands, 'r', encoding='utf-8') as f:
			runner.run(f)
	except FileNotFoundError as e:
		print(f"error: {e}", file=sys.stderr)
		return 1
	return 0


if __name__ == '__main__':
	sys.exit(main())
