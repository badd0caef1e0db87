"""
Errors raised by the title catalog.
Unknown title-type and genre tags are rejected at the query boundary instead of silently matching nothing.
"""

from typing import Optional


class CatalogError(ValueError):
	"""Base class for invalid input to the catalog."""


class InvalidTagError(CatalogError):
	"""A tag outside one of the closed tag sets was supplied."""

	kind = 'tag'

	def __init__(self, tag, suggestion: Optional[str] = None):
		self.tag = tag  # the rejected input, as given
		self.suggestion = suggestion  # closest known tag, if any
		message = f"Unknown {self.kind}: {tag!r}"
		if suggestion:
			message += f" (did you mean {suggestion!r}?)"
		super().__init__(message)


class InvalidTypeError(InvalidTagError):
	kind = 'title type'


class InvalidGenreError(InvalidTagError):
	kind = 'genre'
