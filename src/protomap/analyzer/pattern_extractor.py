"""Textual extraction of declared parents and composed types from source text.

The extractor understands exactly one source convention:

- inheritance is declared as ``Child.prototype = new Parent;`` on the last line and
- composition shows up as ``member = new Type(...)``.

No parsing happens. The parent name is everything after the first
``prototype = new `` marker up to, but excluding, the last character of the
whole text, so a file whose inheritance line is not its last line yields a
long, unresolvable parent name. Callers rely on this behavior, keep it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

PARENT_MARKER = "prototype = new "
COMPOSITION_MARKER = "= new "


class MembershipMode(str, Enum):
	"""How a composed type candidate is checked against the names found so far."""

	LOOSE = "loose"
	"""Substring containment against the comma-joined list (``Foo`` is a duplicate of ``FooBar``)."""

	STRICT = "strict"
	"""Exact name match."""


@dataclass(frozen=True)
class ExtractionResult:
	"""Relationships declared by one source text."""

	parent_name: str = ""
	composed_types: tuple[str, ...] = field(default_factory=tuple)


def extract_parent(source: str) -> str:
	"""
	Extract the declared parent type name.

	Args:
	        source: Raw source text

	Returns:
	        str: Parent type name, or an empty string if none is declared

	"""
	index = source.find(PARENT_MARKER)
	if index <= 0:
		return ""
	return source[index + len(PARENT_MARKER) : len(source) - 1]


def _is_listed(candidate: str, found: list[str], mode: MembershipMode) -> bool:
	if mode is MembershipMode.STRICT:
		return candidate in found
	return candidate in ",".join(found)


def extract_composition(source: str, mode: MembershipMode = MembershipMode.LOOSE) -> list[str]:
	"""
	Extract the types a source text instantiates, in first-seen order.

	Args:
	        source: Raw source text
	        mode: Membership check used to suppress duplicates

	Returns:
	        list[str]: Composed type names

	"""
	found: list[str] = []
	position = 0
	while (index := source.find(COMPOSITION_MARKER, position)) > -1:
		rest = source[index + len(COMPOSITION_MARKER) :]
		end = rest.find("(")
		# No opening parenthesis means no candidate
		candidate = rest[:end] if end > -1 else ""
		if candidate and not _is_listed(candidate, found, mode):
			found.append(candidate)
		position = index + len(COMPOSITION_MARKER)
	return found


class PatternExtractor:
	"""Derives parent and composition relationships from source text."""

	def __init__(self, membership: MembershipMode | str = MembershipMode.LOOSE) -> None:
		"""
		Initialize the extractor.

		Args:
		        membership: Duplicate check for composed types, 'loose' or 'strict'

		"""
		self.membership = MembershipMode(membership)

	def extract(self, source: str) -> ExtractionResult:
		"""
		Extract relationships from one source text.

		Failures are logged and produce an empty result.

		Args:
		        source: Raw source text

		Returns:
		        ExtractionResult: Declared parent and composed types

		"""
		try:
			return ExtractionResult(
				parent_name=extract_parent(source),
				composed_types=tuple(extract_composition(source, self.membership)),
			)
		except Exception:
			logger.exception("Failed to extract relationships from source text")
			return ExtractionResult()
