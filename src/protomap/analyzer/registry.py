"""Registry of the source entities that make up one project."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from protomap.analyzer.pattern_extractor import PatternExtractor
from protomap.exceptions import MaterializationError

if TYPE_CHECKING:
	from collections.abc import Awaitable, Callable, Iterator, Sequence

logger = logging.getLogger(__name__)


@dataclass
class Entity:
	"""One source unit (a file holding a class) tracked by the registry."""

	index: int
	name: str
	source_text: str
	declared_parent_name: str = ""
	composed_type_names: tuple[str, ...] = field(default_factory=tuple)
	parent_index: int | None = None
	child_index: int | None = None

	@property
	def has_relationship(self) -> bool:
		"""Whether the entity takes part in a resolved inheritance link."""
		return self.parent_index is not None or self.child_index is not None


class EntityRegistry:
	"""
	Holds all known entities for the current project, keyed by name.

	Indices are assigned in registration order and never reused, so they double
	as stable node identifiers across repeated view requests.

	"""

	def __init__(self, extractor: PatternExtractor | None = None, source_suffix: str = ".js") -> None:
		"""
		Initialize an empty registry.

		Args:
		        extractor: Pattern extractor used to derive relationships
		        source_suffix: Appended to a declared parent type name to form its file name

		"""
		self.extractor = extractor or PatternExtractor()
		self.source_suffix = source_suffix
		self._entities: dict[str, Entity] = {}
		self._by_index: list[Entity] = []
		self._pending: asyncio.Task[None] | None = None
		self._generation = 0

	def __len__(self) -> int:
		return len(self._entities)

	def __contains__(self, name: object) -> bool:
		return name in self._entities

	def __iter__(self) -> Iterator[Entity]:
		return iter(self._entities.values())

	@property
	def is_empty(self) -> bool:
		"""Whether nothing has been registered yet."""
		return not self._entities

	def parent_file_name(self, type_name: str) -> str:
		"""Apply the project's type name to file name convention."""
		return f"{type_name}{self.source_suffix}" if type_name else ""

	def register(self, name: str, source_text: str) -> Entity | None:
		"""
		Register a source entity.

		Args:
		        name: Unique entity name (file name)
		        source_text: Raw source text

		Returns:
		        Entity | None: The new entity, or None if the name was already registered

		"""
		if name in self._entities:
			logger.warning("Entity %s is already registered, ignoring duplicate", name)
			return None

		try:
			result = self.extractor.extract(source_text)
			parent_name = self.parent_file_name(result.parent_name)
			composed = result.composed_types
		except Exception:
			logger.exception("Failed to derive relationships for %s", name)
			parent_name, composed = "", ()

		entity = Entity(
			index=len(self._by_index),
			name=name,
			source_text=source_text,
			declared_parent_name=parent_name,
			composed_type_names=composed,
		)
		self._entities[name] = entity
		self._by_index.append(entity)
		logger.debug("Registered entity %d: %s (parent=%r)", entity.index, name, parent_name)
		return entity

	def get(self, name: str) -> Entity | None:
		"""Look up an entity by name."""
		return self._entities.get(name)

	def get_by_index(self, index: int) -> Entity | None:
		"""Look up an entity by its index."""
		if 0 <= index < len(self._by_index):
			return self._by_index[index]
		return None

	def all(self) -> list[Entity]:
		"""Return entities in registration order."""
		return list(self._by_index)

	def clear(self) -> None:
		"""Drop every entity and cancel any pending materialization."""
		if self._pending is not None and not self._pending.done():
			self._pending.cancel()
		self._pending = None
		self._generation += 1
		self._entities.clear()
		self._by_index.clear()

	async def materialize_if_empty(self, fetch_entities: Callable[[], Awaitable[Sequence[tuple[str, str]]]]) -> bool:
		"""
		Populate the registry from its collaborator unless it already holds entities.

		Concurrent callers share a single in-flight fetch instead of starting their own.

		Args:
		        fetch_entities: Async callable returning ``(name, source_text)`` pairs

		Returns:
		        bool: True if the fetch this call started or joined registered entities

		Raises:
		        MaterializationError: If the collaborator fails or returns nothing, or when ``clear`` cancels the fetch

		"""
		if not self.is_empty:
			return False

		if self._pending is None or self._pending.done():
			self._pending = asyncio.ensure_future(self._materialize(fetch_entities, self._generation))
		pending = self._pending

		try:
			# Shield so one cancelled waiter does not cancel the fetch for the others
			await asyncio.shield(pending)
		except asyncio.CancelledError:
			if pending.cancelled():
				msg = "Materialization was cancelled"
				raise MaterializationError(msg) from None
			raise
		return not self.is_empty

	async def _materialize(
		self, fetch_entities: Callable[[], Awaitable[Sequence[tuple[str, str]]]], generation: int
	) -> None:
		try:
			pairs = await fetch_entities()
		except asyncio.CancelledError:
			logger.debug("Materialization cancelled")
			raise
		except Exception as e:
			logger.exception("Failed to fetch project entities")
			msg = f"Materialization failed: {e}"
			raise MaterializationError(msg) from e

		if generation != self._generation:
			logger.info("Discarding entities fetched for a registry that has since been cleared")
			return

		if not pairs:
			msg = "Project source returned no entities"
			logger.warning(msg)
			raise MaterializationError(msg)

		for name, source_text in pairs:
			self.register(name, source_text)
		logger.info("Materialized %d entities", len(self._entities))
