"""Resolution of declared parent names into index links between entities."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
	from protomap.analyzer.registry import EntityRegistry

logger = logging.getLogger(__name__)


class RelationshipResolver:
	"""
	Links entities to the parents their source declares.

	Each entity keeps a single ``child_index`` back-reference, so a parent with
	several children only remembers the last one resolved. The complete
	relation is kept in ``graph`` (child -> parent edges) for callers that need
	every child.

	"""

	def __init__(self) -> None:
		"""Initialize the resolver with an empty inheritance graph."""
		self.graph = nx.DiGraph()

	def resolve(self, registry: EntityRegistry) -> nx.DiGraph:
		"""
		Compute parent and child links for every registered entity.

		Entities whose declared parent is not registered become orphans: their
		declared parent name is cleared.

		Args:
		        registry: Registry holding the project's entities

		Returns:
		        nx.DiGraph: Inheritance graph keyed by entity index

		"""
		entities = registry.all()
		graph = nx.DiGraph()

		for entity in entities:
			entity.parent_index = None
			entity.child_index = None
			graph.add_node(entity.index, name=entity.name)

		for entity in entities:
			if not entity.declared_parent_name:
				continue

			parent = registry.get(entity.declared_parent_name)
			if parent is None:
				logger.debug("Parent %s of %s not found, treating as orphan", entity.declared_parent_name, entity.name)
				entity.declared_parent_name = ""
				continue

			entity.parent_index = parent.index
			parent.child_index = entity.index
			graph.add_edge(entity.index, parent.index)

		self.graph = graph
		logger.debug("Resolved %d inheritance links among %d entities", graph.number_of_edges(), len(entities))
		return graph

	def children_of(self, index: int) -> list[int]:
		"""
		Get every resolved child of an entity.

		Args:
		        index: Parent entity index

		Returns:
		        list[int]: Child indices in ascending order

		"""
		if index not in self.graph:
			return []
		return sorted(self.graph.predecessors(index))

	def ancestors_of(self, index: int) -> list[int]:
		"""
		Get the inheritance chain above an entity, nearest parent first.

		Args:
		        index: Entity index

		Returns:
		        list[int]: Ancestor indices

		"""
		chain: list[int] = []
		current = index
		while current in self.graph:
			parents = list(self.graph.successors(current))
			if not parents or parents[0] in chain or parents[0] == index:
				break
			chain.append(parents[0])
			current = parents[0]
		return chain
