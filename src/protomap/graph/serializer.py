"""View strategies that turn the entity registry into graph documents."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from protomap.graph.layout import GridLayout
from protomap.graph.models import Connection, GraphDocument, Node, ViewEnvelope

if TYPE_CHECKING:
	from collections.abc import Sequence

	from protomap.analyzer.registry import Entity, EntityRegistry

logger = logging.getLogger(__name__)


class ViewType(str, Enum):
	"""Graph projections over one project."""

	ALL = "all"
	HIERARCHY = "hierarchy"
	COMPOSITION = "composition"
	RESOURCE = "resource"


@dataclass
class ViewResult:
	"""A rendered view: the wire document plus the sources the renderer may display."""

	view: ViewType
	document: GraphDocument
	sources: dict[str, str] | None = None
	implemented: bool = True

	def to_json(self, include_sources: bool = False, indent: int | None = None) -> str:
		"""
		Serialize the view.

		Args:
		        include_sources: Wrap the document as ``{"document": ..., "sources": ...}``
		        indent: Optional JSON indentation

		Returns:
		        str: JSON text

		"""
		if not include_sources:
			return self.document.to_json(indent=indent)
		wrapper = ViewEnvelope(document=self.document, sources=self.sources or {})
		return wrapper.model_dump_json(by_alias=True, indent=indent)


def _entity_nodes(placed: list[tuple[Entity, int, int]]) -> list[Node]:
	return [Node(id=entity.index, x=x, y=y, label=entity.name) for entity, x, y in placed]


def _source_map(entities: Sequence[Entity]) -> dict[str, str]:
	return {entity.name: entity.source_text for entity in entities}


class ViewStrategy(ABC):
	"""Base class for one graph projection."""

	view: ClassVar[ViewType]

	@abstractmethod
	def render(self, registry: EntityRegistry, resources: Sequence[str], layout: GridLayout) -> ViewResult:
		"""
		Render the view.

		Args:
		        registry: Resolved entity registry
		        resources: Resource names of the project
		        layout: Grid layout used for node positions

		Returns:
		        ViewResult: The rendered view

		"""


class AllView(ViewStrategy):
	"""Every entity, no connections."""

	view = ViewType.ALL

	def render(self, registry: EntityRegistry, resources: Sequence[str], layout: GridLayout) -> ViewResult:
		entities = registry.all()
		document = GraphDocument(nodes=_entity_nodes(layout.layout(entities)))
		return ViewResult(self.view, document, sources=_source_map(entities))


class HierarchyView(ViewStrategy):
	"""Entities taking part in inheritance, connected child to parent."""

	view = ViewType.HIERARCHY

	def render(self, registry: EntityRegistry, resources: Sequence[str], layout: GridLayout) -> ViewResult:
		eligible = [entity for entity in registry.all() if entity.has_relationship]
		connections = [
			Connection(node_a=entity.index, node_b=entity.parent_index, anchor_a="top", anchor_b="bottom")
			for entity in eligible
			if entity.parent_index is not None
		]
		document = GraphDocument(nodes=_entity_nodes(layout.layout(eligible)), connections=connections)
		return ViewResult(self.view, document, sources=_source_map(registry.all()))


class CompositionView(ViewStrategy):
	"""Placeholder: composition graphs are not implemented."""

	view = ViewType.COMPOSITION

	def render(self, registry: EntityRegistry, resources: Sequence[str], layout: GridLayout) -> ViewResult:
		logger.warning("The composition view is not implemented, returning an empty document")
		return ViewResult(self.view, GraphDocument(), implemented=False)


class ResourceView(ViewStrategy):
	"""One node per resource name, identified by its position in the list."""

	view = ViewType.RESOURCE

	def render(self, registry: EntityRegistry, resources: Sequence[str], layout: GridLayout) -> ViewResult:
		nodes = [
			Node(id=position, x=x, y=y, label=name)
			for position, (name, x, y) in enumerate(layout.layout(resources))
		]
		return ViewResult(self.view, GraphDocument(nodes=nodes))


VIEW_STRATEGIES: dict[ViewType, ViewStrategy] = {
	strategy.view: strategy for strategy in (AllView(), HierarchyView(), CompositionView(), ResourceView())
}


class GraphSerializer:
	"""Renders any view of a resolved registry."""

	def __init__(self, layout: GridLayout | None = None) -> None:
		"""
		Initialize the serializer.

		Args:
		        layout: Grid layout for node positions (defaults to the standard grid)

		"""
		self.layout = layout or GridLayout()

	def render(
		self, view: ViewType | str, registry: EntityRegistry, resources: Sequence[str] | None = None
	) -> ViewResult:
		"""
		Render one view.

		Args:
		        view: View to render
		        registry: Resolved entity registry
		        resources: Resource names, used by the resource view

		Returns:
		        ViewResult: The rendered view

		"""
		strategy = VIEW_STRATEGIES[ViewType(view)]
		result = strategy.render(registry, list(resources or []), self.layout)
		logger.debug(
			"Rendered %s view: %d nodes, %d connections",
			result.view.value,
			len(result.document.nodes),
			len(result.document.connections),
		)
		return result
