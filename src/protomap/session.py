"""
Project session: the lifecycle around one loaded project.

A session owns the entity registry and the resource list of the current
project. The first view request materializes them from the project source;
later requests reuse them. Loading another project discards both and cancels
any fetch still running for the old one.

"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from protomap.analyzer.pattern_extractor import MembershipMode, PatternExtractor
from protomap.analyzer.registry import EntityRegistry
from protomap.analyzer.resolver import RelationshipResolver
from protomap.exceptions import MaterializationError
from protomap.graph.layout import GridLayout
from protomap.graph.serializer import GraphSerializer, ViewResult, ViewType

if TYPE_CHECKING:
	from protomap.project_source import ProjectSource
	from protomap.utils.config_loader import ConfigLoader

logger = logging.getLogger(__name__)


class ProjectSession:
	"""Drives materialize, resolve, layout and serialize for view requests."""

	def __init__(
		self,
		source: ProjectSource | None = None,
		membership: MembershipMode | str = MembershipMode.LOOSE,
		source_suffix: str = ".js",
		layout: GridLayout | None = None,
	) -> None:
		"""
		Initialize the session.

		Args:
		        source: Project source to load, if any
		        membership: Composed type membership check
		        source_suffix: Type name to file name suffix
		        layout: Grid layout for views

		"""
		self.membership = MembershipMode(membership)
		self.source_suffix = source_suffix
		self.resolver = RelationshipResolver()
		self.serializer = GraphSerializer(layout)
		self.source: ProjectSource | None = None
		self.registry = self._new_registry()
		self._resources: list[str] | None = None
		self._resources_pending: asyncio.Task[list[str]] | None = None
		if source is not None:
			self.load_project(source)

	@classmethod
	def from_config(cls, config_loader: ConfigLoader, source: ProjectSource | None = None) -> ProjectSession:
		"""Create a session configured from a ConfigLoader."""
		return cls(
			source=source,
			membership=config_loader.get_membership(),
			source_suffix=config_loader.get("project.source_suffix", ".js"),
			layout=GridLayout.from_config(config_loader.get_layout_config()),
		)

	def _new_registry(self) -> EntityRegistry:
		return EntityRegistry(PatternExtractor(self.membership), source_suffix=self.source_suffix)

	def reset(self) -> None:
		"""Discard the registry and resource list, cancelling pending fetches."""
		self.registry.clear()
		self.registry = self._new_registry()
		if self._resources_pending is not None and not self._resources_pending.done():
			self._resources_pending.cancel()
		self._resources_pending = None
		self._resources = None
		self.resolver = RelationshipResolver()

	def load_project(self, source: ProjectSource) -> None:
		"""
		Switch the session to another project.

		Args:
		        source: Project source of the new project

		"""
		self.reset()
		self.source = source
		logger.info("Loaded project source %r", source)

	async def materialize(self) -> EntityRegistry:
		"""
		Populate the registry if needed and resolve relationships.

		Returns:
		        EntityRegistry: The current, resolved registry

		Raises:
		        MaterializationError: If no project is loaded or its source fails or returns no entities

		"""
		if self.source is None:
			msg = "No project loaded"
			raise MaterializationError(msg)

		registry = self.registry
		await registry.materialize_if_empty(self.source.fetch_entities)
		if registry is not self.registry:
			msg = "Project changed while its entities were loading"
			raise MaterializationError(msg)

		self.resolver.resolve(registry)
		return registry

	async def resources(self) -> list[str]:
		"""
		Get the project's resource names, fetching them once.

		Returns:
		        list[str]: Resource names

		Raises:
		        MaterializationError: If no project is loaded or its source fails or lists nothing

		"""
		if self._resources is not None:
			return self._resources
		if self.source is None:
			msg = "No project loaded"
			raise MaterializationError(msg)

		if self._resources_pending is None or self._resources_pending.done():
			self._resources_pending = asyncio.ensure_future(self._fetch_resources(self.source))
		pending = self._resources_pending

		try:
			resources = await asyncio.shield(pending)
		except asyncio.CancelledError:
			if pending.cancelled():
				msg = "Resource listing was cancelled"
				raise MaterializationError(msg) from None
			raise

		if pending is not self._resources_pending:
			msg = "Project changed while its resources were loading"
			raise MaterializationError(msg)
		self._resources = resources
		return resources

	async def _fetch_resources(self, source: ProjectSource) -> list[str]:
		try:
			resources = list(await source.fetch_resources())
		except asyncio.CancelledError:
			raise
		except Exception as e:
			logger.exception("Failed to fetch project resources")
			msg = f"Resource listing failed: {e}"
			raise MaterializationError(msg) from e

		if not resources:
			# Not cached, so the next request lists again
			msg = "Project source returned no resources"
			logger.warning(msg)
			raise MaterializationError(msg)
		return resources

	async def request_view(self, view: ViewType | str) -> ViewResult:
		"""
		Render one view of the loaded project.

		Args:
		        view: View to render

		Returns:
		        ViewResult: Document and, for entity views, the source map

		Raises:
		        MaterializationError: If the project data cannot be loaded

		"""
		view = ViewType(view)
		if view is ViewType.RESOURCE:
			resources = await self.resources()
			return self.serializer.render(view, self.registry, resources)
		if view is ViewType.COMPOSITION:
			return self.serializer.render(view, self.registry)

		registry = await self.materialize()
		return self.serializer.render(view, registry)
