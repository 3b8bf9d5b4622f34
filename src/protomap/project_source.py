"""Project sources: the collaborators that supply entity texts and resource names."""

from __future__ import annotations

import asyncio
import fnmatch
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from protomap.exceptions import ProjectSourceError

if TYPE_CHECKING:
	from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)

DEFAULT_RESOURCE_EXTENSIONS = ("jpg", "gif", "jpeg", "png")


class ProjectSource(Protocol):
	"""Supplies a project's source entities and resource names."""

	async def fetch_entities(self) -> Sequence[tuple[str, str]]:
		"""Return ``(name, source_text)`` pairs."""
		...

	async def fetch_resources(self) -> Sequence[str]:
		"""Return resource names."""
		...


class StaticProjectSource:
	"""A project source over data that is already in memory."""

	def __init__(self, entities: Iterable[tuple[str, str]] = (), resources: Iterable[str] = ()) -> None:
		self.entities = list(entities)
		self.resources = list(resources)

	async def fetch_entities(self) -> list[tuple[str, str]]:
		return list(self.entities)

	async def fetch_resources(self) -> list[str]:
		return list(self.resources)


class DirectoryProjectSource:
	"""
	A project source over a local directory.

	Files carrying the source suffix become entities, named by their path
	relative to the root with forward slashes. Files with a resource extension
	become resource names. Hidden files and directories are skipped, and the
	walk is sorted so repeated loads register entities in the same order.

	"""

	def __init__(
		self,
		root: Path | str,
		source_suffix: str = ".js",
		resource_extensions: Iterable[str] = DEFAULT_RESOURCE_EXTENSIONS,
		ignored_patterns: Iterable[str] = (),
	) -> None:
		"""
		Initialize the directory source.

		Args:
		        root: Project directory
		        source_suffix: Suffix of source entity files
		        resource_extensions: Extensions (without dot) of resource files
		        ignored_patterns: Glob patterns of paths to skip

		"""
		self.root = Path(root)
		self.source_suffix = source_suffix.lower()
		self.resource_extensions = {ext.lower().lstrip(".") for ext in resource_extensions}
		self.ignored_patterns = list(ignored_patterns)

	@classmethod
	def from_config(cls, root: Path | str, project_config: dict[str, Any]) -> DirectoryProjectSource:
		"""Create a source from the ``project`` config section."""
		return cls(
			root,
			source_suffix=project_config.get("source_suffix", ".js"),
			resource_extensions=project_config.get("resource_extensions", DEFAULT_RESOURCE_EXTENSIONS),
			ignored_patterns=project_config.get("ignored_patterns", []),
		)

	def _is_ignored(self, rel_path: str) -> bool:
		name = rel_path.rsplit("/", 1)[-1]
		for pattern in self.ignored_patterns:
			if (
				fnmatch.fnmatch(rel_path, pattern)
				or fnmatch.fnmatch(f"/{rel_path}", pattern)
				or fnmatch.fnmatch(name, pattern)
			):
				return True
		return False

	def list_files(self) -> list[str]:
		"""
		List project files relative to the root.

		Returns:
		        list[str]: Sorted relative paths with forward slashes

		Raises:
		        ProjectSourceError: If the root is not a readable directory

		"""
		if not self.root.is_dir():
			msg = f"Project directory not found: {self.root}"
			raise ProjectSourceError(msg)

		files = []
		for dirpath, dirnames, filenames in os.walk(self.root):
			# Prune hidden directories in place so os.walk does not descend into them
			dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
			rel_dir = Path(dirpath).relative_to(self.root)
			for filename in sorted(filenames):
				if filename.startswith("."):
					continue
				rel_path = (rel_dir / filename).as_posix()
				if self._is_ignored(rel_path):
					continue
				files.append(rel_path)
		return files

	def read_entities(self) -> list[tuple[str, str]]:
		"""Read every source entity file."""
		entities = []
		for rel_path in self.list_files():
			if not rel_path.lower().endswith(self.source_suffix):
				continue
			try:
				text = (self.root / rel_path).read_text(encoding="utf-8", errors="replace")
			except OSError as e:
				msg = f"Failed to read {rel_path}: {e}"
				raise ProjectSourceError(msg) from e
			entities.append((rel_path, text))
		logger.debug("Found %d source entities under %s", len(entities), self.root)
		return entities

	def read_resources(self) -> list[str]:
		"""List every resource file."""
		resources = [
			rel_path
			for rel_path in self.list_files()
			if "." in rel_path.rsplit("/", 1)[-1]
			and rel_path.rsplit(".", 1)[-1].lower() in self.resource_extensions
		]
		logger.debug("Found %d resources under %s", len(resources), self.root)
		return resources

	async def fetch_entities(self) -> list[tuple[str, str]]:
		"""Read source entities without blocking the event loop."""
		return await asyncio.to_thread(self.read_entities)

	async def fetch_resources(self) -> list[str]:
		"""List resources without blocking the event loop."""
		return await asyncio.to_thread(self.read_resources)
