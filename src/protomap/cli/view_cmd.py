"""CLI commands that render project views and list entities."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import asyncer
import typer

from protomap.graph.serializer import ViewType

if TYPE_CHECKING:
	from protomap.session import ProjectSession

logger = logging.getLogger(__name__)

# --- Command Argument Annotations ---

ViewArg = Annotated[
	ViewType,
	typer.Argument(help="View to render.", case_sensitive=False),
]

ProjectArg = Annotated[
	Path,
	typer.Argument(
		help="Path to the project directory.",
		exists=True,
		file_okay=False,
		dir_okay=True,
		resolve_path=True,
	),
]

OutputOpt = Annotated[
	Path | None,
	typer.Option("--output", "-o", help="Write the document to this file instead of stdout."),
]

ConfigOpt = Annotated[
	Path | None,
	typer.Option("--config", "-c", help="Path to config file."),
]

SourcesFlag = Annotated[
	bool,
	typer.Option("--sources", "-s", help="Bundle the name-indexed source texts with the document."),
]

IndentOpt = Annotated[
	int | None,
	typer.Option("--indent", help="Indent the JSON output by this many spaces."),
]

MembershipFlag = Annotated[
	bool | None,
	typer.Option(
		"--strict/--loose",
		help="Exact-name (strict) or substring (loose) duplicate check for composed types. Overrides config.",
	),
]


# --- Registration Function ---


def register_command(app: typer.Typer) -> None:
	"""Register the view and entities commands with the CLI app."""

	@app.command(name="view")
	@asyncer.runnify
	async def view_command(
		view: ViewArg,
		path: ProjectArg,
		output: OutputOpt = None,
		config: ConfigOpt = None,
		sources: SourcesFlag = False,
		indent: IndentOpt = None,
		strict: MembershipFlag = None,
	) -> None:
		"""Render a view of the project as a graph document."""
		await _view_command_impl(
			view=view,
			path=path,
			output=output,
			config=config,
			sources=sources,
			indent=indent,
			strict=strict,
		)

	@app.command(name="entities")
	@asyncer.runnify
	async def entities_command(
		path: ProjectArg,
		config: ConfigOpt = None,
		strict: MembershipFlag = None,
	) -> None:
		"""List the project's entities and their resolved relationships."""
		await _entities_command_impl(path=path, config=config, strict=strict)


# --- Implementation Functions ---


def _build_session(path: Path, config: Path | None, strict: bool | None) -> "ProjectSession":
	from protomap.project_source import DirectoryProjectSource
	from protomap.session import ProjectSession
	from protomap.utils.config_loader import ConfigLoader

	config_loader = ConfigLoader.get_instance(str(config) if config else None, reload=True)
	if strict is not None:
		config_loader.set("analyzer.membership", "strict" if strict else "loose")

	source = DirectoryProjectSource.from_config(path, config_loader.get_project_config())
	return ProjectSession.from_config(config_loader, source)


async def _view_command_impl(
	view: ViewType,
	path: Path,
	output: Path | None = None,
	config: Path | None = None,
	sources: bool = False,
	indent: int | None = None,
	strict: bool | None = None,
) -> None:
	"""Implementation of the view command."""
	from protomap.exceptions import ProtomapError
	from protomap.utils.cli_utils import describe_result, exit_with_error, project_status, show_warning

	logger.info("Rendering %s view for %s", view.value, path)

	try:
		session = _build_session(path, config, strict)
		with project_status(path, f"Rendering {view.value} view"):
			result = await session.request_view(view)
	except ProtomapError as e:
		exit_with_error(f"Could not render the {view.value} view", path, view.value, e)

	logger.info("Rendered %s", describe_result(result))
	if not result.implemented:
		show_warning(f"The {view.value} view is not implemented; the document is empty.", path, view.value)

	document = result.to_json(include_sources=sources, indent=indent)
	if output:
		try:
			output.parent.mkdir(parents=True, exist_ok=True)
			output.write_text(document + "\n", encoding="utf-8")
		except OSError as e:
			exit_with_error(f"Failed to write {output}", path, view.value, e)
		logger.info("Wrote %s view to %s", view.value, output)
	else:
		typer.echo(document)


async def _entities_command_impl(path: Path, config: Path | None = None, strict: bool | None = None) -> None:
	"""Implementation of the entities command."""
	from rich.console import Console
	from rich.table import Table

	from protomap.exceptions import ProtomapError
	from protomap.utils.cli_utils import exit_with_error, project_status

	try:
		session = _build_session(path, config, strict)
		with project_status(path, "Loading entities"):
			registry = await session.materialize()
	except ProtomapError as e:
		exit_with_error("Could not load project entities", path, exception=e)

	logger.info("Loaded %d entities from %s", len(registry), path)

	table = Table(title=f"Entities in {path.name}")
	table.add_column("#", justify="right")
	table.add_column("Name")
	table.add_column("Parent")
	table.add_column("Children")
	table.add_column("Composes")

	for entity in registry.all():
		parent = registry.get_by_index(entity.parent_index) if entity.parent_index is not None else None
		children = [registry.get_by_index(index) for index in session.resolver.children_of(entity.index)]
		table.add_row(
			str(entity.index),
			entity.name,
			parent.name if parent else "",
			", ".join(child.name for child in children if child),
			", ".join(entity.composed_type_names),
		)

	Console().print(table)
