"""Console reporting for protomap commands."""

from __future__ import annotations

import contextlib
import logging
import os
from typing import TYPE_CHECKING, NoReturn

import typer
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from protomap.utils.log_setup import console

if TYPE_CHECKING:
	from collections.abc import Iterator
	from pathlib import Path

	from protomap.graph.serializer import ViewResult

logger = logging.getLogger(__name__)


def _is_interactive() -> bool:
	if os.environ.get("PYTEST_CURRENT_TEST") or os.environ.get("CI"):
		return False
	return console.is_terminal


@contextlib.contextmanager
def project_status(project: Path, activity: str) -> Iterator[None]:
	"""
	Show a status line such as ``Rendering hierarchy view of shapes...`` while work runs.

	Nothing is drawn when stderr is not a terminal or under CI.

	Args:
	    project: Project directory being worked on
	    activity: What is being done to it

	Yields:
	    None

	"""
	if not _is_interactive():
		yield
		return

	with console.status(f"{activity} of [bold]{project.name}[/bold]..."):
		yield


def describe_result(result: ViewResult) -> str:
	"""Summarize a rendered view, e.g. ``hierarchy view: 3 nodes, 2 connections``."""
	document = result.document
	return f"{result.view.value} view: {len(document.nodes)} nodes, {len(document.connections)} connections"


def _report_panel(
	message: str, title: str, style: str, project: Path, view: str | None, details: str | None
) -> Panel:
	context = Table.grid(padding=(0, 2))
	context.add_column(style="bold")
	context.add_column(overflow="fold")
	context.add_row("Project", str(project))
	if view:
		context.add_row("View", view)
	if details:
		context.add_row("Details", details)
	return Panel(Group(Text(message), Text(), context), title=title, title_align="left", border_style=style)


def show_error(message: str, project: Path, view: str | None = None, exception: Exception | None = None) -> None:
	"""
	Report a failed command together with the project and view it was working on.

	Args:
	        message: What failed
	        project: Project directory of the command
	        view: View being rendered, if any
	        exception: Underlying error, shown as details

	"""
	if exception is not None:
		logger.debug("%s", message, exc_info=exception)
	details = str(exception) if exception is not None else None
	console.print(_report_panel(message, "Error", "red", project, view, details))


def show_warning(message: str, project: Path, view: str | None = None) -> None:
	"""Report a non-fatal problem with a command's result."""
	console.print(_report_panel(message, "Warning", "yellow", project, view, None))


def exit_with_error(
	message: str,
	project: Path,
	view: str | None = None,
	exception: Exception | None = None,
	exit_code: int = 1,
) -> NoReturn:
	"""Report the failure and end the command with ``exit_code``."""
	show_error(message, project, view, exception)
	raise typer.Exit(exit_code) from exception
