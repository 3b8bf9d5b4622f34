"""Command-line interface package for protomap."""

from __future__ import annotations

import datetime
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from protomap import __version__
from protomap.utils.log_setup import setup_logging

from .view_cmd import register_command as register_view_command

logger = logging.getLogger(__name__)

# Load .env.local first, then fall back to .env, so PROTOMAP_* overrides reach the config loader
env_local = Path(".env.local")
if env_local.exists():
	load_dotenv(dotenv_path=env_local)
	logger.debug("Loaded environment variables from %s", env_local)
elif Path(".env").exists():
	load_dotenv(dotenv_path=Path(".env"))
	logger.debug("Loaded environment variables from .env")

app = typer.Typer(
	help=f"protomap - Map prototype inheritance and composition across a project.\n\nVersion: {__version__}",
	no_args_is_help=True,
	context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
	"""Callback for --version option."""
	if value:
		typer.echo(f"protomap version: {__version__}")
		raise typer.Exit


@app.callback(invoke_without_command=True)
def global_options(
	ctx: typer.Context,
	is_verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False,
	is_output_log: Annotated[
		bool,
		typer.Option(
			"--save-log",
			help="Enable logging to a file. Logs to logs/protomap_{datetime}.log.",
		),
	] = False,
	_version: Annotated[
		bool | None,
		typer.Option("--version", help="Show version and exit.", callback=_version_callback, is_eager=True),
	] = None,
) -> None:
	"""Global CLI options and logging setup."""
	ctx.meta["is_verbose"] = is_verbose
	ctx.meta["is_output_log"] = is_output_log

	log_file_path: Path | None = None
	if is_output_log:
		current_time = datetime.datetime.now(tz=datetime.timezone.utc).strftime("%Y-%m-%d_%H-%M-%S")
		log_file_path = Path("logs") / f"protomap_{current_time}.log"

	setup_logging(is_verbose=is_verbose, log_file_path=log_file_path)


register_view_command(app)


def main() -> int:
	"""Run the CLI application."""
	return app()


if __name__ == "__main__":
	sys.exit(main())
