"""Logging for protomap runs: a rich console handler plus an optional run log file."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

# Diagnostics go to stderr so view documents on stdout stay machine readable
console = Console(stderr=True)

RUN_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d %(message)s"

# Third-party loggers that flood a verbose run
QUIET_LOGGERS = ("asyncio", "markdown_it")

logger = logging.getLogger(__name__)


def setup_logging(
	is_verbose: bool = False,
	log_to_console: bool = True,
	log_file_path: Path | str | None = None,
) -> None:
	"""
	Route log records to the console and, optionally, a run log file.

	The console shows warnings, or everything with ``is_verbose``. A run log
	always records debug detail, so the root logger is opened up to DEBUG when
	one is requested and the console handler does its own filtering.

	Args:
	    is_verbose: Show debug records on the console
	    log_to_console: Attach the rich console handler
	    log_file_path: Run log to append to, if any

	"""
	console_level = logging.DEBUG if is_verbose else logging.WARNING

	root_logger = logging.getLogger()
	for handler in root_logger.handlers[:]:
		root_logger.removeHandler(handler)
	root_logger.setLevel(logging.DEBUG if log_file_path else console_level)

	for name in QUIET_LOGGERS:
		logging.getLogger(name).setLevel(max(console_level, logging.INFO))

	if log_to_console:
		root_logger.addHandler(
			RichHandler(
				level=console_level,
				console=console,
				markup=False,
				rich_tracebacks=is_verbose,
				show_time=is_verbose,
				show_path=is_verbose,
			)
		)

	if not log_file_path:
		return

	run_log = Path(log_file_path)
	try:
		run_log.parent.mkdir(parents=True, exist_ok=True)
		file_handler = logging.FileHandler(run_log, mode="a", encoding="utf-8")
	except OSError as e:
		logger.warning("Run log %s could not be opened, continuing without it: %s", run_log, e)
		return

	file_handler.setLevel(logging.DEBUG)
	file_handler.setFormatter(logging.Formatter(RUN_LOG_FORMAT))
	root_logger.addHandler(file_handler)
	logger.debug("Writing run log to %s", run_log)
