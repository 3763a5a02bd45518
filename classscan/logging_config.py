"""
Logging setup for classscan.

Records go to stderr through rich so the report on stdout stays clean. A log
file, when given, gets the same records in plain text.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "classscan"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _level(verbose: bool, quiet: bool) -> int:
	if quiet:
		return logging.ERROR
	if verbose:
		return logging.DEBUG
	return logging.WARNING


def setup_logging(
	verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
	"""
	Install handlers on the root logger and return the classscan logger.

	quiet wins over verbose. Calling it again replaces the previous handlers.
	"""
	level = _level(verbose, quiet)

	handlers: List[logging.Handler] = [
		RichHandler(
			console=Console(stderr=True),
			markup=False,
			rich_tracebacks=True,
			show_path=verbose,
		)
	]
	if log_file:
		file_handler = logging.FileHandler(log_file, encoding="utf-8")
		file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
		handlers.append(file_handler)

	logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)

	logger = logging.getLogger(ROOT_LOGGER)
	logger.setLevel(level)
	return logger


def get_logger(name: str) -> logging.Logger:
	"""Module logger nested under the classscan logger."""
	if not name.startswith(ROOT_LOGGER):
		name = f"{ROOT_LOGGER}.{name}"
	return logging.getLogger(name)
