"""Batch pipeline: lex and parse every file, then index class usage."""

from __future__ import annotations

import time
from typing import Iterable, List, Optional

from .config import ScanConfig
from .errors import AnalysisError, LexError, ParseError
from .fs_scan import read_raw_files, scan_repository
from .keywords import KeywordTable
from .lexer import tokenize
from .logging_config import get_logger
from .model import AnalyzeResult, ClassDependencyIndex, FileFacts, RawFile
from .parser import Parser

logger = get_logger(__name__)


def build_index(files: Iterable[FileFacts]) -> ClassDependencyIndex:
	"""Count how often each class name is referenced as a dependency."""
	index: ClassDependencyIndex = {}
	for f in files:
		class_info = f.class_info
		index.setdefault(class_info.name, 0)
		for dependency in class_info.dependencies:
			index[dependency] = index.get(dependency, 0) + 1
	return index


def analyze_file(parser: Parser, raw: RawFile) -> Optional[FileFacts]:
	"""Parse a single file; None when it declares no class or trait.

	Raises:
		LexError: On a lexical fault in the file.
		ParseError: On a structural fault in the file.
	"""
	tokens = list(tokenize(raw.text))
	lines = tokens[-1].line if tokens else 0
	class_info = parser.parse_unit(tokens)
	if class_info is None:
		logger.debug("No class found in %s", raw.path)
		return None
	return FileFacts(
		path=raw.path,
		class_info=class_info,
		lines=lines,
		last_accessed=raw.last_accessed,
	)


def analyze(raw_files: Iterable[RawFile], config: Optional[ScanConfig] = None) -> AnalyzeResult:
	"""Run the pipeline over raw files in order.

	Files without a class are dropped. A malformed file is skipped with a
	warning when config.skip_malformed is set, otherwise it aborts the run
	with an AnalysisError.
	"""
	if config is None:
		config = ScanConfig()
	parser = Parser(
		keywords=KeywordTable(),
		inherit_namespace=config.inherit_namespace,
		resolve_implements=config.resolve_implements,
	)

	files: List[FileFacts] = []
	started = time.perf_counter()
	for raw in raw_files:
		try:
			facts = analyze_file(parser, raw)
		except (LexError, ParseError) as e:
			if not config.skip_malformed:
				raise AnalysisError(raw.path, e) from e
			logger.warning("Skipping %s: %s", raw.path, e)
			continue
		if facts is not None:
			files.append(facts)
	logger.debug(
		"Finished scanning and parsing %d files in %.4f seconds.",
		len(files),
		time.perf_counter() - started,
	)

	started = time.perf_counter()
	index = build_index(files)
	logger.debug("Indexed classes in %.4f seconds", time.perf_counter() - started)

	return AnalyzeResult(index=index, files=files)


def analyze_repository(root: str, config: Optional[ScanConfig] = None) -> AnalyzeResult:
	if config is None:
		config = ScanConfig()
	started = time.perf_counter()
	raw_files = read_raw_files(scan_repository(root, config))
	logger.debug(
		"Filtered out and read %d files in %.4f seconds.",
		len(raw_files),
		time.perf_counter() - started,
	)
	return analyze(raw_files, config)
