from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

import uvicorn

from classscan.config import load_config
from classscan.errors import ClassScanError
from classscan.index import analyze_repository
from classscan.logging_config import setup_logging
from classscan.model import SortMetric
from classscan.summarize import filter_files, sort_files, summarize_report


def cmd_analyze(args: argparse.Namespace) -> None:
	logger = setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)
	root = os.path.abspath(args.path)
	if not os.path.isdir(root):
		logger.error("Invalid path: %s", root)
		sys.exit(1)

	try:
		config = load_config(
			config_file=Path(args.config) if args.config else None,
			top_files=args.top,
			sort_metric=args.sort,
			skip_malformed=False if args.strict else None,
		)
		result = analyze_repository(root, config)
	except ClassScanError as e:
		logger.error("%s", e)
		sys.exit(1)

	if args.json:
		files = sort_files(filter_files(result.files, args.query), result.index, config.sort_metric)
		result = result.model_copy(update={"files": files[: config.top_files]})
		print(result.model_dump_json(indent=2))
		return

	print(
		summarize_report(
			result,
			metric=config.sort_metric,
			query=args.query,
			top=config.top_files,
			show_dependencies=not args.no_dependencies,
			max_functions=args.max_functions,
			show_statements=not args.no_statements,
		)
	)


def cmd_serve(args: argparse.Namespace) -> None:
	setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)


def main() -> None:
	parser = argparse.ArgumentParser(prog="classscan")
	parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
	parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
	parser.add_argument("--log-file", default=None, help="Also write log records to this file")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pa = sub.add_parser("analyze", help="Analyze a source tree and print class profiles")
	pa.add_argument("path", help="Path to repository root")
	pa.add_argument("--config", help="Path to a classscan.toml file")
	pa.add_argument("--top", type=int, default=None, help="Number of files to show")
	pa.add_argument(
		"--sort",
		choices=[m.value for m in SortMetric],
		default=None,
		help="Metric to sort by",
	)
	pa.add_argument("--query", default=None, help="Only show classes whose name contains this")
	pa.add_argument("--json", action="store_true", help="Print the result as JSON")
	pa.add_argument("--strict", action="store_true", help="Abort on the first malformed file")
	pa.add_argument("--no-dependencies", action="store_true", help="Hide dependency lists")
	pa.add_argument("--no-statements", action="store_true", help="Hide function statements")
	pa.add_argument("--max-functions", type=int, default=None, help="Max functions per class")
	pa.set_defaults(func=cmd_analyze)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8000)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)

	args = parser.parse_args()
	args.func(args)


if __name__ == "__main__":
	main()
