from __future__ import annotations

from typing import Callable, Dict, List, Optional

from .model import (
	CONSTRUCTOR_NAME,
	AnalyzeResult,
	ClassDependencyIndex,
	FileFacts,
	FunctionInfo,
	SortMetric,
	Stmt,
)


def _sort_keys(index: ClassDependencyIndex) -> Dict[SortMetric, Callable[[FileFacts], float]]:
	return {
		SortMetric.CLASS_COMPLEXITY: lambda f: f.class_info.average_complexity(),
		SortMetric.USES: lambda f: index.get(f.class_info.name, 0),
		SortMetric.DEPENDENCIES: lambda f: len(f.class_info.dependencies),
		SortMetric.FUNCTION_COMPLEXITY: lambda f: f.class_info.highest_complexity_function(),
	}


def sort_files(
	files: List[FileFacts], index: ClassDependencyIndex, metric: SortMetric
) -> List[FileFacts]:
	"""Highest first; ties keep input order."""
	return sorted(files, key=_sort_keys(index)[metric], reverse=True)


def filter_files(files: List[FileFacts], query: Optional[str]) -> List[FileFacts]:
	if not query:
		return list(files)
	needle = query.lower()
	return [f for f in files if needle in f.class_info.name.lower()]


def _describe_stmt(stmt: Stmt) -> str:
	text = f"{stmt.kind.value} (line {stmt.line})"
	if stmt.case_count:
		text += f", {stmt.case_count} cases"
	if stmt.stmts:
		text += ": " + ", ".join(_describe_stmt(s) for s in stmt.stmts)
	return text


def summarize_function(fn: FunctionInfo, show_statements: bool = True) -> str:
	if fn.name == CONSTRUCTOR_NAME:
		return_type = "self"
	else:
		return_type = fn.return_type or "Not provided"
	parts: List[str] = [
		f"  Name: {fn.name}",
		f"  Visibility: {fn.visibility.value}",
		f"  Return type: {return_type}",
		f"  Param count: {fn.params}",
		f"  Cyclomatic complexity: {fn.complexity()}",
	]
	if fn.is_abstract:
		parts.append("  Abstract: true")
	if show_statements:
		for stmt in fn.stmts:
			parts.append(f"    {_describe_stmt(stmt)}")
	return "\n".join(parts)


def summarize_file(
	f: FileFacts,
	index: ClassDependencyIndex,
	show_dependencies: bool = True,
	max_functions: Optional[int] = None,
	show_statements: bool = True,
) -> str:
	c = f.class_info
	parts: List[str] = []
	parts.append(c.name)
	parts.append(f"Last accessed {f.last_accessed} hours ago")
	parts.append(f"Path: {f.path}")
	parts.append(f"Lines: {f.lines}")
	parts.append(f"Uses: {index.get(c.name, 0)}")
	if show_dependencies:
		if c.dependencies:
			parts.append("Dependencies:")
			parts.extend(f"  {d}" for d in c.dependencies)
		else:
			parts.append("No dependencies")
	parts.append(f"Average cyclomatic complexity: {c.average_complexity():.2f}")
	parts.append(f"Max cyclomatic complexity: {c.highest_complexity_function()}")
	parts.append(f"Functions: {len(c.functions)}")
	parts.append(f"Extends: {c.extends or 'None'}")
	if c.implements:
		parts.append(f"Implements: {', '.join(c.implements)}")
	parts.append(f"Abstract: {str(c.is_abstract).lower()}")
	functions = c.functions if max_functions is None else c.functions[:max_functions]
	for fn in functions:
		parts.append("* -------- *")
		parts.append(summarize_function(fn, show_statements))
	return "\n".join(parts)


def summarize_report(
	result: AnalyzeResult,
	metric: SortMetric = SortMetric.CLASS_COMPLEXITY,
	query: Optional[str] = None,
	top: int = 10,
	show_dependencies: bool = True,
	max_functions: Optional[int] = None,
	show_statements: bool = True,
) -> str:
	files = sort_files(filter_files(result.files, query), result.index, metric)
	if not files:
		return "No matching classes"

	parts: List[str] = [f"Top files by {metric.value.replace('_', ' ')}", "* ---------- *"]
	for i, f in enumerate(files[:top], start=1):
		parts.append(
			f"{i}. "
			+ summarize_file(
				f,
				result.index,
				show_dependencies=show_dependencies,
				max_functions=max_functions,
				show_statements=show_statements,
			)
		)
		parts.append("* ---------- *")
	return "\n".join(parts)
