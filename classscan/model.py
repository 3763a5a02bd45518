from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel

CONSTRUCTOR_NAME = "__construct"

ClassDependencyIndex = Dict[str, int]


class Visibility(str, Enum):
	PUBLIC = "public"
	PRIVATE = "private"
	PROTECTED = "protected"


class StmtKind(str, Enum):
	IF = "if"
	ELSEIF = "elseif"
	FOR = "for"
	FOREACH = "foreach"
	THROW = "throw"
	CATCH = "catch"
	SWITCH = "switch"
	MATCH = "match"


class SortMetric(str, Enum):
	CLASS_COMPLEXITY = "class_complexity"
	USES = "uses"
	DEPENDENCIES = "dependencies"
	FUNCTION_COMPLEXITY = "function_complexity"


class Stmt(BaseModel):
	kind: StmtKind
	line: int
	case_count: int = 0
	# Only a switch owns nested statements.
	stmts: List[Stmt] = []

	def complexity(self) -> int:
		if self.kind is StmtKind.MATCH:
			return self.case_count
		if self.kind is StmtKind.SWITCH:
			return self.case_count + sum(s.complexity() for s in self.stmts)
		return 1


class FunctionInfo(BaseModel):
	name: str
	stmts: List[Stmt] = []
	params: int = 0
	return_type: Optional[str] = None
	visibility: Visibility = Visibility.PUBLIC
	is_abstract: bool = False

	def complexity(self) -> int:
		return 1 + sum(s.complexity() for s in self.stmts)


class ClassInfo(BaseModel):
	name: str
	functions: List[FunctionInfo] = []
	extends: Optional[str] = None
	implements: List[str] = []
	is_abstract: bool = False
	dependencies: List[str] = []

	def add_function(self, function: FunctionInfo) -> None:
		if function.return_type:
			self.add_dependency(function.return_type)
		self.functions.append(function)

	def add_dependency(self, dependency: str) -> None:
		# Type names start uppercase; this drops stray lowercase words like null.
		name = dependency.rsplit("\\", 1)[-1]
		if not name or not name[0].isupper():
			return
		if dependency not in self.dependencies:
			self.dependencies.append(dependency)

	def sort_functions(self) -> None:
		# sorted() is stable, ties keep declaration order
		self.functions = sorted(self.functions, key=lambda f: f.complexity(), reverse=True)

	def highest_complexity_function(self) -> int:
		return max((f.complexity() for f in self.functions), default=0)

	def average_complexity(self) -> float:
		scores = [f.complexity() for f in self.functions if f.name != CONSTRUCTOR_NAME]
		if not scores:
			return 0.0
		return sum(scores) / len(scores)


class RawFile(BaseModel):
	path: str
	text: str
	last_accessed: int = 0


class FileInfo(BaseModel):
	path: str
	rel_path: str
	extension: str


class FileFacts(BaseModel):
	path: str
	class_info: ClassInfo
	lines: int
	last_accessed: int


class AnalyzeResult(BaseModel):
	index: ClassDependencyIndex
	files: List[FileFacts]


Stmt.model_rebuild()
