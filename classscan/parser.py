"""Recursive-descent parser over the token stream.

Only the grammar that matters for complexity and dependencies is modeled:
namespace and use directives, one class or trait per unit, member
declarations, function signatures and control statements inside bodies.
Every ( and { pushes onto a bracket stack and every ) and } pops it; the
stack depth is the only signal for where a class, function or control body
ends.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, NamedTuple, Optional

from .errors import (
	UnexpectedEndOfTokensError,
	UnmatchedClosingBracketError,
	UnmatchedOpeningBracketError,
	UnterminatedMatchError,
	UnterminatedSwitchError,
)
from .keywords import Keyword, KeywordTable
from .logging_config import get_logger
from .model import ClassInfo, FunctionInfo, Stmt, StmtKind, Visibility
from .tokens import ACCESS_OPERATORS, CLOSING_BRACKETS, OPENING_BRACKETS, Token, TokenKind

logger = get_logger(__name__)

NAMESPACE_SEPARATOR = "\\"

SIMPLE_STMTS = {
	Keyword.IF: StmtKind.IF,
	Keyword.ELSEIF: StmtKind.ELSEIF,
	Keyword.FOR: StmtKind.FOR,
	Keyword.FOREACH: StmtKind.FOREACH,
	Keyword.THROW: StmtKind.THROW,
	Keyword.CATCH: StmtKind.CATCH,
}


class Alias(NamedTuple):
	name: str
	alias: str


def last_segment(name: str) -> str:
	return name.rsplit(NAMESPACE_SEPARATOR, 1)[-1]


class Parser:
	"""Builds one ClassInfo per token stream.

	The active namespace is kept across units when inherit_namespace is set,
	so a file without its own namespace directive resolves names against the
	previous file's namespace. Imports and aliases are always per unit.
	"""

	def __init__(
		self,
		keywords: Optional[KeywordTable] = None,
		inherit_namespace: bool = True,
		resolve_implements: bool = False,
	):
		self.keywords = keywords if keywords is not None else KeywordTable()
		self.inherit_namespace = inherit_namespace
		self.resolve_implements = resolve_implements
		self.tokens: Deque[Token] = deque()
		self.brackets: List[Token] = []
		self.namespace = ""
		self.uses: List[str] = []
		self.aliases: List[Alias] = []

	# Token cursor

	def _next_token_opt(self) -> Optional[Token]:
		if not self.tokens:
			return None
		token = self.tokens.popleft()
		if token.kind in OPENING_BRACKETS:
			self.brackets.append(token)
		elif token.kind in CLOSING_BRACKETS:
			self._close_bracket(token)
		return token

	def _close_bracket(self, token: Token) -> None:
		if not self.brackets:
			raise UnmatchedClosingBracketError(
				"Unmatched closing bracket", line=token.line, found=token.lexeme
			)
		opener = self.brackets.pop()
		if opener.kind is not CLOSING_BRACKETS[token.kind]:
			expected = ")" if opener.kind is TokenKind.LEFT_PAREN else "}"
			raise UnmatchedClosingBracketError(
				"Unmatched closing bracket", line=token.line, expected=expected, found=token.lexeme
			)

	def _next_token(self) -> Token:
		token = self._next_token_opt()
		if token is None:
			if self.brackets:
				opener = self.brackets[-1]
				raise UnmatchedOpeningBracketError(
					"Unmatched opening bracket",
					line=opener.line,
					expected=")" if opener.kind is TokenKind.LEFT_PAREN else "}",
					found="end of input",
				)
			raise UnexpectedEndOfTokensError()
		return token

	def _peek(self) -> Optional[Token]:
		return self.tokens[0] if self.tokens else None

	def _next_is(self, *kinds: TokenKind) -> bool:
		token = self._peek()
		return token is not None and token.kind in kinds

	def _next_is_keyword(self, *keywords: Keyword) -> bool:
		token = self._peek()
		return token is not None and self.keywords.is_keyword(token, *keywords)

	def _next_is_name(self) -> bool:
		token = self._peek()
		return (
			token is not None
			and token.kind is TokenKind.IDENTIFIER
			and self.keywords.keyword(token) is None
		)

	def _skip(self, count: int) -> None:
		"""Consume up to count tokens, stopping if a body closes on the way."""
		start = len(self.brackets)
		for _ in range(count):
			self._next_token()
			if len(self.brackets) < start:
				return

	def _synchronize(self) -> None:
		while self._peek() is not None and self._peek().kind is not TokenKind.SEMICOLON:
			self._next_token()
		self._next_token()

	# File level

	def parse_unit(self, tokens: Iterable[Token]) -> Optional[ClassInfo]:
		self.tokens = deque(tokens)
		self.brackets.clear()
		self.uses.clear()
		self.aliases.clear()
		if not self.inherit_namespace:
			self.namespace = ""

		while True:
			token = self._next_token_opt()
			if token is None:
				break
			if token.kind is not TokenKind.IDENTIFIER:
				continue
			if self._next_is(*ACCESS_OPERATORS):
				self._skip(2)
				continue

			keyword = self.keywords.keyword(token)
			if keyword is Keyword.NAMESPACE:
				self.namespace = self._next_token().lexeme
			elif keyword is Keyword.USE:
				self._use()
			elif keyword is Keyword.ABSTRACT:
				while self._next_is_keyword(Keyword.READONLY, Keyword.FINAL):
					self._next_token()
				if self._next_is_keyword(Keyword.CLASS, Keyword.TRAIT):
					self._next_token()
					if self._next_is_name():
						return self._class(is_abstract=True)
			elif keyword in (Keyword.CLASS, Keyword.TRAIT):
				# `new class(...)` and `new class extends X` have no name
				if self._next_is_name():
					return self._class(is_abstract=False)

		if self.brackets:
			opener = self.brackets[-1]
			raise UnmatchedOpeningBracketError(
				"Unmatched opening bracket", line=opener.line, found="end of input"
			)
		return None

	def _use(self) -> None:
		name = self._next_token().lexeme
		if self._next_is_keyword(Keyword.AS):
			self._next_token()
			aliased = self._next_token().lexeme
			head, _, _ = name.rpartition(NAMESPACE_SEPARATOR)
			local = f"{head}{NAMESPACE_SEPARATOR}{aliased}" if head else aliased
			self.uses.append(local)
			self.aliases.append(Alias(name, local))
			return
		self.uses.append(name)

	# Class body

	def _class(self, is_abstract: bool) -> ClassInfo:
		name = self._next_token().lexeme
		class_info = ClassInfo(
			name=f"{self.namespace}{NAMESPACE_SEPARATOR}{name}",
			is_abstract=is_abstract,
		)

		if self._next_is_keyword(Keyword.EXTENDS):
			self._next_token()
			class_info.extends = self._resolve(self._next_token())

		if self._next_is_keyword(Keyword.IMPLEMENTS):
			self._next_token()
			while self._peek() is not None and self._peek().kind is not TokenKind.LEFT_BRACE:
				token = self._next_token()
				if token.kind is TokenKind.COMMA:
					continue
				if self.resolve_implements:
					class_info.implements.append(self._resolve(token))
				else:
					class_info.implements.append(token.lexeme)

		depth = len(self.brackets)
		self._next_token()
		while len(self.brackets) != depth:
			self._member(class_info)

		# Imports count even when no member mentions them.
		for imported in self.uses:
			class_info.add_dependency(imported)
		self._apply_aliases(class_info)
		class_info.sort_functions()

		logger.debug(
			"Parsed class %s: %d functions, %d dependencies",
			class_info.name,
			len(class_info.functions),
			len(class_info.dependencies),
		)
		return class_info

	def _apply_aliases(self, class_info: ClassInfo) -> None:
		if not self.aliases:
			return
		canonical = {alias.alias: alias.name for alias in self.aliases}

		dependencies: List[str] = []
		for dependency in class_info.dependencies:
			dependency = canonical.get(dependency, dependency)
			if dependency not in dependencies:
				dependencies.append(dependency)
		class_info.dependencies = dependencies

		if class_info.extends is not None:
			class_info.extends = canonical.get(class_info.extends, class_info.extends)
		for function in class_info.functions:
			if function.return_type is not None:
				function.return_type = canonical.get(function.return_type, function.return_type)

	def _member(self, class_info: ClassInfo) -> None:
		token = self._next_token()
		keyword = self.keywords.keyword(token)
		if keyword is None:
			return
		if keyword in (Keyword.ABSTRACT, Keyword.FINAL):
			self._member(class_info)
		elif keyword is Keyword.USE:
			class_info.add_dependency(self._resolve(self._next_token()))
			while self._next_is(TokenKind.COMMA):
				self._next_token()
				class_info.add_dependency(self._resolve(self._next_token()))
		else:
			self._declaration(class_info, token, keyword)

	def _type_token(self) -> Token:
		token = self._next_token()
		# Nullability is not modeled.
		if token.kind is TokenKind.QUESTION:
			token = self._next_token()
		return token

	def _declaration(self, class_info: ClassInfo, token: Token, keyword: Keyword) -> None:
		visibility = Visibility.PUBLIC
		if keyword.visibility is not None:
			visibility = keyword.visibility
			token = self._type_token()
			dependency = self._parse_type(token)
			if dependency is not None:
				class_info.add_dependency(dependency)
				return
			keyword = self.keywords.keyword(token)
			if keyword is None:
				return

		if keyword is Keyword.CONST:
			self._synchronize()
		elif keyword is Keyword.READONLY:
			dependency = self._parse_type(self._type_token())
			if dependency is not None:
				class_info.add_dependency(dependency)
		elif keyword is Keyword.STATIC:
			token = self._type_token()
			if self.keywords.is_keyword(token, Keyword.FUNCTION):
				class_info.add_function(self._function(Visibility.PUBLIC, class_info))
				return
			dependency = self._parse_type(token)
			if dependency is not None:
				class_info.add_dependency(dependency)
		elif keyword is Keyword.FUNCTION:
			class_info.add_function(self._function(visibility, class_info))
		else:
			dependency = self._parse_type(token)
			if dependency is not None:
				class_info.add_dependency(dependency)
			else:
				self._synchronize()

	# Types

	def _parse_type(self, token: Token) -> Optional[str]:
		"""Resolve token if it names a user type, else None."""
		if token.kind is not TokenKind.IDENTIFIER or token.is_variable:
			return None
		if self.keywords.is_built_in_type(token) or self.keywords.keyword(token) is not None:
			return None
		return self._resolve(token)

	def _resolve(self, token: Token) -> str:
		lexeme = token.lexeme
		if self.keywords.is_built_in_type(token):
			return lexeme
		if lexeme.startswith(NAMESPACE_SEPARATOR):
			return lexeme
		# An import wins over the current namespace, also for Sub\Name
		# relative to an imported prefix.
		head, sep, rest = lexeme.partition(NAMESPACE_SEPARATOR)
		for imported in self.uses:
			if last_segment(imported) == head:
				return f"{imported}{sep}{rest}"
		return f"{self.namespace}{NAMESPACE_SEPARATOR}{lexeme}"

	# Functions

	def _function(self, visibility: Visibility, class_info: ClassInfo) -> FunctionInfo:
		name_token = self._next_token()
		# function &name() returns by reference
		if name_token.kind is TokenKind.REFERENCE:
			name_token = self._next_token()
		name = name_token.lexeme

		depth = len(self.brackets)
		self._next_token()
		params = 0
		while len(self.brackets) != depth:
			token = self._next_token()
			if token.kind in (TokenKind.COMMA, TokenKind.RIGHT_PAREN, TokenKind.EQUAL):
				continue
			if token.lexeme.startswith("$"):
				params += 1
				continue
			# Parameter types belong to the class, not the function.
			dependency = self._parse_type(token)
			if dependency is not None:
				class_info.add_dependency(dependency)

		return_type = None
		if self._next_is(TokenKind.COLON):
			self._next_token()
			return_type = self._resolve(self._type_token())
			# Union and intersection members beyond the first are dependencies only.
			while self._next_is(TokenKind.PIPE, TokenKind.REFERENCE):
				self._next_token()
				dependency = self._parse_type(self._type_token())
				if dependency is not None:
					class_info.add_dependency(dependency)

		depth = len(self.brackets)
		token = self._next_token()
		if token.kind is TokenKind.SEMICOLON:
			return FunctionInfo(
				name=name,
				params=params,
				return_type=return_type,
				visibility=visibility,
				is_abstract=True,
			)

		stmts: List[Stmt] = []
		while len(self.brackets) != depth:
			stmt = self._stmt()
			if stmt is not None:
				stmts.append(stmt)
		return FunctionInfo(
			name=name,
			stmts=stmts,
			params=params,
			return_type=return_type,
			visibility=visibility,
		)

	# Statements

	def _stmt(self) -> Optional[Stmt]:
		token = self._next_token()
		if token.kind is not TokenKind.IDENTIFIER:
			if token.kind in ACCESS_OPERATORS:
				self._skip(3)
			return None
		keyword = self.keywords.keyword(token)
		if keyword is None:
			return None
		return self._control_stmt(keyword, token.line)

	def _control_stmt(self, keyword: Keyword, line: int) -> Optional[Stmt]:
		kind = SIMPLE_STMTS.get(keyword)
		if kind is not None:
			return Stmt(kind=kind, line=line)
		if keyword is Keyword.SWITCH:
			return self._switch(line)
		if keyword is Keyword.MATCH:
			return self._match(line)
		return None

	def _switch(self, line: int) -> Stmt:
		case_count = 0
		stmts: List[Stmt] = []
		depth = len(self.brackets)
		while True:
			token = self._next_token_opt()
			if token is None:
				raise UnterminatedSwitchError(line)
			if token.kind is TokenKind.IDENTIFIER:
				keyword = self.keywords.keyword(token)
				if keyword is Keyword.CASE:
					case_count += 1
				elif keyword is not None:
					stmt = self._control_stmt(keyword, token.line)
					if stmt is not None:
						stmts.append(stmt)
			elif token.kind in ACCESS_OPERATORS:
				# member name, e.g. $this->match
				self._next_token()
			elif token.kind is TokenKind.RIGHT_BRACE and len(self.brackets) == depth:
				break
		return Stmt(kind=StmtKind.SWITCH, line=line, case_count=case_count, stmts=stmts)

	def _match(self, line: int) -> Stmt:
		case_count = 0
		depth = len(self.brackets)
		while True:
			token = self._next_token_opt()
			if token is None:
				raise UnterminatedMatchError(line)
			if token.kind is TokenKind.FAT_ARROW:
				case_count += 1
			elif token.kind is TokenKind.RIGHT_BRACE and len(self.brackets) == depth:
				break
		return Stmt(kind=StmtKind.MATCH, line=line, case_count=case_count)
