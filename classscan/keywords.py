"""Keyword and built-in type lookup.

The lexer emits every word as an identifier; the parser classifies it through
a KeywordTable built once and shared by reference.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from .model import Visibility
from .tokens import Token, TokenKind


class Keyword(str, Enum):
	# Control flow
	IF = "if"
	ELSEIF = "elseif"
	FOR = "for"
	FOREACH = "foreach"
	MATCH = "match"
	SWITCH = "switch"
	WHILE = "while"
	CASE = "case"
	THROW = "throw"
	CATCH = "catch"

	# Declarations
	NAMESPACE = "namespace"
	CLASS = "class"
	TRAIT = "trait"
	FUNCTION = "function"
	EXTENDS = "extends"
	IMPLEMENTS = "implements"
	ABSTRACT = "abstract"
	FINAL = "final"
	USE = "use"
	AS = "as"
	CONST = "const"
	STATIC = "static"
	READONLY = "readonly"
	PUBLIC = "public"
	PRIVATE = "private"
	PROTECTED = "protected"

	# Built-in types
	STRING = "string"
	ARRAY = "array"
	INT = "int"
	FLOAT = "float"
	BOOL = "bool"
	ITERABLE = "iterable"
	MIXED = "mixed"
	VOID = "void"
	MYSELF = "self"

	@property
	def visibility(self) -> Optional[Visibility]:
		return _VISIBILITIES.get(self)


_VISIBILITIES: Dict[Keyword, Visibility] = {
	Keyword.PUBLIC: Visibility.PUBLIC,
	Keyword.PRIVATE: Visibility.PRIVATE,
	Keyword.PROTECTED: Visibility.PROTECTED,
}

# `true`/`false` read as bool both as keywords and as types.
_KEYWORD_ALIASES: Dict[str, Keyword] = {
	"true": Keyword.BOOL,
	"false": Keyword.BOOL,
}

BUILT_IN_TYPES = frozenset(
	{
		"string",
		"array",
		"int",
		"float",
		"bool",
		"self",
		"void",
		"readonly",
		"iterable",
		"static",
		"mixed",
		"true",
		"false",
	}
)

CONTROL_KEYWORDS = frozenset(
	{
		Keyword.IF,
		Keyword.ELSEIF,
		Keyword.FOR,
		Keyword.FOREACH,
		Keyword.SWITCH,
		Keyword.MATCH,
		Keyword.THROW,
		Keyword.CATCH,
	}
)


class KeywordTable:
	"""Lexeme to keyword lookup, plus the built-in type subset."""

	def __init__(self):
		self._keywords: Dict[str, Keyword] = {kw.value: kw for kw in Keyword}
		self._keywords.update(_KEYWORD_ALIASES)

	def keyword(self, token: Token) -> Optional[Keyword]:
		if token.kind is not TokenKind.IDENTIFIER:
			return None
		return self._keywords.get(token.lexeme)

	def is_keyword(self, token: Token, *expected: Keyword) -> bool:
		kw = self.keyword(token)
		return kw is not None and kw in expected

	def is_built_in_type(self, token: Token) -> bool:
		return token.kind is TokenKind.IDENTIFIER and token.lexeme in BUILT_IN_TYPES

