from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenKind(str, Enum):
	PHP_TAG = "<?php"

	# Single character tokens
	LEFT_PAREN = "("
	RIGHT_PAREN = ")"
	LEFT_BRACE = "{"
	RIGHT_BRACE = "}"
	LEFT_BRACKET = "["
	RIGHT_BRACKET = "]"
	COMMA = ","
	DOT = "."
	MINUS = "-"
	PLUS = "+"
	SEMICOLON = ";"
	SLASH = "/"
	STAR = "*"
	QUESTION = "?"
	COLON = ":"
	PIPE = "|"
	HASH = "#"
	REFERENCE = "&"
	MODULO = "%"
	AT_SIGN = "@"
	BINARY_NEGATION = "~"

	# One, two or three character tokens
	BANG = "!"
	BANG_EQUAL = "!="
	BANG_EQUAL_EQUAL = "!=="
	EQUAL = "="
	EQUAL_EQUAL = "=="
	EQUAL_EQUAL_EQUAL = "==="
	GREATER = ">"
	GREATER_EQUAL = ">="
	LESS = "<"
	LESS_EQUAL = "<="
	OR_OPERATOR = "||"
	AND_OPERATOR = "&&"
	FAT_ARROW = "=>"
	THIN_ARROW = "->"
	COLON_COLON = "::"

	# Literals
	HEREDOC = "heredoc"
	IDENTIFIER = "identifier"
	STRING = "string"
	NUMBER = "number"


OPENING_BRACKETS = {TokenKind.LEFT_PAREN, TokenKind.LEFT_BRACE}
CLOSING_BRACKETS = {
	TokenKind.RIGHT_PAREN: TokenKind.LEFT_PAREN,
	TokenKind.RIGHT_BRACE: TokenKind.LEFT_BRACE,
}

# Member access that must not be read as a keyword, e.g. Foo::class or $this->match()
ACCESS_OPERATORS = {TokenKind.COLON_COLON, TokenKind.THIN_ARROW}


@dataclass(frozen=True)
class Token:
	kind: TokenKind
	line: int
	lexeme: str

	@property
	def is_variable(self) -> bool:
		return self.kind is TokenKind.IDENTIFIER and self.lexeme.startswith("$")
