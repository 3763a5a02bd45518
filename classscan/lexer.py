"""Character stream to token stream.

The lexer knows nothing about the grammar: keywords, variables and qualified
names all come out as identifiers and are classified later by the parser.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from .errors import (
	UnsupportedCharacterError,
	UnterminatedCommentError,
	UnterminatedHeredocError,
	UnterminatedStringError,
)
from .tokens import Token, TokenKind

WHITESPACE = frozenset(" \r\t\n")

SINGLE_CHAR_TOKENS: Dict[str, TokenKind] = {
	"{": TokenKind.LEFT_BRACE,
	"}": TokenKind.RIGHT_BRACE,
	"(": TokenKind.LEFT_PAREN,
	")": TokenKind.RIGHT_PAREN,
	"[": TokenKind.LEFT_BRACKET,
	"]": TokenKind.RIGHT_BRACKET,
	",": TokenKind.COMMA,
	".": TokenKind.DOT,
	"+": TokenKind.PLUS,
	";": TokenKind.SEMICOLON,
	"#": TokenKind.HASH,
	"*": TokenKind.STAR,
	"?": TokenKind.QUESTION,
	"%": TokenKind.MODULO,
	"@": TokenKind.AT_SIGN,
	"~": TokenKind.BINARY_NEGATION,
}

PHP_OPEN_TAG = "<?php"


def _is_identifier_start(char: str) -> bool:
	return char.isalpha() or char in "_$\\"


def _is_identifier_part(char: str) -> bool:
	return char.isalnum() or char in "_\\"


class Lexer:
	"""Cursor over the source text producing one token per step."""

	def __init__(self, text: str):
		self.text = text
		self.pos = 0
		self.line = 1

	def scan(self) -> Iterator[Token]:
		while True:
			token = self.scan_token()
			if token is None:
				return
			yield token

	# Cursor helpers

	def _at_end(self) -> bool:
		return self.pos >= len(self.text)

	def _peek(self, offset: int = 0) -> Optional[str]:
		index = self.pos + offset
		if index < len(self.text):
			return self.text[index]
		return None

	def _advance(self) -> str:
		char = self.text[self.pos]
		self.pos += 1
		if char == "\n":
			self.line += 1
		return char

	def _match(self, expected: str) -> bool:
		if self._peek() == expected:
			self._advance()
			return True
		return False

	# Scanning

	def scan_token(self) -> Optional[Token]:
		while not self._at_end():
			line = self.line
			char = self._advance()

			if char in WHITESPACE:
				continue

			if char == "/":
				if self._match("*"):
					self._block_comment(line)
					continue
				if self._match("/"):
					self._line_comment()
					continue
				return Token(TokenKind.SLASH, line, char)

			kind = SINGLE_CHAR_TOKENS.get(char)
			if kind is not None:
				return Token(kind, line, char)

			if char in "\"'":
				return self._string(char, line)
			if char.isdigit():
				return self._number(char, line)
			if _is_identifier_start(char):
				return self._identifier(char, line)
			return self._operator(char, line)
		return None

	def _operator(self, char: str, line: int) -> Token:
		if char == "-":
			if self._match(">"):
				return Token(TokenKind.THIN_ARROW, line, "->")
			return Token(TokenKind.MINUS, line, char)
		if char == ":":
			if self._match(":"):
				return Token(TokenKind.COLON_COLON, line, "::")
			return Token(TokenKind.COLON, line, char)
		if char == "!":
			if self._match("="):
				if self._match("="):
					return Token(TokenKind.BANG_EQUAL_EQUAL, line, "!==")
				return Token(TokenKind.BANG_EQUAL, line, "!=")
			return Token(TokenKind.BANG, line, char)
		if char == "=":
			if self._match("="):
				if self._match("="):
					return Token(TokenKind.EQUAL_EQUAL_EQUAL, line, "===")
				return Token(TokenKind.EQUAL_EQUAL, line, "==")
			if self._match(">"):
				return Token(TokenKind.FAT_ARROW, line, "=>")
			return Token(TokenKind.EQUAL, line, char)
		if char == ">":
			if self._match("="):
				return Token(TokenKind.GREATER_EQUAL, line, ">=")
			return Token(TokenKind.GREATER, line, char)
		if char == "<":
			if self._peek() == "<" and self._peek(1) == "<":
				self._advance()
				self._advance()
				return self._heredoc(line)
			if self.text.startswith(PHP_OPEN_TAG, self.pos - 1):
				for _ in range(len(PHP_OPEN_TAG) - 1):
					self._advance()
				return Token(TokenKind.PHP_TAG, line, PHP_OPEN_TAG)
			if self._match("="):
				return Token(TokenKind.LESS_EQUAL, line, "<=")
			return Token(TokenKind.LESS, line, char)
		if char == "|":
			if self._match("|"):
				return Token(TokenKind.OR_OPERATOR, line, "||")
			return Token(TokenKind.PIPE, line, char)
		if char == "&":
			if self._match("&"):
				return Token(TokenKind.AND_OPERATOR, line, "&&")
			return Token(TokenKind.REFERENCE, line, char)
		raise UnsupportedCharacterError(line, char)

	def _line_comment(self) -> None:
		while not self._at_end() and self._peek() != "\n":
			self._advance()

	def _block_comment(self, line: int) -> None:
		while not self._at_end():
			if self._peek() == "*" and self._peek(1) == "/":
				self._advance()
				self._advance()
				return
			self._advance()
		raise UnterminatedCommentError(line)

	def _string(self, quote: str, line: int) -> Token:
		chars: List[str] = []
		escaped = False
		while True:
			if self._at_end():
				raise UnterminatedStringError(line)
			char = self._peek()
			if char == quote and not escaped:
				break
			self._advance()
			escaped = char == "\\" and not escaped
			chars.append(char)
		self._advance()
		return Token(TokenKind.STRING, line, "".join(chars))

	def _number(self, first: str, line: int) -> Token:
		chars = [first]
		while not self._at_end() and self._peek().isdigit():
			chars.append(self._advance())
		if self._peek() == ".":
			chars.append(self._advance())
			while not self._at_end() and self._peek().isdigit():
				chars.append(self._advance())
		return Token(TokenKind.NUMBER, line, "".join(chars))

	def _identifier(self, first: str, line: int) -> Token:
		chars = [first]
		while not self._at_end() and _is_identifier_part(self._peek()):
			chars.append(self._advance())
		return Token(TokenKind.IDENTIFIER, line, "".join(chars))

	def _heredoc(self, line: int) -> Token:
		while self._peek() in (" ", "\t"):
			self._advance()
		marker_chars: List[str] = []
		opening = self._peek()
		if opening in ("'", '"'):
			self._advance()
			while not self._at_end() and self._peek() != opening:
				marker_chars.append(self._advance())
		else:
			while not self._at_end() and self._peek() != "\n":
				marker_chars.append(self._advance())
		marker = "".join(marker_chars).strip()

		# Rest of the opening line, closing quote included.
		while not self._at_end() and self._peek() != "\n":
			self._advance()
		if self._at_end() or not marker:
			raise UnterminatedHeredocError(line, marker)
		self._advance()

		body: List[str] = []
		end = self._closing_marker_end(marker)
		while end is None:
			if self._at_end():
				raise UnterminatedHeredocError(line, marker)
			body.append(self._advance())
			end = self._closing_marker_end(marker)
		while self.pos < end:
			self._advance()
		return Token(TokenKind.HEREDOC, line, "".join(body))

	def _closing_marker_end(self, marker: str) -> Optional[int]:
		"""Offset just past the marker when the cursor starts its closing line."""
		if self.pos > 0 and self.text[self.pos - 1] != "\n":
			return None
		pos = self.pos
		while pos < len(self.text) and self.text[pos] in " \t":
			pos += 1
		if not self.text.startswith(marker, pos):
			return None
		end = pos + len(marker)
		if end < len(self.text) and _is_identifier_part(self.text[end]):
			return None
		return end


def tokenize(text: str) -> Iterator[Token]:
	return Lexer(text).scan()
