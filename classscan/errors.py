"""Exception hierarchy for classscan.

Lexical and structural faults are raised as typed errors so that the batch
driver can decide whether to skip a malformed file or abort the run.
"""

from __future__ import annotations

from typing import Dict, Optional


class ClassScanError(Exception):
	"""Base exception for all classscan errors."""

	def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
		super().__init__(message)
		self.message = message
		self.details = details or {}

	def __str__(self) -> str:
		if self.details:
			details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
			return f"{self.message} ({details_str})"
		return self.message


class ConfigurationError(ClassScanError):
	"""Raised when configuration values are invalid or unreadable."""
	pass


class FileAccessError(ClassScanError):
	"""Raised when a source file cannot be read."""

	def __init__(self, filepath: str, reason: str):
		super().__init__(
			f"Cannot access file: {filepath}",
			details={"filepath": filepath, "reason": reason},
		)
		self.filepath = filepath
		self.reason = reason


class AnalysisError(ClassScanError):
	"""Raised when a file aborts the batch run."""

	def __init__(self, filepath: str, cause: ClassScanError):
		super().__init__(
			f"Failed to analyze {filepath}: {cause.message}",
			details={"filepath": filepath, **cause.details},
		)
		self.filepath = filepath
		self.cause = cause


# Lexical faults


class LexError(ClassScanError):
	"""Base class for faults raised while scanning characters."""

	def __init__(self, message: str, line: int, details: Optional[Dict[str, str]] = None):
		super().__init__(message, details={"line": str(line), **(details or {})})
		self.line = line


class UnterminatedStringError(LexError):
	def __init__(self, line: int):
		super().__init__("Unterminated string", line)


class UnterminatedCommentError(LexError):
	def __init__(self, line: int):
		super().__init__("Unterminated block comment", line)


class UnterminatedHeredocError(LexError):
	def __init__(self, line: int, marker: str):
		super().__init__("Unterminated heredoc", line, details={"marker": marker})
		self.marker = marker


class UnsupportedCharacterError(LexError):
	def __init__(self, line: int, char: str):
		super().__init__("Unsupported character", line, details={"char": repr(char)})
		self.char = char


# Structural faults


class ParseError(ClassScanError):
	"""Base class for faults raised while consuming the token stream."""

	def __init__(
		self,
		message: str,
		line: Optional[int] = None,
		expected: Optional[str] = None,
		found: Optional[str] = None,
	):
		details: Dict[str, str] = {}
		if line is not None:
			details["line"] = str(line)
		if expected is not None:
			details["expected"] = expected
		if found is not None:
			details["found"] = found
		super().__init__(message, details=details)
		self.line = line
		self.expected = expected
		self.found = found


class UnmatchedBracketError(ParseError):
	"""Base for bracket pairing faults."""
	pass


class UnmatchedOpeningBracketError(UnmatchedBracketError):
	"""An opening bracket still open when the input ran out."""
	pass


class UnmatchedClosingBracketError(UnmatchedBracketError):
	"""A closing bracket with no open bracket, or of the wrong kind."""
	pass


class UnexpectedEndOfTokensError(ParseError):
	def __init__(self, expected: str = "token"):
		super().__init__("Expected token. Found none.", expected=expected, found="end of input")


class UnterminatedSwitchError(ParseError):
	def __init__(self, line: int):
		super().__init__("Unterminated switch statement", line=line, expected="}")


class UnterminatedMatchError(ParseError):
	def __init__(self, line: int):
		super().__init__("Unterminated match statement", line=line, expected="}")
