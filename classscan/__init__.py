"""Static analysis of class-based PHP-like sources.

Modules:
- lexer.py: Character stream to token stream.
- keywords.py: Keyword and built-in type lookup table.
- parser.py: Recursive-descent parser building one class profile per file.
- model.py: Data structures for classes, functions, statements and results.
- index.py: Batch pipeline and cross-file class usage index.
- fs_scan.py: Filesystem scanning and file reading.
- summarize.py: Sorting, filtering and textual reports.
- config.py: Scan configuration.
- errors.py: Exception hierarchy.
- logging_config.py: Logging setup.
"""

__all__ = [
	"lexer",
	"keywords",
	"parser",
	"model",
	"index",
	"fs_scan",
	"summarize",
	"config",
	"errors",
	"logging_config",
]
