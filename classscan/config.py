"""Configuration loading for classscan.

Sources are merged in priority order:
	1. Defaults (defined in ScanConfig)
	2. Project config (./classscan.toml)
	3. Explicit config file
	4. Overrides passed as keyword arguments (None values are ignored)

Example:
	>>> config = load_config(top_files=5)
	>>> config.top_files
	5
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError, field_validator

from .errors import ConfigurationError
from .model import SortMetric

PROJECT_CONFIG_NAME = "classscan.toml"


class ScanConfig(BaseModel):
	extensions: List[str] = [".php"]
	ignore_dirs: List[str] = [".git", "vendor", "node_modules", "dist", "build"]
	# Files without their own namespace directive keep the previous file's one.
	inherit_namespace: bool = True
	resolve_implements: bool = False
	skip_malformed: bool = True
	top_files: int = 10
	sort_metric: SortMetric = SortMetric.CLASS_COMPLEXITY

	@field_validator("extensions")
	@classmethod
	def _normalize_extensions(cls, value: List[str]) -> List[str]:
		normalized = []
		for ext in value:
			ext = ext.strip().lower()
			if not ext:
				raise ValueError("extensions must not contain empty entries")
			normalized.append(ext if ext.startswith(".") else f".{ext}")
		return normalized

	@field_validator("top_files")
	@classmethod
	def _positive_top_files(cls, value: int) -> int:
		if value <= 0:
			raise ValueError("top_files must be positive")
		return value


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> ScanConfig:
	"""Build a ScanConfig from defaults, TOML files and overrides.

	Raises:
		ConfigurationError: If a file cannot be read or a value is invalid.
	"""
	merged: Dict[str, Any] = {}

	project_config = Path.cwd() / PROJECT_CONFIG_NAME
	if project_config.is_file():
		merged.update(_load_toml_file(project_config))

	if config_file is not None:
		if not config_file.is_file():
			raise ConfigurationError(
				f"Config file not found: {config_file}", details={"path": str(config_file)}
			)
		merged.update(_load_toml_file(config_file))

	merged.update({k: v for k, v in overrides.items() if v is not None})

	try:
		return ScanConfig(**merged)
	except ValidationError as e:
		raise ConfigurationError("Invalid configuration", details={"errors": str(e.errors())}) from e


def _load_toml_file(path: Path) -> Dict[str, Any]:
	try:
		with open(path, "rb") as f:
			data = tomllib.load(f)
	except (OSError, tomllib.TOMLDecodeError) as e:
		raise ConfigurationError(
			f"Cannot read config file: {path}", details={"path": str(path), "reason": str(e)}
		) from e
	# Accept either a flat file or a [classscan] table.
	return data.get("classscan", data)
