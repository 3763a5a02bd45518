from __future__ import annotations

import os
import time
from typing import Iterable, List, Optional

from .config import ScanConfig
from .errors import FileAccessError
from .logging_config import get_logger
from .model import FileInfo, RawFile

logger = get_logger(__name__)

SECONDS_PER_HOUR = 3600


def matches_extension(filename: str, extensions: Iterable[str]) -> bool:
	_, ext = os.path.splitext(filename)
	return ext.lower() in extensions


def scan_repository(root: str, config: Optional[ScanConfig] = None) -> List[FileInfo]:
	if config is None:
		config = ScanConfig()
	ignored = set(config.ignore_dirs)
	files: List[FileInfo] = []
	for dirpath, dirnames, filenames in os.walk(root):
		dirnames[:] = sorted(d for d in dirnames if d not in ignored)
		for filename in sorted(filenames):
			if not matches_extension(filename, config.extensions):
				continue
			path = os.path.join(dirpath, filename)
			files.append(
				FileInfo(
					path=path,
					rel_path=os.path.relpath(path, root),
					extension=os.path.splitext(filename)[1].lower(),
				)
			)
	return files


def hours_since_access(path: str, now: Optional[float] = None) -> int:
	now = time.time() if now is None else now
	accessed = os.stat(path).st_atime
	return max(0, int(now - accessed) // SECONDS_PER_HOUR)


def read_raw_file(info: FileInfo, now: Optional[float] = None) -> RawFile:
	try:
		# reading bumps atime, stat first
		last_accessed = hours_since_access(info.path, now)
		with open(info.path, "r", encoding="utf-8") as fh:
			text = fh.read()
	except (OSError, UnicodeDecodeError) as e:
		raise FileAccessError(info.path, str(e)) from e
	return RawFile(path=info.path, text=text, last_accessed=last_accessed)


def read_raw_files(files: Iterable[FileInfo], now: Optional[float] = None) -> List[RawFile]:
	"""Read every file, skipping the ones that cannot be read."""
	raw_files: List[RawFile] = []
	for f in files:
		try:
			raw_files.append(read_raw_file(f, now))
		except FileAccessError as e:
			logger.warning("%s", e)
	return raw_files
