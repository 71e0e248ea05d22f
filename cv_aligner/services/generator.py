from __future__ import annotations
import logging
import os
import re
import secrets
import tempfile
import time
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import cv_aligner.config as cfg
from cv_aligner.models.schema import ResumeDocument, parse_resume
from cv_aligner.services.composer import compose
from cv_aligner.services.styles import HouseStyle

logger = logging.getLogger(__name__)

FILENAME_MARKER = "_CV_Aligned_"
_UNSAFE_RE = re.compile(r"[^A-Za-z0-9]")


def sanitize_name(name: str) -> str:
	"""Replace every character outside [A-Za-z0-9] with '_'."""
	return _UNSAFE_RE.sub("_", name or "")


def derive_filename(name: str, now: Optional[float] = None, token: Optional[str] = None) -> str:
	base = sanitize_name(name) or "Candidate"
	stamp = int((time.time() if now is None else now) * 1000)
	token = token or secrets.token_hex(4)
	return f"{base}{FILENAME_MARKER}{stamp}_{token}.docx"


def generate_cv(
	resume: Union[ResumeDocument, Mapping[str, Any]],
	output_dir: Optional[Path] = None,
	style: Optional[HouseStyle] = None,
	logo_path: Optional[Path] = None,
) -> Path:
	"""Compose the resume and write it into output_dir. Returns the final path."""
	resume = parse_resume(resume)
	# Compose before touching the disk so a rejected resume leaves nothing behind
	data = compose(resume, style=style, logo_path=logo_path)

	output_dir = Path(output_dir or cfg.OUTPUT_DIR)
	output_dir.mkdir(parents=True, exist_ok=True)
	final_path = output_dir / derive_filename(resume.name)

	fd, tmp_name = tempfile.mkstemp(prefix=".cv_", suffix=".part", dir=str(output_dir))
	try:
		with os.fdopen(fd, "wb") as f:
			f.write(data)
		os.replace(tmp_name, final_path)
	except BaseException:
		try:
			os.unlink(tmp_name)
		except FileNotFoundError:
			pass
		raise
	logger.info("generate: wrote path=%s bytes=%d", final_path, len(data))
	return final_path


def cleanup_old_files(output_dir: Optional[Path] = None, max_age_seconds: Optional[int] = None, now: Optional[float] = None) -> int:
	"""Remove generated files older than max_age_seconds. Returns how many were removed."""
	output_dir = Path(output_dir or cfg.OUTPUT_DIR)
	max_age = cfg.OUTPUT_MAX_AGE_SECONDS if max_age_seconds is None else max_age_seconds
	if not output_dir.exists():
		return 0
	cutoff = (time.time() if now is None else now) - max_age
	removed = 0
	for path in output_dir.iterdir():
		try:
			if not path.is_file() or path.stat().st_mtime >= cutoff:
				continue
			path.unlink()
			removed += 1
			logger.info("cleanup: removed %s", path.name)
		except OSError:
			logger.exception("cleanup: failed %s", path.name)
	return removed
