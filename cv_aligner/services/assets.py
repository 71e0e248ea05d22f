from __future__ import annotations
from functools import lru_cache
import logging
from pathlib import Path
from typing import Optional

from docx.image.exceptions import InvalidImageStreamError, UnexpectedEndOfFileError, UnrecognizedImageError
from docx.image.image import Image as DocxImage

from cv_aligner.config import LOGO_PATH
from cv_aligner.exceptions import AssetUnavailable

logger = logging.getLogger(__name__)


def read_logo(path: Path) -> bytes:
	"""Read the logo and check python-docx can embed it. Raises AssetUnavailable."""
	if not path.is_file():
		raise AssetUnavailable("logo not found", path)
	try:
		data = path.read_bytes()
	except OSError as e:
		raise AssetUnavailable(f"logo unreadable ({e})", path) from e
	try:
		DocxImage.from_blob(data)
	except (UnrecognizedImageError, InvalidImageStreamError, UnexpectedEndOfFileError) as e:
		raise AssetUnavailable("logo is not a supported image", path) from e
	return data


@lru_cache(maxsize=8)
def _cached_logo(path: Path) -> Optional[bytes]:
	try:
		data = read_logo(path)
	except AssetUnavailable as e:
		if path.exists():
			logger.warning("assets: %s; rendering without logo", e)
		else:
			logger.info("assets: %s; rendering without logo", e)
		return None
	logger.info("assets: logo loaded path=%s bytes=%d", path, len(data))
	return data


def load_logo(path: Optional[Path] = None) -> Optional[bytes]:
	"""Return the logo bytes, or None when it cannot be used. Cached per path."""
	return _cached_logo(Path(path or LOGO_PATH).resolve())


def clear_logo_cache() -> None:
	_cached_logo.cache_clear()
