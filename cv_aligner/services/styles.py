from __future__ import annotations
import dataclasses
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from cv_aligner.config import HOUSE_STYLE_PATH
from cv_aligner.models.blocks import ListDefinition, PageSetup

logger = logging.getLogger(__name__)

EXPERIENCE_BULLETS = "experience-bullets"
LEADERSHIP_BULLETS = "leadership-bullets"

# (space_before, space_after) in twips per block role
SPACING: Dict[str, Tuple[int, int]] = {
	"logo": (0, 300),
	"name": (200, 300),
	"section_heading": (300, 120),
	"body": (80, 120),
	"job_header": (200, 60),
	"bullet": (40, 40),
	"degree": (120, 40),
	"institution": (0, 40),
	"education_details": (0, 80),
	"certification": (120, 80),
	"leadership_header": (120, 60),
	"technical": (80, 40),
	"languages": (40, 80),
	"page_header": (0, 360),
	"page_footer": (0, 0),
}


@dataclass(frozen=True)
class HouseStyle:
	font_name: str = "Montserrat"
	body_size: float = 10
	heading_size: float = 11
	name_size: float = 20
	furniture_size: float = 9

	brand_primary: str = "004796"
	brand_accent: str = "006BFF"
	neutral_dark: str = "626366"
	black: str = "000000"
	rule_color: str = "006BFF"
	rule_size: int = 12

	competency_delimiter: str = "  •  "
	meta_separator: str = " | "

	analyst_label: str = "Noviam Analyst: "
	confidentiality_notice: str = "Private and Confidential"
	copyright_line: str = "© 2026, Noviam Inc. All Rights Reserved."

	# 180x45 px at 96 dpi
	logo_width: float = 135
	logo_height: float = 33.75
	logo_title: str = "Noviam Logo"
	logo_description: str = "Noviam company logo"

	page: PageSetup = field(default_factory=PageSetup)
	lists: Tuple[ListDefinition, ...] = (
		ListDefinition(EXPERIENCE_BULLETS),
		ListDefinition(LEADERSHIP_BULLETS),
	)

	@property
	def text_width(self) -> int:
		return self.page.width - 2 * self.page.margin


DEFAULT_HOUSE_STYLE = HouseStyle()

_SCALAR_FIELDS = {
	f.name: f for f in dataclasses.fields(HouseStyle) if f.name not in {"page", "lists"}
}


def _coerce(name: str, value: Any, current: Any) -> Any:
	if isinstance(current, bool):
		if isinstance(value, bool):
			return value
	elif isinstance(current, (int, float)):
		if isinstance(value, (int, float)) and not isinstance(value, bool):
			return type(current)(value)
	elif isinstance(current, str):
		if isinstance(value, str):
			return value
	raise TypeError(f"{name}: expected {type(current).__name__}, got {type(value).__name__}")


def apply_overrides(base: HouseStyle, overrides: Dict[str, Any]) -> HouseStyle:
	changes: Dict[str, Any] = {}
	page_changes: Dict[str, Any] = {}
	page_fields = {f.name for f in dataclasses.fields(PageSetup)}
	for key, value in overrides.items():
		try:
			if key in _SCALAR_FIELDS:
				changes[key] = _coerce(key, value, getattr(base, key))
			elif key in page_fields:
				page_changes[key] = _coerce(key, value, getattr(base.page, key))
			else:
				logger.warning("house_style: unknown key ignored key=%s", key)
		except TypeError as e:
			logger.warning("house_style: bad value ignored %s", e)
	if page_changes:
		changes["page"] = dataclasses.replace(base.page, **page_changes)
	return dataclasses.replace(base, **changes) if changes else base


def load_house_style(path: Optional[Path] = None) -> HouseStyle:
	path = HOUSE_STYLE_PATH if path is None else path
	if not path.exists():
		return DEFAULT_HOUSE_STYLE
	try:
		user_map = json.loads(path.read_text(encoding="utf-8") or "{}")
	except (OSError, ValueError):
		logger.warning("house_style: unreadable override file path=%s; using defaults", path)
		return DEFAULT_HOUSE_STYLE
	if not isinstance(user_map, dict):
		logger.warning("house_style: override file is not a JSON object path=%s", path)
		return DEFAULT_HOUSE_STYLE
	return apply_overrides(DEFAULT_HOUSE_STYLE, user_map)
