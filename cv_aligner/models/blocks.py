"""
Minimal document model handed from the composer to the DOCX renderer.

Lengths are in twentieths of a point (twips) and font sizes in points so the
house style can be copied from Word's own units without conversion.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple

# Native Word field codes for live page numbering
PAGE = "PAGE"
NUMPAGES = "NUMPAGES"


@dataclass(frozen=True)
class Run:
	text: str = ""
	bold: bool = False
	italic: bool = False
	color: Optional[str] = None
	size: Optional[float] = None
	# When set, the run is a live field (PAGE / NUMPAGES) and text is ignored
	field_code: Optional[str] = None


@dataclass(frozen=True)
class Border:
	color: str
	size: int = 12  # eighths of a point
	space: int = 1
	style: str = "single"


@dataclass(frozen=True)
class Image:
	data: bytes
	width: float  # points
	height: float
	name: str = "logo"
	title: str = ""
	description: str = ""


@dataclass(frozen=True)
class Paragraph:
	runs: Tuple[Run, ...] = ()
	space_before: int = 0
	space_after: int = 0
	keep_with_next: bool = False
	keep_together: bool = False
	bottom_border: Optional[Border] = None
	# Key of a ListDefinition; resolved to a numbering id by the renderer
	list_key: Optional[str] = None
	right_tab: Optional[int] = None
	image: Optional[Image] = None

	@property
	def text(self) -> str:
		return "".join(r.text for r in self.runs if r.field_code is None)


@dataclass(frozen=True)
class ListDefinition:
	key: str
	glyph: str = "•"
	indent_left: int = 720
	hanging: int = 360


@dataclass(frozen=True)
class PageSetup:
	width: int = 12240
	height: int = 15840
	margin: int = 1080
	header_distance: int = 720
	footer_distance: int = 720
	# False leaves the first page header blank
	header_on_first_page: bool = False


@dataclass(frozen=True)
class ComposedDocument:
	body: Tuple[Paragraph, ...]
	header: Paragraph
	footer: Paragraph
	page: PageSetup = field(default_factory=PageSetup)
	lists: Tuple[ListDefinition, ...] = ()
	font_name: str = "Montserrat"
	font_size: float = 10

	def texts(self) -> Tuple[str, ...]:
		return tuple(p.text for p in self.body)
