from __future__ import annotations
from io import BytesIO
import logging
from typing import Dict, Sequence

import docx
from docx.document import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_TAB_ALIGNMENT
from docx.opc.constants import CONTENT_TYPE as CT
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.opc.packuri import PackURI
from docx.oxml import OxmlElement, parse_xml
from docx.oxml.ns import nsdecls, qn
from docx.parts.numbering import NumberingPart
from docx.shared import Pt, RGBColor, Twips
from docx.text.paragraph import Paragraph as DocxParagraph

from cv_aligner.exceptions import SerializationError
from cv_aligner.models.blocks import Border, ComposedDocument, Image, ListDefinition, Paragraph, Run

logger = logging.getLogger(__name__)

# Elements that must follow w:pBdr inside w:pPr
_PBDR_SUCCESSORS = (
	"w:shd", "w:tabs", "w:suppressAutoHyphens", "w:kinsoku", "w:wordWrap",
	"w:overflowPunct", "w:topLinePunct", "w:autoSpaceDE", "w:autoSpaceDN",
	"w:bidi", "w:adjustRightInd", "w:snapToGrid", "w:spacing", "w:ind",
	"w:contextualSpacing", "w:mirrorIndents", "w:suppressOverlap", "w:jc",
	"w:textDirection", "w:textAlignment", "w:textboxTightWrap", "w:outlineLvl",
	"w:divId", "w:cnfStyle", "w:rPr", "w:sectPr", "w:pPrChange",
)


def _w(tag: str, **attrs):
	el = OxmlElement(f"w:{tag}")
	for key, value in attrs.items():
		el.set(qn(f"w:{key}"), str(value))
	return el


def _numbering_element(document: Document):
	part = document.part
	try:
		return part.part_related_by(RT.NUMBERING).element
	except KeyError:
		# Templates without a numbering part get an empty one
		element = parse_xml(f"<w:numbering {nsdecls('w')}/>")
		numbering_part = NumberingPart(PackURI("/word/numbering.xml"), CT.WML_NUMBERING, element, part.package)
		part.relate_to(numbering_part, RT.NUMBERING)
		return numbering_part.element


def _abstract_num(abstract_id: int, definition: ListDefinition):
	abstract = _w("abstractNum", abstractNumId=abstract_id)
	abstract.append(_w("multiLevelType", val="singleLevel"))
	lvl = _w("lvl", ilvl=0)
	lvl.append(_w("start", val=1))
	lvl.append(_w("numFmt", val="bullet"))
	lvl.append(_w("lvlText", val=definition.glyph))
	lvl.append(_w("lvlJc", val="left"))
	ppr = _w("pPr")
	ppr.append(_w("ind", left=definition.indent_left, hanging=definition.hanging))
	lvl.append(ppr)
	abstract.append(lvl)
	return abstract


def register_lists(document: Document, definitions: Sequence[ListDefinition]) -> Dict[str, int]:
	"""Add one bullet definition per key and return key -> numId."""
	numbering = _numbering_element(document)
	existing = [int(a.get(qn("w:abstractNumId"))) for a in numbering.findall(qn("w:abstractNum"))]
	next_id = max(existing, default=-1) + 1
	ids: Dict[str, int] = {}
	for offset, definition in enumerate(definitions):
		abstract_id = next_id + offset
		abstract = _abstract_num(abstract_id, definition)
		# w:abstractNum elements must precede every w:num
		first_num = numbering.find(qn("w:num"))
		if first_num is not None:
			first_num.addprevious(abstract)
		else:
			numbering.append(abstract)
		num = numbering.add_num(abstract_id)
		ids[definition.key] = num.numId
	return ids


def _set_numbering(paragraph: DocxParagraph, num_id: int) -> None:
	num_pr = paragraph._p.get_or_add_pPr().get_or_add_numPr()
	num_pr.get_or_add_ilvl().val = 0
	num_pr.get_or_add_numId().val = num_id


def _set_bottom_border(paragraph: DocxParagraph, border: Border) -> None:
	ppr = paragraph._p.get_or_add_pPr()
	pbdr = _w("pBdr")
	pbdr.append(_w("bottom", val=border.style, sz=border.size, space=border.space, color=border.color))
	ppr.insert_element_before(pbdr, *_PBDR_SUCCESSORS)


def _add_field(run, code: str) -> None:
	instr = OxmlElement("w:instrText")
	instr.set(qn("xml:space"), "preserve")
	instr.text = f" {code} "
	# Cached result shown until the reader updates the field
	cached = OxmlElement("w:t")
	cached.text = "1"
	for el in (_w("fldChar", fldCharType="begin"), instr, _w("fldChar", fldCharType="separate"), cached, _w("fldChar", fldCharType="end")):
		run._r.append(el)


def _add_run(paragraph: DocxParagraph, item: Run) -> None:
	run = paragraph.add_run()
	font = run.font
	if item.size:
		font.size = Pt(item.size)
	if item.bold:
		font.bold = True
	if item.italic:
		font.italic = True
	if item.color:
		font.color.rgb = RGBColor.from_string(item.color)
	if item.field_code:
		_add_field(run, item.field_code)
	else:
		run.text = item.text


def _add_image(paragraph: DocxParagraph, image: Image) -> None:
	paragraph.paragraph_format.alignment = WD_ALIGN_PARAGRAPH.LEFT
	shape = paragraph.add_run().add_picture(BytesIO(image.data), width=Pt(image.width), height=Pt(image.height))
	doc_pr = shape._inline.docPr
	doc_pr.set("name", image.name)
	if image.title:
		doc_pr.set("title", image.title)
	if image.description:
		doc_pr.set("descr", image.description)


def _fill_paragraph(paragraph: DocxParagraph, block: Paragraph, list_ids: Dict[str, int]) -> None:
	fmt = paragraph.paragraph_format
	fmt.space_before = Twips(block.space_before)
	fmt.space_after = Twips(block.space_after)
	if block.keep_with_next:
		fmt.keep_with_next = True
	if block.keep_together:
		fmt.keep_together = True
	if block.right_tab is not None:
		fmt.tab_stops.add_tab_stop(Twips(block.right_tab), WD_TAB_ALIGNMENT.RIGHT)
	if block.list_key:
		if block.list_key not in list_ids:
			raise SerializationError(f"unknown list definition '{block.list_key}'")
		_set_numbering(paragraph, list_ids[block.list_key])
	if block.image is not None:
		_add_image(paragraph, block.image)
	for item in block.runs:
		_add_run(paragraph, item)
	if block.bottom_border is not None:
		_set_bottom_border(paragraph, block.bottom_border)


def _furniture_paragraph(part, style) -> DocxParagraph:
	# The template's "Header"/"Footer" styles carry their own tab stops
	paragraph = part.paragraphs[0]
	paragraph.style = style
	return paragraph


def _build(layout: ComposedDocument) -> Document:
	document = docx.Document()
	normal = document.styles["Normal"]
	normal.font.name = layout.font_name
	normal.font.size = Pt(layout.font_size)

	page = layout.page
	section = document.sections[0]
	section.page_width = Twips(page.width)
	section.page_height = Twips(page.height)
	section.top_margin = section.bottom_margin = Twips(page.margin)
	section.left_margin = section.right_margin = Twips(page.margin)
	section.header_distance = Twips(page.header_distance)
	section.footer_distance = Twips(page.footer_distance)

	list_ids = register_lists(document, layout.lists)

	_fill_paragraph(_furniture_paragraph(section.header, normal), layout.header, list_ids)
	_fill_paragraph(_furniture_paragraph(section.footer, normal), layout.footer, list_ids)
	if not page.header_on_first_page:
		# Blank header on page one; the footer still carries the page count
		section.different_first_page_header_footer = True
		section.first_page_header.is_linked_to_previous = False
		_fill_paragraph(_furniture_paragraph(section.first_page_footer, normal), layout.footer, list_ids)

	# The blank template starts with no body paragraphs
	for block in layout.body:
		_fill_paragraph(document.add_paragraph(), block, list_ids)
	return document


def render_docx(layout: ComposedDocument) -> bytes:
	"""Serialize a composed layout to .docx bytes. Raises SerializationError."""
	try:
		document = _build(layout)
		buffer = BytesIO()
		document.save(buffer)
	except SerializationError:
		raise
	except Exception as e:
		logger.exception("render_failed")
		raise SerializationError("could not build the .docx package", e) from e
	return buffer.getvalue()
