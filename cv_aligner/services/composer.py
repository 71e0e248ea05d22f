from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Sequence, Union

from cv_aligner.models.blocks import NUMPAGES, PAGE, Border, ComposedDocument, Image, Paragraph, Run
from cv_aligner.models.schema import JobEntry, ResumeDocument, parse_resume
from cv_aligner.services.assets import load_logo
from cv_aligner.services.render import render_docx
from cv_aligner.services.styles import (
	DEFAULT_HOUSE_STYLE,
	EXPERIENCE_BULLETS,
	LEADERSHIP_BULLETS,
	SPACING,
	HouseStyle,
)

logger = logging.getLogger(__name__)

Section = Callable[[ResumeDocument, HouseStyle], List[Paragraph]]


def _run(style: HouseStyle, text: str, color: Optional[str] = None, bold: bool = False, italic: bool = False, size: Optional[float] = None) -> Run:
	return Run(text=text, bold=bold, italic=italic, color=color or style.black, size=size or style.body_size)


def _para(role: str, runs: Sequence[Run], **kwargs: Any) -> Paragraph:
	before, after = SPACING[role]
	return Paragraph(runs=tuple(runs), space_before=before, space_after=after, **kwargs)


def section_heading(text: str, style: HouseStyle) -> Paragraph:
	return _para(
		"section_heading",
		[_run(style, text.upper(), color=style.brand_primary, bold=True, size=style.heading_size)],
		keep_with_next=True,
		keep_together=True,
		bottom_border=Border(color=style.rule_color, size=style.rule_size),
	)


def _bullets(items: Sequence[str], list_key: str, style: HouseStyle) -> List[Paragraph]:
	# Every bullet but the last keeps with the next one so a job's list is not split
	last = len(items) - 1
	return [
		_para("bullet", [_run(style, text)], list_key=list_key, keep_with_next=i != last, keep_together=True)
		for i, text in enumerate(items)
	]


def _join(*parts: str, sep: str = ", ") -> str:
	return sep.join(p for p in parts if p)


def _logo_block(logo: Optional[bytes], style: HouseStyle) -> List[Paragraph]:
	if not logo:
		return []
	image = Image(
		data=logo,
		width=style.logo_width,
		height=style.logo_height,
		title=style.logo_title,
		description=style.logo_description,
	)
	return [_para("logo", [], image=image)]


def _name_block(resume: ResumeDocument, style: HouseStyle) -> List[Paragraph]:
	return [_para("name", [_run(style, resume.name, color=style.neutral_dark, bold=True, size=style.name_size)])]


def _summary_section(resume: ResumeDocument, style: HouseStyle) -> List[Paragraph]:
	if not resume.professional_summary:
		return []
	return [
		section_heading("Professional Summary", style),
		_para("body", [_run(style, resume.professional_summary)], keep_together=True),
	]


def _competencies_section(resume: ResumeDocument, style: HouseStyle) -> List[Paragraph]:
	if not resume.core_competencies:
		return []
	line = style.competency_delimiter.join(resume.core_competencies)
	return [
		section_heading("Core Competencies", style),
		_para("body", [_run(style, line)], keep_together=True),
	]


def job_header(job: JobEntry, style: HouseStyle) -> Paragraph:
	accent = style.brand_accent
	runs = [_run(style, job.role, color=accent, bold=True)]
	meta = _join(job.company, job.location)
	for text, italic in ((meta, False), (job.dates, True)):
		if not text:
			continue
		runs.append(_run(style, style.meta_separator, color=accent))
		runs.append(_run(style, text, color=accent, italic=italic))
	return _para("job_header", runs, keep_with_next=True, keep_together=True)


def _experience_section(resume: ResumeDocument, style: HouseStyle) -> List[Paragraph]:
	if not resume.professional_experience:
		return []
	blocks = [section_heading("Professional Experience", style)]
	for job in resume.professional_experience:
		blocks.append(job_header(job, style))
		blocks.extend(_bullets(job.achievements, EXPERIENCE_BULLETS, style))
	return blocks


def _education_section(resume: ResumeDocument, style: HouseStyle) -> List[Paragraph]:
	if not (resume.education or resume.certifications):
		return []
	blocks = [section_heading("Education & Certification", style)]
	for edu in resume.education:
		where = _join(_join(edu.institution, edu.location), edu.date, sep=style.meta_separator)
		blocks.append(_para(
			"degree",
			[_run(style, edu.degree, color=style.brand_accent, bold=True)],
			keep_with_next=bool(where or edu.details),
			keep_together=True,
		))
		if where:
			blocks.append(_para(
				"institution",
				[_run(style, where, color=style.neutral_dark)],
				keep_with_next=bool(edu.details),
				keep_together=True,
			))
		if edu.details:
			blocks.append(_para("education_details", [_run(style, edu.details)], keep_together=True))
	for cert in resume.certifications:
		runs = [_run(style, cert.name, color=style.neutral_dark, bold=True)]
		if cert.details:
			runs.append(_run(style, f"{style.meta_separator}{cert.details}", color=style.neutral_dark))
		blocks.append(_para("certification", runs, keep_together=True))
	return blocks


def _leadership_section(resume: ResumeDocument, style: HouseStyle) -> List[Paragraph]:
	if not resume.leadership:
		return []
	accent = style.brand_accent
	blocks = [section_heading("Leadership", style)]
	for lead in resume.leadership:
		runs = [_run(style, lead.role, color=accent, bold=True)]
		meta = _join(_join(lead.company, lead.location), lead.dates, sep=style.meta_separator)
		if meta:
			runs.append(_run(style, f"{style.meta_separator}{meta}", color=accent))
		blocks.append(_para("leadership_header", runs, keep_with_next=True, keep_together=True))
		blocks.extend(_bullets(lead.achievements, LEADERSHIP_BULLETS, style))
	return blocks


def _technical_section(resume: ResumeDocument, style: HouseStyle) -> List[Paragraph]:
	skills = resume.technical_skills
	if skills is None or skills.is_empty():
		return []
	blocks = [section_heading("Technical Skills & Languages", style)]
	if skills.technical:
		blocks.append(_para(
			"technical",
			[
				_run(style, "Technical: ", color=style.neutral_dark, bold=True),
				_run(style, skills.technical),
			],
			keep_with_next=bool(skills.languages),
			keep_together=True,
		))
	if skills.languages:
		blocks.append(_para(
			"languages",
			[
				_run(style, "Languages: ", color=style.neutral_dark, bold=True),
				_run(style, skills.languages),
			],
			keep_together=True,
		))
	return blocks


# Fixed house order; each step returns [] when its section has no content
SECTIONS: Sequence[Section] = (
	_summary_section,
	_competencies_section,
	_experience_section,
	_education_section,
	_leadership_section,
	_technical_section,
)


def page_header(resume: ResumeDocument, style: HouseStyle) -> Paragraph:
	size = style.furniture_size
	grey = style.neutral_dark
	return _para(
		"page_header",
		[
			_run(style, style.analyst_label, color=grey, bold=True, size=size),
			_run(style, resume.name, color=grey, bold=True, size=size),
			Run(text="\t"),
			_run(style, style.confidentiality_notice, color=grey, bold=True, size=size),
		],
		right_tab=style.text_width,
	)


def page_footer(style: HouseStyle) -> Paragraph:
	size = style.furniture_size
	grey = style.neutral_dark
	return _para(
		"page_footer",
		[
			_run(style, style.copyright_line, color=grey, size=size),
			Run(text="\t"),
			_run(style, "Page ", color=grey, size=size),
			Run(field_code=PAGE, color=grey, size=size),
			_run(style, " of ", color=grey, size=size),
			Run(field_code=NUMPAGES, color=grey, size=size),
		],
		right_tab=style.text_width,
	)


def build_document(resume: ResumeDocument, style: Optional[HouseStyle] = None, logo: Optional[bytes] = None) -> ComposedDocument:
	"""Lay out a validated resume as blocks in the fixed house section order."""
	style = style or DEFAULT_HOUSE_STYLE
	body: List[Paragraph] = []
	body.extend(_logo_block(logo, style))
	body.extend(_name_block(resume, style))
	for section in SECTIONS:
		body.extend(section(resume, style))
	return ComposedDocument(
		body=tuple(body),
		header=page_header(resume, style),
		footer=page_footer(style),
		page=style.page,
		lists=style.lists,
		font_name=style.font_name,
		font_size=style.body_size,
	)


def compose(
	resume: Union[ResumeDocument, Mapping[str, Any]],
	style: Optional[HouseStyle] = None,
	logo_path: Optional[Path] = None,
) -> bytes:
	"""Render a resume into .docx bytes.

	Raises ValidationError before any rendering when name or professionalSummary
	is missing, and SerializationError when the package cannot be written.
	"""
	resume = parse_resume(resume)
	logo = load_logo(logo_path)
	layout = build_document(resume, style, logo)
	logger.info("compose: name_len=%d blocks=%d logo=%s", len(resume.name), len(layout.body), bool(logo))
	data = render_docx(layout)
	logger.info("compose: done bytes=%d", len(data))
	return data
