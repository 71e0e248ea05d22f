from __future__ import annotations
import re
from typing import Annotated, Any, List, Mapping, Optional
from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from cv_aligner.exceptions import ValidationError

_GLYPHS = frozenset("•·*-")
# One typed glyph followed by whitespace; "-25%" or "*bold*" stay as written
_BULLET_GLYPH_RE = re.compile(r"^[•·*-]\s+")


def _scalar(v: Any) -> Any:
	# Years and GPAs arrive as JSON numbers
	if isinstance(v, (int, float)) and not isinstance(v, bool):
		return str(v)
	return v


def _text(v: Any) -> Any:
	if v is None:
		return ""
	v = _scalar(v)
	if isinstance(v, str):
		return v.strip()
	return v


def _optional_text(v: Any) -> Any:
	v = _scalar(v)
	if isinstance(v, str):
		return v.strip() or None
	return v


def _text_list(v: Any) -> Any:
	if v is None:
		return []
	if isinstance(v, str):
		v = [v]
	if isinstance(v, (list, tuple)):
		return [s.strip() for s in v if isinstance(s, str) and s.strip()]
	return v


def _bullet_list(v: Any) -> Any:
	# Achievements become real list items; drop a glyph the rewrite step typed in
	v = _text_list(v)
	if isinstance(v, list):
		return [b for b in (_BULLET_GLYPH_RE.sub("", s).strip() for s in v) if b and b not in _GLYPHS]
	return v


def _joined_text(v: Any) -> Any:
	# The rewrite step is told to send strings here; arrays still show up
	if isinstance(v, (list, tuple)):
		items = (_scalar(s) for s in v)
		v = ", ".join(s.strip() for s in items if isinstance(s, str) and s.strip())
	return _optional_text(v)


def _entries(v: Any) -> Any:
	return [] if v is None else v


Text = Annotated[str, BeforeValidator(_text)]
OptionalText = Annotated[Optional[str], BeforeValidator(_optional_text)]
TextList = Annotated[List[str], BeforeValidator(_text_list)]
BulletList = Annotated[List[str], BeforeValidator(_bullet_list)]
SkillText = Annotated[Optional[str], BeforeValidator(_joined_text)]


class _Model(BaseModel):
	model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class JobEntry(_Model):
	role: Text = ""
	# Leadership records from the rewrite step name the employer "organization"
	company: Text = Field(default="", validation_alias=AliasChoices("company", "organization"))
	location: Text = ""
	dates: Text = ""
	achievements: BulletList = []


class EducationEntry(_Model):
	degree: Text = ""
	institution: Text = ""
	location: Text = ""
	date: Text = ""
	details: OptionalText = None


class CertEntry(_Model):
	name: Text = ""
	details: OptionalText = None


class TechnicalSkills(_Model):
	technical: SkillText = None
	languages: SkillText = None

	def is_empty(self) -> bool:
		return not (self.technical or self.languages)


class ResumeDocument(_Model):
	name: Text
	professional_summary: Text = Field(alias="professionalSummary")
	core_competencies: TextList = Field(default=[], alias="coreCompetencies")
	professional_experience: Annotated[List[JobEntry], BeforeValidator(_entries)] = Field(default=[], alias="professionalExperience")
	education: Annotated[List[EducationEntry], BeforeValidator(_entries)] = []
	certifications: Annotated[List[CertEntry], BeforeValidator(_entries)] = []
	leadership: Annotated[List[JobEntry], BeforeValidator(_entries)] = []
	technical_skills: Optional[TechnicalSkills] = Field(default=None, alias="technicalSkills")

	def missing_required(self) -> List[str]:
		"""JSON names of required fields that are empty."""
		missing = []
		if not (self.name or "").strip():
			missing.append("name")
		if not (self.professional_summary or "").strip():
			missing.append("professionalSummary")
		return missing


def parse_resume(data: Mapping[str, Any]) -> ResumeDocument:
	"""Validate a JSON-shaped mapping into a ResumeDocument.

	Raises ValidationError naming the offending fields.
	"""
	if isinstance(data, ResumeDocument):
		resume = data
	elif isinstance(data, Mapping):
		try:
			resume = ResumeDocument.model_validate(dict(data))
		except PydanticValidationError as e:
			fields: List[str] = []
			for err in e.errors():
				loc = err.get("loc") or ("?",)
				if str(loc[0]) not in fields:
					fields.append(str(loc[0]))
			raise ValidationError("resume data does not match the expected shape", fields) from e
	else:
		raise ValidationError("resume data must be a JSON object")
	missing = resume.missing_required()
	if missing:
		raise ValidationError("required field missing or empty", missing)
	return resume
