"""Unit tests for block layout: section order, omission rules and hints."""

import pytest

from cv_aligner.models.blocks import NUMPAGES, PAGE
from cv_aligner.models.schema import parse_resume
from cv_aligner.services.composer import build_document, job_header
from cv_aligner.services.styles import DEFAULT_HOUSE_STYLE, EXPERIENCE_BULLETS, LEADERSHIP_BULLETS

HEADINGS = {
    "PROFESSIONAL SUMMARY",
    "CORE COMPETENCIES",
    "PROFESSIONAL EXPERIENCE",
    "EDUCATION & CERTIFICATION",
    "LEADERSHIP",
    "TECHNICAL SKILLS & LANGUAGES",
}


def _layout(data, logo=None):
    return build_document(parse_resume(data), DEFAULT_HOUSE_STYLE, logo)


def _headings(layout):
    return [p.text for p in layout.body if p.bottom_border is not None]


@pytest.mark.unit
def test_minimal_resume_has_only_name_and_summary(minimal_resume):
    layout = _layout(minimal_resume)

    assert layout.texts() == ("Jane Doe", "PROFESSIONAL SUMMARY", "Seasoned analyst.")
    assert _headings(layout) == ["PROFESSIONAL SUMMARY"]


@pytest.mark.unit
def test_full_resume_section_order(full_resume):
    layout = _layout(full_resume)

    assert _headings(layout) == [
        "PROFESSIONAL SUMMARY",
        "CORE COMPETENCIES",
        "PROFESSIONAL EXPERIENCE",
        "EDUCATION & CERTIFICATION",
        "LEADERSHIP",
        "TECHNICAL SKILLS & LANGUAGES",
    ]
    assert layout.body[0].text == "Jane O'Brien-Smith"


@pytest.mark.unit
@pytest.mark.parametrize(
    "education,certifications,expected",
    [
        ([], [], False),
        ([{"degree": "BSc", "institution": "UofT", "location": "Toronto", "date": "2014"}], [], True),
        ([], [{"name": "CFA"}], True),
        (
            [{"degree": "BSc", "institution": "UofT", "location": "Toronto", "date": "2014"}],
            [{"name": "CFA"}],
            True,
        ),
    ],
)
def test_education_heading_iff_education_or_certifications(minimal_resume, education, certifications, expected):
    minimal_resume.update({"education": education, "certifications": certifications})

    headings = _headings(_layout(minimal_resume))

    assert ("EDUCATION & CERTIFICATION" in headings) is expected
    assert headings.count("EDUCATION & CERTIFICATION") <= 1


@pytest.mark.unit
def test_competencies_keep_caller_order(minimal_resume):
    minimal_resume["coreCompetencies"] = ["B", "A", "C"]

    texts = _layout(minimal_resume).texts()

    assert "B  •  A  •  C" in texts


@pytest.mark.unit
def test_job_without_achievements_has_no_bullets(minimal_resume):
    minimal_resume["professionalExperience"] = [
        {"role": "Analyst", "company": "Acme", "location": "Remote", "dates": "2020", "achievements": []}
    ]

    layout = _layout(minimal_resume)

    assert layout.body[-1].text == "Analyst | Acme, Remote | 2020"
    assert [p for p in layout.body if p.list_key] == []


@pytest.mark.unit
def test_bullets_reference_their_own_list(full_resume):
    layout = _layout(full_resume)
    keys = [p.list_key for p in layout.body if p.list_key]

    assert keys == [EXPERIENCE_BULLETS] * 4 + [LEADERSHIP_BULLETS] * 2


@pytest.mark.unit
def test_bullets_keep_with_next_except_last(full_resume):
    layout = _layout(full_resume)
    body = list(layout.body)
    first_job = body.index(next(p for p in body if p.text.startswith("Senior Credit Analyst")))
    bullets = body[first_job + 1:first_job + 4]

    assert [b.keep_with_next for b in bullets] == [True, True, False]
    assert body[first_job].keep_with_next is True


@pytest.mark.unit
def test_job_header_runs_and_colours():
    job = parse_resume({
        "name": "x",
        "professionalSummary": "y",
        "professionalExperience": [{"role": "Analyst", "company": "Acme", "location": "NYC", "dates": "2021"}],
    }).professional_experience[0]

    header = job_header(job, DEFAULT_HOUSE_STYLE)

    assert [r.text for r in header.runs] == ["Analyst", " | ", "Acme, NYC", " | ", "2021"]
    assert header.runs[0].bold is True
    assert header.runs[-1].italic is True
    assert header.runs[2].italic is False
    assert {r.color for r in header.runs} == {DEFAULT_HOUSE_STYLE.brand_accent}


@pytest.mark.unit
def test_job_header_skips_missing_meta():
    job = parse_resume({
        "name": "x",
        "professionalSummary": "y",
        "professionalExperience": [{"role": "Analyst", "company": "Acme"}],
    }).professional_experience[0]

    assert job_header(job, DEFAULT_HOUSE_STYLE).text == "Analyst | Acme"


@pytest.mark.unit
def test_education_entry_hints(full_resume):
    body = list(_layout(full_resume).body)
    degree = next(i for i, p in enumerate(body) if p.text == "MBA, Finance")

    assert body[degree].keep_with_next is True
    assert body[degree + 1].text == "McGill University, Montreal, QC | May 2016"
    assert body[degree + 1].keep_with_next is True
    assert body[degree + 2].text == "Dean's list"


@pytest.mark.unit
def test_education_without_institution_line_skips_it(minimal_resume):
    minimal_resume["education"] = [{"degree": "BSc, Economics"}]

    body = list(_layout(minimal_resume).body)
    degree = next(i for i, p in enumerate(body) if p.text == "BSc, Economics")

    assert body[degree] is body[-1]
    assert "" not in [p.text for p in body]
    assert body[degree].keep_with_next is False


@pytest.mark.unit
def test_certification_and_leadership_lines(full_resume):
    texts = _layout(full_resume).texts()

    assert "CFA Charterholder | 2019" in texts
    assert "Treasurer | Finance Club | 2014 – 2016" in texts


@pytest.mark.unit
def test_technical_section_omitted_when_empty(minimal_resume):
    minimal_resume["technicalSkills"] = {"technical": "", "languages": None}

    assert "TECHNICAL SKILLS & LANGUAGES" not in _headings(_layout(minimal_resume))


@pytest.mark.unit
def test_technical_section_with_languages_only(minimal_resume):
    minimal_resume["technicalSkills"] = {"languages": "English (Native)"}

    layout = _layout(minimal_resume)

    assert layout.texts()[-2:] == ("TECHNICAL SKILLS & LANGUAGES", "Languages: English (Native)")
    assert layout.body[-1].runs[0].bold is True


@pytest.mark.unit
def test_logo_block_comes_first_when_available(minimal_resume):
    layout = _layout(minimal_resume, logo=b"png-bytes")

    assert layout.body[0].image is not None
    assert layout.body[0].image.data == b"png-bytes"
    assert layout.body[1].text == "Jane Doe"


@pytest.mark.unit
def test_page_header_and_footer(minimal_resume):
    layout = _layout(minimal_resume)

    assert layout.header.text == "Noviam Analyst: Jane Doe\tPrivate and Confidential"
    assert [r.field_code for r in layout.footer.runs if r.field_code] == [PAGE, NUMPAGES]
    assert layout.footer.text.startswith("© 2026, Noviam Inc.")
    assert layout.header.right_tab == DEFAULT_HOUSE_STYLE.text_width


@pytest.mark.unit
def test_layout_is_deterministic(full_resume):
    assert _layout(full_resume) == _layout(full_resume)


@pytest.mark.unit
def test_composer_does_not_mutate_input(full_resume):
    resume = parse_resume(full_resume)
    before = resume.model_dump()

    build_document(resume)

    assert resume.model_dump() == before


@pytest.mark.unit
def test_no_empty_headings(full_resume):
    body = list(_layout(full_resume).body)

    for i, p in enumerate(body):
        if p.text in HEADINGS:
            assert i + 1 < len(body)
            assert body[i + 1].text not in HEADINGS
