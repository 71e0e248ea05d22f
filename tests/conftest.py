"""Shared fixtures: resume payloads and logo files."""

import base64
import copy
from pathlib import Path

import pytest

from cv_aligner.services.assets import clear_logo_cache

# 1x1 transparent PNG
PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

FULL_RESUME = {
    "name": "Jane O'Brien-Smith",
    "professionalSummary": "Credit analyst with eight years covering leveraged loans.",
    "coreCompetencies": ["Credit Analysis", "Financial Modelling", "Due Diligence"],
    "professionalExperience": [
        {
            "role": "Senior Credit Analyst",
            "company": "Harbour Capital",
            "location": "Toronto, ON",
            "dates": "Mar 2020 – Present",
            "achievements": [
                "Underwrote $1.2B of leveraged loans",
                "Built a covenant tracking model",
                "Mentored three junior analysts",
            ],
        },
        {
            "role": "Analyst",
            "company": "Northgate Bank",
            "location": "Montreal, QC",
            "dates": "Jun 2016 – Feb 2020",
            "achievements": ["Prepared quarterly portfolio reviews"],
        },
    ],
    "education": [
        {
            "degree": "MBA, Finance",
            "institution": "McGill University",
            "location": "Montreal, QC",
            "date": "May 2016",
            "details": "Dean's list",
        }
    ],
    "certifications": [{"name": "CFA Charterholder", "details": "2019"}],
    "leadership": [
        {
            "role": "Treasurer",
            "organization": "Finance Club",
            "dates": "2014 – 2016",
            "achievements": ["Managed a $40K budget", "Ran the speaker series"],
        }
    ],
    "technicalSkills": {
        "technical": "Bloomberg Terminal, Excel (Advanced)",
        "languages": "English (Native), French (Fluent)",
    },
}


@pytest.fixture(autouse=True)
def _fresh_logo_cache():
    clear_logo_cache()
    yield
    clear_logo_cache()


@pytest.fixture
def full_resume():
    return copy.deepcopy(FULL_RESUME)


@pytest.fixture
def minimal_resume():
    return {"name": "Jane Doe", "professionalSummary": "Seasoned analyst."}


@pytest.fixture
def no_logo(tmp_path) -> Path:
    return tmp_path / "missing-logo.png"


@pytest.fixture
def logo_file(tmp_path) -> Path:
    path = tmp_path / "logo.png"
    path.write_bytes(PNG_1X1)
    return path
