"""
Tests for section segmentation.

Covers header-region detection, canonical header matching, speculative
summary capture, last-wins handling of repeated summary/skills headers and
preservation of non-core sections.
"""

import pytest
from resume_extract.core.section_parser import (
    ADDITIONAL,
    EDUCATION,
    SKILLS,
    SUMMARY,
    WORK_EXPERIENCE,
    detect_section_type,
    looks_like_section_header,
    segment_sections,
)

LONG_SUMMARY = (
    "Backend engineer with nine years of experience building data platforms "
    "and mentoring small teams across time zones."
)


@pytest.mark.parametrize("line,expected", [
    ("WORK EXPERIENCE", WORK_EXPERIENCE),
    ("Professional Experience", WORK_EXPERIENCE),
    ("Employment History:", WORK_EXPERIENCE),
    ("Professional Summary:", SUMMARY),
    ("Personal Statement", SUMMARY),
    ("Skills & Tools", SKILLS),
    ("Technical Skills", SKILLS),
    ("EDUCATION", EDUCATION),
    ("Certifications", EDUCATION),
    ("Projects", ADDITIONAL),
    ("Acme Corp", None),
    ("Experience building APIs", None),
])
def test_detect_section_type(line, expected):
    assert detect_section_type(line) == expected, f"{line!r} -> {detect_section_type(line)!r}"


def test_looks_like_section_header():
    assert looks_like_section_header("CAREER HIGHLIGHTS")
    assert not looks_like_section_header("Acme Corp")
    assert not looks_like_section_header("AWS")
    assert not looks_like_section_header("(555) 123-4567")


def test_basic_segmentation():
    lines = (
        "John Doe\njohn@x.com | 555-123-4567\n\nWORK EXPERIENCE\n\nAcme Corp\nEngineer\n"
        "2020 - Present\n• Built X\n• Shipped Y\n\nEDUCATION\nMIT\nB.S. Computer Science\n2016 - 2020"
    ).splitlines()
    blocks = segment_sections(lines)

    assert blocks.header_lines == ["John Doe", "john@x.com | 555-123-4567"]
    assert len(blocks.work_experience) == 1
    assert [ln for ln in blocks.work_experience[0] if ln.strip()] == [
        "Acme Corp", "Engineer", "2020 - Present", "• Built X", "• Shipped Y",
    ]
    assert blocks.education == [["MIT", "B.S. Computer Science", "2016 - 2020"]]
    assert blocks.titles == ["WORK EXPERIENCE", "EDUCATION"]
    assert blocks.other == []


def test_header_region_ends_at_prose():
    """A long sentence right under the contact lines is summary, not contact."""
    lines = ["Jane Doe", "jane@x.com", "", LONG_SUMMARY, "", "EXPERIENCE", "Acme Corp"]
    blocks = segment_sections(lines)

    assert blocks.header_lines == ["Jane Doe", "jane@x.com"]
    assert blocks.summary == [LONG_SUMMARY]


def test_all_caps_tagline_stays_in_header_when_contact_follows():
    lines = ["JANE DOE", "SENIOR DATA ENGINEER", "jane@x.com", "", "EXPERIENCE", "Acme Corp"]
    blocks = segment_sections(lines)
    assert blocks.header_lines == ["JANE DOE", "SENIOR DATA ENGINEER", "jane@x.com"]


def test_explicit_summary_header():
    lines = ["Jane Doe", "jane@x.com", "SUMMARY", "Short summary here.", "SKILLS", "Python"]
    blocks = segment_sections(lines)

    assert blocks.header_lines == ["Jane Doe", "jane@x.com"]
    assert blocks.summary == ["Short summary here."]
    assert blocks.skills == ["Python"]


def test_repeated_skills_header_last_wins_without_loss():
    lines = ["Jane Doe", "jane@x.com", "SKILLS", "Excel", "EXPERIENCE", "Acme Corp", "SKILLS", "Python"]
    blocks = segment_sections(lines)

    assert blocks.skills == ["Python"]
    assert "Excel" in blocks.other, "Superseded skills lines must be preserved"


def test_work_experience_header_may_recur():
    lines = ["Jane Doe", "jane@x.com", "EXPERIENCE", "Acme Corp", "EDUCATION", "MIT", "WORK HISTORY", "Globex"]
    blocks = segment_sections(lines)
    assert blocks.work_experience == [["Acme Corp"], ["Globex"]]


def test_additional_sections_preserved_with_heading():
    lines = ["Jane Doe", "jane@x.com", "PROJECTS", "Open-source CLI for log parsing", "SKILLS", "Go"]
    blocks = segment_sections(lines)

    assert blocks.other == ["PROJECTS", "Open-source CLI for log parsing"]
    assert blocks.skills == ["Go"]


def test_languages_label_inside_skills_is_content():
    lines = ["Jane Doe", "jane@x.com", "SKILLS", "Languages:", "Python, Go"]
    blocks = segment_sections(lines)
    assert blocks.skills == ["Languages:", "Python, Go"]


def test_dividers_are_skipped():
    lines = ["Jane Doe", "jane@x.com", "EDUCATION", "-----", "MIT", "======"]
    blocks = segment_sections(lines)
    assert blocks.education == [["MIT"]]


def test_speculative_summary_window():
    """Only the first 30 unsectioned lines after the header can become summary."""
    lines = ["Jane Doe"] + [f"Note line {n} about things" for n in range(1, 41)]
    blocks = segment_sections(lines)

    assert len(blocks.header_lines) == 8
    assert len(blocks.summary) == 30
    assert blocks.other == [f"Note line {n} about things" for n in range(38, 41)]


def test_short_and_date_lines_are_not_summary():
    lines = ["Jane Doe", "jane@x.com", "", LONG_SUMMARY, "2019 - 2021", "Hi there"]
    blocks = segment_sections(lines)

    assert blocks.summary == [LONG_SUMMARY]
    assert blocks.other == ["2019 - 2021", "Hi there"]
