"""
Content conservation: no non-header input line is lost or duplicated.

Every word of every non-header line must show up somewhere in the record
(raw_text excluded), and every bullet must land in exactly one place.
"""

import json
import re

from resume_extract.core.section_parser import detect_section_type
from resume_extract.core.skills_parser import split_skills
from resume_extract.core.text_normalization import is_bullet_line, strip_bullet
from resume_extract.core.text_parser import parse

MESSY_RESUME = """JANE ROE
Staff Engineer
jane@roe.dev | +1 (415) 555-0134 | Oakland, CA
github.com/janeroe

Engineering leader with a decade of experience shipping payment systems, growing teams and untangling legacy code.

EXPERIENCE
• Orphaned achievement before any company
Stripe — Staff Engineer
📍 San Francisco, CA · 2019 - Present
• Led ledger rewrite
  handled 2B events/day
• Cut p99 latency by 60%

Data Engineer | Square | 2016 - 2019
• Built ETL pipelines

PROJECTS
Open-source rate limiter
Conference talk on idempotency keys

SKILLS
Languages: Go, Python
• Rust
Infra: Kafka, Postgres

EDUCATION
• Dean's List 2012
Carnegie Mellon University
B.S. Computer Science, 3.7 GPA
2012 - 2016
• Teaching assistant for 15-213
"""


def _record_text(record) -> str:
    data = record.model_dump()
    data.pop("raw_text")
    return json.dumps(data, ensure_ascii=False)


def _content_lines(text):
    return [ln for ln in text.splitlines() if ln.strip() and not detect_section_type(ln)]


def test_every_word_is_preserved():
    record = parse(MESSY_RESUME)
    haystack = _record_text(record).lower()

    for line in _content_lines(MESSY_RESUME):
        for word in re.findall(r"[A-Za-z0-9]+", line):
            assert word.lower() in haystack, f"Word {word!r} from line {line.strip()!r} was lost"


def test_bullets_land_exactly_once():
    record = parse(MESSY_RESUME)
    destinations = [b for e in record.work_experience for b in e.bullets]
    destinations += [d for e in record.education for d in e.details]
    destinations += split_skills(record.skills)
    destinations += [strip_bullet(ln) for ln in record.other_sections]

    for line in _content_lines(MESSY_RESUME):
        if not is_bullet_line(line):
            continue
        text = strip_bullet(line)
        assert destinations.count(text) == 1, f"Bullet {text!r} found {destinations.count(text)} times"


def test_orphan_and_additional_lines_preserved_in_other_sections():
    record = parse(MESSY_RESUME)

    assert "• Orphaned achievement before any company" in record.other_sections
    assert "Open-source rate limiter" in record.other_sections
    assert "• Dean's List 2012" in record.other_sections


def test_structure_of_messy_resume():
    record = parse(MESSY_RESUME)

    assert record.contact_info.phone == "+1 (415) 555-0134"
    assert record.contact_info.website == "github.com/janeroe"
    assert "Staff Engineer" in record.other_sections

    stripe, square = record.work_experience
    assert (stripe.company, stripe.title) == ("Stripe", "Staff Engineer")
    assert stripe.location == "San Francisco, CA"
    assert stripe.date == "2019 - Present"
    assert stripe.bullets == ["Led ledger rewrite", "handled 2B events/day", "Cut p99 latency by 60%"]
    assert (square.title, square.company, square.date) == ("Data Engineer", "Square", "2016 - 2019")

    assert record.skills == "Languages: Go, Python, Rust\nInfra: Kafka, Postgres"

    cmu = record.education[0]
    assert cmu.school == "Carnegie Mellon University"
    assert cmu.degree == "B.S. Computer Science"
    assert cmu.gpa == "3.7"
    assert cmu.date == "2012 - 2016"
    assert cmu.details == ["Teaching assistant for 15-213"]


def test_partly_used_contact_lines_keep_their_rest():
    text = (
        "Jane Doe\n"
        "Senior Engineer · Austin, TX\n"
        "jane@x.com | linkedin.com/in/jane | github.com/jane\n"
        "\n"
        "EXPERIENCE\n"
        "Acme\n"
        "Engineer\n"
        "2020 - Present\n"
        "• X\n"
    )
    record = parse(text)

    assert record.contact_info.location == "Austin, TX"
    assert record.contact_info.website == "linkedin.com/in/jane"
    assert record.other_sections == ["Senior Engineer", "github.com/jane"]


def test_location_line_with_second_date_loses_nothing():
    text = (
        "Jane Doe\n"
        "jane@x.com\n"
        "\n"
        "EXPERIENCE\n"
        "Engineer | Acme | 2020 - Present\n"
        "Austin, TX | Jan 2020 - Dec 2021\n"
        "• Built X\n"
    )
    record = parse(text)
    haystack = _record_text(record)

    assert "Jan 2020 - Dec 2021" in haystack
    assert record.work_experience[0].location == "Austin, TX"
