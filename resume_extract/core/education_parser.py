"""
Education parsing module for extracting entries from a raw education block.

Provides deterministic, rule-based classification of each line as a
standalone certificate, a standalone degree, a school line (which then
claims its degree/certificate/date lines), or a detail of the previous
entry. Degree and certificate keyword sets are always tested with explicit
negation of each other, so no single line ever fills both fields.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, List, NamedTuple, Optional, Tuple

from resume_extract.core.schemas import EducationEntry
from resume_extract.core.text_normalization import (
    CITY_COUNTRY_RE,
    CITY_STATE_RE,
    clean_remnant,
    extract_date,
    is_bullet_line,
    is_divider,
    is_pure_date,
    strip_bullet,
    strip_date,
)

logger = logging.getLogger(__name__)

# Lines a school line may claim after itself (degree, certificate, date/GPA, location)
SCHOOL_LOOKAHEAD = 3
SCHOOL_MIN_CHARS = 2
SCHOOL_MAX_CHARS = 100


# ===== CERTIFICATE KEYWORDS =====

CERTIFICATE_RE = re.compile(
    r"\b(?:certificat(?:e|ion)s?|diplomas?|boot\s?camps?|immersive|program(?:me)?s?|courses?|training)\b",
    re.IGNORECASE,
)

# ===== INSTITUTION KEYWORDS =====

INSTITUTION_RE = re.compile(
    r"\b(?:universit(?:y|ies)|college|school|institute|academy|polytechnic)\b",
    re.IGNORECASE,
)

# ===== DEGREE KEYWORDS =====
# Words are case-insensitive; abbreviations are case-sensitive and need their dots
# for two-letter forms so "Boston, MA" is never a degree.

DEGREE_WORD_RE = re.compile(
    r"\b(?:bachelor|master|doctor(?:ate)?|doctoral)(?:'?s)?\b|\bassociate(?:'?s)?\s+(?:of|degree|in)\b",
    re.IGNORECASE,
)
DEGREE_ABBR_RE = re.compile(
    r"(?<![A-Za-z])(?:[BM]\.\s?[SA]\.?|A\.[AS]\.|J\.D\.|M\.D\.|Ph\.?\s?D\.?|PhD|MBA|M\.B\.A\.?"
    r"|B\.?Sc\.?|M\.?Sc\.?|B\.?Eng\.?|M\.?Eng\.?|B\.?Tech|M\.?Tech)(?![A-Za-z])"
)

# "3.8 GPA", "GPA: 3.8", "GPA 3.8/4.0"
GPA_RE = re.compile(
    r"GPA\s*[:\-]?\s*(\d\.\d{1,2})(?:\s*/\s*\d(?:\.\d+)?)?|(\d\.\d{1,2})(?:\s*/\s*\d(?:\.\d+)?)?\s*GPA",
    re.IGNORECASE,
)

PART_SEPARATOR_RE = re.compile(r"\s+[-–—]\s+|\s*—\s*|\s*\|\s*")


def has_certificate_keyword(text: str) -> bool:
    return bool(CERTIFICATE_RE.search(text))


def has_institution_keyword(text: str) -> bool:
    return bool(INSTITUTION_RE.search(text))


def has_degree_keyword(text: str) -> bool:
    """
    Check if text names a degree.

    Examples:
        "Bachelor of Science in Computer Science" -> True
        "B.S. Computer Science" -> True
        "MBA, Finance" -> True
        "Boston, MA" -> False
    """
    return bool(DEGREE_WORD_RE.search(text) or DEGREE_ABBR_RE.search(text))


def is_certificate_line(text: str) -> bool:
    """Certificate keyword present and no institution keyword."""
    return has_certificate_keyword(text) and not has_institution_keyword(text)


def is_degree_line(text: str) -> bool:
    """Degree keyword present and no certificate keyword."""
    return has_degree_keyword(text) and not has_certificate_keyword(text)


def extract_gpa(text: str) -> Tuple[str, str]:
    """
    Split a GPA out of text.

    Returns:
        (gpa, text_without_gpa); gpa is "" when none is present.

    Examples:
        "2012 - 2016 | GPA: 3.8" -> ("3.8", "2012 - 2016")
        "B.S. Physics, 3.9 GPA" -> ("3.9", "B.S. Physics")
    """
    m = GPA_RE.search(text)
    if not m:
        return "", text.strip()
    gpa = m.group(1) or m.group(2)
    return gpa, clean_remnant(text[: m.start()] + " " + text[m.end():])


def _split_date(text: str) -> Tuple[str, str]:
    date = extract_date(text)
    return date, (strip_date(text) if date else text.strip())


def _is_date_gpa_line(text: str) -> bool:
    """A line holding only a date and/or a GPA ("2012 - 2016 | GPA: 3.8")."""
    gpa, rest = extract_gpa(text)
    if not rest:
        return bool(gpa)
    return is_pure_date(rest)


def _is_location_line(text: str) -> bool:
    t = text.strip()
    if has_degree_keyword(t) or has_certificate_keyword(t) or has_institution_keyword(t):
        return False
    return bool(CITY_COUNTRY_RE.match(t) or CITY_STATE_RE.fullmatch(t))


def parse_certificate_line(text: str) -> EducationEntry:
    """
    Parse a standalone certificate line.

    The date is extracted and stripped; when the line is split by a dash or
    pipe, the parts carrying a certificate keyword form the certificate and
    the rest names the issuer.

    Examples:
        "General Assembly — Web Development Immersive Certificate"
            -> certificate="Web Development Immersive Certificate", issuer="General Assembly"
        "AWS Certified Developer Certification (2021)"
            -> certificate="AWS Certified Developer Certification", date="2021"
    """
    date, rest = _split_date(text)
    parts = [p.strip() for p in PART_SEPARATOR_RE.split(rest) if p.strip()]
    cert_parts = [p for p in parts if has_certificate_keyword(p)]
    other_parts = [p for p in parts if not has_certificate_keyword(p)]
    if not cert_parts:
        return EducationEntry(certificate=rest, date=date)
    return EducationEntry(
        certificate=" — ".join(cert_parts),
        issuer=", ".join(other_parts),
        date=date,
    )


def _apply_degree(entry: EducationEntry, text: str) -> None:
    """Fill degree from a degree line, pulling its GPA and date in the same pass."""
    gpa, rest = extract_gpa(text)
    date, rest = _split_date(rest)
    entry.degree = rest
    if gpa and not entry.gpa:
        entry.gpa = gpa
    if date and not entry.date:
        entry.date = date


def _apply_certificate(entry: EducationEntry, text: str) -> None:
    date, rest = _split_date(text)
    entry.certificate = rest
    if date and not entry.date:
        entry.date = date


def _apply_date_gpa(entry: EducationEntry, text: str) -> bool:
    gpa, rest = extract_gpa(text)
    date = extract_date(rest)
    if (gpa and entry.gpa) or (date and entry.date):
        return False
    if gpa:
        entry.gpa = gpa
    if date:
        entry.date = date
    return True


@dataclass
class EducationState:
    """Scan state for one education block."""
    entries: List[EducationEntry] = field(default_factory=list)
    leftovers: List[str] = field(default_factory=list)


@dataclass
class EducationExtraction:
    entries: List[EducationEntry] = field(default_factory=list)
    leftovers: List[str] = field(default_factory=list)


class EducationRule(NamedTuple):
    name: str
    matches: Callable[[str, EducationState], bool]
    apply: Callable[[List[str], int, EducationState], int]  # returns index of next unread line


def _last_open_school(state: EducationState) -> Optional[EducationEntry]:
    if not state.entries:
        return None
    last = state.entries[-1]
    if last.school and not last.degree and not last.certificate:
        return last
    return None


# ===== RULES (evaluated top-down) =====

def _certificate_matches(line: str, state: EducationState) -> bool:
    return not is_bullet_line(line) and is_certificate_line(line)


def _certificate_apply(lines: List[str], i: int, state: EducationState) -> int:
    entry = parse_certificate_line(lines[i].strip())
    logger.debug(f"Standalone certificate: '{entry.certificate}' issuer='{entry.issuer}'")
    state.entries.append(entry)
    nxt = i + 1
    if not entry.date and nxt < len(lines) and is_pure_date(lines[nxt]):
        entry.date = extract_date(lines[nxt])
        nxt += 1
    return nxt


def _degree_matches(line: str, state: EducationState) -> bool:
    return not is_bullet_line(line) and is_degree_line(line) and not has_institution_keyword(line)


def _degree_apply(lines: List[str], i: int, state: EducationState) -> int:
    # A degree right under its school (separated by a location or date line) joins that school
    entry = _last_open_school(state)
    if entry is None:
        entry = EducationEntry()
        state.entries.append(entry)
        logger.debug(f"Standalone degree without school: '{lines[i].strip()}'")
    _apply_degree(entry, lines[i].strip())
    nxt = i + 1
    if nxt < len(lines) and _is_date_gpa_line(lines[nxt]) and _apply_date_gpa(entry, lines[nxt]):
        nxt += 1
    return nxt


def _school_matches(line: str, state: EducationState) -> bool:
    t = line.strip()
    if is_bullet_line(line) or is_pure_date(t) or _is_date_gpa_line(t):
        return False
    return has_institution_keyword(t) or SCHOOL_MIN_CHARS <= len(t) <= SCHOOL_MAX_CHARS


def _school_apply(lines: List[str], i: int, state: EducationState) -> int:
    t = lines[i].strip()
    gpa, rest = extract_gpa(t)
    date, rest = _split_date(rest)
    entry = EducationEntry(date=date, gpa=gpa)

    # "Stanford University — B.S. Computer Science" carries both on one line
    parts = [p.strip() for p in PART_SEPARATOR_RE.split(rest, maxsplit=1) if p.strip()]
    degree_parts = [p for p in parts if is_degree_line(p) and not has_institution_keyword(p)]
    if len(parts) == 2 and len(degree_parts) == 1:
        entry.school = next(p for p in parts if p is not degree_parts[0])
        entry.degree = degree_parts[0]
    else:
        entry.school = rest
    state.entries.append(entry)
    logger.debug(f"School opened: '{entry.school}'")

    nxt = i + 1
    for _ in range(SCHOOL_LOOKAHEAD):
        if nxt >= len(lines) or is_bullet_line(lines[nxt]):
            break
        nt = lines[nxt].strip()
        if is_certificate_line(nt) and not has_degree_keyword(nt) and not entry.certificate:
            _apply_certificate(entry, nt)
        elif is_degree_line(nt) and not entry.degree and not has_institution_keyword(nt):
            _apply_degree(entry, nt)
        elif _is_date_gpa_line(nt) and _apply_date_gpa(entry, nt):
            pass
        elif _is_location_line(nt) and not entry.location:
            entry.location = nt
        else:
            break
        nxt += 1
    return nxt


def _detail_matches(line: str, state: EducationState) -> bool:
    return True


def _detail_apply(lines: List[str], i: int, state: EducationState) -> int:
    line = lines[i]
    t = strip_bullet(line) if is_bullet_line(line) else line.strip()
    if not state.entries:
        state.leftovers.append(line.strip())
        return i + 1
    last = state.entries[-1]
    if _is_date_gpa_line(t) and _apply_date_gpa(last, t):
        return i + 1
    last.details.append(t)
    return i + 1


EDUCATION_RULES: Tuple[EducationRule, ...] = (
    EducationRule("certificate", _certificate_matches, _certificate_apply),
    EducationRule("degree", _degree_matches, _degree_apply),
    EducationRule("school", _school_matches, _school_apply),
    EducationRule("detail", _detail_matches, _detail_apply),
)


def extract_education(block: List[str]) -> EducationExtraction:
    """
    Turn one raw education block into ordered EducationEntry records.

    Args:
        block: Lines of one education block (untrimmed, blanks allowed)

    Returns:
        EducationExtraction with entries in source order; lines with no
        entry to attach to come back as leftovers.
    """
    lines = [ln for ln in block if ln.strip() and not is_divider(ln)]
    state = EducationState()
    i = 0
    while i < len(lines):
        for rule in EDUCATION_RULES:
            if rule.matches(lines[i], state):
                i = rule.apply(lines, i, state)
                break
    return EducationExtraction(entries=state.entries, leftovers=state.leftovers)
