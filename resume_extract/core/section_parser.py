"""
Section segmentation for pasted resume text.

Splits the line array into a contact/header region and typed raw blocks
(summary, work experience, skills, education) using full-line header
matching. Lines are stored untrimmed so that indentation survives for the
bullet detection done later by the entry extractors.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from resume_extract.core.text_normalization import is_date, is_divider

logger = logging.getLogger(__name__)

# Max non-blank lines that can belong to the contact/header region
HEADER_SCAN_LIMIT = 8
# Non-blank lines after the header region eligible for speculative summary capture
SUMMARY_WINDOW = 30
# A speculative summary line must be longer than this
SUMMARY_MIN_CHARS = 8
# A header-region line longer than this (with no contact marker) is prose
PROSE_MIN_CHARS = 80

SUMMARY = "summary"
WORK_EXPERIENCE = "work_experience"
SKILLS = "skills"
EDUCATION = "education"
ADDITIONAL = "additional"


# ===== SECTION HEADER SYNONYMS =====
# Matched against the FULL line, case-insensitively, optional trailing colon.

def _header_re(alternation: str) -> re.Pattern:
    return re.compile(rf"^\s*(?:{alternation})\s*:?\s*$", re.IGNORECASE)


SECTION_PATTERNS: Dict[str, re.Pattern] = {
    SUMMARY: _header_re(
        r"personal\s+statement|(?:professional\s+|career\s+|executive\s+)?summary"
        r"|about(?:\s+me)?|(?:professional\s+)?profile|(?:career\s+)?objective"
    ),
    WORK_EXPERIENCE: _header_re(
        r"(?:work\s+|professional\s+|relevant\s+|career\s+)?experience"
        r"|employment(?:\s+history)?|career\s+history|work\s+history"
    ),
    SKILLS: _header_re(
        r"(?:technical\s+|key\s+|core\s+)?skills|(?:core\s+)?competencies"
        r"|skills\s*(?:&|and)\s*(?:tools|technologies)|areas\s+of\s+expertise|technical\s+proficiencies"
    ),
    EDUCATION: _header_re(
        r"education|academic\s+background|qualifications"
        r"|education\s*(?:&|and)\s*(?:training|certifications?)"
        r"|(?:licenses\s*(?:&|and)\s*)?certifications?"
    ),
    ADDITIONAL: _header_re(
        r"(?:personal\s+|side\s+)?projects|awards(?:\s*(?:&|and)\s*honors)?|honors"
        r"|volunteer(?:ing|\s+experience)?|languages|interests|hobbies|references"
        r"|publications|activities|leadership"
    ),
}

CONTACT_MARKER_RE = re.compile(r"@|https?://|www\.|\d{3}[-. )]\s?\d{3}")


@dataclass
class SectionBlocks:
    """Raw segmentation result. Blocks hold original (untrimmed) lines."""
    header_lines: List[str] = field(default_factory=list)
    summary: List[str] = field(default_factory=list)
    work_experience: List[List[str]] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    education: List[List[str]] = field(default_factory=list)
    other: List[str] = field(default_factory=list)
    titles: List[str] = field(default_factory=list)  # Header lines in encounter order


@dataclass
class _SegmentState:
    """Per-call scan state threaded through the segmentation loop."""
    current_key: Optional[str] = None
    current_lines: List[str] = field(default_factory=list)
    summary_blocks: List[List[str]] = field(default_factory=list)
    skills_blocks: List[List[str]] = field(default_factory=list)
    speculative: List[str] = field(default_factory=list)
    position: int = 0


def detect_section_type(line: str) -> Optional[str]:
    """
    Return the canonical section key for a header line, or None.

    Examples:
        "WORK EXPERIENCE" -> "work_experience"
        "Professional Summary:" -> "summary"
        "Skills & Tools" -> "skills"
        "Acme Corp" -> None
    """
    if not line or not line.strip():
        return None
    for key, rx in SECTION_PATTERNS.items():
        if rx.match(line):
            return key
    return None


def looks_like_section_header(line: str) -> bool:
    """
    Short, all-caps line made mostly of letters, spaces and hyphens.

    Used only to find where the contact block ends; "CAREER HIGHLIGHTS" looks
    like a header even though it is not a canonical one.
    """
    t = line.strip().rstrip(":")
    if not (3 < len(t) < 50):
        return False
    if not any(c.isalpha() for c in t) or t != t.upper():
        return False
    wordish = sum(1 for c in t if c.isalpha() or c in " -&/")
    return wordish / len(t) >= 0.85


def _is_prose(line: str) -> bool:
    t = line.strip()
    return len(t) > PROSE_MIN_CHARS and not CONTACT_MARKER_RE.search(t)


def _find_header_region(lines: List[str]) -> int:
    """
    Return the index of the first line after the contact/header region.

    Line 0 (the name) always belongs to the region, even when it is all caps.
    The region ends at the first later line that looks like a section header,
    matches a canonical header (a summary heading included, so it can open the
    summary block), or reads like prose.
    """
    seen = 0
    for idx, line in enumerate(lines):
        if not line.strip():
            continue
        if seen == 0:
            seen = 1
            continue
        if seen >= HEADER_SCAN_LIMIT:
            return idx
        ends_region = detect_section_type(line) or _is_prose(line) or (
            # An all-caps tagline under the name ("SENIOR DATA ENGINEER") still
            # belongs to the header when contact lines follow it
            looks_like_section_header(line)
            and not _contact_line_follows(lines, idx, HEADER_SCAN_LIMIT - seen)
        )
        if ends_region:
            logger.debug(f"Header region ends at line {idx}: '{line.strip()}'")
            return idx
        seen += 1
    return len(lines)


def _contact_line_follows(lines: List[str], idx: int, budget: int) -> bool:
    for line in (ln for ln in lines[idx + 1:] if ln.strip()):
        if budget <= 0 or detect_section_type(line):
            return False
        if CONTACT_MARKER_RE.search(line):
            return True
        budget -= 1
    return False


def _close_block(state: _SegmentState, blocks: SectionBlocks) -> None:
    key, content = state.current_key, state.current_lines
    if key and any(ln.strip() for ln in content):
        if key == WORK_EXPERIENCE:
            blocks.work_experience.append(content)
        elif key == EDUCATION:
            blocks.education.append(content)
        elif key == SUMMARY:
            state.summary_blocks.append(content)
        elif key == SKILLS:
            state.skills_blocks.append(content)
    state.current_lines = []


def _last_wins(candidates: List[List[str]], other: List[str]) -> List[str]:
    """Keep the last block; lines of superseded blocks are moved to other, not dropped."""
    non_empty = [b for b in candidates if any(ln.strip() for ln in b)]
    if not non_empty:
        return []
    for superseded in non_empty[:-1]:
        other.extend(ln.strip() for ln in superseded if ln.strip())
    return non_empty[-1]


def segment_sections(lines: List[str]) -> SectionBlocks:
    """
    Partition resume lines into a header region and typed raw blocks.

    Args:
        lines: Resume lines as split from the pasted text (untrimmed)

    Returns:
        SectionBlocks. Work experience and education hold one block per header
        occurrence; summary and skills keep the last occurrence.
    """
    blocks = SectionBlocks()
    start = _find_header_region(lines)
    blocks.header_lines = [ln for ln in lines[:start] if ln.strip()]

    state = _SegmentState()
    for line in lines[start:]:
        if is_divider(line):
            continue

        if not line.strip():
            # Blank lines stay inside blocks: paragraph breaks feed the degraded experience pass
            if state.current_key and state.current_key != ADDITIONAL:
                state.current_lines.append(line)
            continue

        key = detect_section_type(line)
        if key == ADDITIONAL and state.current_key == SKILLS and line.strip().endswith(":"):
            # "Languages:" inside a skills block is a category label, not a new section
            key = None
        if key:
            logger.debug(f"SECTION HEADER DETECTED: '{line.strip()}' -> section_type='{key}'")
            _close_block(state, blocks)
            blocks.titles.append(line.strip())
            state.current_key = key
            if key == ADDITIONAL:
                # Heading kept so the preserved lines still read as a section
                blocks.other.append(line.strip())
            continue

        if state.current_key == ADDITIONAL:
            blocks.other.append(line.strip())
        elif state.current_key:
            state.current_lines.append(line)
        elif _is_summary_candidate(line, state.position):
            state.speculative.append(line)
        else:
            blocks.other.append(line.strip())
        state.position += 1

    _close_block(state, blocks)

    if state.speculative:
        logger.debug(f"Speculative summary captured {len(state.speculative)} line(s) without a header")
    blocks.summary = _last_wins([state.speculative] + state.summary_blocks, blocks.other)
    blocks.skills = _last_wins(state.skills_blocks, blocks.other)
    return blocks


def _is_summary_candidate(line: str, position: int) -> bool:
    t = line.strip()
    if position >= SUMMARY_WINDOW:
        return False
    if len(t) <= SUMMARY_MIN_CHARS:
        return False
    return not is_date(t)
