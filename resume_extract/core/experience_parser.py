"""
Work experience extraction from a raw work-experience block.

The block is folded line by line through an explicit ExperienceState value.
Each line is offered first to a pending capture phase (title, then
location/date), then to an ordered tuple of rules evaluated top-down:

    1. pipe format       "Senior Engineer | Tech Co | 2020 - Present"
    2. dash format       "T-Mobile — SEO Manager / Website Growth"
    3. new company       bare line + title line + location/date line lookahead
    4. bullet            "• Built X"
    5. fallback          title fill, indented continuation, orphan handling

Rules 1-3 close the open experience before opening a new one. Nothing is
dropped: lines that cannot be attributed come back as leftovers.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, List, Literal, NamedTuple, Optional, Tuple

from resume_extract.core.schemas import Experience
from resume_extract.core.section_parser import detect_section_type
from resume_extract.core.text_normalization import (
    CITY_COUNTRY_RE,
    CITY_STATE_RE,
    EMOJI_RE,
    LOCATION_PIN,
    MIDDLE_DOT,
    WORK_MODE_RE,
    extract_date,
    extract_location,
    has_dash_separator,
    has_location_marker,
    is_bullet_line,
    is_date,
    is_divider,
    is_indented,
    is_pure_date,
    remainder_pieces,
    split_on_separator,
    strip_bullet,
    strip_date,
)

logger = logging.getLogger(__name__)

COMPANY_MIN_CHARS = 3
COMPANY_MAX_CHARS = 79
TITLE_MAX_CHARS = 120
HEADING_MAX_CHARS = 120

# ===== JOB TITLE KEYWORDS =====
# Used ONLY to decide which half of a dash-format line is the company.
JOB_TITLE_KEYWORDS = (
    "engineer", "manager", "director", "analyst", "developer", "designer",
    "strategist", "producer", "specialist", "coordinator", "lead", "senior", "junior",
)
JOB_TITLE_RE = re.compile(rf"\b(?:{'|'.join(JOB_TITLE_KEYWORDS)})s?\b", re.IGNORECASE)

Phase = Literal["SCANNING", "CAPTURING_TITLE", "CAPTURING_LOCATION_DATE", "IN_BULLETS"]


@dataclass
class ExperienceState:
    """Scan state for one block. Created per call, never shared."""
    phase: Phase = "SCANNING"
    current: Optional[Experience] = None
    done: List[Experience] = field(default_factory=list)
    leftovers: List[str] = field(default_factory=list)


@dataclass
class ExperienceExtraction:
    experiences: List[Experience] = field(default_factory=list)
    leftovers: List[str] = field(default_factory=list)  # Orphan lines for other_sections
    degraded: bool = False  # True when the paragraph fallback produced the result


class ExperienceRule(NamedTuple):
    name: str
    matches: Callable[[List[str], int, ExperienceState], bool]
    apply: Callable[[List[str], int, ExperienceState], None]


# ===== LINE CLASSIFIERS =====

def pick_company_and_title(left: str, right: str) -> Tuple[str, str]:
    """
    Decide which half of a two-part heading is the company.

    The half WITHOUT a job-title keyword is the company. When both or
    neither half has one, the shorter half is the company (left on a tie).

    Examples:
        ("T-Mobile", "SEO Manager / Website Growth") -> ("T-Mobile", "SEO Manager / Website Growth")
        ("Junior Developer", "Previous Company") -> ("Previous Company", "Junior Developer")
        ("Acme", "Globex Corporation") -> ("Acme", "Globex Corporation")
    """
    left_kw = bool(JOB_TITLE_RE.search(left))
    right_kw = bool(JOB_TITLE_RE.search(right))
    if left_kw != right_kw:
        return (right, left) if left_kw else (left, right)
    if len(right) < len(left):
        return right, left
    return left, right


def parse_pipe_line(text: str) -> Experience:
    """
    Parse "Title | Company | Date" style headings.

    Parts are assigned positionally as [title, company, date]. The first part
    that looks like a date becomes the date wherever it sits, and the other
    parts shift left. Parts beyond that are kept as location, as is a third
    part that reads like a place rather than a date.

    Examples:
        "Senior Engineer | Tech Co | 2020 - Present" -> title, company, date
        "2020 - Present | Senior Engineer | Tech Co" -> same result
        "Engineer | Acme | Austin, TX" -> location="Austin, TX", date=""
    """
    parts = [p.strip() for p in text.split("|") if p.strip()]
    date = ""
    for idx, part in enumerate(parts):
        if is_date(part) or is_pure_date(part):
            date = parts.pop(idx)
            break
    extra = parts[2:]
    if not date and extra and not has_location_marker(extra[0]):
        date = extra.pop(0)
    return Experience(
        title=parts[0] if parts else "",
        company=parts[1] if len(parts) > 1 else "",
        date=date,
        location=" | ".join(extra),
    )


def parse_dash_line(text: str) -> Optional[Experience]:
    """
    Parse "Company - Title" (or "Title — Company — 2016 - 2018") headings.

    Any date is cut out first so the date's own hyphen never splits the
    heading, then the rest must split into exactly two non-empty parts.

    Returns:
        Experience with company/title/date, or None if the line is not a
        two-part heading.
    """
    t = text.strip()
    if not has_dash_separator(t) or is_pure_date(t):
        return None
    date = extract_date(t)
    rest = strip_date(t) if date else t
    parts = split_on_separator(rest, maxsplit=1)
    if len(parts) != 2 or not all(parts):
        return None
    if any(len(p) > COMPANY_MAX_CHARS for p in parts):
        return None
    company, title = pick_company_and_title(parts[0], parts[1])
    return Experience(company=company, title=title, date=date)


def _is_company_candidate(line: str) -> bool:
    t = line.strip()
    if is_bullet_line(line):
        return False
    if not (COMPANY_MIN_CHARS <= len(t) <= COMPANY_MAX_CHARS):
        return False
    return not is_date(t) and not detect_section_type(t)


def _is_title_candidate(line: str) -> bool:
    t = line.strip()
    return bool(t) and not is_bullet_line(line) and not is_pure_date(t) and len(t) <= TITLE_MAX_CHARS


def _is_marker_line(line: str) -> bool:
    return not is_bullet_line(line) and has_location_marker(line)


def looks_like_new_company(lines: List[str], i: int) -> bool:
    """
    Three-line lookahead for "Company / Title / Location-or-Date" entries.

    A short bare line only starts a new entry when a title-like line follows
    it and a location/date line comes within the two lines after that. This
    keeps a stray short line in the middle of a bullet list from being read
    as a company.

    Tie-break: when the marker is two lines away and the next line could
    itself be a company followed directly by its title, the later (closer)
    reading wins and this line is not a company.
    """
    if not _is_company_candidate(lines[i]):
        return False
    j = i + 1
    if j >= len(lines) or not _is_title_candidate(lines[j]):
        return False
    if j + 1 < len(lines) and _is_marker_line(lines[j + 1]):
        return True
    if j + 2 < len(lines) and _is_marker_line(lines[j + 2]):
        return not (_is_company_candidate(lines[j]) and _is_title_candidate(lines[j + 1]))
    return False


def _is_location_date_line(line: str) -> bool:
    """A line a just-opened entry may take as its location/date line."""
    t = line.strip()
    if is_bullet_line(line) or not has_location_marker(t):
        return False
    if "|" not in t and not has_dash_separator(t):
        return True
    # "Austin, TX - Remote" is still a location line; "Startup Co | 2018 - 2020" is a heading
    remnant = strip_date(EMOJI_RE.sub(" ", t))
    return (
        not remnant
        or LOCATION_PIN in t
        or bool(WORK_MODE_RE.search(remnant))
        or bool(CITY_STATE_RE.search(remnant))
        or bool(CITY_COUNTRY_RE.match(remnant))
    )


# ===== STATE TRANSITIONS =====

def _open(state: ExperienceState, exp: Experience) -> None:
    if state.current is not None:
        state.done.append(state.current)
    logger.debug(f"Experience opened: company='{exp.company}', title='{exp.title}', date='{exp.date}'")
    state.current = exp


def _add_bullet(state: ExperienceState, text: str, raw: str) -> None:
    """Attach to the open entry, else to the last completed one, else leave as orphan."""
    target = state.current if state.current is not None else (state.done[-1] if state.done else None)
    if target is None:
        logger.debug(f"Orphan bullet with no experience to attach to: '{raw.strip()}'")
        state.leftovers.append(raw.strip())
        return
    target.bullets.append(text)
    if state.current is not None:
        state.phase = "IN_BULLETS"


def _apply_location_date(exp: Experience, text: str) -> None:
    """Fill empty date/location from the line; text neither of them covers becomes a bullet."""
    t = EMOJI_RE.sub(" ", text)
    used: List[str] = []

    date = extract_date(t)
    if date and exp.date in ("", date):
        exp.date = date
        used.append(date)

    location = extract_location(t)
    if location and exp.location in ("", location):
        exp.location = location
        used.extend(part.strip() for part in location.split(MIDDLE_DOT))

    rest = remainder_pieces(t, used)
    if rest:
        logger.debug(f"Location/date line partly unused, kept as bullet: {rest}")
        exp.bullets.append(" | ".join(rest))


def _capture_pending(line: str, state: ExperienceState) -> bool:
    """Give a just-opened entry first claim on its title and location/date lines."""
    exp = state.current
    if exp is None or state.phase not in ("CAPTURING_TITLE", "CAPTURING_LOCATION_DATE"):
        return False
    t = line.strip()

    if state.phase == "CAPTURING_TITLE":
        state.phase = "CAPTURING_LOCATION_DATE"
        if not is_bullet_line(line) and not is_pure_date(t) and not detect_section_type(t):
            exp.title = strip_date(t) if is_date(t) else t
            if is_date(t) and not exp.date:
                exp.date = extract_date(t)
            return True

    if state.phase == "CAPTURING_LOCATION_DATE":
        state.phase = "IN_BULLETS"
        if _is_location_date_line(line):
            _apply_location_date(exp, t)
            return True

    return False


# ===== RULES (strict priority order) =====

def _pipe_matches(lines: List[str], i: int, state: ExperienceState) -> bool:
    line = lines[i]
    if "|" not in line or is_bullet_line(line):
        return False
    return len([p for p in line.split("|") if p.strip()]) >= 2


def _pipe_apply(lines: List[str], i: int, state: ExperienceState) -> None:
    _open(state, parse_pipe_line(lines[i]))
    state.phase = "CAPTURING_LOCATION_DATE"


def _dash_matches(lines: List[str], i: int, state: ExperienceState) -> bool:
    line = lines[i]
    if is_bullet_line(line) or len(line.strip()) >= HEADING_MAX_CHARS:
        return False
    return parse_dash_line(line) is not None


def _dash_apply(lines: List[str], i: int, state: ExperienceState) -> None:
    _open(state, parse_dash_line(lines[i]))
    state.phase = "CAPTURING_LOCATION_DATE"


def _company_matches(lines: List[str], i: int, state: ExperienceState) -> bool:
    return looks_like_new_company(lines, i)


def _company_apply(lines: List[str], i: int, state: ExperienceState) -> None:
    _open(state, Experience(company=lines[i].strip()))
    state.phase = "CAPTURING_TITLE"


def _bullet_matches(lines: List[str], i: int, state: ExperienceState) -> bool:
    return is_bullet_line(lines[i])


def _bullet_apply(lines: List[str], i: int, state: ExperienceState) -> None:
    _add_bullet(state, strip_bullet(lines[i]), lines[i])


def _fallback_matches(lines: List[str], i: int, state: ExperienceState) -> bool:
    return True


def _fallback_apply(lines: List[str], i: int, state: ExperienceState) -> None:
    line = lines[i]
    t = line.strip()
    if is_indented(line):
        # Indented continuation: a bullet that lost its marker
        _add_bullet(state, t, line)
    elif state.current is not None and not state.current.title:
        state.current.title = t
    elif state.current is not None and not state.current.date and is_pure_date(t):
        # Date on its own line after a location line
        state.current.date = extract_date(t)
    elif state.current is not None:
        state.current.bullets.append(t)
    else:
        state.leftovers.append(t)


EXPERIENCE_RULES: Tuple[ExperienceRule, ...] = (
    ExperienceRule("pipe", _pipe_matches, _pipe_apply),
    ExperienceRule("dash", _dash_matches, _dash_apply),
    ExperienceRule("new_company", _company_matches, _company_apply),
    ExperienceRule("bullet", _bullet_matches, _bullet_apply),
    ExperienceRule("fallback", _fallback_matches, _fallback_apply),
)


def _fold(lines: List[str]) -> ExperienceState:
    state = ExperienceState()
    for i, line in enumerate(lines):
        if _capture_pending(line, state):
            continue
        for rule in EXPERIENCE_RULES:
            if rule.matches(lines, i, state):
                rule.apply(lines, i, state)
                break
    if state.current is not None:
        state.done.append(state.current)
        state.current = None
    return state


# ===== DEGRADED FALLBACK =====

def _paragraphs(block: List[str]) -> List[List[str]]:
    paragraphs: List[List[str]] = []
    current: List[str] = []
    for line in block:
        if not line.strip() or is_divider(line):
            if current:
                paragraphs.append(current)
                current = []
            continue
        current.append(line)
    if current:
        paragraphs.append(current)
    return paragraphs


def _degraded_extract(block: List[str]) -> ExperienceExtraction:
    """
    Simple per-paragraph pass used when the state machine found nothing.

    Line 1 is the title, line 2 the company unless it is a date, the next
    date line is the date, everything else is a bullet.
    """
    result = ExperienceExtraction(degraded=True)
    for para in _paragraphs(block):
        if is_bullet_line(para[0]):
            result.leftovers.extend(ln.strip() for ln in para)
            continue
        exp = Experience(title=para[0].strip())
        rest = para[1:]
        if rest and not is_bullet_line(rest[0]) and not is_date(rest[0]):
            exp.company = rest.pop(0).strip()
        if rest and not is_bullet_line(rest[0]) and is_date(rest[0]):
            date_line = rest.pop(0).strip()
            exp.date = extract_date(date_line)
            exp.location = strip_date(date_line)
        exp.bullets = [strip_bullet(ln) if is_bullet_line(ln) else ln.strip() for ln in rest]
        result.experiences.append(exp)
    return result


def extract_work_experience(block: List[str]) -> ExperienceExtraction:
    """
    Turn one raw work-experience block into ordered Experience records.

    Args:
        block: Original-cased, untrimmed lines of one work-experience block

    Returns:
        ExperienceExtraction with experiences in source order and any lines
        that could not be attributed (orphan bullets) as leftovers.
    """
    lines = [ln for ln in block if ln.strip() and not is_divider(ln)]
    if not lines:
        return ExperienceExtraction()

    state = _fold(lines)
    if state.done:
        return ExperienceExtraction(experiences=state.done, leftovers=state.leftovers)

    logger.warning(f"Experience state machine found no entries in {len(lines)} line(s); using paragraph fallback")
    return _degraded_extract(block)
