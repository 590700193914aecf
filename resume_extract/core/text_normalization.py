"""
Line-level signals shared by every extractor.

Everything here is a cheap, deterministic test on a single line of pasted
resume text: bullet markers, divider rules, date substrings and location
markers. Extractors combine these signals; none of them decide structure
on their own.
"""

import re
from typing import List, Optional


# ============================================================================
# Bullets and dividers
# ============================================================================

BULLET_GLYPHS = "•●○\\-*▪▫◦‣⁃✓✔►▸⦿"

# Glyph-led line, optionally indented by up to 8 spaces ("  • Built X")
BULLET_RE = re.compile(rf"^ {{0,8}}[{BULLET_GLYPHS}]\s*")
# Numbered list item: "1. Built X", "2) Shipped Y"
NUMBERED_RE = re.compile(r"^\s*\d{1,2}[.)]\s+")
TAB_LEAD_RE = re.compile(r"^\t+(?=\S)")
INDENTED_RE = re.compile(r"^ {2,8}(?=\S)")

DIVIDER_RE = re.compile(r"^\s*[-_=—–─━]{3,}\s*$")


def is_bullet_line(line: str) -> bool:
    """
    Check if a line carries a list marker.

    Examples:
        "• Built X" -> True
        "   - Shipped Y" -> True
        "2) Led team" -> True
        "\\tMaintained API" -> True
        "Acme Corp" -> False
    """
    if not line or not line.strip():
        return False
    if is_divider(line):
        return False
    return bool(BULLET_RE.match(line) or NUMBERED_RE.match(line) or TAB_LEAD_RE.match(line))


def strip_bullet(line: str) -> str:
    """Remove the list marker and its surrounding whitespace."""
    t = BULLET_RE.sub("", line, count=1)
    if t == line:
        t = NUMBERED_RE.sub("", line, count=1)
    return t.strip()


def is_indented(line: str) -> bool:
    return bool(INDENTED_RE.match(line))


def is_divider(line: str) -> bool:
    """Runs of -, _, = or long dashes used as visual rules ("-----", "_____", "———")."""
    return bool(DIVIDER_RE.match(line))


# ============================================================================
# Dates
# ============================================================================

MONTH = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|"
    r"Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)\.?"
)
DATE_POINT = rf"(?:{MONTH}\s+\d{{4}}|\d{{1,2}}/\d{{4}}|\d{{4}})"
RANGE_SEP = r"\s*(?:[-–—]|\bto\b)\s*"

# "2020 - Present", "Jan 2020 – Dec 2021", "03/2019 - 04/2025", "2016 to 2020"
DATE_RANGE_RE = re.compile(
    rf"\b{DATE_POINT}{RANGE_SEP}(?:{DATE_POINT}|Present|Current|Now)\b",
    re.IGNORECASE,
)
MONTH_YEAR_RE = re.compile(rf"\b{MONTH}\s+\d{{4}}\b", re.IGNORECASE)
MONTH_NUM_YEAR_RE = re.compile(r"\b\d{1,2}/\d{4}\b")
YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")


def is_date(text: str) -> bool:
    """
    Check if a line contains a date-like substring.

    A bare year is NOT enough ("Class of 2020 Hackathon" is not a date line);
    use extract_date() when a lone year should count.
    """
    if not text:
        return False
    return bool(
        DATE_RANGE_RE.search(text)
        or MONTH_YEAR_RE.search(text)
        or MONTH_NUM_YEAR_RE.search(text)
    )


def extract_date(text: str) -> str:
    """
    Return the most specific date substring found in text, verbatim.

    Priority: date range, then "Month YYYY", then "MM/YYYY", then a bare year.

    Examples:
        "Acme | 2020 - Present" -> "2020 - Present"
        "Graduated May 2016" -> "May 2016"
        "Certificate | 2016" -> "2016"
    """
    if not text:
        return ""
    for rx in (DATE_RANGE_RE, MONTH_YEAR_RE, MONTH_NUM_YEAR_RE, YEAR_RE):
        m = rx.search(text)
        if m:
            return m.group(0).strip()
    return ""


SEPARATOR_CHARS = " \t|,·•;:-–—"


def clean_remnant(text: str) -> str:
    """Trim separator debris left behind after a substring was cut out."""
    t = re.sub(r"\(\s*\)", "", text)
    t = re.sub(r"\s{2,}", " ", t)
    return t.strip(SEPARATOR_CHARS + "()").strip()


def strip_date(text: str) -> str:
    """Remove the extracted date substring and any separators it leaves behind."""
    date = extract_date(text)
    if not date:
        return text.strip()
    return clean_remnant(text.replace(date, " ", 1))


# Separators between independent pieces of one line ("a@x.com | 555-123-4567 · Austin, TX")
PIECE_SEPARATOR_RE = re.compile(r"\s*[|·•]\s*")


def remainder_pieces(text: str, values: List[str]) -> List[str]:
    """
    Cut already-extracted values out of a line and return what is left.

    Each value is removed once. The rest is split on | · • separators and
    cleaned; pieces without a letter or digit are dropped.

    Examples:
        ("Senior Engineer · Austin, TX", ["Austin, TX"]) -> ["Senior Engineer"]
        ("a@x.com | linkedin.com/in/a | github.com/a", ["a@x.com", "linkedin.com/in/a"]) -> ["github.com/a"]
    """
    rest = text
    for value in values:
        if value:
            rest = rest.replace(value, " ", 1)
    pieces = [clean_remnant(p) for p in PIECE_SEPARATOR_RE.split(rest)]
    return [p for p in pieces if re.search(r"[A-Za-z0-9]", p)]


def is_pure_date(text: str) -> bool:
    """A line that is nothing but a date ("2020 - Present", "(May 2016)")."""
    if not extract_date(text):
        return False
    return not re.search(r"[A-Za-z0-9]", strip_date(text))


# ============================================================================
# Locations
# ============================================================================

LOCATION_PIN = "📍"
MIDDLE_DOT = "·"
WORK_MODE_RE = re.compile(r"\b(?:Remote|On-?site|Hybrid)\b", re.IGNORECASE)
CITY_STATE_RE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*,\s*[A-Z]{2}\b")
CITY_COUNTRY_RE = re.compile(r"^[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*,\s*[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*$")
EMOJI_RE = re.compile("[\U0001F300-\U0001FAFF\u2600-\u27BF\uFE0F]")


def has_location_marker(text: str) -> bool:
    """
    Check if a line looks like an entry's location/date line.

    Markers: the 📍 pin, a middle dot, Remote/On-site/Hybrid, a date, a
    "City, ST" pattern, or a whole-line "City, Country".
    """
    if not text or not text.strip():
        return False
    t = text.strip()
    if LOCATION_PIN in t or MIDDLE_DOT in t:
        return True
    if WORK_MODE_RE.search(t) or is_date(t):
        return True
    if CITY_STATE_RE.search(t):
        return True
    return bool(CITY_COUNTRY_RE.match(t))


def extract_location(text: str) -> str:
    """
    Pull a location out of a location/date line.

    Tie-breaks:
      - "City, ST" and a work mode together -> "City, ST · Mode"
      - work mode alone -> the mode ("Remote")
      - "City, ST" / "City, Country" alone -> that match
      - otherwise the text preceding the date

    Examples:
        "📍 Austin, TX · 2020 - Present" -> "Austin, TX"
        "San Francisco, CA · Remote" -> "San Francisco, CA · Remote"
        "Berlin Office  2019 - 2021" -> "Berlin Office"
    """
    if not text:
        return ""
    t = EMOJI_RE.sub(" ", text)
    date = extract_date(t)
    remnant = strip_date(t)

    mode = WORK_MODE_RE.search(remnant)
    city = CITY_STATE_RE.search(remnant)
    city_text = city.group(0) if city else ""
    if not city_text and CITY_COUNTRY_RE.match(clean_remnant(remnant.replace(MIDDLE_DOT, " "))):
        city_text = clean_remnant(remnant.replace(MIDDLE_DOT, " "))

    if mode and city_text:
        return f"{city_text} {MIDDLE_DOT} {mode.group(0)}"
    if mode:
        return mode.group(0)
    if city_text:
        return city_text
    if date:
        return clean_remnant(t[: t.find(date)])
    return clean_remnant(remnant)


# ============================================================================
# Separators
# ============================================================================

# " - ", " – ", " — " and a bare em dash ("T-Mobile—SEO Manager")
DASH_SEPARATOR_RE = re.compile(r"\s+[-–—]\s+|\s*—\s*")


def has_dash_separator(text: str) -> bool:
    return bool(DASH_SEPARATOR_RE.search(text))


def split_on_separator(text: str, maxsplit: int = 1) -> List[str]:
    """Split on the dash separators used between company and title."""
    return [p.strip() for p in DASH_SEPARATOR_RE.split(text, maxsplit=maxsplit)]


def first_match(patterns, text: str) -> Optional[str]:
    """Try patterns in order and return the first match text (priority order, not position)."""
    for rx in patterns:
        m = rx.search(text)
        if m:
            return m.group(0)
    return None
