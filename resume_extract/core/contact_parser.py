"""
Contact block extraction from the top of a pasted resume.

Only the first few non-blank lines are examined. Each field is matched on its
own; nothing is inferred from another field (a location is never guessed
from a phone area code, a website never from an email domain).
"""

import logging
import re
from typing import List, Optional

from resume_extract.core.schemas import ContactInfo
from resume_extract.core.text_normalization import first_match, remainder_pieces

logger = logging.getLogger(__name__)

# Number of non-blank lines scanned for contact fields
CONTACT_WINDOW = 5

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# Priority order matters: the first PATTERN that matches anywhere wins,
# not the first phone-looking text in reading order.
PHONE_PATTERNS = (
    # International: "+1 (555) 123-4567", "+44 20 7946 0958"-style with a country code
    re.compile(r"(?<!\d)\+?\d{1,3}[-. ]?\(?\d{3}\)?[-. ]?\d{3}[-. ]?\d{4}(?!\d)"),
    # US dashed/dotted/spaced: "555-123-4567", "555.123.4567"
    re.compile(r"(?<!\d)\d{3}[-. ]\d{3}[-. ]\d{4}(?!\d)"),
    # Parenthesized area code: "(555) 123-4567"
    re.compile(r"\(\d{3}\) ?\d{3}[-. ]?\d{4}(?!\d)"),
)

URL_RE = re.compile(
    r"https?://[^\s|,]+|\bwww\.[^\s|,]+|\b(?:linkedin|github)\.com/[^\s|,]+",
    re.IGNORECASE,
)

CONTACT_LABEL_RE = re.compile(
    r"^(?:e-?mail|phone|tel|mobile|cell|web(?:site)?|linkedin|github|portfolio|location|address)$",
    re.IGNORECASE,
)

# "City, ST" first, then "City, Country". Words never continue across a line break.
LOCATION_PATTERNS = (
    re.compile(r"\b[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)*,[ \t]*[A-Z]{2}\b"),
    re.compile(r"\b[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)*,[ \t]*[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)*"),
)


def _non_blank(lines: List[str]) -> List[str]:
    return [ln.strip() for ln in lines if ln and ln.strip()]


def extract_contact_info(lines: List[str]) -> ContactInfo:
    """
    Extract name, email, phone, website and location from the top lines.

    Args:
        lines: Full resume line array (blank lines allowed)

    Returns:
        ContactInfo with name set to the first non-blank line; every other
        field is None when its pattern does not match.
    """
    top = _non_blank(lines)[:CONTACT_WINDOW]
    contact = ContactInfo()
    if not top:
        return contact

    contact.name = top[0]
    header_text = "\n".join(top)

    m = EMAIL_RE.search(header_text)
    if m:
        contact.email = m.group(0)

    contact.phone = first_match(PHONE_PATTERNS, header_text)

    m = URL_RE.search(header_text)
    if m:
        contact.website = m.group(0).rstrip(".;)")

    contact.location = _extract_contact_location(top[1:])

    logger.debug(
        f"Contact extracted: name='{contact.name}', email={contact.email}, "
        f"phone={contact.phone}, location={contact.location}, website={contact.website}"
    )
    return contact


def _extract_contact_location(lines: List[str]) -> Optional[str]:
    # Emails and URLs are blanked first so "john@acme.com, NY" cannot leak a false city
    text = "\n".join(URL_RE.sub(" ", EMAIL_RE.sub(" ", ln)) for ln in lines)
    return first_match(LOCATION_PATTERNS, text)


def contact_leftovers(header_lines: List[str], contact: ContactInfo) -> List[str]:
    """
    Header-region text (after the name) that fed no contact field.

    Lines holding no extracted value come back verbatim. From the others the
    extracted values and their separators are cut out and any remaining
    pieces are returned, so "Senior Engineer · Austin, TX" yields
    "Senior Engineer" and a second profile link is kept. Bare field labels
    ("Phone:", "Email") are dropped.
    """
    pending = [v for v in (contact.email, contact.phone, contact.website, contact.location) if v]
    leftovers: List[str] = []
    for line in _non_blank(header_lines)[1:]:
        used = [v for v in pending if v in line]
        if not used:
            leftovers.append(line)
            continue
        # A value is consumed by the first line holding it; a repeat later is kept as text
        pending = [v for v in pending if v not in used]
        pieces = [p for p in remainder_pieces(line, used) if not CONTACT_LABEL_RE.match(p)]
        if pieces:
            logger.debug(f"Header line partly unused, keeping: {pieces}")
            leftovers.append(" | ".join(pieces))
    return leftovers
