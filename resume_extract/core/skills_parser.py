"""
Skills block flattening.

A skills block is either categorized ("Languages: Python, Go" rows) or a
plain list of bullets / comma-separated items. Categorized blocks keep one
"Category: items" row per category in encounter order; plain blocks are
flattened to a single comma-separated line.
"""

import logging
import re
from typing import List, Optional, Tuple

from resume_extract.core.text_normalization import is_bullet_line, is_divider, strip_bullet

logger = logging.getLogger(__name__)

# "Languages: Python" / "Cloud & DevOps: AWS" - a short label, a colon, then a capitalized token
CATEGORY_LINE_RE = re.compile(r"^\s*([A-Za-z][\w &/+.()-]{0,40}?)\s*:\s*(?=[A-Z0-9])")
# "Frameworks:" alone on its line, items on the following lines
CATEGORY_LABEL_ONLY_RE = re.compile(r"^\s*([A-Za-z][\w &/+.()-]{0,40}?)\s*:\s*$")


def _content_lines(block: List[str]) -> List[str]:
    out = []
    for line in block:
        if not line.strip() or is_divider(line):
            continue
        out.append(strip_bullet(line) if is_bullet_line(line) else line.strip())
    return out


def _split_items(text: str) -> List[str]:
    return [item.strip() for item in text.split(",") if item.strip()]


def _category_label(line: str) -> Optional[Tuple[str, str]]:
    """Return (label, items_text) when the line opens a category."""
    m = CATEGORY_LINE_RE.match(line) or CATEGORY_LABEL_ONLY_RE.match(line)
    if not m:
        return None
    return m.group(1).strip(), line[m.end():].strip()


def is_categorized(block: List[str]) -> bool:
    """True when any line is a "Label: Item" row or a bare "Label:" line."""
    return any(
        CATEGORY_LINE_RE.match(line) or CATEGORY_LABEL_ONLY_RE.match(line)
        for line in _content_lines(block)
    )


def _extract_categorized(lines: List[str]) -> str:
    rows: List[Tuple[Optional[str], List[str]]] = []
    for line in lines:
        labelled = _category_label(line)
        if labelled:
            label, items_text = labelled
            rows.append((label, _split_items(items_text)))
            logger.debug(f"Skills category opened: '{label}'")
            continue
        if rows:
            rows[-1][1].extend(_split_items(line))
        else:
            # Lines before any category form an unlabelled row
            rows.append((None, _split_items(line)))

    out = []
    for label, items in rows:
        joined = ", ".join(items)
        if label is None:
            out.append(joined)
        else:
            out.append(f"{label}: {joined}" if joined else f"{label}:")
    return "\n".join(row for row in out if row)


def extract_skills(block: List[str]) -> str:
    """
    Flatten a raw skills block to display text.

    Examples:
        ["Languages: Python, Go", "Cloud: AWS"] -> "Languages: Python, Go\\nCloud: AWS"
        ["• Python", "• SQL, Spark"] -> "Python, SQL, Spark"
    """
    lines = _content_lines(block)
    if not lines:
        return ""
    if is_categorized(block):
        return _extract_categorized(lines)
    items: List[str] = []
    for line in lines:
        items.extend(_split_items(line))
    return ", ".join(items)


def split_skills(text: str) -> List[str]:
    """
    Individual skill names from extracted skills text, category labels dropped.

    Examples:
        "Languages: Python, Go\\nCloud: AWS" -> ["Python", "Go", "AWS"]
    """
    skills: List[str] = []
    for line in text.splitlines():
        labelled = _category_label(line)
        items_text = labelled[1] if labelled else line
        skills.extend(_split_items(items_text))
    return skills
