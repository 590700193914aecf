import logging
from typing import Callable, List, Optional, TypeVar

from resume_extract.core.contact_parser import contact_leftovers, extract_contact_info
from resume_extract.core.education_parser import extract_education
from resume_extract.core.experience_parser import extract_work_experience
from resume_extract.core.schemas import EmptyInputError, ResumeRecord
from resume_extract.core.section_parser import segment_sections
from resume_extract.core.skills_parser import extract_skills, split_skills

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _split_lines(raw_text: str) -> List[str]:
    if raw_text is None or not raw_text.strip():
        raise EmptyInputError("Resume text is empty")
    return raw_text.splitlines()


def _non_blank(block: List[str]) -> List[str]:
    return [ln.strip() for ln in block if ln.strip()]


def _guarded(extract: Callable[[List[str]], T], block: List[str], record: ResumeRecord, label: str) -> Optional[T]:
    """Run one block extractor; on failure keep the block's text in other_sections."""
    try:
        return extract(block)
    except Exception:
        logger.exception(f"{label} extraction failed; routing {len(_non_blank(block))} line(s) to other_sections")
        record.other_sections.extend(_non_blank(block))
        return None


def parse(raw_text: str) -> ResumeRecord:
    """
    Parse pasted resume text into a structured record.

    Never raises for bad input: blank text comes back as success=False with
    an error message, and lines no heuristic claims are kept in other_sections.
    """
    try:
        lines = _split_lines(raw_text)
    except EmptyInputError as exc:
        logger.debug("Empty resume text submitted")
        return ResumeRecord(success=False, error=str(exc), raw_text=raw_text or "")
    return parse_lines(lines, raw_text=raw_text)


def parse_lines(lines: List[str], raw_text: Optional[str] = None) -> ResumeRecord:
    """
    Parse a resume that is already split into lines (DOCX paragraphs, PDF text lines).

    Args:
        lines: Resume lines in reading order; blank lines allowed
        raw_text: Original text to echo back; defaults to the lines joined by newlines
    """
    if raw_text is None:
        raw_text = "\n".join(lines)
    if not any(ln.strip() for ln in lines):
        return ResumeRecord(success=False, error="Resume text is empty", raw_text=raw_text)

    record = ResumeRecord(raw_text=raw_text)
    blocks = segment_sections(lines)
    record.section_titles = list(blocks.titles)

    record.contact_info = extract_contact_info(blocks.header_lines)
    record.other_sections.extend(contact_leftovers(blocks.header_lines, record.contact_info))
    record.other_sections.extend(blocks.other)

    summary = _non_blank(blocks.summary)
    record.personal_statement = "\n".join(summary) if summary else None

    for block in blocks.work_experience:
        result = _guarded(extract_work_experience, block, record, "Work experience")
        if result is None:
            continue
        record.work_experience.extend(result.experiences)
        record.other_sections.extend(result.leftovers)
        if not result.experiences:
            record.warnings.append(
                f"Work experience section with {len(_non_blank(block))} line(s) produced no entries"
            )
        elif result.degraded:
            record.warnings.append("Work experience parsed by paragraph; entry boundaries may be approximate")

    for block in blocks.education:
        result = _guarded(extract_education, block, record, "Education")
        if result is None:
            continue
        record.education.extend(result.entries)
        record.other_sections.extend(result.leftovers)
        if not result.entries:
            record.warnings.append(
                f"Education section with {len(_non_blank(block))} line(s) produced no entries"
            )

    if blocks.skills:
        skills = _guarded(extract_skills, blocks.skills, record, "Skills")
        record.skills = skills or ""
        record.skill_list = split_skills(record.skills)

    logger.debug(
        f"Parsed resume: {len(record.work_experience)} experience(s), "
        f"{len(record.education)} education entr(ies), {len(record.other_sections)} unclassified line(s)"
    )
    return record
