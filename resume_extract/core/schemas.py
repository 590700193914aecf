from pydantic import BaseModel, Field
from typing import List, Optional


class EmptyInputError(ValueError):
    """Raised when the pasted resume text is empty or whitespace only."""


class ContactInfo(BaseModel):
    name: Optional[str] = None  # First non-empty line, verbatim
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None  # "City, ST" or "City, Country"
    website: Optional[str] = None


class Experience(BaseModel):
    """Work experience entry. Any structural field may be empty."""
    company: str = ""
    title: str = ""
    date: str = ""  # Verbatim date substring, e.g. "2020 - Present"
    location: str = ""
    bullets: List[str] = Field(default_factory=list)  # Source order, never sorted or deduplicated


class EducationEntry(BaseModel):
    """Education entry. degree and certificate never come from the same source line."""
    school: str = ""  # University, College, School, Institute name
    degree: str = ""  # Bachelor of Science, B.S., MBA, etc.
    date: str = ""  # "2016 - 2020" or a single year
    gpa: str = ""
    certificate: str = ""  # Certificate, Bootcamp, Immersive, etc.
    issuer: str = ""  # Organisation named beside a standalone certificate
    location: str = ""  # City, State line under a school
    details: List[str] = Field(default_factory=list)  # Honors, coursework, minors


class ResumeRecord(BaseModel):
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    personal_statement: Optional[str] = None
    work_experience: List[Experience] = Field(default_factory=list)
    skills: str = ""
    skill_list: List[str] = Field(default_factory=list)  # skills split into single items, labels dropped
    education: List[EducationEntry] = Field(default_factory=list)
    other_sections: List[str] = Field(
        default_factory=list,
        description="Lines no heuristic could attribute, preserved for manual correction",
    )
    success: bool = True
    error: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)
    section_titles: List[str] = Field(default_factory=list)  # Header lines in encounter order
    raw_text: str = ""


class TextParseRequest(BaseModel):
    text: str = Field(..., description="Pasted resume text")
