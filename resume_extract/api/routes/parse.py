from fastapi import APIRouter, UploadFile, File, HTTPException

from resume_extract.core.schemas import ResumeRecord, TextParseRequest
from resume_extract.core.text_parser import parse, parse_lines
from resume_extract.core.docx_extractor import extract_docx_lines
from resume_extract.core.pdf_extractor import extract_pdf_lines

router = APIRouter(tags=["parse"])

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

EXAMPLE_RECORD = {
    "contact_info": {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "555-123-4567",
        "location": "Austin, TX",
        "website": None,
    },
    "personal_statement": "Backend engineer focused on data platforms.",
    "work_experience": [
        {
            "company": "Acme Corp",
            "title": "Senior Engineer",
            "date": "2020 - Present",
            "location": "",
            "bullets": ["Built X", "Led Y"],
        }
    ],
    "skills": "Languages: Python, Go",
    "education": [
        {
            "school": "MIT",
            "degree": "B.S. Computer Science",
            "date": "2016 - 2020",
            "gpa": "",
            "certificate": "",
            "issuer": "",
            "location": "",
            "details": [],
        }
    ],
    "other_sections": [],
    "success": True,
    "error": None,
    "warnings": [],
    "raw_text": "Jane Doe\n...",
}


@router.post(
    "/parse",
    response_model=ResumeRecord,
    summary="Parse Resume File",
    description="Extract a structured resume record from an uploaded file (TXT, MD, DOCX, or PDF). Unattributed lines are returned in other_sections.",
    responses={
        200: {
            "description": "Parsed resume (success=false when the text is empty)",
            "content": {"application/json": {"example": EXAMPLE_RECORD}},
        },
        400: {"description": "Empty file uploaded"},
        415: {"description": "Unsupported file format"},
        422: {"description": "File has no extractable text"}
    }
)
async def parse_resume(
    file: UploadFile = File(..., description="Resume file (TXT, MD, DOCX, or PDF format)")
):
    """
    Parse a resume file into contact info, summary, experience, education and skills.

    **Supported formats:**
    - TXT / MD (.txt, .md)
    - DOCX (.docx)
    - PDF (.pdf) - Text-layer extraction only, OCR not supported
    """
    raw = await file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty file uploaded.")

    filename = (file.filename or "").lower()
    content_type = (file.content_type or "").lower()

    # DOCX
    if filename.endswith(".docx") or content_type == DOCX_CONTENT_TYPE:
        return parse_lines(extract_docx_lines(raw))

    # PDF
    if filename.endswith(".pdf") or content_type == "application/pdf":
        lines = extract_pdf_lines(raw)
        if not lines:
            raise HTTPException(
                status_code=422,
                detail="PDF appears to have no extractable text. OCR is not supported."
            )
        return parse_lines(lines)

    # Text
    if content_type in {"text/plain", "text/markdown"} or filename.endswith((".txt", ".md")):
        return parse(raw.decode("utf-8", errors="replace"))

    raise HTTPException(status_code=415, detail=f"Unsupported content type: {file.content_type}")


@router.post(
    "/parse/text",
    response_model=ResumeRecord,
    summary="Parse Pasted Resume Text",
    description="Extract a structured resume record from pasted plain text.",
)
def parse_resume_text(request: TextParseRequest):
    """Parse pasted text. Blank text returns success=false rather than an HTTP error."""
    return parse(request.text)
