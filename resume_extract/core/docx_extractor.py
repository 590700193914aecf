from io import BytesIO
from typing import List

from docx import Document


def extract_docx_lines(docx_bytes: bytes) -> List[str]:
    """
    Extract paragraph text from a DOCX in document order.

    Empty paragraphs are kept as blank lines so paragraph breaks survive for
    the experience fallback. Soft line breaks inside a paragraph become
    separate lines. Table cells are appended after the body paragraphs.
    """
    doc = Document(BytesIO(docx_bytes))
    out: List[str] = []
    for p in doc.paragraphs:
        out.extend((p.text or "").splitlines() or [""])
    for table in doc.tables:
        for row in table.rows:
            for cell in row.cells:
                for p in cell.paragraphs:
                    t = (p.text or "").strip()
                    if t:
                        out.append(t)
    return out
